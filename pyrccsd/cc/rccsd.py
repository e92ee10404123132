#!/usr/bin/env python
# Copyright 2014-2023 The PySCF Developers. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

'''
Restricted (closed-shell) CCSD for real integrals.

The MO integrals are given in physicist's notation, oovv[i,j,a,b] = <ij|ab>,
and are kept in memory as dense blocks.  The amplitude equations are
solved by Jacobi iterations with DIIS acceleration and optional damping.
A singles-only phase can be run before the coupled iterations to
pre-converge T1 with T2 held fixed.
'''

import sys
import numpy

from pyscf import lib
from pyscf.lib import logger
from pyrccsd.lib.diis import DIIS, NoDIIS
from pyrccsd.lib.numpy_helper import einsum
from pyrccsd.cc import rccsd_amps
from pyrccsd.cc import addons
from pyscf import __config__

GAP_TOL = getattr(__config__, 'pyrccsd_cc_rccsd_gap_tol', 1e-5)


# t1: ia
# t2: ijab
def kernel(mycc, eris=None, t1=None, t2=None, guess=None, max_cycle=50,
           tol=1e-10, tol_rms=1e-7, preconv_t1=False, damping=0.,
           verbose=None, callback=None):
    '''Solve the RCCSD amplitude equations.

    Returns:
        converged, e_corr, t1, t2
    '''
    log = logger.new_logger(mycc, verbose)
    if eris is None:
        eris = mycc.eris
    cput0 = (logger.process_clock(), logger.perf_counter())
    eia, eijab = make_resolvent(eris.mo_energy_o, eris.mo_energy_v, log)
    if t1 is None and t2 is None:
        t1, t2 = mycc.get_init_guess(eris, guess, (eia, eijab))
    elif t2 is None:
        t2 = mycc.get_init_guess(eris, guess, (eia, eijab))[1]
    elif t1 is None:
        t1 = mycc.get_init_guess(eris, guess, (eia, eijab))[0]
    _check_amplitudes(t1, t2, eris.nocc, eris.nvir)
    # the solver owns its amplitudes; the caller's arrays are not modified
    t1 = numpy.array(t1, dtype=numpy.float64)
    t2 = numpy.array(t2, dtype=numpy.float64)

    name = mycc.__class__.__name__
    e_corr = mycc.energy(t1, t2, eris)
    log.info('Init E_corr(%s) = %.15g', name, e_corr)

    mycc.history = []
    mycc.preconv_converged = None
    if preconv_t1:
        mycc.preconv_converged, e_corr, t1, t2 = \
                preconverge_t1(mycc, eris, t1, t2, e_corr, eia, eijab,
                               max_cycle, tol, tol_rms, damping, log, callback)

    adiis1 = mycc.new_diis(mycc.diis_space, mycc.diis_space, '.t1')
    adiis2 = mycc.new_diis(mycc.diis_space, mycc.diis_space, '.t2')
    if preconv_t1:
        log.info('Including T2 update')

    t1new = numpy.empty_like(t1)
    t2new = numpy.empty_like(t2)
    converged = False
    mycc.cycles = 0
    cput1 = (logger.process_clock(), logger.perf_counter())
    for istep in range(max_cycle):
        wall0 = logger.perf_counter()
        mycc.update_amps(t1, t2, eris, out=(t1new, t2new))
        t1new /= eia
        t2new /= eijab

        # error vectors and rms are taken before extrapolation and damping
        rms = max(_rms(t1new, t1), _rms(t2new, t2))
        t2new[:] = adiis2.update(t2new, t2new - t2)
        t1new[:] = adiis1.update(t1new, t1new - t1)
        diis_failed = adiis1.last_failed or adiis2.last_failed

        _damp(t1new, t1, damping)
        _damp(t2new, t2, damping)
        t1, t1new = t1new, t1
        t2, t2new = t2new, t2

        eold, e_corr = e_corr, mycc.energy(t1, t2, eris)
        de = e_corr - eold
        mycc.cycles = istep + 1
        wall = logger.perf_counter() - wall0
        _record(mycc, 'ccsd', istep+1, e_corr, de, rms, wall, diis_failed)
        log.info('cycle = %d  E_corr(%s) = %.15g  dE = %.9g  rms = %.6g',
                 istep+1, name, e_corr, de, rms)
        if diis_failed:
            log.info('    DIIS extrapolation skipped in cycle %d', istep+1)
        cput1 = log.timer(f'{name} iter', *cput1)
        if callback is not None:
            callback(locals())
        if abs(de) <= tol and rms <= tol_rms:
            converged = True
            break

    if not converged:
        log.warn('%s equations did not converge in %d iterations',
                 name, max_cycle)
    adiis1.reset()
    adiis2.reset()
    log.timer(name, *cput0)
    return converged, e_corr, t1, t2

def preconverge_t1(mycc, eris, t1, t2, e_corr, eia, eijab, max_cycle=50,
                   tol=1e-10, tol_rms=1e-7, damping=0., log=None,
                   callback=None):
    '''Singles-only iterations with the doubles held fixed.

    One full (T1 and T2) step is taken first.  The doubles from that step
    are then kept fixed while T1 is iterated with its own DIIS history.

    Returns:
        converged, e_corr, t1, t2
    '''
    if log is None:
        log = logger.new_logger(mycc)
    name = mycc.__class__.__name__
    cput0 = cput1 = (logger.process_clock(), logger.perf_counter())
    adiis = mycc.new_diis(mycc.preconv_diis_space, 2)

    log.info('Preconverging T1 amplitudes. Taking one T2 step')
    wall0 = logger.perf_counter()
    t1new, t2new = mycc.update_amps(t1, t2, eris)
    t1new /= eia
    t2new /= eijab
    rms = max(_rms(t1new, t1), _rms(t2new, t2))
    adiis.push(t1new, t1new - t1)
    _damp(t1new, t1, damping)
    _damp(t2new, t2, damping)
    t1, t1new = t1new, t1
    t2 = t2new
    eold, e_corr = e_corr, mycc.energy(t1, t2, eris)
    de = e_corr - eold
    wall = logger.perf_counter() - wall0
    _record(mycc, 'preconv', 0, e_corr, de, rms, wall, False)
    log.info('preconv cycle = pre  E_corr(%s) = %.15g  dE = %.9g  rms = %.6g',
             name, e_corr, de, rms)
    cput1 = log.timer('T1 preconv iter', *cput1)

    converged = abs(de) <= tol and rms <= tol_rms
    istep = 0
    while not converged:
        if istep >= max_cycle:
            log.warn('T1 pre-convergence did not converge in %d iterations',
                     max_cycle)
            break
        wall0 = logger.perf_counter()
        mycc.update_t1(t1, t2, eris, out=t1new)
        t1new /= eia
        rms = _rms(t1new, t1)
        t1new[:] = adiis.update(t1new, t1new - t1)
        diis_failed = adiis.last_failed
        _damp(t1new, t1, damping)
        t1, t1new = t1new, t1

        eold, e_corr = e_corr, mycc.energy(t1, t2, eris)
        de = e_corr - eold
        istep += 1
        wall = logger.perf_counter() - wall0
        _record(mycc, 'preconv', istep, e_corr, de, rms, wall, diis_failed)
        log.info('preconv cycle = %d  E_corr(%s) = %.15g  dE = %.9g  rms = %.6g',
                 istep, name, e_corr, de, rms)
        cput1 = log.timer('T1 preconv iter', *cput1)
        if callback is not None:
            callback(locals())
        converged = abs(de) <= tol and rms <= tol_rms

    adiis.reset()
    log.timer('T1 pre-convergence', *cput0)
    return converged, e_corr, t1, t2

def _rms(new, old):
    # norm of the change divided by the number of elements
    return numpy.sqrt(numpy.sum((new - old)**2)) / new.size

def _damp(new, old, damping):
    '''new = (1-damping) * new + damping * old, in place'''
    if damping != 0:
        new *= 1 - damping
        new += damping * old
    return new

def _record(mycc, phase, cycle, e_corr, de, rms, wall, diis_failed):
    mycc.history.append({'phase': phase, 'cycle': cycle, 'e_corr': e_corr,
                         'de': de, 'rms': rms, 'wall': wall,
                         'diis_failed': bool(diis_failed)})

def _check_amplitudes(t1, t2, nocc, nvir):
    if numpy.shape(t1) != (nocc, nvir):
        raise ValueError('t1 shape %s does not match (nocc, nvir) = %s'
                         % (numpy.shape(t1), (nocc, nvir)))
    if numpy.shape(t2) != (nocc, nocc, nvir, nvir):
        raise ValueError('t2 shape %s does not match (nocc, nocc, nvir, nvir) = %s'
                         % (numpy.shape(t2), (nocc, nocc, nvir, nvir)))


def make_resolvent(mo_energy_o, mo_energy_v, verbose=logger.WARN):
    '''Energy denominators

        eia[i,a] = e_i - e_a
        eijab[i,j,a,b] = e_i + e_j - e_a - e_b

    A warning is issued when the smallest |eia| or |eijab| is below GAP_TOL.
    With orbital energies out of aufbau order eijab can vanish while every
    eia is large.  A denominator which is exactly zero raises ValueError.
    '''
    if isinstance(verbose, logger.Logger):
        log = verbose
    else:
        log = logger.Logger(sys.stdout, verbose)
    mo_energy_o = numpy.asarray(mo_energy_o, dtype=numpy.float64)
    mo_energy_v = numpy.asarray(mo_energy_v, dtype=numpy.float64)
    eia = lib.direct_sum('i-a->ia', mo_energy_o, mo_energy_v)
    eijab = lib.direct_sum('ia+jb->ijab', eia, eia)
    if eia.size == 0:
        return eia, eijab

    gap1 = abs(eia).min()
    gap2 = abs(eijab).min()
    if min(gap1, gap2) < GAP_TOL:
        log.warn('Energy denominator too small for CCSD: min|eia| = %s, '
                 'min|eijab| = %s.\n'
                 'The amplitude iterations may be difficult to converge.',
                 gap1, gap2)
    if numpy.any(eia == 0) or numpy.any(eijab == 0):
        raise ValueError('Zero energy denominator found. Degenerate occupied '
                         'and virtual orbital energies are not supported.')
    return eia, eijab


def energy(t1, t2, fov, oovv):
    '''RCCSD correlation energy

        E = 2 f[k,c] t1[k,c] + B[l,c,k,d] <kl|cd> + 2 t1[l,c] t1[k,d] <lk|cd>

    with B[l,c,k,d] = -t1[l,c] t1[k,d] - t2[l,k,c,d] + 2 t2[k,l,c,d]
    '''
    e = 2*numpy.einsum('kc,kc', fov, t1)
    b  = -numpy.einsum('lc,kd->lckd', t1, t1)
    b -=   numpy.einsum('lkcd->lckd', t2)
    b += 2*numpy.einsum('klcd->lckd', t2)
    e += numpy.einsum('lckd,klcd', b, oovv)
    e += 2*einsum('lc,kd,lkcd->', t1, t1, oovv)
    return float(e)


def init_amps(mycc, eris=None, guess=None, resolvent=None):
    '''MP2 amplitudes as the initial guess.

    Kwargs:
        guess : (t1, t2)
            Amplitudes of a smaller calculation.  They replace the leading
            occupied/virtual sub-block of the MP2 amplitudes.
        resolvent : (eia, eijab)
            Energy denominators from :func:`make_resolvent`.  They are
            generated from eris if not given.

    Returns:
        e_corr of the guess, t1, t2
    '''
    time0 = logger.process_clock(), logger.perf_counter()
    if eris is None:
        eris = mycc.eris
    if resolvent is None:
        resolvent = make_resolvent(eris.mo_energy_o, eris.mo_energy_v,
                                   logger.new_logger(mycc))
    eia, eijab = resolvent
    t1 = eris.fov / eia
    t2 = eris.oovv / eijab
    if guess is not None:
        t1, t2 = addons.embed_amplitudes(t1, t2, guess[0], guess[1])
        logger.info(mycc, 'Initial guess embedded from amplitudes of shape %s',
                    numpy.shape(guess[0]))
    mycc.emp2 = energy(t1, t2, eris.fov, eris.oovv)
    logger.info(mycc, 'Init t2, MP2 energy = %.15g  E_corr(MP2) %.15g',
                eris.e_hf + mycc.emp2, mycc.emp2)
    logger.timer(mycc, 'init mp2', *time0)
    return mycc.emp2, t1, t2


class RCCSD(lib.StreamObject):
    '''restricted CCSD

    Attributes:
        verbose : int
            Print level.  Default value equals to :data:`__config__.VERBOSE`
        max_cycle : int
            max number of iterations, for each of the T1 pre-convergence
            and the coupled phase.  Default is 50.
        conv_tol : float
            converge threshold of the correlation energy.  Default is 1e-10.
        conv_tol_rms : float
            converge threshold of the amplitude change.  Default is 1e-7.
        preconv_t1 : bool
            Converge T1 with T2 held fixed before the coupled iterations.
            Default is False.
        iterative_damping : float
            Damping ratio in [0, 1).  The new amplitudes are mixed as
            (1-iterative_damping) * new + iterative_damping * old.
            Default is 0.
        diis : bool
            Whether to use DIIS.  Default is True.
        diis_space : int
            DIIS space size of the coupled iterations.  Default is 6.
        preconv_diis_space : int
            DIIS space size of the T1 pre-convergence.  Default is 8.
        diis_file : str
            Prefix of the HDF5 files which keep the DIIS history of the
            coupled iterations.
        callback : function(envs_dict) => None
            callback function takes one dict as the argument which is
            generated by the builtin function :func:`locals`, so that the
            callback function can access all local variables in the current
            environment.

    Saved results:

        converged : bool
            Whether the CCSD iteration converged
        preconv_converged : bool or None
            Whether the T1 pre-convergence converged (None if not run)
        e_corr : float
            CCSD correlation correction
        e_tot : float
            Total CCSD energy (reference + correlation)
        emp2 : float
            Correlation energy of the initial guess
        t1, t2 :
            T amplitudes t1[i,a], t2[i,j,a,b]  (i,j in occ, a,b in virt)
        cycles : int
            The number of iteration cycles performed in the coupled phase
        history : list of dict
            One record per cycle with keys phase, cycle, e_corr, de, rms,
            wall, diis_failed
    '''

    max_cycle = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_max_cycle', 50)
    conv_tol = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_conv_tol', 1e-10)
    conv_tol_rms = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_conv_tol_rms', 1e-7)
    preconv_t1 = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_preconv_t1', False)
    iterative_damping = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_iterative_damping', 0.)

    diis = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_diis', True)
    diis_space = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_diis_space', 6)
    preconv_diis_space = getattr(__config__, 'pyrccsd_cc_rccsd_RCCSD_preconv_diis_space', 8)
    diis_file = None
    callback = None

    _keys = {
        'max_cycle', 'conv_tol', 'conv_tol_rms', 'preconv_t1',
        'iterative_damping', 'diis', 'diis_space', 'preconv_diis_space',
        'diis_file', 'callback', 'verbose', 'stdout', 'max_memory',
        'eris', 'e_hf', 'converged', 'preconv_converged', 'cycles', 'emp2',
        'e_corr', 't1', 't2', 'history', 'chkfile',
    }

    def __init__(self, eris):
        self.eris = eris
        self.verbose = getattr(__config__, 'VERBOSE', logger.NOTE)
        self.stdout = sys.stdout
        self.max_memory = lib.param.MAX_MEMORY

##################################################
# don't modify the following attributes, they are not input options
        self.e_hf = eris.e_hf
        self.converged = False
        self.preconv_converged = None
        self.cycles = None
        self.emp2 = None
        self.e_corr = None
        self.t1 = None
        self.t2 = None
        self.history = []
        self.chkfile = None

    @property
    def ecc(self):
        return self.e_corr

    @property
    def e_tot(self):
        return self.e_hf + self.e_corr

    @property
    def nocc(self):
        return self.eris.nocc

    @property
    def nvir(self):
        return self.eris.nvir

    def dump_flags(self, verbose=None):
        log = logger.new_logger(self, verbose)
        log.info('')
        log.info('******** %s ********', self.__class__)
        log.info('CCSD nocc = %s, nvir = %s', self.nocc, self.nvir)
        if self.eris.frozen_occ or self.eris.frozen_vir:
            log.info('frozen occupied %d, frozen virtual %d',
                     self.eris.frozen_occ, self.eris.frozen_vir)
        log.info('max_cycle = %d', self.max_cycle)
        log.info('conv_tol = %g', self.conv_tol)
        log.info('conv_tol_rms = %g', self.conv_tol_rms)
        log.info('preconv_t1 = %s', self.preconv_t1)
        log.info('iterative_damping = %g', self.iterative_damping)
        log.info('diis = %s', self.diis)
        log.info('diis_space = %d', self.diis_space)
        log.info('preconv_diis_space = %d', self.preconv_diis_space)
        if self.diis_file:
            log.info('diis_file = %s', self.diis_file)
        log.info('max_memory %d MB (current use %d MB)',
                 self.max_memory, lib.current_memory()[0])
        return self

    def check_options(self):
        '''Raise ValueError for inconsistent input options'''
        if not 0 <= self.iterative_damping < 1:
            raise ValueError('iterative_damping must be in [0, 1), got %s'
                             % self.iterative_damping)
        if self.max_cycle < 0:
            raise ValueError('max_cycle must not be negative, got %s'
                             % self.max_cycle)
        if self.diis and (self.diis_space < 2 or self.preconv_diis_space < 2):
            raise ValueError('DIIS space must be at least 2, got %s and %s'
                             % (self.diis_space, self.preconv_diis_space))
        self.eris.check_shapes()
        return self

    def new_diis(self, space, min_space, suffix=None):
        '''DIIS accelerator for one amplitude tensor, or a no-op object when
        DIIS is switched off'''
        if not self.diis:
            return NoDIIS()
        filename = None
        if self.diis_file and suffix is not None:
            filename = self.diis_file + suffix
        adiis = DIIS(self, filename)
        adiis.space = space
        adiis.min_space = min_space
        return adiis

    def get_init_guess(self, eris=None, guess=None, resolvent=None):
        return self.init_amps(eris, guess, resolvent)[1:]

    init_amps = init_amps

    def energy(self, t1=None, t2=None, eris=None):
        '''RCCSD correlation energy'''
        if t1 is None: t1 = self.t1
        if t2 is None: t2 = self.t2
        if eris is None: eris = self.eris
        return energy(t1, t2, eris.fov, eris.oovv)

    def update_amps(self, t1, t2, eris=None, out=None):
        if eris is None: eris = self.eris
        return rccsd_amps.update_amps(t1, t2, eris, out)

    def update_t1(self, t1, t2, eris=None, out=None):
        if eris is None: eris = self.eris
        return rccsd_amps.update_t1(t1, t2, eris, out)

    def kernel(self, t1=None, t2=None, guess=None):
        return self.ccsd(t1, t2, guess)
    def ccsd(self, t1=None, t2=None, guess=None):
        '''Ground-state CCSD.

        Kwargs:
            t1, t2 : ndarray
                Starting amplitudes of the full size, e.g. from a restart.
            guess : (t1, t2)
                Amplitudes of a smaller calculation which are embedded into
                the MP2 guess.
        '''
        if self.verbose >= logger.WARN:
            self.check_sanity()
        self.check_options()
        self.dump_flags()

        self.converged, self.e_corr, self.t1, self.t2 = \
                kernel(self, self.eris, t1, t2, guess,
                       max_cycle=self.max_cycle, tol=self.conv_tol,
                       tol_rms=self.conv_tol_rms, preconv_t1=self.preconv_t1,
                       damping=self.iterative_damping, verbose=self.verbose,
                       callback=self.callback)
        self._finalize()
        return self.e_corr, self.t1, self.t2

    def _finalize(self):
        '''Hook for dumping results and clearing up the object.'''
        if self.converged:
            logger.info(self, '%s converged', self.__class__.__name__)
        else:
            logger.note(self, '%s not converged', self.__class__.__name__)
        logger.note(self, 'E(%s) = %.16g  E_corr = %.16g',
                    self.__class__.__name__, self.e_tot, self.e_corr)
        self.dump_chk()
        return self

    def dump_chk(self, t1_t2=None):
        if not self.chkfile:
            return self
        if t1_t2 is None: t1_t2 = self.t1, self.t2
        t1, t2 = t1_t2
        cc_chk = {'e_corr': self.e_corr,
                  'converged': self.converged,
                  't1': t1,
                  't2': t2}
        lib.chkfile.save(self.chkfile, 'rccsd', cc_chk)
        return self

    def restore_from_chk(self, chkfile=None):
        '''Read t1, t2 and e_corr from a chkfile written by :func:`dump_chk`.
        The amplitudes can be passed to :func:`kernel` to restart.'''
        if chkfile is None: chkfile = self.chkfile
        cc_chk = lib.chkfile.load(chkfile, 'rccsd')
        if cc_chk is None:
            raise KeyError('No RCCSD results found in %s' % chkfile)
        _check_amplitudes(cc_chk['t1'], cc_chk['t2'], self.nocc, self.nvir)
        self.t1 = cc_chk['t1']
        self.t2 = cc_chk['t2']
        self.e_corr = float(cc_chk['e_corr'])
        return self

    def get_t1_diagnostic(self, t1=None):
        if t1 is None: t1 = self.t1
        return addons.get_t1_diagnostic(t1)

    def get_d1_diagnostic(self, t1=None):
        if t1 is None: t1 = self.t1
        return addons.get_d1_diagnostic(t1)

    def get_d2_diagnostic(self, t2=None):
        if t2 is None: t2 = self.t2
        return addons.get_d2_diagnostic(t2)

CCSD = RCCSD


class _PhysicistsERIs:
    '''<pq|rs>

    MO integrals and Fock blocks of the correlated orbitals.  The blocks are
    read-only float64 arrays.

    Attributes:
        oo, vv, ov : Fock blocks, including the diagonal
        foo, fvv : Fock blocks without the diagonal
        fov : occupied-virtual Fock block
        oooo, ooov, oovv, ovov, ovvv, vvvv : two-electron integrals,
            e.g. oovv[i,j,a,b] = <ij|ab>
        mo_energy_o, mo_energy_v : diagonal of oo and vv
        e_hf : reference energy
    '''
    _blocks = ('oo', 'vv', 'ov', 'oooo', 'ooov', 'oovv', 'ovov', 'ovvv', 'vvvv')

    def __init__(self):
        self.nocc = None
        self.nvir = None
        self.e_hf = 0.
        self.frozen_occ = 0
        self.frozen_vir = 0

        self.oo = None
        self.vv = None
        self.ov = None
        self.oooo = None
        self.ooov = None
        self.oovv = None
        self.ovov = None
        self.ovvv = None
        self.vvvv = None

        self.foo = None
        self.fvv = None
        self.fov = None
        self.mo_energy_o = None
        self.mo_energy_v = None

    @classmethod
    def from_blocks(cls, oo, vv, ov, oooo, ooov, oovv, ovov, ovvv, vvvv,
                    e_hf=0.):
        '''Build the integral store from pre-sliced blocks'''
        eris = cls()
        eris.e_hf = e_hf
        for key, val in zip(cls._blocks,
                            (oo, vv, ov, oooo, ooov, oovv, ovov, ovvv, vvvv)):
            setattr(eris, key, val)
        return eris._common_init_()

    def _common_init_(self):
        for key in self._blocks:
            val = numpy.array(getattr(self, key), dtype=numpy.float64, order='C')
            setattr(self, key, val)
        self.nocc, self.nvir = self.ov.shape
        self.check_shapes()

        # Diagonal Fock elements enter the amplitude equations only through
        # the energy denominators
        self.mo_energy_o = self.oo.diagonal().copy()
        self.mo_energy_v = self.vv.diagonal().copy()
        self.foo = self.oo - numpy.diag(self.mo_energy_o)
        self.fvv = self.vv - numpy.diag(self.mo_energy_v)
        self.fov = self.ov.copy()

        for key in self._blocks + ('foo', 'fvv', 'fov', 'mo_energy_o', 'mo_energy_v'):
            getattr(self, key).flags.writeable = False
        return self

    def check_shapes(self):
        '''Raise ValueError if any block is inconsistent with (nocc, nvir)'''
        o, v = self.nocc, self.nvir
        shapes = {'oo': (o,o), 'vv': (v,v), 'ov': (o,v),
                  'oooo': (o,o,o,o), 'ooov': (o,o,o,v), 'oovv': (o,o,v,v),
                  'ovov': (o,v,o,v), 'ovvv': (o,v,v,v), 'vvvv': (v,v,v,v)}
        for key in self._blocks:
            val = getattr(self, key)
            if val is None:
                raise ValueError('Integral block %s is not initialized' % key)
            if val.shape != shapes[key]:
                raise ValueError('Integral block %s has shape %s, expected %s'
                                 % (key, val.shape, shapes[key]))
        return self

def make_eris(fock, eri, nocc, e_hf=0., frozen_occ=0, frozen_vir=0):
    '''Slice the MO Fock matrix and the MO two-electron integrals into the
    occupied/virtual blocks.

    Args:
        fock : (nmo,nmo) ndarray
            Fock matrix in the MO basis
        eri : (nmo,nmo,nmo,nmo) ndarray
            Two-electron integrals in physicist's notation, eri[p,q,r,s] =
            <pq|rs>.  Integrals in chemist's notation (pr|qs) can be
            converted with eri.transpose(0,2,1,3).
        nocc : int
            Number of doubly occupied orbitals, frozen ones included

    Kwargs:
        e_hf : float
            Reference energy
        frozen_occ : int
            Number of the lowest occupied orbitals to drop
        frozen_vir : int
            Number of the highest virtual orbitals to drop
    '''
    fock = numpy.asarray(fock)
    eri = numpy.asarray(eri)
    nmo = fock.shape[0]
    if fock.shape != (nmo, nmo):
        raise ValueError('Fock matrix must be square, got shape %s' % (fock.shape,))
    if eri.shape != (nmo,)*4:
        raise ValueError('eri shape %s does not match nmo = %d' % (eri.shape, nmo))
    if not 0 <= frozen_occ < nocc <= nmo:
        raise ValueError('Invalid nocc = %s or frozen_occ = %s for nmo = %d'
                         % (nocc, frozen_occ, nmo))
    if not 0 <= frozen_vir < nmo - nocc:
        raise ValueError('Invalid frozen_vir = %s for nvir = %d'
                         % (frozen_vir, nmo - nocc))

    o = slice(frozen_occ, nocc)
    v = slice(nocc, nmo - frozen_vir)
    eris = _PhysicistsERIs.from_blocks(
        fock[o,o], fock[v,v], fock[o,v],
        eri[o,o,o,o], eri[o,o,o,v], eri[o,o,v,v],
        eri[o,v,o,v], eri[o,v,v,v], eri[v,v,v,v], e_hf=e_hf)
    eris.frozen_occ = frozen_occ
    eris.frozen_vir = frozen_vir
    return eris
