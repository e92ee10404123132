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
Coupled Cluster
===============

Simple usage::

    >>> from pyrccsd import cc
    >>> eris = cc.make_eris(fock, eri, nocc, e_hf=e_hf)
    >>> cc.RCCSD(eris).run()

:func:`cc.RCCSD` returns an instance of RCCSD class.  Following are parameters
to control the CCSD calculation.

    verbose : int
        Print level.  Default value equals to :data:`__config__.VERBOSE`
    max_cycle : int
        max number of iterations.  Default is 50.
    conv_tol : float
        converge threshold of the correlation energy.  Default is 1e-10.
    conv_tol_rms : float
        converge threshold of the amplitude change.  Default is 1e-7.
    preconv_t1 : bool
        Pre-converge T1 with fixed T2.  Default is False.
    iterative_damping : float
        Damping ratio in [0, 1).  Default is 0.
    diis : bool
        Use DIIS.  Default is True.
    diis_space : int
        DIIS space size.  Default is 6.
    preconv_diis_space : int
        DIIS space size of the T1 pre-convergence.  Default is 8.

Saved results

    converged : bool
        Whether the CCSD iteration converged
    e_tot : float
        Total CCSD energy (reference + correlation)
    t1, t2 :
        t1[i,a], t2[i,j,a,b]  (i,j in occ, a,b in virt)
    history : list of dict
        Per-cycle diagnostics
'''

from pyrccsd.cc import rccsd_amps
from pyrccsd.cc import addons
from pyrccsd.cc import rccsd
from pyrccsd.cc.rccsd import make_eris, make_resolvent

def RCCSD(eris, **kwargs):
    '''RCCSD solver for the integrals held by eris (see :func:`make_eris`).
    Keyword arguments are set as attributes of the solver.'''
    return rccsd.RCCSD(eris).set(**kwargs)
RCCSD.__doc__ = rccsd.RCCSD.__doc__

CCSD = RCCSD
