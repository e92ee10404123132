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

"""
DIIS
"""

import numpy
import scipy.linalg
from pyscf import lib
from pyscf.lib import logger
from pyscf import __config__

INCORE_SIZE = getattr(__config__, 'pyrccsd_lib_diis_incore_size', 10000000)  # 80 MB
BLOCK_SIZE  = getattr(__config__, 'pyrccsd_lib_diis_block_size', 20000000)  # ~ 160/320 MB
LINDEP = getattr(__config__, 'pyrccsd_lib_diis_lindep', 1e-14)

# PCCP, 4, 11 (2002); DOI:10.1039/B108658H

class DIIS:
    '''Direct inversion in the iterative subspace method.

    The history is a bounded FIFO of (vector, error vector) pairs.  Once
    :attr:`space` pairs are stored, pushing a new pair evicts the oldest one.

    Attributes:
        space : int
            DIIS subspace size. The maximum number of the vectors to be stored.
        min_space : int
            The minimal size of subspace before :func:`update` extrapolates.
        last_failed : bool
            Whether the last extrapolation fell back to the latest vector
            because the DIIS equations could not be solved.

    Functions:
        push(x, xerr) :
            Store the vector and its error vector.
        extrapolate() :
            Return the linear combination of the stored vectors whose error
            vectors combine to the smallest norm, under the constraint that
            the coefficients sum to 1.
        update(x, xerr) :
            push, then extrapolate if at least min_space vectors are stored.

    Examples:

    >>> adiis = diis.DIIS()
    >>> adiis.space = 8
    >>> for i in range(cycles):
    ...     t1new = update_t1(t1) / eia
    ...     t1new = adiis.update(t1new, t1new - t1)
    '''
    def __init__(self, dev=None, filename=None,
                 incore=getattr(__config__, 'pyrccsd_lib_diis_DIIS_incore', False)):
        if dev is not None:
            self.verbose = dev.verbose
            self.stdout = dev.stdout
        else:
            self.verbose = logger.INFO
            self.stdout = lib.StreamObject.stdout
        self.space = 6
        self.min_space = 1
        self.incore = incore

##################################################
# don't modify the following private variables, they are not input options
        self.filename = filename
        self.last_failed = False
        self._diisfile = None
        self._buffer = {}
        self._bookkeep = [] # slots of the stored vectors, oldest first
        self._H = None
        self._size = None

    def _store(self, key, value):
        incore = value.size < INCORE_SIZE or self.incore
        if incore:
            self._buffer[key] = value

        # save the vectors if filename is given, this file can be used to
        # restore the DIIS state
        if (not incore) or isinstance(self.filename, str):
            if self._diisfile is None:
                self._diisfile = lib.H5TmpFile(self.filename, 'w')
            if key in self._diisfile:
                if self._diisfile[key].shape == value.shape:
                    self._diisfile[key][:] = value
                else:
                    del self._diisfile[key]
                    self._diisfile[key] = value
            else:
                self._diisfile[key] = value
# to avoid "Unable to find a valid file signature" error when reload the hdf5
# file from a crashed calculation
            self._diisfile.flush()

    def _load(self, key):
        if key in self._buffer:
            return self._buffer[key]
        else:
            return self._diisfile[key]

    def push(self, x, xerr):
        '''Append the pair (x, xerr) to the history.  The oldest pair is
        evicted when the history is full.'''
        x = numpy.asarray(x).ravel()
        xerr = numpy.asarray(xerr).ravel()
        if x.size != xerr.size:
            raise ValueError('DIIS vector size %d and error vector size %d differ'
                             % (x.size, xerr.size))
        if self._size is None:
            self._size = x.size
        elif x.size != self._size:
            raise ValueError('DIIS vector size %d differs from stored size %d'
                             % (x.size, self._size))
        if self.space < 1:
            raise ValueError('DIIS space must be positive, got %s' % self.space)

        if len(self._bookkeep) >= self.space:
            slot = self._bookkeep.pop(0)
            logger.debug1(self, 'DIIS evicts slot %d', slot)
        else:
            slot = len(self._bookkeep)
        self._store('x%d'%slot, x.copy())
        self._store('e%d'%slot, xerr.copy())
        self._bookkeep.append(slot)
        if isinstance(self.filename, str):
            self._store('bookkeep', numpy.asarray(self._bookkeep))

        if self._H is None or self._H.shape[0] < self.space+1:
            self._H = numpy.zeros((self.space+1,self.space+1), xerr.dtype)
            self._H[0,1:] = self._H[1:,0] = 1
            self._update_overlap(self._bookkeep)
        else:
            self._update_overlap([slot])
        return self

    def _update_overlap(self, slots):
        for s in slots:
            es = numpy.asarray(self._load('e%d'%s))
            for j in self._bookkeep:
                ej = self._load('e%d'%j)
                tmp = 0
                for p0, p1 in lib.prange(0, es.size, BLOCK_SIZE):
                    tmp += numpy.dot(es[p0:p1].conj(), ej[p0:p1])
                self._H[s+1,j+1] = tmp
                self._H[j+1,s+1] = numpy.conj(tmp)

    def get_err_vec(self, idx):
        '''The idx-th error vector, counted from the oldest one'''
        return self._load('e%d' % self._bookkeep[idx])

    def get_vec(self, idx):
        '''The idx-th vector, counted from the oldest one'''
        return self._load('x%d' % self._bookkeep[idx])

    def get_num_vec(self):
        return len(self._bookkeep)

    def __len__(self):
        return self.get_num_vec()

    def update(self, x, xerr):
        '''Push (x, xerr) and return the extrapolated vector in the shape of
        x.  x is returned unchanged while fewer than min_space vectors are
        stored.
        '''
        self.push(x, xerr)
        self.last_failed = False
        if self.get_num_vec() < self.min_space:
            return x
        return self.extrapolate().reshape(x.shape)

    def extrapolate(self, nd=None):
        '''Solve the DIIS equations

            [ 0  1   ...  1  ] [ lambda ]   [ 1 ]
            [ 1  B11 ... B1n ] [ c1     ] = [ 0 ]
            [ .  .       .   ] [ .      ]   [ . ]
            [ 1  Bn1 ... Bnn ] [ cn     ]   [ 0 ]

        with Bij = <e_i|e_j> and return sum_i c_i x_i as a flat vector.
        Only the nd most recent vectors enter the equations.  If the
        equations cannot be solved the latest vector is returned and
        :attr:`last_failed` is set.
        '''
        nvec = self.get_num_vec()
        if nd is None:
            nd = nvec
        if nvec == 0 or nd < 1:
            raise RuntimeError('No vector found in DIIS object.')
        if nd > nvec:
            raise ValueError('Only %d vectors are stored, %d requested' % (nvec, nd))
        self.last_failed = False
        if nd == 1:
            return numpy.array(self.get_vec(nvec-1))

        idx = [0] + [s+1 for s in self._bookkeep[-nd:]]
        h = self._H[numpy.ix_(idx, idx)].copy()
        # c is invariant to the scale of the B block
        scale = abs(h[1:,1:].diagonal()).max()
        if scale > 0:
            h[1:,1:] /= scale
        g = numpy.zeros(nd+1, h.dtype)
        g[0] = 1

        c = None
        try:
            w, v = scipy.linalg.eigh(h)
            if numpy.any(abs(w) < LINDEP):
                logger.debug(self, 'Linear dependence found in DIIS error vectors.')
                mask = abs(w) > LINDEP
                c = numpy.dot(v[:,mask]*(1./w[mask]), numpy.dot(v[:,mask].T.conj(), g))
            else:
                c = numpy.linalg.solve(h, g)
        except (numpy.linalg.LinAlgError, ValueError) as e:
            logger.warn(self, 'DIIS singular, %s', e)

        if c is None or not numpy.all(numpy.isfinite(c)):
            logger.warn(self, 'DIIS extrapolation failed. Take the latest vector')
            self.last_failed = True
            return numpy.array(self.get_vec(nvec-1))
        logger.debug1(self, 'diis-c %s', c)

        xnew = None
        offset = nvec - nd
        for i, ci in enumerate(c[1:]):
            xi = self.get_vec(offset+i)
            if xnew is None:
                xnew = numpy.zeros(xi.size, numpy.result_type(c.dtype, xi.dtype))
            for p0, p1 in lib.prange(0, xi.size, BLOCK_SIZE):
                xnew[p0:p1] += xi[p0:p1] * ci
        return xnew

    def reset(self):
        '''Drop the history'''
        self._buffer = {}
        self._bookkeep = []
        self._H = None
        self._size = None
        self.last_failed = False
        if self._diisfile is not None:
            self._diisfile.close()
            self._diisfile = None
        return self

    def restore(self, filename, inplace=True):
        '''Read diis contents from a diis file and replace the attributes of
        current diis object.
        '''
        fdiis = lib.H5TmpFile(filename)
        if inplace:
            self.filename = filename
            self._diisfile = fdiis

        if 'bookkeep' in fdiis:
            bookkeep = [int(s) for s in fdiis['bookkeep'][()]]
        else:
            bookkeep = sorted(int(k[1:]) for k in fdiis.keys() if k[0] == 'e')
        # errvec may be incomplete if program is terminated when generating errvec.
        bookkeep = [s for s in bookkeep
                    if 'x%d'%s in fdiis and 'e%d'%s in fdiis]
        self._buffer = {}
        self._bookkeep = []
        self._H = None
        self._size = None
        if not bookkeep:
            return self

        self.space = max(self.space, max(bookkeep)+1)
        for s in bookkeep:
            x = numpy.asarray(fdiis['x%d'%s])
            e = numpy.asarray(fdiis['e%d'%s])
            if inplace:
                if x.size < INCORE_SIZE or self.incore:
                    self._buffer['x%d'%s] = x
                    self._buffer['e%d'%s] = e
            else:
                self._store('x%d'%s, x)
                self._store('e%d'%s, e)
            self._size = x.size
        self._bookkeep = bookkeep
        self._H = numpy.zeros((self.space+1,self.space+1), self.get_err_vec(0).dtype)
        self._H[0,1:] = self._H[1:,0] = 1
        self._update_overlap(bookkeep)
        return self


class NoDIIS:
    '''Accelerator placeholder used when DIIS is switched off.  It keeps no
    history and returns the input vector unchanged.'''
    space = 0
    min_space = 0
    last_failed = False

    def push(self, x, xerr):
        return self

    def get_num_vec(self):
        return 0

    def __len__(self):
        return 0

    def update(self, x, xerr):
        return x

    def extrapolate(self, nd=None):
        raise RuntimeError('No vector found in DIIS object.')

    def reset(self):
        return self


def restore(filename):
    '''Restore/construct diis object based on a diis file'''
    return DIIS().restore(filename)
