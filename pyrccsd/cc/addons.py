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

import numpy


def embed_amplitudes(t1, t2, t1_small, t2_small):
    '''Copy the amplitudes of a smaller calculation into the leading
    occupied/virtual sub-block of t1 and t2 (in place).

    Examples:

    >>> emp2, t1, t2 = mycc.init_amps()
    >>> t1, t2 = embed_amplitudes(t1, t2, small_cc.t1, small_cc.t2)
    '''
    t1_small = numpy.asarray(t1_small)
    t2_small = numpy.asarray(t2_small)
    if t1_small.ndim != 2:
        raise ValueError('t1 guess must be a 2-d array, got shape %s'
                         % (t1_small.shape,))
    o, v = t1_small.shape
    if t2_small.shape != (o, o, v, v):
        raise ValueError('t2 guess shape %s is inconsistent with t1 guess shape %s'
                         % (t2_small.shape, t1_small.shape))
    nocc, nvir = t1.shape
    if o > nocc or v > nvir:
        raise ValueError('Guess amplitudes (nocc=%d, nvir=%d) are larger than '
                         'the system (nocc=%d, nvir=%d)' % (o, v, nocc, nvir))
    t1[:o,:v] = t1_small
    t2[:o,:o,:v,:v] = t2_small
    return t1, t2

def get_t1_diagnostic(t1):
    '''Returns the t1 amplitude norm, normalized by number of correlated electrons.'''
    nelectron = 2 * t1.shape[0]
    return numpy.sqrt(numpy.linalg.norm(t1)**2 / nelectron)

def get_d1_diagnostic(t1):
    '''D1 diagnostic given in

        Janssen, et. al Chem. Phys. Lett. 290 (1998) 423
    '''
    f = lambda x: numpy.sqrt(numpy.sort(numpy.abs(x[0])))[-1]
    d1norm_ij = f(numpy.linalg.eigh(numpy.einsum('ia,ja->ij',t1,t1)))
    d1norm_ab = f(numpy.linalg.eigh(numpy.einsum('ia,ib->ab',t1,t1)))
    d1norm = max(d1norm_ij, d1norm_ab)
    return d1norm

def get_d2_diagnostic(t2):
    '''D2 diagnostic given in

        Nielsen, et. al Chem. Phys. Lett. 310 (1999) 568
    '''
    f = lambda x: numpy.sqrt(numpy.sort(numpy.abs(x[0])))[-1]
    d2norm_ij = f(numpy.linalg.eigh(numpy.einsum('ikab,jkab->ij',t2,t2)))
    d2norm_ab = f(numpy.linalg.eigh(numpy.einsum('ijac,ijbc->ab',t2,t2)))
    d2norm = max(d2norm_ij, d2norm_ab)
    return d2norm
