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
Tensor contraction engine
'''

import numpy
import opt_einsum
from pyscf import __config__

EINSUM_OPTIMIZE = getattr(__config__, 'pyrccsd_lib_einsum_optimize', 'auto')

def einsum(subscripts, *tensors, **kwargs):
    '''Tensor contraction in the einsum notation.

    Contractions of two or more operands are dispatched to
    :func:`opt_einsum.contract`, which picks a pairwise contraction order and
    evaluates each pair through BLAS (tensordot).  The output indices must be
    explicitly specified (i.e. 'ij,j->i' and not 'ij,j').

    Kwargs:
        optimize : str
            Path optimizer passed to opt_einsum.  Default is
            :data:`EINSUM_OPTIMIZE`.
        out : ndarray
            Output buffer.  The result is written (not accumulated) into it.
    '''
    subscripts = subscripts.replace(' ','')
    out = kwargs.pop('out', None)
    if len(tensors) <= 1 or '...' in subscripts:
        res = numpy.einsum(subscripts, *tensors)
    else:
        optimize = kwargs.pop('optimize', EINSUM_OPTIMIZE)
        res = opt_einsum.contract(subscripts, *tensors, optimize=optimize)
    if out is not None:
        out[...] = res
        return out
    return res
