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
*************************************************
pyrccsd: closed-shell coupled-cluster singles and doubles
*************************************************

The package solves the restricted CCSD amplitude equations for integrals
that were produced elsewhere (mean-field solver and integral transformation
are not part of this package).

How to use
----------
Build the integral store from a MO-basis Fock matrix and a physicist-notation
two-electron tensor, then run the solver::

    >>> from pyrccsd import cc
    >>> eris = cc.make_eris(fock, eri, nocc, e_hf=e_hf)
    >>> mycc = cc.RCCSD(eris).set(conv_tol=1e-10, preconv_t1=True)
    >>> e_corr, t1, t2 = mycc.kernel()
    >>> mycc.converged, mycc.e_tot

'''

__version__ = '0.1.0'

from pyrccsd import lib
from pyrccsd import cc
from pyrccsd.cc import RCCSD
