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
Closed-shell CCSD amplitude equations, fully expanded in terms of the bare
integrals (no dressed intermediates).

The functions return the right-hand side of the amplitude equations, i.e.
the new amplitudes multiplied by the energy denominators.  The diagonal
Fock elements are not included (eris.foo and eris.fvv carry only the
off-diagonal part), they enter through the resolvent.

MO integrals are in physicist's notation, eris.oovv[i,j,a,b] = <ij|ab>.
'''

import numpy
from pyrccsd.lib.numpy_helper import einsum


def _zeros_like(out, shape):
    if out is None:
        return numpy.zeros(shape)
    if out.shape != shape:
        raise ValueError('Output buffer shape %s does not match %s'
                         % (out.shape, shape))
    out[:] = 0
    return out

def update_t1(t1, t2, eris, out=None):
    '''Singles residual.  The current doubles enter as fixed input.

    Args:
        t1 : (nocc,nvir) ndarray
        t2 : (nocc,nocc,nvir,nvir) ndarray
        eris : _PhysicistsERIs

    Kwargs:
        out : (nocc,nvir) ndarray
            Buffer for the result.  It is zeroed before the terms are
            accumulated.
    '''
    nocc, nvir = t1.shape
    foo = eris.foo
    fvv = eris.fvv
    fov = eris.fov
    ooov = eris.ooov
    oovv = eris.oovv
    ovov = eris.ovov
    ovvv = eris.ovvv

    t1new = _zeros_like(out, (nocc,nvir))
    # Fock
    t1new += fov
    t1new -=   einsum('ik,ka->ia', foo, t1)
    t1new +=   einsum('ca,ic->ia', fvv, t1)
    t1new -=   einsum('kc,ic,ka->ia', fov, t1, t1)
    t1new += 2*einsum('kc,ikac->ia', fov, t2)
    t1new -=   einsum('kc,kiac->ia', fov, t2)
    # linear in amplitudes
    t1new -=   einsum('kc,icka->ia', t1, ovov)
    t1new += 2*einsum('kc,kica->ia', t1, oovv)
    t1new -=   einsum('kicd,kadc->ia', t2, ovvv)
    t1new += 2*einsum('ikcd,kadc->ia', t2, ovvv)
    t1new -= 2*einsum('klac,klic->ia', t2, ooov)
    t1new +=   einsum('lkac,klic->ia', t2, ooov)
    # quadratic
    t1new -= 2*einsum('kc,la,lkic->ia', t1, t1, ooov)
    t1new -=   einsum('kc,id,kadc->ia', t1, t1, ovvv)
    t1new += 2*einsum('kc,id,kacd->ia', t1, t1, ovvv)
    t1new +=   einsum('kc,la,klic->ia', t1, t1, ooov)
    t1new -= 2*einsum('kc,ilad,lkcd->ia', t1, t2, oovv)
    t1new -= 2*einsum('kc,liad,klcd->ia', t1, t2, oovv)
    t1new +=   einsum('kc,liad,lkcd->ia', t1, t2, oovv)
    t1new -= 2*einsum('ic,lkad,lkcd->ia', t1, t2, oovv)
    t1new +=   einsum('ic,lkad,klcd->ia', t1, t2, oovv)
    t1new -= 2*einsum('la,ikdc,klcd->ia', t1, t2, oovv)
    t1new +=   einsum('la,ikcd,klcd->ia', t1, t2, oovv)
    # cubic
    t1new +=   einsum('kc,id,la,lkcd->ia', t1, t1, t1, oovv)
    t1new -= 2*einsum('kc,id,la,klcd->ia', t1, t1, t1, oovv)
    t1new += 4*einsum('kc,ilad,klcd->ia', t1, t2, oovv)
    return t1new

def update_t2(t1, t2, eris, out=None):
    '''Doubles residual.

    The terms which are not symmetric under the exchange (i,a) <-> (j,b)
    are collected in an intermediate P, and P[i,j,a,b] + P[j,i,b,a] is added
    after all other terms.  The result satisfies
    t2new[i,j,a,b] == t2new[j,i,b,a] whenever t2 has the same symmetry.
    '''
    nocc, nvir = t1.shape
    foo = eris.foo
    fvv = eris.fvv
    fov = eris.fov
    oooo = eris.oooo
    ooov = eris.ooov
    oovv = eris.oovv
    ovov = eris.ovov
    ovvv = eris.ovvv
    vvvv = eris.vvvv

    t2new = _zeros_like(out, (nocc,nocc,nvir,nvir))
    t2new += oovv
    # ladders
    t2new += einsum('ic,jd,cdab->ijab', t1, t1, vvvv)
    t2new += einsum('ijcd,cdab->ijab', t2, vvvv)
    t2new += einsum('ka,lb,ijkl->ijab', t1, t1, oooo)
    t2new += einsum('klab,ijkl->ijab', t2, oooo)
    # cubic in t1
    t2new -= einsum('ic,jd,ka,kbcd->ijab', t1, t1, t1, ovvv)
    t2new -= einsum('ic,jd,kb,kadc->ijab', t1, t1, t1, ovvv)
    t2new += einsum('ic,ka,lb,lkjc->ijab', t1, t1, t1, ooov)
    t2new += einsum('jc,ka,lb,klic->ijab', t1, t1, t1, ooov)
    # quadratic in t2
    t2new +=   einsum('klac,ijdb,klcd->ijab', t2, t2, oovv)
    t2new -= 2*einsum('ikac,ljbd,klcd->ijab', t2, t2, oovv)
    t2new -= 2*einsum('lkac,ijdb,klcd->ijab', t2, t2, oovv)
    t2new +=   einsum('kiac,ljdb,lkcd->ijab', t2, t2, oovv)
    t2new +=   einsum('ikac,ljbd,lkcd->ijab', t2, t2, oovv)
    t2new -= 2*einsum('ikac,jlbd,lkcd->ijab', t2, t2, oovv)
    t2new +=   einsum('kiac,ljbd,klcd->ijab', t2, t2, oovv)
    t2new -= 2*einsum('kiac,jlbd,klcd->ijab', t2, t2, oovv)
    t2new +=   einsum('ijac,lkbd,klcd->ijab', t2, t2, oovv)
    t2new -= 2*einsum('ijac,klbd,klcd->ijab', t2, t2, oovv)
    t2new +=   einsum('kjac,ildb,lkcd->ijab', t2, t2, oovv)
    t2new += 4*einsum('ikac,jlbd,klcd->ijab', t2, t2, oovv)
    t2new +=   einsum('ijdc,lkab,klcd->ijab', t2, t2, oovv)
    # quartic, t1*t1 x t2
    t2new += einsum('ic,jd,ka,lb,klcd->ijab', t1, t1, t1, t1, oovv)
    t2new += einsum('ic,jd,lkab,lkcd->ijab', t1, t1, t2, oovv)
    t2new += einsum('ka,lb,ijdc,lkcd->ijab', t1, t1, t2, oovv)

    p  =  -einsum('ik,kjab->ijab', foo, t2)
    p +=   einsum('ca,ijcb->ijab', fvv, t2)
    p -=   einsum('kb,jika->ijab', t1, ooov)
    p +=   einsum('jc,icab->ijab', t1, ovvv)
    p -=   einsum('kc,ic,kjab->ijab', fov, t1, t2)
    p -=   einsum('kc,ka,ijcb->ijab', fov, t1, t2)
    p -=   einsum('kiac,kjcb->ijab', t2, oovv)
    p -=   einsum('ic,ka,kjcb->ijab', t1, t1, oovv)
    p -=   einsum('ic,kb,jcka->ijab', t1, t1, ovov)
    p += 2*einsum('ikac,kjcb->ijab', t2, oovv)
    p -=   einsum('ikac,jckb->ijab', t2, ovov)
    p -=   einsum('kjac,ickb->ijab', t2, ovov)
    p -= 2*einsum('lb,ikac,lkjc->ijab', t1, t2, ooov)
    p +=   einsum('lb,kiac,lkjc->ijab', t1, t2, ooov)
    p -=   einsum('jc,ikdb,kacd->ijab', t1, t2, ovvv)
    p -=   einsum('jc,kiad,kbdc->ijab', t1, t2, ovvv)
    p -=   einsum('jc,ikad,kbcd->ijab', t1, t2, ovvv)
    p +=   einsum('jc,lkab,lkic->ijab', t1, t2, ooov)
    p +=   einsum('lb,ikac,kljc->ijab', t1, t2, ooov)
    p -=   einsum('ka,ijdc,kbdc->ijab', t1, t2, ovvv)
    p +=   einsum('ka,ilcb,lkjc->ijab', t1, t2, ooov)
    p += 2*einsum('jc,ikad,kbdc->ijab', t1, t2, ovvv)
    p -=   einsum('kc,ijad,kbdc->ijab', t1, t2, ovvv)
    p += 2*einsum('kc,ijad,kbcd->ijab', t1, t2, ovvv)
    p +=   einsum('kc,ilab,kljc->ijab', t1, t2, ooov)
    p -= 2*einsum('kc,ilab,lkjc->ijab', t1, t2, ooov)
    p +=   einsum('jkcd,ilab,klcd->ijab', t2, t2, oovv)
    p -= 2*einsum('kc,jd,ilab,klcd->ijab', t1, t1, t2, oovv)
    p +=   einsum('kc,jd,ilab,lkcd->ijab', t1, t1, t2, oovv)
    p -= 2*einsum('kc,la,ijdb,klcd->ijab', t1, t1, t2, oovv)
    p +=   einsum('kc,la,ijdb,lkcd->ijab', t1, t1, t2, oovv)
    p +=   einsum('ic,ka,ljbd,klcd->ijab', t1, t1, t2, oovv)
    p -= 2*einsum('ic,ka,jlbd,klcd->ijab', t1, t1, t2, oovv)
    p +=   einsum('ic,ka,ljdb,lkcd->ijab', t1, t1, t2, oovv)
    p +=   einsum('ic,lb,kjad,klcd->ijab', t1, t1, t2, oovv)
    p -= 2*einsum('ikdc,ljab,klcd->ijab', t2, t2, oovv)

    t2new += p + p.transpose(1,0,3,2)
    return t2new

def update_amps(t1, t2, eris, out=None):
    '''Right-hand side of both amplitude equations at (t1, t2).

    Kwargs:
        out : tuple of two ndarrays
            Buffers (t1new, t2new) for the result.

    Returns:
        t1new, t2new before the division by the energy denominators
    '''
    if out is None:
        out = (None, None)
    t1new = update_t1(t1, t2, eris, out[0])
    t2new = update_t2(t1, t2, eris, out[1])
    return t1new, t2new
