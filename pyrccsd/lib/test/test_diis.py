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

import os
import tempfile
import unittest
import numpy
from pyrccsd.lib import diis

def setUpModule():
    global stdout
    stdout = open(os.devnull, 'w')

def tearDownModule():
    global stdout
    stdout.close()
    del stdout

def new_diis(space=6):
    adiis = diis.DIIS()
    adiis.verbose = 7
    adiis.stdout = stdout
    adiis.space = space
    return adiis


class KnownValues(unittest.TestCase):
    def test_fifo(self):
        adiis = new_diis(3)
        numpy.random.seed(1)
        for k in range(5):
            adiis.push(numpy.full(4, float(k)), numpy.random.random(4))
            self.assertTrue(adiis.get_num_vec() <= 3)
        self.assertEqual(adiis.get_num_vec(), 3)
        self.assertEqual(len(adiis), 3)
        self.assertEqual([adiis.get_vec(i)[0] for i in range(3)], [2., 3., 4.])

    def test_overlap_after_eviction(self):
        adiis = new_diis(2)
        numpy.random.seed(2)
        errs = [numpy.random.random(5) for i in range(4)]
        for k, e in enumerate(errs):
            adiis.push(numpy.full(5, float(k)), e)
        h = adiis._H[numpy.ix_([s+1 for s in adiis._bookkeep],
                               [s+1 for s in adiis._bookkeep])]
        ref = numpy.dot(numpy.array(errs[2:]), numpy.array(errs[2:]).T)
        self.assertAlmostEqual(abs(h - ref).max(), 0, 12)

    def test_extrapolate(self):
        adiis = new_diis()
        adiis.push(numpy.array([1., 0.]), numpy.array([1., 0.]))
        adiis.push(numpy.array([3., 2.]), numpy.array([-1., 0.]))
        x = adiis.extrapolate()
        self.assertAlmostEqual(abs(x - numpy.array([2., 1.])).max(), 0, 12)
        self.assertFalse(adiis.last_failed)

    def test_extrapolate_minimizes_error(self):
        adiis = new_diis()
        numpy.random.seed(3)
        xs = numpy.random.random((3,6))
        es = numpy.random.random((3,6))
        for x, e in zip(xs, es):
            adiis.push(x, e)
        h = numpy.zeros((4,4))
        h[0,1:] = h[1:,0] = 1
        h[1:,1:] = es.dot(es.T)
        g = numpy.zeros(4)
        g[0] = 1
        c = numpy.linalg.solve(h, g)[1:]
        self.assertAlmostEqual(c.sum(), 1, 12)
        self.assertAlmostEqual(abs(adiis.extrapolate() - c.dot(xs)).max(), 0, 10)

    def test_single_entry(self):
        adiis = new_diis()
        self.assertRaises(RuntimeError, adiis.extrapolate)
        adiis.push(numpy.arange(3.), numpy.ones(3))
        x = adiis.extrapolate()
        self.assertAlmostEqual(abs(x - numpy.arange(3.)).max(), 0, 14)
        self.assertTrue(numpy.all(numpy.isfinite(x)))

    def test_extrapolate_recent_vectors(self):
        adiis = new_diis(4)
        for k in range(3):
            adiis.push(numpy.full(2, float(k)), numpy.full(2, k+1.))
        x = adiis.extrapolate(nd=1)
        self.assertAlmostEqual(abs(x - 2.).max(), 0, 14)
        self.assertRaises(ValueError, adiis.extrapolate, 4)

        # only the last two error vectors enter the equations
        adiis = new_diis(4)
        adiis.push(numpy.array([9., 9.]), numpy.array([numpy.nan, 0.]))
        adiis.push(numpy.array([1., 0.]), numpy.array([1., 0.]))
        adiis.push(numpy.array([3., 2.]), numpy.array([-1., 0.]))
        x = adiis.extrapolate(nd=2)
        self.assertFalse(adiis.last_failed)
        self.assertAlmostEqual(abs(x - numpy.array([2., 1.])).max(), 0, 12)

        # failed extrapolation over a subset falls back to the newest vector
        adiis = new_diis(4)
        adiis.push(numpy.array([0., 0.]), numpy.array([1., 0.]))
        adiis.push(numpy.array([1., 1.]), numpy.array([numpy.nan, 0.]))
        adiis.push(numpy.array([2., 2.]), numpy.array([1., 1.]))
        x = adiis.extrapolate(nd=2)
        self.assertTrue(adiis.last_failed)
        self.assertAlmostEqual(abs(x - 2.).max(), 0, 14)

    def test_linear_dependence(self):
        adiis = new_diis()
        e = numpy.array([.5, .5, 0.])
        adiis.push(numpy.array([1., 1., 1.]), e)
        adiis.push(numpy.array([3., 3., 3.]), e)
        x = adiis.extrapolate()
        self.assertTrue(numpy.all(numpy.isfinite(x)))
        self.assertAlmostEqual(abs(x - 2.).max(), 0, 10)
        self.assertFalse(adiis.last_failed)

    def test_zero_errors(self):
        adiis = new_diis()
        adiis.push(numpy.array([1., 2.]), numpy.zeros(2))
        adiis.push(numpy.array([1., 2.]), numpy.zeros(2))
        x = adiis.extrapolate()
        self.assertAlmostEqual(abs(x - numpy.array([1., 2.])).max(), 0, 12)

    def test_nan_fallback(self):
        adiis = new_diis()
        adiis.push(numpy.array([1., 2.]), numpy.array([1., 0.]))
        adiis.push(numpy.array([5., 6.]), numpy.array([numpy.nan, 0.]))
        x = adiis.extrapolate()
        self.assertTrue(adiis.last_failed)
        self.assertAlmostEqual(abs(x - numpy.array([5., 6.])).max(), 0, 14)

    def test_update_min_space(self):
        adiis = new_diis()
        adiis.min_space = 2
        x0 = numpy.array([1., 0.])
        x = adiis.update(x0, numpy.array([1., 0.]))
        self.assertTrue(x is x0)
        x = adiis.update(numpy.array([3., 2.]), numpy.array([-1., 0.]))
        self.assertAlmostEqual(abs(x - numpy.array([2., 1.])).max(), 0, 12)

    def test_update_keeps_shape(self):
        adiis = new_diis()
        numpy.random.seed(4)
        for i in range(3):
            x = numpy.random.random((2,3))
            x1 = adiis.update(x, numpy.random.random((2,3)))
        self.assertEqual(x1.shape, (2,3))

    def test_size_mismatch(self):
        adiis = new_diis()
        self.assertRaises(ValueError, adiis.push, numpy.ones(3), numpy.ones(2))
        adiis.push(numpy.ones(3), numpy.ones(3))
        self.assertRaises(ValueError, adiis.push, numpy.ones(4), numpy.ones(4))

    def test_reset(self):
        adiis = new_diis()
        adiis.push(numpy.ones(3), numpy.ones(3))
        adiis.reset()
        self.assertEqual(adiis.get_num_vec(), 0)
        adiis.push(numpy.ones(5), numpy.ones(5))
        self.assertEqual(adiis.get_num_vec(), 1)

    def test_restore(self):
        ftmp = tempfile.NamedTemporaryFile()
        adiis = diis.DIIS(filename=ftmp.name)
        adiis.verbose = 0
        adiis.space = 3
        numpy.random.seed(5)
        for k in range(5):
            adiis.push(numpy.random.random(4), numpy.random.random(4))
        ref = adiis.extrapolate()
        order = [adiis.get_vec(i)[0] for i in range(3)]
        adiis.reset()

        adiis1 = diis.restore(ftmp.name)
        adiis1.verbose = 0
        self.assertEqual(adiis1.get_num_vec(), 3)
        self.assertEqual([adiis1.get_vec(i)[0] for i in range(3)], order)
        self.assertAlmostEqual(abs(adiis1.extrapolate() - ref).max(), 0, 12)
        adiis1.reset()

    def test_outcore(self):
        bak, diis.INCORE_SIZE = diis.INCORE_SIZE, 2
        try:
            adiis = new_diis()
            adiis.push(numpy.array([1., 0., 0.]), numpy.array([1., 0., 0.]))
            adiis.push(numpy.array([3., 2., 0.]), numpy.array([-1., 0., 0.]))
            self.assertTrue(adiis._diisfile is not None)
            self.assertEqual(len(adiis._buffer), 0)
            x = adiis.extrapolate()
            self.assertAlmostEqual(abs(x - numpy.array([2., 1., 0.])).max(), 0, 12)
            adiis.reset()
        finally:
            diis.INCORE_SIZE = bak

    def test_nodiis(self):
        adiis = diis.NoDIIS()
        x = numpy.ones(3)
        self.assertTrue(adiis.update(x, x) is x)
        adiis.push(x, x)
        self.assertEqual(adiis.get_num_vec(), 0)
        self.assertFalse(adiis.last_failed)
        self.assertRaises(RuntimeError, adiis.extrapolate)


if __name__ == "__main__":
    print("Full Tests for DIIS")
    unittest.main()
