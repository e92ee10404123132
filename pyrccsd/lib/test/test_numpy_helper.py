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

import unittest
import numpy
from pyrccsd import lib


class KnownValues(unittest.TestCase):
    def test_einsum(self):
        numpy.random.seed(1)
        a = numpy.random.random((3,4,5))
        b = numpy.random.random((5,4,6))
        c = numpy.random.random((6,3))
        ref = numpy.einsum('ijk,kjl,li->', a, b, c)
        self.assertAlmostEqual(lib.einsum('ijk,kjl,li->', a, b, c), ref, 12)
        ref = numpy.einsum('ijk,kjl->il', a, b)
        self.assertAlmostEqual(abs(lib.einsum('ijk,kjl->il', a, b) - ref).max(), 0, 12)
        self.assertAlmostEqual(abs(lib.einsum('ijk, kjl -> il', a, b) - ref).max(), 0, 12)
        self.assertAlmostEqual(abs(lib.einsum('ijk->kji', a) - a.transpose(2,1,0)).max(), 0, 14)

    def test_einsum_out(self):
        numpy.random.seed(2)
        a = numpy.random.random((3,4))
        b = numpy.random.random((4,5))
        out = numpy.ones((3,5))
        res = lib.einsum('ij,jk->ik', a, b, out=out)
        self.assertTrue(res is out)
        self.assertAlmostEqual(abs(out - a.dot(b)).max(), 0, 12)


if __name__ == "__main__":
    print("Full Tests for numpy_helper")
    unittest.main()
