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
Solver helpers which are not available from pyscf.lib: the opt_einsum
contraction engine and the FIFO DIIS accelerator.  Logging, HDF5 files,
checkpointing and StreamObject are taken from pyscf.lib.
'''

from pyrccsd.lib import numpy_helper
from pyrccsd.lib.numpy_helper import einsum
from pyrccsd.lib import diis
