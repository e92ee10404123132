#!/usr/bin/env python
# Copyright 2014-2020 The PySCF Developers. All Rights Reserved.
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
from setuptools import setup, find_packages

def get_version():
    topdir = os.path.abspath(os.path.join(__file__, '..'))
    with open(os.path.join(topdir, 'pyrccsd', '__init__.py'), 'r') as f:
        for line in f.readlines():
            if line.startswith('__version__'):
                delim = '"' if '"' in line else "'"
                return line.split(delim)[1]
    raise ValueError("Version string not found")
VERSION = get_version()

setup(
    name='pyrccsd',
    version=VERSION,
    description='Restricted closed-shell CCSD amplitude solver',
    license='Apache-2.0',
    python_requires='>=3.8',
    packages=find_packages(exclude=['*test*', '*examples*']),
    install_requires=[
        'pyscf>=2.0',
        'numpy>=1.17',
        'scipy!=1.5.0,!=1.5.1',
        'h5py>=2.7',
        'opt_einsum>=3.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
