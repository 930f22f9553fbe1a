#!/usr/bin/env python3
from setuptools import find_packages, setup

setup(
  name = 'vercheck',
  version = '0.1.0',
  description = 'Check nginx and nchan upstream versions and trigger COPR rebuilds',
  python_requires = '>=3.11.0',
  zip_safe = False,
  packages = find_packages(exclude=('tests',)),
  scripts = ['check-versions'],
  install_requires = [
    'requests', 'structlog>=22.1', 'tornado',
  ],
  extras_require = {
    'test': ['pytest'],
  },
  classifiers = [
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Programming Language :: Python :: 3.11',
    'Programming Language :: Python :: 3.12',
  ],
)
