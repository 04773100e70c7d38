#!/usr/bin/env python

"""Set up the pymysqlstmt package.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

This package can be installed using pip as follows:

    pip install pymysqlstmt

To install with cryptography:

    pip install 'pymysqlstmt[crypto]'

Note cryptography is only needed for caching_sha2_password accounts whose
password is not yet cached by the server.
"""

import os
import re

from setuptools import setup

with open(os.path.join(os.path.dirname(__file__), 'pymysqlstmt', '__init__.py')) as v:
    m = re.search(r"^ *__version__ *= *'(.*?)'", v.read(), re.M)
    if m is None:
        raise RuntimeError("Cannot detect version in pymysqlstmt/__init__.py")
    VERSION = m.group(1)

readme = os.path.join(os.path.dirname(__file__), 'README.rst')

setup(
    name='pymysqlstmt',
    version=VERSION,
    author='Dassault Systemes SE',
    maintainer='pymysqlstmt developers',
    description='MySQL prepared statement driver',
    keywords='mysql prepared statement binary protocol',
    packages=['pymysqlstmt'],
    license='BSD License',
    long_description=open(readme).read(),
    python_requires='>=3.6',
    install_requires=['tzlocal', 'pytz>=2015.4'],
    extras_require=dict(crypto='cryptography>=2.6.1',
                        test=['pytest']),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: SQL',
        'Topic :: Database :: Front-Ends',
    ],
)
