# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import os

from setuptools import find_packages, setup

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "colengine", "VERSION")) as f:
    version = f.read().strip()

packages = find_packages(include=["colengine", "colengine.*"])

install_requires = [
    "numpy>=1.23",
    "pandas>=2.0",
    "pyarrow>=14.0",
    "typing_extensions>=4.0.0",
]

setup(
    name="colengine",
    description="colengine - typed, nullable columnar compute on the host",
    version=version,
    classifiers=[
        "Intended Audience :: Developers",
        "Topic :: Database",
        "Topic :: Scientific/Engineering",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
    ],
    author="NVIDIA Corporation",
    python_requires=">=3.10",
    packages=packages,
    package_data={"colengine": ["VERSION"]},
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
    license="Apache 2.0",
    zip_safe=False,
)
