# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

from setuptools import setup, find_packages


setup(
    name="nonmax",
    version="0.1.0",
    description="Point feature extraction by local maximum search",
    python_requires=">=3.9",
    install_requires=["numpy>=1.10",
                      "pandas",
                      "scipy>0.18",
                      "numba", ],
    extras_require={"test": ["pytest"]},
    packages=find_packages(include=["nonmax*"]),
)
