# SPDX-FileCopyrightText: Copyright (c) 2023, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from setuptools import find_packages, setup

setup(
    name="cuequalize",
    version="0.1.0",
    description="GPU histogram equalization of 8-bit images with CuPy",
    license="Apache-2.0",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"cuequalize": ["*.pyi"]},
    install_requires=[
        "click",
        "cupy-cuda12x>=13.0.0",
        "lazy-loader>=0.4",
        "numpy>=1.23.4,<3.0a0",
        "pillow",
        "scipy>=1.11.2",
    ],
    extras_require={
        "test": [
            "pytest",
            "scikit-image>=0.19.0",
        ],
        "bench": [
            "pandas",
            "scikit-image>=0.19.0",
            "tabulate",
        ],
    },
    entry_points={
        "console_scripts": ["cuequalize=cuequalize.cli:main"],
    },
)
