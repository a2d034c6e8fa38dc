# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""cuequalize module

GPU histogram equalization of 8-bit grey and colour images, built on CuPy.

Subpackages
-----------

operations
    The individual pipeline stages: histogram, scan, normalize and remap.

"""

import lazy_loader as _lazy

__version__ = "0.1.0"

__getattr__, __lazy_dir__, __all__ = _lazy.attach_stub(__name__, __file__)


def __dir__():
    return __lazy_dir__() + ["__version__"]
