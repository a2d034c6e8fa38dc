# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from .histogram import build_histogram
from .normalize import normalization_scale, normalize_histogram
from .remap import remap
from .scan import blelloch_scan, hillis_steele_scan, scan

__all__ = [
    "build_histogram",
    "scan",
    "hillis_steele_scan",
    "blelloch_scan",
    "normalization_scale",
    "normalize_histogram",
    "remap",
]
