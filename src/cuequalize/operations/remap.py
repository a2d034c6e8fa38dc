# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import cupy
import numpy as np

from ..config import validate_bin_count
from ..context import get_kernel
from ..errors import DataError
from .histogram import _as_device_samples
from .normalize import LOOKUP_DTYPE


def remap(samples, lookup, bin_count, *, color=False, block_size=256):
    """Replace every sample by the lookup table entry of its bin.

    Parameters
    ----------
    samples : cupy.ndarray or numpy.ndarray
        uint8 samples. With ``color=True`` the last axis holds 3 interleaved
        YCbCr channels.
    lookup : cupy.ndarray
        uint8 table with `bin_count` entries.
    bin_count : int
        Number of bins the table was built for.
    color : bool, optional
        Remap only the luma channel and copy the chroma channels.
    block_size : int, optional
        Threads per block.

    Returns
    -------
    out : cupy.ndarray
        uint8 array with the shape of `samples`.
    """
    bin_count = validate_bin_count(bin_count)
    samples = _as_device_samples(samples)
    lookup = cupy.asarray(lookup)
    if lookup.shape != (bin_count,) or lookup.dtype != LOOKUP_DTYPE:
        raise DataError(
            f"lookup must be a uint8 array of shape ({bin_count},)"
        )
    lookup = cupy.ascontiguousarray(lookup)
    if color and samples.shape[-1] != 3:
        raise DataError(
            f"colour samples must have 3 channels on the last axis, got "
            f"shape {samples.shape}"
        )

    total_size = samples.size
    out = cupy.empty_like(samples)
    if total_size == 0:
        return out
    grid = ((total_size + block_size - 1) // block_size, 1, 1)
    kernel = get_kernel("equalise_image")
    kernel(grid, (block_size, 1, 1),
           (samples, out, lookup, np.uint32(total_size),
            np.uint32(bin_count), np.uint32(3 if color else 1)))
    return out
