# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import cupy
import numpy as np

from ..context import get_kernel
from ..errors import DataError
from .scan import _check_histogram

LOOKUP_DTYPE = cupy.uint8


def normalization_scale(sample_count, color=False):
    """Factor mapping cumulative counts onto ``[0, 255]``.

    ``255 / sample_count``, multiplied by 3 for colour images.
    """
    if sample_count <= 0:
        raise DataError(
            f"sample_count must be positive, got {sample_count}"
        )
    scale = 255.0 / sample_count
    if color:
        scale *= 3
    return scale


def normalize_histogram(cumulative, sample_count, *, color=False):
    """Convert a cumulative histogram into an 8-bit lookup table.

    ``lookup[i] = clip(round(cumulative[i] * scale), 0, 255)`` where
    `scale` is given by `normalization_scale`. Halfway values round away
    from zero. A non-decreasing input gives a non-decreasing table.

    Parameters
    ----------
    cumulative : cupy.ndarray
        uint32 cumulative histogram.
    sample_count : int
        Number of samples counted into the histogram.
    color : bool, optional
        Whether the histogram was built from a 3 channel image.

    Returns
    -------
    lookup : cupy.ndarray
        uint8 array with one entry per bin.
    """
    cumulative = _check_histogram(cumulative)
    scale = normalization_scale(sample_count, color)
    nbins = cumulative.size
    lookup = cupy.empty(nbins, dtype=LOOKUP_DTYPE)
    kernel = get_kernel("normalise_histogram")
    kernel((1,), (nbins,),
           (cumulative, lookup, np.uint32(nbins), np.float32(scale)))
    return lookup
