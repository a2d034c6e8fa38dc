# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Inclusive prefix sums of a histogram.

Both algorithms run in a single thread block and produce identical results:

* Hillis-Steele does ``log2(n)`` passes adding the element ``2**k`` places
  to the left, O(n log n) additions.
* Blelloch builds partial sums up a binary tree and propagates them back
  down, O(n) additions, and works in place.
"""

import logging

import cupy
import numpy as np

from ..config import ScanAlgorithm, validate_bin_count
from ..context import get_kernel
from ..errors import DataError
from .histogram import HISTOGRAM_DTYPE, _check_out

logger = logging.getLogger(__name__)


def _check_histogram(histogram):
    if isinstance(histogram, np.ndarray):
        histogram = cupy.asarray(histogram)
    elif not isinstance(histogram, cupy.ndarray):
        raise TypeError("histogram must be a cupy.ndarray or numpy.ndarray")
    if histogram.ndim != 1:
        raise DataError("histogram must be one-dimensional")
    if histogram.dtype != HISTOGRAM_DTYPE:
        raise DataError(
            f"histogram must be uint32, got {histogram.dtype.name}"
        )
    validate_bin_count(histogram.size)
    return cupy.ascontiguousarray(histogram)


def hillis_steele_scan(histogram, out=None):
    """Inclusive scan using the Hillis-Steele algorithm.

    A new array is allocated when `out` is omitted. The counts are staged in
    shared memory before any write, so `out` may alias `histogram`.
    """
    histogram = _check_histogram(histogram)
    nbins = histogram.size
    if out is None:
        out = cupy.empty_like(histogram)
    else:
        _check_out(out, nbins)

    kernel = get_kernel("hillis_steele_scan")
    # double buffer
    shared_mem = 2 * nbins * histogram.itemsize
    kernel((1,), (nbins,), (histogram, out, np.uint32(nbins)),
           shared_mem=shared_mem)
    return out


def blelloch_scan(histogram, out=None):
    """Inclusive scan using the work-efficient Blelloch algorithm.

    The scan runs in place on `out`, after `histogram` has been copied into
    it. Pass ``out=histogram`` to scan the histogram in place.
    """
    histogram = _check_histogram(histogram)
    nbins = histogram.size
    if out is None:
        out = histogram.copy()
    else:
        _check_out(out, nbins)
        if out.data.ptr != histogram.data.ptr:
            out[...] = histogram

    kernel = get_kernel("blelloch_scan")
    shared_mem = nbins * out.itemsize
    kernel((1,), (nbins // 2,), (out, np.uint32(nbins)),
           shared_mem=shared_mem)
    return out


def scan(histogram, algorithm=ScanAlgorithm.BLELLOCH, out=None):
    """Cumulative histogram with the selected `algorithm`."""
    algorithm = ScanAlgorithm(algorithm)
    histogram = _check_histogram(histogram)
    logger.debug("scan of %d bins with %s", histogram.size, algorithm.value)
    if algorithm is ScanAlgorithm.HILLIS_STEELE:
        return hillis_steele_scan(histogram, out=out)
    elif algorithm is ScanAlgorithm.BLELLOCH:
        return blelloch_scan(histogram, out=out)
    raise ValueError(f"unsupported scan algorithm: {algorithm}")
