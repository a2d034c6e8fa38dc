# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging

import cupy
import numpy as np

from ..config import AccumulationMode, validate_bin_count
from ..context import get_kernel
from ..errors import DataError

logger = logging.getLogger(__name__)

HISTOGRAM_DTYPE = cupy.uint32


def _as_device_samples(samples):
    if isinstance(samples, np.ndarray):
        samples = cupy.asarray(samples)
    elif not isinstance(samples, cupy.ndarray):
        raise TypeError("samples must be a cupy.ndarray or numpy.ndarray")
    if samples.dtype != cupy.uint8:
        raise DataError(f"expected uint8 samples, got {samples.dtype.name}")
    if samples.size >= 2**32:
        raise DataError("images with 2**32 samples or more are unsupported")
    return cupy.ascontiguousarray(samples)


def _check_out(out, nbins):
    if not isinstance(out, cupy.ndarray):
        raise TypeError("out must be a cupy.ndarray")
    if out.shape != (nbins,) or out.dtype != HISTOGRAM_DTYPE:
        raise DataError(f"out must be a uint32 array of shape ({nbins},)")
    if not out.flags.c_contiguous:
        raise DataError("out must be C-contiguous")


def build_histogram(samples, bin_count, mode=AccumulationMode.GLOBAL, *,
                    out=None, block_size=256):
    """Count 8-bit samples into `bin_count` equal-width bins on the GPU.

    Sample ``v`` falls into bin ``floor(v * bin_count / 256)``. Every
    channel of a colour image is counted, so the counts sum to the total
    number of samples.

    Parameters
    ----------
    samples : cupy.ndarray or numpy.ndarray
        uint8 samples of any shape.
    bin_count : int
        Power of two in ``[2, 256]``.
    mode : AccumulationMode or str, optional
        With ``'global'`` every thread atomically increments the output
        histogram. With ``'local'`` each block first accumulates a private
        histogram in shared memory and merges it into the output with one
        atomic add per bin. Both modes give identical counts.
    out : cupy.ndarray, optional
        C-contiguous uint32 array of length `bin_count` to write to. It is
        zeroed first.
    block_size : int, optional
        Threads per block.

    Returns
    -------
    histogram : cupy.ndarray
        uint32 counts of length `bin_count`.
    """
    bin_count = validate_bin_count(bin_count)
    mode = AccumulationMode(mode)
    samples = _as_device_samples(samples)

    if out is None:
        out = cupy.zeros(bin_count, dtype=HISTOGRAM_DTYPE)
    else:
        _check_out(out, bin_count)
        out.fill(0)

    total_size = samples.size
    if total_size == 0:
        return out
    block = (block_size, 1, 1)
    grid = ((total_size + block_size - 1) // block_size, 1, 1)
    args = (samples, out, np.uint32(total_size), np.uint32(bin_count))

    if mode is AccumulationMode.LOCAL:
        kernel = get_kernel("local_histogram")
        shared_mem = bin_count * out.itemsize
        logger.debug(
            "local_histogram grid=%s block=%s shared_mem=%d",
            grid, block, shared_mem,
        )
        kernel(grid, block, args, shared_mem=shared_mem)
    else:
        kernel = get_kernel("global_histogram")
        logger.debug("global_histogram grid=%s block=%s", grid, block)
        kernel(grid, block, args)
    return out
