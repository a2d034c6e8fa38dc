# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""RGB <-> YCbCr conversion of interleaved 8-bit images.

Y is between 16 and 235 and Cb, Cr between 16 and 240 (ITU-R BT.601), so
the luma channel can be equalized independently of the chroma channels.
"""

import cupy as cp
import numpy as np
from scipy import linalg

from .errors import DataError

# coefficients for RGB in [0, 1]
ycbcr_from_rgb = np.array(
    [
        [65.481, 128.553, 24.966],  # noqa
        [-37.797, -74.203, 112.0],  # noqa
        [112.0, -93.786, -18.214],
    ]
)  # noqa

ycbcr_offset = (16.0, 128.0, 128.0)

# coefficients for 8-bit samples
_ycbcr_from_rgb8 = ycbcr_from_rgb / 255.0
_rgb8_from_ycbcr = linalg.inv(_ycbcr_from_rgb8)


@cp.memoize(for_each_device=True)
def _get_convert_kernel(matrix_tuple, pre_offset, post_offset, name):
    m = matrix_tuple
    p = pre_offset
    q = post_offset
    code = f"""
        float c0 = (float)x[3*i] - {p[0]}f;
        float c1 = (float)x[3*i + 1] - {p[1]}f;
        float c2 = (float)x[3*i + 2] - {p[2]}f;
        float v0 = c0 * {m[0]}f + c1 * {m[1]}f + c2 * {m[2]}f + {q[0]}f;
        float v1 = c0 * {m[3]}f + c1 * {m[4]}f + c2 * {m[5]}f + {q[1]}f;
        float v2 = c0 * {m[6]}f + c1 * {m[7]}f + c2 * {m[8]}f + {q[2]}f;
        y[3*i] = (unsigned char)fminf(fmaxf(rintf(v0), 0.0f), 255.0f);
        y[3*i + 1] = (unsigned char)fminf(fmaxf(rintf(v1), 0.0f), 255.0f);
        y[3*i + 2] = (unsigned char)fminf(fmaxf(rintf(v2), 0.0f), 255.0f);
    """  # noqa
    return cp.ElementwiseKernel(
        '',
        'raw uint8 x, raw uint8 y',
        code,
        name='cuequalize_' + name)


def _prepare_colorarray(arr):
    arr = cp.asarray(arr)
    if arr.shape[-1] != 3:
        raise DataError(
            f"the input array must have size 3 along the last axis, got "
            f"{arr.shape}"
        )
    if arr.dtype != cp.uint8:
        raise DataError(f"expected uint8 samples, got {arr.dtype.name}")
    return cp.ascontiguousarray(arr)


def _convert(matrix, arr, pre_offset, post_offset, name):
    arr = _prepare_colorarray(arr)
    matrix_tuple = tuple(float(v) for v in matrix.ravel())
    kern = _get_convert_kernel(matrix_tuple, pre_offset, post_offset, name)
    out = cp.empty_like(arr)
    kern(arr, out, size=arr.size // 3)
    return out


def rgb2ycbcr(rgb):
    """RGB to YCbCr color space conversion.

    Parameters
    ----------
    rgb : (..., 3) cupy.ndarray of uint8
        Interleaved RGB samples.

    Returns
    -------
    out : (..., 3) cupy.ndarray of uint8
        Interleaved YCbCr samples, rounded to the nearest integer.

    Raises
    ------
    DataError
        If `rgb` is not uint8 with 3 channels on the last axis.
    """
    return _convert(_ycbcr_from_rgb8, rgb, (0.0, 0.0, 0.0), ycbcr_offset,
                    'rgb2ycbcr')


def ycbcr2rgb(ycbcr):
    """YCbCr to RGB color space conversion, the inverse of `rgb2ycbcr`.

    Values falling outside of the RGB gamut are clipped to ``[0, 255]``.
    """
    return _convert(_rgb8_from_ycbcr, ycbcr, ycbcr_offset, (0.0, 0.0, 0.0),
                    'ycbcr2rgb')
