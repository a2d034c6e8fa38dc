# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""8-bit pixel buffers consumed and produced by the pipeline."""

import enum

import cupy
import numpy as np

from .errors import DataError


class ColorSpace(enum.Enum):
    RGB = "rgb"
    YCBCR = "ycbcr"


class PixelBuffer:
    """An immutable grey or colour image of unsigned 8-bit samples.

    Parameters
    ----------
    data : numpy.ndarray or cupy.ndarray
        Array of dtype uint8 with shape ``(H, W)`` for a grey image or
        ``(H, W, 3)`` for an interleaved colour image.
    color_space : ColorSpace or str, optional
        Colour space of a 3 channel image. Ignored for grey images.

    Notes
    -----
    Host arrays are copied and marked read-only. Device arrays cannot be
    write protected, so they are copied and must not be modified through
    ``data``.
    """

    __slots__ = ("_data", "_color_space")

    def __init__(self, data, color_space=ColorSpace.RGB):
        if isinstance(data, np.ndarray):
            data = np.array(data, copy=True, order="C")
            data.setflags(write=False)
        elif isinstance(data, cupy.ndarray):
            data = cupy.array(data, copy=True, order="C")
        else:
            raise TypeError("data must be a cupy.ndarray or numpy.ndarray")

        if data.dtype != np.uint8:
            raise DataError(
                f"pixel data must be uint8, got {data.dtype.name}"
            )
        if data.ndim == 2:
            pass
        elif data.ndim == 3 and data.shape[-1] == 3:
            pass
        elif data.ndim == 3 and data.shape[-1] == 1:
            data = data[..., 0]
        else:
            raise DataError(
                f"Unsupported shape {data.shape}. Expected (H, W) or "
                "(H, W, 3)."
            )
        if data.size == 0:
            raise DataError("pixel buffer is empty")
        try:
            color_space = ColorSpace(color_space)
        except ValueError:
            raise DataError(f"unknown color space {color_space!r}") from None

        self._data = data
        self._color_space = color_space

    @classmethod
    def from_bytes(cls, buffer, width, height, color=False,
                   color_space=ColorSpace.RGB):
        """Wrap a flat byte sequence of ``width * height * channels`` samples.

        ``color`` selects 3 interleaved channels instead of 1.
        """
        channels = 3 if color else 1
        if width <= 0 or height <= 0:
            raise DataError(
                f"image dimensions must be positive, got {width}x{height}"
            )
        if isinstance(buffer, (cupy.ndarray, np.ndarray)):
            samples = buffer.ravel()
        else:
            samples = np.frombuffer(bytes(buffer), dtype=np.uint8)
        expected = width * height * channels
        if samples.size != expected:
            raise DataError(
                f"buffer holds {samples.size} samples, expected {expected} "
                f"for a {width}x{height} image with {channels} channel(s)"
            )
        shape = (height, width, 3) if color else (height, width)
        return cls(samples.reshape(shape), color_space=color_space)

    @classmethod
    def from_array(cls, array, color_space=ColorSpace.RGB):
        return cls(array, color_space=color_space)

    @property
    def data(self):
        return self._data

    @property
    def color_space(self):
        return self._color_space

    @property
    def shape(self):
        return self._data.shape

    @property
    def height(self):
        return self._data.shape[0]

    @property
    def width(self):
        return self._data.shape[1]

    @property
    def channels(self):
        return 3 if self._data.ndim == 3 else 1

    @property
    def is_color(self):
        return self.channels == 3

    @property
    def on_device(self):
        return isinstance(self._data, cupy.ndarray)

    @property
    def pixel_count(self):
        return self.height * self.width

    @property
    def sample_count(self):
        """Number of 8-bit samples, i.e. pixels times channels."""
        return self._data.size

    def __repr__(self):
        return (
            f"{type(self).__name__}(width={self.width}, "
            f"height={self.height}, channels={self.channels}, "
            f"color_space={self.color_space.value!r})"
        )
