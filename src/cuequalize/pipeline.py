# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Histogram equalization pipeline.

The stages run strictly in order on the stream of a `DeviceContext`::

    [color_transform] -> histogram -> scan -> normalize -> remap
        -> [color_restore]

Colour images are equalized on the luma channel of their YCbCr
representation. Each stage is timed on the device and the times are
collected in a `TimingReport`.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any

import cupy
import numpy as np
from cupy.cuda.compiler import CompileException

from .color import rgb2ycbcr, ycbcr2rgb
from .config import EqualizationConfig
from .context import DeviceContext
from .errors import DeviceError, EqualizationError, ExecutionError
from .image import ColorSpace, PixelBuffer
from .operations import build_histogram, normalize_histogram, remap, scan
from .timing import StageTimer, TimingReport

logger = logging.getLogger(__name__)

_CUDA_ERRORS = (
    cupy.cuda.runtime.CUDARuntimeError,
    cupy.cuda.driver.CUDADriverError,
    cupy.cuda.memory.OutOfMemoryError,
)


class PipelineState(enum.Enum):
    CONFIGURED = "configured"
    COLOR_TRANSFORMED = "color_transformed"
    HISTOGRAM_BUILT = "histogram_built"
    SCANNED = "scanned"
    NORMALIZED = "normalized"
    REMAPPED = "remapped"
    COLOR_RESTORED = "color_restored"
    DONE = "done"


@dataclass(frozen=True)
class EqualizationResult:
    """Output of one pipeline run.

    ``image`` is the equalized `PixelBuffer`, on the host if the input was on
    the host. ``histogram``, ``cumulative`` and ``lookup`` are host copies of
    the intermediate tables.
    """

    image: PixelBuffer
    timings: TimingReport
    histogram: Any
    cumulative: Any
    lookup: Any


class HistogramEqualizer:
    """Run histogram equalization with a fixed configuration.

    Parameters
    ----------
    config : EqualizationConfig, optional
        Run options. The defaults are used when omitted.
    context : DeviceContext, optional
        Device and stream to run on. Device 0 is used when omitted.

    Examples
    --------
    >>> equalizer = HistogramEqualizer(EqualizationConfig(bin_count=64))
    >>> result = equalizer.equalize(PixelBuffer(image))
    >>> result.timings.total
    """

    def __init__(self, config=None, context=None):
        if config is None:
            config = EqualizationConfig()
        elif not isinstance(config, EqualizationConfig):
            raise TypeError("config must be an EqualizationConfig")
        self.config = config
        self.context = context if context is not None else DeviceContext()
        self.state = PipelineState.CONFIGURED

    def _run_stage(self, stage, next_state, report, func, *args, **kwargs):
        try:
            with StageTimer(stage, report, stream=self.context.stream):
                output = func(*args, **kwargs)
        except EqualizationError:
            logger.error("[cuequalize] stage '%s' failed", stage,
                         exc_info=True)
            raise
        except _CUDA_ERRORS as err:
            logger.error("[cuequalize] stage '%s' failed", stage,
                         exc_info=True)
            raise ExecutionError(stage, err) from err
        except CompileException as err:
            logger.error("[cuequalize] stage '%s' failed to compile", stage,
                         exc_info=True)
            message = f"stage '{stage}' failed to compile ({err.name})"
            raise DeviceError(message, log=err.get_message()) from err
        self.state = next_state
        return output

    def _download(self, stage, array):
        try:
            return cupy.asnumpy(array, stream=self.context.stream)
        except _CUDA_ERRORS as err:
            logger.error("[cuequalize] transfer after '%s' failed", stage,
                         exc_info=True)
            raise ExecutionError(stage, err) from err

    def equalize(self, image):
        """Equalize `image` and return an `EqualizationResult`.

        `image` may be a `PixelBuffer` or a uint8 array of shape ``(H, W)``
        or ``(H, W, 3)`` (taken as RGB). Any failure aborts the run and is
        raised; no partial image is returned.
        """
        if not isinstance(image, PixelBuffer):
            image = PixelBuffer(image)

        config = self.config
        color = image.is_color
        convert = color and image.color_space is ColorSpace.RGB
        nbins = config.bin_count
        report = TimingReport()
        self.state = PipelineState.CONFIGURED
        logger.info(
            "equalizing %r with %d bins, %s accumulation, %s scan",
            image, nbins, config.accumulation_mode.value,
            config.scan_algorithm.value,
        )

        with self.context:
            self.context.compile()
            try:
                samples = cupy.asarray(image.data)
            except _CUDA_ERRORS as err:
                raise ExecutionError("upload", err) from err

            if convert:
                samples = self._run_stage(
                    "color_transform", PipelineState.COLOR_TRANSFORMED,
                    report, rgb2ycbcr, samples,
                )

            histogram = self._run_stage(
                "histogram", PipelineState.HISTOGRAM_BUILT, report,
                build_histogram, samples, nbins, config.accumulation_mode,
                block_size=config.block_size,
            )
            histogram_host = self._download("histogram", histogram)
            logger.debug("histogram: %s", histogram_host)

            cumulative = self._run_stage(
                "scan", PipelineState.SCANNED, report,
                scan, histogram, config.scan_algorithm,
            )
            cumulative_host = self._download("scan", cumulative)
            logger.debug("cumulative histogram: %s", cumulative_host)

            lookup = self._run_stage(
                "normalize", PipelineState.NORMALIZED, report,
                normalize_histogram, cumulative, samples.size, color=color,
            )
            lookup_host = self._download("normalize", lookup)
            logger.debug("lookup table: %s", lookup_host)

            equalized = self._run_stage(
                "remap", PipelineState.REMAPPED, report,
                remap, samples, lookup, nbins, color=color,
                block_size=config.block_size,
            )

            last_stage = "remap"
            if convert:
                equalized = self._run_stage(
                    "color_restore", PipelineState.COLOR_RESTORED, report,
                    ycbcr2rgb, equalized,
                )
                last_stage = "color_restore"

            if not image.on_device:
                equalized = self._download(last_stage, equalized)
            else:
                self.context.synchronize()

        self.state = PipelineState.DONE
        logger.info("total execution time [ns]: %d", report.total)
        return EqualizationResult(
            image=PixelBuffer(equalized, color_space=image.color_space),
            timings=report,
            histogram=histogram_host,
            cumulative=cumulative_host,
            lookup=lookup_host,
        )


def equalize_hist(image, config=None, context=None, **options):
    """Histogram equalization of an 8-bit grey or RGB image.

    Parameters
    ----------
    image : PixelBuffer, numpy.ndarray or cupy.ndarray
        uint8 image of shape ``(H, W)`` or ``(H, W, 3)``.
    config : EqualizationConfig, optional
        Run options. Mutually exclusive with `options`.
    context : DeviceContext, optional
        Device and stream to run on.
    **options
        ``bin_count``, ``accumulation_mode``, ``scan_algorithm`` and
        ``block_size`` used to build an `EqualizationConfig`.

    Returns
    -------
    out : numpy.ndarray or cupy.ndarray
        The equalized samples, of the same shape and array type as `image`.
    timings : TimingReport
        Device execution time of every stage, in nanoseconds.
    """
    if config is not None and options:
        raise TypeError("pass either config or keyword options, not both")
    if config is None:
        config = EqualizationConfig.from_options(**options)
    result = HistogramEqualizer(config, context).equalize(image)
    out = result.image.data
    if isinstance(image, (np.ndarray, cupy.ndarray)) and (
        out.shape != image.shape
    ):
        out = out.reshape(image.shape)
    return out, result.timings
