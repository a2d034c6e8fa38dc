# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by the equalization pipeline."""


class EqualizationError(RuntimeError):
    """Base class of all errors raised by cuequalize."""


class ConfigurationError(EqualizationError, ValueError):
    """An invalid bin count, accumulation mode, scan algorithm or block size."""


class DataError(EqualizationError, ValueError):
    """A pixel buffer inconsistent with its declared geometry."""


class DeviceError(EqualizationError):
    """The CUDA device, stream or kernel module could not be acquired.

    ``log`` holds the compiler diagnostic text when kernel compilation
    failed, and is ``None`` otherwise.
    """

    def __init__(self, message, log=None):
        super().__init__(message)
        self.log = log

    def __str__(self):
        message = super().__str__()
        if self.log:
            message += "\n" + self.log
        return message


class ExecutionError(EqualizationError):
    """A kernel dispatch or a transfer failed on the device.

    ``stage`` names the pipeline stage that failed and ``cause`` is the
    error reported by CUDA.
    """

    def __init__(self, stage, cause):
        super().__init__(f"stage '{stage}' failed: {cause}")
        self.stage = stage
        self.cause = cause
