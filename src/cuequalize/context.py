# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""CUDA device, command stream and compiled kernels used by the pipeline."""

import logging

import cupy
from cupy.cuda.compiler import CompileException

from .errors import DeviceError
from .kernel.cuda_kernel_source import cuda_kernel_code

logger = logging.getLogger(__name__)


def compile_module(code, options=()):
    """Compile CUDA source into a ``cupy.RawModule``.

    Raises DeviceError carrying the NVRTC log if compilation fails.
    """
    module = cupy.RawModule(code=code, options=tuple(options))
    try:
        module.compile()
    except CompileException as err:
        logger.error("[cuequalize] kernel build failed", exc_info=True)
        raise DeviceError(
            f"failed to compile CUDA kernels ({err.name})",
            log=err.get_message(),
        ) from err
    return module


@cupy.memoize(for_each_device=True)
def _get_kernel_module():
    return compile_module(cuda_kernel_code)


def get_kernel(name):
    """Return the compiled entry point `name` for the current device."""
    return _get_kernel_module().get_function(name)


def list_devices():
    """Return ``(device_id, name)`` for every visible CUDA device."""
    try:
        count = cupy.cuda.runtime.getDeviceCount()
    except cupy.cuda.runtime.CUDARuntimeError as err:
        raise DeviceError(f"unable to enumerate CUDA devices: {err}") from err
    devices = []
    for device_id in range(count):
        props = cupy.cuda.runtime.getDeviceProperties(device_id)
        name = props["name"]
        if isinstance(name, bytes):
            name = name.decode()
        devices.append((device_id, name))
    return devices


class DeviceContext:
    """A CUDA device together with the stream all stages are queued on.

    The stream plays the part of a single in-order command queue: kernels
    launched on it retire in submission order, so a stage never reads a
    buffer before the previous stage finished writing it.

    Parameters
    ----------
    device_id : int, optional
        CUDA device ordinal.
    stream : cupy.cuda.Stream, optional
        Stream to enqueue work on. A new blocking stream is created on the
        device when omitted.

    Examples
    --------
    >>> with DeviceContext(0) as ctx:
    ...     ctx.compile()
    """

    def __init__(self, device_id=0, stream=None):
        try:
            self.device = cupy.cuda.Device(device_id)
            # touching an attribute validates the ordinal
            self.compute_capability = self.device.compute_capability
            with self.device:
                self.stream = (
                    stream if stream is not None else cupy.cuda.Stream()
                )
        except cupy.cuda.runtime.CUDARuntimeError as err:
            logger.error("[cuequalize] " + str(err), exc_info=True)
            raise DeviceError(
                f"unable to acquire CUDA device {device_id}: {err}"
            ) from err

    @property
    def device_id(self):
        return self.device.id

    def compile(self):
        """Build the kernel module on this device ahead of the first launch."""
        with self.device:
            return _get_kernel_module()

    def synchronize(self):
        self.stream.synchronize()

    def __enter__(self):
        self.device.__enter__()
        self.stream.__enter__()
        return self

    def __exit__(self, *exc_info):
        self.stream.__exit__(*exc_info)
        self.device.__exit__(*exc_info)
        return False

    def __repr__(self):
        return (
            f"{type(self).__name__}(device_id={self.device_id}, "
            f"compute_capability={self.compute_capability!r})"
        )
