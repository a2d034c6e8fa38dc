# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Device-side execution timing of pipeline stages."""

import logging
import types

import cupy

logger = logging.getLogger(__name__)

NS_PER_MS = 1_000_000


class TimingReport:
    """Per-stage device execution times in nanoseconds, in stage order."""

    def __init__(self):
        self._stages = {}

    def add(self, stage, duration_ns):
        if stage in self._stages:
            raise ValueError(f"stage {stage!r} already timed")
        self._stages[stage] = int(duration_ns)

    @property
    def stages(self):
        return types.MappingProxyType(self._stages)

    @property
    def total(self):
        return sum(self._stages.values())

    def __getitem__(self, stage):
        return self._stages[stage]

    def __contains__(self, stage):
        return stage in self._stages

    def __iter__(self):
        return iter(self._stages)

    def __len__(self):
        return len(self._stages)

    def format(self):
        lines = [
            f"{stage} kernel execution time [ns]: {duration}"
            for stage, duration in self._stages.items()
        ]
        lines.append(f"Total execution time [ns]: {self.total}")
        return "\n".join(lines)

    def __repr__(self):
        return f"{type(self).__name__}({dict(self._stages)!r})"


class StageTimer:
    """Time the device work enqueued inside a ``with`` block.

    A start event is recorded on entry and an end event on exit. The elapsed
    time is read only after the end event has completed, then added to
    `report` under `stage`. Nothing is recorded when the block raises.

    Examples
    --------
    >>> report = TimingReport()
    >>> with StageTimer("histogram", report):
    ...     kernel(grid, block, args)
    """

    def __init__(self, stage, report=None, stream=None):
        self.stage = stage
        self.report = report
        self.stream = stream
        self.elapsed_ns = None
        self._start = None
        self._end = None

    def __enter__(self):
        self._start = cupy.cuda.Event()
        self._end = cupy.cuda.Event()
        self._start.record(self.stream)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self._end.record(self.stream)
        if exc_type is not None:
            return False
        self._end.synchronize()
        elapsed_ms = cupy.cuda.get_elapsed_time(self._start, self._end)
        self.elapsed_ns = int(round(elapsed_ms * NS_PER_MS))
        logger.debug("%s: %d ns", self.stage, self.elapsed_ns)
        if self.report is not None:
            self.report.add(self.stage, self.elapsed_ns)
        return False
