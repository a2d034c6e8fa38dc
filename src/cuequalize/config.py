# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Run configuration of the equalization pipeline."""

import enum
import numbers
from dataclasses import dataclass

from .errors import ConfigurationError

MIN_BINS = 2
MAX_BINS = 256
MAX_BLOCK_SIZE = 1024


class AccumulationMode(enum.Enum):
    """Where the histogram counters are accumulated."""

    GLOBAL = "global"
    LOCAL = "local"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class ScanAlgorithm(enum.Enum):
    """Prefix-sum algorithm used to build the cumulative histogram."""

    HILLIS_STEELE = "hillis_steele"
    BLELLOCH = "blelloch"

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        name = value.strip().lower().replace("-", "_")
        return {
            "hs": cls.HILLIS_STEELE,
            "hillis_steele": cls.HILLIS_STEELE,
            "bl": cls.BLELLOCH,
            "blelloch": cls.BLELLOCH,
        }.get(name)


def validate_bin_count(bin_count):
    """Return `bin_count` as an int, or raise ConfigurationError.

    The number of bins must be a power of two in ``[2, 256]``.
    """
    if isinstance(bin_count, bool) or not isinstance(
        bin_count, numbers.Integral
    ):
        raise ConfigurationError(
            f"bin_count must be an integer, got {bin_count!r}"
        )
    bin_count = int(bin_count)
    if not MIN_BINS <= bin_count <= MAX_BINS:
        raise ConfigurationError(
            f"bin_count must be in [{MIN_BINS}, {MAX_BINS}], got {bin_count}"
        )
    if bin_count & (bin_count - 1):
        raise ConfigurationError(
            f"bin_count must be a power of two, got {bin_count}"
        )
    return bin_count


def _coerce(enum_type, value, option):
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_type)
        raise ConfigurationError(
            f"unrecognized {option} {value!r}, expected one of: {choices}"
        ) from None


@dataclass(frozen=True)
class EqualizationConfig:
    """Immutable options of one equalization run.

    Parameters
    ----------
    bin_count : int, optional
        Number of histogram bins, a power of two in ``[2, 256]``.
    accumulation_mode : AccumulationMode or str, optional
        ``'global'`` accumulates directly into the device histogram,
        ``'local'`` accumulates per block in shared memory first.
    scan_algorithm : ScanAlgorithm or str, optional
        ``'blelloch'`` (``'bl'``) or ``'hillis_steele'`` (``'hs'``).
    block_size : int, optional
        Threads per block for the per-sample kernels.
    """

    bin_count: int = MAX_BINS
    accumulation_mode: AccumulationMode = AccumulationMode.GLOBAL
    scan_algorithm: ScanAlgorithm = ScanAlgorithm.BLELLOCH
    block_size: int = 256

    def __post_init__(self):
        # frozen dataclass: normalized values are set through object
        object.__setattr__(
            self, "bin_count", validate_bin_count(self.bin_count)
        )
        object.__setattr__(
            self,
            "accumulation_mode",
            _coerce(AccumulationMode, self.accumulation_mode,
                    "accumulation mode"),
        )
        object.__setattr__(
            self,
            "scan_algorithm",
            _coerce(ScanAlgorithm, self.scan_algorithm, "scan algorithm"),
        )
        block_size = self.block_size
        if (
            isinstance(block_size, bool)
            or not isinstance(block_size, numbers.Integral)
            or not 1 <= block_size <= MAX_BLOCK_SIZE
        ):
            raise ConfigurationError(
                f"block_size must be an integer in [1, {MAX_BLOCK_SIZE}], "
                f"got {block_size!r}"
            )
        object.__setattr__(self, "block_size", int(block_size))

    @classmethod
    def from_options(cls, **options):
        """Build a configuration from loosely typed options.

        Unknown option names raise ConfigurationError. ``None`` values fall
        back to the defaults.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(options) - known
        if unknown:
            raise ConfigurationError(
                f"unrecognized option(s): {', '.join(sorted(unknown))}"
            )
        kwargs = {k: v for k, v in options.items() if v is not None}
        if isinstance(kwargs.get("bin_count"), str):
            try:
                kwargs["bin_count"] = int(kwargs["bin_count"])
            except ValueError:
                raise ConfigurationError(
                    f"bin_count must be an integer, got "
                    f"{options['bin_count']!r}"
                ) from None
        return cls(**kwargs)
