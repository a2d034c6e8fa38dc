import dataclasses

import pytest

from cuequalize.config import (
    AccumulationMode,
    EqualizationConfig,
    ScanAlgorithm,
    validate_bin_count,
)
from cuequalize.errors import ConfigurationError


def test_defaults():
    config = EqualizationConfig()
    assert config.bin_count == 256
    assert config.accumulation_mode is AccumulationMode.GLOBAL
    assert config.scan_algorithm is ScanAlgorithm.BLELLOCH
    assert config.block_size == 256


@pytest.mark.parametrize('nbins', [2, 4, 8, 16, 32, 64, 128, 256])
def test_valid_bin_counts(nbins):
    assert validate_bin_count(nbins) == nbins
    assert EqualizationConfig(bin_count=nbins).bin_count == nbins


@pytest.mark.parametrize('nbins', [-2, 0, 1, 6, 255, 512, 8.0, '8', None])
def test_invalid_bin_counts(nbins):
    with pytest.raises(ConfigurationError):
        EqualizationConfig(bin_count=nbins)


@pytest.mark.parametrize('value, expected', [
    ('global', AccumulationMode.GLOBAL),
    ('LOCAL', AccumulationMode.LOCAL),
    (' local ', AccumulationMode.LOCAL),
    (AccumulationMode.LOCAL, AccumulationMode.LOCAL),
])
def test_accumulation_mode_names(value, expected):
    assert EqualizationConfig(accumulation_mode=value).accumulation_mode \
        is expected


@pytest.mark.parametrize('value, expected', [
    ('hillis_steele', ScanAlgorithm.HILLIS_STEELE),
    ('Hillis-Steele', ScanAlgorithm.HILLIS_STEELE),
    ('hs', ScanAlgorithm.HILLIS_STEELE),
    ('blelloch', ScanAlgorithm.BLELLOCH),
    ('bl', ScanAlgorithm.BLELLOCH),
    (ScanAlgorithm.BLELLOCH, ScanAlgorithm.BLELLOCH),
])
def test_scan_algorithm_names(value, expected):
    assert EqualizationConfig(scan_algorithm=value).scan_algorithm \
        is expected


def test_unrecognized_names():
    with pytest.raises(ConfigurationError, match="accumulation mode"):
        EqualizationConfig(accumulation_mode='texture')
    with pytest.raises(ConfigurationError, match="scan algorithm"):
        EqualizationConfig(scan_algorithm='sklansky')


@pytest.mark.parametrize('block_size', [0, 2048, 64.0, True])
def test_invalid_block_size(block_size):
    with pytest.raises(ConfigurationError):
        EqualizationConfig(block_size=block_size)


def test_config_is_immutable():
    config = EqualizationConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.bin_count = 16


def test_config_is_hashable():
    a = EqualizationConfig(bin_count=16, scan_algorithm='hs')
    b = EqualizationConfig(bin_count=16,
                           scan_algorithm=ScanAlgorithm.HILLIS_STEELE)
    assert a == b
    assert hash(a) == hash(b)


def test_from_options():
    config = EqualizationConfig.from_options(
        bin_count='64', accumulation_mode='local', scan_algorithm=None
    )
    assert config.bin_count == 64
    assert config.accumulation_mode is AccumulationMode.LOCAL
    assert config.scan_algorithm is ScanAlgorithm.BLELLOCH


def test_from_options_errors():
    with pytest.raises(ConfigurationError, match="unrecognized option"):
        EqualizationConfig.from_options(bins=64)
    with pytest.raises(ConfigurationError):
        EqualizationConfig.from_options(bin_count='sixty-four')


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        EqualizationConfig(bin_count=3)
