import cupy as cp
import numpy as np
import pytest
from cupy.testing import assert_array_equal
from skimage import data

from cuequalize.config import AccumulationMode
from cuequalize.errors import ConfigurationError, DataError
from cuequalize.operations import build_histogram

ALL_BINS = [2, 4, 8, 16, 32, 64, 128, 256]


def reference_histogram(image, nbins):
    image = cp.asnumpy(image)
    index = (image.astype(np.uint32).ravel() * nbins) >> 8
    return np.bincount(index, minlength=nbins).astype(np.uint32)


@pytest.mark.parametrize('mode', ['global', 'local'])
@pytest.mark.parametrize('nbins', ALL_BINS)
def test_histogram_matches_reference(nbins, mode):
    image = cp.asarray(data.camera())
    hist = build_histogram(image, nbins, mode)
    assert hist.dtype == cp.uint32
    assert hist.shape == (nbins,)
    assert_array_equal(hist, reference_histogram(image, nbins))
    assert int(hist.sum()) == image.size


@pytest.mark.parametrize('nbins', [2, 16, 256])
def test_color_histogram_counts_every_channel(nbins):
    image = cp.asarray(data.astronaut())
    hist = build_histogram(image, nbins)
    assert int(hist.sum()) == image.shape[0] * image.shape[1] * 3


@pytest.mark.parametrize('block_size', [32, 128, 256, 1024])
@pytest.mark.parametrize('nbins', [8, 256])
def test_global_and_local_modes_agree(nbins, block_size):
    image = cp.asarray(data.astronaut())
    hist_global = build_histogram(image, nbins, AccumulationMode.GLOBAL,
                                  block_size=block_size)
    hist_local = build_histogram(image, nbins, AccumulationMode.LOCAL,
                                 block_size=block_size)
    assert_array_equal(hist_global, hist_local)


@pytest.mark.parametrize('mode', ['global', 'local'])
def test_one_sample_per_bin(mode):
    image = cp.array([0, 32, 64, 96, 128, 160, 192, 224], dtype=cp.uint8)
    hist = build_histogram(image, 8, mode)
    assert_array_equal(hist, cp.ones(8, dtype=cp.uint32))


def test_small_block_with_many_bins():
    # fewer threads per block than bins
    image = cp.arange(256, dtype=cp.uint8)
    hist = build_histogram(image, 256, 'local', block_size=16)
    assert_array_equal(hist, cp.ones(256, dtype=cp.uint32))


def test_partial_last_block():
    image = cp.full((1001,), 255, dtype=cp.uint8)
    hist = build_histogram(image, 4, 'local', block_size=256)
    assert_array_equal(hist, cp.array([0, 0, 0, 1001], dtype=cp.uint32))


def test_numpy_input():
    image = data.camera()
    hist = build_histogram(image, 64)
    assert isinstance(hist, cp.ndarray)
    assert_array_equal(hist, reference_histogram(image, 64))


def test_out_is_zeroed():
    image = cp.array([0, 255], dtype=cp.uint8)
    out = cp.full(2, 7, dtype=cp.uint32)
    hist = build_histogram(image, 2, out=out)
    assert hist is out
    assert_array_equal(out, cp.array([1, 1], dtype=cp.uint32))


def test_bad_out():
    image = cp.zeros(4, dtype=cp.uint8)
    with pytest.raises(DataError):
        build_histogram(image, 8, out=cp.zeros(4, dtype=cp.uint32))
    with pytest.raises(DataError):
        build_histogram(image, 8, out=cp.zeros(8, dtype=cp.int64))


def test_strided_out_is_rejected():
    image = cp.arange(0, 256, 32, dtype=cp.uint8)
    buf = cp.zeros(16, dtype=cp.uint32)
    with pytest.raises(DataError):
        build_histogram(image, 8, out=buf[::2])
    assert_array_equal(buf, cp.zeros(16, dtype=cp.uint32))


def test_host_out_is_rejected():
    image = cp.zeros(4, dtype=cp.uint8)
    out = np.full(8, 7, dtype=np.uint32)
    with pytest.raises(TypeError):
        build_histogram(image, 8, out=out)
    np.testing.assert_array_equal(out, np.full(8, 7, dtype=np.uint32))


@pytest.mark.parametrize('mode', ['global', 'local'])
def test_empty_samples(mode):
    out = cp.full(8, 7, dtype=cp.uint32)
    hist = build_histogram(cp.empty(0, dtype=cp.uint8), 8, mode, out=out)
    assert hist is out
    assert_array_equal(hist, cp.zeros(8, dtype=cp.uint32))


@pytest.mark.parametrize('nbins', [0, 1, 3, 100, 512, 2.0, True])
def test_invalid_bin_count(nbins):
    image = cp.zeros(4, dtype=cp.uint8)
    with pytest.raises(ConfigurationError):
        build_histogram(image, nbins)


def test_invalid_mode():
    image = cp.zeros(4, dtype=cp.uint8)
    with pytest.raises(ValueError):
        build_histogram(image, 8, 'shared')


def test_invalid_dtype():
    with pytest.raises(DataError):
        build_histogram(cp.zeros(4, dtype=cp.float32), 8)
    with pytest.raises(TypeError):
        build_histogram([0, 1, 2], 8)
