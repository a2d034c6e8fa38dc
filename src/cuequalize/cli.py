#
# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
#

"""Command line interface of cuequalize."""

import logging

import click
import numpy as np

from .config import MAX_BINS, MIN_BINS, EqualizationConfig
from .errors import EqualizationError

BIN_CHOICES = [
    str(1 << n) for n in range(1, 9) if MIN_BINS <= 1 << n <= MAX_BINS
]

_GREY_MODES = ("1", "L", "I", "I;16", "F")


def load_image(path):
    """Read an image file into a `PixelBuffer`.

    Grey images (PGM and other single channel formats) give a 1 channel
    buffer, everything else is converted to 8-bit RGB.
    """
    from PIL import Image

    from .image import PixelBuffer

    with Image.open(path) as img:
        if img.mode in _GREY_MODES:
            img = img.convert("L")
        else:
            img = img.convert("RGB")
        return PixelBuffer(np.asarray(img))


@click.group()
def main():
    """GPU histogram equalization"""
    pass


@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.option("--bins", type=click.Choice(BIN_CHOICES), default="256",
              show_default=True, help="Number of histogram bins.")
@click.option("--memory", type=click.Choice(["global", "local"]),
              default="global", show_default=True,
              help="Accumulate the histogram in global or local memory.")
@click.option("--scan", type=click.Choice(["blelloch", "hillis-steele"]),
              default="blelloch", show_default=True,
              help="Prefix-sum algorithm of the cumulative histogram.")
@click.option("--device", type=int, default=0, show_default=True,
              help="CUDA device ordinal.")
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def run(image, bins, memory, scan, device, verbose):
    """Equalize IMAGE and print its histograms and kernel timings"""
    from .context import DeviceContext
    from .pipeline import HistogramEqualizer

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

    try:
        config = EqualizationConfig.from_options(
            bin_count=int(bins), accumulation_mode=memory,
            scan_algorithm=scan,
        )
        pixels = load_image(image)
        context = DeviceContext(device)
        click.echo(f"Running on device {context.device_id}")
        result = HistogramEqualizer(config, context).equalize(pixels)
    except (EqualizationError, OSError) as err:
        raise click.ClickException(str(err)) from err

    click.echo(f"Image: {pixels!r}")
    click.echo("Histogram:")
    click.echo(" ".join(map(str, result.histogram)))
    click.echo("Cumulative Histogram:")
    click.echo(" ".join(map(str, result.cumulative)))
    click.echo("Normalised Histogram:")
    click.echo(" ".join(map(str, result.lookup)))
    click.echo(result.timings.format())


@main.command()
def devices():
    """List the visible CUDA devices"""
    from .context import list_devices

    try:
        found = list_devices()
    except EqualizationError as err:
        raise click.ClickException(str(err)) from err
    if not found:
        click.echo("No CUDA device found")
    for device_id, name in found:
        click.echo(f"{device_id}: {name}")
