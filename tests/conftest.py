"""Test configuration and fixtures for cl_image_tools.

All media is synthesized with Pillow into ``tmp_path``; nothing is downloaded.
"""

import os
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

ImageFactory = Callable[..., Path]


# ============================================================================
# Helpers
# ============================================================================


def striped_image(width: int, height: int, stripe: int) -> Image.Image:
    """Red / green / blue stripes along the longer axis.

    The first and last ``stripe`` pixels are red and blue, the middle is green.
    """
    img = Image.new("RGB", (width, height), color=(0, 255, 0))
    draw = ImageDraw.Draw(img)
    if width >= height:
        draw.rectangle([0, 0, stripe - 1, height - 1], fill=(255, 0, 0))
        draw.rectangle([width - stripe, 0, width - 1, height - 1], fill=(0, 0, 255))
    else:
        draw.rectangle([0, 0, width - 1, stripe - 1], fill=(255, 0, 0))
        draw.rectangle([0, height - stripe, width - 1, height - 1], fill=(0, 0, 255))
    return img


# ============================================================================
# Function-Scoped Fixtures
# ============================================================================


@pytest.fixture
def make_image(tmp_path: Path) -> ImageFactory:
    """Factory writing a solid color image and returning its path."""

    def _make(
        name: str,
        size: tuple[int, int] = (100, 50),
        fmt: str = "PNG",
        mode: str = "RGB",
        color: object = (73, 109, 137),
    ) -> Path:
        path = tmp_path / name
        Image.new(mode, size, color=color).save(path, fmt)  # type: ignore[arg-type]
        return path

    return _make


@pytest.fixture
def landscape_jpeg(make_image: ImageFactory) -> Path:
    """100x50 JPEG."""
    return make_image("landscape.jpg", (100, 50), "JPEG")


@pytest.fixture
def portrait_png(make_image: ImageFactory) -> Path:
    """50x100 PNG."""
    return make_image("portrait.png", (50, 100), "PNG")


@pytest.fixture
def square_png(make_image: ImageFactory) -> Path:
    """64x64 PNG."""
    return make_image("square.png", (64, 64), "PNG")


@pytest.fixture
def wide_png(make_image: ImageFactory) -> Path:
    """200x100 PNG."""
    return make_image("wide.png", (200, 100), "PNG")


@pytest.fixture
def make_striped(tmp_path: Path) -> ImageFactory:
    """Factory writing a striped PNG, see :func:`striped_image`."""

    def _make(name: str, size: tuple[int, int], stripe: int) -> Path:
        path = tmp_path / name
        striped_image(*size, stripe).save(path, "PNG")
        return path

    return _make


@pytest.fixture
def striped_png(make_striped: ImageFactory) -> Path:
    """100x50 PNG: 25px red, 50px green, 25px blue."""
    return make_striped("striped.png", (100, 50), 25)


@pytest.fixture
def rgba_png(make_image: ImageFactory) -> Path:
    """80x40 half transparent red PNG."""
    return make_image("rgba.png", (80, 40), "PNG", mode="RGBA", color=(255, 0, 0, 128))


@pytest.fixture
def transparent_gif(tmp_path: Path) -> Path:
    """60x30 palette GIF with a transparent index."""
    path = tmp_path / "transparent.gif"
    img = Image.new("P", (60, 30), color=1)
    img.putpalette([255, 255, 255, 255, 0, 0] + [0, 0, 0] * 254)
    draw = ImageDraw.Draw(img)
    draw.rectangle([0, 0, 29, 29], fill=0)
    img.save(path, "GIF", transparency=0)
    return path


@pytest.fixture
def xbm_image(tmp_path: Path) -> Path:
    """16x8 bilevel XBM."""
    path = tmp_path / "glyph.xbm"
    Image.new("1", (16, 8), color=1).save(path, "XBM")
    return path


@pytest.fixture
def bmp_image(make_image: ImageFactory) -> Path:
    """BMP: header readable by Pillow, not a supported type."""
    return make_image("legacy.bmp", (20, 10), "BMP")


@pytest.fixture
def synthetic_jpeg(tmp_path: Path) -> Path:
    """Generate synthetic test image using PIL."""
    output_path = tmp_path / "synthetic.jpg"

    img = Image.new("RGB", (400, 300), color=(73, 109, 137))
    draw = ImageDraw.Draw(img)

    for i in range(0, 400, 25):
        draw.line([(i, 0), (i, 300)], fill=(255, 255, 255), width=2)
    for i in range(0, 300, 25):
        draw.line([(0, i), (400, i)], fill=(255, 255, 255), width=2)

    draw.ellipse([150, 100, 250, 200], fill=(200, 100, 100))

    img.save(output_path, "JPEG", quality=95)
    return output_path


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    path = tmp_path / "notes.txt"
    _ = path.write_text("this is not an image\n", encoding="utf-8")
    return path


@pytest.fixture
def truncated_png(tmp_path: Path) -> Path:
    """PNG whose pixel data is cut in half."""
    full = tmp_path / "noise_full.png"
    Image.frombytes("RGB", (64, 64), os.urandom(64 * 64 * 3)).save(full, "PNG")
    data = full.read_bytes()

    path = tmp_path / "noise_truncated.png"
    _ = path.write_bytes(data[: len(data) // 2])
    return path


@pytest.fixture
def cdn_dir(tmp_path: Path) -> Path:
    return tmp_path / "cdn"
