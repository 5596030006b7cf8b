"""Tests for the per-channel blend modes.

Each mode is checked on single pixels with known backdrop and source values.
"""

import numpy as np
import pytest

from glyphwarp.blend import blend
from glyphwarp.params import BlendMode


def pixel(v, alpha=255):
    """Builds a 1x1 RGBA image with the same value in R, G and B."""
    return np.array([[[v, v, v, alpha]]], dtype=np.uint8)


def value(image):
    """Returns the red channel of a 1x1 image."""
    return int(image[0, 0, 0])


@pytest.mark.parametrize(
    "mode, backdrop, source, expected",
    [
        (BlendMode.OPACITY, 0, 255, 128),
        (BlendMode.OPACITY, 100, 100, 100),
        (BlendMode.LIGHTEN, 30, 200, 200),
        (BlendMode.LIGHTEN, 200, 30, 200),
        (BlendMode.SUBTRACT, 200, 50, 150),
        (BlendMode.SUBTRACT, 50, 200, 0),
        (BlendMode.SOFT_LIGHT, 0, 255, 0),
        (BlendMode.SOFT_LIGHT, 255, 0, 255),
        (BlendMode.SOFT_LIGHT, 51, 0, 10),  # 0.2 - 0.2 * 0.8 = 0.04
        (BlendMode.COLOR_BURN, 255, 0, 255),
        (BlendMode.COLOR_BURN, 100, 0, 0),
        (BlendMode.COLOR_BURN, 0, 255, 0),
        (BlendMode.COLOR_BURN, 153, 255, 153),  # 1 - 0.4 / 1
        (BlendMode.COLOR_BURN, 153, 51, 0),  # 1 - min(1, 0.4 / 0.2)
        (BlendMode.OVERLAY, 51, 255, 102),  # 2 * 0.2 * 1
        (BlendMode.OVERLAY, 204, 0, 153),  # 1 - 2 * 0.2 * 1
        (BlendMode.EXCLUSION, 255, 255, 0),
        (BlendMode.EXCLUSION, 0, 128, 128),
        (BlendMode.EXCLUSION, 255, 0, 255),
    ],
)
def test_blend_formulas(mode, backdrop, source, expected):
    """Tests each blend mode on known values."""
    result = blend(pixel(backdrop), pixel(source), mode)
    assert value(result) == expected


@pytest.mark.parametrize("backdrop", [0, 64, 127, 128, 200, 255])
def test_soft_light_neutral_source(backdrop):
    """Tests that a mid-grey soft-light source leaves the backdrop almost unchanged."""
    result = blend(pixel(backdrop), pixel(128), BlendMode.SOFT_LIGHT)
    assert abs(value(result) - backdrop) <= 1


def test_soft_light_dark_backdrop_branch():
    """Tests the polynomial branch used for backdrops below a quarter."""
    # b = 0.2, s = 1: D(b) = ((3.2 - 12) * 0.2 + 4) * 0.2 = 0.448
    result = blend(pixel(51), pixel(255), BlendMode.SOFT_LIGHT)
    assert value(result) == round((0.2 + (0.448 - 0.2)) * 255)


def test_channels_blend_independently():
    """Tests that each channel is blended on its own."""
    base = np.array([[[255, 0, 100, 255]]], dtype=np.uint8)
    layer = np.array([[[0, 255, 100, 255]]], dtype=np.uint8)
    result = blend(base, layer, BlendMode.LIGHTEN)
    assert result[0, 0].tolist() == [255, 255, 100, 255]


def test_opacity_mixes_alpha():
    """Tests that opacity mode mixes the alpha channel too."""
    result = blend(pixel(0, alpha=0), pixel(255, alpha=255), BlendMode.OPACITY)
    assert result[0, 0, 3] == 128


def test_opacity_weight():
    """Tests a custom opacity weight."""
    result = blend(pixel(0), pixel(200), BlendMode.OPACITY, opacity=0.25)
    assert value(result) == 50


@pytest.mark.parametrize("mode", [m for m in BlendMode if m != BlendMode.OPACITY])
def test_other_modes_composite_alpha_over(mode):
    """Tests that an opaque source makes the result opaque."""
    result = blend(pixel(100, alpha=0), pixel(100, alpha=255), mode)
    assert result[0, 0, 3] == 255


@pytest.mark.parametrize("mode", list(BlendMode))
def test_blend_keeps_shape_and_range(mode):
    """Tests that every mode returns a valid image of the input shape."""
    rng = np.random.default_rng(0)
    base = rng.integers(0, 256, (9, 13, 4), dtype=np.uint8)
    layer = rng.integers(0, 256, (9, 13, 4), dtype=np.uint8)
    result = blend(base, layer, mode)
    assert result.shape == (9, 13, 4)
    assert result.dtype == np.uint8


def test_blend_shape_mismatch():
    """Tests that images of different sizes cannot be blended."""
    with pytest.raises(ValueError):
        blend(np.zeros((2, 2, 4), np.uint8), np.zeros((3, 2, 4), np.uint8), BlendMode.LIGHTEN)
