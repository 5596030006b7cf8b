"""Layout engine: measures text and draws it onto a correctly sized canvas.

The layout is fully deterministic. Lines are measured with the face's
metrics, the canvas is sized from the widest line plus a 10% margin, and the
whole block is centred horizontally using the widest line as the reference,
so shorter lines stay left-aligned inside the centred block.
"""

import math
from typing import NamedTuple

import numpy as np
from PIL import Image, ImageDraw

from glyphwarp.exceptions import EmptyInputError

BACKGROUND = (255, 255, 255, 255)
INK = (0, 0, 0, 255)

LINE_HEIGHT_FACTOR = 1.18
BASELINE_FACTOR = 0.94


class TextLayout(NamedTuple):
    """The measured geometry of a block of text."""

    lines: list
    widths: list
    widest: int
    line_height: int
    width: int
    height: int
    x: float
    baselines: list


def line_height(config):
    """Returns the pixel distance between consecutive baselines."""
    return math.ceil(config.pixel_size * LINE_HEIGHT_FACTOR)


def first_baseline(config):
    """Returns the y coordinate of the first line's baseline."""
    return math.ceil(config.pixel_size * BASELINE_FACTOR)


def layout_lines(text, face):
    """Measures `text` and computes where each line goes.

    Args:
        text (str): The text to lay out. Lines are separated by "\\n" and may
            be empty.
        face (GlyphFace): The typeface used for measurement.

    Returns:
        TextLayout: The canvas size, the shared x offset and the baselines.

    Raises:
        EmptyInputError: If `text` is empty.
    """
    if not text:
        raise EmptyInputError()

    lines = text.split("\n")
    widths = [face.measure(line) for line in lines]
    widest = max(widths)

    step = line_height(face.config)
    width = widest * 11 // 10  # 10% extra for margins
    height = len(lines) * step

    top = first_baseline(face.config)
    baselines = [top + i * step for i in range(len(lines))]

    return TextLayout(
        lines=lines,
        widths=widths,
        widest=widest,
        line_height=step,
        width=width,
        height=height,
        x=(width - widest) / 2,
        baselines=baselines,
    )


def draw_unhinted(draw, xy, line, face):
    """Draws `line` glyph by glyph, advancing the pen by the unhinted advances.

    Pillow always lays out runs with hinted advances; placing each glyph
    ourselves keeps the ink inside the width `GlyphFace.measure` reported.
    """
    x, y = xy
    for char, advance in zip(line, face.unhinted_advances(line)):
        if not char.isspace():
            draw.text((x, y), char, fill=INK, font=face.font, anchor="ls")
        x += advance


def render(text, face):
    """Draws `text` in black on a white RGBA canvas.

    Args:
        text (str): The text to render.
        face (GlyphFace): The typeface to draw with.

    Returns:
        np.ndarray: The canvas as a (height, width, 4) uint8 RGBA array.

    Raises:
        EmptyInputError: If `text` is empty. No canvas is allocated.
    """
    layout = layout_lines(text, face)

    image = Image.new("RGBA", (layout.width, layout.height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    for line, y in zip(layout.lines, layout.baselines):
        if not line:
            continue
        if face.config.hinting == "none":
            draw_unhinted(draw, (layout.x, y), line, face)
        else:
            # The fractional part of x is kept for subpixel pen positioning.
            draw.text((layout.x, y), line, fill=INK, font=face.font, anchor="ls")

    return np.array(image)
