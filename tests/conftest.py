"""Shared fixtures for the glyphwarp tests.

The tests never depend on fonts installed on the system. Instead, a small but
real TrueType font is built with fontTools: every ASCII letter and digit is a
solid box with a fixed advance, which makes widths easy to predict.
"""

import string

import numpy as np
import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphwarp.config import RenderConfig
from glyphwarp.fonts import discover_fonts, load_face

UNITS_PER_EM = 1000
ADVANCE = 600
BOX_LEFT = 50
BOX_TOP = 700
CHARSET = string.ascii_letters + string.digits


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((BOX_LEFT, 0))
    pen.lineTo((BOX_LEFT, BOX_TOP))
    pen.lineTo((ADVANCE - BOX_LEFT, BOX_TOP))
    pen.lineTo((ADVANCE - BOX_LEFT, 0))
    pen.closePath()
    return pen.glyph()


def build_box_font(path, family="Boxes"):
    """Writes a TrueType font of box glyphs covering `CHARSET` and space."""
    names = {c: f"uni{ord(c):04X}" for c in CHARSET}
    glyph_order = [".notdef", "space"] + list(names.values())

    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({ord(" "): "space", **{ord(c): name for c, name in names.items()}})

    glyphs = {name: _box_glyph() for name in glyph_order}
    glyphs["space"] = TTGlyphPen(None).glyph()
    fb.setupGlyf(glyphs)

    metrics = {name: (ADVANCE, BOX_LEFT) for name in glyph_order}
    metrics["space"] = (ADVANCE, 0)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.setupMaxp()
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def font_path(tmp_path_factory):
    """The path of a generated box font."""
    return build_box_font(tmp_path_factory.mktemp("font") / "boxes.ttf")


@pytest.fixture(scope="session")
def fonts_dir(tmp_path_factory):
    """A font directory with two fonts, one upper-case suffix, and a stray text file."""
    directory = tmp_path_factory.mktemp("fonts")
    build_box_font(directory / "boxes.ttf")
    (directory / "nested").mkdir()
    build_box_font(directory / "nested" / "BOXES2.TTF", family="Boxes Two")
    (directory / "readme.txt").write_text("not a font")
    return directory


@pytest.fixture(autouse=True)
def clear_font_cache():
    """Forgets memoized font discoveries between tests."""
    discover_fonts.cache_clear()
    yield
    discover_fonts.cache_clear()


@pytest.fixture
def unhinted_face(font_path):
    """A face measured with unhinted advances: 600 units at 72px is 43.2px."""
    return load_face(font_path, RenderConfig(size=72, dpi=72, hinting="none"))


@pytest.fixture
def text_canvas():
    """A small white RGBA canvas with a black block in it."""
    canvas = np.full((30, 48, 4), 255, dtype=np.uint8)
    canvas[8:22, 10:38, :3] = 0
    return canvas
