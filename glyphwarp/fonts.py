"""Typeface discovery and loading.

Fonts are discovered once per directory and the resulting list is reused for
every render. A `GlyphFace` couples a Pillow `FreeTypeFont`, used to draw and
to measure hinted advances, with the fontTools `TTFont` of the same file,
used to measure unhinted advances and to check character coverage.
"""

import io
import struct
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from PIL import ImageFont
from fontTools.ttLib import TTFont, TTLibError
from loguru import logger

from glyphwarp.config import RenderConfig
from glyphwarp.exceptions import FontLoadError, FontParseError

FONT_SUFFIXES = {".ttf", ".ttc", ".otf"}


def is_font_file(path):
    """Checks whether a path has a recognized font file extension (case-insensitive)."""
    return Path(path).suffix.lower() in FONT_SUFFIXES


@lru_cache(maxsize=None)
def discover_fonts(fonts_dir):
    """Lists all font files below a directory.

    The result is memoized per directory, so repeated calls never rescan the
    filesystem. The returned tuple is immutable and safe to share between
    threads.

    Args:
        fonts_dir (str or Path): The directory to scan recursively.

    Returns:
        tuple[Path, ...]: The sorted paths of all font files found.

    Raises:
        FontLoadError: If the directory cannot be read or holds no fonts.
    """
    fonts_dir = Path(fonts_dir)
    if not fonts_dir.is_dir():
        raise FontLoadError(f"Font directory not found: {fonts_dir}", path=fonts_dir)

    try:
        font_paths = sorted(path for path in fonts_dir.glob("**/*") if path.is_file() and is_font_file(path))
    except OSError as e:
        raise FontLoadError(f"Error reading font directory {fonts_dir}: {e}", path=fonts_dir) from e

    if not font_paths:
        raise FontLoadError(f"No font files found in {fonts_dir}", path=fonts_dir)

    logger.debug(f"Discovered {len(font_paths)} fonts in {fonts_dir}")
    return tuple(font_paths)


def has_glyph(font, glyph):
    """Checks if a font has a glyph for a specific character.

    Args:
        font (TTFont): An instance of a `fontTools.ttLib.TTFont` object.
        glyph (str): The character to check for. Must be a single character.

    Returns:
        True if a glyph for the character is found in any of the font's
        cmap tables, False otherwise.
    """
    for table in font["cmap"].tables:
        if ord(glyph) in table.cmap:
            return True
    return False


@dataclass(frozen=True)
class GlyphFace:
    """A loaded typeface bound to its rendering parameters.

    Attributes:
        path (Path): The font file the face was loaded from.
        config (RenderConfig): The size, DPI and hinting mode.
        font (ImageFont.FreeTypeFont): The Pillow font at the configured pixel size.
        ttfont (TTFont): The parsed font tables.
    """

    path: Path
    config: RenderConfig
    font: ImageFont.FreeTypeFont
    ttfont: TTFont

    @property
    def pixel_size(self):
        return self.config.pixel_size

    def measure(self, text):
        """Measures the advance width of a run of text, rounded to whole pixels.

        With `hinting="none"` the layout also places each glyph at its unhinted
        pen position, so the measured width matches the drawn one.
        """
        if self.config.hinting == "full":
            width = self.font.getlength(text)
        else:
            width = self.unhinted_length(text)
        # Round half up, as fixed-point pen coordinates do.
        return int(width + 0.5)

    def unhinted_advances(self, text):
        """Returns the design-unit advance of each character of `text`, scaled to pixels."""
        cmap = self.ttfont.getBestCmap() or {}
        hmtx = self.ttfont["hmtx"]
        scale = self.pixel_size / self.ttfont["head"].unitsPerEm
        return [hmtx[cmap.get(ord(c), ".notdef")][0] * scale for c in text]

    def unhinted_length(self, text):
        """Sums the unhinted advances of `text`."""
        return sum(self.unhinted_advances(text))

    def missing_chars(self, text):
        """Returns the set of non-whitespace characters of `text` the font cannot draw."""
        return {c for c in text if not c.isspace() and not has_glyph(self.ttfont, c)}


def load_face(font_path, config=None):
    """Loads a typeface from disk.

    Args:
        font_path (str or Path): The font file to load. For font collections
            the first face is used.
        config (RenderConfig, optional): The rendering parameters. Defaults to
            `RenderConfig()`.

    Returns:
        GlyphFace: The loaded face.

    Raises:
        FontLoadError: If the file cannot be read.
        FontParseError: If the file is not a font Pillow and fontTools can parse.
    """
    if config is None:
        config = RenderConfig()
    font_path = Path(font_path)

    try:
        font_bytes = font_path.read_bytes()
    except OSError as e:
        raise FontLoadError(f"Error loading font {font_path.name}: {e}", path=font_path) from e

    try:
        ttfont = TTFont(io.BytesIO(font_bytes), fontNumber=0)
        # Tables decompile on first access; force the ones measurement needs.
        for tag in ("head", "hmtx", "cmap"):
            ttfont[tag]
        font = ImageFont.truetype(io.BytesIO(font_bytes), size=config.pixel_size, index=0)
    except (OSError, KeyError, TTLibError, ValueError, struct.error) as e:
        raise FontParseError(f"Error parsing font {font_path.name}: {e}", path=font_path) from e

    return GlyphFace(path=font_path, config=config, font=font, ttfont=ttfont)
