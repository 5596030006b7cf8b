"""This file defines the default filesystem locations used by glyphwarp.

All paths are constructed relative to the project's root directory and can be
overridden through `glyphwarp.config.Settings`.
"""

from pathlib import Path


ROOT_DIR = Path(__file__).parent.parent
"""The root directory of the project."""

FONTS_ROOT = ROOT_DIR / "fonts"
"""The directory scanned for typefaces when no other directory is configured."""

OUTPUT_ROOT = ROOT_DIR / "out"
"""The default directory where batch-generated images and metadata are saved."""
