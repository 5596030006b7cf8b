"""Entry point tying font selection, layout, distortion and encoding together.

`CaptchaGenerator` discovers the available fonts once, then turns each piece
of text into a PNG image, optionally distorted, and reports the choices it
made alongside the image.
"""

import io
from pathlib import Path
from typing import NamedTuple, Optional

import numpy as np
from PIL import Image
from loguru import logger

from glyphwarp.config import RenderConfig
from glyphwarp.distort import distort
from glyphwarp.env import FONTS_ROOT
from glyphwarp.exceptions import EmptyInputError, EncodeError, FontLoadError
from glyphwarp.fonts import discover_fonts, load_face
from glyphwarp.layout import render
from glyphwarp.params import EffectParameters


class GeneratedImage(NamedTuple):
    """The result of one generation.

    Attributes:
        png (bytes): The encoded PNG image.
        image (np.ndarray): The final (H, W, 4) RGBA canvas.
        font_path (Path): The typeface the text was drawn with.
        effects (EffectParameters | None): The distortion choices, or None if
            effects were not requested.
    """

    png: bytes
    image: np.ndarray
    font_path: Path
    effects: Optional[EffectParameters]


def encode_png(canvas, text=None):
    """Encodes an RGBA canvas as PNG.

    Args:
        canvas (np.ndarray): The (H, W, 4) uint8 canvas.
        text (str, optional): The rendered text, reported on failure.

    Returns:
        bytes: The PNG data.

    Raises:
        EncodeError: If the canvas cannot be encoded.
    """
    buffer = io.BytesIO()
    try:
        Image.fromarray(canvas).save(buffer, format="PNG")
    except Exception as e:
        raise EncodeError(f"Error encoding PNG with '{text}': {e}", text=text) from e
    return buffer.getvalue()


class CaptchaGenerator:
    """Renders text into challenge images with a randomly selected typeface.

    Attributes:
        config (RenderConfig): The size, DPI and hinting mode of every render.
        font_paths (tuple[Path, ...]): The typefaces to choose from. Discovered
            once at construction and never rescanned.
    """

    def __init__(self, fonts_dir=None, config=None, font_paths=None):
        """Initializes the CaptchaGenerator.

        Args:
            fonts_dir (str or Path, optional): The directory to discover fonts
                in. Defaults to `FONTS_ROOT`. Ignored if `font_paths` is given.
            config (RenderConfig, optional): The rendering parameters.
            font_paths (iterable of Path, optional): An explicit list of font
                files to use instead of discovering them.

        Raises:
            FontLoadError: If no fonts are available.
        """
        self.config = config if config else RenderConfig()
        if font_paths is None:
            font_paths = discover_fonts(Path(fonts_dir) if fonts_dir else FONTS_ROOT)
        self.font_paths = tuple(Path(p) for p in font_paths)
        if not self.font_paths:
            raise FontLoadError("No fonts available", path=fonts_dir)

    def get_random_face(self, text, rng):
        """Loads a random typeface, preferring one that can draw all of `text`.

        Fonts are tried in a random order. If none of them covers every
        character, the first one tried is used.

        Args:
            text (str): The text that will be rendered.
            rng (np.random.Generator): The source of randomness.

        Returns:
            GlyphFace: The loaded face.
        """
        fallback = None
        for i in rng.permutation(len(self.font_paths)):
            face = load_face(self.font_paths[i], self.config)
            missing = face.missing_chars(text)
            if not missing:
                return face
            logger.debug(f"{face.path.name} is missing {''.join(sorted(missing))!r}")
            if fallback is None:
                fallback = face
        logger.warning(f"No font supports every character of {text!r}, using {fallback.path.name}")
        return fallback

    def process(self, text, effects=False, rng=None, font_path=None):
        """Generates a single image.

        Args:
            text (str): The text to render. Lines are separated by "\\n".
            effects (bool, optional): Whether to apply the distortion pipeline.
            rng (np.random.Generator, optional): The source of randomness for
                font selection and effects. A fresh generator is used if
                omitted.
            font_path (str or Path, optional): Render with this font instead of
                a random one.

        Returns:
            GeneratedImage: The PNG data with the canvas and the choices made.

        Raises:
            EmptyInputError: If `text` is empty.
            FontLoadError: If the selected font cannot be read.
            FontParseError: If the selected font cannot be parsed.
            EncodeError: If the image cannot be encoded, including text that
                measures zero pixels wide.
        """
        if not text:
            logger.error("Can't generate image without input")
            raise EmptyInputError()

        if rng is None:
            rng = np.random.default_rng()

        if font_path is not None:
            face = load_face(font_path, self.config)
        else:
            face = self.get_random_face(text, rng)
        logger.debug(f"Rendering {text!r} with {face.path.name}")

        canvas = render(text, face)
        if canvas.shape[1] == 0:
            raise EncodeError(f"Error encoding PNG with '{text}': the text has no width", text=text)

        params = None
        if effects:
            canvas, params = distort(canvas, rng=rng)

        png = encode_png(canvas, text)
        return GeneratedImage(png=png, image=canvas, font_path=face.path, effects=params)


def generate_image(text, effects=False, fonts_dir=None, config=None, rng=None):
    """Generates one PNG image of `text`.

    Font discovery is memoized per directory, so calling this repeatedly does
    not rescan the filesystem.

    Returns:
        GeneratedImage: See `CaptchaGenerator.process`.
    """
    return CaptchaGenerator(fonts_dir=fonts_dir, config=config).process(text, effects=effects, rng=rng)
