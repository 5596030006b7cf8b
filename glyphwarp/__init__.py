"""The glyphwarp package renders text into distorted challenge images.

Text is laid out with a real typeface on a white canvas and can then be put
through a randomized pipeline of warps, noise, blending and effects. The main
entry point is the `CaptchaGenerator` class.

Example:
    >>> from glyphwarp import CaptchaGenerator
    >>> generator = CaptchaGenerator("fonts")
    >>> result = generator.process("Hello\\nWorld", effects=True)
    >>> open("captcha.png", "wb").write(result.png)
"""

from ._version import __version__ as __version__
from glyphwarp.config import RenderConfig as RenderConfig
from glyphwarp.distort import distort as distort
from glyphwarp.exceptions import (
    EmptyInputError as EmptyInputError,
    EncodeError as EncodeError,
    FontLoadError as FontLoadError,
    FontParseError as FontParseError,
    GlyphwarpError as GlyphwarpError,
)
from glyphwarp.generator import CaptchaGenerator as CaptchaGenerator
from glyphwarp.generator import generate_image as generate_image
from glyphwarp.layout import render as render
from glyphwarp.params import EffectParameters as EffectParameters
