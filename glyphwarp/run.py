import sys
from pathlib import Path

import fire
import numpy as np
from loguru import logger

from glyphwarp.config import RenderConfig, Settings
from glyphwarp.exceptions import GlyphwarpError
from glyphwarp.generator import CaptchaGenerator


def configure_logging(level="INFO"):
    """Routes loguru output to stderr at the given minimum level."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def build_config(settings, size=None, dpi=None, hinting=None):
    """Returns the configured `RenderConfig` with any explicit overrides applied.

    The overrides go through validation again, so an invalid value raises a
    `pydantic.ValidationError`.
    """
    overrides = {key: value for key, value in {"size": size, "dpi": dpi, "hinting": hinting}.items() if value is not None}
    return RenderConfig(**{**settings.render.model_dump(), **overrides})


def run(
    text,
    output="captcha.png",
    effects=False,
    fonts_dir=None,
    size=None,
    dpi=None,
    hinting=None,
    seed=None,
    config_file=None,
    verbose=False,
):
    """Renders a single challenge image and writes it to a PNG file.

    Args:
        text (str): The text to render. A literal "\\n" sequence starts a new
            line. `fire` parses command-line values as Python literals, so
            text that looks like a number or a list must be quoted twice
            (e.g. `glyphwarp '"1e3"'`) to be rendered verbatim.
        output (str, optional): The PNG file to write. Defaults to
            "captcha.png".
        effects (bool, optional): If True, applies the random distortion
            pipeline. Defaults to False.
        fonts_dir (str, optional): The directory to pick a typeface from.
            Defaults to the configured `fonts_dir`.
        size (float, optional): Overrides the font size in points.
        dpi (float, optional): Overrides the rendering DPI.
        hinting (str, optional): Overrides the hinting mode, "none" or "full".
        seed (int, optional): Seeds the random generator for a reproducible
            font choice and distortion.
        config_file (str, optional): A YAML file with `Settings` values.
        verbose (bool, optional): If True, logs the chosen parameters at debug
            level.

    Returns:
        str: The path of the written image.
    """
    settings = Settings(yaml_file=config_file)
    configure_logging("DEBUG" if verbose else settings.log_level)

    config = build_config(settings, size=size, dpi=dpi, hinting=hinting)
    if not isinstance(text, str):
        logger.warning(f"Text was parsed as {type(text).__name__} and is rendered as {str(text)!r}; quote it to keep it verbatim")
    text = str(text).replace("\\n", "\n")

    try:
        generator = CaptchaGenerator(fonts_dir=fonts_dir or settings.fonts_dir, config=config)
        result = generator.process(text, effects=effects, rng=np.random.default_rng(seed))
    except GlyphwarpError as e:
        logger.error(f"Image generation failed: {e}")
        raise SystemExit(1) from e

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.png)

    height, width = result.image.shape[:2]
    logger.info(f"Saved {width}x{height} image to {output} using {result.font_path.name}")
    if result.effects is not None:
        logger.info(f"Effects: {result.effects.as_dict()}")
    return str(output)


if __name__ == "__main__":
    fire.Fire(run)
