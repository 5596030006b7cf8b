"""The distortion pipeline.

A rendered canvas goes through five stages in a fixed order: an affine warp,
noise synthesis, noise blending, one degradation effect and a lossless
orientation change. Only the parameters of the stages are random; their
order never changes.
"""

import numpy as np
from loguru import logger

from glyphwarp.augmentations import apply_affine_warp, apply_effect, apply_orientation
from glyphwarp.blend import blend
from glyphwarp.noise import generate_noise
from glyphwarp.params import EffectParameters


def distort(canvas, params=None, rng=None):
    """Applies the randomized distortion stages to a canvas.

    The canvas size is preserved: warped content that falls outside the
    canvas is clipped and newly exposed area is filled with opaque white.

    Args:
        canvas (np.ndarray): A (H, W, 4) uint8 RGBA array with H > 0 and W > 0.
            It is not modified.
        params (EffectParameters, optional): The choices to apply. Drawn from
            `rng` if omitted.
        rng (np.random.Generator, optional): The source of randomness for the
            parameters and the noise field. A fresh generator seeded from OS
            entropy is created if omitted, so concurrent calls share no state.

    Returns:
        A tuple containing:
            - np.ndarray: The distorted canvas, same shape as the input.
            - EffectParameters: The choices that were applied.

    Raises:
        ValueError: If the canvas is not a non-empty RGBA array.
    """
    if canvas.ndim != 3 or canvas.shape[2] != 4 or canvas.shape[0] == 0 or canvas.shape[1] == 0:
        raise ValueError(f"Expected a non-empty (H, W, 4) canvas, got shape {canvas.shape}")

    if rng is None:
        rng = np.random.default_rng()
    if params is None:
        params = EffectParameters.sample(rng)
    logger.debug(f"Distorting {canvas.shape[1]}x{canvas.shape[0]} canvas with {params.as_dict()}")

    image = apply_affine_warp(canvas, params.rotation, params.shear_v, params.shear_h)

    height, width = image.shape[:2]
    noise = generate_noise(width, height, params.noise_kind, params.monochrome, rng)
    image = blend(image, noise, params.blend_mode)

    image = apply_effect(image, params.effect_kind)
    image = apply_orientation(image, params.orientation)

    return image, params
