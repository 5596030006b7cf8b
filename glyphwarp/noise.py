"""Synthetic noise fields.

A noise field is an opaque RGBA image of per-pixel random values drawn from
one of the `NoiseKind` distributions. It is generated at the exact size of
the canvas it will be blended onto.
"""

import numpy as np

from glyphwarp.params import NoiseKind

GAUSSIAN_MEAN = 128.0
GAUSSIAN_STD = 32.0


def _sample(kind, shape, rng):
    if kind == NoiseKind.GAUSSIAN:
        return np.rint(np.clip(rng.normal(GAUSSIAN_MEAN, GAUSSIAN_STD, shape), 0, 255))
    if kind == NoiseKind.UNIFORM:
        return rng.integers(0, 256, shape)
    if kind == NoiseKind.BINARY:
        return rng.integers(0, 2, shape) * 255
    raise ValueError(f"Unknown noise kind: {kind!r}")


def generate_noise(width, height, kind, monochrome, rng=None):
    """Generates an opaque RGBA noise field.

    Args:
        width (int): The width of the field in pixels.
        height (int): The height of the field in pixels.
        kind (NoiseKind): The distribution of the values. Gaussian values are
            centred on mid-grey, uniform values cover [0, 255] and binary
            values are either 0 or 255 (salt and pepper).
        monochrome (bool): If True, a single value per pixel is shared by the
            R, G and B channels. Otherwise each channel is drawn independently.
        rng (np.random.Generator, optional): The source of randomness.

    Returns:
        np.ndarray: A (height, width, 4) uint8 array with alpha set to 255.
    """
    if rng is None:
        rng = np.random.default_rng()

    channels = 1 if monochrome else 3
    values = _sample(NoiseKind(kind), (height, width, channels), rng).astype(np.uint8)
    if monochrome:
        values = np.repeat(values, 3, axis=2)

    alpha = np.full((height, width, 1), 255, dtype=np.uint8)
    return np.concatenate([values, alpha], axis=2)
