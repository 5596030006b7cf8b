"""Per-channel photometric blend modes.

The formulas follow the conventional compositing definitions (W3C
Compositing and Blending Level 1). Each function takes the backdrop `b` and
the source layer `s` as float arrays normalized to [0, 1] and returns the
blended colour channels.
"""

import numpy as np

from glyphwarp.params import BlendMode

DEFAULT_OPACITY = 0.5


def _lighten(b, s):
    return np.maximum(b, s)


def _subtract(b, s):
    return np.maximum(b - s, 0.0)


def _soft_light(b, s):
    d = np.where(b <= 0.25, ((16 * b - 12) * b + 4) * b, np.sqrt(b))
    return np.where(s <= 0.5, b - (1 - 2 * s) * b * (1 - b), b + (2 * s - 1) * (d - b))


def _color_burn(b, s):
    with np.errstate(divide="ignore", invalid="ignore"):
        burned = 1 - np.minimum(1.0, (1 - b) / s)
    return np.where(b >= 1, 1.0, np.where(s <= 0, 0.0, burned))


def _overlay(b, s):
    return np.where(b <= 0.5, 2 * b * s, 1 - 2 * (1 - b) * (1 - s))


def _exclusion(b, s):
    return b + s - 2 * b * s


BLEND_FUNCTIONS = {
    BlendMode.LIGHTEN: _lighten,
    BlendMode.SUBTRACT: _subtract,
    BlendMode.SOFT_LIGHT: _soft_light,
    BlendMode.COLOR_BURN: _color_burn,
    BlendMode.OVERLAY: _overlay,
    BlendMode.EXCLUSION: _exclusion,
}


def blend(base, layer, mode, opacity=DEFAULT_OPACITY):
    """Composites `layer` onto `base` with the given blend mode.

    Args:
        base (np.ndarray): The backdrop, a (H, W, 4) uint8 RGBA array.
        layer (np.ndarray): The source layer, same shape as `base`.
        mode (BlendMode): The blend mode to apply.
        opacity (float, optional): The weight of `layer` in `BlendMode.OPACITY`
            mode. Ignored by the other modes. Defaults to 0.5.

    Returns:
        np.ndarray: The blended (H, W, 4) uint8 RGBA array. In opacity mode the
        alpha channel is mixed like the colour channels; every other mode
        composites alpha source-over.
    """
    if base.shape != layer.shape:
        raise ValueError(f"Cannot blend arrays of shapes {base.shape} and {layer.shape}")

    mode = BlendMode(mode)
    b = base.astype(np.float64) / 255.0
    s = layer.astype(np.float64) / 255.0

    if mode == BlendMode.OPACITY:
        out = b * (1 - opacity) + s * opacity
    else:
        rgb = BLEND_FUNCTIONS[mode](b[..., :3], s[..., :3])
        alpha = s[..., 3:] + b[..., 3:] * (1 - s[..., 3:])
        out = np.concatenate([rgb, alpha], axis=2)

    return np.rint(np.clip(out, 0.0, 1.0) * 255).astype(np.uint8)
