"""Randomly drawn parameters of one distortion run.

Every stage of the distortion pipeline picks its variant from an explicit
enum. `EffectParameters` records all of the choices, so a run can be logged,
exported and replayed exactly on the same source canvas.
"""

from dataclasses import asdict, dataclass
from enum import Enum

import numpy as np


class NoiseKind(str, Enum):
    GAUSSIAN = "gaussian"
    UNIFORM = "uniform"
    BINARY = "binary"


class BlendMode(str, Enum):
    OPACITY = "opacity"
    LIGHTEN = "lighten"
    SUBTRACT = "subtract"
    SOFT_LIGHT = "soft_light"
    COLOR_BURN = "color_burn"
    OVERLAY = "overlay"
    EXCLUSION = "exclusion"


class EffectKind(str, Enum):
    GAUSSIAN_BLUR = "gaussian_blur"
    EMBOSS = "emboss"
    BOX_BLUR = "box_blur"
    SOBEL = "sobel"


class OrientationKind(str, Enum):
    NONE = "none"
    FLIP = "flip"
    ROTATE_180 = "rotate_180"
    FLIP_ROTATE_180 = "flip_rotate_180"


MAX_ROTATION = 10.0
"""Width of the rotation range in degrees, centred on zero."""

MAX_SHEAR = 5.0
"""Width of the shear range in degrees, centred on zero."""


def choose(enum_cls, rng):
    """Picks one member of `enum_cls` uniformly at random."""
    members = list(enum_cls)
    return members[int(rng.integers(len(members)))]


def _centered(width, rng):
    return float(width * (0.5 - rng.random()))


@dataclass(frozen=True)
class EffectParameters:
    """The choices that fully determine one distortion run.

    Attributes:
        rotation (float): Clockwise rotation in degrees, in [-5, 5].
        shear_v (float): Vertical shear angle in degrees, in [-2.5, 2.5].
        shear_h (float): Horizontal shear angle in degrees, in [-2.5, 2.5].
        noise_kind (NoiseKind): The distribution of the noise field.
        monochrome (bool): Whether one noise value is shared by R, G and B.
        blend_mode (BlendMode): How the noise is composited onto the canvas.
        effect_kind (EffectKind): The single degradation effect.
        orientation (OrientationKind): The final lossless orientation change.
    """

    rotation: float
    shear_v: float
    shear_h: float
    noise_kind: NoiseKind
    monochrome: bool
    blend_mode: BlendMode
    effect_kind: EffectKind
    orientation: OrientationKind

    @classmethod
    def sample(cls, rng=None):
        """Draws a fresh, independent set of parameters.

        Args:
            rng (np.random.Generator, optional): The source of randomness. A
                new generator seeded from OS entropy is used if omitted.
        """
        if rng is None:
            rng = np.random.default_rng()
        return cls(
            rotation=_centered(MAX_ROTATION, rng),
            shear_v=_centered(MAX_SHEAR, rng),
            shear_h=_centered(MAX_SHEAR, rng),
            noise_kind=choose(NoiseKind, rng),
            monochrome=bool(rng.random() < 0.5),
            blend_mode=choose(BlendMode, rng),
            effect_kind=choose(EffectKind, rng),
            orientation=choose(OrientationKind, rng),
        )

    def as_dict(self):
        """Returns the parameters as plain JSON-serializable values."""
        return {key: value.value if isinstance(value, Enum) else value for key, value in asdict(self).items()}


def sample_effect_params(rng=None):
    """Shortcut for `EffectParameters.sample`."""
    return EffectParameters.sample(rng)
