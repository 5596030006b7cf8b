"""Image transforms used by the distortion pipeline.

This module provides the geometric warps, the single degradation effects and
the lossless orientation changes applied to rendered canvases. All functions
take and return (H, W, 4) uint8 RGBA arrays and never change the image size.
"""

import math

import albumentations as A
import cv2
import numpy as np
from scipy.ndimage import gaussian_filter

from glyphwarp.params import EffectKind, OrientationKind

FILL_VALUE = (255, 255, 255, 255)
"""The colour of canvas area exposed by a warp, matching the layout background."""

GAUSSIAN_SIGMA = 2.0
BOX_RADIUS = 1.8
EMBOSS_KERNEL = np.array([[-1, -1, 0], [-1, 0, 1], [0, 1, 1]], dtype=np.float32)
EMBOSS_BIAS = 128.0


def _warp(image, matrix, fill=FILL_VALUE):
    height, width = image.shape[:2]
    return cv2.warpAffine(
        image,
        matrix,
        (width, height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=fill,
    )


def apply_rotation(image, angle, fill=FILL_VALUE):
    """Rotates an image clockwise around its centre, keeping its size.

    Args:
        image (np.ndarray): The input image.
        angle (float): The rotation angle in degrees. Positive is clockwise.
        fill (tuple, optional): The colour of the exposed corners.

    Returns:
        np.ndarray: The rotated image.
    """
    height, width = image.shape[:2]
    center = ((width - 1) / 2, (height - 1) / 2)
    # OpenCV rotates counter-clockwise for positive angles.
    matrix = cv2.getRotationMatrix2D(center, -angle, 1.0)
    return _warp(image, matrix, fill)


def apply_shear_h(image, angle, fill=FILL_VALUE):
    """Shears an image horizontally by `angle` degrees around its centre row."""
    height = image.shape[0]
    t = math.tan(math.radians(angle))
    matrix = np.float32([[1, t, -t * (height - 1) / 2], [0, 1, 0]])
    return _warp(image, matrix, fill)


def apply_shear_v(image, angle, fill=FILL_VALUE):
    """Shears an image vertically by `angle` degrees around its centre column."""
    width = image.shape[1]
    t = math.tan(math.radians(angle))
    matrix = np.float32([[1, 0, 0], [t, 1, -t * (width - 1) / 2]])
    return _warp(image, matrix, fill)


def apply_affine_warp(image, rotation, shear_v, shear_h, fill=FILL_VALUE):
    """Applies a rotation, then a vertical shear, then a horizontal shear."""
    image = apply_rotation(image, rotation, fill)
    image = apply_shear_v(image, shear_v, fill)
    return apply_shear_h(image, shear_h, fill)


def apply_blur(image, sigma):
    """Applies Gaussian blur to each channel of an image.

    Args:
        image (np.ndarray): The input image as a NumPy array.
        sigma (float): The standard deviation for the Gaussian kernel.

    Returns:
        np.ndarray: The blurred image.
    """
    blurred = gaussian_filter(image.astype(np.float64), sigma=(sigma, sigma, 0))
    return np.clip(np.rint(blurred), 0, 255).astype(np.uint8)


def apply_box_blur(image, radius):
    """Averages each pixel over a square window of side `2 * ceil(radius) + 1`."""
    size = 2 * math.ceil(radius) + 1
    return cv2.blur(image, (size, size), borderType=cv2.BORDER_REPLICATE)


def apply_emboss(image):
    """Applies an edge-relief convolution to the colour channels, keeping alpha."""
    rgb = image[..., :3].astype(np.float32)
    relief = cv2.filter2D(rgb, -1, EMBOSS_KERNEL, borderType=cv2.BORDER_REPLICATE) + EMBOSS_BIAS
    out = image.copy()
    out[..., :3] = np.clip(np.rint(relief), 0, 255).astype(np.uint8)
    return out


def apply_sobel(image):
    """Replaces the colour channels with the Sobel edge magnitude, keeping alpha."""
    gray = cv2.cvtColor(np.ascontiguousarray(image), cv2.COLOR_RGBA2GRAY).astype(np.float64)
    gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3, borderType=cv2.BORDER_REPLICATE)
    gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3, borderType=cv2.BORDER_REPLICATE)
    magnitude = np.clip(np.rint(np.hypot(gx, gy)), 0, 255).astype(np.uint8)
    out = image.copy()
    out[..., :3] = magnitude[..., None]
    return out


def apply_effect(image, kind):
    """Applies exactly one degradation effect.

    Args:
        image (np.ndarray): The input RGBA image.
        kind (EffectKind): The effect to apply.

    Returns:
        np.ndarray: The degraded image, same shape as the input.
    """
    kind = EffectKind(kind)
    if kind == EffectKind.GAUSSIAN_BLUR:
        return apply_blur(image, GAUSSIAN_SIGMA)
    if kind == EffectKind.EMBOSS:
        return apply_emboss(image)
    if kind == EffectKind.BOX_BLUR:
        return apply_box_blur(image, BOX_RADIUS)
    return apply_sobel(image)


ORIENTATION_TRANSFORMS = {
    OrientationKind.NONE: [],
    OrientationKind.FLIP: [A.HorizontalFlip(p=1.0)],
    OrientationKind.ROTATE_180: [A.HorizontalFlip(p=1.0), A.VerticalFlip(p=1.0)],
    # Mirroring then turning upside down leaves only the vertical reflection.
    OrientationKind.FLIP_ROTATE_180: [A.VerticalFlip(p=1.0)],
}


def apply_orientation(image, kind):
    """Applies a pixel-exact flip and/or 180 degree rotation.

    Args:
        image (np.ndarray): The input image.
        kind (OrientationKind): The orientation change to apply.

    Returns:
        np.ndarray: The reoriented image.
    """
    transforms = ORIENTATION_TRANSFORMS[OrientationKind(kind)]
    if not transforms:
        return image.copy()
    return A.Compose(transforms)(image=image)["image"]
