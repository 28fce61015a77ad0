"""Bitmap helpers for multi-channel distance fields.

A distance field bitmap is a float32 numpy array of shape (height, width, 3),
row-major, with channel values in [0, 1]. A value of 0.5 lies exactly on the
shape boundary.
"""

import numpy as np

from glyphfield.exceptions import BitmapError


def new_bitmap(width: int, height: int) -> np.ndarray:
    """Allocate a zeroed RGB float bitmap.

    Args:
        width: Width in pixels
        height: Height in pixels

    Returns:
        Zero-filled array of shape (height, width, 3)

    Raises:
        BitmapError: If either dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise BitmapError(width, height)
    return np.zeros((height, width, 3), dtype=np.float32)


def median(bitmap: np.ndarray) -> np.ndarray:
    """Per-pixel median of the three channels.

    This is the single-channel distance a renderer reconstructs from the
    multi-channel field.

    Args:
        bitmap: Array of shape (..., 3)

    Returns:
        Array with the channel axis removed
    """
    r = bitmap[..., 0]
    g = bitmap[..., 1]
    b = bitmap[..., 2]
    return np.maximum(np.minimum(r, g), np.minimum(np.maximum(r, g), b))


def to_rgba8(bitmap: np.ndarray) -> np.ndarray:
    """Quantize a float bitmap to 8-bit RGBA with opaque alpha.

    Args:
        bitmap: Float array of shape (height, width, 3)

    Returns:
        uint8 array of shape (height, width, 4)
    """
    height, width = bitmap.shape[:2]
    rgba = np.full((height, width, 4), 255, dtype=np.uint8)
    rgba[..., :3] = (np.clip(bitmap, 0.0, 1.0) * 255.0).astype(np.uint8)
    return rgba
