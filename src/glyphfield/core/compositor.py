"""Compositing of additive and subtractive path sets.

Additive and subtractive geometry are rendered independently and combined
per channel as min(add, 1 - sub). In the coverage domain this is a set
difference at the 0.5 threshold.
"""

import numpy as np

from glyphfield.config import GeneratorConfig
from glyphfield.core.generator import Projection
from glyphfield.core.processor import render_shape
from glyphfield.domain import Shape
from glyphfield.exceptions import CompositeError
from glyphfield.io.paths import SpritePath, shapes_from_sprite_paths


def composite_bitmaps(add: np.ndarray, sub: np.ndarray | None) -> np.ndarray:
    """Carve a subtract bitmap out of an add bitmap.

    Args:
        add: Distance field of the additive paths
        sub: Distance field of the subtract paths, or None

    Returns:
        min(add, 1 - sub) per channel; `add` itself when there is nothing
        to subtract

    Raises:
        CompositeError: If the bitmaps differ in shape
    """
    if sub is None:
        return add
    if add.shape != sub.shape:
        raise CompositeError(add.shape, sub.shape)
    return np.minimum(add, 1.0 - sub).astype(add.dtype, copy=False)


def composite(
    add_shape: Shape,
    sub_shape: Shape | None,
    width: int,
    height: int,
    projection: Projection,
    distance_range: float,
    config: GeneratorConfig | None = None,
    seed: int = 0,
) -> np.ndarray:
    """Render additive and subtractive shapes and composite them.

    Each shape runs through the full pipeline on its own. A missing or
    empty subtract shape leaves the additive bitmap unchanged.

    Args:
        add_shape: Shape made of the additive paths
        sub_shape: Shape made of the subtract paths, or None
        width: Output width in pixels
        height: Output height in pixels
        projection: Pixel to shape-space mapping
        distance_range: Distance band width in shape units
        config: Generator settings
        seed: Edge coloring seed for both shapes

    Returns:
        Composited float32 bitmap of shape (height, width, 3)
    """
    add = render_shape(add_shape, width, height, projection, distance_range, config, seed)
    if sub_shape is None or sub_shape.is_empty():
        return add
    sub = render_shape(sub_shape, width, height, projection, distance_range, config, seed)
    return composite_bitmaps(add, sub)


def render_sprite_paths(
    paths: list[SpritePath],
    width: int,
    height: int,
    projection: Projection,
    distance_range: float,
    config: GeneratorConfig | None = None,
    seed: int = 0,
) -> np.ndarray:
    """Render sprite paths, carving subtract paths out of additive ones.

    Args:
        paths: Sprite paths in draw order
        width: Output width in pixels
        height: Output height in pixels
        projection: Pixel to shape-space mapping
        distance_range: Distance band width in shape units
        config: Generator settings
        seed: Edge coloring seed

    Returns:
        Composited float32 bitmap of shape (height, width, 3)
    """
    add_shape, sub_shape = shapes_from_sprite_paths(paths)
    return composite(add_shape, sub_shape, width, height, projection, distance_range, config, seed)
