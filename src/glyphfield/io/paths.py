"""Sprite path geometry: anchor loops with per-segment curve tension.

A sprite path is a closed loop of anchors. Each anchor starts the segment
to the next anchor (wrapping around). An anchor's curve value bends that
segment: zero gives a straight edge, otherwise the segment becomes a
quadratic whose control point sits `curve` units off the chord midpoint,
perpendicular to the chord.
"""

import logging
from dataclasses import dataclass, field

from glyphfield.domain import Contour, EdgeSegment, Shape, Vector2

logger = logging.getLogger(__name__)

# Curve values below this magnitude produce straight edges
CURVE_EPSILON = 1e-4

MIN_ANCHORS = 3


@dataclass(frozen=True, slots=True)
class SpriteAnchor:
    """A sprite path vertex.

    Attributes:
        x: X coordinate in shape units
        y: Y coordinate in shape units
        curve: Signed bend of the segment starting at this anchor
    """

    x: float
    y: float
    curve: float = 0.0

    @property
    def position(self) -> Vector2:
        return Vector2(self.x, self.y)


@dataclass
class SpritePath:
    """A closed loop of anchors.

    Attributes:
        anchors: Anchors in drawing order
        subtract: True if the path carves out of the paths drawn with it
    """

    anchors: list[SpriteAnchor] = field(default_factory=list)
    subtract: bool = False


def sprite_edge(start: SpriteAnchor, end: SpriteAnchor) -> EdgeSegment:
    """Edge from one anchor to the next, bent by the start anchor's curve."""
    p0 = start.position
    p1 = end.position
    if abs(start.curve) < CURVE_EPSILON:
        return EdgeSegment.linear(p0, p1)

    mid = (p0 + p1) * 0.5
    chord = p1 - p0
    length = chord.length()
    if length > 1e-10:
        perpendicular = Vector2(-chord.y / length, chord.x / length)
    else:
        perpendicular = Vector2(0.0, 1.0)
    return EdgeSegment.quadratic(p0, mid + perpendicular * start.curve, p1)


def append_sprite_contour(shape: Shape, path: SpritePath) -> Contour | None:
    """Add one sprite path to a shape as a contour.

    The contour is reversed if needed so that its winding is positive.

    Args:
        shape: Shape to extend
        path: Sprite path to convert

    Returns:
        The new contour, or None if the path has fewer than three anchors
    """
    anchors = path.anchors
    if len(anchors) < MIN_ANCHORS:
        logger.debug("Skipped sprite path with %d anchors", len(anchors))
        return None

    contour = shape.add_contour()
    for i, anchor in enumerate(anchors):
        contour.add_edge(sprite_edge(anchor, anchors[(i + 1) % len(anchors)]))

    if contour.winding() < 0:
        contour.reverse()
    return contour


def shape_from_sprite_path(path: SpritePath) -> Shape:
    """Build a single-contour shape from one sprite path."""
    shape = Shape()
    append_sprite_contour(shape, path)
    return shape


def shape_from_sprite_paths(paths: list[SpritePath]) -> Shape:
    """Build one shape holding a contour per usable path, ignoring `subtract`."""
    shape = Shape()
    for path in paths:
        append_sprite_contour(shape, path)
    return shape


def shapes_from_sprite_paths(paths: list[SpritePath]) -> tuple[Shape, Shape | None]:
    """Split sprite paths into an additive shape and a subtract shape.

    Args:
        paths: Sprite paths in draw order

    Returns:
        Tuple of (additive shape, subtract shape or None when no usable
        subtract path exists)
    """
    add_shape = shape_from_sprite_paths([path for path in paths if not path.subtract])
    sub_shape = shape_from_sprite_paths([path for path in paths if path.subtract])
    return add_shape, (sub_shape if sub_shape.contours else None)
