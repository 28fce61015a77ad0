"""Edge coloring: assign color channels to edges so corners stay sharp.

Each edge gets a two-channel color (CYAN, MAGENTA or YELLOW). Edges meeting
at a corner must not share both channels, so that the median of the three
channel distances keeps the corner intact after bilinear sampling.

Color choices are driven by an explicit integer seed through ColorSwitcher.
The same (shape, seed) pair always yields the same coloring.
"""

import logging
import math
from dataclasses import dataclass

from glyphfield.domain.contour import Contour
from glyphfield.domain.edge import EdgeColor, EdgeSegment
from glyphfield.domain.geometry import Vector2
from glyphfield.domain.shape import Shape

logger = logging.getLogger(__name__)

# Empirically tuned corner threshold in radians, used as sin(threshold)
DEFAULT_ANGLE_THRESHOLD = 3.0

EDGE_LENGTH_PRECISION = 4

TEARDROP_COLORS = (EdgeColor.MAGENTA, EdgeColor.YELLOW, EdgeColor.CYAN)

_SEED_MASK = (1 << 64) - 1


class ColorSwitcher:
    """Seeded color state shared across the contours of one shape.

    The seed is consumed digit by digit: one base-3 digit picks the initial
    color, then one base-2 digit per switch picks which neighbouring color
    comes next. An exhausted seed keeps producing digit 0.

    Attributes:
        color: Current two-channel color
    """

    def __init__(self, seed: int = 0) -> None:
        self._seed = seed & _SEED_MASK
        self.color = (EdgeColor.CYAN, EdgeColor.MAGENTA, EdgeColor.YELLOW)[self._extract3()]

    def _extract2(self) -> int:
        value = self._seed & 1
        self._seed >>= 1
        return value

    def _extract3(self) -> int:
        value = self._seed % 3
        self._seed //= 3
        return value

    def switch(self, banned: EdgeColor = EdgeColor.BLACK) -> EdgeColor:
        """Move to a different two-channel color.

        Args:
            banned: Color the result must not equal when it shares exactly
                one channel with the current color

        Returns:
            The new current color
        """
        combined = self.color & banned
        if combined in (EdgeColor.RED, EdgeColor.GREEN, EdgeColor.BLUE):
            self.color = EdgeColor(combined ^ EdgeColor.WHITE)
        else:
            shifted = int(self.color) << (1 + self._extract2())
            self.color = EdgeColor((shifted | shifted >> 3) & EdgeColor.WHITE)
        return self.color


def is_corner(a_dir: Vector2, b_dir: Vector2, cross_threshold: float) -> bool:
    """Check whether two unit tangents meet at a corner.

    Args:
        a_dir: Normalized outgoing direction of the previous edge
        b_dir: Normalized incoming direction of the next edge
        cross_threshold: sin() of the angle threshold

    Returns:
        True if the tangents turn back or bend more than the threshold
    """
    return a_dir.dot(b_dir) <= 0 or abs(a_dir.cross(b_dir)) > cross_threshold


def symmetrical_trichotomy(position: int, n: int) -> int:
    """Map edge position 0..n-1 onto the regions -1, 0, 1 symmetrically."""
    return int(3 + 2.875 * position / (n - 1) - 1.4375 + 0.5) - 3


def estimate_edge_length(edge: EdgeSegment) -> float:
    """Approximate arc length by sampling the edge."""
    length = 0.0
    previous = edge.point_at(0)
    for i in range(1, EDGE_LENGTH_PRECISION + 1):
        current = edge.point_at(i / EDGE_LENGTH_PRECISION)
        length += (current - previous).length()
        previous = current
    return length


def find_corners(contour: Contour, cross_threshold: float) -> list[int]:
    """Indices of edges that start at a corner."""
    corners: list[int] = []
    previous_direction = contour.edges[-1].direction_at(1)
    for index, edge in enumerate(contour.edges):
        if is_corner(
            previous_direction.normalize(),
            edge.direction_at(0).normalize(),
            cross_threshold,
        ):
            corners.append(index)
        previous_direction = edge.direction_at(1)
    return corners


def _color_teardrop(contour: Contour, corner: int) -> None:
    edges = contour.edges
    m = len(edges)
    if m >= 3:
        for i in range(m):
            edges[(corner + i) % m].color = TEARDROP_COLORS[1 + symmetrical_trichotomy(i, m)]
        return

    # Fewer than three edges for three colors: split starting at the corner
    rotated = edges[corner:] + edges[:corner]
    pieces = [piece for edge in rotated for piece in edge.split_in_thirds()]
    per_color = len(pieces) // 3
    for i, piece in enumerate(pieces):
        piece.color = TEARDROP_COLORS[i // per_color]
    contour.edges = pieces


def _color_smooth(contour: Contour, switcher: ColorSwitcher) -> None:
    color = switcher.switch()
    for edge in contour.edges:
        edge.color = color


def color_simple(shape: Shape, angle_threshold: float = DEFAULT_ANGLE_THRESHOLD, seed: int = 0) -> None:
    """Assign edge colors to every contour of a shape.

    Cases per contour:
    - No corners: every edge gets the same two-channel color
    - One corner (teardrop): MAGENTA, YELLOW and CYAN over three regions
      starting at the corner, splitting edges if fewer than three exist
    - Several corners: the color switches at each corner, and the last
      run is kept different from the first so the wrap-around seam is a
      real color change

    Args:
        shape: Shape to color in place (normally already normalized)
        angle_threshold: Corner threshold, used as sin(angle_threshold)
        seed: Seed for the color sequence
    """
    cross_threshold = math.sin(angle_threshold)
    switcher = ColorSwitcher(seed)

    for contour in shape.contours:
        if not contour.edges:
            continue

        corners = find_corners(contour, cross_threshold)
        logger.debug("Coloring contour: edges=%d corners=%d", len(contour.edges), len(corners))

        if not corners:
            _color_smooth(contour, switcher)
        elif len(corners) == 1:
            _color_teardrop(contour, corners[0])
        else:
            corner_count = len(corners)
            spline = 0
            start = corners[0]
            m = len(contour.edges)
            color = switcher.switch()
            initial_color = color
            for i in range(m):
                index = (start + i) % m
                if spline + 1 < corner_count and corners[spline + 1] == index:
                    spline += 1
                    banned = initial_color if spline == corner_count - 1 else EdgeColor.BLACK
                    color = switcher.switch(banned)
                contour.edges[index].color = color


@dataclass
class _InkTrapCorner:
    index: int
    prev_edge_length: float
    minor: bool = False
    color: EdgeColor = EdgeColor.BLACK


def color_ink_trap(shape: Shape, angle_threshold: float = DEFAULT_ANGLE_THRESHOLD, seed: int = 0) -> None:
    """Edge coloring variant that treats short runs between corners as minor.

    Behaves like color_simple, except that on contours with more than three
    corners, a corner whose preceding run is shorter than both neighbouring
    runs is minor. Minor corners take a color derived from their neighbours
    instead of consuming a switch. This avoids artifacts in narrow notches
    such as the inner V of "M".

    Args:
        shape: Shape to color in place
        angle_threshold: Corner threshold, used as sin(angle_threshold)
        seed: Seed for the color sequence
    """
    cross_threshold = math.sin(angle_threshold)
    switcher = ColorSwitcher(seed)

    for contour in shape.contours:
        if not contour.edges:
            continue

        corners: list[_InkTrapCorner] = []
        spline_length = 0.0
        previous_direction = contour.edges[-1].direction_at(1)
        for index, edge in enumerate(contour.edges):
            if is_corner(
                previous_direction.normalize(),
                edge.direction_at(0).normalize(),
                cross_threshold,
            ):
                corners.append(_InkTrapCorner(index, spline_length))
                spline_length = 0.0
            spline_length += estimate_edge_length(edge)
            previous_direction = edge.direction_at(1)

        if not corners:
            _color_smooth(contour, switcher)
            continue
        if len(corners) == 1:
            _color_teardrop(contour, corners[0].index)
            continue

        corner_count = len(corners)
        major_corner_count = corner_count
        if corner_count > 3:
            corners[0].prev_edge_length += spline_length
            for i in range(corner_count):
                current = corners[i]
                following = corners[(i + 1) % corner_count]
                after = corners[(i + 2) % corner_count]
                if (
                    current.prev_edge_length > following.prev_edge_length
                    and following.prev_edge_length < after.prev_edge_length
                ):
                    following.minor = True
                    major_corner_count -= 1

        initial_color = EdgeColor.BLACK
        for corner in corners:
            if not corner.minor:
                major_corner_count -= 1
                banned = initial_color if major_corner_count == 0 else EdgeColor.BLACK
                corner.color = switcher.switch(banned)
                if initial_color == EdgeColor.BLACK:
                    initial_color = corner.color

        color = switcher.color
        for i, corner in enumerate(corners):
            if corner.minor:
                next_color = corners[(i + 1) % corner_count].color
                corner.color = EdgeColor((color & next_color) ^ EdgeColor.WHITE)
            else:
                color = corner.color

        spline = 0
        start = corners[0].index
        color = corners[0].color
        m = len(contour.edges)
        for i in range(m):
            index = (start + i) % m
            if spline + 1 < corner_count and corners[spline + 1].index == index:
                spline += 1
                color = corners[spline].color
            contour.edges[index].color = color
