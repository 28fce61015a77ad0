"""Closed contour of edge segments.

A contour is an ordered cycle of edges where each edge's end point is the
next edge's start point. Orientation is expressed through `winding()`:
+1 for one direction, -1 for the other, 0 for an empty or flat contour.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from glyphfield.domain.edge import EdgeSegment
from glyphfield.domain.geometry import Vector2, sign


# Twice the enclosed area, relative to the squared extent, below which a contour is flat
_AREA_EPSILON = 1e-10


def _shoelace(a: Vector2, b: Vector2) -> float:
    return (b.x - a.x) * (a.y + b.y)


@dataclass
class Contour:
    """An ordered, closed sequence of edge segments.

    Attributes:
        edges: Edges in traversal order
    """

    edges: list[EdgeSegment] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.edges)

    def add_edge(self, edge: EdgeSegment) -> None:
        self.edges.append(edge)

    def winding(self) -> int:
        """Orientation of the contour.

        Sums (b.x - a.x) * (a.y + b.y) over consecutive edge start points.
        A positive total (clockwise with Y up, counter-clockwise with Y down)
        gives +1. One- and two-edge contours sample extra points along their
        curves so that lens shapes still get an orientation.

        Returns:
            +1, -1, or 0 for an empty or zero-area contour
        """
        if not self.edges:
            return 0

        total = 0.0
        if len(self.edges) == 1:
            edge = self.edges[0]
            a = edge.point_at(0)
            b = edge.point_at(1.0 / 3.0)
            c = edge.point_at(2.0 / 3.0)
            total = _shoelace(a, b) + _shoelace(b, c) + _shoelace(c, a)
        elif len(self.edges) == 2:
            first, second = self.edges
            a = first.point_at(0)
            b = first.point_at(0.5)
            c = second.point_at(0)
            d = second.point_at(0.5)
            total = _shoelace(a, b) + _shoelace(b, c) + _shoelace(c, d) + _shoelace(d, a)
        else:
            previous = self.edges[-1].point_at(0)
            for edge in self.edges:
                current = edge.point_at(0)
                total += _shoelace(previous, current)
                previous = current

        return sign(total)

    def encloses_area(self) -> bool:
        """Check whether the contour bounds any area.

        Every edge is sampled at its start and thirds, so curved edges
        between collinear anchors still count. A contour that doubles back
        on itself, such as a hairline A -> B -> A, encloses none.
        """
        if not self.edges:
            return False

        points = [edge.point_at(t) for edge in self.edges for t in (0.0, 1.0 / 3.0, 2.0 / 3.0)]
        total = 0.0
        previous = points[-1]
        for current in points:
            total += _shoelace(previous, current)
            previous = current

        min_x, min_y, max_x, max_y = self.bounds()
        extent = (max_x - min_x) + (max_y - min_y)
        return abs(total) > _AREA_EPSILON * extent * extent

    def bounds(self) -> tuple[float, float, float, float]:
        """Union of the edge bounding boxes.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y); infinities when empty
        """
        min_x = min_y = math.inf
        max_x = max_y = -math.inf
        for edge in self.edges:
            x0, y0, x1, y1 = edge.bounds()
            min_x = min(min_x, x0)
            min_y = min(min_y, y0)
            max_x = max(max_x, x1)
            max_y = max(max_y, y1)
        return (min_x, min_y, max_x, max_y)

    def reverse(self) -> None:
        """Reverse traversal direction: edge order and every edge."""
        self.edges.reverse()
        for edge in self.edges:
            edge.reverse()

    def is_closed(self, tolerance: float = 0.0) -> bool:
        """Check that every edge ends where the next one starts.

        Args:
            tolerance: Maximum allowed gap per junction

        Returns:
            True if all junctions (including the wrap-around) are within
            tolerance
        """
        if not self.edges:
            return True
        previous = self.edges[-1]
        for edge in self.edges:
            if (edge.start - previous.end).length() > tolerance:
                return False
            previous = edge
        return True

    def subdivide(self) -> None:
        """Split every edge in thirds in place."""
        self.edges = [piece for edge in self.edges for piece in edge.split_in_thirds()]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"edges": [edge.to_dict() for edge in self.edges]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary."""
        return cls(edges=[EdgeSegment.from_dict(e) for e in data["edges"]])
