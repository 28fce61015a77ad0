"""Shape: a set of contours plus the preparation passes run before generation.

The passes run in a fixed order: validate, normalize, orient_contours.
Each sets a flag on the shape, so callers can tell which passes have run.
None of them raise on malformed geometry. They repair what they can and
drop the rest.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from glyphfield.domain.contour import Contour
from glyphfield.domain.edge import EdgeSegment

logger = logging.getLogger(__name__)

# Golden-ratio split used to place the orientation scanline away from vertices
_SCANLINE_RATIO = 0.5 * (math.sqrt(5) - 1)


@dataclass
class Shape:
    """A vector shape made of closed contours.

    Attributes:
        contours: Contours of the shape; holes are contours of opposite
            orientation after orient_contours()
        inverse_y_axis: Write bitmap rows bottom-up when generating
        validated: validate() has run
        normalized: normalize() has run
        oriented: orient_contours() has run
    """

    contours: list[Contour] = field(default_factory=list)
    inverse_y_axis: bool = False
    validated: bool = False
    normalized: bool = False
    oriented: bool = False

    def add_contour(self, contour: Contour | None = None) -> Contour:
        """Append a contour and return it."""
        if contour is None:
            contour = Contour()
        self.contours.append(contour)
        return contour

    def edge_count(self) -> int:
        return sum(len(contour.edges) for contour in self.contours)

    def is_empty(self) -> bool:
        """True if the shape has no edges at all."""
        return self.edge_count() == 0

    def bounds(self) -> tuple[float, float, float, float]:
        """Union of the contour bounding boxes.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y); infinities when empty
        """
        min_x = min_y = math.inf
        max_x = max_y = -math.inf
        for contour in self.contours:
            x0, y0, x1, y1 = contour.bounds()
            min_x = min(min_x, x0)
            min_y = min(min_y, y0)
            max_x = max(max_x, x1)
            max_y = max(max_y, y1)
        return (min_x, min_y, max_x, max_y)

    def validate(self) -> None:
        """Repair the shape in place.

        Removes zero-length edges and contours left without edges, then
        closes every contour whose last end point does not meet its first
        start point with a linear edge. Closed contours that enclose no area
        are removed as well; they contribute no coverage.
        """
        dropped_edges = 0
        kept_contours: list[Contour] = []
        for contour in self.contours:
            edges = [edge for edge in contour.edges if not edge.is_degenerate()]
            dropped_edges += len(contour.edges) - len(edges)
            if not edges:
                continue
            contour.edges = edges

            start = edges[0].start
            end = edges[-1].end
            if start != end:
                contour.edges.append(EdgeSegment.linear(end, start, edges[-1].color))
                logger.debug(
                    "Closed open contour: gap=(%s, %s)", end.x - start.x, end.y - start.y
                )
            if not contour.encloses_area():
                logger.debug("Dropped flat contour: edges=%d", len(contour.edges))
                continue
            kept_contours.append(contour)

        dropped_contours = len(self.contours) - len(kept_contours)
        if dropped_edges or dropped_contours:
            logger.debug(
                "Dropped degenerate geometry: edges=%d contours=%d",
                dropped_edges,
                dropped_contours,
            )
        self.contours = kept_contours
        self.validated = True

    def normalize(self) -> None:
        """Give every contour at least three edges.

        Contours with one or two edges have each edge split in thirds.
        Running it again changes nothing.
        """
        for contour in self.contours:
            if 0 < len(contour.edges) < 3:
                contour.subdivide()
        self.normalized = True

    def orient_contours(self) -> None:
        """Make contour orientation consistent with the fill.

        For each contour a horizontal scanline is cast through it at a
        golden-ratio height between two of its distinct ordinates. The
        crossings of every contour with that line are sorted by x; each
        crossing votes for its contour according to whether it is entered
        on an even or odd position and whether the edge goes up or down.
        Crossings at the same x cancel. Contours that end up with a
        negative vote are reversed.
        """
        orientations = [0] * len(self.contours)

        for i, contour in enumerate(self.contours):
            if orientations[i] != 0 or not contour.edges:
                continue

            y0 = contour.edges[0].point_at(0).y
            y1 = y0
            for edge in contour.edges:
                if y0 != y1:
                    break
                y1 = edge.point_at(1).y
            for edge in contour.edges:
                if y0 != y1:
                    break
                y1 = edge.point_at(_SCANLINE_RATIO).y
            y = (1.0 - _SCANLINE_RATIO) * y0 + _SCANLINE_RATIO * y1

            crossings: list[list[Any]] = []
            for j, other in enumerate(self.contours):
                for edge in other.edges:
                    for x, dy in edge.scanline_intersections(y):
                        crossings.append([x, dy, j])
            if not crossings:
                continue

            crossings.sort(key=lambda crossing: crossing[0])
            for k in range(1, len(crossings)):
                if crossings[k][0] == crossings[k - 1][0]:
                    crossings[k][1] = 0
                    crossings[k - 1][1] = 0

            for k, (_, dy, owner) in enumerate(crossings):
                if dy != 0:
                    orientations[owner] += 2 * int(((k & 1) ^ (dy > 0)) != 0) - 1

        for i, contour in enumerate(self.contours):
            if orientations[i] < 0:
                contour.reverse()
                logger.debug("Reversed contour %d", i)
        self.oriented = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "contours": [contour.to_dict() for contour in self.contours],
            "inverse_y_axis": self.inverse_y_axis,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Shape":
        """Deserialize from dictionary."""
        return cls(
            contours=[Contour.from_dict(c) for c in data["contours"]],
            inverse_y_axis=data.get("inverse_y_axis", False),
        )
