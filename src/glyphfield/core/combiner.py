"""Per-pixel distance selection and the overlapping contour combiner.

For every pixel, each contour is reduced to one distance per color channel
by a MultiChannelSelector. The OverlappingContourCombiner then decides
which contour (or merged group of contours) speaks for the pixel, using the
contour windings to tell filled outlines from holes. Nested and overlapping
outlines then resolve to the correct inside/outside sign without a boolean
union of the geometry.
"""

import math
from typing import NamedTuple

from glyphfield.domain.edge import INFINITE_DISTANCE, EdgeColor, EdgeSegment, SignedDistance
from glyphfield.domain.geometry import Vector2, median
from glyphfield.domain.shape import Shape


class MultiDistance(NamedTuple):
    """Signed distances for the red, green and blue channels."""

    r: float
    g: float
    b: float

    def median(self) -> float:
        return median(self.r, self.g, self.b)


def _perpendicular_distance(distance: float, ep: Vector2, edge_dir: Vector2) -> float | None:
    """Distance to the tangent line at an endpoint, if shorter than `distance`."""
    if ep.dot(edge_dir) > 0:
        perpendicular = ep.cross(edge_dir)
        if abs(perpendicular) < abs(distance):
            return perpendicular
    return None


class ChannelSelector:
    """Tracks the nearest edge for one channel of one contour.

    The nearest edge is chosen by true distance (ties broken by the
    orthogonality term). Its distance is converted to a pseudo-distance on
    demand, then compared against perpendicular distances collected at
    corners between adjacent edges.
    """

    __slots__ = (
        "min_true_distance",
        "min_negative_perpendicular",
        "min_positive_perpendicular",
        "near_edge",
        "near_edge_param",
    )

    def __init__(self) -> None:
        self.min_true_distance: SignedDistance = INFINITE_DISTANCE
        self.min_negative_perpendicular = -math.inf
        self.min_positive_perpendicular = math.inf
        self.near_edge: EdgeSegment | None = None
        self.near_edge_param = 0.0

    def add_edge_true_distance(self, edge: EdgeSegment, distance: SignedDistance, param: float) -> None:
        if distance < self.min_true_distance:
            self.min_true_distance = distance
            self.near_edge = edge
            self.near_edge_param = param

    def add_edge_perpendicular_distance(self, distance: float) -> None:
        if distance <= 0 and distance > self.min_negative_perpendicular:
            self.min_negative_perpendicular = distance
        if distance >= 0 and distance < self.min_positive_perpendicular:
            self.min_positive_perpendicular = distance

    def merge(self, other: "ChannelSelector") -> None:
        if other.min_true_distance < self.min_true_distance:
            self.min_true_distance = other.min_true_distance
            self.near_edge = other.near_edge
            self.near_edge_param = other.near_edge_param
        if other.min_negative_perpendicular > self.min_negative_perpendicular:
            self.min_negative_perpendicular = other.min_negative_perpendicular
        if other.min_positive_perpendicular < self.min_positive_perpendicular:
            self.min_positive_perpendicular = other.min_positive_perpendicular

    def compute_distance(self, p: Vector2) -> float:
        """Resolve the channel distance at point p."""
        if self.min_true_distance.distance < 0:
            min_distance = self.min_negative_perpendicular
        else:
            min_distance = self.min_positive_perpendicular
        if self.near_edge is not None:
            distance = self.near_edge.distance_to_pseudo_distance(
                self.min_true_distance, p, self.near_edge_param
            )
            if abs(distance.distance) < abs(min_distance):
                min_distance = distance.distance
        return min_distance


class MultiChannelSelector:
    """One ChannelSelector per color channel."""

    __slots__ = ("r", "g", "b")

    def __init__(self) -> None:
        self.r = ChannelSelector()
        self.g = ChannelSelector()
        self.b = ChannelSelector()

    def _channels(self, color: EdgeColor) -> list[ChannelSelector]:
        channels = []
        if color & EdgeColor.RED:
            channels.append(self.r)
        if color & EdgeColor.GREEN:
            channels.append(self.g)
        if color & EdgeColor.BLUE:
            channels.append(self.b)
        return channels

    def add_edge(
        self,
        prev_edge: EdgeSegment,
        edge: EdgeSegment,
        next_edge: EdgeSegment,
        p: Vector2,
    ) -> None:
        """Feed one edge (with its neighbours) into the channels it colors.

        Args:
            prev_edge: Edge preceding `edge` in the contour
            edge: Edge being measured
            next_edge: Edge following `edge` in the contour
            p: Sample point in shape space
        """
        channels = self._channels(edge.color)
        if not channels:
            return

        distance, param = edge.signed_distance(p)
        for channel in channels:
            channel.add_edge_true_distance(edge, distance, param)

        ap = p - edge.point_at(0)
        bp = p - edge.point_at(1)
        a_dir = edge.direction_at(0).normalize(allow_zero=True)
        b_dir = edge.direction_at(1).normalize(allow_zero=True)
        prev_dir = prev_edge.direction_at(1).normalize(allow_zero=True)
        next_dir = next_edge.direction_at(0).normalize(allow_zero=True)

        # Points behind the corner bisector at either end
        if ap.dot((prev_dir + a_dir).normalize(allow_zero=True)) > 0:
            perpendicular = _perpendicular_distance(distance.distance, ap, -a_dir)
            if perpendicular is not None:
                for channel in channels:
                    channel.add_edge_perpendicular_distance(-perpendicular)
        if -bp.dot((b_dir + next_dir).normalize(allow_zero=True)) > 0:
            perpendicular = _perpendicular_distance(distance.distance, bp, b_dir)
            if perpendicular is not None:
                for channel in channels:
                    channel.add_edge_perpendicular_distance(perpendicular)

    def merge(self, other: "MultiChannelSelector") -> None:
        self.r.merge(other.r)
        self.g.merge(other.g)
        self.b.merge(other.b)

    def distance(self, p: Vector2) -> MultiDistance:
        return MultiDistance(
            self.r.compute_distance(p),
            self.g.compute_distance(p),
            self.b.compute_distance(p),
        )


class OverlappingContourCombiner:
    """Combine per-contour distances into one multi-channel distance.

    Contours with positive winding are filled outlines, negative winding
    marks holes. For a sample point the combiner:

    1. Merges positive contours that place the point inside (inner group)
       and negative contours that place it outside (outer group).
    2. Picks the closer group; within it, prefers the contour that pushes
       the median furthest in the group's direction while staying closer
       than the other group.
    3. Lets a closer contour of the opposite winding with the same sign
       override the choice.
    4. Falls back to the merge of all contours when neither group wins,
       and whenever the chosen median equals the fully merged one.

    The returned triple is a single contour's (or group's) full RGB
    distance, never a per-channel mix of different contours.
    """

    def __init__(self, shape: Shape, invert_winding: bool = False) -> None:
        self._contours = shape.contours
        factor = -1 if invert_winding else 1
        self._windings = [factor * contour.winding() for contour in shape.contours]

    @property
    def windings(self) -> list[int]:
        return list(self._windings)

    def _contour_selector(self, index: int, p: Vector2) -> MultiChannelSelector:
        selector = MultiChannelSelector()
        edges = self._contours[index].edges
        if not edges:
            return selector
        prev_edge = edges[-2] if len(edges) >= 2 else edges[0]
        edge = edges[-1]
        for next_edge in edges:
            selector.add_edge(prev_edge, edge, next_edge, p)
            prev_edge = edge
            edge = next_edge
        return selector

    def distance(self, p: Vector2) -> MultiDistance:
        """Combined multi-channel signed distance at point p."""
        selectors = [self._contour_selector(i, p) for i in range(len(self._contours))]
        contour_distances = [selector.distance(p) for selector in selectors]

        shape_selector = MultiChannelSelector()
        inner_selector = MultiChannelSelector()
        outer_selector = MultiChannelSelector()
        for selector, winding, contour_distance in zip(
            selectors, self._windings, contour_distances, strict=True
        ):
            shape_selector.merge(selector)
            contour_median = contour_distance.median()
            if winding > 0 and contour_median >= 0:
                inner_selector.merge(selector)
            if winding < 0 and contour_median <= 0:
                outer_selector.merge(selector)

        shape_distance = shape_selector.distance(p)
        inner_distance = inner_selector.distance(p)
        outer_distance = outer_selector.distance(p)
        inner_scalar = inner_distance.median()
        outer_scalar = outer_distance.median()

        if inner_scalar >= 0 and abs(inner_scalar) <= abs(outer_scalar):
            result = inner_distance
            winding = 1
            for contour_winding, contour_distance in zip(self._windings, contour_distances, strict=True):
                if contour_winding > 0:
                    contour_median = contour_distance.median()
                    if abs(contour_median) < abs(outer_scalar) and contour_median > result.median():
                        result = contour_distance
        elif outer_scalar <= 0 and abs(outer_scalar) < abs(inner_scalar):
            result = outer_distance
            winding = -1
            for contour_winding, contour_distance in zip(self._windings, contour_distances, strict=True):
                if contour_winding < 0:
                    contour_median = contour_distance.median()
                    if abs(contour_median) < abs(inner_scalar) and contour_median < result.median():
                        result = contour_distance
        else:
            return shape_distance

        for contour_winding, contour_distance in zip(self._windings, contour_distances, strict=True):
            if contour_winding != winding:
                contour_median = contour_distance.median()
                result_median = result.median()
                if contour_median * result_median >= 0 and abs(contour_median) < abs(result_median):
                    result = contour_distance

        if result.median() == shape_distance.median():
            return shape_distance
        return result
