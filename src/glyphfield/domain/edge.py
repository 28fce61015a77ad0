"""Edge segment model: linear, quadratic and cubic outline primitives.

This module defines the edge types used throughout glyphfield:
- EdgeColor: Bit flags selecting which RGB channels an edge contributes to
- EdgeKind: Discriminant of the edge segment variant
- SignedDistance: Distance/orthogonality pair for nearest-edge comparisons
- EdgeSegment: A single curve primitive with distance queries

EdgeSegment is a tagged union: one class whose `kind` field selects the
geometry (2, 3 or 4 control points in Bezier order). Every query dispatches
on `kind` explicitly.
"""

import math
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any, ClassVar

from glyphfield.domain.geometry import (
    Vector2,
    non_zero_sign,
    sign,
    solve_cubic,
    solve_quadratic,
    vec_mix,
)

# Newton iteration parameters for cubic nearest-point search
CUBIC_SEARCH_STARTS = 4
CUBIC_SEARCH_STEPS = 4


class EdgeColor(IntFlag):
    """Channels an edge contributes to.

    Two-channel combinations (CYAN, MAGENTA, YELLOW) are what the coloring
    pass assigns; WHITE is the uncolored default.
    """

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class EdgeKind(Enum):
    """Edge segment variant."""

    LINEAR = 2
    QUADRATIC = 3
    CUBIC = 4

    @property
    def point_count(self) -> int:
        """Number of control points the variant carries."""
        return self.value


@dataclass(frozen=True, slots=True)
class SignedDistance:
    """Signed distance to an edge plus a tie-breaking orthogonality term.

    Candidates compare by absolute distance first; equal magnitudes are
    resolved by the smaller `dot` (a more perpendicular projection).

    Attributes:
        distance: Signed distance, positive on the interior side
        dot: |cos| between the endpoint tangent and the direction to the
            query point; 0 when the nearest point is inside the segment
    """

    distance: float
    dot: float

    INFINITE: ClassVar["SignedDistance"]

    def __lt__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot < other.dot)

    def __le__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot <= other.dot)

    def __gt__(self, other: "SignedDistance") -> bool:
        return other < self

    def __ge__(self, other: "SignedDistance") -> bool:
        return other <= self


INFINITE_DISTANCE = SignedDistance(-math.inf, 1.0)
SignedDistance.INFINITE = INFINITE_DISTANCE


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator != 0 else 0.0


def _blossom(points: tuple[Vector2, ...], params: tuple[float, ...]) -> Vector2:
    """Evaluate the polar form of a Bezier curve at the given parameters."""
    current = list(points)
    for t in params:
        current = [vec_mix(a, b, t) for a, b in zip(current, current[1:], strict=False)]
    return current[0]


@dataclass(slots=True)
class EdgeSegment:
    """A single outline edge: a linear, quadratic or cubic Bezier segment.

    Use the `linear`, `quadratic` and `cubic` factories rather than the raw
    constructor; the quadratic factory repairs a collinear control point.

    Attributes:
        kind: Variant discriminant
        points: Control points in Bezier order (start, controls..., end)
        color: Channels this edge contributes to
    """

    kind: EdgeKind
    points: tuple[Vector2, ...]
    color: EdgeColor = EdgeColor.WHITE

    def __post_init__(self) -> None:
        if len(self.points) != self.kind.point_count:
            raise ValueError(
                f"{self.kind.name} edge needs {self.kind.point_count} points, got {len(self.points)}"
            )

    @classmethod
    def linear(cls, p0: Vector2, p1: Vector2, color: EdgeColor = EdgeColor.WHITE) -> "EdgeSegment":
        """Create a straight edge from p0 to p1."""
        return cls(EdgeKind.LINEAR, (p0, p1), color)

    @classmethod
    def quadratic(
        cls,
        p0: Vector2,
        control: Vector2,
        p1: Vector2,
        color: EdgeColor = EdgeColor.WHITE,
    ) -> "EdgeSegment":
        """Create a quadratic Bezier edge.

        A control point collinear with the endpoints is moved to the chord
        midpoint so the tangent never vanishes.
        """
        if (control - p0).cross(p1 - control) == 0:
            control = (p0 + p1) * 0.5
        return cls(EdgeKind.QUADRATIC, (p0, control, p1), color)

    @classmethod
    def cubic(
        cls,
        p0: Vector2,
        control0: Vector2,
        control1: Vector2,
        p1: Vector2,
        color: EdgeColor = EdgeColor.WHITE,
    ) -> "EdgeSegment":
        """Create a cubic Bezier edge."""
        return cls(EdgeKind.CUBIC, (p0, control0, control1, p1), color)

    @property
    def start(self) -> Vector2:
        return self.points[0]

    @property
    def end(self) -> Vector2:
        return self.points[-1]

    def copy(self) -> "EdgeSegment":
        return EdgeSegment(self.kind, self.points, self.color)

    def is_degenerate(self) -> bool:
        """True if every control point coincides (zero-length edge)."""
        first = self.points[0]
        return all(p == first for p in self.points[1:])

    def point_at(self, t: float) -> Vector2:
        """Point on the edge at parameter t.

        t=0 and t=1 return the stored endpoints exactly.
        """
        if t == 0:
            return self.points[0]
        if t == 1:
            return self.points[-1]

        if self.kind is EdgeKind.LINEAR:
            p0, p1 = self.points
            return vec_mix(p0, p1, t)
        if self.kind is EdgeKind.QUADRATIC:
            p0, p1, p2 = self.points
            return vec_mix(vec_mix(p0, p1, t), vec_mix(p1, p2, t), t)
        p0, p1, p2, p3 = self.points
        p12 = vec_mix(p1, p2, t)
        return vec_mix(
            vec_mix(vec_mix(p0, p1, t), p12, t),
            vec_mix(p12, vec_mix(p2, p3, t), t),
            t,
        )

    def direction_at(self, t: float) -> Vector2:
        """Tangent direction at parameter t (not normalized).

        Curves whose derivative vanishes at an endpoint fall back to the
        chord through the next control point.
        """
        if self.kind is EdgeKind.LINEAR:
            p0, p1 = self.points
            return p1 - p0
        if self.kind is EdgeKind.QUADRATIC:
            p0, p1, p2 = self.points
            tangent = vec_mix(p1 - p0, p2 - p1, t)
            if tangent.is_zero():
                return p2 - p0
            return tangent
        p0, p1, p2, p3 = self.points
        tangent = vec_mix(vec_mix(p1 - p0, p2 - p1, t), vec_mix(p2 - p1, p3 - p2, t), t)
        if tangent.is_zero():
            if t == 0:
                return p2 - p0
            if t == 1:
                return p3 - p1
        return tangent

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        """Signed distance from origin to the nearest point of this edge.

        Args:
            origin: Query point in shape space

        Returns:
            Tuple of (signed distance, curve parameter of the nearest point).
            A parameter outside [0, 1] means the nearest point is an endpoint
            and tells which side the origin lies beyond.
        """
        if self.kind is EdgeKind.LINEAR:
            return self._linear_distance(origin)
        if self.kind is EdgeKind.QUADRATIC:
            return self._quadratic_distance(origin)
        return self._cubic_distance(origin)

    def _linear_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1 = self.points
        aq = origin - p0
        ab = p1 - p0
        param = _ratio(aq.dot(ab), ab.dot(ab))
        eq = (p1 if param > 0.5 else p0) - origin
        endpoint_distance = eq.length()
        if 0 < param < 1:
            ortho_distance = ab.orthonormal(polarity=False).dot(aq)
            if abs(ortho_distance) < endpoint_distance:
                return SignedDistance(ortho_distance, 0.0), param
        return (
            SignedDistance(
                non_zero_sign(aq.cross(ab)) * endpoint_distance,
                abs(ab.normalize().dot(eq.normalize())),
            ),
            param,
        )

    def _quadratic_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1, p2 = self.points
        qa = p0 - origin
        ab = p1 - p0
        br = p2 - p1 - ab
        a = br.dot(br)
        b = 3 * ab.dot(br)
        c = 2 * ab.dot(ab) + qa.dot(br)
        d = qa.dot(ab)
        roots = solve_cubic(a, b, c, d)

        ep_dir = self.direction_at(0)
        min_distance = non_zero_sign(ep_dir.cross(qa)) * qa.length()
        param = -_ratio(qa.dot(ep_dir), ep_dir.dot(ep_dir))

        distance = (p2 - origin).length()
        if distance < abs(min_distance):
            ep_dir = self.direction_at(1)
            min_distance = non_zero_sign(ep_dir.cross(p2 - origin)) * distance
            param = _ratio((origin - p1).dot(ep_dir), ep_dir.dot(ep_dir))

        for t in roots:
            if 0 < t < 1:
                qe = qa + ab * (2 * t) + br * (t * t)
                distance = qe.length()
                if distance <= abs(min_distance):
                    min_distance = non_zero_sign((ab + br * t).cross(qe)) * distance
                    param = t

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            dot = abs(self.direction_at(0).normalize().dot(qa.normalize()))
        else:
            dot = abs(self.direction_at(1).normalize().dot((p2 - origin).normalize()))
        return SignedDistance(min_distance, dot), param

    def _cubic_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1, p2, p3 = self.points
        qa = p0 - origin
        ab = p1 - p0
        br = p2 - p1 - ab
        as_ = (p3 - p2) - (p2 - p1) - br

        ep_dir = self.direction_at(0)
        min_distance = non_zero_sign(ep_dir.cross(qa)) * qa.length()
        param = -_ratio(qa.dot(ep_dir), ep_dir.dot(ep_dir))

        distance = (p3 - origin).length()
        if distance < abs(min_distance):
            ep_dir = self.direction_at(1)
            min_distance = non_zero_sign(ep_dir.cross(p3 - origin)) * distance
            param = _ratio((ep_dir - (p3 - origin)).dot(ep_dir), ep_dir.dot(ep_dir))

        for i in range(CUBIC_SEARCH_STARTS + 1):
            t = i / CUBIC_SEARCH_STARTS
            qe = qa + ab * (3 * t) + br * (3 * t * t) + as_ * (t * t * t)
            d1 = ab * 3 + br * (6 * t) + as_ * (3 * t * t)
            d2 = br * 6 + as_ * (6 * t)
            improved_t = t - _ratio(qe.dot(d1), d1.dot(d1) + qe.dot(d2))
            if not 0 < improved_t < 1:
                continue

            remaining_steps = CUBIC_SEARCH_STEPS
            while True:
                t = improved_t
                qe = qa + ab * (3 * t) + br * (3 * t * t) + as_ * (t * t * t)
                d1 = ab * 3 + br * (6 * t) + as_ * (3 * t * t)
                remaining_steps -= 1
                if remaining_steps == 0:
                    break
                d2 = br * 6 + as_ * (6 * t)
                improved_t = t - _ratio(qe.dot(d1), d1.dot(d1) + qe.dot(d2))
                if not 0 < improved_t < 1:
                    break

            distance = qe.length()
            if distance < abs(min_distance):
                min_distance = non_zero_sign(d1.cross(qe)) * distance
                param = t

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            dot = abs(self.direction_at(0).normalize().dot(qa.normalize()))
        else:
            dot = abs(self.direction_at(1).normalize().dot((p3 - origin).normalize()))
        return SignedDistance(min_distance, dot), param

    def distance_to_pseudo_distance(
        self, distance: SignedDistance, origin: Vector2, param: float
    ) -> SignedDistance:
        """Extend the edge as a ray beyond its endpoints.

        When the nearest point is an endpoint, the distance to the tangent
        ray through that endpoint replaces the endpoint distance if it is no
        larger. This removes the seam between adjacent edges.

        Args:
            distance: True distance from signed_distance()
            origin: Query point
            param: Parameter returned alongside the distance

        Returns:
            Pseudo-distance (unchanged when the origin projects inside)
        """
        if param < 0:
            direction = self.direction_at(0).normalize()
            aq = origin - self.points[0]
            if aq.dot(direction) < 0:
                perpendicular = aq.cross(direction)
                if abs(perpendicular) <= abs(distance.distance):
                    return SignedDistance(perpendicular, 0.0)
        elif param > 1:
            direction = self.direction_at(1).normalize()
            bq = origin - self.points[-1]
            if bq.dot(direction) > 0:
                perpendicular = bq.cross(direction)
                if abs(perpendicular) <= abs(distance.distance):
                    return SignedDistance(perpendicular, 0.0)
        return distance

    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        """Crossings of the horizontal line at height y.

        Args:
            y: Scanline ordinate

        Returns:
            List of (x, dy) pairs where dy is +1 when the edge moves up
            (increasing y) through the crossing and -1 when it moves down.
            Endpoints exactly on the scanline are attributed so that the dy
            sum over a closed contour stays consistent.
        """
        if self.kind is EdgeKind.LINEAR:
            p0, p1 = self.points
            if p0.y <= y < p1.y or p1.y <= y < p0.y:
                param = (y - p0.y) / (p1.y - p0.y)
                return [((1.0 - param) * p0.x + param * p1.x, sign(p1.y - p0.y))]
            return []
        if self.kind is EdgeKind.QUADRATIC:
            return self._quadratic_scanline(y)
        return self._cubic_scanline(y)

    def _quadratic_scanline(self, y: float) -> list[tuple[float, int]]:
        p0, p1, p2 = self.points
        xs = [0.0, 0.0, 0.0]
        dys = [0, 0, 0]
        total = 0
        next_dy = 1 if y > p0.y else -1
        xs[0] = p0.x
        if p0.y == y:
            if p0.y < p1.y or (p0.y == p1.y and p0.y < p2.y):
                dys[0] = 1
                total = 1
            else:
                next_dy = 1

        ab = p1 - p0
        br = p2 - p1 - ab
        for t in sorted(solve_quadratic(br.y, 2 * ab.y, p0.y - y)):
            if total >= 2:
                break
            if 0 <= t <= 1:
                xs[total] = p0.x + 2 * t * ab.x + t * t * br.x
                if next_dy * (ab.y + t * br.y) >= 0:
                    dys[total] = next_dy
                    total += 1
                    next_dy = -next_dy

        if p2.y == y:
            if next_dy > 0 and total > 0:
                total -= 1
                next_dy = -1
            if (p2.y < p1.y or (p2.y == p1.y and p2.y < p0.y)) and total < 2:
                xs[total] = p2.x
                if next_dy < 0:
                    dys[total] = -1
                    total += 1
                    next_dy = 1

        if next_dy != (1 if y >= p2.y else -1):
            if total > 0:
                total -= 1
            else:
                if abs(p2.y - y) < abs(p0.y - y):
                    xs[total] = p2.x
                dys[total] = next_dy
                total += 1

        return list(zip(xs[:total], dys[:total], strict=True))

    def _cubic_scanline(self, y: float) -> list[tuple[float, int]]:
        p0, p1, p2, p3 = self.points
        xs = [0.0, 0.0, 0.0, 0.0]
        dys = [0, 0, 0, 0]
        total = 0
        next_dy = 1 if y > p0.y else -1
        xs[0] = p0.x
        if p0.y == y:
            if p0.y < p1.y or (
                p0.y == p1.y and (p0.y < p2.y or (p0.y == p2.y and p0.y < p3.y))
            ):
                dys[0] = 1
                total = 1
            else:
                next_dy = 1

        ab = p1 - p0
        br = p2 - p1 - ab
        as_ = (p3 - p2) - (p2 - p1) - br
        for t in sorted(solve_cubic(as_.y, 3 * br.y, 3 * ab.y, p0.y - y)):
            if total >= 3:
                break
            if 0 <= t <= 1:
                xs[total] = p0.x + 3 * t * ab.x + 3 * t * t * br.x + t * t * t * as_.x
                if next_dy * (ab.y + 2 * t * br.y + t * t * as_.y) >= 0:
                    dys[total] = next_dy
                    total += 1
                    next_dy = -next_dy

        if p3.y == y:
            if next_dy > 0 and total > 0:
                total -= 1
                next_dy = -1
            if (
                p3.y < p2.y
                or (p3.y == p2.y and (p3.y < p1.y or (p3.y == p1.y and p3.y < p0.y)))
            ) and total < 3:
                xs[total] = p3.x
                if next_dy < 0:
                    dys[total] = -1
                    total += 1
                    next_dy = 1

        if next_dy != (1 if y >= p3.y else -1):
            if total > 0:
                total -= 1
            else:
                if abs(p3.y - y) < abs(p0.y - y):
                    xs[total] = p3.x
                dys[total] = next_dy
                total += 1

        return list(zip(xs[:total], dys[:total], strict=True))

    def bounds(self) -> tuple[float, float, float, float]:
        """Axis-aligned bounding box of the curve.

        Includes interior extrema of curved segments, not just control points.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        extremes = [self.points[0], self.points[-1]]

        if self.kind is EdgeKind.QUADRATIC:
            p0, p1, p2 = self.points
            bot = (p1 - p0) - (p2 - p1)
            if bot.x != 0:
                param = (p1.x - p0.x) / bot.x
                if 0 < param < 1:
                    extremes.append(self.point_at(param))
            if bot.y != 0:
                param = (p1.y - p0.y) / bot.y
                if 0 < param < 1:
                    extremes.append(self.point_at(param))
        elif self.kind is EdgeKind.CUBIC:
            p0, p1, p2, p3 = self.points
            a0 = p1 - p0
            a1 = (p2 - p1 - a0) * 2
            a2 = p3 - p2 * 3 + p1 * 3 - p0
            for param in solve_quadratic(a2.x, a1.x, a0.x) + solve_quadratic(a2.y, a1.y, a0.y):
                if 0 < param < 1:
                    extremes.append(self.point_at(param))

        xs = [p.x for p in extremes]
        ys = [p.y for p in extremes]
        return (min(xs), min(ys), max(xs), max(ys))

    def reverse(self) -> None:
        """Flip the traversal direction of this edge in place."""
        self.points = tuple(reversed(self.points))

    def split(self, t1: float, t2: float) -> list["EdgeSegment"]:
        """Split the edge at two parameters.

        Breakpoints outside the open interval (0, 1) and duplicates are
        ignored, so the result has 1 to 3 pieces. Pieces are exact
        sub-curves and adjacent pieces share identical junction points.

        Args:
            t1: First split parameter
            t2: Second split parameter

        Returns:
            Sub-segments in traversal order, each carrying this edge's color
        """
        cuts = sorted({t for t in (t1, t2) if 0 < t < 1})
        params = [0.0, *cuts, 1.0]
        junctions = [self.point_at(t) for t in params]
        degree = len(self.points) - 1

        pieces: list[EdgeSegment] = []
        for i in range(len(params) - 1):
            a, b = params[i], params[i + 1]
            controls = [
                _blossom(self.points, (a,) * (degree - k) + (b,) * k)
                for k in range(1, degree)
            ]
            pieces.append(
                EdgeSegment(self.kind, (junctions[i], *controls, junctions[i + 1]), self.color)
            )
        return pieces

    def split_in_thirds(self) -> list["EdgeSegment"]:
        """Split into three pieces at t=1/3 and t=2/3."""
        return self.split(1.0 / 3.0, 2.0 / 3.0)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "kind": self.kind.name,
            "points": [p.to_tuple() for p in self.points],
            "color": int(self.color),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EdgeSegment":
        """Deserialize from dictionary."""
        return cls(
            kind=EdgeKind[data["kind"]],
            points=tuple(Vector2(x, y) for x, y in data["points"]),
            color=EdgeColor(data["color"]),
        )
