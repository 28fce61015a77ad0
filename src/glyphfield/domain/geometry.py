"""Geometry kernel for distance field generation.

This module provides the numeric building blocks used by edge segments:
- Vector2: An immutable 2D vector with the arithmetic the segments need
- median, mix, clamp, sign helpers
- Closed-form quadratic and cubic equation solvers
- get_orthonormal: Unit perpendicular of a direction

All functions are pure and stateless. Degenerate inputs never raise; they
fall back to well-defined vectors or report no roots.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vector2:
    """A 2D vector (or point) in shape space.

    Immutable and hashable. Supports vector addition and subtraction,
    scalar multiplication and division, and component-wise division by
    another vector.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    def __truediv__(self, other: "float | Vector2") -> "Vector2":
        if isinstance(other, Vector2):
            return Vector2(self.x / other.x, self.y / other.y)
        return Vector2(self.x / other, self.y / other)

    def dot(self, other: "Vector2") -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector2") -> float:
        """Z component of the 2D cross product with another vector."""
        return self.x * other.y - self.y * other.x

    def squared_length(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0

    def normalize(self, allow_zero: bool = False) -> "Vector2":
        """Return the unit vector in the same direction.

        Args:
            allow_zero: If True, a zero vector normalizes to (0, 0);
                otherwise it normalizes to (0, 1)

        Returns:
            Unit-length vector, or the fallback for zero-length input
        """
        length = self.length()
        if length != 0:
            return Vector2(self.x / length, self.y / length)
        return Vector2(0.0, 0.0 if allow_zero else 1.0)

    def orthonormal(self, polarity: bool = True, allow_zero: bool = False) -> "Vector2":
        """Return a unit vector perpendicular to this one.

        Args:
            polarity: True rotates counter-clockwise (-y, x), False rotates
                clockwise (y, -x)
            allow_zero: If True, a zero vector yields (0, 0)

        Returns:
            Perpendicular unit vector
        """
        length = self.length()
        if length != 0:
            if polarity:
                return Vector2(-self.y / length, self.x / length)
            return Vector2(self.y / length, -self.x / length)
        fallback = 0.0 if allow_zero else 1.0
        return Vector2(0.0, fallback if polarity else -fallback)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)


ZERO = Vector2(0.0, 0.0)


def get_orthonormal(direction: Vector2, polarity: bool = True) -> Vector2:
    """Perpendicular unit vector of a direction.

    Used for pseudo-distance extension and corner bisection. Zero-length
    directions yield (0, 0) instead of raising.

    Args:
        direction: Direction vector (need not be normalized)
        polarity: True for counter-clockwise rotation, False for clockwise

    Returns:
        Unit perpendicular, or the zero vector for degenerate input
    """
    return direction.orthonormal(polarity=polarity, allow_zero=True)


def median(a: float, b: float, c: float) -> float:
    """Median of three values."""
    return max(min(a, b), min(max(a, b), c))


def mix(a: float, b: float, weight: float) -> float:
    """Linear interpolation between two scalars."""
    return (1.0 - weight) * a + weight * b


def vec_mix(a: Vector2, b: Vector2, weight: float) -> Vector2:
    """Linear interpolation between two vectors."""
    return Vector2((1.0 - weight) * a.x + weight * b.x, (1.0 - weight) * a.y + weight * b.y)


def clamp(n: float, lower: float, upper: float) -> float:
    """Clamp n into [lower, upper]."""
    if n < lower:
        return lower
    if n > upper:
        return upper
    return n


def sign(n: float) -> int:
    """Sign of n as -1, 0 or 1."""
    return (n > 0) - (n < 0)


def non_zero_sign(n: float) -> int:
    """Sign of n as -1 or 1; zero counts as negative."""
    return 1 if n > 0 else -1


def solve_quadratic(a: float, b: float, c: float) -> list[float]:
    """Solve a*x^2 + b*x + c = 0.

    Falls back to the linear equation when the quadratic coefficient is zero
    or negligible relative to the linear one.

    Args:
        a: Quadratic coefficient
        b: Linear coefficient
        c: Constant term

    Returns:
        Real roots (0, 1 or 2 of them). An identity (0 = 0) reports no roots.

    Examples:
        >>> solve_quadratic(1.0, -3.0, 2.0)
        [2.0, 1.0]
    """
    if a == 0 or abs(b) > 1e12 * abs(a):
        if b == 0:
            return []
        return [-c / b]

    discriminant = b * b - 4 * a * c
    if discriminant > 0:
        discriminant = math.sqrt(discriminant)
        return [(-b + discriminant) / (2 * a), (-b - discriminant) / (2 * a)]
    if discriminant == 0:
        return [-b / (2 * a)]
    return []


def _solve_cubic_normed(a: float, b: float, c: float) -> list[float]:
    """Solve x^3 + a*x^2 + b*x + c = 0 (trigonometric / Cardano)."""
    a2 = a * a
    q = (a2 - 3 * b) / 9.0
    r = (a * (2 * a2 - 9 * b) + 27 * c) / 54.0
    r2 = r * r
    q3 = q * q * q
    a_third = a / 3.0

    if r2 < q3:
        t = clamp(r / math.sqrt(q3), -1.0, 1.0)
        t = math.acos(t)
        q = -2 * math.sqrt(q)
        return [
            q * math.cos(t / 3.0) - a_third,
            q * math.cos((t + 2 * math.pi) / 3.0) - a_third,
            q * math.cos((t - 2 * math.pi) / 3.0) - a_third,
        ]

    u = (1 if r < 0 else -1) * (abs(r) + math.sqrt(r2 - q3)) ** (1.0 / 3.0)
    v = 0.0 if u == 0 else q / u
    roots = [(u + v) - a_third]
    if u == v or abs(u - v) < 1e-12 * abs(u + v):
        roots.append(-0.5 * (u + v) - a_third)
    return roots


def solve_cubic(a: float, b: float, c: float, d: float) -> list[float]:
    """Solve a*x^3 + b*x^2 + c*x + d = 0.

    Degrades to solve_quadratic when the cubic coefficient is zero or too
    small for a stable normalization.

    Args:
        a: Cubic coefficient
        b: Quadratic coefficient
        c: Linear coefficient
        d: Constant term

    Returns:
        Real roots (0 to 3 of them), unordered
    """
    if a != 0:
        bn = b / a
        if abs(bn) < 1e6:
            return _solve_cubic_normed(bn, c / a, d / a)
    return solve_quadratic(b, c, d)
