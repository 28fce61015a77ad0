"""Tests for edge coloring."""

import math

import pytest

from glyphfield.core.coloring import (
    DEFAULT_ANGLE_THRESHOLD,
    TEARDROP_COLORS,
    ColorSwitcher,
    color_ink_trap,
    color_simple,
    estimate_edge_length,
    find_corners,
    is_corner,
    symmetrical_trichotomy,
)
from glyphfield.domain import Contour, EdgeColor, EdgeSegment, Shape, Vector2
from tests.conftest import make_square, polygon_contour

TWO_CHANNEL = {EdgeColor.CYAN, EdgeColor.MAGENTA, EdgeColor.YELLOW}


def _teardrop() -> Shape:
    """Four edges with a single 90 degree corner at the origin."""
    contour = Contour(
        edges=[
            EdgeSegment.linear(Vector2(0, 0), Vector2(2, 0)),
            EdgeSegment.quadratic(Vector2(2, 0), Vector2(3, 0), Vector2(3, 1)),
            EdgeSegment.quadratic(Vector2(3, 1), Vector2(3, 2), Vector2(2, 2)),
            EdgeSegment.quadratic(Vector2(2, 2), Vector2(0, 2), Vector2(0, 0)),
        ]
    )
    return Shape(contours=[contour])


def _circle() -> Shape:
    """Four quadratic edges with no corners."""
    contour = Contour(
        edges=[
            EdgeSegment.quadratic(Vector2(1, 0), Vector2(1, 1), Vector2(0, 1)),
            EdgeSegment.quadratic(Vector2(0, 1), Vector2(-1, 1), Vector2(-1, 0)),
            EdgeSegment.quadratic(Vector2(-1, 0), Vector2(-1, -1), Vector2(0, -1)),
            EdgeSegment.quadratic(Vector2(0, -1), Vector2(1, -1), Vector2(1, 0)),
        ]
    )
    return Shape(contours=[contour])


def _notched() -> Shape:
    """Polygon with a narrow notch: several corners with one short run."""
    return Shape(
        contours=[
            polygon_contour(
                [(0, 0), (10, 0), (10, 10), (5.5, 10), (5, 6), (4.5, 10), (0, 10)]
            )
        ]
    )


def _adjacent_colors_differ(contour: Contour) -> bool:
    edges = contour.edges
    return all(edges[i - 1].color != edges[i].color for i in range(len(edges)))


class TestColorSwitcher:
    """Tests for the seeded color state."""

    def test_initial_color_from_seed(self) -> None:
        assert ColorSwitcher(0).color == EdgeColor.CYAN
        assert ColorSwitcher(1).color == EdgeColor.MAGENTA
        assert ColorSwitcher(2).color == EdgeColor.YELLOW

    def test_switch_sequence(self) -> None:
        """Test seed 0 cycles through the two-channel colors."""
        switcher = ColorSwitcher(0)
        assert switcher.switch() == EdgeColor.MAGENTA
        assert switcher.switch() == EdgeColor.YELLOW
        assert switcher.switch() == EdgeColor.CYAN

    def test_banned_color(self) -> None:
        """Test a banned color sharing one channel forces the third color."""
        switcher = ColorSwitcher(0)
        assert switcher.switch(banned=EdgeColor.YELLOW) == EdgeColor.MAGENTA

    def test_switch_never_repeats(self) -> None:
        switcher = ColorSwitcher(123456789)
        previous = switcher.color
        for _ in range(50):
            current = switcher.switch()
            assert current != previous
            assert current in TWO_CHANNEL
            previous = current


class TestCornerDetection:
    """Tests for corner helpers."""

    def test_is_corner(self) -> None:
        threshold = math.sin(DEFAULT_ANGLE_THRESHOLD)
        assert is_corner(Vector2(1, 0), Vector2(0, 1), threshold)
        assert is_corner(Vector2(1, 0), Vector2(-1, 0), threshold)
        assert not is_corner(Vector2(1, 0), Vector2(1, 0), threshold)

    def test_find_corners_square(self) -> None:
        contour = make_square().contours[0]
        assert find_corners(contour, math.sin(DEFAULT_ANGLE_THRESHOLD)) == [0, 1, 2, 3]

    @pytest.mark.parametrize("position, expected", [(0, -1), (1, 0), (2, 1)])
    def test_symmetrical_trichotomy(self, position: int, expected: int) -> None:
        assert symmetrical_trichotomy(position, 3) == expected

    def test_estimate_edge_length(self) -> None:
        edge = EdgeSegment.linear(Vector2(0, 0), Vector2(3, 4))
        assert estimate_edge_length(edge) == pytest.approx(5.0)


class TestColorSimple:
    """Tests for color_simple()."""

    def test_teardrop_three_colors(self) -> None:
        """Test a single corner spreads three distinct colors."""
        shape = _teardrop()
        color_simple(shape)
        colors = [edge.color for edge in shape.contours[0].edges]
        assert set(colors) == set(TEARDROP_COLORS)
        assert colors[0] == EdgeColor.MAGENTA
        assert colors[-1] == EdgeColor.CYAN

    def test_teardrop_single_edge_is_split(self) -> None:
        """Test a one-edge teardrop is split so three colors fit."""
        contour = Contour(
            edges=[EdgeSegment.cubic(Vector2(0, 0), Vector2(3, 2), Vector2(3, -2), Vector2(0, 0))]
        )
        shape = Shape(contours=[contour])
        color_simple(shape)
        assert [edge.color for edge in contour.edges] == list(TEARDROP_COLORS)
        assert contour.is_closed()

    def test_smooth_contour_single_color(self) -> None:
        """Test a contour without corners gets one color on every edge."""
        shape = _circle()
        color_simple(shape)
        colors = {edge.color for edge in shape.contours[0].edges}
        assert len(colors) == 1
        assert colors <= TWO_CHANNEL

    def test_square_corners_change_color(self) -> None:
        shape = make_square()
        color_simple(shape, seed=7)
        contour = shape.contours[0]
        assert all(edge.color in TWO_CHANNEL for edge in contour.edges)
        assert _adjacent_colors_differ(contour)

    def test_deterministic(self) -> None:
        """Test the same seed always produces the same coloring."""
        first, second = _notched(), _notched()
        color_simple(first, seed=42)
        color_simple(second, seed=42)
        assert [e.color for e in first.contours[0].edges] == [
            e.color for e in second.contours[0].edges
        ]

    def test_seed_changes_coloring(self) -> None:
        first, second = make_square(), make_square()
        color_simple(first, seed=0)
        color_simple(second, seed=1)
        assert [e.color for e in first.contours[0].edges] != [
            e.color for e in second.contours[0].edges
        ]


class TestColorInkTrap:
    """Tests for color_ink_trap()."""

    def test_square_matches_simple_constraints(self) -> None:
        shape = make_square()
        color_ink_trap(shape, seed=3)
        contour = shape.contours[0]
        assert all(edge.color in TWO_CHANNEL for edge in contour.edges)
        assert _adjacent_colors_differ(contour)

    def test_notch_colors_are_valid(self) -> None:
        """Test every edge of a notched outline gets a two-channel color."""
        shape = _notched()
        color_ink_trap(shape, seed=5)
        contour = shape.contours[0]
        assert all(edge.color in TWO_CHANNEL for edge in contour.edges)

    def test_teardrop_and_smooth_cases(self) -> None:
        teardrop = _teardrop()
        color_ink_trap(teardrop)
        assert {e.color for e in teardrop.contours[0].edges} == set(TEARDROP_COLORS)

        circle = _circle()
        color_ink_trap(circle)
        assert len({e.color for e in circle.contours[0].edges}) == 1
