"""Tests for the shape preparation passes: validate, normalize, orient."""

import pytest

from glyphfield.domain import Contour, EdgeSegment, Shape, Vector2
from tests.conftest import make_square_with_hole, polygon_contour, square_points


def _lens() -> Contour:
    return Contour(
        edges=[
            EdgeSegment.quadratic(Vector2(0, 0), Vector2(1, 1), Vector2(2, 0)),
            EdgeSegment.quadratic(Vector2(2, 0), Vector2(1, -1), Vector2(0, 0)),
        ]
    )


def _loop() -> Contour:
    """Single cubic edge that starts and ends at the origin."""
    return Contour(
        edges=[EdgeSegment.cubic(Vector2(0, 0), Vector2(3, 2), Vector2(3, -2), Vector2(0, 0))]
    )


class TestValidate:
    """Tests for Shape.validate()."""

    def test_closes_open_contour(self) -> None:
        """Test a gap is closed with a linear edge."""
        contour = Contour(
            edges=[
                EdgeSegment.linear(Vector2(0, 0), Vector2(1, 0)),
                EdgeSegment.linear(Vector2(1, 0), Vector2(1, 1)),
            ]
        )
        shape = Shape(contours=[contour])
        shape.validate()

        assert len(contour) == 3
        assert contour.edges[-1].start == Vector2(1, 1)
        assert contour.edges[-1].end == Vector2(0, 0)
        assert contour.is_closed()
        assert shape.validated

    def test_drops_degenerate_edges(self) -> None:
        contour = polygon_contour(square_points(1.0))
        contour.edges.insert(1, EdgeSegment.linear(Vector2(1, -1), Vector2(1, -1)))
        shape = Shape(contours=[contour])
        shape.validate()

        assert len(contour) == 4
        assert contour.is_closed()

    def test_drops_empty_contours(self) -> None:
        """Test contours left without edges are removed."""
        degenerate = Contour(edges=[EdgeSegment.linear(Vector2(2, 2), Vector2(2, 2))])
        shape = Shape(contours=[Contour(), polygon_contour(square_points(1.0)), degenerate])
        shape.validate()

        assert len(shape.contours) == 1
        assert shape.edge_count() == 4

    def test_drops_flat_contours(self) -> None:
        """Test contours that double back on themselves are removed."""
        shape = Shape(
            contours=[
                polygon_contour(square_points(1.0)),
                polygon_contour([(3, 0), (4, 0)]),
                polygon_contour([(0, 3), (1, 4), (2, 5)]),
            ]
        )
        shape.validate()

        assert len(shape.contours) == 1
        assert shape.edge_count() == 4

    def test_keeps_curved_contour_on_collinear_anchors(self) -> None:
        """Test curves between collinear anchors still enclose area."""
        contour = Contour(
            edges=[
                EdgeSegment.quadratic(Vector2(0, 0), Vector2(1, 1), Vector2(2, 0)),
                EdgeSegment.linear(Vector2(2, 0), Vector2(4, 0)),
                EdgeSegment.quadratic(Vector2(4, 0), Vector2(2, -2), Vector2(0, 0)),
            ]
        )
        shape = Shape(contours=[contour])
        shape.validate()
        assert len(shape.contours) == 1

    def test_encloses_area(self, unit_square: Shape) -> None:
        assert unit_square.contours[0].encloses_area()
        assert _lens().encloses_area()
        assert not polygon_contour([(0, 0), (1, 1)]).encloses_area()
        assert not Contour().encloses_area()

    def test_valid_shape_unchanged(self, unit_square: Shape) -> None:
        before = unit_square.to_dict()
        unit_square.validate()
        assert unit_square.to_dict() == before


class TestNormalize:
    """Tests for Shape.normalize()."""

    def test_single_edge_split_in_three(self) -> None:
        original = _loop().edges[0]
        shape = Shape(contours=[_loop()])
        shape.normalize()

        edges = shape.contours[0].edges
        assert len(edges) == 3
        for k, piece in enumerate(edges):
            for s in (0.0, 0.5, 1.0):
                expected = original.point_at((k + s) / 3)
                actual = piece.point_at(s)
                assert actual.x == pytest.approx(expected.x)
                assert actual.y == pytest.approx(expected.y)

    def test_two_edges_split_in_six(self) -> None:
        """Test a two-edge lens traces the same path after normalizing."""
        original = _lens()
        shape = Shape(contours=[_lens()])
        shape.normalize()

        edges = shape.contours[0].edges
        assert len(edges) == 6
        assert shape.contours[0].is_closed()
        for k, piece in enumerate(edges):
            source = original.edges[k // 3]
            expected = source.point_at((k % 3 + 0.5) / 3)
            actual = piece.point_at(0.5)
            assert actual.x == pytest.approx(expected.x)
            assert actual.y == pytest.approx(expected.y)

    def test_idempotent(self) -> None:
        shape = Shape(contours=[_lens(), polygon_contour(square_points(1.0))])
        shape.normalize()
        counts = [len(c) for c in shape.contours]
        shape.normalize()
        assert [len(c) for c in shape.contours] == counts
        assert counts == [6, 4]
        assert shape.normalized


class TestOrientContours:
    """Tests for Shape.orient_contours()."""

    @pytest.mark.parametrize("reverse_outer", [False, True])
    @pytest.mark.parametrize("reverse_inner", [False, True])
    def test_hole_winding_differs(self, reverse_outer: bool, reverse_inner: bool) -> None:
        """Test an outer contour and its hole end up with opposite windings."""
        shape = make_square_with_hole()
        if reverse_outer:
            shape.contours[0].reverse()
        if reverse_inner:
            shape.contours[1].reverse()

        shape.orient_contours()

        outer, inner = shape.contours
        assert outer.winding() == 1
        assert inner.winding() == -1
        assert shape.oriented

    def test_single_contour_positive(self, unit_square: Shape) -> None:
        """Test a lone contour is oriented to positive winding."""
        assert unit_square.contours[0].winding() == -1
        unit_square.orient_contours()
        assert unit_square.contours[0].winding() == 1

    def test_separate_contours_both_positive(self) -> None:
        shape = Shape(
            contours=[
                polygon_contour(square_points(1.0)),
                polygon_contour(list(reversed(square_points(1.0, cx=5.0)))),
            ]
        )
        shape.orient_contours()
        assert [c.winding() for c in shape.contours] == [1, 1]

    def test_curved_contour(self) -> None:
        shape = Shape(contours=[_lens()])
        shape.normalize()
        shape.orient_contours()
        assert shape.contours[0].winding() == 1
