"""Tests for the geometry kernel."""

import pytest

from glyphfield.domain.geometry import (
    ZERO,
    Vector2,
    clamp,
    get_orthonormal,
    median,
    mix,
    non_zero_sign,
    sign,
    solve_cubic,
    solve_quadratic,
    vec_mix,
)


class TestScalarHelpers:
    """Tests for median, mix, clamp and sign helpers."""

    @pytest.mark.parametrize(
        "values, expected",
        [
            ((1.0, 2.0, 3.0), 2.0),
            ((3.0, 1.0, 2.0), 2.0),
            ((2.0, 3.0, 1.0), 2.0),
            ((5.0, 5.0, -1.0), 5.0),
        ],
    )
    def test_median(self, values: tuple[float, float, float], expected: float) -> None:
        """Test median of three in every ordering."""
        assert median(*values) == expected

    def test_mix(self) -> None:
        assert mix(0.0, 10.0, 0.25) == 2.5
        assert vec_mix(Vector2(0, 0), Vector2(4, 8), 0.5) == Vector2(2, 4)

    def test_clamp(self) -> None:
        assert clamp(-1.0, 0.0, 1.0) == 0.0
        assert clamp(2.0, 0.0, 1.0) == 1.0
        assert clamp(0.3, 0.0, 1.0) == 0.3

    def test_sign(self) -> None:
        """Test sign reports zero while non_zero_sign treats it as negative."""
        assert sign(-2.0) == -1
        assert sign(0.0) == 0
        assert sign(3.0) == 1
        assert non_zero_sign(0.0) == -1
        assert non_zero_sign(1e-9) == 1

    def test_get_orthonormal_degenerate(self) -> None:
        """Test a zero direction yields the zero vector."""
        assert get_orthonormal(ZERO) == Vector2(0.0, 0.0)
        assert get_orthonormal(Vector2(0.0, 3.0)) == Vector2(-1.0, 0.0)


class TestSolveQuadratic:
    """Tests for the quadratic solver."""

    def test_two_roots(self) -> None:
        assert sorted(solve_quadratic(1.0, -3.0, 2.0)) == [1.0, 2.0]

    def test_double_root(self) -> None:
        assert solve_quadratic(1.0, -2.0, 1.0) == [1.0]

    def test_no_real_roots(self) -> None:
        assert solve_quadratic(1.0, 0.0, 1.0) == []

    def test_linear_fallback(self) -> None:
        """Test a zero quadratic coefficient solves the linear equation."""
        assert solve_quadratic(0.0, 2.0, -4.0) == [2.0]

    def test_all_zero_reports_no_roots(self) -> None:
        """Test the identity equation reports no roots instead of raising."""
        assert solve_quadratic(0.0, 0.0, 0.0) == []
        assert solve_quadratic(0.0, 0.0, 5.0) == []


class TestSolveCubic:
    """Tests for the cubic solver."""

    def test_three_roots(self) -> None:
        """Test (x-1)(x-2)(x-3) = 0."""
        roots = sorted(solve_cubic(1.0, -6.0, 11.0, -6.0))
        assert roots == pytest.approx([1.0, 2.0, 3.0])

    def test_single_real_root(self) -> None:
        """Test x^3 + x - 2 = 0 has the single real root 1."""
        roots = solve_cubic(1.0, 0.0, 1.0, -2.0)
        assert len(roots) == 1
        assert roots[0] == pytest.approx(1.0)

    def test_degrades_to_quadratic(self) -> None:
        """Test a zero cubic coefficient falls back to the quadratic solver."""
        assert sorted(solve_cubic(0.0, 1.0, -3.0, 2.0)) == [1.0, 2.0]

    def test_roots_satisfy_equation(self) -> None:
        a, b, c, d = 2.0, -3.0, -11.0, 6.0
        for x in solve_cubic(a, b, c, d):
            assert a * x**3 + b * x**2 + c * x + d == pytest.approx(0.0, abs=1e-9)
