"""Shared fixtures: small shapes and a tiny TrueType font built on the fly."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphfield.domain import Contour, EdgeSegment, Shape, Vector2

UNITS_PER_EM = 1000


def polygon_contour(points: list[tuple[float, float]]) -> Contour:
    """Closed contour of linear edges through the given points."""
    contour = Contour()
    for i, (x, y) in enumerate(points):
        nx, ny = points[(i + 1) % len(points)]
        contour.add_edge(EdgeSegment.linear(Vector2(x, y), Vector2(nx, ny)))
    return contour


def square_points(half: float, cx: float = 0.0, cy: float = 0.0) -> list[tuple[float, float]]:
    """Counter-clockwise (Y up) square corners."""
    return [
        (cx - half, cy - half),
        (cx + half, cy - half),
        (cx + half, cy + half),
        (cx - half, cy + half),
    ]


def make_square(half: float = 0.5) -> Shape:
    return Shape(contours=[polygon_contour(square_points(half))])


def make_square_with_hole(outer: float = 2.0, inner: float = 1.0) -> Shape:
    """Square with a square hole, both drawn in the same direction."""
    return Shape(
        contours=[
            polygon_contour(square_points(outer)),
            polygon_contour(square_points(inner)),
        ]
    )


@pytest.fixture
def unit_square() -> Shape:
    """Unit square centered on the origin, anchors at (+-0.5, +-0.5)."""
    return make_square()


@pytest.fixture
def square_with_hole() -> Shape:
    return make_square_with_hole()


@pytest.fixture
def triangle() -> Shape:
    """Asymmetric right triangle."""
    return Shape(contours=[polygon_contour([(0.0, 0.0), (3.0, 0.0), (0.0, 2.0)])])


def _draw_rect(pen: TTGlyphPen, x0: int, y0: int, x1: int, y1: int) -> None:
    # Clockwise with Y up (TrueType outer direction)
    pen.moveTo((x0, y0))
    pen.lineTo((x0, y1))
    pen.lineTo((x1, y1))
    pen.lineTo((x1, y0))
    pen.closePath()


def _draw_rect_ccw(pen: TTGlyphPen, x0: int, y0: int, x1: int, y1: int) -> None:
    pen.moveTo((x0, y0))
    pen.lineTo((x1, y0))
    pen.lineTo((x1, y1))
    pen.lineTo((x0, y1))
    pen.closePath()


def build_test_font(path: Path) -> Path:
    """Write a TrueType font with glyphs for space, 'O', 'I' and 'D'.

    'O' is a square ring, 'I' a bar and 'D' a quadratic bowl.
    """
    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    glyph_order = [".notdef", "space", "O", "I", "D"]
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({0x20: "space", ord("O"): "O", ord("I"): "I", ord("D"): "D"})

    glyphs = {}

    pen = TTGlyphPen(None)
    _draw_rect(pen, 50, 0, 450, 700)
    _draw_rect_ccw(pen, 100, 50, 400, 650)
    glyphs[".notdef"] = pen.glyph()

    glyphs["space"] = TTGlyphPen(None).glyph()

    pen = TTGlyphPen(None)
    _draw_rect(pen, 100, 0, 500, 400)
    _draw_rect_ccw(pen, 200, 100, 400, 300)
    glyphs["O"] = pen.glyph()

    pen = TTGlyphPen(None)
    _draw_rect(pen, 100, 0, 200, 500)
    glyphs["I"] = pen.glyph()

    pen = TTGlyphPen(None)
    pen.moveTo((100, 0))
    pen.lineTo((100, 500))
    pen.qCurveTo((450, 500), (450, 250))
    pen.qCurveTo((450, 0), (100, 0))
    pen.closePath()
    glyphs["D"] = pen.glyph()

    fb.setupGlyf(glyphs)
    # The glyf glyph set shifts outlines by lsb - xMin, so lsb must equal xMin
    fb.setupHorizontalMetrics(
        {name: (600, getattr(glyphs[name], "xMin", 0)) for name in glyph_order}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Glyphfield Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def test_font(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Path to a freshly built TrueType test font."""
    return build_test_font(tmp_path_factory.mktemp("fonts") / "GlyphfieldTest.ttf")
