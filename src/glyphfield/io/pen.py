"""fontTools pen that records outlines into a Shape."""

from typing import Any

from fontTools.pens.basePen import BasePen

from glyphfield.domain import Contour, EdgeSegment, Shape, Vector2


class ShapePen(BasePen):
    """Pen that turns drawing commands into shape contours.

    Multi-point quadratic runs (TrueType) and multi-point cubic runs are
    split into single segments by BasePen before they reach this pen.
    Components are decomposed through the glyph set when one is given.
    An open path is kept open; Shape.validate() closes it later.

    Example:
        pen = ShapePen(font.getGlyphSet())
        font.getGlyphSet()["A"].draw(pen)
        shape = pen.shape
    """

    def __init__(self, glyph_set: Any = None, shape: Shape | None = None) -> None:
        super().__init__(glyph_set)
        self.shape = shape if shape is not None else Shape()
        self._contour: Contour | None = None
        self._start: Vector2 | None = None

    def _current(self) -> Vector2:
        return Vector2(*self._getCurrentPoint())

    def _add(self, edge: EdgeSegment) -> None:
        if self._contour is None:
            self._contour = self.shape.add_contour()
        self._contour.add_edge(edge)

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self._contour = self.shape.add_contour()
        self._start = Vector2(*pt)

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self._add(EdgeSegment.linear(self._current(), Vector2(*pt)))

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        self._add(EdgeSegment.quadratic(self._current(), Vector2(*pt1), Vector2(*pt2)))

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        self._add(
            EdgeSegment.cubic(self._current(), Vector2(*pt1), Vector2(*pt2), Vector2(*pt3))
        )

    def _closePath(self) -> None:
        if self._start is not None:
            current = self._current()
            if current != self._start:
                self._add(EdgeSegment.linear(current, self._start))
        self._contour = None
        self._start = None

    def _endPath(self) -> None:
        self._contour = None
        self._start = None
