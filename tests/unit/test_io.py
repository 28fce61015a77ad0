"""Unit tests for the geometry adapters.

Tests for ShapePen, sprite path conversion and FontReader.
"""

from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

from glyphfield.domain import EdgeKind, Vector2
from glyphfield.exceptions import FontLoadError, GlyphNotFoundError, GlyphRenderError
from glyphfield.io import (
    FontReader,
    ShapePen,
    SpriteAnchor,
    SpritePath,
    shape_from_sprite_path,
    shape_from_sprite_paths,
    shapes_from_sprite_paths,
)
from glyphfield.io.paths import sprite_edge


class TestShapePen:
    """Tests for ShapePen class."""

    def test_closed_polygon(self) -> None:
        """Test a closePath adds the closing edge."""
        pen = ShapePen()
        pen.moveTo((0, 0))
        pen.lineTo((10, 0))
        pen.lineTo((10, 10))
        pen.closePath()

        shape = pen.shape
        assert len(shape.contours) == 1
        edges = shape.contours[0].edges
        assert len(edges) == 3
        assert edges[-1].start == Vector2(10, 10)
        assert edges[-1].end == Vector2(0, 0)

    def test_no_closing_edge_when_already_closed(self) -> None:
        pen = ShapePen()
        pen.moveTo((0, 0))
        pen.lineTo((10, 0))
        pen.lineTo((10, 10))
        pen.lineTo((0, 0))
        pen.closePath()
        assert len(pen.shape.contours[0].edges) == 3

    def test_quadratic_run_is_split(self) -> None:
        """Test an implied on-curve point splits a TrueType run."""
        pen = ShapePen()
        pen.moveTo((0, 0))
        pen.qCurveTo((10, 0), (10, 10), (0, 10))
        pen.closePath()

        edges = pen.shape.contours[0].edges
        assert [edge.kind for edge in edges] == [
            EdgeKind.QUADRATIC,
            EdgeKind.QUADRATIC,
            EdgeKind.LINEAR,
        ]
        assert edges[0].end == Vector2(10, 5)

    def test_cubic(self) -> None:
        pen = ShapePen()
        pen.moveTo((0, 0))
        pen.curveTo((0, 10), (10, 10), (10, 0))
        pen.closePath()

        edges = pen.shape.contours[0].edges
        assert edges[0].kind is EdgeKind.CUBIC
        assert edges[0].points[1] == Vector2(0, 10)
        assert edges[1].kind is EdgeKind.LINEAR

    def test_open_path_left_open(self) -> None:
        """Test endPath keeps the contour open until validation."""
        pen = ShapePen()
        pen.moveTo((0, 0))
        pen.lineTo((10, 0))
        pen.lineTo((10, 10))
        pen.endPath()

        shape = pen.shape
        assert len(shape.contours[0].edges) == 2
        assert not shape.contours[0].is_closed()
        shape.validate()
        assert shape.contours[0].is_closed()

    def test_multiple_contours(self) -> None:
        pen = ShapePen()
        for offset in (0, 20):
            pen.moveTo((offset, 0))
            pen.lineTo((offset + 10, 0))
            pen.lineTo((offset + 10, 10))
            pen.closePath()
        assert len(pen.shape.contours) == 2


class TestSpritePaths:
    """Tests for sprite path conversion."""

    def test_straight_edge(self) -> None:
        edge = sprite_edge(SpriteAnchor(0, 0), SpriteAnchor(2, 0))
        assert edge.kind is EdgeKind.LINEAR

    def test_tiny_curve_is_straight(self) -> None:
        edge = sprite_edge(SpriteAnchor(0, 0, curve=5e-5), SpriteAnchor(2, 0))
        assert edge.kind is EdgeKind.LINEAR

    def test_curved_edge_control_point(self) -> None:
        """Test the control point sits off the chord midpoint by the curve value."""
        edge = sprite_edge(SpriteAnchor(0, 0, curve=1.0), SpriteAnchor(2, 0))
        assert edge.kind is EdgeKind.QUADRATIC
        assert edge.points[1] == Vector2(1.0, 1.0)

        edge = sprite_edge(SpriteAnchor(0, 0, curve=-0.5), SpriteAnchor(2, 0))
        assert edge.points[1] == Vector2(1.0, -0.5)

    def test_contour_has_positive_winding(self) -> None:
        """Test paths are stored with positive winding in either direction."""
        ccw = SpritePath([SpriteAnchor(0, 0), SpriteAnchor(1, 0), SpriteAnchor(1, 1)])
        cw = SpritePath([SpriteAnchor(0, 0), SpriteAnchor(1, 1), SpriteAnchor(1, 0)])
        assert shape_from_sprite_path(ccw).contours[0].winding() == 1
        assert shape_from_sprite_path(cw).contours[0].winding() == 1

    def test_contour_closed(self) -> None:
        path = SpritePath(
            [SpriteAnchor(0, 0, curve=0.3), SpriteAnchor(2, 0), SpriteAnchor(2, 2, curve=-0.2)]
        )
        contour = shape_from_sprite_path(path).contours[0]
        assert len(contour) == 3
        assert contour.is_closed()

    def test_too_few_anchors_skipped(self) -> None:
        path = SpritePath([SpriteAnchor(0, 0), SpriteAnchor(1, 0)])
        assert shape_from_sprite_path(path).is_empty()

    def test_split_add_and_subtract(self) -> None:
        add = SpritePath([SpriteAnchor(0, 0), SpriteAnchor(4, 0), SpriteAnchor(4, 4)])
        sub = SpritePath(
            [SpriteAnchor(1, 1), SpriteAnchor(2, 1), SpriteAnchor(2, 2)], subtract=True
        )

        add_shape, sub_shape = shapes_from_sprite_paths([add, sub])
        assert len(add_shape.contours) == 1
        assert sub_shape is not None
        assert len(sub_shape.contours) == 1

        add_shape, sub_shape = shapes_from_sprite_paths([add])
        assert sub_shape is None

        assert len(shape_from_sprite_paths([add, sub]).contours) == 2


class TestFontReader:
    """Tests for FontReader class."""

    def test_init(self) -> None:
        """Test FontReader initialization."""
        path = Path("test.ttf")
        reader = FontReader(path)
        assert reader._font_path == path
        assert reader._font is None

    def test_load_nonexistent_file(self) -> None:
        """Test loading a nonexistent file raises FontLoadError."""
        reader = FontReader(Path("nonexistent.ttf"))
        with pytest.raises(FontLoadError, match="file not found"):
            reader.load()

    def test_load_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"definitely not a font file")
        with pytest.raises(FontLoadError) as exc_info:
            FontReader(path).load()
        assert exc_info.value.path == str(path)

    @pytest.mark.parametrize("attribute", ["format", "units_per_em", "glyph_count", "glyph_names"])
    def test_property_before_load(self, attribute: str) -> None:
        """Test accessing font data before loading raises RuntimeError."""
        reader = FontReader(Path("test.ttf"))
        with pytest.raises(RuntimeError, match="Font not loaded"):
            getattr(reader, attribute)

    @patch("glyphfield.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_format_opentype(self, _mock_exists, mock_ttfont) -> None:  # noqa: ARG002
        """Test format property for CFF-flavoured fonts."""
        mock_font = MagicMock()
        mock_font.__contains__ = Mock(side_effect=lambda x: x == "CFF ")
        mock_ttfont.return_value = mock_font

        reader = FontReader(Path("test.otf"))
        reader.load()

        assert reader.format == "OpenType"

    @patch("glyphfield.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_undecodable_outline(self, _mock_exists, mock_ttfont) -> None:  # noqa: ARG002
        """Test an outline fontTools cannot draw raises GlyphRenderError."""
        broken_glyph = Mock()
        broken_glyph.draw.side_effect = ValueError("bad flags")
        mock_ttfont.return_value.getGlyphSet.return_value = {"A": broken_glyph}

        reader = FontReader(Path("test.ttf"))
        reader.load()

        with pytest.raises(GlyphRenderError, match="bad flags"):
            reader.get_shape("A")

    def test_font_summary(self, test_font: Path) -> None:
        with FontReader(test_font) as reader:
            assert reader.format == "TrueType"
            assert reader.units_per_em == 1000
            assert reader.glyph_count == 5
            assert reader.glyph_names == [".notdef", "space", "O", "I", "D"]

    def test_glyph_name_for(self, test_font: Path) -> None:
        with FontReader(test_font) as reader:
            assert reader.glyph_name_for("O") == "O"
            assert reader.glyph_name_for(" ") == "space"
            with pytest.raises(GlyphNotFoundError) as exc_info:
                reader.glyph_name_for("Z")
            assert exc_info.value.glyph_name == "U+005A"

    def test_get_shape(self, test_font: Path) -> None:
        """Test a glyph outline becomes a Y-up shape in font units."""
        with FontReader(test_font) as reader:
            shape = reader.get_shape("O")

        assert shape.inverse_y_axis is True
        assert len(shape.contours) == 2
        assert shape.edge_count() == 8
        assert shape.bounds() == (100, 0, 500, 400)
        assert all(contour.is_closed() for contour in shape.contours)

    def test_get_shape_quadratic(self, test_font: Path) -> None:
        with FontReader(test_font) as reader:
            shape = reader.get_shape("D")
        kinds = {edge.kind for edge in shape.contours[0].edges}
        assert EdgeKind.QUADRATIC in kinds
        assert shape.contours[0].is_closed()

    def test_get_shape_empty_glyph(self, test_font: Path) -> None:
        with FontReader(test_font) as reader:
            assert reader.get_shape("space").is_empty()

    def test_get_shape_missing_glyph(self, test_font: Path) -> None:
        with FontReader(test_font) as reader, pytest.raises(GlyphNotFoundError):
            reader.get_shape("missing")

    def test_get_advance(self, test_font: Path) -> None:
        with FontReader(test_font) as reader:
            assert reader.get_advance("O") == 600
            with pytest.raises(GlyphNotFoundError):
                reader.get_advance("missing")

    def test_context_manager_closes(self, test_font: Path) -> None:
        with FontReader(test_font) as reader:
            assert reader._font is not None
        assert reader._font is None
