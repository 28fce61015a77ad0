"""Font reader for extracting glyph outlines as shapes.

This module provides the FontReader class for loading font files and
drawing glyph outlines into Shape models.
"""

from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from glyphfield.domain import Shape
from glyphfield.exceptions import FontLoadError, GlyphNotFoundError, GlyphRenderError
from glyphfield.io.pen import ShapePen


class FontReader:
    """Loads TTF/OTF fonts and extracts glyph outlines.

    Outline decoding is left to fontTools; glyphs are drawn through a
    ShapePen. Shapes come back in font units with Y pointing up, flagged
    with inverse_y_axis so bitmaps are written top row first.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            shape = reader.get_shape(reader.glyph_name_for("A"))
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
        """
        self._font_path = font_path
        self._font: TTFont | None = None

    def load(self) -> None:
        """Load the font file.

        Raises:
            FontLoadError: If the file is missing or is not a readable font
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            self._font = TTFont(str(self._font_path))
        except (TTLibError, OSError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

    def _require_font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """Return font format: 'OpenType' for CFF outlines, else 'TrueType'."""
        font = self._require_font()
        if "CFF " in font or "CFF2" in font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        """Return font's units per em."""
        return self._require_font()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        """Return total number of glyphs in the font."""
        return self._require_font()["maxp"].numGlyphs

    @property
    def glyph_names(self) -> list[str]:
        """Glyph names in font order."""
        return list(self._require_font().getGlyphOrder())

    def glyph_name_for(self, char: str) -> str:
        """Map a character to its glyph name through the cmap.

        Args:
            char: A single character

        Returns:
            Glyph name

        Raises:
            GlyphNotFoundError: If the font does not map the character
        """
        cmap = self._require_font().getBestCmap() or {}
        name = cmap.get(ord(char))
        if name is None:
            raise GlyphNotFoundError(f"U+{ord(char):04X}")
        return name

    def get_shape(self, glyph_name: str) -> Shape:
        """Draw a glyph outline into a new Shape.

        Args:
            glyph_name: Name of the glyph

        Returns:
            Shape in font units (empty for glyphs without outlines)

        Raises:
            GlyphNotFoundError: If the glyph does not exist
            GlyphRenderError: If fontTools cannot decode the outline
        """
        glyph_set = self._require_font().getGlyphSet()
        if glyph_name not in glyph_set:
            raise GlyphNotFoundError(glyph_name)

        pen = ShapePen(glyph_set)
        try:
            glyph_set[glyph_name].draw(pen)
        except (TTLibError, KeyError, ValueError) as e:
            raise GlyphRenderError(glyph_name, str(e)) from e
        pen.shape.inverse_y_axis = True
        return pen.shape

    def get_advance(self, glyph_name: str) -> int:
        """Horizontal advance width of a glyph in font units.

        Raises:
            GlyphNotFoundError: If the glyph does not exist
        """
        metrics = self._require_font()["hmtx"].metrics  # type: ignore[attr-defined]
        if glyph_name not in metrics:
            raise GlyphNotFoundError(glyph_name)
        return metrics[glyph_name][0]

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
