"""Exception hierarchy for glyphfield.

The distance field core never raises on malformed geometry; these errors
belong to the layers around it (font access, bitmap allocation, batch
rendering and compositing).
"""


class GlyphfieldError(Exception):
    """Base exception for all glyphfield errors."""

    pass


class FontError(GlyphfieldError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GlyphError(GlyphfieldError):
    """Errors related to a single glyph."""

    pass


class GlyphNotFoundError(GlyphError):
    """Requested glyph or character not found in font."""

    def __init__(self, glyph_name: str) -> None:
        self.glyph_name = glyph_name
        super().__init__(f"Glyph '{glyph_name}' not found in font")


class GlyphRenderError(GlyphError):
    """Error rendering a specific glyph."""

    def __init__(self, glyph_name: str, reason: str) -> None:
        self.glyph_name = glyph_name
        self.reason = reason
        super().__init__(f"Error rendering glyph '{glyph_name}': {reason}")


class BitmapError(GlyphfieldError):
    """Invalid output bitmap request."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Invalid bitmap size {width}x{height}: dimensions must be positive")


class CompositeError(GlyphfieldError):
    """Bitmaps that cannot be composited together."""

    def __init__(self, expected: tuple[int, ...], actual: tuple[int, ...]) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Cannot composite bitmaps of shape {actual} onto {expected}")
