"""glyphfield - Multi-channel signed distance fields for vector shapes.

glyphfield renders multi-channel signed distance fields (MSDFs) from closed
outlines made of line, quadratic and cubic Bezier edges. Font glyphs are
read through fontTools; sprite paths can be built from anchor loops.

Example:
    $ glyphfield glyph Roboto-Regular.ttf "Hello" --size 48

This will create Roboto-Regular-msdf.npz holding one (height, width, 3)
float field per glyph.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
