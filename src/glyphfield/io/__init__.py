"""Geometry adapters for glyphfield.

This module turns already-parsed geometry into Shape models. Font parsing
itself is left to fonttools.

Key responsibilities:
- Record fonttools pen drawing commands into shapes
- Convert sprite anchor loops (with curve tension) into shapes
- Load TTF/OTF fonts and look up glyph outlines and metrics

Key classes:
- ShapePen: fonttools pen producing a Shape
- SpriteAnchor, SpritePath: Sprite path geometry
- FontReader: Load fonts and extract glyph shapes
"""

from glyphfield.io.paths import (
    SpriteAnchor,
    SpritePath,
    shape_from_sprite_path,
    shape_from_sprite_paths,
    shapes_from_sprite_paths,
)
from glyphfield.io.pen import ShapePen
from glyphfield.io.reader import FontReader

__all__ = [
    "FontReader",
    "ShapePen",
    "SpriteAnchor",
    "SpritePath",
    "shape_from_sprite_path",
    "shape_from_sprite_paths",
    "shapes_from_sprite_paths",
]
