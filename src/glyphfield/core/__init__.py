"""Core algorithms for glyphfield.

This module contains the distance field pipeline:

- Edge coloring (corner detection, seeded channel assignment)
- Per-pixel distance selection and the overlapping contour combiner
- Distance field generation over a pixel grid
- Optional post passes (clash error correction, sign correction)
- Compositing of additive and subtractive geometry
- Batch rendering of font glyphs across worker processes

The generator and the passes it depends on are deterministic and hold no
global state. Given the same shape, seed and projection they produce the
same bitmap.

Key functions:
- color_simple: Assign edge colors to a shape
- generate_msdf: Render a prepared shape into a distance field
- prepare_shape / render_shape: Full pipeline for one shape
- composite: Carve subtractive geometry out of additive geometry

Key classes:
- OverlappingContourCombiner: Resolves nested and overlapping contours
- Projection: Pixel to shape-space mapping
- ClashErrorCorrection / NoErrorCorrection: Error correction strategies
- GlyphRenderer: Batch renderer for font glyphs
"""

from glyphfield.core.bitmap import median, new_bitmap, to_rgba8
from glyphfield.core.coloring import (
    DEFAULT_ANGLE_THRESHOLD,
    ColorSwitcher,
    color_ink_trap,
    color_simple,
)
from glyphfield.core.combiner import (
    MultiChannelSelector,
    MultiDistance,
    OverlappingContourCombiner,
)
from glyphfield.core.compositor import composite, composite_bitmaps, render_sprite_paths
from glyphfield.core.correction import (
    ClashErrorCorrection,
    ErrorCorrection,
    NoErrorCorrection,
    distance_sign_correction,
    make_error_correction,
)
from glyphfield.core.generator import Projection, generate_msdf, range_in_shape_units
from glyphfield.core.processor import GlyphRenderer, prepare_shape, render_glyph, render_shape

__all__ = [
    # Coloring
    "DEFAULT_ANGLE_THRESHOLD",
    "ColorSwitcher",
    "color_ink_trap",
    "color_simple",
    # Error correction
    "ClashErrorCorrection",
    "ErrorCorrection",
    "NoErrorCorrection",
    "distance_sign_correction",
    "make_error_correction",
    # Generation
    "MultiChannelSelector",
    "MultiDistance",
    "OverlappingContourCombiner",
    "Projection",
    "generate_msdf",
    "range_in_shape_units",
    # Bitmaps
    "median",
    "new_bitmap",
    "to_rgba8",
    # Pipeline
    "GlyphRenderer",
    "composite",
    "composite_bitmaps",
    "prepare_shape",
    "render_glyph",
    "render_shape",
    "render_sprite_paths",
]
