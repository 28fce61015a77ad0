"""Multi-channel signed distance field generation.

Maps every output pixel center back into shape space through a Projection,
asks the OverlappingContourCombiner for the multi-channel distance there and
encodes it as clamp(0.5 + distance / range, 0, 1) per channel.
"""

import logging
from dataclasses import dataclass

import numpy as np

from glyphfield.core.bitmap import new_bitmap
from glyphfield.core.combiner import OverlappingContourCombiner
from glyphfield.domain.geometry import Vector2, clamp
from glyphfield.domain.shape import Shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Projection:
    """Affine mapping between pixel and shape coordinates.

    A pixel (x, y) samples the shape at ((x, y) + 0.5) / scale - translate.

    Attributes:
        scale: Pixels per shape unit on each axis
        translate: Offset in shape units applied after scaling
    """

    scale: Vector2
    translate: Vector2

    @classmethod
    def from_dpi(cls, dpi: float, source_offset: Vector2 | float = 0.0) -> "Projection":
        """Build a uniform projection.

        Args:
            dpi: Pixels per shape unit
            source_offset: Shape origin position in pixels; a scalar applies
                to both axes

        Returns:
            Projection with scale (dpi, dpi) and translate source_offset / dpi
        """
        if not isinstance(source_offset, Vector2):
            source_offset = Vector2(source_offset, source_offset)
        return cls(scale=Vector2(dpi, dpi), translate=source_offset / dpi)

    def project(self, x: float, y: float) -> Vector2:
        """Shape-space point sampled by the pixel at (x, y)."""
        return Vector2(
            (x + 0.5) / self.scale.x - self.translate.x,
            (y + 0.5) / self.scale.y - self.translate.y,
        )

    def unproject(self, point: Vector2) -> Vector2:
        """Pixel coordinates (pixel-center relative) of a shape-space point."""
        return Vector2(
            self.scale.x * (point.x + self.translate.x) - 0.5,
            self.scale.y * (point.y + self.translate.y) - 0.5,
        )


def range_in_shape_units(pixel_range: float, dpi: float) -> float:
    """Convert a distance range in output pixels to shape units.

    Examples:
        >>> range_in_shape_units(1.5, 4.0)
        0.75
    """
    return pixel_range / dpi * 2.0


def generate_msdf(
    shape: Shape,
    width: int,
    height: int,
    projection: Projection,
    distance_range: float,
    *,
    invert_winding: bool = False,
    row_range: tuple[int, int] | None = None,
) -> np.ndarray:
    """Generate a multi-channel signed distance field for a prepared shape.

    The shape should already be validated, normalized, oriented and colored.
    Positive distances lie inside the shape. Channels that no edge colors
    stay at 0.

    Args:
        shape: Prepared shape
        width: Output width in pixels
        height: Output height in pixels
        projection: Pixel to shape-space mapping
        distance_range: Width of the encoded distance band in shape units
        invert_winding: Treat every contour's winding as reversed
        row_range: Optional (start, stop) of scanlines to compute; the other
            rows are left at 0

    Returns:
        Float32 array of shape (height, width, 3)

    Raises:
        BitmapError: If width or height is not positive
    """
    bitmap = new_bitmap(width, height)
    if not shape.contours:
        return bitmap

    combiner = OverlappingContourCombiner(shape, invert_winding=invert_winding)
    start, stop = (0, height) if row_range is None else row_range
    start = max(start, 0)
    stop = min(stop, height)
    logger.debug(
        "Generating distance field: size=%dx%d rows=%d-%d contours=%d",
        width,
        height,
        start,
        stop,
        len(shape.contours),
    )

    for y in range(start, stop):
        row = height - 1 - y if shape.inverse_y_axis else y
        for x in range(width):
            distance = combiner.distance(projection.project(x, y))
            bitmap[row, x, 0] = clamp(0.5 + distance.r / distance_range, 0.0, 1.0)
            bitmap[row, x, 1] = clamp(0.5 + distance.g / distance_range, 0.0, 1.0)
            bitmap[row, x, 2] = clamp(0.5 + distance.b / distance_range, 0.0, 1.0)

    return bitmap
