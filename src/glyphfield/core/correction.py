"""Post-generation passes over a distance field bitmap.

Error correction is a swappable strategy selected by configuration:
- NoErrorCorrection: leaves the bitmap untouched (the default)
- ClashErrorCorrection: legacy clash detection between neighbouring texels

Clash correction flattens multi-channel texels to their median. That
destroys the corner sharpness on filled shapes, so it stays opt-in.

distance_sign_correction is an independent, optional pass. It reconciles
texel signs with the non-zero fill of the shape.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

import numpy as np

from glyphfield.config.settings import ErrorCorrectionMode
from glyphfield.core.bitmap import median
from glyphfield.core.generator import Projection
from glyphfield.domain.shape import Shape

logger = logging.getLogger(__name__)

DEFAULT_CLASH_THRESHOLD = 1.001

_CARDINAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL = ((-1, -1), (1, -1), (-1, 1), (1, 1))


class ErrorCorrection(Protocol):
    """Strategy applied to a freshly generated bitmap."""

    def apply(self, bitmap: np.ndarray, projection: Projection, distance_range: float) -> np.ndarray:
        """Correct the bitmap in place and return it."""
        ...


class NoErrorCorrection:
    """Leave the bitmap as generated."""

    def apply(self, bitmap: np.ndarray, projection: Projection, distance_range: float) -> np.ndarray:
        return bitmap


def detect_clash(a: Sequence[float], b: Sequence[float], threshold: float) -> bool:
    """Check whether interpolating between two texels breaks the median.

    Channels are ordered by how much they differ between the texels. A clash
    needs the second largest difference to reach the threshold; texels that
    were already equalized are ignored, and only the texel farther from the
    edge is flagged.

    Args:
        a: Channels of the texel under test
        b: Channels of its neighbour
        threshold: Minimum channel difference that counts as a clash

    Returns:
        True if texel `a` clashes with `b`
    """
    a0, a1, a2 = float(a[0]), float(a[1]), float(a[2])
    b0, b1, b2 = float(b[0]), float(b[1]), float(b[2])

    if abs(b0 - a0) < abs(b1 - a1):
        a0, a1 = a1, a0
        b0, b1 = b1, b0
    if abs(b1 - a1) < abs(b2 - a2):
        a1, a2 = a2, a1
        b1, b2 = b2, b1
        if abs(b0 - a0) < abs(b1 - a1):
            a0, a1 = a1, a0
            b0, b1 = b1, b0

    return (
        abs(b1 - a1) >= threshold
        and not (b0 == b1 == b2)
        and abs(a2 - 0.5) >= abs(b2 - 0.5)
    )


class ClashErrorCorrection:
    """Replace clashing texels with their channel median.

    Runs a pass over the four cardinal neighbours, then a pass over the
    diagonal neighbours against the already corrected bitmap.

    Attributes:
        threshold: Clash threshold in pixel steps of the distance gradient
    """

    def __init__(self, threshold: float = DEFAULT_CLASH_THRESHOLD) -> None:
        self.threshold = threshold

    def _find_clashes(
        self,
        bitmap: np.ndarray,
        offsets: tuple[tuple[int, int], ...],
        threshold_x: float,
        threshold_y: float,
    ) -> list[tuple[int, int]]:
        height, width = bitmap.shape[:2]
        clashes = []
        for y in range(height):
            for x in range(width):
                texel = bitmap[y, x]
                for dx, dy in offsets:
                    nx, ny = x + dx, y + dy
                    if not (0 <= nx < width and 0 <= ny < height):
                        continue
                    if dx and dy:
                        threshold = threshold_x + threshold_y
                    else:
                        threshold = threshold_x if dx else threshold_y
                    if detect_clash(texel, bitmap[ny, nx], threshold):
                        clashes.append((x, y))
                        break
        return clashes

    def apply(self, bitmap: np.ndarray, projection: Projection, distance_range: float) -> np.ndarray:
        threshold_x = self.threshold / (projection.scale.x * distance_range)
        threshold_y = self.threshold / (projection.scale.y * distance_range)

        corrected = 0
        for offsets in (_CARDINAL, _DIAGONAL):
            clashes = self._find_clashes(bitmap, offsets, threshold_x, threshold_y)
            for x, y in clashes:
                bitmap[y, x, :] = median(bitmap[y, x])
            corrected += len(clashes)

        if corrected:
            logger.debug("Clash correction equalized %d texels", corrected)
        return bitmap


def make_error_correction(
    mode: ErrorCorrectionMode | str, clash_threshold: float = DEFAULT_CLASH_THRESHOLD
) -> ErrorCorrection:
    """Build the error correction strategy for a configured mode."""
    if ErrorCorrectionMode(mode) is ErrorCorrectionMode.CLASH:
        return ClashErrorCorrection(clash_threshold)
    return NoErrorCorrection()


def _row_windings(shape: Shape, y: float) -> tuple[list[float], list[int]]:
    """Crossing abscissas on a scanline and the running winding after each."""
    crossings = [
        crossing
        for contour in shape.contours
        for edge in contour.edges
        for crossing in edge.scanline_intersections(y)
    ]
    crossings.sort(key=lambda crossing: crossing[0])
    xs: list[float] = []
    windings: list[int] = []
    total = 0
    for x, dy in crossings:
        total += dy
        xs.append(x)
        windings.append(total)
    return xs, windings


def distance_sign_correction(bitmap: np.ndarray, shape: Shape, projection: Projection) -> np.ndarray:
    """Flip texels whose sign disagrees with the shape's non-zero fill.

    Each scanline is intersected with the shape to find the fill at every
    texel center. A texel whose median says inside while the fill says
    outside (or the reverse) has all channels mirrored around 0.5. Texels
    whose median is exactly 0.5 follow the majority of their four
    neighbours.

    Args:
        bitmap: Distance field to correct in place
        shape: The shape the bitmap was generated from
        projection: Projection used for generation

    Returns:
        The corrected bitmap
    """
    height, width = bitmap.shape[:2]
    match_map = np.zeros((height, width), dtype=np.int8)
    ambiguous = False
    flipped = 0

    for y in range(height):
        row = height - 1 - y if shape.inverse_y_axis else y
        shape_y = (y + 0.5) / projection.scale.y - projection.translate.y
        xs, windings = _row_windings(shape, shape_y)

        for x in range(width):
            shape_x = (x + 0.5) / projection.scale.x - projection.translate.x
            winding = 0
            lo, hi = 0, len(xs) - 1
            while lo <= hi:
                mid = (lo + hi) >> 1
                if xs[mid] <= shape_x:
                    winding = windings[mid]
                    lo = mid + 1
                else:
                    hi = mid - 1
            fill = winding != 0

            texel = bitmap[row, x]
            sd = median(texel)
            if sd == 0.5:
                ambiguous = True
            elif (sd > 0.5) != fill:
                bitmap[row, x, :] = 1.0 - texel
                match_map[y, x] = -1
                flipped += 1
            else:
                match_map[y, x] = 1

    if ambiguous:
        for y in range(height):
            row = height - 1 - y if shape.inverse_y_axis else y
            for x in range(width):
                if match_map[y, x] != 0:
                    continue
                neighbour_match = 0
                if x > 0:
                    neighbour_match += match_map[y, x - 1]
                if x < width - 1:
                    neighbour_match += match_map[y, x + 1]
                if y > 0:
                    neighbour_match += match_map[y - 1, x]
                if y < height - 1:
                    neighbour_match += match_map[y + 1, x]
                if neighbour_match < 0:
                    bitmap[row, x, :] = 1.0 - bitmap[row, x]
                    flipped += 1

    if flipped:
        logger.debug("Sign correction flipped %d texels", flipped)
    return bitmap
