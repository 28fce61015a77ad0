"""Domain models for glyphfield.

This module contains the geometric models the generator works on:
vectors, edge segments, contours and shapes. All models are:

- Plain dataclasses with no dependency on font libraries
- Serializable for inter-process communication (parallel rendering)

Key classes:
- Vector2: A 2D point/vector
- EdgeSegment: Linear, quadratic or cubic edge with distance queries
- Contour: A closed cycle of edges
- Shape: A set of contours with validation and orientation passes
"""

from glyphfield.domain.contour import Contour
from glyphfield.domain.edge import (
    INFINITE_DISTANCE,
    EdgeColor,
    EdgeKind,
    EdgeSegment,
    SignedDistance,
)
from glyphfield.domain.geometry import Vector2
from glyphfield.domain.shape import Shape

__all__: list[str] = [
    # Enums
    "EdgeColor",
    "EdgeKind",
    # Core types
    "Vector2",
    "SignedDistance",
    "INFINITE_DISTANCE",
    "EdgeSegment",
    "Contour",
    "Shape",
]
