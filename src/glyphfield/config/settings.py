"""Configuration settings for glyphfield."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ErrorCorrectionMode(str, Enum):
    """Post-generation error correction strategy."""

    NONE = "none"
    CLASH = "clash"


class EdgeColoringMode(str, Enum):
    """Edge coloring variant."""

    SIMPLE = "simple"
    INK_TRAP = "ink_trap"


class GeneratorConfig(BaseModel):
    """Configuration for distance field generation.

    The pixel range is the width of the distance band, in output pixels,
    that maps onto the [0, 1] channel range.
    """

    pixel_range: float = Field(
        default=1.5,
        gt=0.0,
        description="Distance field range in output pixels",
    )
    angle_threshold: float = Field(
        default=3.0,
        gt=0.0,
        description="Corner detection threshold (radians, used as sin(threshold))",
    )
    edge_coloring: EdgeColoringMode = Field(
        default=EdgeColoringMode.SIMPLE,
        description="Edge coloring variant",
    )
    error_correction: ErrorCorrectionMode = Field(
        default=ErrorCorrectionMode.NONE,
        description="Error correction strategy applied after generation",
    )
    sign_correction: bool = Field(
        default=False,
        description="Flip texels whose sign disagrees with the scanline fill",
    )
    clash_threshold: float = Field(
        default=1.001,
        gt=0.0,
        description="Channel difference (in range units) that counts as a clash",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch rendering."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto, 1 = serial)",
    )
    skip_empty: bool = Field(
        default=False,
        description="Skip glyphs without outlines instead of rendering a blank bitmap",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphfieldSettings(BaseModel):
    """Main application settings."""

    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphfieldSettings:
    """Get default application settings."""
    return GlyphfieldSettings()
