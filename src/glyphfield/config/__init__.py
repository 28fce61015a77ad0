"""Configuration management for glyphfield.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeneratorConfig: Distance field generation settings
- ProcessingConfig: Batch rendering settings
- LoggingConfig: Logging settings
- GlyphfieldSettings: Main application settings
"""

from glyphfield.config.settings import (
    EdgeColoringMode,
    ErrorCorrectionMode,
    GeneratorConfig,
    GlyphfieldSettings,
    LoggingConfig,
    ProcessingConfig,
    get_default_settings,
)

__all__ = [
    "EdgeColoringMode",
    "ErrorCorrectionMode",
    "GeneratorConfig",
    "GlyphfieldSettings",
    "LoggingConfig",
    "ProcessingConfig",
    "get_default_settings",
]
