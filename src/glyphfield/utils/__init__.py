"""Utility functions for glyphfield.

This module provides:

- Logging setup and configuration
- Rendering progress and statistics tracking
"""

from glyphfield.utils.logging import (
    RenderLogger,
    RenderStats,
    configure_logging,
)

__all__ = [
    "RenderLogger",
    "RenderStats",
    "configure_logging",
]
