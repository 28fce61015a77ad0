"""Logging utilities for glyphfield."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class RenderStats:
    """Statistics from a rendering run."""

    rendered_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    pixels_rendered: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate rendering duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphfield")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class RenderLogger:
    """Logger for tracking rendering progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = RenderStats()

    def log_glyph_start(self, glyph_name: str) -> None:
        """Log start of glyph rendering."""
        self._logger.debug("Rendering glyph", glyph=glyph_name)

    def log_glyph_complete(
        self,
        glyph_name: str,
        width: int,
        height: int,
        duration_ms: float,
    ) -> None:
        """Log successful glyph rendering."""
        self._logger.info(
            "Glyph rendered",
            glyph=glyph_name,
            size=f"{width}x{height}",
            duration_ms=round(duration_ms, 2),
        )
        self._stats.rendered_count += 1
        self._stats.pixels_rendered += width * height

    def log_glyph_skipped(self, glyph_name: str, reason: str) -> None:
        """Log skipped glyph."""
        self._logger.debug("Glyph skipped", glyph=glyph_name, reason=reason)
        self._stats.skipped_count += 1

    def log_glyph_error(
        self,
        glyph_name: str,
        error: Exception | str,
        traceback: str | None = None,
    ) -> None:
        """Log glyph rendering error."""
        self._logger.error(
            "Glyph rendering failed",
            glyph=glyph_name,
            error=str(error),
            error_type=type(error).__name__ if isinstance(error, Exception) else None,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((glyph_name, str(error)))

    def log_shape_summary(
        self,
        glyph_name: str,
        contour_count: int,
        edge_count: int,
    ) -> None:
        """Log the outline summary of a prepared shape."""
        self._logger.debug(
            "Shape prepared",
            glyph=glyph_name,
            contours=contour_count,
            edges=edge_count,
        )

    @property
    def stats(self) -> RenderStats:
        """Get current rendering statistics."""
        return self._stats
