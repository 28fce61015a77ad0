"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

import numpy as np
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from glyphfield.core.bitmap import median

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info

PREVIEW_INSIDE = "#"
PREVIEW_OUTSIDE = "."


def create_progress() -> Progress:
    """Create a rich progress bar for glyph rendering.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]glyphfield[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(font_path: str, font_type: str, glyph_count: int, upm: int) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font_type: Font format type (e.g., "TrueType", "OpenType")
        glyph_count: Total number of glyphs in font
        upm: Units per em value
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(font_path)
    line1.append(f" ({font_type})")
    console.print(line1)
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")


def print_render_info(glyph_count: int, size: int, pixel_range: float, workers: str) -> None:
    """Print rendering configuration.

    Args:
        glyph_count: Number of glyphs requested
        size: Pixel size of one em
        pixel_range: Distance range in pixels
        workers: Worker description ("auto", "1", ...)
    """
    console.print(
        f"  {glyph_count} glyphs {SYM_DOT} {size}px/em {SYM_DOT} range {pixel_range}px "
        f"{SYM_DOT} {workers} workers"
    )


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    rendered: int,
    skipped: int,
    errors: int,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total rendering time in seconds
        rendered: Number of glyphs rendered
        skipped: Number of glyphs skipped
        errors: Number of errors encountered
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {rendered} rendered {SYM_DOT} {skipped} skipped {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )


def print_bitmap_table(bitmaps: dict[str, np.ndarray]) -> None:
    """Print a table of rendered bitmap sizes."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Glyph")
    table.add_column("Size", justify="right")
    table.add_column("Inside", justify="right")
    for name, bitmap in bitmaps.items():
        height, width = bitmap.shape[:2]
        inside = int(np.count_nonzero(median(bitmap) > 0.5))
        table.add_row(name, f"{width}x{height}", f"{inside:,} px")
    console.print(table)


def render_preview(bitmap: np.ndarray) -> list[str]:
    """ASCII rendering of a distance field thresholded at the median 0.5."""
    inside = median(bitmap) > 0.5
    return [
        "".join(PREVIEW_INSIDE if cell else PREVIEW_OUTSIDE for cell in row)
        for row in inside
    ]


def print_preview(glyph_name: str, bitmap: np.ndarray) -> None:
    """Print an ASCII preview of a glyph bitmap."""
    console.print(f"\n  [bold]{glyph_name}[/bold]")
    for line in render_preview(bitmap):
        console.print(Text(f"  {line}"))


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelled {SYM_DOT} no output file created")
