"""CLI application entry point for glyphfield.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import numpy as np
import typer

from glyphfield import __version__
from glyphfield.cli.output import (
    console,
    create_progress,
    print_bitmap_table,
    print_cancellation_notice,
    print_error,
    print_font_info,
    print_header,
    print_preview,
    print_render_info,
    print_step,
    print_success,
)
from glyphfield.config import (
    EdgeColoringMode,
    ErrorCorrectionMode,
    GeneratorConfig,
    GlyphfieldSettings,
    LoggingConfig,
    ProcessingConfig,
)
from glyphfield.core import GlyphRenderer
from glyphfield.exceptions import FontLoadError, GlyphfieldError, GlyphNotFoundError
from glyphfield.io import FontReader
from glyphfield.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="glyphfield",
    help="Render multi-channel signed distance fields from font glyph outlines.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]glyphfield[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Render multi-channel signed distance fields from font glyph outlines."""


def _check_font_path(font: Path) -> None:
    if not font.exists():
        print_error(
            f"Input file not found: {font}",
            details=f"The file '{font}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not font.is_file():
        print_error(
            f"Input path is not a file: {font}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)


@app.command()
def glyph(
    font: Annotated[
        Path,
        typer.Argument(
            help="Path to input TTF/OTF font file",
            show_default=False,
        ),
    ],
    text: Annotated[
        str,
        typer.Argument(
            help="Characters to render",
            show_default=False,
        ),
    ],
    size: Annotated[
        int,
        typer.Option(
            "--size",
            "-s",
            help="Pixel size of one em",
            min=1,
        ),
    ] = 32,
    pixel_range: Annotated[
        float,
        typer.Option(
            "--range",
            "-r",
            help="Distance field range in pixels",
            min=0.01,
        ),
    ] = 1.5,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output .npz archive (default: {name}-msdf.npz)",
        ),
    ] = None,
    coloring: Annotated[
        str,
        typer.Option(
            "--coloring",
            help="Edge coloring variant (simple|ink_trap)",
        ),
    ] = "simple",
    error_correction: Annotated[
        str,
        typer.Option(
            "--error-correction",
            help="Error correction strategy (none|clash)",
        ),
    ] = "none",
    sign_correction: Annotated[
        bool,
        typer.Option(
            "--sign-correction",
            help="Fix texel signs against the scanline fill",
        ),
    ] = False,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    preview: Annotated[
        bool,
        typer.Option(
            "--preview",
            help="Print an ASCII preview of every rendered glyph",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Render distance fields for the glyphs of TEXT and save them as .npz.

    Every glyph becomes a float32 array of shape (height, width, 3) keyed by
    its glyph name. A median above 0.5 is inside the glyph.

    Example:
        glyphfield glyph Roboto-Regular.ttf "Hello" --size 48
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    _check_font_path(font)

    try:
        coloring_mode = EdgeColoringMode(coloring.lower())
        correction_mode = ErrorCorrectionMode(error_correction.lower())
    except ValueError as e:
        print_error(
            f"Invalid option value: {e}",
            details="Valid values: --coloring simple|ink_trap, --error-correction none|clash",
        )
        raise typer.Exit(code=1)

    if not text:
        print_error("Nothing to render", details="TEXT must contain at least one character.")
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    settings = GlyphfieldSettings(
        generator=GeneratorConfig(
            pixel_range=pixel_range,
            edge_coloring=coloring_mode,
            error_correction=correction_mode,
            sign_correction=sign_correction,
        ),
        processing=ProcessingConfig(
            max_workers=workers,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level="DEBUG" if verbose else log_level,
        ),
    )
    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    actual_output_path = output or font.with_name(f"{font.stem}-msdf.npz")
    # np.savez appends .npz to any other name; report the file it writes
    if actual_output_path.suffix != ".npz":
        actual_output_path = actual_output_path.with_name(f"{actual_output_path.name}.npz")

    try:
        if not quiet:
            print_step("Loading font")

        with FontReader(font) as reader:
            glyph_names = list(dict.fromkeys(reader.glyph_name_for(char) for char in text))

            if not quiet:
                print_font_info(
                    font_path=str(font),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                )
                print_step("Rendering")
                worker_label = str(workers) if workers else f"{os.cpu_count() or 1} (auto)"
                print_render_info(len(glyph_names), size, pixel_range, worker_label)

            renderer = GlyphRenderer(settings, logger=logger)
            try:
                if not quiet:
                    with create_progress() as progress:
                        task_id = progress.add_task(
                            f"Rendering {len(glyph_names)} glyphs",
                            total=len(glyph_names),
                        )

                        def update_progress(completed: int, *_: object) -> None:
                            progress.update(task_id, completed=completed)

                        bitmaps = renderer.render(
                            reader,
                            glyph_names,
                            size,
                            max_workers=workers,
                            progress_callback=update_progress,
                        )
                else:
                    bitmaps = renderer.render(reader, glyph_names, size, max_workers=workers)
            except KeyboardInterrupt:
                if not quiet:
                    print_cancellation_notice()
                raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        np.savez(actual_output_path, **bitmaps)
        stats = renderer.stats

        if not quiet:
            if verbose:
                print_bitmap_table(bitmaps)
            if preview:
                for name, bitmap in bitmaps.items():
                    print_preview(name, bitmap)
            print_success(
                output_path=str(actual_output_path),
                file_size=_format_file_size(actual_output_path),
                total_time_s=stats.duration_seconds,
                rendered=stats.rendered_count,
                skipped=stats.skipped_count,
                errors=stats.error_count,
            )
        elif preview:
            for name, bitmap in bitmaps.items():
                print_preview(name, bitmap)

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphNotFoundError as e:
        print_error(f"Character not in font: {e.glyph_name}")
        raise typer.Exit(code=1)
    except GlyphfieldError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def info(
    font: Annotated[
        Path,
        typer.Argument(
            help="Path to input TTF/OTF font file",
            show_default=False,
        ),
    ],
) -> None:
    """Print a summary of a font: format, units per em and glyph count."""
    _check_font_path(font)

    try:
        with FontReader(font) as reader:
            print_font_info(
                font_path=str(font),
                font_type=reader.format,
                glyph_count=reader.glyph_count,
                upm=reader.units_per_em,
            )
    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
