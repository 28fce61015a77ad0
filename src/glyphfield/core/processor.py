"""Rendering pipeline and parallel batch rendering of font glyphs.

This module runs the full shape pipeline and fans glyph rendering out over
worker processes with ProcessPoolExecutor.

Key components:
- prepare_shape: validate, normalize, orient and color a shape
- render_shape: prepare + generate + optional correction passes
- render_glyph: Top-level picklable function for parallel execution
- GlyphRenderer: Batch renderer for glyphs read from a font
"""

import math
import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any

import numpy as np
import structlog

from glyphfield.config import (
    EdgeColoringMode,
    GeneratorConfig,
    GlyphfieldSettings,
    get_default_settings,
)
from glyphfield.core.bitmap import new_bitmap
from glyphfield.core.coloring import DEFAULT_ANGLE_THRESHOLD, color_ink_trap, color_simple
from glyphfield.core.correction import distance_sign_correction, make_error_correction
from glyphfield.core.generator import Projection, generate_msdf, range_in_shape_units
from glyphfield.domain import Shape, Vector2
from glyphfield.exceptions import GlyphRenderError
from glyphfield.io import FontReader
from glyphfield.utils import RenderLogger, RenderStats


def prepare_shape(
    shape: Shape,
    seed: int = 0,
    angle_threshold: float = DEFAULT_ANGLE_THRESHOLD,
    coloring: EdgeColoringMode | str = EdgeColoringMode.SIMPLE,
) -> Shape:
    """Run the preparation passes on a shape in place.

    Args:
        shape: Shape to prepare
        seed: Edge coloring seed
        angle_threshold: Corner detection threshold for coloring
        coloring: Edge coloring variant

    Returns:
        The same shape, validated, normalized, oriented and colored
    """
    shape.validate()
    shape.normalize()
    shape.orient_contours()
    if EdgeColoringMode(coloring) is EdgeColoringMode.INK_TRAP:
        color_ink_trap(shape, angle_threshold, seed)
    else:
        color_simple(shape, angle_threshold, seed)
    return shape


def render_shape(
    shape: Shape,
    width: int,
    height: int,
    projection: Projection,
    distance_range: float,
    config: GeneratorConfig | None = None,
    seed: int = 0,
) -> np.ndarray:
    """Render a raw shape into a distance field bitmap.

    Args:
        shape: Shape straight from an adapter (prepared in place)
        width: Output width in pixels
        height: Output height in pixels
        projection: Pixel to shape-space mapping
        distance_range: Distance band width in shape units
        config: Generator settings (defaults when None)
        seed: Edge coloring seed

    Returns:
        Float32 bitmap of shape (height, width, 3)

    Raises:
        BitmapError: If width or height is not positive
    """
    config = config or GeneratorConfig()
    prepare_shape(shape, seed, config.angle_threshold, config.edge_coloring)
    bitmap = generate_msdf(shape, width, height, projection, distance_range)
    if config.sign_correction:
        distance_sign_correction(bitmap, shape, projection)
    strategy = make_error_correction(config.error_correction, config.clash_threshold)
    return strategy.apply(bitmap, projection, distance_range)


def glyph_layout(
    bounds: tuple[float, float, float, float] | None,
    dpi: float,
    padding: int,
) -> tuple[int, int, Projection]:
    """Bitmap size and projection that fit a glyph with a pixel margin.

    Args:
        bounds: Glyph bounds in font units, or None for an empty glyph
        dpi: Pixels per font unit
        padding: Margin in pixels on every side

    Returns:
        Tuple of (width, height, projection)
    """
    if bounds is None:
        size = max(2 * padding, 1)
        return size, size, Projection.from_dpi(dpi)

    min_x, min_y, max_x, max_y = bounds
    width = math.ceil((max_x - min_x) * dpi) + 2 * padding
    height = math.ceil((max_y - min_y) * dpi) + 2 * padding
    offset = Vector2(padding - min_x * dpi, padding - min_y * dpi)
    return max(width, 1), max(height, 1), Projection.from_dpi(dpi, offset)


def render_glyph(
    task: dict[str, Any],
    config_dict: dict[str, Any],
) -> dict[str, Any]:
    """Render a single glyph.

    Top-level function designed to be picklable for use with
    ProcessPoolExecutor. Deserializes the glyph shape, renders it and
    returns the bitmap.

    Args:
        task: Render task with name, seed, shape (from Shape.to_dict()),
            width, height, scale, translate and distance_range
        config_dict: Serialized generator configuration

    Returns:
        Dictionary containing either:
        - Success: {"glyph_name": str, "bitmap": ndarray, "duration_ms": float}
        - Error: {"error": str, "glyph_name": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        shape = Shape.from_dict(task["shape"])
        config = GeneratorConfig(**config_dict)
        projection = Projection(
            scale=Vector2(*task["scale"]),
            translate=Vector2(*task["translate"]),
        )
        bitmap = render_shape(
            shape,
            task["width"],
            task["height"],
            projection,
            task["distance_range"],
            config=config,
            seed=task["seed"],
        )

        duration_ms = (time.time() - start_time) * 1000
        return {
            "glyph_name": task["name"],
            "bitmap": bitmap,
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        tb = traceback.format_exc()
        return {
            "error": str(e),
            "glyph_name": task.get("name", "unknown"),
            "traceback": tb,
            "duration_ms": duration_ms,
        }


class GlyphRenderer:
    """Renders distance fields for a set of font glyphs.

    Manages the workflow:
    1. Read glyph outlines into shapes
    2. Lay out a bitmap per glyph at the requested pixel size
    3. Render glyphs serially or in worker processes
    4. Collect bitmaps and update statistics

    Glyph seeds are the glyph's position in the request, so the same
    request always yields the same bitmaps.

    Example:
        renderer = GlyphRenderer(get_default_settings())
        with FontReader(Path("font.ttf")) as reader:
            bitmaps = renderer.render(reader, ["A", "B"], size=32)
    """

    def __init__(
        self,
        settings: GlyphfieldSettings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize renderer with configuration.

        Args:
            settings: glyphfield settings (defaults when None)
            logger: Logger to report through (the "glyphfield" logger when None)
        """
        self.settings = settings or get_default_settings()
        self.logger = logger or structlog.get_logger("glyphfield")
        self.render_logger = RenderLogger(self.logger)

    @property
    def stats(self) -> RenderStats:
        return self.render_logger.stats

    def build_tasks(self, reader: FontReader, glyph_names: list[str], size: float) -> list[dict[str, Any]]:
        """Read glyph outlines and build serialized render tasks.

        Args:
            reader: Open font reader
            glyph_names: Glyphs to render, in request order
            size: Pixel size of one em

        Returns:
            One task dictionary per glyph that will be rendered. Glyphs whose
            outlines cannot be decoded are logged as errors and left out.
        """
        generator = self.settings.generator
        dpi = size / reader.units_per_em
        padding = math.ceil(generator.pixel_range)
        distance_range = range_in_shape_units(generator.pixel_range, dpi)

        tasks = []
        for seed, name in enumerate(dict.fromkeys(glyph_names)):
            try:
                shape = reader.get_shape(name)
            except GlyphRenderError as e:
                self.render_logger.log_glyph_error(name, e)
                continue
            if shape.is_empty() and self.settings.processing.skip_empty:
                self.render_logger.log_glyph_skipped(name, "empty")
                continue

            bounds = None if shape.is_empty() else shape.bounds()
            width, height, projection = glyph_layout(bounds, dpi, padding)
            self.render_logger.log_shape_summary(name, len(shape.contours), shape.edge_count())
            tasks.append(
                {
                    "name": name,
                    "seed": seed,
                    "shape": shape.to_dict(),
                    "width": width,
                    "height": height,
                    "scale": projection.scale.to_tuple(),
                    "translate": projection.translate.to_tuple(),
                    "distance_range": distance_range,
                }
            )
        return tasks

    def render(
        self,
        reader: FontReader,
        glyph_names: list[str],
        size: float,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> dict[str, np.ndarray]:
        """Render glyphs to distance field bitmaps.

        A glyph that fails to render is logged and counted, and gets a
        background bitmap so the batch stays complete.

        Args:
            reader: Open font reader
            glyph_names: Glyphs to render
            size: Pixel size of one em
            max_workers: Maximum worker processes (settings value when None;
                1 renders in this process)
            progress_callback: Optional callback(completed, total, glyph_name, success)

        Returns:
            Dictionary mapping glyph names to bitmaps, in request order
        """
        stats = self.stats
        stats.start_time = time.time()
        if max_workers is None:
            max_workers = self.settings.processing.max_workers

        tasks = self.build_tasks(reader, glyph_names, size)
        config_dict = self.settings.generator.model_dump(mode="json")

        self.logger.info(
            "Starting rendering",
            glyph_count=len(tasks),
            size=size,
            max_workers=max_workers,
        )

        results: dict[str, dict[str, Any]] = {}
        total = len(tasks)
        if max_workers == 1 or total <= 1:
            for completed, task in enumerate(tasks, start=1):
                self.render_logger.log_glyph_start(task["name"])
                result = render_glyph(task, config_dict)
                results[task["name"]] = result
                self._record(task, result)
                if progress_callback is not None:
                    progress_callback(completed, total, task["name"], "error" not in result)
        else:
            results = self._render_parallel(tasks, config_dict, max_workers, progress_callback)

        bitmaps: dict[str, np.ndarray] = {}
        for task in tasks:
            result = results.get(task["name"], {})
            if "bitmap" in result:
                bitmaps[task["name"]] = result["bitmap"]
            else:
                bitmaps[task["name"]] = new_bitmap(task["width"], task["height"])

        stats.end_time = time.time()
        self.logger.info(
            "Rendering complete",
            rendered=stats.rendered_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return bitmaps

    def _record(self, task: dict[str, Any], result: dict[str, Any]) -> None:
        if "error" in result:
            self.render_logger.log_glyph_error(
                glyph_name=result["glyph_name"],
                error=result["error"],
                traceback=result.get("traceback"),
            )
        else:
            self.render_logger.log_glyph_complete(
                glyph_name=task["name"],
                width=task["width"],
                height=task["height"],
                duration_ms=result.get("duration_ms", 0.0),
            )

    def _render_parallel(
        self,
        tasks: list[dict[str, Any]],
        config_dict: dict[str, Any],
        max_workers: int | None,
        progress_callback: Callable[[int, int, str, bool], None] | None,
    ) -> dict[str, dict[str, Any]]:
        """Render tasks in worker processes.

        Args:
            tasks: Serialized render tasks
            config_dict: Serialized generator configuration
            max_workers: Maximum worker processes
            progress_callback: Optional callback(completed, total, glyph_name, success)

        Returns:
            Dictionary mapping glyph names to worker results
        """
        results: dict[str, dict[str, Any]] = {}
        tasks_by_name = {task["name"]: task for task in tasks}
        total = len(tasks)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for task in tasks:
                future = executor.submit(render_glyph, task, config_dict)
                pending_futures[future] = task["name"]

            try:
                for future in as_completed(pending_futures):
                    glyph_name = pending_futures.pop(future)
                    try:
                        result = future.result()
                    except Exception as e:
                        # Executor-level error
                        result = {
                            "error": str(e),
                            "glyph_name": glyph_name,
                            "traceback": traceback.format_exc(),
                        }

                    results[glyph_name] = result
                    self._record(tasks_by_name[glyph_name], result)

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, glyph_name, "error" not in result)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return results
