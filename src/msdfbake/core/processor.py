"""Parallel glyph baking orchestration.

This module coordinates baking many glyphs of a font with parallel
processing of individual glyphs using ProcessPoolExecutor.

Key components:
- bake_glyph: Top-level picklable function for parallel execution
- GlyphBaker: Main orchestrator class for font baking
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from msdfbake.config import GeneratorConfig, MsdfSettings
from msdfbake.core.pipeline import render_glyph
from msdfbake.core.projection import frame_glyph
from msdfbake.domain import ByteImage, Shape
from msdfbake.exceptions import GlyphProcessingError, ProcessingCancelledError
from msdfbake.io import BitmapWriter, FontReader
from msdfbake.utils import ProcessingLogger, ProcessingStats, configure_logging


def bake_glyph(
    shape_dict: dict[str, Any],
    config_dict: dict[str, Any],
    pixel_size: int,
    units_per_em: int,
    glyph_name: str = "unknown",
) -> dict[str, Any]:
    """Bake a single glyph into a distance bitmap.

    Top-level function designed to be picklable for use with
    ProcessPoolExecutor. Deserializes the shape, frames it, renders it and
    returns the bytes.

    Args:
        shape_dict: Serialized shape (from Shape.to_dict())
        config_dict: Serialized generator configuration
        pixel_size: Em size in texels
        units_per_em: Font units per em
        glyph_name: Name reported back with the result

    Returns:
        Dictionary containing either:
        - Success: {"glyph_name": str, "image": {"width", "height",
          "channels", "buffer"}, "duration_ms": float}
        - Error: {"error": str, "glyph_name": str, "traceback": str,
          "duration_ms": float}
    """
    start_time = time.time()

    try:
        shape = Shape.from_dict(shape_dict)
        config = GeneratorConfig(**config_dict)

        frame = frame_glyph(shape.bounds(), pixel_size, units_per_em, config.range_px)
        image = ByteImage(frame.width, frame.height, config.output_format.channels)
        render_glyph(
            shape,
            image,
            position=(0, 0),
            size=(frame.width, frame.height),
            range_=frame.range,
            scale=frame.projection.scale,
            translate=frame.projection.translate,
            config=config,
        )

        duration_ms = (time.time() - start_time) * 1000
        return {
            "glyph_name": glyph_name,
            "image": {
                "width": image.width,
                "height": image.height,
                "channels": image.channels,
                "buffer": bytes(image.buffer),
            },
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "glyph_name": glyph_name,
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class GlyphBaker:
    """Orchestrates parallel glyph baking.

    Manages the complete workflow:
    1. Load font file
    2. Collect the outlines of the requested characters
    3. Bake glyphs in parallel using worker processes
    4. Write one PNG per glyph and update statistics

    Example:
        settings = MsdfSettings()
        baker = GlyphBaker(settings)
        stats = baker.bake(
            font_path=Path("font.ttf"),
            characters="ABC",
            output_dir=Path("out"),
        )
    """

    def __init__(self, config: MsdfSettings) -> None:
        """Initialize glyph baker with configuration.

        Args:
            config: Settings containing generator, font and processing config
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    @staticmethod
    def get_output_dir(font_path: Path) -> Path:
        """Default output directory: font.ttf -> font-msdf/ next to the font."""
        return font_path.parent / f"{font_path.stem}-msdf"

    def bake(
        self,
        font_path: Path,
        characters: str | None = None,
        output_dir: Path | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ProcessingStats:
        """Bake glyphs of a font into PNG files.

        Args:
            font_path: Path to input font file (TTF or OTF)
            characters: Characters to bake (config default if None)
            output_dir: Directory for PNG files (auto-generated if None)
            max_workers: Maximum worker processes (None = config default)
            progress_callback: Optional callback(completed, total, glyph_name, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FontLoadError: If the font cannot be loaded
            FontFormatError: If the font has no outlines
            ProcessingCancelledError: If baking is cancelled by user
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()

        if characters is None:
            characters = self.config.font.characters
        if max_workers is None:
            max_workers = self.config.processing.max_workers
        if output_dir is None:
            output_dir = self.get_output_dir(font_path)

        self.logger.info(
            "Starting glyph baking",
            input=str(font_path),
            output=str(output_dir),
            characters=len(characters),
            max_workers=max_workers,
        )

        reader = FontReader(font_path)
        reader.load()

        try:
            upm = reader.units_per_em
            self.logger.info(
                "Font loaded",
                format=reader.format,
                upm=upm,
                glyph_count=reader.glyph_count,
            )

            tasks: dict[str, dict[str, Any]] = {}
            for char, glyph_name, shape in reader.iter_char_shapes(characters):
                if shape is None:
                    self.processing_logger.log_glyph_skipped(repr(char), "not in cmap")
                    continue
                file_stem = BitmapWriter.get_glyph_filename(char, glyph_name)
                if file_stem in tasks:
                    continue
                if shape.is_empty():
                    self.processing_logger.log_glyph_skipped(glyph_name, "empty glyph")
                    continue
                tasks[file_stem] = shape.to_dict()
        finally:
            reader.close()

        self.logger.info(
            "Collected glyphs",
            to_bake=len(tasks),
            skipped=stats.skipped_count,
        )

        if tasks:
            self._bake_parallel(
                tasks=tasks,
                upm=upm,
                writer=BitmapWriter(output_dir),
                max_workers=max_workers,
                stats=stats,
                progress_callback=progress_callback,
            )
        else:
            self.logger.info("No glyphs to bake")

        stats.end_time = time.time()

        self.logger.info(
            "Baking complete",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            texels=stats.texels_written,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def _bake_parallel(
        self,
        tasks: dict[str, dict[str, Any]],
        upm: int,
        writer: BitmapWriter,
        max_workers: int | None,
        stats: ProcessingStats,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> None:
        """Bake glyphs in parallel using ProcessPoolExecutor.

        Args:
            tasks: Serialized shapes keyed by output file stem
            upm: Font units per em
            writer: Writer for the baked bitmaps
            max_workers: Maximum worker processes
            stats: Statistics object to update
            progress_callback: Optional callback(completed, total, glyph_name, success)
        """
        config_dict = self.config.generator.model_dump(mode="json")
        pixel_size = self.config.font.pixel_size

        self.logger.info(
            "Starting parallel baking",
            glyph_count=len(tasks),
            max_workers=max_workers,
        )

        total = len(tasks)
        completed = 0
        pending_futures: dict[Future[dict[str, Any]], str] = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for name, shape_dict in tasks.items():
                future = executor.submit(
                    bake_glyph,
                    shape_dict,
                    config_dict,
                    pixel_size,
                    upm,
                    name,
                )
                pending_futures[future] = name
                self.processing_logger.log_glyph_start(name)

            try:
                for future in as_completed(pending_futures):
                    glyph_name = pending_futures.pop(future)
                    success = False

                    try:
                        result = future.result()

                        if "error" in result:
                            self.processing_logger.log_glyph_error(
                                glyph_name=result["glyph_name"],
                                error=GlyphProcessingError(result["glyph_name"], result["error"]),
                                traceback=result.get("traceback"),
                            )
                        else:
                            image_data = result["image"]
                            image = ByteImage(
                                image_data["width"],
                                image_data["height"],
                                image_data["channels"],
                                bytearray(image_data["buffer"]),
                            )
                            writer.save(image, glyph_name)
                            success = True
                            self.processing_logger.log_glyph_complete(
                                glyph_name=glyph_name,
                                width=image.width,
                                height=image.height,
                                duration_ms=result.get("duration_ms", 0.0),
                            )

                    except Exception as e:
                        self.processing_logger.log_glyph_error(
                            glyph_name=glyph_name,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, glyph_name, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise ProcessingCancelledError(completed, len(pending_futures)) from None
