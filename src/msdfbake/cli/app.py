"""CLI application entry point for msdfbake.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from msdfbake import __version__
from msdfbake.cli.output import (
    console,
    create_progress,
    print_bake_info,
    print_cancellation_notice,
    print_cancellation_summary,
    print_error,
    print_font_info,
    print_header,
    print_processing_info,
    print_sprite_success,
    print_step,
    print_success,
)
from msdfbake.config import (
    FontConfig,
    GeneratorConfig,
    GeneratorMode,
    LoggingConfig,
    MsdfSettings,
    ProcessingConfig,
)
from msdfbake.core import GlyphBaker, rasterize_sprite
from msdfbake.domain import ByteImage, OutputFormat
from msdfbake.exceptions import (
    BitmapSaveError,
    FontLoadError,
    MsdfBakeError,
    ProcessingCancelledError,
)
from msdfbake.io import BitmapWriter, FontReader, load_sprite_document
from msdfbake.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="msdfbake",
    help="Bake multi-channel signed distance fields from font glyphs and sprite paths.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]msdfbake[/bold blue] v{__version__}")
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
    """Bake multi-channel signed distance fields."""


@app.command()
def glyphs(
    input_font: Annotated[
        Path,
        typer.Argument(
            help="Path to input TTF/OTF font file",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory (default: {name}-msdf next to the font)",
        ),
    ] = None,
    characters: Annotated[
        str | None,
        typer.Option(
            "--chars",
            "-c",
            help="Characters to bake (default: ASCII letters and digits)",
        ),
    ] = None,
    pixel_size: Annotated[
        int,
        typer.Option(
            "--size",
            "-s",
            help="Em size in texels",
            min=4,
            max=1024,
        ),
    ] = 32,
    range_px: Annotated[
        float,
        typer.Option(
            "--range",
            "-r",
            help="Distance range in texels",
            min=0.1,
            max=64.0,
        ),
    ] = 1.5,
    mode: Annotated[
        str,
        typer.Option(
            "--mode",
            "-m",
            help="Generator (simple|combiner)",
        ),
    ] = "simple",
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format (msdf|sdf)",
        ),
    ] = "msdf",
    error_threshold: Annotated[
        float,
        typer.Option(
            "--error-threshold",
            help="Clash tolerance for error correction (0 disables it)",
            min=0.0,
        ),
    ] = 1.001,
    seed: Annotated[
        int,
        typer.Option(
            "--seed",
            help="Edge coloring seed",
            min=0,
        ),
    ] = 0,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
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
    """Bake the glyphs of a font into one distance field PNG per character.

    Example:
        msdfbake glyphs Roboto-Regular.ttf -c "ABC" -s 48

    This will write A.png, B.png and C.png into Roboto-Regular-msdf/.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_font.exists():
        print_error(
            f"Input file not found: {input_font}",
            details=f"The file '{input_font}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_font.is_file():
        print_error(
            f"Input path is not a file: {input_font}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)

    try:
        generator_mode = GeneratorMode(mode.lower())
    except ValueError:
        print_error(f"Invalid mode: {mode}", details="Valid values: simple, combiner")
        raise typer.Exit(code=1)

    try:
        format_choice = OutputFormat(output_format.lower())
    except ValueError:
        print_error(f"Invalid format: {output_format}", details="Valid values: msdf, sdf")
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    font_config = FontConfig(pixel_size=pixel_size)
    if characters:
        font_config = FontConfig(pixel_size=pixel_size, characters=characters)

    settings = MsdfSettings(
        generator=GeneratorConfig(
            range_px=range_px,
            coloring_seed=seed,
            error_correction_threshold=error_threshold,
            mode=generator_mode,
            output_format=format_choice,
        ),
        font=font_config,
        processing=ProcessingConfig(max_workers=workers),
        logging=LoggingConfig(
            log_file=log_file,
            log_level="DEBUG" if verbose else log_level,
        ),
    )

    stats = None
    try:
        if not quiet:
            print_step("Loading font")

        with FontReader(input_font) as reader:
            if not quiet:
                print_font_info(
                    font_path=str(input_font),
                    font_type=reader.format,
                    glyph_count=reader.glyph_count,
                    upm=reader.units_per_em,
                )

        output_dir = output if output is not None else GlyphBaker.get_output_dir(input_font)
        char_count = len(settings.font.characters)

        if not quiet:
            print_bake_info(
                characters=char_count,
                pixel_size=pixel_size,
                range_px=range_px,
                mode=generator_mode.value,
                output_format=format_choice.value,
            )
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Baking")
            print_processing_info(actual_workers, is_auto=(workers is None))

        baker = GlyphBaker(settings)

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(
                        f"Baking {char_count} glyphs",
                        total=char_count,
                    )

                    def update_progress(completed: int, total: int, *_: object) -> None:
                        progress.update(task_id, completed=completed, total=total)

                    stats = baker.bake(
                        font_path=input_font,
                        output_dir=output_dir,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                stats = baker.bake(
                    font_path=input_font,
                    output_dir=output_dir,
                    max_workers=workers,
                )
        except (KeyboardInterrupt, ProcessingCancelledError) as e:
            if not quiet:
                print_cancellation_notice()
                if isinstance(e, ProcessingCancelledError):
                    print_cancellation_summary(e.processed_count, e.pending_count)
                else:
                    print_cancellation_summary(processed=0, cancelled=0)
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            print_success(
                output_path=str(output_dir),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                skipped=stats.skipped_count,
                errors=stats.error_count,
                avg_time_ms=stats.avg_glyph_time_ms,
                min_time_ms=stats.min_glyph_time_ms,
                max_time_ms=stats.max_glyph_time_ms,
            )
            if verbose:
                for glyph_name, message in stats.errors:
                    console.print(f"  [red]{glyph_name}: {message}[/red]")

        if stats.error_count > 0:
            raise typer.Exit(code=1)

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except BitmapSaveError as e:
        print_error(f"Could not save bitmap: {e.reason}")
        raise typer.Exit(code=1)
    except MsdfBakeError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


@app.command()
def sprite(
    input_document: Annotated[
        Path,
        typer.Argument(
            help="Path to sprite JSON document",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output PNG path",
        ),
    ],
    width: Annotated[
        int | None,
        typer.Option("--width", help="Slot width in texels (default: from document)", min=1),
    ] = None,
    height: Annotated[
        int | None,
        typer.Option("--height", help="Slot height in texels (default: from document)", min=1),
    ] = None,
    scale: Annotated[
        float | None,
        typer.Option("--scale", help="Texels per sprite unit (default: from document)", min=0.0),
    ] = None,
    range_px: Annotated[
        float,
        typer.Option("--range", "-r", help="Distance range in texels", min=0.1, max=64.0),
    ] = 1.5,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Bake a sprite document into a strip of distance fields, one per slot.

    Example:
        msdfbake sprite icon.json -o icon.png
    """
    if not input_document.is_file():
        print_error(f"Input file not found: {input_document}")
        raise typer.Exit(code=1)

    configure_logging(console_level=log_level, quiet=quiet)

    try:
        document = load_sprite_document(input_document)
        slot_width = width or document.width
        slot_height = height or document.height
        sprite_scale = scale or document.scale
        slots = document.to_slots()

        if not slots:
            print_error("Sprite document has no slots")
            raise typer.Exit(code=1)

        if not quiet:
            print_header(__version__)
            print_step(f"Baking {len(slots)} slots")

        config = GeneratorConfig(range_px=range_px)
        image = ByteImage(slot_width * len(slots), slot_height, 3)
        for i, slot in enumerate(slots):
            rasterize_sprite(
                slot.paths,
                image,
                rect=(i * slot_width, 0, slot_width, slot_height),
                scale=sprite_scale,
                range_px=range_px,
                config=config,
            )

        BitmapWriter.save_as(image, output)

        if not quiet:
            print_sprite_success(str(output), image.width, image.height, len(slots))

    except MsdfBakeError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
