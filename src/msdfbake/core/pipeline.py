"""Glyph and sprite baking pipelines.

Both pipelines prepare a shape (validate, normalize, color), generate a
distance field, post-process it and write it into a caller-owned byte image.

Glyphs:
    [orient] -> simple | combiner | sdf -> sign correction -> error correction
Sprites:
    per run of paths in draw order: combiner -> union (add) or subtract composite
"""

import time
from collections.abc import Callable
from typing import Any

import structlog

from msdfbake.config import GeneratorConfig, GeneratorMode
from msdfbake.core.coloring import color_edges
from msdfbake.core.compositor import subtract_composite, union_composite
from msdfbake.core.error_correction import clash_threshold, error_correction
from msdfbake.core.generator import generate_msdf, generate_msdf_simple, generate_sdf
from msdfbake.core.orientation import orient_contours
from msdfbake.core.projection import Projection
from msdfbake.core.sign_correction import distance_sign_correction
from msdfbake.domain import (
    ByteImage,
    MsdfBitmap,
    OutputFormat,
    Shape,
    SpritePath,
    SpriteSlot,
    Vector2,
)
from msdfbake.exceptions import PipelineError
from msdfbake.io.converter import sprite_paths_to_shape

logger = structlog.get_logger("msdfbake")


class _StageTimer:
    """Collects per-stage durations in milliseconds."""

    def __init__(self) -> None:
        self.timings: dict[str, float] = {}

    def run(self, stage: str, func: Callable[..., object], *args: object, **kwargs: object) -> Any:
        start = time.perf_counter()
        result = func(*args, **kwargs)
        self.timings[stage] = round((time.perf_counter() - start) * 1000, 3)
        return result


def prepare_shape(
    shape: Shape,
    angle_threshold: float = 3.0,
    seed: int = 0,
    orient: bool = False,
) -> int:
    """Validate, normalize, optionally orient, and color a shape in place.

    Args:
        shape: Shape to prepare
        angle_threshold: Corner threshold in radians
        seed: Edge coloring seed
        orient: Run contour orientation before coloring

    Returns:
        Number of contours reversed by orientation

    Raises:
        ShapeIntegrityError: If a contour is not closed
    """
    shape.validate()
    shape.normalize()
    reversed_count = len(orient_contours(shape)) if orient else 0
    color_edges(shape, angle_threshold, seed)
    return reversed_count


def render_glyph(
    shape: Shape,
    image: ByteImage,
    position: tuple[int, int],
    size: tuple[int, int],
    range_: float,
    scale: Vector2,
    translate: Vector2,
    config: GeneratorConfig | None = None,
    orient: bool | None = None,
) -> MsdfBitmap:
    """Bake a glyph shape into a region of a byte image.

    The shape is prepared in place. With the simple generator the contours
    are oriented first; the combiner relies on the natural windings instead
    and cannot be combined with orientation.

    Args:
        shape: Glyph shape in font units
        image: Target image, the region is fully overwritten
        position: (x, y) of the region in the image
        size: (width, height) of the region
        range_: Distance range in font units
        scale: Texels per font unit
        translate: Offset applied to font coordinates before scaling
        config: Generator settings (defaults if None)
        orient: Force orientation on or off (default: on for simple mode)

    Returns:
        The float bitmap written into the region

    Raises:
        PipelineError: If orientation is requested with the combiner
        ShapeIntegrityError: If a contour is not closed
        RegionError: If the region does not fit in the image
    """
    config = config or GeneratorConfig()
    combiner = config.mode is GeneratorMode.COMBINER
    if orient is None:
        orient = not combiner and config.output_format is not OutputFormat.SDF
    if orient and combiner:
        raise PipelineError("Contour orientation cannot be used with the combiner generator")

    width, height = size
    projection = Projection(scale, translate)
    timer = _StageTimer()

    reversed_count = timer.run(
        "prepare", prepare_shape, shape, config.angle_threshold, config.coloring_seed, orient
    )

    if config.output_format is OutputFormat.SDF:
        bitmap = timer.run(
            "generate", generate_sdf, shape, projection, range_, width, height,
            invert_winding=config.invert_winding,
        )
    elif combiner:
        bitmap = timer.run(
            "generate", generate_msdf, shape, projection, range_, width, height,
            invert_winding=config.invert_winding,
        )
    else:
        bitmap = timer.run(
            "generate", generate_msdf_simple, shape, projection, range_, width, height
        )

    flipped = timer.run("sign_correction", distance_sign_correction, bitmap, shape, projection)

    clashes = 0
    if config.error_correction_threshold > 0:
        threshold = clash_threshold(projection, range_, config.error_correction_threshold)
        clashes = timer.run("error_correction", error_correction, bitmap, threshold)

    timer.run("write", image.write_region, bitmap, position)

    logger.debug(
        "Glyph rendered",
        size=f"{width}x{height}",
        contours=len(shape.contours),
        edges=shape.edge_count,
        reversed=reversed_count,
        flipped=flipped,
        clashes=clashes,
        mode=config.mode.value,
        format=config.output_format.value,
        timings_ms=timer.timings,
    )
    return bitmap


def rasterize_sprite(
    paths: list[SpritePath],
    image: ByteImage,
    rect: tuple[int, int, int, int],
    scale: float,
    translate: Vector2 | None = None,
    range_px: float = 1.5,
    config: GeneratorConfig | None = None,
) -> MsdfBitmap:
    """Bake sprite paths into a rectangle of a byte image.

    Paths are walked in draw order. Each run of consecutive paths of one
    kind is generated together with the combiner. An additive run is
    unioned onto the field drawn so far; a subtractive run is carved out of
    it, so later additive paths are not affected by earlier subtractions.

    Args:
        paths: Sprite paths in draw order
        image: Target image, the rectangle is fully overwritten
        rect: (x, y, width, height) of the target rectangle
        scale: Texels per sprite unit
        translate: Offset applied to sprite coordinates before scaling
        range_px: Distance range in texels
        config: Generator settings for coloring (defaults if None)

    Returns:
        The float bitmap written into the rectangle
    """
    config = config or GeneratorConfig()
    x, y, width, height = rect
    projection = Projection(Vector2(scale, scale), translate or Vector2())
    range_ = range_px / scale
    timer = _StageTimer()

    def _bake(selected: list[SpritePath]) -> MsdfBitmap:
        shape = sprite_paths_to_shape(selected)
        prepare_shape(shape, config.angle_threshold, config.coloring_seed)
        return generate_msdf(shape, projection, range_, width, height)

    bitmap: MsdfBitmap | None = None
    runs = SpriteSlot(paths=list(paths)).draw_runs()
    for index, (subtract, selected) in enumerate(runs):
        if subtract:
            # Nothing drawn yet to carve from
            if bitmap is None:
                continue
            sub = timer.run(f"generate_{index}", _bake, selected)
            bitmap = timer.run(f"composite_{index}", subtract_composite, bitmap, sub)
        else:
            add = timer.run(f"generate_{index}", _bake, selected)
            if bitmap is None:
                bitmap = add
            else:
                bitmap = timer.run(f"composite_{index}", union_composite, bitmap, add)

    if bitmap is None:
        bitmap = MsdfBitmap(width, height)

    timer.run("write", image.write_region, bitmap, (x, y))

    logger.debug(
        "Sprite rasterized",
        size=f"{width}x{height}",
        paths=len(paths),
        runs=len(runs),
        timings_ms=timer.timings,
    )
    return bitmap
