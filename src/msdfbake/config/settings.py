"""Configuration settings for msdfbake."""

import math
import string
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from msdfbake.domain import OutputFormat


class GeneratorMode(str, Enum):
    """Distance generator used for glyphs."""

    SIMPLE = "simple"
    COMBINER = "combiner"


class GeneratorConfig(BaseModel):
    """Configuration for distance field generation.

    The range is given in texels and converted to shape units per glyph or
    sprite, so the same setting yields the same falloff at any pixel size.
    """

    range_px: float = Field(
        default=1.5,
        gt=0.0,
        le=64.0,
        description="Distance range in texels on each side of the outline",
    )
    angle_threshold: float = Field(
        default=3.0,
        ge=0.0,
        le=math.pi,
        description="Edge coloring corner threshold in radians",
    )
    coloring_seed: int = Field(
        default=0,
        ge=0,
        description="Seed for deterministic edge coloring",
    )
    error_correction_threshold: float = Field(
        default=1.001,
        ge=0.0,
        description="Clash tolerance for error correction (0 disables it)",
    )
    mode: GeneratorMode = Field(
        default=GeneratorMode.SIMPLE,
        description="Glyph generator: simple with orientation, or overlapping contour combiner",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.MSDF,
        description="Bitmap kind to produce (msdf: 3 channels, sdf: 1 channel)",
    )
    invert_winding: bool = Field(
        default=False,
        description="Negate contour windings in the combiner",
    )


class FontConfig(BaseModel):
    """Configuration for glyph baking."""

    pixel_size: int = Field(
        default=32,
        ge=4,
        le=1024,
        description="Em size in texels",
    )
    characters: str = Field(
        default=string.ascii_letters + string.digits,
        min_length=1,
        description="Characters to bake",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Max worker processes (None = auto)",
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


class MsdfSettings(BaseModel):
    """Main application settings."""

    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    font: FontConfig = Field(default_factory=FontConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> MsdfSettings:
    """Get default application settings."""
    return MsdfSettings()
