"""Configuration management for msdfbake.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeneratorConfig: Distance field generation settings
- FontConfig: Glyph baking settings
- ProcessingConfig: Batch processing settings
- LoggingConfig: Logging settings
- MsdfSettings: Main application settings
"""

from msdfbake.config.settings import (
    FontConfig,
    GeneratorConfig,
    GeneratorMode,
    LoggingConfig,
    MsdfSettings,
    ProcessingConfig,
    get_default_settings,
)

__all__ = [
    "FontConfig",
    "GeneratorConfig",
    "GeneratorMode",
    "LoggingConfig",
    "MsdfSettings",
    "ProcessingConfig",
    "get_default_settings",
]
