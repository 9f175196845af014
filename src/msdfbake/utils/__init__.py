"""Utility functions for msdfbake.

This module provides utility functions including:

- Logging setup and configuration
- Baking statistics
"""

from msdfbake.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
