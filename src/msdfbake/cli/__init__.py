"""Command-line interface for msdfbake.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for glyph baking
- Verbose/quiet output modes
- Sprite baking from JSON documents
- Detailed error reporting
"""

from msdfbake.cli.app import cli, main

__all__ = ["cli", "main"]
