"""I/O layer for msdfbake.

This module handles reading font outlines with fonttools, converting
outline sources into shapes, and writing baked bitmaps with Pillow.

Key responsibilities:
- Load TTF/OTF fonts
- Convert fonttools glyphs and sprite paths to shapes
- Load JSON sprite documents
- Write distance bitmaps as PNG files

Key classes:
- FontReader: Load fonts and extract glyph shapes
- BitmapWriter: Save baked bitmaps
"""

from msdfbake.io.converter import glyph_to_shape, recording_to_shape, sprite_paths_to_shape
from msdfbake.io.document import SpriteDocument, load_sprite_document
from msdfbake.io.reader import FontReader
from msdfbake.io.writer import BitmapWriter

__all__ = [
    "BitmapWriter",
    "FontReader",
    "SpriteDocument",
    "glyph_to_shape",
    "load_sprite_document",
    "recording_to_shape",
    "sprite_paths_to_shape",
]
