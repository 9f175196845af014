"""Bitmap writer for saving baked distance fields.

This module provides the BitmapWriter class for writing ByteImage buffers
as PNG files through Pillow, and the naming convention for glyph files.
"""

from pathlib import Path

from PIL import Image

from msdfbake.domain import ByteImage
from msdfbake.exceptions import BitmapSaveError

_MODES = {1: "L", 3: "RGB"}


class BitmapWriter:
    """Writes byte images as PNG files.

    Example:
        writer = BitmapWriter(Path("out"))
        writer.save(image, "A")
    """

    def __init__(self, output_dir: Path) -> None:
        """Initialize the bitmap writer.

        Args:
            output_dir: Directory the files are written to (created on save)
        """
        self._output_dir = output_dir

    @staticmethod
    def to_image(image: ByteImage) -> Image.Image:
        """Wrap a byte image as a Pillow image (L or RGB)."""
        mode = _MODES.get(image.channels)
        if mode is None:
            raise BitmapSaveError("<memory>", f"unsupported channel count {image.channels}")
        return Image.frombytes(mode, (image.width, image.height), bytes(image.buffer))

    def save(self, image: ByteImage, name: str) -> Path:
        """Save an image as <output_dir>/<name>.png.

        Returns:
            Path of the written file

        Raises:
            BitmapSaveError: If the file cannot be written
        """
        path = self._output_dir / f"{name}.png"
        self.save_as(image, path)
        return path

    @staticmethod
    def save_as(image: ByteImage, path: Path) -> None:
        """Save an image to an explicit path.

        Raises:
            BitmapSaveError: If the file cannot be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            BitmapWriter.to_image(image).save(path, format="PNG")
        except OSError as e:
            raise BitmapSaveError(str(path), str(e)) from e

    @staticmethod
    def get_glyph_filename(char: str, glyph_name: str) -> str:
        """File stem for a baked glyph.

        Uses the glyph name, which is filesystem-safe for ordinary fonts,
        and falls back to the code point.

        Converts: ("A", "A") -> "A"
                  ("a", "a") -> "a_lower"  (case-insensitive filesystems)
                  ("?", "") -> "u003F"
        """
        if not glyph_name or not glyph_name.isidentifier():
            return f"u{ord(char):04X}"
        if len(glyph_name) == 1 and glyph_name.islower():
            return f"{glyph_name}_lower"
        return glyph_name
