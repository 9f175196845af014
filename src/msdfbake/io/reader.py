"""Font reader for loading TTF/OTF fonts.

This module provides the FontReader class for loading font files and
extracting glyph outlines as shapes.
"""

from collections.abc import Iterator
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from msdfbake.domain import Shape
from msdfbake.exceptions import FontFormatError, FontLoadError, GlyphNotFoundError
from msdfbake.io.converter import glyph_to_shape


class FontReader:
    """Loads TTF/OTF fonts and extracts glyph shapes.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            shape = reader.get_glyph_shape("A")
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
        """
        self._font_path = font_path
        self._font: TTFont | None = None

    def load(self) -> None:
        """Load the font file.

        Raises:
            FontLoadError: If the font file does not exist or cannot be read
            FontFormatError: If the font has no outlines
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            self._font = TTFont(str(self._font_path))
        except (TTLibError, OSError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

        if not any(tag in self._font for tag in ("glyf", "CFF ", "CFF2")):
            self.close()
            raise FontFormatError(str(self._font_path), "no glyf or CFF outlines")

    def _require_font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """Return 'OpenType' for CFF-flavoured fonts, 'TrueType' otherwise."""
        font = self._require_font()
        if "CFF " in font or "CFF2" in font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        """Return font's units per em.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        """Return total number of glyphs in the font."""
        return self._require_font()["maxp"].numGlyphs

    def glyph_name_for(self, char: str) -> str:
        """Map a character to its glyph name through the best cmap.

        Raises:
            GlyphNotFoundError: If the font does not map the character
        """
        cmap = self._require_font().getBestCmap() or {}
        name = cmap.get(ord(char))
        if name is None:
            raise GlyphNotFoundError(char)
        return name

    def get_glyph_shape(self, name: str) -> Shape:
        """Get the outline of a glyph as a Y-up shape.

        CFF contours are reversed so that outer contours wind positively
        like TrueType ones.

        Args:
            name: Glyph name

        Returns:
            Shape flagged inverse_y_axis

        Raises:
            GlyphNotFoundError: If glyph is not in the font
        """
        font = self._require_font()
        glyph_set = font.getGlyphSet()
        if name not in glyph_set:
            raise GlyphNotFoundError(name)
        return glyph_to_shape(glyph_set[name], reverse_contours=self.format == "OpenType")

    def get_char_shape(self, char: str) -> Shape:
        """Get the outline of the glyph a character maps to."""
        return self.get_glyph_shape(self.glyph_name_for(char))

    def iter_char_shapes(self, characters: str) -> Iterator[tuple[str, str, Shape | None]]:
        """Iterate (char, glyph name, shape) for each character.

        Characters missing from the cmap yield a None shape and an empty
        glyph name instead of raising.
        """
        for char in characters:
            try:
                name = self.glyph_name_for(char)
            except GlyphNotFoundError:
                yield char, "", None
                continue
            yield char, name, self.get_glyph_shape(name)

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
