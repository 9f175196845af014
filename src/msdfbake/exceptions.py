"""Exception hierarchy for msdfbake."""


class MsdfBakeError(Exception):
    """Base exception for all msdfbake errors."""

    pass


class FontError(MsdfBakeError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class FontFormatError(FontError):
    """Unsupported or invalid font format."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid font format '{path}': {details}")


class GlyphError(MsdfBakeError):
    """Errors related to glyph processing."""

    pass


class GlyphNotFoundError(GlyphError):
    """Requested glyph not found in font."""

    def __init__(self, glyph_name: str) -> None:
        self.glyph_name = glyph_name
        super().__init__(f"Glyph '{glyph_name}' not found in font")


class GlyphProcessingError(GlyphError):
    """Error baking a specific glyph."""

    def __init__(self, glyph_name: str, reason: str) -> None:
        self.glyph_name = glyph_name
        self.reason = reason
        super().__init__(f"Error processing glyph '{glyph_name}': {reason}")


class GeometryError(MsdfBakeError):
    """Errors in shape geometry."""

    pass


class ShapeIntegrityError(GeometryError):
    """A contour's edges do not form a closed loop."""

    def __init__(self, contour_index: int, edge_index: int) -> None:
        self.contour_index = contour_index
        self.edge_index = edge_index
        super().__init__(
            f"Contour {contour_index} is not closed: edge {edge_index} does not "
            "start where the previous edge ends"
        )


class EdgeColorError(GeometryError):
    """An edge without any channel color reached a generator."""

    def __init__(self, contour_index: int, edge_index: int) -> None:
        self.contour_index = contour_index
        self.edge_index = edge_index
        super().__init__(
            f"Edge {edge_index} of contour {contour_index} has no channel color"
        )


class BitmapError(MsdfBakeError):
    """Errors related to output bitmaps."""

    pass


class RegionError(BitmapError):
    """Output region does not fit inside the target image."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class BitmapSaveError(BitmapError):
    """Error saving a bitmap file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save bitmap '{path}': {reason}")


class SpriteDocumentError(MsdfBakeError):
    """Sprite document cannot be read or is invalid."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid sprite document '{path}': {reason}")


class PipelineError(MsdfBakeError):
    """Invalid combination of pipeline stages."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ProcessingCancelledError(MsdfBakeError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
