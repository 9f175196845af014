"""Pixel to shape-space projection.

Every generator and correction pass maps a texel center to shape space the
same way, so this module is the single place that mapping lives.
"""

import math
from dataclasses import dataclass

from msdfbake.domain import Vector2
from msdfbake.domain.edge import Bounds


@dataclass(frozen=True, slots=True)
class Projection:
    """Scale and translate between bitmap texels and shape units.

    Attributes:
        scale: Texels per shape unit along each axis
        translate: Offset added to shape coordinates before scaling
    """

    scale: Vector2 = Vector2(1.0, 1.0)
    translate: Vector2 = Vector2(0.0, 0.0)

    def project(self, x: float, y: float) -> Vector2:
        """Shape-space position of the texel center at column x, row y.

        Computes (pixel + 0.5) / scale - translate.
        """
        return Vector2(
            (x + 0.5) / self.scale.x - self.translate.x,
            (y + 0.5) / self.scale.y - self.translate.y,
        )

    def project_x(self, x: float) -> float:
        """Shape-space X of a texel column center."""
        return (x + 0.5) / self.scale.x - self.translate.x

    def project_y(self, y: float) -> float:
        """Shape-space Y of a texel row center."""
        return (y + 0.5) / self.scale.y - self.translate.y

    def unproject(self, point: Vector2) -> Vector2:
        """Continuous texel coordinates of a shape-space point."""
        return Vector2(
            (point.x + self.translate.x) * self.scale.x,
            (point.y + self.translate.y) * self.scale.y,
        )

    def unproject_distance(self, distance: float) -> Vector2:
        """Convert a shape-space length into texels along each axis."""
        return Vector2(distance * self.scale.x, distance * self.scale.y)


def output_row(y: int, height: int, inverse_y_axis: bool) -> int:
    """Bitmap row receiving generation row y.

    Rows are addressed from the bottom when the shape is Y-up.
    """
    return height - 1 - y if inverse_y_axis else y


@dataclass(frozen=True, slots=True)
class GlyphFrame:
    """Bitmap size and projection that fit a glyph with padding.

    Attributes:
        width: Bitmap width in texels
        height: Bitmap height in texels
        projection: Projection from texels to glyph units
        range: Distance range in glyph units
    """

    width: int
    height: int
    projection: Projection
    range: float


def frame_glyph(
    bounds: Bounds,
    pixel_size: float,
    units_per_em: int,
    range_px: float,
) -> GlyphFrame:
    """Fit a glyph's bounds into a padded bitmap.

    The scale maps one em to pixel_size texels. Each side is padded by the
    pixel range so the field has room to fall off outside the outline.

    Args:
        bounds: Glyph bounds (left, bottom, right, top) in font units
        pixel_size: Em size in texels
        units_per_em: Font units per em
        range_px: Distance range in texels

    Returns:
        GlyphFrame with bitmap size, projection and range in font units
    """
    scale = pixel_size / units_per_em
    left, bottom, right, top = bounds
    if left > right or bottom > top:
        left = bottom = right = top = 0.0

    padding = math.ceil(range_px)
    width = max(1, math.ceil((right - left) * scale) + 2 * padding)
    height = max(1, math.ceil((top - bottom) * scale) + 2 * padding)
    translate = Vector2(-left + padding / scale, -bottom + padding / scale)

    return GlyphFrame(
        width=width,
        height=height,
        projection=Projection(Vector2(scale, scale), translate),
        range=range_px / scale,
    )
