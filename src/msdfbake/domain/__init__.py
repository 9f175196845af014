"""Domain models for msdfbake.

This module contains the geometric and raster models the distance field
pipeline operates on. All models are designed to be:

- Double precision throughout (Python floats)
- Serializable for inter-process communication (parallel baking)
- Independent of fonttools implementation details

Key classes:
- Vector2: An immutable 2D vector/point
- EdgeSegment: Linear, quadratic or cubic edge with a channel color
- Contour: A closed, cyclic sequence of edges
- Shape: A set of contours plus the Y-axis convention
- MsdfBitmap / ByteImage: Float working bitmap and caller-owned byte output
- Anchor / SpritePath / SpriteSlot: Sprite path input
"""

from msdfbake.domain.bitmap import (
    ByteImage,
    MsdfBitmap,
    OutputFormat,
    decode_distance,
    encode_distance,
)
from msdfbake.domain.contour import Contour
from msdfbake.domain.edge import (
    INFINITE_DISTANCE,
    CubicSegment,
    EdgeColor,
    EdgeSegment,
    LinearSegment,
    QuadraticSegment,
    SegmentKind,
    SignedDistance,
)
from msdfbake.domain.shape import Shape
from msdfbake.domain.sprite import Anchor, SpritePath, SpriteSlot
from msdfbake.domain.vector import Vector2, median

__all__: list[str] = [
    # Enums
    "EdgeColor",
    "OutputFormat",
    "SegmentKind",
    # Geometry
    "INFINITE_DISTANCE",
    "Contour",
    "CubicSegment",
    "EdgeSegment",
    "LinearSegment",
    "QuadraticSegment",
    "Shape",
    "SignedDistance",
    "Vector2",
    # Raster
    "ByteImage",
    "MsdfBitmap",
    "decode_distance",
    "encode_distance",
    "median",
    # Sprites
    "Anchor",
    "SpritePath",
    "SpriteSlot",
]
