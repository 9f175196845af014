"""Converters from outline sources to Shape.

Two sources are supported:
- fontTools glyphs, drawn through a RecordingPen. Glyph coordinates stay in
  Y-up font units and the shape is flagged inverse_y_axis so bitmaps are
  written bottom-up.
- Sprite paths made of anchors with a curvature value (Y-down editor units).
"""

from typing import Any

from fontTools.pens.basePen import decomposeQuadraticSegment, decomposeSuperBezierSegment
from fontTools.pens.recordingPen import RecordingPen

from msdfbake.domain import (
    Contour,
    CubicSegment,
    EdgeSegment,
    LinearSegment,
    QuadraticSegment,
    Shape,
    SpritePath,
    Vector2,
)

# Anchors whose curvature is below this draw straight edges
CURVE_EPSILON = 1e-4

MIN_PATH_ANCHORS = 3


def _vec(point: tuple[float, float]) -> Vector2:
    x, y = point
    return Vector2(float(x), float(y))


class _ContourBuilder:
    """Accumulates pen commands into closed contours."""

    def __init__(self, shape: Shape) -> None:
        self._shape = shape
        self._contour: Contour | None = None
        self._start = Vector2()
        self._position = Vector2()

    def move_to(self, point: Vector2) -> None:
        self.close()
        self._contour = Contour()
        self._start = self._position = point

    def line_to(self, point: Vector2) -> None:
        # Zero-length edges carry no direction
        if self._contour is not None and point != self._position:
            self._contour.add_edge(LinearSegment(self._position, point))
        self._position = point

    def quad_to(self, control: Vector2, point: Vector2) -> None:
        if self._contour is not None:
            self._contour.add_edge(QuadraticSegment(self._position, control, point))
        self._position = point

    def cubic_to(self, control1: Vector2, control2: Vector2, point: Vector2) -> None:
        if self._contour is not None:
            self._contour.add_edge(CubicSegment(self._position, control1, control2, point))
        self._position = point

    def close(self) -> None:
        """Finish the current contour, adding a closing line if needed."""
        if self._contour is None:
            return
        if self._contour.edges and self._position != self._start:
            self._contour.add_edge(LinearSegment(self._position, self._start))
        if self._contour.edges:
            self._shape.add_contour(self._contour)
        self._contour = None


def _implied_start(points: list[tuple[float, float]]) -> Vector2:
    """On-curve start of a TrueType contour made only of off-curve points."""
    first = _vec(points[0])
    last = _vec(points[-1])
    return (first + last) * 0.5


def recording_to_shape(recording: list[tuple[str, tuple[Any, ...]]]) -> Shape:
    """Convert a RecordingPen recording into a Shape.

    The recording holds commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), ..., (xn, yn)))  # implied on-curve midpoints
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))
    - ('closePath', ()) or ('endPath', ())

    A qCurveTo whose last point is None is a contour without any on-curve
    point; it starts on the midpoint of its last and first off-curve points.

    Args:
        recording: Drawing commands from RecordingPen

    Returns:
        Shape with one contour per closed path (inverse_y_axis unset)
    """
    shape = Shape()
    builder = _ContourBuilder(shape)

    for command, args in recording:
        if command == "moveTo":
            builder.move_to(_vec(args[0]))

        elif command == "lineTo":
            builder.line_to(_vec(args[0]))

        elif command == "qCurveTo":
            points = list(args)
            if points[-1] is None:
                off_curve = points[:-1]
                start = _implied_start(off_curve)
                builder.move_to(start)
                points = [*off_curve, start.to_tuple()]
            if len(points) == 1:
                builder.line_to(_vec(points[0]))
                continue
            for control, on_curve in decomposeQuadraticSegment(points):
                builder.quad_to(_vec(control), _vec(on_curve))

        elif command == "curveTo":
            if len(args) == 1:
                builder.line_to(_vec(args[0]))
            elif len(args) == 2:
                builder.quad_to(_vec(args[0]), _vec(args[1]))
            elif len(args) == 3:
                builder.cubic_to(*(_vec(p) for p in args))
            else:
                for segment in decomposeSuperBezierSegment(list(args)):
                    builder.cubic_to(*(_vec(p) for p in segment))

        elif command in ("closePath", "endPath"):
            builder.close()

    builder.close()
    return shape


def glyph_to_shape(fonttools_glyph: Any, reverse_contours: bool = False) -> Shape:
    """Convert a fontTools glyph into a Y-up Shape.

    TrueType outlines wind outer contours clockwise, which gives them a
    positive winding here. CFF outlines use the opposite convention; pass
    reverse_contours to bring them in line.

    Args:
        fonttools_glyph: Glyph from a fontTools glyph set (anything with draw(pen))
        reverse_contours: Reverse every contour after conversion

    Returns:
        Shape flagged inverse_y_axis
    """
    pen = RecordingPen()
    fonttools_glyph.draw(pen)

    shape = recording_to_shape(pen.value)
    shape.inverse_y_axis = True
    if reverse_contours:
        for contour in shape.contours:
            contour.reverse()
    return shape


def _sprite_edge(p0: Vector2, p1: Vector2, curve: float) -> EdgeSegment:
    if abs(curve) < CURVE_EPSILON:
        return LinearSegment(p0, p1)
    direction = p1 - p0
    length = direction.length()
    if length > 1e-10:
        perpendicular = Vector2(-direction.y / length, direction.x / length)
    else:
        perpendicular = Vector2(0.0, 1.0)
    control = (p0 + p1) * 0.5 + perpendicular * curve
    return QuadraticSegment(p0, control, p1)


def sprite_paths_to_shape(paths: list[SpritePath]) -> Shape:
    """Convert sprite paths into a Shape.

    Each path becomes one closed contour. The edge leaving an anchor is a
    line when the anchor's curvature is negligible, otherwise a quadratic
    whose control point sits off the chord midpoint by the curvature along
    the chord's perpendicular. Paths with fewer than three anchors are
    skipped. Contours are reoriented to positive winding so that
    overlapping paths add up instead of cancelling.

    Args:
        paths: Sprite paths in draw order

    Returns:
        Shape (Y-down, inverse_y_axis unset)
    """
    shape = Shape()
    for path in paths:
        anchors = path.anchors
        if len(anchors) < MIN_PATH_ANCHORS:
            continue
        contour = Contour()
        for i, anchor in enumerate(anchors):
            following = anchors[(i + 1) % len(anchors)]
            p0 = Vector2(anchor.x, anchor.y)
            p1 = Vector2(following.x, following.y)
            contour.add_edge(_sprite_edge(p0, p1, anchor.curve))
        if contour.winding() < 0:
            contour.reverse()
        shape.add_contour(contour)
    return shape
