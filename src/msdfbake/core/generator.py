"""Distance field generators.

Three generators share the same projection and output normalization:

- generate_msdf: multi-channel, one selector per contour combined by winding
  ownership. Handles overlapping contours without any orientation pass.
- generate_msdf_simple: multi-channel, one selector over every edge. Needs
  consistently oriented contours.
- generate_sdf: single-channel true distance with the same ownership rule as
  generate_msdf, used for plain SDF output and as a rounded-corner baseline.

All of them take the distance range in shape units. A signed distance d is
stored as d / (2 * range) + 0.5, so 0.5 lies on the outline and the field
saturates range units away from it.
"""

from collections.abc import Iterator

from msdfbake.core.projection import Projection, output_row
from msdfbake.core.selectors import MultiDistance, MultiDistanceSelector, TrueDistanceSelector
from msdfbake.domain import INFINITE_DISTANCE, EdgeColor, EdgeSegment, MsdfBitmap, Shape, Vector2
from msdfbake.exceptions import EdgeColorError


def check_edge_colors(shape: Shape) -> None:
    """Ensure every edge carries at least one channel.

    Raises:
        EdgeColorError: For the first uncolored edge found
    """
    for contour_index, contour in enumerate(shape.contours):
        for edge_index, edge in enumerate(contour.edges):
            if edge.color == EdgeColor.BLACK:
                raise EdgeColorError(contour_index, edge_index)


def edge_neighbourhoods(
    edges: list[EdgeSegment],
) -> Iterator[tuple[EdgeSegment, EdgeSegment, EdgeSegment]]:
    """Yield (prev, edge, next) for every edge of a closed contour."""
    if not edges:
        return
    prev_edge = edges[-2] if len(edges) >= 2 else edges[0]
    edge = edges[-1]
    for next_edge in edges:
        yield prev_edge, edge, next_edge
        prev_edge, edge = edge, next_edge


def _normalize(distance: float, range_: float) -> float:
    return distance / (2.0 * range_) + 0.5


def _store(
    bitmap: MsdfBitmap, x: int, row: int, distance: MultiDistance, range_: float
) -> None:
    bitmap.set(
        x,
        row,
        (
            _normalize(distance.r, range_),
            _normalize(distance.g, range_),
            _normalize(distance.b, range_),
        ),
    )


def _combine(
    selectors: list[MultiDistanceSelector],
    windings: list[int],
    p: Vector2,
) -> MultiDistance:
    """Pick the distance of the contour that owns the point.

    The inner set holds positively wound contours the point is inside of,
    the outer set negatively wound contours the point is outside of. The
    closer of the two decides, refined by same-winding contours nearer than
    the opposing bound and then by opposite-winding contours of the same
    sign. Ties with the whole-shape median resolve to the whole-shape
    distance.
    """
    shape_selector = MultiDistanceSelector()
    inner_selector = MultiDistanceSelector()
    outer_selector = MultiDistanceSelector()
    contour_distances: list[MultiDistance] = []

    for selector, winding in zip(selectors, windings, strict=True):
        edge_distance = selector.distance(p)
        contour_distances.append(edge_distance)
        shape_selector.merge(selector)
        if winding > 0 and edge_distance.median() >= 0:
            inner_selector.merge(selector)
        if winding < 0 and edge_distance.median() <= 0:
            outer_selector.merge(selector)

    shape_distance = shape_selector.distance(p)
    inner_distance = inner_selector.distance(p)
    outer_distance = outer_selector.distance(p)
    inner_scalar = inner_distance.median()
    outer_scalar = outer_distance.median()

    if inner_scalar >= 0 and abs(inner_scalar) <= abs(outer_scalar):
        result = inner_distance
        winding = 1
        for contour_distance, contour_winding in zip(contour_distances, windings, strict=True):
            if (
                contour_winding > 0
                and abs(contour_distance.median()) < abs(outer_scalar)
                and contour_distance.median() > result.median()
            ):
                result = contour_distance
    elif outer_scalar <= 0 and abs(outer_scalar) < abs(inner_scalar):
        result = outer_distance
        winding = -1
        for contour_distance, contour_winding in zip(contour_distances, windings, strict=True):
            if (
                contour_winding < 0
                and abs(contour_distance.median()) < abs(inner_scalar)
                and contour_distance.median() < result.median()
            ):
                result = contour_distance
    else:
        return shape_distance

    for contour_distance, contour_winding in zip(contour_distances, windings, strict=True):
        if (
            contour_winding != winding
            and contour_distance.median() * result.median() >= 0
            and abs(contour_distance.median()) < abs(result.median())
        ):
            result = contour_distance

    if result.median() == shape_distance.median():
        result = shape_distance
    return result


def generate_msdf(
    shape: Shape,
    projection: Projection,
    range_: float,
    width: int,
    height: int,
    invert_winding: bool = False,
) -> MsdfBitmap:
    """Generate a multi-channel field with overlapping contour support.

    Args:
        shape: Colored shape, left untouched
        projection: Texel to shape-space mapping
        range_: Distance range in shape units
        width: Bitmap width in texels
        height: Bitmap height in texels
        invert_winding: Negate every contour winding, for geometry whose Y
            axis was flipped while it was built

    Returns:
        3-channel normalized bitmap

    Raises:
        EdgeColorError: If an edge has no channel color
    """
    check_edge_colors(shape)
    bitmap = MsdfBitmap(width, height, 3)
    contours = shape.contours
    windings = [
        -contour.winding() if invert_winding else contour.winding() for contour in contours
    ]

    for y in range(height):
        row = output_row(y, height, shape.inverse_y_axis)
        for x in range(width):
            p = projection.project(x, y)
            selectors = []
            for contour in contours:
                selector = MultiDistanceSelector()
                for prev_edge, edge, next_edge in edge_neighbourhoods(contour.edges):
                    selector.add_edge(prev_edge, edge, next_edge, p)
                selectors.append(selector)
            _store(bitmap, x, row, _combine(selectors, windings, p), range_)

    return bitmap


def generate_msdf_simple(
    shape: Shape,
    projection: Projection,
    range_: float,
    width: int,
    height: int,
) -> MsdfBitmap:
    """Generate a multi-channel field from the nearest edge per channel.

    Contours must already agree on orientation (see orient_contours);
    overlapping or inconsistently wound contours produce sign errors that
    distance_sign_correction is expected to repair.

    Args:
        shape: Colored shape, left untouched
        projection: Texel to shape-space mapping
        range_: Distance range in shape units
        width: Bitmap width in texels
        height: Bitmap height in texels

    Returns:
        3-channel normalized bitmap

    Raises:
        EdgeColorError: If an edge has no channel color
    """
    check_edge_colors(shape)
    bitmap = MsdfBitmap(width, height, 3)

    for y in range(height):
        row = output_row(y, height, shape.inverse_y_axis)
        for x in range(width):
            p = projection.project(x, y)
            selector = MultiDistanceSelector()
            for contour in shape.contours:
                for prev_edge, edge, next_edge in edge_neighbourhoods(contour.edges):
                    selector.add_edge(prev_edge, edge, next_edge, p)
            _store(bitmap, x, row, selector.distance(p), range_)

    return bitmap


def generate_sdf(
    shape: Shape,
    projection: Projection,
    range_: float,
    width: int,
    height: int,
    invert_winding: bool = False,
) -> MsdfBitmap:
    """Generate a single-channel true distance field.

    Edge colors are ignored. Values are clamped to [0, 1].

    Args:
        shape: Shape, left untouched
        projection: Texel to shape-space mapping
        range_: Distance range in shape units
        width: Bitmap width in texels
        height: Bitmap height in texels
        invert_winding: Negate every contour winding

    Returns:
        1-channel normalized bitmap
    """
    bitmap = MsdfBitmap(width, height, 1)
    contours = shape.contours
    windings = [
        -contour.winding() if invert_winding else contour.winding() for contour in contours
    ]
    infinite = INFINITE_DISTANCE.distance

    for y in range(height):
        row = output_row(y, height, shape.inverse_y_axis)
        for x in range(width):
            p = projection.project(x, y)
            neg_dist = -infinite
            pos_dist = infinite
            contour_distances: list[float] = []

            for contour, contour_winding in zip(contours, windings, strict=True):
                selector = TrueDistanceSelector()
                for edge in contour.edges:
                    selector.add_edge(edge, p)
                distance = selector.distance()
                contour_distances.append(distance)
                if contour_winding > 0 and distance >= 0 and abs(distance) < abs(pos_dist):
                    pos_dist = distance
                if contour_winding < 0 and distance <= 0 and abs(distance) < abs(neg_dist):
                    neg_dist = distance

            sd = infinite
            winding = 0
            if pos_dist >= 0 and abs(pos_dist) <= abs(neg_dist):
                sd = pos_dist
                winding = 1
                for distance, contour_winding in zip(contour_distances, windings, strict=True):
                    if contour_winding > 0 and distance > sd and abs(distance) < abs(neg_dist):
                        sd = distance
            elif neg_dist <= 0 and abs(neg_dist) <= abs(pos_dist):
                sd = neg_dist
                winding = -1
                for distance, contour_winding in zip(contour_distances, windings, strict=True):
                    if contour_winding < 0 and distance < sd and abs(distance) < abs(pos_dist):
                        sd = distance
            for distance, contour_winding in zip(contour_distances, windings, strict=True):
                if contour_winding != winding and abs(distance) < abs(sd):
                    sd = distance

            value = min(max(sd / (2.0 * range_), -0.5), 0.5) + 0.5
            bitmap.set(x, row, (value,))

    return bitmap
