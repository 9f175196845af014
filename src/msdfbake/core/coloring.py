"""Edge coloring.

Assigns channel colors to edges so that the two edges meeting at every
sharp corner share at most one channel. The median of three channels then
reconstructs the corner exactly instead of rounding it off.

The coloring is deterministic for a given seed. The seed and the current
color are threaded through explicit arguments and return values; there is
no module state.
"""

import math

from msdfbake.domain import Contour, EdgeColor, Shape, Vector2

DEFAULT_ANGLE_THRESHOLD = 3.0

_START_COLORS = (EdgeColor.CYAN, EdgeColor.MAGENTA, EdgeColor.YELLOW)


def is_corner(a_dir: Vector2, b_dir: Vector2, cross_threshold: float) -> bool:
    """Check whether the joint between two unit tangents is a corner.

    A joint is a corner when the direction turns by 90 degrees or more, or
    when the sine of the turn exceeds the threshold.
    """
    return a_dir.dot(b_dir) <= 0 or abs(a_dir.cross(b_dir)) > cross_threshold


def switch_color(
    color: EdgeColor, seed: int, banned: EdgeColor = EdgeColor.BLACK
) -> tuple[EdgeColor, int]:
    """Pick the next color after a corner.

    Args:
        color: Current color
        seed: Pseudo-random state
        banned: Color the result must not equal (only a single channel
            shared with color is honored)

    Returns:
        Tuple of (new color, new seed)
    """
    combined = EdgeColor(color & banned)
    if combined in (EdgeColor.RED, EdgeColor.GREEN, EdgeColor.BLUE):
        return EdgeColor(combined ^ EdgeColor.WHITE), seed
    if color in (EdgeColor.BLACK, EdgeColor.WHITE):
        return _START_COLORS[seed % 3], seed // 3
    shifted = int(color) << (1 + (seed & 1))
    return EdgeColor((shifted | shifted >> 3) & EdgeColor.WHITE), seed >> 1


def find_corners(contour: Contour, cross_threshold: float) -> list[int]:
    """Indices of edges whose start joint is a corner."""
    corners: list[int] = []
    if not contour.edges:
        return corners
    prev_direction = contour.edges[-1].direction(1)
    for index, edge in enumerate(contour.edges):
        if is_corner(prev_direction.normalize(), edge.direction(0).normalize(), cross_threshold):
            corners.append(index)
        prev_direction = edge.direction(1)
    return corners


def _color_teardrop(contour: Contour, corner: int, seed: int) -> int:
    colors = [EdgeColor.WHITE, EdgeColor.WHITE, EdgeColor.WHITE]
    colors[0], seed = switch_color(colors[0], seed)
    colors[2], seed = switch_color(colors[0], seed)

    m = len(contour.edges)
    if m >= 3:
        for i in range(m):
            region = int(3 + 2.875 * i / (m - 1) - 1.4375 + 0.5) - 3
            contour.edges[(corner + i) % m].color = colors[region + 1]
        return seed

    # Fewer than three edges for three colors: split every edge into thirds
    parts = [None] * 6
    first = contour.edges[0].split_in_thirds()
    parts[3 * corner : 3 * corner + 3] = first
    if m >= 2:
        second = contour.edges[1].split_in_thirds()
        parts[3 - 3 * corner : 6 - 3 * corner] = second
        for i, part in enumerate(parts):
            part.color = colors[i // 2]
    else:
        parts = list(first)
        for i, part in enumerate(parts):
            part.color = colors[i]
    contour.edges = list(parts)
    return seed


def _color_corners(contour: Contour, corners: list[int], seed: int) -> int:
    corner_count = len(corners)
    spline = 0
    start = corners[0]
    m = len(contour.edges)
    color, seed = switch_color(EdgeColor.WHITE, seed)
    initial_color = color
    for i in range(m):
        index = (start + i) % m
        if spline + 1 < corner_count and corners[spline + 1] == index:
            spline += 1
            banned = initial_color if spline == corner_count - 1 else EdgeColor.BLACK
            color, seed = switch_color(color, seed, banned)
        contour.edges[index].color = color
    return seed


def color_contour(contour: Contour, cross_threshold: float, seed: int = 0) -> int:
    """Assign colors to the edges of a single contour.

    - No corners: every edge gets the same two-channel color.
    - One corner: three regions (color, white, color) around the corner,
      splitting edges when the contour has fewer than three.
    - Several corners: the color switches at each corner, and the last
      switch avoids the initial color so the start/end seam is not one color.

    Args:
        contour: Contour to color in place
        cross_threshold: Sine of the corner angle threshold
        seed: Pseudo-random state

    Returns:
        Updated seed
    """
    corners = find_corners(contour, cross_threshold)

    if not corners:
        color, seed = switch_color(EdgeColor.WHITE, seed)
        for edge in contour.edges:
            edge.color = color
        return seed

    if len(corners) == 1:
        return _color_teardrop(contour, corners[0], seed)

    return _color_corners(contour, corners, seed)


def color_edges(
    shape: Shape,
    angle_threshold: float = DEFAULT_ANGLE_THRESHOLD,
    seed: int = 0,
) -> int:
    """Color every edge of a shape.

    Args:
        shape: Shape to color in place
        angle_threshold: Corner threshold in radians
        seed: Initial pseudo-random state

    Returns:
        Final seed, so callers can chain colorings deterministically
    """
    cross_threshold = math.sin(angle_threshold)
    for contour in shape.contours:
        seed = color_contour(contour, cross_threshold, seed)
    return seed
