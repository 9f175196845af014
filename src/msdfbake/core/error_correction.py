"""Clash error correction.

Bilinear interpolation between two texels can make the median cross 0.5
somewhere the true outline does not. Such texel pairs "clash". Texels found
clashing with a neighbour are collapsed to their median, trading the corner
information they carried for an artifact-free field.
"""

from msdfbake.core.projection import Projection
from msdfbake.domain import MsdfBitmap, Vector2

DEFAULT_TOLERANCE = 1.001

_CARDINAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL = ((-1, -1), (1, -1), (-1, 1), (1, 1))


def clash_threshold(
    projection: Projection, range_: float, tolerance: float = DEFAULT_TOLERANCE
) -> Vector2:
    """Per-axis channel difference above which neighbours may clash.

    A field of width 2 * range_ shape units changes by at most
    1 / (scale * 2 * range_) per texel, so the threshold is that amount
    times the tolerance.
    """
    range_width = 2.0 * range_
    return Vector2(
        tolerance / (projection.scale.x * range_width),
        tolerance / (projection.scale.y * range_width),
    )


def detect_clash(a: tuple[float, ...], b: tuple[float, ...], threshold: float) -> bool:
    """Check whether texel a clashes with its neighbour b.

    Channels are ordered by decreasing difference between the two texels.
    The pair clashes when the second largest difference reaches the
    threshold, b has not already been equalized, and a is the one farther
    from the edge in its least differing channel.
    """
    a0, a1, a2 = a
    b0, b1, b2 = b

    if abs(b0 - a0) < abs(b1 - a1):
        a0, a1 = a1, a0
        b0, b1 = b1, b0
    if abs(b1 - a1) < abs(b2 - a2):
        a1, a2 = a2, a1
        b1, b2 = b2, b1
        if abs(b0 - a0) < abs(b1 - a1):
            a0, a1 = a1, a0
            b0, b1 = b1, b0

    return (
        abs(b1 - a1) >= threshold
        and not (b0 == b1 and b0 == b2)
        and abs(a2 - 0.5) >= abs(b2 - 0.5)
    )


def _find_clashes(
    bitmap: MsdfBitmap,
    offsets: tuple[tuple[int, int], ...],
    thresholds: tuple[float, ...],
) -> list[tuple[int, int]]:
    width, height = bitmap.width, bitmap.height
    clashes: list[tuple[int, int]] = []
    for y in range(height):
        for x in range(width):
            texel = bitmap.get(x, y)
            for (dx, dy), threshold in zip(offsets, thresholds, strict=True):
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and 0 <= ny < height:
                    if detect_clash(texel, bitmap.get(nx, ny), threshold):
                        clashes.append((x, y))
                        break
    return clashes


def _equalize(bitmap: MsdfBitmap, clashes: list[tuple[int, int]]) -> None:
    for x, y in clashes:
        value = bitmap.median(x, y)
        bitmap.set(x, y, (value, value, value))


def error_correction(bitmap: MsdfBitmap, threshold: Vector2) -> int:
    """Equalize clashing texels, first against cardinal then diagonal neighbours.

    Clashes of each pass are all detected before any texel is modified.
    Single-channel bitmaps have nothing to clash and are left alone.

    Args:
        bitmap: 3-channel normalized bitmap, corrected in place
        threshold: Per-axis clash threshold (see clash_threshold)

    Returns:
        Number of equalized texels
    """
    if bitmap.channels != 3:
        return 0

    cardinal = _find_clashes(
        bitmap, _CARDINAL, (threshold.x, threshold.x, threshold.y, threshold.y)
    )
    _equalize(bitmap, cardinal)

    diagonal_threshold = threshold.x + threshold.y
    diagonal = _find_clashes(bitmap, _DIAGONAL, (diagonal_threshold,) * 4)
    _equalize(bitmap, diagonal)

    return len(cardinal) + len(diagonal)
