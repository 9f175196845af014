"""Scanline sign correction.

Generators decide inside/outside from nearest-edge geometry, which goes wrong
where contours overlap or disagree on orientation. This pass re-derives the
fill of every texel from the non-zero winding rule along its row and flips
texels whose sign disagrees.
"""

from msdfbake.core.orientation import scanline_crossings
from msdfbake.core.projection import Projection, output_row
from msdfbake.domain import MsdfBitmap, Shape

_ZERO = 0.5

_MATCHED = 1
_FLIPPED = -1
_AMBIGUOUS = 0


def _winding_runs(shape: Shape, y: float) -> list[tuple[float, int]]:
    """Crossings of row y with the cumulative winding right after each."""
    runs: list[tuple[float, int]] = []
    total = 0
    for x, direction, _ in scanline_crossings(shape, y):
        total += direction
        runs.append((x, total))
    return runs


def is_filled(runs: list[tuple[float, int]], x: float) -> bool:
    """Non-zero winding at x, given the cumulative runs of its row."""
    winding = 0
    for crossing_x, total in reversed(runs):
        if crossing_x <= x:
            winding = total
            break
    return winding != 0


def _flip(bitmap: MsdfBitmap, x: int, row: int) -> None:
    bitmap.set(x, row, [1.0 - v for v in bitmap.get(x, row)])


def distance_sign_correction(
    bitmap: MsdfBitmap,
    shape: Shape,
    projection: Projection,
) -> int:
    """Flip texels whose sign contradicts the shape's fill.

    Texels lying exactly on the edge (median 0.5) are left for a second pass
    that flips them when their four neighbours were mostly flipped.

    Args:
        bitmap: Normalized bitmap, corrected in place
        shape: Shape the bitmap was generated from
        projection: Projection the bitmap was generated with

    Returns:
        Number of flipped texels
    """
    width, height = bitmap.width, bitmap.height
    if width == 0 or height == 0:
        return 0

    match_map = [_AMBIGUOUS] * (width * height)
    ambiguous = False
    flipped = 0

    for y in range(height):
        row = output_row(y, height, shape.inverse_y_axis)
        runs = _winding_runs(shape, projection.project_y(y))
        for x in range(width):
            fill = is_filled(runs, projection.project_x(x))
            sd = bitmap.median(x, row)
            index = y * width + x
            if sd == _ZERO:
                ambiguous = True
            elif (sd > _ZERO) != fill:
                _flip(bitmap, x, row)
                match_map[index] = _FLIPPED
                flipped += 1
            else:
                match_map[index] = _MATCHED

    if not ambiguous:
        return flipped

    for y in range(height):
        row = output_row(y, height, shape.inverse_y_axis)
        for x in range(width):
            index = y * width + x
            if match_map[index] != _AMBIGUOUS:
                continue
            neighbour_match = 0
            if x > 0:
                neighbour_match += match_map[index - 1]
            if x < width - 1:
                neighbour_match += match_map[index + 1]
            if y > 0:
                neighbour_match += match_map[index - width]
            if y < height - 1:
                neighbour_match += match_map[index + width]
            if neighbour_match < 0:
                _flip(bitmap, x, row)
                flipped += 1

    return flipped
