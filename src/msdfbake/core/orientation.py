"""Contour orientation by scanline voting.

Reverses contours whose winding disagrees with the fill they represent, so
that a plain nearest-edge distance search yields the right sign everywhere.
Only meant for the simple generator: the overlapping contour combiner reads
inner/outer roles from the natural windings and must see them untouched.
"""

import math
from dataclasses import dataclass

from msdfbake.domain import Contour, Shape
from msdfbake.domain.vector import mix_scalar

# Irrational ratio, so the sampled scanline is unlikely to hit a vertex
_SCANLINE_RATIO = 0.5 * (math.sqrt(5) - 1)


@dataclass(frozen=True, slots=True)
class _Crossing:
    x: float
    direction: int
    contour_index: int


def _scanline_height(contour: Contour) -> float:
    """Pick a height strictly crossing the contour."""
    y0 = contour.edges[0].point(0).y
    y1 = y0
    for edge in contour.edges:
        if y0 != y1:
            break
        y1 = edge.point(1).y
    # All endpoints on one horizontal line: try interior points of the curves
    for edge in contour.edges:
        if y0 != y1:
            break
        y1 = edge.point(_SCANLINE_RATIO).y
    return mix_scalar(y0, y1, _SCANLINE_RATIO)


def scanline_crossings(shape: Shape, y: float) -> list[tuple[float, int, int]]:
    """All edge crossings of the horizontal line at y, sorted by x.

    Returns:
        List of (x, direction, contour_index)
    """
    crossings: list[tuple[float, int, int]] = []
    for contour_index, contour in enumerate(shape.contours):
        for edge in contour.edges:
            for x, dy in edge.scanline_intersections(y):
                crossings.append((x, dy, contour_index))
    crossings.sort(key=lambda c: c[0])
    return crossings


def orient_contours(shape: Shape) -> list[int]:
    """Reverse contours whose winding contradicts their fill role.

    For every contour not yet voted on, a scanline crossing it is cast
    through the whole shape. Walking the sorted crossings left to right,
    an even-indexed crossing should go up and an odd-indexed one down;
    each crossing votes for or against its contour's current orientation.
    Crossings sharing the same x are ambiguous and do not vote.

    Args:
        shape: Shape whose contours are reversed in place

    Returns:
        Indices of the contours that were reversed
    """
    orientations = [0] * len(shape.contours)

    for index, contour in enumerate(shape.contours):
        if orientations[index] or not contour.edges:
            continue

        y = _scanline_height(contour)
        crossings = [_Crossing(x, dy, ci) for x, dy, ci in scanline_crossings(shape, y)]
        if not crossings:
            continue

        directions = [c.direction for c in crossings]
        for j in range(1, len(crossings)):
            if crossings[j].x == crossings[j - 1].x:
                directions[j] = directions[j - 1] = 0

        for j, crossing in enumerate(crossings):
            if directions[j]:
                upward = directions[j] > 0
                orientations[crossing.contour_index] += 2 * ((j & 1) ^ upward) - 1

    reversed_indices = [i for i, orientation in enumerate(orientations) if orientation < 0]
    for i in reversed_indices:
        shape.contours[i].reverse()
    return reversed_indices
