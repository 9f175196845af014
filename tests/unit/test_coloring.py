"""Unit tests for edge coloring and contour orientation."""

import math

from msdfbake.core.coloring import color_contour, color_edges, find_corners, switch_color
from msdfbake.core.orientation import orient_contours, scanline_crossings
from msdfbake.domain import (
    Contour,
    CubicSegment,
    EdgeColor,
    LinearSegment,
    QuadraticSegment,
    Shape,
    Vector2,
)

CROSS_THRESHOLD = math.sin(3.0)


def polygon(*points: tuple[float, float]) -> Contour:
    """Closed contour of straight edges through the given points."""
    contour = Contour()
    for i, (x, y) in enumerate(points):
        nx, ny = points[(i + 1) % len(points)]
        contour.add_edge(LinearSegment(Vector2(x, y), Vector2(nx, ny)))
    return contour


def smooth_diamond() -> Contour:
    """Closed contour of four tangent-continuous quadratics."""
    points = [(1, 0), (0, 1), (-1, 0), (0, -1)]
    controls = [(1, 1), (-1, 1), (-1, -1), (1, -1)]
    contour = Contour()
    for i, (x, y) in enumerate(points):
        nx, ny = points[(i + 1) % 4]
        cx, cy = controls[i]
        contour.add_edge(QuadraticSegment(Vector2(x, y), Vector2(cx, cy), Vector2(nx, ny)))
    return contour


def channel_count(color: EdgeColor) -> int:
    return bin(int(color)).count("1")


class TestSwitchColor:
    """Tests for switch_color."""

    def test_start_color_from_seed(self):
        """Test white picks one of the two-channel colors by seed."""
        assert switch_color(EdgeColor.WHITE, 0) == (EdgeColor.CYAN, 0)
        assert switch_color(EdgeColor.WHITE, 1) == (EdgeColor.MAGENTA, 0)
        assert switch_color(EdgeColor.WHITE, 2) == (EdgeColor.YELLOW, 0)
        assert switch_color(EdgeColor.WHITE, 5) == (EdgeColor.YELLOW, 1)

    def test_rotation(self):
        """Test two-channel colors rotate according to the seed bit."""
        assert switch_color(EdgeColor.CYAN, 0) == (EdgeColor.MAGENTA, 0)
        assert switch_color(EdgeColor.CYAN, 1) == (EdgeColor.YELLOW, 0)

    def test_banned_single_channel(self):
        """Test a banned color sharing one channel forces the complement."""
        color, seed = switch_color(EdgeColor.CYAN, 7, EdgeColor.YELLOW)
        assert color == EdgeColor.MAGENTA
        assert seed == 7


class TestColorEdges:
    """Tests for contour coloring."""

    def test_square_corners(self):
        """Test a square gets four colors alternating around its corners."""
        contour = polygon((0, 0), (0, 1), (1, 1), (1, 0))
        assert find_corners(contour, CROSS_THRESHOLD) == [0, 1, 2, 3]

        color_contour(contour, CROSS_THRESHOLD, seed=0)
        colors = [edge.color for edge in contour.edges]
        assert colors == [EdgeColor.CYAN, EdgeColor.MAGENTA, EdgeColor.YELLOW, EdgeColor.MAGENTA]

    def test_corners_share_one_channel(self):
        """Test edges meeting at a corner share at most one channel for any seed."""
        for seed in range(16):
            shape = Shape()
            shape.add_contour(polygon((0, 0), (0, 4), (2, 6), (4, 4), (4, 0)))
            shape.add_contour(polygon((0, 0), (1, 3), (3, 0)))
            color_edges(shape, 3.0, seed)
            for contour in shape.contours:
                for index in find_corners(contour, CROSS_THRESHOLD):
                    shared = contour.prev_edge(index).color & contour.edges[index].color
                    assert channel_count(shared) <= 1

    def test_smooth_contour_single_color(self):
        """Test a contour without corners is colored uniformly."""
        contour = smooth_diamond()
        assert find_corners(contour, CROSS_THRESHOLD) == []
        color_contour(contour, CROSS_THRESHOLD, seed=0)
        assert {edge.color for edge in contour.edges} == {EdgeColor.CYAN}

    def test_teardrop_single_edge(self):
        """Test a one-corner single-edge contour is split into three colored parts."""
        p = Vector2(0.0, 0.0)
        contour = Contour([CubicSegment(p, Vector2(-1, 2), Vector2(1, 2), p)])
        assert find_corners(contour, CROSS_THRESHOLD) == [0]

        color_contour(contour, CROSS_THRESHOLD, seed=0)
        assert len(contour.edges) == 3
        assert [edge.color for edge in contour.edges] == [
            EdgeColor.CYAN,
            EdgeColor.WHITE,
            EdgeColor.MAGENTA,
        ]
        assert contour.is_closed()

    def test_teardrop_three_edges(self):
        """Test a normalized teardrop keeps its edges and colors around the corner."""
        shape = Shape()
        p = Vector2(0.0, 0.0)
        shape.add_contour(Contour([CubicSegment(p, Vector2(-1, 2), Vector2(1, 2), p)]))
        shape.normalize()
        color_edges(shape)
        colors = [edge.color for edge in shape.contours[0].edges]
        assert colors == [EdgeColor.CYAN, EdgeColor.WHITE, EdgeColor.MAGENTA]

    def test_deterministic(self):
        """Test the same seed yields the same coloring and final seed."""
        results = []
        for _ in range(2):
            shape = Shape()
            shape.add_contour(polygon((0, 0), (0, 4), (2, 6), (4, 4), (4, 0)))
            final_seed = color_edges(shape, 3.0, 12345)
            results.append(([e.color for e in shape.contours[0].edges], final_seed))
        assert results[0] == results[1]

    def test_no_black_edges(self):
        """Test every edge receives at least one channel."""
        shape = Shape()
        shape.add_contour(polygon((0, 0), (0, 4), (2, 6), (4, 4), (4, 0)))
        shape.add_contour(smooth_diamond())
        color_edges(shape, 3.0, 3)
        assert all(
            edge.color != EdgeColor.BLACK for contour in shape.contours for edge in contour.edges
        )


class TestOrientation:
    """Tests for scanline orientation."""

    def _ring(self) -> Shape:
        shape = Shape()
        shape.add_contour(polygon((0, 0), (0, 10), (10, 10), (10, 0)))
        shape.add_contour(polygon((3, 3), (3, 7), (7, 7), (7, 3)))
        return shape

    def test_scanline_crossings_sorted(self):
        """Test crossings come back sorted by x with their direction."""
        crossings = scanline_crossings(self._ring(), 5.0)
        assert [(x, d) for x, d, _ in crossings] == [(0, 1), (3, 1), (7, -1), (10, -1)]
        assert [c for _, _, c in crossings] == [0, 1, 1, 0]

    def test_reverses_hole_with_outer_winding(self):
        """Test a hole wound like its outer contour is reversed."""
        shape = self._ring()
        assert orient_contours(shape) == [1]
        assert shape.contours[0].winding() == 1
        assert shape.contours[1].winding() == -1

    def test_reverses_everything_inside_out(self):
        """Test a fully inverted shape has every contour reversed."""
        shape = Shape()
        outer = polygon((0, 0), (0, 10), (10, 10), (10, 0))
        outer.reverse()
        hole = polygon((3, 3), (7, 3), (7, 7), (3, 7))
        hole.reverse()
        shape.add_contour(outer)
        shape.add_contour(hole)
        assert orient_contours(shape) == [0, 1]
        assert shape.contours[0].winding() == 1
        assert shape.contours[1].winding() == -1

    def test_correct_shape_untouched(self):
        """Test a consistently oriented shape is left alone."""
        shape = Shape()
        shape.add_contour(polygon((0, 0), (0, 10), (10, 10), (10, 0)))
        shape.add_contour(polygon((3, 3), (7, 3), (7, 7), (3, 7)))
        assert orient_contours(shape) == []
