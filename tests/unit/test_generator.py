"""Unit tests for distance selectors and generators."""

import math

import pytest

from msdfbake.core.coloring import color_edges
from msdfbake.core.generator import (
    edge_neighbourhoods,
    generate_msdf,
    generate_msdf_simple,
    generate_sdf,
)
from msdfbake.core.projection import Projection, frame_glyph, output_row
from msdfbake.core.selectors import (
    MultiDistance,
    PerpendicularDistanceSelector,
    perpendicular_distance,
)
from msdfbake.domain import Contour, EdgeColor, LinearSegment, Shape, SignedDistance, Vector2
from msdfbake.exceptions import EdgeColorError

UNIT = Projection(Vector2(1.0, 1.0), Vector2(0.0, 0.0))


def polygon(*points: tuple[float, float]) -> Contour:
    """Closed contour of straight edges through the given points."""
    contour = Contour()
    for i, (x, y) in enumerate(points):
        nx, ny = points[(i + 1) % len(points)]
        contour.add_edge(LinearSegment(Vector2(x, y), Vector2(nx, ny)))
    return contour


def colored_square(x0: float, y0: float, x1: float, y1: float) -> Shape:
    """Clockwise (positively wound) rectangle, colored."""
    shape = Shape()
    shape.add_contour(polygon((x0, y0), (x0, y1), (x1, y1), (x1, y0)))
    color_edges(shape)
    return shape


class TestProjection:
    """Tests for the texel projection."""

    def test_texel_center(self):
        """Test texel centers map through scale and translate."""
        projection = Projection(Vector2(2.0, 4.0), Vector2(1.0, -1.0))
        p = projection.project(1, 1)
        assert p.x == pytest.approx(1.5 / 2.0 - 1.0)
        assert p.y == pytest.approx(1.5 / 4.0 + 1.0)

    def test_unproject_inverts_project(self):
        """Test unproject returns continuous texel coordinates."""
        projection = Projection(Vector2(2.0, 2.0), Vector2(3.0, 0.5))
        texel = projection.unproject(projection.project(4, 7))
        assert texel.x == pytest.approx(4.5)
        assert texel.y == pytest.approx(7.5)

    def test_output_row(self):
        """Test rows are flipped only for Y-up shapes."""
        assert output_row(0, 10, False) == 0
        assert output_row(0, 10, True) == 9
        assert output_row(9, 10, True) == 0

    def test_frame_glyph_padding(self):
        """Test a glyph frame pads each side by the pixel range."""
        frame = frame_glyph((0.0, 0.0, 512.0, 1024.0), 32, 1024, 1.5)
        assert frame.width == 16 + 4
        assert frame.height == 32 + 4
        assert frame.range == pytest.approx(48.0)
        origin = frame.projection.unproject(Vector2(0.0, 0.0))
        assert origin.x == pytest.approx(2.0)
        assert origin.y == pytest.approx(2.0)

    def test_frame_empty_bounds(self):
        """Test empty bounds still produce a padded bitmap."""
        frame = frame_glyph((math.inf, math.inf, -math.inf, -math.inf), 32, 1000, 2.0)
        assert frame.width == 4
        assert frame.height == 4


class TestSelectors:
    """Tests for distance selectors."""

    def test_perpendicular_distance_beyond_endpoint(self):
        """Test the perpendicular distance is offered only beyond the endpoint."""
        direction = Vector2(1.0, 0.0)
        assert perpendicular_distance(5.0, Vector2(2.0, 1.0), direction) == pytest.approx(-1.0)
        assert perpendicular_distance(5.0, Vector2(-2.0, 1.0), direction) is None
        assert perpendicular_distance(0.5, Vector2(2.0, 1.0), direction) is None

    def test_selector_keeps_closest_true_distance(self):
        """Test the closest true distance and its edge are tracked."""
        near = LinearSegment(Vector2(0, 0), Vector2(0, 1))
        far = LinearSegment(Vector2(5, 0), Vector2(5, 1))
        selector = PerpendicularDistanceSelector()
        selector.add_edge_true_distance(far, SignedDistance(-4.0, 0.0), 0.5)
        selector.add_edge_true_distance(near, SignedDistance(1.0, 0.0), 0.5)
        assert selector.near_edge is near
        assert selector.distance(Vector2(1.0, 0.5)) == pytest.approx(1.0)

    def test_merge(self):
        """Test merging keeps the closer state of each selector."""
        a = PerpendicularDistanceSelector()
        b = PerpendicularDistanceSelector()
        edge = LinearSegment(Vector2(0, 0), Vector2(0, 1))
        b.add_edge_true_distance(edge, SignedDistance(2.0, 0.0), 0.5)
        b.add_edge_perpendicular_distance(1.5)
        a.merge(b)
        assert a.near_edge is edge
        assert a.min_positive_perpendicular_distance == 1.5

    def test_multi_distance_median(self):
        """Test the median of a channel triple."""
        assert MultiDistance(0.1, -0.3, 0.7).median() == pytest.approx(0.1)
        assert MultiDistance(1.0, 2.0, 3.0).as_tuple() == (1.0, 2.0, 3.0)

    def test_edge_neighbourhoods_wrap(self):
        """Test every edge is visited once with its cyclic neighbours."""
        contour = polygon((0, 0), (0, 1), (1, 1), (1, 0))
        edges = contour.edges
        triples = list(edge_neighbourhoods(edges))
        assert len(triples) == 4
        for prev_edge, edge, next_edge in triples:
            i = edges.index(edge)
            assert prev_edge is edges[(i - 1) % 4]
            assert next_edge is edges[(i + 1) % 4]


class TestGenerators:
    """Tests for the distance field generators."""

    def test_square_center_decodes_to_half_side(self):
        """Test the center of an 11-unit square stores 5.5 units."""
        shape = colored_square(0, 0, 11, 11)
        range_ = 10.0
        for bitmap in (
            generate_msdf(shape, UNIT, range_, 11, 11),
            generate_msdf_simple(shape, UNIT, range_, 11, 11),
        ):
            value = bitmap.median(5, 5)
            assert (value - 0.5) * 2 * range_ == pytest.approx(5.5, abs=1e-9)

    def test_all_channels_straight_inside(self):
        """Test interior texels far from corners carry equal channels."""
        shape = colored_square(0, 0, 11, 11)
        r, g, b = generate_msdf(shape, UNIT, 10.0, 11, 11).get(5, 5)
        assert r == pytest.approx(g)
        assert g == pytest.approx(b)

    def test_simple_and_combiner_agree_on_sign(self):
        """Test both generators classify every texel like the fill."""
        shape = colored_square(2, 2, 8, 8)
        combined = generate_msdf(shape, UNIT, 2.0, 10, 10)
        simple = generate_msdf_simple(shape, UNIT, 2.0, 10, 10)
        for y in range(10):
            for x in range(10):
                inside = 2 < x + 0.5 < 8 and 2 < y + 0.5 < 8
                assert (combined.median(x, y) > 0.5) == inside
                assert (simple.median(x, y) > 0.5) == inside

    def test_corner_sharper_than_sdf(self):
        """Test the multi-channel median keeps the corner, the SDF rounds it."""
        shape = colored_square(2, 2, 8, 8)
        msdf = generate_msdf(shape, UNIT, 2.0, 10, 10)
        sdf = generate_sdf(shape, UNIT, 2.0, 10, 10)
        # Texel (1, 1) sits diagonally outside the corner at (2, 2)
        assert msdf.median(1, 1) == pytest.approx(0.5 - 0.5 / 4.0)
        assert sdf.median(1, 1) == pytest.approx(0.5 - math.sqrt(0.5) / 4.0)
        assert msdf.median(1, 1) > sdf.median(1, 1)

    def test_sdf_single_channel_clamped(self):
        """Test the SDF has one channel clamped to [0, 1]."""
        shape = colored_square(2, 2, 8, 8)
        sdf = generate_sdf(shape, UNIT, 0.5, 10, 10)
        assert sdf.channels == 1
        assert sdf.get(0, 0) == (0.0,)
        assert sdf.get(5, 5) == (1.0,)

    def test_inverse_y_axis_rows(self):
        """Test Y-up shapes are written bottom-up."""
        shape = colored_square(0, 0, 2, 1)
        top_down = generate_msdf_simple(shape, UNIT, 1.0, 2, 2)
        assert top_down.median(0, 0) == pytest.approx(0.75)
        assert top_down.median(0, 1) == pytest.approx(0.25)

        shape.inverse_y_axis = True
        bottom_up = generate_msdf_simple(shape, UNIT, 1.0, 2, 2)
        assert bottom_up.median(0, 1) == pytest.approx(0.75)
        assert bottom_up.median(0, 0) == pytest.approx(0.25)

    def test_uncolored_edge_rejected(self):
        """Test an edge without channels cannot be generated."""
        shape = colored_square(0, 0, 4, 4)
        shape.contours[0].edges[1].color = EdgeColor.BLACK
        with pytest.raises(EdgeColorError) as exc_info:
            generate_msdf(shape, UNIT, 1.0, 4, 4)
        assert exc_info.value.contour_index == 0
        assert exc_info.value.edge_index == 1
        with pytest.raises(EdgeColorError):
            generate_msdf_simple(shape, UNIT, 1.0, 4, 4)

    def test_combiner_handles_overlap(self):
        """Test overlapping contours keep a positive field across the overlap."""
        shape = Shape()
        shape.add_contour(polygon((1, 1), (1, 7), (6, 7), (6, 1)))
        shape.add_contour(polygon((4, 1), (4, 7), (9, 7), (9, 1)))
        color_edges(shape)
        bitmap = generate_msdf(shape, UNIT, 2.0, 10, 8)
        for x in range(1, 9):
            assert bitmap.median(x, 4) > 0.5

