"""
Tests for the plate boundary shapes
"""

import numpy as np
import pytest

from chladni_constants import MIN_ANNULAR_GAP
from plate_shapes import AnnulusShape, PlateShape, PolygonShape, RectangleShape


class TestBoundaryContract:
    """Properties every boundary variant must satisfy"""

    def test_clamped_points_are_contained(self, any_shape, scattered_points):
        cx, cy = any_shape.clamp(scattered_points[:, 0], scattered_points[:, 1])
        assert np.all(any_shape.contains(cx, cy))

    def test_contained_points_are_unchanged(self, any_shape, scattered_points):
        inside = any_shape.contains(scattered_points[:, 0], scattered_points[:, 1])
        assert inside.any()
        px, py = scattered_points[inside, 0], scattered_points[inside, 1]
        cx, cy = any_shape.clamp(px, py)
        np.testing.assert_array_equal(cx, px)
        np.testing.assert_array_equal(cy, py)

    def test_scalar_in_scalar_out(self, any_shape):
        assert isinstance(any_shape.contains(1.0, 1.0), bool)
        x, y = any_shape.clamp(1.0, 1.0)
        assert isinstance(x, float) and isinstance(y, float)
        assert any_shape.contains(x, y)

    def test_random_points_inside(self, any_shape):
        points = any_shape.random_points(2000)
        assert points.shape == (2000, 2)
        assert np.all(any_shape.contains(points[:, 0], points[:, 1]))

    def test_random_point(self, any_shape):
        x, y = any_shape.random_point()
        assert any_shape.contains(x, y)

    def test_outline_loops_are_closed(self, any_shape):
        loops = any_shape.outline()
        assert loops
        for loop in loops:
            assert loop.shape[1] == 2
            np.testing.assert_array_equal(loop[0], loop[-1])

    def test_round_trip_after_resize(self, any_shape, scattered_points):
        params = {
            PlateShape.RECTANGLE: "width_param",
            PlateShape.CIRCLE: "outer_param",
            PlateShape.GUITAR: "scale_param",
        }
        param = getattr(any_shape, params[any_shape.kind])
        param.value = param.minimum
        cx, cy = any_shape.clamp(scattered_points[:, 0], scattered_points[:, 1])
        assert np.all(any_shape.contains(cx, cy))

    def test_listeners_notified_on_parameter_change(self, any_shape):
        seen = []
        any_shape.add_listener(seen.append)
        params = {
            PlateShape.RECTANGLE: "height_param",
            PlateShape.CIRCLE: "outer_param",
            PlateShape.GUITAR: "scale_param",
        }
        getattr(any_shape, params[any_shape.kind]).value = 0.1
        assert seen == [any_shape]
        any_shape.remove_listener(seen.append)


class TestRectangle:
    def test_bounds_and_size(self):
        rect = RectangleShape(0.3, 0.2)
        assert rect.bounds() == pytest.approx((-0.15, -0.1, 0.15, 0.1))
        assert rect.width == pytest.approx(0.3)
        assert rect.height == pytest.approx(0.2)

    def test_edges_are_inside(self):
        rect = RectangleShape(0.3, 0.2)
        assert rect.contains(0.15, -0.1)
        assert not rect.contains(0.15 + 1e-6, 0.0)

    def test_clamp_to_corner(self):
        rect = RectangleShape(0.3, 0.2)
        assert rect.clamp(1.0, -1.0) == pytest.approx((0.15, -0.1))

    def test_reset(self):
        rect = RectangleShape()
        rect.width_param.value = 0.2
        rect.reset()
        assert rect.width == pytest.approx(0.32)


class TestAnnulus:
    def test_disc_contains_centre(self):
        disc = AnnulusShape(0.16, 0.0)
        assert not disc.is_annular
        assert disc.contains(0.0, 0.0)
        assert disc.clamp(0.0, 0.0) == (0.0, 0.0)
        assert len(disc.outline()) == 1

    def test_ring_excludes_hole(self, ring):
        assert ring.is_annular
        assert not ring.contains(0.0, 0.0)
        assert not ring.contains(0.03, 0.0)
        assert ring.contains(0.1, 0.0)
        assert len(ring.outline()) == 2

    def test_ring_centre_goes_to_inner_edge(self, ring):
        x, y = ring.clamp(0.0, 0.0)
        assert (x, y) == pytest.approx((0.05, 0.0))
        assert ring.contains(x, y)

    def test_hole_point_pushed_outward(self, ring):
        x, y = ring.clamp(0.0, -0.01)
        assert x == pytest.approx(0.0)
        assert y == pytest.approx(-0.05)
        assert ring.contains(x, y)

    def test_inner_radius_follows_outer(self):
        ring = AnnulusShape(0.16, 0.12)
        ring.outer_param.value = 0.08
        assert ring.inner_radius <= ring.outer_radius - MIN_ANNULAR_GAP + 1e-12

    def test_inner_radius_capped(self):
        ring = AnnulusShape(0.16, 0.0)
        ring.inner_param.value = 0.17
        assert ring.inner_radius == pytest.approx(0.14)

    @pytest.mark.parametrize("outer", [0.08, 0.1, 0.16, 0.2])
    def test_gap_invariant(self, outer):
        ring = AnnulusShape(0.16, 0.0)
        ring.outer_param.value = outer
        ring.inner_param.value = 1.0
        assert 0.0 <= ring.inner_radius <= ring.outer_radius - MIN_ANNULAR_GAP + 1e-12


class TestPolygon:
    def test_default_guitar_is_symmetric(self, guitar):
        xmin, ymin, xmax, ymax = guitar.bounds()
        assert xmin == pytest.approx(-xmax)
        assert ymin == pytest.approx(-ymax)
        assert guitar.height == pytest.approx(0.32)

    def test_body_size_is_nominal_not_vertex_extent(self, guitar):
        assert guitar.width == pytest.approx(0.24)
        assert guitar.height == pytest.approx(0.32)
        xmin, _, xmax, _ = guitar.bounds()
        assert xmax - xmin < guitar.width
        guitar.scale_param.value = 0.8
        assert guitar.width == pytest.approx(0.24 * 0.8)

    def test_waist_is_narrower_than_bout(self, guitar):
        # lower bout is wider than the waist
        assert guitar.contains(0.06, -0.08)
        assert not guitar.contains(0.06, 0.01)

    def test_scale_resizes_vertices(self, guitar):
        before = guitar.vertices.copy()
        guitar.scale_param.value = 1.2
        np.testing.assert_allclose(guitar.vertices, before * 1.2)

    def test_square_polygon(self):
        square = PolygonShape([(-1, -1), (1, -1), (1, 1), (-1, 1)], base_width=0.2, base_height=0.2)
        assert square.contains(0.0, 0.0)
        assert square.contains(0.09, -0.09)
        assert not square.contains(0.11, 0.0)
        x, y = square.clamp(0.5, 0.0)
        assert x == pytest.approx(0.1)
        assert square.contains(x, y)

    def test_degenerate_polygon_contains_nothing(self):
        line = PolygonShape([(0, 0), (1, 1)])
        assert not line.contains(0.0, 0.0)
        assert not np.any(line.contains(np.zeros(3), np.zeros(3)))
        assert line.clamp(0.5, 0.5) == (0.5, 0.5)

    def test_vertex_shape_validated(self):
        with pytest.raises(ValueError, match="shape"):
            PolygonShape([1.0, 2.0, 3.0])
