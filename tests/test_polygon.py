"""Tests for area-weighted sampling in triangle fans."""

import numpy as np

from mesh_evolve.core import Point, Polygon


def square_fan() -> Polygon:
    """A 1000 x 1000 square as a fan of four triangles around its centre."""
    corners = [Point(0, 0), Point(1000, 0), Point(1000, 1000), Point(0, 1000)]
    edges = [(corners[i], corners[(i + 1) % 4]) for i in range(4)]
    return Polygon(Point(500, 500), edges)


class TestPolygon:
    """Tests for Polygon."""

    def test_areas_are_doubled(self):
        """Test each fan triangle reports twice its area."""
        areas = square_fan().areas()
        assert areas == [500000, 500000, 500000, 500000]

    def test_contains(self):
        """Test containment over the union of the fan."""
        polygon = square_fan()
        assert polygon.contains(Point(10, 990))
        assert polygon.contains(Point(1000, 1000))
        assert not polygon.contains(Point(1001, 500))

    def test_random_point_inside(self, rng):
        """Test sampled points always lie in the polygon."""
        polygon = square_fan()
        for _ in range(2000):
            assert polygon.contains(polygon.random_point(rng))

    def test_random_point_inside_thin_triangle(self, rng):
        """Test snapping keeps samples inside a sliver triangle."""
        polygon = Polygon(Point(0, 0), [(Point(5000, 1), Point(5000, 3))])
        for _ in range(500):
            assert polygon.contains(polygon.random_point(rng))

    def test_weighted_by_area(self, rng):
        """Test a triangle three times larger is chosen three times as often."""
        root = Point(0, 0)
        polygon = Polygon(root, [
            (Point(1000, 0), Point(1000, 1000)),
            (Point(1000, 1000), Point(0, 3000)),
        ])
        assert polygon.areas() == [1000000, 3000000]

        draws = 4000
        in_small = 0
        for _ in range(draws):
            point = polygon.random_point(rng)
            if point.y < point.x:
                in_small += 1

        assert abs(in_small / draws - 0.25) < 0.04

    def test_covers_whole_polygon(self, rng):
        """Test samples reach every quadrant of the fan."""
        polygon = square_fan()
        points = np.array([polygon.random_point(rng) for _ in range(1000)])

        assert (points[:, 0] < 250).any() and (points[:, 0] > 750).any()
        assert (points[:, 1] < 250).any() and (points[:, 1] > 750).any()

    def test_degenerate_fan_returns_root(self, rng):
        """Test a fan without area falls back to the root."""
        root = Point(10, 10)
        polygon = Polygon(root, [(Point(20, 20), Point(30, 30)), (Point(0, 0), Point(10, 10))])
        for _ in range(10):
            assert polygon.random_point(rng) == root

    def test_keeps_orientation_convex(self):
        """Test interior points of a convex fan keep every triangle's winding."""
        polygon = square_fan()
        assert polygon.keeps_orientation(Point(500, 500))
        assert polygon.keeps_orientation(Point(400, 600))
        assert not polygon.keeps_orientation(Point(1000, 1000))

    def test_keeps_orientation_non_convex(self):
        """Test a point inside a non-convex fan can still flip a neighbouring triangle."""
        root = Point(0, 0)
        polygon = Polygon(root, [
            (Point(-10, -10), Point(0, -2)),
            (Point(0, -2), Point(10, -10)),
        ])
        outside_kernel = Point(-4, -5)

        assert polygon.keeps_orientation(root)
        assert polygon.contains(outside_kernel)
        assert not polygon.keeps_orientation(outside_kernel)
