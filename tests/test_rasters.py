"""Tests for resolutions and the box and scanline rasterizers."""

import math

import numpy as np
import pytest

from mesh_evolve.core import Point, Triangle
from mesh_evolve.mesh import AxisResolution, GridImage, Resolution
from mesh_evolve.mesh.rasters import as_resolution

from meshes import block_aligned_image, solid_image


def strictly_inside(tri: Triangle, point: Point) -> bool:
    """Inside the triangle and on none of its edges."""
    if not tri.contains(point):
        return False
    first, second, third = tri.vertices
    return all(
        not Triangle(a, b, point).is_degenerate()
        for a, b in ((first, second), (second, third), (first, third))
    )


def block_triangles(image: GridImage, block: int):
    """Mesh triangles in block units, with their colours."""
    for first, second, third, colour in image.triangles():
        yield Triangle(
            first.scale_down((block, block)),
            second.scale_down((block, block)),
            third.scale_down((block, block)),
        ), colour


def distance_to_edges(points: np.ndarray, image: GridImage) -> np.ndarray:
    """Distance from each canvas point to the nearest mesh triangle edge."""
    edges = set()
    for first, second, third, _ in image.triangles():
        for a, b in ((first, second), (second, third), (first, third)):
            edges.add((a, b) if a <= b else (b, a))
    starts = np.array([a for a, _ in edges], dtype=float)
    ends = np.array([b for _, b in edges], dtype=float)

    direction = ends - starts
    length2 = np.maximum((direction ** 2).sum(axis=1), 1e-12)
    rel = points[:, None, :] - starts[None, :, :]
    t = np.clip((rel * direction[None]).sum(axis=2) / length2, 0.0, 1.0)
    closest = starts[None] + t[..., None] * direction[None]
    return np.linalg.norm(points[:, None, :] - closest, axis=2).min(axis=1)


class TestAxisResolution:
    """Tests for AxisResolution."""

    def test_seventeen_levels(self):
        """Test the resolutions span 1 to 65536 blocks."""
        assert len(AxisResolution) == 17
        assert AxisResolution.BLOCKS_1.pixel_count == 1
        assert AxisResolution.BLOCKS_65536.pixel_count == 65536

    def test_pixel_size(self):
        """Test pixel size times pixel count covers the canvas."""
        for axis in AxisResolution:
            assert axis.pixel_size * axis.pixel_count == 65536
            assert axis.pixel_size == 1 << axis.shift

    def test_from_shift(self):
        """Test shifts select the pixel size."""
        assert AxisResolution.from_shift(8) == AxisResolution.BLOCKS_256
        assert AxisResolution.from_shift(0) == AxisResolution.BLOCKS_65536
        assert AxisResolution.from_shift(16) == AxisResolution.BLOCKS_1

    def test_invalid_shift(self):
        """Test shifts outside 0..16 are rejected."""
        with pytest.raises(ValueError):
            AxisResolution.from_shift(17)
        with pytest.raises(ValueError):
            AxisResolution.from_shift(-1)

    def test_from_pixel_count(self):
        """Test power-of-two pixel counts only."""
        assert AxisResolution.from_pixel_count(64) == AxisResolution.BLOCKS_64
        with pytest.raises(ValueError):
            AxisResolution.from_pixel_count(100)
        with pytest.raises(ValueError):
            AxisResolution.from_pixel_count(0)


class TestResolution:
    """Tests for Resolution."""

    def test_from_shifts(self):
        """Test per-axis shifts."""
        resolution = Resolution.from_shifts(8, 10)
        assert resolution.pixel_size == (256, 1024)
        assert resolution.pixel_count == (256, 64)

    def test_square(self):
        """Test square resolutions by block count."""
        assert Resolution.square(32).pixel_count == (32, 32)

    def test_as_resolution(self):
        """Test shift pairs are accepted wherever a resolution is."""
        assert as_resolution((12, 12)) == Resolution.square(16)
        resolution = Resolution.square(8)
        assert as_resolution(resolution) is resolution


class TestTriangles:
    """Tests for GridImage.triangles."""

    def test_count_and_colours(self, rng):
        """Test two triangles per cell carrying that cell's colours."""
        image = GridImage.uniform(4, 3, rng)
        triangles = list(image.triangles())

        assert len(triangles) == 2 * 3 * 2
        first_upper, first_lower = triangles[0][3], triangles[1][3]
        np.testing.assert_array_equal(first_upper, image.colours[0, 0, 0])
        np.testing.assert_array_equal(first_lower, image.colours[0, 0, 1])

    def test_orientation_of_uniform_mesh(self, rng):
        """Test no triangle of a fresh mesh is degenerate."""
        image = GridImage.uniform(5, 5, rng)
        for first, second, third, _ in image.triangles():
            assert Triangle(first, second, third).signed_area2() > 0


class TestBoxRaster:
    """Tests for GridImage.rasterize_box."""

    def test_covers_uniform_mesh(self, rng):
        """Test every pixel of a uniform mesh is drawn."""
        image = GridImage.uniform(4, 4, rng)
        pixels = {point for point, _ in image.rasterize_box((10, 10))}

        assert pixels == {Point(x, y) for x in range(64) for y in range(64)}

    def test_output_in_range(self, rng):
        """Test box output stays on the pixel grid for any offset."""
        image = GridImage.uniform(6, 6, rng)
        for _ in range(300):
            image.mutate_structure(image.random_inner_vertex(rng), rng=rng)

        for offset in [(0, 0), (1000, 17), (4095, 4095)]:
            for point, _ in image.rasterize_box((12, 12), offset):
                assert 0 <= point.x < 16
                assert 0 <= point.y < 16

    def test_offset_shifts_pixels(self):
        """Test a one-block offset moves the image one pixel left."""
        image = block_aligned_image()
        plain = {point for point, _ in image.rasterize_box((8, 8))}
        shifted = {point for point, _ in image.rasterize_box((8, 8), (256, 0))}

        assert shifted == {Point(p.x - 1, p.y) for p in plain if p.x >= 1}

    def test_degenerate_triangle_skipped(self):
        """Test a collinear upper triangle draws nothing."""
        positions = np.array([
            [[0, 0], [32768, 32768]],
            [[0, 65535], [65535, 65535]],
        ])
        colours = np.zeros((2, 2, 2, 3))
        colours[0, 0, 0] = (255, 0, 0)
        colours[0, 0, 1] = (0, 0, 255)
        image = GridImage(positions, colours)

        colours_drawn = {colour for _, colour in image.rasterize_box((12, 12))}
        assert colours_drawn == {(0, 0, 255)}

        colours_drawn = {colour for _, colour in image.rasterize_scanline((12, 12))}
        assert colours_drawn == {(0, 0, 255)}


class TestScanlineRaster:
    """Tests for GridImage.rasterize_scanline."""

    def test_output_in_range(self, rng):
        """Test scanline output stays on the pixel grid for any offset."""
        image = GridImage.uniform(6, 6, rng)
        for _ in range(300):
            image.mutate_structure(image.random_inner_vertex(rng), rng=rng)

        for resolution in [(12, 12), (10, 13)]:
            count_x, count_y = as_resolution(resolution).pixel_count
            size_x, size_y = as_resolution(resolution).pixel_size
            for offset in [(0, 0), (size_x - 1, size_y - 1), (size_x // 2, 3)]:
                for point, _ in image.rasterize_scanline(resolution, offset):
                    assert 0 <= point.x < count_x
                    assert 0 <= point.y < count_y

    def test_non_square_resolution(self, rng):
        """Test rows are divided by the vertical block size."""
        image = GridImage.uniform(3, 3, rng)
        points = [point for point, _ in image.rasterize_scanline((10, 13))]

        assert max(p.x for p in points) == 63
        assert max(p.y for p in points) == 7

    def test_agrees_with_box_inside_triangles(self):
        """Test both rasterizers colour interior pixels identically."""
        image = block_aligned_image()

        box = dict(image.rasterize_box((8, 8)))
        scan = dict(image.rasterize_scanline((8, 8)))

        checked = 0
        for tri, colour in block_triangles(image, 256):
            low, high = tri.bounding_box()
            for x in range(low.x, high.x + 1):
                for y in range(low.y, high.y + 1):
                    point = Point(x, y)
                    if strictly_inside(tri, point):
                        assert box[point] == colour
                        assert scan[point] == colour
                        checked += 1

        assert checked > 40000

    def test_uniform_colour_image(self):
        """Test a single-colour mesh rasterizes to that colour only."""
        image = solid_image(5, 5, (12, 34, 56))
        colours = {colour for _, colour in image.rasterize_scanline((9, 9))}
        assert colours == {(12, 34, 56)}

    def test_agrees_with_box_away_from_edges(self, rng):
        """Test on a deformed mesh the two rasterizers differ only next to triangle edges."""
        image = GridImage.uniform(6, 6, rng)
        for _ in range(500):
            image.mutate_structure(image.random_inner_vertex(rng), rng=rng)

        block = 256
        box = dict(image.rasterize_box((8, 8)))
        scan = dict(image.rasterize_scanline((8, 8)))
        both = box.keys() & scan.keys()
        disagree = [point for point in both if box[point] != scan[point]]

        assert len(both) > 60000
        assert len(disagree) < len(both) // 10

        # Box fill snaps vertices down by under a block per axis, scanline
        # floors edge positions by under one canvas unit
        samples = np.array(disagree, dtype=float).reshape(-1, 2) * block
        assert (distance_to_edges(samples, image) <= math.sqrt(2) * block + 1).all()
