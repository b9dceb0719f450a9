"""Tests for image members and target images."""

import numpy as np
import pytest
from PIL import Image

from mesh_evolve.core import Colour
from mesh_evolve.evolution import BreedMetadata, FitnessMetadata, GAImageMember, TargetImage
from mesh_evolve.mesh import GridImage, Resolution

from meshes import solid_image


def quadrant_target() -> TargetImage:
    pixels = np.array([
        [[255, 0, 0], [0, 255, 0]],
        [[0, 0, 255], [255, 255, 255]],
    ], dtype=np.uint8)
    return TargetImage(pixels)


class TestTargetImage:
    """Tests for TargetImage."""

    def test_lookup(self):
        """Test canvas coordinates map proportionally onto image pixels."""
        target = quadrant_target()

        assert target(0, 0) == Colour(255, 0, 0)
        assert target(32767, 0) == Colour(255, 0, 0)
        assert target(32768, 0) == Colour(0, 255, 0)
        assert target(0, 65535) == Colour(0, 0, 255)
        assert target(65535, 65535) == Colour(255, 255, 255)

    def test_sample_grid_matches_lookup(self):
        """Test the vectorised sampler agrees with single lookups."""
        pixels = np.random.default_rng(3).integers(0, 256, size=(37, 23, 3))
        target = TargetImage(pixels)
        resolution = Resolution.from_shifts(11, 12)
        offset = (700, 1500)

        grid = target.sample_grid(resolution, offset)
        assert grid.shape == (16, 32, 3)

        size_x, size_y = resolution.pixel_size
        for row in (0, 7, 15):
            for column in (0, 13, 31):
                expected = target(column * size_x + offset[0], row * size_y + offset[1])
                assert tuple(grid[row, column]) == expected

    def test_solid(self):
        """Test a single-colour target."""
        target = TargetImage.solid((1, 2, 3))
        assert target(12345, 54321) == (1, 2, 3)

    def test_open(self, tmp_path):
        """Test loading an image from disk."""
        path = tmp_path / "target.png"
        Image.fromarray(quadrant_target().pixels).save(path)

        target = TargetImage.open(path)
        assert (target.width, target.height) == (2, 2)
        assert target(65535, 0) == Colour(0, 255, 0)

    def test_open_downscales(self, tmp_path):
        """Test max_size bounds the loaded image."""
        path = tmp_path / "large.png"
        Image.new("RGB", (400, 200), (9, 9, 9)).save(path)

        target = TargetImage.open(path, max_size=100)
        assert max(target.width, target.height) == 100

    def test_open_missing(self, tmp_path):
        """Test a missing file propagates the loader's error."""
        with pytest.raises(FileNotFoundError):
            TargetImage.open(tmp_path / "missing.png")

    def test_bad_shape(self):
        """Test non-RGB arrays are rejected."""
        with pytest.raises(ValueError):
            TargetImage(np.zeros((4, 4)))
        with pytest.raises(ValueError):
            TargetImage(np.zeros((4, 4, 4)))


class TestMetadata:
    """Tests for fitness and breed metadata."""

    def test_random_offset_within_block(self, rng):
        """Test random offsets stay below one block."""
        resolution = Resolution.from_shifts(10, 8)
        for _ in range(200):
            metadata = FitnessMetadata.random(resolution, rng)
            assert 0 <= metadata.offset[0] < 1024
            assert 0 <= metadata.offset[1] < 256
            assert metadata.resolution == resolution

    def test_breed_rate_validated(self):
        """Test mutation rates outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            BreedMetadata(1.5)


class TestGAImageMember:
    """Tests for GAImageMember."""

    def test_perfect_match_scores_ceiling(self):
        """Test a mesh equal to a solid target has the maximum fitness."""
        member = GAImageMember(solid_image(4, 4, (10, 20, 30)), TargetImage.solid((10, 20, 30)))
        metadata = FitnessMetadata((0, 0), Resolution.square(16))

        assert member.difference(metadata) == 0
        assert member.fitness(metadata) == 3 * 256 * 16 * 16

    def test_fitness_counts_drawn_pixels(self):
        """Test fitness subtracts the difference of every drawn pixel."""
        image = solid_image(4, 4, (0, 0, 0))
        member = GAImageMember(image, TargetImage.solid((255, 255, 255)))
        metadata = FitnessMetadata((100, 200), Resolution.square(32))

        drawn = len(list(image.rasterize_scanline(metadata.resolution, metadata.offset)))
        assert member.fitness(metadata) == 3 * 256 * 32 * 32 - 765 * drawn

    def test_closer_colour_is_fitter(self):
        """Test fitness rises as the mesh colour approaches the target."""
        target = TargetImage.solid((200, 100, 50))
        metadata = FitnessMetadata((0, 0), Resolution.square(16))

        far = GAImageMember(solid_image(3, 3, (0, 0, 0)), target).fitness(metadata)
        near = GAImageMember(solid_image(3, 3, (190, 110, 50)), target).fitness(metadata)
        assert near > far >= 0

    def test_samples_target_at_block_corners(self):
        """Test each pixel is compared with the target at its sample point."""
        calls = []

        def target(x, y):
            calls.append((x, y))
            return (0, 0, 0)

        member = GAImageMember(solid_image(2, 2, (0, 0, 0)), target)
        metadata = FitnessMetadata((5, 9), Resolution.square(4))
        member.fitness(metadata)

        assert calls
        for x, y in calls:
            assert x % 16384 == 5
            assert y % 16384 == 9

    def test_breed(self, rng):
        """Test children keep the dimensions and the left parent's target."""
        target = TargetImage.solid((0, 0, 0))
        other = TargetImage.solid((255, 255, 255))
        left = GAImageMember.uniform(5, 4, target, rng)
        right = GAImageMember.uniform(5, 4, other, rng)

        child = GAImageMember.breed(left, right, BreedMetadata(0.2, rng))

        assert isinstance(child, GAImageMember)
        assert (child.image.width, child.image.height) == (5, 4)
        assert child.get_target_pixel is target
        assert child.image is not left.image

    def test_breed_mismatched(self, rng):
        """Test parents of different sizes cannot breed."""
        target = TargetImage.solid((0, 0, 0))
        left = GAImageMember(GridImage.uniform(3, 3, rng), target)
        right = GAImageMember(GridImage.uniform(4, 4, rng), target)

        with pytest.raises(ValueError):
            GAImageMember.breed(left, right, BreedMetadata(0.1, rng))
