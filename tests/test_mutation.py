"""Tests for colour mutation and breeding of grid images."""

import numpy as np
import pytest

from mesh_evolve.mesh import GridImage


class TestColourMutation:
    """Tests for GridImage.mutate_colours."""

    def test_rate_zero(self, rng):
        """Test a zero rate leaves every colour unchanged."""
        image = GridImage.uniform(6, 6, rng)
        before = image.colours.copy()
        image.mutate_colours(0.0, rng)
        np.testing.assert_array_equal(image.colours, before)

    def test_rate_one_bounded(self, rng):
        """Test a full rate moves channels by at most 20."""
        image = GridImage.uniform(6, 6, rng)
        before = image.colours.astype(int)
        image.mutate_colours(1.0, rng)
        after = image.colours.astype(int)

        assert np.abs(after - before).max() <= 20
        assert (after != before).any()

    def test_invalid_rate(self, rng):
        """Test rates outside [0, 1] are rejected."""
        image = GridImage.uniform(3, 3, rng)
        with pytest.raises(ValueError):
            image.mutate_colours(1.5, rng)
        with pytest.raises(ValueError):
            image.mutate_colours(-0.1, rng)


class TestBreed:
    """Tests for GridImage.breed."""

    def test_identical_parents_rate_zero(self, rng):
        """Test breeding a mesh with itself at rate 0 reproduces it."""
        parent = GridImage.uniform(5, 5, rng)
        for _ in range(200):
            parent.mutate_structure(parent.random_inner_vertex(rng), rng=rng)

        child = GridImage.breed(parent, parent.copy(), 0.0, rng)

        np.testing.assert_array_equal(child.positions, parent.positions)
        np.testing.assert_array_equal(child.colours, parent.colours)

    def test_parents_unchanged(self, rng):
        """Test breeding never modifies either parent."""
        left = GridImage.uniform(5, 5, rng)
        right = GridImage.uniform(5, 5, rng)
        left_before = (left.positions.copy(), left.colours.copy())
        right_before = (right.positions.copy(), right.colours.copy())

        for _ in range(20):
            GridImage.breed(left, right, 1.0, rng)

        np.testing.assert_array_equal(left.positions, left_before[0])
        np.testing.assert_array_equal(left.colours, left_before[1])
        np.testing.assert_array_equal(right.positions, right_before[0])
        np.testing.assert_array_equal(right.colours, right_before[1])

    def test_shape_from_one_parent(self, rng):
        """Test the child's vertex positions come wholesale from one parent."""
        left = GridImage.uniform(5, 5, rng)
        right = GridImage.uniform(5, 5, rng)
        for _ in range(100):
            right.mutate_structure(right.random_inner_vertex(rng), rng=rng)

        sources = set()
        for _ in range(100):
            child = GridImage.breed(left, right, 0.0, rng)
            if np.array_equal(child.positions, left.positions):
                sources.add("left")
            elif np.array_equal(child.positions, right.positions):
                sources.add("right")
            else:
                pytest.fail("child positions mix both parents")

        assert sources == {"left", "right"}

    def test_colours_from_either_parent(self, rng):
        """Test each triangle colour comes from one of the parents at rate 0."""
        left = GridImage(GridImage.uniform(4, 4, rng).positions, np.zeros((4, 4, 2, 3)))
        right = GridImage(left.positions, np.full((4, 4, 2, 3), 255))

        child = GridImage.breed(left, right, 0.0, rng)
        colours = child.colours

        assert np.isin(colours, [0, 255]).all()
        # Channels of one triangle colour are inherited together
        assert (colours.min(axis=-1) == colours.max(axis=-1)).all()

    def test_two_wide_lattice(self, rng):
        """Test breeding a lattice without inner vertices skips structural moves."""
        left = GridImage.uniform(2, 4, rng)
        right = GridImage.uniform(2, 4, rng)
        child = GridImage.breed(left, right, 1.0, rng)

        np.testing.assert_array_equal(child.positions, left.positions)

    def test_mismatched_parents(self, rng):
        """Test parents must share dimensions."""
        with pytest.raises(ValueError):
            GridImage.breed(GridImage.uniform(3, 3, rng), GridImage.uniform(4, 3, rng), 0.1, rng)

    def test_structural_mutation_rate(self, rng):
        """Test a full rate moves inner vertices of the child."""
        parent = GridImage.uniform(6, 6, rng)
        child = GridImage.breed(parent, parent, 1.0, rng)

        inner = (slice(1, -1), slice(1, -1))
        assert (child.positions[inner] != parent.positions[inner]).any()
        np.testing.assert_array_equal(child.positions[0], parent.positions[0])
        np.testing.assert_array_equal(child.positions[:, -1], parent.positions[:, -1])
