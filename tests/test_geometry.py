"""
Tests for geometry predicates.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm2d.geometry import Circle, HalfPlane, Rectangle
from lbm2d.grid import StructuredGrid


class TestCircle:
    """Test the disk predicate."""

    def test_center_inside(self):
        assert Circle((5, 5), 2).contains((5, 5))

    def test_boundary_is_outside(self):
        circle = Circle((5, 5), 2)
        assert not circle.contains((7, 5))
        assert not circle.contains((5, 3))

    def test_just_inside(self):
        assert Circle((5, 5), 2.01).contains((7, 5))

    def test_far_outside(self):
        assert not Circle((5, 5), 2).contains((0, 0))

    def test_mask_matches_contains(self):
        grid = StructuredGrid(12, 10)
        circle = Circle((4.5, 5.0), 3.0)
        xs, ys = grid.coordinates()
        mask = circle.mask(xs, ys)
        for c in grid.ids():
            assert mask[c] == circle.contains(grid.coord(c))

    def test_in_channel(self):
        circle = Circle.in_channel(300, 150)
        assert circle.center == (90.0, 75.0)
        assert circle.radius == 18.75


class TestHalfPlane:
    """Test the half-plane predicate."""

    def test_left_column(self):
        left = HalfPlane((1, 0), (0, 0))
        assert left.contains((0, 0))
        assert left.contains((0, 7))
        assert not left.contains((1, 0))

    def test_bottom_row(self):
        bottom = HalfPlane((0, 1), (0, 0))
        assert bottom.contains((5, 0))
        assert not bottom.contains((5, 1))

    def test_top_row(self):
        top = HalfPlane((0, -1), (0, 9))
        assert top.contains((3, 9))
        assert top.contains((3, 10))
        assert not top.contains((3, 8))

    @pytest.mark.parametrize("normal", [(1, 1), (-1, 0), (0, 2)])
    def test_unsupported_normal(self, normal):
        plane = HalfPlane(normal, (2, 2))
        with pytest.raises(NotImplementedError):
            plane.contains((1, 3))
        xs, ys = StructuredGrid(4, 4).coordinates()
        with pytest.raises(NotImplementedError):
            plane.mask(xs, ys)

    def test_zero_normal(self):
        with pytest.raises(ValueError):
            HalfPlane((0, 0), (1, 1))

    def test_mask_on_grid(self):
        grid = StructuredGrid(5, 4)
        xs, ys = grid.coordinates()
        mask = HalfPlane((1, 0), (0, 0)).mask(xs, ys)
        assert np.count_nonzero(mask) == grid.height
        assert np.all(xs[mask] == 0)


class TestRectangle:
    """Rectangle containment is not available."""

    def test_contains_raises(self):
        with pytest.raises(NotImplementedError):
            Rectangle((2, 2), (1, 1)).contains((2, 2))

    def test_mask_raises(self):
        xs, ys = StructuredGrid(3, 3).coordinates()
        with pytest.raises(NotImplementedError):
            Rectangle((1, 1), (2, 2)).mask(xs, ys)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
