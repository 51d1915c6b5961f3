"""
Tests for boundary conditions.

Validates bounce-back reflection, the inflow mass shift and the ordered
composition of overlapping conditions.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm2d.lattice import W, OPPOSITE, Q, Direction, D2Q9
from lbm2d.grid import StructuredGrid
from lbm2d.geometry import Circle, HalfPlane, Rectangle
from lbm2d.boundary import BoundaryHandler, BoundaryType, Condition


LEFT = HalfPlane((1, 0), (0, 0))
BOTTOM = HalfPlane((0, 1), (0, 0))


def random_populations(seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(0.05, 0.15, Q), rng.uniform(0.05, 0.15, Q)


class TestBoundaryType:
    """Test the boundary kinds."""

    def test_bounce_back_is_solid(self):
        assert BoundaryType.bounce_back().is_solid
        assert not BoundaryType.inflow(0.1, 0.015).is_solid

    def test_equality(self):
        assert BoundaryType.inflow(0.1, 0.01) == BoundaryType.inflow(0.1, 0.01)
        assert BoundaryType.inflow(0.1, 0.01) != BoundaryType.inflow(0.1, 0.02)
        assert BoundaryType.bounce_back() != BoundaryType.inflow(0.0, 0.0)


class TestBounceBack:
    """Test single bounce-back conditions."""

    def test_reflection(self):
        current, streamed = random_populations()
        handler = BoundaryHandler([Condition(BoundaryType.bounce_back(), LEFT)])

        r = handler.apply(current, streamed, (0, 3))

        for n in D2Q9.all():
            assert r[n] == streamed[D2Q9.opposite(n)]

    def test_center_unchanged(self):
        current, streamed = random_populations()
        handler = BoundaryHandler([Condition(BoundaryType.bounce_back(), LEFT)])

        r = handler.apply(current, streamed, (0, 0))

        assert r[Direction.C] == streamed[Direction.C]

    def test_does_not_modify_inputs(self):
        current, streamed = random_populations()
        current_copy, streamed_copy = current.copy(), streamed.copy()
        handler = BoundaryHandler([Condition(BoundaryType.bounce_back(), LEFT)])

        handler.apply(current, streamed, (0, 0))

        np.testing.assert_array_equal(current, current_copy)
        np.testing.assert_array_equal(streamed, streamed_copy)


class TestInflow:
    """Test the inflow mass shift."""

    def test_shift(self):
        rho, a = 0.1, 0.015
        current = D2Q9.rest_distribution(rho)
        handler = BoundaryHandler([Condition(BoundaryType.inflow(rho, a), LEFT)])

        r = handler.apply(current, current, (0, 1))

        t_direct = rho * a * W[Direction.W]
        t_diagonal = rho * a * W[Direction.NW]
        np.testing.assert_allclose(r[Direction.W], current[Direction.W] - t_direct)
        np.testing.assert_allclose(r[Direction.E], current[Direction.E] + t_direct)
        np.testing.assert_allclose(r[Direction.NW], current[Direction.NW] - t_diagonal)
        np.testing.assert_allclose(r[Direction.SE], current[Direction.SE] + t_diagonal)
        np.testing.assert_allclose(r[Direction.SW], current[Direction.SW] - t_diagonal)
        np.testing.assert_allclose(r[Direction.NE], current[Direction.NE] + t_diagonal)

        for n in (Direction.C, Direction.N, Direction.S):
            assert r[n] == current[n]

    def test_shift_conserves_mass(self):
        current, streamed = random_populations(3)
        handler = BoundaryHandler([Condition(BoundaryType.inflow(0.1, 0.015), LEFT)])

        r = handler.apply(current, streamed, (0, 0))

        assert np.isclose(np.sum(r), np.sum(current), rtol=1e-14)

    def test_shift_skipped_when_source_too_small(self):
        rho, a = 0.1, 0.9
        current = D2Q9.rest_distribution(0.1)
        current[Direction.W] = 0.005
        handler = BoundaryHandler([Condition(BoundaryType.inflow(rho, a), LEFT)])

        r = handler.apply(current, current, (0, 0))

        # W/E pair fails the test, the diagonal pairs still shift
        assert r[Direction.W] == current[Direction.W]
        assert r[Direction.E] == current[Direction.E]
        np.testing.assert_allclose(r[Direction.NE], current[Direction.NE] + rho * a / 36.0)

    def test_shift_skipped_at_equality(self):
        rho, a = 0.1, 1.0
        current = D2Q9.rest_distribution(rho)
        handler = BoundaryHandler([Condition(BoundaryType.inflow(rho, a), LEFT)])

        r = handler.apply(current, current, (0, 0))

        # t == R[source] leaves nothing behind, so no pair moves
        np.testing.assert_array_equal(r, current)

    def test_seeded_from_current(self):
        current, streamed = random_populations(5)
        handler = BoundaryHandler([Condition(BoundaryType.inflow(0.0, 0.0), LEFT)])

        r = handler.apply(current, streamed, (0, 0))

        np.testing.assert_array_equal(r, current)


class TestComposition:
    """Test ordered composition of matching conditions."""

    def test_no_match(self):
        current, streamed = random_populations()
        handler = BoundaryHandler([Condition(BoundaryType.bounce_back(), LEFT)])

        assert handler.apply(current, streamed, (2, 2)) is None

    def test_inflow_after_bounce_back_refines(self):
        rho, a = 0.1, 0.015
        current, streamed = random_populations(1)
        handler = BoundaryHandler([
            Condition(BoundaryType.bounce_back(), BOTTOM),
            Condition(BoundaryType.inflow(rho, a), LEFT),
        ])

        r = handler.apply(current, streamed, (0, 0))

        expected = streamed[OPPOSITE].copy()
        for source, target in ((Direction.W, Direction.E),
                               (Direction.NW, Direction.SE),
                               (Direction.SW, Direction.NE)):
            t = rho * a * W[source]
            expected[source] -= t
            expected[target] += t
        np.testing.assert_allclose(r, expected)

    def test_bounce_back_after_inflow_clobbers(self):
        current, streamed = random_populations(2)
        handler = BoundaryHandler([
            Condition(BoundaryType.inflow(0.1, 0.015), LEFT),
            Condition(BoundaryType.bounce_back(), BOTTOM),
        ])

        r = handler.apply(current, streamed, (0, 0))

        np.testing.assert_array_equal(r, streamed[OPPOSITE])

    def test_non_overlapping_cells(self):
        current, streamed = random_populations(4)
        handler = BoundaryHandler([
            Condition(BoundaryType.bounce_back(), BOTTOM),
            Condition(BoundaryType.inflow(0.1, 0.015), LEFT),
        ])

        np.testing.assert_array_equal(handler.apply(current, streamed, (3, 0)),
                                      streamed[OPPOSITE])
        assert not np.allclose(handler.apply(current, streamed, (0, 3)), current)

    def test_solid_boundary(self):
        handler = BoundaryHandler([
            Condition(BoundaryType.inflow(0.1, 0.015), LEFT),
            Condition(BoundaryType.bounce_back(), BOTTOM),
        ])

        assert handler.solid_boundary((3, 0))
        assert handler.solid_boundary((0, 0))
        assert not handler.solid_boundary((0, 3))
        assert not handler.solid_boundary((3, 3))

    def test_index_of(self):
        handler = BoundaryHandler([
            Condition(BoundaryType.bounce_back(), BOTTOM),
            Condition(BoundaryType.inflow(0.1, 0.015), LEFT),
        ])

        assert handler.index_of((0, 0)) == 0
        assert handler.index_of((0, 2)) == 1
        assert handler.index_of((2, 2)) is None

    def test_push_appends(self):
        handler = BoundaryHandler()
        first = Condition(BoundaryType.bounce_back(), BOTTOM)
        second = Condition(BoundaryType.inflow(0.1, 0.015), LEFT)

        handler.push(first)
        handler.push(second)

        assert len(handler) == 2
        assert handler[0] is first
        assert list(handler) == [first, second]


class TestBoundaryTable:
    """Test the compiled, parallel form of the conditions."""

    @pytest.fixture
    def handler(self):
        return BoundaryHandler([
            Condition(BoundaryType.bounce_back(), Circle((5.0, 4.0), 2.0)),
            Condition(BoundaryType.bounce_back(), BOTTOM),
            Condition(BoundaryType.bounce_back(), HalfPlane((0, -1), (0, 7))),
            Condition(BoundaryType.inflow(0.1, 0.015), LEFT),
        ])

    def test_matches_per_cell_apply(self, handler):
        grid = StructuredGrid(12, 8)
        rng = np.random.default_rng(42)
        f = rng.uniform(0.01, 0.2, (grid.size(), Q))
        f_streamed = rng.uniform(0.01, 0.2, (grid.size(), Q))

        expected = f.copy()
        for c in grid.ids():
            r = handler.apply(f[c], f_streamed[c], grid.coord(c))
            if r is not None:
                expected[c] = r

        table = handler.compile(grid)
        table.apply_field(f, f_streamed)

        np.testing.assert_allclose(f, expected, rtol=1e-14)

    def test_solid_and_index(self, handler):
        grid = StructuredGrid(12, 8)
        table = handler.compile(grid)

        for c in grid.ids():
            coord = grid.coord(c)
            assert table.solid[c] == handler.solid_boundary(coord)
            index = handler.index_of(coord)
            assert table.index[c] == (-1 if index is None else index)

    def test_empty_handler(self):
        grid = StructuredGrid(4, 3)
        table = BoundaryHandler().compile(grid)
        f = np.ones((grid.size(), Q))

        table.apply_field(f, np.zeros_like(f))

        assert not table.solid.any()
        assert np.all(table.index == -1)
        np.testing.assert_array_equal(f, 1.0)

    def test_rectangle_fails_to_compile(self):
        handler = BoundaryHandler([
            Condition(BoundaryType.bounce_back(), Rectangle((2, 2), (1, 1))),
        ])
        with pytest.raises(NotImplementedError):
            handler.compile(StructuredGrid(4, 4))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
