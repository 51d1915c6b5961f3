"""
Boundary Condition Handlers

Boundary conditions are (kind, geometry) pairs kept in an ordered list:
- Bounce-back (no-slip walls and obstacles)
- Inflow (periodic forced inflow shifting mass from the west-going to
  the east-going populations)

Periodic boundaries are the base topology of the grid and need no
condition.

The conditions matching a cell are composed in list order. A running
result R starts out absent:
- BounceBack replaces R with the reflected streamed populations,
  R[i] = f_streamed[i*], discarding anything computed before.
- Inflow(rho, a) seeds R from the current (post-collision) populations
  if R is absent, then for each pair (W, E), (NW, SE), (SW, NE) moves
  t = rho * a * w_source from source to target when R[source] - t > 0.
  Pairs failing that test are left as they are.
A later BounceBack therefore discards an earlier Inflow, while a later
Inflow refines whatever R holds. Cells matching no condition keep their
post-collision populations.
"""

from enum import IntEnum

import numpy as np
from numba import njit, prange
from .lattice import W, OPPOSITE, INFLOW_PAIRS


class BoundaryKind(IntEnum):
    BOUNCE_BACK = 0
    INFLOW = 1


_BOUNCE_BACK = int(BoundaryKind.BOUNCE_BACK)


class BoundaryType:
    """
    Kind of a boundary condition plus its parameters.

    Use ``BoundaryType.bounce_back()`` or
    ``BoundaryType.inflow(density, acceleration)``.
    """

    def __init__(self, kind, density=0.0, acceleration=0.0):
        self.kind = BoundaryKind(kind)
        self.density = float(density)
        self.acceleration = float(acceleration)

    @classmethod
    def bounce_back(cls):
        return cls(BoundaryKind.BOUNCE_BACK)

    @classmethod
    def inflow(cls, density, acceleration):
        return cls(BoundaryKind.INFLOW, density, acceleration)

    @property
    def is_solid(self):
        return self.kind == BoundaryKind.BOUNCE_BACK

    def __eq__(self, other):
        if not isinstance(other, BoundaryType):
            return NotImplemented
        return ((self.kind, self.density, self.acceleration)
                == (other.kind, other.density, other.acceleration))

    def __hash__(self):
        return hash((self.kind, self.density, self.acceleration))

    def __repr__(self):
        if self.is_solid:
            return "BoundaryType.bounce_back()"
        return f"BoundaryType.inflow({self.density}, {self.acceleration})"


class Condition:
    """A boundary `condition` (BoundaryType) applied on the cells inside `geometry`."""

    def __init__(self, condition, geometry):
        self.condition = condition
        self.geometry = geometry

    def contains(self, coord):
        return self.geometry.contains(coord)

    def __repr__(self):
        return f"Condition({self.condition!r}, {self.geometry!r})"


def _shift_inflow(r, density, acceleration):
    for source, target in INFLOW_PAIRS:
        t = density * acceleration * W[source]
        if r[source] - t > 0.0:
            r[target] += t
            r[source] -= t


class BoundaryHandler:
    """
    Ordered list of boundary conditions.

    Parameters
    ----------
    conditions : iterable of Condition, optional
        Initial conditions, in application order
    """

    def __init__(self, conditions=()):
        self._conditions = list(conditions)

    def push(self, condition):
        """Append `condition`; it is applied after all existing ones."""
        self._conditions.append(condition)

    def __len__(self):
        return len(self._conditions)

    def __iter__(self):
        return iter(self._conditions)

    def __getitem__(self, i):
        return self._conditions[i]

    def solid_boundary(self, coord):
        """Whether any bounce-back condition contains `coord`."""
        for bc in self._conditions:
            if bc.contains(coord) and bc.condition.is_solid:
                return True
        return False

    def index_of(self, coord):
        """Index of the first condition containing `coord`, or None."""
        for i, bc in enumerate(self._conditions):
            if bc.contains(coord):
                return i
        return None

    def apply(self, current, streamed, coord):
        """
        Compose the conditions matching one cell.

        Parameters
        ----------
        current : array_like
            Post-collision populations of the cell, shape (Q,)
        streamed : array_like
            Post-streaming populations of the cell, shape (Q,)
        coord : tuple of int
            Cell coordinates (x, y)

        Returns
        -------
        r : ndarray or None
            Replacement populations, or None if no condition matched
        """
        r = None

        for bc in self._conditions:
            if not bc.contains(coord):
                continue
            if bc.condition.is_solid:
                r = np.asarray(streamed, dtype=np.float64)[OPPOSITE].copy()
            else:
                if r is None:
                    r = np.array(current, dtype=np.float64)
                _shift_inflow(r, bc.condition.density, bc.condition.acceleration)

        return r

    def compile(self, grid):
        """
        Evaluate every condition over `grid`.

        Geometries are evaluated here once, so an unusable geometry
        fails before any time step runs.

        Returns
        -------
        table : BoundaryTable
        """
        xs, ys = grid.coordinates()
        n_bc = len(self._conditions)

        masks = np.zeros((n_bc, grid.size()), dtype=np.bool_)
        kinds = np.zeros(n_bc, dtype=np.int64)
        params = np.zeros((n_bc, 2), dtype=np.float64)

        for b, bc in enumerate(self._conditions):
            masks[b] = bc.geometry.mask(xs, ys)
            kinds[b] = bc.condition.kind
            params[b] = bc.condition.density, bc.condition.acceleration

        return BoundaryTable(masks, kinds, params)


@njit(parallel=True, cache=True)
def apply_boundaries_numba(f, f_streamed, masks, kinds, params, opposite, w,
                           inflow_pairs):
    """
    Numba-accelerated boundary composition over all cells.

    Parameters
    ----------
    f : ndarray
        Post-collision distribution, shape (ncells, Q). Rows of cells
        matched by at least one condition are overwritten.
    f_streamed : ndarray
        Post-streaming distribution, shape (ncells, Q). Read only.
    masks : ndarray
        Boolean condition masks, shape (n_bc, ncells)
    kinds : ndarray
        BoundaryKind of every condition, shape (n_bc,)
    params : ndarray
        (density, acceleration) of every condition, shape (n_bc, 2)
    opposite : ndarray
        Opposite direction indices
    w : ndarray
        Lattice weights
    inflow_pairs : ndarray
        (source, target) direction pairs of the inflow shift, shape (3, 2)
    """
    n_bc = masks.shape[0]
    ncells, q = f.shape

    for c in prange(ncells):
        r = np.empty(q)
        matched = False

        for b in range(n_bc):
            if not masks[b, c]:
                continue

            if kinds[b] == _BOUNCE_BACK:
                for k in range(q):
                    r[k] = f_streamed[c, opposite[k]]
            else:
                if not matched:
                    for k in range(q):
                        r[k] = f[c, k]
                for p in range(inflow_pairs.shape[0]):
                    source = inflow_pairs[p, 0]
                    target = inflow_pairs[p, 1]
                    t = params[b, 0] * params[b, 1] * w[source]
                    if r[source] - t > 0.0:
                        r[target] += t
                        r[source] -= t
            matched = True

        if matched:
            for k in range(q):
                f[c, k] = r[k]


class BoundaryTable:
    """
    Boundary conditions evaluated over a grid.

    Read-only once built; shared by all workers of the boundary phase.

    Attributes
    ----------
    solid : ndarray
        True for cells inside any bounce-back condition, shape (ncells,)
    index : ndarray
        Index of the first condition containing each cell, -1 for none
    """

    def __init__(self, masks, kinds, params):
        self.masks = masks
        self.kinds = kinds
        self.params = params

        self.solid = np.any(masks[kinds == _BOUNCE_BACK], axis=0)

        # later conditions first, so the first match wins
        self.index = np.full(masks.shape[1], -1, dtype=np.int64)
        for b in range(len(kinds) - 1, -1, -1):
            self.index[masks[b]] = b

    def apply_field(self, f, f_streamed):
        """Apply the conditions to every cell of `f` in place."""
        if len(self.kinds) == 0:
            return
        apply_boundaries_numba(f, f_streamed, self.masks, self.kinds, self.params,
                               OPPOSITE, W, INFLOW_PAIRS)
