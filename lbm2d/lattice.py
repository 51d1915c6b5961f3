"""
D2Q9 Lattice Constants and Utilities

Defines the D2Q9 lattice model for 2D fluid simulations.
"""
from enum import IntEnum

import numpy as np

# D2Q9 lattice velocities
#     6   2   5
#       \ | /
#     3 - 0 - 1
#       / | \
#     7   4   8

# Lattice velocity components
EX = np.array([0, 1, 0, -1, 0, 1, -1, -1, 1], dtype=np.int64)
EY = np.array([0, 0, 1, 0, -1, 1, 1, -1, -1], dtype=np.int64)

# Lattice weights
W = np.array([4/9, 1/9, 1/9, 1/9, 1/9, 1/36, 1/36, 1/36, 1/36], dtype=np.float64)

# Opposite direction indices (for bounce-back)
OPPOSITE = np.array([0, 3, 4, 1, 2, 7, 8, 5, 6], dtype=np.int64)

# Lattice sound speed squared
CS2 = 1.0 / 3.0
CS4 = CS2 * CS2

# Number of lattice velocities
Q = 9


class Direction(IntEnum):
    """Discrete lattice velocities, numbered in storage order."""

    C = 0
    E = 1
    N = 2
    W = 3
    S = 4
    NE = 5
    NW = 6
    SW = 7
    SE = 8

    @property
    def vector(self):
        """Integer velocity vector (ex, ey)."""
        return int(EX[self]), int(EY[self])

    @property
    def weight(self):
        return float(W[self])

    @property
    def opposite(self):
        return Direction(int(OPPOSITE[self]))


# (source, target) pairs shifted by the inflow condition
INFLOW_PAIRS = np.array(
    [
        [Direction.W, Direction.E],
        [Direction.NW, Direction.SE],
        [Direction.SW, Direction.NE],
    ],
    dtype=np.int64,
)

_BY_VECTOR = {d.vector: d for d in Direction}


class D2Q9:
    """
    The D2Q9 distribution set.

    Exposes the nine directions, their weights, opposites and velocity
    vectors, plus the axis-only and corner-only subsets used by the
    equilibrium computation. All members are class-level: the set has no
    state and a fixed size of 9 values per cell.
    """

    @staticmethod
    def size():
        return Q

    @staticmethod
    def c_squ():
        """Lattice sound speed squared."""
        return CS2

    @staticmethod
    def all():
        """All directions in canonical order 0..8."""
        return iter(Direction)

    @staticmethod
    def direct():
        """Axis directions E, N, W, S."""
        return (Direction(i) for i in range(1, 5))

    @staticmethod
    def diagonal():
        """Corner directions NE, NW, SW, SE."""
        return (Direction(i) for i in range(5, 9))

    @staticmethod
    def center():
        return Direction.C

    @staticmethod
    def value(n):
        return int(n)

    @staticmethod
    def constant(n):
        """Lattice weight of direction `n`."""
        return float(W[n])

    @staticmethod
    def opposite(n):
        return Direction(int(OPPOSITE[n]))

    @staticmethod
    def direction(n):
        """Velocity vector of direction `n`."""
        return int(EX[n]), int(EY[n])

    @staticmethod
    def from_direction(vector):
        """
        Direction with velocity `vector`, or None.

        Parameters
        ----------
        vector : tuple of int
            Candidate velocity (ex, ey)

        Returns
        -------
        direction : Direction or None
            None if `vector` is not a lattice velocity
        """
        return _BY_VECTOR.get((int(vector[0]), int(vector[1])))

    @staticmethod
    def rest_distribution(rho):
        """Distribution of a fluid at rest with density `rho`."""
        return rho * W.copy()
