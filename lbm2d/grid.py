"""
Structured Rectangular Grid

Two-dimensional grid with periodic neighbor addressing.

Cells are numbered row by row: the cell at coordinates (x, y) has the
linear id ``x + width * y``. Neighbor lookup wraps around independently
in x (mod width) and y (mod height), so the base topology is a torus;
walls and inflows are imposed on top of it by boundary conditions.
"""

import numpy as np

from .lattice import EX, EY, Q


class StructuredGrid:
    """
    Immutable two-dimensional rectangular grid.

    Parameters
    ----------
    width : int
        Number of cells in x-direction
    height : int
        Number of cells in y-direction
    """

    def __init__(self, width, height):
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        self._width = int(width)
        self._height = int(height)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def shape(self):
        """Array shape (height, width) of a per-cell field laid out as an image."""
        return self._height, self._width

    def size(self):
        return self._width * self._height

    def ids(self):
        """All cell ids, in storage order."""
        return range(self.size())

    def chunks(self, n):
        """
        Partition the cell ids into at most `n` contiguous ranges.

        Parameters
        ----------
        n : int
            Requested number of chunks (> 0)

        Returns
        -------
        chunks : list of range
            Non-empty, disjoint ranges covering all ids in order
        """
        if n <= 0:
            raise ValueError(f"number of chunks must be positive, got {n}")
        size = self.size()
        n = min(n, size)
        bounds = np.linspace(0, size, n + 1).astype(np.int64)
        return [range(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]

    def coord(self, idx):
        """Coordinates (x, y) of cell `idx`."""
        return idx % self._width, idx // self._width

    def idx(self, coord):
        """Linear id of the cell at `coord` = (x, y)."""
        x, y = coord
        return x + self._width * y

    def coordinates(self):
        """
        Coordinates of every cell.

        Returns
        -------
        xs, ys : ndarray
            Integer coordinate arrays, shape (size,), in storage order
        """
        ids = np.arange(self.size(), dtype=np.int64)
        return ids % self._width, ids // self._width

    def neighbor(self, idx, direction):
        """
        Neighbor of cell `idx` in lattice `direction`, with periodic wrap.
        """
        x, y = self.coord(idx)
        xn = (x + int(EX[direction])) % self._width
        yn = (y + int(EY[direction])) % self._height
        return self.idx((xn, yn))

    def neighbor_table(self):
        """
        Neighbor ids of every cell in every direction.

        Returns
        -------
        table : ndarray
            int64 array, shape (size, Q); ``table[c, k] == neighbor(c, k)``
        """
        xs, ys = self.coordinates()
        table = np.empty((self.size(), Q), dtype=np.int64)
        for k in range(Q):
            xn = (xs + EX[k]) % self._width
            yn = (ys + EY[k]) % self._height
            table[:, k] = xn + self._width * yn
        return table

    def cell_vertices(self, idx):
        """
        Corner points of the unit cell centred on cell `idx`.

        Order is (-,-), (+,-), (-,+), (+,+), the pixel ordering used by VTK.
        """
        x, y = self.coord(idx)
        return [
            (x - 0.5, y - 0.5),
            (x + 0.5, y - 0.5),
            (x - 0.5, y + 0.5),
            (x + 0.5, y + 0.5),
        ]

    def __eq__(self, other):
        if not isinstance(other, StructuredGrid):
            return NotImplemented
        return (self._width, self._height) == (other._width, other._height)

    def __hash__(self):
        return hash((self._width, self._height))

    def __repr__(self):
        return f"StructuredGrid(width={self._width}, height={self._height})"
