"""
Legacy VTK Output

Writes one ASCII legacy VTK file per snapshot. Every cell becomes a
unit-square VTK_PIXEL centred on its grid coordinates, with four points
of its own; scalar fields are written as CELL_DATA.
"""

import os

from .base import OutputSink

# VTK cell type of an axis-aligned quadrilateral
VTK_PIXEL = 8

VTK_TYPES = {"double": "double", "float": "float", "int": "int"}


class VtkWriter(OutputSink):
    """
    Legacy VTK unstructured-grid writer.

    Parameters
    ----------
    directory : str
        Output directory, created on first snapshot
    prefix : str
        File name prefix; files are named ``<prefix>_<iteration>.vtk``
    """

    def __init__(self, directory=".", prefix="lbm_output"):
        self.directory = directory
        self.prefix = prefix
        self.path = None
        self._grid = None
        self._lines = None
        self._cell_data = False

    def begin_snapshot(self, grid, iteration):
        self._grid = grid
        self.path = os.path.join(self.directory, f"{self.prefix}_{iteration}.vtk")
        self._cell_data = False

        n = grid.size()
        lines = [
            "# vtk DataFile Version 2.0",
            "LBM output",
            "ASCII",
            "DATASET UNSTRUCTURED_GRID",
            f"POINTS {4 * n} float",
        ]
        for c in grid.ids():
            for xp, yp in grid.cell_vertices(c):
                lines.append(f"{xp} {yp} 0.0")

        lines.append(f"CELLS {n} {5 * n}")
        for c in grid.ids():
            lines.append(f"4 {4 * c} {4 * c + 1} {4 * c + 2} {4 * c + 3}")

        lines.append(f"CELL_TYPES {n}")
        lines.extend([str(VTK_PIXEL)] * n)

        self._lines = lines

    def write_scalar(self, name, values, dtype="double"):
        """
        Append a scalar cell field.

        Parameters
        ----------
        name : str
            Field name
        values : callable
            Maps cell id -> value
        dtype : str
            "double", "float" or "int"
        """
        if self._lines is None:
            raise RuntimeError("write_scalar called outside of a snapshot")
        if dtype not in VTK_TYPES:
            raise ValueError(f"unsupported VTK scalar type {dtype!r}")

        if not self._cell_data:
            self._lines.append(f"CELL_DATA {self._grid.size()}")
            self._cell_data = True

        convert = int if dtype == "int" else float
        self._lines.append(f"SCALARS {name} {VTK_TYPES[dtype]}")
        self._lines.append("LOOKUP_TABLE default")
        self._lines.extend(repr(convert(values(c))) for c in self._grid.ids())

    def finish_snapshot(self):
        lines, self._lines = self._lines, None
        os.makedirs(self.directory, exist_ok=True)
        with open(self.path, "w") as fh:
            fh.write("\n".join(lines))
            fh.write("\n")
