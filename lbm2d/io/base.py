"""
Output sink interface.

A sink receives snapshots of the solver state at the configured output
interval:

    sink.begin_snapshot(grid, iteration)
    sink.write_scalar(name, values, dtype)   # repeatable
    sink.finish_snapshot()

`values` is a callable mapping a cell id to the field value of that cell.
Cell geometry comes from the grid (``grid.coord`` / ``grid.cell_vertices``).
"""


class OutputSink:
    """Interface of solver output sinks."""

    def begin_snapshot(self, grid, iteration):
        raise NotImplementedError

    def write_scalar(self, name, values, dtype="double"):
        raise NotImplementedError

    def finish_snapshot(self):
        raise NotImplementedError
