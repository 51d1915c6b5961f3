"""
Lattice-Boltzmann Solver

Drives the time stepping on a structured periodic grid. Every iteration
runs three phases, each a parallel pass over all cells:

1. Streaming:  f_streamed[c, k] = f[neighbor(c, k), k]
2. Collision:  f[c] = collide(f_streamed[c])     for non-solid cells
3. Boundaries: f[c] = compose(f[c], f_streamed[c]) where a condition matches

A phase starts only after the previous one has written every cell. The
two buffers are allocated once and overwritten in place.
"""

import time
import warnings

import numpy as np

from .boundary import BoundaryHandler
from .streaming import stream_pull_numba


class Solver:
    """
    Lattice-Boltzmann solver.

    Parameters
    ----------
    grid : StructuredGrid
        Computational grid
    physics : NavierStokes
        Physics (distribution set + collision operator)
    boundaries : BoundaryHandler, optional
        Ordered boundary conditions. They are evaluated over the grid
        here, and again before the next step whenever conditions have
        been pushed to `bcs` since
    output : OutputSink, optional
        Receives a snapshot at every output iteration
    reporter : callable, optional
        Called with one line of text per diagnostic (default: print)

    Attributes
    ----------
    f : ndarray
        Distribution functions, shape (ncells, Q)
    f_streamed : ndarray
        Post-streaming distribution functions, shape (ncells, Q)
    """

    def __init__(self, grid, physics, boundaries=None, output=None, reporter=print):
        self.grid = grid
        self.physics = physics
        self.bcs = boundaries if boundaries is not None else BoundaryHandler()
        self.output = output
        self.reporter = reporter

        q = physics.distribution.size()
        self.f = np.zeros((grid.size(), q), dtype=np.float64)
        self.f_streamed = np.zeros((grid.size(), q), dtype=np.float64)

        self._neighbors = grid.neighbor_table()
        self._boundary = self.bcs.compile(grid)
        self._compiled = len(self.bcs)

        # Statistics
        self.step_count = 0

    @property
    def solid(self):
        """Mask of cells inside bounce-back conditions, shape (ncells,)."""
        return self.boundary_table().solid

    def solid_boundary(self, c):
        """Is cell `c` part of a solid boundary?"""
        return bool(self.boundary_table().solid[c])

    def boundary_table(self):
        """
        Boundary conditions evaluated over the grid.

        Re-evaluated when conditions were pushed to `bcs` after the last
        evaluation.
        """
        if len(self.bcs) != self._compiled:
            self._boundary = self.bcs.compile(self.grid)
            self._compiled = len(self.bcs)
        return self._boundary

    def initialize(self, initial_distributions):
        """
        Initialize distribution functions.

        Parameters
        ----------
        initial_distributions : callable
            Maps cell coordinates (x, y) to the Q initial populations
        """
        q = self.f.shape[1]
        for c in self.grid.ids():
            fs = np.asarray(initial_distributions(self.grid.coord(c)), dtype=np.float64)
            if fs.shape != (q,):
                raise ValueError(
                    f"initial distribution must have shape ({q},), got {fs.shape}"
                )
            self.f[c] = fs
        self.step_count = 0

    def streaming(self):
        """Streaming step: reads f, writes f_streamed."""
        stream_pull_numba(self.f, self.f_streamed, self._neighbors)

    def collision(self):
        """Collision step: reads f_streamed, writes the non-solid rows of f."""
        self.physics.collide(self.f_streamed, self.f, self.boundary_table().solid)

    def apply_boundary_conditions(self):
        """Boundary step: overwrites the rows of f matched by a condition."""
        self.boundary_table().apply_field(self.f, self.f_streamed)

    def step(self, on_phase=None):
        """
        Perform one timestep (streaming, collision, boundaries).

        Parameters
        ----------
        on_phase : callable, optional
            Called as ``on_phase(name, seconds)`` right after each phase

        Returns
        -------
        durations : dict
            Seconds spent in each phase
        """
        durations = {}
        for name, phase in (("propagation", self.streaming),
                            ("collision", self.collision),
                            ("bcs", self.apply_boundary_conditions)):
            start = time.perf_counter()
            phase()
            durations[name] = time.perf_counter() - start
            if on_phase is not None:
                on_phase(name, durations[name])

        self.step_count += 1
        return durations

    def run(self, num_steps, output_interval=0):
        """
        Run the simulation.

        Iterations are numbered from 0. Iteration ``i`` reports its phases
        and writes output when ``output_interval > 0`` and
        ``i % output_interval == 0``.

        Parameters
        ----------
        num_steps : int
            Number of timesteps to run (> 0)
        output_interval : int
            Steps between diagnostics and output; 0 disables both

        Returns
        -------
        mlups : float
            Performance in Million Lattice Updates Per Second
        """
        if num_steps <= 0:
            raise ValueError(f"num_steps must be positive, got {num_steps}")
        if output_interval < 0:
            raise ValueError(f"output_interval must be >= 0, got {output_interval}")

        run_start = time.perf_counter()

        for iteration in range(num_steps):
            write_output = output_interval > 0 and iteration % output_interval == 0

            start = time.perf_counter()
            self.step(self.substep if write_output else None)

            if write_output:
                if self.output is not None:
                    out_start = time.perf_counter()
                    self.write_output(iteration)
                    self.substep("output", time.perf_counter() - out_start)

                self.report_step(iteration, time.perf_counter() - start)

        total = time.perf_counter() - run_start
        return num_steps * self.grid.size() / max(total, 1e-12) / 1e6

    def integral(self):
        """Integral of the physics' conserved quantity over the domain."""
        return self.physics.integral(self.f)

    def report_step(self, iteration, duration):
        """Report a whole iteration step."""
        self.reporter(
            f"#{iteration} | integral: {self.integral()} | "
            f"duration: {int(duration * 1e3)} ms"
        )

    def substep(self, name, duration):
        """Report an iteration sub-step."""
        self.reporter(
            f"# [{name}] | integral: {self.integral()} | "
            f"duration: {int(duration * 1e6)} μs"
        )

    def write_output(self, iteration):
        """
        Write a snapshot of the solution to the output sink.

        Writes the physics fields and ``boundary_idx``, the index of the
        first boundary condition containing each cell (-1 for none).
        Failures of the sink are reported as warnings and do not stop
        the run.
        """
        if self.output is None:
            return

        table = self.boundary_table()
        index = table.index
        try:
            self.output.begin_snapshot(self.grid, iteration)
            self.physics.write(self.output, self.f, table.solid)
            self.output.write_scalar("boundary_idx", lambda c: index[c], "int")
            self.output.finish_snapshot()
        except OSError as exc:
            warnings.warn(f"output of iteration {iteration} failed: {exc}")
