"""
Navier-Stokes Physics

Couples the D2Q9 distribution set with a collision operator and the
inflow parameters of a run, and derives the macroscopic quantities:

    rho = sum_i(f_i)
    u   = sum_i(f_i * e_i) / rho
    p   = rho * c_s^2
"""

import numpy as np
from .lattice import EX, EY, D2Q9
from .observables import compute_density, compute_macroscopic, compute_pressure


class NavierStokes:
    """
    Physics of a single-phase, weakly compressible flow.

    Parameters
    ----------
    collision : object
        Collision operator providing ``collide(f)`` and
        ``collide_field(f_in, f_out, skip)``
    inflow_density : float
        Density of the forced inflow; also reported as the density of
        solid cells
    inflow_accel : float
        Acceleration of the forced inflow
    """

    distribution = D2Q9

    def __init__(self, collision, inflow_density, inflow_accel):
        self.collision = collision
        self.inflow_density = float(inflow_density)
        self.inflow_accel = float(inflow_accel)

    @staticmethod
    def density(f):
        """Density of one cell."""
        return float(np.sum(f))

    @staticmethod
    def velocity(f):
        """Velocity (ux, uy) of one cell."""
        rho = np.sum(f)
        return float(np.dot(EX, f) / rho), float(np.dot(EY, f) / rho)

    @classmethod
    def pressure(cls, f):
        """Pressure of one cell."""
        return cls.density(f) * cls.distribution.c_squ()

    def collide(self, f_streamed, f, skip):
        """Collide every non-skipped cell of `f_streamed` into `f`."""
        self.collision.collide_field(f_streamed, f, skip)

    @staticmethod
    def integral(f):
        """Domain integral of the density."""
        return float(np.sum(compute_density(f)))

    def write(self, sink, f, solid):
        """
        Write the pressure and velocity fields to an output sink.

        Solid cells report the inflow pressure and zero velocity.

        Parameters
        ----------
        sink : OutputSink
            Sink with an open snapshot
        f : ndarray
            Distribution functions, shape (ncells, Q)
        solid : ndarray
            Solid cell mask, shape (ncells,)
        """
        with np.errstate(divide="ignore", invalid="ignore"):
            rho, ux, uy = compute_macroscopic(f)

        p = np.where(solid, self.inflow_density * self.distribution.c_squ(),
                     compute_pressure(rho, self.distribution.c_squ()))
        u = np.where(solid, 0.0, ux)
        v = np.where(solid, 0.0, uy)

        sink.write_scalar("p", lambda c: p[c], "double")
        sink.write_scalar("u", lambda c: u[c], "double")
        sink.write_scalar("v", lambda c: v[c], "double")

    def __repr__(self):
        return (f"NavierStokes({self.collision!r}, inflow_density={self.inflow_density}, "
                f"inflow_accel={self.inflow_accel})")
