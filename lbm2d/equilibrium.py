"""
Equilibrium Distribution Functions

Maxwell-Boltzmann equilibrium for D2Q9 lattice.

The equilibrium distribution is derived from the Maxwell-Boltzmann distribution
truncated to second order in velocity. For the D2Q9 lattice:

    f_i^eq = w_i * rho * [1 + (e_i · u)/c_s^2 + (e_i · u)^2/(2*c_s^4) - u^2/(2*c_s^2)]

where:
    - w_i are the lattice weights
    - e_i are the lattice velocities
    - c_s^2 = 1/3 is the lattice sound speed squared
    - rho is the density
    - u = (ux, uy) is the macroscopic velocity

For the rest direction e_0 = 0 the expression reduces to
w_0 * rho * (1 - u^2/(2*c_s^2)), which is computed directly.
"""

import numpy as np
from numba import njit
from .lattice import EX, EY, W, CS2, CS4, Q, D2Q9


@njit(cache=True)
def equilibrium_into(rho, ux, uy, f_eq, ex, ey, w, cs2):
    """
    Write the equilibrium of one site into `f_eq`.

    Called from the parallel collision kernels, once per cell.

    Parameters
    ----------
    rho, ux, uy : float
        Density and velocity at the site
    f_eq : ndarray
        Output, shape (Q,)
    ex, ey : ndarray
        Lattice velocity components (float64)
    w : ndarray
        Lattice weights
    cs2 : float
        Sound speed squared
    """
    u_sq = ux * ux + uy * uy
    f2 = u_sq / (2.0 * cs2)
    f0 = 2.0 * cs2 * cs2

    f_eq[0] = w[0] * rho * (1.0 - f2)
    for k in range(1, f_eq.shape[0]):
        eu = ex[k] * ux + ey[k] * uy
        f_eq[k] = w[k] * rho * (1.0 + eu / cs2 + (eu * eu) / f0 - f2)


def equilibrium_single_site(rho, ux, uy):
    """
    Compute equilibrium distribution for a single lattice site.

    Useful for boundary conditions, initialization and testing.

    Parameters
    ----------
    rho : float
        Density at the site
    ux : float
        X-velocity at the site
    uy : float
        Y-velocity at the site

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q,)
    """
    f_eq = np.zeros(Q, dtype=np.float64)
    u_sq = ux * ux + uy * uy
    f2 = u_sq / (2.0 * CS2)

    center = D2Q9.center()
    f_eq[center] = W[center] * rho * (1.0 - f2)

    for n in (*D2Q9.direct(), *D2Q9.diagonal()):
        eu = EX[n] * ux + EY[n] * uy
        f_eq[n] = W[n] * rho * (
            1.0
            + eu / CS2
            + (eu * eu) / (2.0 * CS4)
            - f2
        )

    return f_eq

