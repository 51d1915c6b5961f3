"""
Macroscopic Observable Extraction

Compute density, velocity, and derived quantities from distributions.

In LBM, macroscopic quantities are moments of the distribution function:
    - Density (0th moment): rho = sum_i(f_i)
    - Momentum (1st moment): rho*u = sum_i(f_i * e_i)

All functions take cell-major fields of shape (ncells, Q) and return one
value per cell. There is no guard against zero density: such cells yield
inf or nan velocities.
"""

import numpy as np
from .lattice import EX, EY, CS2


def compute_density(f):
    """
    Compute density field from distribution functions.

    rho = sum_i(f_i)

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (ncells, Q)

    Returns
    -------
    rho : ndarray
        Density field, shape (ncells,)
    """
    return np.sum(f, axis=-1)


def compute_velocity(f, rho=None):
    """
    Compute velocity field from distribution functions.

    rho * u = sum_i(f_i * e_i)

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (ncells, Q)
    rho : ndarray, optional
        Density field, shape (ncells,). If None, computed from f.

    Returns
    -------
    ux : ndarray
        X-velocity field, shape (ncells,)
    uy : ndarray
        Y-velocity field, shape (ncells,)
    """
    if rho is None:
        rho = compute_density(f)

    return (f @ EX) / rho, (f @ EY) / rho


def compute_macroscopic(f):
    """
    Compute all macroscopic quantities from distribution functions.

    Returns
    -------
    rho, ux, uy : ndarray
        Density and velocity fields, shape (ncells,)
    """
    rho = compute_density(f)
    ux, uy = compute_velocity(f, rho)
    return rho, ux, uy


def compute_pressure(rho, cs2=CS2):
    """
    Compute pressure field from density.

    p = rho * c_s^2
    """
    return rho * cs2
