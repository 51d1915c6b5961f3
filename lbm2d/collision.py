"""
Collision Operators

BGK and TRT collision models for LBM.

The collision step models molecular interactions and drives the distribution
toward equilibrium. The relaxation frequency omega = 1/tau controls the
viscosity:

    nu = c_s^2 * (tau - 0.5) * dt

where c_s^2 = 1/3 for D2Q9 and dt = 1 in lattice units.

Operators take the streamed distribution of a cell and return a
distribution of the same shape. The solver only relies on
``collide_field(f_in, f_out, skip)``, so any operator with that method
can be plugged into the physics without touching streaming or
boundary handling. Relaxation parameters are not range-checked here.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, W, CS2, OPPOSITE
from .equilibrium import equilibrium_into, equilibrium_single_site


def _moments(f):
    rho = np.sum(f)
    ux = np.dot(EX, f) / rho
    uy = np.dot(EY, f) / rho
    return rho, ux, uy


@njit(parallel=True, cache=True, error_model="numpy")
def srt_collision_numba(f_in, f_out, skip, omega, ex, ey, w, cs2):
    """
    Numba-accelerated BGK collision over all cells.

    Parameters
    ----------
    f_in : ndarray
        Streamed distribution functions, shape (ncells, Q)
    f_out : ndarray
        Output post-collision distribution, shape (ncells, Q)
    skip : ndarray
        Boolean mask, shape (ncells,); rows of `f_out` where set are
        left untouched
    omega : float
        Relaxation frequency (1/tau)
    ex, ey : ndarray
        Lattice velocity components (float64)
    w : ndarray
        Lattice weights
    cs2 : float
        Sound speed squared
    """
    ncells, q = f_in.shape

    for c in prange(ncells):
        if skip[c]:
            continue

        rho = 0.0
        rho_ux = 0.0
        rho_uy = 0.0
        for k in range(q):
            f_k = f_in[c, k]
            rho += f_k
            rho_ux += ex[k] * f_k
            rho_uy += ey[k] * f_k

        f_eq = np.empty(q)
        equilibrium_into(rho, rho_ux / rho, rho_uy / rho, f_eq, ex, ey, w, cs2)

        for k in range(q):
            f_out[c, k] = f_in[c, k] + omega * (f_eq[k] - f_in[c, k])


@njit(parallel=True, cache=True, error_model="numpy")
def trt_collision_numba(f_in, f_out, skip, omega_plus, omega_minus, opposite,
                        ex, ey, w, cs2):
    """
    Numba-accelerated TRT collision over all cells.

    Parameters
    ----------
    f_in : ndarray
        Streamed distribution functions, shape (ncells, Q)
    f_out : ndarray
        Output post-collision distribution, shape (ncells, Q)
    skip : ndarray
        Boolean mask of rows to leave untouched, shape (ncells,)
    omega_plus : float
        Relaxation frequency for symmetric part
    omega_minus : float
        Relaxation frequency for antisymmetric part
    opposite : ndarray
        Opposite direction indices
    """
    ncells, q = f_in.shape

    for c in prange(ncells):
        if skip[c]:
            continue

        rho = 0.0
        rho_ux = 0.0
        rho_uy = 0.0
        for k in range(q):
            f_k = f_in[c, k]
            rho += f_k
            rho_ux += ex[k] * f_k
            rho_uy += ey[k] * f_k

        f_eq = np.empty(q)
        equilibrium_into(rho, rho_ux / rho, rho_uy / rho, f_eq, ex, ey, w, cs2)

        for k in range(q):
            k_opp = opposite[k]

            # Symmetric and antisymmetric non-equilibrium parts
            f_neq_plus = 0.5 * (f_in[c, k] + f_in[c, k_opp]) - 0.5 * (f_eq[k] + f_eq[k_opp])
            f_neq_minus = 0.5 * (f_in[c, k] - f_in[c, k_opp]) - 0.5 * (f_eq[k] - f_eq[k_opp])

            f_out[c, k] = f_in[c, k] - omega_plus * f_neq_plus - omega_minus * f_neq_minus


class SingleRelaxationTime:
    """
    BGK (Bhatnagar-Gross-Krook) single-relaxation-time collision.

    f_out = f + omega * (f_eq - f)

    Parameters
    ----------
    omega : float
        Relaxation frequency, nominally in (0, 2)
    """

    def __init__(self, omega):
        self.omega = float(omega)

    def collide(self, f):
        """
        Collide the distribution of a single cell.

        Parameters
        ----------
        f : array_like
            Streamed distribution, shape (Q,)

        Returns
        -------
        f_out : ndarray
            Post-collision distribution, shape (Q,)
        """
        f = np.asarray(f, dtype=np.float64)
        f_eq = equilibrium_single_site(*_moments(f))
        return f + self.omega * (f_eq - f)

    def collide_field(self, f_in, f_out, skip):
        """Collide every cell of `f_in` whose `skip` flag is unset into `f_out`."""
        srt_collision_numba(f_in, f_out, skip, self.omega,
                            EX.astype(np.float64), EY.astype(np.float64), W, CS2)

    def __repr__(self):
        return f"SingleRelaxationTime(omega={self.omega})"


class TwoRelaxationTime:
    """
    TRT (Two-Relaxation-Time) collision operator.

    Separates the distribution into symmetric and antisymmetric parts:
        f^+ = 0.5 * (f_i + f_i*)     (symmetric)
        f^- = 0.5 * (f_i - f_i*)     (antisymmetric)

    Each part relaxes with its own rate:
        f_out = f - omega_+ (f^+ - f_eq^+) - omega_- (f^- - f_eq^-)

    The "magic parameter" Lambda = (tau_+ - 0.5)(tau_- - 0.5) fixes
    omega_- when it is not given. Lambda = 1/4 is optimal for many
    boundary conditions.

    Parameters
    ----------
    omega_plus : float
        Relaxation frequency for symmetric part (controls viscosity)
    omega_minus : float, optional
        Relaxation frequency for antisymmetric part
    magic_param : float
        Magic parameter Lambda (default 0.25)
    """

    def __init__(self, omega_plus, omega_minus=None, magic_param=0.25):
        self.omega_plus = float(omega_plus)
        if omega_minus is None:
            tau_plus = 1.0 / self.omega_plus
            tau_minus = magic_param / (tau_plus - 0.5) + 0.5
            omega_minus = 1.0 / tau_minus
        self.omega_minus = float(omega_minus)

    def collide(self, f):
        """Collide the distribution of a single cell, shape (Q,)."""
        f = np.asarray(f, dtype=np.float64)
        f_eq = equilibrium_single_site(*_moments(f))
        f_opp = f[OPPOSITE]
        f_eq_opp = f_eq[OPPOSITE]

        f_neq_plus = 0.5 * (f + f_opp) - 0.5 * (f_eq + f_eq_opp)
        f_neq_minus = 0.5 * (f - f_opp) - 0.5 * (f_eq - f_eq_opp)

        return f - self.omega_plus * f_neq_plus - self.omega_minus * f_neq_minus

    def collide_field(self, f_in, f_out, skip):
        trt_collision_numba(f_in, f_out, skip, self.omega_plus, self.omega_minus,
                            OPPOSITE, EX.astype(np.float64), EY.astype(np.float64),
                            W, CS2)

    def __repr__(self):
        return (f"TwoRelaxationTime(omega_plus={self.omega_plus}, "
                f"omega_minus={self.omega_minus})")
