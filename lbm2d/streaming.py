"""
Streaming Step

Propagation of distribution functions along lattice links.

Every cell gathers, for each direction k, the value its neighbor in
direction k holds for that same direction:

    f_streamed[c, k] = f[neighbor(c, k), k]

Neighbors come from the grid's periodic neighbor table, so the result is
a per-direction permutation of the input and total mass is conserved
exactly. Each cell writes only its own row of the output, so cells are
processed in parallel without synchronization.
"""

from numba import njit, prange


@njit(parallel=True, cache=True)
def stream_pull_numba(f, f_out, neighbors):
    """
    Numba-accelerated pull streaming.

    Parameters
    ----------
    f : ndarray
        Input distribution functions, shape (ncells, Q). Read only.
    f_out : ndarray
        Output distribution functions, shape (ncells, Q)
    neighbors : ndarray
        Neighbor table, shape (ncells, Q)
    """
    ncells, q = f.shape

    for c in prange(ncells):
        for k in range(q):
            f_out[c, k] = f[neighbors[c, k], k]

