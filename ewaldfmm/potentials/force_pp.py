r"""
Module for handling the real-space (Particle-Particle) part of the Ewald sum.

The short-range kernel between a target :math:`i` and a source :math:`j` is

.. math::
   \phi_{ij} = q_j \frac{{\rm erfc}(\alpha r)}{r},

which decays fast enough to be cut off at :math:`r_c`. Neighbors are found by walking the source tree from its root
under the minimum-image convention and pruning every cell whose sphere is farther than :math:`\sqrt{3} r_c` from the
target leaf.
"""

from math import erfc, exp, sqrt
from numba import jit, prange
from numba.core.types import float64, UniTuple
from numpy import empty, int64, rint, zeros

TWO_OVER_SQRTPI = 1.1283791670955126


@jit(UniTuple(float64, 2)(float64, float64, float64), nopython=True, error_model="numpy")
def ewald_real_kernel(r2, q, alpha):
    r"""
    Numba'd function to calculate the real-space Ewald potential and gradient factor of a source.

    Parameters
    ----------
    r2 : float
        Squared distance between target and source.

    q : float
        Source strength.

    alpha : float
        Ewald splitting parameter.

    Returns
    -------
    u_r : float
        Potential :math:`q \, {\rm erfc}(\alpha r)/r`.

    f_r : float
        Gradient factor. The gradient along each axis is :math:`-dx \, f_r`.

    Examples
    --------
    >>> u_r, f_r = ewald_real_kernel(1.0, 1.0, 1.0)
    >>> round(u_r, 10), round(f_r, 10)
    (0.1572992071, 0.5724067045)

    """
    r2s = r2 * alpha * alpha
    rs = sqrt(r2s)
    inv_rs = 1.0 / rs
    inv_r2s = inv_rs * inv_rs
    inv_r3s = inv_r2s * inv_rs
    erfc_rs = erfc(rs)

    f_r = q * (TWO_OVER_SQRTPI * exp(-r2s) * inv_r2s + erfc_rs * inv_r3s)
    f_r *= alpha * alpha * alpha
    u_r = q * erfc_rs * inv_rs * alpha

    return u_r, f_r


@jit(nopython=True, error_model="numpy")
def wrap(dx, cycle):
    """
    Apply the minimum-image convention in place: subtract the nearest integer multiple of the box length per axis.

    Parameters
    ----------
    dx : numpy.ndarray
        Separation vector. Updated in place.

    cycle : numpy.ndarray
        Periodic box lengths.

    """
    for d in range(3):
        dx[d] -= rint(dx[d] / cycle[d]) * cycle[d]


@jit(nopython=True, error_model="numpy")
def p2p(ci, cj, xperiodic, i_body, i_nbody, i_pos, i_trg, j_body, j_nbody, j_pos, j_src, alpha, cutoff_sq):
    """
    Direct interaction of every body of the target leaf ``ci`` with every body of the source leaf ``cj``.

    Parameters
    ----------
    ci : int
        Target leaf index.

    cj : int
        Source leaf index.

    xperiodic : numpy.ndarray
        Periodic image offset of the source leaf.

    i_body, i_nbody : numpy.ndarray
        First body and number of bodies of the target cells.

    i_pos : numpy.ndarray
        Targets' positions.

    i_trg : numpy.ndarray
        Targets' accumulators. Updated in place.

    j_body, j_nbody : numpy.ndarray
        First body and number of bodies of the source cells.

    j_pos : numpy.ndarray
        Sources' positions.

    j_src : numpy.ndarray
        Sources' strengths.

    alpha : float
        Ewald splitting parameter.

    cutoff_sq : float
        Squared real-space cutoff.

    """
    for bi in range(i_body[ci], i_body[ci] + i_nbody[ci]):
        for bj in range(j_body[cj], j_body[cj] + j_nbody[cj]):
            dx = i_pos[bi, 0] - j_pos[bj, 0] - xperiodic[0]
            dy = i_pos[bi, 1] - j_pos[bj, 1] - xperiodic[1]
            dz = i_pos[bi, 2] - j_pos[bj, 2] - xperiodic[2]
            r2 = dx * dx + dy * dy + dz * dz

            # Exclude self interaction and pairs beyond the cutoff
            if 0.0 < r2 < cutoff_sq:
                u_r, f_r = ewald_real_kernel(r2, j_src[bj], alpha)
                i_trg[bi, 0] += u_r
                i_trg[bi, 1] -= dx * f_r
                i_trg[bi, 2] -= dy * f_r
                i_trg[bi, 3] -= dz * f_r


@jit(nopython=True, error_model="numpy")
def neighbor_walk(
    ci,
    i_center,
    i_radius,
    i_body,
    i_nbody,
    i_pos,
    i_trg,
    j_center,
    j_radius,
    j_body,
    j_nbody,
    j_child,
    j_nchild,
    j_pos,
    j_src,
    cycle,
    alpha,
    cutoff_sq,
    threshold,
):
    """
    Depth-first walk of the source tree, from its root, for the target leaf ``ci``.

    Parameters
    ----------
    ci : int
        Target leaf index.

    i_center, i_radius, i_body, i_nbody : numpy.ndarray
        Target cells' arrays. See :class:`ewaldfmm.cells.Cells`.

    i_pos, i_trg : numpy.ndarray
        Targets' positions and accumulators.

    j_center, j_radius, j_body, j_nbody, j_child, j_nchild : numpy.ndarray
        Source cells' arrays.

    j_pos, j_src : numpy.ndarray
        Sources' positions and strengths.

    cycle : numpy.ndarray
        Periodic box lengths.

    alpha : float
        Ewald splitting parameter.

    cutoff_sq : float
        Squared real-space cutoff.

    threshold : float
        Pruning distance between cell spheres, :math:`\\sqrt{3} r_c`.

    Returns
    -------
    num_p2p : int
        Number of source leaves that were evaluated.

    """
    if j_center.shape[0] == 0:
        return 0

    dx = zeros(3)
    xperiodic = zeros(3)

    # Every cell has a single parent, hence it is pushed at most once
    stack = empty(j_center.shape[0], dtype=int64)
    stack[0] = 0
    top = 1
    num_p2p = 0

    while top > 0:
        top -= 1
        cj = stack[top]

        for d in range(3):
            dx[d] = i_center[ci, d] - j_center[cj, d]
        wrap(dx, cycle)
        for d in range(3):
            xperiodic[d] = i_center[ci, d] - j_center[cj, d] - dx[d]

        r = sqrt(dx[0] * dx[0] + dx[1] * dx[1] + dx[2] * dx[2])
        # Skip the whole subtree of far cells
        if r - i_radius[ci] - j_radius[cj] < threshold:
            if j_nchild[cj] == 0:
                p2p(ci, cj, xperiodic, i_body, i_nbody, i_pos, i_trg, j_body, j_nbody, j_pos, j_src, alpha, cutoff_sq)
                num_p2p += 1
            # Reversed so that children are popped in order
            for cc in range(j_child[cj] + j_nchild[cj] - 1, j_child[cj] - 1, -1):
                stack[top] = cc
                top += 1

    return num_p2p


@jit(nopython=True, parallel=True, error_model="numpy")
def real_part_loop(
    leaves,
    i_center,
    i_radius,
    i_body,
    i_nbody,
    i_pos,
    i_trg,
    j_center,
    j_radius,
    j_body,
    j_nbody,
    j_child,
    j_nchild,
    j_pos,
    j_src,
    cycle,
    alpha,
    cutoff_sq,
    threshold,
):
    """
    Real-space part of the Ewald sum: one neighbor walk per target leaf.

    Leaves own disjoint body ranges, so the walks write disjoint rows of ``i_trg`` and run in parallel.

    Parameters
    ----------
    leaves : numpy.ndarray
        Indices of the target leaves.

    i_center, i_radius, i_body, i_nbody : numpy.ndarray
        Target cells' arrays. See :class:`ewaldfmm.cells.Cells`.

    i_pos, i_trg : numpy.ndarray
        Targets' positions and accumulators.

    j_center, j_radius, j_body, j_nbody, j_child, j_nchild : numpy.ndarray
        Source cells' arrays.

    j_pos, j_src : numpy.ndarray
        Sources' positions and strengths.

    cycle : numpy.ndarray
        Periodic box lengths.

    alpha : float
        Ewald splitting parameter.

    cutoff_sq : float
        Squared real-space cutoff.

    threshold : float
        Pruning distance between cell spheres, :math:`\\sqrt{3} r_c`.

    Returns
    -------
    num_p2p : numpy.ndarray
        Number of source leaves evaluated for each target leaf.

    """
    num_p2p = zeros(leaves.shape[0], dtype=int64)
    for k in prange(leaves.shape[0]):
        num_p2p[k] = neighbor_walk(
            leaves[k],
            i_center,
            i_radius,
            i_body,
            i_nbody,
            i_pos,
            i_trg,
            j_center,
            j_radius,
            j_body,
            j_nbody,
            j_child,
            j_nchild,
            j_pos,
            j_src,
            cycle,
            alpha,
            cutoff_sq,
            threshold,
        )

    return num_p2p
