"""Module of mathematical functions for choosing and checking Ewald parameters."""

from math import erfc
from numpy import asarray, ceil, exp, log, pi, sqrt
from scipy.optimize import brentq


def optimal_alpha(cutoff: float, tolerance: float) -> float:
    """
    Find the Ewald splitting parameter :math:`\\alpha` for which the real-space kernel has decayed to the
    requested tolerance at the cutoff, i.e. the root of

    .. math::
        {\\rm erfc}(\\alpha r_c) = \\epsilon .

    Parameters
    ----------
    cutoff : float
        Real-space cutoff :math:`r_c`.

    tolerance : float
        Relative accuracy :math:`\\epsilon`, e.g. 1e-6.

    Returns
    -------
    alpha : float
        Ewald splitting parameter.

    Examples
    --------
    >>> from math import erfc
    >>> alpha = optimal_alpha(cutoff=0.75, tolerance=1.0e-6)
    >>> abs(erfc(alpha * 0.75) - 1.0e-6) < 1.0e-12
    True

    """
    # erfc(x) = tol has its root below x = sqrt(-log(tol)) + 1 for tol < 1
    upper = (sqrt(-log(tolerance)) + 1.0) / cutoff
    return brentq(lambda a: erfc(a * cutoff) - tolerance, 0.0, upper)


def wave_cutoff(alpha: float, cycle, tolerance: float) -> int:
    """
    Smallest lattice radius ``ksize`` for which the Gaussian damping of the reciprocal sum has decayed to the tolerance
    along the longest box side

    .. math::
        \\exp \\left [ - \\left ( \\frac{\\pi k_{\\rm size}}{\\alpha L_{\\max}} \\right )^2 \\right ] \\leq \\epsilon .

    Parameters
    ----------
    alpha : float
        Ewald splitting parameter.

    cycle : numpy.ndarray
        Periodic box lengths.

    tolerance : float
        Relative accuracy.

    Returns
    -------
    ksize : int
        Lattice radius of the wave set.

    """
    l_max = asarray(cycle, dtype=float).max()
    return int(ceil(alpha * l_max * sqrt(-log(tolerance)) / pi))


def force_error_analytic_pp(cutoff_length: float, alpha_ewald: float, rescaling_const: float = 1.0):
    """
    Calculate the short-range part of the force error from the approximation formula given in :cite:`Dharuman2017`.

    Parameters
    ----------
    cutoff_length: float
        Short range cutoff.

    alpha_ewald: float
        Ewald screening parameter.

    rescaling_const: float
        Constant by which to rescale the force error. \n
        For a set of charges :math:`\\sqrt{\\sum_i q_i^2 / V}`.

    Returns
    -------
    pp_err: float
        Short range force error in units of `rescaling_const`.

    """
    alpha_times_rcut = -((alpha_ewald * cutoff_length) ** 2)
    pp_err = 2.0 * exp(alpha_times_rcut) / sqrt(cutoff_length)

    return pp_err * rescaling_const


def ewald_energy(trg, src) -> float:
    """
    Total potential energy :math:`U = \\frac{1}{2} \\sum_i q_i \\phi_i`. The factor 1/2 removes the double counting
    of each pair.

    Parameters
    ----------
    trg : numpy.ndarray
        Target accumulators. Column 0 holds the potential.

    src : numpy.ndarray
        Source strengths.

    Returns
    -------
    : float
        Potential energy.

    """
    return 0.5 * float(asarray(src) @ asarray(trg)[:, 0])
