r"""
Module for the global corrections of the Ewald sum and the reset of the accumulators.

Self term
*********

Each point charge is represented in the real-space sum as a Gaussian cloud, which interacts with itself.
This spurious contribution is removed from every potential

.. math::
   \phi_i \to \phi_i - \frac{2}{\sqrt{\pi}} \alpha q_i .

Dipole correction
*****************

A periodic system with net dipole moment :math:`\mathbf M = \sum_i q_i (\mathbf r_i - \mathbf r_0)` carries an extra
surface field. The correction is computed with :math:`c = 4\pi/3V`, see :func:`dipole_coefficient`.
"""

from numpy import arange, asarray, errstate, pi


def self_term(trg, src, self_coef):
    r"""
    Subtract the self interaction of the smeared sources from the potentials.

    Parameters
    ----------
    trg : numpy.ndarray
        Bodies' accumulators. Updated in place.

    src : numpy.ndarray
        Bodies' source strengths.

    self_coef : float
        Self potential per unit source, :math:`2 \alpha / \sqrt{\pi}`.

    """
    trg[:, 0] -= self_coef * src


def get_dipole(pos, src, x0):
    r"""
    Dipole moment of the whole system.

    Parameters
    ----------
    pos : numpy.ndarray
        Bodies' positions. Shape = (N, 3).

    src : numpy.ndarray
        Bodies' source strengths.

    x0 : numpy.ndarray
        Reference origin.

    Returns
    -------
    dipole : numpy.ndarray
        :math:`\sum_i q_i (\mathbf r_i - \mathbf r_0)`.

    """
    return src @ (pos - asarray(x0, dtype=float))


def dipole_coefficient(cycle):
    r"""Prefactor :math:`4\pi/3V` of the dipole correction."""
    with errstate(divide="ignore"):
        return 4.0 * pi / (3.0 * asarray(cycle, dtype=float).prod())


def dipole_correction(trg, src, dipole, num_bodies, coef):
    """
    Remove the field of the periodically replicated net dipole.

    Parameters
    ----------
    trg : numpy.ndarray
        Bodies' accumulators. Updated in place.

    src : numpy.ndarray
        Bodies' source strengths.

    dipole : numpy.ndarray
        Dipole of the system. See :func:`get_dipole`.

    num_bodies : int
        Total number of bodies.

    coef : float
        Prefactor of the correction. See :func:`dipole_coefficient`.

    Notes
    -----
    The potential correction is divided by each body's source. A body with zero source gets an infinite
    (or nan) potential which is not masked.

    """
    dipole = asarray(dipole, dtype=float)
    with errstate(divide="ignore", invalid="ignore"):
        trg[:, 0] -= coef * (dipole**2).sum() / num_bodies / src
    trg[:, 1:] -= coef * dipole


def init_target(bodies):
    """
    Clear the accumulators and reset the bookkeeping of the bodies.

    Parameters
    ----------
    bodies : :class:`ewaldfmm.particles.Bodies`
        Bodies to reset.

    """
    bodies.trg[:] = 0.0
    bodies.ibody[:] = arange(len(bodies))
    bodies.icell[:] = 0
    bodies.weight[:] = 1.0
