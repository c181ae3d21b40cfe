"""
Module for handling the reciprocal-space (wave) part of the Ewald sum.

The long-range part is computed as an explicit sum over a truncated set of wave vectors

.. math::
   \\phi_i^{\\rm wave} = \\sum_{\\mathbf k} \\frac{2}{\\sigma V} \\frac{e^{-k^2/4\\alpha^2}}{k^2}
   \\left [ {\\rm Re} S(\\mathbf k) \\cos(\\mathbf k \\cdot \\mathbf r_i) + {\\rm Im} S(\\mathbf k)
   \\sin(\\mathbf k \\cdot \\mathbf r_i) \\right ],

where :math:`S(\\mathbf k) = \\sum_j q_j e^{i \\mathbf k \\cdot \\mathbf r_j}` is the structure factor. Only half of
the lattice is enumerated, the factor 2 in the prefactor accounts for the omitted conjugate waves.
"""

from math import cos, exp, sin
from numba import jit, prange
from numba.core.types import int64
from numpy import empty, zeros


@jit(nopython=True)
def init_waves(ksize):
    """
    Enumerate the half lattice of integer wave numbers :math:`(l, m, n)` with :math:`l^2 + m^2 + n^2 \\leq k_{\\rm size}^2`.

    Parameters
    ----------
    ksize : int
        Lattice radius.

    Returns
    -------
    waves : numpy.ndarray
        Integer wave numbers. Shape = (W, 3).

    Notes
    -----
    The zero vector is excluded and only one wave of each :math:`\\pm \\mathbf k` pair is kept:
    :math:`l \\geq 0`, :math:`m \\geq 0` when :math:`l = 0`, and :math:`n > 0` when :math:`l = m = 0`.

    """
    kmax = max(ksize, 0)
    kmaxsq = kmax * kmax
    side = 2 * kmax + 1
    waves = empty((side * side * side, 3), dtype=int64)

    count = 0
    for l in range(kmax + 1):
        mmin = 0 if l == 0 else -kmax
        for m in range(mmin, kmax + 1):
            nmin = 1 if (l == 0 and m == 0) else -kmax
            for n in range(nmin, kmax + 1):
                if l * l + m * m + n * n <= kmaxsq:
                    waves[count, 0] = l
                    waves[count, 1] = m
                    waves[count, 2] = n
                    count += 1

    return waves[:count].copy()


@jit(nopython=True, parallel=True)
def dft(waves, pos, src, scale):
    """
    Forward transform: structure factor of the sources on each wave.

    Parameters
    ----------
    waves : numpy.ndarray
        Integer wave numbers. Shape = (W, 3).

    pos : numpy.ndarray
        Sources' positions. Shape = (N, 3).

    src : numpy.ndarray
        Sources' strengths. Shape = (N,).

    scale : numpy.ndarray
        :math:`2\\pi / L` per axis.

    Returns
    -------
    wave_real : numpy.ndarray
        Real part of the amplitude of each wave.

    wave_imag : numpy.ndarray
        Imaginary part of the amplitude of each wave.

    """
    num_waves = waves.shape[0]
    wave_real = zeros(num_waves)
    wave_imag = zeros(num_waves)

    # Each wave owns its amplitude
    for w in prange(num_waves):
        re = 0.0
        im = 0.0
        for b in range(pos.shape[0]):
            th = 0.0
            for d in range(3):
                th += waves[w, d] * pos[b, d] * scale[d]
            re += src[b] * cos(th)
            im += src[b] * sin(th)
        wave_real[w] = re
        wave_imag[w] = im

    return wave_real, wave_imag


@jit(nopython=True, error_model="numpy")
def apply_wave_factor(waves, wave_real, wave_imag, scale, coef, exp_coef):
    """
    Rescale the amplitudes in place by the screened reciprocal Green's function
    :math:`c \\, e^{-k^2 / 4 \\alpha^2} / k^2`.

    Parameters
    ----------
    waves : numpy.ndarray
        Integer wave numbers. Shape = (W, 3).

    wave_real : numpy.ndarray
        Real part of the amplitudes.

    wave_imag : numpy.ndarray
        Imaginary part of the amplitudes.

    scale : numpy.ndarray
        :math:`2\\pi / L` per axis.

    coef : float
        :math:`2 / (\\sigma V)`.

    exp_coef : float
        :math:`1 / (4 \\alpha^2)`.

    """
    for w in range(waves.shape[0]):
        k2 = 0.0
        for d in range(3):
            kd = waves[w, d] * scale[d]
            k2 += kd * kd
        factor = coef * exp(-k2 * exp_coef) / k2
        wave_real[w] *= factor
        wave_imag[w] *= factor


@jit(nopython=True, parallel=True)
def idft(waves, wave_real, wave_imag, pos, trg, scale):
    """
    Inverse transform: accumulate the potential and its gradient of the filtered waves on each target.

    Parameters
    ----------
    waves : numpy.ndarray
        Integer wave numbers. Shape = (W, 3).

    wave_real : numpy.ndarray
        Real part of the filtered amplitudes.

    wave_imag : numpy.ndarray
        Imaginary part of the filtered amplitudes.

    pos : numpy.ndarray
        Targets' positions. Shape = (N, 3).

    trg : numpy.ndarray
        Targets' accumulators. Shape = (N, 4). Updated in place.

    scale : numpy.ndarray
        :math:`2\\pi / L` per axis.

    """
    num_waves = waves.shape[0]

    # Each body owns its accumulator row
    for b in prange(pos.shape[0]):
        pot = 0.0
        fx = 0.0
        fy = 0.0
        fz = 0.0
        for w in range(num_waves):
            th = 0.0
            for d in range(3):
                th += waves[w, d] * pos[b, d] * scale[d]
            cos_th = cos(th)
            sin_th = sin(th)
            dtmp = wave_real[w] * sin_th - wave_imag[w] * cos_th
            pot += wave_real[w] * cos_th + wave_imag[w] * sin_th
            fx -= dtmp * waves[w, 0]
            fy -= dtmp * waves[w, 1]
            fz -= dtmp * waves[w, 2]
        trg[b, 0] += pot
        trg[b, 1] += fx * scale[0]
        trg[b, 2] += fy * scale[1]
        trg[b, 3] += fz * scale[2]


def wave_part(trg, pos, src, ksize, scale, coef, exp_coef):
    """
    Reciprocal-space part of the Ewald sum. The targets are the sources themselves.

    Parameters
    ----------
    trg : numpy.ndarray
        Accumulators of the bodies. Shape = (N, 4). Updated in place.

    pos : numpy.ndarray
        Bodies' positions. Shape = (N, 3).

    src : numpy.ndarray
        Bodies' source strengths. Shape = (N,).

    ksize : int
        Lattice radius.

    scale : numpy.ndarray
        :math:`2\\pi / L` per axis.

    coef : float
        :math:`2 / (\\sigma V)`.

    exp_coef : float
        :math:`1 / (4 \\alpha^2)`.

    Returns
    -------
    waves : numpy.ndarray
        Wave numbers used in the sum.

    """
    waves = init_waves(ksize)
    wave_real, wave_imag = dft(waves, pos, src, scale)
    apply_wave_factor(waves, wave_real, wave_imag, scale, coef, exp_coef)
    idft(waves, wave_real, wave_imag, pos, trg, scale)

    return waves
