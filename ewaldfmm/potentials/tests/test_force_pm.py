from numpy import array, concatenate, cos, dtype, exp, isclose, ndarray, pi, sin, zeros

from ..force_pm import apply_wave_factor, dft, idft, init_waves, wave_part

from pytest import mark


def test_init_waves_unit_radius():
    waves = init_waves(1)

    assert isinstance(waves, ndarray)
    assert waves.dtype == dtype("int64")
    assert (waves == array([[0, 0, 1], [0, 1, 0], [1, 0, 0]])).all()


@mark.parametrize("ksize", [0, -3])
def test_init_waves_empty(ksize):
    waves = init_waves(ksize)

    assert waves.shape == (0, 3)


def test_init_waves_half_lattice():
    waves = init_waves(2)

    assert waves.shape == (16, 3)
    assert ((waves**2).sum(axis=1) <= 4).all()
    assert not (waves == 0).all(axis=1).any()

    # Together with their conjugates the waves cover every nonzero lattice point exactly once
    full = {tuple(w) for w in concatenate((waves, -waves))}
    assert len(full) == 32
    expected = {
        (l, m, n)
        for l in range(-2, 3)
        for m in range(-2, 3)
        for n in range(-2, 3)
        if 0 < l * l + m * m + n * n <= 4
    }
    assert full == expected


def test_dft_single_source():
    cycle = array([2.0, 3.0, 4.0])
    scale = 2.0 * pi / cycle
    pos = array([[0.3, 0.7, 1.1]])
    src = array([2.5])
    waves = array([[1, 0, 0], [0, 1, 0], [1, 1, 1]])

    wave_real, wave_imag = dft(waves, pos, src, scale)

    th = (waves * pos[0] * scale).sum(axis=1)
    assert isclose(wave_real, 2.5 * cos(th)).all()
    assert isclose(wave_imag, 2.5 * sin(th)).all()


def test_apply_wave_factor():
    cycle = array([2.0, 2.0, 3.0])
    scale = 2.0 * pi / cycle
    waves = init_waves(2)
    wave_real = zeros(waves.shape[0]) + 1.5
    wave_imag = zeros(waves.shape[0]) - 0.5
    coef, exp_coef = 0.7, 0.04

    apply_wave_factor(waves, wave_real, wave_imag, scale, coef, exp_coef)

    k2 = ((waves * scale) ** 2).sum(axis=1)
    factor = coef * exp(-k2 * exp_coef) / k2
    assert isclose(wave_real, 1.5 * factor).all()
    assert isclose(wave_imag, -0.5 * factor).all()


def test_idft_unfiltered_round_trip():
    """A unit source at the origin seen through unfiltered waves gives a sum of cosines."""
    cycle = array([2.0, 2.0, 2.0])
    scale = 2.0 * pi / cycle
    waves = init_waves(1)
    wave_real, wave_imag = dft(waves, zeros((1, 3)), array([1.0]), scale)

    probe = array([[0.3, 0.5, 1.7]])
    trg = zeros((1, 4))
    idft(waves, wave_real, wave_imag, probe, trg, scale)

    th = probe[0] * scale
    assert isclose(trg[0, 0], cos(th).sum())
    assert isclose(trg[0, 1:], -scale * sin(th)).all()


def test_idft_accumulates():
    cycle = array([2.0, 2.0, 2.0])
    scale = 2.0 * pi / cycle
    waves = init_waves(1)
    wave_real, wave_imag = dft(waves, zeros((1, 3)), array([1.0]), scale)

    probe = array([[0.3, 0.5, 1.7]])
    trg = zeros((1, 4)) + 1.0
    idft(waves, wave_real, wave_imag, probe, trg, scale)

    assert isclose(trg[0, 0], 1.0 + cos(probe[0] * scale).sum())


def test_wave_part_neutral_pair():
    """Opposite charges: the potential is odd under the exchange of the two bodies."""
    cycle = array([2.0, 2.0, 2.0])
    scale = 2.0 * pi / cycle
    pos = array([[0.5, 1.0, 1.0], [1.5, 1.0, 1.0]])
    src = array([1.0, -1.0])
    trg = zeros((2, 4))

    waves = wave_part(trg, pos, src, 6, scale, 2.0 / (cycle.prod() / (4.0 * pi)), 1.0 / (4.0 * 2.0**2))

    assert waves.shape[1] == 3
    assert isclose(trg[0, 0], -trg[1, 0])
    assert isclose(trg[0, 1], trg[1, 1])
    assert isclose(trg[:, 2:], 0.0, atol=1e-10).all()
