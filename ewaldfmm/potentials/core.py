"""
Module handling the Ewald class.
"""
from numpy import array, asarray, errstate, float64, integer, isclose, pi, sqrt
from warnings import warn

from ..utilities.exceptions import AlgorithmError, AlgorithmWarning, PhysicsWarning
from ..utilities.io import datetime_stamp, print_to_logger, read_yaml
from ..utilities.maths import ewald_energy, force_error_analytic_pp, optimal_alpha, wave_cutoff
from ..utilities.timing import EwaldTimer, format_time
from . import corrections
from .force_pm import wave_part as pm_wave_part
from .force_pp import real_part_loop

#: Smearing width giving the Gaussian-units Coulomb potential 1/r.
COULOMB_SIGMA = 0.25 / pi


class Ewald:
    r"""
    Ewald summation of a periodic system of point sources.

    The configuration is fixed at construction and all the derived constants are computed once.

    Parameters
    ----------
    ksize : int
        Radius of the wave-number lattice.

    alpha : float
        Ewald splitting parameter.

    sigma : float
        Smearing width of the reciprocal Green's function. :data:`COULOMB_SIGMA` for the 1/r potential.

    cutoff : float
        Real-space cutoff.

    cycle : numpy.ndarray
        Periodic box lengths.

    verbose : bool
        Flag for printing timing information to screen.

    log_file : str
        Path of the log file. No log is written if `None`.

    Attributes
    ----------
    scale : numpy.ndarray
        :math:`2\pi/L` per axis.

    box_volume : float
        Volume of the periodic box.

    wave_coef : float
        :math:`2/(\sigma V)`. The factor 2 accounts for the half lattice of waves.

    wave_exp_coef : float
        :math:`1/(4\alpha^2)`.

    self_coef : float
        :math:`2\alpha/\sqrt{\pi}`. Self potential per unit source.

    dipole_coef : float
        :math:`4\pi/(3V)`.

    neighbor_threshold : float
        :math:`\sqrt{3} r_c`. Cells whose spheres are farther apart than this are pruned.

    pp_force_error : float
        Estimate of the real-space force error per unit source. See
        :func:`ewaldfmm.utilities.maths.force_error_analytic_pp`.

    energy : float
        Potential energy of the last :meth:`update`.

    timings : dict
        Elapsed nanoseconds of the last real and wave parts.

    """

    def __init__(self, ksize, alpha, sigma, cutoff, cycle, verbose: bool = False, log_file: str = None):

        if not isinstance(ksize, (int, integer)) or isinstance(ksize, bool) or ksize < 0:
            raise AlgorithmError(f"ksize must be a non-negative integer. Got {ksize!r}.")

        cycle = array(cycle, dtype=float64).ravel()
        if cycle.shape != (3,):
            raise AlgorithmError(f"cycle must contain one length per axis. Got {cycle.shape[0]} values.")

        self.ksize = int(ksize)
        self.alpha = float64(alpha)
        self.sigma = float64(sigma)
        self.cutoff = float64(cutoff)
        self.cycle = cycle
        self.verbose = verbose
        self.log_file = log_file

        # Degenerate values propagate as inf/nan
        with errstate(divide="ignore", invalid="ignore"):
            self.scale = 2.0 * pi / self.cycle
            self.box_volume = self.cycle.prod()
            self.wave_coef = 2.0 / (self.sigma * self.box_volume)
            self.wave_exp_coef = 1.0 / (4.0 * self.alpha * self.alpha)
            self.self_coef = 2.0 / sqrt(pi) * self.alpha
            self.dipole_coef = corrections.dipole_coefficient(self.cycle)
            self.pp_force_error = force_error_analytic_pp(self.cutoff, self.alpha)
        self.cutoff_sq = self.cutoff * self.cutoff
        self.neighbor_threshold = sqrt(3.0) * self.cutoff

        if self.cutoff > 0.5 * self.cycle.min():
            warn(
                f"\nThe cut-off radius {self.cutoff} is larger than half of the minimum box length. "
                f"Pairs beyond the nearest periodic image will be missed.",
                category=AlgorithmWarning,
            )

        self.timer = EwaldTimer()
        self.timings = {}
        self.energy = None

    def __repr__(self):
        disp = "Ewald( \n"
        for key in ["ksize", "alpha", "sigma", "cutoff", "cycle"]:
            disp += "\t{} : {}\n".format(key, getattr(self, key))
        disp += ")"
        return disp

    @classmethod
    def from_dict(cls, input_dict: dict):
        """
        Create the object from a dictionary of parameters.

        Parameters
        ----------
        input_dict : dict
            Keys: ``cycle``, ``cutoff`` and optionally ``ksize``, ``alpha``, ``sigma``, ``tolerance``, ``verbose``,
            ``log_file``. Missing ``alpha`` and ``ksize`` are chosen from ``tolerance``
            (see :func:`ewaldfmm.utilities.maths.optimal_alpha` and :func:`ewaldfmm.utilities.maths.wave_cutoff`).

        Returns
        -------
        : :class:`ewaldfmm.potentials.core.Ewald`

        """
        params = dict(input_dict)
        for key in ["cycle", "cutoff"]:
            if key not in params:
                raise AlgorithmError(f"Ewald parameter '{key}' is missing.")

        tolerance = params.pop("tolerance", 1.0e-6)
        if params.get("alpha") is None:
            params["alpha"] = optimal_alpha(params["cutoff"], tolerance)
        if params.get("ksize") is None:
            params["ksize"] = wave_cutoff(params["alpha"], params["cycle"], tolerance)
        if params.get("sigma") is None:
            params["sigma"] = COULOMB_SIGMA

        unknown = set(params) - {"ksize", "alpha", "sigma", "cutoff", "cycle", "verbose", "log_file"}
        if unknown:
            raise AlgorithmError(f"Unknown Ewald parameters: {sorted(unknown)}.")

        return cls(**params)

    @classmethod
    def from_yaml(cls, filename: str):
        """
        Create the object from the ``Ewald`` section of a YAML input file.

        Parameters
        ----------
        filename : str
            Input YAML file.

        Returns
        -------
        : :class:`ewaldfmm.potentials.core.Ewald`

        """
        dics = read_yaml(filename)
        if "Ewald" not in dics:
            raise AlgorithmError(f"No 'Ewald' section in {filename}.")

        return cls.from_dict(dics["Ewald"])

    def log(self, message: str):
        """Print to log file and/or screen."""
        if self.log_file is not None:
            print_to_logger(message, self.log_file, self.verbose)
        elif self.verbose:
            print(message)

    def pretty_print(self):
        """Print the Ewald parameters in a user-friendly way. A date stamp opens the log file."""

        if self.log_file is not None:
            datetime_stamp(self.log_file)

        msg = (
            f"\nEWALD SUMMATION\n"
            f"Box lengths = {self.cycle[0]:.6e}, {self.cycle[1]:.6e}, {self.cycle[2]:.6e}\n"
            f"Box volume = {self.box_volume:.6e}\n"
            f"Ewald parameter alpha = {self.alpha:.6e}\n"
            f"Smearing parameter sigma = {self.sigma:.6e}\n"
            f"Real-space cutoff = {self.cutoff:.6e}\n"
            f"alpha * cutoff = {self.alpha * self.cutoff:.4f}\n"
            f"Wave lattice radius = {self.ksize}\n"
            f"PP Force Error = {self.pp_force_error:.6e}"
        )
        self.log(msg)

    def real_part(self, cells, jcells):
        """
        Real-space part. Every leaf of `cells` is walked against the root of `jcells`.

        Parameters
        ----------
        cells : :class:`ewaldfmm.cells.Cells`
            Target cells. The accumulators of `cells.bodies` are updated in place.

        jcells : :class:`ewaldfmm.cells.Cells`
            Source cells. Can be the same object as `cells`.

        Returns
        -------
        num_p2p : numpy.ndarray
            Number of source leaves evaluated for each target leaf.

        """
        self.timer.start()
        num_p2p = real_part_loop(
            cells.leaves(),
            cells.center,
            cells.radius,
            cells.ibody,
            cells.nbody,
            cells.bodies.pos,
            cells.bodies.trg,
            jcells.center,
            jcells.radius,
            jcells.ibody,
            jcells.nbody,
            jcells.ichild,
            jcells.nchild,
            jcells.bodies.pos,
            jcells.bodies.src,
            self.cycle,
            self.alpha,
            self.cutoff_sq,
            self.neighbor_threshold,
        )
        self.timings["real_part"] = self.timer.stop()
        self.log(format_time("Ewald real part", self.timer.time_division(self.timings["real_part"])))

        return num_p2p

    def self_term(self, bodies):
        """
        Subtract the self term from the potentials.

        Parameters
        ----------
        bodies : :class:`ewaldfmm.particles.Bodies`
            Bodies. Updated in place.

        """
        corrections.self_term(bodies.trg, bodies.src, self.self_coef)

    def wave_part(self, trg, pos, src, num_bodies: int = None):
        """
        Reciprocal-space part. The accumulators are aligned with the sources.

        Parameters
        ----------
        trg : numpy.ndarray
            Target accumulators. Shape = (N, 4). Updated in place.

        pos : numpy.ndarray
            Sources' positions. Shape = (N, 3).

        src : numpy.ndarray
            Sources' strengths. Shape = (N,).

        num_bodies : int
            Number of bodies to use. Default is all of them.

        Returns
        -------
        waves : numpy.ndarray
            Wave numbers used in the sum.

        """
        if num_bodies is None:
            num_bodies = pos.shape[0]

        self.timer.start()
        waves = pm_wave_part(
            trg[:num_bodies],
            asarray(pos[:num_bodies], dtype=float64),
            asarray(src[:num_bodies], dtype=float64),
            self.ksize,
            self.scale,
            self.wave_coef,
            self.wave_exp_coef,
        )
        self.timings["wave_part"] = self.timer.stop()
        self.log(format_time("Ewald wave part", self.timer.time_division(self.timings["wave_part"])))

        return waves

    def get_dipole(self, bodies, x0):
        """
        Dipole of the whole system.

        Parameters
        ----------
        bodies : :class:`ewaldfmm.particles.Bodies`
            Bodies.

        x0 : numpy.ndarray
            Reference origin.

        Returns
        -------
        dipole : numpy.ndarray

        """
        return corrections.get_dipole(bodies.pos, bodies.src, x0)

    def dipole_correction(self, bodies, dipole, num_bodies: int, cycle=None):
        """
        Dipole correction of potentials and gradients.

        Parameters
        ----------
        bodies : :class:`ewaldfmm.particles.Bodies`
            Bodies. Updated in place.

        dipole : numpy.ndarray
            Dipole of the system. See :meth:`get_dipole`.

        num_bodies : int
            Total number of bodies.

        cycle : numpy.ndarray
            Periodic box lengths. Default is the box of this object.

        """
        coef = self.dipole_coef if cycle is None else corrections.dipole_coefficient(cycle)
        corrections.dipole_correction(bodies.trg, bodies.src, dipole, num_bodies, coef)

    def init_target(self, bodies):
        """
        Zero the accumulators and reset the bookkeeping.

        Parameters
        ----------
        bodies : :class:`ewaldfmm.particles.Bodies`
            Bodies. Updated in place.

        """
        corrections.init_target(bodies)

    def update(self, bodies, cells, jcells=None, x0=None, dipole: bool = True):
        """
        Full Ewald pass: reset, real part, wave part, self term and dipole correction.

        Parameters
        ----------
        bodies : :class:`ewaldfmm.particles.Bodies`
            Bodies. Their accumulators hold the result.

        cells : :class:`ewaldfmm.cells.Cells`
            Target cells over `bodies`.

        jcells : :class:`ewaldfmm.cells.Cells`
            Source cells. Default is `cells`.

        x0 : numpy.ndarray
            Reference origin of the dipole. Default is the origin.

        dipole : bool
            Flag for applying the dipole correction.

        Raises
        ------
        : :class:`ewaldfmm.utilities.exceptions.AlgorithmError`
            If the cells do not refer to `bodies`.

        """
        if jcells is None:
            jcells = cells
        if cells.bodies is not bodies or jcells.bodies is not bodies:
            raise AlgorithmError("The target and source cells of a full pass must refer to the same bodies.")
        if x0 is None:
            x0 = array([0.0, 0.0, 0.0])

        total_charge = bodies.total_net_charge
        if not isclose(total_charge, 0.0, atol=1.0e-8 * max(abs(bodies.src).sum(), 1.0)):
            warn(
                f"\nThe system has a net charge of {total_charge:.6e}. The Ewald sum assumes a neutral system.",
                category=PhysicsWarning,
            )

        self.init_target(bodies)
        self.real_part(cells, jcells)
        self.wave_part(bodies.trg, bodies.pos, bodies.src)
        self.self_term(bodies)
        if dipole:
            self.dipole_correction(bodies, self.get_dipole(bodies, x0), len(bodies))

        self.energy = ewald_energy(bodies.trg, bodies.src)
        self.log(f"Ewald energy = {self.energy:.6e}")
