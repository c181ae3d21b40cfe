"""
A subpackage containing the real-space, reciprocal-space and correction terms of the Ewald sum.
"""

__all__ = ["Ewald",
           "COULOMB_SIGMA",
           "ewald_real_kernel",
           "init_waves",
           "dft",
           "idft",
           "self_term",
           "get_dipole",
           "dipole_coefficient",
           "dipole_correction",
           "init_target"
           ]

from .core import COULOMB_SIGMA, Ewald
from .corrections import dipole_coefficient, dipole_correction, get_dipole, init_target, self_term
from .force_pm import dft, idft, init_waves
from .force_pp import ewald_real_kernel
