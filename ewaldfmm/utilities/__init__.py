"""
Subpackage containing ewaldfmm utilities modules. Contains Timing, Input-Output and Ewald parameter helpers.
"""


__all__ = ["EwaldTimer", "optimal_alpha", "print_to_logger", "read_yaml", "wave_cutoff"]


from .io import print_to_logger, read_yaml
from .maths import optimal_alpha, wave_cutoff
from .timing import EwaldTimer
