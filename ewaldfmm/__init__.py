"""Welcome to ewaldfmm: the Ewald summation core of a periodic fast multipole method, accelerated with Numba."""

__all__ = [
    "Bodies",
    "Cells",
    "Ewald",
    "EwaldTimer",
    "read_yaml",
    "__version__",
]

__all__.sort()

# Enforce Python version check during package import.
# This is the same check as the one in setup.py
import sys

if sys.version_info < (3, 8):
    raise Exception("ewaldfmm does not support Python < 3.8")

# Packages may add whatever they like to this file, but
# should keep this content at the top.
# ----------------------------------------------------------------------------
from importlib import metadata

from .cells import Cells
from .particles import Bodies
from .potentials.core import Ewald
from .utilities.io import read_yaml
from .utilities.timing import EwaldTimer

# define version
try:
    #: ewaldfmm version string
    __version__ = metadata.version("ewaldfmm")
except metadata.PackageNotFoundError:
    # package is not installed
    __version__ = "unknown"

    from warnings import warn

    warn(
        "ewaldfmm.__version__ not generated (set to 'unknown'), ewaldfmm is not an installed package.",
        RuntimeWarning,
    )

    del warn

del metadata, sys
