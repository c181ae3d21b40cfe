"""Module of Exceptions and warnings specific to ewaldfmm."""

# ------------------------------------------------------------------------------
#   Exceptions
# ------------------------------------------------------------------------------


class EwaldError(Exception):
    """
    Base class of ewaldfmm custom errors.
    All custom exceptions raised by ewaldfmm should inherit from this
    class and be defined in this module.
    """


class TimerError(Exception):
    """A custom exception used to report errors in use of Timer class"""


# ^^^^^^^^^^^^ Base Exceptions should be defined above this comment ^^^^^^^^^^^^


class AlgorithmError(EwaldError):
    """The base error for errors related to the Ewald configuration."""


class CellsError(EwaldError):
    """The base error for errors related to the Cells arena."""


# ------------------------------------------------------------------------------
#   Warnings
# ------------------------------------------------------------------------------


class EwaldWarning(Warning):
    """
    Base class of ewaldfmm custom warnings.
    All ewaldfmm custom warnings should inherit from this class and be
    defined in this module.
    Warnings should be issued using `warnings.warn`, which will not break
    execution if unhandled.
    """


class PhysicsWarning(EwaldWarning):
    """The base warning for warnings related to non-physical situations."""


# ^^^^^^^^^^^^^ Base Warnings should be defined above this comment ^^^^^^^^^^^^^


class AlgorithmWarning(EwaldWarning):
    """The base warning for warnings related to the used algorithm."""
