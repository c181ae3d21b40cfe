"""
Module containing the basic class for handling bodies' properties.
"""

from numpy import arange, ascontiguousarray, float64, int64, ones, zeros

from .utilities.exceptions import EwaldError


class Bodies:
    """
    Class handling the bodies (point sources) of a periodic system.

    Parameters
    ----------
    pos : numpy.ndarray
        Bodies' positions. Shape = (N, 3).

    src : numpy.ndarray
        Source strength (charge or mass) of each body. Shape = (N,).

    Attributes
    ----------
    pos : numpy.ndarray
        Bodies' positions. Shape = (N, 3).

    src : numpy.ndarray
        Source strength of each body. Shape = (N,).

    trg : numpy.ndarray
        Target accumulators. Shape = (N, 4). Column 0 is the potential, columns 1-3 the gradient of the potential.

    ibody : numpy.ndarray
        Body index. Shape = (N,).

    icell : numpy.ndarray
        Index of the owning cell. Shape = (N,).

    weight : numpy.ndarray
        Work weight of each body. Shape = (N,).

    Notes
    -----
    The Ewald routines only read :attr:`pos` and :attr:`src` and only write :attr:`trg`. The bodies are never
    reordered, so cells can refer to them through ``(start, count)`` index ranges.

    """

    def __init__(self, pos, src):
        self.pos = ascontiguousarray(pos, dtype=float64)
        self.src = ascontiguousarray(src, dtype=float64)

        if self.pos.ndim != 2 or self.pos.shape[1] != 3:
            raise EwaldError(f"Bodies' positions must have shape (N, 3). Got {self.pos.shape}.")
        if self.src.shape != (self.pos.shape[0],):
            raise EwaldError(f"Bodies' sources must have shape ({self.pos.shape[0]},). Got {self.src.shape}.")

        num_bodies = self.pos.shape[0]
        self.trg = zeros((num_bodies, 4), dtype=float64)
        self.ibody = arange(num_bodies, dtype=int64)
        self.icell = zeros(num_bodies, dtype=int64)
        self.weight = ones(num_bodies, dtype=float64)

    def __len__(self):
        return self.pos.shape[0]

    def __repr__(self):
        sortedDict = dict(sorted(self.__dict__.items(), key=lambda x: x[0].lower()))
        disp = "Bodies( \n"
        for key, value in sortedDict.items():
            disp += "\t{} : {}\n".format(key, value)
        disp += ")"
        return disp

    @property
    def potential(self):
        """View of the potential column of :attr:`trg`."""
        return self.trg[:, 0]

    @property
    def force(self):
        """View of the gradient columns of :attr:`trg`."""
        return self.trg[:, 1:]

    @property
    def total_net_charge(self) -> float:
        """Sum of all the sources."""
        return float(self.src.sum())
