"""
Module containing the index-based cell arena consumed by the real-space walk.
"""

from numpy import ascontiguousarray, float64, int64, nonzero, sqrt

from .utilities.exceptions import CellsError


class Cells:
    """
    Hierarchical tree of bounding spheres stored as flat arrays. Cell 0 is the root.

    The tree is built elsewhere; this class only holds it. Children of a cell are the contiguous range
    ``ichild[c] : ichild[c] + nchild[c]`` of the arena and a leaf (``nchild[c] == 0``) owns the contiguous bodies
    ``ibody[c] : ibody[c] + nbody[c]`` of :attr:`bodies`.

    Parameters
    ----------
    bodies : :class:`ewaldfmm.particles.Bodies`
        Bodies referenced by the cells' index ranges.

    center : numpy.ndarray
        Center of each cell's bounding sphere. Shape = (Nc, 3).

    radius : numpy.ndarray
        Radius of each cell's bounding sphere. Shape = (Nc,).

    ibody : numpy.ndarray
        Index of the first body of each cell.

    nbody : numpy.ndarray
        Number of bodies of each cell.

    ichild : numpy.ndarray
        Index of the first child of each cell.

    nchild : numpy.ndarray
        Number of children of each cell.

    """

    def __init__(self, bodies, center, radius, ibody, nbody, ichild, nchild):
        self.bodies = bodies
        self.center = ascontiguousarray(center, dtype=float64)
        self.radius = ascontiguousarray(radius, dtype=float64)
        self.ibody = ascontiguousarray(ibody, dtype=int64)
        self.nbody = ascontiguousarray(nbody, dtype=int64)
        self.ichild = ascontiguousarray(ichild, dtype=int64)
        self.nchild = ascontiguousarray(nchild, dtype=int64)

        num_cells = self.center.shape[0]
        if self.center.ndim != 2 or self.center.shape[1] != 3:
            raise CellsError(f"Cells' centers must have shape (Nc, 3). Got {self.center.shape}.")
        for name in ["radius", "ibody", "nbody", "ichild", "nchild"]:
            if getattr(self, name).shape != (num_cells,):
                raise CellsError(f"Cells' {name} must have shape ({num_cells},).")

    def __len__(self):
        return self.center.shape[0]

    def __repr__(self):
        return f"Cells(num_cells={len(self)}, num_leaves={len(self.leaves())}, num_bodies={len(self.bodies)})"

    def leaves(self):
        """Indices of the cells without children."""
        return nonzero(self.nchild == 0)[0]

    def validate(self, rtol: float = 1.0e-12):
        """
        Check the index ranges and the containment of every body and every child in its cell's sphere.

        Parameters
        ----------
        rtol : float
            Relative slack on the radii to absorb round-off.

        Raises
        ------
        : :class:`ewaldfmm.utilities.exceptions.CellsError`
            If a range is out of bounds or a sphere does not enclose what it owns.

        """
        num_cells = len(self)
        num_bodies = len(self.bodies)

        for c in range(num_cells):
            slack = rtol * (1.0 + self.radius[c])
            if self.nchild[c] == 0:
                start, stop = self.ibody[c], self.ibody[c] + self.nbody[c]
                if start < 0 or stop > num_bodies:
                    raise CellsError(f"Cell {c} body range [{start}, {stop}) is out of bounds.")
                dx = self.bodies.pos[start:stop] - self.center[c]
                if stop > start and sqrt((dx**2).sum(axis=1)).max() > self.radius[c] + slack:
                    raise CellsError(f"Cell {c} does not enclose its bodies.")
            else:
                start, stop = self.ichild[c], self.ichild[c] + self.nchild[c]
                if start <= c or stop > num_cells:
                    raise CellsError(f"Cell {c} child range [{start}, {stop}) is invalid.")
                dx = self.center[start:stop] - self.center[c]
                reach = sqrt((dx**2).sum(axis=1)) + self.radius[start:stop]
                if reach.max() > self.radius[c] + slack:
                    raise CellsError(f"Cell {c} does not enclose its children.")
