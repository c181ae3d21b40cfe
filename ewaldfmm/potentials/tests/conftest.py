from numpy import arange, argsort, array, asarray, concatenate, empty, floor, int64, meshgrid, nonzero, unique, zeros
from numpy.linalg import norm
from pytest import fixture

from ...cells import Cells
from ...particles import Bodies


def create_grid_cells(pos, src, cycle, cells_per_dim):
    """
    Two-level tree: a root enclosing the box and one leaf per non-empty cell of a uniform grid.
    The bodies are sorted by leaf so that each leaf owns a contiguous range.
    """
    cycle = asarray(cycle, dtype=float)
    h = cycle / cells_per_dim

    idx = floor(pos / h).astype(int64) % cells_per_dim
    keys = (idx[:, 0] * cells_per_dim + idx[:, 1]) * cells_per_dim + idx[:, 2]
    order = argsort(keys, kind="stable")
    bodies = Bodies(pos[order], src[order])
    keys = keys[order]
    idx = idx[order]

    _, first, counts = unique(keys, return_index=True, return_counts=True)
    num_leaves = first.shape[0]

    center = empty((num_leaves + 1, 3))
    radius = empty(num_leaves + 1)
    ibody = zeros(num_leaves + 1, dtype=int64)
    nbody = zeros(num_leaves + 1, dtype=int64)
    ichild = zeros(num_leaves + 1, dtype=int64)
    nchild = zeros(num_leaves + 1, dtype=int64)

    center[0] = 0.5 * cycle
    radius[0] = 0.5 * norm(cycle)
    nbody[0] = len(bodies)
    ichild[0] = 1
    nchild[0] = num_leaves

    center[1:] = (idx[first] + 0.5) * h
    radius[1:] = 0.5 * norm(h)
    ibody[1:] = first
    nbody[1:] = counts

    return Cells(bodies, center, radius, ibody, nbody, ichild, nchild)


def create_octree_cells(pos, src, cycle, levels):
    """
    Octree of the box with every leaf at depth `levels`. Empty octants are dropped.
    Cells are numbered level by level so that siblings are contiguous, bodies are numbered depth first so that
    every cell owns a contiguous range.
    """
    cycle = asarray(cycle, dtype=float)
    tree = [{"lo": zeros(3), "size": cycle, "members": arange(pos.shape[0]), "level": 0}]

    c = 0
    while c < len(tree):
        cell = tree[c]
        cell["ichild"] = len(tree)
        cell["nchild"] = 0
        if cell["level"] < levels:
            half = 0.5 * cell["size"]
            upper = pos[cell["members"]] >= cell["lo"] + half
            octant = (upper[:, 0] * 4 + upper[:, 1] * 2 + upper[:, 2]).astype(int64)
            for o in range(8):
                members = cell["members"][nonzero(octant == o)[0]]
                if members.shape[0] == 0:
                    continue
                shift = array([(o >> 2) & 1, (o >> 1) & 1, o & 1])
                child = {"lo": cell["lo"] + shift * half, "size": half, "members": members}
                child["level"] = cell["level"] + 1
                tree.append(child)
                cell["nchild"] += 1
        c += 1

    order = []

    def assign(c, start):
        cell = tree[c]
        cell["ibody"] = start
        if cell["nchild"] == 0:
            order.append(cell["members"])
            start += cell["members"].shape[0]
        for child in range(cell["ichild"], cell["ichild"] + cell["nchild"]):
            start = assign(child, start)
        cell["nbody"] = start - cell["ibody"]
        return start

    assign(0, 0)
    order = concatenate(order)

    return Cells(
        Bodies(pos[order], src[order]),
        array([cell["lo"] + 0.5 * cell["size"] for cell in tree]),
        array([0.5 * norm(cell["size"]) for cell in tree]),
        array([cell["ibody"] for cell in tree]),
        array([cell["nbody"] for cell in tree]),
        array([cell["ichild"] for cell in tree]),
        array([cell["nchild"] for cell in tree]),
    )


def create_nacl_lattice(ions_per_dim, spacing):
    """Rock-salt lattice of alternating unit charges."""
    i = arange(ions_per_dim)
    X, Y, Z = meshgrid(i, i, i, indexing="ij")
    pos = spacing * asarray([X.ravel(), Y.ravel(), Z.ravel()], dtype=float).T
    src = (-1.0) ** (X + Y + Z).ravel()

    return pos, src


@fixture
def grid_cells():
    return create_grid_cells


@fixture
def octree_cells():
    return create_octree_cells


@fixture
def nacl_lattice():
    return create_nacl_lattice
