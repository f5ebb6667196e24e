"""
Delaunay meshes over the (sub-sampled) site cloud.

Only every ``n_cell_step``-th cell along each axis contributes points, so
visualisation can thin out large systems. Mesh entries are indices into
this strided point list; ``strided_site_indices`` maps them back to sites.

Backend
-------
``delaunay_simplices`` is the single entry point into the computational
geometry library (scipy.spatial.Delaunay, i.e. Qhull). It returns only the
lower Delaunay facets, which is what scipy exposes as ``simplices``.
Failures of the backend are caught in ``compute_delaunay`` and produce an
empty mesh and a logged warning.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from scipy.spatial import Delaunay, QhullError

logger = logging.getLogger(__name__)

# Six tetrahedra per cube, as corners of the cube below
CUBE_TETRAHEDRA = np.array([
    [0, 1, 5, 3],
    [1, 3, 2, 5],
    [3, 2, 5, 6],
    [7, 6, 5, 3],
    [4, 7, 5, 3],
    [0, 4, 3, 5],
])
# Cube corners 0..7 as (dx, dy, dz)
CUBE_CORNERS = np.array([
    [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
    [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
])


def empty_mesh(vertices_per_simplex: int) -> np.ndarray:
    return np.empty((0, vertices_per_simplex), dtype=int)


def has_enough_cells(n_cells: Sequence[int], n_cell_step: int) -> bool:
    """False if some populated axis keeps fewer than 2 cells after striding."""
    return not any(n > 1 and n // n_cell_step < 2 for n in n_cells)


def strided_shape(n_cells: Sequence[int], n_cell_step: int) -> Tuple[int, int, int]:
    """Number of cells kept per axis (cells 0, step, 2*step, ...)."""
    return tuple(len(range(0, n, n_cell_step)) for n in n_cells)


def strided_site_indices(n_cells: Sequence[int], n_cell_atoms: int, n_cell_step: int) -> np.ndarray:
    """
    Site indices of the strided point cloud, in mesh vertex order.

    Cells are visited c outermost, a innermost, with all basis atoms of a
    cell consecutive, so the order follows the site-index formula.
    """
    na, nb, nc = n_cells
    c, b, a, ibasis = np.meshgrid(
        np.arange(0, nc, n_cell_step), np.arange(0, nb, n_cell_step),
        np.arange(0, na, n_cell_step), np.arange(n_cell_atoms),
        indexing='ij'
    )
    return (ibasis + n_cell_atoms * (a + na * (b + nb * c))).ravel()


def project_to_plane(points: np.ndarray) -> np.ndarray:
    """
    In-plane 2D coordinates of a planar 3D point cloud.

    The two principal axes of the centred cloud are used as an orthonormal
    in-plane basis; this is a rigid rotation, so the Delaunay triangulation
    is the same as in the plane itself. For a geometry in the xy-plane the
    result is the xy triangulation.
    """
    centred = points - points.mean(axis=0)
    _, _, vt = np.linalg.svd(centred, full_matrices=False)
    return centred @ vt[:2].T


def delaunay_simplices(points: np.ndarray) -> np.ndarray:
    """
    Lower Delaunay simplices of a 2D or 3D point cloud.

    Parameters
    ----------
    points : np.ndarray, shape (n, 2) or (n, 3)

    Returns
    -------
    simplices : np.ndarray of int, shape (m, 3) or (m, 4)
        Point indices of each triangle/tetrahedron

    Raises
    ------
    QhullError
        If Qhull cannot triangulate the points (e.g. degenerate input)
    """
    triangulation = Delaunay(points)
    return np.asarray(triangulation.simplices, dtype=int)


def compute_delaunay(points: np.ndarray) -> np.ndarray:
    """``delaunay_simplices`` with backend failures turned into an empty mesh."""
    ndim = points.shape[1]
    try:
        return delaunay_simplices(points)
    except (QhullError, ValueError) as exc:
        logger.warning("Could not compute %dD Delaunay triangulation of the geometry: %s", ndim, exc)
        return empty_mesh(ndim + 1)


def regular_tetrahedra(n_cells: Sequence[int], n_cell_step: int) -> np.ndarray:
    """
    Tetrahedra of a single-atom lattice without calling the backend.

    Each parallelepiped spanned by neighbouring strided points is split into
    six tetrahedra with the fixed corner pattern ``CUBE_TETRAHEDRA``.
    """
    ma, mb, mc = strided_shape(n_cells, n_cell_step)
    offsets = CUBE_CORNERS @ np.array([1, ma, ma * mb])

    ix, iy, iz = np.meshgrid(np.arange(ma - 1), np.arange(mb - 1), np.arange(mc - 1), indexing='ij')
    base = (ix + ma * iy + ma * mb * iz).ravel()

    tetrahedra = base[:, None, None] + offsets[CUBE_TETRAHEDRA][None, :, :]
    return tetrahedra.reshape(-1, 4).astype(int)


def build_triangulation(positions: np.ndarray,
                        n_cells: Sequence[int],
                        n_cell_atoms: int,
                        n_cell_step: int) -> np.ndarray:
    """Delaunay triangles of a planar geometry, shape (m, 3)."""
    indices = strided_site_indices(n_cells, n_cell_atoms, n_cell_step)
    points = project_to_plane(positions[indices])
    return compute_delaunay(points)


def build_tetrahedra(positions: np.ndarray,
                     n_cells: Sequence[int],
                     n_cell_atoms: int,
                     n_cell_step: int) -> np.ndarray:
    """Tetrahedra of a three-dimensional geometry, shape (m, 4)."""
    if n_cell_atoms == 1:
        return regular_tetrahedra(n_cells, n_cell_step)

    indices = strided_site_indices(n_cells, n_cell_atoms, n_cell_step)
    return compute_delaunay(positions[indices])


@dataclass
class MeshCache:
    """
    One memoized mesh and the (n_cell_step, n_cells) key it was built for.

    ``fetch`` returns the stored mesh while the key is unchanged and
    rebuilds it otherwise. Not thread-safe.
    """
    key: Optional[Tuple[int, Tuple[int, int, int]]] = None
    mesh: Optional[np.ndarray] = None
    n_builds: int = 0

    def fetch(self, n_cell_step: int, n_cells: Sequence[int], build: Callable[[], np.ndarray]) -> np.ndarray:
        key = (int(n_cell_step), tuple(int(n) for n in n_cells))
        if self.mesh is not None and self.key == key:
            return self.mesh

        logger.debug("Rebuilding mesh for n_cell_step=%d, n_cells=%s", key[0], key[1])
        mesh = build()
        mesh.setflags(write=False)
        self.key = key
        self.mesh = mesh
        self.n_builds += 1
        return mesh
