"""
Position generation for a replicated basis cell.

Positions are laid out with the site-index formula of ``indexing``: the
basis atom index runs fastest, then cell a, b and c.
"""

import numpy as np
from typing import Sequence, Tuple

from ..exceptions import DegenerateGeometryError
from ...utils.math_utils import EPSILON

# Periodic images searched for coincident basis atoms, per axis
MAX_IMAGE_SEARCH = 10


def check_unique_basis(bravais_vectors: np.ndarray,
                       n_cells: Sequence[int],
                       cell_atoms: np.ndarray,
                       lattice_constant: float,
                       epsilon: float = EPSILON) -> None:
    """
    Fail if two basis atoms (or periodic images of them) coincide.

    Images are searched up to ±min(10, n_cells[k]) cells along each axis,
    so small systems are checked completely.

    Raises
    ------
    DegenerateGeometryError
        If any two images are closer than ``epsilon`` in every fractional
        component
    """
    max_shift = [min(MAX_IMAGE_SEARCH, n) for n in n_cells]
    shifts = np.stack(np.meshgrid(
        *[np.arange(-m, m + 1) for m in max_shift], indexing='ij'
    ), axis=-1).reshape(-1, 3)
    is_zero_shift = np.all(shifts == 0, axis=1)

    n_cell_atoms = len(cell_atoms)
    for i in range(n_cell_atoms):
        for j in range(n_cell_atoms):
            diff = cell_atoms[i] - (cell_atoms[j] + shifts)
            coincident = np.all(np.abs(diff) < epsilon, axis=1)
            if i == j:
                coincident &= ~is_zero_shift
            if not np.any(coincident):
                continue

            da, db, dc = shifts[np.argmax(coincident)]
            position = lattice_constant * ((cell_atoms[i] + [da, db, dc]) @ bravais_vectors)
            raise DegenerateGeometryError(
                f"Unable to initialize the geometry: two sites occupy the same space "
                f"within a margin of {epsilon} at absolute position {position}. "
                f"Index combination: i={i} j={j}, translations=({da}, {db}, {dc})."
            )


def generate_positions(bravais_vectors: np.ndarray,
                       n_cells: Sequence[int],
                       cell_atoms: np.ndarray,
                       lattice_constant: float) -> np.ndarray:
    """
    Absolute position of every site.

    Parameters
    ----------
    bravais_vectors : np.ndarray, shape (3, 3)
        Translation vectors, one per row
    n_cells : Sequence[int]
        Number of cells along each Bravais vector
    cell_atoms : np.ndarray, shape (N, 3)
        Basis in fractional coordinates
    lattice_constant : float
        Length scale

    Returns
    -------
    positions : np.ndarray, shape (N * n_cells[0] * n_cells[1] * n_cells[2], 3)
        position = a * ((cell + basis) @ bravais_vectors)
    """
    na, nb, nc = n_cells
    n_cell_atoms = len(cell_atoms)

    # Outer to inner: c, b, a, basis - so the flattened order matches the index formula
    c, b, a, ibasis = np.meshgrid(
        np.arange(nc), np.arange(nb), np.arange(na), np.arange(n_cell_atoms),
        indexing='ij'
    )
    cells = np.stack([a.ravel(), b.ravel(), c.ravel()], axis=1)
    fractional = cells + cell_atoms[ibasis.ravel()]

    return lattice_constant * (fractional @ bravais_vectors)


def calculate_bounds(positions: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Per-axis minimum and maximum of the site positions."""
    return positions.min(axis=0), positions.max(axis=0)


def calculate_cell_bounds(bravais_vectors: np.ndarray,
                          cell_atoms_positions: np.ndarray,
                          lattice_constant: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Extent of a single unit cell around the origin.

    Each basis atom is displaced by ± each (scaled) Bravais vector; the
    bounds of these points together with the origin are halved.

    Parameters
    ----------
    cell_atoms_positions : np.ndarray, shape (N, 3)
        Absolute positions of the basis atoms in cell (0, 0, 0)
    """
    shifts = lattice_constant * bravais_vectors
    neighbours = np.concatenate([
        (cell_atoms_positions[:, None, :] + shifts[None, :, :]).reshape(-1, 3),
        (cell_atoms_positions[:, None, :] - shifts[None, :, :]).reshape(-1, 3),
        np.zeros((1, 3)),
    ])
    return 0.5 * neighbours.min(axis=0), 0.5 * neighbours.max(axis=0)
