"""
Dimensionality and lattice-type classification.

The effective dimensionality of a geometry combines two estimates:

Basis dimensionality
    0 for a single basis atom, 1 if all basis atoms lie on a line,
    2 if they lie in a plane, otherwise 3.

Translation dimensionality
    0 if every cell count is 1, otherwise determined by how many pairs of
    Bravais vectors are non-parallel while both of their cell counts
    exceed 1.

Each estimate carries a characteristic direction: the line direction for
1D, the plane normal for 2D. The combination rules compare these
directions. All tests use the fixed absolute tolerance ``EPSILON`` on
normalized dot products.
"""

import logging
import numpy as np
from enum import Enum
from itertools import combinations
from typing import Optional, Sequence, Tuple

from ...utils.math_utils import EPSILON, normalized, are_parallel, are_orthogonal

logger = logging.getLogger(__name__)


class BravaisLatticeType(str, Enum):
    """Coarse lattice-type tag of a geometry."""
    SIMPLE_CUBIC = "simple cubic"
    RECTILINEAR = "rectilinear"
    IRREGULAR = "irregular"


def basis_dimensionality(basis_positions: np.ndarray,
                         epsilon: float = EPSILON) -> Tuple[int, Optional[np.ndarray]]:
    """
    Dimensionality of the basis atoms.

    Parameters
    ----------
    basis_positions : np.ndarray, shape (N, 3)
        Absolute positions of the basis atoms of one cell

    Returns
    -------
    dims : int
        0, 1, 2 or 3
    test_vector : np.ndarray or None
        Line direction (dims 1), plane normal (dims 2), None otherwise
    """
    n_cell_atoms = len(basis_positions)
    if n_cell_atoms == 1:
        return 0, None
    if n_cell_atoms == 2:
        return 1, normalized(basis_positions[0] - basis_positions[1])

    directions = [normalized(p - basis_positions[0]) for p in basis_positions[1:]]
    line = directions[0]

    off_line = [d for d in directions[1:] if not are_parallel(d, line, epsilon)]
    if not off_line:
        return 1, line

    normal = normalized(np.cross(line, off_line[0]))
    if all(are_orthogonal(d, normal, epsilon) for d in directions):
        return 2, normal

    return 3, None


def translation_dimensionality(bravais_vectors: np.ndarray,
                               n_cells: Sequence[int],
                               epsilon: float = EPSILON) -> Tuple[int, Optional[np.ndarray]]:
    """
    Dimensionality spanned by the populated translations.

    Returns
    -------
    dims : int
        0, 1, 2 or 3
    test_vector : np.ndarray or None
        Line direction (dims 1), plane normal (dims 2), None otherwise
    """
    if all(n == 1 for n in n_cells):
        return 0, None

    independent_pairs = [
        (i, j) for i, j in combinations(range(3), 2)
        if n_cells[i] > 1 and n_cells[j] > 1
        and not are_parallel(bravais_vectors[i], bravais_vectors[j], epsilon)
    ]

    if not independent_pairs:
        populated = [i for i in range(3) if n_cells[i] > 1]
        return 1, normalized(bravais_vectors[populated[-1]])

    if len(independent_pairs) < 3:
        i, j = independent_pairs[0]
        return 2, normalized(np.cross(bravais_vectors[i], bravais_vectors[j]))

    return 3, None


def combine_dimensionality(dims_basis: int,
                           vec_basis: Optional[np.ndarray],
                           dims_translations: int,
                           vec_translations: Optional[np.ndarray],
                           epsilon: float = EPSILON) -> int:
    """
    Combine basis and translation dimensionality.

    Rules
    -----
    - either is 3 -> 3
    - either is 0 -> the other one
    - both equal with (anti)parallel test vectors -> that value
    - both 1, not parallel -> 2
    - both 2, not parallel -> 3
    - one 1 and one 2 -> 2 if the line is orthogonal to the normal, else 3
    """
    if dims_basis == 3 or dims_translations == 3:
        return 3
    if dims_basis == 0:
        return dims_translations
    if dims_translations == 0:
        return dims_basis

    if dims_basis == dims_translations:
        if are_parallel(vec_basis, vec_translations, epsilon):
            return dims_basis
        return dims_basis + 1

    # one line, one plane
    if are_orthogonal(vec_basis, vec_translations, epsilon):
        return 2
    return 3


def calculate_dimensionality(basis_positions: np.ndarray,
                             bravais_vectors: np.ndarray,
                             n_cells: Sequence[int],
                             epsilon: float = EPSILON) -> int:
    """Effective dimensionality (0-3) of the replicated geometry."""
    dims_basis, vec_basis = basis_dimensionality(basis_positions, epsilon)
    dims_translations, vec_translations = translation_dimensionality(bravais_vectors, n_cells, epsilon)
    dims = combine_dimensionality(dims_basis, vec_basis, dims_translations, vec_translations, epsilon)

    logger.debug("Dimensionality: basis=%d, translations=%d -> %d",
                 dims_basis, dims_translations, dims)
    return dims


def classify_lattice_type(bravais_vectors: np.ndarray,
                          n_cell_atoms: int,
                          epsilon: float = EPSILON) -> BravaisLatticeType:
    """
    Recognize simple cubic and rectilinear lattices.

    Only single-atom bases are classified; multi-atom lattices (bcc, fcc,
    hexagonal with a basis) are reported as IRREGULAR.
    """
    if n_cell_atoms != 1:
        return BravaisLatticeType.IRREGULAR

    orthogonal = all(
        are_orthogonal(bravais_vectors[i], bravais_vectors[j], epsilon)
        for i, j in combinations(range(3), 2)
    )
    if not orthogonal:
        return BravaisLatticeType.IRREGULAR

    lengths = np.linalg.norm(bravais_vectors, axis=1)
    if np.all(np.abs(lengths - lengths[0]) < epsilon):
        return BravaisLatticeType.SIMPLE_CUBIC
    return BravaisLatticeType.RECTILINEAR
