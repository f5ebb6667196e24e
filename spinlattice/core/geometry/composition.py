"""
Atom types, moments, pinning masks and defects on the replicated lattice.

Order of application during construction:
1. cell composition (ordered or disordered)
2. boundary-layer pinning
3. explicitly pinned sites (override boundary layers)
4. defects (override type and zero the moment, regardless of pinning)
"""

import logging
import numpy as np
from itertools import product
from typing import Sequence, Tuple

from .descriptors import CellComposition, Defects, Pinning
from .indexing import idx_from_translations

logger = logging.getLogger(__name__)

# Seed of the disordered assignment when none is given
DEFAULT_SEED = 2006


def apply_cell_composition(composition: CellComposition,
                           n_cells: Sequence[int],
                           n_cell_atoms: int,
                           rng: np.random.Generator = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Assign atom types and moments to every site.

    Ordered composition: every listed basis atom gets the first entry that
    names it. Unlisted basis atoms keep type 0 and moment 1.

    Disordered composition: all sites start as vacancies. For each cell
    (a outermost, c innermost) the entries are tried in declared order; an
    entry whose basis slot is still free draws one uniform number and claims
    the slot if the draw is <= its concentration.

    Parameters
    ----------
    composition : CellComposition
        Validated composition
    n_cells : Sequence[int]
        Cells along a, b, c
    n_cell_atoms : int
        Basis size
    rng : np.random.Generator, optional
        Generator for the disordered draws (default: seeded with DEFAULT_SEED)

    Returns
    -------
    atom_types : np.ndarray of int, shape (nos,)
    mu_s : np.ndarray of float, shape (nos,)
    """
    na, nb, nc = n_cells
    nos = n_cell_atoms * na * nb * nc

    atom_types = np.zeros(nos, dtype=int)
    mu_s = np.ones(nos, dtype=float)

    if not composition.disordered:
        visited = set()
        for iatom, atom_type, moment in zip(composition.iatom, composition.atom_type, composition.mu_s):
            if iatom in visited:
                continue
            visited.add(iatom)
            atom_types[iatom::n_cell_atoms] = atom_type
            mu_s[iatom::n_cell_atoms] = moment
        return atom_types, mu_s

    if rng is None:
        rng = np.random.default_rng(DEFAULT_SEED)

    # Unvisited slots remain vacancies
    atom_types[:] = -1
    mu_s[:] = 0.0

    entries = list(zip(composition.iatom, composition.atom_type,
                       composition.mu_s, composition.concentration))
    visited = np.zeros(n_cell_atoms, dtype=bool)

    for a, b, c in product(range(na), range(nb), range(nc)):
        visited[:] = False
        base = idx_from_translations(n_cells, n_cell_atoms, (a, b, c))
        for iatom, atom_type, moment, concentration in entries:
            if visited[iatom]:
                continue
            if rng.random() <= concentration:
                atom_types[base + iatom] = atom_type
                mu_s[base + iatom] = moment
                visited[iatom] = True

    logger.debug("Disordered composition: %d of %d sites occupied",
                 int(np.count_nonzero(atom_types >= 0)), nos)
    return atom_types, mu_s


def cell_index_grids(n_cells: Sequence[int], n_cell_atoms: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """(ibasis, a, b, c) of every site, in site-index order."""
    na, nb, nc = n_cells
    c, b, a, ibasis = np.meshgrid(
        np.arange(nc), np.arange(nb), np.arange(na), np.arange(n_cell_atoms),
        indexing='ij'
    )
    return ibasis.ravel(), a.ravel(), b.ravel(), c.ravel()


def apply_boundary_pinning(pinning: Pinning,
                           n_cells: Sequence[int],
                           n_cell_atoms: int,
                           mask_unpinned: np.ndarray,
                           mask_pinned_cells: np.ndarray) -> None:
    """
    Pin every site whose cell lies within a boundary layer.

    A site in cell (a, b, c) is pinned when, on any axis, its cell index is
    below the left thickness or at least ``n - right``. Its fixed direction
    is ``pinning.pinned_cell[ibasis]``. Masks are modified in place.
    """
    if not any(left or right for left, right in pinning.boundary_layers):
        return

    if pinning.pinned_cell is None:
        pinned_cell = np.tile([0.0, 0.0, 1.0], (n_cell_atoms, 1))
    else:
        pinned_cell = np.asarray(pinning.pinned_cell, dtype=float)

    ibasis, *cells = cell_index_grids(n_cells, n_cell_atoms)
    in_layer = np.zeros(len(ibasis), dtype=bool)
    for cell, n, (left, right) in zip(cells, n_cells, pinning.boundary_layers):
        in_layer |= (cell < left) | (cell >= n - right)

    mask_unpinned[in_layer] = 0
    mask_pinned_cells[in_layer] = pinned_cell[ibasis[in_layer]]

    logger.debug("Boundary pinning: %d sites pinned", int(np.count_nonzero(in_layer)))


def apply_pinned_sites(pinning: Pinning,
                       n_cells: Sequence[int],
                       n_cell_atoms: int,
                       mask_unpinned: np.ndarray,
                       mask_pinned_cells: np.ndarray) -> None:
    """Pin the explicitly listed sites, overriding boundary-layer directions."""
    for site, spin in zip(pinning.sites, pinning.spins):
        ispin = idx_from_translations(n_cells, n_cell_atoms, site.translations, site.i)
        mask_unpinned[ispin] = 0
        mask_pinned_cells[ispin] = spin


def apply_defects(defects: Defects,
                  n_cells: Sequence[int],
                  n_cell_atoms: int,
                  atom_types: np.ndarray,
                  mu_s: np.ndarray) -> None:
    """Override the atom type of each defect site and set its moment to zero."""
    for site, atom_type in zip(defects.sites, defects.types):
        ispin = idx_from_translations(n_cells, n_cell_atoms, site.translations, site.i)
        atom_types[ispin] = atom_type
        mu_s[ispin] = 0.0
