"""
Geometry: the replicated, decorated lattice of a spin system.

This module defines the Geometry class which combines:
- Bravais vectors and a basis (the unit cell)
- Replication counts along each Bravais vector
- Composition (atom types and moments, ordered or disordered)
- Pinning and defects

The geometry is built once and is read-only afterwards. Only the
triangulation/tetrahedra caches change, in response to mesh queries.
"""

import logging
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from ..exceptions import ConfigurationError
from ..lattice import AbstractLattice
from .classifier import BravaisLatticeType, calculate_dimensionality, classify_lattice_type
from .composition import (
    DEFAULT_SEED,
    apply_boundary_pinning,
    apply_cell_composition,
    apply_defects,
    apply_pinned_sites,
    cell_index_grids,
)
from .descriptors import CellComposition, Defects, Pinning, validate_geometry_inputs
from .filters import position_filter
from .indexing import idx_from_translations, translations_from_idx
from .positions import calculate_bounds, calculate_cell_bounds, check_unique_basis, generate_positions
from . import triangulation as meshing

logger = logging.getLogger(__name__)


def _freeze(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def _cell_counts(n_cells) -> Tuple[int, ...]:
    """Replication counts as ints; non-integral values are rejected, not truncated."""
    try:
        values = tuple(n_cells)
        counts = tuple(int(n) for n in values)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"n_cells must be 3 positive integers, got {n_cells!r}") from exc

    if any(isinstance(n, (str, bytes)) or count != n for count, n in zip(counts, values)):
        raise ConfigurationError(f"n_cells must be 3 positive integers, got {values}")
    return counts


class Geometry:
    """
    Spatial description of a lattice of magnetic moments.

    Construction runs, in order:
    1. input validation
    2. position generation (with a check for coincident sites)
    3. bounds, center and dimensionality
    4. composition, pinning masks and defects
    5. lattice-type classification

    Parameters
    ----------
    bravais_vectors : array-like, shape (3, 3)
        Translation vectors of the unit cell, one per row
    n_cells : Sequence[int]
        Number of cells along each Bravais vector
    cell_atoms : array-like, shape (N, 3)
        Basis atoms in fractional coordinates
    cell_composition : CellComposition, optional
        Atom types and moments (default: every basis atom type 0, mu_s 1)
    lattice_constant : float, optional
        Length scale (default: 1.0)
    pinning : Pinning, optional
        Boundary layers and individually pinned sites
    defects : Defects, optional
        Sites with overridden atom type
    pinning_enabled : bool, optional
        Whether ``apply_pinning`` enforces the pinned directions (default: True)
    seed : int, optional
        Seed of the disordered-composition draws (default: 2006)

    Attributes
    ----------
    nos : int
        Number of sites
    nos_nonvacant : int
        Number of sites with non-negative atom type
    positions : np.ndarray, shape (nos, 3)
        Absolute site positions
    atom_types : np.ndarray, shape (nos,)
        Atom type per site; negative means vacancy
    mu_s : np.ndarray, shape (nos,)
        Moment magnitude per site (0 for vacancies and defects)
    mask_unpinned : np.ndarray, shape (nos,)
        1 for free sites, 0 for pinned sites
    mask_pinned_cells : np.ndarray, shape (nos, 3)
        Fixed direction of pinned sites (zero elsewhere)
    dimensionality : int
        Effective dimension 0-3
    classifier : BravaisLatticeType
        Coarse lattice type

    Raises
    ------
    ConfigurationError
        If any input descriptor is malformed
    DegenerateGeometryError
        If two sites occupy the same position or the Bravais vectors are
        linearly dependent

    Examples
    --------
    A 10 x 10 square monolayer:

    >>> geometry = Geometry(np.eye(3), (10, 10, 1), [[0, 0, 0]])
    >>> geometry.nos, geometry.dimensionality
    (100, 2)
    """

    def __init__(self,
                 bravais_vectors,
                 n_cells: Sequence[int],
                 cell_atoms,
                 cell_composition: Optional[CellComposition] = None,
                 lattice_constant: float = 1.0,
                 pinning: Optional[Pinning] = None,
                 defects: Optional[Defects] = None,
                 pinning_enabled: bool = True,
                 seed: int = DEFAULT_SEED):
        bravais_vectors = np.array(bravais_vectors, dtype=float)
        cell_atoms = np.array(cell_atoms, dtype=float)
        n_cells = _cell_counts(n_cells)
        if cell_composition is None:
            cell_composition = CellComposition.ordered(len(cell_atoms))
        pinning = pinning if pinning is not None else Pinning()
        defects = defects if defects is not None else Defects()

        validate_geometry_inputs(bravais_vectors, n_cells, cell_atoms, lattice_constant,
                                 cell_composition, pinning, defects)

        # Store inputs
        self.bravais_vectors = _freeze(bravais_vectors)
        self.n_cells = n_cells
        self.cell_atoms = _freeze(cell_atoms)
        self.cell_composition = cell_composition
        self.lattice_constant = float(lattice_constant)
        self.pinning = pinning
        self.defects = defects
        self.pinning_enabled = pinning_enabled
        self.seed = seed

        self.n_cell_atoms = len(cell_atoms)
        self.n_cells_total = n_cells[0] * n_cells[1] * n_cells[2]
        self.nos = self.n_cell_atoms * self.n_cells_total

        # Positions
        check_unique_basis(bravais_vectors, n_cells, cell_atoms, self.lattice_constant)
        self.positions = _freeze(generate_positions(bravais_vectors, n_cells, cell_atoms,
                                                    self.lattice_constant))

        # Bounds and dimensionality
        self.bounds_min, self.bounds_max = calculate_bounds(self.positions)
        self.cell_bounds_min, self.cell_bounds_max = calculate_cell_bounds(
            bravais_vectors, self.positions[:self.n_cell_atoms], self.lattice_constant)
        self.center = 0.5 * (self.bounds_min + self.bounds_max)
        self.dimensionality = calculate_dimensionality(
            self.positions[:self.n_cell_atoms], bravais_vectors, n_cells)

        # Composition, pinning and defects
        rng = np.random.default_rng(seed)
        atom_types, mu_s = apply_cell_composition(cell_composition, n_cells, self.n_cell_atoms, rng)

        mask_unpinned = np.ones(self.nos, dtype=int)
        mask_pinned_cells = np.zeros((self.nos, 3), dtype=float)
        apply_boundary_pinning(pinning, n_cells, self.n_cell_atoms, mask_unpinned, mask_pinned_cells)
        apply_pinned_sites(pinning, n_cells, self.n_cell_atoms, mask_unpinned, mask_pinned_cells)
        apply_defects(defects, n_cells, self.n_cell_atoms, atom_types, mu_s)

        # Vacancies carry no moment
        mu_s[atom_types < 0] = 0.0

        self.atom_types = _freeze(atom_types)
        self.mu_s = _freeze(mu_s)
        self.mask_unpinned = _freeze(mask_unpinned)
        self.mask_pinned_cells = _freeze(mask_pinned_cells)
        self.nos_nonvacant = int(np.count_nonzero(atom_types >= 0))

        self.classifier = classify_lattice_type(bravais_vectors, self.n_cell_atoms)

        # Mesh caches, filled on demand
        self._triangulation_cache = meshing.MeshCache()
        self._tetrahedra_cache = meshing.MeshCache()

        logger.info("Geometry with %d sites (%d non-vacant) created: %s, %dD",
                    self.nos, self.nos_nonvacant, self.classifier.value, self.dimensionality)

    # ------------------------------------------------------------------
    # Alternative constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_lattice(cls,
                     lattice: AbstractLattice,
                     n_cells: Sequence[int],
                     **kwargs) -> 'Geometry':
        """
        Build a geometry by replicating a lattice template.

        Parameters
        ----------
        lattice : AbstractLattice
            Unit cell (vectors, basis, lattice constant)
        n_cells : Sequence[int]
            Replication counts
        **kwargs
            Passed to ``Geometry`` (cell_composition, pinning, defects, ...)

        Examples
        --------
        >>> from spinlattice.core.lattice import SimpleCubicLattice
        >>> geometry = Geometry.from_lattice(SimpleCubicLattice(), (3, 3, 3))
        >>> geometry.classifier
        <BravaisLatticeType.SIMPLE_CUBIC: 'simple cubic'>
        """
        if not isinstance(lattice, AbstractLattice):
            raise TypeError("lattice must be an AbstractLattice instance")

        return cls(
            bravais_vectors=lattice.get_primitive_vectors(),
            n_cells=n_cells,
            cell_atoms=np.array(lattice.get_basis_positions()),
            lattice_constant=lattice.get_lattice_constant(),
            **kwargs
        )

    @classmethod
    def from_config(cls, config_path: Union[str, Path]) -> 'Geometry':
        """
        Load a geometry from a YAML configuration file.

        See ``spinlattice.io.config_loader`` for the file format.
        """
        from ...io.config_loader import load_geometry

        return load_geometry(config_path)

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def site_index(self, ibasis: int, translations: Sequence[int]) -> int:
        """Index of basis atom ``ibasis`` in cell ``translations``."""
        return idx_from_translations(self.n_cells, self.n_cell_atoms, translations, ibasis)

    def site_translations(self, idx: int):
        """(ibasis, a, b, c) of site ``idx``."""
        return translations_from_idx(self.n_cells, self.n_cell_atoms, idx)

    # ------------------------------------------------------------------
    # Meshes
    # ------------------------------------------------------------------

    def strided_site_indices(self, n_cell_step: int = 1) -> np.ndarray:
        """Site index of each vertex of ``triangulation``/``tetrahedra`` for this step."""
        return meshing.strided_site_indices(self.n_cells, self.n_cell_atoms, n_cell_step)

    def triangulation(self, n_cell_step: int = 1) -> np.ndarray:
        """
        Delaunay triangles of a 2D geometry.

        Parameters
        ----------
        n_cell_step : int
            Use only every n-th cell along each axis

        Returns
        -------
        triangles : np.ndarray of int, shape (m, 3)
            Indices into the strided point list (see ``strided_site_indices``).
            Empty if the geometry is not 2D or too few cells remain.

        Notes
        -----
        The result is cached per (n_cell_step, n_cells); repeated calls with
        the same step return the same read-only array.
        """
        if n_cell_step < 1:
            raise ValueError(f"n_cell_step must be at least 1, got {n_cell_step}")

        if self.dimensionality != 2 or not meshing.has_enough_cells(self.n_cells, n_cell_step):
            return meshing.empty_mesh(3)

        return self._triangulation_cache.fetch(
            n_cell_step, self.n_cells,
            lambda: meshing.build_triangulation(self.positions, self.n_cells,
                                                self.n_cell_atoms, n_cell_step)
        )

    def tetrahedra(self, n_cell_step: int = 1) -> np.ndarray:
        """
        Delaunay tetrahedra of a 3D geometry.

        Returns
        -------
        tetrahedra : np.ndarray of int, shape (m, 4)
            Indices into the strided point list. Empty if the geometry is not
            3D or too few cells remain.

        Notes
        -----
        Single-atom lattices are split into 6 tetrahedra per strided cell
        without calling the Delaunay backend.
        """
        if n_cell_step < 1:
            raise ValueError(f"n_cell_step must be at least 1, got {n_cell_step}")

        if self.dimensionality != 3 or not meshing.has_enough_cells(self.n_cells, n_cell_step):
            return meshing.empty_mesh(4)

        return self._tetrahedra_cache.fetch(
            n_cell_step, self.n_cells,
            lambda: meshing.build_tetrahedra(self.positions, self.n_cells,
                                             self.n_cell_atoms, n_cell_step)
        )

    # ------------------------------------------------------------------
    # Pinning and site selection
    # ------------------------------------------------------------------

    @property
    def pinned_sites(self) -> np.ndarray:
        """Indices of all pinned sites."""
        return np.flatnonzero(self.mask_unpinned == 0)

    def apply_pinning(self, vectorfield: np.ndarray) -> np.ndarray:
        """
        Overwrite pinned sites of ``vectorfield`` with their fixed directions.

        Called by the simulation after each update step. Does nothing when
        ``pinning_enabled`` is False.

        Parameters
        ----------
        vectorfield : np.ndarray, shape (nos, 3)
            Modified in place

        Returns
        -------
        vectorfield : np.ndarray
            The same array, for chaining
        """
        if np.shape(vectorfield) != (self.nos, 3):
            raise ValueError(f"vectorfield must have shape ({self.nos}, 3), got {np.shape(vectorfield)}")

        if self.pinning_enabled:
            pinned = self.mask_unpinned == 0
            vectorfield[pinned] = self.mask_pinned_cells[pinned]
        return vectorfield

    def filter_sites(self,
                     position: Sequence[float] = (0.0, 0.0, 0.0),
                     r_cut_rectangular: Sequence[float] = (-1.0, -1.0, -1.0),
                     r_cut_cylindrical: float = -1.0,
                     r_cut_spherical: float = -1.0,
                     inverted: bool = False) -> np.ndarray:
        """
        Boolean mask of sites inside a region around ``center + position``.

        Negative cut-offs are ignored. See ``filters.position_filter``.
        """
        site_filter = position_filter(self.center + np.asarray(position, dtype=float),
                                      r_cut_rectangular, r_cut_cylindrical,
                                      r_cut_spherical, inverted)
        return site_filter(self.positions)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the construction inputs.

        The result can be passed to ``spinlattice.io.geometry_from_dict`` to
        rebuild an identical geometry.
        """
        return {
            'bravais_vectors': self.bravais_vectors.tolist(),
            'basis': self.cell_atoms.tolist(),
            'n_cells': list(self.n_cells),
            'lattice_constant': self.lattice_constant,
            'seed': self.seed,
            'enable_pinning': self.pinning_enabled,
            'composition': self.cell_composition.to_dict(),
            'pinning': self.pinning.to_dict(),
            'defects': self.defects.to_dict(),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """
        Per-site table: basis index, cell, position, type, moment, pinning.
        """
        ibasis, a, b, c = cell_index_grids(self.n_cells, self.n_cell_atoms)
        return pd.DataFrame({
            'ibasis': ibasis,
            'a': a,
            'b': b,
            'c': c,
            'x': self.positions[:, 0],
            'y': self.positions[:, 1],
            'z': self.positions[:, 2],
            'atom_type': self.atom_types,
            'mu_s': self.mu_s,
            'pinned': self.mask_unpinned == 0,
        }, index=pd.RangeIndex(self.nos, name='site'))

    def __repr__(self) -> str:
        """String representation."""
        return (f"Geometry(n_cells={self.n_cells}, "
                f"basis_atoms={self.n_cell_atoms}, "
                f"nos={self.nos}, "
                f"dimensionality={self.dimensionality})")

    def __str__(self) -> str:
        """Detailed string representation."""
        lines = [
            "="*50,
            "Geometry",
            "="*50,
            f"Lattice type: {self.classifier.value}",
            f"Lattice constant: {self.lattice_constant}",
            f"Cells: {self.n_cells[0]} x {self.n_cells[1]} x {self.n_cells[2]}",
            f"Basis atoms: {self.n_cell_atoms}",
            f"Sites: {self.nos} ({self.nos_nonvacant} non-vacant)",
            f"Pinned sites: {len(self.pinned_sites)}",
            f"Dimensionality: {self.dimensionality}",
            f"Bounds: {self.bounds_min} .. {self.bounds_max}",
            "="*50,
        ]
        return "\n".join(lines)
