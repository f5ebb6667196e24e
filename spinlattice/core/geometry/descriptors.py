"""
Input descriptors for a Geometry.

These dataclasses carry the raw configuration (composition, pinning,
defects) before it is expanded onto the replicated lattice. The
``validate_geometry_inputs`` pass checks them against the lattice and raises
ConfigurationError naming the offending entry.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..exceptions import ConfigurationError, DegenerateGeometryError
from ...utils.math_utils import EPSILON


@dataclass
class Site:
    """
    A single lattice site addressed by basis index and cell translation.

    Attributes
    ----------
    i : int
        Index of the atom in the basis
    translations : Tuple[int, int, int]
        Cell (a, b, c) the site belongs to
    """
    i: int
    translations: Tuple[int, int, int] = (0, 0, 0)

    def __post_init__(self):
        self.i = int(self.i)
        self.translations = tuple(int(t) for t in self.translations)


@dataclass
class CellComposition:
    """
    Atom types and moments of the basis atoms.

    Each entry k assigns ``atom_type[k]`` and ``mu_s[k]`` to basis atom
    ``iatom[k]``. In the disordered case the entry only applies with
    probability ``concentration[k]``; entries are tried in order and the
    first accepted one claims the basis slot for that cell.

    Attributes
    ----------
    disordered : bool
        Random (alloy) assignment if True
    iatom : List[int]
        Basis index of each entry
    atom_type : List[int]
        Atom type of each entry (negative = vacancy)
    mu_s : List[float]
        Magnetic moment magnitude of each entry
    concentration : List[float]
        Probability of each entry in the disordered case, in [0, 1]
    """
    disordered: bool = False
    iatom: List[int] = field(default_factory=list)
    atom_type: List[int] = field(default_factory=list)
    mu_s: List[float] = field(default_factory=list)
    concentration: List[float] = field(default_factory=list)

    @classmethod
    def ordered(cls, n_cell_atoms: int, mu_s: float = 1.0, atom_type: int = 0) -> 'CellComposition':
        """One entry per basis atom, all with the same type and moment."""
        return cls(
            disordered=False,
            iatom=list(range(n_cell_atoms)),
            atom_type=[atom_type] * n_cell_atoms,
            mu_s=[mu_s] * n_cell_atoms,
            concentration=[1.0] * n_cell_atoms
        )

    def __len__(self) -> int:
        return len(self.iatom)

    def to_dict(self) -> dict:
        return {
            'disordered': self.disordered,
            'atoms': [
                {'index': i, 'type': t, 'mu_s': m, 'concentration': c}
                for i, t, m, c in zip(self.iatom, self.atom_type, self.mu_s, self.concentration)
            ]
        }


@dataclass
class Pinning:
    """
    Pinned sites of the geometry.

    Boundary layers: every site whose cell index along an axis is smaller
    than the ``*_left`` thickness or within ``*_right`` of the upper end is
    pinned to ``pinned_cell[basis_index]``. Explicit ``sites`` are pinned
    to the matching entry of ``spins`` afterwards and take precedence.

    Attributes
    ----------
    na_left, na_right, nb_left, nb_right, nc_left, nc_right : int
        Boundary-layer thickness in cells on each side of each axis
    pinned_cell : np.ndarray, shape (n_cell_atoms, 3), optional
        Direction per basis atom used for boundary layers (default: +z)
    sites : List[Site]
        Individually pinned sites
    spins : List[np.ndarray]
        Fixed direction of each entry in ``sites``
    """
    na_left: int = 0
    na_right: int = 0
    nb_left: int = 0
    nb_right: int = 0
    nc_left: int = 0
    nc_right: int = 0
    pinned_cell: Optional[np.ndarray] = None
    sites: List[Site] = field(default_factory=list)
    spins: List[np.ndarray] = field(default_factory=list)

    @property
    def boundary_layers(self) -> Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]:
        """(left, right) thickness per axis."""
        return ((self.na_left, self.na_right),
                (self.nb_left, self.nb_right),
                (self.nc_left, self.nc_right))

    def to_dict(self) -> dict:
        data = {
            'na_left': self.na_left, 'na_right': self.na_right,
            'nb_left': self.nb_left, 'nb_right': self.nb_right,
            'nc_left': self.nc_left, 'nc_right': self.nc_right,
            'sites': [
                {'index': site.i, 'translations': list(site.translations),
                 'spin': np.asarray(spin, dtype=float).tolist()}
                for site, spin in zip(self.sites, self.spins)
            ]
        }
        if self.pinned_cell is not None:
            data['pinned_cell'] = np.asarray(self.pinned_cell, dtype=float).tolist()
        return data


@dataclass
class Defects:
    """
    Sites whose atom type is overridden; their moment is set to zero.

    Attributes
    ----------
    sites : List[Site]
        Defect sites
    types : List[int]
        Atom type of each defect (negative = vacancy)
    """
    sites: List[Site] = field(default_factory=list)
    types: List[int] = field(default_factory=list)

    def to_dict(self) -> List[dict]:
        return [
            {'index': site.i, 'translations': list(site.translations), 'type': int(t)}
            for site, t in zip(self.sites, self.types)
        ]


def _check_site(site: Site, label: str, n_cell_atoms: int, n_cells: Sequence[int]) -> None:
    if not 0 <= site.i < n_cell_atoms:
        raise ConfigurationError(
            f"{label}: basis index {site.i} out of range [0, {n_cell_atoms})")
    if len(site.translations) != 3:
        raise ConfigurationError(
            f"{label}: translations must have 3 components, got {site.translations}")
    for axis, (t, n) in enumerate(zip(site.translations, n_cells)):
        if not 0 <= t < n:
            raise ConfigurationError(
                f"{label}: translation {site.translations} lies outside the system "
                f"(axis {axis} has {n} cells)")


def validate_composition(composition: CellComposition, n_cell_atoms: int) -> None:
    """Check a CellComposition against the number of basis atoms."""
    if len(composition) == 0:
        raise ConfigurationError("Cell composition is empty: at least one atom type is required")

    lengths = {
        'iatom': len(composition.iatom),
        'atom_type': len(composition.atom_type),
        'mu_s': len(composition.mu_s),
        'concentration': len(composition.concentration),
    }
    if len(set(lengths.values())) != 1:
        raise ConfigurationError(f"Cell composition lists have mismatched lengths: {lengths}")

    for k, (iatom, conc) in enumerate(zip(composition.iatom, composition.concentration)):
        if not 0 <= iatom < n_cell_atoms:
            raise ConfigurationError(
                f"Composition entry {k}: basis index {iatom} out of range [0, {n_cell_atoms})")
        if not 0.0 <= conc <= 1.0:
            raise ConfigurationError(
                f"Composition entry {k}: concentration {conc} is not in [0, 1]")


def validate_pinning(pinning: Pinning, n_cell_atoms: int, n_cells: Sequence[int]) -> None:
    """Check boundary thicknesses, the pinned cell and explicit pinned sites."""
    names = ('na_left', 'na_right', 'nb_left', 'nb_right', 'nc_left', 'nc_right')
    for name in names:
        if getattr(pinning, name) < 0:
            raise ConfigurationError(f"Pinning: {name} must be non-negative, got {getattr(pinning, name)}")

    if pinning.pinned_cell is not None:
        shape = np.shape(pinning.pinned_cell)
        if shape != (n_cell_atoms, 3):
            raise ConfigurationError(
                f"Pinning: pinned_cell must have shape ({n_cell_atoms}, 3), got {shape}")

    if len(pinning.sites) != len(pinning.spins):
        raise ConfigurationError(
            f"Pinning: {len(pinning.sites)} pinned sites but {len(pinning.spins)} spin directions")

    for k, (site, spin) in enumerate(zip(pinning.sites, pinning.spins)):
        _check_site(site, f"Pinned site {k}", n_cell_atoms, n_cells)
        if np.shape(spin) != (3,):
            raise ConfigurationError(f"Pinned site {k}: spin must have 3 components, got {spin}")


def validate_defects(defects: Defects, n_cell_atoms: int, n_cells: Sequence[int]) -> None:
    if len(defects.sites) != len(defects.types):
        raise ConfigurationError(
            f"Defects: {len(defects.sites)} sites but {len(defects.types)} atom types")
    for k, site in enumerate(defects.sites):
        _check_site(site, f"Defect {k}", n_cell_atoms, n_cells)


def validate_geometry_inputs(bravais_vectors: np.ndarray,
                             n_cells: Sequence[int],
                             cell_atoms: np.ndarray,
                             lattice_constant: float,
                             composition: CellComposition,
                             pinning: Pinning,
                             defects: Defects) -> None:
    """
    Validation pass run before any geometry is built.

    Raises
    ------
    ConfigurationError
        Describing the first offending entry
    DegenerateGeometryError
        If the Bravais vectors span no volume
    """
    if np.shape(bravais_vectors) != (3, 3):
        raise ConfigurationError(
            f"Exactly 3 Bravais vectors in 3D are required, got shape {np.shape(bravais_vectors)}")
    volume = abs(np.linalg.det(bravais_vectors))
    if volume < EPSILON:
        # Zero or coplanar vectors give coincident sites
        raise DegenerateGeometryError(
            f"Bravais vectors are linearly dependent (cell volume {volume:.3g}): "
            f"{np.asarray(bravais_vectors).tolist()}")
    if len(n_cells) != 3 or any(n < 1 for n in n_cells):
        raise ConfigurationError(f"n_cells must be 3 positive integers, got {tuple(n_cells)}")
    if cell_atoms.ndim != 2 or cell_atoms.shape[1] != 3 or len(cell_atoms) == 0:
        raise ConfigurationError(
            f"cell_atoms must have shape (N, 3) with N >= 1, got {cell_atoms.shape}")
    try:
        positive = float(lattice_constant) > 0
    except (TypeError, ValueError):
        positive = False
    if not positive:
        raise ConfigurationError(f"Lattice constant must be positive, got {lattice_constant}")

    n_cell_atoms = len(cell_atoms)
    validate_composition(composition, n_cell_atoms)
    validate_pinning(pinning, n_cell_atoms, n_cells)
    validate_defects(defects, n_cell_atoms, n_cells)
