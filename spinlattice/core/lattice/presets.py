"""
Preset Bravais lattices for common spin systems.

This module provides concrete implementations of AbstractLattice for:
- Simple cubic
- Face-centred cubic (primitive vectors)
- Body-centred cubic (primitive vectors)
- 2D hexagonal with 60° and 120° between a1 and a2
- Custom lattice from user-supplied vectors and basis
"""

import numpy as np
from typing import List, Optional, Sequence
from .base import AbstractLattice


class SimpleCubicLattice(AbstractLattice):
    """
    Simple cubic Bravais lattice.

    Primitive vectors (in units of the lattice constant a):
        a1 = [1, 0, 0]
        a2 = [0, 1, 0]
        a3 = [0, 0, 1]

    Examples
    --------
    >>> lattice = SimpleCubicLattice(lattice_constant=1.0)
    >>> lattice.get_lattice_constant()
    1.0
    """

    def get_primitive_vectors(self) -> np.ndarray:
        return np.eye(3)


class FCCLattice(AbstractLattice):
    """
    Face-centred cubic lattice, primitive (single atom) setting.

    Primitive vectors:
        a1 = [1/2, 0, 1/2]
        a2 = [1/2, 1/2, 0]
        a3 = [0, 1/2, 1/2]

    Notes
    -----
    The primitive cell volume is a³/4.
    """

    def get_primitive_vectors(self) -> np.ndarray:
        return np.array([
            [0.5, 0.0, 0.5],
            [0.5, 0.5, 0.0],
            [0.0, 0.5, 0.5]
        ])


class BCCLattice(AbstractLattice):
    """
    Body-centred cubic lattice, primitive (single atom) setting.

    Primitive vectors:
        a1 = [ 1/2,  1/2, -1/2]
        a2 = [-1/2,  1/2, -1/2]
        a3 = [ 1/2, -1/2, -1/2]

    Notes
    -----
    The primitive cell volume is a³/2.
    """

    def get_primitive_vectors(self) -> np.ndarray:
        return np.array([
            [0.5, 0.5, -0.5],
            [-0.5, 0.5, -0.5],
            [0.5, -0.5, -0.5]
        ])


class Hexagonal60Lattice(AbstractLattice):
    """
    Two-dimensional hexagonal lattice with 60° between a1 and a2.

    Primitive vectors:
        a1 = [√3/2, -1/2, 0]
        a2 = [√3/2,  1/2, 0]
        a3 = [0, 0, 1]      (stacking direction)
    """

    def get_primitive_vectors(self) -> np.ndarray:
        return np.array([
            [0.5 * np.sqrt(3), -0.5, 0.0],
            [0.5 * np.sqrt(3), 0.5, 0.0],
            [0.0, 0.0, 1.0]
        ])


class Hexagonal120Lattice(AbstractLattice):
    """
    Two-dimensional hexagonal lattice with 120° between a1 and a2.

    Primitive vectors:
        a1 = [1/2, -√3/2, 0]
        a2 = [1/2,  √3/2, 0]
        a3 = [0, 0, 1]      (stacking direction)
    """

    def get_primitive_vectors(self) -> np.ndarray:
        return np.array([
            [0.5, -0.5 * np.sqrt(3), 0.0],
            [0.5, 0.5 * np.sqrt(3), 0.0],
            [0.0, 0.0, 1.0]
        ])


class CustomLattice(AbstractLattice):
    """
    Lattice defined directly by Bravais vectors and a basis.

    Parameters
    ----------
    bravais_vectors : array-like, shape (3, 3)
        Three translation vectors, one per row
    basis : Sequence of array-like, optional
        Fractional coordinates of the basis atoms (default: one atom at origin)
    lattice_constant : float, optional
        Length scale (default: 1.0)

    Examples
    --------
    Square lattice with a two-atom basis:

    >>> lattice = CustomLattice(np.eye(3), basis=[[0, 0, 0], [0.5, 0.5, 0]])
    >>> len(lattice.get_basis_positions())
    2
    """

    def __init__(self,
                 bravais_vectors,
                 basis: Optional[Sequence] = None,
                 lattice_constant: float = 1.0):
        super().__init__(lattice_constant)

        vectors = np.array(bravais_vectors, dtype=float)
        if vectors.shape != (3, 3):
            raise ValueError(f"bravais_vectors must have shape (3, 3), got {vectors.shape}")
        self._vectors = vectors

        if basis is None:
            basis = [[0.0, 0.0, 0.0]]
        basis = np.array(basis, dtype=float)
        if basis.ndim != 2 or basis.shape[1] != 3 or len(basis) == 0:
            raise ValueError(f"basis must have shape (N, 3) with N >= 1, got {basis.shape}")
        self._basis = basis

    def get_primitive_vectors(self) -> np.ndarray:
        return self._vectors.copy()

    def get_basis_positions(self) -> List[np.ndarray]:
        return [atom.copy() for atom in self._basis]


# Lattice registry for config-based construction
LATTICE_REGISTRY = {
    'sc': SimpleCubicLattice,
    'fcc': FCCLattice,
    'bcc': BCCLattice,
    'hex2d60': Hexagonal60Lattice,
    'hex2d120': Hexagonal120Lattice,
    'custom': CustomLattice,
}


def create_lattice(lattice_type: str, **kwargs) -> AbstractLattice:
    """
    Factory function to create lattices from string names.

    Parameters
    ----------
    lattice_type : str
        Type of lattice ('sc', 'fcc', 'bcc', 'hex2d60', 'hex2d120', 'custom')
    **kwargs
        Additional arguments passed to lattice constructor
        (e.g., lattice_constant=1.5)

    Returns
    -------
    lattice : AbstractLattice
        Instantiated lattice object

    Examples
    --------
    >>> lattice = create_lattice('fcc', lattice_constant=3.6)
    >>> isinstance(lattice, FCCLattice)
    True

    Raises
    ------
    ValueError
        If lattice_type is not recognized
    """
    key = lattice_type.lower()
    if key not in LATTICE_REGISTRY:
        available = ', '.join(LATTICE_REGISTRY.keys())
        raise ValueError(f"Unknown lattice type '{lattice_type}'. "
                         f"Available types: {available}")

    lattice_class = LATTICE_REGISTRY[key]
    return lattice_class(**kwargs)
