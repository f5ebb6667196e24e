"""
Abstract base class for Bravais lattices with a basis.

This module defines the interface that all lattice types must implement.
Lattices are purely geometric templates - they contain NO information about
replication counts, atom types or magnetic moments. Those are added when a
lattice is expanded into a Geometry.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import List


class AbstractLattice(ABC):
    """
    Abstract base class for three-dimensional Bravais lattices.

    This represents the unit-cell TEMPLATE of the crystal only:
    - Bravais (primitive) translation vectors
    - Basis atoms in fractional coordinates

    It contains NO information about:
    - How many times the cell is repeated (n_cells)
    - Composition, moments, pinning or defects

    These are handled by the Geometry class, which combines a lattice with
    replication counts and site properties.

    Design Philosophy
    -----------------
    Separation of concerns:
    - Lattice = unit cell template (this class)
    - Geometry = replicated, decorated point cloud

    This enables:
    - Reusing the same lattice for systems of different size
    - Testing lattice vectors independently of the expansion logic

    Parameters
    ----------
    lattice_constant : float
        Uniform length scale applied to all Bravais vectors
    """

    def __init__(self, lattice_constant: float = 1.0):
        if lattice_constant <= 0:
            raise ValueError("Lattice constant must be positive")

        self.lattice_constant = lattice_constant

    @abstractmethod
    def get_primitive_vectors(self) -> np.ndarray:
        """
        Get Bravais vectors in units of the lattice constant.

        Returns
        -------
        vectors : np.ndarray, shape (3, 3)
            Primitive vectors [a1, a2, a3], one vector per row.

        Notes
        -----
        Two-dimensional lattices still return three vectors; the third one
        is the stacking direction (usually z) and is only populated when the
        geometry is replicated along it.

        Examples
        --------
        Simple cubic:
            [[1, 0, 0],
             [0, 1, 0],
             [0, 0, 1]]
        """
        pass

    def get_basis_positions(self) -> List[np.ndarray]:
        """
        Get positions of atoms within the unit cell (basis).

        Returns
        -------
        positions : List[np.ndarray]
            Basis positions in fractional coordinates of the Bravais vectors.

        Notes
        -----
        Default implementation is a single atom at the origin.
        Subclasses with a multi-atom basis should override.
        """
        return [np.zeros(3)]

    def get_lattice_constant(self) -> float:
        return self.lattice_constant

    def __repr__(self) -> str:
        """String representation of the lattice."""
        name = self.__class__.__name__
        a = self.get_lattice_constant()
        num_basis = len(self.get_basis_positions())
        return f"{name}(a={a:.3f}, basis_atoms={num_basis})"
