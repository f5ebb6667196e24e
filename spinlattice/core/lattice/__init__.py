"""
Lattice template module.

This module provides abstract and concrete implementations of Bravais
lattices. Lattices represent ONLY the unit cell - replication and site
properties live in the Geometry.

Available lattices:
- SimpleCubicLattice
- FCCLattice, BCCLattice: primitive cubic settings
- Hexagonal60Lattice, Hexagonal120Lattice: 2D hexagonal
- CustomLattice: arbitrary vectors and basis
"""

from .base import AbstractLattice
from .presets import (
    SimpleCubicLattice,
    FCCLattice,
    BCCLattice,
    Hexagonal60Lattice,
    Hexagonal120Lattice,
    CustomLattice,
    LATTICE_REGISTRY,
    create_lattice
)

__all__ = [
    'AbstractLattice',
    'SimpleCubicLattice',
    'FCCLattice',
    'BCCLattice',
    'Hexagonal60Lattice',
    'Hexagonal120Lattice',
    'CustomLattice',
    'LATTICE_REGISTRY',
    'create_lattice',
]
