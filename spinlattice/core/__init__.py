"""
Core domain models for the spinlattice package.

This module contains the fundamental abstractions:
- Lattice: unit cell template (Bravais vectors + basis)
- Geometry: replicated lattice with composition, pinning and defects

These are the building blocks consumed by field evaluation, solvers and
visualisation code.
"""

from .exceptions import GeometryError, DegenerateGeometryError, ConfigurationError

from .lattice import (
    AbstractLattice,
    SimpleCubicLattice,
    FCCLattice,
    BCCLattice,
    Hexagonal60Lattice,
    Hexagonal120Lattice,
    CustomLattice,
    LATTICE_REGISTRY,
    create_lattice
)

from .geometry import (
    Site,
    CellComposition,
    Pinning,
    Defects,
    BravaisLatticeType,
    Geometry
)

__all__ = [
    # Errors
    'GeometryError',
    'DegenerateGeometryError',
    'ConfigurationError',

    # Lattice
    'AbstractLattice',
    'SimpleCubicLattice',
    'FCCLattice',
    'BCCLattice',
    'Hexagonal60Lattice',
    'Hexagonal120Lattice',
    'CustomLattice',
    'LATTICE_REGISTRY',
    'create_lattice',

    # Geometry
    'Site',
    'CellComposition',
    'Pinning',
    'Defects',
    'BravaisLatticeType',
    'Geometry',
]
