"""
spinlattice: Lattice Geometry for Atomistic Spin Simulations

A Python package that turns a basis cell plus replication counts into the
site list of an atomistic spin system: positions, atom types, magnetic
moments, pinning masks, dimensionality, and Delaunay meshes of the point
cloud.

Main Components
---------------
core : Lattice templates and the Geometry aggregate
io : YAML configuration loading
utils : Numerical tolerances, logging setup

Quick Start
-----------
>>> from spinlattice import Geometry, SimpleCubicLattice, Pinning
>>>
>>> # 20 x 20 monolayer with the left column pinned along +z
>>> geometry = Geometry.from_lattice(
...     SimpleCubicLattice(lattice_constant=1.0),
...     n_cells=(20, 20, 1),
...     pinning=Pinning(na_left=1)
... )
>>> geometry.nos, geometry.dimensionality
(400, 2)
>>> triangles = geometry.triangulation()

Current Version: 0.1.0
"""

import logging

__version__ = "0.1.0"

# High-level API exports
from .core import (
    # Errors
    GeometryError,
    DegenerateGeometryError,
    ConfigurationError,

    # Lattice
    AbstractLattice,
    SimpleCubicLattice,
    FCCLattice,
    BCCLattice,
    Hexagonal60Lattice,
    Hexagonal120Lattice,
    CustomLattice,
    create_lattice,

    # Geometry
    Site,
    CellComposition,
    Pinning,
    Defects,
    BravaisLatticeType,
    Geometry,
)
from .utils import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version info
    '__version__',

    # Errors
    'GeometryError',
    'DegenerateGeometryError',
    'ConfigurationError',

    # Core abstractions
    'AbstractLattice',
    'SimpleCubicLattice',
    'FCCLattice',
    'BCCLattice',
    'Hexagonal60Lattice',
    'Hexagonal120Lattice',
    'CustomLattice',
    'create_lattice',
    'Site',
    'CellComposition',
    'Pinning',
    'Defects',
    'BravaisLatticeType',
    'Geometry',

    'setup_logging',
]
