"""
Geometry module.

Expands a lattice template into the full site list of a spin system:
positions, atom types, moments, pinning masks, dimensionality, lattice-type
tag, and cached Delaunay meshes for visualisation.
"""

from .descriptors import (
    Site,
    CellComposition,
    Pinning,
    Defects,
    validate_geometry_inputs
)
from .indexing import idx_from_translations, translations_from_idx
from .classifier import BravaisLatticeType
from .filters import position_filter
from .triangulation import MeshCache, delaunay_simplices
from .geometry import Geometry

__all__ = [
    'Site',
    'CellComposition',
    'Pinning',
    'Defects',
    'validate_geometry_inputs',
    'idx_from_translations',
    'translations_from_idx',
    'BravaisLatticeType',
    'position_filter',
    'MeshCache',
    'delaunay_simplices',
    'Geometry',
]
