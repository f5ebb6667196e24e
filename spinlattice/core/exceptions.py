"""
Exceptions raised while building a lattice geometry.

Hierarchy
---------
GeometryError (ValueError)
    DegenerateGeometryError : two sites occupy the same position (fatal)
    ConfigurationError      : malformed composition/pinning/defect input

Triangulation backend failures are not raised; they are logged and the
affected mesh falls back to an empty one.
"""


class GeometryError(ValueError):
    """Base class for geometry construction errors."""


class DegenerateGeometryError(GeometryError):
    """Two sites of the replicated lattice coincide in space."""


class ConfigurationError(GeometryError):
    """Input descriptors failed validation."""
