"""
Configuration loading for geometries.
"""

from .config_loader import load_config, load_geometry, geometry_from_dict

__all__ = [
    'load_config',
    'load_geometry',
    'geometry_from_dict',
]
