"""
Position filters for selecting sites.

Configuration generators (domains, skyrmions, spirals) restrict themselves
to a region of the geometry. A filter combines rectangular, cylindrical
(in the xy-plane) and spherical cut-offs around a reference point; a
negative cut-off disables that criterion.
"""

import numpy as np
from typing import Callable, Sequence


def position_filter(position: Sequence[float],
                    r_cut_rectangular: Sequence[float] = (-1.0, -1.0, -1.0),
                    r_cut_cylindrical: float = -1.0,
                    r_cut_spherical: float = -1.0,
                    inverted: bool = False) -> Callable[[np.ndarray], np.ndarray]:
    """
    Build a vectorized site filter.

    Parameters
    ----------
    position : Sequence[float]
        Reference point (absolute coordinates)
    r_cut_rectangular : Sequence[float]
        Half-widths along x, y, z
    r_cut_cylindrical : float
        Radius around the z-axis through ``position``
    r_cut_spherical : float
        Radius around ``position``
    inverted : bool
        Select the complement

    Returns
    -------
    filter : Callable[[np.ndarray], np.ndarray]
        Maps positions of shape (n, 3) to a boolean mask of shape (n,)
    """
    center = np.asarray(position, dtype=float)
    r_rect = np.asarray(r_cut_rectangular, dtype=float)

    def _filter(positions: np.ndarray) -> np.ndarray:
        delta = np.asarray(positions, dtype=float) - center
        mask = np.ones(len(delta), dtype=bool)

        for axis in range(3):
            if r_rect[axis] >= 0:
                mask &= np.abs(delta[:, axis]) < r_rect[axis]
        if r_cut_cylindrical >= 0:
            mask &= np.hypot(delta[:, 0], delta[:, 1]) < r_cut_cylindrical
        if r_cut_spherical >= 0:
            mask &= np.linalg.norm(delta, axis=1) < r_cut_spherical

        return ~mask if inverted else mask

    return _filter
