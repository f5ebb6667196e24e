"""
YAML configuration loading.

Configuration file format:

    geometry:
      lattice: sc                 # preset name, or give bravais_vectors
      # bravais_vectors: [[1, 0, 0], [0, 1, 0], [0, 0, 1]]
      basis: [[0, 0, 0]]          # optional with a preset
      n_cells: [10, 10, 1]
      lattice_constant: 1.0
      seed: 2006
      enable_pinning: true

      composition:
        disordered: false
        atoms:
          - {index: 0, type: 0, mu_s: 1.0, concentration: 1.0}

      pinning:
        na_left: 1
        pinned_cell: [[0, 0, 1]]
        sites:
          - {index: 0, translations: [0, 0, 0], spin: [0, 0, 1]}

      defects:
        - {index: 0, translations: [1, 1, 0], type: -1}
"""

import logging
import numpy as np
import yaml
from pathlib import Path
from typing import Any, Dict, Union

from ..core.exceptions import ConfigurationError
from ..core.lattice import create_lattice
from ..core.geometry import CellComposition, Defects, Geometry, Pinning, Site
from ..core.geometry.composition import DEFAULT_SEED

logger = logging.getLogger(__name__)

PINNING_THICKNESS_KEYS = ('na_left', 'na_right', 'nb_left', 'nb_right', 'nc_left', 'nc_right')


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML configuration file.

    Raises
    ------
    ConfigurationError
        If the file does not exist, is not valid YAML, or is not a mapping
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse configuration file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    logger.info("Loaded configuration from %s", path)
    return data


def _field(data: Dict[str, Any], key: str, default, cast):
    """``cast(data[key])`` with a ConfigurationError naming the key on failure."""
    value = data.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for '{key}': {value!r}") from exc


def _float_array(value) -> np.ndarray:
    return np.array(value, dtype=float)


def _integer(value) -> int:
    if isinstance(value, bool) or int(value) != value:
        raise ValueError(f"{value!r} is not an integer")
    return int(value)


def _parse_composition(data: Dict[str, Any]) -> CellComposition:
    atoms = data.get('atoms', [])
    try:
        return CellComposition(
            disordered=bool(data.get('disordered', False)),
            iatom=[int(atom['index']) for atom in atoms],
            atom_type=[int(atom.get('type', 0)) for atom in atoms],
            mu_s=[float(atom.get('mu_s', 1.0)) for atom in atoms],
            concentration=[float(atom.get('concentration', 1.0)) for atom in atoms],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed composition entry: {exc}") from exc


def _parse_site(entry: Dict[str, Any]) -> Site:
    return Site(i=entry['index'], translations=entry.get('translations', (0, 0, 0)))


def _parse_pinning(data: Dict[str, Any]) -> Pinning:
    try:
        pinning = Pinning(**{key: _integer(data.get(key, 0)) for key in PINNING_THICKNESS_KEYS})
        if 'pinned_cell' in data:
            pinning.pinned_cell = np.array(data['pinned_cell'], dtype=float)
        for entry in data.get('sites', []):
            pinning.sites.append(_parse_site(entry))
            pinning.spins.append(np.array(entry['spin'], dtype=float))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed pinning entry: {exc}") from exc
    return pinning


def _parse_defects(entries) -> Defects:
    defects = Defects()
    try:
        for entry in entries:
            defects.sites.append(_parse_site(entry))
            defects.types.append(int(entry['type']))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed defect entry: {exc}") from exc
    return defects


def geometry_from_dict(data: Dict[str, Any]) -> Geometry:
    """
    Build a Geometry from the contents of a ``geometry`` section.

    Parameters
    ----------
    data : Dict
        Mapping as documented in the module docstring (also the output of
        ``Geometry.to_dict``)

    Returns
    -------
    geometry : Geometry
    """
    if 'n_cells' not in data:
        raise ConfigurationError("Geometry configuration requires 'n_cells'")

    lattice_constant = _field(data, 'lattice_constant', 1.0, float)
    seed = _field(data, 'seed', DEFAULT_SEED, _integer)

    if 'bravais_vectors' in data:
        bravais_vectors = _field(data, 'bravais_vectors', None, _float_array)
        basis = _field(data, 'basis', [[0.0, 0.0, 0.0]], _float_array)
    elif 'lattice' in data:
        try:
            lattice = create_lattice(data['lattice'], lattice_constant=lattice_constant)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Cannot create lattice '{data['lattice']}': {exc}") from exc
        bravais_vectors = lattice.get_primitive_vectors()
        basis = _field(data, 'basis', lattice.get_basis_positions(), _float_array)
    else:
        raise ConfigurationError("Geometry configuration requires 'lattice' or 'bravais_vectors'")

    composition = None
    if 'composition' in data:
        composition = _parse_composition(data['composition'])

    return Geometry(
        bravais_vectors=bravais_vectors,
        n_cells=data['n_cells'],
        cell_atoms=basis,
        cell_composition=composition,
        lattice_constant=lattice_constant,
        pinning=_parse_pinning(data.get('pinning') or {}),
        defects=_parse_defects(data.get('defects') or []),
        pinning_enabled=bool(data.get('enable_pinning', True)),
        seed=seed,
    )


def load_geometry(config_path: Union[str, Path]) -> Geometry:
    """
    Load a Geometry from the ``geometry`` section of a YAML file.

    Raises
    ------
    ConfigurationError
        If the file or its ``geometry`` section is missing or malformed
    """
    data = load_config(config_path)
    if 'geometry' not in data:
        raise ConfigurationError(f"Configuration file {config_path} has no 'geometry' section")
    return geometry_from_dict(data['geometry'])
