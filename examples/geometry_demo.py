"""
Geometry Demo

This example walks through the main features of the Geometry class:
- Building geometries from lattice presets
- Disordered composition, pinning and defects
- Dimensionality and lattice-type classification
- Delaunay meshes for visualisation
- Loading a geometry from YAML
"""

import numpy as np
import sys
from pathlib import Path

# Add spinlattice to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spinlattice import (
    Geometry,
    SimpleCubicLattice,
    FCCLattice,
    Hexagonal60Lattice,
    CellComposition,
    Pinning,
    Defects,
    Site,
    setup_logging,
)


def example_presets():
    """Example 1: Geometries from lattice presets."""
    print("="*60)
    print("Example 1: Lattice presets")
    print("="*60)

    for lattice, n_cells in [(SimpleCubicLattice(), (10, 10, 1)),
                             (Hexagonal60Lattice(), (10, 10, 1)),
                             (FCCLattice(lattice_constant=3.6), (4, 4, 4))]:
        geometry = Geometry.from_lattice(lattice, n_cells)
        print(f"\n{lattice}")
        print(f"  {geometry!r}")
        print(f"  type: {geometry.classifier.value}")
        print(f"  bounds: {geometry.bounds_min} .. {geometry.bounds_max}")


def example_alloy():
    """Example 2: Disordered alloy with vacancies."""
    print("\n" + "="*60)
    print("Example 2: Disordered alloy")
    print("="*60)

    composition = CellComposition(
        disordered=True,
        iatom=[0, 0],
        atom_type=[0, 1],
        mu_s=[2.2, 0.6],           # Fe-like / Ni-like moments
        concentration=[0.6, 0.9]
    )
    geometry = Geometry(np.eye(3), (20, 20, 1), [[0, 0, 0]],
                        cell_composition=composition, seed=2006)

    types, counts = np.unique(geometry.atom_types, return_counts=True)
    for atom_type, count in zip(types, counts):
        label = "vacancy" if atom_type < 0 else f"type {atom_type}"
        print(f"  {label:>8}: {count} sites")
    print(f"  non-vacant: {geometry.nos_nonvacant} of {geometry.nos}")


def example_pinning():
    """Example 3: Pinned boundary layers and defects."""
    print("\n" + "="*60)
    print("Example 3: Pinning and defects")
    print("="*60)

    pinning = Pinning(
        na_left=1,
        na_right=1,
        pinned_cell=np.array([[0.0, 0.0, 1.0]]),
        sites=[Site(0, (5, 5, 0))],
        spins=[np.array([1.0, 0.0, 0.0])]
    )
    defects = Defects(sites=[Site(0, (3, 3, 0))], types=[-1])
    geometry = Geometry(np.eye(3), (10, 10, 1), [[0, 0, 0]], pinning=pinning, defects=defects)

    print(f"\n{geometry}")

    # A random vector field with the pinned sites enforced
    rng = np.random.default_rng(0)
    spins = rng.normal(size=(geometry.nos, 3))
    spins /= np.linalg.norm(spins, axis=1, keepdims=True)
    geometry.apply_pinning(spins)
    print(f"\nSpin at the explicitly pinned site: {spins[geometry.site_index(0, (5, 5, 0))]}")

    df = geometry.to_dataframe()
    print(f"\nPer-site table:\n{df.head()}")


def example_meshes():
    """Example 4: Triangles and tetrahedra."""
    print("\n" + "="*60)
    print("Example 4: Delaunay meshes")
    print("="*60)

    monolayer = Geometry.from_lattice(Hexagonal60Lattice(), (30, 30, 1))
    for step in (1, 2, 5):
        triangles = monolayer.triangulation(n_cell_step=step)
        print(f"  monolayer, step {step}: {len(triangles)} triangles")

    bulk = Geometry.from_lattice(SimpleCubicLattice(), (8, 8, 8))
    for step in (1, 2):
        tetrahedra = bulk.tetrahedra(n_cell_step=step)
        print(f"  bulk, step {step}: {len(tetrahedra)} tetrahedra")

    # Vertex ids refer to the strided point list
    indices = bulk.strided_site_indices(2)
    print(f"  first strided sites: {indices[:5]}")


def example_config():
    """Example 5: Geometry from a YAML file."""
    print("\n" + "="*60)
    print("Example 5: YAML configuration")
    print("="*60)

    config = Path(__file__).parent / "configs" / "monolayer.yaml"
    geometry = Geometry.from_config(config)
    print(f"\n{geometry}")


if __name__ == '__main__':
    setup_logging()

    example_presets()
    example_alloy()
    example_pinning()
    example_meshes()
    example_config()
