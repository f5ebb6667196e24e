"""
Unit tests for composition, pinning and defects.

Tests:
- Ordered and disordered atom-type assignment
- Determinism of the disordered draw
- Boundary-layer and explicit pinning
- Defects and vacancy invariants
- Validation of the descriptors
"""

import numpy as np
import pytest
from spinlattice.core.exceptions import ConfigurationError
from spinlattice.core.geometry import CellComposition, Defects, Geometry, Pinning, Site


def disordered_alloy(concentration=0.5):
    """Basis slot 0 holds type 0 or type 1; leftover draws are vacancies."""
    return CellComposition(
        disordered=True,
        iatom=[0, 0],
        atom_type=[0, 1],
        mu_s=[2.0, 3.0],
        concentration=[concentration, concentration]
    )


class TestOrderedComposition:
    """Test deterministic assignment."""

    def test_default_composition(self):
        """Without composition every site is type 0 with mu_s 1."""
        geometry = Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]])

        assert np.all(geometry.atom_types == 0)
        assert np.all(geometry.mu_s == 1.0)
        assert geometry.nos_nonvacant == geometry.nos

    def test_types_per_basis_atom(self):
        """Each basis atom receives its declared type and moment."""
        composition = CellComposition(iatom=[0, 1], atom_type=[1, 2], mu_s=[2.0, 3.0],
                                      concentration=[1.0, 1.0])
        geometry = Geometry(np.eye(3), (3, 2, 1), [[0, 0, 0], [0.5, 0.5, 0]],
                            cell_composition=composition)

        assert np.all(geometry.atom_types[0::2] == 1)
        assert np.all(geometry.atom_types[1::2] == 2)
        assert np.all(geometry.mu_s[0::2] == 2.0)
        assert np.all(geometry.mu_s[1::2] == 3.0)

    def test_unlisted_basis_atom_keeps_default(self):
        """A basis atom missing from the composition stays type 0, mu_s 1."""
        composition = CellComposition(iatom=[0], atom_type=[5], mu_s=[4.0], concentration=[1.0])
        geometry = Geometry(np.eye(3), (2, 1, 1), [[0, 0, 0], [0.5, 0, 0]],
                            cell_composition=composition)

        assert list(geometry.atom_types) == [5, 0, 5, 0]
        assert list(geometry.mu_s) == [4.0, 1.0, 4.0, 1.0]

    def test_first_entry_wins(self):
        """A later entry for an already visited slot is ignored."""
        composition = CellComposition(iatom=[0, 0], atom_type=[1, 2], mu_s=[1.0, 1.0],
                                      concentration=[1.0, 1.0])
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]], cell_composition=composition)

        assert np.all(geometry.atom_types == 1)

    def test_negative_type_is_vacancy(self):
        """An ordered vacancy has zero moment and is not counted."""
        composition = CellComposition(iatom=[0, 1], atom_type=[0, -1], mu_s=[1.0, 2.0],
                                      concentration=[1.0, 1.0])
        geometry = Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0], [0.5, 0.5, 0]],
                            cell_composition=composition)

        assert np.all(geometry.mu_s[1::2] == 0.0)
        assert geometry.nos_nonvacant == 4


class TestDisorderedComposition:
    """Test stochastic (alloy) assignment."""

    def test_same_seed_is_reproducible(self):
        """Identical inputs and seed give identical arrays."""
        first = Geometry(np.eye(3), (10, 10, 2), [[0, 0, 0]],
                         cell_composition=disordered_alloy(), seed=42)
        second = Geometry(np.eye(3), (10, 10, 2), [[0, 0, 0]],
                          cell_composition=disordered_alloy(), seed=42)

        assert np.array_equal(first.atom_types, second.atom_types)
        assert np.array_equal(first.mu_s, second.mu_s)

    def test_default_seed_is_reproducible(self):
        first = Geometry(np.eye(3), (8, 8, 1), [[0, 0, 0]], cell_composition=disordered_alloy())
        second = Geometry(np.eye(3), (8, 8, 1), [[0, 0, 0]], cell_composition=disordered_alloy())

        assert np.array_equal(first.atom_types, second.atom_types)

    def test_different_seed_differs(self):
        first = Geometry(np.eye(3), (10, 10, 2), [[0, 0, 0]],
                         cell_composition=disordered_alloy(), seed=1)
        second = Geometry(np.eye(3), (10, 10, 2), [[0, 0, 0]],
                          cell_composition=disordered_alloy(), seed=2)

        assert not np.array_equal(first.atom_types, second.atom_types)

    def test_all_outcomes_present(self):
        """With concentration 0.5 each outcome (type 0, type 1, vacancy) occurs."""
        geometry = Geometry(np.eye(3), (10, 10, 2), [[0, 0, 0]], cell_composition=disordered_alloy())

        assert set(np.unique(geometry.atom_types)) == {-1, 0, 1}

    def test_full_concentration_claims_every_slot(self):
        """The first candidate with concentration 1 is always accepted."""
        geometry = Geometry(np.eye(3), (5, 5, 1), [[0, 0, 0]],
                            cell_composition=disordered_alloy(concentration=1.0))

        assert np.all(geometry.atom_types == 0)
        assert np.all(geometry.mu_s == 2.0)
        assert geometry.nos_nonvacant == geometry.nos

    def test_vacancies_have_zero_moment(self):
        """Unvisited slots are vacancies with mu_s == 0."""
        geometry = Geometry(np.eye(3), (10, 10, 2), [[0, 0, 0]], cell_composition=disordered_alloy())
        vacant = geometry.atom_types < 0

        assert np.any(vacant)
        assert np.all(geometry.mu_s[vacant] == 0.0)
        assert np.all(geometry.mu_s[geometry.atom_types == 0] == 2.0)
        assert np.all(geometry.mu_s[geometry.atom_types == 1] == 3.0)
        assert geometry.nos_nonvacant == np.count_nonzero(~vacant)

    def test_zero_concentration_leaves_vacancies(self):
        composition = CellComposition(disordered=True, iatom=[0], atom_type=[0],
                                      mu_s=[1.0], concentration=[0.0])
        geometry = Geometry(np.eye(3), (4, 4, 1), [[0, 0, 0]], cell_composition=composition)

        assert geometry.nos_nonvacant == 0
        assert np.all(geometry.mu_s == 0.0)


class TestBoundaryPinning:
    """Test pinning of boundary layers."""

    def test_left_layer_on_chain(self):
        """na_left=1 on a 3-cell chain pins exactly the site at a=0."""
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]], pinning=Pinning(na_left=1))

        assert list(geometry.mask_unpinned) == [0, 1, 1]
        assert list(geometry.pinned_sites) == [0]

    def test_right_layer_on_chain(self):
        geometry = Geometry(np.eye(3), (4, 1, 1), [[0, 0, 0]], pinning=Pinning(na_right=2))

        assert list(geometry.mask_unpinned) == [1, 1, 0, 0]

    def test_default_direction_is_plus_z(self):
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]], pinning=Pinning(na_left=1))

        assert np.allclose(geometry.mask_pinned_cells[0], [0, 0, 1])
        assert np.allclose(geometry.mask_pinned_cells[1:], 0.0)

    def test_pinned_cell_per_basis_atom(self):
        """Each basis atom of a boundary cell gets its own direction."""
        pinning = Pinning(nb_left=1, pinned_cell=np.array([[1.0, 0, 0], [0, -1.0, 0]]))
        geometry = Geometry(np.eye(3), (2, 3, 1), [[0, 0, 0], [0.5, 0.5, 0]], pinning=pinning)

        # Cells with b == 0 are sites 0..3
        assert list(geometry.pinned_sites) == [0, 1, 2, 3]
        assert np.allclose(geometry.mask_pinned_cells[0], [1, 0, 0])
        assert np.allclose(geometry.mask_pinned_cells[1], [0, -1, 0])

    def test_layers_on_several_axes(self):
        """A site is pinned if it lies in a layer on any axis."""
        geometry = Geometry(np.eye(3), (3, 3, 1), [[0, 0, 0]],
                            pinning=Pinning(na_left=1, nb_right=1))

        pinned = set(geometry.pinned_sites)
        expected = {geometry.site_index(0, (0, b, 0)) for b in range(3)}
        expected |= {geometry.site_index(0, (a, 2, 0)) for a in range(3)}
        assert pinned == expected


class TestExplicitPinning:
    """Test individually pinned sites."""

    def test_pinned_site(self):
        pinning = Pinning(sites=[Site(0, (1, 1, 0))], spins=[np.array([0.0, 1.0, 0.0])])
        geometry = Geometry(np.eye(3), (3, 3, 1), [[0, 0, 0]], pinning=pinning)
        idx = geometry.site_index(0, (1, 1, 0))

        assert list(geometry.pinned_sites) == [idx]
        assert np.allclose(geometry.mask_pinned_cells[idx], [0, 1, 0])

    def test_explicit_overrides_boundary(self):
        """Explicit pins are applied after boundary layers."""
        pinning = Pinning(na_left=1,
                          sites=[Site(0, (0, 0, 0))],
                          spins=[np.array([1.0, 0.0, 0.0])])
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]], pinning=pinning)

        assert np.allclose(geometry.mask_pinned_cells[0], [1, 0, 0])


class TestDefects:
    """Test defect overrides."""

    def test_vacancy_defect(self):
        defects = Defects(sites=[Site(0, (1, 0, 0))], types=[-1])
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]], defects=defects)

        assert list(geometry.atom_types) == [0, -1, 0]
        assert list(geometry.mu_s) == [1.0, 0.0, 1.0]
        assert geometry.nos_nonvacant == 2

    def test_substitutional_defect_has_zero_moment(self):
        """A defect with non-negative type still loses its moment but is not a vacancy."""
        defects = Defects(sites=[Site(1, (0, 0, 0))], types=[3])
        geometry = Geometry(np.eye(3), (2, 1, 1), [[0, 0, 0], [0.5, 0, 0]], defects=defects)

        assert geometry.atom_types[1] == 3
        assert geometry.mu_s[1] == 0.0
        assert geometry.nos_nonvacant == 4

    def test_defect_on_pinned_site(self):
        """Defects apply regardless of pinning; the pin itself stays."""
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]],
                            pinning=Pinning(na_left=1),
                            defects=Defects(sites=[Site(0, (0, 0, 0))], types=[-1]))

        assert geometry.atom_types[0] == -1
        assert geometry.mu_s[0] == 0.0
        assert geometry.mask_unpinned[0] == 0


class TestValidation:
    """Test that malformed descriptors are rejected before construction."""

    def test_concentration_above_one(self):
        composition = CellComposition(disordered=True, iatom=[0], atom_type=[0],
                                      mu_s=[1.0], concentration=[1.5])
        with pytest.raises(ConfigurationError, match="Composition entry 0: concentration 1.5"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], cell_composition=composition)

    def test_negative_concentration(self):
        composition = CellComposition(disordered=True, iatom=[0, 0], atom_type=[0, 1],
                                      mu_s=[1.0, 1.0], concentration=[0.5, -0.1])
        with pytest.raises(ConfigurationError, match="Composition entry 1"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], cell_composition=composition)

    def test_empty_composition(self):
        with pytest.raises(ConfigurationError, match="empty"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], cell_composition=CellComposition())

    def test_mismatched_composition_lengths(self):
        composition = CellComposition(iatom=[0], atom_type=[0, 1], mu_s=[1.0], concentration=[1.0])
        with pytest.raises(ConfigurationError, match="mismatched lengths"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], cell_composition=composition)

    def test_composition_basis_index_out_of_range(self):
        composition = CellComposition(iatom=[2], atom_type=[0], mu_s=[1.0], concentration=[1.0])
        with pytest.raises(ConfigurationError, match="basis index 2 out of range"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], cell_composition=composition)

    def test_defect_outside_system(self):
        defects = Defects(sites=[Site(0, (0, 5, 0))], types=[-1])
        with pytest.raises(ConfigurationError, match="Defect 0"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], defects=defects)

    def test_defect_type_count_mismatch(self):
        defects = Defects(sites=[Site(0, (0, 0, 0))], types=[])
        with pytest.raises(ConfigurationError, match="Defects"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], defects=defects)

    def test_pinned_site_without_spin(self):
        pinning = Pinning(sites=[Site(0, (0, 0, 0))], spins=[])
        with pytest.raises(ConfigurationError, match="spin directions"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], pinning=pinning)

    def test_pinned_site_basis_out_of_range(self):
        pinning = Pinning(sites=[Site(1, (0, 0, 0))], spins=[np.array([0, 0, 1.0])])
        with pytest.raises(ConfigurationError, match="Pinned site 0: basis index 1"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], pinning=pinning)

    def test_negative_boundary_thickness(self):
        with pytest.raises(ConfigurationError, match="nc_right"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], pinning=Pinning(nc_right=-1))

    def test_pinned_cell_shape(self):
        pinning = Pinning(na_left=1, pinned_cell=np.zeros((2, 3)))
        with pytest.raises(ConfigurationError, match="pinned_cell"):
            Geometry(np.eye(3), (2, 2, 1), [[0, 0, 0]], pinning=pinning)

    def test_integral_cell_counts_accepted(self):
        """Whole-number floats and numpy integers are valid cell counts."""
        geometry = Geometry(np.eye(3), (2.0, np.int64(3), 1), [[0, 0, 0]])

        assert geometry.n_cells == (2, 3, 1)
        assert all(type(n) is int for n in geometry.n_cells)

    @pytest.mark.parametrize("kwargs, message", [
        ({'bravais_vectors': np.eye(2)}, "Bravais vectors"),
        ({'n_cells': (0, 1, 1)}, "n_cells"),
        ({'n_cells': (2.5, 2, 1)}, "n_cells"),
        ({'n_cells': ('2', 2, 1)}, "n_cells"),
        ({'n_cells': 4}, "n_cells"),
        ({'cell_atoms': np.zeros((0, 3))}, "cell_atoms"),
        ({'lattice_constant': -1.0}, "Lattice constant"),
        ({'lattice_constant': 'large'}, "Lattice constant"),
        ({'lattice_constant': None}, "Lattice constant"),
    ])
    def test_malformed_lattice(self, kwargs, message):
        args = {'bravais_vectors': np.eye(3), 'n_cells': (2, 2, 1), 'cell_atoms': [[0, 0, 0]]}
        args.update(kwargs)
        with pytest.raises(ConfigurationError, match=message):
            Geometry(**args)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
