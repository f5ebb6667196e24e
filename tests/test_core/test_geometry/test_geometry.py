"""
Unit tests for the Geometry class.

Tests:
- Construction from lattice presets
- Pinning hook
- Read-only state
- Site filters
- Export (dict, DataFrame, string representations)
"""

import numpy as np
import pandas as pd
import pytest
from spinlattice.core.geometry import Geometry, Pinning, Site
from spinlattice.core.lattice import BCCLattice, FCCLattice, SimpleCubicLattice


@pytest.fixture
def monolayer():
    """5 x 5 square monolayer, center at (2, 2, 0)."""
    return Geometry(np.eye(3), (5, 5, 1), [[0, 0, 0]])


class TestFromLattice:
    """Test construction from lattice templates."""

    def test_fcc(self):
        lattice = FCCLattice(lattice_constant=3.6)
        geometry = Geometry.from_lattice(lattice, (2, 2, 2))

        assert geometry.nos == 8
        assert geometry.lattice_constant == 3.6
        assert np.allclose(geometry.bravais_vectors, lattice.get_primitive_vectors())
        assert np.allclose(geometry.positions[1], 3.6 * np.array([0.5, 0.0, 0.5]))

    def test_keyword_arguments_are_forwarded(self):
        geometry = Geometry.from_lattice(BCCLattice(), (3, 1, 1), pinning=Pinning(na_left=1))
        assert list(geometry.pinned_sites) == [0]

    def test_non_lattice_raises(self):
        with pytest.raises(TypeError, match="AbstractLattice"):
            Geometry.from_lattice(np.eye(3), (2, 2, 2))


class TestPinningHook:
    """Test enforcement of pinned directions on a vector field."""

    def test_only_pinned_sites_change(self):
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]], pinning=Pinning(na_left=1))
        vectorfield = np.tile([1.0, 0.0, 0.0], (3, 1))

        result = geometry.apply_pinning(vectorfield)

        assert result is vectorfield
        assert np.allclose(vectorfield[0], [0, 0, 1])
        assert np.allclose(vectorfield[1:], [1, 0, 0])

    def test_explicit_site_direction(self):
        pinning = Pinning(sites=[Site(0, (2, 0, 0))], spins=[np.array([0.0, -1.0, 0.0])])
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]], pinning=pinning)
        vectorfield = np.tile([0.0, 0.0, 1.0], (3, 1))

        geometry.apply_pinning(vectorfield)

        assert np.allclose(vectorfield[2], [0, -1, 0])
        assert np.allclose(vectorfield[:2], [0, 0, 1])

    def test_disabled_pinning_is_a_no_op(self):
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]],
                            pinning=Pinning(na_left=1), pinning_enabled=False)
        vectorfield = np.tile([1.0, 0.0, 0.0], (3, 1))

        geometry.apply_pinning(vectorfield)

        assert np.allclose(vectorfield, [1, 0, 0])
        # Masks are still built
        assert list(geometry.pinned_sites) == [0]

    def test_wrong_shape_raises(self):
        geometry = Geometry(np.eye(3), (3, 1, 1), [[0, 0, 0]])

        with pytest.raises(ValueError, match="vectorfield must have shape"):
            geometry.apply_pinning(np.zeros((2, 3)))


class TestReadOnly:
    """Test that per-site state cannot be modified after construction."""

    @pytest.mark.parametrize("attribute", [
        'positions', 'atom_types', 'mu_s', 'mask_unpinned', 'mask_pinned_cells',
        'bravais_vectors', 'cell_atoms',
    ])
    def test_arrays_are_frozen(self, monolayer, attribute):
        array = getattr(monolayer, attribute)

        assert not array.flags.writeable
        with pytest.raises(ValueError):
            array[0] = 0

    def test_input_arrays_are_copied(self):
        """Freezing the geometry does not affect the caller's arrays."""
        bravais = np.eye(3)
        Geometry(bravais, (2, 2, 1), [[0, 0, 0]])

        assert bravais.flags.writeable


class TestIndexing:
    """Test site lookup."""

    def test_site_index_and_position(self):
        geometry = Geometry(np.eye(3), (4, 3, 2), [[0, 0, 0], [0.5, 0.5, 0.5]])
        idx = geometry.site_index(1, (2, 1, 1))

        assert geometry.site_translations(idx) == (1, 2, 1, 1)
        assert np.allclose(geometry.positions[idx], [2.5, 1.5, 1.5])


class TestFilterSites:
    """Test region selection around the geometry center."""

    def test_spherical(self, monolayer):
        mask = monolayer.filter_sites(r_cut_spherical=1.1)

        assert mask.sum() == 5
        assert mask[monolayer.site_index(0, (2, 2, 0))]

    def test_inverted(self, monolayer):
        mask = monolayer.filter_sites(r_cut_spherical=1.1, inverted=True)
        assert mask.sum() == 20

    def test_rectangular(self, monolayer):
        """|x - 2| < 1.5 keeps three columns."""
        mask = monolayer.filter_sites(r_cut_rectangular=(1.5, -1, -1))
        assert mask.sum() == 15

    def test_cylindrical(self, monolayer):
        """Center, nearest and next-nearest neighbours lie within 1.5."""
        mask = monolayer.filter_sites(r_cut_cylindrical=1.5)
        assert mask.sum() == 9

    def test_offset_from_center(self, monolayer):
        """The reference point is relative to the center."""
        mask = monolayer.filter_sites(position=(2, 2, 0), r_cut_spherical=1.1)
        assert mask.sum() == 3

    def test_no_cutoff_selects_everything(self, monolayer):
        assert monolayer.filter_sites().all()


class TestExport:
    """Test serialization and string representations."""

    def test_to_dataframe(self):
        geometry = Geometry(np.eye(3), (3, 2, 1), [[0, 0, 0], [0.5, 0.5, 0]],
                            pinning=Pinning(na_left=1))
        df = geometry.to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['ibasis', 'a', 'b', 'c', 'x', 'y', 'z',
                                    'atom_type', 'mu_s', 'pinned']
        assert len(df) == geometry.nos
        assert df.index.name == 'site'
        assert np.allclose(df[['x', 'y', 'z']].to_numpy(), geometry.positions)
        assert df['pinned'].sum() == 4
        assert (df.loc[df['pinned'], 'a'] == 0).all()

    def test_dataframe_rows_follow_index_formula(self):
        geometry = Geometry(np.eye(3), (2, 3, 2), [[0, 0, 0], [0.5, 0.5, 0.5]])
        df = geometry.to_dataframe()

        for idx in (0, 5, 17, geometry.nos - 1):
            row = df.loc[idx]
            assert geometry.site_index(row['ibasis'], (row['a'], row['b'], row['c'])) == idx

    def test_to_dict(self):
        geometry = Geometry.from_lattice(SimpleCubicLattice(lattice_constant=2.0), (3, 3, 1), seed=7)
        data = geometry.to_dict()

        assert data['n_cells'] == [3, 3, 1]
        assert data['lattice_constant'] == 2.0
        assert data['seed'] == 7
        assert data['basis'] == [[0.0, 0.0, 0.0]]
        assert data['composition']['atoms'][0]['mu_s'] == 1.0
        assert data['defects'] == []

    def test_repr(self, monolayer):
        repr_str = repr(monolayer)

        assert "Geometry" in repr_str
        assert "nos=25" in repr_str
        assert "dimensionality=2" in repr_str

    def test_str(self, monolayer):
        text = str(monolayer)

        assert "Lattice type: simple cubic" in text
        assert "Cells: 5 x 5 x 1" in text
        assert "Sites: 25 (25 non-vacant)" in text


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
