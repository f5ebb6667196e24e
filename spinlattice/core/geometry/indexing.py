"""
Site indexing.

Sites are numbered basis-atom fastest, then cell a, b and c:

    index = ibasis + n_cell_atoms * (a + n_cells[0] * (b + n_cells[1] * c))

Every piece of code that addresses sites by (basis, cell) goes through
these two functions.
"""

from typing import Sequence, Tuple


def idx_from_translations(n_cells: Sequence[int],
                          n_cell_atoms: int,
                          translations: Sequence[int],
                          ibasis: int = 0) -> int:
    """
    Site index of basis atom ``ibasis`` in cell ``translations = (a, b, c)``.
    """
    a, b, c = translations
    return ibasis + n_cell_atoms * (a + n_cells[0] * (b + n_cells[1] * c))


def translations_from_idx(n_cells: Sequence[int],
                          n_cell_atoms: int,
                          idx: int) -> Tuple[int, int, int, int]:
    """
    Inverse of ``idx_from_translations``.

    Returns
    -------
    (ibasis, a, b, c) : Tuple[int, int, int, int]
    """
    ibasis = idx % n_cell_atoms
    cell = idx // n_cell_atoms
    a = cell % n_cells[0]
    cell //= n_cells[0]
    b = cell % n_cells[1]
    c = cell // n_cells[1]
    return ibasis, a, b, c
