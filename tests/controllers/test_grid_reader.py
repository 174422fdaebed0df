# tests/controllers/test_grid_reader.py
from __future__ import annotations

import pytest

from quack_helper.controllers.grid_reader import (
    cells_from_values,
    column_index,
    column_letters,
    to_grid,
)

# ----------------------- column_index -----------------------


@pytest.mark.parametrize(
    "letters, expected",
    [
        ("A", 0),
        ("B", 1),
        ("Z", 25),
        ("AA", 26),
        ("AB", 27),
        ("AZ", 51),
        ("BA", 52),
        ("ZZ", 701),
        ("AAA", 702),
        ("XFD", 16383),  # last Excel column
    ],
)
def test_column_index_table(letters, expected):
    assert column_index(letters) == expected


def test_column_index_is_case_insensitive_and_trims():
    assert column_index(" aa ") == 26


def test_column_index_has_no_zero_digit_for_every_two_letter_column():
    # Arrange
    alphabet = [chr(c) for c in range(ord("A"), ord("Z") + 1)]

    # Act / Assert: "A?" follows "Z" directly, "B?" follows "AZ" directly, ...
    expected = 26
    for first in alphabet:
        for second in alphabet:
            assert column_index(first + second) == expected
            expected += 1


@pytest.mark.parametrize("bad", ["", "   ", "A1", "Ä", "-"])
def test_column_index_rejects_invalid(bad):
    with pytest.raises(ValueError):
        column_index(bad)


@pytest.mark.parametrize("index", [0, 1, 25, 26, 51, 52, 701, 702, 16383])
def test_column_letters_inverts_column_index(index):
    assert column_index(column_letters(index)) == index


def test_column_letters_rejects_negative():
    with pytest.raises(ValueError):
        column_letters(-1)


# ----------------------- to_grid -----------------------


def test_to_grid_aligns_sparse_cells_by_address():
    # Arrange: data row is missing B and everything after C
    rows = [
        [("A", "Date"), ("B", "Description"), ("C", "Amount"), ("D", "Notes")],
        [("A", "2024-01-15"), ("C", "5.75")],
    ]

    # Act
    grid = to_grid(rows)

    # Assert
    assert grid == [
        ["Date", "Description", "Amount", "Notes"],
        ["2024-01-15", "", "5.75", ""],
    ]


def test_to_grid_width_comes_from_header_row():
    rows = [
        [("A", "Date"), ("B", "Amount")],
        [("A", "x"), ("B", "y"), ("E", "beyond header")],
    ]
    grid = to_grid(rows)
    assert grid[1] == ["x", "y"]


def test_to_grid_header_gap_still_counts_columns():
    rows = [[("A", "Date"), ("C", "Amount")], [("C", "1")]]
    assert to_grid(rows) == [["Date", "", "Amount"], ["", "", "1"]]


@pytest.mark.parametrize("rows", [[], [[("A", "Date")]]])
def test_to_grid_header_only_or_empty_is_empty(rows):
    assert to_grid(rows) == []


def test_cells_from_values_skips_blanks_and_addresses_positions():
    assert cells_from_values(["a", "", "c"]) == [("A", "a"), ("C", "c")]
