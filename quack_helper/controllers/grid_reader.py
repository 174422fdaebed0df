"""
Sparse sheet → dense grid.

Workbook readers hand over each sheet as rows of ``(column letters, text)``
cells where blank cells are simply absent. This module rebuilds a rectangular
``List[List[str]]`` so that a row with missing trailing (or middle) cells still
lines up with the header row by column position.
"""

# quack_helper/controllers/grid_reader.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

log = logging.getLogger(__name__)

RawCell = Tuple[str, str]  # (column letters, cell text)


@dataclass
class RawSheet:
    name: str
    rows: List[List[RawCell]] = field(default_factory=list)


def column_index(letters: str) -> int:
    """
    Decode spreadsheet column letters to a 0-based index.

    Bijective base-26: there is no zero digit, so "A" is 1 and "AA" is 27 in
    the one-based count, and the result is shifted down by one.

    Examples:
        column_index("A")  -> 0
        column_index("Z")  -> 25
        column_index("AA") -> 26
        column_index("BA") -> 52

    Raises:
        ValueError: for an empty string or any character outside A-Z.
    """
    txt = letters.strip().upper()
    if not txt:
        raise ValueError("Empty column reference")
    n = 0
    for ch in txt:
        if not "A" <= ch <= "Z":
            raise ValueError(f"Invalid column reference: {letters!r}")
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def column_letters(index: int) -> str:
    """Inverse of `column_index`: 0 -> "A", 26 -> "AA"."""
    if index < 0:
        raise ValueError(f"Column index must be >= 0, got {index}")
    n = index + 1
    out: List[str] = []
    while n:
        n, rem = divmod(n - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def to_grid(rows: Sequence[Sequence[RawCell]]) -> List[List[str]]:
    """
    Densify sparse rows. Width is the header row's highest column index + 1.

    Returns an empty grid when there is no data row (header only or empty).
    Cells beyond the header's width are dropped; a repeated address keeps the
    last value.
    """
    if len(rows) <= 1:
        log.debug("Sheet has %d row(s); nothing to read", len(rows))
        return []

    header = rows[0]
    if not header:
        return []
    width = max(column_index(col) for col, _ in header) + 1

    grid: List[List[str]] = []
    for raw in rows:
        dense = [""] * width
        for col, text in raw:
            idx = column_index(col)
            if idx < width:
                dense[idx] = text
        grid.append(dense)
    return grid


def cells_from_values(values: Sequence[str]) -> List[RawCell]:
    """Address a positional row (e.g. from csv) as sparse cells, skipping blanks."""
    return [(column_letters(i), v) for i, v in enumerate(values) if v != ""]
