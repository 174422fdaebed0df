#!/usr/bin/env python3
"""
Core Utilities

Features:
- String utilities shared by the staging and validation stages
- Case-insensitive name sets that keep the first spelling seen
- File I/O helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Dict, Iterable, Iterator, Literal, Optional, Tuple, overload

# region Common functions


def is_null_or_whitespace(s: Optional[str]) -> bool:
    """Check if a string is None, empty, or consists only of whitespace."""
    return s is None or s.strip() == ""


def name_key(s: str) -> str:
    """Lookup key for entity names: trimmed and case-folded."""
    return s.strip().casefold()


@overload
def open_for_read(path: Path, binary: Literal[True], **kwargs: Any) -> IO[bytes]: ...
@overload
def open_for_read(path: Path, binary: Literal[False], **kwargs: Any) -> IO[str]: ...


def open_for_read(path: Path, binary: bool = False, **kwargs: Any) -> IO[Any]:
    mode = "rb" if binary else "r"
    return open(path, mode, **kwargs)


# endregion Common functions

# region Name sets


class NameSet:
    """
    Ordered set of display names deduplicated case-insensitively.

    The first spelling added is the one kept: adding "groceries" after
    "Groceries" is a no-op and iteration yields "Groceries".
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._by_key: Dict[str, str] = {}
        for n in names:
            self.add(n)

    def add(self, name: str) -> None:
        cleaned = name.strip()
        if cleaned:
            self._by_key.setdefault(name_key(cleaned), cleaned)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name_key(name) in self._by_key

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)

    def to_tuple(self) -> Tuple[str, ...]:
        return tuple(self._by_key.values())


# endregion Name sets
