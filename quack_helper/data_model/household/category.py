# quack_helper/data_model/household/category.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    sort_order: int = 0


@dataclass(frozen=True)
class Sector:
    """A named group of categories (e.g. "Home" → Rent, Utilities)."""

    id: str
    name: str
    sort_order: int = 0
