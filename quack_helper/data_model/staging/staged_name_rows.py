# quack_helper/data_model/staging/staged_name_rows.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class StagedCategoryRow:
    name: str = ""
    sort_order: str = ""

    parsed_sort_order: Optional[int] = None
    matched_category_id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.matched_category_id is None


@dataclass
class StagedSectorRow:
    name: str = ""
    sort_order: str = ""

    parsed_sort_order: Optional[int] = None
    matched_sector_id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.matched_sector_id is None


@dataclass
class StagedSectorCategoryLinkRow:
    sector_name: str = ""
    category_name: str = ""

    matched_sector_id: Optional[str] = None
    matched_category_id: Optional[str] = None
    is_new_link: bool = False  # True unless both exist and are already linked
