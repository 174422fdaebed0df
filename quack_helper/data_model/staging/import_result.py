# quack_helper/data_model/staging/import_result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..interfaces import RecursiveDictStr


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one commit attempt. Rows already written stay written even when cancelled."""

    success_count: int = 0
    failed_count: int = 0
    created_categories: Tuple[str, ...] = ()
    created_sectors: Tuple[str, ...] = ()
    created_sector_category_links: Tuple[Tuple[str, str], ...] = ()
    created_managed_members: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    cancelled: bool = False

    @property
    def is_fully_successful(self) -> bool:
        return self.failed_count == 0 and not self.errors and not self.cancelled

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {
            "success_count": self.success_count,
            "failed_count": self.failed_count,
            "created_categories": list(self.created_categories),
            "created_sectors": list(self.created_sectors),
            "created_sector_category_links": [
                list(p) for p in self.created_sector_category_links
            ],
            "created_managed_members": list(self.created_managed_members),
            "errors": list(self.errors),
            "cancelled": self.cancelled,
        }
