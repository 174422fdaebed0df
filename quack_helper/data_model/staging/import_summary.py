# quack_helper/data_model/staging/import_summary.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..interfaces import RecursiveDictStr


@dataclass(frozen=True)
class ImportSummary:
    """
    Household-level roll-up of a validated batch.

    Always produced by ``summary_aggregator.summarize`` from the staged rows;
    never edited by hand. Name tuples keep the first spelling seen and are
    deduplicated case-insensitively.
    """

    total_rows: int = 0
    valid_rows: int = 0
    warning_rows: int = 0
    error_rows: int = 0

    new_categories_to_create: Tuple[str, ...] = ()
    existing_categories_used: Tuple[str, ...] = ()
    new_sectors_to_create: Tuple[str, ...] = ()
    existing_sectors_used: Tuple[str, ...] = ()
    new_sector_category_links: Tuple[Tuple[str, str], ...] = ()
    existing_sector_category_links: Tuple[Tuple[str, str], ...] = ()
    new_managed_members_to_create: Tuple[str, ...] = ()
    existing_members_used: Tuple[str, ...] = ()

    reimbursements_with_references: int = 0
    transactions_with_splits: int = 0
    total_split_rows: int = 0
    orphaned_split_rows: int = 0

    @property
    def can_import_all(self) -> bool:
        return self.error_rows == 0

    @property
    def can_import_valid(self) -> bool:
        return self.valid_rows + self.warning_rows > 0

    @property
    def importable_rows(self) -> int:
        return self.valid_rows + self.warning_rows

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "warning_rows": self.warning_rows,
            "error_rows": self.error_rows,
            "new_categories_to_create": list(self.new_categories_to_create),
            "existing_categories_used": list(self.existing_categories_used),
            "new_sectors_to_create": list(self.new_sectors_to_create),
            "existing_sectors_used": list(self.existing_sectors_used),
            "new_sector_category_links": [list(p) for p in self.new_sector_category_links],
            "existing_sector_category_links": [
                list(p) for p in self.existing_sector_category_links
            ],
            "new_managed_members_to_create": list(self.new_managed_members_to_create),
            "existing_members_used": list(self.existing_members_used),
            "reimbursements_with_references": self.reimbursements_with_references,
            "transactions_with_splits": self.transactions_with_splits,
            "total_split_rows": self.total_split_rows,
            "orphaned_split_rows": self.orphaned_split_rows,
            "can_import_all": self.can_import_all,
            "can_import_valid": self.can_import_valid,
        }
