# quack_helper/data_model/household/export_data.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

from .category import Category, Sector
from .member import Member
from .transaction import SplitLedgerEntry, Transaction


@dataclass(frozen=True)
class ExportData:
    """Live household data handed to the export writer."""

    household_name: str
    transactions: Tuple[Transaction, ...] = ()
    ledger: Mapping[str, Tuple[SplitLedgerEntry, ...]] = field(default_factory=dict)
    members: Tuple[Member, ...] = ()
    categories: Tuple[Category, ...] = ()
    sectors: Tuple[Sector, ...] = ()
    sector_category_links: Mapping[str, List[str]] = field(default_factory=dict)

    def ledger_for(self, transaction_id: str) -> Tuple[SplitLedgerEntry, ...]:
        return tuple(self.ledger.get(transaction_id, ()))

    def sector_category_pairs(self) -> List[Tuple[str, str]]:
        """(sector name, category name) pairs in sector order, skipping dangling ids."""
        cat_names: Dict[str, str] = {c.id: c.name for c in self.categories}
        pairs: List[Tuple[str, str]] = []
        for sector in self.sectors:
            for cid in self.sector_category_links.get(sector.id, []):
                if cid in cat_names:
                    pairs.append((sector.name, cat_names[cid]))
        return pairs
