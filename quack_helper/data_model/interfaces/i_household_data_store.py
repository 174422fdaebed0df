# quack_helper/data_model/interfaces/i_household_data_store.py
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from typing_extensions import Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..household import Category, Member, NewTransaction, Sector, SplitLedgerEntry


@runtime_checkable
class HouseholdDataStore(Protocol):
    """
    Narrow persistence surface the import pipeline depends on.

    Every method may raise StoreError (row-scoped) or StoreUnavailableError
    (fatal for the batch). Implementations must tolerate concurrent entity
    creation calls from a small worker pool.
    """

    def list_members(self, household_id: str) -> List[Member]: ...

    def list_categories(self, household_id: str) -> List[Category]: ...

    def list_sectors(self, household_id: str) -> List[Sector]: ...

    def list_sector_category_links(self, household_id: str) -> Dict[str, List[str]]: ...

    def create_managed_member(self, household_id: str, name: str) -> str: ...

    def create_category(
        self, household_id: str, name: str, *, sort_order: Optional[int] = None
    ) -> str: ...

    def create_sector(
        self, household_id: str, name: str, *, sort_order: Optional[int] = None
    ) -> str: ...

    def link_sector_category(self, sector_id: str, category_id: str) -> None: ...

    def create_transaction(self, transaction: NewTransaction) -> str: ...

    def create_split_ledger_entries(
        self, transaction_id: str, entries: Sequence[SplitLedgerEntry]
    ) -> None: ...
