"""
Reference HouseholdDataStore kept entirely in memory.

Used by the CLI for dry runs and by the tests. Ids are deterministic
(``m-1``, ``c-1``, ``s-1``, ``t-1`` ...). Failures can be injected:
• ``fail_on`` names (members, categories, sectors, transaction descriptions)
  make the matching create call raise StoreError.
• ``unavailable = True`` makes every call raise StoreUnavailableError.
"""

# quack_helper/stores/in_memory_store.py
from __future__ import annotations

import itertools
import logging
import threading
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from quack_helper.data_model.household import (
    Category,
    ExportData,
    Member,
    NewTransaction,
    Sector,
    SplitLedgerEntry,
    Transaction,
)
from quack_helper.data_model.interfaces import (
    MemberRole,
    MemberStatus,
    StoreError,
    StoreUnavailableError,
)
from quack_helper.utilities import name_key

log = logging.getLogger(__name__)


class InMemoryHouseholdStore:
    def __init__(self, fail_on: Iterable[str] = ()) -> None:
        self._lock = threading.RLock()
        self._counter = itertools.count(1)
        self.fail_on = {name_key(n) for n in fail_on}
        self.unavailable = False

        self.household_names: Dict[str, str] = {}
        self.members: Dict[str, List[Member]] = defaultdict(list)
        self.categories: Dict[str, List[Category]] = defaultdict(list)
        self.sectors: Dict[str, List[Sector]] = defaultdict(list)
        self.sector_links: Dict[str, List[str]] = defaultdict(list)
        self.transactions: Dict[str, List[Transaction]] = defaultdict(list)
        self.ledger: Dict[str, List[SplitLedgerEntry]] = defaultdict(list)
        self._sector_household: Dict[str, str] = {}

    # region Helpers

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"

    def _check(self, name: Optional[str] = None) -> None:
        if self.unavailable:
            raise StoreUnavailableError("store is unreachable")
        if name is not None and name_key(name) in self.fail_on:
            raise StoreError(f"store rejected '{name}'")

    # endregion Helpers

    # region Seeding

    def add_household(self, household_id: str, name: str) -> None:
        with self._lock:
            self.household_names[household_id] = name

    def add_member(
        self,
        household_id: str,
        display_name: str,
        status: MemberStatus = MemberStatus.APPROVED,
        role: MemberRole = MemberRole.MEMBER,
    ) -> Member:
        with self._lock:
            member = Member(
                id=self._next_id("m"), display_name=display_name, status=status, role=role
            )
            self.members[household_id].append(member)
            return member

    # endregion Seeding

    # region HouseholdDataStore

    def list_members(self, household_id: str) -> List[Member]:
        self._check()
        with self._lock:
            return list(self.members[household_id])

    def list_categories(self, household_id: str) -> List[Category]:
        self._check()
        with self._lock:
            return list(self.categories[household_id])

    def list_sectors(self, household_id: str) -> List[Sector]:
        self._check()
        with self._lock:
            return list(self.sectors[household_id])

    def list_sector_category_links(self, household_id: str) -> Dict[str, List[str]]:
        self._check()
        with self._lock:
            return {
                s.id: list(self.sector_links.get(s.id, []))
                for s in self.sectors[household_id]
            }

    def create_managed_member(self, household_id: str, name: str) -> str:
        self._check(name)
        with self._lock:
            member = Member(
                id=self._next_id("m"),
                display_name=name,
                status=MemberStatus.APPROVED,
                role=MemberRole.MEMBER,
                is_managed=True,
            )
            self.members[household_id].append(member)
            log.debug("Created managed member %s (%s)", name, member.id)
            return member.id

    def create_category(
        self, household_id: str, name: str, *, sort_order: Optional[int] = None
    ) -> str:
        self._check(name)
        with self._lock:
            existing = self.categories[household_id]
            order = sort_order if sort_order is not None else len(existing)
            category = Category(id=self._next_id("c"), name=name, sort_order=order)
            existing.append(category)
            return category.id

    def create_sector(
        self, household_id: str, name: str, *, sort_order: Optional[int] = None
    ) -> str:
        self._check(name)
        with self._lock:
            existing = self.sectors[household_id]
            order = sort_order if sort_order is not None else len(existing)
            sector = Sector(id=self._next_id("s"), name=name, sort_order=order)
            existing.append(sector)
            self._sector_household[sector.id] = household_id
            return sector.id

    def link_sector_category(self, sector_id: str, category_id: str) -> None:
        self._check()
        with self._lock:
            if sector_id not in self._sector_household:
                raise StoreError(f"unknown sector id {sector_id}")
            links = self.sector_links[sector_id]
            if category_id not in links:
                links.append(category_id)

    def create_transaction(self, transaction: NewTransaction) -> str:
        self._check(transaction.description)
        with self._lock:
            txn = Transaction(
                id=self._next_id("t"),
                date=transaction.date,
                description=transaction.description,
                amount=transaction.amount,
                transaction_type=transaction.transaction_type,
                paid_by_member_id=transaction.paid_by_member_id,
                paid_to_member_id=transaction.paid_to_member_id,
                category_id=transaction.category_id,
                reimburses_transaction_id=transaction.reimburses_transaction_id,
                excluded_from_budget=transaction.excluded_from_budget,
                notes=transaction.notes or "",
            )
            self.transactions[transaction.household_id].append(txn)
            return txn.id

    def create_split_ledger_entries(
        self, transaction_id: str, entries: Sequence[SplitLedgerEntry]
    ) -> None:
        self._check()
        with self._lock:
            self.ledger[transaction_id].extend(entries)

    # endregion HouseholdDataStore

    def export_data(self, household_id: str) -> ExportData:
        """Snapshot of everything stored for ``household_id``, ready for the export writer."""
        self._check()
        with self._lock:
            txns = tuple(self.transactions[household_id])
            return ExportData(
                household_name=self.household_names.get(household_id, household_id),
                transactions=txns,
                ledger={t.id: tuple(self.ledger.get(t.id, ())) for t in txns},
                members=tuple(self.members[household_id]),
                categories=tuple(self.categories[household_id]),
                sectors=tuple(self.sectors[household_id]),
                sector_category_links=self.list_sector_category_links(household_id),
            )
