"""
Commit a validated batch to a HouseholdDataStore.

Order of writes:
1. managed members named by the batch
2. categories
3. sectors
4. sector-category links
5. transactions and their split ledger entries, in two passes (plain rows,
   then reimbursements, so a reimbursement can point at the transaction id
   created for the row it names)

Steps 1-4 issue independent creations on a small thread pool. Transactions
are written one at a time after every id they need is known. A failed store
call fails only the entity or row that made it; ``StoreUnavailableError``
aborts the whole commit. Nothing is rolled back.
"""

# quack_helper/controllers/commit_orchestrator.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, TypeVar

from quack_helper.controllers.split_ledger import equal_shares, merge_ledger
from quack_helper.controllers.split_validator import splits_by_row
from quack_helper.controllers.staging_parsers import StagedWorkbook
from quack_helper.data_model.household import (
    HouseholdContext,
    NewTransaction,
    SplitLedgerEntry,
)
from quack_helper.data_model.interfaces import (
    CommitNotAllowedError,
    HouseholdDataStore,
    PaidByKind,
    SplitKind,
    StoreError,
    StoreUnavailableError,
    TransactionType,
)
from quack_helper.data_model.staging import (
    EntityRef,
    ImportResult,
    ImportSummary,
    RowNumber,
    StagedSplitRow,
    StagedTransactionRow,
)
from quack_helper.utilities import DEFAULT_SETTINGS, ImportSettings, NameSet, name_key

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[int, int], None]


class CommitMode(Enum):
    ALL = "all"
    VALID_ONLY = "valid_only"


class DependencyError(Exception):
    """A row cannot be written because something it references is missing."""

    def __init__(self, cause: str) -> None:
        super().__init__(cause)
        self.cause = cause


@dataclass
class _CommitRun:
    """Mutable bookkeeping for one commit; ids and failures are keyed by `name_key`."""

    member_ids: Dict[str, str] = field(default_factory=dict)
    member_failures: Dict[str, str] = field(default_factory=dict)
    category_ids: Dict[str, str] = field(default_factory=dict)
    category_failures: Dict[str, str] = field(default_factory=dict)
    sector_ids: Dict[str, str] = field(default_factory=dict)
    sector_failures: Dict[str, str] = field(default_factory=dict)

    created_members: List[str] = field(default_factory=list)
    created_categories: List[str] = field(default_factory=list)
    created_sectors: List[str] = field(default_factory=list)
    created_links: List[Tuple[str, str]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class CommitOrchestrator:
    def __init__(
        self,
        store: HouseholdDataStore,
        context: HouseholdContext,
        settings: ImportSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.store = store
        self.context = context
        self.settings = settings

    # region Public API

    def import_all(
        self,
        staged: StagedWorkbook,
        summary: ImportSummary,
        *,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        return self.commit(
            staged, summary, CommitMode.ALL, progress=progress, cancel_event=cancel_event
        )

    def import_valid_only(
        self,
        staged: StagedWorkbook,
        summary: ImportSummary,
        *,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        return self.commit(
            staged, summary, CommitMode.VALID_ONLY, progress=progress, cancel_event=cancel_event
        )

    def commit(
        self,
        staged: StagedWorkbook,
        summary: ImportSummary,
        mode: CommitMode,
        *,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        """
        Write the batch and report what happened.

        Raises:
            CommitNotAllowedError: ``mode`` is not permitted by ``summary``.
            StoreUnavailableError: the store could not be reached; earlier writes stay.
        """
        if mode is CommitMode.ALL and not summary.can_import_all:
            raise CommitNotAllowedError(
                f"Import All needs an error-free batch; {summary.error_rows} row(s) have errors"
            )
        if mode is CommitMode.VALID_ONLY and not summary.can_import_valid:
            raise CommitNotAllowedError("No valid rows to import")

        rows = [r for r in staged.transactions if r.is_valid]
        grouped = splits_by_row(staged.splits)
        run = _CommitRun()
        log.info(
            "Commit (%s) to household %s: %d of %d rows",
            mode.value,
            self.context.household_id,
            len(rows),
            len(staged.transactions),
        )

        self._create_members(rows, grouped, run)
        self._create_categories(rows, staged, run)
        self._create_sectors(staged, run)
        self._create_links(staged, run)
        success, failed, cancelled = self._create_transactions(
            rows, grouped, run, progress, cancel_event
        )

        result = ImportResult(
            success_count=success,
            failed_count=failed,
            created_categories=tuple(run.created_categories),
            created_sectors=tuple(run.created_sectors),
            created_sector_category_links=tuple(run.created_links),
            created_managed_members=tuple(run.created_members),
            errors=tuple(run.errors),
            cancelled=cancelled,
        )
        log.info(
            "Commit finished: %d imported, %d failed, %d error message(s)%s",
            result.success_count,
            result.failed_count,
            len(result.errors),
            " (cancelled)" if cancelled else "",
        )
        return result

    # endregion Public API

    # region Entity creation

    def _run_concurrently(
        self, items: Sequence[T], fn: Callable[[T], R]
    ) -> Tuple[Dict[int, R], Dict[int, str]]:
        """Apply ``fn`` to every item on the worker pool; results and StoreError causes by index."""
        done: Dict[int, R] = {}
        failed: Dict[int, str] = {}
        if not items:
            return done, failed
        with ThreadPoolExecutor(max_workers=max(1, self.settings.max_workers)) as pool:
            futures = {pool.submit(fn, item): i for i, item in enumerate(items)}
            for fut in as_completed(futures):
                i = futures[fut]
                try:
                    done[i] = fut.result()
                except StoreUnavailableError:
                    log.error("Store unavailable; aborting commit")
                    raise
                except StoreError as e:
                    failed[i] = e.cause
        return done, failed

    def _create_named(
        self,
        label: str,
        names: NameSet,
        create: Callable[[str], str],
        ids: Dict[str, str],
        failures: Dict[str, str],
        created: List[str],
        errors: List[str],
    ) -> None:
        ordered = names.to_tuple()
        done, failed = self._run_concurrently(ordered, create)
        for i, name in enumerate(ordered):
            if i in done:
                ids[name_key(name)] = done[i]
                created.append(name)
            else:
                failures[name_key(name)] = failed[i]
                errors.append(f"{label} '{name}': {failed[i]}")
                log.warning("%s '%s' was not created: %s", label, name, failed[i])
        log.info("Created %d of %d %s(s)", len(done), len(ordered), label.lower())

    def _create_members(
        self,
        rows: Sequence[StagedTransactionRow],
        grouped: Dict[RowNumber, List[StagedSplitRow]],
        run: _CommitRun,
    ) -> None:
        names = NameSet(ref.name for row in rows for ref in row.member_refs() if ref.is_new)
        for row in rows:
            if row.uses_custom_split:
                for split in grouped.get(row.row_number, []):
                    if split.will_create_member:
                        names.add(split.member_name)
        hid = self.context.household_id
        self._create_named(
            "Member",
            names,
            lambda n: self.store.create_managed_member(hid, n),
            run.member_ids,
            run.member_failures,
            run.created_members,
            run.errors,
        )

    def _create_categories(
        self,
        rows: Sequence[StagedTransactionRow],
        staged: StagedWorkbook,
        run: _CommitRun,
    ) -> None:
        names = NameSet()
        sort_orders: Dict[str, Optional[int]] = {}
        for cat in staged.categories:
            if cat.is_new:
                names.add(cat.name)
                sort_orders.setdefault(name_key(cat.name), cat.parsed_sort_order)
        for row in rows:
            if row.parsed_type is TransactionType.EXPENSE and row.category_ref is not None:
                if row.category_ref.is_new:
                    names.add(row.category_ref.name)
        for link in staged.sector_category_links:
            if link.is_new_link and link.matched_category_id is None:
                names.add(link.category_name)

        hid = self.context.household_id
        self._create_named(
            "Category",
            names,
            lambda n: self.store.create_category(
                hid, n, sort_order=sort_orders.get(name_key(n))
            ),
            run.category_ids,
            run.category_failures,
            run.created_categories,
            run.errors,
        )

    def _create_sectors(self, staged: StagedWorkbook, run: _CommitRun) -> None:
        names = NameSet()
        sort_orders: Dict[str, Optional[int]] = {}
        for sec in staged.sectors:
            if sec.is_new:
                names.add(sec.name)
                sort_orders.setdefault(name_key(sec.name), sec.parsed_sort_order)
        for link in staged.sector_category_links:
            if link.is_new_link and link.matched_sector_id is None:
                names.add(link.sector_name)

        hid = self.context.household_id
        self._create_named(
            "Sector",
            names,
            lambda n: self.store.create_sector(hid, n, sort_order=sort_orders.get(name_key(n))),
            run.sector_ids,
            run.sector_failures,
            run.created_sectors,
            run.errors,
        )

    def _create_links(self, staged: StagedWorkbook, run: _CommitRun) -> None:
        pending: List[Tuple[str, str, Tuple[str, str]]] = []
        seen: Set[Tuple[str, str]] = set()
        for link in staged.sector_category_links:
            if not link.is_new_link:
                continue
            pair = (link.sector_name, link.category_name)
            key = (name_key(link.sector_name), name_key(link.category_name))
            if key in seen:
                continue
            seen.add(key)

            sid = link.matched_sector_id or run.sector_ids.get(key[0])
            cid = link.matched_category_id or run.category_ids.get(key[1])
            if sid is None or cid is None:
                missing = (
                    f"sector '{link.sector_name}' was not created"
                    if sid is None
                    else f"category '{link.category_name}' was not created"
                )
                run.errors.append(f"Sector link '{pair[0]}' -> '{pair[1]}': {missing}")
                continue
            pending.append((sid, cid, pair))

        done, failed = self._run_concurrently(
            pending, lambda p: self.store.link_sector_category(p[0], p[1])
        )
        for i, (_, _, pair) in enumerate(pending):
            if i in done:
                run.created_links.append(pair)
            else:
                run.errors.append(f"Sector link '{pair[0]}' -> '{pair[1]}': {failed[i]}")
                log.warning("Sector link %s -> %s failed: %s", pair[0], pair[1], failed[i])

    # endregion Entity creation

    # region Transactions

    def _active_member_ids(self) -> List[str]:
        """Approved members at commit time, in display-name order."""
        hid = self.context.household_id
        try:
            members = self.store.list_members(hid)
        except StoreUnavailableError:
            log.error("Store unavailable while listing members; aborting commit")
            raise
        except StoreError as e:
            log.warning("Could not re-list members (%s); using the validation snapshot", e.cause)
            members = list(self.context.members)
        active = sorted((m for m in members if m.is_active), key=lambda m: name_key(m.display_name))
        return [m.id for m in active]

    def _create_transactions(
        self,
        rows: Sequence[StagedTransactionRow],
        grouped: Dict[RowNumber, List[StagedSplitRow]],
        run: _CommitRun,
        progress: Optional[ProgressCallback],
        cancel_event: Optional[threading.Event],
    ) -> Tuple[int, int, bool]:
        active = self._active_member_ids()
        first_pass = [r for r in rows if not r.is_reimbursement_with_reference]
        second_pass = [r for r in rows if r.is_reimbursement_with_reference]
        total = len(rows)
        row_to_txn: Dict[int, str] = {}
        success = failed = processed = 0

        for row in first_pass + second_pass:
            if cancel_event is not None and cancel_event.is_set():
                log.warning("Commit cancelled after %d of %d rows", processed, total)
                return success, failed, True

            reimburses_id: Optional[str] = None
            if row.is_reimbursement_with_reference:
                target = int(row.parsed_reimburses_row)  # type: ignore[arg-type]
                reimburses_id = row_to_txn.get(target)
                if reimburses_id is None:
                    run.errors.append(
                        f"Row {row.row_number}: Referenced expense row {target} "
                        "was not imported or not found"
                    )

            try:
                txn = self._build_transaction(row, run, reimburses_id)
                ledger = (
                    self._build_ledger(row, run, active, grouped.get(row.row_number, []))
                    if txn.transaction_type is TransactionType.EXPENSE
                    else []
                )
                tid = self.store.create_transaction(txn)
                row_to_txn[int(row.row_number)] = tid
                if ledger:
                    try:
                        self.store.create_split_ledger_entries(tid, ledger)
                    except StoreUnavailableError:
                        raise
                    except StoreError as e:
                        raise StoreError(
                            f"transaction saved but its split ledger was not: {e.cause}"
                        ) from e
                success += 1
                log.debug("Row %d -> transaction %s", row.row_number, tid)
            except StoreUnavailableError:
                log.error("Store unavailable at row %d; aborting commit", row.row_number)
                raise
            except (StoreError, DependencyError) as e:
                failed += 1
                run.errors.append(f"Row {row.row_number}: {e.cause}")
                log.warning("Row %d failed: %s", row.row_number, e.cause)

            processed += 1
            if progress is not None:
                progress(processed, total)

        return success, failed, False

    def _member_id(self, ref: Optional[EntityRef], run: _CommitRun) -> str:
        """Bound id for ``ref``; None means the current actor."""
        if ref is None:
            if self.context.current_member_id is None:
                raise DependencyError("no member given and no current member to default to")
            return self.context.current_member_id
        if ref.entity_id is not None:
            return ref.entity_id
        key = name_key(ref.name)
        if key in run.member_ids:
            return run.member_ids[key]
        cause = run.member_failures.get(key, "not created")
        raise DependencyError(f"member '{ref.name}' was not created: {cause}")

    def _category_id(self, ref: Optional[EntityRef], run: _CommitRun) -> Optional[str]:
        if ref is None:
            return None
        if ref.entity_id is not None:
            return ref.entity_id
        key = name_key(ref.name)
        if key in run.category_ids:
            return run.category_ids[key]
        cause = run.category_failures.get(key, "not created")
        raise DependencyError(f"category '{ref.name}' was not created: {cause}")

    def _build_transaction(
        self,
        row: StagedTransactionRow,
        run: _CommitRun,
        reimburses_id: Optional[str],
    ) -> NewTransaction:
        if row.parsed_date is None or row.parsed_amount is None:
            raise DependencyError("date or amount was not parsed; validate the row first")
        if row.paid_by_mode is None or row.split_mode is None:
            raise DependencyError("members were not resolved; validate the row first")
        ttype = row.parsed_type or TransactionType.EXPENSE

        paid_by_id: Optional[str] = None
        paid_to_id: Optional[str] = None
        split_member_id: Optional[str] = None
        category_id: Optional[str] = None

        if ttype is TransactionType.EXPENSE:
            category_id = self._category_id(row.category_ref, run)
            if row.paid_by_mode.kind is PaidByKind.SINGLE:
                paid_by_id = self._member_id(row.paid_by_mode.member, run)
            if row.split_mode.kind is SplitKind.MEMBER:
                split_member_id = self._member_id(row.split_mode.member, run)
        elif ttype.has_recipient:
            paid_to_id = self._member_id(row.paid_to_ref, run)
        else:
            paid_by_id = self._member_id(row.paid_by_mode.member, run)
            paid_to_id = self._member_id(row.paid_to_ref, run)

        return NewTransaction(
            household_id=self.context.household_id,
            date=row.parsed_date,
            description=row.description,
            amount=row.parsed_amount,
            transaction_type=ttype,
            paid_by_kind=row.paid_by_mode.kind,
            split_kind=row.split_mode.kind,
            paid_by_member_id=paid_by_id,
            paid_to_member_id=paid_to_id,
            split_member_id=split_member_id,
            category_id=category_id,
            reimburses_transaction_id=reimburses_id,
            excluded_from_budget=row.parsed_excluded_from_budget,
            notes=row.notes or None,
        )

    def _split_member_id(self, split: StagedSplitRow, run: _CommitRun) -> str:
        if split.matched_member_id is not None:
            return split.matched_member_id
        return self._member_id(EntityRef(name=split.member_name), run)

    def _equal(self, amount: Decimal, active: Sequence[str]) -> Dict[str, Decimal]:
        if not active:
            raise DependencyError("household has no active members to split between")
        return equal_shares(amount, active, self.settings.money_quantum)

    def _build_ledger(
        self,
        row: StagedTransactionRow,
        run: _CommitRun,
        active: Sequence[str],
        row_splits: Sequence[StagedSplitRow],
    ) -> List[SplitLedgerEntry]:
        """Per-member owed/paid amounts for an expense, computed against members at commit time."""
        amount = row.parsed_amount
        if amount is None or row.paid_by_mode is None or row.split_mode is None:
            raise DependencyError("row was not validated")

        paid: Dict[str, Decimal] = {}
        if row.paid_by_mode.kind is PaidByKind.SINGLE:
            paid[self._member_id(row.paid_by_mode.member, run)] = amount
        elif row.paid_by_mode.kind is PaidByKind.SHARED:
            paid = self._equal(amount, active)
        else:
            for split in row_splits:
                mid = self._split_member_id(split, run)
                paid[mid] = paid.get(mid, Decimal(0)) + split.paid_for(amount)

        owed: Dict[str, Decimal] = {}
        if row.split_mode.kind is SplitKind.MEMBER:
            owed[self._member_id(row.split_mode.member, run)] = amount
        elif row.split_mode.kind is SplitKind.EQUAL:
            owed = self._equal(amount, active)
        else:
            for split in row_splits:
                mid = self._split_member_id(split, run)
                owed[mid] = owed.get(mid, Decimal(0)) + split.owed_for(amount)

        return [e for e in merge_ledger(paid, owed) if e.owed_amount or e.paid_amount]

    # endregion Transactions
