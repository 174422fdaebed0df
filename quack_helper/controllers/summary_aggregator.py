# quack_helper/controllers/summary_aggregator.py
from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Set, Tuple

from quack_helper.controllers.staging_parsers import StagedWorkbook
from quack_helper.data_model.household import HouseholdContext
from quack_helper.data_model.interfaces import TransactionType, ValidationStatus
from quack_helper.data_model.staging import (
    ImportSummary,
    StagedTransactionRow,
)
from quack_helper.utilities import NameSet, name_key

log = logging.getLogger(__name__)

Pair = Tuple[str, str]


def status_counts(rows: Sequence[StagedTransactionRow]) -> Dict[ValidationStatus, int]:
    counts = {s: 0 for s in ValidationStatus}
    for row in rows:
        counts[row.status] += 1
    return counts


def summarize(staged: StagedWorkbook, context: HouseholdContext) -> ImportSummary:
    """Pure reduction over a validated batch; call again after any re-validation."""
    rows = staged.transactions
    counts = status_counts(rows)

    # Categories: expense rows, the Categories sheet, and link rows
    new_categories, existing_categories = NameSet(), NameSet()
    for row in rows:
        if row.parsed_type is TransactionType.EXPENSE and row.category_ref is not None:
            target = new_categories if row.category_ref.is_new else existing_categories
            target.add(row.category_ref.name)
    for cat in staged.categories:
        (new_categories if cat.is_new else existing_categories).add(cat.name)

    new_sectors, existing_sectors = NameSet(), NameSet()
    for sec in staged.sectors:
        (new_sectors if sec.is_new else existing_sectors).add(sec.name)

    new_links: List[Pair] = []
    existing_links: List[Pair] = []
    seen_links: Set[Pair] = set()
    for link in staged.sector_category_links:
        key = (name_key(link.sector_name), name_key(link.category_name))
        if key in seen_links:
            continue
        seen_links.add(key)
        pair = (link.sector_name, link.category_name)
        if link.is_new_link:
            new_links.append(pair)
            if link.matched_sector_id is None:
                new_sectors.add(link.sector_name)
            else:
                existing_sectors.add(link.sector_name)
            if link.matched_category_id is None:
                new_categories.add(link.category_name)
            else:
                existing_categories.add(link.category_name)
        else:
            existing_links.append(pair)
            existing_sectors.add(link.sector_name)
            existing_categories.add(link.category_name)

    new_members, existing_members = NameSet(), NameSet()
    for row in rows:
        for ref in row.member_refs():
            if ref.is_new:
                new_members.add(ref.name)
            else:
                existing_members.add(ref.name)
    for split in staged.splits:
        if split.matched_member_id is not None:
            existing_members.add(split.member_name)

    row_numbers = {int(r.row_number) for r in rows}
    split_targets = [s.parsed_transaction_row for s in staged.splits]
    linked_rows = {int(t) for t in split_targets if t is not None and int(t) in row_numbers}
    orphaned = sum(1 for t in split_targets if t is None or int(t) not in row_numbers)

    summary = ImportSummary(
        total_rows=len(rows),
        valid_rows=counts[ValidationStatus.VALID],
        warning_rows=counts[ValidationStatus.VALID_WITH_WARNINGS],
        error_rows=counts[ValidationStatus.INVALID],
        new_categories_to_create=new_categories.to_tuple(),
        existing_categories_used=existing_categories.to_tuple(),
        new_sectors_to_create=new_sectors.to_tuple(),
        existing_sectors_used=existing_sectors.to_tuple(),
        new_sector_category_links=tuple(new_links),
        existing_sector_category_links=tuple(existing_links),
        new_managed_members_to_create=new_members.to_tuple(),
        existing_members_used=existing_members.to_tuple(),
        reimbursements_with_references=sum(
            1 for r in rows if r.parsed_reimburses_row is not None
        ),
        transactions_with_splits=len(linked_rows),
        total_split_rows=len(staged.splits),
        orphaned_split_rows=orphaned,
    )
    log.info(
        "Summary for %s: %d rows (%d valid, %d with warnings, %d invalid); "
        "%d new categories, %d new sectors, %d new links, %d new members",
        context.household_id,
        summary.total_rows,
        summary.valid_rows,
        summary.warning_rows,
        summary.error_rows,
        len(summary.new_categories_to_create),
        len(summary.new_sectors_to_create),
        len(summary.new_sector_category_links),
        len(summary.new_managed_members_to_create),
    )
    if orphaned:
        log.warning("%d split row(s) do not point at any staged transaction row", orphaned)
    return summary
