"""
Dense sheet grids → typed staging rows.

Each parser reads columns through the resolved header mapping and drops rows
whose identifying fields are all blank.
Transactions rows keep raw text only (validation parses them because parse
failures become issues); the secondary sheets get their lenient numeric
parsing here.
"""

# quack_helper/controllers/staging_parsers.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from quack_helper.controllers.grid_reader import RawSheet, to_grid
from quack_helper.controllers.header_resolver import (
    CATEGORIES_SHEET,
    SECTOR_CATEGORIES_SHEET,
    SECTORS_SHEET,
    SPLITS_SHEET,
    TRANSACTIONS_SHEET,
    NamedEntityColumn,
    SectorCategoryColumn,
    SplitColumn,
    TransactionColumn,
    cell,
    find_sheet,
    resolve_headers,
)
from quack_helper.data_model.interfaces import MissingSheetError
from quack_helper.data_model.staging import (
    RowNumber,
    StagedCategoryRow,
    StagedSectorCategoryLinkRow,
    StagedSectorRow,
    StagedSplitRow,
    StagedTransactionRow,
)
from quack_helper.utilities import to_int, to_optional_decimal, to_percentage

log = logging.getLogger(__name__)

Grid = List[List[str]]


@dataclass
class StagedWorkbook:
    """Everything staged from one file, before validation."""

    transactions: List[StagedTransactionRow] = field(default_factory=list)
    splits: List[StagedSplitRow] = field(default_factory=list)
    categories: List[StagedCategoryRow] = field(default_factory=list)
    sectors: List[StagedSectorRow] = field(default_factory=list)
    sector_category_links: List[StagedSectorCategoryLinkRow] = field(default_factory=list)


def stage_transactions(grid: Sequence[Sequence[str]]) -> List[StagedTransactionRow]:
    """Row numbers are assigned here, once, in sheet order among the kept rows."""
    if not grid:
        return []
    mapping = resolve_headers(grid[0], TransactionColumn)
    rows: List[StagedTransactionRow] = []
    for values in grid[1:]:
        date = cell(values, mapping, TransactionColumn.DATE)
        description = cell(values, mapping, TransactionColumn.DESCRIPTION)
        amount = cell(values, mapping, TransactionColumn.AMOUNT)
        if not (date or description or amount):
            continue
        rows.append(
            StagedTransactionRow(
                row_number=RowNumber(len(rows) + 1),
                row=cell(values, mapping, TransactionColumn.ROW),
                date=date,
                description=description,
                amount=amount,
                type=cell(values, mapping, TransactionColumn.TYPE),
                category=cell(values, mapping, TransactionColumn.CATEGORY),
                paid_by=cell(values, mapping, TransactionColumn.PAID_BY),
                paid_to=cell(values, mapping, TransactionColumn.PAID_TO),
                expense_for=cell(values, mapping, TransactionColumn.EXPENSE_FOR),
                reimburses_row=cell(values, mapping, TransactionColumn.REIMBURSES_ROW),
                excluded_from_budget=cell(values, mapping, TransactionColumn.EXCLUDED_FROM_BUDGET),
                notes=cell(values, mapping, TransactionColumn.NOTES),
            )
        )
    return rows


def _row_number_or_none(text: str) -> Optional[RowNumber]:
    n = to_int(text)
    return RowNumber(n) if n is not None and n >= 1 else None


def stage_splits(grid: Sequence[Sequence[str]]) -> List[StagedSplitRow]:
    if not grid:
        return []
    mapping = resolve_headers(grid[0], SplitColumn)
    rows: List[StagedSplitRow] = []
    for values in grid[1:]:
        txn_row = cell(values, mapping, SplitColumn.TRANSACTION_ROW)
        member = cell(values, mapping, SplitColumn.MEMBER_NAME)
        if not (txn_row or member):
            continue
        owed = cell(values, mapping, SplitColumn.OWED_AMOUNT)
        owed_pct = cell(values, mapping, SplitColumn.OWED_PERCENTAGE)
        paid = cell(values, mapping, SplitColumn.PAID_AMOUNT)
        paid_pct = cell(values, mapping, SplitColumn.PAID_PERCENTAGE)
        rows.append(
            StagedSplitRow(
                transaction_row=txn_row,
                member_name=member,
                owed_amount=owed,
                owed_percentage=owed_pct,
                paid_amount=paid,
                paid_percentage=paid_pct,
                parsed_transaction_row=_row_number_or_none(txn_row),
                parsed_owed_amount=to_optional_decimal(owed),
                parsed_owed_percentage=to_percentage(owed_pct),
                parsed_paid_amount=to_optional_decimal(paid),
                parsed_paid_percentage=to_percentage(paid_pct),
            )
        )
    return rows


def stage_categories(grid: Sequence[Sequence[str]]) -> List[StagedCategoryRow]:
    if not grid:
        return []
    mapping = resolve_headers(grid[0], NamedEntityColumn)
    rows: List[StagedCategoryRow] = []
    for values in grid[1:]:
        name = cell(values, mapping, NamedEntityColumn.NAME)
        if not name:
            continue
        order = cell(values, mapping, NamedEntityColumn.SORT_ORDER)
        rows.append(StagedCategoryRow(name=name, sort_order=order, parsed_sort_order=to_int(order)))
    return rows


def stage_sectors(grid: Sequence[Sequence[str]]) -> List[StagedSectorRow]:
    if not grid:
        return []
    mapping = resolve_headers(grid[0], NamedEntityColumn)
    rows: List[StagedSectorRow] = []
    for values in grid[1:]:
        name = cell(values, mapping, NamedEntityColumn.NAME)
        if not name:
            continue
        order = cell(values, mapping, NamedEntityColumn.SORT_ORDER)
        rows.append(StagedSectorRow(name=name, sort_order=order, parsed_sort_order=to_int(order)))
    return rows


def stage_sector_category_links(
    grid: Sequence[Sequence[str]],
) -> List[StagedSectorCategoryLinkRow]:
    if not grid:
        return []
    mapping = resolve_headers(grid[0], SectorCategoryColumn)
    rows: List[StagedSectorCategoryLinkRow] = []
    for values in grid[1:]:
        sector = cell(values, mapping, SectorCategoryColumn.SECTOR_NAME)
        category = cell(values, mapping, SectorCategoryColumn.CATEGORY_NAME)
        # a link needs both ends
        if not (sector and category):
            continue
        rows.append(StagedSectorCategoryLinkRow(sector_name=sector, category_name=category))
    return rows


def stage_workbook(sheets: Sequence[RawSheet]) -> StagedWorkbook:
    """
    Stage every recognized sheet. Only Transactions is mandatory.

    Raises:
        MissingSheetError: no sheet named Transactions (case-insensitive).
    """
    by_name: Dict[str, RawSheet] = {s.name: s for s in sheets}
    names = list(by_name)

    def grid_for(sheet_name: str) -> Grid:
        actual = find_sheet(names, sheet_name)
        return to_grid(by_name[actual].rows) if actual is not None else []

    if find_sheet(names, TRANSACTIONS_SHEET) is None:
        raise MissingSheetError(TRANSACTIONS_SHEET)

    staged = StagedWorkbook(
        transactions=stage_transactions(grid_for(TRANSACTIONS_SHEET)),
        splits=stage_splits(grid_for(SPLITS_SHEET)),
        categories=stage_categories(grid_for(CATEGORIES_SHEET)),
        sectors=stage_sectors(grid_for(SECTORS_SHEET)),
        sector_category_links=stage_sector_category_links(grid_for(SECTOR_CATEGORIES_SHEET)),
    )
    log.info(
        "Staged %d transactions, %d splits, %d categories, %d sectors, %d sector links",
        len(staged.transactions),
        len(staged.splits),
        len(staged.categories),
        len(staged.sectors),
        len(staged.sector_category_links),
    )
    return staged
