"""
Live household data → sheet rows.

The inverse of validation: per-member paid/owed amounts are compressed into the
same vocabulary the importer accepts (a single member name, the equal token or
the custom token), and custom rows get their exact amounts on the Splits sheet.
"""

# quack_helper/controllers/export_inference.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from quack_helper.controllers.header_resolver import (
    CATEGORIES_SHEET,
    MEMBERS_SHEET,
    SECTOR_CATEGORIES_SHEET,
    SECTORS_SHEET,
    SPLITS_SHEET,
    TRANSACTIONS_SHEET,
    MemberColumn,
    NamedEntityColumn,
    SectorCategoryColumn,
    SplitColumn,
    TransactionColumn,
)
from quack_helper.controllers.split_ledger import equal_shares
from quack_helper.data_model.household import ExportData, Member, Transaction
from quack_helper.data_model.interfaces import TransactionType
from quack_helper.utilities import (
    DEFAULT_SETTINGS,
    ImportSettings,
    format_amount,
    format_percentage,
    name_key,
)

log = logging.getLogger(__name__)

SheetRows = List[List[str]]


@dataclass
class SheetTable:
    name: str
    headers: List[str]
    rows: SheetRows = field(default_factory=list)


def infer_label(
    amounts: Mapping[str, Decimal],
    active_ids: Sequence[str],
    member_names: Mapping[str, str],
    settings: ImportSettings = DEFAULT_SETTINGS,
) -> Tuple[str, bool]:
    """
    Compress per-member amounts to one cell. Returns ``(label, is_custom)``.

    - exactly one nonzero member → that member's name
    - nonzero members == active members and amounts equal within epsilon → equal token
    - nonzero members are a subset of the active members and the amounts are exactly
      what an equal split of the total gives (small totals leave some shares at 0.00)
      → equal token
    - anything else → custom token
    - nobody → "" (not custom)
    """
    nonzero = {mid: amt for mid, amt in amounts.items() if amt}
    if not nonzero:
        return "", False
    if len(nonzero) == 1:
        (only,) = nonzero
        if only in member_names:
            return member_names[only], False
        return settings.custom_label, True
    values = list(nonzero.values())
    if not set(nonzero) <= set(active_ids) or max(values) - min(values) > settings.epsilon:
        return settings.custom_label, True
    if set(nonzero) == set(active_ids):
        return settings.equal_label, False
    # same member order the commit uses when it hands out leftover cents
    ordered = sorted(active_ids, key=lambda mid: name_key(member_names.get(mid, "")))
    expected = equal_shares(sum(values, Decimal(0)), ordered, settings.money_quantum)
    if all(amounts.get(mid, Decimal(0)) == share for mid, share in expected.items()):
        return settings.equal_label, False
    return settings.custom_label, True


class ExportBuilder:
    """Builds every export sheet from one ExportData bundle."""

    def __init__(self, data: ExportData, settings: ImportSettings = DEFAULT_SETTINGS) -> None:
        self.data = data
        self.settings = settings
        self.member_names: Dict[str, str] = {m.id: m.display_name for m in data.members}
        self.active_ids: List[str] = [m.id for m in data.members if m.is_active]
        self.category_names: Dict[str, str] = {c.id: c.name for c in data.categories}
        # 1-based, in write order; the importer numbers rows the same way
        self.row_numbers: Dict[str, int] = {
            t.id: i for i, t in enumerate(data.transactions, start=1)
        }

    def _name(self, member_id: Optional[str]) -> str:
        return self.member_names.get(member_id, "") if member_id else ""

    # region Transactions + Splits

    def transaction_and_split_rows(self) -> Tuple[SheetRows, SheetRows]:
        txn_rows: SheetRows = []
        split_rows: SheetRows = []
        for txn in self.data.transactions:
            row_number = self.row_numbers[txn.id]
            values, emit_splits = self._transaction_values(txn)
            txn_rows.append([values.get(col, "") for col in TransactionColumn])
            if emit_splits:
                split_rows.extend(self._split_values(txn, row_number))
        return txn_rows, split_rows

    def _transaction_values(self, txn: Transaction) -> Tuple[Dict[TransactionColumn, str], bool]:
        values: Dict[TransactionColumn, str] = {
            TransactionColumn.ROW: str(self.row_numbers[txn.id]),
            TransactionColumn.DATE: txn.date.isoformat(),
            TransactionColumn.DESCRIPTION: txn.description,
            TransactionColumn.AMOUNT: format_amount(txn.amount, self.settings.money_quantum),
            TransactionColumn.TYPE: txn.transaction_type.value,
            TransactionColumn.EXCLUDED_FROM_BUDGET: "Yes" if txn.excluded_from_budget else "No",
            TransactionColumn.NOTES: txn.notes,
        }
        if txn.reimburses_transaction_id in self.row_numbers:
            values[TransactionColumn.REIMBURSES_ROW] = str(
                self.row_numbers[txn.reimburses_transaction_id]  # type: ignore[index]
            )

        emit_splits = False
        ttype = txn.transaction_type
        if ttype is TransactionType.EXPENSE:
            values[TransactionColumn.CATEGORY] = self.category_names.get(txn.category_id or "", "")
            paid_by, expense_for, emit_splits = self._expense_labels(txn)
            values[TransactionColumn.PAID_BY] = paid_by
            values[TransactionColumn.EXPENSE_FOR] = expense_for
        elif ttype.has_recipient:
            values[TransactionColumn.PAID_TO] = self._name(
                txn.paid_to_member_id or txn.paid_by_member_id
            )
        else:
            values[TransactionColumn.PAID_BY] = self._name(txn.paid_by_member_id)
            values[TransactionColumn.PAID_TO] = self._name(txn.paid_to_member_id)
        return values, emit_splits

    def _expense_labels(self, txn: Transaction) -> Tuple[str, str, bool]:
        ledger = self.data.ledger_for(txn.id)
        if not ledger:
            return self._name(txn.paid_by_member_id), "", False
        paid: Dict[str, Decimal] = {}
        owed: Dict[str, Decimal] = {}
        for entry in ledger:
            paid[entry.member_id] = paid.get(entry.member_id, Decimal(0)) + entry.paid_amount
            owed[entry.member_id] = owed.get(entry.member_id, Decimal(0)) + entry.owed_amount
        paid_by, paid_custom = infer_label(paid, self.active_ids, self.member_names, self.settings)
        if not paid_by:
            paid_by = self._name(txn.paid_by_member_id)
        expense_for, owed_custom = infer_label(
            owed, self.active_ids, self.member_names, self.settings
        )
        return paid_by, expense_for, paid_custom or owed_custom

    def _split_values(self, txn: Transaction, row_number: int) -> SheetRows:
        rows: SheetRows = []
        quantum = self.settings.money_quantum
        for entry in self.data.ledger_for(txn.id):
            name = self.member_names.get(entry.member_id)
            if name is None:
                log.warning(
                    "Ledger entry for unknown member %s on transaction %s skipped",
                    entry.member_id,
                    txn.id,
                )
                continue
            values = {
                SplitColumn.TRANSACTION_ROW: str(row_number),
                SplitColumn.MEMBER_NAME: name,
                SplitColumn.OWED_AMOUNT: format_amount(entry.owed_amount, quantum),
                SplitColumn.OWED_PERCENTAGE: format_percentage(entry.owed_amount, txn.amount),
                SplitColumn.PAID_AMOUNT: format_amount(entry.paid_amount, quantum),
                SplitColumn.PAID_PERCENTAGE: format_percentage(entry.paid_amount, txn.amount),
            }
            rows.append([values[col] for col in SplitColumn])
        return rows

    # endregion Transactions + Splits

    # region Reference sheets

    def category_rows(self) -> SheetRows:
        return [[c.name, str(c.sort_order)] for c in self.data.categories]

    def sector_rows(self) -> SheetRows:
        return [[s.name, str(s.sort_order)] for s in self.data.sectors]

    def sector_category_rows(self) -> SheetRows:
        return [[s, c] for s, c in self.data.sector_category_pairs()]

    def member_rows(self) -> SheetRows:
        members: List[Member] = sorted(self.data.members, key=lambda m: name_key(m.display_name))
        return [[m.display_name, m.role.value, m.status.value] for m in members]

    # endregion Reference sheets

    def build(self) -> List[SheetTable]:
        txn_rows, split_rows = self.transaction_and_split_rows()
        tables = [
            SheetTable(TRANSACTIONS_SHEET, [c.value for c in TransactionColumn], txn_rows),
            SheetTable(SPLITS_SHEET, [c.value for c in SplitColumn], split_rows),
            SheetTable(CATEGORIES_SHEET, [c.value for c in NamedEntityColumn], self.category_rows()),
            SheetTable(SECTORS_SHEET, [c.value for c in NamedEntityColumn], self.sector_rows()),
            SheetTable(
                SECTOR_CATEGORIES_SHEET,
                [c.value for c in SectorCategoryColumn],
                self.sector_category_rows(),
            ),
            SheetTable(MEMBERS_SHEET, [c.value for c in MemberColumn], self.member_rows()),
        ]
        log.info(
            "Export of %s: %d transactions, %d split rows",
            self.data.household_name,
            len(txn_rows),
            len(split_rows),
        )
        return tables
