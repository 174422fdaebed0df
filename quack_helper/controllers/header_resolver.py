# quack_helper/controllers/header_resolver.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Sequence, Tuple, Type, TypeVar

# region Sheet names

TRANSACTIONS_SHEET = "Transactions"
SPLITS_SHEET = "Splits"
CATEGORIES_SHEET = "Categories"
SECTORS_SHEET = "Sectors"
SECTOR_CATEGORIES_SHEET = "Sector Categories"
MEMBERS_SHEET = "Members"
INSTRUCTIONS_SHEET = "Instructions"

# endregion Sheet names

# region Column roles


class TransactionColumn(Enum):
    """Transactions sheet. Value is the canonical header written on export."""

    ROW = "Row"
    DATE = "Date"
    DESCRIPTION = "Description"
    AMOUNT = "Amount"
    TYPE = "Type"
    CATEGORY = "Category"
    PAID_BY = "Paid By"
    PAID_TO = "Paid To"
    EXPENSE_FOR = "Expense For"
    REIMBURSES_ROW = "Reimburses Row"
    EXCLUDED_FROM_BUDGET = "Excluded From Budget"
    NOTES = "Notes"

    @property
    def synonyms(self) -> Tuple[str, ...]:
        return _TRANSACTION_SYNONYMS[self]


class SplitColumn(Enum):
    TRANSACTION_ROW = "Transaction Row"
    MEMBER_NAME = "Member Name"
    OWED_AMOUNT = "Owed Amount"
    OWED_PERCENTAGE = "Owed %"
    PAID_AMOUNT = "Paid Amount"
    PAID_PERCENTAGE = "Paid %"

    @property
    def synonyms(self) -> Tuple[str, ...]:
        return _SPLIT_SYNONYMS[self]


class NamedEntityColumn(Enum):
    """Categories and Sectors share one shape."""

    NAME = "Name"
    SORT_ORDER = "Sort Order"

    @property
    def synonyms(self) -> Tuple[str, ...]:
        return _NAMED_ENTITY_SYNONYMS[self]


class SectorCategoryColumn(Enum):
    SECTOR_NAME = "Sector Name"
    CATEGORY_NAME = "Category Name"

    @property
    def synonyms(self) -> Tuple[str, ...]:
        return _SECTOR_CATEGORY_SYNONYMS[self]


class MemberColumn(Enum):
    DISPLAY_NAME = "Display Name"
    ROLE = "Role"
    STATUS = "Status"


class InstructionColumn(Enum):
    FIELD = "Field"
    DESCRIPTION = "Description"
    REQUIRED = "Required"
    EXAMPLE = "Example"


# endregion Column roles

# region Synonyms (lower-case, trimmed)

_TRANSACTION_SYNONYMS: Dict[TransactionColumn, Tuple[str, ...]] = {
    TransactionColumn.ROW: ("row", "row number", "row #", "row_number"),
    TransactionColumn.DATE: ("date", "transaction date", "trans date"),
    TransactionColumn.DESCRIPTION: ("description", "desc", "memo", "name"),
    TransactionColumn.AMOUNT: ("amount", "value", "sum", "total"),
    TransactionColumn.TYPE: ("type", "transaction type", "trans type"),
    TransactionColumn.CATEGORY: ("category", "cat", "category name"),
    TransactionColumn.PAID_BY: ("paid by", "paidby", "paid_by", "member", "who paid"),
    TransactionColumn.PAID_TO: ("paid to", "paidto", "paid_to", "recipient"),
    TransactionColumn.EXPENSE_FOR: (
        "expense for",
        "expensefor",
        "expense_for",
        "for",
        "split type",
        "split_type",
        "splittype",
        "split",
    ),
    TransactionColumn.REIMBURSES_ROW: (
        "reimburses row",
        "reimburses_row",
        "reimbursesrow",
        "reimburses",
    ),
    TransactionColumn.EXCLUDED_FROM_BUDGET: (
        "excluded from budget",
        "excluded_from_budget",
        "excludedfrombudget",
        "excluded",
    ),
    TransactionColumn.NOTES: ("notes", "note", "comments", "comment"),
}

_SPLIT_SYNONYMS: Dict[SplitColumn, Tuple[str, ...]] = {
    SplitColumn.TRANSACTION_ROW: ("transaction row", "transaction_row", "transactionrow", "row"),
    SplitColumn.MEMBER_NAME: ("member name", "member_name", "membername", "member"),
    SplitColumn.OWED_AMOUNT: ("owed amount", "owed_amount", "owedamount", "owed"),
    SplitColumn.OWED_PERCENTAGE: ("owed %", "owed_percentage", "owedpercentage", "owed percent"),
    SplitColumn.PAID_AMOUNT: ("paid amount", "paid_amount", "paidamount", "paid"),
    SplitColumn.PAID_PERCENTAGE: ("paid %", "paid_percentage", "paidpercentage", "paid percent"),
}

_NAMED_ENTITY_SYNONYMS: Dict[NamedEntityColumn, Tuple[str, ...]] = {
    NamedEntityColumn.NAME: (
        "name",
        "sector name",
        "sector_name",
        "sectorname",
        "category name",
        "category_name",
        "categoryname",
    ),
    NamedEntityColumn.SORT_ORDER: ("sort order", "sort_order", "sortorder", "order"),
}

_SECTOR_CATEGORY_SYNONYMS: Dict[SectorCategoryColumn, Tuple[str, ...]] = {
    SectorCategoryColumn.SECTOR_NAME: ("sector name", "sector_name", "sectorname", "sector"),
    SectorCategoryColumn.CATEGORY_NAME: (
        "category name",
        "category_name",
        "categoryname",
        "category",
    ),
}

# endregion Synonyms

E = TypeVar("E", bound=Enum)


def normalize_header(text: str) -> str:
    return text.strip().lower()


def resolve_headers(header_row: Sequence[str], roles: Type[E]) -> Dict[E, int]:
    """
    Map each column role to the index of the first header cell matching one of its synonyms.

    Roles with no matching header are absent from the result. Unknown headers are
    ignored, and column order does not matter.
    """
    normalized = [normalize_header(h) for h in header_row]
    mapping: Dict[E, int] = {}
    for role in roles:
        accepted = role.synonyms  # type: ignore[attr-defined]
        for idx, header in enumerate(normalized):
            if header in accepted:
                mapping[role] = idx
                break
    return mapping


def cell(row: Sequence[str], mapping: Mapping[E, int], role: E) -> str:
    """Trimmed value of ``role`` in ``row``; "" when unmapped or out of bounds."""
    idx = mapping.get(role)
    if idx is None or idx >= len(row):
        return ""
    return row[idx].strip()


def find_sheet(sheet_names: Sequence[str], wanted: str) -> str | None:
    """Case-insensitive, whitespace-trimmed sheet lookup."""
    key = normalize_header(wanted)
    for name in sheet_names:
        if normalize_header(name) == key:
            return name
    return None
