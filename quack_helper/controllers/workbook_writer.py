"""
xlsx output: full household export, the blank import template and the
failed-rows workbook.

Every sheet goes through pandas as an all-string DataFrame so cells land as
text exactly as rendered (no float re-interpretation of "5.70" or "0012").
Headers are bold and frozen.
"""

# quack_helper/controllers/workbook_writer.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

import pandas as pd
from openpyxl.styles import Font

from quack_helper.controllers.export_inference import ExportBuilder, SheetTable
from quack_helper.controllers.grid_reader import column_letters
from quack_helper.controllers.header_resolver import (
    INSTRUCTIONS_SHEET,
    SPLITS_SHEET,
    TRANSACTIONS_SHEET,
    InstructionColumn,
    SplitColumn,
    TransactionColumn,
)
from quack_helper.data_model.household import ExportData
from quack_helper.data_model.staging import StagedTransactionRow, issue_message
from quack_helper.utilities import DEFAULT_SETTINGS, ImportSettings

log = logging.getLogger(__name__)

_TEMPLATE_ROWS: List[List[str]] = [
    # Row, Date, Description, Amount, Type, Category, Paid By, Paid To,
    # Expense For, Reimburses Row, Excluded From Budget, Notes
    ["1", "2024-01-15", "Grocery shopping at Costco", "125.50", "expense", "Groceries",
     "John", "", "Equal", "", "No", "Weekly grocery run"],
    ["2", "2024-01-16", "Monthly salary", "5000.00", "income", "",
     "", "Jane", "", "", "No", ""],
    ["3", "2024-01-17", "Coffee with friends", "15.75", "expense", "Dining Out",
     "John", "", "John", "", "No", "Just for me"],
    ["4", "2024-01-18", "Utility bill", "200.00", "expense", "Utilities",
     "Equal", "", "Custom", "", "No", "See Splits sheet"],
    ["5", "2024-01-19", "Insurance refund for groceries", "25.50", "reimbursement", "",
     "", "John", "", "1", "No", ""],
    ["6", "2024-01-20", "John pays Jane back", "50.00", "settlement", "",
     "John", "Jane", "", "", "Yes", "For groceries"],
]

_TEMPLATE_SPLITS: List[List[str]] = [
    ["4", "John", "120.00", "60", "100.00", "50"],
    ["4", "Jane", "80.00", "40", "100.00", "50"],
]

_INSTRUCTIONS: List[List[str]] = [
    ["Row", "Row number used by Splits and Reimburses Row", "No", "1"],
    ["Date", "Use YYYY-MM-DD format", "Yes", "2024-01-15"],
    ["Description", "What the transaction was for", "Yes", "Grocery shopping"],
    ["Amount", "Use numbers only (no currency symbols)", "Yes", "125.50"],
    ["Type", "expense, income, settlement, or reimbursement", "No (default: expense)", "expense"],
    ["Category", "Expenses only. Will be created if it doesn't exist", "No", "Groceries"],
    ["Paid By", "A member name, Equal, or Custom (see Splits)", "No (default: you)", "John"],
    ["Paid To", "Who received the money (income, reimbursement, settlement)", "No", "Jane"],
    ["Expense For", "A member name, Equal, or Custom (see Splits)", "No (default: Equal)", "Equal"],
    ["Reimburses Row", "Row number of the expense a reimbursement pays back", "No", "1"],
    ["Excluded From Budget", "Yes or No", "No (default: No)", "No"],
    ["Notes", "Optional additional notes", "No", "Weekly shopping"],
]


def _write_tables(path: Path, tables: Sequence[SheetTable]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for table in tables:
            df = pd.DataFrame(table.rows, columns=table.headers, dtype=str)
            df.to_excel(writer, index=False, sheet_name=table.name)
            ws = writer.sheets[table.name]
            ws.freeze_panes = "A2"
            for header_cell in ws[1]:
                header_cell.font = Font(bold=True)
            for i, header in enumerate(table.headers):
                width = max([len(header)] + [len(r[i]) for r in table.rows if i < len(r)])
                ws.column_dimensions[column_letters(i)].width = min(width + 2, 60)
    log.info("Wrote %s (%s)", path, ", ".join(t.name for t in tables))
    return path


def write_export(
    path: Path, data: ExportData, settings: ImportSettings = DEFAULT_SETTINGS
) -> Path:
    """Write the full multi-sheet export; the file re-imports through `ImportSession`."""
    return _write_tables(path, ExportBuilder(data, settings).build())


def write_import_template(path: Path) -> Path:
    tables = [
        SheetTable(TRANSACTIONS_SHEET, [c.value for c in TransactionColumn], _TEMPLATE_ROWS),
        SheetTable(SPLITS_SHEET, [c.value for c in SplitColumn], _TEMPLATE_SPLITS),
        SheetTable(INSTRUCTIONS_SHEET, [c.value for c in InstructionColumn], _INSTRUCTIONS),
    ]
    return _write_tables(path, tables)


def write_failed_rows(path: Path, rows: Sequence[StagedTransactionRow]) -> Path:
    """
    Write the invalid rows, raw values untouched, plus their error messages.

    The sheet is named Transactions so a corrected file imports directly; the
    original row numbers go in "Source Row", which the importer ignores.
    """
    headers = ["Source Row"] + [c.value for c in TransactionColumn if c is not TransactionColumn.ROW]
    headers.append("Errors")
    out: List[List[str]] = []
    for row in rows:
        if not row.has_errors:
            continue
        raw = row.raw_values()[1:]  # drop the Row column
        errors = "; ".join(issue_message(e) for e in row.validation_errors)
        out.append([str(row.row_number), *raw, errors])
    log.info("%d failed row(s) to write", len(out))
    return _write_tables(path, [SheetTable(TRANSACTIONS_SHEET, headers, out)])
