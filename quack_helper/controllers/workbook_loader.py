"""
Open an import file and hand back its sheets as sparse rows.

Supported containers:
• .xlsx / .xlsm via openpyxl (every sheet).
• .csv via the csv module, exposed as a single ``Transactions`` sheet.

Cell values are rendered to text the way a user typed them: integral numbers
without a trailing ".0", dates as YYYY-MM-DD, booleans as TRUE/FALSE.
"""

# quack_helper/controllers/workbook_loader.py
from __future__ import annotations

import csv
import logging
import zipfile
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any, List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from quack_helper.controllers.grid_reader import RawCell, RawSheet, cells_from_values
from quack_helper.controllers.header_resolver import TRANSACTIONS_SHEET
from quack_helper.data_model.interfaces import WorkbookReadError
from quack_helper.utilities import open_for_read

log = logging.getLogger(__name__)

EXCEL_SUFFIXES = (".xlsx", ".xlsm")
CSV_SUFFIXES = (".csv",)


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(Decimal(repr(value)))
    if isinstance(value, time):
        return value.isoformat()
    return str(value).strip()


def load_sheets(path: Path) -> List[RawSheet]:
    """
    Read every sheet of ``path``.

    Raises:
        WorkbookReadError: the file is missing, unreadable or not a supported container.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        sheets = _load_excel(path)
    elif suffix in CSV_SUFFIXES:
        sheets = [_load_csv(path)]
    else:
        raise WorkbookReadError(
            f"Unsupported file type '{path.suffix}'. Use .xlsx, .xlsm or .csv."
        )
    log.info(
        "Loaded %s: %s",
        path.name,
        ", ".join(f"{s.name} ({len(s.rows)} rows)" for s in sheets),
    )
    return sheets


def _load_excel(path: Path) -> List[RawSheet]:
    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise WorkbookReadError(f"Could not open workbook {path}: {e}") from e

    try:
        sheets: List[RawSheet] = []
        for ws in wb.worksheets:
            rows: List[List[RawCell]] = []
            for values in ws.iter_rows(values_only=True):
                rows.append(cells_from_values([cell_text(v) for v in values]))
            # read-only sheets report trailing empty rows; drop them
            while rows and not rows[-1]:
                rows.pop()
            sheets.append(RawSheet(name=ws.title, rows=rows))
        return sheets
    finally:
        wb.close()


def _load_csv(path: Path) -> RawSheet:
    try:
        with open_for_read(path, binary=False, encoding="utf-8-sig", newline="") as fh:
            reader = csv.reader(fh)
            rows = [cells_from_values([v.strip() for v in r]) for r in reader]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise WorkbookReadError(f"Could not read CSV {path}: {e}") from e
    while rows and not rows[-1]:
        rows.pop()
    return RawSheet(name=TRANSACTIONS_SHEET, rows=rows)
