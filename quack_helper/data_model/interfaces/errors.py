# quack_helper/data_model/interfaces/errors.py
from __future__ import annotations


class StoreError(Exception):
    """A data-store call failed; the failure is scoped to the row or entity that made it."""

    def __init__(self, cause: str) -> None:
        super().__init__(cause)
        self.cause = cause


class StoreUnavailableError(StoreError):
    """The store cannot be reached at all. Aborts a commit instead of failing one row."""


class WorkbookReadError(Exception):
    """The input file could not be opened as a tabular workbook."""


class MissingSheetError(WorkbookReadError):
    def __init__(self, sheet_name: str) -> None:
        super().__init__(f"No '{sheet_name}' sheet found in the workbook.")
        self.sheet_name = sheet_name


class CommitNotAllowedError(ValueError):
    """The requested commit mode is not permitted for this batch."""
