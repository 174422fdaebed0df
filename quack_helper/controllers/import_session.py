# quack_helper/controllers/import_session.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from quack_helper.controllers.commit_orchestrator import (
    CommitMode,
    CommitOrchestrator,
    ProgressCallback,
)
from quack_helper.controllers.grid_reader import RawSheet
from quack_helper.controllers.row_validator import validate_workbook
from quack_helper.controllers.staging_parsers import StagedWorkbook, stage_workbook
from quack_helper.controllers.summary_aggregator import summarize
from quack_helper.controllers.workbook_loader import load_sheets
from quack_helper.controllers.workbook_writer import write_failed_rows
from quack_helper.data_model.household import HouseholdContext
from quack_helper.data_model.interfaces import HouseholdDataStore, ValidationStatus
from quack_helper.data_model.staging import ImportResult, ImportSummary, StagedTransactionRow
from quack_helper.utilities import DEFAULT_SETTINGS, ImportSettings

log = logging.getLogger(__name__)


class RowFilter(Enum):
    ALL = "all"
    VALID = "valid"
    WARNINGS = "warnings"
    ERRORS = "errors"


_FILTER_STATUS = {
    RowFilter.VALID: ValidationStatus.VALID,
    RowFilter.WARNINGS: ValidationStatus.VALID_WITH_WARNINGS,
    RowFilter.ERRORS: ValidationStatus.INVALID,
}


@dataclass
class ImportSession:
    """
    One file's trip through the import pipeline.

    Responsibilities:
    • Read → stage → validate → summarize against a fixed household snapshot.
    • Filter rows for review and write the failed rows back out.
    • Hand the validated batch to the commit orchestrator.

    After a commit the household has changed; build a new session (with a
    fresh context) before validating again.
    """

    context: HouseholdContext
    staged: StagedWorkbook
    summary: ImportSummary
    settings: ImportSettings = DEFAULT_SETTINGS
    source: Optional[Path] = None
    result: Optional[ImportResult] = field(default=None, init=False)

    # region Construction

    @classmethod
    def from_sheets(
        cls,
        sheets: Sequence[RawSheet],
        context: HouseholdContext,
        settings: ImportSettings = DEFAULT_SETTINGS,
        source: Optional[Path] = None,
    ) -> "ImportSession":
        staged = validate_workbook(stage_workbook(sheets), context, settings)
        return cls(
            context=context,
            staged=staged,
            summary=summarize(staged, context),
            settings=settings,
            source=source,
        )

    @classmethod
    def from_path(
        cls,
        path: Path,
        context: HouseholdContext,
        settings: ImportSettings = DEFAULT_SETTINGS,
    ) -> "ImportSession":
        """
        Raises:
            WorkbookReadError: the file cannot be opened as a workbook.
            MissingSheetError: the file has no Transactions sheet.
        """
        path = Path(path)
        log.info("Import session for %s (household %s)", path, context.household_id)
        return cls.from_sheets(load_sheets(path), context, settings, source=path)

    # endregion Construction

    @property
    def rows(self) -> List[StagedTransactionRow]:
        return self.staged.transactions

    def filter_rows(self, which: RowFilter = RowFilter.ALL) -> List[StagedTransactionRow]:
        if which is RowFilter.ALL:
            return list(self.rows)
        wanted = _FILTER_STATUS[which]
        return [r for r in self.rows if r.status is wanted]

    def write_failed_rows(self, path: Path) -> Path:
        return write_failed_rows(path, self.filter_rows(RowFilter.ERRORS))

    def commit(
        self,
        store: HouseholdDataStore,
        mode: CommitMode = CommitMode.VALID_ONLY,
        *,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImportResult:
        orchestrator = CommitOrchestrator(store, self.context, self.settings)
        self.result = orchestrator.commit(
            self.staged, self.summary, mode, progress=progress, cancel_event=cancel_event
        )
        return self.result
