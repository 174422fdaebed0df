from .commit_orchestrator import CommitMode, CommitOrchestrator, DependencyError
from .export_inference import ExportBuilder, SheetTable, infer_label
from .grid_reader import RawSheet, column_index, column_letters, to_grid
from .header_resolver import resolve_headers
from .import_session import ImportSession, RowFilter
from .row_validator import RowValidator, validate_workbook
from .split_ledger import equal_shares
from .staging_parsers import StagedWorkbook, stage_workbook
from .summary_aggregator import summarize
from .workbook_loader import load_sheets
from .workbook_writer import write_export, write_failed_rows, write_import_template

__all__ = [
    "CommitMode",
    "CommitOrchestrator",
    "DependencyError",
    "ExportBuilder",
    "SheetTable",
    "infer_label",
    "RawSheet",
    "column_index",
    "column_letters",
    "to_grid",
    "resolve_headers",
    "ImportSession",
    "RowFilter",
    "RowValidator",
    "validate_workbook",
    "equal_shares",
    "StagedWorkbook",
    "stage_workbook",
    "summarize",
    "load_sheets",
    "write_export",
    "write_failed_rows",
    "write_import_template",
]
