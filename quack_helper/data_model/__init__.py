# quack_helper/data_model/__init__.py
from .household import (
    Category, ExportData, HouseholdContext, Member,
    NewTransaction, Sector, SplitLedgerEntry, Transaction)
from .interfaces import (
    CommitNotAllowedError, HouseholdDataStore, IToDict, MemberRole,
    MemberStatus, MissingSheetError, PaidByKind, SplitKind, StoreError,
    StoreUnavailableError, TransactionType, ValidationStatus, WorkbookReadError)
from .staging import (
    EntityRef, ImportResult, ImportSummary, PaidByMode, RowNumber, SplitMode,
    StagedCategoryRow, StagedSectorCategoryLinkRow, StagedSectorRow,
    StagedSplitRow, StagedTransactionRow, issue_message)
__all__ = [
    "Category", "ExportData", "HouseholdContext", "Member", "NewTransaction",
    "Sector", "SplitLedgerEntry", "Transaction", "CommitNotAllowedError",
    "HouseholdDataStore", "IToDict", "MemberRole", "MemberStatus",
    "MissingSheetError", "PaidByKind", "SplitKind", "StoreError",
    "StoreUnavailableError", "TransactionType", "ValidationStatus",
    "WorkbookReadError", "EntityRef", "ImportResult", "ImportSummary",
    "PaidByMode", "RowNumber", "SplitMode", "StagedCategoryRow",
    "StagedSectorCategoryLinkRow", "StagedSectorRow", "StagedSplitRow",
    "StagedTransactionRow", "issue_message"]
