from .import_result import ImportResult
from .import_summary import ImportSummary
from .issue_messages import issue_id, issue_message
from .row_number import RowNumber
from .staged_name_rows import StagedCategoryRow, StagedSectorCategoryLinkRow, StagedSectorRow
from .staged_split_row import StagedSplitRow
from .staged_transaction_row import (
    EntityRef,
    PaidByMode,
    SplitMode,
    StagedTransactionRow,
    derive_status,
)
from .validation_issue import (
    ERROR_KINDS,
    CategoryWillBeCreated,
    CategoryWillBeIgnored,
    CustomWithoutSplits,
    EmptyCategory,
    EmptyExpenseFor,
    EmptyPaidBy,
    EmptyPaidTo,
    InvalidAmountFormat,
    InvalidDateFormat,
    InvalidReimbursesRow,
    InvalidTransactionType,
    IssueKind,
    MemberWillBeCreated,
    MissingRequiredField,
    ReimbursedRowNotFound,
    RowNumberMismatch,
    SplitAmountMismatch,
    UnknownMember,
    ValidationError,
    ValidationIssue,
    ValidationWarning,
    is_error,
)

__all__ = [
    "ImportResult",
    "ImportSummary",
    "issue_id",
    "issue_message",
    "RowNumber",
    "StagedCategoryRow",
    "StagedSectorRow",
    "StagedSectorCategoryLinkRow",
    "StagedSplitRow",
    "EntityRef",
    "PaidByMode",
    "SplitMode",
    "StagedTransactionRow",
    "derive_status",
    "ERROR_KINDS",
    "IssueKind",
    "ValidationError",
    "ValidationIssue",
    "ValidationWarning",
    "is_error",
    "MissingRequiredField",
    "InvalidDateFormat",
    "InvalidAmountFormat",
    "InvalidTransactionType",
    "UnknownMember",
    "CustomWithoutSplits",
    "SplitAmountMismatch",
    "EmptyCategory",
    "CategoryWillBeCreated",
    "CategoryWillBeIgnored",
    "EmptyPaidBy",
    "EmptyPaidTo",
    "EmptyExpenseFor",
    "MemberWillBeCreated",
    "InvalidReimbursesRow",
    "ReimbursedRowNotFound",
    "RowNumberMismatch",
]
