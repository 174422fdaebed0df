# quack_helper/data_model/staging/issue_messages.py
from __future__ import annotations

from typing import Any, Callable, Dict

from .validation_issue import IssueKind, ValidationIssue

_MESSAGES: Dict[IssueKind, Callable[[Any], str]] = {
    IssueKind.MISSING_REQUIRED_FIELD: lambda i: f"Missing required field: {i.field}",
    IssueKind.INVALID_DATE_FORMAT: lambda i: (
        f'Invalid date format: "{i.value}". Use YYYY-MM-DD format.'
    ),
    IssueKind.INVALID_AMOUNT_FORMAT: lambda i: (
        f'Invalid amount: "{i.value}". Use a number like 123.45'
    ),
    IssueKind.INVALID_TRANSACTION_TYPE: lambda i: (
        f'Unknown transaction type: "{i.value}". '
        "Use expense, income, settlement, or reimbursement."
    ),
    IssueKind.UNKNOWN_MEMBER: lambda i: (
        f'Unknown member in {i.field}: "{i.name}". Member must exist in household.'
    ),
    IssueKind.CUSTOM_WITHOUT_SPLITS: lambda i: (
        f"'{i.field}' is Custom but the Splits sheet has no rows for this transaction"
    ),
    IssueKind.SPLIT_AMOUNT_MISMATCH: lambda i: (
        f"Custom '{i.field}' splits add up to {i.actual}, expected {i.expected}"
    ),
    IssueKind.EMPTY_CATEGORY: lambda i: (
        "No category specified - transaction will be uncategorized"
    ),
    IssueKind.CATEGORY_WILL_BE_CREATED: lambda i: f'Category "{i.name}" will be created',
    IssueKind.CATEGORY_WILL_BE_IGNORED: lambda i: (
        f"Category will be ignored for {i.transaction_type} transactions"
    ),
    IssueKind.EMPTY_PAID_BY: lambda i: "No 'Paid By' specified - will be assigned to you",
    IssueKind.EMPTY_PAID_TO: lambda i: "No 'Paid To' specified - will be assigned to you",
    IssueKind.EMPTY_EXPENSE_FOR: lambda i: (
        "No 'Expense For' specified - will be split equally"
    ),
    IssueKind.MEMBER_WILL_BE_CREATED: lambda i: (
        f'Member "{i.name}" will be created as managed member'
    ),
    IssueKind.INVALID_REIMBURSES_ROW: lambda i: (
        f'Reimburses Row "{i.value}" is not a row number - the link will be dropped'
    ),
    IssueKind.REIMBURSED_ROW_NOT_FOUND: lambda i: (
        f"Reimbursed row {i.row} is not in the Transactions sheet - the link will be dropped"
    ),
    IssueKind.ROW_NUMBER_MISMATCH: lambda i: (
        f'Row column says "{i.declared}" but this is data row {i.assigned}; '
        f"split and reimbursement references use {i.assigned}"
    ),
}


def issue_message(issue: ValidationIssue) -> str:
    """Human-readable text for any error or warning variant."""
    return _MESSAGES[issue.kind](issue)


def issue_id(issue: ValidationIssue) -> str:
    """Stable identifier: the kind plus its payload, e.g. ``missingRequiredField:Date``."""
    payload = [str(v) for v in vars(issue).values()]
    return ":".join([issue.kind.value, *payload])
