# quack_helper/data_model/staging/validation_issue.py
"""
Validation outcomes as a closed set of variants.

Each variant is a small frozen dataclass with a class-level ``kind``
discriminant and only the payload that kind needs. Human-readable text lives
in ``issue_messages``; nothing here formats messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, FrozenSet, Union


class IssueKind(Enum):
    # errors
    MISSING_REQUIRED_FIELD = "missingRequiredField"
    INVALID_DATE_FORMAT = "invalidDateFormat"
    INVALID_AMOUNT_FORMAT = "invalidAmountFormat"
    INVALID_TRANSACTION_TYPE = "invalidTransactionType"
    UNKNOWN_MEMBER = "unknownMember"
    CUSTOM_WITHOUT_SPLITS = "customWithoutSplits"
    SPLIT_AMOUNT_MISMATCH = "splitAmountMismatch"
    # warnings
    EMPTY_CATEGORY = "emptyCategory"
    CATEGORY_WILL_BE_CREATED = "categoryWillBeCreated"
    CATEGORY_WILL_BE_IGNORED = "categoryWillBeIgnored"
    EMPTY_PAID_BY = "emptyPaidBy"
    EMPTY_PAID_TO = "emptyPaidTo"
    EMPTY_EXPENSE_FOR = "emptyExpenseFor"
    MEMBER_WILL_BE_CREATED = "memberWillBeCreated"
    INVALID_REIMBURSES_ROW = "invalidReimbursesRow"
    REIMBURSED_ROW_NOT_FOUND = "reimbursedRowNotFound"
    ROW_NUMBER_MISMATCH = "rowNumberMismatch"


ERROR_KINDS: FrozenSet[IssueKind] = frozenset(
    {
        IssueKind.MISSING_REQUIRED_FIELD,
        IssueKind.INVALID_DATE_FORMAT,
        IssueKind.INVALID_AMOUNT_FORMAT,
        IssueKind.INVALID_TRANSACTION_TYPE,
        IssueKind.UNKNOWN_MEMBER,
        IssueKind.CUSTOM_WITHOUT_SPLITS,
        IssueKind.SPLIT_AMOUNT_MISMATCH,
    }
)

# region Errors


@dataclass(frozen=True)
class MissingRequiredField:
    field: str
    kind: ClassVar[IssueKind] = IssueKind.MISSING_REQUIRED_FIELD


@dataclass(frozen=True)
class InvalidDateFormat:
    value: str
    kind: ClassVar[IssueKind] = IssueKind.INVALID_DATE_FORMAT


@dataclass(frozen=True)
class InvalidAmountFormat:
    value: str
    kind: ClassVar[IssueKind] = IssueKind.INVALID_AMOUNT_FORMAT


@dataclass(frozen=True)
class InvalidTransactionType:
    value: str
    kind: ClassVar[IssueKind] = IssueKind.INVALID_TRANSACTION_TYPE


@dataclass(frozen=True)
class UnknownMember:
    name: str
    field: str
    kind: ClassVar[IssueKind] = IssueKind.UNKNOWN_MEMBER


@dataclass(frozen=True)
class CustomWithoutSplits:
    field: str
    kind: ClassVar[IssueKind] = IssueKind.CUSTOM_WITHOUT_SPLITS


@dataclass(frozen=True)
class SplitAmountMismatch:
    field: str
    expected: Decimal
    actual: Decimal
    kind: ClassVar[IssueKind] = IssueKind.SPLIT_AMOUNT_MISMATCH


# endregion Errors

# region Warnings


@dataclass(frozen=True)
class EmptyCategory:
    kind: ClassVar[IssueKind] = IssueKind.EMPTY_CATEGORY


@dataclass(frozen=True)
class CategoryWillBeCreated:
    name: str
    kind: ClassVar[IssueKind] = IssueKind.CATEGORY_WILL_BE_CREATED


@dataclass(frozen=True)
class CategoryWillBeIgnored:
    transaction_type: str
    kind: ClassVar[IssueKind] = IssueKind.CATEGORY_WILL_BE_IGNORED


@dataclass(frozen=True)
class EmptyPaidBy:
    kind: ClassVar[IssueKind] = IssueKind.EMPTY_PAID_BY


@dataclass(frozen=True)
class EmptyPaidTo:
    kind: ClassVar[IssueKind] = IssueKind.EMPTY_PAID_TO


@dataclass(frozen=True)
class EmptyExpenseFor:
    kind: ClassVar[IssueKind] = IssueKind.EMPTY_EXPENSE_FOR


@dataclass(frozen=True)
class MemberWillBeCreated:
    name: str
    kind: ClassVar[IssueKind] = IssueKind.MEMBER_WILL_BE_CREATED


@dataclass(frozen=True)
class InvalidReimbursesRow:
    value: str
    kind: ClassVar[IssueKind] = IssueKind.INVALID_REIMBURSES_ROW


@dataclass(frozen=True)
class ReimbursedRowNotFound:
    row: int
    kind: ClassVar[IssueKind] = IssueKind.REIMBURSED_ROW_NOT_FOUND


@dataclass(frozen=True)
class RowNumberMismatch:
    declared: str
    assigned: int
    kind: ClassVar[IssueKind] = IssueKind.ROW_NUMBER_MISMATCH


# endregion Warnings

ValidationError = Union[
    MissingRequiredField,
    InvalidDateFormat,
    InvalidAmountFormat,
    InvalidTransactionType,
    UnknownMember,
    CustomWithoutSplits,
    SplitAmountMismatch,
]

ValidationWarning = Union[
    EmptyCategory,
    CategoryWillBeCreated,
    CategoryWillBeIgnored,
    EmptyPaidBy,
    EmptyPaidTo,
    EmptyExpenseFor,
    MemberWillBeCreated,
    InvalidReimbursesRow,
    ReimbursedRowNotFound,
    RowNumberMismatch,
]

ValidationIssue = Union[ValidationError, ValidationWarning]


def is_error(issue: ValidationIssue) -> bool:
    return issue.kind in ERROR_KINDS
