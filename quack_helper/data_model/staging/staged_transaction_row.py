# quack_helper/data_model/staging/staged_transaction_row.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from ..interfaces import PaidByKind, SplitKind, TransactionType, ValidationStatus
from .row_number import RowNumber
from .validation_issue import ValidationError, ValidationWarning


@dataclass(frozen=True)
class EntityRef:
    """
    A name from the file bound to an existing id, or marked for creation.

    ``entity_id`` is None exactly when the entity does not exist yet; the commit
    step fills the id in after creating it.
    """

    name: str
    entity_id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.entity_id is None


@dataclass(frozen=True)
class PaidByMode:
    kind: PaidByKind
    member: Optional[EntityRef] = None

    @classmethod
    def single(cls, member: EntityRef) -> "PaidByMode":
        return cls(PaidByKind.SINGLE, member)

    @classmethod
    def shared(cls) -> "PaidByMode":
        return cls(PaidByKind.SHARED)

    @classmethod
    def custom(cls) -> "PaidByMode":
        return cls(PaidByKind.CUSTOM)

    @classmethod
    def recipient(cls, member: Optional[EntityRef]) -> "PaidByMode":
        return cls(PaidByKind.RECIPIENT, member)


@dataclass(frozen=True)
class SplitMode:
    kind: SplitKind
    member: Optional[EntityRef] = None

    @classmethod
    def equal(cls) -> "SplitMode":
        return cls(SplitKind.EQUAL)

    @classmethod
    def single(cls, member: EntityRef) -> "SplitMode":
        return cls(SplitKind.MEMBER, member)

    @classmethod
    def custom(cls) -> "SplitMode":
        return cls(SplitKind.CUSTOM)

    @classmethod
    def recipient(cls, member: Optional[EntityRef]) -> "SplitMode":
        return cls(SplitKind.RECIPIENT, member)


def derive_status(
    errors: Sequence[ValidationError], warnings: Sequence[ValidationWarning]
) -> ValidationStatus:
    """Any error → invalid; otherwise any warning → validWithWarnings; otherwise valid."""
    if errors:
        return ValidationStatus.INVALID
    if warnings:
        return ValidationStatus.VALID_WITH_WARNINGS
    return ValidationStatus.VALID


@dataclass
class StagedTransactionRow:
    """One data row of the Transactions sheet: raw cell text plus what validation made of it."""

    row_number: RowNumber

    # Raw cell text
    row: str = ""
    date: str = ""
    description: str = ""
    amount: str = ""
    type: str = ""
    category: str = ""
    paid_by: str = ""
    paid_to: str = ""
    expense_for: str = ""
    reimburses_row: str = ""
    excluded_from_budget: str = ""
    notes: str = ""

    # Parsed / resolved values
    parsed_date: Optional[date] = None
    parsed_amount: Optional[Decimal] = None
    parsed_type: Optional[TransactionType] = None
    category_ref: Optional[EntityRef] = None
    paid_by_mode: Optional[PaidByMode] = None
    paid_to_ref: Optional[EntityRef] = None
    split_mode: Optional[SplitMode] = None
    parsed_reimburses_row: Optional[RowNumber] = None
    parsed_excluded_from_budget: bool = False

    validation_errors: List[ValidationError] = field(default_factory=list)
    validation_warnings: List[ValidationWarning] = field(default_factory=list)
    validated: bool = False

    @property
    def status(self) -> ValidationStatus:
        if not self.validated:
            return ValidationStatus.PENDING
        return derive_status(self.validation_errors, self.validation_warnings)

    @property
    def is_valid(self) -> bool:
        return self.status.is_importable

    @property
    def has_errors(self) -> bool:
        return self.status is ValidationStatus.INVALID

    @property
    def uses_custom_split(self) -> bool:
        paid_custom = self.paid_by_mode is not None and self.paid_by_mode.kind is PaidByKind.CUSTOM
        split_custom = self.split_mode is not None and self.split_mode.kind is SplitKind.CUSTOM
        return paid_custom or split_custom

    @property
    def is_reimbursement_with_reference(self) -> bool:
        return (
            self.parsed_type is TransactionType.REIMBURSEMENT
            and self.parsed_reimburses_row is not None
        )

    def member_refs(self) -> List[EntityRef]:
        """Every member this row names in Paid By / Paid To / Expense For."""
        refs: List[EntityRef] = []
        for ref in (
            self.paid_by_mode.member if self.paid_by_mode else None,
            self.paid_to_ref,
            self.split_mode.member if self.split_mode else None,
        ):
            if ref is not None:
                refs.append(ref)
        return refs

    def raw_values(self) -> List[str]:
        return [
            self.row,
            self.date,
            self.description,
            self.amount,
            self.type,
            self.category,
            self.paid_by,
            self.paid_to,
            self.expense_for,
            self.reimburses_row,
            self.excluded_from_budget,
            self.notes,
        ]
