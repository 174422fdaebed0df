"""
Validation engine for staged Transactions rows.

Pass 1 checks each row on its own: required fields, date/amount/type parsing,
and the type-gated resolution of category, paid-by, paid-to and expense-for
against the household context.

Pass 2 needs the whole batch: custom dimensions are checked against the Splits
sheet (whose members may be created by any row of pass 1), reimbursement
references are checked against the staged row numbers, and each row's status
is fixed.

Validation never raises for data problems; every outcome lands on the row as
an error or warning.
"""

# quack_helper/controllers/row_validator.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

from quack_helper.controllers.name_resolver import (
    resolve_category_rows,
    resolve_link_rows,
    resolve_sector_rows,
)
from quack_helper.controllers.split_validator import (
    EXPENSE_FOR_FIELD,
    PAID_BY_FIELD,
    check_custom_dimension,
    mark_pending_members,
    resolve_split_members,
    splits_by_row,
)
from quack_helper.controllers.staging_parsers import StagedWorkbook
from quack_helper.data_model.household import HouseholdContext
from quack_helper.data_model.interfaces import PaidByKind, SplitKind, TransactionType
from quack_helper.data_model.staging import (
    CategoryWillBeCreated,
    CategoryWillBeIgnored,
    EmptyCategory,
    EmptyExpenseFor,
    EmptyPaidBy,
    EmptyPaidTo,
    EntityRef,
    InvalidAmountFormat,
    InvalidDateFormat,
    InvalidReimbursesRow,
    InvalidTransactionType,
    MemberWillBeCreated,
    MissingRequiredField,
    PaidByMode,
    ReimbursedRowNotFound,
    RowNumber,
    RowNumberMismatch,
    SplitMode,
    StagedSplitRow,
    StagedTransactionRow,
    UnknownMember,
)
from quack_helper.utilities import (
    DEFAULT_SETTINGS,
    ImportSettings,
    NameSet,
    to_amount,
    to_bool,
    to_date,
    to_int,
)

log = logging.getLogger(__name__)


class RowValidator:
    """Validates Transactions rows against one immutable household snapshot."""

    def __init__(
        self, context: HouseholdContext, settings: ImportSettings = DEFAULT_SETTINGS
    ) -> None:
        self.context = context
        self.settings = settings

    # region Public API

    def validate(
        self,
        rows: Sequence[StagedTransactionRow],
        splits: Sequence[StagedSplitRow] = (),
    ) -> List[StagedTransactionRow]:
        """Run both passes over ``rows`` in place and return them."""
        resolve_split_members(splits, self.context)

        for row in rows:
            self.validate_fields(row)

        pending = NameSet(ref.name for row in rows for ref in row.member_refs() if ref.is_new)
        mark_pending_members(splits, pending)
        grouped = splits_by_row(splits)
        known_rows: Set[int] = {int(r.row_number) for r in rows}

        for row in rows:
            self._check_cross_references(row, grouped.get(row.row_number, []), known_rows)
            row.validated = True
            log.debug(
                "Row %d: %s (%d errors, %d warnings)",
                row.row_number,
                row.status.value,
                len(row.validation_errors),
                len(row.validation_warnings),
            )
        return list(rows)

    def validate_fields(self, row: StagedTransactionRow) -> None:
        """Pass 1 for one row: everything that does not look at other rows."""
        row.validation_errors = []
        row.validation_warnings = []
        row.validated = False

        self._check_row_number(row)
        self._check_required(row)
        self._parse_date(row)
        self._parse_amount(row)
        self._parse_type(row)

        ttype = row.parsed_type or TransactionType.EXPENSE
        if ttype is TransactionType.EXPENSE:
            self._resolve_category(row)
            self._resolve_expense_members(row)
        else:
            if row.category:
                row.validation_warnings.append(
                    CategoryWillBeIgnored(transaction_type=ttype.value)
                )
            row.category_ref = None
            if ttype.has_recipient:
                self._resolve_recipient(row)
            else:
                self._resolve_settlement(row)

        self._parse_reimburses_row(row)
        row.parsed_excluded_from_budget = to_bool(
            row.excluded_from_budget, self.settings.truthy_words
        )

    # endregion Public API

    # region Field checks

    def _check_row_number(self, row: StagedTransactionRow) -> None:
        if not row.row:
            return
        declared = to_int(row.row)
        if declared != int(row.row_number):
            row.validation_warnings.append(
                RowNumberMismatch(declared=row.row, assigned=int(row.row_number))
            )

    def _check_required(self, row: StagedTransactionRow) -> None:
        for label, value in (
            ("Description", row.description),
            ("Amount", row.amount),
            ("Date", row.date),
        ):
            if not value.strip():
                row.validation_errors.append(MissingRequiredField(field=label))

    def _parse_date(self, row: StagedTransactionRow) -> None:
        row.parsed_date = None
        if not row.date:
            return
        parsed = to_date(row.date, self.settings.date_format, self.settings.fallback_date_formats)
        if parsed is None:
            row.validation_errors.append(InvalidDateFormat(value=row.date))
        row.parsed_date = parsed

    def _parse_amount(self, row: StagedTransactionRow) -> None:
        row.parsed_amount = None
        if not row.amount:
            return
        try:
            row.parsed_amount = to_amount(row.amount)
        except ValueError:
            row.validation_errors.append(InvalidAmountFormat(value=row.amount))

    def _parse_type(self, row: StagedTransactionRow) -> None:
        if not row.type.strip():
            row.parsed_type = TransactionType.EXPENSE
            return
        row.parsed_type = TransactionType.from_text(row.type)
        if row.parsed_type is None:
            row.validation_errors.append(InvalidTransactionType(value=row.type))

    def _parse_reimburses_row(self, row: StagedTransactionRow) -> None:
        row.parsed_reimburses_row = None
        if not row.reimburses_row:
            return
        n = to_int(row.reimburses_row)
        if n is None or n < 1:
            row.validation_warnings.append(InvalidReimbursesRow(value=row.reimburses_row))
            return
        row.parsed_reimburses_row = RowNumber(n)

    # endregion Field checks

    # region Entity resolution

    def _resolve_category(self, row: StagedTransactionRow) -> None:
        if not row.category:
            row.category_ref = None
            row.validation_warnings.append(EmptyCategory())
            return
        found = self.context.find_category(row.category)
        if found is not None:
            row.category_ref = EntityRef(name=found.name, entity_id=found.id)
        else:
            row.category_ref = EntityRef(name=row.category)
            row.validation_warnings.append(CategoryWillBeCreated(name=row.category))

    def _resolve_member(
        self, row: StagedTransactionRow, name: str, field: str
    ) -> Optional[EntityRef]:
        """Existing approved member, or a managed member to create, or an unknownMember error."""
        member = self.context.find_active_member(name)
        if member is not None:
            return EntityRef(name=member.display_name, entity_id=member.id)
        # split tokens are reserved words, never member names
        reserved = self.settings.is_shared_token(name) or self.settings.is_custom_token(name)
        if reserved or not self.settings.allow_member_creation:
            row.validation_errors.append(UnknownMember(name=name, field=field))
            return None
        warning = MemberWillBeCreated(name=name)
        if not any(
            isinstance(w, MemberWillBeCreated) and w.name.casefold() == name.casefold()
            for w in row.validation_warnings
        ):
            row.validation_warnings.append(warning)
        return EntityRef(name=name)

    def _resolve_expense_members(self, row: StagedTransactionRow) -> None:
        settings = self.settings
        row.paid_to_ref = None

        # Paid By: empty / shared / custom / member name
        if not row.paid_by:
            row.paid_by_mode = PaidByMode(PaidByKind.SINGLE)  # current actor at commit
            row.validation_warnings.append(EmptyPaidBy())
        elif settings.is_shared_token(row.paid_by):
            row.paid_by_mode = PaidByMode.shared()
        elif settings.is_custom_token(row.paid_by):
            row.paid_by_mode = PaidByMode.custom()
        else:
            ref = self._resolve_member(row, row.paid_by, PAID_BY_FIELD)
            row.paid_by_mode = PaidByMode.single(ref) if ref else None

        # Expense For: empty / equal / custom / member name
        if not row.expense_for:
            row.split_mode = SplitMode.equal()
            row.validation_warnings.append(EmptyExpenseFor())
        elif settings.is_shared_token(row.expense_for):
            row.split_mode = SplitMode.equal()
        elif settings.is_custom_token(row.expense_for):
            row.split_mode = SplitMode.custom()
        else:
            ref = self._resolve_member(row, row.expense_for, EXPENSE_FOR_FIELD)
            row.split_mode = SplitMode.single(ref) if ref else None

    def _resolve_paid_to(self, row: StagedTransactionRow) -> Optional[EntityRef]:
        if not row.paid_to:
            row.validation_warnings.append(EmptyPaidTo())
            return None
        return self._resolve_member(row, row.paid_to, "Paid To")

    def _resolve_recipient(self, row: StagedTransactionRow) -> None:
        """Income and reimbursements: only Paid To is consulted."""
        recipient = self._resolve_paid_to(row)
        row.paid_to_ref = recipient
        row.paid_by_mode = PaidByMode.recipient(recipient)
        row.split_mode = SplitMode.recipient(recipient)

    def _resolve_settlement(self, row: StagedTransactionRow) -> None:
        if not row.paid_by:
            row.paid_by_mode = PaidByMode(PaidByKind.SINGLE)
            row.validation_warnings.append(EmptyPaidBy())
        else:
            ref = self._resolve_member(row, row.paid_by, PAID_BY_FIELD)
            row.paid_by_mode = PaidByMode.single(ref) if ref else None
        row.paid_to_ref = self._resolve_paid_to(row)
        row.split_mode = SplitMode.equal()

    # endregion Entity resolution

    # region Cross-row checks

    def _check_cross_references(
        self,
        row: StagedTransactionRow,
        row_splits: Sequence[StagedSplitRow],
        known_rows: Set[int],
    ) -> None:
        found = []
        if row.paid_by_mode is not None and row.paid_by_mode.kind is PaidByKind.CUSTOM:
            found += check_custom_dimension(
                PAID_BY_FIELD, row_splits, row.parsed_amount, self.settings
            )
        if row.split_mode is not None and row.split_mode.kind is SplitKind.CUSTOM:
            found += check_custom_dimension(
                EXPENSE_FOR_FIELD, row_splits, row.parsed_amount, self.settings
            )
        # both dimensions report the same unknown split members
        for error in found:
            if error not in row.validation_errors:
                row.validation_errors.append(error)

        target = row.parsed_reimburses_row
        if target is not None and int(target) not in known_rows:
            row.validation_warnings.append(ReimbursedRowNotFound(row=int(target)))
            row.parsed_reimburses_row = None

    # endregion Cross-row checks


def validate_workbook(
    staged: StagedWorkbook,
    context: HouseholdContext,
    settings: ImportSettings = DEFAULT_SETTINGS,
) -> StagedWorkbook:
    """Validate every staged sheet in place against ``context``."""
    RowValidator(context, settings).validate(staged.transactions, staged.splits)
    resolve_category_rows(staged.categories, context)
    resolve_sector_rows(staged.sectors, context)
    resolve_link_rows(staged.sector_category_links, context)
    return staged
