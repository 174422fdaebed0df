# tests/controllers/test_row_validator.py
from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from quack_helper.controllers.row_validator import RowValidator
from quack_helper.data_model.household import Category, HouseholdContext, Member
from quack_helper.data_model.interfaces import (
    MemberStatus,
    PaidByKind,
    SplitKind,
    TransactionType,
    ValidationStatus,
)
from quack_helper.data_model.staging import (
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
    MemberWillBeCreated,
    MissingRequiredField,
    ReimbursedRowNotFound,
    RowNumber,
    RowNumberMismatch,
    SplitAmountMismatch,
    StagedSplitRow,
    StagedTransactionRow,
    UnknownMember,
)
from quack_helper.utilities import DEFAULT_SETTINGS


def _mk_context(*names, categories=(), inactive=()):
    members = [Member(id=f"m-{n.lower()}", display_name=n) for n in names]
    members += [
        Member(id=f"m-{n.lower()}", display_name=n, status=MemberStatus.INACTIVE)
        for n in inactive
    ]
    cats = [Category(id=f"c-{n.lower()}", name=n) for n in categories]
    return HouseholdContext(
        household_id="h1", members=members, categories=cats, current_member_id="m-john"
    )


def _mk_row(n=1, **fields):
    base = dict(date="2024-01-15", description="Coffee", amount="5.75", type="expense")
    base.update(fields)
    return StagedTransactionRow(row_number=RowNumber(n), **base)


def _mk_split(row, member, owed="", owed_pct="", paid="", paid_pct=""):
    return StagedSplitRow(
        transaction_row=str(row),
        member_name=member,
        parsed_transaction_row=RowNumber(row),
        parsed_owed_amount=Decimal(owed) if owed else None,
        parsed_owed_percentage=Decimal(owed_pct) if owed_pct else None,
        parsed_paid_amount=Decimal(paid) if paid else None,
        parsed_paid_percentage=Decimal(paid_pct) if paid_pct else None,
    )


def _validate(rows, splits=(), context=None, settings=DEFAULT_SETTINGS):
    ctx = context or _mk_context("John", "Jane")
    return RowValidator(ctx, settings).validate(rows, list(splits))


# ----------------------- expense scenarios -----------------------


def test_single_member_expense_with_empty_category():
    # Arrange
    row = _mk_row(category="", paid_by="John", expense_for="John")

    # Act
    (out,) = _validate([row])

    # Assert
    assert out.status is ValidationStatus.VALID_WITH_WARNINGS
    assert out.validation_warnings == [EmptyCategory()]
    assert out.validation_errors == []
    assert out.paid_by_mode.kind is PaidByKind.SINGLE
    assert out.paid_by_mode.member.entity_id == "m-john"
    assert out.split_mode.kind is SplitKind.MEMBER
    assert out.split_mode.member.entity_id == "m-john"
    assert out.parsed_date == date(2024, 1, 15)
    assert out.parsed_amount == Decimal("5.75")
    assert out.parsed_type is TransactionType.EXPENSE


def test_equal_tokens_mean_shared_and_equal_without_default_warnings():
    row = _mk_row(category="groceries", paid_by="Equal", expense_for="equal")
    ctx = _mk_context("John", "Jane", categories=["Groceries"])

    (out,) = _validate([row], context=ctx)

    assert out.paid_by_mode.kind is PaidByKind.SHARED
    assert out.split_mode.kind is SplitKind.EQUAL
    assert EmptyPaidBy() not in out.validation_warnings
    assert EmptyExpenseFor() not in out.validation_warnings
    assert out.status is ValidationStatus.VALID
    assert out.category_ref.entity_id == "c-groceries"
    assert out.category_ref.name == "Groceries"


def test_empty_paid_by_and_expense_for_default_with_warnings():
    (out,) = _validate([_mk_row(category="Food")])

    assert EmptyPaidBy() in out.validation_warnings
    assert EmptyExpenseFor() in out.validation_warnings
    assert CategoryWillBeCreated(name="Food") in out.validation_warnings
    assert out.paid_by_mode.kind is PaidByKind.SINGLE
    assert out.paid_by_mode.member is None  # current actor at commit
    assert out.split_mode.kind is SplitKind.EQUAL
    assert out.category_ref.is_new


def test_unknown_member_will_be_created_once_per_row():
    (out,) = _validate([_mk_row(category="x", paid_by="Bob", expense_for="bob")])

    assert out.validation_warnings.count(MemberWillBeCreated(name="Bob")) == 1
    assert not any(isinstance(w, MemberWillBeCreated) and w.name == "bob"
                   for w in out.validation_warnings)
    assert out.paid_by_mode.member.is_new
    assert out.status is ValidationStatus.VALID_WITH_WARNINGS


def test_inactive_members_never_match():
    ctx = _mk_context("John", inactive=["Jane"])
    (out,) = _validate([_mk_row(category="x", paid_by="Jane", expense_for="John")], context=ctx)
    assert MemberWillBeCreated(name="Jane") in out.validation_warnings


def test_member_creation_disabled_makes_unknown_member_an_error():
    settings = replace(DEFAULT_SETTINGS, allow_member_creation=False)
    (out,) = _validate([_mk_row(category="x", paid_by="Bob", expense_for="John")],
                       settings=settings)
    assert out.validation_errors == [UnknownMember(name="Bob", field="Paid By")]
    assert out.status is ValidationStatus.INVALID


# ----------------------- type gating -----------------------


def test_income_uses_paid_to_and_forces_recipient_modes():
    row = _mk_row(type="income", paid_to="Jane", paid_by="", expense_for="")

    (out,) = _validate([row])

    assert out.paid_to_ref.entity_id == "m-jane"
    assert out.paid_by_mode.kind is PaidByKind.RECIPIENT
    assert out.split_mode.kind is SplitKind.RECIPIENT
    assert EmptyPaidBy() not in out.validation_warnings
    assert EmptyExpenseFor() not in out.validation_warnings
    assert out.status is ValidationStatus.VALID


def test_category_on_non_expense_is_ignored_not_resolved():
    row = _mk_row(type="reimb", paid_to="John", category="Groceries")
    (out,) = _validate([row])
    assert out.validation_warnings == [CategoryWillBeIgnored(transaction_type="reimbursement")]
    assert out.category_ref is None


def test_income_without_recipient_warns():
    (out,) = _validate([_mk_row(type="inc")])
    assert out.validation_warnings == [EmptyPaidTo()]
    assert out.paid_to_ref is None


def test_settlement_resolves_both_members_and_is_not_split():
    row = _mk_row(type="Settle", paid_by="John", paid_to="Jane", expense_for="Custom")
    (out,) = _validate([row])
    assert out.parsed_type is TransactionType.SETTLEMENT
    assert out.paid_by_mode.member.entity_id == "m-john"
    assert out.paid_to_ref.entity_id == "m-jane"
    assert out.split_mode.kind is SplitKind.EQUAL
    assert out.status is ValidationStatus.VALID


@pytest.mark.parametrize(
    "fields, error",
    [
        ({"type": "settlement", "paid_by": "Equal", "paid_to": "Jane"},
         UnknownMember(name="Equal", field="Paid By")),
        ({"type": "settlement", "paid_by": "John", "paid_to": "Custom"},
         UnknownMember(name="Custom", field="Paid To")),
        ({"type": "income", "paid_to": "shared"}, UnknownMember(name="shared", field="Paid To")),
    ],
)
def test_split_tokens_are_not_taken_as_new_member_names(fields, error):
    (out,) = _validate([_mk_row(**fields)])
    assert error in out.validation_errors
    assert not any(isinstance(w, MemberWillBeCreated) for w in out.validation_warnings)
    assert out.status is ValidationStatus.INVALID


def test_empty_type_defaults_to_expense_without_warning():
    (out,) = _validate([_mk_row(type="", category="x", paid_by="John", expense_for="John")])
    assert out.parsed_type is TransactionType.EXPENSE
    assert out.status is ValidationStatus.VALID_WITH_WARNINGS
    assert out.validation_warnings == [CategoryWillBeCreated(name="x")]


# ----------------------- field errors -----------------------


def test_missing_required_fields_are_each_reported():
    row = _mk_row(date="", description="", amount="")
    (out,) = _validate([row])
    assert out.validation_errors[:3] == [
        MissingRequiredField(field="Description"),
        MissingRequiredField(field="Amount"),
        MissingRequiredField(field="Date"),
    ]


@pytest.mark.parametrize(
    "fields, error",
    [
        ({"date": "15th of Jan"}, InvalidDateFormat(value="15th of Jan")),
        ({"amount": "five"}, InvalidAmountFormat(value="five")),
        ({"amount": "1e3"}, InvalidAmountFormat(value="1e3")),
        ({"amount": "abc5"}, InvalidAmountFormat(value="abc5")),
        ({"type": "transfer"}, InvalidTransactionType(value="transfer")),
    ],
)
def test_unparsable_fields_are_errors(fields, error):
    (out,) = _validate([_mk_row(category="x", paid_by="John", expense_for="John", **fields)])
    assert out.validation_errors == [error]
    assert out.status is ValidationStatus.INVALID


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("01/15/2024", date(2024, 1, 15)),
        ("2024-01-15T10:30:00", date(2024, 1, 15)),
        ("Jan 15, 2024", date(2024, 1, 15)),
    ],
)
def test_fallback_date_formats(raw, expected):
    (out,) = _validate([_mk_row(date=raw, category="x", paid_by="John", expense_for="John")])
    assert out.parsed_date == expected


def test_amount_sign_and_currency_are_ignored():
    (out,) = _validate([_mk_row(amount="-$1,234.50", category="x", paid_by="John",
                                expense_for="John")])
    assert out.parsed_amount == Decimal("1234.50")


def test_excluded_from_budget_parses_truthy_words():
    rows = [_mk_row(1, excluded_from_budget="Yes"), _mk_row(2, excluded_from_budget="no")]
    out = _validate(rows)
    assert [r.parsed_excluded_from_budget for r in out] == [True, False]


# ----------------------- custom splits -----------------------


def test_custom_expense_for_without_split_rows_is_invalid():
    (out,) = _validate([_mk_row(paid_by="John", expense_for="Custom", category="x")])
    assert CustomWithoutSplits(field="Expense For") in out.validation_errors
    assert out.status is ValidationStatus.INVALID


def test_custom_expense_for_with_matching_split_rows():
    row = _mk_row(amount="100", paid_by="John", expense_for="Custom", category="x")
    splits = [_mk_split(1, "John", owed="70"), _mk_split(1, "jane", owed_pct="30")]

    (out,) = _validate([row], splits)

    assert out.validation_errors == []
    assert splits[1].matched_member_id == "m-jane"


def test_custom_split_amounts_must_add_up():
    row = _mk_row(amount="100", paid_by="John", expense_for="Custom", category="x")
    splits = [_mk_split(1, "John", owed="50"), _mk_split(1, "Jane", owed="30")]

    (out,) = _validate([row], splits)

    assert out.validation_errors == [
        SplitAmountMismatch(field="Expense For", expected=Decimal("100"), actual=Decimal("80"))
    ]


def test_custom_paid_by_checks_paid_amounts():
    row = _mk_row(amount="10", paid_by="custom", expense_for="Equal", category="x")
    splits = [_mk_split(1, "John", paid="4"), _mk_split(1, "Jane", paid="6")]
    (out,) = _validate([row], splits)
    assert out.paid_by_mode.kind is PaidByKind.CUSTOM
    assert out.validation_errors == []


def test_orphaned_split_member_fails_the_row():
    row = _mk_row(amount="10", paid_by="John", expense_for="Custom", category="x")
    splits = [_mk_split(1, "John", owed="5"), _mk_split(1, "Zed", owed="5")]

    (out,) = _validate([row], splits)

    assert out.validation_errors == [UnknownMember(name="Zed", field="Splits")]
    assert splits[1].matched_member_id is None
    assert not splits[1].will_create_member


def test_split_member_created_by_another_row_is_accepted():
    rows = [
        _mk_row(1, amount="10", paid_by="John", expense_for="Custom", category="x"),
        _mk_row(2, paid_by="Bob", expense_for="John", category="x"),
    ]
    splits = [_mk_split(1, "John", owed="5"), _mk_split(1, "BOB", owed="5")]

    out = _validate(rows, splits)

    assert out[0].validation_errors == []
    assert splits[1].will_create_member


def test_both_custom_dimensions_report_shared_problems_once():
    row = _mk_row(amount="10", paid_by="Custom", expense_for="Custom", category="x")
    splits = [_mk_split(1, "Zed", owed="10", paid="10")]
    (out,) = _validate([row], splits)
    assert out.validation_errors.count(UnknownMember(name="Zed", field="Splits")) == 1


# ----------------------- row references -----------------------


def test_reimburses_row_must_name_an_existing_row():
    rows = [
        _mk_row(1, category="x", paid_by="John", expense_for="John"),
        _mk_row(2, type="reimbursement", paid_to="John", reimburses_row="1"),
        _mk_row(3, type="reimbursement", paid_to="John", reimburses_row="9"),
        _mk_row(4, type="reimbursement", paid_to="John", reimburses_row="first"),
    ]

    out = _validate(rows)

    assert out[1].parsed_reimburses_row == RowNumber(1)
    assert out[1].is_reimbursement_with_reference
    assert out[2].parsed_reimburses_row is None
    assert ReimbursedRowNotFound(row=9) in out[2].validation_warnings
    assert InvalidReimbursesRow(value="first") in out[3].validation_warnings
    assert all(r.status.is_importable for r in out)


def test_declared_row_number_mismatch_warns():
    rows = [
        _mk_row(1, row="1", category="x", paid_by="John", expense_for="John"),
        _mk_row(2, row="7", category="x", paid_by="John", expense_for="John"),
    ]
    out = _validate(rows)
    assert not any(isinstance(w, RowNumberMismatch) for w in out[0].validation_warnings)
    assert RowNumberMismatch(declared="7", assigned=2) in out[1].validation_warnings


def test_revalidation_starts_from_a_clean_slate():
    row = _mk_row(category="", paid_by="John", expense_for="John")
    validator = RowValidator(_mk_context("John"))
    validator.validate([row])
    validator.validate([row])
    assert row.validation_warnings == [EmptyCategory()]
