# tests/controllers/test_export_inference.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from quack_helper.controllers.export_inference import ExportBuilder, infer_label
from quack_helper.controllers.grid_reader import RawSheet, cells_from_values
from quack_helper.controllers.import_session import ImportSession
from quack_helper.data_model.household import (
    Category,
    ExportData,
    HouseholdContext,
    Member,
    Sector,
    SplitLedgerEntry,
    Transaction,
)
from quack_helper.data_model.interfaces import (
    MemberRole,
    MemberStatus,
    PaidByKind,
    SplitKind,
    TransactionType,
    ValidationStatus,
)
from quack_helper.stores import InMemoryHouseholdStore

D = Decimal
NAMES = {"m1": "Alice", "m2": "Bob", "m3": "Carol"}
ACTIVE = ["m1", "m2", "m3"]


@pytest.mark.parametrize(
    "amounts, expected",
    [
        ({}, ("", False)),
        ({"m1": D("0"), "m2": D("0")}, ("", False)),
        ({"m2": D("10")}, ("Bob", False)),
        ({"m1": D("3.34"), "m2": D("3.33"), "m3": D("3.33")}, ("Equal", False)),
        ({"m1": D("5"), "m2": D("5")}, ("Custom", True)),  # not every active member
        ({"m1": D("5"), "m2": D("3"), "m3": D("2")}, ("Custom", True)),
        ({"ghost": D("5")}, ("Custom", True)),
    ],
)
def test_infer_label(amounts, expected):
    assert infer_label(amounts, ACTIVE, NAMES) == expected


def _mk_data():
    members = (
        Member("m1", "Alice", role=MemberRole.OWNER),
        Member("m2", "Bob"),
        Member("m3", "Carol"),
        Member("m4", "Dave", status=MemberStatus.INACTIVE),
    )
    txns = (
        Transaction("t1", date(2024, 1, 1), "Groceries", D("10"), paid_by_member_id="m1",
                    category_id="c1"),
        Transaction("t2", date(2024, 1, 2), "Dinner", D("100"), paid_by_member_id="m2",
                    category_id="c1", notes="birthday"),
        Transaction("t3", date(2024, 1, 3), "Refund", D("10"), TransactionType.REIMBURSEMENT,
                    paid_to_member_id="m1", reimburses_transaction_id="t1"),
        Transaction("t4", date(2024, 1, 4), "Settle up", D("25"), TransactionType.SETTLEMENT,
                    paid_by_member_id="m2", paid_to_member_id="m1"),
        Transaction("t5", date(2024, 1, 5), "Salary", D("1000"), TransactionType.INCOME,
                    paid_to_member_id="m3", excluded_from_budget=True),
        Transaction("t6", date(2024, 1, 6), "Snack", D("3"), paid_by_member_id="m3"),
    )
    ledger = {
        "t1": (
            SplitLedgerEntry("m1", owed_amount=D("3.34"), paid_amount=D("10")),
            SplitLedgerEntry("m2", owed_amount=D("3.33")),
            SplitLedgerEntry("m3", owed_amount=D("3.33")),
        ),
        "t2": (
            SplitLedgerEntry("m2", owed_amount=D("60"), paid_amount=D("100")),
            SplitLedgerEntry("m1", owed_amount=D("40")),
        ),
    }
    return ExportData(
        household_name="Quack House",
        transactions=txns,
        ledger=ledger,
        members=members,
        categories=(Category("c1", "Food", 2), Category("c2", "Rent", 1)),
        sectors=(Sector("s1", "Home"),),
        sector_category_links={"s1": ["c2", "gone"]},
    )


def test_transaction_rows_use_the_import_vocabulary():
    # Act
    tables = {t.name: t for t in ExportBuilder(_mk_data()).build()}
    txns = tables["Transactions"]
    rows = [dict(zip(txns.headers, r)) for r in txns.rows]

    # Assert
    assert [r["Row"] for r in rows] == ["1", "2", "3", "4", "5", "6"]
    assert rows[0]["Amount"] == "10.00"
    assert (rows[0]["Category"], rows[0]["Paid By"], rows[0]["Expense For"]) == (
        "Food", "Alice", "Equal"
    )
    assert (rows[1]["Paid By"], rows[1]["Expense For"], rows[1]["Notes"]) == (
        "Bob", "Custom", "birthday"
    )
    assert (rows[2]["Type"], rows[2]["Paid To"], rows[2]["Reimburses Row"]) == (
        "reimbursement", "Alice", "1"
    )
    assert rows[2]["Paid By"] == "" and rows[2]["Category"] == ""
    assert (rows[3]["Paid By"], rows[3]["Paid To"]) == ("Bob", "Alice")
    assert rows[4]["Excluded From Budget"] == "Yes"
    assert rows[0]["Excluded From Budget"] == "No"
    # no ledger: payer only
    assert (rows[5]["Paid By"], rows[5]["Expense For"]) == ("Carol", "")


def test_only_custom_rows_get_split_rows():
    tables = {t.name: t for t in ExportBuilder(_mk_data()).build()}
    splits = tables["Splits"]
    assert splits.headers == [
        "Transaction Row", "Member Name", "Owed Amount", "Owed %", "Paid Amount", "Paid %"
    ]
    assert splits.rows == [
        ["2", "Bob", "60.00", "60", "100.00", "100"],
        ["2", "Alice", "40.00", "40", "0.00", "0"],
    ]


def test_reference_sheets():
    tables = {t.name: t for t in ExportBuilder(_mk_data()).build()}
    assert tables["Categories"].rows == [["Food", "2"], ["Rent", "1"]]
    assert tables["Sectors"].rows == [["Home", "0"]]
    assert tables["Sector Categories"].rows == [["Home", "Rent"]]
    assert tables["Members"].rows == [
        ["Alice", "owner", "approved"],
        ["Bob", "member", "approved"],
        ["Carol", "member", "approved"],
        ["Dave", "member", "inactive"],
    ]


def _as_sheets(tables):
    return [
        RawSheet(
            name=t.name,
            rows=[cells_from_values(t.headers)] + [cells_from_values(r) for r in t.rows],
        )
        for t in tables
    ]


def test_export_reimports_with_the_same_classification():
    # Arrange
    data = _mk_data()
    ctx = HouseholdContext(
        household_id="h1",
        members=data.members,
        categories=data.categories,
        sectors=data.sectors,
        sector_category_links={"s1": ["c2"]},
        current_member_id="m1",
    )

    # Act
    session = ImportSession.from_sheets(_as_sheets(ExportBuilder(data).build()), ctx)

    # Assert
    rows = session.rows
    assert session.summary.error_rows == 0
    assert [r.parsed_type for r in rows] == [t.transaction_type for t in data.transactions]
    assert [r.parsed_amount for r in rows] == [t.amount for t in data.transactions]
    assert rows[0].paid_by_mode.member.entity_id == "m1"
    assert rows[0].split_mode.kind is SplitKind.EQUAL
    assert rows[1].split_mode.kind is SplitKind.CUSTOM
    assert rows[2].paid_by_mode.kind is PaidByKind.RECIPIENT
    assert int(rows[2].parsed_reimburses_row) == 1
    assert rows[4].parsed_excluded_from_budget
    assert session.summary.new_categories_to_create == ()
    assert session.summary.new_sector_category_links == ()
    assert session.summary.new_managed_members_to_create == ()
    assert rows[0].status is ValidationStatus.VALID


@pytest.mark.parametrize(
    "amounts, expected",
    [
        # 0.02 between three: the alphabetically last member's share rounds to zero
        ({"m1": D("0.01"), "m2": D("0.01")}, ("Equal", False)),
        ({"m1": D("0.01"), "m2": D("0.01"), "m3": D("0")}, ("Equal", False)),
        # leftover cents never skip the first members
        ({"m2": D("0.01"), "m3": D("0.01")}, ("Custom", True)),
    ],
)
def test_infer_label_small_equal_splits(amounts, expected):
    assert infer_label(amounts, ACTIVE, NAMES) == expected


def test_small_equal_split_survives_commit_export_reimport():
    # Arrange
    store = InMemoryHouseholdStore()
    store.add_household("h1", "Quack House")
    alice = store.add_member("h1", "Alice")
    store.add_member("h1", "Bob")
    store.add_member("h1", "Carol")
    ctx = HouseholdContext.from_store(store, "h1", current_member_id=alice.id)
    header = ["Date", "Description", "Amount", "Type", "Category", "Paid By", "Expense For"]
    sheet = RawSheet(
        name="Transactions",
        rows=[
            cells_from_values(header),
            cells_from_values(["2024-01-01", "Gum", "0.02", "expense", "", "Equal", "Equal"]),
        ],
    )
    result = ImportSession.from_sheets([sheet], ctx).commit(store)
    assert result.success_count == 1

    # Act
    exported = ExportBuilder(store.export_data("h1")).build()
    session = ImportSession.from_sheets(_as_sheets(exported), HouseholdContext.from_store(store, "h1"))

    # Assert
    (row,) = session.rows
    assert row.paid_by_mode.kind is PaidByKind.SHARED
    assert row.split_mode.kind is SplitKind.EQUAL
    assert row.parsed_amount == D("0.02")
