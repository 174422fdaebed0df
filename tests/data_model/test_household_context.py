# tests/data_model/test_household_context.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from quack_helper.data_model.household import (
    Category,
    ExportData,
    HouseholdContext,
    Member,
    Sector,
    Transaction,
)
from quack_helper.data_model.interfaces import (
    HouseholdDataStore,
    MemberRole,
    MemberStatus,
    TransactionType,
)
from quack_helper.stores import InMemoryHouseholdStore


def _mk_context():
    return HouseholdContext(
        household_id="h1",
        members=[
            Member("m1", "John"),
            Member("m2", "Jane", status=MemberStatus.PENDING),
            Member("m3", "john", status=MemberStatus.INACTIVE),
        ],
        categories=[Category("c1", "Groceries"), Category("c2", "groceries")],
        sectors=[Sector("s1", "Home")],
        sector_category_links={"s1": ["c1"]},
    )


def test_lookups_are_trimmed_and_case_insensitive():
    ctx = _mk_context()
    assert ctx.find_active_member("  JOHN ").id == "m1"
    assert ctx.find_category("GROCERIES").id == "c1"  # first spelling wins
    assert ctx.find_sector("home").id == "s1"
    assert ctx.find_sector("Work") is None


@pytest.mark.parametrize("name", ["Jane", "jane"])
def test_non_approved_members_are_not_matched(name):
    assert _mk_context().find_active_member(name) is None


def test_active_members_are_approved_only():
    assert [m.id for m in _mk_context().active_members] == ["m1"]


def test_links_are_frozen():
    ctx = _mk_context()
    assert ctx.is_linked("s1", "c1")
    assert not ctx.is_linked("s1", "c2")
    with pytest.raises(TypeError):
        ctx.sector_category_links["s2"] = frozenset()  # type: ignore[index]
    assert isinstance(ctx.members, tuple)


def test_from_dict_reads_the_json_shape():
    ctx = HouseholdContext.from_dict(
        {
            "household_id": "h1",
            "current_member_id": "m1",
            "members": [
                {"id": "m1", "display_name": "John", "role": "owner"},
                {"id": "m2", "display_name": "Jane", "status": "rejected", "is_managed": True},
            ],
            "categories": [{"id": "c1", "name": "Rent", "sort_order": 3}],
            "sectors": [{"id": "s1", "name": "Home"}],
            "sector_categories": {"s1": ["c1"]},
        }
    )
    assert ctx.current_member_id == "m1"
    assert ctx.members[0].role is MemberRole.OWNER
    assert ctx.members[1].status is MemberStatus.REJECTED and ctx.members[1].is_managed
    assert ctx.categories[0].sort_order == 3
    assert ctx.is_linked("s1", "c1")


def test_from_store_snapshots_the_store():
    # Arrange
    store = InMemoryHouseholdStore()
    john = store.add_member("h1", "John")
    sid = store.create_sector("h1", "Home")
    cid = store.create_category("h1", "Rent")
    store.link_sector_category(sid, cid)

    # Act
    ctx = HouseholdContext.from_store(store, "h1", current_member_id=john.id)
    store.create_category("h1", "Later")

    # Assert
    assert isinstance(store, HouseholdDataStore)
    assert ctx.find_category("Later") is None
    assert ctx.is_linked(sid, cid)
    assert ctx.current_member_id == john.id


def test_member_to_dict():
    assert Member("m1", "John", role=MemberRole.ADMIN).to_dict() == {
        "id": "m1",
        "display_name": "John",
        "status": "approved",
        "role": "admin",
        "is_managed": False,
    }


def test_export_data_pairs_skip_dangling_ids():
    data = ExportData(
        household_name="x",
        categories=(Category("c1", "Rent"), Category("c2", "Power")),
        sectors=(Sector("s1", "Home"), Sector("s2", "Empty")),
        sector_category_links={"s1": ["c1", "c9", "c2"]},
    )
    assert data.sector_category_pairs() == [("Home", "Rent"), ("Home", "Power")]
    assert data.ledger_for("t1") == ()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Expense", TransactionType.EXPENSE),
        (" inc ", TransactionType.INCOME),
        ("SETTLE", TransactionType.SETTLEMENT),
        ("reimburse", TransactionType.REIMBURSEMENT),
        ("transfer", None),
    ],
)
def test_transaction_type_from_text(text, expected):
    assert TransactionType.from_text(text) is expected


def test_transaction_type_traits():
    assert TransactionType.REIMBURSEMENT.display_name == "Reimburse"
    assert TransactionType.INCOME.has_recipient
    assert not TransactionType.SETTLEMENT.has_recipient


def test_transaction_defaults():
    txn = Transaction("t1", date(2024, 1, 1), "Coffee", Decimal("3"))
    assert txn.transaction_type is TransactionType.EXPENSE
    assert not txn.excluded_from_budget
