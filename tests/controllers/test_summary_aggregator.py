# tests/controllers/test_summary_aggregator.py
from __future__ import annotations

from quack_helper.controllers.grid_reader import RawSheet, cells_from_values
from quack_helper.controllers.row_validator import validate_workbook
from quack_helper.controllers.staging_parsers import stage_workbook
from quack_helper.controllers.summary_aggregator import status_counts, summarize
from quack_helper.data_model.household import Category, HouseholdContext, Member, Sector
from quack_helper.data_model.interfaces import ValidationStatus

TXN_HEADER = ["Row", "Date", "Description", "Amount", "Type", "Category", "Paid By",
              "Paid To", "Expense For", "Reimburses Row"]


def _mk_sheet(name, header, *rows):
    return RawSheet(
        name=name, rows=[cells_from_values(header)] + [cells_from_values(r) for r in rows]
    )


def _mk_context():
    return HouseholdContext(
        household_id="h1",
        members=[Member(id="m-john", display_name="John"), Member(id="m-jane", display_name="Jane")],
        categories=[Category(id="c-rent", name="Rent"), Category(id="c-food", name="Food")],
        sectors=[Sector(id="s-home", name="Home")],
        sector_category_links={"s-home": ["c-rent"]},
        current_member_id="m-john",
    )


def _summarize(*sheets):
    ctx = _mk_context()
    staged = validate_workbook(stage_workbook(list(sheets)), ctx)
    return staged, summarize(staged, ctx)


def test_counts_and_name_rollups():
    # Arrange
    txns = _mk_sheet(
        "Transactions",
        TXN_HEADER,
        ["1", "2024-01-01", "Rent", "1000", "expense", "rent", "John", "", "Equal", ""],
        ["2", "2024-01-02", "Market", "40", "expense", "Groceries", "Bob", "", "John", ""],
        ["3", "2024-01-03", "Cafe", "12", "expense", "groceries", "bob", "", "Custom", ""],
        ["4", "2024-01-04", "Refund", "40", "reimbursement", "", "", "Jane", "", "2"],
        ["5", "bad date", "Broken", "1", "expense", "Food", "John", "", "John", ""],
    )
    splits = _mk_sheet(
        "Splits",
        ["Transaction Row", "Member Name", "Owed Amount"],
        ["3", "John", "6"],
        ["3", "Bob", "6"],
        ["9", "John", "1"],
    )

    # Act
    staged, summary = _summarize(txns, splits)

    # Assert
    assert (summary.total_rows, summary.valid_rows, summary.warning_rows, summary.error_rows) == (
        5, 2, 2, 1
    )
    assert summary.new_categories_to_create == ("Groceries",)
    assert summary.existing_categories_used == ("Rent", "Food")  # row 5 is invalid but resolved
    assert summary.new_managed_members_to_create == ("Bob",)
    assert summary.existing_members_used == ("John", "Jane")
    assert summary.reimbursements_with_references == 1
    assert summary.transactions_with_splits == 1
    assert summary.total_split_rows == 3
    assert summary.orphaned_split_rows == 1
    assert not summary.can_import_all
    assert summary.can_import_valid
    assert summary.importable_rows == 4
    assert status_counts(staged.transactions)[ValidationStatus.INVALID] == 1


def test_sheet_and_link_names_feed_the_rollups():
    txns = _mk_sheet("Transactions", ["Date", "Description", "Amount", "Paid To", "Type"],
                     ["2024-01-01", "Pay", "100", "John", "income"])
    cats = _mk_sheet("Categories", ["Name"], ["Utilities"], ["RENT"])
    secs = _mk_sheet("Sectors", ["Name"], ["Travel"], ["Home"])
    links = _mk_sheet(
        "Sector Categories",
        ["Sector Name", "Category Name"],
        ["Home", "Rent"],
        ["home", "rent"],  # duplicate pair
        ["Home", "Food"],
        ["Leisure", "Hobbies"],
    )

    _, summary = _summarize(txns, cats, secs, links)

    assert summary.new_categories_to_create == ("Utilities", "Hobbies")
    assert summary.existing_categories_used == ("RENT", "Food")
    assert summary.new_sectors_to_create == ("Travel", "Leisure")
    assert summary.existing_sectors_used == ("Home",)
    assert summary.existing_sector_category_links == (("Home", "Rent"),)
    assert summary.new_sector_category_links == (("Home", "Food"), ("Leisure", "Hobbies"))


def test_summary_to_dict_is_plain_data():
    txns = _mk_sheet("Transactions", ["Date", "Description", "Amount"],
                     ["2024-01-01", "Coffee", "3"])
    _, summary = _summarize(txns)
    d = summary.to_dict()
    assert d["total_rows"] == 1
    assert d["new_sector_category_links"] == []
    assert d["existing_members_used"] == []
    assert d["can_import_all"] is True


def test_members_named_only_on_the_splits_sheet_count_as_used():
    txns = _mk_sheet("Transactions", TXN_HEADER,
                     ["1", "2024-01-01", "Gift", "30", "expense", "Food", "John", "", "Custom", ""])
    splits = _mk_sheet("Splits", ["Transaction Row", "Member Name", "Owed Amount"],
                       ["1", "jane", "30"])

    _, summary = _summarize(txns, splits)

    assert summary.error_rows == 0
    assert summary.existing_members_used == ("John", "jane")
    assert summary.new_managed_members_to_create == ()
