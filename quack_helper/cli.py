# quack_helper/cli.py
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from quack_helper.controllers.import_session import ImportSession, RowFilter
from quack_helper.controllers.workbook_writer import write_import_template
from quack_helper.data_model.household import HouseholdContext
from quack_helper.data_model.interfaces import WorkbookReadError
from quack_helper.data_model.staging import ImportSummary, issue_id, issue_message
from quack_helper.utilities import configure_logging

log = logging.getLogger(__name__)


def _print_summary(summary: ImportSummary) -> None:
    print(f"Rows: {summary.total_rows}")
    print(f"  valid:              {summary.valid_rows}")
    print(f"  with warnings:      {summary.warning_rows}")
    print(f"  with errors:        {summary.error_rows}")
    for label, names in (
        ("New categories", summary.new_categories_to_create),
        ("New sectors", summary.new_sectors_to_create),
        ("New managed members", summary.new_managed_members_to_create),
        ("Existing members used", summary.existing_members_used),
    ):
        if names:
            print(f"{label}: {', '.join(names)}")
    if summary.new_sector_category_links:
        links = ", ".join(f"{s} -> {c}" for s, c in summary.new_sector_category_links)
        print(f"New sector links: {links}")
    print(
        f"Splits: {summary.total_split_rows} rows for {summary.transactions_with_splits} "
        f"transactions ({summary.orphaned_split_rows} orphaned)"
    )
    print(f"Reimbursements with references: {summary.reimbursements_with_references}")
    print(f"Can import all: {'yes' if summary.can_import_all else 'no'}")
    print(f"Can import valid only: {'yes' if summary.can_import_valid else 'no'}")


def _cmd_template(args: argparse.Namespace) -> None:
    out = write_import_template(args.output)
    print(f"Template written to {out}")


def _cmd_validate(args: argparse.Namespace) -> None:
    if not args.input.exists():
        raise SystemExit(f"Input file not found: {args.input}")
    if not args.context.exists():
        raise SystemExit(f"Context file not found: {args.context}")

    with open(args.context, encoding="utf-8") as fh:
        context = HouseholdContext.from_dict(json.load(fh))

    try:
        session = ImportSession.from_path(args.input, context)
    except WorkbookReadError as e:
        raise SystemExit(str(e)) from e

    if args.json:
        payload = session.summary.to_dict()
        payload["rows"] = [
            {
                "row": int(row.row_number),
                "status": row.status.value,
                "errors": [issue_id(e) for e in row.validation_errors],
                "warnings": [issue_id(w) for w in row.validation_warnings],
            }
            for row in session.filter_rows(RowFilter(args.rows))
        ]
        print(json.dumps(payload, indent=2))
    else:
        _print_summary(session.summary)
        for row in session.filter_rows(RowFilter(args.rows)):
            issues = [*row.validation_errors, *row.validation_warnings]
            detail = "; ".join(issue_message(i) for i in issues) or "ok"
            print(f"Row {row.row_number} [{row.status.value}]: {detail}")

    if args.failed_rows is not None:
        out = session.write_failed_rows(args.failed_rows)
        print(f"Failed rows written to {out}")


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(
        prog="quack-helper",
        description="Validate household expense spreadsheets and write import templates.",
    )
    ap.add_argument("--log-dir", type=Path, default=None,
                    help="Directory for the rotating log file (default: ./logs)")
    ap.add_argument("--no-log-file", action="store_true", help="Log to the console only")
    sub = ap.add_subparsers(dest="command", required=True)

    tp = sub.add_parser("template", help="Write an example import workbook")
    tp.add_argument("output", type=Path, help="Path of the .xlsx to write")
    tp.set_defaults(func=_cmd_template)

    vp = sub.add_parser("validate", help="Stage and validate an import file without committing")
    vp.add_argument("input", type=Path, help="Path to the .xlsx or .csv to check")
    vp.add_argument("--context", type=Path, required=True,
                    help="JSON file describing the household's members, categories and sectors")
    vp.add_argument("--failed-rows", type=Path, default=None,
                    help="Also write the invalid rows (with their errors) to this .xlsx")
    vp.add_argument("--rows", choices=[f.value for f in RowFilter], default=RowFilter.ERRORS.value,
                    help="Which rows to list after the summary (default: errors)")
    vp.add_argument("--json", action="store_true", help="Print the summary as JSON")
    vp.set_defaults(func=_cmd_validate)

    args = ap.parse_args(argv)
    configure_logging(args.log_dir, console_only=args.no_log_file)
    log.debug("Command: %s", args.command)
    args.func(args)


if __name__ == "__main__":
    main()
