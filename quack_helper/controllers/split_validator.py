"""
Splits sheet resolution and the checks a custom split dimension must pass.
"""

# quack_helper/controllers/split_validator.py
from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence

from quack_helper.data_model.household import HouseholdContext
from quack_helper.data_model.staging import (
    CustomWithoutSplits,
    RowNumber,
    SplitAmountMismatch,
    StagedSplitRow,
    UnknownMember,
    ValidationError,
)
from quack_helper.utilities import DEFAULT_SETTINGS, ImportSettings, NameSet

log = logging.getLogger(__name__)

PAID_BY_FIELD = "Paid By"
EXPENSE_FOR_FIELD = "Expense For"
SPLITS_FIELD = "Splits"


def resolve_split_members(
    splits: Sequence[StagedSplitRow], context: HouseholdContext
) -> None:
    """Bind each split row to an approved member. Unmatched rows keep a None id."""
    for split in splits:
        member = context.find_active_member(split.member_name) if split.member_name else None
        split.matched_member_id = member.id if member else None
        split.will_create_member = False


def mark_pending_members(splits: Sequence[StagedSplitRow], pending: NameSet) -> None:
    """Flag unmatched split rows whose name the batch will create as a managed member."""
    for split in splits:
        if split.matched_member_id is None and split.member_name:
            split.will_create_member = split.member_name in pending


def splits_by_row(splits: Sequence[StagedSplitRow]) -> Dict[RowNumber, List[StagedSplitRow]]:
    grouped: Dict[RowNumber, List[StagedSplitRow]] = defaultdict(list)
    for split in splits:
        if split.parsed_transaction_row is not None:
            grouped[split.parsed_transaction_row].append(split)
    return dict(grouped)


def check_custom_dimension(
    field: str,
    rows_for_txn: Sequence[StagedSplitRow],
    amount: Decimal | None,
    settings: ImportSettings = DEFAULT_SETTINGS,
) -> List[ValidationError]:
    """
    Errors for one custom dimension ("Paid By" sums paid amounts, "Expense For" owed).

    - no split rows at all → customWithoutSplits
    - a split member that neither exists nor will be created → unknownMember(field="Splits")
    - amounts that do not add up to the row amount → splitAmountMismatch
    """
    if not rows_for_txn:
        return [CustomWithoutSplits(field=field)]

    errors: List[ValidationError] = []
    unresolved = [s.member_name for s in rows_for_txn if not s.is_resolved]
    if any(not name.strip() for name in unresolved):
        errors.append(UnknownMember(name="", field=SPLITS_FIELD))
    for name in NameSet(unresolved):
        errors.append(UnknownMember(name=name, field=SPLITS_FIELD))

    if amount is not None:
        if field == PAID_BY_FIELD:
            total = sum((s.paid_for(amount) for s in rows_for_txn), Decimal(0))
        else:
            total = sum((s.owed_for(amount) for s in rows_for_txn), Decimal(0))
        if abs(total - amount) > settings.epsilon:
            errors.append(SplitAmountMismatch(field=field, expected=amount, actual=total))
    return errors
