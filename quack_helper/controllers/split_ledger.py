# quack_helper/controllers/split_ledger.py
from __future__ import annotations

from decimal import ROUND_DOWN, Decimal
from typing import Dict, List, Mapping, Sequence

from quack_helper.data_model.household import SplitLedgerEntry


def equal_shares(
    amount: Decimal, member_ids: Sequence[str], quantum: Decimal = Decimal("0.01")
) -> Dict[str, Decimal]:
    """
    Divide ``amount`` evenly, quantized to ``quantum``; shares always sum to ``amount``.

    Leftover quanta go one each to the first members in ``member_ids`` order.

    Example:
        equal_shares(Decimal("10.00"), ["a", "b", "c"])
        -> {"a": Decimal("3.34"), "b": Decimal("3.33"), "c": Decimal("3.33")}
    """
    if not member_ids:
        raise ValueError("Cannot split between zero members")
    n = len(member_ids)
    base = (amount / n).quantize(quantum, rounding=ROUND_DOWN)
    remainder = amount.quantize(quantum) - base * n
    extra = int((remainder / quantum).to_integral_value())
    shares: Dict[str, Decimal] = {}
    for i, mid in enumerate(member_ids):
        shares[mid] = base + (quantum if i < extra else Decimal(0))
    return shares


def merge_ledger(
    paid: Mapping[str, Decimal], owed: Mapping[str, Decimal]
) -> List[SplitLedgerEntry]:
    """One entry per member appearing on either side, payers first."""
    order: List[str] = list(paid)
    order += [mid for mid in owed if mid not in paid]
    entries: List[SplitLedgerEntry] = []
    for mid in order:
        entries.append(
            SplitLedgerEntry(
                member_id=mid,
                owed_amount=owed.get(mid, Decimal(0)),
                paid_amount=paid.get(mid, Decimal(0)),
            )
        )
    return entries
