# quack_helper/data_model/staging/staged_split_row.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .row_number import RowNumber


@dataclass
class StagedSplitRow:
    """One row of the Splits sheet: a member's owed/paid share of a transaction row."""

    # Raw cell text
    transaction_row: str = ""
    member_name: str = ""
    owed_amount: str = ""
    owed_percentage: str = ""
    paid_amount: str = ""
    paid_percentage: str = ""

    # Parsed values
    parsed_transaction_row: Optional[RowNumber] = None
    parsed_owed_amount: Optional[Decimal] = None
    parsed_owed_percentage: Optional[Decimal] = None
    parsed_paid_amount: Optional[Decimal] = None
    parsed_paid_percentage: Optional[Decimal] = None
    matched_member_id: Optional[str] = None
    will_create_member: bool = False  # name matches a managed member the batch creates

    @property
    def is_resolved(self) -> bool:
        return self.matched_member_id is not None or self.will_create_member

    def owed_for(self, total: Decimal) -> Decimal:
        """Owed amount, derived from the percentage of ``total`` when the amount cell is blank."""
        return _amount_or_share(self.parsed_owed_amount, self.parsed_owed_percentage, total)

    def paid_for(self, total: Decimal) -> Decimal:
        return _amount_or_share(self.parsed_paid_amount, self.parsed_paid_percentage, total)


def _amount_or_share(
    amount: Optional[Decimal], percentage: Optional[Decimal], total: Decimal
) -> Decimal:
    if amount is not None:
        return abs(amount)
    if percentage is not None:
        return (total * percentage / Decimal(100)).quantize(Decimal("0.01"))
    return Decimal(0)
