from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class TransactionType(Enum):
    """
    Kind of money movement a transaction records.

    Only expenses are categorized and split between members.
    """

    EXPENSE = "expense"
    INCOME = "income"
    SETTLEMENT = "settlement"
    REIMBURSEMENT = "reimbursement"

    @property
    def display_name(self) -> str:
        return "Reimburse" if self is TransactionType.REIMBURSEMENT else self.value.title()

    @property
    def has_recipient(self) -> bool:
        """Income and reimbursements name who received the money in "Paid To"."""
        return self in (TransactionType.INCOME, TransactionType.REIMBURSEMENT)

    @classmethod
    def from_text(cls, text: str) -> Optional["TransactionType"]:
        """Case-insensitive lookup accepting short synonyms; None when unrecognized."""
        return _SYNONYMS.get(text.strip().lower())


_SYNONYMS: Dict[str, TransactionType] = {
    "expense": TransactionType.EXPENSE,
    "exp": TransactionType.EXPENSE,
    "income": TransactionType.INCOME,
    "inc": TransactionType.INCOME,
    "settlement": TransactionType.SETTLEMENT,
    "settle": TransactionType.SETTLEMENT,
    "reimbursement": TransactionType.REIMBURSEMENT,
    "reimburse": TransactionType.REIMBURSEMENT,
    "reimb": TransactionType.REIMBURSEMENT,
}
