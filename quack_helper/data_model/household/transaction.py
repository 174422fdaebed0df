# quack_helper/data_model/household/transaction.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..interfaces import PaidByKind, SplitKind, TransactionType


@dataclass(frozen=True)
class Transaction:
    """A stored transaction as the export side sees it."""

    id: str
    date: date
    description: str
    amount: Decimal
    transaction_type: TransactionType = TransactionType.EXPENSE
    paid_by_member_id: Optional[str] = None
    paid_to_member_id: Optional[str] = None
    category_id: Optional[str] = None
    reimburses_transaction_id: Optional[str] = None
    excluded_from_budget: bool = False
    notes: str = ""


@dataclass(frozen=True)
class SplitLedgerEntry:
    """One member's share of (owed) and contribution to (paid) a transaction."""

    member_id: str
    owed_amount: Decimal = Decimal(0)
    paid_amount: Decimal = Decimal(0)


@dataclass(frozen=True)
class NewTransaction:
    """Payload for HouseholdDataStore.create_transaction; every foreign key already resolved."""

    household_id: str
    date: date
    description: str
    amount: Decimal
    transaction_type: TransactionType
    paid_by_kind: PaidByKind
    split_kind: SplitKind
    paid_by_member_id: Optional[str] = None
    paid_to_member_id: Optional[str] = None
    split_member_id: Optional[str] = None
    category_id: Optional[str] = None
    reimburses_transaction_id: Optional[str] = None
    excluded_from_budget: bool = False
    notes: Optional[str] = None
