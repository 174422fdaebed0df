"""
Interfaces, enums and exception types for the household data model.
"""

from .enum_member_status import MemberRole, MemberStatus
from .enum_split_modes import PaidByKind, SplitKind
from .enum_transaction_type import TransactionType
from .enum_validation_status import ValidationStatus
from .errors import (
    CommitNotAllowedError,
    MissingSheetError,
    StoreError,
    StoreUnavailableError,
    WorkbookReadError,
)
from .i_household_data_store import HouseholdDataStore
from .i_to_dict import IToDict, RecursiveDictStr

__all__ = [
    "MemberRole",
    "MemberStatus",
    "PaidByKind",
    "SplitKind",
    "TransactionType",
    "ValidationStatus",
    "CommitNotAllowedError",
    "MissingSheetError",
    "StoreError",
    "StoreUnavailableError",
    "WorkbookReadError",
    "HouseholdDataStore",
    "IToDict",
    "RecursiveDictStr",
]
