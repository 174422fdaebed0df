from .category import Category, Sector
from .export_data import ExportData
from .household_context import HouseholdContext
from .member import Member
from .transaction import NewTransaction, SplitLedgerEntry, Transaction

__all__ = [
    "Category",
    "Sector",
    "ExportData",
    "HouseholdContext",
    "Member",
    "NewTransaction",
    "SplitLedgerEntry",
    "Transaction",
]
