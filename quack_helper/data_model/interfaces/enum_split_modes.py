from enum import Enum


class PaidByKind(Enum):
    """
    Who put the money in.

    RECIPIENT is forced for income and reimbursements, where "Paid To" names the
    member who received the money and "Paid By" is not consulted.
    """
    SINGLE = "single"
    SHARED = "shared"
    CUSTOM = "custom"
    RECIPIENT = "recipient"


class SplitKind(Enum):
    """
    Who the expense is for.
    """
    EQUAL = "equal"
    MEMBER = "member_only"
    CUSTOM = "custom"
    RECIPIENT = "recipient"
