from enum import Enum


class MemberStatus(Enum):
    """
    Membership state of a household member.
    """
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"
    INACTIVE = "inactive"


class MemberRole(Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
