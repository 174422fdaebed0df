# quack_helper/data_model/household/member.py
from __future__ import annotations

from dataclasses import dataclass

from ..interfaces import MemberRole, MemberStatus, RecursiveDictStr


@dataclass(frozen=True)
class Member:
    id: str
    display_name: str
    status: MemberStatus = MemberStatus.APPROVED
    role: MemberRole = MemberRole.MEMBER
    is_managed: bool = False  # no linked account; controlled by another member

    @property
    def is_active(self) -> bool:
        """Only approved members take part in matching and equal-split denominators."""
        return self.status is MemberStatus.APPROVED

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "status": self.status.value,
            "role": self.role.value,
            "is_managed": self.is_managed,
        }
