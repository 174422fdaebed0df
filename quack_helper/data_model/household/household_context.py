# quack_helper/data_model/household/household_context.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from quack_helper.utilities.core_util import name_key

from ..interfaces import MemberRole, MemberStatus
from .category import Category, Sector
from .member import Member

if TYPE_CHECKING:
    from ..interfaces import HouseholdDataStore

log = logging.getLogger(__name__)


def _freeze_links(links: Mapping[str, Iterable[str]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({sid: frozenset(cids) for sid, cids in links.items()})


@dataclass(frozen=True)
class HouseholdContext:
    """
    Read-only snapshot of a household's members, categories and sectors.

    Validation resolves names against this snapshot only. After a commit the
    household has changed, so re-validation needs a fresh context.
    """

    household_id: str
    members: Tuple[Member, ...] = ()
    categories: Tuple[Category, ...] = ()
    sectors: Tuple[Sector, ...] = ()
    sector_category_links: Mapping[str, FrozenSet[str]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    current_member_id: Optional[str] = None

    _active_by_name: Mapping[str, Member] = field(init=False, repr=False, compare=False)
    _category_by_name: Mapping[str, Category] = field(init=False, repr=False, compare=False)
    _sector_by_name: Mapping[str, Sector] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(self.members))
        object.__setattr__(self, "categories", tuple(self.categories))
        object.__setattr__(self, "sectors", tuple(self.sectors))
        object.__setattr__(
            self, "sector_category_links", _freeze_links(self.sector_category_links)
        )

        active: Dict[str, Member] = {}
        for m in self.members:
            if m.is_active:
                active.setdefault(name_key(m.display_name), m)
        cats: Dict[str, Category] = {}
        for c in self.categories:
            cats.setdefault(name_key(c.name), c)
        secs: Dict[str, Sector] = {}
        for s in self.sectors:
            secs.setdefault(name_key(s.name), s)

        object.__setattr__(self, "_active_by_name", MappingProxyType(active))
        object.__setattr__(self, "_category_by_name", MappingProxyType(cats))
        object.__setattr__(self, "_sector_by_name", MappingProxyType(secs))

    # --- lookups ---

    @property
    def active_members(self) -> Tuple[Member, ...]:
        return tuple(m for m in self.members if m.is_active)

    def find_active_member(self, name: str) -> Optional[Member]:
        return self._active_by_name.get(name_key(name))

    def find_category(self, name: str) -> Optional[Category]:
        return self._category_by_name.get(name_key(name))

    def find_sector(self, name: str) -> Optional[Sector]:
        return self._sector_by_name.get(name_key(name))

    def is_linked(self, sector_id: str, category_id: str) -> bool:
        return category_id in self.sector_category_links.get(sector_id, frozenset())

    # --- construction ---

    @classmethod
    def from_store(
        cls,
        store: HouseholdDataStore,
        household_id: str,
        current_member_id: Optional[str] = None,
    ) -> "HouseholdContext":
        ctx = cls(
            household_id=household_id,
            members=tuple(store.list_members(household_id)),
            categories=tuple(store.list_categories(household_id)),
            sectors=tuple(store.list_sectors(household_id)),
            sector_category_links=store.list_sector_category_links(household_id),
            current_member_id=current_member_id,
        )
        log.debug(
            "Context for %s: %d members (%d active), %d categories, %d sectors",
            household_id,
            len(ctx.members),
            len(ctx.active_members),
            len(ctx.categories),
            len(ctx.sectors),
        )
        return ctx

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HouseholdContext":
        """
        Build a context from a JSON-style mapping.

        Shape::

            {"household_id": "h1", "current_member_id": "m1",
             "members": [{"id": "m1", "display_name": "John", "status": "approved"}],
             "categories": [{"id": "c1", "name": "Groceries"}],
             "sectors": [{"id": "s1", "name": "Home"}],
             "sector_categories": {"s1": ["c1"]}}
        """
        members = tuple(
            Member(
                id=str(m["id"]),
                display_name=str(m["display_name"]),
                status=MemberStatus(m.get("status", MemberStatus.APPROVED.value)),
                role=MemberRole(m.get("role", MemberRole.MEMBER.value)),
                is_managed=bool(m.get("is_managed", False)),
            )
            for m in data.get("members", [])
        )
        categories = tuple(
            Category(id=str(c["id"]), name=str(c["name"]), sort_order=int(c.get("sort_order", 0)))
            for c in data.get("categories", [])
        )
        sectors = tuple(
            Sector(id=str(s["id"]), name=str(s["name"]), sort_order=int(s.get("sort_order", 0)))
            for s in data.get("sectors", [])
        )
        return cls(
            household_id=str(data["household_id"]),
            members=members,
            categories=categories,
            sectors=sectors,
            sector_category_links={
                str(k): [str(v) for v in vs]
                for k, vs in (data.get("sector_categories") or {}).items()
            },
            current_member_id=data.get("current_member_id"),
        )
