# quack_helper/controllers/name_resolver.py
from __future__ import annotations

from typing import Sequence

from quack_helper.data_model.household import HouseholdContext
from quack_helper.data_model.staging import (
    StagedCategoryRow,
    StagedSectorCategoryLinkRow,
    StagedSectorRow,
)


def resolve_category_rows(rows: Sequence[StagedCategoryRow], context: HouseholdContext) -> None:
    for row in rows:
        found = context.find_category(row.name)
        row.matched_category_id = found.id if found else None


def resolve_sector_rows(rows: Sequence[StagedSectorRow], context: HouseholdContext) -> None:
    for row in rows:
        found = context.find_sector(row.name)
        row.matched_sector_id = found.id if found else None


def resolve_link_rows(
    rows: Sequence[StagedSectorCategoryLinkRow], context: HouseholdContext
) -> None:
    """A link is new unless both ends exist and are already associated."""
    for row in rows:
        sector = context.find_sector(row.sector_name)
        category = context.find_category(row.category_name)
        row.matched_sector_id = sector.id if sector else None
        row.matched_category_id = category.id if category else None
        row.is_new_link = not (
            sector is not None
            and category is not None
            and context.is_linked(sector.id, category.id)
        )
