# quack_helper/utilities/settings.py
"""
Tunables for the import/export pipeline.

`DEFAULT_SETTINGS` is used when callers pass nothing; override single fields with
``dataclasses.replace(DEFAULT_SETTINGS, max_workers=1)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import FrozenSet, Tuple

# Order matters: the first format that parses wins.
FALLBACK_DATE_FORMATS: Tuple[str, ...] = (
    "%m/%d/%Y",  # 01/15/2024, 1/5/2024
    "%d/%m/%Y",  # 15/01/2024
    "%Y/%m/%d",  # 2024/01/15
    "%m/%d/%y",  # 01/15/24
    "%d.%m.%Y",  # 15.01.2024
    "%b %d, %Y",  # Jan 15, 2024
    "%d %b %Y",  # 15 Jan 2024
)


@dataclass(frozen=True)
class ImportSettings:
    date_format: str = "%Y-%m-%d"
    fallback_date_formats: Tuple[str, ...] = FALLBACK_DATE_FORMATS

    # Reserved words in "Paid By" / "Expense For" (compared case-insensitively).
    shared_tokens: FrozenSet[str] = frozenset(
        {"equal", "equally", "shared", "split", "split equally", "everyone", "all"}
    )
    custom_tokens: FrozenSet[str] = frozenset({"custom", "custom split", "see splits"})
    truthy_words: FrozenSet[str] = frozenset({"yes", "y", "true", "t", "1", "x"})

    # Spellings written on export.
    equal_label: str = "Equal"
    custom_label: str = "Custom"

    epsilon: Decimal = Decimal("0.01")
    money_quantum: Decimal = Decimal("0.01")

    max_workers: int = 4
    allow_member_creation: bool = True

    def is_shared_token(self, text: str) -> bool:
        return text.strip().lower() in self.shared_tokens

    def is_custom_token(self, text: str) -> bool:
        return text.strip().lower() in self.custom_tokens


DEFAULT_SETTINGS = ImportSettings()
