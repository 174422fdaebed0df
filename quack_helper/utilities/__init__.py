from .config_logging import LOGGING, configure_logging
from .converters_scalar import (
    format_amount,
    format_percentage,
    to_amount,
    to_bool,
    to_date,
    to_decimal,
    to_int,
    to_optional_decimal,
    to_percentage,
)
from .core_util import NameSet, is_null_or_whitespace, name_key, open_for_read
from .settings import DEFAULT_SETTINGS, ImportSettings

__all__ = [
    "is_null_or_whitespace",
    "name_key",
    "NameSet",
    "open_for_read",
    "to_amount",
    "to_bool",
    "to_date",
    "to_decimal",
    "to_int",
    "to_optional_decimal",
    "to_percentage",
    "format_amount",
    "format_percentage",
    "ImportSettings",
    "DEFAULT_SETTINGS",
    "LOGGING",
    "configure_logging",
]
