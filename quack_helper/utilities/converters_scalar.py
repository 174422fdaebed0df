# quack_helper/utilities/converters_scalar.py
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Final, Iterable, Optional, Sequence


def to_decimal(value: Any) -> Decimal:
    """
    Convert a cell value to Decimal, ignoring currency symbols and thousands separators.

    Supported string formats:
      - "1234", "-1234", "1234-", "(1,234.56)", "-3,188.32"
      - Currency symbols/codes ignored: "$1,234.56", "USD 12.00", "€5"

    '.' is always the decimal mark; ',' is always a thousands separator.

    Raises:
        ValueError: if no digits are present, or anything other than currency
            symbols, codes and spaces surrounds the number ("1e3", "abc5").

    Examples:
        to_decimal("-3,188.32")   -> Decimal('-3188.32')
        to_decimal("(1,234.56)")  -> Decimal('-1234.56')
        to_decimal("$5.75")       -> Decimal('5.75')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Unsupported type for Decimal conversion: bool")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # Avoid binary float artifacts
        return Decimal(str(value))

    if not isinstance(value, str):
        raise ValueError(
            f"Unsupported type for Decimal conversion: {type(value).__name__}"
        )

    cleaned = clean_number_like_string(value)

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(
            f"Could not parse Decimal from {value!r} (normalized to {cleaned!r})"
        ) from e


def clean_number_like_string(value: str) -> str:
    s = value.strip()
    if not s:
        raise ValueError("Empty string cannot be converted to Decimal")

    s = s.replace("\xa0", " ").replace(_UNICODE_MINUS, "-")  # NBSP, unicode minus
    s = s.strip()

    # Detect negative via parentheses or trailing minus
    neg = False
    if s.startswith("(") and s.endswith(")"):
        neg = True
        s = s[1:-1].strip()
    if s.endswith("-"):
        neg = not neg
        s = s[:-1].strip()

    # Only currency symbols, a leading or trailing ISO code and spaces may surround the number
    s = _CURRENCY_CODE.sub("", s)
    s = _CURRENCY_SYMBOL.sub("", s)
    s = re.sub(r"\s+", "", s)

    if s.startswith("+"):
        s = s[1:]
    if s.startswith("-"):
        neg = not neg
        s = s[1:]

    if not re.search(r"\d", s):
        raise ValueError(f"No digits found in input: {value!r}")
    if not _PLAIN_NUMBER.fullmatch(s):
        raise ValueError(f"Unexpected characters in number: {value!r}")

    cleaned = s.replace(",", "").strip()
    if neg and cleaned and cleaned[0] != "-":
        cleaned = "-" + cleaned
    return cleaned


def to_amount(value: str) -> Decimal:
    """Parse a money cell; the sign carries no meaning, so the absolute value is returned."""
    return abs(to_decimal(value))


def to_percentage(value: str) -> Optional[Decimal]:
    """Parse "50", "50%" or "33.33 %" into Decimal; blank or garbage gives None."""
    txt = value.replace("%", "").strip()
    if not txt:
        return None
    try:
        return Decimal(txt)
    except InvalidOperation:
        return None


def to_optional_decimal(value: str) -> Optional[Decimal]:
    """Lenient money parse for secondary sheets: blank or garbage gives None."""
    if not value.strip():
        return None
    try:
        return to_decimal(value)
    except ValueError:
        return None


def to_int(value: str) -> Optional[int]:
    """
    Parse a row-number style integer cell.

    Accepts "7", " 7 " and "7.0" (numeric cells that went through a float).
    Returns None for blanks and anything else.
    """
    txt = value.strip()
    if not txt:
        return None
    if _INT_RE.fullmatch(txt):
        return int(txt.split(".")[0])
    return None


def to_bool(value: str, truthy: Iterable[str] = ()) -> bool:
    words = {w.lower() for w in truthy} or _TRUE_STRINGS
    return value.strip().lower() in words


def to_date(
    value: str, primary_format: str, fallback_formats: Sequence[str] = ()
) -> Optional[date]:
    """
    Parse a date cell using the canonical format first, then each fallback in order.

    ISO datetimes ("2024-01-15T08:30:00", "2024-01-15 08:30:00") are reduced to
    their date part before trying the formats.

    Returns:
        datetime.date for the first format that matches; otherwise None.
    """
    txt = value.strip()
    if not txt:
        return None

    m = _ISO_DATETIME_RE.match(txt)
    if m:
        txt = m.group(1)

    for fmt in (primary_format, *fallback_formats):
        try:
            return datetime.strptime(txt, fmt).date()
        except ValueError:
            continue
    return None


def format_amount(value: Decimal, quantum: Decimal = Decimal("0.01")) -> str:
    """Render money with a fixed number of places: Decimal('5.7') -> '5.70'."""
    return str(value.quantize(quantum))


def format_percentage(part: Decimal, whole: Decimal) -> str:
    if not whole:
        return ""
    pct = (part / whole * Decimal(100)).quantize(Decimal("0.01"))
    return str(int(pct)) if pct == pct.to_integral_value() else str(pct)


_INT_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?\d+(\.0+)?")
_ISO_DATETIME_RE: Final[re.Pattern[str]] = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$"
)
_TRUE_STRINGS = {"1", "true", "t", "yes", "y", "on"}
_CURRENCY_SYMBOL: Final[re.Pattern[str]] = re.compile(r"[$€£¥₹₩₽¢₺₪₫฿]")
_CURRENCY_CODE: Final[re.Pattern[str]] = re.compile(r"^[A-Z]{3}\b|\b[A-Z]{3}$")
_PLAIN_NUMBER: Final[re.Pattern[str]] = re.compile(r"[\d,]*\.?\d*")
_UNICODE_MINUS = "\u2212"  # U+2212 MINUS SIGN
