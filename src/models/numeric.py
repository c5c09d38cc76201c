# src/models/numeric.py

"""Lenient decimal and timestamp parsing for upstream JSON values."""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, getcontext

ZERO = Decimal("0")


def parse_decimal(value: object) -> Decimal | None:
    """Parse a price-like value, returning ``None`` when it is unusable.

    Accepts ints, floats, ``Decimal`` and numeric strings (surrounding
    whitespace and thousands separators are ignored).  Booleans,
    non-finite or out-of-range numbers and anything else yield ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return None
        try:
            result = Decimal(cleaned)
        except InvalidOperation:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    # Leave one digit of headroom so a difference of two prices fits Emax
    if result and abs(result.adjusted()) >= getcontext().Emax:
        return None
    return result


def coerce_decimal(value: object) -> Decimal:
    """Like :func:`parse_decimal`, but unusable input becomes ``0``."""
    parsed = parse_decimal(value)
    return ZERO if parsed is None else parsed


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware ``datetime``.

    A trailing ``Z`` is accepted.  Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
