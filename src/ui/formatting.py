# src/ui/formatting.py

"""Money and timestamp formatting for the spotlight views."""

from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from src.config.settings import Settings
from src.models.display_model import DisplayRow, PriceDirection

PLACEHOLDER = "—"

DIRECTION_STYLES: dict[PriceDirection, str] = {
    PriceDirection.INCREASE: "green",
    PriceDirection.DECREASE: "red",
    PriceDirection.UNCHANGED: "dim",
}

_DIRECTION_SIGNS: dict[PriceDirection, str] = {
    PriceDirection.INCREASE: "+",
    PriceDirection.DECREASE: "–",
    PriceDirection.UNCHANGED: "",
}


def format_money(value: Decimal | None, currency: str | None = None) -> str:
    """Format *value* like ``1,299.00 EUR``; ``None`` gives a placeholder."""
    if value is None:
        return PLACEHOLDER
    return f"{value:,.2f} {currency or Settings.CURRENCY}"


def format_delta(row: DisplayRow, currency: str | None = None) -> str:
    """Signed absolute change, e.g. ``+2.00 EUR`` or ``–2.00 EUR``."""
    sign = _DIRECTION_SIGNS[row.direction]
    return f"{sign}{format_money(abs(row.delta), currency)}"


def format_timestamp(value: datetime | None, tz_name: str | None = None) -> str:
    """Render *value* in the display timezone as ``dd.mm.yyyy HH:MM:SS``."""
    if value is None:
        return PLACEHOLDER
    local = value.astimezone(ZoneInfo(tz_name or Settings.DISPLAY_TIMEZONE))
    return local.strftime("%d.%m.%Y %H:%M:%S")
