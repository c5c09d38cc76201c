# src/models/history_entry.py

"""Price-change record returned by the history service."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class HistoryEntry:
    """One price change, carried exactly as received.

    Price and timestamp fields are left raw; normalisation happens in
    :func:`src.services.view_model_builder.build_display_model`.
    """

    id: int | None
    inventory_id: int | None
    price_before: Any
    price_after: Any
    created_at: Any

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "HistoryEntry":
        """Build an entry from the camelCase wire shape."""
        return cls(
            id=_optional_int(raw.get("id")),
            inventory_id=_optional_int(raw.get("inventoryId")),
            price_before=raw.get("priceBefore"),
            price_after=raw.get("priceAfter"),
            created_at=raw.get("createdAt"),
        )
