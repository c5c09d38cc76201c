# src/services/view_model_builder.py

"""Turns raw history entries into a sorted, delta-annotated display model."""

from collections.abc import Iterable
from datetime import datetime, timezone

from src.models.display_model import DisplayModel, DisplayRow
from src.models.history_entry import HistoryEntry
from src.models.inventory_item import InventoryItem
from src.models.numeric import ZERO, coerce_decimal, parse_timestamp

# Rows whose timestamp cannot be parsed sort after every dated row.
_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _to_row(entry: HistoryEntry) -> DisplayRow:
    return DisplayRow(
        id=entry.id,
        created_at=parse_timestamp(entry.created_at),
        price_before=coerce_decimal(entry.price_before),
        price_after=coerce_decimal(entry.price_after),
    )


def build_display_model(
    item: InventoryItem,
    history: Iterable[HistoryEntry],
) -> DisplayModel:
    """Build the display model for *item* from its price history.

    Never raises on malformed records: unusable prices count as zero.
    Rows are ordered newest first; equal timestamps keep their input
    order.  The current price is the newest ``price_after``, falling back
    to the base price when there is no history.
    """
    rows = sorted(
        (_to_row(entry) for entry in history),
        key=lambda row: row.created_at or _UNDATED,
        reverse=True,
    )

    if item.base_price is not None:
        base_price = item.base_price
    elif item.unit_price is not None:
        base_price = item.unit_price
    else:
        base_price = ZERO

    current_price = rows[0].price_after if rows else base_price

    return DisplayModel(
        item=item,
        base_price=base_price,
        unit_price=item.unit_price,
        current_price=current_price,
        rows=tuple(rows),
    )
