# src/models/display_model.py

"""Render-ready summary of one item's price history."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from src.models.inventory_item import InventoryItem


class PriceDirection(Enum):
    """Sign of a single price change."""

    INCREASE = "increase"
    DECREASE = "decrease"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DisplayRow:
    """A normalised history row; delta is derived, never stored."""

    id: int | None
    created_at: datetime | None
    price_before: Decimal
    price_after: Decimal

    @property
    def delta(self) -> Decimal:
        return self.price_after - self.price_before

    @property
    def direction(self) -> PriceDirection:
        delta = self.delta
        if delta > 0:
            return PriceDirection.INCREASE
        if delta < 0:
            return PriceDirection.DECREASE
        return PriceDirection.UNCHANGED


@dataclass(frozen=True)
class DisplayModel:
    """Everything the presentation layer needs for the active item."""

    item: InventoryItem
    base_price: Decimal
    unit_price: Decimal | None
    current_price: Decimal
    rows: tuple[DisplayRow, ...] = ()
