# src/models/inventory_item.py

"""Inventory item model as delivered by the upstream inventory source."""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from src.models.numeric import parse_decimal


@dataclass(frozen=True)
class InventoryItem:
    """A single product in the grouped inventory."""

    product_id: int
    product_name: str
    base_price: Decimal | None = None
    unit_price: Decimal | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "InventoryItem":
        """Build an item from the camelCase wire shape.

        ``productId`` is required; prices that cannot be parsed are
        stored as ``None``.
        """
        return cls(
            product_id=int(raw["productId"]),
            product_name=str(raw.get("productName") or ""),
            base_price=parse_decimal(raw.get("basePrice")),
            unit_price=parse_decimal(raw.get("unitPrice")),
        )


# Category name -> items in that category.
GroupedInventory = dict[str, list[InventoryItem]]
