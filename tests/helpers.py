# tests/helpers.py

"""Builders and fakes shared by the spotlight tests."""

import asyncio
from decimal import Decimal

from src.models.history_entry import HistoryEntry
from src.models.inventory_item import InventoryItem
from src.services.history_fetcher import FetchFailure


def item(
    product_id: int,
    name: str | None = None,
    base_price: str | None = "1.00",
    unit_price: str | None = None,
) -> InventoryItem:
    """Create an InventoryItem with sensible defaults."""
    return InventoryItem(
        product_id=product_id,
        product_name=name or f"Product {product_id}",
        base_price=Decimal(base_price) if base_price is not None else None,
        unit_price=Decimal(unit_price) if unit_price is not None else None,
    )


def entry(
    entry_id: int,
    before: object,
    after: object,
    created_at: object,
    inventory_id: int = 1,
) -> HistoryEntry:
    """Create a HistoryEntry with raw field values."""
    return HistoryEntry(
        id=entry_id,
        inventory_id=inventory_id,
        price_before=before,
        price_after=after,
        created_at=created_at,
    )


class FakeFetcher:
    """In-memory stand-in for HistoryFetcher.

    ``history`` maps product ids to canned entries; ids listed in
    ``failing`` raise FetchFailure.  Ids in ``gates`` block until their
    event is set, which lets tests resolve lookups out of order.
    """

    def __init__(
        self,
        history: dict[int, list[HistoryEntry]] | None = None,
        failing: set[int] | None = None,
    ) -> None:
        self.history = history or {}
        self.failing = failing or set()
        self.gates: dict[int, asyncio.Event] = {}
        self.calls: list[int] = []
        self.closed = False

    def gate(self, product_id: int) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[product_id] = event
        return event

    async def fetch(self, target: InventoryItem) -> list[HistoryEntry]:
        self.calls.append(target.product_id)
        gate = self.gates.get(target.product_id)
        if gate is not None:
            await gate.wait()
        if target.product_id in self.failing:
            raise FetchFailure(target, "HTTP 500", 500)
        return list(self.history.get(target.product_id, []))

    async def close(self) -> None:
        self.closed = True
