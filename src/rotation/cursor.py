# src/rotation/cursor.py

"""Rotation cursor: picks the next spotlight item on every tick."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.models.inventory_item import GroupedInventory, InventoryItem
from src.rotation.flattener import flatten

logger = logging.getLogger("price_spotlight.rotation")


@dataclass
class RotationState:
    """Which item is in the spotlight, plus its last known position."""

    active_item: InventoryItem | None = None
    active_index_hint: int = 0


class RotationCursor:
    """Advances through the flattened inventory, tolerating churn.

    The cursor reads a fresh snapshot from *snapshot* on every call, so
    items may be added, removed or moved between ticks.  When the active
    item is still present the cursor moves to its successor; when it has
    vanished the cursor falls back to the stored index.  After the
    collection shrinks that fallback can skip or repeat an item.
    """

    def __init__(
        self,
        snapshot: Callable[[], GroupedInventory],
        state: RotationState | None = None,
    ) -> None:
        self._snapshot = snapshot
        self.state = state if state is not None else RotationState()

    def _select(self, item: InventoryItem, index: int) -> InventoryItem:
        self.state.active_item = item
        self.state.active_index_hint = index
        return item

    def resume(self) -> InventoryItem | None:
        """Select a starting item if none is active, without advancing.

        Returns the active item, or ``None`` while the inventory is empty.
        """
        if self.state.active_item is not None:
            return self.state.active_item
        flat = flatten(self._snapshot())
        if not flat:
            return None
        index = self.state.active_index_hint % len(flat)
        logger.debug(
            "Starting rotation at index %d of %d", index, len(flat)
        )
        return self._select(flat[index], index)

    def advance(self) -> InventoryItem | None:
        """Move to the next item; ``None`` (no-op) if inventory is empty."""
        flat = flatten(self._snapshot())
        if not flat:
            logger.debug("Inventory empty, rotation skipped")
            return None

        current = self.state.active_item
        if current is None:
            index = self.state.active_index_hint % len(flat)
        else:
            position = next(
                (
                    i for i, item in enumerate(flat)
                    if item.product_id == current.product_id
                ),
                None,
            )
            if position is None:
                index = self.state.active_index_hint % len(flat)
                logger.info(
                    "Product %d left the inventory, resuming at index %d",
                    current.product_id,
                    index,
                )
            else:
                index = (position + 1) % len(flat)

        return self._select(flat[index], index)
