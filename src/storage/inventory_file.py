# src/storage/inventory_file.py

"""JSON-file backed grouped-inventory snapshots."""

import json
import logging
from pathlib import Path
from typing import Any, cast

from src.config.settings import Settings
from src.models.inventory_item import GroupedInventory, InventoryItem

logger = logging.getLogger("price_spotlight.inventory")


def parse_grouped_inventory(data: object) -> GroupedInventory:
    """Convert ``{category: [item, ...]}`` JSON into a grouped inventory.

    Categories whose value is not a list are dropped, as are items
    without a usable ``productId``.
    """
    if not isinstance(data, dict):
        msg = f"expected a JSON object, got {type(data).__name__}"
        raise ValueError(msg)

    groups: GroupedInventory = {}
    for category, raw_items in cast(dict[str, Any], data).items():
        if not isinstance(raw_items, list):
            logger.warning(
                "Category '%s' is not a list, skipping", category
            )
            continue
        items: list[InventoryItem] = []
        for raw in cast(list[object], raw_items):
            if not isinstance(raw, dict):
                continue
            try:
                items.append(InventoryItem.from_dict(raw))
            except (KeyError, TypeError, ValueError, OverflowError) as exc:
                logger.warning(
                    "Skipping item in '%s' without a valid productId: %s",
                    category,
                    exc,
                )
        groups[str(category)] = items
    return groups


class InventoryFile:
    """Serves the latest snapshot of an inventory JSON file.

    The file is re-read only when its modification time changes.  A file
    that disappears or turns invalid leaves the last good snapshot in
    place (empty until one has been read).
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.INVENTORY_PATH
        self._groups: GroupedInventory = {}
        self._mtime: float | None = None
        logger.debug("InventoryFile initialised, path=%s", self.path)

    def snapshot(self) -> GroupedInventory:
        """Return the current grouped inventory."""
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            if self._mtime is None:
                logger.debug("Inventory file %s not found", self.path)
            return self._groups

        if mtime == self._mtime:
            return self._groups

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            groups = parse_grouped_inventory(data)
        except (
            json.JSONDecodeError,
            OSError,
            ValueError,
            OverflowError,
        ) as exc:
            logger.warning(
                "Failed to read inventory %s, keeping last snapshot: %s",
                self.path,
                exc,
            )
            self._mtime = mtime
            return self._groups

        self._groups = groups
        self._mtime = mtime
        logger.info(
            "Loaded inventory from %s: %d categories, %d items",
            self.path,
            len(groups),
            sum(len(items) for items in groups.values()),
        )
        return self._groups
