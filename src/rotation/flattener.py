# src/rotation/flattener.py

"""Deterministic linearisation of a grouped inventory."""

from src.models.inventory_item import GroupedInventory, InventoryItem


def flatten(groups: GroupedInventory) -> list[InventoryItem]:
    """Return every item as one sequence with a reproducible order.

    Categories are visited in case-sensitive lexicographic order and the
    items of each category in ascending ``product_id`` order, so two
    snapshots with the same content flatten identically no matter how
    their dicts and lists were built.
    """
    flat: list[InventoryItem] = []
    for category in sorted(groups):
        flat.extend(
            sorted(groups[category] or [], key=lambda item: item.product_id)
        )
    return flat
