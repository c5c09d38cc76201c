# src/services/spotlight.py

"""Glue between rotation, history lookups and the display model."""

import asyncio
import logging
from collections.abc import Callable

from src.models.display_model import DisplayModel
from src.models.inventory_item import GroupedInventory, InventoryItem
from src.rotation.cursor import RotationCursor, RotationState
from src.services.history_fetcher import FetchFailure, HistoryFetcher
from src.services.view_model_builder import build_display_model

logger = logging.getLogger("price_spotlight.spotlight")

DisplayListener = Callable[[DisplayModel], None]


class SpotlightController:
    """Owns the rotation state and the currently displayed model.

    ``tick()`` is meant to be called from a periodic timer.  It advances
    the cursor and starts the history lookup as a separate task, so a
    slow request never holds up the next tick.  Each lookup is tagged
    with a generation number; a result is applied only if it belongs to
    the most recent lookup and its item is still the active one.  Any
    other result is stale and is dropped.
    """

    def __init__(
        self,
        snapshot: Callable[[], GroupedInventory],
        fetcher: HistoryFetcher | None = None,
        state: RotationState | None = None,
        on_display: DisplayListener | None = None,
    ) -> None:
        self.cursor = RotationCursor(snapshot, state)
        self.fetcher = fetcher or HistoryFetcher()
        self.display_model: DisplayModel | None = None
        self.last_error: FetchFailure | None = None
        self._listeners: list[DisplayListener] = []
        if on_display is not None:
            self._listeners.append(on_display)
        self._generation = 0
        self._disposed = False
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> RotationState:
        return self.cursor.state

    @property
    def active_item(self) -> InventoryItem | None:
        return self.cursor.state.active_item

    @property
    def disposed(self) -> bool:
        return self._disposed

    def add_listener(self, listener: DisplayListener) -> None:
        """Register a callback invoked with every applied display model."""
        self._listeners.append(listener)

    # ── Lifecycle ────────────────────────────────────────

    def start(self) -> asyncio.Task[None] | None:
        """Pick the initial item and fetch its history."""
        if self._disposed:
            return None
        item = self.cursor.resume()
        if item is None:
            logger.info("Spotlight started with an empty inventory")
            return None
        logger.info(
            "Spotlight started on product %d (%s)",
            item.product_id,
            item.product_name,
        )
        return self._load(item)

    def tick(self) -> asyncio.Task[None] | None:
        """Run one rotation step; returns the lookup task, if any."""
        if self._disposed:
            return None
        item = self.cursor.advance()
        if item is None:
            return None
        logger.debug(
            "Rotated to product %d at index %d",
            item.product_id,
            self.state.active_index_hint,
        )
        return self._load(item)

    def dispose(self) -> None:
        """Stop accepting ticks; late lookup results become no-ops."""
        if self._disposed:
            return
        self._disposed = True
        logger.info(
            "Spotlight disposed with %d lookup(s) in flight",
            len(self._pending),
        )

    async def drain(self) -> None:
        """Wait for every in-flight lookup to settle."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def aclose(self) -> None:
        """Dispose, let in-flight lookups settle, release the session."""
        self.dispose()
        await self.drain()
        await self.fetcher.close()

    # ── History lookups ──────────────────────────────────

    def _load(self, item: InventoryItem) -> asyncio.Task[None]:
        self._generation += 1
        task = asyncio.create_task(
            self._fetch_and_apply(item, self._generation),
            name=f"price-history-{item.product_id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _is_current(self, item: InventoryItem, generation: int) -> bool:
        active = self.active_item
        return (
            not self._disposed
            and generation == self._generation
            and active is not None
            and active.product_id == item.product_id
        )

    def _record_failure(self, failure: FetchFailure) -> None:
        if self._disposed:
            logger.debug("Lookup failed after dispose: %s", failure)
            return
        self.last_error = failure
        logger.error(
            "Keeping previous display: %s", failure, exc_info=failure
        )

    async def _fetch_and_apply(
        self, item: InventoryItem, generation: int
    ) -> None:
        try:
            history = await self.fetcher.fetch(item)
        except FetchFailure as exc:
            self._record_failure(exc)
            return
        except Exception as exc:
            failure = FetchFailure(item, f"unexpected error: {exc!r}")
            failure.__cause__ = exc
            self._record_failure(failure)
            return

        if not self._is_current(item, generation):
            logger.debug(
                "Discarding stale history for product %d "
                "(generation %d, latest %d)",
                item.product_id,
                generation,
                self._generation,
            )
            return

        model = build_display_model(item, history)
        self.display_model = model
        self.last_error = None
        for listener in list(self._listeners):
            listener(model)
