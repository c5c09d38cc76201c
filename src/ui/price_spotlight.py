# src/ui/price_spotlight.py

"""Self-rotating price-history spotlight widget."""

import logging
from collections.abc import Callable
from typing import cast

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import DataTable, Static

from src.config.settings import Settings
from src.models.display_model import DisplayModel
from src.models.inventory_item import GroupedInventory
from src.services.history_fetcher import HistoryFetcher
from src.services.spotlight import SpotlightController
from src.ui.formatting import (
    DIRECTION_STYLES,
    format_delta,
    format_money,
    format_timestamp,
)

logger = logging.getLogger("price_spotlight.ui")

LOADING_TEXT = "Loading..."
EMPTY_HISTORY_TEXT = "No price changes recorded."


class PriceSpotlight(Vertical):
    """Cycles through the inventory showing each item's price history.

    The inventory is read through *snapshot* on every tick.  Hosts that
    hold the inventory themselves can omit it and push new snapshots
    with :meth:`update_inventory` instead.
    """

    DEFAULT_CSS = """
    PriceSpotlight {
        height: auto;
        border: round $primary;
        padding: 0 1;
    }
    PriceSpotlight #spotlight_header {
        height: 1;
    }
    PriceSpotlight #spotlight_title {
        width: 1fr;
        text-style: bold;
    }
    PriceSpotlight #spotlight_product_id {
        width: auto;
        color: $text-muted;
    }
    PriceSpotlight #price_cards {
        height: auto;
        margin: 1 0;
    }
    PriceSpotlight .price-card {
        width: 1fr;
        padding: 0 1;
        background: $boost;
    }
    PriceSpotlight #history_table {
        height: auto;
        max-height: 20;
    }
    PriceSpotlight #spotlight_note {
        color: $text-muted;
    }
    """

    def __init__(
        self,
        snapshot: Callable[[], GroupedInventory] | None = None,
        fetcher: HistoryFetcher | None = None,
        period_ms: int | None = None,
        *,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self._groups: GroupedInventory = {}
        self.period_ms = period_ms or Settings.ROTATION_PERIOD_MS
        if self.period_ms <= 0:
            msg = f"Rotation period must be positive, got {self.period_ms}"
            raise ValueError(msg)
        self.controller = SpotlightController(
            snapshot or self._latest_groups,
            fetcher,
            on_display=self.show_model,
        )
        self._timer: Timer | None = None

    def _latest_groups(self) -> GroupedInventory:
        return self._groups

    def update_inventory(self, groups: GroupedInventory) -> None:
        """Replace the pushed snapshot; read at the next tick."""
        self._groups = groups

    def compose(self) -> ComposeResult:
        """Build the widget tree for the spotlight."""
        yield Static(LOADING_TEXT, id="spotlight_status")
        with Horizontal(id="spotlight_header"):
            yield Static("", id="spotlight_title")
            yield Static("", id="spotlight_product_id")
        with Horizontal(id="price_cards"):
            yield Static("", id="base_price", classes="price-card")
            yield Static("", id="unit_price", classes="price-card")
            yield Static("", id="current_price", classes="price-card")
        yield cast(
            DataTable[str | Text],
            DataTable(id="history_table", zebra_stripes=True),
        )
        yield Static(
            f"Times are shown in {Settings.DISPLAY_TIMEZONE}. Newest first.",
            id="spotlight_note",
        )

    def on_mount(self) -> None:
        """Set up the table, make the first fetch and start rotating."""
        table = self._table()
        table.add_columns(
            f"{Settings.DISPLAY_TIMEZONE} time", "Before", "After", "Δ"
        )
        self._set_content_visible(False)
        self.controller.start()
        self._timer = self.set_interval(
            self.period_ms / 1000,
            self._on_rotation_tick,
            name="spotlight-rotation",
        )

    async def on_unmount(self) -> None:
        """Stop rotating; in-flight lookups resolve as no-ops."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        self.controller.dispose()
        await self.controller.fetcher.close()

    def _on_rotation_tick(self) -> None:
        # Must not return the lookup task: the timer would await it.
        self.controller.tick()

    def rotate_now(self) -> None:
        """Advance immediately and restart the rotation period."""
        self.controller.tick()
        if self._timer is not None:
            self._timer.reset()

    # ── Rendering ────────────────────────────────────────

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#history_table", DataTable),
        )

    def _set_content_visible(self, visible: bool) -> None:
        self.query_one("#spotlight_status", Static).display = not visible
        for selector in (
            "#spotlight_header",
            "#price_cards",
            "#history_table",
            "#spotlight_note",
        ):
            self.query_one(selector).display = visible

    def show_model(self, model: DisplayModel) -> None:
        """Render *model*; ignored once the widget has been unmounted."""
        if not self.is_mounted:
            return
        item = model.item
        self.query_one("#spotlight_title", Static).update(
            f"{item.product_name} — Price history"
        )
        self.query_one("#spotlight_product_id", Static).update(
            f"Product ID: {item.product_id}"
        )
        self.query_one("#base_price", Static).update(
            f"Base price\n{format_money(model.base_price)}"
        )
        self.query_one("#unit_price", Static).update(
            f"Unit price\n{format_money(model.unit_price)}"
        )
        self.query_one("#current_price", Static).update(
            f"Current price\n{format_money(model.current_price)}"
        )

        table = self._table()
        table.clear()
        for row in model.rows:
            table.add_row(
                format_timestamp(row.created_at),
                format_money(row.price_before),
                Text(format_money(row.price_after), style="bold"),
                Text(
                    format_delta(row),
                    style=DIRECTION_STYLES[row.direction],
                ),
            )
        if not model.rows:
            table.add_row(Text(EMPTY_HISTORY_TEXT, style="dim"), "", "", "")

        self._set_content_visible(True)
        logger.debug(
            "Rendered %d history rows for product %d",
            len(model.rows),
            item.product_id,
        )
