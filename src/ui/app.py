# src/ui/app.py

"""Terminal UI hosting the price spotlight."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from src.config.settings import Settings
from src.services.history_fetcher import HistoryFetcher
from src.storage.inventory_file import InventoryFile
from src.ui.price_spotlight import PriceSpotlight

logger = logging.getLogger("price_spotlight.ui")


class SpotlightApp(App[object]):
    """Terminal UI for the rotating price spotlight."""

    TITLE = "Price Spotlight"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("n", "next_item", "Next item"),
    ]

    def __init__(
        self,
        inventory: InventoryFile | None = None,
        fetcher: HistoryFetcher | None = None,
        period_ms: int | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.inventory = inventory or InventoryFile()
        self._fetcher = fetcher
        self._period_ms = period_ms

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield PriceSpotlight(
            snapshot=self.inventory.snapshot,
            fetcher=self._fetcher,
            period_ms=self._period_ms,
            id="spotlight",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Show where the inventory comes from."""
        self.sub_title = str(self.inventory.path)
        logger.info("TUI mounted, inventory=%s", self.inventory.path)

    def action_next_item(self) -> None:
        """Skip to the next item without waiting for the timer."""
        self.query_one("#spotlight", PriceSpotlight).rotate_now()
