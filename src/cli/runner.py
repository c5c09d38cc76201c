# src/cli/runner.py

"""Headless spotlight runner: same rotation core, Rich console output."""

import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from src.config.settings import Settings
from src.models.display_model import DisplayModel
from src.services.history_fetcher import HistoryFetcher
from src.services.scheduler import RotationScheduler
from src.services.spotlight import SpotlightController
from src.storage.inventory_file import InventoryFile
from src.ui.formatting import (
    DIRECTION_STYLES,
    format_delta,
    format_money,
    format_timestamp,
)

logger = logging.getLogger("price_spotlight.cli")

# Stderr console for status messages so stdout only carries the tables
_err = Console(stderr=True)


def render_display_model(model: DisplayModel) -> Table:
    """Build a Rich table for one display model."""
    item = model.item
    table = Table(
        title=f"{item.product_name} (#{item.product_id})",
        caption=(
            f"Base {format_money(model.base_price)}  ·  "
            f"Unit {format_money(model.unit_price)}  ·  "
            f"Current {format_money(model.current_price)}"
        ),
        show_lines=False,
        title_style="bold cyan",
    )
    table.add_column(f"{Settings.DISPLAY_TIMEZONE} time", style="dim")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right", style="bold")
    table.add_column("Δ", justify="right")

    for row in model.rows:
        table.add_row(
            format_timestamp(row.created_at),
            format_money(row.price_before),
            format_money(row.price_after),
            Text(format_delta(row), style=DIRECTION_STYLES[row.direction]),
        )
    if not model.rows:
        table.add_row("No price changes recorded.", "", "", "")
    return table


async def run_headless(
    inventory_path: str | None = None,
    period_ms: int | None = None,
    ticks: int | None = None,
    fetcher: HistoryFetcher | None = None,
) -> int:
    """Rotate through the inventory, printing each item's history.

    Runs until *ticks* rotations have happened (forever when ``None``).
    Returns ``0`` if at least one item was displayed, ``1`` otherwise.
    """
    inventory = InventoryFile(
        Path(inventory_path) if inventory_path is not None else None
    )
    console = Console()
    shown = 0

    def _print(model: DisplayModel) -> None:
        nonlocal shown
        shown += 1
        console.print(render_display_model(model))

    controller = SpotlightController(
        inventory.snapshot, fetcher, on_display=_print
    )
    scheduler = RotationScheduler(controller, period_ms)

    _err.print(
        f"[bold]Spotlight:[/bold] {inventory.path}  "
        f"[dim]every {scheduler.period_ms} ms[/dim]"
    )
    if not inventory.snapshot():
        _err.print(
            "[yellow]Inventory is empty; waiting for items.[/yellow]"
        )

    try:
        await scheduler.run(ticks)
        await controller.drain()
    finally:
        await scheduler.stop()

    if controller.last_error is not None:
        _err.print(f"[red]Last error: {controller.last_error}[/red]")
    if not shown:
        _err.print("[yellow]Nothing was displayed.[/yellow]")
        return 1
    logger.info("Headless run displayed %d models", shown)
    return 0
