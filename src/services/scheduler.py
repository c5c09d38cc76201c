# src/services/scheduler.py

"""Fixed-period asyncio driver for a :class:`SpotlightController`."""

import asyncio
import contextlib
import logging

from src.config.settings import Settings
from src.services.spotlight import SpotlightController

logger = logging.getLogger("price_spotlight.scheduler")


class RotationScheduler:
    """Calls ``controller.tick()`` every *period_ms* milliseconds.

    ``start()`` also makes the initial selection and fetch.  Ticks are
    fire-and-forget: the loop never waits on a history lookup.
    """

    def __init__(
        self,
        controller: SpotlightController,
        period_ms: int | None = None,
    ) -> None:
        self.controller = controller
        self.period_ms = period_ms or Settings.ROTATION_PERIOD_MS
        if self.period_ms <= 0:
            msg = f"Rotation period must be positive, got {self.period_ms}"
            raise ValueError(msg)
        self.ticks = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, max_ticks: int | None = None) -> asyncio.Task[None]:
        """Kick off the initial fetch and the periodic loop."""
        if self.running:
            msg = "Scheduler is already running"
            raise RuntimeError(msg)
        self.controller.start()
        self._task = asyncio.create_task(
            self._run(max_ticks), name="spotlight-rotation"
        )
        logger.info(
            "Rotation scheduled every %d ms%s",
            self.period_ms,
            f" for {max_ticks} ticks" if max_ticks is not None else "",
        )
        return self._task

    async def run(self, max_ticks: int | None = None) -> None:
        """Start and wait until *max_ticks* have run (or forever)."""
        task = self.start(max_ticks)
        await task

    async def stop(self) -> None:
        """Cancel future ticks and shut the controller down."""
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        await self.controller.aclose()
        logger.info("Rotation stopped after %d ticks", self.ticks)

    async def _run(self, max_ticks: int | None) -> None:
        interval = self.period_ms / 1000
        while max_ticks is None or self.ticks < max_ticks:
            await asyncio.sleep(interval)
            self.ticks += 1
            self.controller.tick()
