# tests/test_spotlight_controller.py

"""Tests for the spotlight controller and its stale-result guard."""

import asyncio
import unittest
from decimal import Decimal
from unittest.mock import AsyncMock

from src.models.display_model import DisplayModel
from src.models.history_entry import HistoryEntry
from src.models.inventory_item import GroupedInventory, InventoryItem
from src.rotation.cursor import RotationState
from src.services.spotlight import SpotlightController
from tests.helpers import FakeFetcher, entry, item


def _groups(*product_ids: int) -> GroupedInventory:
    return {"All": [item(pid) for pid in product_ids]}


class _QueuedFetcher:
    """Fetcher whose calls resolve only when the test says so."""

    def __init__(self) -> None:
        self.pending: list[asyncio.Future[list[HistoryEntry]]] = []

    async def fetch(self, target: InventoryItem) -> list[HistoryEntry]:
        future: asyncio.Future[list[HistoryEntry]] = (
            asyncio.get_running_loop().create_future()
        )
        self.pending.append(future)
        return await future

    async def close(self) -> None:
        pass


class TestSpotlightController(unittest.IsolatedAsyncioTestCase):
    """Controller lifecycle and result application."""

    def _controller(
        self,
        groups: GroupedInventory,
        fetcher: object,
    ) -> tuple[SpotlightController, list[DisplayModel]]:
        shown: list[DisplayModel] = []
        controller = SpotlightController(
            lambda: groups,
            fetcher,  # type: ignore[arg-type]
            on_display=shown.append,
        )
        return controller, shown

    async def test_start_fetches_first_item(self) -> None:
        """Startup selects the first item and displays its history."""
        fetcher = FakeFetcher(
            {1: [entry(1, 10, 12, "2025-01-01T00:00:00Z")]}
        )
        controller, shown = self._controller(_groups(1, 2), fetcher)
        task = controller.start()
        assert task is not None
        await task
        self.assertEqual(fetcher.calls, [1])
        assert controller.display_model is not None
        self.assertEqual(controller.display_model.item.product_id, 1)
        self.assertEqual(
            controller.display_model.current_price, Decimal("12")
        )
        self.assertEqual(len(shown), 1)

    async def test_start_with_empty_inventory(self) -> None:
        """Nothing to show: no lookup and no model."""
        fetcher = FakeFetcher()
        controller, shown = self._controller({}, fetcher)
        self.assertIsNone(controller.start())
        self.assertIsNone(controller.tick())
        self.assertEqual(fetcher.calls, [])
        self.assertIsNone(controller.display_model)
        self.assertEqual(shown, [])

    async def test_tick_rotates_and_fetches(self) -> None:
        """Each tick fetches the next item."""
        fetcher = FakeFetcher()
        controller, _ = self._controller(_groups(1, 2, 3), fetcher)
        controller.start()
        controller.tick()
        controller.tick()
        await controller.drain()
        self.assertEqual(fetcher.calls, [1, 2, 3])
        assert controller.display_model is not None
        self.assertEqual(controller.display_model.item.product_id, 3)

    async def test_stale_result_for_previous_item_is_discarded(self) -> None:
        """A slow lookup for A finishing after B must not replace B."""
        fetcher = FakeFetcher(
            {
                1: [entry(1, 1, 100, "2025-01-01T00:00:00Z")],
                2: [entry(2, 1, 200, "2025-01-01T00:00:00Z")],
            }
        )
        gate_a = fetcher.gate(1)
        controller, shown = self._controller(_groups(1, 2), fetcher)

        task_a = controller.start()
        task_b = controller.tick()
        assert task_a is not None and task_b is not None
        await task_b
        gate_a.set()
        await task_a

        assert controller.display_model is not None
        self.assertEqual(controller.display_model.item.product_id, 2)
        self.assertEqual(
            controller.display_model.current_price, Decimal("200")
        )
        self.assertEqual([m.item.product_id for m in shown], [2])

    async def test_older_lookup_for_same_item_is_discarded(self) -> None:
        """Only the latest lookup may apply, even for the same item."""
        fetcher = _QueuedFetcher()
        controller, shown = self._controller(_groups(1), fetcher)

        first = controller.start()
        second = controller.tick()
        assert first is not None and second is not None
        await asyncio.sleep(0)
        old, new = fetcher.pending
        new.set_result([entry(2, 1, 20, "2025-01-02T00:00:00Z")])
        await second
        old.set_result([entry(1, 1, 10, "2025-01-01T00:00:00Z")])
        await first

        self.assertEqual(len(shown), 1)
        self.assertEqual(shown[0].current_price, Decimal("20"))

    async def test_ticks_do_not_wait_for_lookups(self) -> None:
        """Ticks proceed while earlier lookups are still in flight."""
        fetcher = FakeFetcher()
        for pid in (1, 2, 3):
            fetcher.gate(pid)
        controller, _ = self._controller(_groups(1, 2, 3), fetcher)
        controller.start()
        controller.tick()
        controller.tick()
        await asyncio.sleep(0)
        self.assertEqual(fetcher.calls, [1, 2, 3])
        active = controller.active_item
        assert active is not None
        self.assertEqual(active.product_id, 3)
        for gate in fetcher.gates.values():
            gate.set()
        await controller.drain()

    async def test_failure_keeps_previous_model(self) -> None:
        """A failed lookup leaves the last good model on screen."""
        fetcher = FakeFetcher(failing={2})
        controller, shown = self._controller(_groups(1, 2), fetcher)
        await controller.start()  # type: ignore[misc]
        previous = controller.display_model
        task = controller.tick()
        assert task is not None
        await task
        self.assertIs(controller.display_model, previous)
        assert controller.last_error is not None
        self.assertEqual(controller.last_error.status_code, 500)
        self.assertEqual(len(shown), 1)

    async def test_unexpected_error_is_logged_and_recorded(self) -> None:
        """A non-FetchFailure error is handled like any failed lookup."""
        fetcher = FakeFetcher()
        controller, shown = self._controller(_groups(1, 2), fetcher)
        await controller.start()  # type: ignore[misc]
        previous = controller.display_model
        fetcher.fetch = AsyncMock(  # type: ignore[method-assign]
            side_effect=OverflowError("cannot convert float infinity")
        )
        with self.assertLogs("price_spotlight.spotlight", "ERROR") as logs:
            task = controller.tick()
            assert task is not None
            await task
        self.assertIs(controller.display_model, previous)
        assert controller.last_error is not None
        self.assertIn("OverflowError", controller.last_error.reason)
        self.assertEqual(controller.last_error.item.product_id, 2)
        self.assertIsInstance(
            controller.last_error.__cause__, OverflowError
        )
        self.assertIn("Keeping previous display", logs.output[0])
        self.assertEqual(len(shown), 1)

    async def test_success_clears_last_error(self) -> None:
        """The next good lookup clears the recorded error."""
        fetcher = FakeFetcher(failing={1})
        controller, _ = self._controller(_groups(1, 2), fetcher)
        await controller.start()  # type: ignore[misc]
        self.assertIsNotNone(controller.last_error)
        await controller.tick()  # type: ignore[misc]
        self.assertIsNone(controller.last_error)

    async def test_dispose_turns_late_results_into_noops(self) -> None:
        """Results arriving after dispose are ignored."""
        fetcher = FakeFetcher()
        gate = fetcher.gate(1)
        controller, shown = self._controller(_groups(1, 2), fetcher)
        task = controller.start()
        assert task is not None
        controller.dispose()
        gate.set()
        await task
        self.assertIsNone(controller.display_model)
        self.assertEqual(shown, [])
        self.assertTrue(controller.disposed)

    async def test_no_ticks_after_dispose(self) -> None:
        """Ticks after dispose do nothing."""
        fetcher = FakeFetcher()
        controller, _ = self._controller(_groups(1, 2), fetcher)
        controller.dispose()
        self.assertIsNone(controller.start())
        self.assertIsNone(controller.tick())
        self.assertEqual(fetcher.calls, [])

    async def test_failure_after_dispose_is_not_recorded(self) -> None:
        """Late failures after dispose are dropped quietly."""
        fetcher = FakeFetcher(failing={1})
        gate = fetcher.gate(1)
        controller, _ = self._controller(_groups(1), fetcher)
        task = controller.start()
        assert task is not None
        controller.dispose()
        gate.set()
        await task
        self.assertIsNone(controller.last_error)

    async def test_aclose_closes_fetcher(self) -> None:
        """aclose disposes, drains and closes the fetcher."""
        fetcher = FakeFetcher()
        controller, _ = self._controller(_groups(1), fetcher)
        controller.start()
        await controller.aclose()
        self.assertTrue(fetcher.closed)
        self.assertTrue(controller.disposed)

    async def test_explicit_state_is_used(self) -> None:
        """A caller-provided RotationState is the one mutated."""
        state = RotationState(active_index_hint=1)
        controller = SpotlightController(
            lambda: _groups(1, 2, 3),
            FakeFetcher(),  # type: ignore[arg-type]
            state=state,
        )
        controller.start()
        await controller.drain()
        self.assertIs(controller.state, state)
        assert state.active_item is not None
        self.assertEqual(state.active_item.product_id, 2)

    async def test_add_listener(self) -> None:
        """Extra listeners receive every applied model."""
        controller, shown = self._controller(_groups(1), FakeFetcher())
        extra: list[DisplayModel] = []
        controller.add_listener(extra.append)
        controller.start()
        await controller.drain()
        self.assertEqual(len(shown), 1)
        self.assertEqual(len(extra), 1)


if __name__ == "__main__":
    unittest.main()
