from __future__ import annotations

import asyncio
import random
import time
import unittest
from types import SimpleNamespace

from interactive.errors import ForeignMessageError
from interactive.errors import InvalidStartIndex
from interactive.listeners import EventHub
from interactive.models import ReactionEvent
from interactive.reaction_controls import BACK
from interactive.reaction_controls import FIRST
from interactive.reaction_controls import FORWARD
from interactive.reaction_controls import LAST
from interactive.reaction_controls import REACTION_CONTROL_BUTTONS
from interactive.reaction_controls import STOP
from interactive.reaction_controls import PaginationController
from interactive.reaction_controls import next_index

BOT_ID = 1
CHANNEL_ID = 42
USER_ID = 7
MESSAGE_ID = 900


class _FakeTransport:
    def __init__(self):
        self.me = SimpleNamespace(id=BOT_ID)
        self.reactions_added: list[str] = []
        self.reactions_removed: list[tuple[int, str]] = []
        self.cleared: list[int] = []
        self.fail_on_clear: Exception | None = None

    async def add_reaction(self, message, emoji):
        self.reactions_added.append(emoji)

    async def remove_reaction(self, message, user, emoji):
        self.reactions_removed.append((user.id, emoji))

    async def remove_all_reactions(self, message):
        if self.fail_on_clear is not None:
            raise self.fail_on_clear
        self.cleared.append(message.id)


def _bot_message(author_id: int = BOT_ID):
    return SimpleNamespace(
        id=MESSAGE_ID,
        channel=SimpleNamespace(id=CHANNEL_ID),
        author=SimpleNamespace(id=author_id),
    )


async def _until(condition, timeout: float = 1.0) -> None:
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


class NextIndexTests(unittest.TestCase):
    def test_transition_table(self):
        self.assertEqual(next_index(FIRST, 2, 0, 3), 0)
        self.assertIsNone(next_index(FIRST, 0, 0, 3))
        self.assertEqual(next_index(BACK, 2, 0, 3), 1)
        self.assertIsNone(next_index(BACK, 0, 0, 3))
        self.assertEqual(next_index(FORWARD, 2, 0, 3), 3)
        self.assertIsNone(next_index(FORWARD, 3, 0, 3))
        self.assertEqual(next_index(LAST, 1, 0, 3), 3)
        self.assertIsNone(next_index(LAST, 3, 0, 3))

    def test_stop_is_not_directional(self):
        with self.assertRaises(ValueError):
            next_index(STOP, 0, 0, 3)

    def test_random_walks_stay_in_bounds(self):
        rng = random.Random(99)
        directional = (FIRST, BACK, FORWARD, LAST)
        for _ in range(200):
            lo = rng.randint(-5, 5)
            hi = lo + rng.randint(0, 6)
            index = rng.randint(lo, hi)
            for _ in range(50):
                moved = next_index(rng.choice(directional), index, lo, hi)
                if moved is not None:
                    self.assertNotEqual(moved, index)
                    index = moved
                self.assertTrue(lo <= index <= hi)


class PaginationControllerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.hub = EventHub()
        self.transport = _FakeTransport()
        self.paginator = PaginationController(self.transport, self.hub)
        self.user = SimpleNamespace(id=USER_ID)

    async def _press(self, emoji: str, user_id: int = USER_ID, message_id: int = MESSAGE_ID):
        await self.hub.dispatch_reaction(ReactionEvent(CHANNEL_ID, message_id, user_id, emoji))

    async def _attached(self):
        await _until(lambda: len(self.transport.reactions_added) == len(REACTION_CONTROL_BUTTONS))

    async def test_forward_forward_first_stop(self):
        seen: list[int] = []
        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(0, 4), timeout=5, on_index_change=seen.append)
        )
        await self._attached()
        self.assertEqual(self.transport.reactions_added, list(REACTION_CONTROL_BUTTONS))

        for button in (FORWARD, FORWARD, FIRST, STOP):
            await self._press(button)

        final = await asyncio.wait_for(task, timeout=1)
        self.assertEqual(seen, [1, 2, 0])
        self.assertEqual(final, 0)
        self.assertEqual(self.transport.cleared, [MESSAGE_ID])
        self.assertEqual(
            self.transport.reactions_removed,
            [(USER_ID, FORWARD), (USER_ID, FORWARD), (USER_ID, FIRST)],
        )
        self.assertEqual(self.hub.listener_count(), 0)

    async def test_presses_at_the_edges_do_not_render(self):
        seen: list[int] = []
        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(0, 3), on_index_change=seen.append)
        )
        await self._attached()

        await self._press(FIRST)
        await self._press(BACK)
        await self._press(LAST)
        await self._press(LAST)
        await self._press(FORWARD)
        await self._press(STOP)

        await asyncio.wait_for(task, timeout=1)
        self.assertEqual(seen, [2])
        # every press is acknowledged so the button can be pressed again
        self.assertEqual(
            [emoji for _, emoji in self.transport.reactions_removed],
            [FIRST, BACK, LAST, LAST, FORWARD],
        )

    async def test_starting_index_is_respected(self):
        seen: list[int] = []
        task = asyncio.create_task(
            self.paginator.run(
                _bot_message(), self.user, range(0, 4), starting_index=3, on_index_change=seen.append
            )
        )
        await self._attached()
        await self._press(BACK)
        await self._press(STOP)
        self.assertEqual(await asyncio.wait_for(task, timeout=1), 2)
        self.assertEqual(seen, [2])

    async def test_invalid_starting_index_attaches_nothing(self):
        with self.assertRaises(InvalidStartIndex):
            await self.paginator.run(_bot_message(), self.user, range(0, 4), starting_index=4)
        with self.assertRaises(InvalidStartIndex):
            await self.paginator.run(_bot_message(), self.user, range(0, 0))
        self.assertEqual(self.transport.reactions_added, [])
        self.assertEqual(self.hub.listener_count(), 0)

    async def test_foreign_message_is_rejected(self):
        with self.assertRaises(ForeignMessageError):
            await self.paginator.run(_bot_message(author_id=55), self.user, range(0, 2))
        self.assertEqual(self.transport.reactions_added, [])

    async def test_idle_timeout_ends_the_run(self):
        started = time.monotonic()
        final = await asyncio.wait_for(
            self.paginator.run(_bot_message(), self.user, range(0, 4), timeout=0.1, starting_index=1),
            timeout=1,
        )
        self.assertEqual(final, 1)
        self.assertGreaterEqual(time.monotonic() - started, 0.09)
        self.assertEqual(self.transport.cleared, [MESSAGE_ID])
        self.assertEqual(self.hub.listener_count(), 0)

    async def test_timeout_counts_from_the_last_press(self):
        seen: list[int] = []
        started = time.monotonic()
        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(0, 4), timeout=0.3, on_index_change=seen.append)
        )
        await asyncio.sleep(0.2)
        await self._press(FORWARD)
        await asyncio.sleep(0.2)
        self.assertFalse(task.done())
        await self._press(BACK)

        await asyncio.wait_for(task, timeout=2)
        self.assertEqual(seen, [1, 0])
        self.assertGreaterEqual(time.monotonic() - started, 0.65)

    async def test_rejected_edge_presses_also_restart_the_timeout(self):
        seen: list[int] = []
        started = time.monotonic()
        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(0, 4), timeout=0.3, on_index_change=seen.append)
        )
        await asyncio.sleep(0.2)
        await self._press(FIRST)  # already at the first page
        await asyncio.sleep(0.2)
        self.assertFalse(task.done())
        await self._press(LAST)
        await asyncio.sleep(0.2)
        await self._press(LAST)  # already at the last page
        await asyncio.sleep(0.2)
        self.assertFalse(task.done())

        final = await asyncio.wait_for(task, timeout=2)
        self.assertEqual(final, 3)
        self.assertEqual(seen, [3])
        self.assertGreaterEqual(time.monotonic() - started, 0.85)
        self.assertEqual(
            self.transport.reactions_removed,
            [(USER_ID, FIRST), (USER_ID, LAST), (USER_ID, LAST)],
        )

    async def test_clear_failure_does_not_hide_render_failure(self):
        def render(index: int):
            raise RuntimeError("edit failed")

        self.transport.fail_on_clear = LookupError("404 Unknown Message")
        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(0, 4), on_index_change=render)
        )
        await self._attached()
        await self._press(FORWARD)

        with self.assertRaises(RuntimeError):
            await asyncio.wait_for(task, timeout=1)
        self.assertEqual(self.hub.listener_count(), 0)

    async def test_clear_failure_after_stop_propagates(self):
        self.transport.fail_on_clear = LookupError("404 Unknown Message")
        task = asyncio.create_task(self.paginator.run(_bot_message(), self.user, range(0, 4)))
        await self._attached()
        await self._press(STOP)

        with self.assertRaises(LookupError):
            await asyncio.wait_for(task, timeout=1)
        self.assertEqual(self.hub.listener_count(), 0)

    async def test_presses_from_others_are_ignored(self):
        seen: list[int] = []
        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(0, 4), on_index_change=seen.append)
        )
        await self._attached()
        await self._press(FORWARD, user_id=99)
        await self._press(STOP, user_id=99)
        await self._press(FORWARD, message_id=MESSAGE_ID + 1)
        await self._press("👍")
        await asyncio.sleep(0.01)
        self.assertFalse(task.done())

        await self._press(STOP)
        await asyncio.wait_for(task, timeout=1)
        self.assertEqual(seen, [])
        self.assertEqual(self.transport.reactions_removed, [])

    async def test_async_render_callback(self):
        rendered: list[int] = []

        async def render(index: int):
            await asyncio.sleep(0)
            rendered.append(index)

        task = asyncio.create_task(
            self.paginator.paginate(_bot_message(), self.user, range(5, 8), on_index_change=render)
        )
        await self._attached()
        await self._press(LAST)
        await self._press(STOP)
        self.assertEqual(await asyncio.wait_for(task, timeout=1), 7)
        self.assertEqual(rendered, [7])

    async def test_render_failure_ends_run_and_cleans_up(self):
        def render(index: int):
            raise RuntimeError("edit failed")

        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(0, 4), on_index_change=render)
        )
        await self._attached()
        await self._press(FORWARD)

        with self.assertRaises(RuntimeError):
            await asyncio.wait_for(task, timeout=1)
        self.assertEqual(self.transport.cleared, [MESSAGE_ID])
        self.assertEqual(self.hub.listener_count(), 0)

    async def test_random_presses_never_leave_range(self):
        rng = random.Random(7)
        seen: list[int] = []
        task = asyncio.create_task(
            self.paginator.run(_bot_message(), self.user, range(-2, 3), starting_index=0, on_index_change=seen.append)
        )
        await self._attached()
        for _ in range(60):
            await self._press(rng.choice((FIRST, BACK, FORWARD, LAST)))
        await self._press(STOP)

        final = await asyncio.wait_for(task, timeout=2)
        self.assertTrue(all(-2 <= idx <= 2 for idx in seen))
        self.assertTrue(-2 <= final <= 2)


if __name__ == "__main__":
    unittest.main()
