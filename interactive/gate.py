from __future__ import annotations

import asyncio

from interactive.errors import GateAlreadyClosed
from interactive.errors import GateAlreadyOpen


class Gate:
    """Blocks one awaiting task until another party releases it.

    Only a single waiter is supported at a time. A release that lands before
    anyone is waiting is remembered, so the next ``close()`` returns at once
    instead of missing the wakeup. The gate is reusable: after ``close()``
    returns it is open again and can be closed for the next cycle.

    Everything runs on the bot's event loop. Producers living on another
    thread must hop over with ``loop.call_soon_threadsafe(gate.release)``.
    """

    def __init__(self) -> None:
        self._waiter: asyncio.Future | None = None
        self._pending_release = False

    def is_closed(self) -> bool:
        waiter = self._waiter
        return waiter is not None and not waiter.done()

    async def close(self) -> None:
        if self._waiter is not None:
            raise GateAlreadyClosed("This gate is already closed!")
        if self._pending_release:
            self._pending_release = False
            return

        waiter = asyncio.get_running_loop().create_future()
        self._waiter = waiter
        try:
            await waiter
        finally:
            self._waiter = None

    def open(self) -> None:
        if not self.release():
            raise GateAlreadyOpen("This gate is already open!")

    def release(self) -> bool:
        # Racing producers (timeout, cancel button, terminal match) all land
        # here; only the first one counts.
        waiter = self._waiter
        if waiter is not None:
            if waiter.done():
                return False
            waiter.set_result(None)
            return True
        if self._pending_release:
            return False
        self._pending_release = True
        return True
