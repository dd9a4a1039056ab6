from __future__ import annotations

import asyncio

from interactive.gate import Gate


class TimeoutRenewer:
    """Releases a gate after ``seconds`` of inactivity.

    ``reset()`` restarts the full countdown; ``cancel()`` disables it for good.
    Once the countdown has fired, both are no-ops.
    """

    def __init__(self, gate: Gate, seconds: float) -> None:
        self.gate = gate
        self.seconds = max(0.0, float(seconds))
        self._task: asyncio.Task | None = None
        self._fired = False
        self._cancelled = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def armed(self) -> bool:
        task = self._task
        return task is not None and not task.done()

    def arm(self) -> None:
        if self._fired or self._cancelled:
            return
        self._stop_countdown()
        self._task = asyncio.create_task(self._countdown())

    def reset(self) -> None:
        self.arm()

    def cancel(self) -> None:
        self._cancelled = True
        self._stop_countdown()

    def _stop_countdown(self) -> None:
        task = self._task
        if task is not None and not task.done():
            task.cancel()
        self._task = None

    async def _countdown(self) -> None:
        await asyncio.sleep(self.seconds)
        if self._cancelled:
            return
        self._fired = True
        self._task = None
        self.gate.release()
