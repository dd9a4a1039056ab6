from __future__ import annotations

import time
from typing import Any, Callable

from interactive.errors import ForeignMessageError
from interactive.errors import InvalidStartIndex
from interactive.gate import Gate
from interactive.listeners import EventHub
from interactive.models import PaginationState
from interactive.models import ReactionEvent
from interactive.models import maybe_await
from interactive.models import object_id
from interactive.timeout import TimeoutRenewer

FIRST = "⏮"
BACK = "◀"
STOP = "⏹"
FORWARD = "▶"
LAST = "⏭"

# in the order they are attached to the message
REACTION_CONTROL_BUTTONS = (FIRST, BACK, STOP, FORWARD, LAST)


def next_index(button: str, index: int, lo: int, hi: int) -> int | None:
    """Returns the index a press moves to, or None when it leaves the index unchanged."""
    if button == FIRST:
        return lo if index != lo else None
    if button == BACK:
        return index - 1 if index - 1 >= lo else None
    if button == FORWARD:
        return index + 1 if index + 1 <= hi else None
    if button == LAST:
        return hi if index != hi else None
    raise ValueError(f"not a directional control: {button!r}")


class PaginationController:
    """Drives a bounded index from reaction buttons on one message.

    Only the given user can press the controls. Each change of index calls
    ``on_index_change(index)``, which may be a coroutine function. The run ends
    on the stop button, after ``timeout`` seconds without a press, or when the
    callback raises; in every case the message is kept and all of its
    reactions are cleared.
    """

    def __init__(self, transport, hub: EventHub) -> None:
        self.transport = transport
        self.hub = hub

    async def run(
        self,
        message,
        user,
        index_range: range,
        timeout: float | None = None,
        starting_index: int | None = None,
        on_index_change: Callable[[int], Any] | None = None,
    ) -> int:
        if index_range.step != 1:
            raise ValueError("index_range must have a step of 1")
        if starting_index is None:
            starting_index = index_range.start
        if len(index_range) == 0 or starting_index not in index_range:
            raise InvalidStartIndex(starting_index, index_range)
        author = getattr(message, "author", None)
        if author is not None and object_id(author) != object_id(self.transport.me):
            raise ForeignMessageError(object_id(message))

        state = PaginationState(
            index=int(starting_index),
            lo=index_range.start,
            hi=index_range[-1],
            user_id=object_id(user),
            message_id=object_id(message),
            timeout=timeout,
        )
        gate = Gate()

        def is_press(event: ReactionEvent) -> bool:
            return (
                event.message_id == state.message_id
                and event.user_id == state.user_id
                and event.emoji in REACTION_CONTROL_BUTTONS
            )

        def on_press(event: ReactionEvent) -> None:
            state.presses.append(event.emoji)
            gate.release()

        result = "stop"
        started = time.monotonic()
        try:
            with self.hub.listen_reactions(is_press, on_press):
                for button in REACTION_CONTROL_BUTTONS:
                    await self.transport.add_reaction(message, button)

                while True:
                    if not state.presses:
                        if await self._wait_for_press(gate, state):
                            result = "timeout"
                            break
                        if not state.presses:
                            continue

                    button = state.presses.popleft()
                    if button == STOP:
                        break

                    new_index = next_index(button, state.index, state.lo, state.hi)
                    if new_index is not None:
                        state.index = new_index
                        if on_index_change is not None:
                            await maybe_await(on_index_change(new_index))
                    await self.transport.remove_reaction(message, user, button)
        except Exception:
            result = "error"
            raise
        finally:
            try:
                await self.transport.remove_all_reactions(message)
            except Exception as e:
                print(f"[PAGINATE] action=clear result=error message={state.message_id} error={str(e)[:180]}")
                # never mask the failure that ended the run
                if result != "error":
                    raise
            finally:
                print(
                    f"[PAGINATE] action=run result={result} message={state.message_id} "
                    f"user={state.user_id} index={state.index} elapsed_s={time.monotonic() - started:.2f}"
                )
        return state.index

    paginate = run

    async def _wait_for_press(self, gate: Gate, state: PaginationState) -> bool:
        """Blocks until a press is queued; returns True if the idle timeout ran out instead."""
        renewer = TimeoutRenewer(gate, state.timeout) if state.timeout is not None else None
        if renewer is not None:
            renewer.arm()
        try:
            await gate.close()
        finally:
            if renewer is not None:
                renewer.cancel()
        return bool(renewer is not None and renewer.fired and not state.presses)
