from __future__ import annotations

from typing import Any, Callable

from interactive.models import ReactionEvent
from interactive.models import maybe_await

MESSAGE_CREATED = "message"
REACTION_ADDED = "reaction"


class Listener:
    """A (predicate, callback) registration on an ``EventHub``.

    Closing is idempotent, and the handle doubles as a context manager so the
    registration is dropped on every exit path.
    """

    __slots__ = ("hub", "kind", "predicate", "callback", "_closed")

    def __init__(self, hub: EventHub, kind: str, predicate: Callable[[Any], bool], callback: Callable[[Any], Any]):
        self.hub = hub
        self.kind = kind
        self.predicate = predicate
        self.callback = callback
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.hub._detach(self)

    def __enter__(self) -> Listener:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class EventHub:
    """Fans inbound message and reaction events out to temporary listeners."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {
            MESSAGE_CREATED: [],
            REACTION_ADDED: [],
        }

    def listen_messages(self, predicate: Callable[[Any], bool], callback: Callable[[Any], Any]) -> Listener:
        return self._attach(MESSAGE_CREATED, predicate, callback)

    def listen_reactions(
        self,
        predicate: Callable[[ReactionEvent], bool],
        callback: Callable[[ReactionEvent], Any],
    ) -> Listener:
        return self._attach(REACTION_ADDED, predicate, callback)

    def listener_count(self, kind: str | None = None) -> int:
        if kind is not None:
            return len(self._listeners[kind])
        return sum(len(group) for group in self._listeners.values())

    async def dispatch_message(self, message: Any) -> int:
        return await self._dispatch(MESSAGE_CREATED, message)

    async def dispatch_reaction(self, event: ReactionEvent) -> int:
        return await self._dispatch(REACTION_ADDED, event)

    def _attach(self, kind: str, predicate, callback) -> Listener:
        listener = Listener(self, kind, predicate, callback)
        self._listeners[kind].append(listener)
        return listener

    def _detach(self, listener: Listener) -> None:
        group = self._listeners.get(listener.kind, [])
        if listener in group:
            group.remove(listener)

    async def _dispatch(self, kind: str, event: Any) -> int:
        delivered = 0
        for listener in list(self._listeners[kind]):
            # a callback earlier in this pass may have torn this one down
            if listener.closed:
                continue
            try:
                if not listener.predicate(event):
                    continue
                delivered += 1
                await maybe_await(listener.callback(event))
            except Exception as e:
                print(f"[EVENTS] action=dispatch kind={kind} result=error error={str(e)[:180]}")
        return delivered
