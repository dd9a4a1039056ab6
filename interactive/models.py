from __future__ import annotations

import inspect
from collections import deque
from dataclasses import dataclass
from dataclasses import field
from typing import Any, Callable


def object_id(obj: Any) -> int:
    """Accepts a discord object, a raw snowflake, or its string form."""
    if isinstance(obj, bool):
        raise TypeError("expected a discord object or snowflake, got bool")
    if isinstance(obj, int):
        return obj
    if isinstance(obj, str):
        return int(obj.strip())
    raw = getattr(obj, "id", None)
    if raw is None:
        raise TypeError(f"cannot resolve an id from {obj!r}")
    return int(raw)


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True, slots=True)
class ReactionEvent:
    channel_id: int
    message_id: int
    user_id: int
    emoji: str


@dataclass(slots=True)
class PendingRequest:
    channel_id: int
    user_id: int
    validator: Callable[[Any], Any] | None = None
    messages: list[Any] = field(default_factory=list)
    response: Any = None
    cancelled: bool = False
    # set once the waiting side has moved on; late handlers must not record
    finished: bool = False

    @property
    def resolved(self) -> bool:
        return self.response is not None or self.cancelled


@dataclass(slots=True)
class PaginationState:
    index: int
    lo: int
    hi: int
    user_id: int
    message_id: int
    timeout: float | None = None
    presses: deque[str] = field(default_factory=deque)
