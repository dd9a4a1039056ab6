from __future__ import annotations

from typing import Any

from interactive.gate import Gate
from interactive.models import PendingRequest
from interactive.models import ReactionEvent
from interactive.models import maybe_await
from interactive.models import object_id
from interactive.timeout import TimeoutRenewer


def _settled(request: PendingRequest, renewer: TimeoutRenewer | None) -> bool:
    if request.resolved or request.finished:
        return True
    return renewer is not None and renewer.fired


class ResponseCorrelator:
    """Matches replies from one user in one channel to a pending prompt.

    Every matching message is collected for cleanup. The first one the
    validator accepts (or any, without a validator) resolves the request;
    rejected ones restart the timeout. A reply only counts if it is the
    release that wakes the prompt; after a timeout or cancel it is ignored.
    """

    def __init__(self, request: PendingRequest, gate: Gate, renewer: TimeoutRenewer | None = None) -> None:
        self.request = request
        self.gate = gate
        self.renewer = renewer

    def matches(self, message: Any) -> bool:
        channel = getattr(message, "channel", None)
        author = getattr(message, "author", None)
        if channel is None or author is None:
            return False
        return (
            object_id(channel) == self.request.channel_id
            and object_id(author) == self.request.user_id
        )

    async def handle(self, message: Any) -> None:
        if _settled(self.request, self.renewer):
            return
        self.request.messages.append(message)

        valid = await self._validate(message)
        # the request may have been settled while the validator was awaited
        if _settled(self.request, self.renewer):
            return
        if not valid:
            if self.renewer is not None:
                self.renewer.reset()
            return
        if self.gate.release():
            self.request.response = message
            if self.renewer is not None:
                self.renewer.cancel()

    async def _validate(self, message: Any) -> bool:
        validator = self.request.validator
        if validator is None:
            return True
        try:
            return bool(await maybe_await(validator(message)))
        except Exception as e:
            print(
                f"[PROMPT] action=validate result=error "
                f"channel={self.request.channel_id} user={self.request.user_id} error={str(e)[:180]}"
            )
            return False


class CancelCorrelator:
    """Settles a pending prompt as cancelled when its user presses the cancel reaction."""

    def __init__(
        self,
        request: PendingRequest,
        gate: Gate,
        renewer: TimeoutRenewer | None,
        *,
        message_id: int,
        emoji: str,
    ) -> None:
        self.request = request
        self.gate = gate
        self.renewer = renewer
        self.message_id = int(message_id)
        self.emoji = str(emoji)

    def matches(self, event: ReactionEvent) -> bool:
        return (
            event.message_id == self.message_id
            and event.user_id == self.request.user_id
            and event.emoji == self.emoji
        )

    def handle(self, event: ReactionEvent) -> None:
        if _settled(self.request, self.renewer):
            return
        if self.gate.release():
            self.request.cancelled = True
            if self.renewer is not None:
                self.renewer.cancel()
