from __future__ import annotations

import time
from contextlib import ExitStack
from typing import Any, Callable

from interactive.correlator import CancelCorrelator
from interactive.correlator import ResponseCorrelator
from interactive.gate import Gate
from interactive.listeners import EventHub
from interactive.models import PendingRequest
from interactive.models import object_id
from interactive.timeout import TimeoutRenewer


class PromptController:
    """Asks a user a question and suspends the calling task until they answer.

    The transport is anything exposing the outbound chat calls (``send``,
    ``delete``, ``add_reaction``, ``remove_reaction`` and ``me``); the hub
    delivers inbound events.
    """

    def __init__(self, transport, hub: EventHub) -> None:
        self.transport = transport
        self.hub = hub

    async def prompt(
        self,
        channel,
        user,
        content: str,
        *,
        embed=None,
        timeout: float | None = None,
        cancel_reaction: str | None = None,
        clean: bool = False,
        validator: Callable[[Any], Any] | None = None,
    ):
        """Returns the accepted response message, or None on timeout or cancel.

        With no timeout and no cancel reaction this waits until a valid reply
        arrives, however long that takes.
        """
        request = PendingRequest(
            channel_id=object_id(channel),
            user_id=object_id(user),
            validator=validator,
        )
        gate = Gate()
        renewer = TimeoutRenewer(gate, timeout) if timeout is not None else None
        started = time.monotonic()

        prompt_message = await self.transport.send(channel, content, embed=embed)
        request.messages.append(prompt_message)

        failed = False
        try:
            with ExitStack() as listeners:
                responses = ResponseCorrelator(request, gate, renewer)
                listeners.enter_context(self.hub.listen_messages(responses.matches, responses.handle))
                if cancel_reaction:
                    canceller = CancelCorrelator(
                        request,
                        gate,
                        renewer,
                        message_id=object_id(prompt_message),
                        emoji=cancel_reaction,
                    )
                    listeners.enter_context(self.hub.listen_reactions(canceller.matches, canceller.handle))
                    await self.transport.add_reaction(prompt_message, cancel_reaction)
                if renewer is not None:
                    renewer.arm()

                await gate.close()
        except Exception:
            failed = True
            raise
        finally:
            request.finished = True
            if renewer is not None:
                renewer.cancel()
            if clean:
                await self._cleanup(list(request.messages), reraise=not failed)
            elif cancel_reaction:
                await self._cleanup(
                    [prompt_message],
                    reraise=not failed,
                    action=lambda m: self.transport.remove_reaction(m, self.transport.me, cancel_reaction),
                )

        elapsed = time.monotonic() - started
        if request.response is not None:
            result = "ok"
        elif request.cancelled:
            result = "cancelled"
        else:
            result = "timeout"
        print(
            f"[PROMPT] action=prompt result={result} channel={request.channel_id} "
            f"user={request.user_id} seen={len(request.messages) - 1} elapsed_s={elapsed:.2f}"
        )
        return request.response

    async def _cleanup(self, messages: list, *, reraise: bool, action=None) -> None:
        """Runs ``action`` (delete by default) on every message, then re-raises the first failure.

        With ``reraise`` off the failures are only logged, so an error already
        propagating out of the prompt is not replaced by a cleanup error.
        """
        action = action or self.transport.delete
        first_error: Exception | None = None
        for message in messages:
            try:
                await action(message)
            except Exception as e:
                print(f"[PROMPT] action=clean result=error message={getattr(message, 'id', None)} error={str(e)[:180]}")
                if first_error is None:
                    first_error = e
        if first_error is not None and reraise:
            raise first_error

    async def prompt_author(self, message, content: str, **options):
        """Prompts the author of ``message`` in the channel it was sent in."""
        return await self.prompt(message.channel, message.author, content, **options)
