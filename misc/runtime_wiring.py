from __future__ import annotations

from interactive.listeners import EventHub
from interactive.prompts import PromptController
from interactive.reaction_controls import PaginationController
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates
from misc.commands.commands_interactive import register as register_interactive
from misc.events_runtime import register_interactive_events
from misc.runtime_deps import RuntimeDeps
from misc.transport import DiscordTransport


def wire_bot_runtime(
    bot,
    *,
    allowed_channel_ids: set[int],
    reaction_rate_limit: float,
    prompt_timeout_seconds: float,
    pagination_timeout_seconds: float,
    temp_message_seconds: float,
    guide: dict,
    feedback_channel_id: int,
    feedback_max_chars: int,
    cancel_reaction: str,
    ignore_bots: bool = True,
) -> CommandDeps:
    def in_allowed_channel(ctx) -> bool:
        if not allowed_channel_ids:
            return True
        try:
            return int(ctx.channel.id) in allowed_channel_ids
        except Exception:
            return False

    hub = EventHub()
    transport = DiscordTransport(bot, reaction_rate_limit=reaction_rate_limit)

    command_deps = CommandDeps(
        transport=transport,
        prompts=PromptController(transport, hub),
        paginator=PaginationController(transport, hub),
        prompt_timeout_seconds=prompt_timeout_seconds,
        pagination_timeout_seconds=pagination_timeout_seconds,
        temp_message_seconds=temp_message_seconds,
        guide=guide,
        feedback_channel_id=feedback_channel_id,
        feedback_max_chars=feedback_max_chars,
        cancel_reaction=cancel_reaction,
    )
    command_gates = CommandGates(in_allowed_channel=in_allowed_channel)
    runtime_deps = RuntimeDeps(
        hub=hub,
        ignore_bots=ignore_bots,
    )

    register_interactive(bot, deps=command_deps, gates=command_gates)
    register_interactive_events(bot, deps=runtime_deps)
    return command_deps
