from __future__ import annotations

import discord
from discord.ext import commands
from interactive.models import ReactionEvent
from misc.runtime_deps import RuntimeDeps


def reaction_event_from_payload(payload: discord.RawReactionActionEvent) -> ReactionEvent:
    return ReactionEvent(
        channel_id=int(payload.channel_id),
        message_id=int(payload.message_id),
        user_id=int(payload.user_id),
        emoji=str(payload.emoji),
    )


def _is_self(bot: commands.Bot, user_id: int) -> bool:
    me = bot.user
    return me is not None and int(me.id) == int(user_id)


def register_interactive_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
) -> None:
    @bot.event
    async def on_ready():
        print(f"[EVENTS] action=ready user={bot.user} listeners={deps.hub.listener_count()}")

    @bot.event
    async def on_message(message: discord.Message):
        if _is_self(bot, message.author.id):
            return
        if deps.ignore_bots and message.author.bot:
            return

        await deps.hub.dispatch_message(message)
        await bot.process_commands(message)

    @bot.event
    async def on_raw_reaction_add(payload: discord.RawReactionActionEvent):
        # the bot's own affordances echo back as reaction events
        if _is_self(bot, payload.user_id):
            return
        await deps.hub.dispatch_reaction(reaction_event_from_payload(payload))
