from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable

import discord
from discord.ext import commands

from interactive.models import object_id


class DiscordTransport:
    """Outbound chat calls used by the prompt and reaction-control core.

    Reaction adds and removals are spaced by ``reaction_rate_limit`` seconds
    across the whole bot. Failures from discord.py propagate unchanged.
    """

    def __init__(self, bot: commands.Bot, *, reaction_rate_limit: float = 0.25) -> None:
        self.bot = bot
        self.reaction_rate_limit = max(0.0, float(reaction_rate_limit))
        self._reaction_lock = asyncio.Lock()
        self._last_reaction_at: float | None = None

    @property
    def me(self):
        return self.bot.user

    async def resolve_channel(self, channel) -> discord.abc.Messageable:
        if hasattr(channel, "send"):
            return channel
        channel_id = object_id(channel)
        found = self.bot.get_channel(channel_id)
        if found is None:
            found = await self.bot.fetch_channel(channel_id)
        return found

    async def send(self, channel, content: str | None = None, *, embed: discord.Embed | None = None) -> discord.Message:
        target = await self.resolve_channel(channel)
        return await target.send(content, embed=embed)

    async def send_temp(self, channel, content: str, seconds: float) -> discord.Message:
        target = await self.resolve_channel(channel)
        return await target.send(content, delete_after=float(seconds))

    async def edit(self, message: discord.Message, content: str | None = None, *, embed: discord.Embed | None = None):
        return await message.edit(content=content, embed=embed)

    async def delete(self, message: discord.Message) -> None:
        await message.delete()

    async def add_reaction(self, message: discord.Message, emoji: str) -> None:
        await self._spaced(lambda: message.add_reaction(emoji))

    async def remove_reaction(self, message: discord.Message, user, emoji: str) -> None:
        member = user if hasattr(user, "id") else discord.Object(id=object_id(user))
        await self._spaced(lambda: message.remove_reaction(emoji, member))

    async def remove_all_reactions(self, message: discord.Message) -> None:
        await self._spaced(message.clear_reactions)

    async def _spaced(self, call: Callable[[], Awaitable[Any]]) -> Any:
        async with self._reaction_lock:
            if self._last_reaction_at is not None:
                wait_s = (self._last_reaction_at + self.reaction_rate_limit) - time.monotonic()
                if wait_s > 0:
                    await asyncio.sleep(wait_s)
            try:
                return await call()
            finally:
                self._last_reaction_at = time.monotonic()
