from __future__ import annotations

from discord.ext import commands
from misc.adhoc_modules.guide_pages import build_guide_embed
from misc.adhoc_modules.guide_pages import guide_index_for_key
from misc.adhoc_modules.guide_pages import guide_page_count
from misc.commands.command_deps import CommandDeps
from misc.commands.command_deps import CommandGates


def register(
    bot: commands.Bot,
    *,
    deps: CommandDeps,
    gates: CommandGates,
) -> None:
    if deps.prompts is None or deps.paginator is None:
        return

    transport = deps.transport
    embed_factory = deps.guide_embed_factory or build_guide_embed

    async def _notify_temp(ctx: commands.Context, text: str) -> None:
        await transport.send_temp(ctx.channel, text, deps.temp_message_seconds)

    @bot.command(name="guide")
    async def guide(ctx: commands.Context, key: str = ""):
        if not gates.in_allowed_channel(ctx):
            return
        catalogue = deps.guide
        if not catalogue:
            await ctx.send("The guide is not configured.")
            return

        index = guide_index_for_key(catalogue, key)
        if index is None:
            await _notify_temp(ctx, "No guide section with that key was found.")
            return

        msg = await transport.send(ctx.channel, None, embed=embed_factory(catalogue, index))

        async def render(new_index: int) -> None:
            await transport.edit(msg, None, embed=embed_factory(catalogue, new_index))

        await deps.paginator.run(
            msg,
            ctx.author,
            range(0, guide_page_count(catalogue)),
            timeout=deps.pagination_timeout_seconds,
            starting_index=index,
            on_index_change=render,
        )

    @bot.command(name="feedback")
    async def feedback(ctx: commands.Context):
        if not gates.in_allowed_channel(ctx):
            return

        async def validate(message) -> bool:
            text = str(getattr(message, "content", "") or "").strip()
            if not text:
                await _notify_temp(ctx, "Feedback can't be empty.")
                return False
            if len(text) > deps.feedback_max_chars:
                await _notify_temp(ctx, f"Feedback must be {deps.feedback_max_chars} characters or fewer.")
                return False
            return True

        response = await deps.prompts.prompt_author(
            ctx.message,
            "**What feedback would you like to send?**\n"
            f"Press {deps.cancel_reaction} to cancel.",
            timeout=deps.prompt_timeout_seconds,
            cancel_reaction=deps.cancel_reaction,
            clean=True,
            validator=validate,
        )
        if response is None:
            await ctx.send("**Feedback canceled.**")
            return

        text = str(response.content or "").strip()
        author = getattr(ctx.author, "mention", None) or str(ctx.author.id)
        if deps.feedback_channel_id:
            await transport.send(deps.feedback_channel_id, f"**Feedback from {author}:**\n{text}")
            await ctx.send("Thanks! Your feedback has been passed along.")
        else:
            await ctx.send(f"**Feedback from {author}:**\n{text}")
