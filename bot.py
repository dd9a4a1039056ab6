import os

import discord
import yaml
from discord.ext import commands
from config.defaults import DEFAULT_COMMAND_PREFIX
from config.defaults import DEFAULT_FEEDBACK_CHANNEL_ID
from config.defaults import DEFAULT_PAGINATION_TIMEOUT_SECONDS
from config.defaults import DEFAULT_PROMPT_TIMEOUT_SECONDS
from config.defaults import DEFAULT_REACTION_RATE_LIMIT_SECONDS
from config.defaults import DEFAULT_TEMP_MESSAGE_SECONDS
from config.defaults import FEEDBACK_MAX_CHARS
from config.defaults import PROMPT_CANCEL_REACTION
from config.settings import env_float
from config.settings import env_int
from config.settings import resolve_allowed_channel_ids
from misc.adhoc_modules.guide_pages import default_guide_path
from misc.adhoc_modules.guide_pages import load_guide_pages
from misc.runtime_wiring import wire_bot_runtime

# =========================
# ENV
# =========================
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")

if not DISCORD_TOKEN:
    raise RuntimeError("Missing DISCORD_TOKEN env var")

COMMAND_PREFIX = (os.getenv("LATCH_COMMAND_PREFIX") or DEFAULT_COMMAND_PREFIX).strip() or DEFAULT_COMMAND_PREFIX
ALLOWED_CHANNEL_IDS = resolve_allowed_channel_ids()

PROMPT_TIMEOUT_SECONDS = env_float("LATCH_PROMPT_TIMEOUT_SECONDS", DEFAULT_PROMPT_TIMEOUT_SECONDS, minimum=1.0)
PAGINATION_TIMEOUT_SECONDS = env_float("LATCH_PAGINATION_TIMEOUT_SECONDS", DEFAULT_PAGINATION_TIMEOUT_SECONDS, minimum=1.0)
# Discord's floor for reaction calls is 0.25s; going lower risks 429s.
REACTION_RATE_LIMIT = env_float("LATCH_REACTION_RATE_LIMIT", DEFAULT_REACTION_RATE_LIMIT_SECONDS)
FEEDBACK_CHANNEL_ID = env_int("LATCH_FEEDBACK_CHANNEL_ID", DEFAULT_FEEDBACK_CHANNEL_ID)

GUIDE_PATH = os.getenv("LATCH_GUIDE_PATH") or default_guide_path()
try:
    GUIDE = load_guide_pages(GUIDE_PATH)
except (RuntimeError, yaml.YAMLError) as e:
    print(f"[CFG] guide unavailable path={GUIDE_PATH!r} error={e}")
    GUIDE = {}

print(
    f"[CFG] prefix={COMMAND_PREFIX!r} "
    f"allowed_channels={'(all)' if not ALLOWED_CHANNEL_IDS else len(ALLOWED_CHANNEL_IDS)} "
    f"prompt_timeout_s={PROMPT_TIMEOUT_SECONDS} pagination_timeout_s={PAGINATION_TIMEOUT_SECONDS} "
    f"reaction_rate_limit_s={REACTION_RATE_LIMIT} feedback_channel={FEEDBACK_CHANNEL_ID or '(reply)'} "
    f"guide_pages={len(GUIDE.get('pages', [])) if GUIDE else 0}"
)

intents = discord.Intents.default()
intents.message_content = True

bot = commands.Bot(command_prefix=COMMAND_PREFIX, intents=intents)

wire_bot_runtime(
    bot,
    allowed_channel_ids=ALLOWED_CHANNEL_IDS,
    reaction_rate_limit=REACTION_RATE_LIMIT,
    prompt_timeout_seconds=PROMPT_TIMEOUT_SECONDS,
    pagination_timeout_seconds=PAGINATION_TIMEOUT_SECONDS,
    temp_message_seconds=DEFAULT_TEMP_MESSAGE_SECONDS,
    guide=GUIDE,
    feedback_channel_id=FEEDBACK_CHANNEL_ID,
    feedback_max_chars=FEEDBACK_MAX_CHARS,
    cancel_reaction=PROMPT_CANCEL_REACTION,
)


bot.run(DISCORD_TOKEN)
