# Baseline values; bot.py lets LATCH_* environment variables override them.

DEFAULT_COMMAND_PREFIX = "!"

# Empty means commands are answered in every channel.
DEFAULT_ALLOWED_CHANNEL_IDS: set[int] = set()

DEFAULT_PROMPT_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGINATION_TIMEOUT_SECONDS = 30.0

# Minimum spacing between reaction add/remove calls (Discord allows 1 per 0.25s).
DEFAULT_REACTION_RATE_LIMIT_SECONDS = 0.25

DEFAULT_TEMP_MESSAGE_SECONDS = 5.0

PROMPT_CANCEL_REACTION = "❌"
FEEDBACK_MAX_CHARS = 1000

# 0 means feedback is echoed back into the channel it was given in.
DEFAULT_FEEDBACK_CHANNEL_ID = 0
