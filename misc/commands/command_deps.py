from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable

from config.defaults import DEFAULT_PAGINATION_TIMEOUT_SECONDS
from config.defaults import DEFAULT_PROMPT_TIMEOUT_SECONDS
from config.defaults import DEFAULT_TEMP_MESSAGE_SECONDS
from config.defaults import FEEDBACK_MAX_CHARS
from config.defaults import PROMPT_CANCEL_REACTION


def _allow_all(*args, **kwargs) -> bool:
    return True


@dataclass(frozen=True)
class CommandDeps:
    # Core/shared
    transport: Any = None
    prompts: Any = None
    paginator: Any = None

    # Timing
    prompt_timeout_seconds: float = DEFAULT_PROMPT_TIMEOUT_SECONDS
    pagination_timeout_seconds: float = DEFAULT_PAGINATION_TIMEOUT_SECONDS
    temp_message_seconds: float = DEFAULT_TEMP_MESSAGE_SECONDS

    # Guide
    guide: dict = field(default_factory=dict)
    guide_embed_factory: Callable | None = None

    # Feedback
    feedback_channel_id: int = 0
    feedback_max_chars: int = FEEDBACK_MAX_CHARS
    cancel_reaction: str = PROMPT_CANCEL_REACTION


@dataclass(frozen=True)
class CommandGates:
    in_allowed_channel: Callable[[Any], bool] = _allow_all
