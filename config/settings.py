from __future__ import annotations

import os
import re

from config.defaults import DEFAULT_ALLOWED_CHANNEL_IDS


_ID_SEPARATORS = re.compile(r"[\s,;]+")
_SNOWFLAKE = re.compile(r"\d{8,22}")


def parse_id_set(raw: str | None) -> set[int]:
    """Reads Discord ids from a separated list; tokens that are not snowflakes are skipped."""
    tokens = _ID_SEPARATORS.split((raw or "").strip())
    return {int(tok) for tok in tokens if _SNOWFLAKE.fullmatch(tok)}


def resolve_allowed_channel_ids(default_ids: set[int] = DEFAULT_ALLOWED_CHANNEL_IDS) -> set[int]:
    env_ids = parse_id_set(os.getenv("LATCH_ALLOWED_CHANNEL_IDS"))
    return env_ids if env_ids else set(default_ids)


def env_float(name: str, default: float, *, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return float(default)
    try:
        value = float(raw.strip())
    except ValueError:
        print(f"[CFG] invalid {name}={raw!r}; falling back to {default!r}")
        return float(default)
    if value < minimum:
        print(f"[CFG] {name}={value} is below {minimum}; falling back to {default!r}")
        return float(default)
    return value


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        return int(raw.strip())
    except ValueError:
        print(f"[CFG] invalid {name}={raw!r}; falling back to {default!r}")
        return int(default)
