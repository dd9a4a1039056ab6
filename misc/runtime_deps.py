from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RuntimeDeps:
    # event fan-out
    hub: Any

    # inbound filtering
    ignore_bots: bool = True
