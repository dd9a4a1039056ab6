from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import discord
import yaml

DEFAULT_GUIDE_COLOR = 0xFFD700
EMBED_FIELD_VALUE_MAX = 1024


def default_guide_path() -> str:
    # This resolves to repo-root/config when running from source checkout.
    here = Path(__file__).resolve().parents[2]
    return os.path.join(here, "config", "guide_pages.yml")


def _normalize_page(raw: Any, position: int) -> dict[str, Any] | None:
    if not isinstance(raw, dict):
        return None
    key = str(raw.get("key") or "").strip().lower()
    if not key:
        return None
    fields_raw = raw.get("fields") if isinstance(raw.get("fields"), list) else []
    fields: list[dict[str, str]] = []
    for f in fields_raw:
        if not isinstance(f, dict):
            continue
        name = str(f.get("name") or "").strip()
        value = str(f.get("value") or "").strip()
        if name and value:
            fields.append({"name": name, "value": value[:EMBED_FIELD_VALUE_MAX]})
    return {
        "key": key,
        "title": str(raw.get("title") or key.title()).strip(),
        "body": str(raw.get("body") or "").strip(),
        "fields": fields,
        "position": position,
    }


def normalize_guide(raw: dict[str, Any]) -> dict[str, Any]:
    pages: list[dict[str, Any]] = []
    seen: set[str] = set()
    for position, item in enumerate(raw.get("pages") or [], start=1):
        page = _normalize_page(item, position)
        if page is None or page["key"] in seen:
            continue
        seen.add(page["key"])
        pages.append(page)
    color_raw = raw.get("color")
    return {
        "title": str(raw.get("title") or "Guide").strip() or "Guide",
        "description": str(raw.get("description") or "").strip(),
        "color": int(color_raw) if isinstance(color_raw, int) else DEFAULT_GUIDE_COLOR,
        "pages": pages,
    }


def load_guide_pages(path: str | None = None) -> dict[str, Any]:
    p = Path(path or default_guide_path())
    if not p.exists():
        raise RuntimeError(f"Guide file not found: {p}")
    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise RuntimeError("Guide file must contain a top-level mapping")
    return normalize_guide(raw)


def guide_index_for_key(guide: dict[str, Any], key: str | None) -> int | None:
    """Page 0 is the overview; page ``n`` is the n-th configured page."""
    if not key:
        return 0
    wanted = key.strip().lower()
    for idx, page in enumerate(guide["pages"], start=1):
        if page["key"] == wanted:
            return idx
    return None


def guide_page_count(guide: dict[str, Any]) -> int:
    return len(guide["pages"]) + 1


def build_guide_embed(guide: dict[str, Any], index: int) -> discord.Embed:
    total = guide_page_count(guide)
    index = max(0, min(int(index), total - 1))
    if index == 0:
        embed = discord.Embed(
            title=guide["title"],
            description=guide["description"] or None,
            color=guide["color"],
        )
        listing = "\n".join(f"• `{page['key']}` - **{page['title']}**" for page in guide["pages"])
        embed.add_field(name="Sections", value=(listing or "No sections found.")[:EMBED_FIELD_VALUE_MAX], inline=False)
    else:
        page = guide["pages"][index - 1]
        embed = discord.Embed(
            title=f"{guide['title']}: {page['title']}",
            description=page["body"] or None,
            color=guide["color"],
        )
        for f in page["fields"]:
            embed.add_field(name=f["name"], value=f["value"], inline=False)
    embed.set_footer(text=f"Page {index + 1}/{total} - use the reaction buttons to scroll.")
    return embed
