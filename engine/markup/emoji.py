# engine/markup/emoji.py
"""
Process-wide emoji map used to resolve ``:code:`` tokens.

The map is loaded lazily, at most once, from an emoji loader returning::

    [
        {"category": "Mediavida", "items": [{"code": ":psyduck:", "url": "/img/..."}]},
        {"category": "People", "items": [...]},
    ]

The first category holds the forum's native smileys (class ``smiley``), all
others are rendered with the generic ``emoji`` class.
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

from .config import get_markup_config

logger = logging.getLogger(__name__)

EmojiLoader = Callable[[], Awaitable[List[dict]]]


@dataclass(frozen=True)
class EmojiEntry:
    url: str
    css_class: str


def build_emoji_map(categories: List[dict]) -> Dict[str, EmojiEntry]:
    emoji_map: Dict[str, EmojiEntry] = {}
    for index, category in enumerate(categories):
        css_class = "smiley" if index == 0 else "emoji"
        for item in category.get("items", []):
            code = item.get("code")
            url = item.get("url")
            if code and url:
                emoji_map[code] = EmojiEntry(url=url, css_class=css_class)
    return emoji_map


async def load_emojis_from_settings() -> List[dict]:
    """Default loader: read the JSON file named by ``FORUM_MARKUP["EMOJI_FILE"]``."""
    emoji_file = get_markup_config().get("EMOJI_FILE")
    if not emoji_file:
        return []

    def _read():
        with Path(emoji_file).open(encoding="utf-8") as fh:
            return json.load(fh)

    return await asyncio.to_thread(_read)


class EmojiRegistry:
    """
    Lazily populated emoji map shared by every render in the process.

    Concurrent callers on the same event loop await a single load. A failed
    load is not cached, so the next render tries again.
    """

    def __init__(self, loader: Optional[EmojiLoader] = None):
        self.loader = loader or load_emojis_from_settings
        self._emoji_map: Optional[Dict[str, EmojiEntry]] = None
        self._pending: Optional[asyncio.Task] = None
        self._lock = threading.Lock()
        self.load_count = 0

    @property
    def loaded(self) -> bool:
        return self._emoji_map is not None

    async def get_map(self) -> Dict[str, EmojiEntry]:
        if self._emoji_map is not None:
            return self._emoji_map

        loop = asyncio.get_running_loop()
        with self._lock:
            pending = self._pending
            # A task bound to another (possibly closed) loop cannot be awaited here
            if pending is None or pending.get_loop() is not loop:
                pending = loop.create_task(self._load())
                self._pending = pending
        return await pending

    async def _load(self) -> Dict[str, EmojiEntry]:
        self.load_count += 1
        try:
            categories = await self.loader()
            emoji_map = build_emoji_map(categories or [])
        except Exception as e:
            logger.error(f"Emoji map could not be loaded: {e}", exc_info=True)
            with self._lock:
                self._pending = None
            return {}

        with self._lock:
            self._emoji_map = emoji_map
            self._pending = None
        logger.debug(f"Emoji map loaded with {len(emoji_map)} entries")
        return emoji_map

    def reset(self) -> None:
        with self._lock:
            self._emoji_map = None
            self._pending = None
            self.load_count = 0


_registry: Optional[EmojiRegistry] = None
_registry_lock = threading.Lock()


def get_emoji_registry() -> EmojiRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = EmojiRegistry()
        return _registry


def reset_emoji_registry(loader: Optional[EmojiLoader] = None) -> EmojiRegistry:
    """Replace the process-wide registry (used by tests and settings changes)."""
    global _registry
    with _registry_lock:
        _registry = EmojiRegistry(loader)
        return _registry
