"""Tests for the lazily loaded, process-wide emoji map."""

import asyncio
import json

import pytest

from engine.markup import render
from engine.markup.emoji import (
    EmojiRegistry,
    build_emoji_map,
    get_emoji_registry,
    load_emojis_from_settings,
    reset_emoji_registry,
)


class TestBuildEmojiMap:
    def test_first_category_is_native(self, emoji_categories) -> None:
        emoji_map = build_emoji_map(emoji_categories)
        assert emoji_map[":psyduck:"].css_class == "smiley"
        assert emoji_map[":alien:"].css_class == "emoji"

    def test_incomplete_items_are_skipped(self) -> None:
        emoji_map = build_emoji_map([{"category": "x", "items": [{"code": ":a:"}, {"url": "/b.png"}]}])
        assert emoji_map == {}


class TestEmojiRegistry:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self, emoji_registry, emoji_loader) -> None:
        maps = await asyncio.gather(*(emoji_registry.get_map() for _ in range(5)))
        assert emoji_loader.calls == 1
        assert all(m is maps[0] for m in maps)
        assert emoji_registry.loaded

    @pytest.mark.asyncio
    async def test_concurrent_renders_share_one_load(self, highlighter, emoji_registry, emoji_loader) -> None:
        outputs = await asyncio.gather(
            *(
                render(f":psyduck: {n}", highlighter=highlighter, emoji_registry=emoji_registry)
                for n in range(4)
            )
        )
        assert emoji_loader.calls == 1
        assert all('class="smiley"' in html for html in outputs)

    @pytest.mark.asyncio
    async def test_failed_load_is_retried(self, highlighter, flaky_emoji_loader, caplog) -> None:
        registry = EmojiRegistry(flaky_emoji_loader)

        first = await render(":psyduck:", highlighter=highlighter, emoji_registry=registry)
        assert first == "<p>:psyduck:</p>"
        assert not registry.loaded
        assert "Emoji map could not be loaded" in caplog.text

        second = await render(":psyduck:", highlighter=highlighter, emoji_registry=registry)
        assert 'class="smiley"' in second
        assert flaky_emoji_loader.calls == 2

    @pytest.mark.asyncio
    async def test_reset_forgets_the_map(self, emoji_registry, emoji_loader) -> None:
        await emoji_registry.get_map()
        emoji_registry.reset()
        assert not emoji_registry.loaded
        await emoji_registry.get_map()
        assert emoji_loader.calls == 2


class TestProcessWideRegistry:
    def test_accessor_returns_same_instance(self) -> None:
        assert get_emoji_registry() is get_emoji_registry()

    def test_reset_replaces_instance(self) -> None:
        before = get_emoji_registry()
        after = reset_emoji_registry()
        assert after is not before
        assert get_emoji_registry() is after


class TestSettingsLoader:
    @pytest.mark.asyncio
    async def test_reads_configured_file(self, settings, tmp_path, emoji_categories) -> None:
        emoji_file = tmp_path / "emojis.json"
        emoji_file.write_text(json.dumps(emoji_categories), encoding="utf-8")
        settings.FORUM_MARKUP = {"EMOJI_FILE": str(emoji_file)}

        assert await load_emojis_from_settings() == emoji_categories

    @pytest.mark.asyncio
    async def test_no_file_configured(self, settings) -> None:
        settings.FORUM_MARKUP = {"EMOJI_FILE": None}
        assert await load_emojis_from_settings() == []

    @pytest.mark.asyncio
    async def test_missing_file_leaves_tokens_verbatim(self, settings, tmp_path, highlighter) -> None:
        settings.FORUM_MARKUP = {"EMOJI_FILE": str(tmp_path / "missing.json")}
        registry = EmojiRegistry()

        html = await render(":psyduck:", highlighter=highlighter, emoji_registry=registry)
        assert html == "<p>:psyduck:</p>"
        assert not registry.loaded
