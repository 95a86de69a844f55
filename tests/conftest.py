"""Shared fixtures: fake collaborators and a clean emoji registry per test."""

import pytest

from engine.markup import render
from engine.markup.emoji import EmojiRegistry, reset_emoji_registry
from engine.markup.utils import escape_html

EMOJI_CATEGORIES = [
    {
        "category": "Mediavida",
        "items": [{"code": ":psyduck:", "url": "/img/emoji/u/1f914.png"}],
    },
    {
        "category": "Aliens",
        "items": [{"code": ":alien:", "url": "/img/emoji/u/1f47d.png"}],
    },
]


class FakeHighlighter:
    """Wraps code in a marker span and records every call."""

    def __init__(self):
        self.calls = []

    async def highlight(self, code, language):
        self.calls.append((code, language))
        return f'<span class="hl">{escape_html(code)}</span>'


class FailingHighlighter:
    async def highlight(self, code, language):
        raise RuntimeError("highlighter offline")


class CountingLoader:
    """Emoji loader that counts calls and can fail a number of times first."""

    def __init__(self, categories=None, failures=0):
        self.categories = EMOJI_CATEGORIES if categories is None else categories
        self.failures = failures
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise OSError("emoji file unavailable")
        return self.categories


@pytest.fixture(autouse=True)
def clean_emoji_registry():
    reset_emoji_registry(CountingLoader(categories=[]))
    yield
    reset_emoji_registry()


@pytest.fixture
def highlighter():
    return FakeHighlighter()


@pytest.fixture
def emoji_loader():
    return CountingLoader()


@pytest.fixture
def emoji_registry(emoji_loader):
    return EmojiRegistry(emoji_loader)


@pytest.fixture
def render_markup(highlighter, emoji_registry):
    """Render with the fake highlighter and the test emoji registry."""

    async def _render(markup, options=None):
        return await render(
            markup, options, highlighter=highlighter, emoji_registry=emoji_registry
        )

    return _render


@pytest.fixture
def failing_highlighter():
    return FailingHighlighter()


@pytest.fixture
def emoji_categories():
    return EMOJI_CATEGORIES


@pytest.fixture
def flaky_emoji_loader():
    """Loader whose first call fails."""
    return CountingLoader(failures=1)
