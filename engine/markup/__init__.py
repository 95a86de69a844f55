from .emoji import EmojiRegistry, get_emoji_registry, reset_emoji_registry
from .highlighter import PygmentsHighlighter
from .renderer import MarkupOptions, render, render_sync

__all__ = (
    "EmojiRegistry",
    "MarkupOptions",
    "PygmentsHighlighter",
    "get_emoji_registry",
    "render",
    "render_sync",
    "reset_emoji_registry",
)
