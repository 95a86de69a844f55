# engine/markup/renderer.py

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from asgiref.sync import async_to_sync

from .config import get_markup_config
from .emoji import get_emoji_registry
from .highlighter import PygmentsHighlighter
from .postprocessors import apply_postprocessors, discard_pending_blocks, restore_placeholders
from .preprocessors import apply_preprocessors
from .transformers import apply_transformers
from .utils import escape_html

logger = logging.getLogger(__name__)

COLOR_TOKEN_RE = re.compile(r"^(#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})|[a-zA-Z]{3,20})$")
MAX_FONT_SIZE = 72


@dataclass
class MarkupOptions:
    """Cosmetic preview options; they never change the rendered structure."""

    bold_color: Optional[str] = None
    font_size: Optional[int] = None

    @classmethod
    def from_value(cls, value: Union["MarkupOptions", Mapping, None]) -> "MarkupOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls(bold_color=value.get("bold_color"), font_size=value.get("font_size"))

    def style_declarations(self) -> str:
        """CSS custom properties for the preview container, invalid tokens skipped."""
        declarations = []

        if self.bold_color is not None:
            if COLOR_TOKEN_RE.match(str(self.bold_color).strip()):
                declarations.append(f"--mv-bold-color: {str(self.bold_color).strip()}")
            else:
                logger.warning(f"Ignoring invalid bold color token: {self.bold_color!r}")

        if self.font_size is not None:
            try:
                size = int(self.font_size)
            except (TypeError, ValueError):
                size = 0
            if 0 < size <= MAX_FONT_SIZE:
                declarations.append(f"--mv-font-size: {size}px")
            else:
                logger.warning(f"Ignoring invalid font size token: {self.font_size!r}")

        return "; ".join(declarations)


def _wrap_with_options(html: str, options: MarkupOptions) -> str:
    style = options.style_declarations()
    if not html or not style:
        return html
    return f'<div class="posts-contents" style="{style}">{html}</div>'


async def render(markup, options=None, *, highlighter=None, emoji_registry=None):
    """
    Render forum markup (BBCode + Markdown) to preview HTML.

    Every stage but the last is a synchronous string rewrite; code
    highlighting and emoji lookups are collected as pending blocks and only
    awaited, concurrently, by the placeholder restorer.

    Args:
        markup: Raw markup text
        options: Optional MarkupOptions or dict with bold_color / font_size
        highlighter: Object with ``async highlight(code, language)``
            (defaults to Pygments)
        emoji_registry: EmojiRegistry to resolve ``:code:`` tokens
            (defaults to the process-wide registry)

    Never raises: on an unexpected failure the escaped input is returned as a
    single paragraph.
    """
    if not markup or not markup.strip():
        return ""

    context = {
        "config": get_markup_config(),
        "highlighter": highlighter or PygmentsHighlighter(),
        "emoji_registry": emoji_registry or get_emoji_registry(),
    }

    try:
        # Stages 1-2: protect opaque regions, escape the rest
        text = apply_preprocessors(markup, context)

        # Stages 3-6: structure, inline formatting, references, quotes
        text = apply_transformers(text, context)

        # Stage 7: paragraphs
        html = apply_postprocessors(text, context)

        # Stage 8: await pending blocks and put them back
        html = await restore_placeholders(html, context)
    except Exception as e:
        logger.error(f"Markup rendering failed: {e}", exc_info=True)
        discard_pending_blocks(context)
        html = "<p>{}</p>".format(escape_html(markup.strip()).replace("\n", "<br>"))

    return _wrap_with_options(html, MarkupOptions.from_value(options))


def render_sync(markup, options=None, **kwargs):
    """Synchronous wrapper around :func:`render` for templates and commands."""
    return async_to_sync(render)(markup, options, **kwargs)
