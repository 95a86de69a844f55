# engine/markup/preprocessors/region_protector.py
"""
Preprocessor that protects opaque regions from every later stage.

Regions are extracted in priority order and replaced with placeholder tokens:

    [code=py]...[/code]     → __CODE_BLOCK_<nonce>_<n>__   + blank line
    ```py\n...```           → __CODE_BLOCK_<nonce>_<n>__   + blank line
    [media]url[/media]      → __MEDIA_BLOCK_<nonce>_<n>__  + blank line
    `code` / [c]code[/c]    → __INLINE_CODE_<nonce>_<n>__  (stays inline)

Each token gets a pending block: a coroutine for highlighted code, a plain
string for media cards and inline code. Nothing is awaited here; the
placeholder restorer resolves them all at the end of the pipeline.
"""

import re

from ..highlighter import highlight_code_block, plain_code_block
from ..media import render_media
from ..utils import add_pending_block, escape_code, is_safe_url

CODE_BLOCK_RE = re.compile(r"\[code(?:=([^\]]+))?\]([\s\S]*?)\[/code\]", re.IGNORECASE)
FENCED_CODE_RE = re.compile(r"```(?:(\w+)\n)?([\s\S]*?)```")
MEDIA_RE = re.compile(r"\[media\](.*?)\[/media\]", re.IGNORECASE)
BBCODE_INLINE_CODE_RE = re.compile(r"\[c\](.+?)\[/c\]", re.IGNORECASE)
INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")


def _protect_code(match, context: dict) -> str:
    language, code = match.group(1), match.group(2)
    resolver = highlight_code_block(code, language, context["highlighter"])
    fallback = plain_code_block(code) if code.strip() else ""
    return add_pending_block(context, "CODE_BLOCK", resolver, fallback) + "\n\n"


def protect_code_blocks(text: str, context: dict) -> str:
    """Protect BBCode ``[code]`` blocks."""
    return CODE_BLOCK_RE.sub(lambda m: _protect_code(m, context), text)


def protect_fenced_code(text: str, context: dict) -> str:
    """Protect Markdown fenced code blocks."""
    return FENCED_CODE_RE.sub(lambda m: _protect_code(m, context), text)


def protect_media(text: str, context: dict) -> str:
    """
    Protect ``[media]`` blocks so escaping does not break their embeds.

    A URL whose scheme is not allowed is left as literal text.
    """
    protocols = context["config"]["ALLOWED_PROTOCOLS"]

    def replace_media(match):
        if not is_safe_url(match.group(1), protocols):
            return match.group(0)
        return add_pending_block(context, "MEDIA_BLOCK", render_media(match.group(1))) + "\n\n"

    return MEDIA_RE.sub(replace_media, text)


def protect_inline_code(text: str, context: dict) -> str:
    """Protect ``[c]code[/c]`` and backtick code spans."""

    def replace_inline(match):
        html = f'<code class="inline">{escape_code(match.group(1))}</code>'
        return add_pending_block(context, "INLINE_CODE", html)

    text = BBCODE_INLINE_CODE_RE.sub(replace_inline, text)
    return INLINE_CODE_RE.sub(replace_inline, text)
