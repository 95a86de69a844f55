"""BBCode quotes and spoilers."""

import re

# Innermost quote: its body contains no further opening [quote] tag
QUOTE_RE = re.compile(
    r"\[quote(?:=([^\]]+))?\]((?:(?!\[quote(?:=[^\]]+)?\])[\s\S])*?)\[/quote\]",
    re.IGNORECASE,
)
BLOCKQUOTE_TAG_RE = re.compile(r"<blockquote\b[^>]*>|</blockquote>")
SPOILER_RE = re.compile(r"\[spoiler(?:=([^\]]*))?\](.*?)\[/spoiler\]", re.IGNORECASE | re.DOTALL)


def _quote_html(match) -> str:
    author, content = match.group(1), match.group(2)
    footer = f"<footer>— <cite>{author}</cite></footer>" if author else ""
    return f'<blockquote class="quote"><p>{content}</p>{footer}</blockquote>'


def _separate_outer_quotes(text: str) -> str:
    """Put a blank line after each outermost blockquote, none after nested ones."""
    parts = []
    depth = 0
    last = 0
    for match in BLOCKQUOTE_TAG_RE.finditer(text):
        if match.group(0) != "</blockquote>":
            depth += 1
            continue
        depth = max(depth - 1, 0)
        if depth == 0:
            parts.append(text[last:match.end()] + "\n\n")
            last = match.end()
    parts.append(text[last:])
    return "".join(parts)


def bbcode_quotes(text: str, context: dict) -> str:
    """
    Render ``[quote]`` and ``[quote=author]``.

    Quotes are resolved innermost first until none are left, so nested quotes
    nest instead of pairing an outer opening tag with an inner closing tag.
    """
    found = False
    while True:
        text, count = QUOTE_RE.subn(_quote_html, text)
        if not count:
            break
        found = True
    return _separate_outer_quotes(text) if found else text


def spoilers(text: str, context: dict) -> str:
    def replace_spoiler(match):
        title = (match.group(1) or "").strip() or "Spoiler"
        return (
            f'<div class="spoiler-wrap"><a href="#" class="spoiler">{title}</a>'
            f'<div class="spoiler animated"><p>{match.group(2)}</p></div></div>\n\n'
        )

    return SPOILER_RE.sub(replace_spoiler, text)
