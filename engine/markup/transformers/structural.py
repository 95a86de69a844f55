# engine/markup/transformers/structural.py
"""
Structural transforms that run on escaped text before inline formatting.

- Horizontal rules: a line of three or more ``-`` or ``*`` (spaces allowed)
- BBCode lists: ``[list]`` / ``[list=1]`` split on ``[*]``, no nesting
- Markdown quotes: consecutive lines starting with ``> `` (escaped ``&gt; ``)

Lists must be handled before inline formatting so ``* item`` bullets are not
read as italics.
"""

import re

HORIZONTAL_RULE_RE = re.compile(r"^[\t ]*([-*])(?:[\t ]*\1){2,}[\t ]*$", re.MULTILINE)
HR_SPACING_RE = re.compile(r"\n*<hr>\n*")

BBCODE_UNORDERED_LIST_RE = re.compile(r"\[list\]([\s\S]*?)\[/list\]", re.IGNORECASE)
BBCODE_ORDERED_LIST_RE = re.compile(r"\[list=1\]([\s\S]*?)\[/list\]", re.IGNORECASE)
BBCODE_LIST_ITEM_RE = re.compile(r"\[\*\]")

MARKDOWN_QUOTE_RE = re.compile(r"(?:^&gt; .*(?:\n|$))+", re.MULTILINE)
QUOTE_MARKER_RE = re.compile(r"^&gt; ?")


def horizontal_rules(text: str, context: dict) -> str:
    """Turn rule lines into ``<hr>``, always as a block of their own."""
    text = HORIZONTAL_RULE_RE.sub("<hr>", text)
    return HR_SPACING_RE.sub("\n\n<hr>\n\n", text)


def split_list_items(content: str) -> str:
    """
    Split BBCode list content on ``[*]`` markers.

    Each non-empty segment becomes one ``<li>``; newlines inside an item
    become ``<br>`` so multi-line items stay inside the same ``<li>``.
    """
    items = []
    for part in BBCODE_LIST_ITEM_RE.split(content):
        trimmed = part.strip()
        if not trimmed:
            continue
        content_html = trimmed.replace("\n", "<br>")
        items.append(f"<li>{content_html}</li>")
    return "".join(items)


def bbcode_lists(text: str, context: dict) -> str:
    text = BBCODE_UNORDERED_LIST_RE.sub(
        lambda m: f"\n<ul>{split_list_items(m.group(1))}</ul>\n", text
    )
    return BBCODE_ORDERED_LIST_RE.sub(
        lambda m: f"\n<ol>{split_list_items(m.group(1))}</ol>\n", text
    )


def markdown_quotes(text: str, context: dict) -> str:
    """Collapse runs of ``> `` lines into one blockquote."""

    def replace_quote(match):
        lines = [line for line in match.group(0).split("\n") if line.strip()]
        content = "<br>".join(QUOTE_MARKER_RE.sub("", line) for line in lines)
        return f'\n\n<blockquote class="quote"><p>{content}</p></blockquote>\n\n'

    return MARKDOWN_QUOTE_RE.sub(replace_quote, text)
