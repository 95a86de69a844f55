"""
Bold, italic, underline and strike in both BBCode and Markdown form.

Runs after the structural transforms: list bullets (``* item``) are already
``<li>`` elements by now. The Markdown patterns still refuse a leading ``[``
(``[*]`` markers) and whitespace just inside the delimiters, so stray
asterisks such as ``* note`` or ``user*name`` are left alone.

Known limitation: mixing both dialects on pathological input such as
``[b]a*b[/b]c*`` is best effort.
"""

import re

INLINE_FORMATS = [
    (re.compile(r"\[b\]([\s\S]*?)\[/b\]", re.IGNORECASE), r"<strong>\1</strong>"),
    (re.compile(r"(?<!\[)\*\*(?!\s)([^*]+?)(?<!\s)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\[i\]([\s\S]*?)\[/i\]", re.IGNORECASE), r"<em>\1</em>"),
    (re.compile(r"(?<!\[)\*(?!\s)([^*]+?)(?<!\s)\*"), r"<em>\1</em>"),
    (re.compile(r"\[u\]([\s\S]*?)\[/u\]", re.IGNORECASE), r"<u>\1</u>"),
    (re.compile(r"\[s\]([\s\S]*?)\[/s\]", re.IGNORECASE), r"<s>\1</s>"),
    (re.compile(r"~~([^~]+)~~"), r"<s>\1</s>"),
]


def inline_formatting(text: str, context: dict) -> str:
    for pattern, replacement in INLINE_FORMATS:
        text = pattern.sub(replacement, text)
    return text
