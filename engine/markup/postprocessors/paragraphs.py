# engine/markup/postprocessors/paragraphs.py
"""
Paragraph assembler.

The text is split on blank lines, then each chunk is split again at
top-level lines starting with a block tag, so a list or table written right
under an intro line still becomes its own block. Lines inside an unclosed
``<blockquote>`` or ``<div>`` stay with the element that opened them, which
keeps lists and tables inside quotes, spoilers and centered text intact.

A block that already starts with a block element (or with a
code/media/inline-code placeholder) is kept as it is; anything else is
wrapped in ``<p>`` with single newlines turned into ``<br>``, which is how
the forum itself renders line breaks.
"""

import re
from typing import List

from ..utils import is_region_placeholder

BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
BLOCK_TAG_RE = re.compile(
    r"^<(div|table|h[2-5]|ul|ol|li|blockquote|pre|hr|style|script)", re.IGNORECASE
)
ANCHOR_TARGET_PREFIX = '<a class="bar-offset"'

CONTAINER_OPEN_RE = re.compile(r"<(?:blockquote|div)\b", re.IGNORECASE)
CONTAINER_CLOSE_RE = re.compile(r"</(?:blockquote|div)>", re.IGNORECASE)


def is_block_level(block: str, context: dict) -> bool:
    return bool(
        BLOCK_TAG_RE.match(block)
        or block.startswith(ANCHOR_TARGET_PREFIX)
        or is_region_placeholder(block, context)
    )


def _container_depth_change(line: str) -> int:
    return len(CONTAINER_OPEN_RE.findall(line)) - len(CONTAINER_CLOSE_RE.findall(line))


def split_block_lines(chunk: str) -> List[str]:
    """Split a chunk before and after each top-level line that opens a block."""
    runs = []
    current: List[str] = []
    current_is_block = False
    depth = 0

    for line in chunk.split("\n"):
        if depth == 0:
            starts_block = bool(BLOCK_TAG_RE.match(line.strip()))
            if current and (starts_block or current_is_block):
                runs.append("\n".join(current))
                current = []
            if not current:
                current_is_block = starts_block
        current.append(line)
        depth = max(depth + _container_depth_change(line), 0)

    if current:
        runs.append("\n".join(current))
    return runs


def assemble_paragraphs(html: str, context: dict) -> str:
    blocks = []
    for chunk in BLOCK_SPLIT_RE.split(html):
        for raw_block in split_block_lines(chunk):
            block = raw_block.strip()
            if not block:
                continue
            if is_block_level(block, context):
                blocks.append(block)
            else:
                blocks.append("<p>{}</p>".format(block.replace("\n", "<br>")))
    return "\n".join(blocks)
