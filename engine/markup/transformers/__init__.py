# engine/markup/transformers/__init__.py

from .inline_formatter import inline_formatting
from .list_machine import markdown_lists
from .quotes import bbcode_quotes, spoilers
from .references import (
    anchors,
    autolinks,
    center,
    emojis,
    flags,
    headers,
    links_and_images,
    mentions,
)
from .structural import bbcode_lists, horizontal_rules, markdown_quotes
from .table_builder import markdown_tables

TRANSFORMERS = [
    # Structure
    horizontal_rules,
    bbcode_lists,  # Flat [*] splitter, no nesting
    markdown_lists,  # Must run before inline formatting (* bullets vs *italics*)
    markdown_quotes,
    markdown_tables,
    # Inline formatting
    inline_formatting,
    # Blocks and references
    headers,
    links_and_images,
    anchors,
    flags,
    emojis,  # Emits placeholders, resolved by the restorer
    center,
    mentions,
    autolinks,  # Must follow every stage that creates links
    # Quotes
    bbcode_quotes,
    spoilers,
    # Order matters - they run sequentially
]


def apply_transformers(text, context):
    """Apply all transformers in order"""
    for transformer in TRANSFORMERS:
        text = transformer(text, context)
    return text
