# engine/markup/postprocessors/__init__.py

from .paragraphs import assemble_paragraphs
from .placeholder_restorer import discard_pending_blocks, restore_placeholders

POSTPROCESSORS = [
    assemble_paragraphs,  # Split on blank lines, wrap inline blocks in <p>
    # restore_placeholders runs last and is awaited by the renderer
]


def apply_postprocessors(html, context):
    """Apply all synchronous postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html


__all__ = [
    "POSTPROCESSORS",
    "apply_postprocessors",
    "discard_pending_blocks",
    "restore_placeholders",
]
