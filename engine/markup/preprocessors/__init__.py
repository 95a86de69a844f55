# engine/markup/preprocessors/__init__.py

from .escaper import escape_text, normalize_input
from .region_protector import (
    protect_code_blocks,
    protect_fenced_code,
    protect_inline_code,
    protect_media,
)

PREPROCESSORS = [
    normalize_input,  # Strip editor markers, normalise line endings
    protect_code_blocks,  # [code]...[/code]
    protect_fenced_code,  # ```lang ... ```
    protect_media,  # [media]url[/media]
    protect_inline_code,  # [c]...[/c] and `...`
    escape_text,  # Must run after every region is protected
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
