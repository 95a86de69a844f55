"""Input normalisation and HTML escaping, the stages around region protection."""

import re

from ..utils import escape_html

EDITOR_CURSOR_MARKER = "{{cursor}}"

_LINE_ENDINGS_RE = re.compile(r"\r\n?")


def normalize_input(text: str, context: dict) -> str:
    """Drop the editor's cursor marker, normalise line endings and trim."""
    text = text.replace(EDITOR_CURSOR_MARKER, "")
    return _LINE_ENDINGS_RE.sub("\n", text).strip()


def escape_text(text: str, context: dict) -> str:
    """Escape everything that is not a placeholder token."""
    return escape_html(text)
