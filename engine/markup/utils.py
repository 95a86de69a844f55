"""Helpers shared by the markup pipeline stages."""

from __future__ import annotations

import html
import re
import secrets
from dataclasses import dataclass
from typing import Awaitable, Iterable, List, Union
from urllib.parse import urlparse

from django.utils.html import escape

_PENDING_KEY = "pending_blocks"
_NONCE_KEY = "placeholder_nonce"

# Kinds whose placeholder marks an opaque region extracted before escaping
REGION_KINDS = ("CODE_BLOCK", "MEDIA_BLOCK", "INLINE_CODE")

_ANCHOR_RE = re.compile(r"(<a\b[^>]*>.*?</a>)", re.IGNORECASE | re.DOTALL)


@dataclass
class PendingBlock:
    """A placeholder token and the HTML that replaces it once resolved."""

    placeholder: str
    html: Union[str, Awaitable[str]]
    fallback: str = ""


def escape_html(text: str) -> str:
    """Escape text for HTML, returning a plain ``str``."""
    return str(escape(text))


def escape_code(code: str) -> str:
    """
    Escape text taken verbatim from a protected region.

    Entities typed by the author are decoded first so already-escaped input is
    not escaped a second time.
    """
    return escape_html(html.unescape(code))


def get_pending_blocks(context: dict) -> List[PendingBlock]:
    return context.setdefault(_PENDING_KEY, [])


def add_pending_block(
    context: dict,
    kind: str,
    resolver: Union[str, Awaitable[str]],
    fallback: str = "",
) -> str:
    """Register a resolver under a fresh placeholder token and return the token."""
    blocks = get_pending_blocks(context)
    nonce = context.get(_NONCE_KEY)
    if nonce is None:
        nonce = context[_NONCE_KEY] = secrets.token_hex(4)
    placeholder = f"__{kind}_{nonce}_{len(blocks)}__"
    blocks.append(PendingBlock(placeholder, resolver, fallback))
    return placeholder


def is_region_placeholder(text: str, context: dict) -> bool:
    """Whether ``text`` starts with a code, media or inline-code token."""
    nonce = context.get(_NONCE_KEY)
    if nonce is None:
        return False
    return text.startswith(tuple(f"__{kind}_{nonce}_" for kind in REGION_KINDS))


def is_safe_url(url: str, allowed_protocols: Iterable[str]) -> bool:
    """
    Check a link target against the allowed URL schemes.

    Relative URLs (no scheme) are accepted. ``url`` may be HTML-escaped.
    """
    candidate = html.unescape(url).strip()
    if not candidate:
        return False
    try:
        scheme = urlparse(candidate).scheme
    except ValueError:
        return False
    return not scheme or scheme.lower() in set(allowed_protocols)


def sub_outside_anchors(pattern: re.Pattern, repl, text: str) -> str:
    """Apply ``pattern.sub`` to the parts of ``text`` not inside ``<a>…</a>``."""
    parts = _ANCHOR_RE.split(text)
    for index in range(0, len(parts), 2):
        parts[index] = pattern.sub(repl, parts[index])
    return "".join(parts)
