# engine/markup/transformers/references.py
"""
Block and reference resolution: headers, links, images, anchors, flags,
emoji, centering, user mentions and bare URL autolinking.

All patterns run on escaped text, so attribute values built from captured
groups cannot break out of their quotes. Link and image targets are also
checked against the configured URL schemes; a tag with an unsafe target is
left as literal text.
"""

import logging
import re

from ..utils import add_pending_block, is_safe_url, sub_outside_anchors

logger = logging.getLogger(__name__)

HEADERS = [
    (re.compile(r"^# (.+)$", re.MULTILINE), r"\n\n<h2>\1</h2>\n\n"),
    (re.compile(r"^## (.+)$", re.MULTILINE), r"\n\n<h3>\1</h3>\n\n"),
    (re.compile(r"^### (.+)$", re.MULTILINE), r"\n\n<h4>\1</h4>\n\n"),
    (re.compile(r"^#### (.+)$", re.MULTILINE), r"\n\n<h5>\1</h5>\n\n"),
    (re.compile(r"\[h1\]([\s\S]*?)\[/h1\]", re.IGNORECASE), r"<h2>\1</h2>\n\n"),
    (re.compile(r"\[h2\]([\s\S]*?)\[/h2\]", re.IGNORECASE), r"<h3>\1</h3>\n\n"),
    (re.compile(r"\[bar\]([\s\S]*?)\[/bar\]", re.IGNORECASE), r'<h3 class="bar">\1</h3>\n\n'),
]

URL_WITH_TEXT_RE = re.compile(r"\[url=([^\]]+)\]([\s\S]*?)\[/url\]", re.IGNORECASE)
URL_RE = re.compile(r"\[url\]([\s\S]*?)\[/url\]", re.IGNORECASE)
IMG_RE = re.compile(r"\[img\]([\s\S]*?)\[/img\]", re.IGNORECASE)
MARKDOWN_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")

ANCHOR_LINK_RE = re.compile(r"\[ancla=([^\]]+)\]([\s\S]*?)\[/ancla\]", re.IGNORECASE)
ANCHOR_TARGET_RE = re.compile(r"\[ancla\]([^\[]+)\[/ancla\]", re.IGNORECASE)

FLAG_RE = re.compile(r"\[flag\]([a-zA-Z]{2})\[/flag\]", re.IGNORECASE)
FLAG_CODE_RE = re.compile(r"^[a-z]{2}$")
REGIONAL_INDICATOR_A = 0x1F1E6

EMOJI_RE = re.compile(r":([\w+\-]+):")

CENTER_RE = re.compile(r"\[center\]([\s\S]*?)\[/center\]", re.IGNORECASE)

# Forum usernames are limited to 13 characters
MENTION_RE = re.compile(r"(^|[\s>(])@([a-zA-Z0-9_\-]{1,13})\b")
AUTOLINK_RE = re.compile(r"(^|[\s>(])(https?://[a-zA-Z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+)")


def headers(text: str, context: dict) -> str:
    for pattern, replacement in HEADERS:
        text = pattern.sub(replacement, text)
    return text


def links_and_images(text: str, context: dict) -> str:
    protocols = context["config"]["ALLOWED_PROTOCOLS"]

    def link_with_text(match):
        url, label = match.group(1), match.group(2)
        if not is_safe_url(url, protocols):
            return match.group(0)
        return f'<a href="{url}" target="_blank">{label}</a>'

    def bare_link(match):
        url = match.group(1)
        if not is_safe_url(url, protocols):
            return match.group(0)
        return f'<a href="{url}" target="_blank">{url}</a>'

    def image(match):
        src = match.group(1)
        if not is_safe_url(src, protocols):
            return match.group(0)
        return f'<img src="{src}" />'

    def markdown_image(match):
        alt, src = match.group(1), match.group(2)
        if not is_safe_url(src, protocols):
            return match.group(0)
        return f'<img src="{src}" alt="{alt}" />'

    text = URL_WITH_TEXT_RE.sub(link_with_text, text)
    text = URL_RE.sub(bare_link, text)
    text = IMG_RE.sub(image, text)
    return MARKDOWN_IMAGE_RE.sub(markdown_image, text)


def anchors(text: str, context: dict) -> str:
    """``[ancla=id]text[/ancla]`` links to an ``[ancla]id[/ancla]`` target."""
    text = ANCHOR_LINK_RE.sub(r'<a href="#\1" class="ancla-link">\2</a>', text)
    return ANCHOR_TARGET_RE.sub(r'<a class="bar-offset" name="\1"></a>', text)


def country_flag_image(code: str, flag_image_url: str) -> str:
    """
    Convert a two-letter country code to the forum's flag emoji image.

    Each letter maps to a Unicode regional indicator symbol (a → U+1F1E6 ...
    z → U+1F1FF). Anything but two ASCII letters is returned as literal text.
    """
    if not FLAG_CODE_RE.match(code):
        return f"[flag]{code}[/flag]"

    first, second = (format(REGIONAL_INDICATOR_A + ord(char) - ord("a"), "x") for char in code)
    src = flag_image_url.format(first=first, second=second)
    return f'<img alt="{code}" class="emoji" draggable="false" src="{src}">'


def flags(text: str, context: dict) -> str:
    flag_image_url = context["config"]["FLAG_IMAGE_URL"]
    return FLAG_RE.sub(lambda m: country_flag_image(m.group(1).lower(), flag_image_url), text)


async def resolve_emoji(token: str, registry, site_url: str) -> str:
    emoji_map = await registry.get_map()
    emoji = emoji_map.get(token)
    if emoji is None:
        return token
    return (
        f'<img alt="{token}" class="{emoji.css_class}" draggable="false" '
        f'src="{site_url}{emoji.url}">'
    )


def emojis(text: str, context: dict) -> str:
    """
    Replace ``:code:`` tokens with placeholders resolved against the emoji map.

    The map itself is only awaited by the placeholder restorer; unknown codes
    are restored verbatim.
    """
    registry = context["emoji_registry"]
    site_url = context["config"]["SITE_URL"]

    def replace_emoji(match):
        token = match.group(0)
        return add_pending_block(context, "EMOJI", resolve_emoji(token, registry, site_url), token)

    return EMOJI_RE.sub(replace_emoji, text)


def center(text: str, context: dict) -> str:
    return CENTER_RE.sub(r'<div class="center"><p>\1</p></div>\n\n', text)


def mentions(text: str, context: dict) -> str:
    mention_url = context["config"]["MENTION_URL"]

    def replace_mention(match):
        prefix, username = match.group(1), match.group(2)
        href = mention_url.format(username=username)
        return f'{prefix}<a href="{href}" target="_blank">@{username}</a>'

    return sub_outside_anchors(MENTION_RE, replace_mention, text)


def autolinks(text: str, context: dict) -> str:
    """Link bare http(s) URLs that are not already inside a link."""
    return sub_outside_anchors(AUTOLINK_RE, r'\1<a href="\2" target="_blank">\2</a>', text)
