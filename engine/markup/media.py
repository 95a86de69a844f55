# engine/markup/media.py
"""
Media card rendering for ``[media]url[/media]`` blocks.

URLs are classified by shape:
- YouTube: lite embed with the video thumbnail
- Twitter / X: status card naming the author
- Instagram: post/reel card
- Steam store: placeholder hydrated later by the preview host
- Anything else: generic link card showing the domain

The URL comes straight from author input, so it is escaped before insertion.
"""

import re
from urllib.parse import urlparse

from .utils import escape_html

YOUTUBE_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([\w-]{11})")
TWITTER_RE = re.compile(r"(?:twitter\.com|x\.com)/(?:#!/)?(\w+)/status(?:es)?/(\d+)")
INSTAGRAM_RE = re.compile(r"(?:instagram\.com|instagr\.am)/(?:p|reel)/([\w-]{5,})")
STEAM_RE = re.compile(r"store\.steampowered\.com/app/(\d+)", re.IGNORECASE)

DEFAULT_DOMAIN_LABEL = "External link"

TWITTER_ICON = (
    '<svg width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" '
    'stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<path d="M4 4l11.733 16h4.267l-11.733 -16z" />'
    '<path d="M4 20l6.768 -6.768m2.46 -2.46l6.772 -6.772" /></svg>'
)
INSTAGRAM_ICON = (
    '<svg width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" '
    'stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<rect x="2" y="2" width="20" height="20" rx="5" ry="5"></rect>'
    '<path d="M16 11.37A4 4 0 1 1 12.63 8 4 4 0 0 1 16 11.37z"></path>'
    '<line x1="17.5" y1="6.5" x2="17.51" y2="6.5"></line></svg>'
)
LINK_ICON = (
    '<svg width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" '
    'stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<path d="M10 13a5 5 0 0 0 7.54.54l3-3a5 5 0 0 0-7.07-7.07l-1.72 1.71"></path>'
    '<path d="M14 11a5 5 0 0 0-7.54-.54l-3 3a5 5 0 0 0 7.07 7.07l1.71-1.71"></path></svg>'
)
SPINNER_ICON = (
    '<svg width="20" height="20" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">'
    '<circle cx="12" cy="12" r="10" stroke-opacity="0.25" />'
    '<path d="M12 2a10 10 0 0 1 10 10" stroke-linecap="round">'
    '<animateTransform attributeName="transform" type="rotate" from="0 12 12" to="360 12 12" '
    'dur="1s" repeatCount="indefinite" /></path></svg>'
)


def _generic_card(url: str, domain: str, footer: str, icon: str = LINK_ICON, extra_class: str = "") -> str:
    card_class = f"embed-placeholder generic-card {extra_class}".strip()
    return (
        f'<div class="{card_class}">'
        f'<div class="generic-icon">{icon}</div>'
        '<div class="generic-content">'
        f'<div class="generic-domain">{escape_html(domain)}</div>'
        f'<a href="{url}" target="_blank" class="generic-link">{url}</a>'
        f'<div class="generic-footer">{escape_html(footer)}</div>'
        "</div></div>"
    )


def extract_domain(url: str) -> str:
    """
    Return the capitalised hostname of ``url`` without ``www.``.

    Falls back to ``DEFAULT_DOMAIN_LABEL`` for URLs with no usable host.
    """
    candidate = url if url.startswith("http") else f"https://{url}"
    try:
        hostname = urlparse(candidate).hostname
    except ValueError:
        hostname = None
    if not hostname or " " in candidate:
        return DEFAULT_DOMAIN_LABEL
    domain = hostname.replace("www.", "", 1)
    return domain[:1].upper() + domain[1:]


def render_media(url: str) -> str:
    """Render the card for one ``[media]`` URL."""
    clean_url = url.strip()
    safe_url = escape_html(clean_url)

    # 1. YouTube
    match = YOUTUBE_RE.search(clean_url)
    if match:
        video_id = match.group(1)
        return (
            '<div data-s9e-mediaembed="youtube" class="embed r16-9 yt">'
            '<div class="youtube_lite">'
            f'<a class="preinit" data-youtube="{video_id}" '
            f'style="background-image:url(https://i.ytimg.com/vi/{video_id}/hqdefault.jpg)" '
            f'href="https://www.youtube.com/watch?v={video_id}" target="_blank"></a>'
            "</div></div>"
        )

    # 2. Twitter / X
    match = TWITTER_RE.search(clean_url)
    if match:
        return _generic_card(
            safe_url, "Twitter / X", f"Tweet by @{match.group(1)}", TWITTER_ICON, "twitter-card"
        )

    # 3. Instagram
    if INSTAGRAM_RE.search(clean_url):
        return _generic_card(
            safe_url, "Instagram", "View post on Instagram", INSTAGRAM_ICON, "instagram-card"
        )

    # 4. Steam store, hydrated into a game card by the preview host
    match = STEAM_RE.search(clean_url)
    if match:
        return (
            f'<div class="steam-embed-placeholder" data-steam-appid="{match.group(1)}">'
            f'<div class="steam-card-loading">{SPINNER_ICON}'
            "<span>Loading Steam game...</span></div></div>"
        )

    # 5. Everything else
    return _generic_card(
        safe_url, extract_domain(clean_url), "Embedded content not available in preview"
    )
