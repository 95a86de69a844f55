from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_MARKUP_CONFIG = {
    # Base for emoji image paths coming from the emoji loader
    "SITE_URL": "https://www.mediavida.com",
    # Flag images are named after their two regional indicator code points
    "FLAG_IMAGE_URL": "https://www.mediavida.com/img/emoji/u/{first}-{second}.png",
    "MENTION_URL": "/id/{username}",
    # JSON file read by the default emoji loader (None disables emoji images)
    "EMOJI_FILE": None,
    "ALLOWED_PROTOCOLS": ["http", "https", "mailto", "tel"],
}


def get_markup_config():
    """
    Configuration for the forum markup renderer.

    Values come from ``settings.FORUM_MARKUP`` merged over
    ``DEFAULT_MARKUP_CONFIG``. The renderer is also usable without configured
    Django settings, in which case the defaults apply unchanged.
    """
    try:
        overrides = getattr(settings, "FORUM_MARKUP", None) or {}
    except ImproperlyConfigured:
        overrides = {}

    config = dict(DEFAULT_MARKUP_CONFIG)
    config.update(overrides)
    return config
