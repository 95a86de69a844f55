# engine/templatetags/markup_tags.py

from django import template
from django.utils.safestring import mark_safe

from engine.markup.renderer import MarkupOptions, render_sync

register = template.Library()


@register.filter(name="forum_markup")
def forum_markup_filter(value):
    return mark_safe(render_sync(value))


@register.simple_tag
def forum_markup_preview(value, bold_color=None, font_size=None):
    """Render markup wrapped in the preview container with cosmetic options"""
    options = MarkupOptions(bold_color=bold_color, font_size=font_size)
    return mark_safe(render_sync(value, options))
