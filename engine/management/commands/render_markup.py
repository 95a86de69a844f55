"""
Management command to render forum markup to preview HTML.

Reads markup from a file (or stdin) and writes the rendered HTML to stdout.
Useful for checking how a post will look without opening the editor.
"""

import sys

from django.core.management.base import BaseCommand, CommandError

from engine.markup.renderer import MarkupOptions, render_sync


class Command(BaseCommand):
    help = 'Render forum markup (BBCode + Markdown) to preview HTML'

    def add_arguments(self, parser):
        parser.add_argument(
            'path',
            nargs='?',
            help='File with the markup to render (default: read stdin)',
        )
        parser.add_argument(
            '--bold-color',
            type=str,
            help='Bold color token for the preview container, e.g. #c9a227',
        )
        parser.add_argument(
            '--font-size',
            type=int,
            help='Font size in pixels for the preview container',
        )

    def handle(self, *args, **options):
        path = options.get('path')
        bold_color = options.get('bold_color')
        font_size = options.get('font_size')

        if path:
            try:
                with open(path, encoding='utf-8') as fh:
                    markup = fh.read()
            except OSError as e:
                raise CommandError(f'Could not read {path}: {e}')
        else:
            markup = sys.stdin.read()

        html = render_sync(markup, MarkupOptions(bold_color=bold_color, font_size=font_size))
        self.stdout.write(html)
