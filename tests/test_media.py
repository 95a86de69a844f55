"""Tests for [media] cards."""

import pytest

from engine.markup.media import extract_domain, render_media


class TestExtractDomain:
    def test_strips_www_and_capitalises(self) -> None:
        assert extract_domain("https://www.amazon.es/dp/B0") == "Amazon.es"

    def test_scheme_is_optional(self) -> None:
        assert extract_domain("github.com/user/repo") == "Github.com"

    def test_malformed_url(self) -> None:
        assert extract_domain("not a url") == "External link"
        assert extract_domain("https://") == "External link"


class TestRenderMedia:
    def test_youtube(self) -> None:
        html = render_media("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
        assert 'data-youtube="dQw4w9WgXcQ"' in html
        assert "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg" in html
        assert 'class="embed r16-9 yt"' in html

    def test_youtube_short_link(self) -> None:
        assert 'data-youtube="dQw4w9WgXcQ"' in render_media("https://youtu.be/dQw4w9WgXcQ")

    def test_twitter(self) -> None:
        html = render_media("https://x.com/jack/status/20")
        assert "twitter-card" in html
        assert "Tweet by @jack" in html

    def test_instagram(self) -> None:
        html = render_media("https://www.instagram.com/p/CxYz123/")
        assert "instagram-card" in html
        assert "View post on Instagram" in html

    def test_steam(self) -> None:
        html = render_media("https://store.steampowered.com/app/620/Portal_2/")
        assert 'data-steam-appid="620"' in html
        assert "Loading Steam game..." in html

    def test_generic_card(self) -> None:
        html = render_media("https://www.amazon.es/dp/B0")
        assert '<div class="generic-domain">Amazon.es</div>' in html
        assert '<a href="https://www.amazon.es/dp/B0" target="_blank" class="generic-link">' in html
        assert "Embedded content not available in preview" in html

    def test_url_is_escaped(self) -> None:
        html = render_media('https://evil.example/"><script>x</script>')
        assert "<script>" not in html
        assert "&quot;&gt;&lt;script&gt;" in html


class TestMediaInPipeline:
    @pytest.mark.asyncio
    async def test_media_is_a_block(self, render_markup) -> None:
        html = await render_markup("look\n\n[media]https://youtu.be/dQw4w9WgXcQ[/media]\nnice")
        assert html.startswith("<p>look</p>\n<div data-s9e-mediaembed=\"youtube\"")
        assert html.endswith("<p>nice</p>")
        assert html.count('data-youtube="dQw4w9WgXcQ"') == 1

    @pytest.mark.asyncio
    async def test_media_url_is_not_autolinked(self, render_markup) -> None:
        html = await render_markup("[media]https://www.amazon.es/dp/B0[/media]")
        assert html.startswith('<div class="embed-placeholder generic-card">')
        assert html.count("<a ") == 1

    @pytest.mark.asyncio
    async def test_unsafe_scheme_stays_literal(self, render_markup) -> None:
        html = await render_markup("[media]javascript:alert(1)[/media]")
        assert html == "<p>[media]javascript:alert(1)[/media]</p>"

    @pytest.mark.asyncio
    async def test_scheme_less_url_is_carded(self, render_markup) -> None:
        html = await render_markup("[media]github.com/user/repo[/media]")
        assert '<div class="generic-domain">Github.com</div>' in html
