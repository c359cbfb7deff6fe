"""
Tests for the HTTP layer and the DuckDuckGo resolver, with cloudscraper mocked.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest

from bga_geek.errors import HttpFailure, NetworkFailure
from bga_geek.scrape import http, search
from bga_geek.scrape.http import fetch_page, get_text
from bga_geek.scrape.policy import FetchPolicy
from bga_geek.scrape.search import catalog_url_from_text, resolve_catalog_url, search_url_for


def _scraper(status=200, text="", exc=None):
    scraper = MagicMock()
    scraper.__enter__.return_value = scraper
    scraper.__exit__.return_value = False
    if exc is not None:
        scraper.get.side_effect = exc
    else:
        scraper.get.return_value = SimpleNamespace(status_code=status, text=text)
    return scraper


@pytest.fixture
def patch_scraper(monkeypatch):
    def _patch(scraper):
        monkeypatch.setattr(http.cloudscraper, "create_scraper", lambda **kw: scraper)
        return scraper

    return _patch


class TestGetText:
    def test_returns_status_and_body(self, patch_scraper):
        scraper = patch_scraper(_scraper(404, "gone"))
        policy = FetchPolicy(user_agent="test-agent", timeout_s=5)

        assert get_text("https://example.test/x", policy=policy) == (404, "gone")
        scraper.get.assert_called_once_with(
            "https://example.test/x", headers={"User-Agent": "test-agent"}, timeout=5
        )

    def test_transport_error_is_network_failure(self, patch_scraper):
        scraper = patch_scraper(_scraper(exc=ConnectionError("dns down")))
        with pytest.raises(NetworkFailure) as err:
            get_text("https://example.test/x")
        assert not isinstance(err.value, HttpFailure)
        assert "dns down" in err.value.reason
        scraper.__exit__.assert_called_once()

    def test_session_is_closed(self, patch_scraper):
        scraper = patch_scraper(_scraper(200, "ok"))
        get_text("https://example.test/x")
        scraper.__enter__.assert_called_once()
        scraper.__exit__.assert_called_once()


class TestFetchPage:
    @pytest.mark.asyncio
    async def test_200_returns_body(self, patch_scraper):
        patch_scraper(_scraper(200, "<html>ok</html>"))
        assert await fetch_page("https://boardgamegeek.com/boardgame/13") == "<html>ok</html>"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [201, 301, 404, 429, 500])
    async def test_non_200_is_http_failure(self, patch_scraper, status):
        patch_scraper(_scraper(status, "nope"))
        with pytest.raises(HttpFailure) as err:
            await fetch_page("https://boardgamegeek.com/boardgame/13")
        assert err.value.status == status


class TestCatalogUrlFromText:
    def test_first_match_wins(self):
        body = (
            '<a class="result__url" href="//duckduckgo.com/l/?uddg=x">boardgamegeek.com/boardgame/13/catan</a>'
            "<a>www.boardgamegeek.com/boardgame/278/catan-card-game</a>"
        )
        assert catalog_url_from_text(body) == "https://boardgamegeek.com/boardgame/13"

    def test_no_match(self):
        assert catalog_url_from_text("boardgamegeek.com/boardgamefamily/3") is None
        assert catalog_url_from_text("") is None


class TestResolveCatalogUrl:
    def test_search_url_is_site_scoped(self):
        url = search_url_for("Ticket to Ride")
        parsed = urlparse(url)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://html.duckduckgo.com/html/"
        assert parse_qs(parsed.query)["q"] == ["site:boardgamegeek.com/boardgame Ticket to Ride"]

    @pytest.mark.asyncio
    async def test_resolves_from_raw_body(self, monkeypatch):
        seen = []

        async def fake_fetch_raw(url, *, policy):
            seen.append(url)
            return 200, "<div>boardgamegeek.com/boardgame/230802/azul</div>"

        monkeypatch.setattr(search, "fetch_raw", fake_fetch_raw)
        assert await resolve_catalog_url("Azul") == "https://boardgamegeek.com/boardgame/230802"
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_scans_body_whatever_the_status(self, monkeypatch):
        async def fake_fetch_raw(url, *, policy):
            return 202, "boardgamegeek.com/boardgame/9209"

        monkeypatch.setattr(search, "fetch_raw", fake_fetch_raw)
        assert await resolve_catalog_url("Ticket to Ride") == "https://boardgamegeek.com/boardgame/9209"

    @pytest.mark.asyncio
    async def test_no_match_is_none(self, monkeypatch):
        async def fake_fetch_raw(url, *, policy):
            return 200, "<div>No results.</div>"

        monkeypatch.setattr(search, "fetch_raw", fake_fetch_raw)
        assert await resolve_catalog_url("Unknown Game") is None

    @pytest.mark.asyncio
    async def test_network_failure_is_none(self, monkeypatch):
        async def fake_fetch_raw(url, *, policy):
            raise NetworkFailure(url, "timeout")

        monkeypatch.setattr(search, "fetch_raw", fake_fetch_raw)
        assert await resolve_catalog_url("Azul") is None
