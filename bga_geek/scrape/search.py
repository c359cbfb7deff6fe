# bga_geek/scrape/search.py
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from bga_geek.config import CATALOG_URL_RE, CATALOG_URL_TEMPLATE
from bga_geek.errors import NetworkFailure
from bga_geek.scrape.http import fetch_raw
from bga_geek.scrape.policy import FetchPolicy
from bga_geek.utils_debug import dbg


def search_url_for(name: str, *, policy: FetchPolicy = FetchPolicy()) -> str:
    return f"{policy.search_url}?q={quote(policy.search_query(name), safe='')}"


def catalog_url_from_text(text: str) -> Optional[str]:
    """
    First boardgamegeek.com/boardgame/<digits> occurrence in raw text.

    Result markup changes often, the BGG url shape does not, so this scans
    the body as text instead of parsing it.
    """
    m = CATALOG_URL_RE.search(text or "")
    if not m:
        return None
    return CATALOG_URL_TEMPLATE.format(id=m.group(1))


async def resolve_catalog_url(name: str, *, policy: FetchPolicy = FetchPolicy()) -> Optional[str]:
    """
    Resolve a game name to its BGG url via DuckDuckGo's HTML endpoint.

    Returns None when nothing matches or the search request fails.
    """
    url = search_url_for(name, policy=policy)
    try:
        status, text = await fetch_raw(url, policy=policy)
    except NetworkFailure as exc:
        dbg("search.error", query=name, error=str(exc))
        return None

    found = catalog_url_from_text(text)
    dbg("search", query=name, status=status, found=found)
    return found
