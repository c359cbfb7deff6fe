# bga_geek/scrape/http.py
from __future__ import annotations

import asyncio
from functools import partial
from typing import Tuple

import cloudscraper

from bga_geek.errors import HttpFailure, NetworkFailure
from bga_geek.scrape.policy import FetchPolicy
from bga_geek.utils_debug import dbg


def get_text(url: str, *, policy: FetchPolicy = FetchPolicy()) -> Tuple[int, str]:
    """
    Blocking GET. Returns (status, body) for any HTTP response.

    - cloudscraper for Cloudflare-fronted sites
    - single attempt, no retry
    - transport errors (DNS, timeout, challenge) raise NetworkFailure
    """
    try:
        with cloudscraper.create_scraper(
            browser={"browser": "chrome", "platform": "linux", "mobile": False}
        ) as scraper:
            resp = scraper.get(url, headers=policy.headers(), timeout=policy.timeout_s)
    except Exception as exc:
        dbg("http.error", url=url, error=str(exc))
        raise NetworkFailure(url, str(exc) or exc.__class__.__name__) from exc

    dbg("http.get", url=url, status=resp.status_code, size=len(resp.text or ""))
    return resp.status_code, resp.text or ""


async def fetch_raw(url: str, *, policy: FetchPolicy = FetchPolicy()) -> Tuple[int, str]:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(get_text, url, policy=policy))


async def fetch_page(url: str, *, policy: FetchPolicy = FetchPolicy()) -> str:
    """
    Body of url on HTTP 200, HttpFailure(status) otherwise.
    """
    status, text = await fetch_raw(url, policy=policy)
    if status != 200:
        raise HttpFailure(url, status)
    return text
