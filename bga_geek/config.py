# bga_geek/config.py
from __future__ import annotations

import os
import re
from pathlib import Path


# -----------------------------
# Cache namespaces / TTLs
# -----------------------------

MAP_PREFIX = "bgg_map_"
DATA_PREFIX = "bgg_data_"

DAY_MS = 24 * 60 * 60 * 1000

# BGA id -> BGG url rarely changes; ratings drift.
MAP_TTL_MS = 365 * DAY_MS
STATS_TTL_MS = 3 * DAY_MS


# -----------------------------
# Queue
# -----------------------------

REQUEST_DELAY_S = 3.0


# -----------------------------
# HTTP / scraping
# -----------------------------

UA = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

HTTP_TIMEOUT_S = 30

SEARCH_URL = "https://html.duckduckgo.com/html/"
SEARCH_SCOPE = "site:boardgamegeek.com/boardgame"

CATALOG_URL_RE = re.compile(r"boardgamegeek\.com/boardgame/(\d+)")
CATALOG_URL_TEMPLATE = "https://boardgamegeek.com/boardgame/{id}"


# -----------------------------
# BGG page extraction
# -----------------------------

PRELOAD_RE = re.compile(r"GEEK\.geekitemPreload\s*=\s*(\{.*?\})\s*;\s*\n\s*GEEK", re.S)

OVERALL_RANK_OBJECT_ID = 1
NOT_RANKED = "Not Ranked"


# -----------------------------
# BGA title cleaning
# -----------------------------

TITLE_PREFIX_RE = re.compile(r"^(Spiele|Play|Jugar|Jouer)\s+", re.I)
TITLE_SUFFIX_RE = re.compile(r"\s+(online|en ligne|im Browser).*$", re.I)
TITLE_SITE_SUFFIX = " • Board Game Arena"


# -----------------------------
# Storage
# -----------------------------

DEFAULT_STORE_FILE = Path(
    os.getenv("BGA_GEEK_STORE", "").strip() or Path.home() / ".bga_geek" / "cache.json"
)


# -----------------------------
# CSV export schema
# -----------------------------

CSV_COLUMNS = [
    "game_id",
    "bgg_url",
    "score",
    "rank",
    "best_players",
    "weight",
    "stored_at",
]
