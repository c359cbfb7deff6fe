# bga_geek/utils.py
from __future__ import annotations

import re
import time
from datetime import datetime, timezone
from typing import Any
from urllib.parse import parse_qs, urlparse

from .config import TITLE_PREFIX_RE, TITLE_SITE_SUFFIX, TITLE_SUFFIX_RE


def now_ms() -> int:
    return int(time.time() * 1000)


def ms_to_iso(ms: Any) -> str:
    """
    1767275000000 -> "2026-01-01T13:43:20Z"
    """
    try:
        dt = datetime.fromtimestamp(int(ms) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return ""
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def clean_title(raw: str) -> str:
    """
    Strip BGA's localized "Play X online" decoration.

    "Play Catan online"              -> "Catan"
    "Spiele Carcassonne im Browser"  -> "Carcassonne"
    "Azul • Board Game Arena"        -> "Azul"
    """
    s = (raw or "").strip()
    s = TITLE_PREFIX_RE.sub("", s)
    s = TITLE_SUFFIX_RE.sub("", s)
    s = s.removesuffix(TITLE_SITE_SUFFIX)
    return s.strip()


def name_from_game_id(game_id: str) -> str:
    """
    Fallback display name when a card has no readable title.

    "sevenwonders" -> "sevenwonders", "sevenWonders2" -> "seven Wonders"
    """
    s = re.sub(r"([A-Z])", r" \1", game_id or "")
    s = re.sub(r"[0-9]", " ", s)
    return re.sub(r"\s+", " ", s).strip()


def game_id_from_url(url: str) -> str:
    """
    BGA pages carry the game id in the query: /gamepanel?game=azul
    """
    qs = parse_qs(urlparse(url or "").query)
    vals = qs.get("game") or []
    return vals[0].strip() if vals else ""
