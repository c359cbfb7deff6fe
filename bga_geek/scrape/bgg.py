# bga_geek/scrape/bgg.py
from __future__ import annotations

import json
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from bga_geek.config import NOT_RANKED, OVERALL_RANK_OBJECT_ID, PRELOAD_RE
from bga_geek.errors import ParseFailure
from bga_geek.models import BggStats
from bga_geek.utils_debug import dbg


_VOTES_RE = re.compile(r"\s*(\d+)")


def load_preload(html: str) -> dict:
    """
    Return the GEEK.geekitemPreload object embedded in a BGG game page.

    The page is never parsed as a DOM; the blob is cut out of the raw text
    up to the next "GEEK" statement and decoded as JSON.
    """
    m = PRELOAD_RE.search(html or "")
    if not m:
        raise ParseFailure("geekitemPreload not found")
    try:
        data = json.loads(m.group(1))
    except json.JSONDecodeError as exc:
        raise ParseFailure(f"geekitemPreload is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseFailure("geekitemPreload is not an object")
    return data


def _fixed(value: Any, digits: int) -> str:
    """
    "7.345" -> "7.3" (digits=1). Missing, zero or non-numeric -> "?".
    """
    if not value or isinstance(value, bool):
        return "?"
    try:
        f = float(value)
    except (TypeError, ValueError):
        return "?"
    if not f or math.isnan(f) or math.isinf(f):
        return "?"
    # ties round up; built from the float so the binary value is what rounds
    return str(Decimal(f).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def _is_overall(entry: dict) -> bool:
    return str(entry.get("rankobjectid", "")).strip() == str(OVERALL_RANK_OBJECT_ID)


def _overall_rank(rankinfo: Any) -> str:
    if not isinstance(rankinfo, list) or not rankinfo:
        return "-"

    entries = [r for r in rankinfo if isinstance(r, dict)]
    chosen = next((r for r in entries if _is_overall(r)), None)
    if chosen is None:
        chosen = rankinfo[0] if isinstance(rankinfo[0], dict) else None
    if chosen is None:
        return "-"

    rank = str(chosen.get("rank") or "").strip()
    if not rank or rank == NOT_RANKED or not rank.isdigit() or int(rank) <= 0:
        return "-"
    return rank


def _votes(value: Any) -> int:
    # leading digits only, anything else counts as no votes
    m = _VOTES_RE.match(str(value or ""))
    return int(m.group(1)) if m else 0


def _best_from_poll(userplayers: Any) -> str:
    """
    userplayers: {"1": [{"value": "Best", "numvotes": "12"}, ...], "2": [...]}

    The player count whose "Best" option has the strictly highest positive vote
    count wins; the first one seen keeps a tie.
    """
    if not isinstance(userplayers, dict):
        return ""

    best = ""
    max_votes = -1
    for label, options in userplayers.items():
        if not isinstance(options, list):
            continue
        best_opt = next(
            (o for o in options if isinstance(o, dict) and o.get("value") == "Best"),
            None,
        )
        if best_opt is None:
            continue
        v = _votes(best_opt.get("numvotes"))
        if v > max_votes and v > 0:
            max_votes = v
            best = str(label)
    return best


def _format_range(lo: Any, hi: Any) -> str:
    if not lo or not hi:
        return ""
    return str(lo) if str(lo) == str(hi) else f"{lo}-{hi}"


def _best_from_summary(userplayers: Any) -> str:
    # Current pages also ship a digest: {"best": [{"min": 4, "max": 4}], ...}
    if not isinstance(userplayers, dict):
        return ""
    ranges = userplayers.get("best")
    if not isinstance(ranges, list) or not ranges or not isinstance(ranges[0], dict):
        return ""
    return _format_range(ranges[0].get("min"), ranges[0].get("max"))


def _best_players(item: dict) -> str:
    polls = item.get("polls")
    userplayers = polls.get("userplayers") if isinstance(polls, dict) else None

    best = _best_from_poll(userplayers) or _best_from_summary(userplayers)
    if best:
        return best
    return _format_range(item.get("minplayers"), item.get("maxplayers")) or "?"


def stats_from_preload(data: dict) -> BggStats:
    item = data["item"]
    stats = item.get("stats") or {}

    return BggStats(
        score=_fixed(stats.get("average"), 1),
        rank=_overall_rank(item.get("rankinfo")),
        weight=_fixed(stats.get("avgweight"), 2),
        best_players=_best_players(item),
    )


def extract_stats(html: str) -> Optional[BggStats]:
    """
    Parse a BGG game page into BggStats, or None.

    BGG's page payload is not a stable contract, so every failure while
    locating, decoding or reading the blob maps to None.
    """
    try:
        return stats_from_preload(load_preload(html))
    except Exception as exc:
        dbg("bgg.parse_failed", error=f"{exc.__class__.__name__}: {exc}")
        return None
