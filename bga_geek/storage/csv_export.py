# bga_geek/storage/csv_export.py
from __future__ import annotations

from pathlib import Path

import pandas as pd

from bga_geek.config import CSV_COLUMNS, DATA_PREFIX, MAP_PREFIX
from bga_geek.models import BggStats
from bga_geek.storage.ttl_cache import TTLCache
from bga_geek.utils import ms_to_iso


def stats_frame(cache: TTLCache) -> pd.DataFrame:
    """
    One row per cached stats record, joined with its BGG url mapping.

    Stale records are included; stored_at shows how old they are.
    """
    urls = {gid: str(entry.value) for gid, entry in cache.entries(MAP_PREFIX)}

    rows = []
    for gid, entry in cache.entries(DATA_PREFIX):
        stats = BggStats.from_dict(entry.value)
        if stats is None:
            continue
        rows.append(
            {
                "game_id": gid,
                "bgg_url": urls.get(gid, ""),
                "score": stats.score,
                "rank": stats.rank,
                "best_players": stats.best_players,
                "weight": stats.weight,
                "stored_at": ms_to_iso(entry.stored_at_ms),
            }
        )

    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def write_stats_csv(path: Path, cache: TTLCache) -> int:
    """
    Write the stats cache to CSV in a stable column order. Returns row count.
    """
    df = stats_frame(cache)
    df.to_csv(path, index=False)
    return len(df)
