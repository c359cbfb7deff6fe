# bga_geek/render.py
from __future__ import annotations

from typing import Any

from bga_geek.models import BggStats


def format_badge(stats: BggStats) -> str:
    """
    "7.3 | #123 | 2-5 | 2.11"  (score | rank | best players | weight)
    """
    return f"{stats.score} | #{stats.rank} | {stats.best_players} | {stats.weight}"


def print_badge(target: Any, stats: BggStats, url: str, mode: str) -> None:
    """
    CLI render sink.
    """
    if mode == "panel":
        print(f"{target}")
        print(f"  Score  {stats.score}")
        print(f"  Rank   #{stats.rank}")
        print(f"  Best   {stats.best_players}")
        print(f"  Weight {stats.weight}")
        print(f"  {url}")
        return

    print(f"{target}: {format_badge(stats)}  {url}")
