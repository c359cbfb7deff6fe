# bga_geek/cli.py
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Optional

from bga_geek.config import DEFAULT_STORE_FILE, REQUEST_DELAY_S
from bga_geek.models import Task
from bga_geek.render import print_badge
from bga_geek.scan.bga import scan_page
from bga_geek.scrape.orchestrator import (
    StatsQueue,
    reset_mapping_cache,
    reset_stats_cache,
    run_tasks,
)
from bga_geek.scrape.policy import FetchPolicy
from bga_geek.storage.csv_export import write_stats_csv
from bga_geek.storage.kv_store import JsonFileStore
from bga_geek.storage.ttl_cache import TTLCache
from bga_geek.ui.app import GeekApp
from bga_geek.utils import name_from_game_id
from bga_geek.utils_debug import console_log


def read_games(games_file: Path) -> list[Task]:
    """
    Supports:
      - game_id
      - game_id|name
    Returns one list-mode Task per game id (first occurrence wins).
    """
    if not games_file.exists():
        raise FileNotFoundError(f"Games file not found: {games_file}")

    tasks: list[Task] = []
    seen: set[str] = set()
    for line in games_file.read_text(encoding="utf-8", errors="replace").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        gid = line
        name = ""
        if "|" in line:
            gid, name = line.split("|", 1)
            gid = gid.strip()
            name = name.strip()

        if not gid or gid in seen:
            continue
        seen.add(gid)

        tasks.append(Task(external_id=gid, raw_name=name or name_from_game_id(gid), target=gid))

    return tasks


def read_pages(html_files: list[str], page_url: str = "") -> list[Task]:
    tasks: list[Task] = []
    for f in html_files:
        p = Path(f).expanduser()
        if not p.exists():
            raise FileNotFoundError(f"HTML file not found: {p}")
        tasks.extend(scan_page(p.read_text(encoding="utf-8", errors="replace"), page_url))
    return tasks


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Look up BoardGameGeek stats for Board Game Arena games.")
    p.add_argument("--games", help="File with one game per line: game_id or game_id|name")
    p.add_argument("--html", action="append", default=[], help="Saved BGA gamelist/gamepanel page (repeatable)")
    p.add_argument("--page-url", default="", help="Original URL of the --html page(s), e.g. .../gamepanel?game=azul")
    p.add_argument("--store", default=str(DEFAULT_STORE_FILE), help=f"Cache file (default: {DEFAULT_STORE_FILE})")
    p.add_argument("--delay", type=float, default=REQUEST_DELAY_S, help="Seconds between lookups (default: 3)")
    p.add_argument("--reset-ids", action="store_true", help="Forget all BGA -> BGG url mappings")
    p.add_argument("--reset-stats", action="store_true", help="Forget all cached BGG stats")
    p.add_argument("--export", default="", help="Write cached stats to this CSV file")
    p.add_argument("--ui", action="store_true", help="Launch Textual UI")
    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)

    cache = TTLCache(JsonFileStore(Path(args.store).expanduser().resolve()))
    policy = FetchPolicy(request_delay_s=max(0.0, args.delay))

    if args.reset_ids:
        reset_mapping_cache(cache)
    if args.reset_stats:
        reset_stats_cache(cache)

    tasks: list[Task] = []
    if args.games:
        tasks.extend(read_games(Path(args.games).expanduser().resolve()))
    if args.html:
        tasks.extend(read_pages(args.html, args.page_url))

    if args.ui:
        # UI mode
        app = GeekApp(cache=cache, tasks=tasks, policy=policy)
        app.run()
        return

    if tasks:
        queue = StatsQueue(cache, render=print_badge, log=console_log, policy=policy)
        stats = asyncio.run(run_tasks(queue, tasks))
        console_log(f"Done: {stats.processed}/{stats.detected}", "success")

    if args.export:
        out = Path(args.export).expanduser().resolve()
        n = write_stats_csv(out, cache)
        console_log(f"Wrote {n} rows to {out}", "info")


if __name__ == "__main__":
    main()
