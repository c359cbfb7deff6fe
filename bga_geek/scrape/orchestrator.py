# bga_geek/scrape/orchestrator.py
from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import replace
from functools import partial
from typing import Any, Awaitable, Callable, Deque, Iterable, Optional, Tuple

from ..config import DATA_PREFIX, MAP_PREFIX
from ..errors import HttpFailure, NetworkFailure, ResolutionNotFound
from ..models import BggStats, QueueStats, Task
from ..storage.ttl_cache import TTLCache
from ..utils import clean_title
from ..utils_debug import LogSink, console_log, dbg

from ..scrape.bgg import extract_stats
from ..scrape.http import fetch_page
from ..scrape.policy import FetchPolicy
from ..scrape.search import resolve_catalog_url


# (target, stats, bgg_url, mode)
RenderSink = Callable[[Any, BggStats, str, str], None]
StatusCB = Callable[[QueueStats], None]
Resolver = Callable[[str], Awaitable[Optional[str]]]
Fetcher = Callable[[str], Awaitable[str]]
Sleep = Callable[[float], Awaitable[Any]]


def map_key(game_id: str) -> str:
    return f"{MAP_PREFIX}{game_id}"


def data_key(game_id: str) -> str:
    return f"{DATA_PREFIX}{game_id}"


def status_text(stats: QueueStats) -> str:
    """
    "BGG: 3 left..." while working, "BGG: 12/14" (processed/detected) when idle.
    """
    if stats.left > 0:
        return f"BGG: {stats.left} left..."
    return f"BGG: {stats.processed}/{stats.detected}"


class StatsQueue:
    """
    Serial, rate-limited BGA -> BGG lookup queue.

    One instance per session. At most one task is in flight; after each task
    finishes (whatever the outcome) the worker waits policy.request_delay_s
    before taking the next one. Tasks run in FIFO order and are never retried.

    enqueue() must be called from inside a running event loop.
    """

    def __init__(
        self,
        cache: TTLCache,
        *,
        render: RenderSink,
        log: LogSink = console_log,
        policy: Optional[FetchPolicy] = None,
        resolver: Optional[Resolver] = None,
        fetcher: Optional[Fetcher] = None,
        sleep: Sleep = asyncio.sleep,
        status_cb: Optional[StatusCB] = None,
    ):
        self.cache = cache
        self.render = render
        self.log = log
        self.policy = policy or FetchPolicy()
        self.resolver = resolver or partial(resolve_catalog_url, policy=self.policy)
        self.fetcher = fetcher or partial(fetch_page, policy=self.policy)
        self.sleep = sleep
        self.status_cb = status_cb

        self._pending: Deque[Task] = deque()
        self._current: Optional[Task] = None
        self._busy = False
        self._worker: Optional[asyncio.Task] = None
        # bumped by reset(); a task started before it is not counted
        self._generation = 0

        self.detected = 0
        self.processed = 0

    # ----------------------------
    # State
    # ----------------------------

    def stats(self) -> QueueStats:
        return QueueStats(
            detected=self.detected,
            processed=self.processed,
            pending=len(self._pending),
            busy=self._busy,
        )

    def _notify(self) -> None:
        if self.status_cb:
            self.status_cb(self.stats())

    def _is_known(self, game_id: str) -> bool:
        if self._current is not None and self._current.external_id == game_id:
            return True
        return any(t.external_id == game_id for t in self._pending)

    def reset(self) -> None:
        """
        Drop pending tasks and zero the counters. A task already in flight
        still runs to completion but is not counted as processed.
        """
        self._generation += 1
        self._pending.clear()
        self.detected = 0
        self.processed = 0
        self._notify()

    def cached(self, game_id: str) -> Optional[Tuple[str, BggStats]]:
        url = self.cache.get(map_key(game_id), self.policy.map_ttl_ms)
        if not url:
            return None
        stats = BggStats.from_dict(self.cache.get(data_key(game_id), self.policy.stats_ttl_ms))
        if stats is None:
            return None
        return str(url), stats

    # ----------------------------
    # Intake
    # ----------------------------

    def enqueue(self, task: Task) -> None:
        task = replace(task, display_name=clean_title(task.raw_name))

        hit = self.cached(task.external_id)
        if hit:
            url, stats = hit
            self.detected += 1
            self.processed += 1
            self._notify()
            try:
                self.log(f"Cache: {task.display_name}", "success")
                self.render(task.target, stats, url, task.mode)
            except Exception as exc:
                self._log_error(f"Error: {exc}")
            return

        if self._is_known(task.external_id):
            dbg("queue.duplicate", game_id=task.external_id)
            return

        self.detected += 1
        self._pending.append(task)
        self._notify()
        self._kick()

    def enqueue_all(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            self.enqueue(task)

    # ----------------------------
    # Worker
    # ----------------------------

    def _kick(self) -> None:
        if self._busy or not self._pending:
            return
        self._busy = True
        self._worker = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        try:
            while self._pending:
                task = self._pending.popleft()
                generation = self._generation
                self._current = task
                self._notify()

                try:
                    await self.process(task)
                except Exception as exc:
                    self._log_error(f"Error: {exc}")
                finally:
                    self._current = None
                    if generation == self._generation:
                        self.processed += 1
                    self._notify()

                await self.sleep(self.policy.request_delay_s)
        finally:
            self._busy = False
            self._worker = None
            self._notify()

    def _log_error(self, message: str) -> None:
        # the sink may itself be what failed
        try:
            self.log(message, "error")
        except Exception as exc:
            dbg("queue.log_failed", message=message, error=str(exc))

    async def join(self) -> None:
        """
        Wait until the queue is empty and no task is in flight.
        """
        while self._worker is not None:
            await self._worker

    # ----------------------------
    # One task
    # ----------------------------

    async def _resolve(self, name: str) -> str:
        url = await self.resolver(name)
        if not url:
            raise ResolutionNotFound(name)
        return url

    async def process(self, task: Task) -> None:
        name = task.display_name or task.raw_name
        mkey = map_key(task.external_id)

        self.log(f"Processing: {name}", "info")

        # 1) BGG url from cache or search
        url = self.cache.get(mkey, self.policy.map_ttl_ms)
        if not url:
            self.log("Searching DDG...", "info")
            try:
                url = await self._resolve(name)
            except ResolutionNotFound:
                self.log(f"Not found: {name}", "error")
                return
            self.cache.set(mkey, url)

        # 2) Page
        try:
            html = await self.fetcher(url)
        except HttpFailure as exc:
            self.log(f"Network Error: HTTP {exc.status} for {name}", "error")
            if exc.status == 404:
                # Bad link; next attempt searches again
                self.cache.delete(mkey)
                self.log(f"Dropped mapping for {name}", "warn")
            return
        except NetworkFailure as exc:
            self.log(f"Network Error: {exc.reason or exc}", "error")
            return

        # 3) Stats
        stats = extract_stats(html)
        if stats is None:
            self.log(f"Parse failed: {name}", "error")
            return

        self.log(f"Parsed: {stats.score} (Rank {stats.rank})", "success")
        self.cache.set(data_key(task.external_id), stats.to_dict())
        self.render(task.target, stats, url, task.mode)


# ----------------------------
# Bulk control
# ----------------------------

def reset_mapping_cache(cache: TTLCache, log: LogSink = console_log) -> int:
    n = cache.delete_by_prefix(MAP_PREFIX)
    log(f"Deleted {n} map records.", "warn")
    return n


def reset_stats_cache(cache: TTLCache, log: LogSink = console_log) -> int:
    n = cache.delete_by_prefix(DATA_PREFIX)
    log(f"Deleted {n} data records.", "warn")
    return n


async def run_tasks(queue: StatsQueue, tasks: Iterable[Task]) -> QueueStats:
    """
    Enqueue everything and wait for the queue to drain.
    """
    queue.enqueue_all(tasks)
    await queue.join()
    return queue.stats()
