# bga_geek/ui/app.py
from __future__ import annotations

from typing import Any, Optional
import webbrowser

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Footer, Header, RichLog, Static

from bga_geek.models import BggStats, QueueStats, Task
from bga_geek.scrape.orchestrator import (
    StatsQueue,
    reset_mapping_cache,
    reset_stats_cache,
    status_text,
)
from bga_geek.scrape.policy import FetchPolicy
from bga_geek.storage.ttl_cache import TTLCache
from bga_geek.utils import clean_title


SEVERITY_STYLE = {
    "info": "#bdc3c7",
    "success": "#2ecc71",
    "warn": "#f39c12",
    "error": "#e74c3c",
}


# ----------------------------
# Small UI widgets
# ----------------------------

class StatCard(Static):
    def __init__(self, label: str, icon: str = ""):
        super().__init__()
        self.label = label
        self.icon = icon
        self.value = "0"

    def update_value(self, v: str) -> None:
        self.value = v
        self.update(f"{self.icon} {self.label}\n[b]{v}[/b]")


# ----------------------------
# Main App
# ----------------------------

class GeekApp(App):
    CSS = """
    Screen {
        background: #101417;
        color: #e8eef2;
    }

    #stats_row {
        height: 4;
        margin: 1 1 1 1;
    }

    StatCard {
        width: 1fr;
        border: tall #2d3a45;
        padding: 0 2;
        background: #0b0f12;
    }

    #left_pane {
        width: 2fr;
        margin-right: 1;
    }

    #status_pill {
        height: 3;
        border: tall #2d3a45;
        padding: 0 1;
        margin-bottom: 1;
        background: #0b0f12;
    }

    #list_box {
        height: 1fr;
        border: tall #2d3a45;
    }

    #log_box {
        width: 1fr;
        border: tall #2d3a45;
        padding: 0 1;
        background: #0b0f12;
    }

    DataTable {
        height: 100%;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("i", "reset_ids", "Reset IDs"),
        Binding("d", "reset_stats", "Reset Stats"),
        Binding("r", "rescan", "Force Rescan"),
        Binding("O", "open_url", "Open"),
    ]

    def __init__(
        self,
        *,
        cache: TTLCache,
        tasks: Optional[list[Task]] = None,
        policy: Optional[FetchPolicy] = None,
    ):
        super().__init__()
        self.cache = cache
        self.tasks = tasks or []
        self.policy = policy or FetchPolicy()

        self.queue: Optional[StatsQueue] = None
        self.urls: dict[str, str] = {}

        # Game ids already handed to the queue; "Force Rescan" clears it.
        self._scanned: set[str] = set()

    # ----------------------------

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="stats_row"):
            self.card_detected = StatCard("Detected", "🎲")
            self.card_processed = StatCard("Processed", "✅")
            self.card_left = StatCard("Queued", "⏳")
            yield self.card_detected
            yield self.card_processed
            yield self.card_left

        with Horizontal():
            with Container(id="left_pane"):
                self.status_pill = Static("BGG: 0/0", id="status_pill")
                yield self.status_pill

                self.table = DataTable(zebra_stripes=True, id="list_box")
                yield self.table

            self.log_box = RichLog(markup=True, wrap=True, id="log_box")
            yield self.log_box

        yield Footer()

    def on_mount(self) -> None:
        self.table.add_column("", key="icon", width=2)
        self.table.add_column("Game", key="name")
        self.table.add_column("Score", key="score")
        self.table.add_column("Rank", key="rank")
        self.table.add_column("Best", key="best")
        self.table.add_column("Weight", key="weight")

        self.table.cursor_type = "row"
        self.table.focus()

        self.queue = StatsQueue(
            self.cache,
            render=self.render_badge,
            log=self.write_log,
            policy=self.policy,
            status_cb=self.update_status,
        )
        self.call_after_refresh(self.scan)

    # ----------------------------
    # Queue sinks
    # ----------------------------

    def write_log(self, message: str, severity: str = "info") -> None:
        style = SEVERITY_STYLE.get(severity, SEVERITY_STYLE["info"])
        self.log_box.write(f"[{style}]{escape(message)}[/]")

    def update_status(self, stats: QueueStats) -> None:
        self.card_detected.update_value(str(stats.detected))
        self.card_processed.update_value(str(stats.processed))
        self.card_left.update_value(str(stats.left))
        self.status_pill.update(status_text(stats))

    def render_badge(self, target: Any, stats: BggStats, url: str, mode: str) -> None:
        key = str(target)
        if key not in self.table.rows:
            return
        self.urls[key] = url
        self.table.update_cell(key, "icon", "✅")
        self.table.update_cell(key, "score", stats.score)
        self.table.update_cell(key, "rank", f"#{stats.rank}")
        self.table.update_cell(key, "best", stats.best_players)
        self.table.update_cell(key, "weight", stats.weight)

    # ----------------------------

    def scan(self) -> None:
        if self.queue is None:
            return

        for task in self.tasks:
            gid = task.external_id
            if gid in self._scanned:
                continue
            self._scanned.add(gid)

            if gid not in self.table.rows:
                self.table.add_row("⏳", clean_title(task.raw_name), "", "", "", "", key=gid)

            self.queue.enqueue(task)

    # ----------------------------
    # Actions
    # ----------------------------

    def action_reset_ids(self) -> None:
        reset_mapping_cache(self.cache, self.write_log)
        if self.queue is not None:
            self.queue.reset()

    def action_reset_stats(self) -> None:
        reset_stats_cache(self.cache, self.write_log)
        if self.queue is not None:
            self.queue.reset()

    def action_rescan(self) -> None:
        self.write_log("Forcing rescan...", "warn")
        self._scanned.clear()
        self.scan()

    def action_open_url(self) -> None:
        if not self.table.row_count:
            return
        row_key, _ = self.table.coordinate_to_cell_key(self.table.cursor_coordinate)
        url = self.urls.get(str(row_key.value))
        if url:
            webbrowser.open(url)
