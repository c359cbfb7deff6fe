# bga_geek/models.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Task:
    """
    One game detected on a BGA page.

    external_id is the BGA game id and doubles as cache key and dedup key.
    display_name is filled by the queue with the cleaned title.
    target is opaque to the pipeline and only handed back to the render sink.
    """
    external_id: str
    raw_name: str
    display_name: str = ""
    target: Any = None
    mode: str = "list"  # "list" | "panel"


@dataclass
class BggStats:
    """
    Normalized BGG statistics for one game.

    score/weight: fixed-point string or "?"
    rank: positive integer string or "-"
    best_players: "N", "min-max" or "?"
    """
    score: str
    rank: str
    weight: str
    best_players: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["BggStats"]:
        if not isinstance(data, dict):
            return None
        try:
            return cls(
                score=str(data["score"]),
                rank=str(data["rank"]),
                weight=str(data["weight"]),
                best_players=str(data["best_players"]),
            )
        except KeyError:
            return None


@dataclass
class CacheEntry:
    value: Any
    stored_at_ms: int

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        return now_ms - self.stored_at_ms <= ttl_ms

    def to_dict(self) -> dict:
        return {"value": self.value, "stored_at_ms": self.stored_at_ms}

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["CacheEntry"]:
        if not isinstance(raw, dict) or "value" not in raw:
            return None
        stored = raw.get("stored_at_ms")
        if isinstance(stored, bool) or not isinstance(stored, int):
            return None
        return cls(value=raw["value"], stored_at_ms=stored)


@dataclass(frozen=True)
class QueueStats:
    detected: int
    processed: int
    pending: int
    busy: bool

    @property
    def left(self) -> int:
        return self.pending + (1 if self.busy else 0)
