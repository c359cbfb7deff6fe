from __future__ import annotations

from dataclasses import dataclass

from bga_geek.config import (
    HTTP_TIMEOUT_S,
    MAP_TTL_MS,
    REQUEST_DELAY_S,
    SEARCH_SCOPE,
    SEARCH_URL,
    STATS_TTL_MS,
    UA,
)


@dataclass(frozen=True)
class FetchPolicy:
    # Identity
    user_agent: str = UA

    # Reliability
    timeout_s: float = HTTP_TIMEOUT_S

    # Politeness: fixed pause after every task, success or not
    request_delay_s: float = REQUEST_DELAY_S

    # Cache lifetimes
    map_ttl_ms: int = MAP_TTL_MS
    stats_ttl_ms: int = STATS_TTL_MS

    # Resolution
    search_url: str = SEARCH_URL
    search_scope: str = SEARCH_SCOPE

    def search_query(self, name: str) -> str:
        return f"{self.search_scope} {name}".strip()

    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}
