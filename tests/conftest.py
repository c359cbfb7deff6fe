"""
Shared fixtures: in-memory store, controllable clock, TTL cache and a sample BGG item.
"""

from typing import Any, Dict

import pytest

from bgg_fixtures import FakeClock

from bga_geek.storage.kv_store import MemoryStore
from bga_geek.storage.ttl_cache import TTLCache


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(store: MemoryStore, clock: FakeClock) -> TTLCache:
    return TTLCache(store, clock=clock)


@pytest.fixture
def catan_item() -> Dict[str, Any]:
    return {
        "objectid": "13",
        "name": "CATAN",
        "minplayers": "3",
        "maxplayers": "4",
        "stats": {"average": "7.09851", "avgweight": "2.2891"},
        "rankinfo": [
            {"prettyname": "Board Game Rank", "rankobjectid": 1, "rank": "534"},
            {"prettyname": "Family Game Rank", "rankobjectid": 5499, "rank": "139"},
        ],
        "polls": {
            "userplayers": {
                "3": [{"value": "Best", "numvotes": "412"}, {"value": "Recommended", "numvotes": "900"}],
                "4": [{"value": "Best", "numvotes": "1466"}, {"value": "Recommended", "numvotes": "300"}],
            }
        },
    }
