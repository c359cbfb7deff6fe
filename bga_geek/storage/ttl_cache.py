# bga_geek/storage/ttl_cache.py
from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Tuple

from bga_geek.models import CacheEntry
from bga_geek.storage.kv_store import KeyValueStore
from bga_geek.utils import now_ms


class TTLCache:
    """
    Expiry on top of a KeyValueStore.

    Records are stored as {"value": ..., "stored_at_ms": ...}. Expiry is
    evaluated on read only; stale records stay in the store until they are
    overwritten or removed by delete_by_prefix().
    """

    def __init__(self, store: KeyValueStore, *, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock

    def get(self, key: str, ttl_ms: int) -> Optional[Any]:
        entry = CacheEntry.from_raw(self.store.get(key))
        if entry is None:
            return None
        if not entry.is_fresh(self.clock(), ttl_ms):
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self.store.set(key, CacheEntry(value=value, stored_at_ms=self.clock()).to_dict())

    def delete(self, key: str) -> None:
        self.store.delete(key)

    def delete_by_prefix(self, prefix: str) -> int:
        keys = [k for k in self.store.keys() if k.startswith(prefix)]
        for k in keys:
            self.store.delete(k)
        return len(keys)

    def entries(self, prefix: str) -> Iterator[Tuple[str, CacheEntry]]:
        """
        Yield (key without prefix, entry) for every well-formed record, fresh or not.
        """
        for k in sorted(self.store.keys()):
            if not k.startswith(prefix):
                continue
            entry = CacheEntry.from_raw(self.store.get(k))
            if entry is not None:
                yield k[len(prefix):], entry
