"""
In-memory TTL cache for aggregated records.

- Keys are case-folded usernames (GitHub logins are case-insensitive).
- A read past the TTL behaves as a miss but leaves the entry in place.
- ``put`` always overwrites; with ``max_entries`` set, the least recently
  written or read entry is dropped once the bound is exceeded.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from time import monotonic
from typing import Callable, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class CacheStore(Generic[T]):
    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = max_entries if max_entries else None
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: "OrderedDict[str, Tuple[float, T]]" = OrderedDict()

    @staticmethod
    def _key(username: str) -> str:
        return username.lower()

    def get(self, username: str) -> Optional[T]:
        key = self._key(username)
        with self._lock:
            cached = self._entries.get(key)
            if cached is None:
                return None
            fetched_at, record = cached
            if self._clock() - fetched_at >= self.ttl_seconds:
                return None
            self._entries.move_to_end(key)
            return record

    def put(self, username: str, record: T) -> None:
        key = self._key(username)
        with self._lock:
            self._entries[key] = (self._clock(), record)
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, username: str) -> bool:
        with self._lock:
            return self._key(username) in self._entries
