"""Bounded LRU store for finished tour computations."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Dict, Hashable, Optional

from config import CFG


class SolutionCache:
    """LRU-evicting map of query key -> computation.

    Created once by the composing application and passed into every query.
    All reads and writes are serialized through one lock; searches run
    outside it.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        if max_entries is None:
            max_entries = int(getattr(CFG, "CACHE_SIZE", 10_000))
        if max_entries < 1:
            raise ValueError(f"Cache needs room for at least one entry (got {max_entries})")
        self._table: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, marking it most recently used."""
        with self._lock:
            if key in self._table:
                self._table.move_to_end(key)
                self.hits += 1
                return self._table[key]
            self.misses += 1
            return None

    def put(self, key: Hashable, value: Any) -> None:
        """Insert or overwrite, evicting the least recently used entry if full."""
        with self._lock:
            if key in self._table:
                self._table.move_to_end(key)
            elif len(self._table) >= self.max_entries:
                self._table.popitem(last=False)
                self.evictions += 1
            self._table[key] = value

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._table

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)

    def clear(self) -> None:
        with self._lock:
            self._table.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self.hits + self.misses
            return {
                "entries": len(self._table),
                "max_entries": self.max_entries,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
                "hit_rate": self.hits / total if total else 0.0,
            }


__all__ = ["SolutionCache"]
