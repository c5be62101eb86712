# constraint_monitor/core/semantic/cache.py
"""
Semantic verdict cache

Bounded, TTL-limited map from (constraint id, content fingerprint, file path)
to SemanticResult. At capacity the oldest inserted entry is evicted.
"""

from __future__ import annotations

import hashlib
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .types import SemanticResult


CacheKey = Tuple[str, str, str]

DEFAULT_MAX_SIZE = 1000
DEFAULT_TTL_S = 3600.0


def fingerprint(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8", errors="replace")).hexdigest()


def make_key(constraint_id: str, content: str, file_path: Optional[str]) -> CacheKey:
    return (constraint_id, fingerprint(content), file_path or "")


@dataclass
class CacheEntry:
    result: SemanticResult
    inserted_at: float


class SemanticCache:
    """Thread-safe; shared by all coroutines using one SemanticValidator"""

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_s: float = DEFAULT_TTL_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_size = max(1, int(max_size))
        self.ttl_s = float(ttl_s)
        self._clock = clock
        self._entries: "OrderedDict[CacheKey, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[SemanticResult]:
        """Live entry for ``key``; expired entries are dropped on read"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._clock() - entry.inserted_at >= self.ttl_s:
                del self._entries[key]
                entry = None
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
            return entry.result

    def put(self, key: CacheKey, result: SemanticResult) -> None:
        with self._lock:
            # Re-inserting makes the entry the newest
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = CacheEntry(result=result, inserted_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def hit_rate(self) -> float:
        with self._lock:
            total = self.hits + self.misses
            return self.hits / total if total else 0.0


__all__ = [
    "CacheKey",
    "CacheEntry",
    "SemanticCache",
    "fingerprint",
    "make_key",
]
