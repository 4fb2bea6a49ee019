"""In-memory key/value cache with a time-to-live per entry."""

import re
import time
from collections import namedtuple

from cachetools import TLRUCache

from shared.config import DEFAULT_CACHE_TTL

_Entry = namedtuple("_Entry", ["value", "ttl"])


def _entry_expiry(key, entry, now):
    return now + entry.ttl


def _pattern_to_regex(pattern: str):
    # '*' matches any run of characters; everything else is literal.
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


class CacheService:
    """Stores API responses and derived results until their TTL runs out."""

    def __init__(self, default_ttl: float = DEFAULT_CACHE_TTL, maxsize: int = 4096, timer=time.monotonic):
        self.default_ttl = default_ttl
        self._store = TLRUCache(maxsize=maxsize, ttu=_entry_expiry, timer=timer)
        self.hits = 0
        self.misses = 0

    def get(self, key, default=None):
        entry = self._store.get(key)
        if entry is None:
            self.misses += 1
            return default
        self.hits += 1
        return entry.value

    def set(self, key, value, ttl: float | None = None) -> bool:
        self._store[key] = _Entry(value, self.default_ttl if ttl is None else ttl)
        return True

    def has(self, key) -> bool:
        return key in self._store

    def delete(self, key) -> int:
        return 0 if self._store.pop(key, None) is None else 1

    def delete_pattern(self, pattern: str) -> int:
        '''
        Deletes every key matching the pattern ('clan:*' style wildcards, matched anywhere in the key).
        Returns the number of deleted entries.
        '''
        regex = _pattern_to_regex(pattern)
        matching = [key for key in self.keys() if regex.search(key)]
        for key in matching:
            self._store.pop(key, None)
        return len(matching)

    def flush(self) -> None:
        self._store.clear()
        self.hits = 0
        self.misses = 0

    def keys(self) -> list:
        self._store.expire()
        return list(self._store.keys())

    def stats(self) -> dict:
        lookups = self.hits + self.misses
        hit_rate = f"{self.hits / lookups * 100:.2f}%" if self.hits > 0 else "0%"
        return {
            "keys": len(self.keys()),
            "hits": self.hits,
            "misses": self.misses,
            "hitRate": hit_rate,
        }
