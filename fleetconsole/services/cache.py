"""
Query cache with named buckets.

Keys are tuples whose first element names the bucket, e.g. ("servers",) or
("files", server_id, path). Invalidating a bucket drops every key under it,
so the next read goes back to the database.
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, Hashable, Tuple

logger = logging.getLogger("fleetconsole.cache")

CacheKey = Tuple[Hashable, ...]


class QueryCache:
    def __init__(self):
        self._entries: Dict[CacheKey, Any] = {}
        self._generations: Dict[Hashable, int] = defaultdict(int)
        self._lock = threading.Lock()

    def fetch(self, key: CacheKey, loader: Callable[[], Any]) -> Any:
        """Return the cached value for `key`, loading it on a miss."""
        bucket = key[0] if key else None
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            generation = self._generations[bucket]

        value = loader()
        with self._lock:
            # An invalidation during the load means `value` may predate the write
            if self._generations[bucket] == generation:
                self._entries[key] = value
            else:
                logger.debug(f"discarded stale load for {key!r}")
        return value

    def invalidate(self, bucket: str) -> int:
        """Mark every key in `bucket` stale. Returns the number of keys dropped."""
        with self._lock:
            self._generations[bucket] += 1
            stale = [k for k in self._entries if k and k[0] == bucket]
            for k in stale:
                del self._entries[k]
        if stale:
            logger.debug(f"invalidated {len(stale)} entries in '{bucket}'")
        return len(stale)

    def contains(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for bucket in self._generations:
                self._generations[bucket] += 1


query_cache = QueryCache()
