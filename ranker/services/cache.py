"""
Time-boxed get-or-fetch cache.

One ``TimeBoxedCache`` lives on ``app.state`` for the lifetime of the
process; it is not shared between server instances and does not survive a
restart. Entries are stored serialized, the way a browser stores them in
localStorage, and an entry that no longer parses is treated as a miss.

The cache is advisory: after a successful write, routers ``invalidate`` or
``patch`` the keys the write affected so readers see the change immediately.
"""

import json
import logging
import time
from typing import Any, Awaitable, Callable, MutableMapping, Optional, Tuple

from fastapi import Request
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

DEFAULT_TTL = 5 * 60  # seconds

# ── Logical resource keys ──
ALBUMS_KEY = "albums"
TIERLIST_KEY = "tierlist"


def user_ratings_key(user_id: int) -> str:
    return f"user-ratings:{user_id}"


def user_comments_key(user_id: int) -> str:
    return f"user-comments:{user_id}"


def avatar_key(user_id: int) -> str:
    return f"avatar:{user_id}"


class TimeBoxedCache:
    """Process-local TTL cache keyed per logical resource."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
        store: Optional[MutableMapping[str, str]] = None,
    ):
        self.ttl = ttl
        self.clock = clock
        self.store: MutableMapping[str, str] = store if store is not None else {}

    # ── Raw entry access ──

    def _read(self, key: str) -> Optional[Tuple[Any, float]]:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            entry = json.loads(raw)
            return entry["data"], float(entry["timestamp"])
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            self.store.pop(key, None)
            return None

    def _write(self, key: str, data: Any, timestamp: float) -> None:
        self.store[key] = json.dumps({"data": data, "timestamp": timestamp})

    # ── Public API ──

    def get(self, key: str, ttl: Optional[float] = None) -> Optional[Any]:
        """Return the cached value for ``key`` if it is younger than ``ttl``."""
        ttl = self.ttl if ttl is None else ttl
        entry = self._read(key)
        if entry is None:
            return None
        data, timestamp = entry
        if self.clock() - timestamp >= ttl:
            return None
        return data

    def set(self, key: str, value: Any) -> Any:
        """Store ``value`` (JSON-encoded) under ``key``; returns the stored form."""
        data = jsonable_encoder(value)
        try:
            self._write(key, data, self.clock())
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not cache {key}: {e}")
        return data

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        ttl: Optional[float] = None,
    ) -> Any:
        """Return the live cached value for ``key``, or await ``fetch`` and cache it."""
        cached = self.get(key, ttl)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached
        logger.debug(f"Cache miss: {key}")
        return self.set(key, await fetch())

    def patch(self, key: str, update: Callable[[Any], Any]) -> bool:
        """
        Apply a local write to a live entry, keeping its original timestamp.
        Returns False when there was nothing to patch.
        """
        entry = self._read(key)
        if entry is None:
            return False
        data, timestamp = entry
        try:
            self._write(key, jsonable_encoder(update(data)), timestamp)
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not patch {key}, dropping it: {e}")
            self.store.pop(key, None)
            return False
        return True

    def invalidate(self, *keys: str) -> None:
        for key in keys:
            self.store.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> None:
        for key in [k for k in self.store if k.startswith(prefix)]:
            self.store.pop(key, None)

    def clear(self) -> None:
        self.store.clear()


def get_cache(request: Request) -> TimeBoxedCache:
    """FastAPI dependency: the process-wide cache created at startup."""
    return request.app.state.cache
