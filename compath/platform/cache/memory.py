"""
In-memory TTL cache for expensive, repeatable results (LLM analyses, Steam lookups).

Entries are keyed by ``operation:subject_id:options`` where the options are
serialized with their names sorted, so ``{"a": 1, "b": 2}`` and ``{"b": 2, "a": 1}``
address the same entry. Nothing is persisted; a restart starts empty.
"""

import asyncio
import json
import math
import time
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, Mapping, Optional, Union

from cachetools import TLRUCache
from pydantic import BaseModel

from compath.platform.errors import CacheKeyError
from compath.platform.logger import get_logger

logger = get_logger("response_cache")

HOUR = 60 * 60

# Default TTL per operation type, in seconds
DEFAULT_TTL: Dict[str, int] = {
    "keywords": 24 * HOUR,
    "keywordsDeep": 24 * HOUR,
    "summary": 12 * HOUR,
    "community": 6 * HOUR,
    "gameInfo": 7 * 24 * HOUR,
}
FALLBACK_TTL = DEFAULT_TTL["keywords"]
DEFAULT_MAX_ENTRIES = 10_000

CacheOptions = Union[Mapping[str, Any], BaseModel, None]


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    type: str
    subject_id: str
    created_at: float
    expires_at: float


def _serialize_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise CacheKeyError(f"Cannot serialize option value {value!r}: {e}") from e


def build_key(operation: str, subject_id: str, options: CacheOptions = None) -> str:
    """Compose the deterministic cache key for an operation/subject/options triple."""
    if options is None:
        options = {}
    elif isinstance(options, BaseModel):
        options = options.model_dump()
    elif not isinstance(options, Mapping):
        raise CacheKeyError(f"Options must be a mapping or model, got {type(options).__name__}")

    serialized = "|".join(
        f"{name}:{_serialize_value(options[name])}" for name in sorted(options, key=str)
    )
    return f"{operation}:{subject_id}:{serialized}"


def _entry_deadline(key: str, entry: CacheEntry, now: float) -> float:
    # TLRUCache drops an entry once `now >= deadline`; entries stay live through expires_at itself
    return math.nextafter(entry.expires_at, math.inf)


class ResponseCache:
    """
    Process-wide TTL cache shared by request handlers, backed by a cachetools
    TLRUCache whose per-entry deadline comes from the operation's TTL.

    cachetools containers are not thread-safe, so every access happens under
    one lock; FastAPI runs sync dependencies on threadpool workers.
    Cache failures never reach the caller: a key that cannot be built is a miss.
    """

    def __init__(
        self,
        ttl_table: Optional[Mapping[str, int]] = None,
        clock: Callable[[], float] = time.time,
        maxsize: int = DEFAULT_MAX_ENTRIES,
    ):
        self.ttl_table = dict(DEFAULT_TTL if ttl_table is None else ttl_table)
        self._clock = clock
        self._store: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_entry_deadline, timer=clock)
        self._lock = Lock()
        self._sweeper: Optional[asyncio.Task] = None
        self.hits = 0
        self.misses = 0
        self.saves = 0

    def ttl_for(self, operation: str) -> int:
        return self.ttl_table.get(operation, FALLBACK_TTL)

    def get(self, operation: str, subject_id: str, options: CacheOptions = None) -> Optional[Any]:
        try:
            key = build_key(operation, subject_id, options)
        except CacheKeyError as e:
            logger.warning(f"[Cache] Treating unkeyable lookup as a miss: {e}")
            with self._lock:
                self.misses += 1
            return None

        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self.misses += 1
                # a stale entry is invisible to lookups but still held until expired out
                expired = [stale_key for stale_key, _ in self._store.expire()]
            else:
                self.hits += 1

        if entry is None:
            if key in expired:
                logger.info(f"[Cache] Expired: {key}")
            return None

        logger.info(f"[Cache] Hit: {key}")
        return entry.payload

    def set(
        self,
        operation: str,
        subject_id: str,
        payload: Any,
        options: CacheOptions = None,
        ttl: Optional[float] = None,
    ) -> None:
        if payload is None:
            logger.warning(f"[Cache] Refusing to store an empty payload for {operation}:{subject_id}")
            return

        try:
            key = build_key(operation, subject_id, options)
        except CacheKeyError as e:
            logger.warning(f"[Cache] Skipping save, options not keyable: {e}")
            return

        now = self._clock()
        expires_at = now + (ttl or self.ttl_for(operation))
        entry = CacheEntry(
            key=key,
            payload=payload,
            type=operation,
            subject_id=str(subject_id),
            created_at=now,
            expires_at=expires_at,
        )

        with self._lock:
            self._store[key] = entry
            self.saves += 1

        logger.info(f"[Cache] Saved: {key} (expires in {round((expires_at - now) / 60)} minutes)")

    def remove(self, operation: str, subject_id: str, options: CacheOptions = None) -> None:
        try:
            key = build_key(operation, subject_id, options)
        except CacheKeyError:
            return

        with self._lock:
            removed = self._store.pop(key, None)

        if removed is not None:
            logger.info(f"[Cache] Removed: {key}")

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        with self._lock:
            expired = self._store.expire()

        if expired:
            logger.info(f"[Cache] Cleanup: {len(expired)} expired entries removed")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
        logger.info("[Cache] All cache cleared")

    def reset_stats(self) -> None:
        with self._lock:
            self.hits = 0
            self.misses = 0
            self.saves = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        with self._lock, self._store.timer:
            hits, misses, saves = self.hits, self.misses, self.saves
            entries = list(self._store.values())

        total_requests = hits + misses
        hit_rate = round(hits / total_requests * 100) if total_requests > 0 else 0

        return {
            "hits": hits,
            "misses": misses,
            "saves": saves,
            "hit_rate": f"{hit_rate}%",
            "cache_size": len(entries),
            "entries": [self._describe(entry, now) for entry in entries],
        }

    @staticmethod
    def _describe(entry: CacheEntry, now: float) -> Dict[str, Any]:
        return {
            "key": entry.key,
            "type": entry.type,
            "subject_id": entry.subject_id,
            "created_at": datetime.fromtimestamp(entry.created_at, tz=timezone.utc).isoformat(),
            "expires_at": datetime.fromtimestamp(entry.expires_at, tz=timezone.utc).isoformat(),
            "age_seconds": round(now - entry.created_at),
            "remaining_minutes": round((entry.expires_at - now) / 60),
        }

    # ── Lifecycle ───────────────────────────────

    def start_sweeper(self, interval: float) -> None:
        """Schedule periodic sweeps on the running event loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever(interval))
        logger.info(f"[Cache] Sweeper started (every {interval}s)")

    async def _sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.sweep()

    async def shutdown(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None
        logger.info("[Cache] Sweeper stopped")

