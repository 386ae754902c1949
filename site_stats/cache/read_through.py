"""In-process read-through cache with a shared tier and a process-local tier.

Purpose
-------
Back ``AncillaryCounters.number_in_group`` with get-or-compute semantics:
a value is served from the process-local tier while its short TTL holds,
otherwise from the shared tier while its main TTL holds, otherwise the
callback recomputes it.

Design notes
------------
- The shared tier is any ``MutableMapping`` passed in, so several cache
  instances (one per request context) can share it while each keeps its own
  process-local copies.
- Recomputation for a key is serialized with a per-key lock; concurrent
  callers for the same key wait and then read the freshly stored value.
- Entries are bounded by ``maxsize``; the entry closest to expiry is evicted
  first. Stores are serialized per instance; eviction scans a copy of the
  tier, which other instances may be writing to.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, MutableMapping, Optional, TypeVar

T = TypeVar("T")


def make_key(*components: Any) -> str:
    """Join key components with ``:`` (e.g. ``site_stats:groupcounts:sysop``)."""
    return ":".join(str(c) for c in components)


@dataclass
class CacheEntry:
    """Stored value plus its absolute expiry on the cache clock."""

    value: Any
    expiry: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expiry


class ReadThroughCache:
    """Get-or-compute cache implementing ``IReadThroughCache``.

    Parameters
    ----------
    shared:
        Mapping used as the shared tier; a private dict when omitted.
    maxsize:
        Maximum entries kept per tier.
    clock:
        Monotonic time source (seconds); injectable for tests.
    """

    def __init__(
        self,
        shared: Optional[MutableMapping[str, CacheEntry]] = None,
        maxsize: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._shared: MutableMapping[str, CacheEntry] = {} if shared is None else shared
        self._local: Dict[str, CacheEntry] = {}
        self._maxsize = maxsize
        self._clock = clock
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._store_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _store(self, tier: MutableMapping[str, CacheEntry], key: str, entry: CacheEntry) -> None:
        with self._store_lock:
            if key not in tier and len(tier) >= self._maxsize:
                entries = list(tier.items())
                if entries:
                    soonest = min(entries, key=lambda item: item[1].expiry)[0]
                    tier.pop(soonest, None)
                    with self._locks_guard:
                        self._locks.pop(soonest, None)
            tier[key] = entry

    def _fresh(self, tier: MutableMapping[str, CacheEntry], key: str, now: float) -> Optional[CacheEntry]:
        entry = tier.get(key)
        if entry is None or entry.is_expired(now):
            return None
        return entry

    def get_with_set_callback(
        self,
        key: str,
        ttl: float,
        callback: Callable[[Optional[Any]], T],
        *,
        process_ttl: Optional[float] = None,
    ) -> T:
        now = self._clock()
        if process_ttl and (local := self._fresh(self._local, key, now)):
            return local.value
        if shared := self._fresh(self._shared, key, now):
            self._remember_locally(key, shared.value, now, process_ttl)
            return shared.value

        with self._lock_for(key):
            now = self._clock()
            # Another caller may have filled the key while we waited.
            if shared := self._fresh(self._shared, key, now):
                self._remember_locally(key, shared.value, now, process_ttl)
                return shared.value
            stale = self._shared.get(key)
            value = callback(stale.value if stale is not None else None)
            now = self._clock()
            self._store(self._shared, key, CacheEntry(value, now + ttl))
            self._remember_locally(key, value, now, process_ttl)
            return value

    def _remember_locally(self, key: str, value: Any, now: float, process_ttl: Optional[float]) -> None:
        if process_ttl:
            self._store(self._local, key, CacheEntry(value, now + process_ttl))

    def delete(self, key: str) -> None:
        self._shared.pop(key, None)
        self._local.pop(key, None)
        with self._locks_guard:
            self._locks.pop(key, None)

    def clear_local(self) -> None:
        """Forget process-local copies; shared entries are kept."""
        self._local.clear()


__all__ = ["CacheEntry", "ReadThroughCache", "make_key"]
