"""Read-through cache used by the ancillary counters."""

from .read_through import CacheEntry, ReadThroughCache, make_key

__all__ = ["CacheEntry", "ReadThroughCache", "make_key"]
