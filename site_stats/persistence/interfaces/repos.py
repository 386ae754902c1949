"""Data-access & collaborator protocol definitions for the counters cache.

This module declares the contracts the stats layer depends on. The cache,
loader and recomputer depend only on these abstractions; concrete
implementations live under `persistence/sqlite/`, `site_stats.cache` and
`site_stats.jobs`.

Design Principles:
- No concrete behavior; pure structural typing via `Protocol`.
- `DatabaseHandles` is the only dataclass crossing the boundary; it groups
  the primary and replica handles a caller may read from.

Failure / Error Semantics:
- `IDatabase` methods raise backend-specific exceptions (e.g.
    `sqlite3.Error`) on I/O failures. The stats layer never translates or
    retries them.
- `IJobQueueGroup.get_queue_sizes` raises `JobQueueError` when the queue
    backend is unreachable.

Conditions Format:
- `conds` maps column names to values: scalars compare with `=`, sequences
    with `IN`, and `None` with `IS NULL`.
- `where` holds raw SQL fragments (each wrapped in parentheses and AND-ed)
    whose `?` placeholders are bound from `params` in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    TypeVar,
    Union,
)

T = TypeVar("T")

Tables = Union[str, Sequence[str]]
Conds = Optional[Mapping[str, Any]]
SetClause = Union[Mapping[str, Any], Sequence[str]]


class IDatabase(Protocol):
    """Read/write handle on one data source (primary or replica)."""

    name: str

    def select_row(
        self,
        table: Tables,
        columns: Sequence[str],
        conds: Conds = None,
        *,
        where: Sequence[str] = (),
        params: Sequence[Any] = (),
    ) -> Optional[Dict[str, Any]]:
        """Return the first matching row keyed by column name, or ``None``."""
        ...

    def select_field(
        self,
        table: Tables,
        expression: str,
        conds: Conds = None,
        *,
        where: Sequence[str] = (),
        params: Sequence[Any] = (),
    ) -> Any:
        """Return the single value of ``expression`` for the matching rows."""
        ...

    def upsert(
        self,
        table: str,
        values: Mapping[str, Any],
        unique_keys: Sequence[str],
        set_: SetClause,
    ) -> None:
        """Atomically insert ``values`` or, on key conflict, apply ``set_``.

        ``set_`` is either a column -> value mapping or a sequence of raw
        ``"col = expr"`` assignments.
        """
        ...

    def update(self, table: str, values: Mapping[str, Any], conds: Conds) -> int:
        """Update matching rows and return the affected row count."""
        ...

    def timestamp(self, when: Optional[float] = None) -> str:
        """Return ``when`` (epoch seconds, default now) in storage format."""
        ...


@dataclass(frozen=True)
class DatabaseHandles:
    """The data-source handles available to the stats layer.

    Attributes
    ----------
    primary:
        Authoritative handle; all writes go here.
    replica:
        Read-mostly handle that may lag behind the primary.
    vslow:
        Optional low-priority replica for expensive scans; falls back to
        ``replica`` when not configured.
    """

    primary: IDatabase
    replica: IDatabase
    vslow: Optional[IDatabase] = None

    @property
    def slow_replica(self) -> IDatabase:
        """Handle to use for expensive full-table counts."""
        return self.vslow if self.vslow is not None else self.replica


class IReadThroughCache(Protocol):
    """Get-or-compute cache keyed by string."""

    def get_with_set_callback(
        self,
        key: str,
        ttl: float,
        callback: Callable[[Optional[Any]], T],
        *,
        process_ttl: Optional[float] = None,
    ) -> T:
        """Return the cached value for ``key`` or compute and store it.

        Parameters
        ----------
        key:
            Cache key (see ``make_key``).
        ttl:
            Lifetime of the value in the shared tier, in seconds.
        callback:
            Called with the previous (expired) value or ``None`` on a miss;
            returns the fresh value.
        process_ttl:
            Optional lifetime of the process-local copy, in seconds.
        """
        ...

    def delete(self, key: str) -> None:
        """Drop ``key`` from every tier."""
        ...


class IJobQueueGroup(Protocol):
    """Anything that can report queue depths."""

    def get_queue_sizes(self) -> Dict[str, int]:
        """Return queue type -> number of queued jobs.

        Raises
        ------
        JobQueueError
            When the queue backend cannot be read.
        """
        ...
