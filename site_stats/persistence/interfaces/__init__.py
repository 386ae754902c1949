"""Persistence interfaces package for the site statistics layer.

Defines the data-access, read-through cache and job queue protocols plus the
`DatabaseHandles` grouping of primary and replica handles. Concrete
implementations live under persistence adapters such as SQLite.
"""

from .repos import (  # noqa: F401
    Conds,
    DatabaseHandles,
    IDatabase,
    IJobQueueGroup,
    IReadThroughCache,
    SetClause,
    Tables,
)
