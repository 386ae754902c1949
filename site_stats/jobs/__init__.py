"""Job queue adapters reporting queue depth to the ancillary counters."""

from .sqlite_queue import SqliteJobQueueGroup

__all__ = ["SqliteJobQueueGroup"]
