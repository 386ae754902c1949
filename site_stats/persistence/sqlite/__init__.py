from __future__ import annotations

import sqlite3
from typing import Optional

from ..interfaces.repos import DatabaseHandles
from .database import SqliteDatabase
from .engine import MEMORY_DB, create_connection, init_schema


def get_database(db_path: Optional[str] = None, name: str = "primary") -> SqliteDatabase:
    conn: sqlite3.Connection = create_connection(db_path)
    init_schema(conn)
    return SqliteDatabase(conn, name=name)


def open_handles(
    db_path: Optional[str] = None,
    replica_db_path: Optional[str] = None,
    vslow_db_path: Optional[str] = None,
) -> DatabaseHandles:
    """Open primary, replica and (optionally) low-priority replica handles.

    A replica path left unset points at the primary database file, so a
    single-file deployment reads and writes the same data through separate
    connections. In-memory primaries cannot be shared that way; the replica
    then reuses the primary connection.
    """
    primary = get_database(db_path, name="primary")
    if replica_db_path:
        replica = get_database(replica_db_path, name="replica")
    elif db_path and db_path != MEMORY_DB:
        replica = get_database(db_path, name="replica")
    else:
        replica = SqliteDatabase(primary.conn, name="replica")
    vslow = get_database(vslow_db_path, name="vslow") if vslow_db_path else None
    return DatabaseHandles(primary=primary, replica=replica, vslow=vslow)


def close_handles(handles: DatabaseHandles) -> None:
    """Close every distinct connection behind ``handles``."""
    seen = set()
    for db in (handles.primary, handles.replica, handles.vslow):
        conn = getattr(db, "conn", None)
        if conn is None or id(conn) in seen:
            continue
        seen.add(id(conn))
        conn.close()


__all__ = [
    "create_connection",
    "init_schema",
    "SqliteDatabase",
    "get_database",
    "open_handles",
    "close_handles",
]
