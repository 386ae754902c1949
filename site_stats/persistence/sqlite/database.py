"""SQLite-backed implementation of ``IDatabase``.

Translates the small select/upsert vocabulary used by the stats layer into
parameterized SQL. Table and column names come from code, never from user
input; all values are bound as parameters.

Writes (``upsert``/``update``) run in their own transaction and commit before
returning, which is what makes the counters upsert atomic.
"""

from __future__ import annotations

import sqlite3
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..interfaces.repos import Conds, IDatabase, SetClause, Tables

TS_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _tables_sql(table: Tables) -> str:
    if isinstance(table, str):
        return _quote(table)
    return ", ".join(_quote(t) for t in table)


def _where_sql(
    conds: Conds, where: Sequence[str], params: Sequence[Any]
) -> Tuple[str, List[Any]]:
    """Build a ``WHERE`` clause and its bind values.

    Returns an empty clause when there is nothing to filter on.
    """
    parts: List[str] = []
    binds: List[Any] = []
    for column, value in (conds or {}).items():
        if value is None:
            parts.append(f"{column} IS NULL")
        elif isinstance(value, (list, tuple, set, frozenset)):
            items = list(value)
            if not items:
                parts.append("0")
                continue
            parts.append(f"{column} IN ({', '.join('?' for _ in items)})")
            binds.extend(items)
        else:
            parts.append(f"{column} = ?")
            binds.append(value)
    parts.extend(f"({fragment})" for fragment in where)
    binds.extend(params)
    if not parts:
        return "", binds
    return " WHERE " + " AND ".join(parts), binds


class SqliteDatabase(IDatabase):
    """Data-access handle over one SQLite connection.

    Parameters
    ----------
    conn:
        Open connection configured by the engine layer.
    name:
        Role label used in logs (``primary``, ``replica``, ``vslow``).
    """

    def __init__(self, conn: sqlite3.Connection, name: str = "primary") -> None:
        self.conn = conn
        self.name = name

    def select_row(
        self,
        table: Tables,
        columns: Sequence[str],
        conds: Conds = None,
        *,
        where: Sequence[str] = (),
        params: Sequence[Any] = (),
    ) -> Optional[Dict[str, Any]]:
        clause, binds = _where_sql(conds, where, params)
        sql = f"SELECT {', '.join(columns)} FROM {_tables_sql(table)}{clause} LIMIT 1"  # nosec B608
        cur = self.conn.execute(sql, binds)
        row = cur.fetchone()
        if row is None:
            return None
        names = [d[0] for d in cur.description]
        return dict(zip(names, tuple(row)))

    def select_field(
        self,
        table: Tables,
        expression: str,
        conds: Conds = None,
        *,
        where: Sequence[str] = (),
        params: Sequence[Any] = (),
    ) -> Any:
        clause, binds = _where_sql(conds, where, params)
        sql = f"SELECT {expression} FROM {_tables_sql(table)}{clause} LIMIT 1"  # nosec B608
        row = self.conn.execute(sql, binds).fetchone()
        return row[0] if row is not None else None

    def upsert(
        self,
        table: str,
        values: Mapping[str, Any],
        unique_keys: Sequence[str],
        set_: SetClause,
    ) -> None:
        columns = list(values)
        binds: List[Any] = [values[c] for c in columns]
        if isinstance(set_, Mapping):
            assignments = [f"{c} = ?" for c in set_]
            binds.extend(set_.values())
        else:
            assignments = list(set_)
        sql = (
            f"INSERT INTO {_quote(table)} ({', '.join(columns)}) "  # nosec B608
            f"VALUES ({', '.join('?' for _ in columns)}) "
            f"ON CONFLICT ({', '.join(unique_keys)}) DO UPDATE SET {', '.join(assignments)}"
        )
        with self.conn:
            self.conn.execute(sql, binds)

    def update(self, table: str, values: Mapping[str, Any], conds: Conds) -> int:
        assignments = ", ".join(f"{c} = ?" for c in values)
        clause, where_binds = _where_sql(conds, (), ())
        sql = f"UPDATE {_quote(table)} SET {assignments}{clause}"  # nosec B608
        with self.conn:
            cur = self.conn.execute(sql, [*values.values(), *where_binds])
        return cur.rowcount

    def timestamp(self, when: Optional[float] = None) -> str:
        moment = time.time() if when is None else when
        return datetime.fromtimestamp(moment, tz=timezone.utc).strftime(TS_FORMAT)


__all__ = ["TS_FORMAT", "SqliteDatabase"]
