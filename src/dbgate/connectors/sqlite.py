"""
dbgate SQLite Connector

Reference connector backed by the stdlib ``sqlite3`` module. Blocking
calls run in a worker thread via ``asyncio.to_thread`` so the event loop
is never stalled; a lock serializes access to the single connection.
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from typing import Any

from dbgate.connectors.base import DatabaseConnector
from dbgate.exceptions import DriverError
from dbgate.logging import get_logger
from dbgate.models import ExecuteSqlResult, SchemaDescription

logger = get_logger("dbgate.connectors.sqlite")


class SQLiteConnector(DatabaseConnector):
    """Connector for a single SQLite database file (or ``:memory:``)."""

    def __init__(self, path: str = ":memory:", *, allow_writes: bool = False) -> None:
        super().__init__(allow_writes=allow_writes)
        self.path = path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(self.path, check_same_thread=False)
            except sqlite3.Error as e:
                raise DriverError(self.path, str(e)) from e
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _execute(self, sql: str) -> ExecuteSqlResult:
        with self._lock:
            conn = self._connect()
            try:
                cursor = conn.execute(sql)
                fields = [col[0] for col in cursor.description or ()]
                rows = [_row_to_dict(row, fields) for row in cursor.fetchall()]
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise DriverError(self.path, str(e)) from e
        return ExecuteSqlResult(rows=rows, fields=fields)

    def _schema(self) -> SchemaDescription:
        with self._lock:
            conn = self._connect()
            try:
                cursor = conn.execute(
                    "SELECT name, sql FROM sqlite_master "
                    "WHERE type='table' AND name NOT LIKE 'sqlite_%' "
                    "ORDER BY name"
                )
                return {row["name"]: row["sql"] for row in cursor.fetchall()}
            except sqlite3.Error as e:
                raise DriverError(self.path, str(e)) from e

    async def execute_sql(self, sql: str) -> ExecuteSqlResult:
        logger.debug("Executing statement", extra={"resource": self.path})
        return await asyncio.to_thread(self._execute, sql)

    async def show_schema(self) -> SchemaDescription:
        return await asyncio.to_thread(self._schema)

    async def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __repr__(self) -> str:
        return f"SQLiteConnector(path={self.path!r}, allow_writes={self.allow_writes})"


def _row_to_dict(row: sqlite3.Row, fields: list[str]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for name in fields:
        value = row[name]
        # bytes are not representable in a result cell
        if isinstance(value, (bytes, bytearray, memoryview)):
            value = bytes(value).hex()
        result[name] = value
    return result
