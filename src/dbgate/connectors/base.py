"""
dbgate Connector Contract

The interface every concrete database connector must satisfy.

A connector owns its connection state exclusively; the pipeline never
inspects it. The only thing the pipeline reads is ``allow_writes``, which
is fixed at construction. Changing write policy means registering a new
connector under the same name, not mutating the flag.
"""

from __future__ import annotations

from dbgate.exceptions import ConnectorNotImplementedError
from dbgate.models import ExecuteSqlResult, SchemaDescription


class DatabaseConnector:
    """Base class for database connectors.

    Subclasses must override ``execute_sql`` and ``show_schema``. The base
    implementations raise ConnectorNotImplementedError instead of silently
    returning nothing, so a misconfigured connector is never mistaken for
    an empty database.

    Both operations raise DriverError on any underlying failure.
    """

    def __init__(self, *, allow_writes: bool = False) -> None:
        self._allow_writes = bool(allow_writes)

    @property
    def allow_writes(self) -> bool:
        """Whether mutating statements may run against this connector."""
        return self._allow_writes

    async def execute_sql(self, sql: str) -> ExecuteSqlResult:
        """Execute an arbitrary SQL statement."""
        raise ConnectorNotImplementedError(type(self).__name__, "execute_sql")

    async def show_schema(self) -> SchemaDescription:
        """Return ``{table_name: definition}`` for every visible table."""
        raise ConnectorNotImplementedError(type(self).__name__, "show_schema")

    async def close(self) -> None:
        """Release connection resources. Default is a no-op."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(allow_writes={self._allow_writes})"
