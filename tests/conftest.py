"""Shared test fixtures for the dbgate test suite."""

import pytest

from dbgate.connectors.base import DatabaseConnector
from dbgate.exceptions import DriverError
from dbgate.models import ExecuteSqlResult
from dbgate.registry import ResourceRegistry


class FakeConnector(DatabaseConnector):
    """In-memory connector that records every call."""

    def __init__(
        self,
        allow_writes: bool = False,
        result: ExecuteSqlResult | None = None,
        schema: dict[str, str] | None = None,
        fail_with: str | None = None,
    ):
        super().__init__(allow_writes=allow_writes)
        self.result = result if result is not None else ExecuteSqlResult(rows=[{"x": 1}], fields=["x"])
        self.schema = schema if schema is not None else {"t": "CREATE TABLE t (x INTEGER)"}
        self.fail_with = fail_with
        self.executed: list[str] = []
        self.schema_calls = 0

    async def execute_sql(self, sql: str) -> ExecuteSqlResult:
        self.executed.append(sql)
        if self.fail_with:
            raise DriverError("fake", self.fail_with)
        return self.result

    async def show_schema(self) -> dict[str, str]:
        self.schema_calls += 1
        if self.fail_with:
            raise DriverError("fake", self.fail_with)
        return self.schema


@pytest.fixture
def read_only_connector():
    return FakeConnector(allow_writes=False)


@pytest.fixture
def writable_connector():
    return FakeConnector(allow_writes=True)


@pytest.fixture
def registry(read_only_connector, writable_connector):
    reg = ResourceRegistry()
    reg.register("analytics", read_only_connector)
    reg.register("scratch", writable_connector)
    return reg
