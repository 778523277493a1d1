"""Tests for the dbgate ExecutionGateway.

Covers argument validation, lookup errors, classification, the write
gate (allow_writes flag then confirmation), and driver error propagation.
"""

import asyncio
import time

import pytest

from dbgate.connectors.base import DatabaseConnector
from dbgate.connectors.sqlite import SQLiteConnector
from dbgate.exceptions import (
    ConnectorNotImplementedError,
    DriverError,
    InvalidArgumentError,
    ResourceNotEnabledError,
    ResourceNotFoundError,
    UserRejectedError,
    WriteNotPermittedError,
)
from dbgate.gateway import ExecutionGateway
from dbgate.models import ExecuteSqlResult
from dbgate.registry import ResourceRegistry

from conftest import FakeConnector


def _confirmer(answer: bool, received: list[str] | None = None):
    async def callback(message: str) -> bool:
        if received is not None:
            received.append(message)
        return answer

    return callback


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,sql", [("", "SELECT 1"), ("analytics", ""), ("analytics", "   ")])
    async def test_empty_arguments_rejected(self, registry, read_only_connector, name, sql):
        gateway = ExecutionGateway(registry)
        with pytest.raises(InvalidArgumentError):
            await gateway.execute_query(name, sql)
        assert read_only_connector.executed == []

    @pytest.mark.asyncio
    async def test_unknown_resource(self, registry):
        gateway = ExecutionGateway(registry)
        with pytest.raises(ResourceNotFoundError):
            await gateway.execute_query("missing", "SELECT 1")

    @pytest.mark.asyncio
    async def test_not_enabled_resource(self):
        registry = ResourceRegistry(activation=True)
        registry.register("scratch", FakeConnector(allow_writes=True))
        gateway = ExecutionGateway(registry)
        with pytest.raises(ResourceNotEnabledError):
            await gateway.execute_query("scratch", "SELECT 1")


class TestReads:
    @pytest.mark.asyncio
    async def test_select_skips_gate(self, registry, read_only_connector):
        received: list[str] = []
        gateway = ExecutionGateway(registry, confirmation_callback=_confirmer(False, received))
        result = await gateway.execute_query("analytics", "SELECT * FROM t")
        assert result is read_only_connector.result
        assert received == []

    @pytest.mark.asyncio
    async def test_lowercase_leading_whitespace_is_read(self, registry, read_only_connector):
        gateway = ExecutionGateway(registry)
        await gateway.execute_query("analytics", "  select 1")
        assert read_only_connector.executed == ["  select 1"]


class TestWriteGate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("sql", ["UPDATE t SET x=1", "DELETE FROM t", "DROP TABLE t"])
    async def test_read_only_connector_blocks_writes(self, registry, read_only_connector, sql):
        gateway = ExecutionGateway(registry)
        with pytest.raises(WriteNotPermittedError) as exc:
            await gateway.execute_query("analytics", sql)
        assert exc.value.resource == "analytics"
        assert read_only_connector.executed == []

    @pytest.mark.asyncio
    async def test_read_only_connector_never_prompts(self, registry, read_only_connector):
        received: list[str] = []
        gateway = ExecutionGateway(registry, confirmation_callback=_confirmer(True, received))
        with pytest.raises(WriteNotPermittedError):
            await gateway.execute_query("analytics", "DELETE FROM t")
        assert received == []
        assert read_only_connector.executed == []

    @pytest.mark.asyncio
    async def test_flag_alone_authorizes_without_channel(self, registry, writable_connector):
        gateway = ExecutionGateway(registry)
        await gateway.execute_query("scratch", "DELETE FROM t")
        assert writable_connector.executed == ["DELETE FROM t"]

    @pytest.mark.asyncio
    async def test_rejection_blocks_execution(self, registry, writable_connector):
        gateway = ExecutionGateway(registry, confirmation_callback=_confirmer(False))
        with pytest.raises(UserRejectedError):
            await gateway.execute_query("scratch", "UPDATE t SET x=1")
        assert writable_connector.executed == []

    @pytest.mark.asyncio
    async def test_approval_executes_once_unmodified(self, registry, writable_connector):
        received: list[str] = []
        sql = "  UPDATE t SET x = 1 WHERE id = 7  "
        gateway = ExecutionGateway(registry, confirmation_callback=_confirmer(True, received))
        await gateway.execute_query("scratch", sql)
        assert writable_connector.executed == [sql]
        assert len(received) == 1
        assert "scratch" in received[0]
        assert sql in received[0]

    @pytest.mark.asyncio
    async def test_sync_callback_supported(self, registry, writable_connector):
        gateway = ExecutionGateway(registry, confirmation_callback=lambda message: True)
        await gateway.execute_query("scratch", "INSERT INTO t VALUES (1)")
        assert len(writable_connector.executed) == 1

    @pytest.mark.asyncio
    async def test_callback_returning_future(self, registry, writable_connector):
        async def callback(message: str):
            future = asyncio.get_event_loop().create_future()
            future.set_result(True)
            return future

        gateway = ExecutionGateway(registry, confirmation_callback=callback)
        await gateway.execute_query("scratch", "INSERT INTO t VALUES (1)")
        assert len(writable_connector.executed) == 1

    @pytest.mark.asyncio
    async def test_timeout_counts_as_rejection(self, registry, writable_connector):
        async def callback(message: str):
            return asyncio.get_event_loop().create_future()

        gateway = ExecutionGateway(
            registry, confirmation_callback=callback, confirmation_timeout=0.05
        )
        with pytest.raises(UserRejectedError, match="timed out"):
            await gateway.execute_query("scratch", "DELETE FROM t")
        assert writable_connector.executed == []

    @pytest.mark.asyncio
    async def test_failing_callback_counts_as_rejection(self, registry, writable_connector):
        def callback(message: str) -> bool:
            raise RuntimeError("channel closed")

        gateway = ExecutionGateway(registry, confirmation_callback=callback)
        with pytest.raises(UserRejectedError) as exc:
            await gateway.execute_query("scratch", "DELETE FROM t")
        assert isinstance(exc.value.__cause__, RuntimeError)
        assert writable_connector.executed == []


class TestDriverErrors:
    @pytest.mark.asyncio
    async def test_driver_message_propagates(self):
        registry = ResourceRegistry()
        registry.register("broken", FakeConnector(fail_with="connection refused"))
        gateway = ExecutionGateway(registry)
        with pytest.raises(DriverError, match="connection refused"):
            await gateway.execute_query("broken", "SELECT 1")

    @pytest.mark.asyncio
    async def test_foreign_exception_wrapped(self):
        class Exploding(FakeConnector):
            async def execute_sql(self, sql: str) -> ExecuteSqlResult:
                raise OSError("socket closed")

        registry = ResourceRegistry()
        registry.register("flaky", Exploding())
        gateway = ExecutionGateway(registry)
        with pytest.raises(DriverError) as exc:
            await gateway.execute_query("flaky", "SELECT 1")
        assert exc.value.resource == "flaky"
        assert "socket closed" in str(exc.value)
        assert isinstance(exc.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_driver_error_names_registered_resource(self, tmp_path):
        registry = ResourceRegistry()
        registry.register("analytics", SQLiteConnector(str(tmp_path / "a.db")))
        gateway = ExecutionGateway(registry)
        with pytest.raises(DriverError) as exc:
            await gateway.execute_query("analytics", "SELECT * FROM nope")
        assert exc.value.resource == "analytics"
        assert exc.value.details["resource"] == "analytics"
        assert exc.value.driver_message == "no such table: nope"
        assert "a.db" not in str(exc.value)
        assert isinstance(exc.value.__cause__, DriverError)
        await registry.lookup("analytics").close()

    @pytest.mark.asyncio
    async def test_unimplemented_connector_not_wrapped(self):
        registry = ResourceRegistry()
        registry.register("bare", DatabaseConnector())
        gateway = ExecutionGateway(registry)
        with pytest.raises(ConnectorNotImplementedError) as exc:
            await gateway.execute_query("bare", "SELECT 1")
        assert not isinstance(exc.value, DriverError)


class TestBlockingConfirmation:
    @pytest.mark.asyncio
    async def test_blocking_sync_callback_still_times_out(self, registry, writable_connector):
        def callback(message: str) -> bool:
            time.sleep(0.3)
            return True

        gateway = ExecutionGateway(
            registry, confirmation_callback=callback, confirmation_timeout=0.05
        )
        with pytest.raises(UserRejectedError, match="timed out"):
            await gateway.execute_query("scratch", "DELETE FROM t")
        assert writable_connector.executed == []

    @pytest.mark.asyncio
    async def test_sync_callback_with_timeout_approves(self, registry, writable_connector):
        gateway = ExecutionGateway(
            registry, confirmation_callback=lambda message: True, confirmation_timeout=1.0
        )
        await gateway.execute_query("scratch", "DELETE FROM t")
        assert writable_connector.executed == ["DELETE FROM t"]
