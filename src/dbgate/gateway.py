"""
dbgate Execution Gateway

The safety component between a tool call and the connector. Every
statement is:

1. Validated (resource name and SQL must be non-empty)
2. Resolved to a connector through the ResourceRegistry
3. Classified as READ or MUTATING (lexically, by first token)
4. For MUTATING statements, gated:
   - connector.allow_writes is False  -> WriteNotPermittedError
   - a confirmation callback exists   -> ask; rejection -> UserRejectedError
   - no callback                      -> allow_writes alone authorizes
5. Forwarded to connector.execute_sql, result returned verbatim

The flag gates capability, the confirmation gates intent. A connector
that is not allowed to write is never prompted for.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable
from typing import Any, Union

from dbgate.classifier import classify_statement
from dbgate.connectors.base import DatabaseConnector
from dbgate.exceptions import (
    DbGateError,
    DriverError,
    InvalidArgumentError,
    UserRejectedError,
    WriteNotPermittedError,
)
from dbgate.logging import get_logger
from dbgate.models import ConfirmationRequest, ExecuteSqlResult, StatementKind
from dbgate.registry import ResourceRegistry

logger = get_logger("dbgate.gateway")

ConfirmationCallback = Callable[[str], Union[bool, Awaitable[bool]]]


def require_argument(name: str, value: Any) -> str:
    """Return ``value`` if it is a non-blank string, else raise InvalidArgumentError."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(name)
    return value


def driver_error_for(resource_name: str, exc: Exception) -> DbGateError:
    """Attribute a connector failure to the registered ``resource_name``.

    Connectors do not know the name they are registered under, so a
    DriverError naming anything else is re-issued with the same driver
    message. Other DbGateErrors (e.g. ConnectorNotImplementedError) are
    returned as-is; foreign exceptions become a DriverError.
    """
    if isinstance(exc, DriverError):
        if exc.resource == resource_name:
            return exc
        return DriverError(
            resource_name, exc.driver_message, details={"connector_resource": exc.resource}
        )
    if isinstance(exc, DbGateError):
        return exc
    return DriverError(resource_name, f"{type(exc).__name__}: {exc}")


async def _resolve(result: Any) -> Any:
    # Callbacks may return a bool, a coroutine, or a coroutine resolving to a Future.
    while inspect.isawaitable(result):
        result = await result
    return result


class ExecutionGateway:
    """Resolves, classifies and authorizes SQL before it reaches a connector.

    ``confirmation_callback`` receives the confirmation message and returns
    (or resolves to) a bool. ``confirmation_timeout`` is in seconds; None
    waits indefinitely. Expiry counts as a rejection.

    When a timeout is set, a plain (non-async) callback runs in a worker
    thread so a blocking prompt cannot stall the event loop past the
    deadline. Without a timeout it is called directly on the loop.
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        confirmation_callback: ConfirmationCallback | None = None,
        confirmation_timeout: float | None = None,
    ):
        self._registry = registry
        self._confirmation_callback = confirmation_callback
        self._confirmation_timeout = confirmation_timeout

    @property
    def registry(self) -> ResourceRegistry:
        return self._registry

    async def execute_query(self, resource_name: str, sql_text: str) -> ExecuteSqlResult:
        """Execute ``sql_text`` against the connector named ``resource_name``.

        Raises:
            InvalidArgumentError: either argument is empty.
            ResourceNotFoundError / ResourceNotEnabledError: lookup failed.
            WriteNotPermittedError: mutating SQL on a read-only connector.
            UserRejectedError: the confirmation was declined or timed out.
            DriverError: the connector failed.
        """
        require_argument("databaseName", resource_name)
        require_argument("sqlQuery", sql_text)

        connector = self._registry.lookup(resource_name)
        kind = classify_statement(sql_text)
        logger.info(
            "Statement classified",
            extra={"resource": resource_name, "statement_kind": kind.value},
        )

        if kind is StatementKind.MUTATING:
            await self._authorize(resource_name, connector, sql_text)

        logger.debug(f"Executing: {sql_text}", extra={"resource": resource_name})
        start = time.monotonic()
        try:
            result = await connector.execute_sql(sql_text)
        except Exception as e:
            error = driver_error_for(resource_name, e)
            if error is e:
                raise
            raise error from e

        logger.info(
            "Statement executed",
            extra={
                "resource": resource_name,
                "statement_kind": kind.value,
                "duration_ms": round((time.monotonic() - start) * 1000, 2),
            },
        )
        return result

    async def _authorize(
        self, resource_name: str, connector: DatabaseConnector, sql_text: str
    ) -> None:
        if not connector.allow_writes:
            logger.warning(
                "Write blocked: connector is read-only",
                extra={"resource": resource_name, "action": "WRITE_NOT_PERMITTED"},
            )
            raise WriteNotPermittedError(resource_name, sql_text)

        if self._confirmation_callback is None:
            return

        request = ConfirmationRequest(resource=resource_name, sql=sql_text)
        if not await self._request_confirmation(self._confirmation_callback, request):
            logger.warning(
                "Write rejected by user",
                extra={"resource": resource_name, "action": "USER_REJECTED"},
            )
            raise UserRejectedError(resource_name, sql_text)

        logger.info(
            "Write confirmed",
            extra={"resource": resource_name, "action": "USER_CONFIRMED"},
        )

    async def _request_confirmation(
        self, callback: ConfirmationCallback, request: ConfirmationRequest
    ) -> bool:
        try:
            if self._confirmation_timeout is not None:
                if inspect.iscoroutinefunction(callback):
                    pending = _resolve(callback(request.message))
                else:
                    pending = _resolve(asyncio.to_thread(callback, request.message))
                approved = await asyncio.wait_for(pending, timeout=self._confirmation_timeout)
            else:
                approved = await _resolve(callback(request.message))
        except asyncio.TimeoutError as e:
            raise UserRejectedError(
                request.resource,
                request.sql,
                reason=f"Confirmation timed out after {self._confirmation_timeout}s",
            ) from e
        except Exception as e:
            raise UserRejectedError(
                request.resource,
                request.sql,
                reason=f"Confirmation failed: {type(e).__name__}: {e}",
            ) from e
        return bool(approved)
