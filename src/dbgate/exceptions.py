"""
dbgate Custom Exceptions

Structured exception hierarchy for the resource registry and the
safety-gated execution pipeline. All dbgate exceptions inherit from
DbGateError and carry a ``details`` dict suitable for surfacing to users.

Exception hierarchy:
    DbGateError
    +-- InvalidArgumentError          (missing or empty required input)
    +-- ResourceError                 (base for name-resolution failures)
    |   +-- ResourceNotFoundError     (name was never registered)
    |   +-- ResourceNotEnabledError   (registered but not activated)
    |   +-- UnknownResourceError      (enable() on an unregistered name)
    +-- WriteNotPermittedError        (mutating SQL against a read-only connector)
    +-- UserRejectedError             (confirmation declined or timed out)
    +-- ConnectorNotImplementedError  (connector did not override an operation)
    +-- DriverError                   (connector-specific failure)
"""

from __future__ import annotations


class DbGateError(Exception):
    """Base exception for all dbgate errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class InvalidArgumentError(DbGateError):
    """Raised when a required argument is missing or empty."""

    def __init__(self, argument: str, message: str | None = None, details: dict | None = None):
        super().__init__(
            message or f"{argument} is required",
            details={"argument": argument, **(details or {})},
        )
        self.argument = argument


class ResourceError(DbGateError):
    """Base exception for failures resolving a resource name."""

    def __init__(self, resource: str, message: str, details: dict | None = None):
        super().__init__(message, details={"resource": resource, **(details or {})})
        self.resource = resource


class ResourceNotFoundError(ResourceError):
    """Raised when looking up a name that was never registered."""

    def __init__(self, resource: str, details: dict | None = None):
        super().__init__(resource, f"Database '{resource}' not found", details)


class ResourceNotEnabledError(ResourceError):
    """Raised when a registered resource has not been enabled."""

    def __init__(self, resource: str, details: dict | None = None):
        super().__init__(
            resource, f"Database '{resource}' exists but is not enabled", details
        )


class UnknownResourceError(ResourceError):
    """Raised when enabling a name that was never registered.

    Activation can only narrow the registered set, never add to it.
    """

    def __init__(self, resource: str, details: dict | None = None):
        super().__init__(
            resource, f"Cannot enable unknown database '{resource}'", details
        )


class WriteNotPermittedError(DbGateError):
    """Raised when a mutating statement targets a read-only connector."""

    def __init__(self, resource: str, sql: str, details: dict | None = None):
        super().__init__(
            f"Write operations are not permitted on database '{resource}'",
            details={"resource": resource, "sql": sql, **(details or {})},
        )
        self.resource = resource
        self.sql = sql


class UserRejectedError(DbGateError):
    """Raised when the confirmation channel declines a mutating statement."""

    def __init__(
        self,
        resource: str,
        sql: str,
        reason: str = "User did not approve the SQL query that was provided",
        details: dict | None = None,
    ):
        super().__init__(
            f"{reason} (database '{resource}')",
            details={"resource": resource, "sql": sql, **(details or {})},
        )
        self.resource = resource
        self.sql = sql


class ConnectorNotImplementedError(DbGateError, NotImplementedError):
    """Raised when a connector does not override a required operation.

    Distinguishes a misconfigured connector from one that returned
    an empty result.
    """

    def __init__(self, connector: str, operation: str, details: dict | None = None):
        super().__init__(
            f"Method '{operation}()' must be implemented by {connector}",
            details={"connector": connector, "operation": operation, **(details or {})},
        )
        self.connector = connector
        self.operation = operation


class DriverError(DbGateError):
    """Raised for any connector-specific failure.

    The message comes from the underlying driver and is passed through
    verbatim; the core does not interpret it.
    """

    def __init__(self, resource: str, message: str, details: dict | None = None):
        super().__init__(
            f"Database '{resource}' error: {message}",
            details={"resource": resource, "driver_message": message, **(details or {})},
        )
        self.resource = resource
        self.driver_message = message
