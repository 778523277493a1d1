"""
dbgate — Named Database Connectors Behind a Write-Safety Gate

Usage:
    from dbgate import ExecutionGateway, ResourceRegistry, SQLiteConnector

    registry = ResourceRegistry()
    registry.register("analytics", SQLiteConnector("analytics.db"))

    gateway = ExecutionGateway(registry, confirmation_callback=ask_user)
    result = await gateway.execute_query("analytics", "SELECT * FROM events")
"""

from dbgate.classifier import classify_statement, is_mutating
from dbgate.connectors import DatabaseConnector, SQLiteConnector
from dbgate.context import CONTEXT_HANDLERS, describe_available_resources
from dbgate.exceptions import (
    ConnectorNotImplementedError,
    DbGateError,
    DriverError,
    InvalidArgumentError,
    ResourceNotEnabledError,
    ResourceNotFoundError,
    UnknownResourceError,
    UserRejectedError,
    WriteNotPermittedError,
)
from dbgate.gateway import ExecutionGateway
from dbgate.inspector import SchemaInspector
from dbgate.models import ExecuteSqlResult, StatementKind
from dbgate.registry import ResourceRegistry
from dbgate.tools import DatabaseToolset

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "DatabaseConnector",
    "ExecutionGateway",
    "ResourceRegistry",
    "SchemaInspector",
    "SQLiteConnector",
    # Models
    "ExecuteSqlResult",
    "StatementKind",
    # Helpers
    "CONTEXT_HANDLERS",
    "DatabaseToolset",
    "classify_statement",
    "describe_available_resources",
    "is_mutating",
    # Errors
    "ConnectorNotImplementedError",
    "DbGateError",
    "DriverError",
    "InvalidArgumentError",
    "ResourceNotEnabledError",
    "ResourceNotFoundError",
    "UnknownResourceError",
    "UserRejectedError",
    "WriteNotPermittedError",
]
