"""
dbgate Database Tools

The tool-style surface a host agent calls. Each tool is defined in
Claude API ``tool_use`` format and dispatched through the gateway or
inspector, so every call passes the same safety checks.

Errors never escape ``DatabaseToolset.execute``: a DbGateError is turned
into a ToolResult with ``is_error=True`` whose content names the error
class, so the agent can tell "no such database" from "write blocked".
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from dbgate.exceptions import DbGateError
from dbgate.gateway import ExecutionGateway
from dbgate.inspector import SchemaInspector
from dbgate.logging import get_logger
from dbgate.registry import ResourceRegistry

logger = get_logger("dbgate.tools")

EXECUTE_SQL = "database/executeSql"
SHOW_SCHEMA = "database/showSchema"
LIST_DATABASES = "database/listDatabases"


@dataclass
class ToolDefinition:
    """A tool that can be offered to an agent."""
    name: str
    description: str
    input_schema: dict = field(default_factory=dict)


@dataclass
class ToolResult:
    """Result of executing a tool."""
    tool_use_id: str
    content: str
    is_error: bool = False


EXECUTE_SQL_TOOL = ToolDefinition(
    name=EXECUTE_SQL,
    description=(
        "Executes an arbitrary SQL query on a named database. Statements other "
        "than SELECT are treated as writes and may be refused or require "
        "confirmation. WARNING: writes can modify or delete data."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "databaseName": {
                "type": "string",
                "description": "The name of the database to target.",
            },
            "sqlQuery": {
                "type": "string",
                "description": "The SQL query to execute.",
            },
        },
        "required": ["databaseName", "sqlQuery"],
    },
)

SHOW_SCHEMA_TOOL = ToolDefinition(
    name=SHOW_SCHEMA,
    description=(
        "Shows the 'CREATE TABLE' statements (or equivalent) for all tables "
        "in the specified database."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "databaseName": {
                "type": "string",
                "description": "The name of the database for which to show the schema.",
            },
        },
        "required": ["databaseName"],
    },
)

LIST_DATABASES_TOOL = ToolDefinition(
    name=LIST_DATABASES,
    description="Lists the names of the databases available to the database tools.",
    input_schema={"type": "object", "properties": {}},
)

ALL_DATABASE_TOOLS = [EXECUTE_SQL_TOOL, SHOW_SCHEMA_TOOL, LIST_DATABASES_TOOL]


class DatabaseToolset:
    """Dispatches database tool calls by name."""

    def __init__(
        self,
        registry: ResourceRegistry,
        gateway: ExecutionGateway | None = None,
        inspector: SchemaInspector | None = None,
    ):
        self._registry = registry
        self._gateway = gateway or ExecutionGateway(registry)
        self._inspector = inspector or SchemaInspector(registry)
        self._handlers = {
            EXECUTE_SQL: self._execute_sql,
            SHOW_SCHEMA: self._show_schema,
            LIST_DATABASES: self._list_databases,
        }

    async def execute(
        self, name: str, tool_input: dict[str, Any] | None = None, tool_use_id: str = ""
    ) -> ToolResult:
        """Execute a database tool by name with the given input."""
        handler = self._handlers.get(name)
        if handler is None:
            return ToolResult(
                tool_use_id=tool_use_id,
                content=f"Unknown tool: {name}",
                is_error=True,
            )
        try:
            value = await handler(tool_input or {})
        except DbGateError as e:
            logger.info(
                f"Tool call failed: {e}",
                extra={"tool_name": name, "action": type(e).__name__, "details": e.details},
            )
            return ToolResult(
                tool_use_id=tool_use_id,
                content=f"[{type(e).__name__}] {e}",
                is_error=True,
            )
        return ToolResult(tool_use_id=tool_use_id, content=_serialize(value))

    def get_schemas(self) -> list[dict]:
        """Get tool schemas for the Claude API ``tools`` parameter."""
        return [
            {
                "name": t.name,
                "description": t.description,
                "input_schema": t.input_schema,
            }
            for t in ALL_DATABASE_TOOLS
        ]

    @property
    def tool_names(self) -> list[str]:
        return [t.name for t in ALL_DATABASE_TOOLS]

    async def _execute_sql(self, tool_input: dict[str, Any]) -> Any:
        return await self._gateway.execute_query(
            tool_input.get("databaseName", ""), tool_input.get("sqlQuery", "")
        )

    async def _show_schema(self, tool_input: dict[str, Any]) -> Any:
        return await self._inspector.describe_schema(tool_input.get("databaseName", ""))

    async def _list_databases(self, tool_input: dict[str, Any]) -> Any:
        return self._registry.list()


def _serialize(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return json.dumps(value, default=str)
