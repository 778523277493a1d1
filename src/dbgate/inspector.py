"""
dbgate Schema Inspector

Resolves a connector and asks for its schema. Schema inspection is
read-only by contract, so there is no classification or gate.
"""

from __future__ import annotations

from dbgate.gateway import driver_error_for, require_argument
from dbgate.logging import get_logger
from dbgate.models import SchemaDescription
from dbgate.registry import ResourceRegistry

logger = get_logger("dbgate.inspector")


class SchemaInspector:
    """Returns ``{table: definition}`` for a named resource."""

    def __init__(self, registry: ResourceRegistry):
        self._registry = registry

    async def describe_schema(self, resource_name: str) -> SchemaDescription:
        require_argument("databaseName", resource_name)
        connector = self._registry.lookup(resource_name)
        try:
            schema = await connector.show_schema()
        except Exception as e:
            error = driver_error_for(resource_name, e)
            if error is e:
                raise
            raise error from e
        logger.info(
            f"Described {len(schema)} tables",
            extra={"resource": resource_name, "action": "SHOW_SCHEMA"},
        )
        return schema
