"""
dbgate Connectors

Each connector adapts one backing database to the connector contract.
Connector kinds are looked up by type name when building a registry
from configuration.
"""

from __future__ import annotations

from dbgate.connectors.base import DatabaseConnector
from dbgate.connectors.sqlite import SQLiteConnector

CONNECTOR_TYPES: dict[str, type[DatabaseConnector]] = {
    "sqlite": SQLiteConnector,
}

__all__ = ["CONNECTOR_TYPES", "DatabaseConnector", "SQLiteConnector"]
