"""
dbgate Resource Registry

Name-keyed store of database connectors. Connectors are registered once
at startup and looked up by name on every tool call.

With ``activation=True`` the registry separates "known" from "usable":
a registered name must also be enabled before lookup succeeds. This lets
a host declare every configured database up front while exposing only a
subset to a given session or agent.

The registry is populated during single-threaded setup and then only
read. Registration after setup must be serialized by the caller.
"""

from __future__ import annotations

from dbgate.connectors.base import DatabaseConnector
from dbgate.exceptions import (
    ResourceNotEnabledError,
    ResourceNotFoundError,
    UnknownResourceError,
)
from dbgate.logging import get_logger

logger = get_logger("dbgate.registry")


class ResourceRegistry:
    """Registry mapping case-sensitive resource names to connectors."""

    def __init__(self, *, activation: bool = False) -> None:
        self._connectors: dict[str, DatabaseConnector] = {}
        self._activation = activation
        self._active: set[str] = set()

    @property
    def activation(self) -> bool:
        return self._activation

    def register(self, name: str, connector: DatabaseConnector) -> None:
        """Register a connector under ``name``.

        Re-registering a name replaces the previous connector (last write
        wins). Activation state of the name is preserved.
        """
        if name in self._connectors:
            logger.warning("Replacing registered database", extra={"resource": name})
        self._connectors[name] = connector
        logger.debug("Registered database", extra={"resource": name})

    def enable(self, *names: str) -> None:
        """Mark each name active.

        Raises UnknownResourceError if any name was never registered; in
        that case no name from the call is enabled.
        """
        for name in names:
            if name not in self._connectors:
                raise UnknownResourceError(name)
        self._active.update(names)

    def is_enabled(self, name: str) -> bool:
        if not self._activation:
            return name in self._connectors
        return name in self._active

    def lookup(self, name: str) -> DatabaseConnector:
        """Return the connector registered under ``name``.

        Raises:
            ResourceNotFoundError: the name was never registered.
            ResourceNotEnabledError: registered but not enabled
                (activation registries only).
        """
        connector = self._connectors.get(name)
        if connector is None:
            raise ResourceNotFoundError(name)
        if self._activation and name not in self._active:
            raise ResourceNotEnabledError(name)
        return connector

    def get(self, name: str) -> DatabaseConnector | None:
        """Look up a connector, returning None instead of raising."""
        try:
            return self.lookup(name)
        except (ResourceNotFoundError, ResourceNotEnabledError):
            return None

    def list(self) -> list[str]:
        """Names available for lookup, sorted for stable display."""
        if self._activation:
            return sorted(n for n in self._connectors if n in self._active)
        return sorted(self._connectors)

    def registered(self) -> list[str]:
        """All registered names, regardless of activation."""
        return sorted(self._connectors)

    def connectors(self) -> list[DatabaseConnector]:
        """All registered connectors, for lifecycle management (e.g. close)."""
        return list(self._connectors.values())

    def __len__(self) -> int:
        return len(self._connectors)

    def __contains__(self, name: object) -> bool:
        return name in self._connectors
