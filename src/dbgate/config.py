"""
dbgate Configuration

Declares the databases a host exposes. Parsed once at startup, either
from an explicit JSON file or from the path in ``DBGATE_CONFIG``:

    {
      "activation": true,
      "providers": {
        "analytics": {"type": "sqlite", "allow_writes": false,
                      "options": {"path": "analytics.db"}},
        "scratch":   {"type": "sqlite", "allow_writes": true,
                      "enabled": false}
      }
    }
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from dbgate.connectors import CONNECTOR_TYPES
from dbgate.connectors.base import DatabaseConnector
from dbgate.exceptions import InvalidArgumentError
from dbgate.logging import get_logger
from dbgate.registry import ResourceRegistry

logger = get_logger("dbgate.config")

CONFIG_ENV_VAR = "DBGATE_CONFIG"


class ConnectorConfig(BaseModel):
    """Settings for one named database."""
    type: str
    allow_writes: bool = False
    enabled: bool = True
    options: dict[str, Any] = Field(default_factory=dict)


class DatabaseConfig(BaseModel):
    """Top-level configuration: named providers plus the activation mode."""
    providers: dict[str, ConnectorConfig] = Field(default_factory=dict)
    activation: bool = False


def load_config(path: str | Path | None = None) -> DatabaseConfig:
    """Load configuration from ``path`` or the ``DBGATE_CONFIG`` file.

    Returns an empty configuration if neither is set.
    """
    source = path or os.environ.get(CONFIG_ENV_VAR)
    if not source:
        return DatabaseConfig()
    config_path = Path(source).expanduser()
    with config_path.open(encoding="utf-8") as f:
        data = json.load(f)
    config = DatabaseConfig.model_validate(data)
    logger.info(f"Loaded {len(config.providers)} database providers from {config_path}")
    return config


def build_connector(name: str, config: ConnectorConfig) -> DatabaseConnector:
    connector_cls = CONNECTOR_TYPES.get(config.type.lower())
    if connector_cls is None:
        raise InvalidArgumentError(
            "type",
            f"Unknown connector type '{config.type}' for database '{name}'. "
            f"Available: {', '.join(sorted(CONNECTOR_TYPES))}",
        )
    return connector_cls(allow_writes=config.allow_writes, **config.options)


def build_registry(config: DatabaseConfig) -> ResourceRegistry:
    """Construct and register every configured connector.

    In activation mode only providers with ``enabled=True`` are enabled;
    the others stay registered but unusable.
    """
    registry = ResourceRegistry(activation=config.activation)
    for name, provider in config.providers.items():
        registry.register(name, build_connector(name, provider))
    if config.activation:
        registry.enable(*(n for n, p in config.providers.items() if p.enabled))
    return registry
