"""
dbgate Context Exporter

Renders the names of available databases as text for injection into
upstream context, such as an agent prompt. Never fails and never returns
an empty string: an empty registry produces an explicit message.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from dbgate.models import ContextItem
from dbgate.registry import ResourceRegistry

NO_RESOURCES_MESSAGE = "No databases are available for the database tool."
CONTEXT_HEADER = "/* These are the databases available for the database tool */:"


def describe_available_resources(registry: ResourceRegistry) -> str:
    """List the names ``registry.list()`` returns, one ``- name`` per line."""
    names = registry.list()
    if not names:
        return NO_RESOURCES_MESSAGE
    return CONTEXT_HEADER + "\n" + "\n".join(f"- {name}" for name in names)


def available_databases(registry: ResourceRegistry) -> Iterator[ContextItem]:
    """Context handler yielding one item describing the available databases."""
    yield ContextItem(role="user", content=describe_available_resources(registry))


ContextHandler = Callable[[ResourceRegistry], Iterator[ContextItem]]

CONTEXT_HANDLERS: dict[str, ContextHandler] = {
    "available-databases": available_databases,
}
