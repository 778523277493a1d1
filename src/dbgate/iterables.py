"""
dbgate SQL Iterable Provider

Turns the rows of a query into iterable items for templated batch work.
Queries go through the ExecutionGateway, so the usual classification and
write gate apply.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator

from dbgate.gateway import ExecutionGateway
from dbgate.models import IterableItem

ITERABLE_TYPE = "sql"


async def iterate_query(
    gateway: ExecutionGateway, resource_name: str, sql_text: str
) -> AsyncIterator[IterableItem]:
    """Yield one IterableItem per result row.

    Each item's variables expose the row itself, ``rowNumber`` (1-based),
    ``totalRows``, a ``json`` rendering of the row, and every column by name.
    Column names override the built-in variable names on collision.
    """
    result = await gateway.execute_query(resource_name, sql_text)
    total = len(result.rows)
    for index, row in enumerate(result.rows):
        yield IterableItem(
            value=row,
            variables={
                "row": row,
                "rowNumber": index + 1,
                "totalRows": total,
                "json": json.dumps(row, default=str),
                **row,
            },
        )
