"""
dbgate Models

Pydantic models for the data that crosses the pipeline boundary:
query results, statement classification and confirmation requests.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, model_validator

CellValue = Union[str, int, float, None]


class StatementKind(str, Enum):
    """Lexical classification of a SQL statement."""
    READ = "READ"
    MUTATING = "MUTATING"


class ExecuteSqlResult(BaseModel):
    """Rows and column names returned by a connector.

    ``fields`` lists the columns in the order they appear in each row.
    Every key present in a row must also appear in ``fields``.
    """
    rows: list[dict[str, CellValue]] = Field(default_factory=list)
    fields: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _rows_match_fields(self) -> ExecuteSqlResult:
        known = set(self.fields)
        for index, row in enumerate(self.rows):
            unknown = [key for key in row if key not in known]
            if unknown:
                raise ValueError(
                    f"Row {index} has columns not listed in fields: {', '.join(unknown)}"
                )
        return self


SchemaDescription = dict[str, str]


class ConfirmationRequest(BaseModel):
    """A pending mutating statement awaiting interactive confirmation."""
    id: str = Field(default_factory=lambda: f"cr-{uuid.uuid4().hex[:8]}")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    resource: str
    sql: str

    @property
    def message(self) -> str:
        return (
            f"Execute SQL write operation on database '{self.resource}'?\n\n"
            f"Query: {self.sql}"
        )


class ContextItem(BaseModel):
    """A chunk of text injected into upstream context (e.g. a prompt)."""
    role: str = "user"
    content: str


class IterableItem(BaseModel):
    """A single row produced by the SQL iterable provider."""
    value: dict[str, CellValue]
    variables: dict[str, Any] = Field(default_factory=dict)
