"""
dbgate Statement Classifier

Purely lexical read/write classification. A statement is a read only if
its first token, after trimming whitespace, is ``SELECT`` (any case).
Everything else is mutating, including CTE-prefixed statements
(``WITH ... SELECT``) and multi-statement batches, which are judged
solely by their first token. No SQL parsing is attempted.
"""

from __future__ import annotations

from dbgate.models import StatementKind

READ_KEYWORD = "SELECT"


def _leading_token(sql: str) -> str:
    stripped = sql.strip()
    if not stripped:
        return ""
    token = stripped.split(maxsplit=1)[0]
    # "SELECT*FROM t" and "SELECT(1)" still start with SELECT
    end = 0
    while end < len(token) and (token[end].isalnum() or token[end] == "_"):
        end += 1
    return token[:end]


def classify_statement(sql: str) -> StatementKind:
    """Return READ for SELECT statements, MUTATING for everything else."""
    if _leading_token(sql).upper() == READ_KEYWORD:
        return StatementKind.READ
    return StatementKind.MUTATING


def is_mutating(sql: str) -> bool:
    return classify_statement(sql) is StatementKind.MUTATING
