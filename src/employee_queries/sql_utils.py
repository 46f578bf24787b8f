"""Helpers for inspecting and rendering SQL text with sqlglot."""

from typing import Optional

import sqlglot
from sqlglot import exp


def normalize_sql(sql: str) -> str:
    """Collapse all runs of whitespace into single spaces."""
    return " ".join(sql.split())


def split_statements(script: str, dialect: str = "duckdb") -> list[str]:
    """Split a SQL script into individual statements.

    Args:
        script: SQL text holding one or more ';'-separated statements.
        dialect: SQL dialect for parsing/formatting.

    Returns:
        List of statement strings, without trailing semicolons.
    """
    return [
        statement.sql(dialect=dialect)
        for statement in sqlglot.parse(script, read=dialect)
        if statement is not None
    ]


def statement_kind(sql: str, dialect: str = "duckdb") -> str:
    """Classify a single statement.

    Returns:
        One of "query", "view", "index", "table" or "insert".

    Raises:
        ValueError: If the statement is none of the above.
    """
    parsed = sqlglot.parse_one(sql, read=dialect)
    if isinstance(parsed, exp.Create):
        kind = (parsed.args.get("kind") or "").lower()
        if kind in {"view", "index", "table"}:
            return kind
        raise ValueError(f"Unsupported CREATE kind: {kind or 'unknown'}")
    if isinstance(parsed, exp.Insert):
        return "insert"
    if isinstance(parsed, exp.Query):
        return "query"
    raise ValueError(f"Unsupported statement: {normalize_sql(sql)[:60]}")


def created_object_name(sql: str, dialect: str = "duckdb") -> Optional[str]:
    """Return the name of the table, view or index a CREATE statement defines."""
    parsed = sqlglot.parse_one(sql, read=dialect)
    if not isinstance(parsed, exp.Create):
        return None
    return parsed.this.name.lower()


def referenced_relations(sql: str, dialect: str = "duckdb") -> list[str]:
    """Return the tables and views a statement reads from.

    CTE names and the object created by a CREATE statement are excluded.

    Args:
        sql: A single SQL statement.
        dialect: SQL dialect for parsing.

    Returns:
        Sorted list of lowercase relation names.
    """
    parsed = sqlglot.parse_one(sql, read=dialect)
    cte_names = {cte.alias_or_name.lower() for cte in parsed.find_all(exp.CTE)}
    relations = {table.name.lower() for table in parsed.find_all(exp.Table)}

    created = created_object_name(sql, dialect=dialect)
    if created:
        relations.discard(created)

    return sorted(relations - cte_names)


def transpile(sql: str, dialect: str, read: str = "duckdb", pretty: bool = False) -> str:
    """Render a statement written in `read` for another sqlglot dialect."""
    return sqlglot.transpile(sql, read=read, write=dialect, pretty=pretty)[0]
