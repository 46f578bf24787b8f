"""DuckDB-backed employees database that runs catalog entries."""

from typing import Any, Optional, Union

import duckdb

from .catalog import CatalogEntry, get_entry, index_definitions, view_definitions
from .metrics import time_statement
from .results import QueryResult
from .schema import EMPLOYEES_TABLE, SEED_EMPLOYEES, Employee, load_employees


def setting_literal(value: Any) -> str:
    """Render a setting value as the right-hand side of a DuckDB SET."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


class EmployeeDatabase:
    """Owns a DuckDB connection holding the employees table and its views."""

    def __init__(
        self,
        database: str = ":memory:",
        db_settings: Optional[dict[str, Any]] = None,
        conn: Optional[duckdb.DuckDBPyConnection] = None,
    ) -> None:
        """Open (or wrap) a DuckDB connection.

        Args:
            database: DuckDB database path, ignored when conn is given.
            db_settings: Optional DuckDB settings to apply via SET.
            conn: Optional existing connection to use instead of opening one.
        """
        self.database = database
        self.conn: Optional[duckdb.DuckDBPyConnection] = (
            conn if conn is not None else duckdb.connect(database=database)
        )
        if db_settings:
            self.apply_settings(db_settings)

    def _connection(self) -> duckdb.DuckDBPyConnection:
        if self.conn is None:
            raise RuntimeError("EmployeeDatabase connection is closed.")
        return self.conn

    def apply_settings(self, db_settings: dict[str, Any]) -> None:
        """Apply DuckDB settings to the connection.

        Raises:
            duckdb.Error: If DuckDB rejects a setting.
        """
        conn = self._connection()
        for key, value in db_settings.items():
            conn.execute(f"SET {key} = {setting_literal(value)}")

    def execute(self, sql: str, parameters: Optional[list[Any]] = None) -> duckdb.DuckDBPyConnection:
        """Execute a statement and return the DuckDB cursor."""
        if parameters is None:
            return self._connection().execute(sql)
        return self._connection().execute(sql, parameters)

    def fetchall(self, sql: str) -> list[tuple]:
        return self.execute(sql).fetchall()

    def fetchone(self, sql: str) -> Optional[tuple]:
        return self.execute(sql).fetchone()

    def load_fixture(
        self,
        employees: Union[tuple[Employee, ...], list[Employee]] = SEED_EMPLOYEES,
        replace: bool = False,
        check_integrity: bool = True,
    ) -> int:
        """Create and populate the employees table. Returns the row count."""
        return load_employees(
            self._connection(),
            employees,
            replace=replace,
            check_integrity=check_integrity,
        )

    def table_exists(self, name: str) -> bool:
        """Check whether a base table or view with this name exists."""
        result = self.execute(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = 'main' AND table_name = ?
            """,
            [name.lower()],
        ).fetchone()
        return result is not None

    def list_views(self) -> list[str]:
        rows = self.execute(
            "SELECT view_name FROM duckdb_views() WHERE NOT internal ORDER BY view_name"
        ).fetchall()
        return [row[0] for row in rows]

    def list_indexes(self) -> list[str]:
        rows = self.execute(
            "SELECT index_name FROM duckdb_indexes() WHERE table_name = ? ORDER BY index_name",
            [EMPLOYEES_TABLE],
        ).fetchall()
        return [row[0] for row in rows]

    def create_views(self) -> list[str]:
        """Create (or replace) every catalog view. Returns the view names."""
        views = view_definitions()
        for entry in views.values():
            self.execute(entry.sql)
        return list(views)

    def create_indexes(self) -> list[str]:
        """Create every catalog index that does not exist yet."""
        indexes = index_definitions()
        for entry in indexes.values():
            self.execute(entry.sql)
        return list(indexes)

    def drop_indexes(self) -> None:
        for name in index_definitions():
            self.execute(f"DROP INDEX IF EXISTS {name}")

    def _ensure_dependencies(self, entry: CatalogEntry) -> None:
        views = view_definitions()
        for relation in entry.dependencies:
            if relation in views and not self.table_exists(relation):
                self.execute(views[relation].sql)

    def run(self, entry: Union[CatalogEntry, str]) -> QueryResult:
        """Execute a catalog entry and collect its result set.

        Views the entry reads are created first when missing. Engine errors
        propagate to the caller unchanged.

        Args:
            entry: Catalog entry or entry name.

        Returns:
            QueryResult with columns and rows (empty for DDL entries).
        """
        if isinstance(entry, str):
            entry = get_entry(entry)

        self._ensure_dependencies(entry)

        columns: list[str] = []
        rows: list[tuple] = []
        with time_statement() as timing:
            cursor = self.execute(entry.sql)
            if entry.is_read_only:
                columns = [desc[0] for desc in cursor.description]
                rows = timing.record_rows(cursor.fetchall())

        return QueryResult(
            name=entry.name,
            category=entry.category,
            columns=columns,
            rows=rows,
            duration_ms=timing.duration_ms,
        )

    def close(self) -> None:
        """Close the DuckDB connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "EmployeeDatabase":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
