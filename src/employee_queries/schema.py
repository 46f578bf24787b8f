"""Employee schema definition and fixture loading."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import duckdb

EMPLOYEES_TABLE = "employees"

EMPLOYEE_COLUMNS = [
    "employee_id",
    "employee_name",
    "department",
    "salary",
    "hire_date",
    "manager_id",
]

# manager_id is intentionally left without a FOREIGN KEY; integrity is
# verified after the load instead (see load_employees).
EMPLOYEES_TABLE_SQL = """
    CREATE TABLE employees (
        employee_id INT PRIMARY KEY,
        employee_name VARCHAR(50) NOT NULL,
        department VARCHAR(50),
        salary DECIMAL(10, 2),
        hire_date DATE,
        manager_id INT
    )
"""


@dataclass(frozen=True)
class Employee:
    """A single row of the employees table."""

    employee_id: int
    employee_name: str
    department: Optional[str] = None
    salary: Optional[Decimal] = None
    hire_date: Optional[date] = None
    manager_id: Optional[int] = None

    def as_row(self) -> tuple[Any, ...]:
        return astuple(self)


SEED_EMPLOYEES: tuple[Employee, ...] = (
    Employee(1, "John Doe", "IT", Decimal("60000.00"), date(2022, 1, 15), None),
    Employee(2, "Jane Smith", "HR", Decimal("55000.00"), date(2022, 2, 20), 1),
    Employee(3, "Bob Johnson", "Finance", Decimal("70000.00"), date(2022, 3, 10), 1),
    Employee(4, "Alice Williams", "IT", Decimal("65000.00"), date(2022, 4, 5), 2),
    Employee(5, "Charlie Brown", "HR", Decimal("50000.00"), date(2022, 5, 12), 2),
)


def _sql_literal(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    if isinstance(value, date):
        return f"'{value.isoformat()}'"
    return str(value)


def fixture_script(employees: tuple[Employee, ...] | list[Employee] = SEED_EMPLOYEES) -> list[str]:
    """Return the CREATE TABLE and INSERT statements for the fixture as SQL text."""
    values = ",\n".join(
        "    (" + ", ".join(_sql_literal(value) for value in employee.as_row()) + ")"
        for employee in employees
    )
    insert_sql = (
        f"INSERT INTO {EMPLOYEES_TABLE} ({', '.join(EMPLOYEE_COLUMNS)})\n"
        f"VALUES\n{values}"
    )
    return [" ".join(EMPLOYEES_TABLE_SQL.split()), insert_sql]


def _drop_employees(conn: duckdb.DuckDBPyConnection) -> None:
    index_names = conn.execute(
        "SELECT index_name FROM duckdb_indexes() WHERE table_name = ?",
        [EMPLOYEES_TABLE],
    ).fetchall()
    for (index_name,) in index_names:
        conn.execute(f"DROP INDEX IF EXISTS {index_name}")
    conn.execute(f"DROP TABLE IF EXISTS {EMPLOYEES_TABLE}")


def load_employees(
    conn: duckdb.DuckDBPyConnection,
    employees: tuple[Employee, ...] | list[Employee] = SEED_EMPLOYEES,
    replace: bool = False,
    check_integrity: bool = True,
) -> int:
    """Create the employees table and insert the fixture rows.

    Args:
        conn: DuckDB connection
        employees: Rows to insert (default: the five seed employees)
        replace: Drop an existing employees table (and its indexes) first
        check_integrity: Verify that every manager_id references an existing
            employee and that the manager relation has no cycles

    Returns:
        Number of rows loaded

    Raises:
        RuntimeError: If the table does not hold the expected number of rows
        ValueError: If check_integrity is set and the rows break the
            manager invariants

    The load runs in a single transaction; on any failure it is rolled back
    and the database is left as it was before the call.
    """
    conn.begin()
    try:
        count = _create_and_fill(conn, employees, replace, check_integrity)
    except Exception:
        conn.rollback()
        raise
    conn.commit()
    return count


def _create_and_fill(
    conn: duckdb.DuckDBPyConnection,
    employees: tuple[Employee, ...] | list[Employee],
    replace: bool,
    check_integrity: bool,
) -> int:
    if replace:
        _drop_employees(conn)

    conn.execute(EMPLOYEES_TABLE_SQL)

    rows = [employee.as_row() for employee in employees]
    if rows:
        placeholders = ", ".join(["?"] * len(EMPLOYEE_COLUMNS))
        conn.executemany(
            f"INSERT INTO {EMPLOYEES_TABLE} ({', '.join(EMPLOYEE_COLUMNS)}) "
            f"VALUES ({placeholders})",
            rows,
        )

    count = conn.execute(f"SELECT COUNT(*) FROM {EMPLOYEES_TABLE}").fetchone()[0]
    if count != len(rows):
        raise RuntimeError(f"Expected {len(rows)} employees, got {count}")

    if check_integrity:
        orphans = find_orphaned_managers(conn)
        if orphans:
            details = ", ".join(
                f"employee {employee_id} -> manager {manager_id}"
                for employee_id, manager_id in orphans
            )
            raise ValueError(f"manager_id references missing employees: {details}")
        cycles = find_manager_cycles(conn)
        if cycles:
            raise ValueError(f"Manager relation contains a cycle through employees {cycles}")

    return count


def find_orphaned_managers(conn: duckdb.DuckDBPyConnection) -> list[tuple[int, int]]:
    """Return (employee_id, manager_id) pairs whose manager does not exist."""
    return conn.execute(
        """
        SELECT e.employee_id, e.manager_id
        FROM employees e
        LEFT JOIN employees m ON e.manager_id = m.employee_id
        WHERE e.manager_id IS NOT NULL AND m.employee_id IS NULL
        ORDER BY e.employee_id
        """
    ).fetchall()


def find_manager_cycles(conn: duckdb.DuckDBPyConnection) -> list[int]:
    """Return the sorted ids of employees that lie on a manager cycle."""
    managers = dict(
        conn.execute("SELECT employee_id, manager_id FROM employees").fetchall()
    )

    on_cycle: set[int] = set()
    cleared: set[int] = set()
    for start in managers:
        path: list[int] = []
        seen: set[int] = set()
        current = start
        while current is not None and current in managers and current not in cleared:
            if current in seen:
                on_cycle.update(path[path.index(current):])
                break
            seen.add(current)
            path.append(current)
            current = managers[current]
        cleared.update(path)

    return sorted(on_cycle)
