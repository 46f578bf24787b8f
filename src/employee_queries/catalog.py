"""Catalog of standalone queries against the employees table.

Every entry is written in the DuckDB dialect and is independent of the others,
except that view queries read views created by earlier entries. Statement kind,
created object and dependencies are derived from the SQL text with sqlglot.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .schema import fixture_script
from .sql_utils import (
    created_object_name,
    normalize_sql,
    referenced_relations,
    statement_kind,
    transpile,
)

FILTER_SORT = "filter_sort"
AGGREGATION = "aggregation"
JOINS = "joins"
SUBQUERIES = "subqueries"
AGGREGATE_FUNCTIONS = "aggregate_functions"
VIEWS = "views"
INDEXES = "indexes"
CTES = "ctes"
WINDOW_FUNCTIONS = "window_functions"

CATEGORY_TITLES = {
    FILTER_SORT: "Basic SELECT with WHERE and ORDER BY",
    AGGREGATION: "GROUP BY with Aggregation",
    JOINS: "JOINS",
    SUBQUERIES: "Subqueries",
    AGGREGATE_FUNCTIONS: "Aggregate Functions",
    VIEWS: "Creating Views",
    INDEXES: "Optimizing with Indexes",
    CTES: "Common Table Expressions (CTEs)",
    WINDOW_FUNCTIONS: "Window Functions",
}

CATEGORIES = list(CATEGORY_TITLES)


@dataclass(frozen=True)
class CatalogEntry:
    """A single named statement in the catalog."""

    name: str
    category: str
    description: str
    sql: str

    def __post_init__(self):
        if self.category not in CATEGORY_TITLES:
            raise ValueError(f"Unknown category '{self.category}' for entry '{self.name}'")
        object.__setattr__(self, "sql", normalize_sql(self.sql))

    @property
    def kind(self) -> str:
        """Statement kind: query, view or index."""
        return statement_kind(self.sql)

    @property
    def object_name(self) -> Optional[str]:
        """Name of the view or index this entry creates, if any."""
        return created_object_name(self.sql)

    @property
    def dependencies(self) -> list[str]:
        return referenced_relations(self.sql)

    @property
    def is_read_only(self) -> bool:
        return self.kind == "query"


_ENTRIES = [
    # Filtering and sorting
    CatalogEntry(
        "it_employees_by_salary",
        FILTER_SORT,
        "Find all IT employees ordered by salary (highest to lowest)",
        """
        SELECT employee_id, employee_name, salary
        FROM employees
        WHERE department = 'IT'
        ORDER BY salary DESC
        """,
    ),
    CatalogEntry(
        "first_quarter_hires",
        FILTER_SORT,
        "Find employees hired in the first quarter of 2022",
        """
        SELECT employee_id, employee_name, department, hire_date
        FROM employees
        WHERE hire_date BETWEEN '2022-01-01' AND '2022-03-31'
        ORDER BY hire_date
        """,
    ),
    CatalogEntry(
        "salaries_between_55k_and_65k",
        FILTER_SORT,
        "Find employees with salaries in a specific range",
        """
        SELECT employee_id, employee_name, department, salary
        FROM employees
        WHERE salary BETWEEN 55000 AND 65000
        ORDER BY salary
        """,
    ),
    # Aggregation
    CatalogEntry(
        "avg_salary_by_department",
        AGGREGATION,
        "Get average salary by department",
        """
        SELECT department,
               COUNT(*) AS employee_count,
               AVG(salary) AS avg_salary
        FROM employees
        GROUP BY department
        ORDER BY avg_salary DESC
        """,
    ),
    CatalogEntry(
        "direct_reports_by_manager",
        AGGREGATION,
        "Find number of employees by manager",
        """
        SELECT manager_id, COUNT(*) AS direct_reports
        FROM employees
        WHERE manager_id IS NOT NULL
        GROUP BY manager_id
        ORDER BY direct_reports DESC, manager_id
        """,
    ),
    # Named hire_month since MONTH is a keyword in several dialects. monthname
    # gives unpadded names, unlike TO_CHAR(hire_date, 'Month') which pads to 9 chars.
    CatalogEntry(
        "hires_by_month",
        AGGREGATION,
        "Count employees hired by month",
        """
        SELECT EXTRACT(MONTH FROM hire_date) AS hire_month,
               monthname(hire_date) AS month_name,
               COUNT(*) AS hires
        FROM employees
        GROUP BY EXTRACT(MONTH FROM hire_date), monthname(hire_date)
        ORDER BY hire_month
        """,
    ),
    # Joins
    CatalogEntry(
        "employees_with_managers",
        JOINS,
        "INNER JOIN: Match employees with their managers",
        """
        SELECT e.employee_id, e.employee_name, e.department, e.salary,
               m.employee_id AS manager_id, m.employee_name AS manager_name
        FROM employees e
        INNER JOIN employees m ON e.manager_id = m.employee_id
        """,
    ),
    CatalogEntry(
        "all_employees_with_managers",
        JOINS,
        "LEFT JOIN: Show all employees and their managers (if they have one)",
        """
        SELECT e.employee_id, e.employee_name, e.department,
               m.employee_name AS manager_name
        FROM employees e
        LEFT JOIN employees m ON e.manager_id = m.employee_id
        """,
    ),
    CatalogEntry(
        "managers_with_direct_reports",
        JOINS,
        "RIGHT JOIN: Show all potential managers with their direct reports",
        """
        SELECT e.employee_name AS employee_name,
               m.employee_id AS manager_id,
               m.employee_name AS manager_name
        FROM employees e
        RIGHT JOIN employees m ON e.manager_id = m.employee_id
        """,
    ),
    CatalogEntry(
        "department_colleagues",
        JOINS,
        "SELF JOIN: Find employees in the same department",
        """
        SELECT e1.employee_name, e1.department, e2.employee_name AS colleague
        FROM employees e1
        JOIN employees e2
          ON e1.department = e2.department AND e1.employee_id != e2.employee_id
        ORDER BY e1.department, e1.employee_name, e2.employee_name
        """,
    ),
    # Subqueries
    CatalogEntry(
        "above_average_earners",
        SUBQUERIES,
        "Find employees who earn more than the average salary",
        """
        SELECT employee_name, department, salary
        FROM employees
        WHERE salary > (SELECT AVG(salary) FROM employees)
        """,
    ),
    CatalogEntry(
        "departments_avg_above_55k",
        SUBQUERIES,
        "Find employees who work in departments with average salary > 55000",
        """
        SELECT employee_name, department, salary
        FROM employees
        WHERE department IN (
            SELECT department
            FROM employees
            GROUP BY department
            HAVING AVG(salary) > 55000
        )
        """,
    ),
    CatalogEntry(
        "highest_paid_per_department",
        SUBQUERIES,
        "Find the highest paid employee in each department",
        """
        SELECT e.department, e.employee_name, e.salary
        FROM employees e
        WHERE e.salary = (
            SELECT MAX(salary)
            FROM employees
            WHERE department = e.department
        )
        """,
    ),
    CatalogEntry(
        "hired_after_first_hire",
        SUBQUERIES,
        "Find employees hired after the company's first hire",
        """
        SELECT employee_name, hire_date
        FROM employees
        WHERE hire_date > (
            SELECT MIN(hire_date)
            FROM employees
        )
        """,
    ),
    CatalogEntry(
        "earns_more_than_manager",
        SUBQUERIES,
        "Find employees who earn more than their managers",
        """
        SELECT e.employee_name, e.salary,
               m.employee_name AS manager_name, m.salary AS manager_salary
        FROM employees e
        JOIN employees m ON e.manager_id = m.employee_id
        WHERE e.salary > m.salary
        """,
    ),
    # Aggregate functions
    CatalogEntry(
        "department_salary_budget",
        AGGREGATE_FUNCTIONS,
        "Calculate total salary budget by department",
        """
        SELECT department,
               COUNT(*) AS employee_count,
               SUM(salary) AS total_salary_budget,
               MIN(salary) AS min_salary,
               MAX(salary) AS max_salary,
               ROUND(AVG(salary), 2) AS avg_salary,
               MAX(salary) - MIN(salary) AS salary_range
        FROM employees
        GROUP BY department
        """,
    ),
    CatalogEntry(
        "salary_stats_by_hire_month",
        AGGREGATE_FUNCTIONS,
        "Calculate salary stats for employees hired in each month",
        """
        SELECT EXTRACT(MONTH FROM hire_date) AS hire_month,
               COUNT(*) AS hires,
               SUM(salary) AS total_salary,
               ROUND(AVG(salary), 2) AS avg_salary
        FROM employees
        GROUP BY EXTRACT(MONTH FROM hire_date)
        ORDER BY hire_month
        """,
    ),
    CatalogEntry(
        "payroll_percentage",
        AGGREGATE_FUNCTIONS,
        "Calculate salary distribution as percentage of total payroll",
        """
        SELECT employee_id, employee_name, salary,
               ROUND((salary / (SELECT SUM(salary) FROM employees)) * 100, 2) AS percentage_of_total
        FROM employees
        ORDER BY percentage_of_total DESC
        """,
    ),
    # Views
    CatalogEntry(
        "create_employee_hierarchy",
        VIEWS,
        "Create a view for management hierarchy",
        """
        CREATE OR REPLACE VIEW employee_hierarchy AS
        SELECT e.employee_id, e.employee_name, e.department,
               e.salary, e.hire_date,
               m.employee_id AS manager_id,
               m.employee_name AS manager_name,
               m.department AS manager_department
        FROM employees e
        LEFT JOIN employees m ON e.manager_id = m.employee_id
        """,
    ),
    CatalogEntry(
        "query_employee_hierarchy",
        VIEWS,
        "Query the management hierarchy view",
        "SELECT * FROM employee_hierarchy",
    ),
    CatalogEntry(
        "create_department_summary",
        VIEWS,
        "Create a department summary view",
        """
        CREATE OR REPLACE VIEW department_summary AS
        SELECT department,
               COUNT(*) AS employee_count,
               SUM(salary) AS total_salary,
               ROUND(AVG(salary), 2) AS avg_salary,
               MIN(salary) AS min_salary,
               MAX(salary) AS max_salary,
               MAX(salary) - MIN(salary) AS salary_range
        FROM employees
        GROUP BY department
        """,
    ),
    CatalogEntry(
        "query_department_summary",
        VIEWS,
        "Query the department summary view",
        "SELECT * FROM department_summary",
    ),
    CatalogEntry(
        "create_salary_ranges",
        VIEWS,
        "Create a view for salary ranges",
        """
        CREATE OR REPLACE VIEW salary_ranges AS
        SELECT 'Below 55K' AS salary_range, COUNT(*) AS employee_count
        FROM employees WHERE salary < 55000
        UNION
        SELECT '55K-65K' AS salary_range, COUNT(*) AS employee_count
        FROM employees WHERE salary BETWEEN 55000 AND 65000
        UNION
        SELECT 'Above 65K' AS salary_range, COUNT(*) AS employee_count
        FROM employees WHERE salary > 65000
        ORDER BY salary_range
        """,
    ),
    CatalogEntry(
        "query_salary_ranges",
        VIEWS,
        "Query the salary ranges view",
        "SELECT * FROM salary_ranges",
    ),
    # Indexes
    CatalogEntry(
        "idx_department",
        INDEXES,
        "Index on department for equality filters",
        "CREATE INDEX IF NOT EXISTS idx_department ON employees(department)",
    ),
    CatalogEntry(
        "idx_hire_date",
        INDEXES,
        "Index on hire_date for date range filters",
        "CREATE INDEX IF NOT EXISTS idx_hire_date ON employees(hire_date)",
    ),
    CatalogEntry(
        "idx_manager_id",
        INDEXES,
        "Index on manager_id for hierarchy joins",
        "CREATE INDEX IF NOT EXISTS idx_manager_id ON employees(manager_id)",
    ),
    CatalogEntry(
        "idx_dept_salary",
        INDEXES,
        "Composite index for queries that filter on department and sort by salary",
        "CREATE INDEX IF NOT EXISTS idx_dept_salary ON employees(department, salary)",
    ),
    CatalogEntry(
        "idx_salary",
        INDEXES,
        "Index for range queries on salary",
        "CREATE INDEX IF NOT EXISTS idx_salary ON employees(salary)",
    ),
    # CTEs
    CatalogEntry(
        "department_salary_comparison",
        CTES,
        "Calculate department statistics using a CTE",
        """
        WITH dept_stats AS (
            SELECT department,
                   COUNT(*) AS emp_count,
                   AVG(salary) AS avg_salary
            FROM employees
            GROUP BY department
        )
        SELECT e.employee_name, e.department, e.salary,
               ds.avg_salary AS dept_avg_salary,
               e.salary - ds.avg_salary AS diff_from_avg
        FROM employees e
        JOIN dept_stats ds ON e.department = ds.department
        ORDER BY e.department, e.salary DESC
        """,
    ),
    CatalogEntry(
        "top_earner_per_department",
        CTES,
        "Find the highest paid employee in each department using a CTE",
        """
        WITH ranked_employees AS (
            SELECT employee_name, department, salary,
                   RANK() OVER (PARTITION BY department ORDER BY salary DESC) AS salary_rank
            FROM employees
        )
        SELECT employee_name, department, salary
        FROM ranked_employees
        WHERE salary_rank = 1
        """,
    ),
    # Window functions
    CatalogEntry(
        "department_salary_ranks",
        WINDOW_FUNCTIONS,
        "Add rank, salary percentile and running total by department",
        """
        SELECT employee_name, department, salary,
               RANK() OVER (PARTITION BY department ORDER BY salary DESC) AS dept_salary_rank,
               ROUND(PERCENT_RANK() OVER (PARTITION BY department ORDER BY salary) * 100, 2) AS percentile,
               SUM(salary) OVER (PARTITION BY department ORDER BY salary) AS running_dept_total
        FROM employees
        """,
    ),
    CatalogEntry(
        "next_lower_salary_gap",
        WINDOW_FUNCTIONS,
        "Difference between each salary and the next highest in the department",
        """
        SELECT employee_name, department, salary,
               LEAD(salary, 1, 0) OVER (PARTITION BY department ORDER BY salary DESC) AS next_lower_salary,
               salary - LEAD(salary, 1, 0) OVER (PARTITION BY department ORDER BY salary DESC) AS salary_gap
        FROM employees
        """,
    ),
]

_ENTRIES_BY_NAME = {entry.name: entry for entry in _ENTRIES}
if len(_ENTRIES_BY_NAME) != len(_ENTRIES):
    raise RuntimeError("Catalog entry names must be unique")


def get_catalog() -> list[CatalogEntry]:
    """Get every catalog entry in execution order."""
    return list(_ENTRIES)


def get_query_order() -> list[str]:
    """Get the names of all entries in the order they should be executed."""
    return [entry.name for entry in _ENTRIES]


def get_entry(name: str) -> CatalogEntry:
    """Look up an entry by name.

    Raises:
        KeyError: If no entry has that name.
    """
    try:
        return _ENTRIES_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown catalog entry '{name}'") from None


def get_entries_by_category(category: str) -> list[CatalogEntry]:
    """Get the entries of one category in execution order.

    Raises:
        ValueError: If the category is unknown.
    """
    if category not in CATEGORY_TITLES:
        raise ValueError(
            f"Unknown category '{category}'. Expected one of: {', '.join(CATEGORIES)}"
        )
    return [entry for entry in _ENTRIES if entry.category == category]


def select_entries(
    categories: Optional[Iterable[str]] = None,
    names: Optional[Iterable[str]] = None,
) -> list[CatalogEntry]:
    """Select entries by category and/or name, keeping catalog order."""
    selected = _ENTRIES
    if categories is not None:
        wanted = set(categories)
        for category in wanted:
            get_entries_by_category(category)
        selected = [entry for entry in selected if entry.category in wanted]
    if names is not None:
        wanted_names = {get_entry(name).name for name in names}
        selected = [entry for entry in selected if entry.name in wanted_names]
    return list(selected)


def view_definitions() -> dict[str, CatalogEntry]:
    """Map each view name to the entry that creates it."""
    return {entry.object_name: entry for entry in _ENTRIES if entry.kind == "view"}


def index_definitions() -> dict[str, CatalogEntry]:
    """Map each index name to the entry that creates it."""
    return {entry.object_name: entry for entry in _ENTRIES if entry.kind == "index"}


def render_catalog_script(
    dialect: str = "duckdb",
    entries: Optional[Iterable[CatalogEntry]] = None,
    include_fixture: bool = True,
) -> str:
    """Render the catalog as a single commented SQL script.

    Args:
        dialect: sqlglot dialect to render the statements in.
        entries: Entries to include (default: the whole catalog).
        include_fixture: Prepend the schema and seed data statements.

    Returns:
        SQL script text with one banner per category.
    """
    entries = list(_ENTRIES if entries is None else entries)
    parts: list[str] = []

    if include_fixture:
        parts.append("-- Employee Database Schema")
        for statement in fixture_script():
            parts.append(transpile(statement, dialect, pretty=True) + ";")
        parts.append("")

    section = 0
    current_category = None
    for entry in entries:
        if entry.category != current_category:
            current_category = entry.category
            section += 1
            banner = "-- " + "=" * 42
            parts.extend(
                [banner, f"-- {section}. {CATEGORY_TITLES[entry.category]}", banner, ""]
            )
        parts.append(f"-- {entry.description}")
        parts.append(transpile(entry.sql, dialect, pretty=True) + ";")
        parts.append("")

    return "\n".join(parts).rstrip() + "\n"
