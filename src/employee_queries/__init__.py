"""Employee table fixture and a catalog of relational query techniques."""

from .catalog import (
    CATEGORIES,
    CatalogEntry,
    get_catalog,
    get_entries_by_category,
    get_entry,
    get_query_order,
    render_catalog_script,
)
from .compare import compare_results, normalize_results
from .config import CatalogConfig
from .database import EmployeeDatabase
from .metrics import StatementTiming, time_statement
from .results import QueryResult, ResultCollector, format_result
from .runner import CatalogRunner
from .schema import SEED_EMPLOYEES, Employee, load_employees

__all__ = [
    "CATEGORIES",
    "CatalogConfig",
    "CatalogEntry",
    "CatalogRunner",
    "Employee",
    "EmployeeDatabase",
    "QueryResult",
    "ResultCollector",
    "SEED_EMPLOYEES",
    "StatementTiming",
    "compare_results",
    "format_result",
    "get_catalog",
    "get_entries_by_category",
    "get_entry",
    "get_query_order",
    "load_employees",
    "normalize_results",
    "render_catalog_script",
    "time_statement",
]

__version__ = "0.1.0"
