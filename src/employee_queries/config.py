"""Configuration for running the query catalog."""

from dataclasses import dataclass, field
from typing import Any, Optional

import sqlglot

from .catalog import CATEGORIES, get_entry


def _default_db_settings() -> dict[str, Any]:
    # Statements are evaluated one at a time on a single thread
    return {"threads": 1}


@dataclass
class CatalogConfig:
    """Configuration for catalog execution.

    Attributes:
        database: DuckDB database path (default: ":memory:")
        categories: Optional list of categories to run (default: all)
        queries: Optional list of entry names to run (default: all)
        create_indexes: Create the catalog indexes before running queries
        check_integrity: Verify manager references after loading the fixture
        db_settings: DuckDB settings to apply via SET
        output_dir: Directory for CSV output; no export when None
        dialect: sqlglot dialect used when exporting the catalog as SQL
        fail_fast: Re-raise the first engine error instead of recording it
        verbose: Print progress and every result set
    """

    database: str = ":memory:"
    categories: Optional[list[str]] = None
    queries: Optional[list[str]] = None
    create_indexes: bool = True
    check_integrity: bool = True
    db_settings: dict[str, Any] = field(default_factory=_default_db_settings)
    output_dir: Optional[str] = None
    dialect: str = "duckdb"
    fail_fast: bool = True
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        if not self.database:
            raise ValueError("database must be a path or ':memory:'")
        if self.categories is not None:
            unknown = sorted(set(self.categories) - set(CATEGORIES))
            if unknown:
                raise ValueError(
                    f"Unknown categories: {', '.join(unknown)}. "
                    f"Expected any of: {', '.join(CATEGORIES)}"
                )
        if self.queries is not None:
            for name in self.queries:
                try:
                    get_entry(name)
                except KeyError as e:
                    raise ValueError(e.args[0]) from None
        try:
            sqlglot.Dialect.get_or_raise(self.dialect)
        except ValueError as e:
            raise ValueError(f"Unknown SQL dialect '{self.dialect}': {e}") from None
