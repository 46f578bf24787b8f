"""Runner that loads the fixture and executes the selected catalog entries."""

from typing import Optional

from .catalog import CatalogEntry, select_entries
from .config import CatalogConfig
from .database import EmployeeDatabase
from .results import QueryResult, ResultCollector, format_result


class CatalogRunner:
    """Runs catalog entries against a freshly loaded employees database."""

    def __init__(self, config: Optional[CatalogConfig] = None):
        """Initialize catalog runner.

        Args:
            config: Catalog configuration (default: CatalogConfig())
        """
        self.config = config or CatalogConfig()
        self.collector = ResultCollector(self.config.output_dir)
        self.entries: list[CatalogEntry] = select_entries(
            categories=self.config.categories,
            names=self.config.queries,
        )

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(message)

    def run(self) -> ResultCollector:
        """Run the selected entries according to configuration.

        Returns:
            ResultCollector with one result per executed entry
        """
        self._log(f"Starting catalog run: {len(self.entries)} statements on {self.config.database}")

        with EmployeeDatabase(self.config.database, db_settings=self.config.db_settings) as db:
            loaded = db.load_fixture(
                replace=True,
                check_integrity=self.config.check_integrity,
            )
            self._log(f"Loaded {loaded} employees")

            if self.config.create_indexes:
                created = db.create_indexes()
                self._log(f"Created indexes: {', '.join(created)}")

            for entry in self.entries:
                result = self._run_entry(db, entry)
                self.collector.add_result(result)
                if self.config.verbose:
                    print(format_result(result))
                    print()

        if self.config.output_dir:
            paths = self.collector.export_to_csv()
            self._log(f"\nResults exported to: {self.config.output_dir} ({len(paths)} files)")

        if self.config.verbose:
            self.collector.print_summary()

        return self.collector

    def _run_entry(self, db: EmployeeDatabase, entry: CatalogEntry) -> QueryResult:
        try:
            return db.run(entry)
        except Exception as e:
            if self.config.fail_fast:
                raise
            self._log(f"Statement {entry.name} failed: {e}")
            return QueryResult(name=entry.name, category=entry.category, error=str(e))
