"""Query result collection, rendering and CSV export."""

import csv
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
import statistics
from typing import Any, Dict, List, Optional

import pandas as pd

SUMMARY_FILENAME = "summary.csv"


@dataclass
class QueryResult:
    """Result of running a single catalog entry.

    Attributes:
        name: Catalog entry name
        category: Catalog category of the entry
        columns: Result column names (empty for DDL statements)
        rows: Result rows as tuples
        duration_ms: Execution duration in milliseconds
        timestamp: Timestamp when the result was collected (auto-set if not provided)
        error: Optional error message if execution failed
    """

    name: str
    category: str
    columns: List[str] = field(default_factory=list)
    rows: List[tuple] = field(default_factory=list)
    duration_ms: float = 0.0
    timestamp: Optional[datetime] = None
    error: Optional[str] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = datetime.now()

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def column(self, name: str) -> List[Any]:
        """Return every value of one result column.

        Raises:
            KeyError: If the result has no such column.
        """
        if name not in self.columns:
            raise KeyError(f"Result '{self.name}' has no column '{name}'")
        index = self.columns.index(name)
        return [row[index] for row in self.rows]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(self.rows, columns=self.columns)


def format_result(result: QueryResult) -> str:
    """Render a result as a plain-text table headed by its name and timing."""
    header = f"[{result.category}] {result.name} ({result.duration_ms:.3f}ms)"
    if result.error:
        return f"{header}\n  ERROR: {result.error}"
    if not result.columns:
        return f"{header}\n  OK"
    return f"{header}\n{result.to_frame().to_string(index=False)}"


def load_result_csv(csv_path: str) -> pd.DataFrame:
    """Load an exported result or summary CSV into a DataFrame."""
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Result file not found: {csv_path}")
    return pd.read_csv(path)


class ResultCollector:
    """Collects query results and exports them to CSV."""

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize result collector.

        Args:
            output_dir: Directory for CSV output; export is unavailable when None
        """
        self.output_dir = Path(output_dir) if output_dir else None
        self.results: List[QueryResult] = []

    def add_result(self, result: QueryResult) -> None:
        self.results.append(result)

    def get(self, name: str) -> QueryResult:
        """Return the most recent result for a catalog entry.

        Raises:
            KeyError: If no result with that name was collected.
        """
        for result in reversed(self.results):
            if result.name == name:
                return result
        raise KeyError(f"No result collected for '{name}'")

    @property
    def successful(self) -> List[QueryResult]:
        return [r for r in self.results if not r.error]

    @property
    def failed(self) -> List[QueryResult]:
        return [r for r in self.results if r.error]

    def export_to_csv(self) -> List[str]:
        """Export each result set plus a summary file.

        Returns:
            Paths of the created CSV files, summary last

        Raises:
            RuntimeError: If the collector has no output directory
        """
        if self.output_dir is None:
            raise RuntimeError("ResultCollector has no output directory configured")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        paths: List[str] = []
        for result in self.successful:
            if not result.columns:
                continue
            csv_path = self.output_dir / f"{result.name}.csv"
            with open(csv_path, "w", newline="") as f:
                writer = csv.writer(f)
                writer.writerow(result.columns)
                writer.writerows(result.rows)
            paths.append(str(csv_path))

        summary_path = self.output_dir / SUMMARY_FILENAME
        with open(summary_path, "w", newline="") as f:
            fieldnames = ["execution_number", "name", "category", "timestamp",
                          "duration_ms", "row_count", "error"]
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for i, result in enumerate(self.results, start=1):
                writer.writerow({
                    "execution_number": i,
                    "name": result.name,
                    "category": result.category,
                    "timestamp": result.timestamp.isoformat() if result.timestamp else "",
                    "duration_ms": result.duration_ms,
                    "row_count": result.row_count,
                    "error": result.error or "",
                })
        paths.append(str(summary_path))

        return paths

    def print_results(self) -> None:
        """Print every collected result set."""
        for result in self.results:
            print(format_result(result))
            print()

    def print_summary(self) -> None:
        """Print summary of results to console."""
        if not self.results:
            print("No results collected.")
            return

        print("\nQuery Catalog Summary:")
        print(f"  Total statements: {len(self.results)}")
        print(f"  Successful: {len(self.successful)}")
        print(f"  Failed: {len(self.failed)}")

        durations = [r.duration_ms for r in self.successful]
        if durations:
            print("\n  Duration (ms):")
            print(f"    Mean: {statistics.mean(durations):.3f}")
            print(f"    Median: {statistics.median(durations):.3f}")
            if len(durations) > 1:
                print(f"    Std Dev: {statistics.stdev(durations):.3f}")
            print(f"    Min: {min(durations):.3f}")
            print(f"    Max: {max(durations):.3f}")

        for result in self.failed:
            print(f"  ✗ {result.name}: {result.error}")
