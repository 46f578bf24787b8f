"""Per-statement measurements for catalog execution."""

from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
import time


@dataclass
class StatementTiming:
    """Wall-clock duration and row count of one executed statement."""

    duration_ms: float = 0.0
    row_count: int = 0

    def record_rows(self, rows: list) -> list:
        """Count fetched rows and hand them back unchanged."""
        self.row_count = len(rows)
        return rows


@contextmanager
def time_statement() -> Generator[StatementTiming, None, None]:
    """Measure a statement while it executes and its rows are fetched.

    The duration is filled in on exit, even when the body raises. DDL
    statements leave row_count at 0.

    Example:
        with time_statement() as timing:
            rows = timing.record_rows(conn.execute(sql).fetchall())
        print(timing.duration_ms, timing.row_count)
    """
    timing = StatementTiming()
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.duration_ms = (time.perf_counter() - start) * 1000.0
