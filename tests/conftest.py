"""Test configuration for employee_queries."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

repo_root = Path(__file__).resolve().parents[1]
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from employee_queries import EmployeeDatabase  # noqa: E402


@pytest.fixture
def db():
    """An in-memory database holding the five seed employees."""
    database = EmployeeDatabase(db_settings={"threads": 1})
    database.load_fixture()
    yield database
    database.close()


@pytest.fixture
def empty_db():
    """An in-memory database with no employees table yet."""
    database = EmployeeDatabase(db_settings={"threads": 1})
    yield database
    database.close()
