"""Tests for the catalog runner, configuration and CLI."""

import csv
from pathlib import Path

import pytest

from employee_queries import CatalogConfig, CatalogRunner, time_statement
from employee_queries.catalog import JOINS, VIEWS, get_catalog
from employee_queries.cli import main
from employee_queries.database import EmployeeDatabase
from employee_queries.results import QueryResult, format_result, load_result_csv


def test_default_config():
    config = CatalogConfig()
    assert config.database == ":memory:"
    assert config.db_settings == {"threads": 1}
    assert config.fail_fast
    assert not config.verbose


@pytest.mark.parametrize(
    "kwargs",
    [
        {"database": ""},
        {"categories": ["pivots"]},
        {"queries": ["no_such_query"]},
        {"dialect": "not_a_dialect"},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        CatalogConfig(**kwargs)


def test_run_whole_catalog():
    collector = CatalogRunner().run()
    assert [r.name for r in collector.results] == [e.name for e in get_catalog()]
    assert collector.failed == []
    assert collector.get("it_employees_by_salary").column("employee_id") == [4, 1]


def test_run_selected_categories():
    config = CatalogConfig(categories=[JOINS, VIEWS], create_indexes=False)
    collector = CatalogRunner(config).run()
    assert {r.category for r in collector.results} == {JOINS, VIEWS}


def test_run_single_view_query():
    config = CatalogConfig(queries=["query_employee_hierarchy"])
    collector = CatalogRunner(config).run()
    assert len(collector.results) == 1
    assert collector.results[0].row_count == 5


def test_verbose_run_prints_results(capsys):
    CatalogRunner(CatalogConfig(queries=["it_employees_by_salary"], verbose=True)).run()
    out = capsys.readouterr().out
    assert "Loaded 5 employees" in out
    assert "[filter_sort] it_employees_by_salary" in out
    assert "Alice Williams" in out
    assert "Query Catalog Summary" in out


def _fail_on(name):
    original = EmployeeDatabase.run

    def run(self, entry):
        if getattr(entry, "name", entry) == name:
            raise RuntimeError("boom")
        return original(self, entry)

    return run


def test_fail_fast_propagates(monkeypatch):
    monkeypatch.setattr(EmployeeDatabase, "run", _fail_on("hires_by_month"))
    with pytest.raises(RuntimeError, match="boom"):
        CatalogRunner(CatalogConfig()).run()


def test_keep_going_records_error(monkeypatch):
    monkeypatch.setattr(EmployeeDatabase, "run", _fail_on("hires_by_month"))
    collector = CatalogRunner(CatalogConfig(fail_fast=False)).run()
    assert [r.name for r in collector.failed] == ["hires_by_month"]
    assert collector.get("hires_by_month").error == "boom"
    assert len(collector.successful) == len(get_catalog()) - 1


def test_export_to_csv(tmp_path):
    config = CatalogConfig(categories=[JOINS, "indexes"], output_dir=str(tmp_path))
    collector = CatalogRunner(config).run()
    paths = collector.export_to_csv()

    assert Path(paths[-1]).name == "summary.csv"
    assert len(paths) == 5  # four join results plus the summary; index DDL has no rows

    with open(tmp_path / "department_colleagues.csv", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["employee_name", "department", "colleague"]
    assert len(rows) == 5

    summary = load_result_csv(str(tmp_path / "summary.csv"))
    assert len(summary) == 9
    assert list(summary["name"][:2]) == ["employees_with_managers", "all_employees_with_managers"]


def test_export_without_output_dir():
    collector = CatalogRunner(CatalogConfig(queries=["hires_by_month"])).run()
    with pytest.raises(RuntimeError):
        collector.export_to_csv()


def test_load_missing_csv(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_result_csv(str(tmp_path / "missing.csv"))


def test_format_result_variants():
    ok = QueryResult("q", "joins", columns=["a"], rows=[(1,)], duration_ms=1.0)
    assert "[joins] q (1.000ms)" in format_result(ok)
    ddl = QueryResult("idx", "indexes")
    assert format_result(ddl).endswith("OK")
    failed = QueryResult("q", "joins", error="bad")
    assert "ERROR: bad" in format_result(failed)


def test_result_column_lookup():
    result = QueryResult("q", "joins", columns=["a", "b"], rows=[(1, 2), (3, 4)])
    assert result.column("b") == [2, 4]
    assert result.as_dicts() == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]
    assert list(result.to_frame()["a"]) == [1, 3]
    with pytest.raises(KeyError):
        result.column("c")


def test_time_statement_records_duration_and_rows():
    with time_statement() as timing:
        rows = timing.record_rows([(1,), (2,), (3,)])
    assert rows == [(1,), (2,), (3,)]
    assert timing.row_count == 3
    assert timing.duration_ms >= 0.0


def test_time_statement_sets_duration_on_error():
    with pytest.raises(ZeroDivisionError):
        with time_statement() as timing:
            1 / 0
    assert timing.row_count == 0
    assert timing.duration_ms >= 0.0


def test_cli_list(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "window_functions - Window Functions" in out
    assert "next_lower_salary_gap" in out


def test_cli_run_quiet(capsys):
    assert main(["--category", "ctes", "--quiet"]) == 0
    out = capsys.readouterr().out
    assert "Total statements: 2" in out
    assert "ranked_employees" not in out


def test_cli_invalid_query(capsys):
    assert main(["--query", "no_such_query"]) == 2
    assert "no_such_query" in capsys.readouterr().err


def test_cli_export_sql(tmp_path):
    target = tmp_path / "catalog.sql"
    assert main(["--export-sql", str(target), "--dialect", "postgres"]) == 0
    script = target.read_text()
    assert script.startswith("-- Employee Database Schema")
    assert "-- 7. Optimizing with Indexes" in script


def test_cli_writes_csvs(tmp_path):
    assert main(["--query", "avg_salary_by_department", "--output-dir", str(tmp_path), "--quiet"]) == 0
    frame = load_result_csv(str(tmp_path / "avg_salary_by_department.csv"))
    assert list(frame["department"]) == ["Finance", "IT", "HR"]
