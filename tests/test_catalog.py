"""Tests for the query catalog definitions."""

import pytest

from employee_queries.catalog import (
    CATEGORIES,
    CTES,
    INDEXES,
    JOINS,
    VIEWS,
    CatalogEntry,
    get_catalog,
    get_entries_by_category,
    get_entry,
    get_query_order,
    index_definitions,
    render_catalog_script,
    select_entries,
    view_definitions,
)
from employee_queries.sql_utils import split_statements, transpile


def test_every_category_has_entries():
    for category in CATEGORIES:
        assert get_entries_by_category(category), category


def test_catalog_is_grouped_in_category_order():
    seen = []
    for entry in get_catalog():
        if not seen or seen[-1] != entry.category:
            seen.append(entry.category)
    assert seen == CATEGORIES


def test_query_order_matches_catalog():
    order = get_query_order()
    assert order == [entry.name for entry in get_catalog()]
    assert len(order) == len(set(order))
    assert order[0] == "it_employees_by_salary"


def test_entry_kinds():
    kinds = {}
    for entry in get_catalog():
        kinds.setdefault(entry.kind, []).append(entry.name)
    assert set(kinds) == {"query", "view", "index"}
    assert len(kinds["view"]) == 3
    assert len(kinds["index"]) == 5


def test_view_and_index_names():
    assert set(view_definitions()) == {"employee_hierarchy", "department_summary", "salary_ranges"}
    assert set(index_definitions()) == {
        "idx_department",
        "idx_hire_date",
        "idx_manager_id",
        "idx_dept_salary",
        "idx_salary",
    }


def test_view_queries_depend_on_views():
    assert get_entry("query_salary_ranges").dependencies == ["salary_ranges"]
    assert get_entry("query_employee_hierarchy").dependencies == ["employee_hierarchy"]
    assert get_entry("create_department_summary").dependencies == ["employees"]


def test_cte_names_are_not_dependencies():
    assert get_entry("top_earner_per_department").dependencies == ["employees"]
    assert get_entry("department_salary_comparison").dependencies == ["employees"]


def test_only_queries_are_read_only():
    for entry in get_catalog():
        assert entry.is_read_only == (entry.category not in {VIEWS, INDEXES} or entry.name.startswith("query_"))


def test_sql_whitespace_is_normalized():
    entry = get_entry("it_employees_by_salary")
    assert entry.sql == (
        "SELECT employee_id, employee_name, salary FROM employees "
        "WHERE department = 'IT' ORDER BY salary DESC"
    )


def test_get_entry_unknown_name():
    with pytest.raises(KeyError, match="no_such_query"):
        get_entry("no_such_query")


def test_get_entries_by_unknown_category():
    with pytest.raises(ValueError, match="Unknown category"):
        get_entries_by_category("pivots")


def test_entry_rejects_unknown_category():
    with pytest.raises(ValueError):
        CatalogEntry("bad", "pivots", "bad entry", "SELECT 1")


def test_select_entries_by_category_and_name():
    joins = select_entries(categories=[JOINS])
    assert [e.name for e in joins] == [
        "employees_with_managers",
        "all_employees_with_managers",
        "managers_with_direct_reports",
        "department_colleagues",
    ]

    picked = select_entries(names=["top_earner_per_department", "it_employees_by_salary"])
    assert [e.name for e in picked] == ["it_employees_by_salary", "top_earner_per_department"]

    assert select_entries(categories=[JOINS], names=["top_earner_per_department"]) == []
    assert [e.category for e in select_entries(categories=[CTES])] == [CTES, CTES]


def test_select_entries_rejects_unknown_values():
    with pytest.raises(ValueError):
        select_entries(categories=["pivots"])
    with pytest.raises(KeyError):
        select_entries(names=["no_such_query"])


def test_render_script_contains_every_statement():
    script = render_catalog_script()
    assert script.startswith("-- Employee Database Schema")
    assert "-- 1. Basic SELECT with WHERE and ORDER BY" in script
    assert "-- 9. Window Functions" in script
    assert "-- Find all IT employees ordered by salary (highest to lowest)" in script
    assert len(split_statements(script)) == len(get_catalog()) + 2


def test_render_script_subset_without_fixture():
    script = render_catalog_script(entries=select_entries(categories=[INDEXES]), include_fixture=False)
    assert "-- 1. Optimizing with Indexes" in script
    assert "CREATE TABLE" not in script
    assert len(split_statements(script)) == 5


def test_transpile_to_postgres():
    sql = transpile(get_entry("it_employees_by_salary").sql, "postgres")
    assert "ORDER BY salary DESC" in sql
    assert "WHERE department = 'IT'" in sql
