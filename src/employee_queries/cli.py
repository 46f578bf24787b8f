"""Command-line entry point for the employee query catalog."""

import argparse
from pathlib import Path
import sys
from typing import Optional

from .catalog import CATEGORIES, CATEGORY_TITLES, get_catalog, render_catalog_script, select_entries
from .config import CatalogConfig
from .runner import CatalogRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="employee-queries",
        description="Load the employees fixture and run the query catalog against DuckDB.",
    )
    parser.add_argument(
        "--database",
        default=":memory:",
        help="DuckDB database path (default: :memory:).",
    )
    parser.add_argument(
        "--category",
        action="append",
        choices=CATEGORIES,
        help="Only run entries of this category (repeatable).",
    )
    parser.add_argument(
        "--query",
        action="append",
        help="Only run the named catalog entry (repeatable).",
    )
    parser.add_argument(
        "--no-indexes",
        action="store_true",
        help="Skip creating the catalog indexes before running queries.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to write one CSV per result set plus summary.csv.",
    )
    parser.add_argument(
        "--export-sql",
        metavar="PATH",
        default=None,
        help="Write the selected entries as a SQL script instead of running them ('-' for stdout).",
    )
    parser.add_argument(
        "--dialect",
        default="duckdb",
        help="sqlglot dialect for --export-sql (default: duckdb).",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List catalog entries and exit.",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Record failing statements instead of stopping at the first error.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print the summary, not every result set.",
    )
    return parser


def _list_entries() -> None:
    current = None
    for entry in get_catalog():
        if entry.category != current:
            current = entry.category
            print(f"\n{entry.category} - {CATEGORY_TITLES[entry.category]}")
        print(f"  {entry.name:<32} {entry.description}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list:
        _list_entries()
        return 0

    try:
        config = CatalogConfig(
            database=args.database,
            categories=args.category,
            queries=args.query,
            create_indexes=not args.no_indexes,
            output_dir=args.output_dir,
            dialect=args.dialect,
            fail_fast=not args.keep_going,
            verbose=not args.quiet,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.export_sql:
        entries = select_entries(categories=config.categories, names=config.queries)
        script = render_catalog_script(dialect=config.dialect, entries=entries)
        if args.export_sql == "-":
            sys.stdout.write(script)
        else:
            Path(args.export_sql).write_text(script)
            print(f"Wrote {len(entries)} statements to {args.export_sql}")
        return 0

    collector = CatalogRunner(config).run()
    if args.quiet:
        collector.print_summary()
    return 1 if collector.failed else 0


if __name__ == "__main__":
    sys.exit(main())
