"""Result-set normalization and comparison."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any


def _sort_key(row: tuple[Any, ...]) -> tuple[Any, ...]:
    # NULLs sort first and values of mixed types compare by type name
    return tuple((val is not None, type(val).__name__, val) for val in row)


def normalize_results(
    results: list[tuple[Any, ...]],
    precision: int = 5,
    ordered: bool = True,
) -> list[tuple[Any, ...]]:
    """Normalize rows so results from different runs compare cleanly.

    Decimals become rounded floats, floats are rounded to `precision` digits,
    strings are stripped and dates are kept as dates. When `ordered` is False
    the rows are sorted so that row order does not matter.
    """
    normalized = []
    for row in results:
        normalized_row = []
        for val in row:
            if val is None or isinstance(val, date):
                normalized_row.append(val)
            elif isinstance(val, Decimal):
                normalized_row.append(round(float(val), precision))
            elif isinstance(val, float):
                normalized_row.append(round(val, precision))
            elif isinstance(val, str):
                normalized_row.append(val.strip())
            else:
                normalized_row.append(val)
        normalized.append(tuple(normalized_row))

    if not ordered:
        normalized.sort(key=_sort_key)
    return normalized


def compare_results(
    expected: list[tuple[Any, ...]],
    actual: list[tuple[Any, ...]],
    ordered: bool = True,
    precision: int = 5,
) -> tuple[bool, str | None]:
    """Compare two result sets.

    Returns:
        (True, None) when they match, otherwise (False, description of the
        first difference).
    """
    norm_expected = normalize_results(expected, precision=precision, ordered=ordered)
    norm_actual = normalize_results(actual, precision=precision, ordered=ordered)

    if len(norm_expected) != len(norm_actual):
        return False, f"Row count mismatch: expected={len(norm_expected)}, actual={len(norm_actual)}"

    for i, (left, right) in enumerate(zip(norm_expected, norm_actual)):
        if left != right:
            return False, f"Row {i} differs: expected={left}, actual={right}"

    return True, None
