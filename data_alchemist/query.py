"""
Plain-language search over one grid.

    "duration > 1"        -> tasks whose Duration is greater than 1
    "priority level <= 2" -> numeric comparison on PriorityLevel
    "python"              -> rows with any cell containing "python"

Column names are matched ignoring case and spaces. Only numeric cells take
part in comparisons; anything that is not a comparison is a text search.
"""

from __future__ import annotations

import operator
import re
from typing import Any, Callable, Optional

from data_alchemist.entities import Entity
from data_alchemist.grid import display_value

COMPARISON_RE = re.compile(r"^\s*([a-zA-Z][a-zA-Z ]*?)\s*(>=|<=|>|<|==|=)\s*(-?\d+)\s*$")

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "=": operator.eq,
    "==": operator.eq,
}


def _squash(name: str) -> str:
    return "".join(name.lower().split())


def match_column(name: str, columns: list[str]) -> Optional[str]:
    wanted = _squash(name)
    for column in columns:
        if _squash(column) == wanted:
            return column
    for column in columns:
        if wanted and wanted in _squash(column):
            return column
    return None


def run_grid_query(entities: list[Entity], query: str) -> dict[str, Any]:
    text = query.strip()
    if not text:
        return {"kind": "empty", "matches": list(entities), "message": "Showing all rows"}

    columns = list(entities[0].keys()) if entities else []
    comparison = COMPARISON_RE.match(text)
    if comparison:
        column = match_column(comparison.group(1), columns)
        if column is not None:
            op_symbol = comparison.group(2)
            threshold = int(comparison.group(3))
            compare = OPERATORS[op_symbol]
            matches = [
                entity
                for entity in entities
                if isinstance(entity.get(column), (int, float))
                and not isinstance(entity.get(column), bool)
                and compare(entity[column], threshold)
            ]
            return {
                "kind": "filter",
                "column": column,
                "matches": matches,
                "message": f"Found {len(matches)} rows with {column} {op_symbol} {threshold}",
            }

    needle = text.lower()
    matches = [
        entity
        for entity in entities
        if any(needle in display_value(value).lower() for value in entity.values())
    ]
    return {
        "kind": "search",
        "matches": matches,
        "message": f'Found {len(matches)} rows matching "{text}"',
    }
