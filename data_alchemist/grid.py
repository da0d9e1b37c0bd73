"""pandas views of entity collections for the data grids, plus cell editing."""

from __future__ import annotations

from typing import Any

import pandas as pd

from data_alchemist.entities import Entity
from data_alchemist.parser import coerce_value
from data_alchemist.validator import ValidationIssue, issues_for_cell

LIST_SEPARATOR = ";"


def display_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(str(item) for item in value)
    return str(value)


def entity_columns(entities: list[Entity]) -> list[str]:
    return list(entities[0].keys()) if entities else []


def records_frame(entities: list[Entity]) -> pd.DataFrame:
    """One string cell per field; list values are joined with ';'."""
    columns = entity_columns(entities)
    rows = [{column: display_value(entity.get(column)) for column in columns} for entity in entities]
    return pd.DataFrame(rows, columns=columns)


def apply_cell_edit(entities: list[Entity], row_index: int, column: str, value: Any) -> list[Entity]:
    """Return a new collection with one cell replaced and re-coerced by its header."""
    if not 0 <= row_index < len(entities):
        raise IndexError(f"Row {row_index} is out of range for {len(entities)} rows")
    raw = display_value(value)
    updated = [dict(entity) for entity in entities]
    updated[row_index][column] = coerce_value(column, raw)
    return updated


def frame_edits(original: pd.DataFrame, edited: pd.DataFrame) -> list[tuple[int, str, str]]:
    """Cells that differ between two same-shaped frames, as (row, column, value)."""
    changes: list[tuple[int, str, str]] = []
    if original.shape != edited.shape:
        return changes
    # Cleared cells come back as None/NaN and must read as "".
    filled = edited.fillna("").astype(str)
    diff = original.fillna("").astype(str).ne(filled)
    for row_pos, column in zip(*diff.to_numpy().nonzero()):
        name = str(edited.columns[column])
        changes.append((int(row_pos), name, filled.iat[row_pos, column]))
    return changes


def issue_frame(entities: list[Entity], issues: list[ValidationIssue]) -> pd.DataFrame:
    """Same shape as records_frame, each cell holding its diagnostic messages."""
    columns = entity_columns(entities)
    rows = []
    for row_index in range(len(entities)):
        rows.append(
            {
                column: " | ".join(issue.message for issue in issues_for_cell(issues, row_index, column))
                for column in columns
            }
        )
    return pd.DataFrame(rows, columns=columns)


def issue_table(issues: list[ValidationIssue]) -> pd.DataFrame:
    return pd.DataFrame(
        [issue.to_dict() for issue in issues],
        columns=["id", "type", "message", "field", "rowIndex", "suggestion"],
    )
