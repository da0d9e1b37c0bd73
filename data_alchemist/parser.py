"""
parser.py — Delimited-text parser for data-alchemist uploads

Public API:
    records = parse_text(text)
    fields  = tokenize_line('"a,b",c')     # ["a,b", "c"]
    value   = coerce_value("Skills", "Python; SQL")

Values are coerced by header name, not by a schema:
    *IDs* / *Skills* / *Phases*              -> list[str]
    *Slots*                                  -> list[int]
    *Level* / *Duration* / *Load* / *Concurrent* -> int
    anything else                            -> str

Header naming drives the types, so renaming a column changes how it parses.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable

Record = dict[str, Any]

BOM = "\ufeff"
LINE_SPLIT_RE = re.compile(r"\r?\n")
INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)", re.ASCII)

LIST_HEADER_MARKERS = ("IDs", "Skills", "Phases")
SLOT_HEADER_MARKERS = ("Slots",)
INT_HEADER_MARKERS = ("Level", "Duration", "Load", "Concurrent")


# ══════════════════════════════════════════════════════════════════════════════
# TOKENIZING
# ══════════════════════════════════════════════════════════════════════════════

def normalise_lines(text: str) -> list[str]:
    """Strip BOM and null bytes, split on CRLF/LF, drop blank lines."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    text = text.replace("\x00", "")
    return [line for line in LINE_SPLIT_RE.split(text) if line.strip()]


def tokenize_line(line: str) -> list[str]:
    """
    Split one CSV line into trimmed fields.

    A field may be wrapped in double quotes; inside quotes a comma does not
    split and a doubled quote ("") is a literal quote character.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


# ══════════════════════════════════════════════════════════════════════════════
# COERCION
# ══════════════════════════════════════════════════════════════════════════════

def parse_int(raw: str) -> int | None:
    # Leading-integer semantics: "12abc" -> 12, "abc" -> None
    match = INT_PREFIX_RE.match(raw)
    if not match:
        return None
    return int(match.group(1))


def to_string_list(raw: str) -> list[str]:
    return [piece.strip() for piece in raw.split(";") if piece.strip()]


def to_int(raw: str) -> int:
    value = parse_int(raw)
    return 0 if value is None else value


def to_slot_list(raw: str) -> list[int]:
    try:
        parsed = json.loads(raw)
    except ValueError:
        parsed = None
    if isinstance(parsed, list) and all(
        isinstance(item, int) and not isinstance(item, bool) for item in parsed
    ):
        return parsed

    # Zero-valued pieces are dropped along with unparseable ones.
    slots: list[int] = []
    for piece in raw.split(";"):
        value = parse_int(piece.strip())
        if value:
            slots.append(value)
    return slots


def to_text(raw: str) -> str:
    return raw.strip()


def _header_contains(*markers: str) -> Callable[[str], bool]:
    def predicate(header: str) -> bool:
        return any(marker in header for marker in markers)

    return predicate


COERCIONS: list[tuple[Callable[[str], bool], Callable[[str], Any]]] = [
    (_header_contains(*LIST_HEADER_MARKERS), to_string_list),
    (_header_contains(*SLOT_HEADER_MARKERS), to_slot_list),
    (_header_contains(*INT_HEADER_MARKERS), to_int),
]


def coerce_value(header: str, raw: str) -> Any:
    for predicate, coerce in COERCIONS:
        if predicate(header):
            return coerce(raw)
    return to_text(raw)


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def parse_header(line: str) -> list[str]:
    return [token.replace('"', "") for token in tokenize_line(line)]


def parse_text(text: str) -> list[Record]:
    """
    Parse decoded CSV text into one record per data row.

    Returns an empty list when the text holds no non-blank lines. A file with
    only a header row also yields an empty list.
    """
    lines = normalise_lines(text)
    if not lines:
        return []

    headers = parse_header(lines[0])
    records: list[Record] = []
    for line in lines[1:]:
        values = tokenize_line(line)
        record: Record = {}
        for index, header in enumerate(headers):
            raw = values[index] if index < len(values) else ""
            record[header] = coerce_value(header, raw)
        records.append(record)
    return records
