"""Entity shapes for the three upload types and the record -> entity projection."""

from __future__ import annotations

from typing import Any, Optional

from data_alchemist.parser import Record

ENTITY_TYPES = ("clients", "workers", "tasks")

CLIENT_FIELDS = [
    "ClientID",
    "ClientName",
    "PriorityLevel",
    "RequestedTaskIDs",
    "GroupTag",
    "AttributesJSON",
]
WORKER_FIELDS = [
    "WorkerID",
    "WorkerName",
    "Skills",
    "AvailableSlots",
    "MaxLoadPerPhase",
    "WorkerGroup",
    "QualificationLevel",
]
TASK_FIELDS = [
    "TaskID",
    "TaskName",
    "Category",
    "Duration",
    "RequiredSkills",
    "PreferredPhases",
    "MaxConcurrent",
]

FIELDS_BY_TYPE = {
    "clients": CLIENT_FIELDS,
    "workers": WORKER_FIELDS,
    "tasks": TASK_FIELDS,
}

# Checked in this order; the first keyword found in the file name wins.
FILENAME_HINTS = (
    ("client", "clients"),
    ("worker", "workers"),
    ("task", "tasks"),
)

Client = dict[str, Any]
Worker = dict[str, Any]
Task = dict[str, Any]
Entity = dict[str, Any]


def detect_entity_type(filename: str) -> Optional[str]:
    lowered = filename.lower()
    for hint, entity_type in FILENAME_HINTS:
        if hint in lowered:
            return entity_type
    return None


def project_record(record: Record, entity_type: str) -> Entity:
    """
    Reinterpret one parsed record as an entity of ``entity_type``.

    Known fields come first, in their canonical order; absent ones are None.
    Extra columns from the file are kept after them so nothing the user
    uploaded disappears from the grid or the export.
    """
    fields = _fields_for(entity_type)
    entity: Entity = {name: record.get(name) for name in fields}
    for key, value in record.items():
        if key not in entity:
            entity[key] = value
    return entity


def project(records: list[Record], entity_type: str) -> list[Entity]:
    _fields_for(entity_type)
    return [project_record(record, entity_type) for record in records]


def _fields_for(entity_type: str) -> list[str]:
    try:
        return FIELDS_BY_TYPE[entity_type]
    except KeyError:
        raise ValueError(
            f"Unknown entity type '{entity_type}'. Expected one of: {', '.join(ENTITY_TYPES)}"
        ) from None
