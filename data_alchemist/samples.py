"""Demo data for trying the workshop without uploading anything."""

from __future__ import annotations

from pathlib import Path

from data_alchemist.entities import Client, Task, Worker
from data_alchemist.store import DataStore, revalidate

SAMPLE_DATA_DIR = Path(__file__).resolve().parent.parent / "sample-data"

SAMPLE_CLIENTS: list[Client] = [
    {
        "ClientID": "C001",
        "ClientName": "Acme Corp",
        "PriorityLevel": 5,
        "RequestedTaskIDs": ["T001", "T002"],
        "GroupTag": "Enterprise",
        "AttributesJSON": '{"budget": 10000, "deadline": "2024-12-31"}',
    },
    {
        "ClientID": "C002",
        "ClientName": "Tech Solutions",
        "PriorityLevel": 3,
        "RequestedTaskIDs": ["T003"],
        "GroupTag": "SMB",
        "AttributesJSON": '{"budget": 5000}',
    },
]

SAMPLE_WORKERS: list[Worker] = [
    {
        "WorkerID": "W001",
        "WorkerName": "John Doe",
        "Skills": ["JavaScript", "React", "Node.js"],
        "AvailableSlots": [1, 2, 3],
        "MaxLoadPerPhase": 2,
        "WorkerGroup": "Frontend",
        "QualificationLevel": 4,
    },
    {
        "WorkerID": "W002",
        "WorkerName": "Jane Smith",
        "Skills": ["Python", "Django", "PostgreSQL"],
        "AvailableSlots": [2, 3, 4],
        "MaxLoadPerPhase": 3,
        "WorkerGroup": "Backend",
        "QualificationLevel": 5,
    },
]

SAMPLE_TASKS: list[Task] = [
    {
        "TaskID": "T001",
        "TaskName": "Frontend Development",
        "Category": "Development",
        "Duration": 2,
        "RequiredSkills": ["JavaScript", "React"],
        "PreferredPhases": [1, 2],
        "MaxConcurrent": 1,
    },
    {
        "TaskID": "T002",
        "TaskName": "API Development",
        "Category": "Backend",
        "Duration": 3,
        "RequiredSkills": ["Node.js"],
        "PreferredPhases": [2, 3],
        "MaxConcurrent": 2,
    },
    {
        "TaskID": "T003",
        "TaskName": "Database Design",
        "Category": "Database",
        "Duration": 1,
        "RequiredSkills": ["PostgreSQL"],
        "PreferredPhases": [1],
        "MaxConcurrent": 1,
    },
]


def sample_store(store: DataStore | None = None) -> DataStore:
    """Load the demo collections (keeping any rules) and validate them."""
    base = store or DataStore()
    loaded = DataStore(
        clients=[dict(client) for client in SAMPLE_CLIENTS],
        workers=[dict(worker) for worker in SAMPLE_WORKERS],
        tasks=[dict(task) for task in SAMPLE_TASKS],
        rules=list(base.rules),
    )
    return revalidate(loaded)


def sample_files() -> dict[str, Path]:
    return {
        "clients": SAMPLE_DATA_DIR / "clients.csv",
        "workers": SAMPLE_DATA_DIR / "workers.csv",
        "tasks": SAMPLE_DATA_DIR / "tasks.csv",
    }
