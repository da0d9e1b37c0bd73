"""
Cross-entity validation for uploaded clients, workers and tasks.

Every check is advisory: issues are collected in full and returned, never
raised. Ordering is stable (clients first, then tasks; checks in the order
they appear in ``validate``) so the grid can attach issues to cells by
``row_index`` and ``field``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from data_alchemist.entities import Client, Task, Worker

logger = logging.getLogger(__name__)

PRIORITY_MIN = 1
PRIORITY_MAX = 5
DURATION_MIN = 1

ISSUE_DEFINITIONS = {
    "client_missing_id": {"severity": "error", "field": "ClientID"},
    "client_priority_range": {"severity": "error", "field": "PriorityLevel"},
    "client_unknown_task": {"severity": "error", "field": "RequestedTaskIDs"},
    "task_duration_minimum": {"severity": "error", "field": "Duration"},
    "task_uncovered_skill": {"severity": "warning", "field": "RequiredSkills"},
}


@dataclass(frozen=True)
class ValidationIssue:
    id: str
    type: str
    message: str
    field: Optional[str] = None
    row_index: Optional[int] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.id, "type": self.type, "message": self.message}
        if self.field is not None:
            payload["field"] = self.field
        if self.row_index is not None:
            payload["rowIndex"] = self.row_index
        if self.suggestion is not None:
            payload["suggestion"] = self.suggestion
        return payload


def build_issue(
    *,
    check: str,
    issue_id: str,
    message: str,
    row_index: int,
    suggestion: Optional[str] = None,
) -> ValidationIssue:
    definition = ISSUE_DEFINITIONS[check]
    return ValidationIssue(
        id=issue_id,
        type=definition["severity"],
        message=message,
        field=definition["field"],
        row_index=row_index,
        suggestion=suggestion,
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def validate_clients(clients: list[Client], tasks: list[Task]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    known_task_ids = {task.get("TaskID") for task in tasks}

    for index, client in enumerate(clients):
        if not client.get("ClientID"):
            issues.append(
                build_issue(
                    check="client_missing_id",
                    issue_id=f"client-{index}-id",
                    message="Client ID is required",
                    row_index=index,
                )
            )

        priority = client.get("PriorityLevel")
        if _is_number(priority) and (priority < PRIORITY_MIN or priority > PRIORITY_MAX):
            issues.append(
                build_issue(
                    check="client_priority_range",
                    issue_id=f"client-{index}-priority",
                    message=f"Priority level must be between {PRIORITY_MIN} and {PRIORITY_MAX}",
                    row_index=index,
                )
            )

        for task_id in _as_list(client.get("RequestedTaskIDs")):
            if task_id not in known_task_ids:
                issues.append(
                    build_issue(
                        check="client_unknown_task",
                        issue_id=f"client-{index}-task-{task_id}",
                        message=f"Task {task_id} does not exist",
                        row_index=index,
                        suggestion="Remove invalid task ID or add the task to tasks data",
                    )
                )
    return issues


def validate_tasks(tasks: list[Task], workers: list[Worker]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    worker_skills = [set(_as_list(worker.get("Skills"))) for worker in workers]

    for index, task in enumerate(tasks):
        duration = task.get("Duration")
        if _is_number(duration) and duration < DURATION_MIN:
            issues.append(
                build_issue(
                    check="task_duration_minimum",
                    issue_id=f"task-{index}-duration",
                    message=f"Duration must be at least {DURATION_MIN}",
                    row_index=index,
                )
            )

        for skill in _as_list(task.get("RequiredSkills")):
            if not any(skill in skills for skills in worker_skills):
                issues.append(
                    build_issue(
                        check="task_uncovered_skill",
                        issue_id=f"task-{index}-skill-{skill}",
                        message=f"No worker has skill: {skill}",
                        row_index=index,
                    )
                )
    return issues


def validate(
    clients: list[Client],
    workers: list[Worker],
    tasks: list[Task],
) -> list[ValidationIssue]:
    issues = validate_clients(clients, tasks) + validate_tasks(tasks, workers)
    counts = summarize_issues(issues)
    logger.info(
        "Validated %d clients, %d workers, %d tasks: %d errors, %d warnings",
        len(clients),
        len(workers),
        len(tasks),
        counts["errors"],
        counts["warnings"],
    )
    return issues


def summarize_issues(issues: Iterable[ValidationIssue]) -> dict[str, int]:
    errors = warnings = 0
    for issue in issues:
        if issue.type == "error":
            errors += 1
        elif issue.type == "warning":
            warnings += 1
    return {"errors": errors, "warnings": warnings}


def issues_for_cell(
    issues: Iterable[ValidationIssue],
    row_index: int,
    field: str,
) -> list[ValidationIssue]:
    return [issue for issue in issues if issue.row_index == row_index and issue.field == field]
