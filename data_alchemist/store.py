"""In-memory state for one session: the three entity collections, rules and issues."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from data_alchemist.entities import ENTITY_TYPES, Client, Entity, Task, Worker
from data_alchemist.rules import Rule, delete_rule, set_rule_enabled
from data_alchemist.validator import ValidationIssue, validate


@dataclass(frozen=True)
class DataStore:
    clients: list[Client] = field(default_factory=list)
    workers: list[Worker] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    rules: list[Rule] = field(default_factory=list)
    validation_errors: list[ValidationIssue] = field(default_factory=list)

    def entities(self, entity_type: str) -> list[Entity]:
        if entity_type not in ENTITY_TYPES:
            raise ValueError(f"Unknown entity type '{entity_type}'")
        return getattr(self, entity_type)


def replace_entities(store: DataStore, entity_type: str, entities: list[Entity]) -> DataStore:
    """Swap a whole collection; uploads never merge with what was there."""
    if entity_type not in ENTITY_TYPES:
        raise ValueError(f"Unknown entity type '{entity_type}'")
    return replace(store, **{entity_type: list(entities)})


def replace_issues(store: DataStore, issues: list[ValidationIssue]) -> DataStore:
    return replace(store, validation_errors=list(issues))


def revalidate(store: DataStore) -> DataStore:
    return replace_issues(store, validate(store.clients, store.workers, store.tasks))


def add_rule(store: DataStore, rule: Rule) -> DataStore:
    return replace(store, rules=[*store.rules, rule])


def update_rule_enabled(store: DataStore, rule_id: str, enabled: bool) -> DataStore:
    return replace(store, rules=set_rule_enabled(store.rules, rule_id, enabled))


def remove_rule(store: DataStore, rule_id: str) -> DataStore:
    return replace(store, rules=delete_rule(store.rules, rule_id))


def total_records(store: DataStore) -> int:
    return len(store.clients) + len(store.workers) + len(store.tasks)
