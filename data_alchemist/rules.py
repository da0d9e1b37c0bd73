"""
Keyword-based conversion of a free-text sentence into one scheduling rule.

extract_rule() checks the lowercased sentence against an ordered list of
keyword predicates and stops at the first match:

    "co-run" | "together" | "pair"   -> co-run      {taskIds}
    "limit" and "group"              -> load-limit  {groupTag, maxTasks}
    "phase" and "only"               -> phase-window {taskIds, allowedPhases}
    anything else                    -> co-run      {custom: true}

It never raises for string input; unrecognised sentences become the custom
co-run rule so rule creation is never blocked.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)

RULE_TYPES = ("co-run", "slot-restriction", "load-limit", "phase-window")

TASK_ID_RE = re.compile(r"t\d+", re.IGNORECASE | re.ASCII)
GROUP_TAG_RE = re.compile(r"group\s+([a-zA-Z]+)", re.IGNORECASE)
INTEGER_RE = re.compile(r"\d+", re.ASCII)

CO_RUN_KEYWORDS = ("co-run", "together", "pair")
DEFAULT_GROUP_TAG = "unknown"
DEFAULT_MAX_TASKS = 3


# ══════════════════════════════════════════════════════════════════════════════
# RULE CONFIG VARIANTS
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CoRunConfig:
    task_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"taskIds": list(self.task_ids)}


@dataclass(frozen=True)
class LoadLimitConfig:
    group_tag: str = DEFAULT_GROUP_TAG
    max_tasks: int = DEFAULT_MAX_TASKS

    def to_dict(self) -> dict[str, Any]:
        return {"groupTag": self.group_tag, "maxTasks": self.max_tasks}


@dataclass(frozen=True)
class PhaseWindowConfig:
    task_ids: list[str] = field(default_factory=list)
    allowed_phases: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"taskIds": list(self.task_ids), "allowedPhases": list(self.allowed_phases)}


@dataclass(frozen=True)
class SlotRestrictionConfig:
    group_tag: str = DEFAULT_GROUP_TAG
    slots: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"groupTag": self.group_tag, "slots": list(self.slots)}


@dataclass(frozen=True)
class CustomConfig:
    def to_dict(self) -> dict[str, Any]:
        return {"custom": True}


RuleConfig = Union[CoRunConfig, LoadLimitConfig, PhaseWindowConfig, SlotRestrictionConfig, CustomConfig]

CONFIG_TYPES = {
    "co-run": (CoRunConfig, CustomConfig),
    "slot-restriction": (SlotRestrictionConfig,),
    "load-limit": (LoadLimitConfig,),
    "phase-window": (PhaseWindowConfig,),
}


@dataclass(frozen=True)
class Rule:
    id: str
    type: str
    description: str
    config: RuleConfig
    enabled: bool = True

    @property
    def is_custom(self) -> bool:
        return isinstance(self.config, CustomConfig)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "config": self.config.to_dict(),
            "enabled": self.enabled,
        }


# ══════════════════════════════════════════════════════════════════════════════
# RULE IDS
# ══════════════════════════════════════════════════════════════════════════════

class RuleIdFactory:
    """Millisecond timestamps, bumped when two calls land in the same tick."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)


_default_ids = RuleIdFactory()


# ══════════════════════════════════════════════════════════════════════════════
# EXTRACTION
# ══════════════════════════════════════════════════════════════════════════════

def extract_task_ids(text: str) -> list[str]:
    return [match.upper() for match in TASK_ID_RE.findall(text)]


def extract_group_tag(text: str) -> str:
    match = GROUP_TAG_RE.search(text)
    return match.group(1) if match else DEFAULT_GROUP_TAG


def extract_first_number(text: str) -> Optional[int]:
    match = INTEGER_RE.search(text)
    return int(match.group(0)) if match else None


def extract_numbers(text: str) -> list[int]:
    return [int(match) for match in INTEGER_RE.findall(text)]


def classify(text: str) -> tuple[str, RuleConfig]:
    lowered = text.lower()

    if any(keyword in lowered for keyword in CO_RUN_KEYWORDS):
        return "co-run", CoRunConfig(task_ids=extract_task_ids(text))

    if "limit" in lowered and "group" in lowered:
        max_tasks = extract_first_number(text)
        return "load-limit", LoadLimitConfig(
            group_tag=extract_group_tag(text),
            max_tasks=DEFAULT_MAX_TASKS if max_tasks is None else max_tasks,
        )

    if "phase" in lowered and "only" in lowered:
        return "phase-window", PhaseWindowConfig(
            task_ids=extract_task_ids(text),
            allowed_phases=extract_numbers(text),
        )

    return "co-run", CustomConfig()


def extract_rule(
    text: str,
    *,
    new_id: Optional[Callable[[], str]] = None,
    delay: Optional[Callable[[], None]] = None,
) -> Rule:
    """
    Turn one sentence into an enabled Rule.

    ``delay`` is called before extraction; the UI uses it to show a short
    "processing" state. ``new_id`` overrides the session-wide id factory.
    """
    if delay is not None:
        delay()
    rule_type, config = classify(text)
    rule = Rule(
        id=(new_id or _default_ids)(),
        type=rule_type,
        description=text,
        config=config,
        enabled=True,
    )
    logger.info("Extracted %s rule %s from %r", rule.type, rule.id, text)
    return rule


def make_rule(
    rule_type: str,
    description: str,
    config: RuleConfig,
    *,
    enabled: bool = True,
    new_id: Optional[Callable[[], str]] = None,
) -> Rule:
    """Build a rule by hand; the config variant must belong to ``rule_type``."""
    if rule_type not in CONFIG_TYPES:
        raise ValueError(f"Unknown rule type '{rule_type}'. Expected one of: {', '.join(RULE_TYPES)}")
    if not isinstance(config, CONFIG_TYPES[rule_type]):
        raise ValueError(f"{type(config).__name__} is not a valid config for {rule_type} rules")
    return Rule(
        id=(new_id or _default_ids)(),
        type=rule_type,
        description=description,
        config=config,
        enabled=enabled,
    )


# ══════════════════════════════════════════════════════════════════════════════
# RULE LIST EDITS
# ══════════════════════════════════════════════════════════════════════════════

def _index_of(rules: list[Rule], rule_id: str) -> int:
    for index, rule in enumerate(rules):
        if rule.id == rule_id:
            return index
    raise KeyError(f"Rule not found: {rule_id}")


def set_rule_enabled(rules: list[Rule], rule_id: str, enabled: bool) -> list[Rule]:
    index = _index_of(rules, rule_id)
    updated = list(rules)
    updated[index] = replace(rules[index], enabled=enabled)
    return updated


def delete_rule(rules: list[Rule], rule_id: str) -> list[Rule]:
    _index_of(rules, rule_id)
    return [rule for rule in rules if rule.id != rule_id]


def enabled_rules(rules: list[Rule]) -> list[Rule]:
    return [rule for rule in rules if rule.enabled]
