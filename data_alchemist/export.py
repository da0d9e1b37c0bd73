"""Golden-data export: entities plus enabled rules in one JSON document."""

from __future__ import annotations

import json
from typing import Any, Optional

from data_alchemist import __version__ as TOOL_VERSION
from data_alchemist.contracts import build_contract, utc_now_iso
from data_alchemist.rules import enabled_rules
from data_alchemist.store import DataStore

EXPORT_FILENAME = "data-alchemist-export.json"
EXPORT_MIME = "application/json"


def build_export(store: DataStore, *, timestamp: Optional[str] = None) -> dict[str, Any]:
    return {
        "clients": [dict(client) for client in store.clients],
        "workers": [dict(worker) for worker in store.workers],
        "tasks": [dict(task) for task in store.tasks],
        "rules": [rule.to_dict() for rule in enabled_rules(store.rules)],
        "timestamp": timestamp or utc_now_iso(),
    }


def export_json(store: DataStore, *, timestamp: Optional[str] = None) -> str:
    return json.dumps(build_export(store, timestamp=timestamp), indent=2, ensure_ascii=False)


def build_export_contract(payload: dict[str, Any]) -> dict[str, Any]:
    """Metadata shown next to the download: contract header plus counts."""
    return {
        "contract": build_contract("data_alchemist.export"),
        "schema_version": build_contract("data_alchemist.export")["version"],
        "tool_version": TOOL_VERSION,
        "generated_at": payload["timestamp"],
        "counts": {
            "clients": len(payload["clients"]),
            "workers": len(payload["workers"]),
            "tasks": len(payload["tasks"]),
            "rules": len(payload["rules"]),
        },
        "file_name": EXPORT_FILENAME,
    }
