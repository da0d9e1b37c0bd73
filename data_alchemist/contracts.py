"""Shared versioned contracts for data-alchemist outputs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from data_alchemist import __version__ as TOOL_VERSION
from data_alchemist.settings import export_stamp_override

CONTRACT_VERSIONS = {
    "data_alchemist.export": "1.0.0",
    "data_alchemist.upload_summary": "1.0.0",
}


def utc_now_iso() -> str:
    override = export_stamp_override()
    if override:
        return override
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def build_contract(name: str) -> dict[str, str]:
    version = CONTRACT_VERSIONS[name]
    return {"name": name, "version": version}


def build_upload_summary(
    *,
    file_name: str,
    entity_type: str | None,
    status: str = "ok",
    records: int = 0,
    issues: dict[str, int] | None = None,
    warnings: list[str] | None = None,
    message: str | None = None,
) -> dict[str, Any]:
    return {
        "contract": build_contract("data_alchemist.upload_summary"),
        "tool_version": TOOL_VERSION,
        "file": file_name,
        "entity_type": entity_type,
        "status": status,
        "generated_at": utc_now_iso(),
        "records": records,
        "issues": issues or {"errors": 0, "warnings": 0},
        "warnings_count": len(warnings or []),
        "warnings": list(warnings or []),
        "message": message,
    }
