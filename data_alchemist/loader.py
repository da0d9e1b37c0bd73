#!/usr/bin/env python3
"""
loader.py — Upload loader for data-alchemist

Turns uploaded bytes into projected entities:
    bytes -> decoded text (chardet-guided) -> records -> clients/workers/tasks

Public API:
    result = load_upload("clients.csv", raw_bytes)
    store, summaries = ingest_uploads(store, [("clients.csv", raw), ...])

Result dict keys:
    file_name         — name the upload arrived with
    entity_type       — "clients", "workers" or "tasks"
    records           — parsed records (header -> coerced value)
    entities          — records projected onto the entity shape
    detected_encoding — encoding used to decode the bytes
    encoding_info     — full dict: detected, confidence, is_utf8, suspicious_chars
    warnings          — list of warning strings

Spreadsheet extensions are accepted but their bytes are read as delimited text.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

import chardet

from data_alchemist.contracts import build_upload_summary
from data_alchemist.entities import ENTITY_TYPES, FIELDS_BY_TYPE, detect_entity_type, project
from data_alchemist.parser import parse_text
from data_alchemist.store import DataStore, replace_entities, revalidate
from data_alchemist.validator import summarize_issues

logger = logging.getLogger(__name__)

TEXT_FORMATS = {".csv"}
EXCEL_FORMATS = {".xlsx", ".xls"}
ALL_FORMATS = TEXT_FORMATS | EXCEL_FORMATS

NO_DATA_REASON = "No data found in file"


class UploadError(ValueError):
    """One user-visible failure for one uploaded file."""

    def __init__(self, message: str, *, file_name: str, reason: str | None = None) -> None:
        super().__init__(message)
        self.file_name = file_name
        self.reason = reason or message


def parse_failure(file_name: str, reason: str) -> UploadError:
    return UploadError(
        f"Failed to parse {file_name}. Please check the file format and encoding.",
        file_name=file_name,
        reason=reason,
    )


# ══════════════════════════════════════════════════════════════════════════════
# ENCODING
# ══════════════════════════════════════════════════════════════════════════════

def detect_encoding_info(raw: bytes) -> dict:
    """
    Detect encoding from raw bytes.

    Returns dict with: detected, confidence, is_utf8, suspicious_chars.
    """
    result = chardet.detect(raw)
    detected = result.get("encoding") or "unknown"
    confidence = round(result.get("confidence") or 0.0, 2)
    is_utf8 = detected.upper().replace("-", "") in ("UTF8", "UTF8SIG", "ASCII")

    suspicious: list[str] = []
    if not is_utf8:
        for row_idx, line in enumerate(raw.split(b"\n")[:100], start=1):
            try:
                line.decode("utf-8")
            except UnicodeDecodeError as e:
                bad_byte = line[e.start : e.end]
                suspicious.append(f"row {row_idx}: byte {bad_byte!r} at position {e.start}")

    return {
        "detected": detected,
        "confidence": confidence,
        "is_utf8": is_utf8,
        "suspicious_chars": suspicious[:10],
    }


def read_text_safely(raw: bytes, preferred_encoding: str) -> str:
    """
    Decode raw bytes line-by-line.

    Strategy per line:
      1. Try UTF-8
      2. Try preferred_encoding (chardet result)
      3. CP1252 with replace (never crashes)
    """
    decoded_lines: list[str] = []
    for raw_line in raw.split(b"\n"):
        decoded: str | None = None
        for enc in ("utf-8", preferred_encoding):
            if not enc or enc == "unknown":
                continue
            try:
                decoded = raw_line.decode(enc)
                break
            except (LookupError, UnicodeDecodeError):
                continue
        if decoded is None:
            decoded = raw_line.decode("cp1252", errors="replace")
        decoded_lines.append(decoded.replace("\x00", ""))
    return "\n".join(decoded_lines)


def decode_bytes(raw: bytes) -> tuple[str, dict]:
    enc_info = detect_encoding_info(raw)
    enc = enc_info["detected"] if enc_info["detected"] != "unknown" else "utf-8"
    return read_text_safely(raw, enc), enc_info


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def resolve_entity_type(file_name: str, entity_type: Optional[str] = None) -> str:
    if entity_type is not None:
        if entity_type not in ENTITY_TYPES:
            raise ValueError(f"Unknown entity type '{entity_type}'")
        return entity_type
    detected = detect_entity_type(Path(file_name).name)
    if detected is None:
        raise UploadError(
            f"Could not auto-detect type for {file_name}. "
            "Please rename your file to include 'client', 'worker', or 'task'.",
            file_name=file_name,
            reason="unknown entity type",
        )
    return detected


def load_upload(file_name: str, raw: bytes, entity_type: Optional[str] = None) -> dict:
    """
    Decode, parse and project one uploaded file.

    Raises:
        UploadError  if the type is unknown, the extension is unsupported, or
                     the file holds no data rows.
    """
    suffix = Path(file_name).suffix.lower()
    if suffix not in ALL_FORMATS:
        supported = ", ".join(sorted(ALL_FORMATS))
        raise UploadError(
            f"Unsupported format '{suffix or '[missing extension]'}' for {file_name}. Supported: {supported}",
            file_name=file_name,
            reason="unsupported format",
        )

    resolved = resolve_entity_type(file_name, entity_type)
    text, enc_info = decode_bytes(raw)
    records = parse_text(text)
    if not records:
        raise parse_failure(file_name, NO_DATA_REASON)

    warnings: list[str] = []
    if not enc_info["is_utf8"]:
        warnings.append(
            f"Decoded as {enc_info['detected']} (confidence {enc_info['confidence']}); "
            "check accented characters"
        )
    if suffix in EXCEL_FORMATS:
        warnings.append(f"{suffix} upload was read as delimited text")
    missing = [name for name in FIELDS_BY_TYPE[resolved] if name not in records[0]]
    if missing:
        warnings.append(f"Missing expected columns: {', '.join(missing)}")

    return {
        "file_name": file_name,
        "entity_type": resolved,
        "records": records,
        "entities": project(records, resolved),
        "detected_encoding": enc_info["detected"],
        "encoding_info": enc_info,
        "warnings": warnings,
    }


def ingest_upload(
    store: DataStore,
    file_name: str,
    raw: bytes,
    entity_type: Optional[str] = None,
) -> tuple[DataStore, dict]:
    """Replace one collection with the upload, then re-run validation."""
    loaded = load_upload(file_name, raw, entity_type)
    store = replace_entities(store, loaded["entity_type"], loaded["entities"])
    store = revalidate(store)
    logger.info("Loaded %d %s records from %s", len(loaded["entities"]), loaded["entity_type"], file_name)
    summary = build_upload_summary(
        file_name=file_name,
        entity_type=loaded["entity_type"],
        records=len(loaded["entities"]),
        issues=summarize_issues(store.validation_errors),
        warnings=loaded["warnings"],
        message=f"{len(loaded['entities'])} {loaded['entity_type']} records loaded successfully",
    )
    return store, summary


def ingest_uploads(
    store: DataStore,
    uploads: Iterable[tuple[str, bytes]],
) -> tuple[DataStore, list[dict]]:
    """Process uploads in order; a failed file leaves the others untouched."""
    summaries: list[dict] = []
    for file_name, raw in uploads:
        try:
            store, summary = ingest_upload(store, file_name, raw)
        except UploadError as exc:
            logger.warning("Upload of %s failed: %s", file_name, exc.reason)
            summary = build_upload_summary(
                file_name=file_name,
                entity_type=None,
                status="error",
                message=str(exc),
            )
        summaries.append(summary)
    return store, summaries
