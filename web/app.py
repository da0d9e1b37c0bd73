#!/usr/bin/env python3
from __future__ import annotations

import json
import time

import streamlit as st

from data_alchemist.entities import ENTITY_TYPES
from data_alchemist.export import EXPORT_FILENAME, EXPORT_MIME, build_export, build_export_contract, export_json
from data_alchemist.grid import apply_cell_edit, frame_edits, issue_frame, issue_table, records_frame
from data_alchemist.loader import ALL_FORMATS, ingest_uploads
from data_alchemist.query import run_grid_query
from data_alchemist.rules import extract_rule
from data_alchemist.samples import sample_store
from data_alchemist.settings import configure_logging, rule_delay_seconds
from data_alchemist.store import (
    DataStore,
    add_rule,
    remove_rule,
    replace_entities,
    revalidate,
    total_records,
    update_rule_enabled,
)
from data_alchemist.validator import summarize_issues


RULE_PLACEHOLDER = "e.g., 'Always run T1 and T3 together' or 'Limit Group Alpha to 2 tasks per phase'"
RULE_TYPE_BADGES = {
    "co-run": "🔵",
    "load-limit": "🟠",
    "phase-window": "🟢",
    "slot-restriction": "🟣",
}


def ensure_state() -> None:
    st.session_state.setdefault("store", DataStore())
    st.session_state.setdefault("upload_results", [])
    st.session_state.setdefault("debug_mode", False)
    st.session_state.setdefault("rule_input", "")


def get_store() -> DataStore:
    return st.session_state["store"]


def set_store(store: DataStore) -> None:
    st.session_state["store"] = store


def set_visuals() -> None:
    st.set_page_config(page_title="Data Alchemist", page_icon="🧙", layout="wide", initial_sidebar_state="collapsed")
    st.markdown(
        """
        <style>
        .block-container {
            padding-top: 2rem;
            padding-bottom: 2rem;
            max-width: 1200px;
        }
        [data-testid="stMetric"] {
            border: 1px solid rgba(157, 114, 255, 0.35);
            border-radius: 18px;
            padding: 0.85rem 1rem;
        }
        .stButton > button, .stDownloadButton > button {
            border-radius: 999px !important;
            font-weight: 600 !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_header(store: DataStore) -> None:
    st.title("🧙 Data Alchemist Workshop")
    st.caption("This grid's smarter than it looks.")
    counts = summarize_issues(store.validation_errors)
    metrics = st.columns(3)
    metrics[0].metric("Records loaded", total_records(store))
    metrics[1].metric("Errors", counts["errors"])
    metrics[2].metric("Warnings", counts["warnings"])
    st.toggle("🐞 Debug mode", key="debug_mode")


def render_upload_tab() -> None:
    st.subheader("Upload")
    st.caption("Name each file so it includes 'client', 'worker', or 'task'. Each upload replaces that collection.")
    files = st.file_uploader(
        "Drop your files",
        type=[ext.lstrip(".") for ext in sorted(ALL_FORMATS)],
        accept_multiple_files=True,
        key="uploads_input",
    )
    columns = st.columns(2)
    if columns[0].button("Load files", type="primary", disabled=not files, width="stretch"):
        store, summaries = ingest_uploads(get_store(), [(item.name, item.getvalue()) for item in files or []])
        set_store(store)
        st.session_state["upload_results"] = summaries
    if columns[1].button("Load sample data", width="stretch"):
        set_store(sample_store(get_store()))
        st.session_state["upload_results"] = []
        st.toast("✨ Sample data loaded. Drop your file. We'll do the rest.")

    for summary in st.session_state.get("upload_results") or []:
        if summary["status"] == "error":
            st.error(summary["message"])
            continue
        st.success(f"{summary['file']}: {summary['message']}")
        for warning in summary.get("warnings") or []:
            st.warning(warning)


def render_entity_grid(store: DataStore, entity_type: str) -> None:
    entities = store.entities(entity_type)
    st.markdown(f"#### {entity_type.capitalize()} data")
    if not entities:
        st.info(f"No {entity_type} loaded yet.")
        return

    query = st.text_input(
        f"Search {entity_type} or ask in natural language",
        key=f"query_{entity_type}",
        placeholder="e.g. duration > 1",
    )
    if query.strip():
        result = run_grid_query(entities, query)
        st.caption(result["message"])
        st.dataframe(records_frame(result["matches"]), width="stretch", hide_index=True)

    original = records_frame(entities)
    edited = st.data_editor(original, key=f"grid_{entity_type}", width="stretch", num_rows="fixed")
    changes = frame_edits(original, edited)
    if changes:
        updated = entities
        for row_index, column, value in changes:
            updated = apply_cell_edit(updated, row_index, column, value)
        set_store(revalidate(replace_entities(store, entity_type, updated)))
        st.rerun()

    cell_issues = issue_frame(entities, store.validation_errors)
    if (cell_issues != "").to_numpy().any():
        with st.expander("Cell diagnostics", expanded=False):
            st.dataframe(cell_issues, width="stretch")


def render_data_tab(store: DataStore) -> None:
    st.subheader("Data grids")
    if store.validation_errors:
        with st.expander(f"Validation results ({len(store.validation_errors)})", expanded=True):
            st.dataframe(issue_table(store.validation_errors), width="stretch", hide_index=True)
    for entity_type in ENTITY_TYPES:
        render_entity_grid(store, entity_type)


def render_rules_tab() -> None:
    st.subheader("⚡ Rules")
    text = st.text_area("Natural Language Rule Input", key="rule_input", placeholder=RULE_PLACEHOLDER, height=100)
    if st.button("Convert to Rule", type="primary", disabled=not text.strip()):
        delay = rule_delay_seconds()
        with st.spinner("Processing..."):
            rule = extract_rule(text, delay=(lambda: time.sleep(delay)) if delay else None)
        set_store(add_rule(get_store(), rule))
        st.toast("Rule created: successfully converted natural language to rule")
        st.rerun()

    store = get_store()
    if not store.rules:
        st.caption("No rules created yet. Try adding one above!")
        return

    for rule in store.rules:
        with st.container(border=True):
            header = st.columns([6, 2, 2])
            header[0].markdown(f"{RULE_TYPE_BADGES.get(rule.type, '⚪')} **{rule.type}** · {rule.description}")
            enabled = header[1].toggle("Enabled", value=rule.enabled, key=f"enabled_{rule.id}")
            if enabled != rule.enabled:
                set_store(update_rule_enabled(get_store(), rule.id, enabled))
                st.rerun()
            if header[2].button("Delete", key=f"delete_{rule.id}"):
                set_store(remove_rule(get_store(), rule.id))
                st.rerun()
            st.code(json.dumps(rule.config.to_dict(), indent=2), language="json")


def render_export_tab(store: DataStore) -> None:
    st.subheader("📦 Export")
    payload = build_export(store)
    contract = build_export_contract(payload)
    st.json(contract["counts"])
    st.download_button(
        "💛 Export Golden Data",
        data=export_json(store, timestamp=payload["timestamp"]),
        file_name=EXPORT_FILENAME,
        mime=EXPORT_MIME,
        disabled=total_records(store) == 0,
        width="stretch",
    )


def render_debug(store: DataStore) -> None:
    st.subheader("🧪 Debug information")
    st.json(
        {
            "clients": len(store.clients),
            "workers": len(store.workers),
            "tasks": len(store.tasks),
            "rules": len(store.rules),
            "validation_errors": [issue.to_dict() for issue in store.validation_errors],
        }
    )


def main() -> None:
    configure_logging()
    set_visuals()
    ensure_state()

    store = get_store()
    render_header(store)

    upload_tab, data_tab, rules_tab, export_tab = st.tabs(["📤 Upload", "👁️ Data Grids", "⚡ Rules", "📦 Export"])
    with upload_tab:
        render_upload_tab()
    with data_tab:
        render_data_tab(get_store())
    with rules_tab:
        render_rules_tab()
    with export_tab:
        render_export_tab(get_store())

    if st.session_state.get("debug_mode"):
        render_debug(get_store())


if __name__ == "__main__":
    main()
