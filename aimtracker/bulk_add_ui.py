"""
Bulk add panel: several rows for several scenarios in one submission.
"""

from typing import Dict, List

import pandas as pd
import streamlit as st

from aimtracker.entries import (
    BulkRow,
    EntryValidationError,
    build_bulk_entries,
    coerce_number,
    new_bulk_row,
)
from aimtracker.filters import search_scenarios
from aimtracker.models import Difficulty
from aimtracker.store import ScoreStore

_COLUMNS = ["date", "score", "accuracy", "difficulty", "notes"]


def _rows_frame(row: BulkRow) -> pd.DataFrame:
    return pd.DataFrame(
        [{
            "date": row.date,
            "score": row.score,
            "accuracy": row.accuracy,
            "difficulty": row.difficulty.value,
            "notes": row.notes,
        }],
        columns=_COLUMNS,
    )


def _frame_to_rows(df: pd.DataFrame) -> List[BulkRow]:
    rows = []
    for record in df.to_dict(orient="records"):
        difficulty = record.get("difficulty")
        if not isinstance(difficulty, str) or not difficulty:
            difficulty = Difficulty.MEDIUM.value
        notes = record.get("notes")
        rows.append(BulkRow(
            date=record["date"].strip() if isinstance(record.get("date"), str) else "",
            difficulty=Difficulty(difficulty),
            score=coerce_number(record.get("score"), integer=True),
            accuracy=coerce_number(record.get("accuracy")),
            notes="" if notes is None or (isinstance(notes, float) and pd.isna(notes)) else str(notes),
        ))
    return rows


def render_bulk_add(store: ScoreStore) -> None:
    """Render the bulk add panel; closes itself after a successful submit."""
    st.subheader("📚 Bulk Add Benchmark Scores")
    existing = store.unique_scenarios()
    if not existing:
        st.info("Add a score first; bulk add works on scenarios already in your history.")
        if st.button("Close bulk add"):
            st.session_state["show_bulk_add"] = False
            st.rerun()
        return

    term = st.text_input("Search scenarios", key="bulk_search")
    options = search_scenarios(existing, term) if term else existing
    chosen = st.multiselect(
        "1. Select scenarios",
        options=sorted(set(options) | set(st.session_state.get("bulk_selected", []))),
        key="bulk_selected",
    )

    rows_by_scenario: Dict[str, List[BulkRow]] = {}
    entries = list(store.entries)
    for scenario in chosen:
        st.markdown(f"**2. {scenario}**")
        edited = st.data_editor(
            _rows_frame(new_bulk_row(entries, scenario)),
            key=f"bulk_rows_{scenario}",
            num_rows="dynamic",
            use_container_width=True,
            column_config={
                "date": st.column_config.TextColumn("Date", help="YYYY-MM-DD", required=True),
                "score": st.column_config.NumberColumn("Score", min_value=0, step=1),
                "accuracy": st.column_config.NumberColumn("Accuracy %", min_value=0.0, max_value=100.0, step=0.1),
                "difficulty": st.column_config.SelectboxColumn(
                    "Difficulty", options=[d.value for d in Difficulty], required=True
                ),
                "notes": st.column_config.TextColumn("Notes"),
            },
        )
        rows_by_scenario[scenario] = _frame_to_rows(edited)

    col1, col2 = st.columns(2)
    with col1:
        submit = st.button("Submit entries", type="primary", use_container_width=True)
    with col2:
        cancel = st.button("Cancel", use_container_width=True)

    if cancel:
        st.session_state["show_bulk_add"] = False
        st.rerun()

    if submit:
        try:
            new_entries = build_bulk_entries(rows_by_scenario)
        except EntryValidationError as e:
            st.error(str(e))
            return
        store.add_many(new_entries)
        st.session_state["show_bulk_add"] = False
        st.session_state["flash"] = f"Added {len(new_entries)} scores."
        st.rerun()
