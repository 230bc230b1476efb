"""
AI Coach panel and PDF export for the Streamlit dashboard.
"""

from datetime import date
from typing import List, Sequence

import streamlit as st

from aimtracker.ai_coach import (
    MISSING_KEY_TEXT,
    PLACEHOLDER_TEXT,
    CoachingRequest,
    describe_analysis_scope,
    get_coach_recommendation,
    no_data_message,
    relevant_entries,
)
from aimtracker.models import BenchmarkEntry
from aimtracker.report import generate_pdf_report, report_filename
from aimtracker.stats import CurrentStats
from aimtracker.store import PreferencesStore


def _init_state() -> None:
    if "ai_recommendation" not in st.session_state:
        st.session_state["ai_recommendation"] = PLACEHOLDER_TEXT
    if "is_analyzing" not in st.session_state:
        st.session_state["is_analyzing"] = False
    if "ai_api_key" not in st.session_state:
        st.session_state["ai_api_key"] = ""


def _build_request(
    entries: Sequence[BenchmarkEntry],
    stats: CurrentStats,
    selected: Sequence[str],
    prefs: PreferencesStore,
) -> CoachingRequest:
    return CoachingRequest(
        api_key=st.session_state["ai_api_key"],
        user_game=prefs.user_game,
        user_sensitivity=prefs.sensitivity_label,
        filter_scenario=", ".join(selected),
        current_stats=stats,
        recent_entries=relevant_entries(entries),
    )


def _run_analysis(request: CoachingRequest, selected: Sequence[str]) -> None:
    if not request.api_key:
        st.session_state["ai_recommendation"] = MISSING_KEY_TEXT
        return
    if not request.recent_entries:
        st.session_state["ai_recommendation"] = no_data_message(selected)
        return

    st.session_state["is_analyzing"] = True
    try:
        scope = describe_analysis_scope(selected, len(request.recent_entries))
        with st.spinner(f"Analyzing {scope}..."):
            st.session_state["ai_recommendation"] = get_coach_recommendation(request)
    finally:
        st.session_state["is_analyzing"] = False


def render_ai_coach_panel(
    entries: List[BenchmarkEntry],
    stats: CurrentStats,
    selected: Sequence[str],
    prefs: PreferencesStore,
) -> None:
    """
    Render the coach panel: API key, analyze button, prompt copy and export.

    Args:
        entries: filtered and sorted entries of the current view
        stats: aggregate stats of that view
        selected: active scenario filter
        prefs: player setup used in the prompt and the report
    """
    _init_state()
    st.subheader("🧠 AI Coach")
    st.caption("Coaching feedback on the entries in the current filter. The key stays in this session only.")

    st.text_input("OpenAI API key", type="password", key="ai_api_key")

    col1, col2 = st.columns(2)
    with col1:
        analyze = st.button(
            "Analyze performance",
            disabled=st.session_state["is_analyzing"],
            use_container_width=True,
        )
    with col2:
        show_prompt = st.toggle("Show prompt to copy", value=False)

    request = _build_request(entries, stats, selected, prefs)
    if analyze:
        _run_analysis(request, selected)

    if show_prompt:
        st.code(request.full_prompt(), language="markdown")

    with st.container(border=True):
        st.markdown(st.session_state["ai_recommendation"])

    pdf_bytes = generate_pdf_report(
        entries=entries,
        stats=stats,
        recommendation=st.session_state["ai_recommendation"],
        user_game=prefs.user_game,
        user_sensitivity=prefs.sensitivity_label,
        selected_scenarios=selected,
    )
    st.download_button(
        "📥 Export PDF report",
        data=pdf_bytes,
        file_name=report_filename(selected, date.today()),
        mime="application/pdf",
        use_container_width=True,
    )
