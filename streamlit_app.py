from __future__ import annotations

import logging
from datetime import date
from typing import Any

import streamlit as st

from aimtracker.ai_coach_ui import render_ai_coach_panel
from aimtracker.bulk_add_ui import render_bulk_add
from aimtracker.charts import (
    accuracy_radar_points,
    area_chart_frame,
    radar_figure,
    score_radar_points,
)
from aimtracker.config import configure_logging
from aimtracker.entries import (
    EntryDraft,
    EntryValidationError,
    build_entry,
    clone_draft,
    new_entry_id,
    quick_add_draft,
    with_scenario,
)
from aimtracker.filters import (
    INITIAL_DISPLAY_LIMIT,
    filter_by_scenarios,
    next_sort_state,
    search_scenarios,
    selector_order,
    show_more,
    sort_entries,
    visible_slice,
)
from aimtracker.import_client import ImportRequestError, fetch_imported_entries, import_summary
from aimtracker.models import BenchmarkEntry, Difficulty, SortOrder, Theme, TimePeriod
from aimtracker.stats import (
    compute_current_stats,
    compute_period_stats,
    compute_scenario_stats,
    filter_by_period,
)
from aimtracker.store import FavoritesStore, LocalStorage, PreferencesStore, ScoreStore
from aimtracker.theme import difficulty_badge_html, get_palette, palette_css

logger = logging.getLogger(__name__)

VIEW_LIST = "📋 List"
VIEW_AREA = "📈 Area chart"
VIEW_SPIDER = "🕸️ Spider chart"

PERIOD_LABELS = {
    TimePeriod.WEEK: "Last 7 days",
    TimePeriod.MONTH: "Last 30 days",
    TimePeriod.ALL: "All time",
}

LIST_COLUMNS = [
    ("date", "Date"),
    ("scenario", "Scenario"),
    ("score", "Score"),
    ("accuracy", "Accuracy"),
    ("difficulty", "Difficulty"),
]


def _init_session() -> None:
    """Create the stores once per browser session and seed UI state."""
    if "score_store" not in st.session_state:
        storage = LocalStorage()
        st.session_state["score_store"] = ScoreStore(storage)
        st.session_state["favorites_store"] = FavoritesStore(storage)
        st.session_state["prefs_store"] = PreferencesStore(storage)

    defaults: dict[str, Any] = {
        "selected_scenarios": [],
        "sort_key": "date",
        "sort_order": SortOrder.DESC,
        "display_limit": INITIAL_DISPLAY_LIMIT,
        "chart_period": TimePeriod.ALL,
        "show_add_form": False,
        "new_score": EntryDraft(),
        "form_version": 0,
        "show_bulk_add": False,
        "is_importing": False,
        "confirm_clear": False,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _open_draft(draft: EntryDraft) -> None:
    st.session_state["new_score"] = draft
    st.session_state["form_version"] += 1
    st.session_state["show_add_form"] = True


def _flash_messages() -> None:
    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)
    error = st.session_state.pop("flash_error", None)
    if error:
        st.error(error)


# ─── Header ──────────────────────────────────────────────────────────────────


def _render_header(prefs: PreferencesStore) -> None:
    title_col, theme_col = st.columns([5, 1])
    with title_col:
        st.title("🎯 Aimplified")
        st.caption("Track your aim trainer benchmarks, spot trends and get coaching feedback.")
    with theme_col:
        label = "☀️ Light mode" if prefs.theme is Theme.DARK else "🌙 Dark mode"
        if st.button(label, use_container_width=True):
            prefs.toggle_theme()
            st.rerun()

    game_col, sens_col, dpi_col = st.columns(3)
    with game_col:
        game = st.text_input("Game", value=prefs.user_game)
    with sens_col:
        sens = st.text_input("In-game sensitivity", value=prefs.user_sensitivity)
    with dpi_col:
        dpi = st.text_input("DPI", value=prefs.user_dpi)

    if game != prefs.user_game:
        prefs.user_game = game
    if sens != prefs.user_sensitivity:
        prefs.user_sensitivity = sens
    if dpi != prefs.user_dpi:
        prefs.user_dpi = dpi


# ─── Actions ─────────────────────────────────────────────────────────────────


def _handle_import(store: ScoreStore) -> None:
    if st.session_state["is_importing"]:
        return
    st.session_state["is_importing"] = True
    try:
        with st.spinner("Importing KovaaK's stats..."):
            fetched = fetch_imported_entries()
        added = store.merge_imported(fetched)
        st.session_state["flash"] = import_summary(added, len(fetched))
    except ImportRequestError as e:
        logger.error("Failed to import KovaaK's stats: %s", e)
        st.session_state["flash_error"] = f"Failed to import KovaaK's stats: {e}"
    finally:
        st.session_state["is_importing"] = False


def _render_actions(store: ScoreStore) -> None:
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        if st.button("➕ Add score", use_container_width=True):
            if st.session_state["show_add_form"]:
                st.session_state["show_add_form"] = False
            else:
                _open_draft(EntryDraft())
            st.rerun()
    with col2:
        if st.button("📚 Bulk add", use_container_width=True):
            st.session_state["show_bulk_add"] = True
            st.rerun()
    with col3:
        if st.button(
            "⬆️ Import KovaaK's stats",
            disabled=st.session_state["is_importing"],
            use_container_width=True,
            help="Reads challenge reports from the directory configured on the local API.",
        ):
            _handle_import(store)
            st.rerun()
    with col4:
        if st.button("🗑️ Clear all", use_container_width=True, disabled=len(store) == 0):
            st.session_state["confirm_clear"] = True

    if st.session_state["confirm_clear"]:
        st.warning("Delete ALL benchmark history? This cannot be undone.")
        yes_col, no_col = st.columns(2)
        with yes_col:
            if st.button("Yes, delete everything", type="primary", use_container_width=True):
                store.clear()
                st.session_state["confirm_clear"] = False
                st.session_state["selected_scenarios"] = []
                st.rerun()
        with no_col:
            if st.button("Keep my history", use_container_width=True):
                st.session_state["confirm_clear"] = False
                st.rerun()


def _on_scenario_change(store: ScoreStore, key: str) -> None:
    st.session_state["new_score"] = with_scenario(
        st.session_state["new_score"], store.entries, st.session_state.get(key)
    )


def _render_add_form(store: ScoreStore) -> None:
    version = st.session_state["form_version"]
    difficulties = [d.value for d in Difficulty]

    st.subheader("Add benchmark score")

    # Outside the form so picking a known scenario reruns and pulls in its difficulty
    scenario_key = f"form_scenario_{version}"
    current = st.session_state["new_score"].scenario
    options = store.unique_scenarios()
    if current and current not in options:
        options = [current] + options
    st.selectbox(
        "Scenario",
        options,
        index=options.index(current) if current else None,
        placeholder="Pick a scenario or type a new one",
        accept_new_options=True,
        key=scenario_key,
        on_change=_on_scenario_change,
        args=(store, scenario_key),
    )

    draft: EntryDraft = st.session_state["new_score"]
    try:
        draft_date = date.fromisoformat(draft.date) if draft.date else date.today()
    except ValueError:
        draft_date = date.today()

    with st.form(f"add_score_form_{version}"):
        col1, col2 = st.columns(2)
        with col1:
            score = st.number_input("Score", min_value=0.0, value=None if draft.score is None else float(draft.score), step=1.0)
            entry_date = st.date_input("Date", value=draft_date)
        with col2:
            accuracy = st.number_input("Accuracy (%)", min_value=0.0, max_value=100.0, value=None if draft.accuracy is None else float(draft.accuracy), step=0.1)
            difficulty = st.selectbox(
                "Difficulty",
                difficulties,
                index=difficulties.index(Difficulty(draft.difficulty or Difficulty.MEDIUM).value),
                key=f"form_difficulty_{version}_{Difficulty(draft.difficulty or Difficulty.MEDIUM).value}",
            )
        notes = st.text_input("Notes (optional)", value=draft.notes or "")
        submitted = st.form_submit_button("Save score", type="primary")

    if submitted:
        filled = EntryDraft(
            scenario=(draft.scenario or "").strip(),
            score=int(score) if score is not None and float(score).is_integer() else score,
            accuracy=accuracy,
            date=entry_date.isoformat() if entry_date else None,
            difficulty=Difficulty(difficulty),
            notes=notes.strip() or None,
        )
        try:
            entry = build_entry(filled, entry_id=new_entry_id(store.ids()))
        except EntryValidationError as e:
            st.error(str(e))
            return
        store.add(entry)
        st.session_state["new_score"] = EntryDraft()
        st.session_state["form_version"] += 1
        st.session_state["show_add_form"] = False
        st.session_state["flash"] = f"Saved {entry.scenario}: {entry.score}"
        st.rerun()


# ─── Scenario filter & favorites ─────────────────────────────────────────────


def _render_scenario_filter(store: ScoreStore, favorites: FavoritesStore) -> list[str]:
    scenarios = store.unique_scenarios()
    # Drop names whose entries were deleted before the widget reads its state
    st.session_state["selected_scenarios"] = [
        s for s in st.session_state["selected_scenarios"] if s in scenarios
    ]
    selected = st.session_state["selected_scenarios"]

    with st.expander("🎯 Scenarios & favorites", expanded=bool(selected)):
        term = st.text_input("Search scenarios", key="scenario_search")
        matches = search_scenarios(scenarios, term)
        if term:
            if matches:
                st.caption("Matches: " + ", ".join(matches))
            else:
                st.caption("No scenarios match that search.")

        options = selector_order(scenarios, selected)
        selected = st.multiselect("Filter by scenario", options=options, key="selected_scenarios")

        st.markdown("**⭐ Favorites**")
        fav_list = favorites.favorites
        if not fav_list:
            st.caption("No favorites yet. Add scenarios you play often for one-click logging.")
        for scenario in fav_list:
            name_col, add_col, remove_col = st.columns([4, 1, 1])
            with name_col:
                st.write(scenario)
            with add_col:
                if st.button("Quick add", key=f"quick_add_{scenario}", use_container_width=True):
                    _open_draft(quick_add_draft(list(store.entries), scenario))
                    st.rerun()
            with remove_col:
                if st.button("Remove", key=f"fav_remove_{scenario}", use_container_width=True):
                    favorites.remove(scenario)
                    st.rerun()

        candidates = [s for s in scenarios if s not in favorites]
        if candidates:
            fav_col, btn_col = st.columns([4, 1])
            with fav_col:
                new_fav = st.selectbox("Add favorite", candidates, key="fav_candidate")
            with btn_col:
                st.write("")
                if st.button("Add", key="fav_add", use_container_width=True):
                    favorites.add(new_fav)
                    st.rerun()

    return selected


# ─── Views ───────────────────────────────────────────────────────────────────


def _render_stats(filtered: list[BenchmarkEntry]) -> None:
    stats = compute_current_stats(filtered)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Avg Score", f"{stats.avg_score:,}")
    col2.metric("Avg Accuracy", f"{stats.avg_accuracy}%")
    col3.metric("Best Score", f"{stats.best_score:,}")
    col4.metric("Entries", stats.count)


def _render_sort_header() -> None:
    cols = st.columns([2, 4, 2, 2, 2, 1, 1])
    for col, (key, label) in zip(cols, LIST_COLUMNS):
        arrow = ""
        if st.session_state["sort_key"] == key:
            arrow = " ▲" if st.session_state["sort_order"] is SortOrder.ASC else " ▼"
        with col:
            if st.button(f"{label}{arrow}", key=f"sort_{key}", use_container_width=True):
                new_key, new_order = next_sort_state(
                    st.session_state["sort_key"], st.session_state["sort_order"], key
                )
                st.session_state["sort_key"] = new_key
                st.session_state["sort_order"] = new_order
                st.rerun()


def _render_list(store: ScoreStore, rows: list[BenchmarkEntry], theme: Theme) -> None:
    if not rows:
        st.info("No benchmark scores yet. Add one, bulk add, or import your KovaaK's stats.")
        return

    _render_sort_header()
    limit = st.session_state["display_limit"]
    for entry in visible_slice(rows, limit):
        cols = st.columns([2, 4, 2, 2, 2, 1, 1])
        cols[0].write(entry.date)
        with cols[1]:
            st.write(entry.scenario)
            if entry.notes:
                st.caption(entry.notes)
        cols[2].write(f"{entry.score:,}")
        cols[3].write(f"{entry.accuracy}%")
        cols[4].markdown(difficulty_badge_html(entry.difficulty, theme), unsafe_allow_html=True)
        with cols[5]:
            if st.button("📄", key=f"clone_{entry.id}", help="Clone into the add form"):
                _open_draft(clone_draft(entry))
                st.rerun()
        with cols[6]:
            if st.button("🗑️", key=f"delete_{entry.id}", help="Delete this entry"):
                store.delete(entry.id)
                st.rerun()

    total = len(rows)
    st.caption(f"Showing {min(limit, total)} of {total} entries")
    more_col, all_col, default_col = st.columns(3)
    with more_col:
        if st.button("Show more", disabled=limit >= total, use_container_width=True):
            st.session_state["display_limit"] = show_more(limit, total)
            st.rerun()
    with all_col:
        if st.button("Show all", disabled=limit >= total, use_container_width=True):
            st.session_state["display_limit"] = total
            st.rerun()
    with default_col:
        if st.button("Show default", disabled=limit == INITIAL_DISPLAY_LIMIT, use_container_width=True):
            st.session_state["display_limit"] = INITIAL_DISPLAY_LIMIT
            st.rerun()


def _format_change(value: float | None) -> str:
    return "N/A" if value is None else f"{value:+.1f}%"


def _render_area_view(store: ScoreStore, filtered: list[BenchmarkEntry], selected: list[str]) -> None:
    period = st.radio(
        "Time period",
        options=list(PERIOD_LABELS),
        format_func=PERIOD_LABELS.get,
        horizontal=True,
        key="chart_period",
    )
    chart_df = area_chart_frame(filter_by_period(filtered, period))
    if chart_df.empty:
        st.info("No entries with valid dates in this period.")
    else:
        st.area_chart(chart_df[["Score"]])
        st.area_chart(chart_df[["Accuracy"]])

    period_stats = compute_period_stats(store.entries, selected, period)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Score std dev", period_stats.score_std_dev)
    col2.metric("Accuracy std dev", period_stats.accuracy_std_dev)
    col3.metric("Score change", _format_change(period_stats.score_change_percent))
    col4.metric("Accuracy change", _format_change(period_stats.accuracy_change_percent))


def _render_spider_view(store: ScoreStore, selected: list[str], theme: Theme) -> None:
    palette = get_palette(theme)
    stats = compute_scenario_stats(store.entries, selected)
    if stats.count == 0:
        st.info("No data for the current selection.")
        return

    st.caption(f"{stats.scenario_name}: {stats.count} entries")
    score_col, acc_col = st.columns(2)
    with score_col:
        st.plotly_chart(
            radar_figure(score_radar_points(stats), palette, "Score", palette.chart_score),
            use_container_width=True,
        )
    with acc_col:
        st.plotly_chart(
            radar_figure(accuracy_radar_points(stats), palette, "Accuracy", palette.chart_accuracy, radial_max=100),
            use_container_width=True,
        )


def main() -> None:
    st.set_page_config(page_title="Aimplified", page_icon="🎯", layout="wide")
    configure_logging()
    _init_session()

    store: ScoreStore = st.session_state["score_store"]
    favorites: FavoritesStore = st.session_state["favorites_store"]
    prefs: PreferencesStore = st.session_state["prefs_store"]

    st.markdown(palette_css(get_palette(prefs.theme)), unsafe_allow_html=True)
    _render_header(prefs)
    _flash_messages()
    _render_actions(store)

    if st.session_state["show_add_form"]:
        _render_add_form(store)
    if st.session_state["show_bulk_add"]:
        render_bulk_add(store)

    selected = _render_scenario_filter(store, favorites)
    filtered = sort_entries(
        filter_by_scenarios(store.entries, selected),
        st.session_state["sort_key"],
        st.session_state["sort_order"],
    )

    _render_stats(filtered)

    view = st.radio("View", [VIEW_LIST, VIEW_AREA, VIEW_SPIDER], horizontal=True, label_visibility="collapsed")
    if view == VIEW_AREA:
        _render_area_view(store, filtered, selected)
    elif view == VIEW_SPIDER:
        _render_spider_view(store, selected, prefs.theme)
    else:
        _render_list(store, filtered, prefs.theme)

    st.divider()
    render_ai_coach_panel(filtered, compute_current_stats(filtered), selected, prefs)


if __name__ == "__main__":
    main()
