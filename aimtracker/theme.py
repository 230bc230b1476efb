"""
Light and dark palettes for the dashboard and its charts.
"""

from __future__ import annotations

from dataclasses import dataclass

from aimtracker.models import Difficulty, Theme


@dataclass(frozen=True)
class ThemePalette:
    background: str
    text: str
    muted_text: str
    card_background: str
    card_border: str
    input_background: str
    input_border: str
    header: str
    accent: str
    chart_grid: str
    chart_text: str
    chart_score: str
    chart_accuracy: str


PALETTES: dict[Theme, ThemePalette] = {
    Theme.DARK: ThemePalette(
        background="#111827",
        text="#d1d5db",
        muted_text="#9ca3af",
        card_background="#1f2937",
        card_border="#374151",
        input_background="#374151",
        input_border="#4b5563",
        header="#A1E0D3",
        accent="#2dd4bf",
        chart_grid="#4b5563",
        chart_text="#9ca3af",
        chart_score="#2dd4bf",
        chart_accuracy="#fbbf24",
    ),
    Theme.LIGHT: ThemePalette(
        background="#f9fafb",
        text="#374151",
        muted_text="#6b7280",
        card_background="#ffffff",
        card_border="#e5e7eb",
        input_background="#f3f4f6",
        input_border="#d1d5db",
        header="#A1E0D3",
        accent="#0d9488",
        chart_grid="#d1d5db",
        chart_text="#6b7280",
        chart_score="#0d9488",
        chart_accuracy="#f59e0b",
    ),
}

# (background, foreground) per difficulty badge
DIFFICULTY_BADGES: dict[Theme, dict[Difficulty, tuple[str, str]]] = {
    Theme.DARK: {
        Difficulty.EASY: ("#166534", "#dcfce7"),
        Difficulty.MEDIUM: ("#854d0e", "#fef9c3"),
        Difficulty.HARD: ("#9a3412", "#ffedd5"),
        Difficulty.INSANE: ("#991b1b", "#fee2e2"),
    },
    Theme.LIGHT: {
        Difficulty.EASY: ("#dcfce7", "#166534"),
        Difficulty.MEDIUM: ("#fef9c3", "#854d0e"),
        Difficulty.HARD: ("#ffedd5", "#9a3412"),
        Difficulty.INSANE: ("#fee2e2", "#991b1b"),
    },
}


def get_palette(theme: Theme) -> ThemePalette:
    return PALETTES[Theme(theme)]


def difficulty_badge_html(difficulty: Difficulty, theme: Theme) -> str:
    background, foreground = DIFFICULTY_BADGES[Theme(theme)][Difficulty(difficulty)]
    return (
        f'<span style="background-color:{background};color:{foreground};'
        f'padding:2px 8px;border-radius:9999px;font-size:0.75rem;font-weight:600;">'
        f"{Difficulty(difficulty).value}</span>"
    )


def palette_css(palette: ThemePalette) -> str:
    """CSS injected into the Streamlit page for the active theme."""
    return f"""
    <style>
    .stApp {{
        background-color: {palette.background};
        color: {palette.text};
    }}
    .stApp h1, .stApp h2, .stApp h3 {{
        color: {palette.header};
    }}
    .stApp p, .stApp label, .stApp span {{
        color: {palette.text};
    }}
    div[data-testid="stMetric"] {{
        background-color: {palette.card_background};
        border: 1px solid {palette.card_border};
        border-radius: 8px;
        padding: 8px 12px;
    }}
    div[data-testid="stMetricLabel"] p {{
        color: {palette.muted_text};
    }}
    .stTextInput input, .stNumberInput input, .stTextArea textarea {{
        background-color: {palette.input_background};
        border-color: {palette.input_border};
        color: {palette.text};
    }}
    </style>
    """
