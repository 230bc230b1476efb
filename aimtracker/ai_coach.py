"""
AI Coach - chat-completion powered aim coaching.

Sends the current stats and recent entries to an OpenAI-compatible
chat-completion endpoint and returns the coach's Markdown answer.

The public entry point never raises: failures come back as a readable
"Failed to get AI recommendation: ..." string so the UI can show them inline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import httpx

from aimtracker.coaching_prompt import (
    MAX_ENTRIES_FOR_AI,
    SYSTEM_PROMPT,
    build_full_prompt,
    build_user_prompt,
)
from aimtracker.config import Settings, get_settings
from aimtracker.models import BenchmarkEntry
from aimtracker.stats import CurrentStats

logger = logging.getLogger(__name__)


FAILURE_PREFIX = "Failed to get AI recommendation: "
PLACEHOLDER_TEXT = "Enter API key and analyze performance."
MISSING_KEY_TEXT = "Please enter an API key first."


class CoachingError(Exception):
    """Raised internally for provider errors and empty completions."""


@dataclass
class CoachingRequest:
    api_key: str
    user_game: str
    user_sensitivity: str
    filter_scenario: str
    current_stats: CurrentStats
    recent_entries: Sequence[BenchmarkEntry] = field(default_factory=list)

    def user_prompt(self) -> str:
        return build_user_prompt(
            user_game=self.user_game,
            user_sensitivity=self.user_sensitivity,
            filter_scenario=self.filter_scenario,
            current_stats=self.current_stats,
            recent_entries=self.recent_entries,
        )

    def full_prompt(self) -> str:
        return build_full_prompt(self.user_prompt())


def relevant_entries(entries: Sequence[BenchmarkEntry]) -> list[BenchmarkEntry]:
    """The entries sent to the coach: the current view, capped."""
    return list(entries)[:MAX_ENTRIES_FOR_AI]


def describe_analysis_scope(selected: Sequence[str], entry_count: int) -> str:
    scope = f"your {', '.join(selected)} performance" if selected else "your overall performance"
    if entry_count > 0:
        scope += f" (using latest {entry_count} entries)"
    return scope


def no_data_message(selected: Sequence[str]) -> str:
    return f"No relevant data found{' for selected scenarios' if selected else ''} to analyze."


def _build_payload(request: CoachingRequest, settings: Settings) -> dict:
    return {
        "model": settings.ai_coach_model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": request.user_prompt()},
        ],
        "temperature": settings.ai_coach_temperature,
        "max_tokens": settings.ai_coach_max_tokens,
    }


def _provider_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    message = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message")
        elif isinstance(error, str):
            message = error
    return message or f"Unknown error. Status: {response.status_code}"


def _extract_recommendation(data: object) -> str:
    try:
        content = data["choices"][0]["message"]["content"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError):
        content = None
    if not isinstance(content, str) or not content.strip():
        raise CoachingError("Received empty response from AI.")
    return content.strip()


def _request_recommendation(request: CoachingRequest, client: httpx.Client, settings: Settings) -> str:
    response = client.post(
        settings.openai_api_url,
        headers={
            "Authorization": f"Bearer {request.api_key}",
            "Content-Type": "application/json",
        },
        json=_build_payload(request, settings),
    )
    if not response.is_success:
        message = _provider_error_message(response)
        logger.error("OpenAI API error (%s): %s", response.status_code, message)
        raise CoachingError(f"OpenAI Error: {message}")

    recommendation = _extract_recommendation(response.json())
    logger.info("[AI Coach] Model: %s, response length: %d", settings.ai_coach_model, len(recommendation))
    return recommendation


def get_coach_recommendation(
    request: CoachingRequest,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> str:
    """
    Ask the coach for feedback on the current view.

    Args:
        request: player context, stats and recent entries
        settings: endpoint / model configuration (defaults to get_settings())
        client: optional httpx client, mainly for tests

    Returns:
        The trimmed recommendation, or a "Failed to get AI recommendation: ..."
        string describing what went wrong.
    """
    settings = settings or get_settings()
    try:
        if client is not None:
            return _request_recommendation(request, client, settings)
        with httpx.Client(timeout=settings.coach_timeout_seconds) as own_client:
            return _request_recommendation(request, own_client, settings)
    except (CoachingError, httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.error("AI Coach request error: %s", e)
        return f"{FAILURE_PREFIX}{e}"
