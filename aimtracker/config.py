"""
Aim Tracker - Configuration

Loads settings from environment variables (and .env) with Pydantic validation.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


def _repo_root() -> Path:
    # aimtracker/ is at <repo>/aimtracker
    return Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ─── Storage ───
    aimtracker_data_dir: str = ""

    # ─── KovaaK's import ───
    kovaak_stats_dir: str = "stats"
    import_api_url: str = "http://localhost:8000/api/kovaak-stats"

    # ─── OpenAI ───
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    ai_coach_model: str = "gpt-4.1-mini-2025-04-14"
    ai_coach_temperature: float = 0.6
    ai_coach_max_tokens: int = 1000
    coach_timeout_seconds: float = 60.0

    # ─── App ───
    cors_origins: str = "http://localhost:8501"
    env: str = "development"
    log_level: str = "INFO"

    @property
    def data_dir(self) -> Path:
        """Directory holding the JSON storage files (created on demand)."""
        override = (self.aimtracker_data_dir or "").strip()
        path = Path(override) if override else _repo_root() / "data"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def stats_dir(self) -> Path:
        """KovaaK's stats directory; relative paths resolve against the cwd."""
        return Path(self.kovaak_stats_dir).expanduser().absolute()

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
