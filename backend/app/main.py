"""
Aim Tracker Backend - FastAPI Application

Local API used by the dashboard to import KovaaK's challenge reports.
Run from backend/:  uvicorn app.main:app --port 8000
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aimtracker.config import configure_logging, get_settings
from app.routes import health, kovaak_stats


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Aim Tracker API",
        version="1.0.0",
        description="Local API for the aim benchmark dashboard, KovaaK's stats import",
    )

    # ── CORS ──
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # ── Routes ──
    app.include_router(health.router, tags=["health"])
    app.include_router(kovaak_stats.router, prefix="/api/kovaak-stats", tags=["import"])

    return app


app = create_app()
