"""Liveness and import-readiness checks."""

from fastapi import APIRouter

from aimtracker.config import get_settings

router = APIRouter()


@router.get("/")
async def root():
    return {"status": "ok", "service": "aim-tracker-api", "version": "1.0.0"}


@router.get("/health")
async def health():
    """Healthy while the API runs; reports whether KOVAAK_STATS_DIR is usable."""
    stats_dir = get_settings().stats_dir
    return {
        "status": "healthy",
        "stats_dir": str(stats_dir),
        "stats_dir_exists": stats_dir.is_dir(),
    }
