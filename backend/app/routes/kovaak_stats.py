"""
KovaaK's stats route: parse challenge reports from the configured directory.

Returns a JSON array of benchmark entries, or {"error": ...} with 404 when the
directory is missing and 500 for any other directory-level failure.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from aimtracker.config import get_settings
from aimtracker.kovaaks_import import (
    KovaaksImportError,
    StatsDirectoryNotFoundError,
    read_challenge_reports,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_kovaak_stats():
    """Parse every challenge report in KOVAAK_STATS_DIR."""
    stats_dir = get_settings().stats_dir

    try:
        result = read_challenge_reports(stats_dir)
    except StatsDirectoryNotFoundError as e:
        return JSONResponse(status_code=404, content={"error": e.message})
    except KovaaksImportError as e:
        return JSONResponse(status_code=500, content={"error": e.message})
    except Exception as e:
        logger.exception("Unexpected error importing KovaaK's stats from %s", stats_dir)
        return JSONResponse(status_code=500, content={"error": f"Could not read statsDir ({stats_dir}): {e}"})

    return [entry.to_dict() for entry in result.entries]
