"""
Client side of the KovaaK's import: calls the local stats endpoint.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from aimtracker.config import get_settings
from aimtracker.models import BenchmarkEntry

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30


class ImportRequestError(Exception):
    """The import endpoint failed or returned something unusable."""


def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"HTTP error! status: {resp.status_code}"


def fetch_imported_entries(
    url: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> list[BenchmarkEntry]:
    """
    GET the parsed challenge reports from the import endpoint.

    Raises:
        ImportRequestError: with the server's message for 404/500 responses,
            or a description of the connection / payload problem
    """
    url = url or get_settings().import_api_url
    http = session or requests
    logger.info("Starting KovaaK's stats import from %s", url)

    try:
        resp = http.get(url, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise ImportRequestError(f"Could not reach import endpoint ({url}): {e}") from e

    if not resp.ok:
        raise ImportRequestError(_error_message(resp))

    try:
        data = resp.json()
    except ValueError as e:
        raise ImportRequestError("Invalid data format received from API.") from e
    if not isinstance(data, list):
        raise ImportRequestError("Invalid data format received from API.")

    entries = []
    for item in data:
        try:
            entries.append(BenchmarkEntry.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise ImportRequestError(f"Invalid data format received from API: {e}") from e

    logger.info("Fetched %d scores from API.", len(entries))
    return entries


def import_summary(added: int, fetched: int) -> str:
    if added > 0:
        skipped = fetched - added
        suffix = f" ({skipped} already in your history)" if skipped else ""
        return f"Successfully imported {added} scores from KovaaK's files{suffix}."
    if fetched > 0:
        return "No new scores found; every report in the KovaaK's directory is already imported."
    return "No scores found in the KovaaK's files directory or files were unparseable."
