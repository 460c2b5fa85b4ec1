"""Map raw query rows onto history and bookmark records."""

from __future__ import annotations

from collections.abc import Mapping

from browser_extract.browsers import BrowserId
from browser_extract.models import UNKNOWN_FOLDER, BookmarkRecord, HistoryRecord


def parse_history_row(row: Mapping, browser: BrowserId) -> HistoryRecord:
    """Normalize one history row. Rows are never rejected."""
    return HistoryRecord(
        title=_get(row, "title"),
        utc_time=_get(row, "utc_time"),
        url=_get(row, "url"),
        browser=browser,
    )


def parse_bookmark_row(row: Mapping, browser: BrowserId) -> BookmarkRecord:
    """Normalize one bookmark row; a missing folder name becomes "Unknown"."""
    return BookmarkRecord(
        title=_get(row, "title"),
        added_time=_get(row, "added_time"),
        url=_get(row, "url"),
        folder=_get(row, "folder") or UNKNOWN_FOLDER,
        browser=browser,
    )


def _get(row: Mapping, key: str):
    # sqlite3.Row supports [] and keys() but not .get()
    try:
        return row[key]
    except (KeyError, IndexError):
        return None
