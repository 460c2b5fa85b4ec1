"""Extract history and bookmarks from browser profile databases."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

import dateutil.parser as parser

from browser_extract import queries, snapshot
from browser_extract.bookmarks import load_chrome_bookmarks
from browser_extract.browsers import BookmarkStrategy, BrowserId
from browser_extract.exceptions import BrowserExtractError, MissingSourceError
from browser_extract.models import BookmarkRecord, HistoryRecord
from browser_extract.parser import parse_bookmark_row, parse_history_row

logger = logging.getLogger(__name__)


def _history_minutes_from_env(default: int = 5) -> int:
    raw = os.environ.get("BROWSER_EXTRACT_HISTORY_MINUTES")
    if not raw:
        return default
    try:
        return max(0, int(raw))
    except ValueError:
        logger.warning(
            "Ignoring non-numeric BROWSER_EXTRACT_HISTORY_MINUTES=%r; using %d", raw, default
        )
        return default


DEFAULT_HISTORY_MINUTES = _history_minutes_from_env()

PathLike = str | os.PathLike
BrowserKey = BrowserId | str

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class BrowserExtractor:
    """Read history and bookmarks from a set of browser profile databases.

    Paths are processed one at a time. A failure on one path is logged and
    recorded in `last_errors`; it never stops the remaining paths or browsers.
    """

    def __init__(self) -> None:
        self.last_errors: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_history(
        self,
        paths: Sequence[PathLike] | None,
        browser: BrowserKey,
        minutes: int = DEFAULT_HISTORY_MINUTES,
    ) -> list[HistoryRecord]:
        """History from the last `minutes` minutes across every path."""
        self.last_errors = {}
        return self._history(paths, browser, minutes)

    def fetch_bookmarks(
        self,
        paths: Sequence[PathLike] | None,
        browser: BrowserKey,
    ) -> list[BookmarkRecord]:
        """Bookmarks across every path, in file order."""
        self.last_errors = {}
        return self._bookmarks(paths, browser)

    def fetch_all_history(
        self,
        paths_by_browser: Mapping[BrowserKey, Sequence[PathLike]],
        minutes: int = DEFAULT_HISTORY_MINUTES,
    ) -> list[HistoryRecord]:
        """Union of every browser's history, grouped by browser, unsorted."""
        self.last_errors = {}
        records: list[HistoryRecord] = []
        for browser, paths in _in_browser_order(paths_by_browser):
            records.extend(self._history(paths, browser, minutes))
        return records

    def fetch_all_bookmarks(
        self,
        paths_by_browser: Mapping[BrowserKey, Sequence[PathLike]],
    ) -> list[BookmarkRecord]:
        """Union of every browser's bookmarks, newest first."""
        self.last_errors = {}
        records: list[BookmarkRecord] = []
        for browser, paths in _in_browser_order(paths_by_browser):
            records.extend(self._bookmarks(paths, browser))
        records.sort(key=lambda r: _added_at(r.added_time), reverse=True)
        return records

    # ------------------------------------------------------------------
    # Per-browser pipelines
    # ------------------------------------------------------------------

    def _history(
        self,
        paths: Sequence[PathLike] | None,
        browser: BrowserKey,
        minutes: int,
    ) -> list[HistoryRecord]:
        browser_id = BrowserId.parse(browser)
        if browser_id is None:
            logger.warning("Unsupported browser %r; skipping history", browser)
            return []
        if not paths:
            return []

        family = browser_id.family
        sql = queries.history_query(family)
        params = (queries.window_modifier(minutes),)

        records: list[HistoryRecord] = []
        for path in paths:
            try:
                with snapshot.snapshot(path, family.snapshot_strategy, family.extension) as snap:
                    rows = snapshot.run_query(snap, sql, params)
            except MissingSourceError as e:
                logger.info("Skipping %s history: %s", browser_id, e)
                continue
            except (BrowserExtractError, OSError) as e:
                self._record_error(path, browser_id, "history", e)
                continue
            records.extend(parse_history_row(row, browser_id) for row in rows)
        return records

    def _bookmarks(
        self,
        paths: Sequence[PathLike] | None,
        browser: BrowserKey,
    ) -> list[BookmarkRecord]:
        browser_id = BrowserId.parse(browser)
        if browser_id is None:
            logger.warning("Unsupported browser %r; skipping bookmarks", browser)
            return []
        if not paths:
            return []

        strategy = browser_id.family.bookmark_strategy
        if strategy is BookmarkStrategy.NONE:
            logger.info("Bookmark extraction is not supported for %s", browser_id)
            return []

        records: list[BookmarkRecord] = []
        for path in paths:
            try:
                if strategy is BookmarkStrategy.JSON_FILE:
                    records.extend(load_chrome_bookmarks(path, browser_id))
                else:
                    records.extend(self._sql_bookmarks(path, browser_id))
            except MissingSourceError as e:
                logger.info("Skipping %s bookmarks: %s", browser_id, e)
            except (BrowserExtractError, OSError) as e:
                self._record_error(path, browser_id, "bookmarks", e)
        return records

    @staticmethod
    def _sql_bookmarks(path: PathLike, browser_id: BrowserId) -> list[BookmarkRecord]:
        family = browser_id.family
        sql = queries.bookmark_query(family)
        with snapshot.snapshot(path, family.snapshot_strategy, family.extension) as snap:
            rows = snapshot.run_query(snap, sql)
        return [parse_bookmark_row(row, browser_id) for row in rows]

    def _record_error(
        self,
        path: PathLike,
        browser_id: BrowserId,
        operation: str,
        error: Exception,
    ) -> None:
        self.last_errors[str(path)] = str(error)
        logger.warning(
            "%s %s extraction failed for %s: %s", browser_id, operation, path, error
        )


def _in_browser_order(
    paths_by_browser: Mapping[BrowserKey, Sequence[PathLike]],
) -> list[tuple[BrowserKey, Sequence[PathLike]]]:
    """Known browsers in declaration order, then unrecognized keys."""
    known: dict[BrowserId, list[PathLike]] = {}
    unknown: list[tuple[BrowserKey, Sequence[PathLike]]] = []
    for key, paths in paths_by_browser.items():
        browser_id = BrowserId.parse(key)
        if browser_id is None:
            unknown.append((key, paths))
        else:
            known.setdefault(browser_id, []).extend(paths or [])
    ordered = [(b, known[b]) for b in BrowserId if b in known]
    return ordered + unknown


def _added_at(added_time: str | None) -> datetime:
    if not added_time:
        return _OLDEST
    try:
        dt = parser.isoparse(added_time)
    except (ValueError, OverflowError):
        return _OLDEST
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# ----------------------------------------------------------------------
# Module-level helpers
# ----------------------------------------------------------------------

def get_browser_history(
    paths: Sequence[PathLike] | None,
    browser: BrowserKey,
    minutes: int = DEFAULT_HISTORY_MINUTES,
) -> list[HistoryRecord]:
    return BrowserExtractor().fetch_history(paths, browser, minutes)


def get_browser_bookmarks(
    paths: Sequence[PathLike] | None,
    browser: BrowserKey,
) -> list[BookmarkRecord]:
    return BrowserExtractor().fetch_bookmarks(paths, browser)


def get_all_history(
    paths_by_browser: Mapping[BrowserKey, Sequence[PathLike]],
    minutes: int = DEFAULT_HISTORY_MINUTES,
) -> list[HistoryRecord]:
    return BrowserExtractor().fetch_all_history(paths_by_browser, minutes)


def get_all_bookmarks(
    paths_by_browser: Mapping[BrowserKey, Sequence[PathLike]],
) -> list[BookmarkRecord]:
    return BrowserExtractor().fetch_all_bookmarks(paths_by_browser)
