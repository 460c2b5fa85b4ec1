"""Chromium Bookmarks file parsing.

Chromium-family browsers keep bookmarks in a JSON file named "Bookmarks"
beside the History database:

    {"roots": {"bookmark_bar": {"name": "Bookmarks bar", "type": "folder",
                                "children": [...]},
               "other": {...}, "synced": {...}}}

Each child is either {"type": "url", "name", "url", "date_added"} or a nested
{"type": "folder", "children": [...]}.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from pathlib import Path

from browser_extract.browsers import BrowserId
from browser_extract.exceptions import MalformedBookmarkFileError
from browser_extract.models import UNKNOWN_FOLDER, BookmarkNode, BookmarkRecord

logger = logging.getLogger(__name__)

BOOKMARKS_FILENAME = "Bookmarks"
UNTITLED = "Untitled"

_WINDOWS_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


def windows_epoch_to_iso(value: str | int | None) -> str:
    """Convert microseconds since 1601-01-01 to an ISO 8601 UTC string."""
    if value is None or value == "":
        return ""
    try:
        millis = int(value) // 1000
        dt = _WINDOWS_EPOCH + timedelta(milliseconds=millis)
    except (TypeError, ValueError, OverflowError):
        return ""
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def walk_bookmark_tree(
    node: BookmarkNode,
    folder: str,
    browser: BrowserId,
) -> list[BookmarkRecord]:
    """Collect URL leaves under `node`, each tagged with its parent folder."""
    bookmarks: list[BookmarkRecord] = []
    for child in node.children:
        if child.is_url:
            bookmarks.append(BookmarkRecord(
                title=child.name or UNTITLED,
                added_time=windows_epoch_to_iso(child.date_added),
                url=child.url,
                folder=folder,
                browser=browser,
            ))
        elif child.is_folder:
            bookmarks.extend(
                walk_bookmark_tree(child, child.name or UNKNOWN_FOLDER, browser)
            )
    return bookmarks


def extract_chrome_bookmarks(document: Mapping, browser: BrowserId) -> list[BookmarkRecord]:
    """Walk every root folder of a parsed Bookmarks document."""
    roots = document.get("roots")
    if not isinstance(roots, Mapping):
        return []

    bookmarks: list[BookmarkRecord] = []
    for key, value in roots.items():
        if not isinstance(value, Mapping):
            continue
        try:
            root = BookmarkNode.from_json(value)
            bookmarks.extend(walk_bookmark_tree(root, root.name or key, browser))
        except RecursionError as e:
            raise MalformedBookmarkFileError(f"Bookmark folder {key!r} is nested too deeply") from e
    return bookmarks


def bookmarks_path_for(history_path: Path | str) -> Path:
    return Path(history_path).parent / BOOKMARKS_FILENAME


def load_chrome_bookmarks(history_path: Path | str, browser: BrowserId) -> list[BookmarkRecord]:
    """Read the Bookmarks file next to `history_path`.

    A missing file yields no bookmarks. The file is small and rewritten
    atomically by the browser, so it is read in place rather than copied.
    """
    path = bookmarks_path_for(history_path)
    if not path.is_file():
        logger.info("No %s bookmarks file at %s", browser, path)
        return []

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise MalformedBookmarkFileError(f"Cannot parse {path}: {e}") from e

    if not isinstance(document, Mapping):
        raise MalformedBookmarkFileError(f"Unexpected top-level JSON in {path}")
    return extract_chrome_bookmarks(document, browser)
