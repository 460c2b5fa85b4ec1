"""Browser history and bookmark extraction (Chromium, Mozilla, Maxthon)."""

from browser_extract.browsers import BrowserFamily, BrowserId
from browser_extract.models import BookmarkRecord, HistoryRecord
from browser_extract.reader import (
    BrowserExtractor,
    get_all_bookmarks,
    get_all_history,
    get_browser_bookmarks,
    get_browser_history,
)

__all__ = [
    "BrowserExtractor",
    "BrowserFamily",
    "BrowserId",
    "BookmarkRecord",
    "HistoryRecord",
    "get_all_bookmarks",
    "get_all_history",
    "get_browser_bookmarks",
    "get_browser_history",
]
