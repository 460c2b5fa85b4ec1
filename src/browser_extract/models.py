"""Data models for extracted browser records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from browser_extract.browsers import BrowserId

UNKNOWN_FOLDER = "Unknown"


@dataclass(frozen=True)
class HistoryRecord:
    """One visited page, deduplicated on (title, utc_time) per profile."""

    title: str | None
    utc_time: str  # "YYYY-MM-DD HH:MM:SS", UTC
    url: str | None
    browser: BrowserId

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "utc_time": self.utc_time,
            "url": self.url,
            "browser": str(self.browser),
        }


@dataclass(frozen=True)
class BookmarkRecord:
    """One bookmarked URL and the folder directly containing it."""

    title: str | None
    added_time: str  # ISO 8601, UTC, e.g. "2021-02-01T00:00:00.000Z"
    url: str | None
    folder: str
    browser: BrowserId

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "added_time": self.added_time,
            "url": self.url,
            "folder": self.folder,
            "browser": str(self.browser),
        }


@dataclass
class BookmarkNode:
    """A node of a Chromium Bookmarks JSON tree."""

    name: str = ""
    type: str = ""  # "url" | "folder"
    url: str | None = None
    date_added: str | None = None  # microseconds since 1601-01-01, as text
    children: list[BookmarkNode] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Mapping) -> BookmarkNode:
        children = data.get("children")
        if not isinstance(children, list):
            children = []
        return cls(
            name=data.get("name") or "",
            type=data.get("type") or "",
            url=data.get("url"),
            date_added=data.get("date_added"),
            children=[cls.from_json(c) for c in children if isinstance(c, Mapping)],
        )

    @property
    def is_url(self) -> bool:
        return self.type == "url"

    @property
    def is_folder(self) -> bool:
        return self.type == "folder"
