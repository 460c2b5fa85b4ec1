"""Supported browsers and the family each one belongs to."""

from __future__ import annotations

from enum import Enum


class SnapshotStrategy(Enum):
    """How a live database is copied before it is read."""

    SIMPLE_COPY = "simple_copy"
    COPY_WITH_LOG_FOLD = "copy_with_log_fold"


class BookmarkStrategy(Enum):
    """Where a family keeps its bookmarks."""

    JSON_FILE = "json_file"  # sibling "Bookmarks" file
    SQL = "sql"  # same database as history
    NONE = "none"


class BrowserFamily(Enum):
    """Browsers sharing one storage engine and schema."""

    CHROMIUM = "chromium"
    MOZILLA = "mozilla"
    MAXTHON = "maxthon"

    @property
    def snapshot_strategy(self) -> SnapshotStrategy:
        return _SNAPSHOT_STRATEGIES[self]

    @property
    def bookmark_strategy(self) -> BookmarkStrategy:
        return _BOOKMARK_STRATEGIES[self]

    @property
    def extension(self) -> str:
        """Suffix given to scratch copies of this family's databases."""
        return "db" if self is BrowserFamily.MAXTHON else "sqlite"


_SNAPSHOT_STRATEGIES = {
    BrowserFamily.CHROMIUM: SnapshotStrategy.SIMPLE_COPY,
    BrowserFamily.MOZILLA: SnapshotStrategy.COPY_WITH_LOG_FOLD,
    BrowserFamily.MAXTHON: SnapshotStrategy.SIMPLE_COPY,
}

_BOOKMARK_STRATEGIES = {
    BrowserFamily.CHROMIUM: BookmarkStrategy.JSON_FILE,
    BrowserFamily.MOZILLA: BookmarkStrategy.SQL,
    BrowserFamily.MAXTHON: BookmarkStrategy.NONE,
}


def require_every(table: dict, members: type[Enum], what: str) -> None:
    """Fail at import if a strategy table does not cover every member."""
    missing = set(members) - set(table)
    if missing:
        raise RuntimeError(f"No {what} for {sorted(m.name for m in missing)}")


require_every(_SNAPSHOT_STRATEGIES, BrowserFamily, "snapshot strategy")
require_every(_BOOKMARK_STRATEGIES, BrowserFamily, "bookmark strategy")


class BrowserId(str, Enum):
    """A supported browser; the value is its display name."""

    CHROME = "Google Chrome"
    FIREFOX = "Mozilla Firefox"
    OPERA = "Opera"
    TORCH = "Torch"
    VIVALDI = "Vivaldi"
    BRAVE = "Brave"
    EDGE = "Microsoft Edge"
    AVAST = "Avast Secure Browser"
    SEAMONKEY = "SeaMonkey"
    MAXTHON = "Maxthon"

    @property
    def family(self) -> BrowserFamily:
        return _FAMILIES[self]

    @classmethod
    def parse(cls, value: BrowserId | str | None) -> BrowserId | None:
        """Resolve a member, display name or member name; None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for member in cls:
            if key in (member.value.lower(), member.name.lower()):
                return member
        return None

    def __str__(self) -> str:
        return self.value


_FAMILIES = {
    BrowserId.CHROME: BrowserFamily.CHROMIUM,
    BrowserId.OPERA: BrowserFamily.CHROMIUM,
    BrowserId.TORCH: BrowserFamily.CHROMIUM,
    BrowserId.VIVALDI: BrowserFamily.CHROMIUM,
    BrowserId.BRAVE: BrowserFamily.CHROMIUM,
    BrowserId.EDGE: BrowserFamily.CHROMIUM,
    BrowserId.AVAST: BrowserFamily.CHROMIUM,
    BrowserId.FIREFOX: BrowserFamily.MOZILLA,
    BrowserId.SEAMONKEY: BrowserFamily.MOZILLA,
    BrowserId.MAXTHON: BrowserFamily.MAXTHON,
}

require_every(_FAMILIES, BrowserId, "browser family")
