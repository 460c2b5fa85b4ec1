"""Unified exception hierarchy for browser-extract."""


class BrowserExtractError(Exception):
    """Base exception for all extraction errors."""


class MissingSourceError(BrowserExtractError):
    """The browser database named by a path does not exist."""


# Snapshots
class SnapshotError(BrowserExtractError):
    """Base exception for snapshot operations."""


class SnapshotCopyError(SnapshotError):
    """The scratch copy of a browser database could not be created."""


class SnapshotQueryError(SnapshotError):
    """Querying (or folding the WAL of) a scratch copy failed."""


# Bookmarks
class MalformedBookmarkFileError(BrowserExtractError):
    """A Chromium Bookmarks file could not be parsed as JSON."""
