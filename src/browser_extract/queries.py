"""SQL for each browser family's history and bookmark schemas.

Every history query converts the stored timestamp to a UTC
"YYYY-MM-DD HH:MM:SS" string aliased `utc_time`, and keeps rows whose
converted time is >= datetime('now', ?) with the window modifier bound as
the only parameter.
"""

from __future__ import annotations

from browser_extract.browsers import BrowserFamily, require_every

# Seconds from 1601-01-01 to 1970-01-01 (Chrome/Windows epoch).
WINDOWS_EPOCH_OFFSET = 11644473600
# Seconds from 1970-01-01 to 2001-01-01 (Maxthon/Cocoa epoch).
MAC_EPOCH_OFFSET = 978307200
MICROSECONDS = 1_000_000

_CHROMIUM_TIME = f"last_visit_time / {MICROSECONDS} - {WINDOWS_EPOCH_OFFSET}"
_MOZILLA_TIME = f"last_visit_date / {MICROSECONDS}"
_MAXTHON_TIME = f"zlastvisittime + {MAC_EPOCH_OFFSET}"

CHROMIUM_HISTORY = f"""
    SELECT
        title,
        datetime({_CHROMIUM_TIME}, 'unixepoch') AS utc_time,
        url
    FROM urls
    WHERE datetime({_CHROMIUM_TIME}, 'unixepoch') >= datetime('now', ?)
    GROUP BY title, utc_time
    ORDER BY utc_time
"""

MOZILLA_HISTORY = f"""
    SELECT
        title,
        datetime({_MOZILLA_TIME}, 'unixepoch') AS utc_time,
        url
    FROM moz_places
    WHERE datetime({_MOZILLA_TIME}, 'unixepoch') >= datetime('now', ?)
    GROUP BY title, utc_time
    ORDER BY utc_time
"""

# Maxthon keeps one row per entry already; no grouping.
MAXTHON_HISTORY = f"""
    SELECT
        ztitle AS title,
        datetime({_MAXTHON_TIME}, 'unixepoch') AS utc_time,
        zurl AS url,
        zhost AS host
    FROM zmxhistoryentry
    WHERE datetime({_MAXTHON_TIME}, 'unixepoch') >= datetime('now', ?)
    ORDER BY zlastvisittime
"""

# Places keeps bookmarks next to history; the self-join names the parent folder.
MOZILLA_BOOKMARKS = f"""
    SELECT
        strftime(
            '%Y-%m-%dT%H:%M:%fZ',
            b.dateAdded / {float(MICROSECONDS)},
            'unixepoch'
        ) AS added_time,
        p.url AS url,
        b.title AS title,
        folder.title AS folder
    FROM moz_bookmarks AS b
    JOIN moz_places AS p ON b.fk = p.id
    JOIN moz_bookmarks AS folder ON b.parent = folder.id
    WHERE b.dateAdded IS NOT NULL
      AND p.url LIKE 'http%'
      AND b.title IS NOT NULL
"""

_HISTORY_QUERIES = {
    BrowserFamily.CHROMIUM: CHROMIUM_HISTORY,
    BrowserFamily.MOZILLA: MOZILLA_HISTORY,
    BrowserFamily.MAXTHON: MAXTHON_HISTORY,
}

_BOOKMARK_QUERIES = {
    BrowserFamily.CHROMIUM: None,  # JSON file, see bookmarks.py
    BrowserFamily.MOZILLA: MOZILLA_BOOKMARKS,
    BrowserFamily.MAXTHON: None,
}

require_every(_HISTORY_QUERIES, BrowserFamily, "history query")
require_every(_BOOKMARK_QUERIES, BrowserFamily, "bookmark query entry")


def history_query(family: BrowserFamily) -> str:
    return _HISTORY_QUERIES[family]


def bookmark_query(family: BrowserFamily) -> str | None:
    return _BOOKMARK_QUERIES[family]


def window_modifier(minutes: int) -> str:
    """SQLite date modifier for "the last `minutes` minutes"."""
    return f"-{max(0, int(minutes))} minutes"
