import copy
import json
import sqlite3
import time
from pathlib import Path

import pytest

from browser_extract.queries import MAC_EPOCH_OFFSET, WINDOWS_EPOCH_OFFSET


def chrome_ts(seconds_ago: float = 0) -> int:
    """Microseconds since 1601-01-01 for `seconds_ago` seconds before now."""
    return int((time.time() - seconds_ago + WINDOWS_EPOCH_OFFSET) * 1_000_000)


def mozilla_ts(seconds_ago: float = 0) -> int:
    return int((time.time() - seconds_ago) * 1_000_000)


def maxthon_ts(seconds_ago: float = 0) -> float:
    return time.time() - seconds_ago - MAC_EPOCH_OFFSET


CHROME_BOOKMARKS = {
    "checksum": "",
    "roots": {
        "bookmark_bar": {
            "name": "Bookmarks bar",
            "type": "folder",
            "children": [
                {
                    "type": "url",
                    "name": "Python",
                    "url": "https://www.python.org/",
                    "date_added": "13256611200000000",  # 2021-02-01
                },
                {
                    "type": "folder",
                    "name": "Reading",
                    "children": [
                        {
                            "type": "url",
                            "name": "PEP 8",
                            "url": "https://peps.python.org/pep-0008/",
                            "date_added": "13256697600000000",  # 2021-02-02
                        },
                    ],
                },
            ],
        },
        "other": {"name": "Other bookmarks", "type": "folder", "children": []},
        "synced": {"name": "Mobile bookmarks", "type": "folder", "children": []},
    },
    "version": 1,
}


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch) -> Path:
    """Isolated temp directory so leftover snapshots can be counted."""
    path = tmp_path / "scratch"
    path.mkdir()
    monkeypatch.setenv("TMP", str(path))
    monkeypatch.setenv("TMPDIR", str(path))
    return path


def make_chrome_profile(profile_dir: Path, bookmarks: dict | None = None) -> Path:
    """Create a Chromium profile with a History database and Bookmarks file."""
    profile_dir.mkdir(parents=True, exist_ok=True)
    db_path = profile_dir / "History"
    conn = sqlite3.connect(str(db_path))
    conn.execute("""
        CREATE TABLE urls (
            id INTEGER PRIMARY KEY,
            url LONGVARCHAR,
            title LONGVARCHAR,
            visit_count INTEGER DEFAULT 0,
            last_visit_time INTEGER NOT NULL
        )
    """)
    recent = chrome_ts(60)
    rows = [
        ("https://example.com/", "Example", recent),
        # Same title and second as above: collapsed by the query.
        ("https://example.com/?ref=1", "Example", recent),
        ("https://docs.example.com/", "Docs", chrome_ts(20 * 60)),
        ("https://old.example.com/", "Old", chrome_ts(3 * 60 * 60)),
    ]
    conn.executemany(
        "INSERT INTO urls (url, title, last_visit_time) VALUES (?, ?, ?)", rows
    )
    conn.commit()
    conn.close()

    (profile_dir / "Bookmarks").write_text(
        json.dumps(bookmarks if bookmarks is not None else CHROME_BOOKMARKS),
        encoding="utf-8",
    )
    return db_path


@pytest.fixture
def chrome_history(tmp_path) -> Path:
    return make_chrome_profile(tmp_path / "chrome" / "Default")


@pytest.fixture
def firefox_places(tmp_path):
    """A WAL-mode places.sqlite whose rows are still only in the -wal file.

    The writer connection stays open for the duration of the test, the way
    a running Firefox holds it.
    """
    profile_dir = tmp_path / "firefox" / "abcd.default"
    profile_dir.mkdir(parents=True)
    db_path = profile_dir / "places.sqlite"

    conn = sqlite3.connect(str(db_path))
    conn.execute("""
        CREATE TABLE moz_places (
            id INTEGER PRIMARY KEY,
            url LONGVARCHAR,
            title LONGVARCHAR,
            last_visit_date INTEGER
        )
    """)
    conn.execute("""
        CREATE TABLE moz_bookmarks (
            id INTEGER PRIMARY KEY,
            type INTEGER,
            fk INTEGER DEFAULT NULL,
            parent INTEGER,
            title LONGVARCHAR,
            dateAdded INTEGER
        )
    """)
    conn.commit()
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA wal_autocheckpoint=0")

    conn.executemany(
        "INSERT INTO moz_places (id, url, title, last_visit_date) VALUES (?, ?, ?, ?)",
        [
            (1, "https://www.mozilla.org/", "Mozilla", mozilla_ts(2 * 60)),
            (2, "https://developer.mozilla.org/", "MDN", mozilla_ts(2 * 60 * 60)),
            (3, "place:sort=8&maxResults=10", None, None),
        ],
    )
    conn.executemany(
        "INSERT INTO moz_bookmarks (id, type, fk, parent, title, dateAdded) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        [
            (1, 2, None, 0, "root", 1609459200000000),
            (2, 2, None, 1, "Bookmarks Menu", 1609459200000000),
            (3, 1, 1, 2, "Mozilla", 1612224000000000),  # 2021-02-02
            (4, 1, 3, 2, "Most Visited", 1612224000000000),  # not http
            (5, 2, None, 1, None, 1609459200000000),  # untitled folder
            (6, 1, 2, 5, "MDN", 1612310400000000),  # 2021-02-03
        ],
    )
    conn.commit()

    yield db_path
    conn.close()


@pytest.fixture
def maxthon_history(tmp_path) -> Path:
    profile_dir = tmp_path / "maxthon"
    profile_dir.mkdir()
    db_path = profile_dir / "History.db"
    conn = sqlite3.connect(str(db_path))
    conn.execute("""
        CREATE TABLE zmxhistoryentry (
            z_pk INTEGER PRIMARY KEY,
            zlastvisittime TIMESTAMP,
            zhost VARCHAR,
            ztitle VARCHAR,
            zurl VARCHAR
        )
    """)
    conn.executemany(
        "INSERT INTO zmxhistoryentry (zlastvisittime, zhost, ztitle, zurl) VALUES (?, ?, ?, ?)",
        [
            (maxthon_ts(60), "www.maxthon.com", "Maxthon", "https://www.maxthon.com/"),
            (631152000, "example.org", "New Year", "https://example.org/"),
        ],
    )
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def chrome_profile(tmp_path):
    """Factory for additional Chromium profiles under tmp_path."""
    def _make(name: str, bookmarks: dict | None = None) -> Path:
        return make_chrome_profile(tmp_path / "chrome" / name, bookmarks)
    return _make


@pytest.fixture
def bookmarks_document() -> dict:
    return copy.deepcopy(CHROME_BOOKMARKS)
