"""Consistent read-only snapshots of live browser databases.

Browsers keep their history databases open (and on Windows, locked) while
running. Every read therefore happens against a scratch copy in the temp
directory, which is removed as soon as the read finishes.
"""

from __future__ import annotations

import logging
import shutil
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import closing, contextmanager
from dataclasses import dataclass
from pathlib import Path

from browser_extract import workspace
from browser_extract.browsers import SnapshotStrategy
from browser_extract.exceptions import (
    MissingSourceError,
    SnapshotCopyError,
    SnapshotQueryError,
)

logger = logging.getLogger(__name__)

# Files SQLite may create beside a database it opens.
COMPANION_SUFFIXES = ("-wal", "-shm", "-journal")


@dataclass
class Snapshot:
    """Scratch copy of one browser database, owned by a single extraction."""

    source: Path
    db_path: Path
    wal_path: Path | None = None

    def paths(self) -> list[Path]:
        """Every file this snapshot may have left in the temp directory."""
        return [self.db_path] + [
            Path(f"{self.db_path}{suffix}") for suffix in COMPANION_SUFFIXES
        ]

    def release(self) -> None:
        workspace.release(self.paths())
        logger.debug("Released snapshot of %s", self.source)

    def __enter__(self) -> Snapshot:
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()


def acquire(
    source: Path | str,
    strategy: SnapshotStrategy,
    extension: str = "sqlite",
) -> Snapshot:
    """Copy `source` into the temp directory using `strategy`.

    Raises MissingSourceError before allocating anything when the source is
    absent. On any later failure the partial snapshot is released before the
    error propagates.
    """
    source = Path(source)
    try:
        exists = source.is_file()
    except OSError as e:
        raise SnapshotCopyError(f"Cannot access {source}: {e}") from e
    if not exists:
        raise MissingSourceError(f"Browser database not found at {source}")

    snap = Snapshot(source=source, db_path=workspace.allocate(extension))
    try:
        _copy(source, snap.db_path)
        if strategy is SnapshotStrategy.COPY_WITH_LOG_FOLD:
            wal_source = Path(f"{source}-wal")
            if wal_source.exists():
                snap.wal_path = Path(f"{snap.db_path}-wal")
                _copy(wal_source, snap.wal_path)
            fold_wal(snap.db_path)
    except BaseException:
        snap.release()
        raise

    logger.debug("Snapshot of %s at %s", source, snap.db_path)
    return snap


@contextmanager
def snapshot(
    source: Path | str,
    strategy: SnapshotStrategy,
    extension: str = "sqlite",
) -> Iterator[Snapshot]:
    """Acquire a snapshot for the duration of a `with` block."""
    with acquire(source, strategy, extension) as snap:
        yield snap


def fold_wal(db_path: Path) -> None:
    """Checkpoint the copied WAL into the main file so plain reads see it."""
    try:
        with closing(sqlite3.connect(str(db_path))) as conn:
            conn.execute("PRAGMA wal_checkpoint(FULL)").fetchall()
    except sqlite3.Error as e:
        raise SnapshotQueryError(f"Failed to checkpoint WAL of {db_path}: {e}") from e


def run_query(
    snap: Snapshot,
    sql: str,
    params: Sequence[object] = (),
) -> list[sqlite3.Row]:
    """Run one read query against the snapshot copy."""
    try:
        with closing(sqlite3.connect(str(snap.db_path))) as conn:
            conn.row_factory = sqlite3.Row
            return conn.execute(sql, params).fetchall()
    except sqlite3.Error as e:
        raise SnapshotQueryError(f"Failed querying {snap.source}: {e}") from e


def _copy(source: Path, target: Path) -> None:
    try:
        shutil.copyfile(source, target)
    except OSError as e:
        raise SnapshotCopyError(f"Failed to copy {source} to {target}: {e}") from e
