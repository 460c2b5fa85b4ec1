"""Scratch file allocation in the platform temp directory."""

from __future__ import annotations

import logging
import os
import tempfile
import uuid
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def get_temp_dir() -> Path:
    """Return the temp directory, honouring $TMP then $TMPDIR."""
    return Path(os.environ.get("TMP") or os.environ.get("TMPDIR") or tempfile.gettempdir())


def allocate(extension: str = "sqlite") -> Path:
    """Return a fresh, unused scratch path. Nothing is created on disk."""
    return get_temp_dir() / f"{uuid.uuid4().hex}.{extension.lstrip('.')}"


def release(paths: Iterable[Path | str]) -> None:
    """Delete each path that exists.

    Paths already gone are skipped; deletion failures are logged so they
    never hide the result of the extraction that owned them.
    """
    for path in paths:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove scratch file %s: %s", path, e)
