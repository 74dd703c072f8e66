"""
L4 Execution — Per-formula install lock.

Two installs of the same formula would race on the destination path;
an exclusive ``flock`` on ``<lock_dir>/<name>.lock`` serializes them.
The lock file lives outside the bin directory and is left in place.
"""

from __future__ import annotations

import fcntl
import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from brewkit.core.errors import InstallError

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def lock_path(name: str, lock_dir: Path) -> Path:
    return lock_dir / f"{_UNSAFE.sub('_', name)}.lock"


@contextmanager
def install_lock(name: str, lock_dir: Path) -> Iterator[Path]:
    """Hold an exclusive lock for formula ``name``.  Blocks until free.

    Raises:
        InstallError: The lock file cannot be created.
    """
    path = lock_path(name, lock_dir)
    try:
        lock_dir.mkdir(parents=True, exist_ok=True)
        f = open(path, "a")
    except OSError as e:
        raise InstallError(str(path), f"cannot open lock file: {e}") from e

    with f:
        logger.debug("Waiting for install lock %s", path)
        fcntl.flock(f, fcntl.LOCK_EX)
        try:
            logger.debug("Acquired install lock %s", path)
            yield path
        finally:
            fcntl.flock(f, fcntl.LOCK_UN)
