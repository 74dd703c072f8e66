"""
L1 Domain — Download helpers (pure).

Size formatting and URL inspection.
No I/O, no subprocess.
"""

from __future__ import annotations

import posixpath
from urllib.parse import unquote, urlparse

from brewkit.core.services.formula_install.data.constants import ARCHIVE_SUFFIXES


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def _url_filename(url: str, default: str = "download") -> str:
    """Last path component of a URL, e.g. ``dts_darwin_arm64.tar.gz``."""
    name = posixpath.basename(unquote(urlparse(url).path))
    return name or default


def _archive_suffix(filename: str) -> str | None:
    """Return the archive suffix of ``filename``, or None for a raw file."""
    lower = filename.lower()
    for suffix in ARCHIVE_SUFFIXES:
        if lower.endswith(suffix):
            return suffix
    return None
