"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# Architecture name normalization.
#
# Hosts report raw ``uname -m`` names (x86_64, aarch64) while release
# assets and manifests use Go-style tags (amd64, arm64).  Every name on
# the left maps onto one of the closed ``Architecture`` tags.  Names not
# listed here are unsupported; they are never guessed.
_IARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "intel": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "armv7l": "armhf",
    "armhf": "armhf",
    "i686": "i386",
    "i586": "i386",
    "i386": "i386",
    "x86": "i386",
}

# platform.system() → manifest OS names.
_OS_MAP: dict[str, str] = {
    "darwin": "macos",
    "macos": "macos",
    "linux": "linux",
}

# Archive suffixes recognised on download URLs.  Longest first.
ARCHIVE_SUFFIXES: tuple[str, ...] = (
    ".tar.gz",
    ".tar.bz2",
    ".tar.xz",
    ".tgz",
    ".tar",
    ".zip",
)

USER_AGENT = "brewkit/0.1"

DOWNLOAD_CHUNK_SIZE = 64 * 1024

# Defaults for InstallerSettings.
DEFAULT_FETCH_TIMEOUT = 60.0
DEFAULT_MAX_DOWNLOAD_BYTES = 512 * 1024 * 1024

# Mode applied to installed binaries.
BINARY_MODE = 0o755
