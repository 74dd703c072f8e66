"""
L0 Data — constant tables for formula installation.
"""

from brewkit.core.services.formula_install.data.constants import (  # noqa: F401
    ARCHIVE_SUFFIXES,
    BINARY_MODE,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_DOWNLOAD_BYTES,
    DOWNLOAD_CHUNK_SIZE,
    USER_AGENT,
    _IARCH_MAP,
    _OS_MAP,
)
