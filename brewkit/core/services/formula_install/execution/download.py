"""
L4 Execution — Download into a scoped temporary directory.

The artifact is streamed to disk and hashed in the same pass.  The
temporary directory belongs to the ``fetch_artifact`` context: it is
removed when the context exits, whether the install succeeded, the
checksum failed, the install failed, or a signal interrupted the run.
"""

from __future__ import annotations

import hashlib
import http.client
import logging
import tempfile
import time
import urllib.error
import urllib.request
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from brewkit.core.config.settings import InstallerSettings
from brewkit.core.errors import FetchError
from brewkit.core.models.artifact import FetchedArtifact
from brewkit.core.models.manifest import Architecture
from brewkit.core.services.formula_install.data.constants import DOWNLOAD_CHUNK_SIZE, USER_AGENT
from brewkit.core.services.formula_install.domain.download_helpers import _fmt_size, _url_filename

logger = logging.getLogger(__name__)


def _content_length(resp) -> int:
    try:
        return int(resp.headers.get("Content-Length") or 0)
    except (TypeError, ValueError):
        return 0


def _stream_to_file(
    url: str,
    dest: Path,
    *,
    timeout: float,
    max_bytes: int,
) -> tuple[int, str]:
    """GET ``url`` into ``dest``.  Returns ``(size_bytes, sha256_hex)``.

    ``timeout`` bounds each socket operation and the transfer as a whole.

    Raises:
        FetchError: Transport failure, non-2xx status, timeout, or the
            body is larger than ``max_bytes``.
    """
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    deadline = time.monotonic() + timeout
    digest = hashlib.sha256()
    downloaded = 0

    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            # file:// responses carry no status code
            status = resp.getcode()
            if status is not None and not 200 <= status < 300:
                raise FetchError(url, f"HTTP {status}")

            total = _content_length(resp)
            if total > max_bytes:
                raise FetchError(
                    url, f"size {_fmt_size(total)} exceeds limit {_fmt_size(max_bytes)}",
                )

            with open(dest, "wb") as f:
                last_progress = -10
                while True:
                    chunk = resp.read(DOWNLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    downloaded += len(chunk)
                    if downloaded > max_bytes:
                        raise FetchError(
                            url, f"download exceeds limit {_fmt_size(max_bytes)}",
                        )
                    if time.monotonic() > deadline:
                        raise FetchError(url, f"timed out after {timeout:g}s")
                    f.write(chunk)
                    digest.update(chunk)

                    # Progress tracking (log every 10%)
                    if total > 0:
                        pct = int(downloaded * 100 / total)
                        if pct >= last_progress + 10:
                            last_progress = pct
                            logger.info(
                                "Download progress: %d%% (%s / %s)",
                                pct, _fmt_size(downloaded), _fmt_size(total),
                            )
    except FetchError:
        raise
    except urllib.error.HTTPError as e:
        raise FetchError(url, f"HTTP {e.code} {e.reason}") from e
    except urllib.error.URLError as e:
        raise FetchError(url, str(e.reason)) from e
    except TimeoutError as e:
        raise FetchError(url, f"timed out after {timeout:g}s") from e
    except (OSError, http.client.HTTPException, ValueError) as e:
        raise FetchError(url, str(e) or type(e).__name__) from e

    return downloaded, digest.hexdigest()


@contextmanager
def fetch_artifact(
    url: str,
    *,
    architecture: Architecture,
    settings: InstallerSettings,
) -> Iterator[FetchedArtifact]:
    """Download ``url`` and yield it as a ``FetchedArtifact``.

    The file lives in a private temporary directory under
    ``settings.tmp_dir`` that is deleted when the context exits.

    Raises:
        FetchError: The download failed (see ``_stream_to_file``) or the
            temporary directory could not be created.
    """
    try:
        settings.tmp_dir.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.TemporaryDirectory(prefix="brewkit-", dir=settings.tmp_dir)
    except OSError as e:
        raise FetchError(url, f"cannot create temporary directory: {e}") from e

    with tmp as tmp_dir:
        dest = Path(tmp_dir) / _url_filename(url)
        logger.info("Fetching %s", url)
        size, sha256 = _stream_to_file(
            url,
            dest,
            timeout=settings.fetch_timeout,
            max_bytes=settings.max_download_bytes,
        )
        logger.info("Fetched %s (%s)", dest.name, _fmt_size(size))
        yield FetchedArtifact(
            path=dest,
            url=url,
            architecture=architecture,
            size_bytes=size,
            sha256=sha256,
        )
        logger.debug("Removing temporary download %s", tmp_dir)
