"""
L4 Execution — Checksum verification and binary placement.

The installer writes exactly one file into the bin directory.  It is
written under a temporary name in the same directory and renamed
onto the destination, so the bin directory shows either the old
binary or the new one, never a half-written file.
"""

from __future__ import annotations

import hashlib
import logging
import lzma
import os
import shutil
import tarfile
import tempfile
import zipfile
import zlib
from pathlib import Path

from brewkit.core.errors import ChecksumMismatch, InstallError
from brewkit.core.models.artifact import FetchedArtifact
from brewkit.core.models.manifest import InstallAction, InstallActionType
from brewkit.core.services.formula_install.data.constants import BINARY_MODE, DOWNLOAD_CHUNK_SIZE
from brewkit.core.services.formula_install.domain.download_helpers import _archive_suffix

logger = logging.getLogger(__name__)


def file_sha256(path: Path) -> str:
    """Chunked SHA-256 of a file."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(DOWNLOAD_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_checksum(artifact: FetchedArtifact, expected: str) -> None:
    """Compare the artifact's digest with the manifest's.

    The checksum is public, so a plain comparison is enough.

    Raises:
        ChecksumMismatch: The digests differ.
    """
    actual = artifact.sha256.lower()
    if actual != expected.lower():
        raise ChecksumMismatch(artifact.url, expected, actual)
    logger.info("Checksum OK for %s", artifact.filename)


def _extract_from_tar(archive: Path, member_name: str, dest: Path) -> None:
    with tarfile.open(archive, "r:*") as tf:
        members = [m for m in tf.getmembers() if m.isfile()]
        found = next((m for m in members if Path(m.name).name == member_name), None)
        if found is None:
            available = [m.name for m in members[:10]]
            raise InstallError(
                str(archive),
                f"'{member_name}' not found in archive (contains: {', '.join(available) or 'nothing'})",
            )
        src = tf.extractfile(found)
        if src is None:
            raise InstallError(str(archive), f"cannot read '{found.name}' from archive")
        with src, open(dest, "wb") as out:
            shutil.copyfileobj(src, out)


def _extract_from_zip(archive: Path, member_name: str, dest: Path) -> None:
    with zipfile.ZipFile(archive) as zf:
        infos = [i for i in zf.infolist() if not i.is_dir()]
        found = next((i for i in infos if Path(i.filename).name == member_name), None)
        if found is None:
            available = [i.filename for i in infos[:10]]
            raise InstallError(
                str(archive),
                f"'{member_name}' not found in archive (contains: {', '.join(available) or 'nothing'})",
            )
        with zf.open(found) as src, open(dest, "wb") as out:
            shutil.copyfileobj(src, out)


def extract_member(artifact: FetchedArtifact, member_name: str, dest_dir: Path) -> Path:
    """Return the file to install from ``artifact``.

    Archives (by URL suffix) yield the single regular file whose base
    name is ``member_name``; nothing else is unpacked.  Raw downloads
    are returned as they are.

    Raises:
        InstallError: The archive is unreadable or lacks the member.
    """
    suffix = _archive_suffix(artifact.filename)
    if suffix is None:
        return artifact.path

    dest = dest_dir / f"{member_name}.extracted"
    try:
        if suffix == ".zip":
            _extract_from_zip(artifact.path, member_name, dest)
        else:
            _extract_from_tar(artifact.path, member_name, dest)
    except InstallError:
        dest.unlink(missing_ok=True)
        raise
    except (
        tarfile.TarError, zipfile.BadZipFile, lzma.LZMAError, zlib.error, OSError, EOFError,
    ) as e:
        dest.unlink(missing_ok=True)
        raise InstallError(str(artifact.path), f"cannot extract '{member_name}': {e}") from e

    logger.debug("Extracted %s from %s", member_name, artifact.filename)
    return dest


def _place_atomically(payload: Path, target: Path) -> None:
    """Copy ``payload`` to ``target`` via a temp file + rename."""
    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent,
        prefix=f".{target.name}.",
        suffix=".tmp",
    )
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as out, open(payload, "rb") as src:
            shutil.copyfileobj(src, out)
            out.flush()
            os.fsync(out.fileno())
        os.chmod(tmp, BINARY_MODE)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def install_artifact(
    artifact: FetchedArtifact,
    action: InstallAction,
    *,
    bin_dir: Path,
    install_name: str,
) -> Path:
    """Run the install action for a verified artifact.

    Args:
        artifact: Downloaded file whose checksum has been verified.
        action: The manifest's install action.
        bin_dir: Directory the binary is placed in (created if missing).
        install_name: File name of the installed binary.

    Returns:
        Path of the installed binary.

    Raises:
        InstallError: Extraction failed, or the bin directory could not
            be written.
    """
    if action.type is not InstallActionType.COPY_RENAME:
        raise InstallError(str(bin_dir), f"unsupported install action '{action.type}'")

    target = bin_dir / install_name
    member = action.source or install_name
    payload = extract_member(artifact, member, artifact.path.parent)

    try:
        bin_dir.mkdir(parents=True, exist_ok=True)
        _place_atomically(payload, target)
    except OSError as e:
        raise InstallError(str(target), e.strerror or str(e)) from e

    logger.info("Installed %s → %s", payload.name, target)
    return target
