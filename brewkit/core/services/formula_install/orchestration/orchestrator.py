"""
L5 Orchestration — Run one formula install end to end.

    loading → fetching → verifying → installing → reporting → done

Any stage may move to ``failed``, which is terminal.  Stages run
strictly in order; nothing is retried.  Temporary downloads are
released by their context managers on every exit path, including
termination signals (see ``termination_guard``).
"""

from __future__ import annotations

import logging
import signal
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator

from brewkit.core.config.loader import formula_search_path, load_manifest, resolve_manifest
from brewkit.core.config.settings import InstallerSettings
from brewkit.core.errors import InstallerError, InstallInterrupted
from brewkit.core.models.manifest import Architecture, PackageManifest
from brewkit.core.services.formula_install.detection.host import detect_os, resolve_architecture
from brewkit.core.services.formula_install.domain.selection import check_platform, select_variant
from brewkit.core.services.formula_install.execution.download import fetch_artifact
from brewkit.core.services.formula_install.execution.install import (
    install_artifact,
    verify_checksum,
)
from brewkit.core.services.formula_install.execution.lock import install_lock

logger = logging.getLogger(__name__)

Emit = Callable[[str], None]

_TERMINATION_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


class InstallStage(str, Enum):
    LOADING = "loading"
    FETCHING = "fetching"
    VERIFYING = "verifying"
    INSTALLING = "installing"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


_ORDER = [
    InstallStage.LOADING,
    InstallStage.FETCHING,
    InstallStage.VERIFYING,
    InstallStage.INSTALLING,
    InstallStage.REPORTING,
    InstallStage.DONE,
]


@dataclass
class InstallRun:
    """Stage bookkeeping for one invocation."""

    formula: str
    stage: InstallStage = InstallStage.LOADING
    history: list[InstallStage] = field(default_factory=lambda: [InstallStage.LOADING])
    failed_at: InstallStage | None = None
    error: InstallerError | None = None

    def advance(self, stage: InstallStage) -> None:
        if self.stage is InstallStage.FAILED or self.stage is InstallStage.DONE:
            raise RuntimeError(f"install of {self.formula} already finished ({self.stage.value})")
        if _ORDER.index(stage) != _ORDER.index(self.stage) + 1:
            raise RuntimeError(f"cannot go from {self.stage.value} to {stage.value}")
        logger.debug("%s: %s → %s", self.formula, self.stage.value, stage.value)
        self.stage = stage
        self.history.append(stage)

    def fail(self, error: InstallerError) -> None:
        self.failed_at = self.stage
        self.error = error
        self.stage = InstallStage.FAILED
        self.history.append(InstallStage.FAILED)
        logger.error("%s failed while %s: %s", self.formula, self.failed_at.value, error)


@dataclass
class InstallReport:
    """What a successful install did."""

    manifest: PackageManifest
    architecture: Architecture
    url: str
    sha256: str
    destination: Path
    caveats_emitted: bool
    stages: list[InstallStage]


def _raise_interrupted(signum: int, frame) -> None:
    raise InstallInterrupted(signum)


@contextmanager
def termination_guard() -> Iterator[None]:
    """Turn SIGTERM/SIGHUP into ``InstallInterrupted`` while active.

    The exception unwinds through the fetch and lock contexts so the
    temporary download is deleted before the process exits.  Handlers
    can only be installed from the main thread; elsewhere this is a
    no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = {sig: signal.signal(sig, _raise_interrupted) for sig in _TERMINATION_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def report_caveats(manifest: PackageManifest, emit: Emit) -> bool:
    """Emit the manifest's caveat text once.  Returns True if emitted."""
    if not manifest.caveats:
        return False
    emit(manifest.caveats.rstrip("\n"))
    return True


def _load(formula: PackageManifest | Path | str, settings: InstallerSettings) -> PackageManifest:
    if isinstance(formula, PackageManifest):
        return formula
    if isinstance(formula, Path):
        return load_manifest(formula)
    return resolve_manifest(formula, formula_search_path(settings.formula_dirs))


def install_formula(
    formula: PackageManifest | Path | str,
    *,
    settings: InstallerSettings,
    arch: str | None = None,
    host_os: str | None = None,
    emit: Emit = print,
    run: InstallRun | None = None,
) -> InstallReport:
    """Load, fetch, verify, install, and report one formula.

    Args:
        formula: A loaded manifest, a manifest path, or a formula name.
        settings: Bin/lock/tmp directories and download limits.
        arch: Architecture override (default: detect from host).
        host_os: OS override (default: detect from host).
        emit: Receives the caveat text after a successful install.
        run: Optional stage tracker, filled in as the install proceeds.

    Returns:
        InstallReport for the completed install.

    Raises:
        InstallerError: The run failed; ``run.failed_at`` tells where.
    """
    if run is None:
        label = formula.name if isinstance(formula, PackageManifest) else str(formula)
        run = InstallRun(formula=label)

    try:
        with termination_guard():
            manifest = _load(formula, settings)
            run.formula = manifest.name

            # Variant selection belongs to fetching; its errors report failed_at=fetching
            # even though no request has been made yet.
            run.advance(InstallStage.FETCHING)
            detected, tag = resolve_architecture(arch)
            check_platform(manifest, host_os or detect_os())
            variant = select_variant(manifest, detected, tag)
            assert tag is not None  # select_variant raised otherwise
            logger.info("Selected %s variant for %s: %s", tag.value, manifest.name, variant.url)

            with install_lock(manifest.name, settings.lock_dir):
                with fetch_artifact(variant.url, architecture=tag, settings=settings) as artifact:
                    run.advance(InstallStage.VERIFYING)
                    verify_checksum(artifact, variant.sha256)

                    run.advance(InstallStage.INSTALLING)
                    destination = install_artifact(
                        artifact,
                        manifest.install_action,
                        bin_dir=settings.bin_dir,
                        install_name=manifest.install_name,
                    )

            run.advance(InstallStage.REPORTING)
            emitted = report_caveats(manifest, emit)
            run.advance(InstallStage.DONE)
    except KeyboardInterrupt as e:
        interrupted = InstallInterrupted(signal.SIGINT)
        run.fail(interrupted)
        raise interrupted from e
    except InstallerError as e:
        run.fail(e)
        raise

    logger.info("Installed %s %s to %s", manifest.name, manifest.version, destination)
    return InstallReport(
        manifest=manifest,
        architecture=tag,
        url=variant.url,
        sha256=variant.sha256,
        destination=destination,
        caveats_emitted=emitted,
        stages=list(run.history),
    )
