"""
Install use case — run one formula install and summarize the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from brewkit.core.config.settings import ConfigError, InstallerSettings, load_settings
from brewkit.core.errors import InstallerError
from brewkit.core.services.formula_install.orchestration.orchestrator import (
    Emit,
    InstallRun,
    install_formula,
)


@dataclass
class InstallResult:
    """Outcome of ``brewkit install``."""

    formula: str
    ok: bool = False
    name: str = ""
    version: str = ""
    architecture: str = ""
    url: str = ""
    destination: Path | None = None
    caveats: str | None = None
    stages: list[str] = field(default_factory=list)

    # Failure details
    error: str | None = None
    error_kind: str | None = None
    failed_at: str | None = None
    error_context: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {"formula": self.formula, "ok": self.ok, "stages": self.stages}
        if self.error:
            result["error"] = {
                "kind": self.error_kind,
                "message": self.error,
                "stage": self.failed_at,
                **self.error_context,
            }
            return result

        result.update({
            "name": self.name,
            "version": self.version,
            "architecture": self.architecture,
            "url": self.url,
            "destination": str(self.destination) if self.destination else None,
            "caveats": self.caveats,
        })
        return result


def run_install(
    formula: str,
    *,
    settings: InstallerSettings | None = None,
    bin_dir: str | Path | None = None,
    fetch_timeout: float | None = None,
    arch: str | None = None,
    host_os: str | None = None,
    emit: Emit | None = None,
) -> InstallResult:
    """Install ``formula`` (a name or a manifest path).

    Never raises for installer failures; they are reported on the
    result with the stage they happened in.
    """
    result = InstallResult(formula=formula)

    if settings is None:
        try:
            settings = load_settings(bin_dir=bin_dir, fetch_timeout=fetch_timeout)
        except ConfigError as e:
            result.error = str(e)
            result.error_kind = "config_error"
            result.failed_at = "loading"
            return result

    # Caveats are only collected when the caller doesn't print them.
    collected: list[str] = []
    run = InstallRun(formula=formula)

    try:
        report = install_formula(
            formula,
            settings=settings,
            arch=arch,
            host_os=host_os,
            emit=emit or collected.append,
            run=run,
        )
    except InstallerError as e:
        result.stages = [s.value for s in run.history]
        result.error = str(e)
        result.error_kind = e.kind
        result.failed_at = run.failed_at.value if run.failed_at else None
        result.error_context = dict(e.context)
        return result

    result.ok = True
    result.stages = [s.value for s in report.stages]
    result.name = report.manifest.name
    result.version = report.manifest.version
    result.architecture = report.architecture.value
    result.url = report.url
    result.destination = report.destination
    result.caveats = report.manifest.caveats
    return result
