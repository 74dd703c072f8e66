"""
Info and check use cases — inspect a formula without installing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from brewkit.core.config.loader import (
    find_formula,
    formula_search_path,
    list_formulas,
    resolve_manifest,
)
from brewkit.core.config.settings import ConfigError, load_settings
from brewkit.core.errors import InstallerError, MalformedManifest
from brewkit.core.models.manifest import PackageManifest
from brewkit.core.services.formula_install.detection.host import detect_os, resolve_architecture
from brewkit.core.services.formula_install.domain.download_helpers import (
    _archive_suffix,
    _url_filename,
)
from brewkit.core.services.formula_install.domain.selection import check_platform, select_variant


@dataclass
class InfoResult:
    """Manifest summary plus what would be installed on this host."""

    formula: str
    manifest: PackageManifest | None = None
    path: Path | None = None
    host_architecture: str = ""
    host_os: str = ""
    selected_url: str | None = None
    unavailable_reason: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        if self.error or self.manifest is None:
            return {"formula": self.formula, "error": self.error}
        m = self.manifest
        return {
            "formula": self.formula,
            "path": str(self.path) if self.path else None,
            "name": m.name,
            "version": m.version,
            "desc": m.desc,
            "homepage": m.homepage,
            "requires_os": m.depends_on.os,
            "install_name": m.install_name,
            "variants": {
                arch.value: {"url": v.url, "sha256": v.sha256}
                for arch, v in sorted(m.variants.items(), key=lambda kv: kv[0].value)
            },
            "caveats": m.caveats,
            "host": {"architecture": self.host_architecture, "os": self.host_os},
            "selected_url": self.selected_url,
            "unavailable_reason": self.unavailable_reason,
        }


def get_info(formula: str, *, arch: str | None = None, host_os: str | None = None) -> InfoResult:
    """Load ``formula`` and work out which variant this host would get."""
    result = InfoResult(formula=formula)
    try:
        dirs = formula_search_path(load_settings().formula_dirs)
        result.path = find_formula(formula, dirs)
        result.manifest = resolve_manifest(formula, dirs)
    except (ConfigError, MalformedManifest) as e:
        result.error = str(e)
        return result

    detected, tag = resolve_architecture(arch)
    result.host_architecture = detected
    result.host_os = host_os or detect_os()
    try:
        check_platform(result.manifest, result.host_os)
        result.selected_url = select_variant(result.manifest, detected, tag).url
    except InstallerError as e:
        result.unavailable_reason = str(e)
    return result


@dataclass
class CheckResult:
    """Validation result for a single manifest."""

    formula: str
    valid: bool = False
    manifest: PackageManifest | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "formula": self.formula,
            "valid": self.valid,
            "name": self.manifest.name if self.manifest else None,
            "version": self.manifest.version if self.manifest else None,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def check_formula(formula: str) -> CheckResult:
    """Validate a manifest and flag suspicious but legal content."""
    result = CheckResult(formula=formula)
    try:
        dirs = formula_search_path(load_settings().formula_dirs)
        manifest = resolve_manifest(formula, dirs)
    except (ConfigError, MalformedManifest) as e:
        result.errors.append(str(e))
        return result

    result.valid = True
    result.manifest = manifest

    for arch, variant in manifest.variants.items():
        if variant.url.startswith("http://"):
            result.warnings.append(f"{arch.value}: download URL is not HTTPS")
    urls = [v.url for v in manifest.variants.values()]
    if len(set(urls)) != len(urls):
        result.warnings.append("several architectures share one download URL")
    if manifest.install_action.source is None and any(
        _archive_suffix(_url_filename(u)) for u in urls
    ):
        result.warnings.append(
            f"archive download without install_action.source; "
            f"'{manifest.install_name}' will be looked up inside the archive",
        )
    return result


def get_formula_list() -> list[dict]:
    """Formulas on the search path, as ``{"name", "path"}`` dicts."""
    dirs = formula_search_path(load_settings().formula_dirs)
    return [{"name": p.stem, "path": str(p)} for p in list_formulas(dirs)]
