"""
Manifest loader — reads formula YAML into ``PackageManifest`` models.

This is the first stage of every install.  It reads YAML, validates
against the Pydantic schema, and returns a read-only manifest.  It
never touches the network and never writes to disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import ValidationError

from brewkit.core.errors import MalformedManifest
from brewkit.core.models.manifest import PackageManifest

logger = logging.getLogger(__name__)

# Formulas shipped with the package
BUNDLED_FORMULA_DIR = Path(__file__).resolve().parents[2] / "formulas"

FORMULA_SUFFIXES = (".yml", ".yaml")


def formula_search_path(extra_dirs: Iterable[Path] = ()) -> list[Path]:
    """Extra directories first, bundled formulas last."""
    return [*extra_dirs, BUNDLED_FORMULA_DIR]


def find_formula(name_or_path: str, search_dirs: Iterable[Path] = ()) -> Path | None:
    """Resolve a formula name (``dts-legacy``) or a manifest path.

    Args:
        name_or_path: A path to an existing file, or a bare formula name.
        search_dirs: Directories to look in, in order.

    Returns:
        Path to the manifest file, or None if nothing matches.
    """
    candidate = Path(name_or_path).expanduser()
    if candidate.suffix in FORMULA_SUFFIXES or "/" in name_or_path:
        return candidate if candidate.is_file() else None

    for directory in search_dirs:
        for suffix in FORMULA_SUFFIXES:
            path = directory / f"{name_or_path}{suffix}"
            if path.is_file():
                return path
    return None


def list_formulas(search_dirs: Iterable[Path] = ()) -> list[Path]:
    """All formula files visible on the search path (first one wins per name)."""
    seen: dict[str, Path] = {}
    for directory in search_dirs:
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            if path.suffix in FORMULA_SUFFIXES and path.stem not in seen:
                seen[path.stem] = path
    return [seen[k] for k in sorted(seen)]


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "manifest"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_manifest(data: Any, *, source: str = "<memory>") -> PackageManifest:
    """Validate an already-parsed mapping.

    Raises:
        MalformedManifest: Required fields are missing or invalid.
    """
    if not isinstance(data, dict):
        raise MalformedManifest(source, f"expected a mapping, got {type(data).__name__}")

    try:
        return PackageManifest.model_validate(data)
    except ValidationError as e:
        raise MalformedManifest(source, _format_validation_error(e)) from e


def load_manifest(path: Path) -> PackageManifest:
    """Load and validate a formula manifest.

    Args:
        path: Path to the YAML formula file.

    Returns:
        Validated, read-only PackageManifest.

    Raises:
        MalformedManifest: The file is missing, unreadable, not YAML,
            or does not describe a complete formula.
    """
    source = str(path)
    if not path.is_file():
        raise MalformedManifest(source, "file not found")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedManifest(source, f"cannot read file: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise MalformedManifest(source, f"invalid YAML: {e}") from e

    manifest = parse_manifest(data, source=source)
    logger.info(
        "Loaded formula '%s' %s (%s)",
        manifest.name, manifest.version, ", ".join(manifest.supported_architectures()),
    )
    return manifest


def resolve_manifest(name_or_path: str, search_dirs: Iterable[Path] = ()) -> PackageManifest:
    """Find a formula by name or path and load it.

    Raises:
        MalformedManifest: No such formula, or it fails validation.
    """
    dirs = list(search_dirs)
    path = find_formula(name_or_path, dirs)
    if path is None:
        searched = ", ".join(str(d) for d in dirs) or "no formula directories"
        raise MalformedManifest(name_or_path, f"no formula found (searched {searched})")
    return load_manifest(path)
