"""
L1 Domain — Variant selection.

Picks the (url, sha256) pair for the host.  Pure lookups over the
manifest; raising here happens before any network activity.
"""

from __future__ import annotations

from brewkit.core.errors import UnsupportedArchitecture, UnsupportedPlatform
from brewkit.core.models.manifest import Architecture, ArchitectureVariant, PackageManifest


def select_variant(
    manifest: PackageManifest,
    detected: str,
    arch: Architecture | None,
) -> ArchitectureVariant:
    """Return the variant for ``arch`` exactly.

    Args:
        manifest: Loaded formula.
        detected: Architecture name as detected, used in the error message.
        arch: Normalized tag, or None when the host is outside the closed set.

    Raises:
        UnsupportedArchitecture: The manifest has no entry for this host.
    """
    variant = manifest.variant_for(arch) if arch is not None else None
    if variant is None:
        raise UnsupportedArchitecture(
            manifest.name, detected, manifest.supported_architectures(),
        )
    return variant


def check_platform(manifest: PackageManifest, host_os: str) -> None:
    """Raise ``UnsupportedPlatform`` if the manifest pins another OS."""
    required = manifest.depends_on.os
    if required and required != host_os:
        raise UnsupportedPlatform(manifest.name, host_os, required)
