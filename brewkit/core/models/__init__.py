"""
Domain models — Pydantic types for formula manifests.

All models are re-exported here for convenient access:

    from brewkit.core.models import PackageManifest, Architecture, FetchedArtifact
"""

from brewkit.core.models.artifact import FetchedArtifact
from brewkit.core.models.manifest import (
    Architecture,
    ArchitectureVariant,
    InstallAction,
    InstallActionType,
    PackageManifest,
    PlatformRequirement,
)

__all__ = [
    # artifact.py
    "FetchedArtifact",
    # manifest.py
    "Architecture",
    "ArchitectureVariant",
    "InstallAction",
    "InstallActionType",
    "PackageManifest",
    "PlatformRequirement",
]
