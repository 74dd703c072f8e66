"""
FetchedArtifact — a downloaded file waiting to be verified and installed.

Created by the fetcher inside a temporary directory and handed to the
verifier/installer.  It never outlives the fetch context that owns
the directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from brewkit.core.models.manifest import Architecture


@dataclass(frozen=True)
class FetchedArtifact:
    path: Path
    url: str
    architecture: Architecture
    size_bytes: int
    sha256: str

    @property
    def filename(self) -> str:
        return self.path.name
