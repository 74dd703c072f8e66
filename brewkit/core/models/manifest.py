"""
Formula manifest — the declarative description of one installable binary.

Loaded from a YAML formula file, this says what to download for each
CPU architecture, how to check it, where to put it, and what to tell
the user afterwards.  Manifests are read-only once loaded.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from brewkit.core.services.formula_install.data.constants import _IARCH_MAP

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")


class Architecture(str, Enum):
    """Closed set of CPU architecture tags a manifest can target."""

    AMD64 = "amd64"
    ARM64 = "arm64"
    I386 = "i386"
    ARMHF = "armhf"

    @classmethod
    def from_name(cls, name: str) -> Architecture | None:
        """Normalize a raw machine or manifest name, or None if unknown."""
        tag = _IARCH_MAP.get(name.strip().lower())
        return cls(tag) if tag else None


class InstallActionType(str, Enum):
    COPY_RENAME = "copy_rename"


class ArchitectureVariant(BaseModel):
    """Download location and expected digest for one architecture."""

    model_config = ConfigDict(frozen=True)

    url: str
    sha256: str

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url must not be empty")
        return value

    @field_validator("sha256")
    @classmethod
    def _normalize_sha256(cls, value: str) -> str:
        value = value.strip().lower()
        if value.startswith("sha256:"):
            value = value[len("sha256:"):]
        if not _SHA256_RE.match(value):
            raise ValueError("sha256 must be 64 hexadecimal characters")
        return value


class InstallAction(BaseModel):
    """Copy one file into the bin directory under a (possibly new) name.

    ``source`` is the member to pick out of an archive download; raw
    binary downloads ignore it.  ``target`` defaults to the formula name.
    """

    model_config = ConfigDict(frozen=True)

    type: InstallActionType = InstallActionType.COPY_RENAME
    source: str | None = None
    target: str | None = None

    @field_validator("source", "target")
    @classmethod
    def _plain_filename(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value or "/" in value or value in (".", ".."):
            raise ValueError(f"'{value}' is not a plain file name")
        return value


class PlatformRequirement(BaseModel):
    """Operating-system constraint (``depends_on``)."""

    model_config = ConfigDict(frozen=True)

    os: str | None = None

    @field_validator("os")
    @classmethod
    def _lower(cls, value: str | None) -> str | None:
        return value.strip().lower() if value else None


class PackageManifest(BaseModel):
    """Root formula model.

    Only ``name``, ``version`` and at least one architecture variant
    are required.  Variant keys go through the architecture table, so
    ``x86_64`` and ``amd64`` address the same entry.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    desc: str = ""
    homepage: str = ""
    depends_on: PlatformRequirement = Field(default_factory=PlatformRequirement)
    variants: dict[Architecture, ArchitectureVariant]
    install_action: InstallAction = Field(default_factory=InstallAction)
    caveats: str | None = None

    @field_validator("name", "version", mode="before")
    @classmethod
    def _required_text(cls, value: object, info: ValidationInfo) -> object:
        # YAML turns unquoted versions like 0.10 into floats, losing digits.
        if isinstance(value, float):
            raise ValueError(f"got number {value!r}; quote the {info.field_name}")
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be empty")
        return value.strip() if isinstance(value, str) else value

    @field_validator("variants", mode="before")
    @classmethod
    def _normalize_variant_keys(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        if not value:
            raise ValueError("at least one architecture variant is required")
        normalized: dict[str, object] = {}
        for key, variant in value.items():
            arch = Architecture.from_name(str(key))
            if arch is None:
                raise ValueError(f"unknown architecture '{key}'")
            if arch.value in normalized:
                raise ValueError(f"duplicate variant for architecture '{arch.value}'")
            normalized[arch.value] = variant
        return normalized

    @field_validator("caveats")
    @classmethod
    def _blank_caveats(cls, value: str | None) -> str | None:
        return value if value and value.strip() else None

    @property
    def install_name(self) -> str:
        """File name the binary gets in the bin directory."""
        return self.install_action.target or self.name

    def supported_architectures(self) -> list[str]:
        return sorted(a.value for a in self.variants)

    def variant_for(self, arch: Architecture) -> ArchitectureVariant | None:
        """Look up the variant for an exact architecture tag."""
        return self.variants.get(arch)
