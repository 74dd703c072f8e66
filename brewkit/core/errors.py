"""
Installer errors — one exception type per failure kind.

Every error is terminal for the current invocation.  Nothing retries
automatically; the caller (CLI or use case) surfaces ``str(error)``
to the user verbatim, so messages carry the detail needed to diagnose
the failure (architecture, URL, checksums, paths).
"""

from __future__ import annotations

from typing import Any


class InstallerError(Exception):
    """Base class for all formula installation failures."""

    kind = "installer_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, **self.context}


class MalformedManifest(InstallerError):
    """The manifest is missing, unreadable, or fails validation."""

    kind = "malformed_manifest"

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"Malformed manifest {source}: {detail}", source=source, detail=detail)
        self.source = source
        self.detail = detail


class UnsupportedArchitecture(InstallerError):
    """The host architecture has no matching variant in the manifest."""

    kind = "unsupported_architecture"

    def __init__(self, package: str, detected: str, supported: list[str]) -> None:
        listed = ", ".join(supported) or "none"
        super().__init__(
            f"{package} has no download for architecture '{detected}' "
            f"(supported: {listed})",
            package=package,
            detected=detected,
            supported=supported,
        )
        self.detected = detected
        self.supported = supported


class UnsupportedPlatform(InstallerError):
    """The manifest requires a different operating system."""

    kind = "unsupported_platform"

    def __init__(self, package: str, detected: str, required: str) -> None:
        super().__init__(
            f"{package} requires {required}, but this host is {detected}",
            package=package,
            detected=detected,
            required=required,
        )
        self.detected = detected
        self.required = required


class FetchError(InstallerError):
    """Download failed: transport error, bad status, timeout, or size limit."""

    kind = "fetch_error"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Download failed for {url}: {reason}", url=url, reason=reason)
        self.url = url
        self.reason = reason


class ChecksumMismatch(InstallerError):
    """The downloaded artifact does not match the manifest's sha256."""

    kind = "checksum_mismatch"

    def __init__(self, url: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Checksum mismatch for {url}: expected sha256 {expected}, got {actual}",
            url=url,
            expected=expected,
            actual=actual,
        )
        self.url = url
        self.expected = expected
        self.actual = actual


class InstallError(InstallerError):
    """Placing the binary into the bin directory failed."""

    kind = "install_error"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Install failed for {path}: {reason}", path=path, reason=reason)
        self.path = path
        self.reason = reason


class InstallInterrupted(InstallerError):
    """A termination signal arrived while the install was running."""

    kind = "interrupted"

    def __init__(self, signum: int) -> None:
        super().__init__(f"Installation interrupted by signal {signum}", signum=signum)
        self.signum = signum
