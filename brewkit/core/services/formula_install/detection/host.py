"""
L3 Detection — host CPU architecture and operating system.

Evaluated at install time on every run; nothing is cached.
"""

from __future__ import annotations

import logging
import platform

from brewkit.core.models.manifest import Architecture
from brewkit.core.services.formula_install.data.constants import _IARCH_MAP, _OS_MAP

logger = logging.getLogger(__name__)


def detect_architecture() -> str:
    """Return the host architecture as a tag (``amd64``, ``arm64``, ...).

    Unknown machine names come back lowercased but otherwise untouched
    so that error messages show what the host actually reported.
    """
    machine = platform.machine().lower()
    arch = _IARCH_MAP.get(machine, machine)
    logger.debug("Host machine %r → architecture %r", machine, arch)
    return arch


def detect_os() -> str:
    """Return the host OS as a manifest name (``macos``, ``linux``, ...)."""
    system = platform.system().lower()
    return _OS_MAP.get(system, system)


def resolve_architecture(override: str | None = None) -> tuple[str, Architecture | None]:
    """Resolve the architecture to install for.

    Returns ``(name, tag)`` where ``name`` is what was detected (or
    requested) and ``tag`` is the matching ``Architecture`` or None
    when the name is outside the closed set.
    """
    if override:
        raw = override.strip().lower()
        name = _IARCH_MAP.get(raw, raw)
    else:
        name = detect_architecture()
    return name, Architecture.from_name(name)
