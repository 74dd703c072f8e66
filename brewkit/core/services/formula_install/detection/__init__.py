"""
L3 Detection — ``__init__.py`` re-exports host probes.

These functions READ system state but never WRITE.
"""

from brewkit.core.services.formula_install.detection.host import (  # noqa: F401
    detect_architecture,
    detect_os,
    resolve_architecture,
)
