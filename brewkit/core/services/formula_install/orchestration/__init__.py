"""
L5 Orchestration — ``__init__.py`` re-exports top-level coordinators.

These are the entry points that external code calls.
"""

from brewkit.core.services.formula_install.orchestration.orchestrator import (  # noqa: F401
    InstallReport,
    InstallRun,
    InstallStage,
    install_formula,
    report_caveats,
    termination_guard,
)
