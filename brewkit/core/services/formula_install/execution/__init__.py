"""
L4 Execution — ``__init__.py`` re-exports fetch, verify, install.

These functions touch the network and the filesystem.
"""

from brewkit.core.services.formula_install.execution.download import (  # noqa: F401
    fetch_artifact,
)
from brewkit.core.services.formula_install.execution.install import (  # noqa: F401
    extract_member,
    file_sha256,
    install_artifact,
    verify_checksum,
)
from brewkit.core.services.formula_install.execution.lock import (  # noqa: F401
    install_lock,
    lock_path,
)
