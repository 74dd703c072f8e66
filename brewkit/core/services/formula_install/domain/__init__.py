"""
L1 Domain — ``__init__.py`` re-exports pure helpers.

No I/O, no subprocess, no network.
"""

from brewkit.core.services.formula_install.domain.download_helpers import (  # noqa: F401
    _archive_suffix,
    _fmt_size,
    _url_filename,
)
from brewkit.core.services.formula_install.domain.selection import (  # noqa: F401
    check_platform,
    select_variant,
)
