"""
Installer settings — where binaries go and how downloads are bounded.

Values are resolved in precedence order:
    CLI flag  >  BREWKIT_* env var  >  default
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field

from brewkit.core.services.formula_install.data.constants import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_DOWNLOAD_BYTES,
)

logger = logging.getLogger(__name__)

ENV_BIN_DIR = "BREWKIT_BIN_DIR"
ENV_LOCK_DIR = "BREWKIT_LOCK_DIR"
ENV_TMP_DIR = "BREWKIT_TMP_DIR"
ENV_FETCH_TIMEOUT = "BREWKIT_FETCH_TIMEOUT"
ENV_MAX_DOWNLOAD_BYTES = "BREWKIT_MAX_DOWNLOAD_BYTES"
ENV_FORMULA_PATH = "BREWKIT_FORMULA_PATH"


class ConfigError(Exception):
    """Raised when installer settings are invalid."""


def _default_bin_dir() -> Path:
    return Path("~/.local/bin").expanduser()


def _default_lock_dir() -> Path:
    return Path("~/.cache/brewkit/locks").expanduser()


class InstallerSettings(BaseModel):
    """Resolved settings for one invocation."""

    bin_dir: Path = Field(default_factory=_default_bin_dir)
    lock_dir: Path = Field(default_factory=_default_lock_dir)
    tmp_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_download_bytes: int = DEFAULT_MAX_DOWNLOAD_BYTES
    formula_dirs: list[Path] = Field(default_factory=list)


def _positive(name: str, raw: str, cast: type) -> float | int:
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(
    env: Mapping[str, str] | None = None,
    *,
    bin_dir: str | Path | None = None,
    fetch_timeout: float | None = None,
) -> InstallerSettings:
    """Build settings from the environment plus explicit overrides.

    Args:
        env: Environment mapping (default: ``os.environ``).
        bin_dir: Overrides ``BREWKIT_BIN_DIR``.
        fetch_timeout: Overrides ``BREWKIT_FETCH_TIMEOUT``.

    Raises:
        ConfigError: A numeric setting is malformed or not positive.
    """
    env = os.environ if env is None else env
    values: dict = {}

    raw_bin = bin_dir or env.get(ENV_BIN_DIR)
    if raw_bin:
        values["bin_dir"] = Path(raw_bin).expanduser()
    if env.get(ENV_LOCK_DIR):
        values["lock_dir"] = Path(env[ENV_LOCK_DIR]).expanduser()
    if env.get(ENV_TMP_DIR):
        values["tmp_dir"] = Path(env[ENV_TMP_DIR]).expanduser()

    if fetch_timeout is not None:
        if fetch_timeout <= 0:
            raise ConfigError(f"fetch timeout must be positive, got {fetch_timeout}")
        values["fetch_timeout"] = fetch_timeout
    elif env.get(ENV_FETCH_TIMEOUT):
        values["fetch_timeout"] = _positive(ENV_FETCH_TIMEOUT, env[ENV_FETCH_TIMEOUT], float)

    if env.get(ENV_MAX_DOWNLOAD_BYTES):
        values["max_download_bytes"] = _positive(
            ENV_MAX_DOWNLOAD_BYTES, env[ENV_MAX_DOWNLOAD_BYTES], int,
        )

    extra = env.get(ENV_FORMULA_PATH, "")
    values["formula_dirs"] = [
        Path(p).expanduser() for p in extra.split(os.pathsep) if p.strip()
    ]

    settings = InstallerSettings(**values)
    logger.debug("Settings: %s", settings.model_dump(mode="json"))
    return settings
