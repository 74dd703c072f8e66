"""
Tests for installer settings — env vars, overrides, validation.
"""

import os
from pathlib import Path

import pytest

from brewkit.core.config.settings import ConfigError, load_settings


class TestLoadSettings:

    def test_defaults(self):
        s = load_settings(env={})
        assert s.bin_dir == Path("~/.local/bin").expanduser()
        assert s.fetch_timeout == 60
        assert s.max_download_bytes == 512 * 1024 * 1024
        assert s.formula_dirs == []

    def test_env_values(self, tmp_path: Path):
        env = {
            "BREWKIT_BIN_DIR": str(tmp_path / "bin"),
            "BREWKIT_LOCK_DIR": str(tmp_path / "locks"),
            "BREWKIT_TMP_DIR": str(tmp_path / "tmp"),
            "BREWKIT_FETCH_TIMEOUT": "12.5",
            "BREWKIT_MAX_DOWNLOAD_BYTES": "1000",
            "BREWKIT_FORMULA_PATH": os.pathsep.join([str(tmp_path / "a"), str(tmp_path / "b")]),
        }
        s = load_settings(env=env)
        assert s.bin_dir == tmp_path / "bin"
        assert s.lock_dir == tmp_path / "locks"
        assert s.tmp_dir == tmp_path / "tmp"
        assert s.fetch_timeout == 12.5
        assert s.max_download_bytes == 1000
        assert s.formula_dirs == [tmp_path / "a", tmp_path / "b"]

    def test_overrides_beat_env(self, tmp_path: Path):
        env = {"BREWKIT_BIN_DIR": "/env/bin", "BREWKIT_FETCH_TIMEOUT": "5"}
        s = load_settings(env=env, bin_dir=tmp_path, fetch_timeout=30)
        assert s.bin_dir == tmp_path
        assert s.fetch_timeout == 30

    @pytest.mark.parametrize("key,value", [
        ("BREWKIT_FETCH_TIMEOUT", "soon"),
        ("BREWKIT_FETCH_TIMEOUT", "0"),
        ("BREWKIT_MAX_DOWNLOAD_BYTES", "-1"),
        ("BREWKIT_MAX_DOWNLOAD_BYTES", "1.5"),
    ])
    def test_invalid_numbers(self, key, value):
        with pytest.raises(ConfigError, match=key):
            load_settings(env={key: value})

    def test_invalid_timeout_override(self):
        with pytest.raises(ConfigError):
            load_settings(env={}, fetch_timeout=0)
