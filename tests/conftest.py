"""
Shared test fixtures and configuration.
"""

import hashlib
import io
import tarfile
import textwrap
from pathlib import Path

import pytest

from brewkit.core.config.settings import InstallerSettings


def sha256_of(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


BINARY = b"#!/bin/sh\necho dts 0.18.0\n"


@pytest.fixture
def settings(tmp_path: Path) -> InstallerSettings:
    """Settings pointing every directory into tmp_path."""
    tmp_dir = tmp_path / "tmp"
    tmp_dir.mkdir()
    return InstallerSettings(
        bin_dir=tmp_path / "bin",
        lock_dir=tmp_path / "locks",
        tmp_dir=tmp_dir,
        fetch_timeout=5,
        max_download_bytes=1024 * 1024,
    )


@pytest.fixture
def releases_dir(tmp_path: Path) -> Path:
    """Directory standing in for a release download server."""
    path = tmp_path / "releases"
    path.mkdir()
    return path


@pytest.fixture
def raw_release(releases_dir: Path) -> Path:
    """A raw (non-archive) binary release asset."""
    path = releases_dir / "dts_darwin_arm64"
    path.write_bytes(BINARY)
    return path


@pytest.fixture
def tar_release(releases_dir: Path) -> Path:
    """A .tar.gz release asset containing ``dts`` and a README."""
    path = releases_dir / "dts_darwin_arm64.tar.gz"
    with tarfile.open(path, "w:gz") as tf:
        for name, data in (("dts_0.18.0/dts", BINARY), ("dts_0.18.0/README.md", b"readme\n")):
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture
def write_formula(tmp_path: Path):
    """Write a formula YAML file and return its path."""

    def _write(content: str, name: str = "formula.yml") -> Path:
        path = tmp_path / "formulas" / name
        path.parent.mkdir(exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def formula_data():
    """Build a manifest mapping for the given {arch: asset path} pairs."""

    def _build(assets: dict, **overrides) -> dict:
        data = {
            "name": "dts-legacy",
            "version": "0.18.0",
            "variants": {
                arch: {"url": path.as_uri(), "sha256": sha256_of(path.read_bytes())}
                for arch, path in assets.items()
            },
            "install_action": {"type": "copy_rename", "source": "dts", "target": "dts-legacy"},
            "caveats": "This is the LEGACY version of DTS (v0.18.x).\n",
        }
        data.update(overrides)
        return data

    return _build


@pytest.fixture
def binary() -> bytes:
    """Contents of the fake ``dts`` executable inside every release asset."""
    return BINARY
