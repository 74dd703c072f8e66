"""
Tests for CLI commands — install, info, check, list, and global options.
"""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from brewkit.main import cli


@pytest.fixture
def env(tmp_path: Path) -> dict:
    return {
        "BREWKIT_BIN_DIR": str(tmp_path / "bin"),
        "BREWKIT_LOCK_DIR": str(tmp_path / "locks"),
        "BREWKIT_TMP_DIR": str(tmp_path / "tmp"),
        "BREWKIT_FORMULA_PATH": "",
        "BREWKIT_LOG_LEVEL": "CRITICAL",
    }


@pytest.fixture
def formula_file(tmp_path: Path, formula_data, raw_release: Path) -> Path:
    path = tmp_path / "dts-legacy.yml"
    path.write_text(yaml.safe_dump(formula_data({"arm64": raw_release})))
    return path


class TestCLIGlobal:

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "formula manifests" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInstallCommand:

    def test_install_success(self, formula_file: Path, env: dict, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["install", str(formula_file), "--arch", "arm64"], env=env,
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "bin" / "dts-legacy").is_file()
        assert result.output.count("This is the LEGACY version of DTS") == 1
        assert "Installed dts-legacy 0.18.0" in result.output

    def test_install_bin_dir_flag(self, formula_file: Path, env: dict, tmp_path: Path):
        target = tmp_path / "other-bin"
        result = CliRunner().invoke(
            cli, ["install", str(formula_file), "--arch", "arm64", "--bin-dir", str(target)],
            env=env,
        )
        assert result.exit_code == 0, result.output
        assert (target / "dts-legacy").is_file()
        assert not (tmp_path / "bin").exists()

    def test_install_json(self, formula_file: Path, env: dict):
        result = CliRunner().invoke(
            cli, ["install", str(formula_file), "--arch", "arm64", "--json"], env=env,
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["architecture"] == "arm64"
        assert data["stages"][-1] == "done"
        assert data["caveats"].startswith("This is the LEGACY")

    def test_unsupported_architecture(self, formula_file: Path, env: dict, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["install", str(formula_file), "--arch", "i386"], env=env,
        )
        assert result.exit_code == 1
        assert "no download for architecture 'i386'" in result.output
        assert "LEGACY" not in result.output
        assert not (tmp_path / "bin").exists()

    def test_failure_json(self, formula_file: Path, env: dict):
        result = CliRunner().invoke(
            cli, ["install", str(formula_file), "--arch", "i386", "--json"], env=env,
        )
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["ok"] is False
        assert data["error"]["kind"] == "unsupported_architecture"
        assert data["error"]["stage"] == "fetching"
        assert data["error"]["detected"] == "i386"

    def test_bad_timeout_env(self, formula_file: Path, env: dict):
        env["BREWKIT_FETCH_TIMEOUT"] = "never"
        result = CliRunner().invoke(cli, ["install", str(formula_file)], env=env)
        assert result.exit_code == 1
        assert "BREWKIT_FETCH_TIMEOUT" in result.output

    def test_unknown_formula(self, env: dict):
        result = CliRunner().invoke(cli, ["install", "no-such-formula"], env=env)
        assert result.exit_code == 1
        assert "no formula found" in result.output


class TestInfoCommand:

    def test_bundled_formula(self, env: dict):
        result = CliRunner().invoke(cli, ["info", "dts-legacy", "--arch", "arm64", "--os", "macos"], env=env)
        assert result.exit_code == 0, result.output
        assert "dts-legacy: 0.18.0" in result.output
        assert "dts_darwin_arm64.tar.gz" in result.output
        assert "Installs as: dts-legacy" in result.output

    def test_info_json_unavailable(self, env: dict):
        result = CliRunner().invoke(
            cli, ["info", "dts-legacy", "--arch", "arm64", "--os", "linux", "--json"], env=env,
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["selected_url"] is None
        assert "requires macos" in data["unavailable_reason"]
        assert sorted(data["variants"]) == ["amd64", "arm64"]


class TestCheckCommand:

    def test_valid(self, env: dict):
        result = CliRunner().invoke(cli, ["check", "dts-legacy"], env=env)
        assert result.exit_code == 0
        assert "Formula is valid" in result.output

    def test_invalid(self, tmp_path: Path, env: dict):
        path = tmp_path / "broken.yml"
        path.write_text("name: broken\n")
        result = CliRunner().invoke(cli, ["check", str(path), "--json"], env=env)
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["valid"] is False
        assert any("version" in e for e in data["errors"])

    def test_http_warning(self, tmp_path: Path, env: dict):
        path = tmp_path / "plain.yml"
        path.write_text(yaml.safe_dump({
            "name": "plain",
            "version": "1",
            "variants": {"arm64": {"url": "http://example.com/plain", "sha256": "a" * 64}},
        }))
        result = CliRunner().invoke(cli, ["check", str(path)], env=env)
        assert result.exit_code == 0
        assert "not HTTPS" in result.output


class TestListCommand:

    def test_lists_bundled(self, env: dict):
        result = CliRunner().invoke(cli, ["list", "--json"], env=env)
        assert result.exit_code == 0
        names = [f["name"] for f in json.loads(result.stdout)]
        assert "dts-legacy" in names
