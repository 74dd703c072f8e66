"""
Tests for manifest loading — formula YAML parsing and validation.
"""

from pathlib import Path

import pytest

from brewkit.core.config.loader import (
    BUNDLED_FORMULA_DIR,
    find_formula,
    list_formulas,
    load_manifest,
    parse_manifest,
    resolve_manifest,
)
from brewkit.core.errors import MalformedManifest
from brewkit.core.models import Architecture

VALID = """\
    name: tool
    version: "1.2.3"
    desc: A tool
    variants:
      amd64:
        url: https://example.com/tool_amd64.tar.gz
        sha256: 1111111111111111111111111111111111111111111111111111111111111111
      arm64:
        url: https://example.com/tool_arm64.tar.gz
        sha256: 2222222222222222222222222222222222222222222222222222222222222222
    install_action:
      type: copy_rename
      source: tool
      target: tool-legacy
    caveats: |
      Installed as tool-legacy.
"""


class TestLoadManifest:
    """Tests for load_manifest()."""

    def test_load_valid(self, write_formula):
        m = load_manifest(write_formula(VALID))
        assert m.name == "tool"
        assert m.version == "1.2.3"
        assert m.install_name == "tool-legacy"
        assert m.caveats == "Installed as tool-legacy.\n"
        assert m.variant_for(Architecture.ARM64).url.endswith("tool_arm64.tar.gz")

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(MalformedManifest, match="file not found"):
            load_manifest(tmp_path / "nope.yml")

    def test_invalid_yaml(self, write_formula):
        with pytest.raises(MalformedManifest, match="invalid YAML"):
            load_manifest(write_formula("name: [unclosed\n"))

    def test_not_a_mapping(self, write_formula):
        with pytest.raises(MalformedManifest, match="expected a mapping"):
            load_manifest(write_formula("- just\n- a list\n"))

    @pytest.mark.parametrize("missing", ["name", "version", "variants"])
    def test_missing_required_field(self, write_formula, missing):
        lines = VALID.splitlines(keepends=True)
        kept = []
        skipping = False
        for line in lines:
            stripped = line.strip()
            indent = len(line) - len(line.lstrip())
            if stripped.startswith(f"{missing}:") and indent == 4:
                skipping = True
                continue
            if skipping and indent > 4:
                continue
            skipping = False
            kept.append(line)
        with pytest.raises(MalformedManifest, match=missing):
            load_manifest(write_formula("".join(kept)))

    def test_variant_without_sha256(self, write_formula):
        content = """\
            name: tool
            version: "1"
            variants:
              arm64:
                url: https://example.com/tool
        """
        with pytest.raises(MalformedManifest, match="sha256"):
            load_manifest(write_formula(content))

    def test_variant_without_url(self, write_formula):
        content = """\
            name: tool
            version: "1"
            variants:
              arm64:
                sha256: 2222222222222222222222222222222222222222222222222222222222222222
        """
        with pytest.raises(MalformedManifest, match="url"):
            load_manifest(write_formula(content))

    def test_error_names_the_file(self, write_formula):
        path = write_formula("name: tool\n")
        with pytest.raises(MalformedManifest) as exc:
            load_manifest(path)
        assert str(path) in str(exc.value)
        assert exc.value.kind == "malformed_manifest"

    def test_loader_does_no_network(self, write_formula, monkeypatch):
        def _boom(*a, **kw):
            raise AssertionError("network used")

        monkeypatch.setattr("urllib.request.urlopen", _boom)
        with pytest.raises(MalformedManifest):
            load_manifest(write_formula("name: tool\nversion: '1'\n"))


class TestParseManifest:

    def test_parse_mapping(self):
        m = parse_manifest({
            "name": "x",
            "version": "1",
            "variants": {"arm64": {"url": "https://x/y", "sha256": "c" * 64}},
        })
        assert m.supported_architectures() == ["arm64"]

    def test_parse_none(self):
        with pytest.raises(MalformedManifest):
            parse_manifest(None)


class TestFindFormula:

    def test_by_name(self, write_formula, tmp_path: Path):
        path = write_formula(VALID, name="tool.yml")
        assert find_formula("tool", [tmp_path / "formulas"]) == path

    def test_yaml_suffix(self, write_formula, tmp_path: Path):
        path = write_formula(VALID, name="tool.yaml")
        assert find_formula("tool", [tmp_path / "formulas"]) == path

    def test_by_path(self, write_formula):
        path = write_formula(VALID, name="tool.yml")
        assert find_formula(str(path)) == path

    def test_not_found(self, tmp_path: Path):
        assert find_formula("missing", [tmp_path]) is None

    def test_first_directory_wins(self, tmp_path: Path):
        first, second = tmp_path / "a", tmp_path / "b"
        first.mkdir()
        second.mkdir()
        (first / "tool.yml").write_text("name: a\n")
        (second / "tool.yml").write_text("name: b\n")
        assert find_formula("tool", [first, second]) == first / "tool.yml"
        assert list_formulas([first, second]) == [first / "tool.yml"]

    def test_resolve_unknown_formula(self, tmp_path: Path):
        with pytest.raises(MalformedManifest, match="no formula found"):
            resolve_manifest("missing", [tmp_path])


class TestBundledFormula:
    """The shipped dts-legacy formula."""

    def test_loads(self):
        m = resolve_manifest("dts-legacy", [BUNDLED_FORMULA_DIR])
        assert m.version == "0.18.0"
        assert m.depends_on.os == "macos"
        assert m.install_action.source == "dts"
        assert m.install_name == "dts-legacy"
        assert m.supported_architectures() == ["amd64", "arm64"]
        assert m.variant_for(Architecture.ARM64).sha256 == (
            "ec2988663d99702ca373926c1e186f3d5f0f9935d3db9978274998f3b0cfed73"
        )
        assert "brew install Big-Time-Data/dts/dts" in m.caveats
