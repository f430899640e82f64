"""Tests for the installed runtime registry."""

import os

import pytest
import semantic_version

from versioning.models import RegistryError
from versioning.registry import RuntimeRegistry, parse_runtime_version


class TestRuntimeRegistry:
    """Test registry construction from explicit versions."""

    def test_sorted_and_deduplicated(self):
        reg = RuntimeRegistry(["0.10.0", "0.8.2", "v0.8.2", "0.6.20"], default="0.8.2")
        assert [str(v) for v in reg.list_available()] == ["0.6.20", "0.8.2", "0.10.0"]

    def test_invalid_entries_skipped(self):
        reg = RuntimeRegistry(["0.8.2", "npm", "0.8", "latest"])
        assert [str(v) for v in reg.list_available()] == ["0.8.2"]

    def test_default_falls_back_to_highest(self):
        reg = RuntimeRegistry(["0.6.20", "0.10.0", "0.8.2"])
        assert str(reg.default_version()) == "0.10.0"

    def test_configured_default(self):
        reg = RuntimeRegistry(["0.6.20", "0.8.2"], default="v0.6.20")
        assert reg.default_version() == semantic_version.Version("0.6.20")

    def test_invalid_default_raises(self):
        with pytest.raises(RegistryError):
            RuntimeRegistry(["0.8.2"], default="stable")

    def test_nothing_installed_and_no_default_raises(self):
        with pytest.raises(RegistryError):
            RuntimeRegistry([])

    def test_snapshot_is_immutable(self):
        reg = RuntimeRegistry(["0.8.2"])
        assert isinstance(reg.list_available(), tuple)

    def test_no_executable_without_root(self):
        reg = RuntimeRegistry(["0.8.2"])
        assert reg.executable_path(reg.default_version()) is None


class TestFromDirectory:
    """Test discovery of runtimes installed one directory per version."""

    def test_discovers_version_directories(self, tmp_path):
        for name in ("0.6.20", "v0.8.2", "npm", "0.10.0"):
            (tmp_path / name).mkdir()
        (tmp_path / "0.12.0").write_text("not a directory")

        reg = RuntimeRegistry.from_directory(str(tmp_path), default="0.8.2")

        assert [str(v) for v in reg.list_available()] == ["0.6.20", "0.8.2", "0.10.0"]
        assert reg.executable_path(semantic_version.Version("0.8.2")) == os.path.join(
            str(tmp_path), "v0.8.2", "node.exe"
        )

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(RegistryError):
            RuntimeRegistry.from_directory(str(tmp_path / "missing"))


@pytest.mark.parametrize("value,expected", [
    ("0.8.2", "0.8.2"),
    (" v0.8.2 ", "0.8.2"),
    ("V1.0.0-rc.1", "1.0.0-rc.1"),
    ("0.8", None),
    ("", None),
])
def test_parse_runtime_version(value, expected):
    parsed = parse_runtime_version(value)
    assert (str(parsed) if parsed else None) == expected
