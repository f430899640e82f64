"""Deployment-level tests for node.js version selection.

Each scenario starts from an app pinned to node 0.8.2 and changes the
working tree the way a git push would.
"""

import dataclasses
import io
import json

import pytest

from versioning.models import DeployStatus, Failed, Selected, Skipped
from versioning.registry import RuntimeRegistry
from versioning.service import DeploymentLog, select_node_version

PINNED_PACKAGE_JSON = {
    "name": "VersionPinnedNodeJsApp",
    "version": "0.0.0",
    "engines": {"node": "0.8.2"},
}


@pytest.fixture
def registry():
    return RuntimeRegistry(["0.6.20", "0.8.2", "0.8.19", "0.10.5"], default="0.6.20")


@pytest.fixture
def repo(tmp_path):
    (tmp_path / "server.js").write_text("require('http').createServer().listen(process.env.PORT);")
    (tmp_path / "package.json").write_text(json.dumps(PINNED_PACKAGE_JSON))
    (tmp_path / "iisnode.yml").write_text("loggingEnabled: false\n")
    return tmp_path


def deploy(repo, registry):
    log = DeploymentLog()
    outcome = select_node_version(str(repo), registry, log)
    return outcome, log


class TestSelectNodeVersion:
    """Scenarios mirroring git deployments of a version pinned app."""

    def test_fallback_with_server_js_only(self, repo, registry):
        (repo / "iisnode.yml").unlink()
        (repo / "package.json").unlink()

        outcome, log = deploy(repo, registry)

        assert outcome.status == DeployStatus.SUCCESS
        assert "The package.json file is not present" in log.text()
        assert str(outcome.resolution.version) == "0.6.20"

    def test_fallback_with_minimal_package_json(self, repo, registry):
        (repo / "iisnode.yml").unlink()
        (repo / "package.json").write_text('{ "name" : "foo", "version": "1.0.0" }')

        outcome, log = deploy(repo, registry)

        assert outcome.status == DeployStatus.SUCCESS
        assert "The package.json file does not specify node.js engine version constraints" in log.text()

    def test_fallback_with_iisnode_yml_lacking_command_line(self, repo, registry):
        (repo / "iisnode.yml").write_text("foo: bar")
        (repo / "package.json").unlink()

        outcome, log = deploy(repo, registry)

        assert outcome.status == DeployStatus.SUCCESS
        assert "The package.json file is not present" in log.text()

    def test_iisnode_yml_command_line_turns_selection_off(self, repo, registry):
        (repo / "iisnode.yml").write_text("nodeProcessCommandLine: bar")

        outcome, log = deploy(repo, registry)

        assert outcome.status == DeployStatus.SUCCESS
        assert isinstance(outcome.resolution, Skipped)
        assert "The iisnode.yml file explicitly sets nodeProcessCommandLine" in log.text()
        assert outcome.executable_path is None

    def test_mismatch_between_available_and_requested(self, repo, registry):
        text = (repo / "package.json").read_text().replace("0.8.2", "0.1.0")
        (repo / "package.json").write_text(text)

        outcome, log = deploy(repo, registry)

        assert outcome.status == DeployStatus.FAILED
        assert isinstance(outcome.resolution, Failed)
        assert "No available node.js version matches application's version constraint of '0.1.0'" in log.text()

    def test_positive_match(self, repo, registry):
        outcome, log = deploy(repo, registry)

        assert outcome.status == DeployStatus.SUCCESS
        assert isinstance(outcome.resolution, Selected)
        assert outcome.resolution.runtime_version == "v0.8.2"
        assert log.lines == ["Selected node.js version 0.8.2. Use package.json file to choose a different version."]


class TestDeploymentLog:
    """Test the build log sink."""

    def test_mirrors_to_stream(self):
        stream = io.StringIO()
        log = DeploymentLog(stream)
        log.write("first")
        log.write("second")
        assert stream.getvalue() == "first\nsecond\n"
        assert log.text() == "first\nsecond"

    def test_lines_are_a_copy(self):
        log = DeploymentLog()
        log.write("only")
        log.lines.append("tampered")
        assert log.lines == ["only"]


def test_outcome_to_dict(tmp_path, repo):
    for name in ("0.8.2", "0.10.5"):
        (tmp_path / "runtimes" / name).mkdir(parents=True)
    registry = RuntimeRegistry.from_directory(str(tmp_path / "runtimes"))

    data = select_node_version(str(repo), registry).to_dict()

    assert data["status"] == "success"
    assert data["resolution"] == "selected"
    assert data["selected_version"] == "0.8.2"
    assert data["runtime_version"] == "v0.8.2"
    assert data["executable_path"].endswith("node.exe")
    assert data["error"] is None
    assert len(data["trace"]) == 1


def test_outcome_is_immutable(repo, registry):
    outcome = select_node_version(str(repo), registry)
    with pytest.raises(dataclasses.FrozenInstanceError):
        outcome.status = DeployStatus.FAILED
