"""Data models for node.js runtime version selection."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import semantic_version


class NodeSelectError(Exception):
    """Base error for host-side failures (never raised for app input)."""


class RegistryError(NodeSelectError):
    """Raised when the runtime registry cannot be built from host configuration."""


class DeployStatus(Enum):
    """Pipeline-visible deployment states."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ManifestConfig:
    """What package.json contributes; exists only when the file exists."""
    engines_node_constraint: Optional[str] = None


@dataclass(frozen=True)
class OverrideConfig:
    """What iisnode.yml contributes; exists only when the file exists.

    ``node_process_command_line`` is None when the key is missing and a
    (possibly empty) string when the key is present.
    """
    node_process_command_line: Optional[str] = None

    @property
    def overrides(self) -> bool:
        return self.node_process_command_line is not None


# Installed versions in ascending precedence order.
AvailableVersions = Tuple[semantic_version.Version, ...]

# Ordered build log lines for a single resolution.
DiagnosticTrace = Tuple[str, ...]


@dataclass(frozen=True)
class Skipped:
    """Automatic selection does not apply."""
    message: str


@dataclass(frozen=True)
class Selected:
    """A runtime version was chosen."""
    version: semantic_version.Version
    message: str

    @property
    def runtime_version(self) -> str:
        """Version string as reported by the running runtime, e.g. ``v0.8.2``."""
        return f"v{self.version}"


@dataclass(frozen=True)
class Failed:
    """No installed runtime satisfies the application's constraint."""
    reason: str

    @property
    def message(self) -> str:
        return self.reason


Resolution = Union[Skipped, Selected, Failed]


@dataclass(frozen=True)
class DeploymentOutcome:
    """Resolution mapped to a deployment status, plus the emitted trace."""
    status: DeployStatus
    resolution: Resolution
    trace: DiagnosticTrace = field(default_factory=tuple)
    executable_path: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == DeployStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view used for JSON export."""
        res = self.resolution
        data: Dict[str, Any] = {
            "status": self.status.value,
            "resolution": type(res).__name__.lower(),
            "selected_version": None,
            "runtime_version": None,
            "executable_path": self.executable_path,
            "error": None,
            "trace": list(self.trace),
        }
        if isinstance(res, Selected):
            data["selected_version"] = str(res.version)
            data["runtime_version"] = res.runtime_version
        elif isinstance(res, Failed):
            data["error"] = res.reason
        return data
