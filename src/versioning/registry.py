"""Host-side catalog of installed node.js runtimes."""

from __future__ import annotations

import logging
import os
from typing import Dict, Iterable, List, Optional

import semantic_version

from constants import Constants
from .models import AvailableVersions, RegistryError

logger = logging.getLogger(__name__)


def parse_runtime_version(value: str) -> Optional[semantic_version.Version]:
    """Parse an installed runtime version, accepting a leading 'v'.

    Returns None for anything that is not a full semantic version.
    """
    text = str(value).strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None


class RuntimeRegistry:
    """Immutable snapshot of installed runtimes plus the host default.

    When no default is configured the highest installed version is used.
    """

    def __init__(
        self,
        versions: Iterable[str],
        default: Optional[str] = None,
        root: Optional[str] = None,
    ):
        parsed: List[semantic_version.Version] = []
        self._names: Dict[semantic_version.Version, str] = {}
        for v in versions:
            ver = parse_runtime_version(v)
            if ver is None:
                logger.debug("Ignoring runtime entry that is not a semantic version: %r", v)
                continue
            if ver not in parsed:
                parsed.append(ver)
                self._names[ver] = str(v).strip()
        parsed.sort()
        self._available: AvailableVersions = tuple(parsed)
        self.root = root

        if default is not None:
            default_ver = parse_runtime_version(default)
            if default_ver is None:
                raise RegistryError(f"Default node.js version '{default}' is not a valid version")
            if default_ver not in self._available:
                logger.warning(
                    "Default node.js version %s is not among the installed versions", default_ver
                )
            self._default = default_ver
        elif self._available:
            self._default = self._available[-1]
        else:
            raise RegistryError(
                "No node.js runtimes are installed and no default version is configured"
            )

    @classmethod
    def from_directory(cls, root: str, default: Optional[str] = None) -> "RuntimeRegistry":
        """Build a registry from a directory holding one subdirectory per version.

        Args:
            root: Directory such as ``C:\\Program Files (x86)\\nodejs``
            default: Optional configured default version

        Returns:
            RuntimeRegistry rooted at ``root``
        """
        if not os.path.isdir(root):
            raise RegistryError(f"Runtimes directory not found: {root}")
        names = [
            name for name in sorted(os.listdir(root))
            if os.path.isdir(os.path.join(root, name))
        ]
        return cls(names, default=default, root=root)

    def list_available(self) -> AvailableVersions:
        """Installed versions in ascending order."""
        return self._available

    def default_version(self) -> semantic_version.Version:
        """The version used whenever automatic selection cannot pick one."""
        return self._default

    def executable_path(self, version: semantic_version.Version) -> Optional[str]:
        """Location of the runtime executable for directory-backed registries."""
        if self.root is None:
            return None
        return os.path.join(self.root, self._names.get(version, str(version)), Constants.NODE_EXECUTABLE)

    def __repr__(self) -> str:
        versions = ", ".join(str(v) for v in self._available)
        return f"RuntimeRegistry(available=[{versions}], default={self._default})"
