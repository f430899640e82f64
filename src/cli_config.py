"""Host configuration for the runtime registry.

Layers the config file, environment and CLI flags onto ``Constants``
(CLI highest), then builds the ``RuntimeRegistry`` from the result.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants
from versioning.registry import RuntimeRegistry

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the ``runtimes`` section of a YAML or JSON config file.

    Missing or unreadable files are logged and yield an empty mapping.

    Args:
        config_path: Path to a .yml/.yaml/.json file

    Returns:
        The runtimes section, or {} when unavailable
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}

    if not isinstance(data, dict):
        return {}
    section = data.get("runtimes", data)
    return section if isinstance(section, dict) else {}


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply a loaded runtimes section to Constants."""
    if cfg.get("directory"):
        Constants.RUNTIMES_DIR = str(cfg["directory"])  # type: ignore[assignment]
    versions = cfg.get("versions")
    if isinstance(versions, list):
        Constants.AVAILABLE_VERSIONS = [str(v) for v in versions]
    elif versions is not None:
        logger.warning("Ignoring runtimes.versions: expected a list, got %s", type(versions).__name__)
    if cfg.get("default_version") is not None:
        Constants.DEFAULT_NODE_VERSION = str(cfg["default_version"])  # type: ignore[assignment]


def apply_env_overrides() -> None:
    """Apply NODESELECT_* environment variables to Constants."""
    runtimes_dir = os.environ.get(Constants.ENV_RUNTIMES_DIR, "").strip()
    if runtimes_dir:
        Constants.RUNTIMES_DIR = runtimes_dir  # type: ignore[assignment]
    default = os.environ.get(Constants.ENV_DEFAULT_VERSION, "").strip()
    if default:
        Constants.DEFAULT_NODE_VERSION = default  # type: ignore[assignment]


def apply_cli_overrides(args) -> None:
    """Apply CLI flags to Constants; these take precedence over everything else."""
    if getattr(args, "RUNTIMES_DIR", None):
        Constants.RUNTIMES_DIR = args.RUNTIMES_DIR
    if getattr(args, "AVAILABLE", None):
        Constants.AVAILABLE_VERSIONS = list(args.AVAILABLE)
    if getattr(args, "DEFAULT_VERSION", None):
        Constants.DEFAULT_NODE_VERSION = args.DEFAULT_VERSION


def configure_runtimes(args) -> None:
    """Resolve host runtime settings: config file, then environment, then CLI."""
    apply_config(load_config(getattr(args, "CONFIG", None)))
    apply_env_overrides()
    apply_cli_overrides(args)


def build_registry() -> RuntimeRegistry:
    """Build the registry from the effective settings in Constants.

    An explicit version list takes precedence over scanning the runtimes
    directory, but the directory still locates executables.

    Raises:
        RegistryError: When the settings do not describe any usable runtime
    """
    if Constants.AVAILABLE_VERSIONS:
        return RuntimeRegistry(
            Constants.AVAILABLE_VERSIONS,
            default=Constants.DEFAULT_NODE_VERSION,
            root=Constants.RUNTIMES_DIR,
        )
    if Constants.RUNTIMES_DIR:
        return RuntimeRegistry.from_directory(
            Constants.RUNTIMES_DIR, default=Constants.DEFAULT_NODE_VERSION
        )
    return RuntimeRegistry([], default=Constants.DEFAULT_NODE_VERSION)
