"""Readers for the deployment-time files that drive node.js version selection.

Parsing is lenient: a file that exists but cannot be decoded counts as
present with no recognized fields. Nothing here raises for repository
content.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Optional, Tuple

import yaml

from constants import Constants
from .models import ManifestConfig, OverrideConfig

logger = logging.getLogger(__name__)

_COMMAND_LINE_RE = re.compile(
    r"^{key}\s*:(.*)$".format(key=re.escape(Constants.NODE_PROCESS_COMMAND_LINE_KEY)),
    re.MULTILINE,
)
_QUOTED_RE = re.compile(r"""^(['"])(.*?)\1(?:\s+#.*)?$""")


def _strip_scalar(value: str) -> str:
    """Trim whitespace, a trailing comment and matching quotes from a raw scalar."""
    value = value.strip()
    m = _QUOTED_RE.match(value)
    if m:
        return m.group(2)
    return re.sub(r"\s+#.*$", "", value)


def parse_package_json(text: str) -> ManifestConfig:
    """Extract the engines.node constraint from package.json content.

    Args:
        text: Raw file content

    Returns:
        ManifestConfig, with engines_node_constraint None when not usable
    """
    try:
        data = json.loads(text.lstrip("\ufeff"))
    except (ValueError, RecursionError) as e:
        logger.warning("Failed to parse %s: %s", Constants.PACKAGE_JSON_FILE, e)
        return ManifestConfig()

    if not isinstance(data, dict):
        return ManifestConfig()
    engines = data.get("engines")
    if not isinstance(engines, dict):
        return ManifestConfig()
    node = engines.get("node")
    if not isinstance(node, str) or not node.strip():
        return ManifestConfig()
    return ManifestConfig(engines_node_constraint=node.strip())


def _fallback_command_line(text: str) -> Optional[str]:
    m = _COMMAND_LINE_RE.search(text)
    if not m:
        return None
    return _strip_scalar(m.group(1))


def parse_iisnode_yml(text: str) -> OverrideConfig:
    """Extract nodeProcessCommandLine from iisnode.yml content.

    Unquoted Windows paths inside double quotes are not valid YAML, so a
    document that fails to load is scanned line by line for the key instead.
    """
    key = Constants.NODE_PROCESS_COMMAND_LINE_KEY
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.debug("iisnode.yml is not valid YAML (%s), scanning lines", e)
        return OverrideConfig(node_process_command_line=_fallback_command_line(text))
    except RecursionError:
        logger.warning("Failed to parse %s: nesting too deep", Constants.IISNODE_YML_FILE)
        return OverrideConfig(node_process_command_line=_fallback_command_line(text))

    if not isinstance(data, dict) or key not in data:
        return OverrideConfig()
    value = data[key]
    return OverrideConfig(node_process_command_line="" if value is None else str(value))


def _read_text(path: str) -> Optional[str]:
    """Return file content, None if missing, and '' if it exists but is unreadable."""
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return ""


def read_working_tree(path: str) -> Tuple[Optional[ManifestConfig], Optional[OverrideConfig]]:
    """Load package.json and iisnode.yml from a deployment working tree.

    Args:
        path: Root of the checked-out repository

    Returns:
        Tuple of (manifest or None, override or None); None means the file is absent
    """
    manifest = None
    override = None

    pkg_text = _read_text(os.path.join(path, Constants.PACKAGE_JSON_FILE))
    if pkg_text is not None:
        manifest = parse_package_json(pkg_text)

    yml_text = _read_text(os.path.join(path, Constants.IISNODE_YML_FILE))
    if yml_text is not None:
        override = parse_iisnode_yml(yml_text)

    logger.debug(
        "Working tree %s: package.json %s, iisnode.yml %s",
        path,
        "present" if manifest is not None else "absent",
        "present" if override is not None else "absent",
    )
    return manifest, override
