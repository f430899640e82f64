"""Deployment-step orchestration for node.js version selection.

Reads the working tree, resolves the runtime, writes the diagnostic trace to
the build log and maps the resolution to a deployment status.
"""

from __future__ import annotations

import logging
from typing import List, Optional, TextIO

from common.logging_utils import Timer, extra_context, is_debug_enabled
from .models import DeployStatus, DeploymentOutcome, Failed, Selected
from .parser import read_working_tree
from .registry import RuntimeRegistry
from .resolvers.node import NodeVersionResolver

logger = logging.getLogger(__name__)


class DeploymentLog:
    """Append-only build log.

    Lines are kept in order and mirrored to ``stream`` when one is given.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._lines: List[str] = []
        self._stream = stream

    def write(self, line: str) -> None:
        self._lines.append(line)
        logger.debug("build log: %s", line)
        if self._stream is not None:
            self._stream.write(line + "\n")
            self._stream.flush()

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines)


def select_node_version(
    working_tree: str,
    registry: RuntimeRegistry,
    log: Optional[DeploymentLog] = None,
    resolver: Optional[NodeVersionResolver] = None,
) -> DeploymentOutcome:
    """Run node.js version selection for one deployment attempt.

    Args:
        working_tree: Checked-out repository root
        registry: Installed runtimes and host default
        log: Build log sink; a private one is used when omitted
        resolver: Resolver to apply; the standard rule chain by default

    Returns:
        DeploymentOutcome with SUCCESS for skipped or selected, FAILED otherwise
    """
    log = log if log is not None else DeploymentLog()
    resolver = resolver or NodeVersionResolver()

    with Timer() as t:
        manifest, override = read_working_tree(working_tree)
        resolution, trace = resolver.resolve(
            manifest, override, registry.list_available(), registry.default_version()
        )

    failed = isinstance(resolution, Failed)
    for line in trace:
        log.write(line)

    status = DeployStatus.FAILED if failed else DeployStatus.SUCCESS
    executable = None
    if isinstance(resolution, Selected):
        executable = registry.executable_path(resolution.version)

    if is_debug_enabled(logger):
        logger.debug(
            "Node version selection finished",
            extra=extra_context(
                event="function_exit",
                component="service",
                action="select_node_version",
                target=working_tree,
                outcome=status.value,
                duration_ms=t.duration_ms(),
            ),
        )
    return DeploymentOutcome(
        status=status, resolution=resolution, trace=trace, executable_path=executable
    )
