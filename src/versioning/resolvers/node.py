"""node.js runtime version resolver using npm semantic versioning rules."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

import semantic_version

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from ..models import (
    AvailableVersions,
    DiagnosticTrace,
    Failed,
    ManifestConfig,
    OverrideConfig,
    Resolution,
    Selected,
    Skipped,
)

logger = logging.getLogger(__name__)

_OPERATOR_SPACE_RE = re.compile(r"(<=|>=|<|>|=|~|\^)\s+")


@dataclass(frozen=True)
class ResolutionInput:
    """Everything a single resolution looks at."""
    manifest: Optional[ManifestConfig]
    override: Optional[OverrideConfig]
    available: AvailableVersions
    default: semantic_version.Version


@dataclass(frozen=True)
class Rule:
    """One step of the priority chain: the first rule whose predicate holds wins."""
    name: str
    applies: Callable[[ResolutionInput], bool]
    decide: Callable[[ResolutionInput], Resolution]


def _normalize_spec(spec_str: str) -> str:
    """Normalize npm range syntax (hyphen, x-ranges) into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # Hyphen ranges: "1.2.3 - 1.4.5" => ">=1.2.3,<=1.4.5"
    m = re.match(r'^\s*([0-9A-Za-z\.\-\+]+)\s+-\s+([0-9A-Za-z\.\-\+]+)\s*$', s)
    if m:
        return f">={m.group(1)},<={m.group(2)}"

    s2 = s.replace('*', 'x').lower()
    m = re.match(r'^\s*(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*(\d+)(?:\.x)?\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    return spec_str


def parse_constraint(spec_str: str):
    """Parse an engines.node range; returns None when it is not a valid range."""
    # npm tolerates ">= 0.8.0"; NpmSpec wants the operator attached
    attached = _OPERATOR_SPACE_RE.sub(r"\1", spec_str.strip())
    for candidate in dict.fromkeys((spec_str, attached)):
        try:
            return semantic_version.NpmSpec(candidate)
        except ValueError:
            continue
    try:
        return semantic_version.SimpleSpec(_normalize_spec(spec_str))
    except ValueError:
        return None


def max_satisfying(
    spec_str: str, candidates: Iterable[semantic_version.Version]
) -> Optional[semantic_version.Version]:
    """Pick the highest candidate satisfying an npm range, or None."""
    spec = parse_constraint(spec_str)
    if spec is None:
        logger.debug("Constraint %r is not a valid version range", spec_str)
        return None

    matching: List[semantic_version.Version] = [v for v in candidates if spec.match(v)]
    if not matching:
        return None
    return max(matching)


def _available_list(available: AvailableVersions) -> str:
    return ", ".join(str(v) for v in available)


def _select_constraint(inp: ResolutionInput) -> Resolution:
    constraint = inp.manifest.engines_node_constraint  # type: ignore[union-attr]
    match = max_satisfying(constraint, inp.available)
    if match is None:
        return Failed(
            reason=Constants.MSG_NO_MATCH.format(
                constraint=constraint, available=_available_list(inp.available)
            )
        )
    return Selected(version=match, message=Constants.MSG_SELECTED.format(version=match))


def always(inp: ResolutionInput) -> bool:
    """Predicate of the terminal rule; every chain must end with it."""
    return True


RULES: Tuple[Rule, ...] = (
    Rule(
        name="override",
        applies=lambda inp: inp.override is not None and inp.override.overrides,
        decide=lambda inp: Skipped(message=Constants.MSG_OVERRIDE),
    ),
    Rule(
        name="no_package_json",
        applies=lambda inp: inp.manifest is None,
        decide=lambda inp: Selected(
            version=inp.default,
            message=Constants.MSG_NO_PACKAGE_JSON.format(default=inp.default),
        ),
    ),
    Rule(
        name="no_engine_constraint",
        applies=lambda inp: inp.manifest is not None and not inp.manifest.engines_node_constraint,
        decide=lambda inp: Selected(
            version=inp.default,
            message=Constants.MSG_NO_CONSTRAINT.format(default=inp.default),
        ),
    ),
    Rule(
        name="engine_constraint",
        applies=always,
        decide=_select_constraint,
    ),
)


class NodeVersionResolver:
    """Applies the ordered selection rules to one deployment's inputs."""

    def __init__(self, rules: Tuple[Rule, ...] = RULES):
        if not rules or rules[-1].applies is not always:
            raise ValueError("the last selection rule must apply unconditionally")
        self.rules = tuple(rules)

    def resolve(
        self,
        manifest: Optional[ManifestConfig],
        override: Optional[OverrideConfig],
        available: AvailableVersions,
        default: semantic_version.Version,
    ) -> Tuple[Resolution, DiagnosticTrace]:
        """Decide which runtime the application runs under.

        Args:
            manifest: package.json contents, None when the file is absent
            override: iisnode.yml contents, None when the file is absent
            available: Installed runtime versions
            default: Host default runtime version

        Returns:
            Tuple of (resolution, diagnostic trace)
        """
        inp = ResolutionInput(
            manifest=manifest, override=override, available=tuple(available), default=default
        )
        for rule in self.rules:
            if not rule.applies(inp):
                continue
            resolution = rule.decide(inp)
            if is_debug_enabled(logger):
                logger.debug(
                    "Node version rule matched",
                    extra=extra_context(
                        event="rule_match",
                        component="node_resolver",
                        action=rule.name,
                        outcome=type(resolution).__name__.lower(),
                    ),
                )
            return resolution, (resolution.message,)
        # unreachable: __init__ guarantees a terminal rule
        raise AssertionError("no selection rule applied")


def resolve(
    manifest: Optional[ManifestConfig],
    override: Optional[OverrideConfig],
    available: AvailableVersions,
    default: semantic_version.Version,
) -> Tuple[Resolution, DiagnosticTrace]:
    """Module-level shortcut for ``NodeVersionResolver().resolve``."""
    return NodeVersionResolver().resolve(manifest, override, available, default)
