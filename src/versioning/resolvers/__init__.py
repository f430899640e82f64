"""Version resolvers for node.js runtime selection."""

from .node import RULES, NodeVersionResolver, Rule, max_satisfying, resolve

__all__ = [
    "NodeVersionResolver",
    "Rule",
    "RULES",
    "max_satisfying",
    "resolve",
]
