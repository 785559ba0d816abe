"""
Prettify Pass

Rewrites comma sequences, conditionals and short-circuit logic used as
statements into explicit control flow, folds trivial unary wrappers,
canonicalizes comparisons and minimizes for-loop headers.
"""

from typing import Optional

from ..shared.nodes import Node
from .base import BasePass
from .registry import RuleRegistry
from .rewriter import Rewriter


class PrettifyPass(BasePass):
    """
    Runs the Rewriter over a tree with a given rule registry.

    The registry defaults to every built-in rule.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self.registry = registry

    def run(self, tree: Node) -> Node:
        return Rewriter(self.registry).transform(tree)


def prettify_ast(tree: Node, registry: Optional[RuleRegistry] = None) -> Node:
    """Rewrite a parsed tree into its prettified equivalent"""
    return PrettifyPass(registry).run(tree)
