"""
Rule Registry

Immutable variant-keyed rule tables handed to the Rewriter.

Tables are filled with the RuleTable.register decorator at import time and
frozen into a RuleRegistry once; the Rewriter receives the registry
explicitly instead of reaching for module globals.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, Mapping, Optional

from ..shared.nodes import Node, RewriteResult

if TYPE_CHECKING:
    from .rewriter import Rewriter

Rule = Callable[[Node, 'Rewriter'], RewriteResult]


class RuleTable:
    """
    Mutable builder for one rule table.

    Usage:
        NODE_RULES = RuleTable("node")

        @NODE_RULES.register("IfStatement")
        def rewrite_if_statement(node, rw):
            ...
    """

    def __init__(self, name: str):
        self.name = name
        self._rules: Dict[str, Rule] = {}

    def register(self, *variants: str) -> Callable[[Rule], Rule]:
        def decorator(rule: Rule) -> Rule:
            for variant in variants:
                if variant in self._rules:
                    raise ValueError(f"Duplicate {self.name} rule for {variant}")
                self._rules[variant] = rule
            return rule
        return decorator

    def freeze(self) -> Mapping[str, Rule]:
        return MappingProxyType(dict(self._rules))


@dataclass(frozen=True)
class RuleRegistry:
    """
    Frozen pair of rule tables.

    - node_rules: applied to every node after its children are rewritten
    - loose_rules: applied to expressions standing in statement positions
    """
    node_rules: Mapping[str, Rule]
    loose_rules: Mapping[str, Rule]

    def node_rule(self, variant: str) -> Optional[Rule]:
        return self.node_rules.get(variant)

    def loose_rule(self, variant: str) -> Optional[Rule]:
        return self.loose_rules.get(variant)

    def has_loose_rule(self, variant: str) -> bool:
        return variant in self.loose_rules

    def without(self, *variants: str) -> 'RuleRegistry':
        """Registry with the node and loose rules for some variants removed"""
        return RuleRegistry(
            node_rules=MappingProxyType({k: v for k, v in self.node_rules.items() if k not in variants}),
            loose_rules=MappingProxyType({k: v for k, v in self.loose_rules.items() if k not in variants}),
        )


def default_registry() -> RuleRegistry:
    """The registry holding every built-in rule"""
    from .rules import DEFAULT_REGISTRY
    return DEFAULT_REGISTRY
