"""
Rewriter

Bottom-up tree transformer driven by a RuleRegistry.

Traversal:
1. Rewrite every child field (lists are flattened, single slots coerced)
2. Apply the node rule for the node's variant, if any

Rules return a RewriteResult; a result holding several statements is
spliced into the parent list, or wrapped in a BlockStatement when the
parent slot holds exactly one node.
"""

from collections import Counter
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple
import logging

from ..shared.nodes import Node, RewriteResult, block_statement, expression_statement
from .registry import RuleRegistry, default_registry

logger = logging.getLogger("jsdeob.passes.rewriter")


class Rewriter:
    """
    Rule-driven rewriter.

    Public operations:
    - transform(tree): rewrite a whole tree, always returning one node
    - rewrite(node): traversal + node rule, returns a RewriteResult
    - apply_rule(node): node rule only (children must already be rewritten)
    - loosen(node): loose-expression dispatch for statement positions
    - coerce(result) / make_block(nodes): single-slot coercion

    Rules receive the Rewriter so they can re-run rules on nodes they build.
    No state survives between transform() calls except the hit counter,
    which is reset on every call.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self.registry = registry if registry is not None else default_registry()
        self.rule_hits: Counter = Counter()

    def transform(self, tree: Node) -> Node:
        self.rule_hits = Counter()
        result = self.coerce(self.rewrite(tree))
        if self.rule_hits:
            summary = ", ".join(f"{name}={count}" for name, count in sorted(self.rule_hits.items()))
            logger.debug(f"Applied {sum(self.rule_hits.values())} rule(s): {summary}")
        return result

    # =========================================================================
    # Dispatch
    # =========================================================================

    def rewrite(self, node: Node) -> RewriteResult:
        """Rewrite children first, then the node itself"""
        return self.apply_rule(self._rewrite_children(node))

    def apply_rule(self, node: Node) -> RewriteResult:
        rule = self.registry.node_rule(node.type)
        if rule is None:
            return RewriteResult.one(node)
        self.rule_hits[node.type] += 1
        return rule(node, self)

    def loosen(self, node: Node) -> RewriteResult:
        """
        Rewrite an expression standing where a statement is expected.

        Variants with a loose rule become statement-shaped code; any other
        expression is wrapped in an ExpressionStatement, and statements are
        returned unchanged.
        """
        rule = self.registry.loose_rule(node.type)
        if rule is not None:
            self.rule_hits[f"loose:{node.type}"] += 1
            return rule(node, self)
        if node.is_statement():
            return RewriteResult.one(node)
        return RewriteResult.one(expression_statement(node))

    def loosen_all(self, nodes: Iterable[Node]) -> RewriteResult:
        """loosen() each node in order and concatenate the results"""
        return RewriteResult.concat(self.loosen(node) for node in nodes)

    # =========================================================================
    # Single-slot coercion
    # =========================================================================

    def coerce(self, result: RewriteResult) -> Node:
        if result.is_single:
            return result.first
        return self.make_block(result.nodes)

    def make_block(self, nodes: Sequence[Node]) -> Node:
        """Wrap statements in a block; a lone block is returned as is"""
        if len(nodes) == 1 and nodes[0].type == 'BlockStatement':
            return nodes[0]
        return self.coerce(self.apply_rule(block_statement(nodes)))

    # =========================================================================
    # Generic traversal
    # =========================================================================

    def _rewrite_children(self, node: Node) -> Node:
        changes: Dict[str, Any] = {}
        for name, value in node.fields():
            if isinstance(value, tuple):
                rewritten = self._rewrite_list(value)
                if not _same_items(rewritten, value):
                    changes[name] = rewritten
            elif isinstance(value, Node):
                rewritten_node = self.coerce(self.rewrite(value))
                if rewritten_node is not value:
                    changes[name] = rewritten_node
        return node.replace(**changes) if changes else node

    def _rewrite_list(self, items: Tuple[Any, ...]) -> Tuple[Any, ...]:
        result = []
        for item in items:
            if isinstance(item, Node):
                result.extend(self.rewrite(item))
            else:
                # array holes (None) and scalars stay in place
                result.append(item)
        return tuple(result)


def _same_items(left: Tuple[Any, ...], right: Tuple[Any, ...]) -> bool:
    return len(left) == len(right) and all(a is b for a, b in zip(left, right))
