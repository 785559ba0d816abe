"""
ESTree Node Definitions
Immutable tagged tree values for ECMAScript syntax trees

A single Node class covers every ESTree variant: the variant tag lives in
``node.type`` and the variant-specific attributes are read as plain
attributes (``node.test``, ``node.body``...). Nodes never change after
construction; rewrites build new nodes with ``replace()``.

Conversion:
- Node.from_estree() accepts esprima output (node objects or dicts)
- Node.to_dict() produces plain ESTree dicts for JSON dumping
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple


# Attribute names esprima uses where ESTree spells them differently
_ESTREE_FIELD_NAMES = {
    "isAsync": "async",
}

STATEMENT_SUFFIXES = ("Statement", "Declaration")


class Node:
    """
    Base tree value for all ESTree variants.

    Immutability:
    - attribute assignment raises AttributeError
    - list attributes are stored as tuples
    - replace() returns a new node, sharing untouched children by reference

    Missing attributes raise AttributeError, which is how a rule applied to a
    malformed tree aborts.
    """
    __slots__ = ('type', '_fields')

    def __init__(self, type: str, **fields: Any):
        object.__setattr__(self, 'type', type)
        object.__setattr__(self, '_fields', {
            name: tuple(value) if isinstance(value, list) else value
            for name, value in fields.items()
        })

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._fields[name]
        except KeyError:
            raise AttributeError(f"{self.type} node has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{self.type} node is immutable; use replace()")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{self.type} node is immutable; use replace()")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.type == other.type and self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        attrs = ", ".join(f"{name}={value!r}" for name, value in self._fields.items())
        return f"{self.type}({attrs})"

    def get(self, name: str, default: Any = None) -> Any:
        """Attribute lookup that tolerates absent optional fields"""
        return self._fields.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._fields

    def fields(self) -> Iterator[Tuple[str, Any]]:
        """Iterate (name, value) pairs in declaration order"""
        return iter(self._fields.items())

    def replace(self, **changes: Any) -> 'Node':
        """Return a copy of this node with some attributes replaced"""
        merged = dict(self._fields)
        merged.update(changes)
        return Node(self.type, **merged)

    def is_statement(self) -> bool:
        return self.type.endswith(STATEMENT_SUFFIXES)

    # =========================================================================
    # ESTree conversion
    # =========================================================================

    @classmethod
    def from_estree(cls, tree: Any) -> Any:
        """
        Convert parser output into Node values.

        Accepts esprima node objects, plain ESTree dicts, or lists of either.
        Dicts without a ``type`` key (regex descriptors, template element
        values) are kept as plain dicts.
        """
        if isinstance(tree, (list, tuple)):
            return tuple(cls.from_estree(item) for item in tree)
        attrs = _attributes_of(tree)
        if attrs is None:
            return tree
        converted = {
            _ESTREE_FIELD_NAMES.get(name, name): cls.from_estree(value)
            for name, value in attrs.items()
            if name != 'type' and not name.startswith('_')
        }
        if 'type' in attrs:
            return cls(attrs['type'], **converted)
        return converted

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain ESTree dict (lists instead of tuples)"""
        result: Dict[str, Any] = {'type': self.type}
        for name, value in self._fields.items():
            result[name] = _plain(value)
        return result


def _attributes_of(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, dict):
        return value
    if isinstance(value, (str, bytes, int, float, bool)) or value is None:
        return None
    attrs = getattr(value, '__dict__', None)
    if isinstance(attrs, dict) and 'type' in attrs:
        return attrs
    # esprima's plain objects (regex, template values) carry no type tag
    if type(value).__module__.startswith('esprima') and isinstance(attrs, dict):
        return attrs
    return None


def _plain(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    return value


# ============================================
# ONE-OR-MANY REWRITE RESULT
# ============================================

@dataclass(frozen=True)
class RewriteResult:
    """
    Ordered result of rewriting one node.

    A rule either replaces a node with exactly one node or splits it into
    several sibling statements. Order is left-to-right evaluation order.
    """
    nodes: Tuple[Node, ...]

    @classmethod
    def one(cls, node: Node) -> 'RewriteResult':
        return cls((node,))

    @classmethod
    def many(cls, nodes: Iterable[Node]) -> 'RewriteResult':
        return cls(tuple(nodes))

    @classmethod
    def concat(cls, results: Iterable['RewriteResult']) -> 'RewriteResult':
        return cls(tuple(node for result in results for node in result.nodes))

    @property
    def is_single(self) -> bool:
        return len(self.nodes) == 1

    @property
    def first(self) -> Node:
        return self.nodes[0]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


# ============================================
# BUILDERS
# ============================================

def identifier(name: str) -> Node:
    return Node('Identifier', name=name)


def literal(value: Any, raw: Optional[str] = None) -> Node:
    if raw is None:
        return Node('Literal', value=value)
    return Node('Literal', value=value, raw=raw)


def boolean_literal(value: bool) -> Node:
    return literal(value, 'true' if value else 'false')


def expression_statement(expression: Node) -> Node:
    return Node('ExpressionStatement', expression=expression)


def block_statement(body: Iterable[Node]) -> Node:
    return Node('BlockStatement', body=tuple(body))


def if_statement(test: Node, consequent: Node, alternate: Optional[Node] = None) -> Node:
    return Node('IfStatement', test=test, consequent=consequent, alternate=alternate)


def return_statement(argument: Optional[Node]) -> Node:
    return Node('ReturnStatement', argument=argument)


def unary_expression(operator: str, argument: Node) -> Node:
    return Node('UnaryExpression', operator=operator, argument=argument, prefix=True)


def variable_declaration(declarations: Iterable[Node], kind: str = 'var') -> Node:
    return Node('VariableDeclaration', declarations=tuple(declarations), kind=kind)


def is_identifier(node: Optional[Node], name: Optional[str] = None) -> bool:
    if node is None or node.type != 'Identifier':
        return False
    return name is None or node.name == name


def walk(node: Any) -> Iterator[Node]:
    """Yield every node in a subtree, parents before children"""
    if isinstance(node, Node):
        yield node
        for _, value in node.fields():
            yield from walk(value)
    elif isinstance(node, tuple):
        for item in node:
            yield from walk(item)


def bound_names(pattern: Optional[Node]) -> Iterator[str]:
    """Names bound by a declarator target (identifier or destructuring pattern)"""
    if pattern is None:
        return
    if pattern.type == 'Identifier':
        yield pattern.name
    elif pattern.type == 'ArrayPattern':
        for element in pattern.elements:
            yield from bound_names(element)
    elif pattern.type == 'ObjectPattern':
        for prop in pattern.properties:
            yield from bound_names(prop.argument if prop.type == 'RestElement' else prop.value)
    elif pattern.type == 'AssignmentPattern':
        yield from bound_names(pattern.left)
    elif pattern.type == 'RestElement':
        yield from bound_names(pattern.argument)
