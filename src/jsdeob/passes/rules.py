"""
Prettify Rules

Node rules and loose-expression rules of the prettifier.

Every rule receives a node whose children were already rewritten and the
Rewriter running it, and returns a RewriteResult. Rules that build new
nodes run them through rw.apply_rule() rather than through the traversal,
since the children of a freshly built node are already in final form.
"""

from types import MappingProxyType
from typing import Optional

from ..shared.nodes import (
    Node, RewriteResult,
    boolean_literal, expression_statement, identifier,
    if_statement, is_identifier, return_statement, unary_expression,
    variable_declaration, walk, bound_names,
)
from .registry import RuleRegistry, RuleTable
from .rewriter import Rewriter

NODE_RULES = RuleTable("node")
LOOSE_RULES = RuleTable("loose")

# Comparison operator seen from the other side
COMPARISON_MIRROR = MappingProxyType({
    '==': '==',
    '===': '===',
    '!=': '!=',
    '!==': '!==',
    '>': '<',
    '<': '>',
    '>=': '<=',
    '<=': '>=',
})

# Unary operators that do not change what their operand refers to
NON_MUTATING_UNARY = frozenset({'-', '+', '!', '~', 'typeof'})

LOOP_STATEMENTS = frozenset({
    'ForStatement', 'ForInStatement', 'ForOfStatement', 'WhileStatement', 'DoWhileStatement',
})


# ============================================
# LOOSE EXPRESSION RULES
# ============================================

@LOOSE_RULES.register("SequenceExpression")
def loosen_sequence(node: Node, rw: Rewriter) -> RewriteResult:
    """`a, b, c;` -> `a; b; c;`"""
    return rw.loosen_all(node.expressions)


@LOOSE_RULES.register("ConditionalExpression")
def loosen_conditional(node: Node, rw: Rewriter) -> RewriteResult:
    """`t ? a : b;` -> `if (t) a; else { b; }`, chaining else-if"""
    consequent = rw.coerce(rw.loosen(node.consequent))
    alternate = rw.coerce(rw.loosen(node.alternate))

    # an if in the consequent would capture our else
    if consequent.type == 'IfStatement':
        consequent = rw.make_block([consequent])
    if not _is_else_if(alternate):
        alternate = rw.make_block([alternate])

    return rw.apply_rule(if_statement(node.test, consequent, alternate))


@LOOSE_RULES.register("LogicalExpression")
def loosen_logical(node: Node, rw: Rewriter) -> RewriteResult:
    """`a && b;` -> `if (a) b;` and `a || b;` -> `if (!a) b;`"""
    if node.operator not in ('&&', '||'):
        return RewriteResult.one(expression_statement(node))

    consequent = rw.coerce(rw.loosen(node.right))
    test = node.left
    if node.operator == '||':
        test = rw.coerce(rw.apply_rule(unary_expression('!', node.left)))

    return rw.apply_rule(if_statement(test, consequent, None))


@LOOSE_RULES.register("AssignmentExpression", "CallExpression")
def loosen_plain(node: Node, rw: Rewriter) -> RewriteResult:
    return RewriteResult.one(expression_statement(node))


# ============================================
# NODE RULES: STATEMENTS
# ============================================

@NODE_RULES.register("ExpressionStatement")
def rewrite_expression_statement(node: Node, rw: Rewriter) -> RewriteResult:
    if rw.registry.has_loose_rule(node.expression.type):
        return rw.loosen(node.expression)
    return RewriteResult.one(node)


@NODE_RULES.register("Program", "BlockStatement")
def rewrite_statement_list(node: Node, rw: Rewriter) -> RewriteResult:
    return RewriteResult.one(node.replace(body=rw.loosen_all(node.body).nodes))


@NODE_RULES.register("IfStatement")
def rewrite_if_statement(node: Node, rw: Rewriter) -> RewriteResult:
    """
    Hoist a comma test out of the if, or loosen the branches.

    `if (a(), b) x;` -> `a(); if (b) x;`
    """
    if node.test.type == 'SequenceExpression':
        leading, last = _split_last(node.test.expressions)
        return RewriteResult.concat([
            rw.loosen_all(leading),
            rw.apply_rule(node.replace(test=last)),
        ])

    changes = {}
    for clause in ('consequent', 'alternate'):
        branch = node.get(clause)
        if branch is not None:
            changes[clause] = rw.coerce(rw.loosen(branch))

    consequent = changes['consequent']
    if changes.get('alternate') is not None and _is_open_if(consequent):
        changes['consequent'] = rw.make_block([consequent])

    return RewriteResult.one(node.replace(**changes))


@NODE_RULES.register("SwitchStatement")
def rewrite_switch_statement(node: Node, rw: Rewriter) -> RewriteResult:
    if node.discriminant.type != 'SequenceExpression':
        return RewriteResult.one(node)

    leading, last = _split_last(node.discriminant.expressions)
    return RewriteResult.concat([
        rw.loosen_all(leading),
        RewriteResult.one(node.replace(discriminant=last)),
    ])


@NODE_RULES.register("ForStatement")
def rewrite_for_statement(node: Node, rw: Rewriter) -> RewriteResult:
    """
    Minimize the loop header.

    - `for (var i, j; i < 9;)` -> `var j; for (var i; i < 9;)`
    - `for (a(), i = 0; ...)` -> `a(); for (i = 0; ...)`
    """
    init = node.init
    if init is None:
        return RewriteResult.one(node)

    if init.type == 'VariableDeclaration' and init.kind == 'var':
        return _hoist_unreferenced_declarators(node)

    if init.type == 'SequenceExpression':
        leading, last = _split_last(init.expressions)
        return RewriteResult.concat([
            rw.loosen_all(leading),
            RewriteResult.one(node.replace(init=last)),
        ])

    return RewriteResult.one(node)


@NODE_RULES.register("LabeledStatement")
def rewrite_labeled_statement(node: Node, rw: Rewriter) -> RewriteResult:
    """
    Keep a label on its loop when statements were hoisted out of the loop.

    `l: { var j; for (;;) ... }` -> `var j; l: for (;;) ...`
    """
    body = node.body
    if body.type != 'BlockStatement' or len(body.body) < 2:
        return RewriteResult.one(node)

    leading, last = _split_last(body.body)
    if not _is_loop(last) or not all(_is_movable(stmt, node.label.name) for stmt in leading):
        return RewriteResult.one(node)

    return RewriteResult.many(leading + (node.replace(body=last),))


@NODE_RULES.register("ReturnStatement")
def rewrite_return_statement(node: Node, rw: Rewriter) -> RewriteResult:
    """
    `return a, b;` -> `a; return b;`
    `return t ? a : b;` -> `if (t) { return a; } else { return b; }`
    """
    argument = node.get('argument')
    if argument is None:
        return RewriteResult.one(node)

    if argument.type == 'SequenceExpression':
        leading, last = _split_last(argument.expressions)
        return RewriteResult.concat([
            rw.loosen_all(leading),
            rw.apply_rule(node.replace(argument=last)),
        ])

    if argument.type == 'ConditionalExpression':
        consequent = rw.coerce(rw.apply_rule(return_statement(argument.consequent)))
        alternate = rw.coerce(rw.apply_rule(return_statement(argument.alternate)))

        consequent = rw.make_block([consequent])
        if not _is_else_if(alternate):
            alternate = rw.make_block([alternate])

        return rw.apply_rule(if_statement(argument.test, consequent, alternate))

    return RewriteResult.one(node)


# ============================================
# NODE RULES: EXPRESSIONS
# ============================================

@NODE_RULES.register("BinaryExpression")
def canonicalize_comparison(node: Node, rw: Rewriter) -> RewriteResult:
    """`5 > x` -> `x < 5`, `undefined == x` -> `x == undefined`"""
    mirrored = COMPARISON_MIRROR.get(node.operator)
    if mirrored is None or not _should_swap(node.left, node.right):
        return RewriteResult.one(node)
    return RewriteResult.one(node.replace(operator=mirrored, left=node.right, right=node.left))


@NODE_RULES.register("UnaryExpression")
def fold_unary(node: Node, rw: Rewriter) -> RewriteResult:
    """`!0` -> `true`, `!1` -> `false`, `void 0` -> `undefined`"""
    argument = node.argument
    if argument.type != 'Literal':
        return RewriteResult.one(node)

    if node.operator == '!':
        value = argument.get('value')
        if _is_number(value) and value in (0, 1):
            return RewriteResult.one(boolean_literal(not value))
    elif node.operator == 'void':
        return RewriteResult.one(identifier('undefined'))

    return RewriteResult.one(node)


# ============================================
# HELPERS
# ============================================

def _split_last(expressions):
    return expressions[:-1], expressions[-1]


def _is_else_if(node: Node) -> bool:
    return node.type == 'IfStatement' and node.get('alternate') is not None


def _is_open_if(node: Node) -> bool:
    """True for an if chain whose last link has no else"""
    while node.type == 'IfStatement':
        if node.get('alternate') is None:
            return True
        node = node.alternate
    return False


def _is_loop(node: Node) -> bool:
    while node.type == 'LabeledStatement':
        node = node.body
    return node.type in LOOP_STATEMENTS


def _is_movable(stmt: Node, label: str) -> bool:
    """True for a hoistable statement that cannot jump to the label"""
    if stmt.type == 'VariableDeclaration':
        if stmt.kind != 'var':
            return False
    elif stmt.type != 'ExpressionStatement':
        return False
    return not any(
        node.type in ('BreakStatement', 'ContinueStatement') and is_identifier(node.get('label'), label)
        for node in walk(stmt)
    )


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_kinda_literal(node: Node) -> bool:
    """A literal, or a literal under non-mutating unary operators"""
    while node.type == 'UnaryExpression' and node.operator in NON_MUTATING_UNARY:
        node = node.argument
    return node.type == 'Literal'


def _should_swap(left: Node, right: Node) -> bool:
    if is_identifier(left, 'undefined'):
        return True
    if not is_identifier(left) and is_identifier(right):
        return True
    return is_kinda_literal(left) and not is_kinda_literal(right)


def _referenced_names(*nodes: Optional[Node]) -> set:
    return {node.name for node in walk(nodes) if node.type == 'Identifier'}


def _hoist_unreferenced_declarators(node: Node) -> RewriteResult:
    referenced = _referenced_names(node.test, node.update)
    kept, hoisted = [], []
    # hoisted initializers must not overtake a kept one
    initialized_kept = False
    for declarator in node.init.declarations:
        if initialized_kept or referenced.intersection(bound_names(declarator.id)):
            kept.append(declarator)
            initialized_kept = initialized_kept or declarator.get('init') is not None
        else:
            hoisted.append(declarator)

    if not hoisted:
        return RewriteResult.one(node)

    init = node.init.replace(declarations=tuple(kept)) if kept else None
    return RewriteResult.many([
        variable_declaration(hoisted, kind='var'),
        node.replace(init=init),
    ])


DEFAULT_REGISTRY = RuleRegistry(
    node_rules=NODE_RULES.freeze(),
    loose_rules=LOOSE_RULES.freeze(),
)
