"""
Test utilities for the jsdeob test suite.

Small builders for ESTree nodes so expected trees read like the code they
stand for, plus helpers running the prettifier on source text.
"""

import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from jsdeob.shared.nodes import Node
from jsdeob.compiler.driver import PrettifyDriver, PrettifyOptions


def Identifier(name: str) -> Node:
    return Node('Identifier', name=name)


def Literal(value) -> Node:
    return Node('Literal', value=value)


def Assign(name: str, value) -> Node:
    return Node('AssignmentExpression', operator='=', left=Identifier(name), right=Literal(value))


def Call(name: str, *arguments: Node) -> Node:
    return Node('CallExpression', callee=Identifier(name), arguments=list(arguments))


def Sequence(*expressions: Node) -> Node:
    return Node('SequenceExpression', expressions=list(expressions))


def Conditional(test: Node, consequent: Node, alternate: Node) -> Node:
    return Node('ConditionalExpression', test=test, consequent=consequent, alternate=alternate)


def Logical(operator: str, left: Node, right: Node) -> Node:
    return Node('LogicalExpression', operator=operator, left=left, right=right)


def Binary(operator: str, left: Node, right: Node) -> Node:
    return Node('BinaryExpression', operator=operator, left=left, right=right)


def Unary(operator: str, argument: Node) -> Node:
    return Node('UnaryExpression', operator=operator, argument=argument, prefix=True)


def ExprStmt(expression: Node) -> Node:
    return Node('ExpressionStatement', expression=expression)


def Block(*body: Node) -> Node:
    return Node('BlockStatement', body=list(body))


def Program(*body: Node) -> Node:
    return Node('Program', body=list(body), sourceType='script')


def If(test: Node, consequent: Node, alternate: Optional[Node] = None) -> Node:
    return Node('IfStatement', test=test, consequent=consequent, alternate=alternate)


def Return(argument: Optional[Node]) -> Node:
    return Node('ReturnStatement', argument=argument)


def Declarator(name: str, init: Optional[Node] = None) -> Node:
    return Node('VariableDeclarator', id=Identifier(name), init=init)


def VarDecl(*declarators: Node, kind: str = 'var') -> Node:
    return Node('VariableDeclaration', declarations=list(declarators), kind=kind)


def For(init: Optional[Node], test: Optional[Node], update: Optional[Node] = None,
        body: Optional[Node] = None) -> Node:
    return Node('ForStatement', init=init, test=test, update=update,
                body=body if body is not None else Node('EmptyStatement'))


def Function(name: str, *body: Node) -> Node:
    return Node('FunctionDeclaration', id=Identifier(name), params=[], body=Block(*body),
                generator=False, expression=False)


def prettify_source(source: str, **options) -> str:
    """Parse, rewrite and regenerate source text with the given options"""
    return PrettifyDriver().prettify(source, PrettifyOptions(**options))
