"""
JavaScript Code Generator

Renders an ESTree Node tree back into JavaScript source text.

- One handler per node variant, looked up by the variant tag
- Expressions are parenthesized from operator precedence, not from the input
- Literals keep their original spelling (``raw``) when the parser gave one
- Indentation width is configurable; blocks always break lines
"""

import json
import re
from typing import Callable, Dict, List, Optional, Tuple

from ..shared.nodes import Node
from ..utils.config import DEFAULT_INDENT


# Operator precedence, loosest first
SEQUENCE = 0
YIELD = 1
ASSIGNMENT = 1
CONDITIONAL = 2
ARROW = 2
LOGICAL_OR = 3
LOGICAL_AND = 4
BITWISE_OR = 5
BITWISE_XOR = 6
BITWISE_AND = 7
EQUALITY = 8
RELATIONAL = 9
SHIFT = 10
ADDITIVE = 11
MULTIPLICATIVE = 12
EXPONENT = 13
UNARY = 14
POSTFIX = 15
CALL = 16
NEW = 17
MEMBER = 18
PRIMARY = 19

BINARY_PRECEDENCE: Dict[str, int] = {
    '||': LOGICAL_OR,
    '&&': LOGICAL_AND,
    '|': BITWISE_OR,
    '^': BITWISE_XOR,
    '&': BITWISE_AND,
    '==': EQUALITY, '!=': EQUALITY, '===': EQUALITY, '!==': EQUALITY,
    '<': RELATIONAL, '>': RELATIONAL, '<=': RELATIONAL, '>=': RELATIONAL,
    'in': RELATIONAL, 'instanceof': RELATIONAL,
    '<<': SHIFT, '>>': SHIFT, '>>>': SHIFT,
    '+': ADDITIVE, '-': ADDITIVE,
    '*': MULTIPLICATIVE, '/': MULTIPLICATIVE, '%': MULTIPLICATIVE,
    '**': EXPONENT,
}

_WORD_OPERATORS = frozenset({'typeof', 'void', 'delete'})

# Statement text that would be read as something else without parentheses
_AMBIGUOUS_STATEMENT_START = re.compile(r"\{|function\b|async\s+function\b|class\b|let\s*\[")


def generate(node: Node, indent: int = DEFAULT_INDENT) -> str:
    return CodeGenerator(indent=indent).generate(node)


class CodeGenerator:
    """
    ESTree to JavaScript source.

    Statement handlers return text whose first line carries no indentation
    (the caller places it) and whose following lines are fully indented.
    Expression handlers return (text, precedence).
    """

    def __init__(self, indent: int = DEFAULT_INDENT):
        self.indent_unit = " " * indent
        # inside a for header, where a bare `in` would end the initializer
        self._no_in = False

    def generate(self, node: Node) -> str:
        if node.type == 'Program' or node.is_statement():
            return self.statement(node, 0)
        return self.expression(node, SEQUENCE, 0)

    def _indent(self, level: int) -> str:
        return self.indent_unit * level

    # =========================================================================
    # Statements
    # =========================================================================

    def statement(self, node: Node, level: int) -> str:
        handler = self._handler('_stmt_', node)
        outer, self._no_in = self._no_in, False
        try:
            return handler(node, level)
        finally:
            self._no_in = outer

    def statement_list(self, statements, level: int) -> str:
        return "\n".join(self._indent(level) + self.statement(stmt, level) for stmt in statements)

    def _stmt_Program(self, node: Node, level: int) -> str:
        return self.statement_list(node.body, level)

    def _stmt_BlockStatement(self, node: Node, level: int) -> str:
        if not node.body:
            return "{}"
        return "{\n" + self.statement_list(node.body, level + 1) + "\n" + self._indent(level) + "}"

    def _stmt_EmptyStatement(self, node: Node, level: int) -> str:
        return ";"

    def _stmt_ExpressionStatement(self, node: Node, level: int) -> str:
        text = self.expression(node.expression, SEQUENCE, level)
        if _AMBIGUOUS_STATEMENT_START.match(text):
            text = f"({text})"
        return text + ";"

    def _stmt_IfStatement(self, node: Node, level: int) -> str:
        text = f"if ({self.expression(node.test, SEQUENCE, level)})"
        consequent = node.consequent
        alternate = node.get('alternate')

        if alternate is not None and consequent.type != 'BlockStatement' and _ends_with_open_if(consequent):
            text += " {\n" + self._indent(level + 1) + self.statement(consequent, level + 1)
            text += "\n" + self._indent(level) + "}"
        else:
            text += self._body(consequent, level)

        if alternate is None:
            return text
        if consequent.type == 'BlockStatement' or text.endswith("}"):
            text += " else"
        else:
            text += "\n" + self._indent(level) + "else"
        if alternate.type == 'IfStatement':
            return text + " " + self.statement(alternate, level)
        return text + self._body(alternate, level)

    def _body(self, node: Node, level: int) -> str:
        """Body of a compound statement, placed after its header"""
        if node.type == 'BlockStatement':
            return " " + self.statement(node, level)
        if node.type == 'EmptyStatement':
            return ";"
        return "\n" + self._indent(level + 1) + self.statement(node, level + 1)

    def _stmt_LabeledStatement(self, node: Node, level: int) -> str:
        return f"{node.label.name}: {self.statement(node.body, level)}"

    def _stmt_BreakStatement(self, node: Node, level: int) -> str:
        label = node.get('label')
        return f"break {label.name};" if label else "break;"

    def _stmt_ContinueStatement(self, node: Node, level: int) -> str:
        label = node.get('label')
        return f"continue {label.name};" if label else "continue;"

    def _stmt_WithStatement(self, node: Node, level: int) -> str:
        return f"with ({self.expression(node.object, SEQUENCE, level)})" + self._body(node.body, level)

    def _stmt_SwitchStatement(self, node: Node, level: int) -> str:
        text = f"switch ({self.expression(node.discriminant, SEQUENCE, level)}) {{"
        for case in node.cases:
            text += "\n" + self._indent(level + 1) + self.statement(case, level + 1)
        return text + "\n" + self._indent(level) + "}"

    def _stmt_SwitchCase(self, node: Node, level: int) -> str:
        test = node.get('test')
        text = f"case {self.expression(test, SEQUENCE, level)}:" if test is not None else "default:"
        if node.consequent:
            text += "\n" + self.statement_list(node.consequent, level + 1)
        return text

    def _stmt_ReturnStatement(self, node: Node, level: int) -> str:
        argument = node.get('argument')
        if argument is None:
            return "return;"
        return f"return {self.expression(argument, SEQUENCE, level)};"

    def _stmt_ThrowStatement(self, node: Node, level: int) -> str:
        return f"throw {self.expression(node.argument, SEQUENCE, level)};"

    def _stmt_TryStatement(self, node: Node, level: int) -> str:
        text = "try " + self.statement(node.block, level)
        handler = node.get('handler')
        if handler is not None:
            text += " " + self.statement(handler, level)
        finalizer = node.get('finalizer')
        if finalizer is not None:
            text += " finally " + self.statement(finalizer, level)
        return text

    def _stmt_CatchClause(self, node: Node, level: int) -> str:
        param = node.get('param')
        if param is None:
            return "catch " + self.statement(node.body, level)
        return f"catch ({self.expression(param, ASSIGNMENT, level)}) " + self.statement(node.body, level)

    def _stmt_WhileStatement(self, node: Node, level: int) -> str:
        return f"while ({self.expression(node.test, SEQUENCE, level)})" + self._body(node.body, level)

    def _stmt_DoWhileStatement(self, node: Node, level: int) -> str:
        text = "do" + self._body(node.body, level)
        text += " " if node.body.type == 'BlockStatement' else "\n" + self._indent(level)
        return text + f"while ({self.expression(node.test, SEQUENCE, level)});"

    def _stmt_ForStatement(self, node: Node, level: int) -> str:
        init, test, update = node.get('init'), node.get('test'), node.get('update')
        text = "for (" + (self._for_init(init, level) if init is not None else "") + ";"
        if test is not None:
            text += " " + self.expression(test, SEQUENCE, level)
        text += ";"
        if update is not None:
            text += " " + self.expression(update, SEQUENCE, level)
        return text + ")" + self._body(node.body, level)

    def _stmt_ForInStatement(self, node: Node, level: int) -> str:
        return self._for_each(node, "in", level)

    def _stmt_ForOfStatement(self, node: Node, level: int) -> str:
        return self._for_each(node, "of", level)

    def _for_each(self, node: Node, keyword: str, level: int) -> str:
        left = self._for_init(node.left, level)
        right = self.expression(node.right, ASSIGNMENT, level)
        return f"for ({left} {keyword} {right})" + self._body(node.body, level)

    def _for_init(self, node: Node, level: int) -> str:
        outer, self._no_in = self._no_in, True
        try:
            if node.type == 'VariableDeclaration':
                return self._declarations(node, level)
            return self.expression(node, SEQUENCE, level)
        finally:
            self._no_in = outer

    def _stmt_DebuggerStatement(self, node: Node, level: int) -> str:
        return "debugger;"

    def _stmt_VariableDeclaration(self, node: Node, level: int) -> str:
        return self._declarations(node, level) + ";"

    def _declarations(self, node: Node, level: int) -> str:
        declarators = ", ".join(self._declarator(d, level) for d in node.declarations)
        return f"{node.kind} {declarators}"

    def _declarator(self, node: Node, level: int) -> str:
        target = self.expression(node.id, ASSIGNMENT, level)
        init = node.get('init')
        if init is None:
            return target
        return f"{target} = {self.expression(init, ASSIGNMENT, level)}"

    def _stmt_FunctionDeclaration(self, node: Node, level: int) -> str:
        return self._function(node, level)

    def _stmt_ClassDeclaration(self, node: Node, level: int) -> str:
        return self._class(node, level)

    # =========================================================================
    # Expressions
    # =========================================================================

    def expression(self, node: Node, precedence: int, level: int) -> str:
        handler = self._handler('_expr_', node)
        text, own = handler(node, level)
        if own < precedence or (self._no_in and node.type == 'BinaryExpression' and node.operator == 'in'):
            return f"({text})"
        return text

    def _expr_Identifier(self, node: Node, level: int) -> Tuple[str, int]:
        return node.name, PRIMARY

    def _expr_Literal(self, node: Node, level: int) -> Tuple[str, int]:
        raw = node.get('raw')
        if raw is not None:
            return raw, PRIMARY
        regex = node.get('regex')
        if regex:
            return f"/{regex['pattern']}/{regex.get('flags', '')}", PRIMARY
        text = literal_text(node.get('value'))
        return text, UNARY if text.startswith('-') else PRIMARY

    def _expr_ThisExpression(self, node: Node, level: int) -> Tuple[str, int]:
        return "this", PRIMARY

    def _expr_Super(self, node: Node, level: int) -> Tuple[str, int]:
        return "super", PRIMARY

    def _expr_ArrayExpression(self, node: Node, level: int) -> Tuple[str, int]:
        elements = [
            self.expression(element, ASSIGNMENT, level) if element is not None else ""
            for element in node.elements
        ]
        if node.elements and node.elements[-1] is None:
            elements.append("")
        return "[" + ", ".join(elements) + "]", PRIMARY

    _expr_ArrayPattern = _expr_ArrayExpression

    def _expr_ObjectExpression(self, node: Node, level: int) -> Tuple[str, int]:
        if not node.properties:
            return "{}", PRIMARY
        inner = self._indent(level + 1)
        props = (",\n" + inner).join(self._property(prop, level + 1) for prop in node.properties)
        return "{\n" + inner + props + "\n" + self._indent(level) + "}", PRIMARY

    def _expr_ObjectPattern(self, node: Node, level: int) -> Tuple[str, int]:
        props = ", ".join(self._property(prop, level) for prop in node.properties)
        return "{" + props + "}", PRIMARY

    def _property(self, node: Node, level: int) -> str:
        if node.type != 'Property':
            return self.expression(node, ASSIGNMENT, level)
        key = self._property_key(node, level)
        kind = node.get('kind', 'init')
        if kind in ('get', 'set'):
            return f"{kind} {key}" + self._function_tail(node.value, level)
        if node.get('method'):
            return self._function_prefix(node.value) + key + self._function_tail(node.value, level)
        if node.get('shorthand'):
            return self.expression(node.value, ASSIGNMENT, level)
        return f"{key}: {self.expression(node.value, ASSIGNMENT, level)}"

    def _property_key(self, node: Node, level: int) -> str:
        if node.get('computed'):
            return f"[{self.expression(node.key, ASSIGNMENT, level)}]"
        return self.expression(node.key, PRIMARY, level)

    def _expr_FunctionExpression(self, node: Node, level: int) -> Tuple[str, int]:
        return self._function(node, level), PRIMARY

    def _expr_ArrowFunctionExpression(self, node: Node, level: int) -> Tuple[str, int]:
        prefix = "async " if node.get('async') else ""
        params = ", ".join(self.expression(p, ASSIGNMENT, level) for p in node.params)
        body = node.body
        if body.type == 'BlockStatement':
            body_text = self.statement(body, level)
        else:
            body_text = self.expression(body, ASSIGNMENT, level)
            if body_text.startswith('{'):
                body_text = f"({body_text})"
        return f"{prefix}({params}) => {body_text}", ARROW

    def _expr_ClassExpression(self, node: Node, level: int) -> Tuple[str, int]:
        return self._class(node, level), PRIMARY

    def _expr_TemplateLiteral(self, node: Node, level: int) -> Tuple[str, int]:
        parts = []
        expressions = node.expressions
        for index, quasi in enumerate(node.quasis):
            parts.append(quasi.value['raw'])
            if index < len(expressions):
                parts.append("${" + self.expression(expressions[index], SEQUENCE, level) + "}")
        return "`" + "".join(parts) + "`", PRIMARY

    def _expr_TaggedTemplateExpression(self, node: Node, level: int) -> Tuple[str, int]:
        tag = self.expression(node.tag, CALL, level)
        quasi, _ = self._expr_TemplateLiteral(node.quasi, level)
        return tag + quasi, CALL

    def _expr_UnaryExpression(self, node: Node, level: int) -> Tuple[str, int]:
        operator = node.operator
        argument = self.expression(node.argument, UNARY, level)
        if operator in _WORD_OPERATORS:
            return f"{operator} {argument}", UNARY
        if operator in ('+', '-') and argument.startswith(operator):
            return f"{operator} {argument}", UNARY
        return operator + argument, UNARY

    def _expr_UpdateExpression(self, node: Node, level: int) -> Tuple[str, int]:
        if node.prefix:
            return node.operator + self.expression(node.argument, UNARY, level), UNARY
        return self.expression(node.argument, POSTFIX, level) + node.operator, POSTFIX

    def _expr_BinaryExpression(self, node: Node, level: int) -> Tuple[str, int]:
        precedence = BINARY_PRECEDENCE[node.operator]
        if node.operator == '**':
            left = self.expression(node.left, POSTFIX, level)
            right = self.expression(node.right, precedence, level)
        else:
            left = self.expression(node.left, precedence, level)
            right = self.expression(node.right, precedence + 1, level)
        return f"{left} {node.operator} {right}", precedence

    _expr_LogicalExpression = _expr_BinaryExpression

    def _expr_AssignmentExpression(self, node: Node, level: int) -> Tuple[str, int]:
        left = self.expression(node.left, CALL, level)
        right = self.expression(node.right, ASSIGNMENT, level)
        return f"{left} {node.operator} {right}", ASSIGNMENT

    def _expr_AssignmentPattern(self, node: Node, level: int) -> Tuple[str, int]:
        left = self.expression(node.left, CALL, level)
        return f"{left} = {self.expression(node.right, ASSIGNMENT, level)}", ASSIGNMENT

    def _expr_ConditionalExpression(self, node: Node, level: int) -> Tuple[str, int]:
        test = self.expression(node.test, LOGICAL_OR, level)
        consequent = self.expression(node.consequent, ASSIGNMENT, level)
        alternate = self.expression(node.alternate, ASSIGNMENT, level)
        return f"{test} ? {consequent} : {alternate}", CONDITIONAL

    def _expr_CallExpression(self, node: Node, level: int) -> Tuple[str, int]:
        callee = self.expression(node.callee, CALL, level)
        return callee + self._arguments(node.arguments, level), CALL

    def _expr_NewExpression(self, node: Node, level: int) -> Tuple[str, int]:
        callee = self.expression(node.callee, NEW, level)
        if _contains_call(node.callee) and not callee.startswith('('):
            callee = f"({callee})"
        return "new " + callee + self._arguments(node.arguments, level), NEW

    def _arguments(self, arguments, level: int) -> str:
        return "(" + ", ".join(self.expression(arg, ASSIGNMENT, level) for arg in arguments) + ")"

    def _expr_MemberExpression(self, node: Node, level: int) -> Tuple[str, int]:
        obj = self.expression(node.object, CALL, level)
        if _is_bare_integer(node.object, obj) and not node.computed:
            obj = f"({obj})"
        if node.computed:
            return f"{obj}[{self.expression(node.property, SEQUENCE, level)}]", MEMBER
        return f"{obj}.{node.property.name}", MEMBER

    def _expr_SequenceExpression(self, node: Node, level: int) -> Tuple[str, int]:
        return ", ".join(self.expression(e, ASSIGNMENT, level) for e in node.expressions), SEQUENCE

    def _expr_YieldExpression(self, node: Node, level: int) -> Tuple[str, int]:
        keyword = "yield*" if node.get('delegate') else "yield"
        argument = node.get('argument')
        if argument is None:
            return keyword, YIELD
        return f"{keyword} {self.expression(argument, ASSIGNMENT, level)}", YIELD

    def _expr_AwaitExpression(self, node: Node, level: int) -> Tuple[str, int]:
        return "await " + self.expression(node.argument, UNARY, level), UNARY

    def _expr_SpreadElement(self, node: Node, level: int) -> Tuple[str, int]:
        return "..." + self.expression(node.argument, ASSIGNMENT, level), ASSIGNMENT

    _expr_RestElement = _expr_SpreadElement

    def _expr_MetaProperty(self, node: Node, level: int) -> Tuple[str, int]:
        return f"{node.meta.name}.{node.property.name}", PRIMARY

    # =========================================================================
    # Functions and classes
    # =========================================================================

    def _function(self, node: Node, level: int) -> str:
        name = node.get('id')
        text = self._function_prefix(node, keyword=True)
        if name is not None:
            text += name.name
        return text + self._function_tail(node, level)

    def _function_prefix(self, node: Node, keyword: bool = False) -> str:
        text = "async " if node.get('async') else ""
        if keyword:
            text += "function"
            text += "* " if node.get('generator') else " "
        elif node.get('generator'):
            text += "*"
        return text

    def _function_tail(self, node: Node, level: int) -> str:
        params = ", ".join(self.expression(p, ASSIGNMENT, level) for p in node.params)
        return f"({params}) " + self.statement(node.body, level)

    def _class(self, node: Node, level: int) -> str:
        text = "class"
        name = node.get('id')
        if name is not None:
            text += " " + name.name
        superclass = node.get('superClass')
        if superclass is not None:
            text += " extends " + self.expression(superclass, CALL, level)
        methods = node.body.body
        if not methods:
            return text + " {}"
        lines = [self._indent(level + 1) + self._method(m, level + 1) for m in methods]
        return text + " {\n" + "\n".join(lines) + "\n" + self._indent(level) + "}"

    def _method(self, node: Node, level: int) -> str:
        text = "static " if node.get('static') else ""
        key = self._property_key(node, level)
        kind = node.get('kind', 'method')
        if kind in ('get', 'set'):
            text += f"{kind} "
        else:
            text += self._function_prefix(node.value)
        return text + key + self._function_tail(node.value, level)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _handler(self, prefix: str, node: Node) -> Callable:
        handler = getattr(self, prefix + node.type, None)
        if handler is None:
            raise TypeError(f"Cannot generate code for {node.type} node")
        return handler


def literal_text(value) -> str:
    """Source spelling of a literal value without a raw form"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value:
            return "NaN"
        if value in (float('inf'), float('-inf')):
            return "Infinity" if value > 0 else "-Infinity"
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return _quote(value)
    raise TypeError(f"Cannot generate code for literal value {value!r}")


def _quote(value: str) -> str:
    body = json.dumps(value)[1:-1].replace("\\\"", "\"").replace("'", "\\'")
    return f"'{body}'"


def _contains_call(node: Node) -> bool:
    while node.type in ('MemberExpression', 'TaggedTemplateExpression'):
        node = node.object if node.type == 'MemberExpression' else node.tag
    return node.type == 'CallExpression'


def _is_bare_integer(node: Node, text: str) -> bool:
    return node.type == 'Literal' and text[:1].isdigit() and text.isdigit()


def _ends_with_open_if(node: Node) -> bool:
    """True when an else placed after this statement would bind inside it"""
    while True:
        if node.type == 'IfStatement':
            alternate = node.get('alternate')
            if alternate is None:
                return True
            node = alternate
        elif node.type in ('ForStatement', 'ForInStatement', 'ForOfStatement',
                           'WhileStatement', 'WithStatement', 'LabeledStatement'):
            node = node.body
        else:
            return False
