"""
Parser

Turns JavaScript source text into an ESTree Node tree using esprima, then
restricts the accepted syntax to the requested ECMAScript version.
"""

from typing import Dict, Iterator, Optional, Tuple
import logging

import esprima
from esprima.error_handler import Error as EsprimaError

from ..shared.nodes import Node, walk
from ..shared.errors import ParseError
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_ECMA_VERSION, DEFAULT_SOURCE_NAME, SUPPORTED_ECMA_VERSIONS

logger = logging.getLogger("jsdeob.frontend.parser")


# Lowest ECMAScript version that allows each node variant
_VARIANT_VERSIONS: Dict[str, int] = {
    "ArrowFunctionExpression": 6,
    "ClassDeclaration": 6,
    "ClassExpression": 6,
    "TemplateLiteral": 6,
    "TaggedTemplateExpression": 6,
    "SpreadElement": 6,
    "RestElement": 6,
    "ArrayPattern": 6,
    "ObjectPattern": 6,
    "AssignmentPattern": 6,
    "ForOfStatement": 6,
    "YieldExpression": 6,
    "MetaProperty": 6,
    "Super": 6,
    "AwaitExpression": 8,
}

_FEATURE_NAMES: Dict[str, str] = {
    "ArrowFunctionExpression": "arrow functions",
    "ClassDeclaration": "classes",
    "ClassExpression": "classes",
    "TemplateLiteral": "template literals",
    "TaggedTemplateExpression": "tagged templates",
    "SpreadElement": "spread elements",
    "RestElement": "rest elements",
    "ArrayPattern": "destructuring",
    "ObjectPattern": "destructuring",
    "AssignmentPattern": "default values",
    "ForOfStatement": "for-of loops",
    "YieldExpression": "generators",
    "MetaProperty": "new.target",
    "Super": "super",
    "AwaitExpression": "async functions",
}


class Parser:
    """
    Parser.

    - Takes source code, returns a Program node
    - Wraps esprima syntax errors into ParseError with a source location
    - Rejects syntax newer than the selected ECMAScript version (3, 5, 6, 7)
    """

    def __init__(self, ecma_version: int = DEFAULT_ECMA_VERSION):
        if ecma_version not in SUPPORTED_ECMA_VERSIONS:
            raise ValueError(
                f"Unsupported ECMAScript version {ecma_version}; "
                f"expected one of {', '.join(map(str, SUPPORTED_ECMA_VERSIONS))}"
            )
        self.ecma_version = ecma_version

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_NAME) -> Node:
        """
        Parse source code to a tree.

        Returns: Program node
        """
        try:
            tree = esprima.parseScript(source, {"loc": True})
        except EsprimaError as e:
            description = getattr(e, "description", None) or str(e)
            line = getattr(e, "lineNumber", None)
            column = getattr(e, "column", None)
            location = None
            if line is not None:
                location = SourceLocation(file=source_file, line=line, column=column or 1)
            raise ParseError(description, location, source_code=source) from e

        program = Node.from_estree(tree)
        logger.debug(f"Parsed {source_file} as ECMAScript {self.ecma_version}")
        self._check_version(program, source, source_file)
        return program

    def _check_version(self, program: Node, source: str, source_file: str) -> None:
        for node, required, feature in self._features(program):
            if required > self.ecma_version:
                raise ParseError(
                    f"ecmaVersion {required} or later is required for {feature}",
                    _location_of(node, source_file),
                    error_code="E0002",
                    source_code=source,
                    help=f"select a newer grammar with --ecma{required}"
                    if required in SUPPORTED_ECMA_VERSIONS else None,
                )

    def _features(self, program: Node) -> Iterator[Tuple[Node, int, str]]:
        """Yield (node, required version, feature name) for version-gated syntax"""
        for node in walk(program):
            if node.type in _VARIANT_VERSIONS:
                yield node, _VARIANT_VERSIONS[node.type], _FEATURE_NAMES[node.type]
            elif node.type == "VariableDeclaration" and node.kind != "var":
                yield node, 6, f"'{node.kind}' declarations"
            elif node.type in ("BinaryExpression", "AssignmentExpression") and node.operator in ("**", "**="):
                yield node, 7, "exponent operators"
            elif node.type in ("FunctionDeclaration", "FunctionExpression"):
                if node.get("generator"):
                    yield node, 6, "generators"
                if node.get("async"):
                    yield node, 8, "async functions"
            elif node.type == "Property":
                if node.get("computed") or node.get("shorthand") or node.get("method"):
                    yield node, 6, "enhanced object literals"
                elif node.get("kind") in ("get", "set"):
                    yield node, 5, "property accessors"


def _location_of(node: Node, source_file: str) -> Optional[SourceLocation]:
    loc = node.get("loc")
    if not isinstance(loc, dict) or "start" not in loc:
        return None
    start, end = loc["start"], loc.get("end") or {}
    return SourceLocation(
        file=source_file,
        line=start["line"],
        column=start["column"] + 1,
        end_line=end.get("line", 0),
        end_column=end.get("column", -1) + 1,
    )
