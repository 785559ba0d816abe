"""
Shared components: tree values, source locations and errors.
"""

from .source_location import SourceLocation
from .errors import Diagnostic, JsDeobError, ParseError, ConfigurationError, format_diagnostic
from .nodes import (
    Node, RewriteResult,
    identifier, literal, boolean_literal, expression_statement, block_statement,
    if_statement, return_statement, unary_expression, variable_declaration,
    is_identifier, walk, bound_names,
)
