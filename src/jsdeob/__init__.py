"""
jsdeob: rewrite obfuscated JavaScript into readable, equivalent code.

    >>> from jsdeob import prettify
    >>> print(prettify("a && (b(), c());"))
    if (a) {
        b();
        c();
    }
"""

from .compiler.driver import PrettifyDriver, PrettifyOptions, prettify
from .passes.prettify import PrettifyPass, prettify_ast
from .passes.rewriter import Rewriter
from .passes.registry import RuleRegistry, default_registry
from .shared.errors import ConfigurationError, JsDeobError, ParseError
from .shared.nodes import Node, RewriteResult

deobfuscate = prettify
deobfuscate_ast = prettify_ast

__all__ = [
    "prettify", "deobfuscate", "prettify_ast", "deobfuscate_ast",
    "PrettifyDriver", "PrettifyOptions", "PrettifyPass",
    "Rewriter", "RuleRegistry", "default_registry",
    "Node", "RewriteResult",
    "JsDeobError", "ParseError", "ConfigurationError",
]
