"""
Prettify Driver

Composes parsing, the prettify pass and code generation.

Phases:
1. Parsing (source -> tree), restricted to the selected ECMAScript version
2. Passes (tree -> prettified tree)
3. Code generation (tree -> source), skipped when the tree is requested
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..backends.javascript import CodeGenerator
from ..frontend.parser import Parser
from ..passes.base import PassManager
from ..passes.prettify import PrettifyPass
from ..passes.registry import RuleRegistry
from ..shared.errors import ConfigurationError
from ..shared.nodes import Node
from ..utils.config import (
    DEFAULT_ECMA_VERSION,
    DEFAULT_INDENT,
    DEFAULT_SOURCE_NAME,
    SUPPORTED_ECMA_VERSIONS,
)


@dataclass(frozen=True)
class PrettifyOptions:
    """
    Options of one prettify call.

    - ecma_version: grammar revision accepted by the parser (3, 5, 6 or 7)
    - indent: spaces per indentation level of the generated code
    - output_ast: return the rewritten tree instead of generated code
    """
    ecma_version: int = DEFAULT_ECMA_VERSION
    indent: int = DEFAULT_INDENT
    output_ast: bool = False

    def __post_init__(self):
        if isinstance(self.ecma_version, bool) or self.ecma_version not in SUPPORTED_ECMA_VERSIONS:
            raise ConfigurationError(
                f"ecma_version must be one of {', '.join(map(str, SUPPORTED_ECMA_VERSIONS))}, "
                f"got {self.ecma_version!r}"
            )
        if isinstance(self.indent, bool) or not isinstance(self.indent, int) or self.indent < 0:
            raise ConfigurationError(f"indent must be a non-negative integer, got {self.indent!r}")


class PrettifyDriver:
    """
    Driver for the source-to-source prettifier.

    Stateless between calls: every call builds its own parser and generator
    from the options it is given.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self.pass_manager = PassManager()
        self.pass_manager.register_pass(PrettifyPass(registry))

    def prettify(
        self,
        source: str,
        options: Optional[PrettifyOptions] = None,
        source_file: str = DEFAULT_SOURCE_NAME,
    ) -> Union[str, Node]:
        """
        Prettify source code.

        Returns: generated source, or the rewritten tree when options.output_ast
        """
        options = options or PrettifyOptions()
        tree = Parser(options.ecma_version).parse(source, source_file)
        tree = self.pass_manager.run_all(tree)
        if options.output_ast:
            return tree
        return CodeGenerator(indent=options.indent).generate(tree)


def prettify(source: str, options: Optional[PrettifyOptions] = None, **overrides) -> Union[str, Node]:
    """
    Deobfuscate/prettify a chunk of code.

    Options may be passed as a PrettifyOptions or as keyword overrides:
        prettify(code, ecma_version=5, indent=2)
    """
    if overrides:
        base = options or PrettifyOptions()
        options = PrettifyOptions(
            ecma_version=overrides.pop('ecma_version', base.ecma_version),
            indent=overrides.pop('indent', base.indent),
            output_ast=overrides.pop('output_ast', base.output_ast),
        )
        if overrides:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(overrides))}")
    return PrettifyDriver().prettify(source, options)
