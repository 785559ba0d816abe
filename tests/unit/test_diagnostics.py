"""
Tests for diagnostic rendering and option validation.
"""

import pytest

from jsdeob.compiler.driver import PrettifyOptions, prettify
from jsdeob.frontend.parser import Parser
from jsdeob.shared.errors import (
    ConfigurationError, Diagnostic, JsDeobError, ParseError, format_diagnostic,
)
from jsdeob.shared.source_location import SourceLocation


class TestFormatDiagnostic:
    def test_with_source_line(self):
        diagnostic = Diagnostic("Unexpected token )", SourceLocation("in.js", 1, 9), code="E0001")
        assert format_diagnostic(diagnostic, {"in.js": "var a = );"}) == (
            "error[E0001]: Unexpected token )\n"
            " --> in.js:1:9\n"
            "  |\n"
            "1 | var a = );\n"
            "  |         ^"
        )

    def test_span_label_and_help(self):
        location = SourceLocation("in.js", 2, 9, end_line=2, end_column=17)
        diagnostic = Diagnostic(
            "ecmaVersion 6 or later is required for arrow functions", location,
            code="E0002", help="select a newer grammar with --ecma6", label="arrow function",
        )
        rendered = format_diagnostic(diagnostic, {"in.js": "a();\nvar f = () => 1;"})
        assert rendered.splitlines()[3] == "2 | var f = () => 1;"
        assert rendered.splitlines()[4] == "  |         ^^^^^^^^ arrow function"
        assert rendered.endswith("  = help: select a newer grammar with --ecma6")

    def test_without_location(self):
        diagnostic = Diagnostic("Unexpected end of input", None)
        assert format_diagnostic(diagnostic, {}) == "error: Unexpected end of input\n --> <unknown location>"

    def test_without_source_text(self):
        diagnostic = Diagnostic("bad", SourceLocation("gone.js", 3, 1), code="E0001")
        assert format_diagnostic(diagnostic, {}).splitlines() == ["error[E0001]: bad", " --> gone.js:3:1"]

    def test_color_codes(self):
        diagnostic = Diagnostic("bad", None, code="E0001")
        assert "\033[31m" in format_diagnostic(diagnostic, {}, color=True)
        assert "\033[" not in format_diagnostic(diagnostic, {}, color=False)


class TestParseError:
    def test_is_a_jsdeob_error(self):
        error = ParseError("bad", SourceLocation("<stdin>", 1, 1))
        assert isinstance(error, JsDeobError)
        assert str(error) == "bad"
        assert error.error_code == "E0001"

    def test_render_respects_no_color(self, no_color):
        error = ParseError("bad", SourceLocation("<stdin>", 1, 1), source_code="x y")
        assert error.render().startswith("error[E0001]: bad\n --> <stdin>:1:1")

    def test_render_uses_source(self):
        error = ParseError("bad", SourceLocation("<stdin>", 1, 3), source_code="x y")
        assert "1 | x y" in error.render(color=False)


class TestOptions:
    def test_defaults(self):
        options = PrettifyOptions()
        assert (options.ecma_version, options.indent, options.output_ast) == (6, 4, False)

    @pytest.mark.parametrize("version", [4, 8, 2015, "6", True])
    def test_unsupported_ecma_version(self, version):
        with pytest.raises(ConfigurationError, match="ecma_version must be one of 3, 5, 6, 7"):
            PrettifyOptions(ecma_version=version)

    @pytest.mark.parametrize("indent", [-1, 2.5, "2", None])
    def test_invalid_indent(self, indent):
        with pytest.raises(ConfigurationError, match="indent must be a non-negative integer"):
            PrettifyOptions(indent=indent)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            PrettifyOptions(indent=-4)

    def test_unknown_keyword_option(self):
        with pytest.raises(ConfigurationError, match="Unknown option\\(s\\): colour"):
            prettify("a;", colour=True)

    def test_parser_rejects_unknown_version(self):
        with pytest.raises(ValueError, match="Unsupported ECMAScript version 4"):
            Parser(4)
