"""
Tests for the command line entry point.
"""

import io
import logging
import sys

import pytest

from jsdeob.__main__ import build_parser, log_level, main

pytestmark = pytest.mark.cli


@pytest.fixture
def script(tmp_path):
    def write(source: str, name: str = "input.js"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return str(path)
    return write


@pytest.fixture
def stdin(monkeypatch):
    def feed(source: str):
        monkeypatch.setattr(sys, "stdin", io.StringIO(source))
    return feed


class TestArguments:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.file is None
        assert args.ecma_version is None
        assert args.indent == 2

    def test_last_version_flag_wins(self):
        args = build_parser().parse_args(["--ecma7", "--ecma5", "a.js"])
        assert args.ecma_version == 5
        assert args.file == "a.js"

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--help"])
        assert info.value.code == 0
        assert "--ecma3" in capsys.readouterr().out

    def test_unknown_flag_exits_one(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--ecma4", "a.js"])
        assert info.value.code == 1
        assert "usage: jsdeob" in capsys.readouterr().err

    def test_bad_indent_exits_one(self, capsys):
        with pytest.raises(SystemExit) as info:
            main(["--indent", "-2"])
        assert info.value.code == 1
        assert "indent width must be non-negative" in capsys.readouterr().err


class TestRun:
    def test_file(self, script, capsys):
        assert main([script("a && (b(), c());")]) == 0
        assert capsys.readouterr().out == "if (a) {\n  b();\n  c();\n}\n"

    def test_indent(self, script, capsys):
        assert main(["--indent", "4", script("a && (b(), c());")]) == 0
        assert capsys.readouterr().out == "if (a) {\n    b();\n    c();\n}\n"

    def test_stdin(self, stdin, capsys):
        stdin("!1;")
        assert main([]) == 0
        assert capsys.readouterr().out == "false;\n"

    def test_dash_reads_stdin(self, stdin, capsys):
        stdin("5 > x;")
        assert main(["-"]) == 0
        assert capsys.readouterr().out == "x < 5;\n"

    def test_dash_after_separator_is_a_file(self, tmp_path, monkeypatch, stdin, capsys):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "-").write_text("void 0;", encoding="utf-8")
        stdin("not read")
        assert main(["--", "-"]) == 0
        assert capsys.readouterr().out == "undefined;\n"

    def test_version_gate(self, script, capsys, no_color):
        path = script("var f = () => 1;")
        assert main(["--ecma5", path]) == 1
        err = capsys.readouterr().err
        assert "error[E0002]: ecmaVersion 6 or later is required for arrow functions" in err
        assert f"{path}:1:" in err
        assert "--ecma6" in err

    def test_newer_version_accepts(self, script, capsys):
        assert main(["--ecma7", script("x ** 2;")]) == 0
        assert capsys.readouterr().out == "x ** 2;\n"

    def test_syntax_error(self, stdin, capsys, no_color):
        stdin("var a = );")
        assert main([]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("error[E0001]: ")
        assert "<stdin>:1:" in captured.err
        assert "1 | var a = );" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.js")]) == 1
        assert "jsdeob: error: could not read file" in capsys.readouterr().err


class TestLogging:
    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("JSDEOB_LOG_LEVEL", "debug")
        assert log_level() == logging.DEBUG

    def test_default_level(self, monkeypatch):
        monkeypatch.delenv("JSDEOB_LOG_LEVEL", raising=False)
        assert log_level() == logging.WARNING

    def test_unknown_level_falls_back(self, monkeypatch, stdin, capsys):
        monkeypatch.setenv("JSDEOB_LOG_LEVEL", "bogus")
        assert log_level() == logging.WARNING
        stdin("!0;")
        assert main([]) == 0
        assert capsys.readouterr().out == "true;\n"
