"""CLI entry point: run `jsdeob file.js` or `python -m jsdeob file.js`."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .compiler.driver import PrettifyDriver, PrettifyOptions
from .shared.errors import ParseError
from .utils.config import (
    DEFAULT_CLI_INDENT,
    DEFAULT_ECMA_VERSION,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SOURCE_NAME,
    LOG_LEVEL_ENV_VAR,
    STDIN_PATH,
    SUPPORTED_ECMA_VERSIONS,
)
from .utils.io_utils import read_source


class _ArgumentParser(argparse.ArgumentParser):
    """argparse with usage errors mapped to exit status 1"""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _indent_width(value: str) -> int:
    try:
        width = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid indent width: {value!r}") from None
    if width < 0:
        raise argparse.ArgumentTypeError(f"indent width must be non-negative: {value!r}")
    return width


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="jsdeob", description="Deobfuscate/prettify JavaScript code.")
    parser.add_argument(
        "file", nargs="?", default=None,
        help=f"JavaScript source file; standard input when omitted or '{STDIN_PATH}'",
    )
    for version in SUPPORTED_ECMA_VERSIONS:
        parser.add_argument(
            f"--ecma{version}", dest="ecma_version", action="store_const", const=version,
            help=f"parse as ECMAScript {version}",
        )
    parser.add_argument(
        "--indent", type=_indent_width, default=DEFAULT_CLI_INDENT, metavar="N",
        help=f"indentation width of the output (default: {DEFAULT_CLI_INDENT})",
    )
    parser.set_defaults(ecma_version=None)
    return parser


def log_level() -> int:
    """Level named by the environment, or the default for unknown names"""
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper())
    if not isinstance(level, int):
        level = logging.getLevelName(DEFAULT_LOG_LEVEL)
    return level


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=log_level())

    argv = list(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(argv)
    # a name after "--" is always a file, even "-"
    force_file = "--" in argv and args.file is not None

    try:
        source = read_source(args.file, force_file=force_file)
    except OSError as e:
        sys.stderr.write(f"jsdeob: error: could not read file: {e}\n")
        return 1

    source_file = args.file if args.file not in (None, STDIN_PATH) or force_file else DEFAULT_SOURCE_NAME
    try:
        options = PrettifyOptions(ecma_version=args.ecma_version or DEFAULT_ECMA_VERSION, indent=args.indent)
        result = PrettifyDriver().prettify(source, options, source_file=source_file)
    except ParseError as e:
        sys.stderr.write(e.render() + "\n")
        return 1
    except Exception as e:
        sys.stderr.write(f"jsdeob: error: {e}\n")
        return 1

    sys.stdout.write(result + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
