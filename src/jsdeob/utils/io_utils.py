"""
Centralized source I/O utilities.

- Single place for encoding handling
- "-" means standard input
"""

import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from .config import DEFAULT_FILE_ENCODING, STDIN_PATH


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)


def read_source(path: Optional[str], force_file: bool = False, stdin: Optional[TextIO] = None) -> str:
    """Read from a path, or from standard input when path is None or "-" (unless forced)."""
    if path is None or (path == STDIN_PATH and not force_file):
        stream = stdin if stdin is not None else sys.stdin
        return stream.read()
    return read_source_file(path)
