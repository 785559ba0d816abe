"""
jsdeob utilities package
"""

from .io_utils import read_source_file, read_source

__all__ = ["read_source_file", "read_source"]
