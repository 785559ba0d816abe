"""
Configuration constants used across jsdeob
"""

# ECMAScript grammar revisions accepted by the parser front end
SUPPORTED_ECMA_VERSIONS = (3, 5, 6, 7)
DEFAULT_ECMA_VERSION = 6

# Indentation step (spaces) of generated code
DEFAULT_INDENT = 4
DEFAULT_CLI_INDENT = 2

# Name used in diagnostics when the source has no file
DEFAULT_SOURCE_NAME = "<stdin>"
STDIN_PATH = "-"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Environment variables
LOG_LEVEL_ENV_VAR = "JSDEOB_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
