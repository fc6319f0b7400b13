"""
TI Python SDK - Python AppVar Tools for TI Graphing Calculators
===============================================================

This package converts Python programs to and from the AppVar (.8xv)
files used by the Python apps of the TI-83 Premium CE and TI-84 Plus CE.

Main Components
---------------
- **appvar**: AppVar container codec
    Builds, parses, verifies, and dumps .8xv files

- **cli**: Command-line tool (tipyvar)
    Converts between .py and .8xv files and inspects containers

Quick Start
-----------
Convert source to an AppVar:
    >>> from tipy_sdk.appvar import create_appvar
    >>> data = create_appvar("print('hello')", "HELLO")

Read an AppVar:
    >>> from tipy_sdk.appvar import parse_appvar_file
    >>> var = parse_appvar_file("HELLO.8xv")
    >>> print(var.get_source_text())

Or use the command-line tool:
    $ tipyvar convert hello.py -N HELLO
    $ tipyvar convert HELLO.8xv -o hello.py
    $ tipyvar info HELLO.8xv
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from tipy_sdk.errors import (
    TipyError,
    AppVarError,
    InvalidFormatError,
    ChecksumMismatchError,
    MalformedLengthError,
    VariableSizeError,
)

from tipy_sdk.appvar import (
    PyVariable,
    VariableBuilder,
    VariableParser,
    build_appvar,
    create_appvar,
    parse_appvar,
    parse_appvar_file,
    looks_like_appvar,
    dump_fields,
    format_dump,
)

from tipy_sdk.config import ConverterConfig, get_config

__all__ = [
    # Version info
    "__version__",
    # Codec
    "PyVariable",
    "VariableBuilder",
    "VariableParser",
    "build_appvar",
    "create_appvar",
    "parse_appvar",
    "parse_appvar_file",
    "looks_like_appvar",
    "dump_fields",
    "format_dump",
    # Configuration
    "ConverterConfig",
    "get_config",
    # Exception hierarchy
    "TipyError",
    "AppVarError",
    "InvalidFormatError",
    "ChecksumMismatchError",
    "MalformedLengthError",
    "VariableSizeError",
]
