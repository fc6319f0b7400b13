"""
Python AppVar Handling for TI Calculators
=========================================

This module converts between Python source code and the AppVar (.8xv)
files that the TI-83 Premium CE and TI-84 Plus CE Python apps load.

Overview
--------
A Python program lives on the calculator as an AppVar whose payload starts
with the "PYCD" tag. The .8xv file wraps that AppVar in the standard
"**TI83F*" file header and ends with a 16-bit checksum.

This module provides:
- **PyVariable**: The decoded record (source, name, info, long filename)
- **build_appvar / VariableBuilder**: Serialize records to .8xv bytes
- **parse_appvar / VariableParser**: Parse and verify .8xv bytes
- **looks_like_appvar**: Cheap signature probe
- **dump_fields / format_dump**: Field-by-field dump for debugging
- **Checksum utilities**: 16-bit sum and little-endian word helpers

Quick Start
-----------
Converting source to an AppVar:

    >>> from tipy_sdk.appvar import PyVariable, build_appvar
    >>> var = PyVariable(source=b"print(1)", variable_name="HELLO")
    >>> data = build_appvar(var)

Reading it back:

    >>> from tipy_sdk.appvar import parse_appvar
    >>> var = parse_appvar(data)
    >>> var.get_source_text()
    'print(1)'
"""

# =============================================================================
# Public API Exports
# =============================================================================

# Record definitions and layout constants
from tipy_sdk.appvar.records import (
    PyVariable,
    Offset,
    MAGIC,
    INFO_SIZE,
    NAME_SIZE,
    TYPE_APPVAR,
    FORMAT_TAG,
    DEFAULT_VARIABLE_NAME,
    MAX_FILENAME_LENGTH,
    MIN_CONTAINER_SIZE,
    fit_field,
)

# Checksum utilities
from tipy_sdk.appvar.checksum import (
    calculate_checksum,
    calculate_data_checksum,
    pack_u16,
    unpack_u16,
)

# Parser classes and functions
from tipy_sdk.appvar.parser import (
    VariableParser,
    looks_like_appvar,
    parse_appvar,
    parse_appvar_file,
)

# Builder classes and functions
from tipy_sdk.appvar.builder import (
    VariableBuilder,
    build_appvar,
    create_appvar,
)

# Debug dumper
from tipy_sdk.appvar.dump import (
    DumpField,
    FieldKind,
    dump_fields,
    format_dump,
    format_hex,
)

__all__ = [
    # Records
    "PyVariable",
    "Offset",
    "MAGIC",
    "INFO_SIZE",
    "NAME_SIZE",
    "TYPE_APPVAR",
    "FORMAT_TAG",
    "DEFAULT_VARIABLE_NAME",
    "MAX_FILENAME_LENGTH",
    "MIN_CONTAINER_SIZE",
    "fit_field",
    # Checksum
    "calculate_checksum",
    "calculate_data_checksum",
    "pack_u16",
    "unpack_u16",
    # Parser
    "VariableParser",
    "looks_like_appvar",
    "parse_appvar",
    "parse_appvar_file",
    # Builder
    "VariableBuilder",
    "build_appvar",
    "create_appvar",
    # Dump
    "DumpField",
    "FieldKind",
    "dump_fields",
    "format_dump",
    "format_hex",
]
