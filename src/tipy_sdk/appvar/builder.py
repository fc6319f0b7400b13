"""
Python AppVar Builder
=====================

This module serializes PyVariable records into Python AppVar (.8xv)
container bytes, ready to be sent to a TI-83 Premium CE or TI-84 Plus CE.

Usage
-----
Serializing a record:

    >>> from tipy_sdk.appvar import PyVariable, build_appvar
    >>> var = PyVariable(source=b"print(1)", variable_name="HELLO")
    >>> data = build_appvar(var)
    >>> Path("HELLO.8xv").write_bytes(data)

Building from a source file:

    >>> builder = VariableBuilder(variable_name="HELLO")
    >>> builder.set_source_file("hello.py")
    >>> builder.build_to_file("HELLO.8xv")

The variable data size is written three times (0x39, 0x46, and minus two
at 0x48). The calculator's loader expects all three, so they are always
reproduced even though the parser only reads the last one.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Union
import logging

from tipy_sdk.errors import VariableSizeError
from tipy_sdk.appvar.records import (
    PyVariable,
    MAGIC,
    HEADER_FLAGS,
    TYPE_APPVAR,
    VERSION_FLAGS,
    FORMAT_TAG,
    SOH,
    MAX_WORD,
    DEFAULT_VARIABLE_NAME,
)
from tipy_sdk.appvar.checksum import calculate_data_checksum, pack_u16

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Serialization
# =============================================================================

def _build_payload(variable: PyVariable) -> bytes:
    """
    Build the payload region: tag, optional filename block, NUL, source.

    Without a long filename the payload is "PYCD" 00 <source>; the zero
    byte is both the filename length and the terminator.
    """
    payload = bytearray(FORMAT_TAG)

    if variable.long_filename is not None:
        payload.append(len(variable.long_filename))
        payload.append(SOH)
        payload.extend(variable.long_filename)

    payload.append(0x00)
    payload.extend(variable.source)
    return bytes(payload)


def _check_sizes(variable: PyVariable) -> None:
    """Reject records whose size words would overflow."""
    data_size = variable.get_data_size()
    if data_size > MAX_WORD:
        raise VariableSizeError(
            f"Variable too large: data section is {data_size} bytes, "
            f"maximum is {MAX_WORD} "
            f"(source is {len(variable.source)} bytes)"
        )


def build_appvar(variable: PyVariable) -> bytes:
    """
    Serialize a record into a Python AppVar container.

    The record is normalized again first (default name, field widths,
    long filename limit), so fields reassigned after construction are
    serialized the same way as constructor arguments.

    Args:
        variable: The record to serialize

    Returns:
        Complete .8xv file contents

    Raises:
        VariableSizeError: If the source and long filename do not fit
            the 16-bit size fields

    Example:
        >>> data = build_appvar(PyVariable(source=b"print(1)"))
        >>> len(data)
        89
    """
    variable = replace(variable)
    _check_sizes(variable)

    payload = _build_payload(variable)
    # The payload size word counts itself
    var_data_size = len(payload) + 2

    result = bytearray(MAGIC)
    result.extend(variable.info)
    result.extend(pack_u16(variable.get_data_size()))

    # Variable header
    result.extend(HEADER_FLAGS)
    result.extend(pack_u16(var_data_size))
    result.append(TYPE_APPVAR)
    result.extend(variable.variable_name)
    result.extend(VERSION_FLAGS)
    result.extend(pack_u16(var_data_size))

    # Variable data
    result.extend(pack_u16(var_data_size - 2))
    result.extend(payload)

    checksum = calculate_data_checksum(result, len(result))
    result.extend(pack_u16(checksum))

    logger.debug(
        f"Built AppVar '{variable.get_display_name()}': "
        f"{len(variable.source)} source bytes, {len(result)} bytes total, "
        f"checksum 0x{checksum:04X}"
    )
    return bytes(result)


# =============================================================================
# Variable Builder
# =============================================================================

@dataclass
class VariableBuilder:
    """
    Builds Python AppVar files from source code.

    Holds the metadata for one variable and collects its source from
    text, bytes, or a file before building the container.

    Attributes:
        variable_name: Name in the calculator (up to 8 bytes)
        long_filename: Optional long filename shown by the Python app
        info: Optional info comment (up to 42 bytes)
        encoding: Encoding used for text sources and the long filename

    Example:
        >>> builder = VariableBuilder(variable_name="HELLO")
        >>> builder.set_source("print('hello')")
        >>> data = builder.build()
    """
    variable_name: Union[bytes, str] = DEFAULT_VARIABLE_NAME
    long_filename: Optional[str] = None
    info: Union[bytes, str, None] = None
    encoding: str = "utf-8"

    # Source bytes collected so far
    _source: bytes = field(default=b"", repr=False)

    def set_source(self, source: Union[bytes, str]) -> "VariableBuilder":
        """
        Set the program source.

        Args:
            source: Source text or raw bytes

        Returns:
            Self for method chaining
        """
        if isinstance(source, str):
            source = source.encode(self.encoding)
        self._source = bytes(source)
        return self

    def set_source_file(self, filepath: Union[str, Path]) -> "VariableBuilder":
        """
        Read the program source from a file.

        The file is read as raw bytes, so its encoding and line endings
        are preserved.

        Args:
            filepath: Path to the source file

        Returns:
            Self for method chaining

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        filepath = Path(filepath)
        self._source = filepath.read_bytes()
        logger.debug(f"Read {len(self._source)} source bytes from {filepath}")
        return self

    def get_variable(self) -> PyVariable:
        """Create the record for the current source and metadata."""
        long_filename = None
        if self.long_filename:
            long_filename = self.long_filename.encode(self.encoding)

        return PyVariable(
            source=self._source,
            variable_name=self.variable_name,
            info=self.info,
            long_filename=long_filename,
        )

    def build(self) -> bytes:
        """
        Build the complete AppVar file.

        Returns:
            Complete .8xv file as bytes

        Raises:
            VariableSizeError: If the source does not fit
        """
        return build_appvar(self.get_variable())

    def build_to_file(self, filepath: Union[str, Path]) -> int:
        """
        Build and write the AppVar file to disk.

        Args:
            filepath: Output file path

        Returns:
            Number of bytes written
        """
        filepath = Path(filepath)
        data = self.build()
        filepath.write_bytes(data)
        return len(data)


# =============================================================================
# Convenience Functions
# =============================================================================

def create_appvar(
    source: Union[bytes, str],
    variable_name: Union[bytes, str, None] = None,
    long_filename: Optional[str] = None,
    info: Union[bytes, str, None] = None,
) -> bytes:
    """
    Create a Python AppVar from source code.

    This is a convenience function for simple conversions.

    Args:
        source: Program text or raw bytes
        variable_name: Name in the calculator (default: "TIPYFILE")
        long_filename: Optional long filename
        info: Optional info comment

    Returns:
        Complete .8xv file as bytes

    Example:
        >>> data = create_appvar("print(1)", "HELLO", long_filename="hello.py")
    """
    builder = VariableBuilder(
        variable_name=variable_name or DEFAULT_VARIABLE_NAME,
        long_filename=long_filename,
        info=info,
    )
    return builder.set_source(source).build()
