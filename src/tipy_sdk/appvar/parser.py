"""
Python AppVar Parser
====================

This module reads Python AppVar (.8xv) containers back into PyVariable
records.

The whole file must be in memory: the layout uses fixed offsets and a
trailing checksum, so it cannot be decoded incrementally from a stream.

Parse Steps
-----------
1. Signature: the first 11 bytes must equal "**TI83F*" 1A 0A 00
2. Fixed fields: info comment (0x0B) and variable name (0x3C), copied
   verbatim
3. Payload length: the word at 0x48, minus "PYCD" and the terminator
4. Long filename: if the byte at 0x4E is non-zero, it is the filename
   length; the SOH, filename, and terminator are skipped
5. Source: the remaining payload bytes
6. Checksum: recalculated over 0x37 up to the end of the source and
   compared with the two bytes that follow

Usage Examples
--------------
Parsing a file:
    >>> from tipy_sdk.appvar import parse_appvar_file
    >>> var = parse_appvar_file("HELLO.8xv")
    >>> print(var.get_source_text())

Probing before parsing:
    >>> if looks_like_appvar(data):
    ...     var = parse_appvar(data)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging

from tipy_sdk.errors import (
    AppVarError,
    InvalidFormatError,
    ChecksumMismatchError,
    MalformedLengthError,
)
from tipy_sdk.appvar.records import (
    PyVariable,
    MAGIC,
    INFO_SIZE,
    NAME_SIZE,
    TYPE_APPVAR,
    FORMAT_TAG,
    SOH,
    PAYLOAD_OVERHEAD,
    FILENAME_FRAMING,
    CHECKSUM_SIZE,
    Offset,
)
from tipy_sdk.appvar.checksum import calculate_data_checksum, unpack_u16

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Format Probe
# =============================================================================

def looks_like_appvar(data: bytes) -> bool:
    """
    Check whether data starts with the AppVar file signature.

    Only the signature is inspected; the rest of the buffer is neither
    validated nor decoded.

    Args:
        data: File contents (or at least its first 11 bytes)

    Returns:
        True if the signature matches
    """
    return bytes(data[:len(MAGIC)]) == MAGIC


# =============================================================================
# Parsing
# =============================================================================

def _check_header(data: bytes) -> None:
    """Validate the signature and that the fixed fields are present."""
    if not looks_like_appvar(data):
        raise InvalidFormatError(
            f"Invalid AppVar signature: {bytes(data[:len(MAGIC)])!r}"
        )

    if len(data) < Offset.SOURCE:
        raise InvalidFormatError(
            f"AppVar header truncated: {len(data)} bytes, "
            f"need at least {int(Offset.SOURCE)}"
        )

    type_id = data[Offset.TYPE_ID]
    if type_id != TYPE_APPVAR:
        logger.warning(f"Unexpected variable type 0x{type_id:02X} (expected 0x{TYPE_APPVAR:02X})")

    tag = bytes(data[Offset.FORMAT_TAG:Offset.FORMAT_TAG + len(FORMAT_TAG)])
    if tag != FORMAT_TAG:
        logger.warning(f"Unexpected payload tag {tag!r} (expected {FORMAT_TAG!r})")


def parse_appvar(data: bytes) -> PyVariable:
    """
    Parse a Python AppVar container.

    Args:
        data: The complete .8xv file contents

    Returns:
        The decoded PyVariable

    Raises:
        InvalidFormatError: If the signature is wrong or the data is
            truncated
        MalformedLengthError: If the payload length is too small for the
            fields it must contain
        ChecksumMismatchError: If the stored checksum does not match

    Example:
        >>> var = parse_appvar(Path("HELLO.8xv").read_bytes())
        >>> var.get_display_name()
        'HELLO'
    """
    _check_header(data)

    info = bytes(data[Offset.INFO:Offset.INFO + INFO_SIZE])
    variable_name = bytes(data[Offset.NAME:Offset.NAME + NAME_SIZE])

    declared = unpack_u16(data, Offset.PAYLOAD_SIZE)
    source_len = declared - PAYLOAD_OVERHEAD
    if source_len < 0:
        raise MalformedLengthError(declared, PAYLOAD_OVERHEAD)

    long_filename = None
    filename_len = data[Offset.FILENAME_LENGTH]

    if filename_len == 0:
        start = Offset.SOURCE
    else:
        # SOH + filename + terminator
        source_len -= FILENAME_FRAMING + filename_len
        if source_len < 0:
            raise MalformedLengthError(
                declared, PAYLOAD_OVERHEAD + FILENAME_FRAMING + filename_len
            )

        filename_end = Offset.FILENAME + filename_len
        if len(data) <= filename_end:
            raise InvalidFormatError(
                f"Long filename truncated: declared {filename_len} bytes, "
                f"file is {len(data)} bytes",
                offset=Offset.FILENAME,
            )

        if data[Offset.SOH] != SOH:
            logger.warning(f"Expected SOH before long filename, got 0x{data[Offset.SOH]:02X}")
        if data[filename_end] != 0x00:
            logger.warning(f"Long filename not terminated, got 0x{data[filename_end]:02X}")

        long_filename = bytes(data[Offset.FILENAME:filename_end])
        start = filename_end + 1

    end = start + source_len
    if end + CHECKSUM_SIZE > len(data):
        raise InvalidFormatError(
            f"AppVar truncated: source and checksum need {end + CHECKSUM_SIZE} "
            f"bytes, file is {len(data)} bytes",
            offset=start,
        )

    stored = unpack_u16(data, end)
    calculated = calculate_data_checksum(data, end)
    if stored != calculated:
        raise ChecksumMismatchError(stored, calculated)

    data_size = unpack_u16(data, Offset.DATA_SIZE)
    if data_size != end - Offset.DATA_SECTION:
        logger.warning(
            f"Data size mismatch: declared {data_size}, "
            f"actual {end - Offset.DATA_SECTION}"
        )

    trailing = len(data) - end - CHECKSUM_SIZE
    if trailing:
        logger.debug(f"Ignoring {trailing} trailing bytes after checksum")

    variable = PyVariable(
        source=bytes(data[start:end]),
        variable_name=variable_name,
        info=info,
        long_filename=long_filename,
    )
    logger.debug(
        f"Parsed AppVar '{variable.get_display_name()}' "
        f"({source_len} source bytes, checksum 0x{stored:04X})"
    )
    return variable


def parse_appvar_file(filepath: Union[str, Path]) -> PyVariable:
    """
    Read and parse an AppVar file from disk.

    Args:
        filepath: Path to the .8xv file

    Returns:
        The decoded PyVariable

    Raises:
        FileNotFoundError: If the file doesn't exist
        AppVarError: If the file is not a valid Python AppVar
    """
    filepath = Path(filepath)
    return parse_appvar(filepath.read_bytes())


# =============================================================================
# Variable Parser
# =============================================================================

@dataclass
class VariableParser:
    """
    Parser for Python AppVar files.

    Wraps parse_appvar() and keeps the raw data alongside the decoded
    record, for tools that report on a file.

    Attributes:
        data: The raw .8xv file bytes
        variable: The decoded record
        is_valid: True once parsing succeeded
        error_message: The parse error, if any

    Example:
        >>> parser = VariableParser.from_file("HELLO.8xv")
        >>> print(parser.get_info()["name"])
    """
    data: bytes = field(repr=False)
    variable: Optional[PyVariable] = None
    is_valid: bool = False
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        """Parse the data after initialization."""
        self._parse()

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "VariableParser":
        """
        Create a VariableParser from a file path.

        Raises:
            FileNotFoundError: If the file doesn't exist
            AppVarError: If the file cannot be parsed
        """
        filepath = Path(filepath)
        return cls(data=filepath.read_bytes())

    @classmethod
    def from_bytes(cls, data: bytes) -> "VariableParser":
        """Create a VariableParser from raw bytes."""
        return cls(data=data)

    def _parse(self) -> None:
        try:
            self.variable = parse_appvar(self.data)
            self.is_valid = True
        except AppVarError as e:
            self.is_valid = False
            self.error_message = str(e)
            logger.error(f"Failed to parse AppVar: {e}")
            raise

    def get_checksum(self) -> int:
        """Get the stored checksum (the word after the source)."""
        end = Offset.DATA_SECTION + self.variable.get_data_size()
        return unpack_u16(self.data, end)

    def get_info(self) -> dict:
        """
        Get summary information about the variable.

        Returns:
            Dictionary with variable information
        """
        var = self.variable
        return {
            "name": var.get_display_name(),
            "long_filename": var.get_long_filename(),
            "info": var.get_info_text(),
            "source_bytes": len(var.source),
            "source_lines": len(var.source.splitlines()),
            "data_size": var.get_data_size(),
            "file_size": len(self.data),
            "checksum": f"0x{self.get_checksum():04X}",
        }
