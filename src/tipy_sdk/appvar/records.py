"""
Python AppVar Layout and Record Definitions
===========================================

This module defines the byte layout of a TI-83 Premium CE / TI-84 Plus CE
Python variable file (.8xv) and the PyVariable record that holds its
decoded contents.

Container Structure Overview
----------------------------
A Python AppVar file contains:
1. File header (55 bytes): signature, info comment, data section size
2. Data section:
   - Variable header (13 bytes): flags, sizes, type, name, version
   - Variable data: 2-byte length word + "PYCD" payload
3. Checksum (2 bytes): 16-bit sum of the whole data section

All multi-byte integers are 16-bit little-endian.

Byte Layout
-----------
    Offset  Size  Field
    ------  ----  -----
    0x00    11    Signature "**TI83F*" 1A 0A 00
    0x0B    42    Info comment (not null terminated)
    0x35    2     Data section size
    0x37    2     Variable header flags (0D 00)
    0x39    2     Variable data size
    0x3B    1     Type ID (0x15, AppVar)
    0x3C    8     Variable name (not null terminated)
    0x44    2     Version and archive flag (00 00)
    0x46    2     Variable data size (again)
    0x48    2     Payload size (variable data size - 2)
    0x4A    4     Format tag "PYCD"
    0x4E    1     Long filename length (0 if none)
    0x4F    1     SOH (0x01), only with a long filename
    0x50    n     Long filename, only with a long filename
    0x50+n  1     NUL terminator, only with a long filename
    ...     m     Python source
    ...     2     Checksum

Without a long filename, the length byte at 0x4E is zero and doubles as
the terminator, so the source starts at 0x4F.

Reference
---------
- TI-83 Plus link/file format guide (file header and variable entry)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union

from tipy_sdk.errors import VariableSizeError


# =============================================================================
# Format Constants
# =============================================================================

# File signature: "**TI83F*" followed by the 1A 0A 00 family marker
MAGIC = b"**TI83F*\x1a\x0a\x00"

# Fixed-width metadata fields
INFO_SIZE = 42
NAME_SIZE = 8

# Variable header flags word (header length 0x000D, little-endian)
HEADER_FLAGS = b"\x0d\x00"

# AppVar type ID; Python programs are stored as AppVars
TYPE_APPVAR = 0x15

# Version and archive flag bytes
VERSION_FLAGS = b"\x00\x00"

# Payload tag marking the AppVar as Python source
FORMAT_TAG = b"PYCD"

# Start-of-heading marker preceding a long filename
SOH = 0x01

# Name used when no variable name is given
DEFAULT_VARIABLE_NAME = b"TIPYFILE"

# Long filename length is stored in a single byte
MAX_FILENAME_LENGTH = 0xFF

# Bytes from the start of the data section to the first source byte
# when there is no long filename (variable header + size word + tag + NUL)
DATA_SECTION_OVERHEAD = 24

# Payload bytes that exist even without a long filename ("PYCD" + NUL)
PAYLOAD_OVERHEAD = 5

# Extra payload bytes that frame a long filename (SOH + NUL)
FILENAME_FRAMING = 2

# Largest value a size word can hold
MAX_WORD = 0xFFFF

# Checksum word trailing the data section
CHECKSUM_SIZE = 2


class Offset(IntEnum):
    """
    Fixed offsets into a Python AppVar container.

    Offsets after FILENAME_LENGTH depend on whether a long filename is
    present and are computed by the parser.
    """
    MAGIC = 0x00
    INFO = 0x0B
    DATA_SIZE = 0x35
    DATA_SECTION = 0x37     # First byte covered by the checksum
    VAR_DATA_SIZE = 0x39
    TYPE_ID = 0x3B
    NAME = 0x3C
    VERSION = 0x44
    VAR_DATA_SIZE_2 = 0x46
    PAYLOAD_SIZE = 0x48
    FORMAT_TAG = 0x4A
    FILENAME_LENGTH = 0x4E
    SOURCE = 0x4F           # Source start without a long filename
    SOH = 0x4F
    FILENAME = 0x50


# Smallest complete container: header up to the source, plus the checksum
MIN_CONTAINER_SIZE = Offset.SOURCE + CHECKSUM_SIZE


# =============================================================================
# Field Helpers
# =============================================================================

def fit_field(value: Union[bytes, str, None], width: int) -> bytes:
    """
    Truncate or zero-pad a value to a fixed-width field.

    Args:
        value: Field content (str is encoded as ASCII, unknown chars -> '?')
        width: Field width in bytes

    Returns:
        Exactly `width` bytes

    Example:
        >>> fit_field("HELLO", 8)
        b'HELLO\\x00\\x00\\x00'
        >>> fit_field(b"VERYLONGNAME", 8)
        b'VERYLONG'
    """
    if value is None:
        return bytes(width)
    if isinstance(value, str):
        value = value.encode("ascii", errors="replace")
    return bytes(value[:width]).ljust(width, b"\x00")


def _to_bytes(value: Union[bytes, str], encoding: str = "utf-8") -> bytes:
    if isinstance(value, str):
        return value.encode(encoding)
    return bytes(value)


# =============================================================================
# Python Variable Record
# =============================================================================

@dataclass
class PyVariable:
    """
    Decoded contents of one Python AppVar.

    Fields are normalized on construction so that a record compares
    equal to the record parsed back from its serialized form:
    - variable_name: exactly 8 bytes; empty -> "TIPYFILE"
    - info: exactly 42 bytes, zero-padded
    - long_filename: None when absent or empty

    Attributes:
        source: Python source bytes
        variable_name: In-calculator variable name (8 bytes)
        info: Free-form comment field (42 bytes)
        long_filename: Optional display name shown by the Python app

    Example:
        >>> var = PyVariable(source=b"print(1)", variable_name="HELLO")
        >>> var.get_display_name()
        'HELLO'
    """
    source: bytes = field(default_factory=bytes)
    variable_name: bytes = DEFAULT_VARIABLE_NAME
    info: bytes = field(default_factory=lambda: bytes(INFO_SIZE))
    long_filename: Optional[bytes] = None

    def __post_init__(self) -> None:
        """Normalize field types and widths."""
        self.source = _to_bytes(self.source)

        self.variable_name = fit_field(
            self.variable_name or DEFAULT_VARIABLE_NAME, NAME_SIZE
        )

        self.info = fit_field(self.info, INFO_SIZE)

        if self.long_filename is not None:
            filename = _to_bytes(self.long_filename)
            if len(filename) > MAX_FILENAME_LENGTH:
                raise VariableSizeError(
                    f"Long filename is {len(filename)} bytes, "
                    f"maximum is {MAX_FILENAME_LENGTH}"
                )
            self.long_filename = filename or None

    @classmethod
    def from_text(
        cls,
        source: str,
        variable_name: Union[bytes, str, None] = None,
        long_filename: Optional[str] = None,
        info: Union[bytes, str, None] = None,
        encoding: str = "utf-8",
    ) -> "PyVariable":
        """
        Create a record from Python source text.

        Args:
            source: Program text
            variable_name: Variable name (default: "TIPYFILE")
            long_filename: Optional long filename
            info: Optional info comment
            encoding: Encoding for source and long filename

        Returns:
            A normalized PyVariable
        """
        return cls(
            source=source.encode(encoding),
            variable_name=variable_name or DEFAULT_VARIABLE_NAME,
            info=info,
            long_filename=long_filename.encode(encoding) if long_filename else None,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def has_long_filename(self) -> bool:
        return self.long_filename is not None

    def get_display_name(self) -> str:
        """Get the variable name without trailing padding."""
        return self.variable_name.rstrip(b"\x00").decode("ascii", errors="replace")

    def get_info_text(self) -> str:
        """Get the info comment up to its first NUL."""
        return self.info.split(b"\x00", 1)[0].decode("ascii", errors="replace")

    def get_long_filename(self, encoding: str = "utf-8") -> Optional[str]:
        """Get the long filename as text, or None if absent."""
        if self.long_filename is None:
            return None
        return self.long_filename.decode(encoding, errors="replace")

    def get_source_text(self, encoding: str = "utf-8") -> str:
        """Decode the source bytes."""
        return self.source.decode(encoding, errors="replace")

    # =========================================================================
    # Size Calculations
    # =========================================================================

    def get_filename_block_size(self) -> int:
        """Bytes taken by the SOH, long filename, and terminator (0 if absent)."""
        if self.long_filename is None:
            return 0
        return FILENAME_FRAMING + len(self.long_filename)

    def get_payload_size(self) -> int:
        """
        Get the variable data size (written at 0x39 and 0x46).

        This counts the payload size word itself, so it is two more than
        the value written at 0x48.
        """
        return (
            len(FORMAT_TAG)
            + self.get_filename_block_size()
            + 1
            + len(self.source)
            + 2
        )

    def get_data_size(self) -> int:
        """Get the data section size (written at 0x35)."""
        return DATA_SECTION_OVERHEAD + self.get_filename_block_size() + len(self.source)

    def get_container_size(self) -> int:
        """Get the total serialized size in bytes."""
        return Offset.DATA_SECTION + self.get_data_size() + CHECKSUM_SIZE
