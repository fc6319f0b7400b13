"""
AppVar Checksum and Word Helpers
================================

This module provides the checksum calculation and the 16-bit integer
packing used by Python AppVar containers.

Data Section Checksum
---------------------
The last two bytes of a container hold a checksum calculated as:
- Algorithm: Sum of every byte, modulo 65536
- Range: From the variable header flags (offset 0x37) up to and
  including the last source byte
- Excluded: Signature, info comment, data section size word, and the
  checksum itself

The checksum only detects corruption; it offers no protection against
deliberate tampering.

Word Packing
------------
Every size field in the container is a 16-bit little-endian word.
"""

import struct

from tipy_sdk.appvar.records import MAX_WORD, Offset


_WORD = struct.Struct("<H")


def calculate_checksum(data: bytes) -> int:
    """
    Calculate the 16-bit sum of a byte sequence.

    Args:
        data: Bytes to sum

    Returns:
        Sum of all bytes modulo 65536

    Example:
        >>> calculate_checksum(bytes([0xFF] * 258))
        258
    """
    return sum(data) & 0xFFFF


def calculate_data_checksum(container: bytes, end: int) -> int:
    """
    Calculate the checksum of a container's data section.

    Args:
        container: Container bytes
        end: Offset one past the last source byte

    Returns:
        16-bit checksum of container[0x37:end]
    """
    return calculate_checksum(container[Offset.DATA_SECTION:end])


def pack_u16(value: int) -> bytes:
    """
    Pack a value into a 16-bit little-endian word.

    Args:
        value: Value to pack (0 to 65535)

    Returns:
        2 bytes, least significant first

    Raises:
        ValueError: If value does not fit in 16 bits

    Example:
        >>> pack_u16(0x1234).hex()
        '3412'
    """
    if not 0 <= value <= MAX_WORD:
        raise ValueError(f"Value does not fit in 16 bits: {value}")
    return _WORD.pack(value)


def unpack_u16(data: bytes, offset: int = 0) -> int:
    """
    Unpack a 16-bit little-endian word.

    Args:
        data: Source bytes
        offset: Offset of the low byte

    Returns:
        The unpacked value

    Raises:
        ValueError: If fewer than 2 bytes are available at offset
    """
    if offset < 0 or offset + 2 > len(data):
        raise ValueError(
            f"Need 2 bytes at offset {offset}, buffer is {len(data)} bytes"
        )
    return _WORD.unpack_from(data, offset)[0]
