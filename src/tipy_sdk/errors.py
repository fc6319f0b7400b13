"""
TI Python SDK Error Hierarchy
=============================

This module defines the exception hierarchy for the whole SDK.
All exceptions inherit from TipyError, allowing callers to catch every
SDK-related error with a single except clause if desired.

Exception Hierarchy
-------------------
TipyError (base)
└── AppVarError (AppVar container handling)
    ├── InvalidFormatError - not an AppVar, or truncated
    ├── ChecksumMismatchError - right shape, corrupted content
    ├── MalformedLengthError - payload length fields are inconsistent
    └── VariableSizeError - record does not fit the 16-bit framing

Allocation failures are not part of this hierarchy: a MemoryError raised
while building a container is left to propagate to the caller.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class TipyError(Exception):
    """
    Base exception for all SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch every SDK-related error with a single except clause:

        try:
            variable = parse_appvar(data)
        except TipyError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# AppVar Container Exceptions
# =============================================================================

class AppVarError(TipyError):
    """Base exception for AppVar container handling errors."""
    pass


class InvalidFormatError(AppVarError):
    """
    The buffer is not a Python AppVar container.

    Raised when parsing data that:
    - Does not start with the "**TI83F*" signature
    - Is too short to hold the fixed header fields
    - Ends before the declared payload and checksum
    """

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset 0x{offset:02X})"
        super().__init__(message)


class ChecksumMismatchError(AppVarError):
    """
    Checksum verification failed.

    Raised when the 16-bit sum stored after the source does not match
    the sum recalculated over the data section. The container is
    structurally valid but its content was corrupted or tampered with.
    """

    def __init__(self, stored: int, calculated: int, message: str = ""):
        self.stored = stored
        self.calculated = calculated
        if not message:
            message = (
                f"Checksum mismatch: stored 0x{stored:04X}, "
                f"calculated 0x{calculated:04X}"
            )
        super().__init__(message)


class MalformedLengthError(AppVarError):
    """
    A derived payload length is negative.

    Raised when the payload size field is too small to hold the
    mandatory "PYCD" tag, the terminator, and (when present) the long
    filename block it claims to contain.
    """

    def __init__(self, declared: int, required: int, message: str = ""):
        self.declared = declared
        self.required = required
        if not message:
            message = (
                f"Malformed payload length: declared {declared} bytes, "
                f"but at least {required} are required"
            )
        super().__init__(message)


class VariableSizeError(AppVarError):
    """
    The record does not fit the container's size fields.

    All sizes are stored as 16-bit words and the long filename length
    as a single byte, which bounds:
    - long filename: at most 255 bytes
    - data section (header, payload, source): at most 65535 bytes
    """
    pass
