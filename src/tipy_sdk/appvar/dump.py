"""
AppVar Field Dumper
===================

Splits a container into its individual fields for debugging, without
validating it. Corrupted, truncated, and foreign files can all be dumped;
the dump stops at the first field that does not fit and reports the
leftover bytes as "(truncated)".

Output format (one line per field):

    hdr: 2a2a 5449 3833 462a 1a0a 00
    info: ""
    dsize: 32
    ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tipy_sdk.appvar.records import (
    MAGIC,
    INFO_SIZE,
    NAME_SIZE,
    FORMAT_TAG,
    PAYLOAD_OVERHEAD,
    FILENAME_FRAMING,
    CHECKSUM_SIZE,
)


class FieldKind(Enum):
    """How a field's bytes are rendered."""
    BIN = "bin"      # Hex pairs
    TEXT = "text"    # Quoted text, NULs stripped
    WORD = "word"    # 16-bit little-endian number
    BYTE = "byte"    # 8-bit number


@dataclass(frozen=True)
class DumpField:
    """
    One field of a dumped container.

    Attributes:
        name: Short field label
        offset: Offset of the first byte
        raw: The field's bytes
        kind: How to render the bytes
    """
    name: str
    offset: int
    raw: bytes
    kind: FieldKind

    @property
    def value(self) -> Optional[int]:
        """Numeric value for WORD and BYTE fields, None otherwise."""
        if self.kind is FieldKind.WORD and len(self.raw) == 2:
            return self.raw[0] | (self.raw[1] << 8)
        if self.kind is FieldKind.BYTE and len(self.raw) == 1:
            return self.raw[0]
        return None

    def render(self) -> str:
        """Render the field value as text."""
        if self.kind is FieldKind.TEXT:
            text = self.raw.rstrip(b"\x00").decode("latin-1")
            return f'"{text}"'
        if self.value is not None:
            return str(self.value)
        return format_hex(self.raw)


def format_hex(data: bytes) -> str:
    """
    Format bytes as lowercase hex, grouped in 16-bit pairs.

    Example:
        >>> format_hex(b"**TI8")
        '2a2a 5449 38'
    """
    pairs = [data[i:i + 2].hex() for i in range(0, len(data), 2)]
    return " ".join(pairs)


class _FieldReader:
    """Walks the buffer and collects fields until the data runs out."""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.offset = 0
        self.fields: list[DumpField] = []
        self.truncated = False

    def take(self, name: str, size: int, kind: FieldKind) -> Optional[DumpField]:
        if self.truncated:
            return None
        end = self.offset + size
        if size < 0 or end > len(self.data):
            self.truncated = True
            self.fields.append(
                DumpField("(truncated)", self.offset, self.data[self.offset:], FieldKind.BIN)
            )
            return None
        entry = DumpField(name, self.offset, self.data[self.offset:end], kind)
        self.fields.append(entry)
        self.offset = end
        return entry


def dump_fields(data: bytes) -> list[DumpField]:
    """
    Split a container into fields.

    Never raises for malformed input. The payload length is derived the
    same way the parser does it; a length that underflows is dumped as
    truncated.

    Args:
        data: Container bytes (possibly corrupted or truncated)

    Returns:
        Fields in file order
    """
    reader = _FieldReader(data)
    take = reader.take

    take("hdr", len(MAGIC), FieldKind.BIN)
    take("info", INFO_SIZE, FieldKind.TEXT)
    take("dsize", 2, FieldKind.WORD)
    take("flags", 2, FieldKind.BIN)
    take("psize", 2, FieldKind.WORD)
    take("vid", 1, FieldKind.BIN)
    take("vname", NAME_SIZE, FieldKind.TEXT)
    take("version", 2, FieldKind.BIN)
    take("psize2", 2, FieldKind.WORD)
    plen_field = take("plen", 2, FieldKind.WORD)
    take("pyfmt", len(FORMAT_TAG), FieldKind.TEXT)
    fnlen_field = take("fnlen", 1, FieldKind.BYTE)

    if reader.truncated:
        return reader.fields

    source_len = plen_field.value - PAYLOAD_OVERHEAD
    filename_len = fnlen_field.value
    if filename_len:
        source_len -= FILENAME_FRAMING + filename_len
        take("soh", 1, FieldKind.BIN)
        take("fname", filename_len, FieldKind.TEXT)
        take("nul", 1, FieldKind.BIN)

    take("payload", source_len, FieldKind.TEXT)
    take("checksum", CHECKSUM_SIZE, FieldKind.WORD)

    if not reader.truncated and reader.offset < len(reader.data):
        reader.fields.append(
            DumpField("trailing", reader.offset, reader.data[reader.offset:], FieldKind.BIN)
        )
    return reader.fields


def format_dump(fields: list[DumpField]) -> str:
    """
    Render dumped fields as "name: value" lines.

    Args:
        fields: Output of dump_fields()

    Returns:
        Multi-line text, one field per line
    """
    return "\n".join(f"{entry.name}: {entry.render()}" for entry in fields)
