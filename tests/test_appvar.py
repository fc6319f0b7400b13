"""
AppVar Module Unit Tests
========================

This module contains tests for the Python AppVar (.8xv) codec.

Test Categories
---------------
1. Records: Field normalization and size calculations
2. Checksum: 16-bit sum and little-endian word helpers
3. Builder: Container layout and size limits
4. Parser: Decoding, signature rejection, and corruption detection
5. Round-trip: Build/parse cycles
6. Dump: Field-by-field debugging output
"""

import pytest
import struct

from tipy_sdk.appvar import (
    # Records
    PyVariable,
    Offset,
    MAGIC,
    INFO_SIZE,
    NAME_SIZE,
    TYPE_APPVAR,
    FORMAT_TAG,
    DEFAULT_VARIABLE_NAME,
    MIN_CONTAINER_SIZE,
    fit_field,
    # Checksum
    calculate_checksum,
    calculate_data_checksum,
    pack_u16,
    unpack_u16,
    # Parser
    VariableParser,
    looks_like_appvar,
    parse_appvar,
    parse_appvar_file,
    # Builder
    VariableBuilder,
    build_appvar,
    create_appvar,
    # Dump
    FieldKind,
    dump_fields,
    format_dump,
    format_hex,
)
from tipy_sdk.errors import (
    AppVarError,
    InvalidFormatError,
    ChecksumMismatchError,
    MalformedLengthError,
    VariableSizeError,
)


def word_at(data: bytes, offset: int) -> int:
    """Read a little-endian 16-bit word."""
    return struct.unpack_from("<H", data, offset)[0]


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def simple_variable() -> PyVariable:
    """The reference program: print(1) named PYFILE, no long filename."""
    return PyVariable(source=b"print(1)", variable_name="PYFILE")


@pytest.fixture
def simple_appvar(simple_variable: PyVariable) -> bytes:
    """
    Serialized reference program (89 bytes).

    Data section (from 0x37):
        0D 00 | 0F 00 | 15 | "PYFILE" 00 00 | 00 00 | 0F 00 | 0D 00 |
        "PYCD" | 00 | "print(1)"
    Checksum: 0x05F5
    """
    return build_appvar(simple_variable)


@pytest.fixture
def named_variable() -> PyVariable:
    """A program with a long filename and an info comment."""
    return PyVariable(
        source=b"import math\nprint(math.pi)\n",
        variable_name="CIRCLE",
        info="Created by tipyvar",
        long_filename=b"circle.py",
    )


@pytest.fixture
def named_appvar(named_variable: PyVariable) -> bytes:
    return build_appvar(named_variable)


# =============================================================================
# Record Tests
# =============================================================================

class TestFitField:
    """Tests for fixed-width field normalization."""

    def test_pads_with_zeros(self):
        assert fit_field("HELLO", 8) == b"HELLO\x00\x00\x00"

    def test_truncates(self):
        assert fit_field(b"VERYLONGNAME", 8) == b"VERYLONG"

    def test_none_is_all_zeros(self):
        assert fit_field(None, INFO_SIZE) == bytes(INFO_SIZE)

    def test_non_ascii_replaced(self):
        """Characters outside ASCII are replaced, not rejected."""
        assert fit_field("é", 2) == b"?\x00"


class TestPyVariable:
    """Tests for the PyVariable record."""

    def test_defaults(self):
        var = PyVariable(source=b"x = 1")
        assert var.variable_name == DEFAULT_VARIABLE_NAME
        assert var.info == bytes(INFO_SIZE)
        assert var.long_filename is None
        assert not var.has_long_filename

    def test_empty_name_uses_default(self):
        var = PyVariable(source=b"", variable_name=b"")
        assert var.variable_name == b"TIPYFILE"

    def test_name_is_padded(self):
        var = PyVariable(source=b"", variable_name="AB")
        assert var.variable_name == b"AB\x00\x00\x00\x00\x00\x00"
        assert var.get_display_name() == "AB"

    def test_long_name_truncated(self):
        var = PyVariable(source=b"", variable_name="VERYLONGNAME")
        assert var.variable_name == b"VERYLONG"

    def test_long_info_truncated(self):
        var = PyVariable(source=b"", info="x" * 50)
        assert var.info == b"x" * INFO_SIZE

    def test_info_text(self):
        var = PyVariable(source=b"", info="hello")
        assert var.get_info_text() == "hello"

    def test_source_text_is_encoded(self):
        var = PyVariable(source="print('é')")
        assert var.source == "print('é')".encode("utf-8")

    def test_empty_long_filename_is_absent(self):
        var = PyVariable(source=b"", long_filename=b"")
        assert var.long_filename is None

    def test_long_filename_limit(self):
        PyVariable(source=b"", long_filename=b"a" * 255)
        with pytest.raises(VariableSizeError, match="255"):
            PyVariable(source=b"", long_filename=b"a" * 256)

    def test_from_text(self):
        var = PyVariable.from_text("print(1)", "hello", long_filename="hello.py")
        assert var.source == b"print(1)"
        assert var.get_display_name() == "hello"
        assert var.get_long_filename() == "hello.py"

    def test_sizes_without_filename(self, simple_variable):
        assert simple_variable.get_filename_block_size() == 0
        assert simple_variable.get_payload_size() == 15
        assert simple_variable.get_data_size() == 32
        assert simple_variable.get_container_size() == 89

    def test_sizes_with_filename(self):
        var = PyVariable(source=b"print(1)", long_filename=b"a.py")
        assert var.get_filename_block_size() == 6
        assert var.get_payload_size() == 21
        assert var.get_data_size() == 38
        assert var.get_container_size() == 95


class TestOffsets:
    """Tests for the layout constants."""

    def test_signature(self):
        assert MAGIC == b"**TI83F*\x1a\x0a\x00"
        assert len(MAGIC) == Offset.INFO

    def test_fixed_offsets(self):
        assert Offset.DATA_SIZE == Offset.INFO + INFO_SIZE
        assert Offset.VERSION == Offset.NAME + NAME_SIZE
        assert Offset.FILENAME_LENGTH == Offset.FORMAT_TAG + len(FORMAT_TAG)

    def test_minimum_container(self):
        assert MIN_CONTAINER_SIZE == 81
        assert len(build_appvar(PyVariable(source=b""))) == MIN_CONTAINER_SIZE


# =============================================================================
# Checksum Tests
# =============================================================================

class TestChecksum:
    """Tests for checksum and word helpers."""

    def test_sum(self):
        assert calculate_checksum(b"\x01\x02\x03") == 6

    def test_sum_wraps(self):
        assert calculate_checksum(b"\xff" * 258) == (255 * 258) & 0xFFFF

    def test_empty(self):
        assert calculate_checksum(b"") == 0

    def test_data_checksum_starts_at_data_section(self):
        data = b"\xff" * Offset.DATA_SECTION + b"\x01\x02"
        assert calculate_data_checksum(data, len(data)) == 3

    def test_pack_u16_little_endian(self):
        assert pack_u16(0x1234) == b"\x34\x12"
        assert pack_u16(0) == b"\x00\x00"

    def test_pack_u16_range(self):
        with pytest.raises(ValueError):
            pack_u16(0x10000)
        with pytest.raises(ValueError):
            pack_u16(-1)

    def test_unpack_u16(self):
        assert unpack_u16(b"\x00\x34\x12", 1) == 0x1234

    def test_unpack_u16_short(self):
        with pytest.raises(ValueError):
            unpack_u16(b"\x01", 0)


# =============================================================================
# Builder Tests
# =============================================================================

class TestBuildAppvar:
    """Tests for container serialization."""

    def test_reference_size(self, simple_appvar):
        assert len(simple_appvar) == 89

    def test_reference_size_fields(self, simple_appvar):
        assert word_at(simple_appvar, Offset.DATA_SIZE) == 32
        assert word_at(simple_appvar, Offset.VAR_DATA_SIZE) == 15
        assert word_at(simple_appvar, Offset.VAR_DATA_SIZE_2) == 15
        assert word_at(simple_appvar, Offset.PAYLOAD_SIZE) == 13

    def test_reference_header(self, simple_appvar):
        assert simple_appvar[:11] == MAGIC
        assert simple_appvar[Offset.INFO:Offset.DATA_SIZE] == bytes(INFO_SIZE)
        assert simple_appvar[Offset.DATA_SECTION:Offset.DATA_SECTION + 2] == b"\x0d\x00"
        assert simple_appvar[Offset.TYPE_ID] == TYPE_APPVAR
        assert simple_appvar[Offset.NAME:Offset.VERSION] == b"PYFILE\x00\x00"
        assert simple_appvar[Offset.VERSION:Offset.VAR_DATA_SIZE_2] == b"\x00\x00"

    def test_reference_payload(self, simple_appvar):
        assert simple_appvar[Offset.FORMAT_TAG:Offset.FILENAME_LENGTH] == b"PYCD"
        assert simple_appvar[Offset.FILENAME_LENGTH] == 0
        assert simple_appvar[Offset.SOURCE:-2] == b"print(1)"

    def test_reference_checksum(self, simple_appvar):
        assert simple_appvar[-2:] == b"\xf5\x05"
        expected = sum(simple_appvar[Offset.DATA_SECTION:-2]) & 0xFFFF
        assert word_at(simple_appvar, len(simple_appvar) - 2) == expected

    def test_long_filename_block(self, named_appvar):
        assert named_appvar[Offset.FILENAME_LENGTH] == len(b"circle.py")
        assert named_appvar[Offset.SOH] == 0x01
        end = Offset.FILENAME + len(b"circle.py")
        assert named_appvar[Offset.FILENAME:end] == b"circle.py"
        assert named_appvar[end] == 0x00
        assert named_appvar[end + 1:-2] == b"import math\nprint(math.pi)\n"

    def test_redundant_sizes_with_filename(self, named_variable, named_appvar):
        payload_size = named_variable.get_payload_size()
        assert word_at(named_appvar, Offset.VAR_DATA_SIZE) == payload_size
        assert word_at(named_appvar, Offset.VAR_DATA_SIZE_2) == payload_size
        assert word_at(named_appvar, Offset.PAYLOAD_SIZE) == payload_size - 2
        assert word_at(named_appvar, Offset.DATA_SIZE) == named_variable.get_data_size()
        assert len(named_appvar) == named_variable.get_container_size()

    def test_info_written(self, named_appvar):
        info = named_appvar[Offset.INFO:Offset.DATA_SIZE]
        assert info.startswith(b"Created by tipyvar\x00")

    def test_source_too_large(self):
        var = PyVariable(source=b"#" * 0xFFFF)
        with pytest.raises(VariableSizeError, match="too large"):
            build_appvar(var)

    def test_reassigned_empty_name_uses_default(self, simple_variable):
        simple_variable.variable_name = b""
        data = build_appvar(simple_variable)
        assert len(data) == 89
        assert data[Offset.NAME:Offset.VERSION] == DEFAULT_VARIABLE_NAME
        assert parse_appvar(data).variable_name == DEFAULT_VARIABLE_NAME

    def test_reassigned_fields_fitted(self, simple_variable):
        simple_variable.variable_name = b"VERYLONGNAME"
        simple_variable.info = b"x" * 50
        data = build_appvar(simple_variable)
        assert len(data) == 89
        assert data[Offset.INFO:Offset.DATA_SIZE] == b"x" * INFO_SIZE
        assert data[Offset.NAME:Offset.VERSION] == b"VERYLONG"
        assert word_at(data, Offset.PAYLOAD_SIZE) == 13

    def test_reassigned_long_filename_limit(self, simple_variable):
        simple_variable.long_filename = b"f" * 256
        with pytest.raises(VariableSizeError, match="255"):
            build_appvar(simple_variable)

    def test_reassigned_empty_long_filename_is_absent(self, simple_variable):
        simple_variable.long_filename = b""
        data = build_appvar(simple_variable)
        assert data[Offset.FILENAME_LENGTH] == 0
        assert parse_appvar(data).long_filename is None

    def test_record_left_unchanged(self, simple_variable):
        simple_variable.info = b"short"
        build_appvar(simple_variable)
        assert simple_variable.info == b"short"

    def test_largest_source(self):
        var = PyVariable(source=b"#" * (0xFFFF - 24))
        data = build_appvar(var)
        assert word_at(data, Offset.DATA_SIZE) == 0xFFFF


class TestVariableBuilder:
    """Tests for VariableBuilder."""

    def test_build_from_text(self):
        data = VariableBuilder(variable_name="HELLO").set_source("print(1)").build()
        var = parse_appvar(data)
        assert var.get_display_name() == "HELLO"
        assert var.source == b"print(1)"

    def test_long_filename_encoded(self):
        builder = VariableBuilder(long_filename="héllo.py")
        var = builder.set_source("").get_variable()
        assert var.long_filename == "héllo.py".encode("utf-8")

    def test_build_from_file(self, tmp_path):
        source = tmp_path / "prog.py"
        source.write_bytes(b"x = 1\r\ny = 2\r\n")
        output = tmp_path / "PROG.8xv"

        builder = VariableBuilder(variable_name="PROG")
        size = builder.set_source_file(source).build_to_file(output)

        assert size == output.stat().st_size
        # Line endings are kept as-is
        assert parse_appvar_file(output).source == b"x = 1\r\ny = 2\r\n"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            VariableBuilder().set_source_file(tmp_path / "missing.py")

    def test_create_appvar(self):
        data = create_appvar("print(1)", "PYFILE")
        assert len(data) == 89
        assert data[-2:] == b"\xf5\x05"

    def test_create_appvar_default_name(self):
        var = parse_appvar(create_appvar("pass"))
        assert var.variable_name == b"TIPYFILE"


# =============================================================================
# Parser Tests
# =============================================================================

class TestLooksLikeAppvar:
    """Tests for the signature probe."""

    def test_valid(self, simple_appvar):
        assert looks_like_appvar(simple_appvar)

    def test_signature_only(self):
        assert looks_like_appvar(MAGIC)

    def test_short_buffer(self):
        assert not looks_like_appvar(b"**TI83F*")
        assert not looks_like_appvar(b"")

    def test_other_calculator_family(self):
        assert not looks_like_appvar(b"**TI83F*\x1a\x0a\x01" + bytes(80))


class TestParseAppvar:
    """Tests for parse_appvar()."""

    def test_reference(self, simple_appvar):
        var = parse_appvar(simple_appvar)
        assert var.source == b"print(1)"
        assert var.variable_name == b"PYFILE\x00\x00"
        assert var.long_filename is None
        assert var.info == bytes(INFO_SIZE)

    def test_long_filename(self, named_appvar):
        var = parse_appvar(named_appvar)
        assert var.get_long_filename() == "circle.py"
        assert var.get_info_text() == "Created by tipyvar"
        assert var.get_source_text() == "import math\nprint(math.pi)\n"

    def test_all_zero_name_kept(self):
        data = build_appvar(PyVariable(source=b"x", variable_name=bytes(NAME_SIZE)))
        var = parse_appvar(data)
        assert var.variable_name == bytes(NAME_SIZE)
        assert var.get_display_name() == ""

    def test_trailing_bytes_ignored(self, simple_appvar):
        var = parse_appvar(simple_appvar + b"garbage")
        assert var.source == b"print(1)"

    def test_accepts_bytearray(self, simple_appvar):
        var = parse_appvar(bytearray(simple_appvar))
        assert var.source == b"print(1)"

    def test_parse_file(self, tmp_path, simple_appvar):
        path = tmp_path / "PYFILE.8xv"
        path.write_bytes(simple_appvar)
        assert parse_appvar_file(path).source == b"print(1)"
        assert parse_appvar_file(str(path)).source == b"print(1)"


class TestParseRejection:
    """Tests for invalid, truncated, and corrupted input."""

    @pytest.mark.parametrize("data", [
        b"",
        b"**TI83F*",
        b"**TI82**\x1a\x0a\x00",
        b"not an appvar at all",
    ])
    def test_bad_signature_short(self, data):
        with pytest.raises(InvalidFormatError, match="signature"):
            parse_appvar(data)

    def test_bad_signature_long(self, simple_appvar):
        data = b"**TI73F*" + simple_appvar[8:]
        with pytest.raises(InvalidFormatError, match="signature"):
            parse_appvar(data)

    def test_header_truncated(self, simple_appvar):
        with pytest.raises(InvalidFormatError, match="truncated"):
            parse_appvar(simple_appvar[:0x40])

    def test_source_truncated(self, simple_appvar):
        with pytest.raises(InvalidFormatError, match="truncated"):
            parse_appvar(simple_appvar[:-1])

    def test_long_filename_truncated(self):
        data = bytearray(build_appvar(PyVariable(source=b"x" * 10)))
        data[Offset.FILENAME_LENGTH] = 200
        data[Offset.PAYLOAD_SIZE:Offset.PAYLOAD_SIZE + 2] = pack_u16(1000)
        with pytest.raises(InvalidFormatError, match="Long filename truncated"):
            parse_appvar(bytes(data))

    def test_payload_length_too_small(self, simple_appvar):
        data = bytearray(simple_appvar)
        data[Offset.PAYLOAD_SIZE:Offset.PAYLOAD_SIZE + 2] = pack_u16(3)
        with pytest.raises(MalformedLengthError) as exc_info:
            parse_appvar(bytes(data))
        assert exc_info.value.declared == 3

    def test_filename_longer_than_payload(self):
        data = bytearray(build_appvar(PyVariable(source=b"abc")))
        data[Offset.FILENAME_LENGTH] = 10
        with pytest.raises(MalformedLengthError):
            parse_appvar(bytes(data))

    def test_checksum_mismatch(self, simple_appvar):
        data = bytearray(simple_appvar)
        data[-1] ^= 0x01
        with pytest.raises(ChecksumMismatchError) as exc_info:
            parse_appvar(bytes(data))
        assert exc_info.value.calculated == 0x05F5
        assert exc_info.value.stored == 0x04F5

    def test_errors_share_base(self, simple_appvar):
        with pytest.raises(AppVarError):
            parse_appvar(simple_appvar[:-1])

    @pytest.mark.parametrize("bit", range(8))
    def test_bit_flip_in_payload_detected(self, named_appvar, bit):
        """Any single bit flip in the tag, filename block, or source fails."""
        for offset in range(Offset.FORMAT_TAG, len(named_appvar) - 2):
            if offset == Offset.FILENAME_LENGTH:
                continue
            data = bytearray(named_appvar)
            data[offset] ^= 1 << bit
            with pytest.raises(ChecksumMismatchError):
                parse_appvar(bytes(data))

    @pytest.mark.parametrize("bit", range(8))
    def test_bit_flip_in_filename_length_detected(self, simple_appvar, named_appvar, bit):
        """A flipped length byte either breaks the checksum or the length math."""
        for container in (simple_appvar, named_appvar):
            data = bytearray(container)
            data[Offset.FILENAME_LENGTH] ^= 1 << bit
            with pytest.raises((ChecksumMismatchError, MalformedLengthError)):
                parse_appvar(bytes(data))

    def test_bit_flip_in_name_detected(self, simple_appvar):
        data = bytearray(simple_appvar)
        data[Offset.NAME] ^= 0x20
        with pytest.raises(ChecksumMismatchError):
            parse_appvar(bytes(data))

    def test_info_not_covered_by_checksum(self, simple_appvar):
        data = bytearray(simple_appvar)
        data[Offset.INFO] = ord("!")
        assert parse_appvar(bytes(data)).get_info_text() == "!"


class TestVariableParser:
    """Tests for VariableParser."""

    def test_from_bytes(self, simple_appvar):
        parser = VariableParser.from_bytes(simple_appvar)
        assert parser.is_valid
        assert parser.error_message is None
        assert parser.variable.source == b"print(1)"

    def test_from_file(self, tmp_path, named_appvar):
        path = tmp_path / "CIRCLE.8xv"
        path.write_bytes(named_appvar)
        parser = VariableParser.from_file(path)
        assert parser.variable.get_display_name() == "CIRCLE"

    def test_invalid_raises(self):
        with pytest.raises(InvalidFormatError):
            VariableParser.from_bytes(b"junk")

    def test_checksum(self, simple_appvar):
        assert VariableParser.from_bytes(simple_appvar).get_checksum() == 0x05F5

    def test_info(self, simple_appvar):
        info = VariableParser.from_bytes(simple_appvar).get_info()
        assert info["name"] == "PYFILE"
        assert info["long_filename"] is None
        assert info["info"] == ""
        assert info["source_bytes"] == 8
        assert info["source_lines"] == 1
        assert info["data_size"] == 32
        assert info["file_size"] == 89
        assert info["checksum"] == "0x05F5"

    def test_info_with_filename(self, named_appvar):
        info = VariableParser.from_bytes(named_appvar).get_info()
        assert info["long_filename"] == "circle.py"
        assert info["source_lines"] == 2
        assert info["file_size"] == len(named_appvar)


# =============================================================================
# Round-Trip Tests
# =============================================================================

class TestRoundTrip:
    """Tests for build/parse cycles."""

    def test_simple(self, simple_variable, simple_appvar):
        assert parse_appvar(simple_appvar) == simple_variable

    def test_with_filename_and_info(self, named_variable, named_appvar):
        assert parse_appvar(named_appvar) == named_variable

    def test_max_long_filename(self):
        var = PyVariable(source=b"print(1)", long_filename=b"f" * 255)
        data = build_appvar(var)
        assert data[Offset.FILENAME_LENGTH] == 255
        assert parse_appvar(data).long_filename == b"f" * 255

    def test_truncated_name(self):
        var = PyVariable(source=b"pass", variable_name="VERYLONGNAME")
        assert parse_appvar(build_appvar(var)).get_display_name() == "VERYLONG"

    def test_binary_source(self):
        source = bytes(range(256))
        var = parse_appvar(build_appvar(PyVariable(source=source)))
        assert var.source == source

    def test_rebuild_is_identical(self, named_appvar):
        assert build_appvar(parse_appvar(named_appvar)) == named_appvar


# =============================================================================
# Dump Tests
# =============================================================================

class TestDump:
    """Tests for the field dumper."""

    def test_format_hex(self):
        assert format_hex(b"**TI8") == "2a2a 5449 38"
        assert format_hex(b"") == ""

    def test_field_names(self, simple_appvar):
        names = [f.name for f in dump_fields(simple_appvar)]
        assert names == [
            "hdr", "info", "dsize", "flags", "psize", "vid", "vname",
            "version", "psize2", "plen", "pyfmt", "fnlen", "payload",
            "checksum",
        ]

    def test_field_names_with_filename(self, named_appvar):
        names = [f.name for f in dump_fields(named_appvar)]
        assert names[11:] == ["fnlen", "soh", "fname", "nul", "payload", "checksum"]

    def test_field_offsets(self, simple_appvar):
        offsets = {f.name: f.offset for f in dump_fields(simple_appvar)}
        assert offsets["dsize"] == Offset.DATA_SIZE
        assert offsets["vname"] == Offset.NAME
        assert offsets["plen"] == Offset.PAYLOAD_SIZE
        assert offsets["payload"] == Offset.SOURCE

    def test_values(self, simple_appvar):
        fields = {f.name: f for f in dump_fields(simple_appvar)}
        assert fields["dsize"].kind is FieldKind.WORD
        assert fields["dsize"].value == 32
        assert fields["plen"].value == 13
        assert fields["fnlen"].value == 0
        assert fields["checksum"].value == 0x05F5
        assert fields["hdr"].value is None

    def test_format_dump(self, simple_appvar):
        text = format_dump(dump_fields(simple_appvar))
        lines = text.splitlines()
        assert lines[0] == "hdr: 2a2a 5449 3833 462a 1a0a 00"
        assert 'info: ""' in lines
        assert "dsize: 32" in lines
        assert 'vname: "PYFILE"' in lines
        assert 'pyfmt: "PYCD"' in lines
        assert 'payload: "print(1)"' in lines
        assert "checksum: 1525" in lines

    def test_truncated(self, simple_appvar):
        fields = dump_fields(simple_appvar[:0x40])
        assert fields[-1].name == "(truncated)"
        assert fields[-1].offset == Offset.NAME
        assert fields[-1].raw == simple_appvar[Offset.NAME:0x40]
        assert "version" not in [f.name for f in fields]

    def test_underflowing_length(self, simple_appvar):
        data = bytearray(simple_appvar)
        data[Offset.PAYLOAD_SIZE:Offset.PAYLOAD_SIZE + 2] = pack_u16(2)
        fields = dump_fields(bytes(data))
        assert fields[-1].name == "(truncated)"

    def test_trailing(self, simple_appvar):
        fields = dump_fields(simple_appvar + b"\xaa\xbb")
        assert fields[-1].name == "trailing"
        assert fields[-1].raw == b"\xaa\xbb"

    def test_corrupted_checksum_still_dumped(self, simple_appvar):
        data = bytearray(simple_appvar)
        data[-1] ^= 0xFF
        names = [f.name for f in dump_fields(bytes(data))]
        assert names[-1] == "checksum"

    def test_foreign_data(self):
        fields = dump_fields(b"hello")
        assert len(fields) == 1
        assert fields[0].name == "(truncated)"
