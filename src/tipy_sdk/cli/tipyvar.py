"""
tipyvar - Python AppVar Converter Command-Line Interface
========================================================

This module implements the command-line interface for converting Python
programs to and from TI calculator AppVar files (.8xv).

Commands
--------
- **convert**: Convert .py source to .8xv, or .8xv back to .py
- **info**: Show the variable's metadata and sizes
- **dump**: Show every field of a container (works on damaged files)
- **validate**: Check signature, structure, and checksum

Usage Examples
--------------
Convert a program for the calculator:
    $ tipyvar convert hello.py

Choose the variable name and long filename:
    $ tipyvar convert hello.py -N HELLO -F hello.py -o HELLO.8xv

Extract the source from an AppVar:
    $ tipyvar convert HELLO.8xv -o hello.py

Inspect a file:
    $ tipyvar info HELLO.8xv
    $ tipyvar dump HELLO.8xv

Format Inference
----------------
The source format comes from --format, then the file extension (.8xv for
AppVars, .py/.txt for source), then the file signature. The target format
comes from --target-format, otherwise it is the other format. The output
path defaults to the input path with the target extension.
"""

import logging
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import click

from tipy_sdk import __version__
from tipy_sdk.appvar import (
    VariableBuilder,
    VariableParser,
    parse_appvar_file,
    looks_like_appvar,
    dump_fields,
    MAGIC,
    NAME_SIZE,
)
from tipy_sdk.appvar.dump import FieldKind
from tipy_sdk.config import ConverterConfig, get_config
from tipy_sdk.errors import AppVarError
from tipy_sdk.cli.errors import ExitCode, handle_cli_exception

logger = logging.getLogger(__name__)


# =============================================================================
# File Formats
# =============================================================================

class FileFormat(str, Enum):
    """The two file formats the converter handles."""
    APPVAR = "8xv"
    SOURCE = "py"

    def get_description(self) -> str:
        if self is FileFormat.APPVAR:
            return "Python AppVar"
        return "Python source"


# Names accepted by --format and --target-format
FORMAT_NAMES = {
    "8xv": FileFormat.APPVAR,
    "appvar": FileFormat.APPVAR,
    "py": FileFormat.SOURCE,
    "python": FileFormat.SOURCE,
    "text": FileFormat.SOURCE,
    "txt": FileFormat.SOURCE,
}

APPVAR_EXTENSIONS = {".8xv"}
SOURCE_EXTENSIONS = {".py", ".txt"}


def parse_format_name(name: str, param_hint: str = "--format") -> FileFormat:
    """
    Convert a format name given on the command line.

    Raises:
        click.BadParameter: If the name is not recognized
    """
    key = name.lower().lstrip(".")
    if key not in FORMAT_NAMES:
        raise click.BadParameter(
            f"Unknown format '{name}'. "
            f"Choose from: {', '.join(FORMAT_NAMES)}",
            param_hint=param_hint,
        )
    return FORMAT_NAMES[key]


def detect_format(input_file: Path, explicit: Optional[str] = None) -> FileFormat:
    """
    Determine the format of an input file.

    Args:
        input_file: The file to convert
        explicit: Format given with --format, if any

    Returns:
        The detected FileFormat

    Raises:
        click.BadParameter: If the format cannot be determined
    """
    if explicit:
        return parse_format_name(explicit)

    suffix = input_file.suffix.lower()
    if suffix in APPVAR_EXTENSIONS:
        return FileFormat.APPVAR
    if suffix in SOURCE_EXTENSIONS:
        return FileFormat.SOURCE

    # Unknown extension: sniff the signature
    if input_file.is_file():
        with input_file.open("rb") as f:
            if looks_like_appvar(f.read(len(MAGIC))):
                logger.debug(f"{input_file}: AppVar signature found")
                return FileFormat.APPVAR

    raise click.BadParameter(
        f"Cannot determine the format of '{input_file}' from extension "
        f"'{suffix}'. Use --format 8xv or --format py.",
        param_hint="INPUT_FILE",
    )


def target_format(source: FileFormat, explicit: Optional[str] = None) -> FileFormat:
    """
    Determine the output format: --target-format, else the other format.

    Raises:
        click.BadParameter: If the target equals the source format
    """
    if explicit:
        target = parse_format_name(explicit, param_hint="--target-format")
    elif source is FileFormat.APPVAR:
        target = FileFormat.SOURCE
    else:
        target = FileFormat.APPVAR

    if target is source:
        raise click.BadParameter(
            f"Source and target are both {source.get_description()} files; "
            f"nothing to convert.",
            param_hint="--target-format",
        )
    return target


# =============================================================================
# Output Path and Name Resolution
# =============================================================================

def resolve_output_path(
    output: Optional[Path],
    input_file: Path,
    target: FileFormat,
    config: Optional[ConverterConfig] = None,
) -> Path:
    """
    Determine the output file path.

    If no output is specified, the input path is reused with the
    extension of the target format.

    Examples:
        hello.py  -> hello.8xv
        HELLO.8xv -> HELLO.py
    """
    if output is not None:
        return output

    config = config or get_config()
    if target is FileFormat.APPVAR:
        return input_file.with_suffix(config.appvar_extension)
    return input_file.with_suffix(config.source_extension)


def derive_variable_name(input_file: Path, default: str = "TIPYFILE") -> str:
    """
    Derive a calculator variable name from a file name.

    The stem is uppercased, reduced to letters and digits, stripped of
    leading digits, and truncated to 8 characters.

    Examples:
        hello.py        -> HELLO
        my_game_v2.py   -> MYGAMEV2
        2048.py         -> default
    """
    name = re.sub(r"[^A-Z0-9]", "", input_file.stem.upper())
    name = name.lstrip("0123456789")[:NAME_SIZE]
    return name or default


# =============================================================================
# Logging
# =============================================================================

def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity (stderr, debug when verbose)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="tipyvar")
def main() -> None:
    """
    Python AppVar converter for TI-83 Premium CE / TI-84 Plus CE.

    Convert Python programs to and from calculator AppVar files (.8xv).

    \b
    Commands:
      convert   Convert .py <-> .8xv
      info      Show variable information
      dump      Show every field of a container
      validate  Check an AppVar file

    \b
    Examples:
      tipyvar convert hello.py -N HELLO
      tipyvar convert HELLO.8xv -o hello.py
      tipyvar info HELLO.8xv
    """
    pass


# =============================================================================
# Convert Command
# =============================================================================

@main.command("convert")
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output path (default: input path with the target extension)",
)
@click.option(
    "-f", "--format",
    "source_format",
    help="Format of the input file: 8xv or py (default: from extension)",
)
@click.option(
    "-t", "--target-format",
    "target_name",
    help="Format of the output file (default: the other format)",
)
@click.option(
    "-N", "--varname",
    help="Variable name in the calculator, up to 8 characters "
         "(default: derived from the file name)",
)
@click.option(
    "-F", "--filename",
    "long_filename",
    help="Long file name shown in the calculator (py -> 8xv only)",
)
@click.option(
    "-i", "--info",
    help="Info comment, up to 42 characters (py -> 8xv only)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def cmd_convert(
    input_file: Path,
    output: Optional[Path],
    source_format: Optional[str],
    target_name: Optional[str],
    varname: Optional[str],
    long_filename: Optional[str],
    info: Optional[str],
    verbose: bool,
) -> None:
    """
    Convert between Python source and a Python AppVar.

    \b
    Examples:
      tipyvar convert hello.py
      tipyvar convert hello.py -N HELLO -F hello.py -o HELLO.8xv
      tipyvar convert HELLO.8xv -o hello.py
      tipyvar convert program.bin -f 8xv -t py
    """
    setup_logging(verbose)
    config = get_config()

    try:
        source = detect_format(input_file, source_format)
        target = target_format(source, target_name)
        out_path = resolve_output_path(output, input_file, target, config)

        if verbose:
            click.echo(f"Input:  {input_file} ({source.get_description()})")
            click.echo(f"Output: {out_path} ({target.get_description()})")

        if target is FileFormat.APPVAR:
            name = varname or derive_variable_name(input_file, config.default_variable_name)
            builder = VariableBuilder(
                variable_name=name.upper(),
                long_filename=long_filename,
                info=info if info is not None else config.default_info,
                encoding=config.source_encoding,
            )
            builder.set_source_file(input_file)
            bytes_written = builder.build_to_file(out_path)
            click.echo(f"Created {out_path} ({name.upper()[:NAME_SIZE]}, {bytes_written} bytes)")
        else:
            if varname or long_filename or info:
                click.echo("Warning: --varname, --filename and --info only apply to py -> 8xv", err=True)
            variable = parse_appvar_file(input_file)
            out_path.write_bytes(variable.source)
            click.echo(
                f"Extracted {variable.get_display_name()} to {out_path} "
                f"({len(variable.source)} bytes)"
            )

    except Exception as e:
        handle_cli_exception(e, verbose, "Conversion")


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "appvar_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def cmd_info(appvar_file: Path) -> None:
    """
    Show information about a Python AppVar file.

    \b
    Example:
      tipyvar info HELLO.8xv
    """
    setup_logging(False)

    try:
        parser = VariableParser.from_file(appvar_file)
        info = parser.get_info()

        click.echo(f"AppVar Information: {appvar_file}")
        click.echo("=" * 40)
        click.echo(f"Name:        {info['name']}")
        click.echo(f"Long name:   {info['long_filename'] or '(none)'}")
        click.echo(f"Info:        {info['info'] or '(empty)'}")
        click.echo()
        click.echo("Sizes:")
        click.echo(f"  Source:    {info['source_bytes']} bytes, {info['source_lines']} lines")
        click.echo(f"  Data:      {info['data_size']} bytes")
        click.echo(f"  File:      {info['file_size']} bytes")
        click.echo()
        click.echo(f"Checksum:    {info['checksum']} (valid)")

    except Exception as e:
        handle_cli_exception(e)


# =============================================================================
# Dump Command
# =============================================================================

@main.command("dump")
@click.argument(
    "appvar_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--offsets",
    is_flag=True,
    help="Prefix each field with its offset",
)
def cmd_dump(appvar_file: Path, offsets: bool) -> None:
    """
    Show every field of an AppVar file.

    The file is not validated, so damaged or truncated files can be
    inspected too.

    \b
    Example:
      tipyvar dump HELLO.8xv
    """
    try:
        data = appvar_file.read_bytes()
        for entry in dump_fields(data):
            prefix = f"0x{entry.offset:04X} " if offsets else ""
            label = click.style(f"{entry.name}:", bold=True)
            value = entry.render()
            if entry.kind is FieldKind.WORD and entry.name == "checksum":
                value = f"0x{entry.value:04X}"
            click.echo(f"{prefix}{label} {value}")

    except Exception as e:
        handle_cli_exception(e)


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "appvar_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show validation details",
)
def cmd_validate(appvar_file: Path, verbose: bool) -> None:
    """
    Validate a Python AppVar file.

    Checks:
    - File signature
    - Header and payload lengths
    - Data section checksum

    \b
    Example:
      tipyvar validate HELLO.8xv
    """
    setup_logging(verbose)

    try:
        data = appvar_file.read_bytes()

        if not looks_like_appvar(data):
            click.echo("Validation FAILED:")
            click.echo(f"  ERROR: Not an AppVar file (signature {data[:len(MAGIC)]!r})")
            sys.exit(ExitCode.CONVERSION_ERROR)

        try:
            parser = VariableParser.from_bytes(data)
        except AppVarError as e:
            click.echo("Validation FAILED:")
            click.echo(f"  ERROR: {e}")
            sys.exit(ExitCode.CONVERSION_ERROR)

        if verbose:
            info = parser.get_info()
            click.echo("Validation Details:")
            click.echo("  Signature: OK")
            click.echo(f"  Variable: {info['name']} ({info['source_bytes']} source bytes)")
            click.echo(f"  Checksum: OK ({info['checksum']})")

        click.echo(f"Validation PASSED: {appvar_file}")

    except Exception as e:
        handle_cli_exception(e, verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
