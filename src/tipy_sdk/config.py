"""
Converter Configuration
=======================

Default values used by the command-line tools. Configuration can come
from:
- Default values (defined here)
- Environment variables

Environment variables (all optional):
- TIPY_VARNAME: Default variable name for new AppVars
- TIPY_INFO: Default info comment for new AppVars
- TIPY_ENCODING: Encoding of source files and long filenames
"""

from dataclasses import dataclass
import os


@dataclass
class ConverterConfig:
    """
    Configuration for source/AppVar conversion.

    Attributes:
        default_variable_name: Name used when none is given or derived
        default_info: Info comment written to new AppVars
        source_encoding: Encoding for source text and long filenames
        appvar_extension: Extension of AppVar files
        source_extension: Extension of extracted source files
    """
    default_variable_name: str = "TIPYFILE"
    default_info: str = ""
    source_encoding: str = "utf-8"
    appvar_extension: str = ".8xv"
    source_extension: str = ".py"

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        """
        Create a ConverterConfig from environment variables.

        Unset or empty variables keep their defaults.
        """
        config = cls()

        if varname := os.environ.get("TIPY_VARNAME"):
            config.default_variable_name = varname.upper()[:8]
        if info := os.environ.get("TIPY_INFO"):
            config.default_info = info
        if encoding := os.environ.get("TIPY_ENCODING"):
            config.source_encoding = encoding

        return config


# Global default configuration
_default_config = None


def get_config() -> ConverterConfig:
    """Get the process-wide configuration, reading the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = ConverterConfig.from_env()
    return _default_config


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _default_config
    _default_config = None
