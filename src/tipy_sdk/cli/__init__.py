"""
TI Python SDK Command-Line Interface
====================================

This package provides the command-line tool for the SDK:

- **tipyvar**: Convert, inspect, dump, and validate Python AppVars

The tool is a Click-based CLI application with help for every command
and consistent exit codes (see cli.errors).
"""

__all__ = ["tipyvar"]
