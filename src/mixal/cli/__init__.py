"""
MIXAL Command-Line Interface
============================

This package provides the command-line tools for the MIXAL package:

- **mixasm**: MIXAL assembler

Each tool is implemented as a Click-based CLI application with
help text and consistent exit codes (see cli.errors).
"""

__all__ = ["mixasm"]
