"""
sicasm Command-Line Interface
=============================

This package provides the ``sicasm`` command-line assembler, implemented
as a Click application with shared error reporting and exit codes.
"""

__all__ = ["sicasm"]
