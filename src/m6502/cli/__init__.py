"""
m6502 Command-Line Interface
============================

This package provides command-line tools for the emulator:

- **m6502run**: load a raw binary image, run it for a cycle budget and
  print the resulting CPU state

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["m6502run"]
