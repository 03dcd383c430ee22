"""
m6502 Error Hierarchy
=====================

This module defines the exception hierarchy for the emulator. All
exceptions inherit from M6502Error, allowing callers to catch every
emulator-related error with a single except clause.

Exception Hierarchy
-------------------
M6502Error (base)
├── DecodeError - opcode byte does not match any known instruction
└── ImageError - program image cannot be placed in memory

Design Philosophy
-----------------
Only decoding can fail at run time. Address arithmetic is total: every
computation is masked to 8 or 16 bits, so wraparound is normal behavior
and never raises. A cycle budget overrun is not an error either; the
instruction in progress always completes.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class M6502Error(Exception):
    """
    Base exception for all emulator errors.

        try:
            machine.run(10_000)
        except M6502Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Execution Exceptions
# =============================================================================

class DecodeError(M6502Error):
    """
    Raised when the CPU fetches an opcode it does not implement.

    Decoding failures are fatal for the run: once PC points at a byte
    that is not an instruction, there is no sane way to keep going.

    Attributes:
        opcode: The offending opcode byte
        address: Address the opcode was fetched from
    """

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode & 0xFF
        self.address = address & 0xFFFF
        super().__init__(
            f"unknown opcode ${self.opcode:02X} at ${self.address:04X}"
        )


# =============================================================================
# Loader Exceptions
# =============================================================================

class ImageError(M6502Error):
    """
    Raised when a program image cannot be loaded.

    Attributes:
        message: The error description
        address: Requested load address (optional)
    """

    def __init__(self, message: str, address: Optional[int] = None):
        self.message = message
        self.address = address
        if address is not None:
            super().__init__(f"{message} (load address ${address:04X})")
        else:
            super().__init__(message)
