"""
m6502 - MOS 6502 Instruction-Level Emulator
===========================================

Cycle-exact emulation of the MOS 6502 processor's visible state: the A, X
and Y registers, the stack pointer, the program counter and the seven
status flags, together with its addressing modes and instruction timing.

Main Components
---------------
- **memory**: 64KB flat memory
- **instructions**: opcode table (mnemonic, addressing mode, base cycles)
- **cpu**: fetch-decode-execute engine with cycle budget
- **machine**: a CPU paired with its memory, plus program loading
- **cli**: the m6502run command-line runner

Quick Start
-----------
    >>> from m6502 import CPU, Memory, Opcode
    >>> mem = Memory()
    >>> cpu = CPU()
    >>> cpu.reset(mem)                # PC = $FFFC, memory cleared
    >>> mem[0xFFFC] = Opcode.LDA_IM
    >>> mem[0xFFFD] = 0x84
    >>> cpu.execute(2, mem)
    2
    >>> cpu.flags.n
    True

Or from the command line:
    $ m6502run program.bin --address 0x0200 --entry 0x0200 --cycles 100

Implemented Instructions
------------------------
LDA, LDX, LDY, STA, STX, STY (all documented addressing modes), JSR, RTS,
JMP absolute and JMP indirect.
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from m6502.errors import M6502Error, DecodeError, ImageError
from m6502.memory import Memory
from m6502.instructions import (
    AddressingMode,
    Instruction,
    INSTRUCTIONS,
    Opcode,
    Operation,
    Register,
    lookup,
)
from m6502.cpu import CPU, CPUState, StatusFlags, DEFAULT_ENTRY
from m6502.config import MachineConfig, parse_address
from m6502.machine import Machine

__all__ = [
    "__version__",
    # Errors
    "M6502Error",
    "DecodeError",
    "ImageError",
    # Memory
    "Memory",
    # Instruction set
    "AddressingMode",
    "Instruction",
    "INSTRUCTIONS",
    "Opcode",
    "Operation",
    "Register",
    "lookup",
    # CPU
    "CPU",
    "CPUState",
    "StatusFlags",
    "DEFAULT_ENTRY",
    # Machine
    "MachineConfig",
    "parse_address",
    "Machine",
]
