"""
6502 Instruction Set Definition
===============================

This module defines the instructions the emulator implements: their
opcodes, addressing modes, target registers and base cycle counts. The
6502 is little-endian (least significant byte first).

Addressing Modes
----------------
1. **IMPLIED**: No operand (e.g., RTS)
   - Example: RTS -> $60

2. **IMMEDIATE**: Literal value follows opcode (e.g., LDA #$84)
   - Example: LDA #$84 -> $A9 $84

3. **ZERO_PAGE**: Address $00-$FF
   - Example: LDA $42 -> $A5 $42

4. **ZERO_PAGE_X / ZERO_PAGE_Y**: Zero page address plus index register
   - The sum wraps inside the zero page: $80 + $FF = $7F
   - Example: LDA $80,X -> $B5 $80

5. **ABSOLUTE**: Full 16-bit address
   - Example: LDA $4480 -> $AD $80 $44

6. **ABSOLUTE_X / ABSOLUTE_Y**: 16-bit address plus index register
   - Loads pay one extra cycle when the sum crosses a page
   - Stores always pay it

7. **INDIRECT**: 16-bit pointer to a 16-bit address (JMP only)

8. **INDIRECT_X**: Indexed indirect, ($zp,X)
   - Pointer lives at ($zp + X) & $FF

9. **INDIRECT_Y**: Indirect indexed, ($zp),Y
   - Pointer lives at $zp, Y is added to the address it holds

Cycle Counts
------------
The cycle count in each table entry is the minimum cost, including the
opcode fetch. Indexed loads may add one cycle for a page crossing.

Reference
---------
- http://www.obelisk.me.uk/6502/reference.html
- MCS6500 Microcomputer Family Programming Manual (MOS Technology)
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Optional

from m6502.errors import DecodeError


# =============================================================================
# Enumerations
# =============================================================================

class AddressingMode(Enum):
    """6502 addressing modes."""
    IMPLIED = auto()
    IMMEDIATE = auto()
    ZERO_PAGE = auto()
    ZERO_PAGE_X = auto()
    ZERO_PAGE_Y = auto()
    ABSOLUTE = auto()
    ABSOLUTE_X = auto()
    ABSOLUTE_Y = auto()
    INDIRECT = auto()
    INDIRECT_X = auto()
    INDIRECT_Y = auto()

    @property
    def operand_size(self) -> int:
        """Number of operand bytes following the opcode."""
        return _OPERAND_SIZES[self]


_OPERAND_SIZES = {
    AddressingMode.IMPLIED: 0,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDIRECT_X: 1,
    AddressingMode.INDIRECT_Y: 1,
}


class Register(Enum):
    """General purpose registers an instruction can target."""
    A = "a"
    X = "x"
    Y = "y"


class Operation(Enum):
    """Instruction families handled by the dispatch loop."""
    LOAD = auto()
    STORE = auto()
    JSR = auto()
    RTS = auto()
    JMP = auto()


class Opcode(IntEnum):
    """Opcode bytes for every implemented instruction."""
    # LDA
    LDA_IM = 0xA9
    LDA_ZP = 0xA5
    LDA_ZPX = 0xB5
    LDA_ABS = 0xAD
    LDA_ABSX = 0xBD
    LDA_ABSY = 0xB9
    LDA_INDX = 0xA1
    LDA_INDY = 0xB1
    # LDX
    LDX_IM = 0xA2
    LDX_ZP = 0xA6
    LDX_ZPY = 0xB6
    LDX_ABS = 0xAE
    LDX_ABSY = 0xBE
    # LDY
    LDY_IM = 0xA0
    LDY_ZP = 0xA4
    LDY_ZPX = 0xB4
    LDY_ABS = 0xAC
    LDY_ABSX = 0xBC
    # STA
    STA_ZP = 0x85
    STA_ZPX = 0x95
    STA_ABS = 0x8D
    STA_ABSX = 0x9D
    STA_ABSY = 0x99
    STA_INDX = 0x81
    STA_INDY = 0x91
    # STX
    STX_ZP = 0x86
    STX_ZPY = 0x96
    STX_ABS = 0x8E
    # STY
    STY_ZP = 0x84
    STY_ZPX = 0x94
    STY_ABS = 0x8C
    # Jumps and subroutines
    JSR = 0x20
    RTS = 0x60
    JMP_ABS = 0x4C
    JMP_IND = 0x6C


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    Decoded form of a single opcode.

    Attributes:
        opcode: The opcode byte
        mnemonic: Assembler mnemonic (LDA, STX, ...)
        operation: Instruction family executed by the CPU
        mode: Addressing mode of the operand
        register: Register loaded or stored (None for jumps)
        cycles: Minimum cycle cost including the opcode fetch
    """
    opcode: int
    mnemonic: str
    operation: Operation
    mode: AddressingMode
    register: Optional[Register]
    cycles: int

    @property
    def size(self) -> int:
        """Total instruction size in bytes."""
        return 1 + self.mode.operand_size

    def __repr__(self) -> str:
        return (
            f"Instruction(${self.opcode:02X} {self.mnemonic} "
            f"{self.mode.name}, cycles={self.cycles})"
        )


# =============================================================================
# Opcode Table
# =============================================================================
# Key: opcode byte
# Value: Instruction(opcode, mnemonic, operation, mode, register, cycles)
# =============================================================================

_M = AddressingMode
_LOAD = Operation.LOAD
_STORE = Operation.STORE

INSTRUCTIONS: dict[int, Instruction] = {
    ins.opcode: ins for ins in (
        # Loads
        Instruction(Opcode.LDA_IM, "LDA", _LOAD, _M.IMMEDIATE, Register.A, 2),
        Instruction(Opcode.LDA_ZP, "LDA", _LOAD, _M.ZERO_PAGE, Register.A, 3),
        Instruction(Opcode.LDA_ZPX, "LDA", _LOAD, _M.ZERO_PAGE_X, Register.A, 4),
        Instruction(Opcode.LDA_ABS, "LDA", _LOAD, _M.ABSOLUTE, Register.A, 4),
        Instruction(Opcode.LDA_ABSX, "LDA", _LOAD, _M.ABSOLUTE_X, Register.A, 4),
        Instruction(Opcode.LDA_ABSY, "LDA", _LOAD, _M.ABSOLUTE_Y, Register.A, 4),
        Instruction(Opcode.LDA_INDX, "LDA", _LOAD, _M.INDIRECT_X, Register.A, 6),
        Instruction(Opcode.LDA_INDY, "LDA", _LOAD, _M.INDIRECT_Y, Register.A, 5),
        Instruction(Opcode.LDX_IM, "LDX", _LOAD, _M.IMMEDIATE, Register.X, 2),
        Instruction(Opcode.LDX_ZP, "LDX", _LOAD, _M.ZERO_PAGE, Register.X, 3),
        Instruction(Opcode.LDX_ZPY, "LDX", _LOAD, _M.ZERO_PAGE_Y, Register.X, 4),
        Instruction(Opcode.LDX_ABS, "LDX", _LOAD, _M.ABSOLUTE, Register.X, 4),
        Instruction(Opcode.LDX_ABSY, "LDX", _LOAD, _M.ABSOLUTE_Y, Register.X, 4),
        Instruction(Opcode.LDY_IM, "LDY", _LOAD, _M.IMMEDIATE, Register.Y, 2),
        Instruction(Opcode.LDY_ZP, "LDY", _LOAD, _M.ZERO_PAGE, Register.Y, 3),
        Instruction(Opcode.LDY_ZPX, "LDY", _LOAD, _M.ZERO_PAGE_X, Register.Y, 4),
        Instruction(Opcode.LDY_ABS, "LDY", _LOAD, _M.ABSOLUTE, Register.Y, 4),
        Instruction(Opcode.LDY_ABSX, "LDY", _LOAD, _M.ABSOLUTE_X, Register.Y, 4),

        # Stores (indexed stores always pay the fix-up cycle)
        Instruction(Opcode.STA_ZP, "STA", _STORE, _M.ZERO_PAGE, Register.A, 3),
        Instruction(Opcode.STA_ZPX, "STA", _STORE, _M.ZERO_PAGE_X, Register.A, 4),
        Instruction(Opcode.STA_ABS, "STA", _STORE, _M.ABSOLUTE, Register.A, 4),
        Instruction(Opcode.STA_ABSX, "STA", _STORE, _M.ABSOLUTE_X, Register.A, 5),
        Instruction(Opcode.STA_ABSY, "STA", _STORE, _M.ABSOLUTE_Y, Register.A, 5),
        Instruction(Opcode.STA_INDX, "STA", _STORE, _M.INDIRECT_X, Register.A, 6),
        Instruction(Opcode.STA_INDY, "STA", _STORE, _M.INDIRECT_Y, Register.A, 6),
        Instruction(Opcode.STX_ZP, "STX", _STORE, _M.ZERO_PAGE, Register.X, 3),
        Instruction(Opcode.STX_ZPY, "STX", _STORE, _M.ZERO_PAGE_Y, Register.X, 4),
        Instruction(Opcode.STX_ABS, "STX", _STORE, _M.ABSOLUTE, Register.X, 4),
        Instruction(Opcode.STY_ZP, "STY", _STORE, _M.ZERO_PAGE, Register.Y, 3),
        Instruction(Opcode.STY_ZPX, "STY", _STORE, _M.ZERO_PAGE_X, Register.Y, 4),
        Instruction(Opcode.STY_ABS, "STY", _STORE, _M.ABSOLUTE, Register.Y, 4),

        # Jumps and subroutines
        Instruction(Opcode.JSR, "JSR", Operation.JSR, _M.ABSOLUTE, None, 6),
        Instruction(Opcode.RTS, "RTS", Operation.RTS, _M.IMPLIED, None, 6),
        Instruction(Opcode.JMP_ABS, "JMP", Operation.JMP, _M.ABSOLUTE, None, 3),
        Instruction(Opcode.JMP_IND, "JMP", Operation.JMP, _M.INDIRECT, None, 5),
    )
}


def lookup(opcode: int, address: int = 0) -> Instruction:
    """
    Decode an opcode byte.

    Args:
        opcode: The opcode byte
        address: Where the byte was fetched from (for the error message)

    Returns:
        The matching Instruction

    Raises:
        DecodeError: If the opcode is not implemented
    """
    try:
        return INSTRUCTIONS[opcode]
    except KeyError:
        raise DecodeError(opcode, address) from None
