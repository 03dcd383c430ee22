"""
MOS 6502 CPU Emulator
=====================

Instruction-level emulation of the MOS 6502 with exact cycle accounting.

The 6502 has:
- 8-bit registers: A (accumulator), X and Y (index)
- 8-bit stack pointer SP, always addressing page one ($0100-$01FF)
- 16-bit program counter PC
- Flags: N (negative), V (overflow), B (break), D (decimal),
  I (interrupt disable), Z (zero), C (carry)

Cycle accounting works on a budget. `execute()` keeps the remaining budget
in `CPU.cycles`, and every primitive memory access or internal delay
subtracts from it. The budget is only checked between instructions, so
the instruction in progress always completes and the returned count can
exceed the request.

Only the load/store, JSR/RTS and JMP families are implemented. Unknown
opcodes raise DecodeError.
"""

import copy
from dataclasses import dataclass, field
from typing import Callable, Optional

from m6502.instructions import (
    AddressingMode,
    Instruction,
    Operation,
    Register,
    lookup,
)
from m6502.memory import Memory


# Reset leaves PC here unless told otherwise
DEFAULT_ENTRY = 0xFFFC

STACK_PAGE = 0x0100


@dataclass
class StatusFlags:
    """
    Processor status flags, one boolean each.

    Packed layout (see to_byte/from_byte):
        7  6  5  4  3  2  1  0
        N  V  1  B  D  I  Z  C

    Bit 5 is unused and always reads as 1 when packed.
    """
    c: bool = False  # Carry
    z: bool = False  # Zero
    i: bool = False  # Interrupt disable
    d: bool = False  # Decimal mode
    b: bool = False  # Break command
    v: bool = False  # Overflow
    n: bool = False  # Negative

    def to_byte(self) -> int:
        """Pack the flags into a processor status byte."""
        return (
            (self.n << 7)
            | (self.v << 6)
            | 0x20
            | (self.b << 4)
            | (self.d << 3)
            | (self.i << 2)
            | (self.z << 1)
            | int(self.c)
        )

    @classmethod
    def from_byte(cls, value: int) -> "StatusFlags":
        """Unpack a processor status byte. Bit 5 is ignored."""
        return cls(
            c=bool(value & 0x01),
            z=bool(value & 0x02),
            i=bool(value & 0x04),
            d=bool(value & 0x08),
            b=bool(value & 0x10),
            v=bool(value & 0x40),
            n=bool(value & 0x80),
        )

    def clear(self) -> None:
        """Clear every flag."""
        self.c = self.z = self.i = self.d = self.b = self.v = self.n = False

    def __str__(self) -> str:
        """Render as e.g. 'N.-..IZ.' (set flags by letter, clear as '.')."""
        bits = (
            ("N", self.n), ("V", self.v), ("-", True), ("B", self.b),
            ("D", self.d), ("I", self.i), ("Z", self.z), ("C", self.c),
        )
        return "".join(name if is_set else "." for name, is_set in bits)


@dataclass
class CPUState:
    """
    Complete CPU state for snapshotting.

    All values stored as Python ints but represent:
    - a, x, y, sp: 8-bit unsigned (0-255)
    - pc: 16-bit unsigned (0-65535)
    """
    pc: int = 0
    sp: int = 0xFF
    a: int = 0
    x: int = 0
    y: int = 0
    flags: StatusFlags = field(default_factory=StatusFlags)


class CPU:
    """
    MOS 6502 CPU.

    The CPU owns its registers and flags but never owns memory: every
    operation takes the Memory it should work on. Registers, flags, PC and
    SP are public and may be read or changed between execute() calls.

    Instrumentation:
        on_instruction(pc, opcode) is called after every opcode fetch. It
        observes only; execution stops when the budget runs out.

    Example:
        >>> mem = Memory()
        >>> cpu = CPU()
        >>> cpu.reset(mem)
        >>> mem[0xFFFC] = 0xA9  # LDA #$84
        >>> mem[0xFFFD] = 0x84
        >>> cpu.execute(2, mem)
        2
        >>> hex(cpu.a)
        '0x84'
    """

    def __init__(self):
        self.state = CPUState()

        # Remaining budget while execute() runs
        self.cycles: int = 0

        self.on_instruction: Optional[Callable[[int, int], None]] = None

        self._read_resolvers: dict[AddressingMode, Callable[[Memory], int]] = {
            AddressingMode.ZERO_PAGE: self.addr_zero_page,
            AddressingMode.ZERO_PAGE_X: self.addr_zero_page_x,
            AddressingMode.ZERO_PAGE_Y: self.addr_zero_page_y,
            AddressingMode.ABSOLUTE: self.addr_absolute,
            AddressingMode.ABSOLUTE_X: self.addr_absolute_x,
            AddressingMode.ABSOLUTE_Y: self.addr_absolute_y,
            AddressingMode.INDIRECT_X: self.addr_indirect_x,
            AddressingMode.INDIRECT_Y: self.addr_indirect_y,
        }
        self._write_resolvers: dict[AddressingMode, Callable[[Memory], int]] = {
            **self._read_resolvers,
            AddressingMode.ABSOLUTE_X: self.addr_absolute_x_write,
            AddressingMode.ABSOLUTE_Y: self.addr_absolute_y_write,
            AddressingMode.INDIRECT_Y: self.addr_indirect_y_write,
        }

    # ========================================
    # Registers
    # ========================================

    @property
    def a(self) -> int:
        """Accumulator (8-bit)."""
        return self.state.a

    @a.setter
    def a(self, value: int) -> None:
        self.state.a = value & 0xFF

    @property
    def x(self) -> int:
        """Index register X (8-bit)."""
        return self.state.x

    @x.setter
    def x(self, value: int) -> None:
        self.state.x = value & 0xFF

    @property
    def y(self) -> int:
        """Index register Y (8-bit)."""
        return self.state.y

    @y.setter
    def y(self, value: int) -> None:
        self.state.y = value & 0xFF

    @property
    def sp(self) -> int:
        """Stack pointer (8-bit offset into page one)."""
        return self.state.sp

    @sp.setter
    def sp(self, value: int) -> None:
        self.state.sp = value & 0xFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def flags(self) -> StatusFlags:
        """Status flags."""
        return self.state.flags

    @property
    def status(self) -> int:
        """Flags packed into a processor status byte."""
        return self.state.flags.to_byte()

    def get_register(self, register: Register) -> int:
        """Read A, X or Y by enum."""
        return getattr(self, register.value)

    def set_register(self, register: Register, value: int) -> None:
        """Write A, X or Y by enum (masked to 8 bits)."""
        setattr(self, register.value, value)

    def snapshot(self) -> CPUState:
        """Return an independent copy of the current state."""
        return copy.deepcopy(self.state)

    def restore(self, state: CPUState) -> None:
        """Replace the current state with a copy of state."""
        self.state = copy.deepcopy(state)

    # ========================================
    # Reset
    # ========================================

    def reset(self, memory: Memory, entry: int = DEFAULT_ENTRY) -> None:
        """
        Bring CPU and memory into a defined state.

        PC is set to entry, SP to $FF, all registers and flags are
        cleared and memory is zeroed.
        """
        self.pc = entry
        self.sp = 0xFF
        self.a = self.x = self.y = 0
        self.state.flags.clear()
        self.cycles = 0
        memory.clear()

    # ========================================
    # Memory Access
    # ========================================

    def fetch_byte(self, memory: Memory) -> int:
        """Fetch next byte at PC and increment PC (1 cycle)."""
        value = memory.read(self.pc)
        self.pc = self.pc + 1
        self.cycles -= 1
        return value

    def fetch_word(self, memory: Memory) -> int:
        """Fetch little-endian word at PC, PC += 2 (2 cycles)."""
        lo = self.fetch_byte(memory)
        hi = self.fetch_byte(memory)
        return lo | (hi << 8)

    def read_byte(self, address: int, memory: Memory) -> int:
        """Read byte without moving PC (1 cycle)."""
        self.cycles -= 1
        return memory.read(address & 0xFFFF)

    def read_word(self, address: int, memory: Memory) -> int:
        """Read little-endian word without moving PC (2 cycles)."""
        lo = self.read_byte(address, memory)
        hi = self.read_byte(address + 1, memory)
        return lo | (hi << 8)

    def write_byte(self, value: int, address: int, memory: Memory) -> None:
        """Write byte (1 cycle)."""
        memory.write(address & 0xFFFF, value)
        self.cycles -= 1

    def write_word(self, value: int, address: int, memory: Memory) -> None:
        """Write little-endian word, low byte at address (2 cycles)."""
        self.write_byte(value & 0xFF, address, memory)
        self.write_byte((value >> 8) & 0xFF, address + 1, memory)

    def _read_zero_page_word(self, address: int, memory: Memory) -> int:
        """Read a pointer from page zero; the high byte wraps to $00 (2 cycles)."""
        lo = self.read_byte(address & 0xFF, memory)
        hi = self.read_byte((address + 1) & 0xFF, memory)
        return lo | (hi << 8)

    # ========================================
    # Stack Operations
    # ========================================

    @property
    def stack_address(self) -> int:
        """SP as a full 16-bit address in page one."""
        return STACK_PAGE | self.sp

    def push_pc_to_stack(self, memory: Memory) -> None:
        """Push PC-1 as a word (2 cycles). RTS adds the one back."""
        self.write_word(self.pc - 1, self.stack_address - 1, memory)
        self.sp = self.sp - 2

    def pop_word_from_stack(self, memory: Memory) -> int:
        """Pop a word (2 cycles for the read, 1 for the SP increment)."""
        value = self.read_word(self.stack_address + 1, memory)
        self.sp = self.sp + 2
        self.cycles -= 1
        return value

    def load_register_set_status(self, value: int) -> None:
        """Set Z and N after a register load."""
        self.state.flags.z = value == 0
        self.state.flags.n = (value & 0x80) != 0

    # ========================================
    # Addressing Modes
    # ========================================

    @staticmethod
    def page_crossed(base: int, effective: int) -> bool:
        """True when base and effective address lie in different pages."""
        return ((base ^ effective) & 0xFF00) != 0

    def addr_zero_page(self, memory: Memory) -> int:
        """$zp"""
        return self.fetch_byte(memory)

    def addr_zero_page_x(self, memory: Memory) -> int:
        """$zp,X - sum wraps inside page zero."""
        address = (self.fetch_byte(memory) + self.x) & 0xFF
        self.cycles -= 1
        return address

    def addr_zero_page_y(self, memory: Memory) -> int:
        """$zp,Y - sum wraps inside page zero."""
        address = (self.fetch_byte(memory) + self.y) & 0xFF
        self.cycles -= 1
        return address

    def addr_absolute(self, memory: Memory) -> int:
        """$addr"""
        return self.fetch_word(memory)

    def _absolute_indexed(self, index: int, memory: Memory) -> int:
        base = self.fetch_word(memory)
        address = (base + index) & 0xFFFF
        if self.page_crossed(base, address):
            self.cycles -= 1
        return address

    def addr_absolute_x(self, memory: Memory) -> int:
        """$addr,X for reads: +1 cycle on page crossing."""
        return self._absolute_indexed(self.x, memory)

    def addr_absolute_y(self, memory: Memory) -> int:
        """$addr,Y for reads: +1 cycle on page crossing."""
        return self._absolute_indexed(self.y, memory)

    def addr_absolute_x_write(self, memory: Memory) -> int:
        """$addr,X for writes: always +1 cycle."""
        address = (self.fetch_word(memory) + self.x) & 0xFFFF
        self.cycles -= 1
        return address

    def addr_absolute_y_write(self, memory: Memory) -> int:
        """$addr,Y for writes: always +1 cycle."""
        address = (self.fetch_word(memory) + self.y) & 0xFFFF
        self.cycles -= 1
        return address

    def addr_indirect_x(self, memory: Memory) -> int:
        """($zp,X) - indexed indirect."""
        pointer = (self.fetch_byte(memory) + self.x) & 0xFF
        self.cycles -= 1
        return self._read_zero_page_word(pointer, memory)

    def addr_indirect_y(self, memory: Memory) -> int:
        """($zp),Y for reads: +1 cycle on page crossing."""
        base = self._read_zero_page_word(self.fetch_byte(memory), memory)
        address = (base + self.y) & 0xFFFF
        if self.page_crossed(base, address):
            self.cycles -= 1
        return address

    def addr_indirect_y_write(self, memory: Memory) -> int:
        """($zp),Y for writes: always +1 cycle."""
        base = self._read_zero_page_word(self.fetch_byte(memory), memory)
        self.cycles -= 1
        return (base + self.y) & 0xFFFF

    # ========================================
    # Main Execution Loop
    # ========================================

    def execute(self, cycles: int, memory: Memory) -> int:
        """
        Execute instructions until the cycle budget is used up.

        Args:
            cycles: Cycle budget. Nothing runs when it is zero or negative.
            memory: Memory to run against

        Returns:
            Cycles actually consumed. At least the budget when the budget
            is positive, since the last instruction always completes.

        Raises:
            DecodeError: If an unknown opcode is fetched
        """
        requested = cycles
        self.cycles = cycles

        while self.cycles > 0:
            pc = self.pc
            opcode = self.fetch_byte(memory)
            if self.on_instruction:
                self.on_instruction(pc, opcode)
            self._execute_instruction(lookup(opcode, pc), memory)

        return requested - self.cycles

    def step(self, memory: Memory) -> int:
        """
        Execute exactly one instruction.

        Returns:
            Number of cycles consumed by the instruction
        """
        return self.execute(1, memory)

    def _execute_instruction(self, ins: Instruction, memory: Memory) -> None:
        """Run one decoded instruction; the opcode fetch is already paid."""
        match ins.operation:
            case Operation.LOAD:
                if ins.mode is AddressingMode.IMMEDIATE:
                    value = self.fetch_byte(memory)
                else:
                    address = self._read_resolvers[ins.mode](memory)
                    value = self.read_byte(address, memory)
                self.set_register(ins.register, value)
                self.load_register_set_status(value)

            case Operation.STORE:
                address = self._write_resolvers[ins.mode](memory)
                self.write_byte(self.get_register(ins.register), address, memory)

            case Operation.JSR:
                target = self.fetch_word(memory)
                self.push_pc_to_stack(memory)
                self.pc = target
                self.cycles -= 1

            case Operation.RTS:
                self.pc = self.pop_word_from_stack(memory) + 1
                self.cycles -= 2

            case Operation.JMP:
                address = self.addr_absolute(memory)
                if ins.mode is AddressingMode.INDIRECT:
                    # The NMOS page-wrap bug for pointers at $xxFF is not modelled
                    address = self.read_word(address, memory)
                self.pc = address
