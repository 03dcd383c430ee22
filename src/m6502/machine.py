"""
6502 Machine - CPU and Memory Pair
==================================

This module provides the `Machine` class, which ties exactly one CPU to
exactly one Memory. A Machine is the unit of isolation: independent
machines share no mutable state, so separate threads may each drive
their own Machine without locking.

The Machine class:
- Resets CPU and memory to the configured entry point
- Loads raw program images from bytes or files
- Runs cycle budgets and keeps a running cycle total
- Optionally traces every executed opcode through logging

Example usage:
    >>> from m6502 import Machine, MachineConfig
    >>> m = Machine(MachineConfig(entry_point=0x0200))
    >>> m.reset()
    >>> m.load_program(bytes([0xA9, 0x42, 0x85, 0x10]), address=0x0200)
    >>> m.run(5)
    5
    >>> m.memory[0x10]
    66
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .config import MachineConfig
from .cpu import CPU
from .errors import DecodeError, ImageError
from .instructions import INSTRUCTIONS
from .memory import Memory

logger = logging.getLogger(__name__)


class Machine:
    """
    One CPU driving one Memory.

    Attributes:
        config: The MachineConfig used to initialize this instance
        cpu: The CPU (accessible for low-level control)
        memory: The 64KB memory
        total_cycles: Cycles consumed by run()/step() since the last reset
    """

    def __init__(self, config: Optional[MachineConfig] = None):
        self.config = config or MachineConfig()
        self.memory = Memory()
        self.cpu = CPU()
        self.total_cycles = 0

        if self.config.trace:
            self.cpu.on_instruction = self._trace_hook

    def _trace_hook(self, pc: int, opcode: int) -> None:
        ins = INSTRUCTIONS.get(opcode)
        name = f"{ins.mnemonic} {ins.mode.name}" if ins else "???"
        logger.debug(
            "$%04X: %02X %-16s A=%02X X=%02X Y=%02X SP=%02X %s",
            pc, opcode, name, self.cpu.a, self.cpu.x, self.cpu.y,
            self.cpu.sp, self.cpu.flags,
        )

    # ========================================
    # Lifecycle
    # ========================================

    def reset(self) -> None:
        """Reset the CPU at the configured entry point and clear memory."""
        self.cpu.reset(self.memory, self.config.entry_point)
        self.total_cycles = 0
        logger.debug("Reset: PC=$%04X", self.cpu.pc)

    def load_program(self, data: bytes, address: Optional[int] = None) -> int:
        """
        Copy a raw program image into memory.

        Call after reset(), which clears memory.

        Args:
            data: Image bytes
            address: Load address (defaults to config.load_address)

        Returns:
            The load address used

        Raises:
            ImageError: If the image is empty or would run past $FFFF
        """
        if address is None:
            address = self.config.load_address
        if not 0 <= address <= 0xFFFF:
            raise ImageError("load address out of range", address & 0xFFFF)
        if not data:
            raise ImageError("program image is empty", address)
        if address + len(data) > Memory.SIZE:
            raise ImageError(
                f"program image of {len(data)} bytes does not fit", address
            )

        self.memory.load(address, data)
        logger.info("Loaded %d bytes at $%04X", len(data), address)
        return address

    def load_file(self, path: Union[str, Path], address: Optional[int] = None) -> int:
        """
        Load a raw binary file into memory.

        Raises:
            FileNotFoundError: If path does not exist
            ImageError: As for load_program()
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Program file not found: {path}")
        return self.load_program(path.read_bytes(), address)

    # ========================================
    # Execution
    # ========================================

    def run(self, cycles: int) -> int:
        """
        Execute for a cycle budget.

        Returns:
            Cycles consumed (may exceed the budget by part of an instruction)

        Raises:
            DecodeError: If an unknown opcode is fetched
        """
        try:
            used = self.cpu.execute(cycles, self.memory)
        except DecodeError as e:
            logger.error("Execution stopped: %s", e)
            raise
        self.total_cycles += used
        logger.debug("Ran %d cycles (requested %d), PC=$%04X", used, cycles, self.cpu.pc)
        return used

    def step(self) -> int:
        """Execute exactly one instruction and return its cycle count."""
        return self.run(1)

    def registers(self) -> dict[str, Union[int, str]]:
        """Register and flag summary, for display."""
        cpu = self.cpu
        return {
            "PC": cpu.pc,
            "SP": cpu.sp,
            "A": cpu.a,
            "X": cpu.x,
            "Y": cpu.y,
            "P": cpu.status,
            "flags": str(cpu.flags),
        }
