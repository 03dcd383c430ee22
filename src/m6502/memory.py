"""
Memory for the 6502 Emulator
============================

The 6502 sees a flat 64KB address space. There are no ROM regions and
no memory-mapped I/O here: every address from $0000 to $FFFF is plain,
writable RAM.

Memory Map (as used by the CPU):
    $0000-$00FF  Zero page (single-byte addressing)
    $0100-$01FF  Hardware stack (SP is an offset into this page)
    $0200-$FFFF  General purpose

Addresses are masked to 16 bits and values to 8 bits, so out-of-range
access always lands on a valid byte.
"""

from typing import Union


class Memory:
    """
    64KB of flat byte-addressable memory.

    The CPU borrows a Memory for the duration of each operation; it never
    owns one. Create one Memory per emulated machine.

    Example:
        >>> mem = Memory()
        >>> mem.write(0x4480, 0x37)
        >>> mem.read(0x4480)
        55
        >>> mem[0x10000 + 0x42] = 0x01  # wraps to $0042
    """

    SIZE = 0x10000  # 64KB

    def __init__(self):
        self._data = bytearray(self.SIZE)

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: 16-bit address (wrapped if larger)

        Returns:
            Byte value at address
        """
        return self._data[address & 0xFFFF]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: 16-bit address (wrapped if larger)
            value: Byte value to write (masked to 8 bits)
        """
        self._data[address & 0xFFFF] = value & 0xFF

    def clear(self) -> None:
        """Set every byte to zero."""
        self._data[:] = bytes(self.SIZE)

    def load(self, address: int, data: Union[bytes, bytearray, list[int]]) -> None:
        """
        Copy a block of bytes into memory starting at address.

        Writing past $FFFF wraps around to $0000.
        """
        for i, b in enumerate(data):
            self._data[(address + i) & 0xFFFF] = b & 0xFF

    def dump(self, address: int, length: int) -> bytes:
        """Return length bytes starting at address (wrapping)."""
        return bytes(self._data[(address + i) & 0xFFFF] for i in range(length))

    def __getitem__(self, address: int) -> int:
        return self.read(address)

    def __setitem__(self, address: int, value: int) -> None:
        self.write(address, value)

    def __len__(self) -> int:
        return self.SIZE
