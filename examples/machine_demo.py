#!/usr/bin/env python3
"""
6502 Machine Demo
=================

This script demonstrates how to use the m6502 package to:
1. Create a machine with an entry point
2. Load a main program and a subroutine
3. Step through instructions with a trace hook
4. Run the rest on a cycle budget and inspect memory

Usage:
    python examples/machine_demo.py
"""

from m6502 import Machine, MachineConfig, Opcode


MAIN = bytes([
    Opcode.LDX_IM, 0x05,
    Opcode.LDA_IM, 0x7F,
    Opcode.STA_ZPX, 0x10,
    Opcode.JSR, 0x00, 0x03,
    Opcode.STY_ABS, 0x00, 0x04,
])

SUBROUTINE = bytes([
    Opcode.LDY_IM, 0x99,
    Opcode.RTS,
])


def main():
    # ==========================================================================
    # 1. Create a machine
    # ==========================================================================
    print("Creating machine with entry point $0200...")
    m = Machine(MachineConfig(entry_point=0x0200, load_address=0x0200))
    m.reset()

    # ==========================================================================
    # 2. Load the program
    # ==========================================================================
    m.load_program(MAIN)
    m.load_program(SUBROUTINE, address=0x0300)
    print(f"  Main: {len(MAIN)} bytes at $0200, subroutine: {len(SUBROUTINE)} bytes at $0300")

    # ==========================================================================
    # 3. Step with a hook
    # ==========================================================================
    print("\nStepping the first three instructions:")
    m.cpu.on_instruction = lambda pc, opcode: print(f"  ${pc:04X}: {Opcode(opcode).name}")
    for _ in range(3):
        cycles = m.step()
        print(f"    -> {cycles} cycles, A=${m.cpu.a:02X} X=${m.cpu.x:02X}")
    m.cpu.on_instruction = None

    # ==========================================================================
    # 4. Run the rest
    # ==========================================================================
    used = m.run(18)
    print(f"\nRan {used} more cycles ({m.total_cycles} total)")
    print(f"  Registers: {m.registers()}")
    print(f"  $0015 = ${m.memory[0x15]:02X}")
    print(f"  $0400 = ${m.memory[0x400]:02X}")


if __name__ == "__main__":
    main()
