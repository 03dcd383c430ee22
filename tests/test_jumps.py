"""
Jumps and Calls Tests
=====================

JSR, RTS, JMP absolute and JMP indirect: control flow and the stack.
"""

from m6502 import Opcode


class TestJumpToSubroutine:
    """Test JSR and RTS."""

    def test_jsr_then_rts(self, cpu, mem):
        cpu.pc = 0xFF00
        mem.load(0xFF00, [Opcode.JSR, 0x00, 0x80])
        mem[0x8000] = Opcode.RTS
        before = cpu.snapshot()

        used = cpu.execute(12, mem)

        assert used == 12
        assert cpu.pc == 0xFF03
        assert cpu.sp == before.sp
        assert cpu.flags == before.flags

    def test_jsr_pushes_return_address(self, cpu, mem):
        cpu.pc = 0xFF00
        mem.load(0xFF00, [Opcode.JSR, 0x00, 0x80])

        used = cpu.execute(6, mem)

        assert used == 6
        assert cpu.pc == 0x8000
        assert cpu.sp == 0xFD
        assert mem[0x01FF] == 0xFF
        assert mem[0x01FE] == 0x02

    def test_jsr_at_reset_location(self, cpu, mem):
        """The pushed word is the address of the JSR's last byte."""
        mem.load(0xFFFC, [Opcode.JSR, 0x00, 0x80])

        cpu.execute(6, mem)

        assert cpu.pc == 0x8000
        assert mem[0x01FF] == 0xFF
        assert mem[0x01FE] == 0xFE

    def test_nested_calls(self, cpu, mem):
        cpu.pc = 0x0200
        mem.load(0x0200, [Opcode.JSR, 0x00, 0x30])
        mem.load(0x3000, [Opcode.JSR, 0x00, 0x40, Opcode.RTS])
        mem[0x4000] = Opcode.RTS

        assert cpu.step(mem) == 6
        assert cpu.step(mem) == 6
        assert cpu.sp == 0xFB
        assert cpu.step(mem) == 6
        assert cpu.pc == 0x3003
        assert cpu.step(mem) == 6
        assert cpu.pc == 0x0203
        assert cpu.sp == 0xFF

    def test_rts_costs_six_cycles(self, cpu, mem):
        cpu.pc = 0x0200
        cpu.sp = 0xFD
        mem.load(0x01FE, [0x33, 0x12])
        mem[0x0200] = Opcode.RTS

        used = cpu.execute(6, mem)

        assert used == 6
        assert cpu.pc == 0x1234
        assert cpu.sp == 0xFF

    def test_load_in_subroutine_keeps_value(self, cpu, mem):
        cpu.pc = 0xFF00
        mem.load(0xFF00, [Opcode.JSR, 0x00, 0x80])
        mem.load(0x8000, [Opcode.LDA_IM, 0x42, Opcode.RTS])

        used = cpu.execute(14, mem)

        assert used == 14
        assert cpu.a == 0x42
        assert cpu.pc == 0xFF03


class TestJump:
    """Test JMP $addr and JMP ($addr)."""

    def test_jmp_absolute(self, cpu, mem):
        cpu.pc = 0xFF00
        mem.load(0xFF00, [Opcode.JMP_ABS, 0x00, 0x80])
        before = cpu.snapshot()

        used = cpu.execute(3, mem)

        assert used == 3
        assert cpu.pc == 0x8000
        assert cpu.sp == before.sp
        assert cpu.flags == before.flags

    def test_jmp_indirect(self, cpu, mem):
        cpu.pc = 0xFF00
        mem.load(0xFF00, [Opcode.JMP_IND, 0x00, 0x02])
        mem.load(0x0200, [0x34, 0x12])
        before = cpu.snapshot()

        used = cpu.execute(5, mem)

        assert used == 5
        assert cpu.pc == 0x1234
        assert cpu.sp == before.sp
        assert cpu.flags == before.flags

    def test_jmp_indirect_pointer_at_page_end(self, cpu, mem):
        """The high byte comes from the next page, not the start of this one."""
        cpu.pc = 0xFF00
        mem.load(0xFF00, [Opcode.JMP_IND, 0xFF, 0x02])
        mem[0x02FF] = 0x34
        mem[0x0300] = 0x12
        mem[0x0200] = 0x99

        cpu.execute(5, mem)

        assert cpu.pc == 0x1234
