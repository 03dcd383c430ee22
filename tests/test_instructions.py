"""
Tests for the opcode table and decoder.
"""

import pytest

from m6502 import (
    AddressingMode,
    DecodeError,
    INSTRUCTIONS,
    Opcode,
    Operation,
    Register,
    lookup,
)


class TestOpcodeTable:
    """Consistency of the INSTRUCTIONS table."""

    def test_every_opcode_has_an_entry(self):
        assert set(INSTRUCTIONS) == {int(op) for op in Opcode}

    def test_keys_match_entries(self):
        for opcode, ins in INSTRUCTIONS.items():
            assert ins.opcode == opcode

    def test_mnemonic_matches_opcode_name(self):
        for ins in INSTRUCTIONS.values():
            assert Opcode(ins.opcode).name.split("_")[0] == ins.mnemonic

    @pytest.mark.parametrize("ins", INSTRUCTIONS.values(), ids=lambda i: Opcode(i.opcode).name)
    def test_register_present_for_loads_and_stores(self, ins):
        if ins.operation in (Operation.LOAD, Operation.STORE):
            assert ins.register is not None
            assert ins.register.name == ins.mnemonic[-1]
        else:
            assert ins.register is None

    @pytest.mark.parametrize("opcode,size", [
        (Opcode.RTS, 1),
        (Opcode.LDA_IM, 2),
        (Opcode.LDX_ZPY, 2),
        (Opcode.STA_INDY, 2),
        (Opcode.LDY_ABSX, 3),
        (Opcode.JMP_IND, 3),
        (Opcode.JSR, 3),
    ])
    def test_size(self, opcode, size):
        assert INSTRUCTIONS[opcode].size == size

    def test_repr(self):
        assert repr(INSTRUCTIONS[Opcode.LDA_IM]) == "Instruction($A9 LDA IMMEDIATE, cycles=2)"

    def test_register_values_name_cpu_attributes(self):
        assert [r.value for r in Register] == ["a", "x", "y"]

    def test_operand_sizes(self):
        assert AddressingMode.IMPLIED.operand_size == 0
        assert AddressingMode.INDIRECT_X.operand_size == 1
        assert AddressingMode.INDIRECT.operand_size == 2


class TestLookup:
    """Test opcode decoding."""

    def test_known_opcode(self):
        ins = lookup(0xA9)
        assert ins.mnemonic == "LDA"
        assert ins.mode is AddressingMode.IMMEDIATE

    @pytest.mark.parametrize("opcode", [0x00, 0x02, 0xEA, 0xFF])
    def test_unknown_opcode(self, opcode):
        with pytest.raises(DecodeError) as exc_info:
            lookup(opcode, 0x1234)
        assert exc_info.value.opcode == opcode
        assert exc_info.value.address == 0x1234
        assert f"${opcode:02X}" in str(exc_info.value)


class TestBaseCycles:
    """With zeroed memory and index registers no page is crossed, so every
    instruction costs exactly its table cycles."""

    @pytest.mark.parametrize("ins", INSTRUCTIONS.values(), ids=lambda i: Opcode(i.opcode).name)
    def test_step_costs_base_cycles(self, cpu, mem, ins):
        cpu.pc = 0x0200
        mem[0x0200] = ins.opcode

        assert cpu.step(mem) == ins.cycles

    @pytest.mark.parametrize(
        "ins",
        [i for i in INSTRUCTIONS.values() if i.operation in (Operation.LOAD, Operation.STORE)],
        ids=lambda i: Opcode(i.opcode).name,
    )
    def test_pc_advances_by_size(self, cpu, mem, ins):
        cpu.pc = 0x0200
        mem[0x0200] = ins.opcode

        cpu.step(mem)

        assert cpu.pc == 0x0200 + ins.size
