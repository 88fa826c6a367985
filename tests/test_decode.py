"""Tests for instruction decoding."""

import pytest

from chip8vm import DecodeError, Op, decode, opcode_matches


class TestFields:
    """Test operand extraction."""

    def test_fields(self):
        inst = decode(0xD12F)
        assert inst.opcode == 0xD
        assert inst.x == 0x1
        assert inst.y == 0x2
        assert inst.n == 0xF
        assert inst.kk == 0x2F
        assert inst.nnn == 0x12F
        assert inst.raw == 0xD12F

    def test_masked_match(self):
        inst = decode(0x8AB4)
        assert inst.matches(0x8004, 0xF00F)
        assert not inst.matches(0x8005, 0xF00F)
        assert inst.matches(0x8AB4)
        assert opcode_matches(0xE39E, 0xE09E, 0xF0FF)
        assert not opcode_matches(0xE3A1, 0xE09E, 0xF0FF)


class TestFamilies:
    """Test that every opcode family decodes to its own case."""

    @pytest.mark.parametrize("raw, op", [
        (0x00E0, Op.CLS), (0x00EE, Op.RET), (0x1234, Op.JP), (0x2345, Op.CALL),
        (0x3A12, Op.SE_IMM), (0x4A12, Op.SNE_IMM), (0x5AB0, Op.SE_REG),
        (0x6A12, Op.LD_IMM), (0x7A12, Op.ADD_IMM), (0x8AB0, Op.LD_REG),
        (0x8AB1, Op.OR), (0x8AB2, Op.AND), (0x8AB3, Op.XOR), (0x8AB4, Op.ADD_REG),
        (0x8AB5, Op.SUB), (0x8AB6, Op.SHR), (0x8AB7, Op.SUBN), (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_REG), (0xA123, Op.LD_I), (0xB123, Op.JP_V0),
        (0xCA12, Op.RND), (0xDAB5, Op.DRW), (0xEA9E, Op.SKP), (0xEAA1, Op.SKNP),
        (0xFA07, Op.LD_VX_DT), (0xFA0A, Op.LD_VX_K), (0xFA15, Op.LD_DT_VX),
        (0xFA18, Op.LD_ST_VX), (0xFA1E, Op.ADD_I), (0xFA29, Op.LD_F),
        (0xFA33, Op.LD_B), (0xFA55, Op.LD_MEM_V), (0xFA65, Op.LD_V_MEM),
    ])
    def test_decode_family(self, raw, op):
        assert decode(raw).op is op

    def test_every_op_reachable(self):
        """All 34 families plus nothing else appear over the full opcode space."""
        seen = set()
        for raw in range(0x10000):
            try:
                seen.add(decode(raw).op)
            except DecodeError:
                pass
        assert seen == set(Op)


class TestInvalid:
    """Test decode errors."""

    @pytest.mark.parametrize("raw", [0x0000, 0x0123, 0x00E1, 0x5121, 0x8128, 0x812F, 0x9121, 0xE19F, 0xF1FF, 0xF100])
    def test_invalid_opcode(self, raw):
        with pytest.raises(DecodeError) as excinfo:
            decode(raw, pc=0x2A4)
        assert excinfo.value.pc == 0x2A4
        assert excinfo.value.opcode == raw
        assert "02a4" in str(excinfo.value)
