"""Tests for ALU operations (8xxx)."""

import itertools

import pytest

from chip8vm.instructions.alu import (
    alu_add, alu_sub_xy, alu_sub_yx, alu_shift_right, alu_shift_left,
)
from conftest import execute

ALL_PAIRS = list(itertools.product(range(256), repeat=2))


def set_registers(machine, **values):
    for name, value in values.items():
        machine.state.V[int(name[1:], 16)] = value
    return machine


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, machine):
        """8XY0 - Set VX = VY."""
        set_registers(machine, V1=0x42, V2=0x99)
        execute(machine, 0x8120)
        assert machine.state.V[1] == 0x99
        assert machine.state.V[2] == 0x99

    def test_alu_or_basic(self, machine):
        """8XY1 - OR operation."""
        set_registers(machine, V1=0xF0, V2=0x0F)
        execute(machine, 0x8121)
        assert machine.state.V[1] == 0xFF
        assert machine.state.V[15] == 0

    def test_alu_and_basic(self, machine):
        """8XY2 - AND operation."""
        set_registers(machine, V1=0xF0, V2=0xF1)
        execute(machine, 0x8122)
        assert machine.state.V[1] == 0xF0

    def test_alu_xor_same(self, machine):
        """8XY3 - XOR with same value should be 0."""
        set_registers(machine, V3=0xAA, V4=0xAA)
        execute(machine, 0x8343)
        assert machine.state.V[3] == 0x00

    def test_logic_ops_leave_vf(self, machine):
        """8XY1/2/3 do not touch VF."""
        set_registers(machine, V1=0x0F, V2=0xF0, VF=0x07)
        for opcode in (0x8121, 0x8122, 0x8123):
            execute(machine, opcode)
            assert machine.state.V[15] == 0x07


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, machine):
        """8XY4 - Add without carry."""
        set_registers(machine, V1=0x10, V2=0x20)
        execute(machine, 0x8124)
        assert machine.state.V[1] == 0x30
        assert machine.state.V[15] == 0

    def test_alu_add_with_carry(self, machine):
        """8XY4 - Add with carry."""
        set_registers(machine, V1=0xFF, V2=0x02)
        execute(machine, 0x8124)
        assert machine.state.V[1] == 0x01
        assert machine.state.V[15] == 1

    def test_alu_add_exact_overflow(self, machine):
        """8XY4 - 0x80 + 0x80 wraps to zero with carry."""
        set_registers(machine, V1=0x80, V2=0x80)
        execute(machine, 0x8124)
        assert machine.state.V[1] == 0
        assert machine.state.V[15] == 1

    def test_alu_sub_no_borrow(self, machine):
        """8XY5 - VX > VY sets VF."""
        set_registers(machine, V1=0x30, V2=0x10)
        execute(machine, 0x8125)
        assert machine.state.V[1] == 0x20
        assert machine.state.V[15] == 1

    def test_alu_sub_equal_clears_flag(self, machine):
        """8XY5 - VX == VY is not strictly greater, VF = 0."""
        set_registers(machine, V1=0x30, V2=0x30, VF=1)
        execute(machine, 0x8125)
        assert machine.state.V[1] == 0
        assert machine.state.V[15] == 0

    def test_alu_sub_with_borrow(self, machine):
        """8XY5 - Borrow wraps."""
        set_registers(machine, V1=0x10, V2=0x30)
        execute(machine, 0x8125)
        assert machine.state.V[1] == 0xE0
        assert machine.state.V[15] == 0

    def test_alu_subn(self, machine):
        """8XY7 - VX = VY - VX."""
        set_registers(machine, V1=0x10, V2=0x30)
        execute(machine, 0x8127)
        assert machine.state.V[1] == 0x20
        assert machine.state.V[15] == 1

    def test_alu_flag_register_as_target(self, machine):
        """8FY4 - The sum overwrites the carry when X is F."""
        set_registers(machine, VF=0xFF, V2=0x05)
        execute(machine, 0x8F24)
        assert machine.state.V[15] == 0x04

    def test_alu_sub_into_flag_register(self, machine):
        """8FY5 - The difference overwrites the borrow flag when X is F."""
        set_registers(machine, VF=0x30, V2=0x10)
        execute(machine, 0x8F25)
        assert machine.state.V[15] == 0x20

    def test_alu_flag_register_as_source(self, machine):
        """8XF4 - VY is read before the carry is written."""
        set_registers(machine, V1=0x10, VF=0x20)
        execute(machine, 0x81F4)
        assert machine.state.V[1] == 0x30
        assert machine.state.V[15] == 0


class TestALUShifts:
    """Test shift operations."""

    def test_shift_right(self, machine):
        """8XY6 - Shift right, LSB into VF, VY ignored."""
        set_registers(machine, V1=0x05, V2=0xFF)
        execute(machine, 0x8126)
        assert machine.state.V[1] == 0x02
        assert machine.state.V[15] == 1

    def test_shift_left(self, machine):
        """8XYE - Shift left, MSB into VF."""
        set_registers(machine, V1=0x81)
        execute(machine, 0x812E)
        assert machine.state.V[1] == 0x02
        assert machine.state.V[15] == 1

    def test_shift_left_no_carry(self, machine):
        set_registers(machine, V1=0x41)
        execute(machine, 0x812E)
        assert machine.state.V[1] == 0x82
        assert machine.state.V[15] == 0


class TestALUProperties:
    """Flag properties over every pair of byte operands."""

    def test_add_all_pairs(self):
        for a, b in ALL_PAIRS:
            assert alu_add(a, b) == ((a + b) % 256, int(a + b >= 256))

    def test_sub_all_pairs(self):
        for a, b in ALL_PAIRS:
            assert alu_sub_xy(a, b) == ((a - b) % 256, int(a > b))
            assert alu_sub_yx(a, b) == ((b - a) % 256, int(b > a))

    @pytest.mark.parametrize("a", range(256))
    def test_shifts(self, a):
        assert alu_shift_right(a, 0) == (a >> 1, a & 1)
        assert alu_shift_left(a, 0) == ((a << 1) % 256, a >> 7)
