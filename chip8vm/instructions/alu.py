"""CHIP-8 ALU operations (8xxx).

Each operation takes the current VX and VY and returns the new VX together
with the new VF, or ``None`` when the operation leaves VF alone.
"""

from typing import TYPE_CHECKING, Optional

from chip8vm.constants import BYTE_MASK, FLAG_REGISTER
from chip8vm.decode import DecodedInstruction, Op

if TYPE_CHECKING:
    from chip8vm.emulator import Machine


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & BYTE_MASK, int(result > BYTE_MASK)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    return (vx - vy) & BYTE_MASK, int(vx > vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    return (vy - vx) & BYTE_MASK, int(vy > vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return (vx << 1) & BYTE_MASK, vx >> 7


ALU_OPERATIONS = {
    Op.LD_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_REG: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}


def execute_alu_operation(machine: "Machine", instruction: DecodedInstruction) -> None:
    """8XYN - ALU operations dispatcher."""
    V = machine.state.V
    result, vf = ALU_OPERATIONS[instruction.op](int(V[instruction.x]), int(V[instruction.y]))
    # Flag first: when X is F the result overwrites it
    if vf is not None:
        V[FLAG_REGISTER] = vf
    V[instruction.x] = result
