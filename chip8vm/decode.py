"""CHIP-8 instruction decoding."""

import enum
from typing import Optional

from chex import dataclass

from chip8vm.errors import DecodeError


class Op(enum.Enum):
    """Opcode families, one member per instruction."""
    CLS = "00E0"
    RET = "00EE"
    JP = "1nnn"
    CALL = "2nnn"
    SE_IMM = "3xkk"
    SNE_IMM = "4xkk"
    SE_REG = "5xy0"
    LD_IMM = "6xkk"
    ADD_IMM = "7xkk"
    LD_REG = "8xy0"
    OR = "8xy1"
    AND = "8xy2"
    XOR = "8xy3"
    ADD_REG = "8xy4"
    SUB = "8xy5"
    SHR = "8xy6"
    SUBN = "8xy7"
    SHL = "8xyE"
    SNE_REG = "9xy0"
    LD_I = "Annn"
    JP_V0 = "Bnnn"
    RND = "Cxkk"
    DRW = "Dxyn"
    SKP = "Ex9E"
    SKNP = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I = "Fx1E"
    LD_F = "Fx29"
    LD_B = "Fx33"
    LD_MEM_V = "Fx55"
    LD_V_MEM = "Fx65"


_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_MEM_V,
    0x65: Op.LD_V_MEM,
}

_FIXED_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_IMM,
    0x4: Op.SNE_IMM,
    0x6: Op.LD_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    kk: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    def matches(self, pattern: int, mask: int = 0xFFFF) -> bool:
        """Masked family comparison: raw & mask == pattern & mask."""
        return opcode_matches(self.raw, pattern, mask)

    def __str__(self) -> str:
        return f"{self.raw:04X} {self.op.name}"


def opcode_matches(value: int, pattern: int, mask: int = 0xFFFF) -> bool:
    """Check whether a raw opcode belongs to the family (pattern, mask)."""
    return (value & mask) == (pattern & mask)


def _family(instruction: int) -> Optional[Op]:
    top = (instruction & 0xF000) >> 12
    if top in _FIXED_OPS:
        return _FIXED_OPS[top]
    if top == 0x0:
        if instruction == 0x00E0:
            return Op.CLS
        if instruction == 0x00EE:
            return Op.RET
        return None
    if top == 0x5:
        return Op.SE_REG if instruction & 0x000F == 0 else None
    if top == 0x8:
        return _ALU_OPS.get(instruction & 0x000F)
    if top == 0x9:
        return Op.SNE_REG if instruction & 0x000F == 0 else None
    if top == 0xE:
        return _KEY_OPS.get(instruction & 0x00FF)
    # top == 0xF
    return _MISC_OPS.get(instruction & 0x00FF)


def decode(instruction: int, pc: int = 0) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Raises:
        DecodeError: if the opcode belongs to no instruction family. ``pc`` is
            only used to report where the bad opcode was fetched from.
    """
    instruction &= 0xFFFF
    op = _family(instruction)
    if op is None:
        raise DecodeError(pc, instruction)
    return DecodedInstruction(
        raw=instruction,
        op=op,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        kk=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
