"""CHIP-8 memory and register operations."""

from typing import TYPE_CHECKING

from chip8vm.constants import BYTE_MASK
from chip8vm.decode import DecodedInstruction

if TYPE_CHECKING:
    from chip8vm.emulator import Machine


def execute_set(machine: "Machine", instruction: DecodedInstruction) -> None:
    """6XKK - Set VX = KK."""
    machine.state.V[instruction.x] = instruction.kk


def execute_add(machine: "Machine", instruction: DecodedInstruction) -> None:
    """7XKK - Add KK to VX, VF untouched."""
    V = machine.state.V
    V[instruction.x] = (int(V[instruction.x]) + instruction.kk) & BYTE_MASK


def execute_set_index(machine: "Machine", instruction: DecodedInstruction) -> None:
    """ANNN - Set I = NNN."""
    machine.state.I = instruction.nnn


def execute_random(machine: "Machine", instruction: DecodedInstruction) -> None:
    """CXKK - Set VX = random & KK."""
    machine.state.V[instruction.x] = (machine.platform.random_byte() & BYTE_MASK) & instruction.kk
