"""CHIP-8 miscellaneous instructions (Fxxx)."""

from typing import TYPE_CHECKING

from chip8vm.constants import ADDRESS_MASK, FONT_START, FONT_GLYPH_SIZE, WORD_MASK
from chip8vm.decode import DecodedInstruction

if TYPE_CHECKING:
    from chip8vm.emulator import Machine


def execute_get_delay_timer(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX07 - Set VX to delay timer value."""
    machine.state.V[instruction.x] = machine.state.delay_timer


def execute_wait_for_key(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX0A - Wait for key press (blocking)."""
    machine.state.V[instruction.x] = machine.platform.wait_for_key_press() & 0xF


def execute_set_delay_timer(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX15 - Set delay timer to VX."""
    machine.state.delay_timer = int(machine.state.V[instruction.x])


def execute_set_sound_timer(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX18 - Set sound timer to VX."""
    machine.state.sound_timer = int(machine.state.V[instruction.x])


def execute_add_to_index(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX1E - Add VX to I register."""
    state = machine.state
    state.I = (state.I + int(state.V[instruction.x])) & WORD_MASK


def execute_font_character(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX29 - Set I to location of sprite for digit VX."""
    machine.state.I = FONT_START + int(machine.state.V[instruction.x]) * FONT_GLYPH_SIZE


def execute_bcd_conversion(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    state = machine.state
    value = int(state.V[instruction.x])
    digits = (value // 100, (value // 10) % 10, value % 10)
    for offset, digit in enumerate(digits):
        state.memory[(state.I + offset) & ADDRESS_MASK] = digit


def execute_store_registers(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX55 - Store V0 through VX in memory starting at I."""
    state = machine.state
    for index in range(instruction.x + 1):
        state.memory[(state.I + index) & ADDRESS_MASK] = state.V[index]


def execute_load_registers(machine: "Machine", instruction: DecodedInstruction) -> None:
    """FX65 - Load V0 through VX from memory starting at I."""
    state = machine.state
    for index in range(instruction.x + 1):
        state.V[index] = state.memory[(state.I + index) & ADDRESS_MASK]
