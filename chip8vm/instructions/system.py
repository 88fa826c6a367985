"""CHIP-8 system instructions (0x0xxx)."""

from typing import TYPE_CHECKING

from chip8vm.decode import DecodedInstruction
from chip8vm.stack import pop

if TYPE_CHECKING:
    from chip8vm.emulator import Machine


def execute_clear_screen(machine: "Machine", instruction: DecodedInstruction) -> None:
    """00E0 - Clear display."""
    machine.display.clear()


def execute_return(machine: "Machine", instruction: DecodedInstruction) -> None:
    """00EE - Return from subroutine.

    The stack holds the address of the CALL itself, so the regular advance
    resumes at the instruction after it.
    """
    call_site = pop(machine.state.stack)
    machine.state.pc = call_site
