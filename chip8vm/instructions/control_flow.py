"""CHIP-8 control flow instructions."""

from typing import TYPE_CHECKING, Callable

from chip8vm.constants import WORD_MASK
from chip8vm.decode import DecodedInstruction
from chip8vm.state import MachineState
from chip8vm.stack import push

if TYPE_CHECKING:
    from chip8vm.emulator import Machine


def jump(state: MachineState, address: int) -> None:
    """Point PC two bytes before ``address``; the post-execute advance lands on it."""
    state.pc = (address - 2) & WORD_MASK


def skip(state: MachineState) -> None:
    """Skip the next instruction."""
    state.pc = (state.pc + 2) & WORD_MASK


def execute_jump(machine: "Machine", instruction: DecodedInstruction) -> None:
    """1NNN - Jump to address NNN."""
    jump(machine.state, instruction.nnn)


def execute_call(machine: "Machine", instruction: DecodedInstruction) -> None:
    """2NNN - Call subroutine at NNN."""
    push(machine.state.stack, machine.state.pc)
    jump(machine.state, instruction.nnn)


def make_skip_instruction(condition_fn: Callable[["Machine", DecodedInstruction], bool]):
    """Factory for skip instructions."""
    def skip_instruction(machine: "Machine", instruction: DecodedInstruction) -> None:
        if condition_fn(machine, instruction):
            skip(machine.state)
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda machine, inst: machine.state.V[inst.x] == inst.kk
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda machine, inst: machine.state.V[inst.x] != inst.kk
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda machine, inst: machine.state.V[inst.x] == machine.state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda machine, inst: machine.state.V[inst.x] != machine.state.V[inst.y]
)

execute_skip_if_key = make_skip_instruction(
    lambda machine, inst: machine.platform.is_key_down(int(machine.state.V[inst.x]) & 0xF)
)

execute_skip_if_not_key = make_skip_instruction(
    lambda machine, inst: not machine.platform.is_key_down(int(machine.state.V[inst.x]) & 0xF)
)


def execute_jump_with_offset(machine: "Machine", instruction: DecodedInstruction) -> None:
    """BNNN - Jump to address NNN + V0."""
    jump(machine.state, instruction.nnn + int(machine.state.V[0]))
