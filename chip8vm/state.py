"""CHIP-8 machine state structures."""

import dataclasses

import numpy as np
from flax.struct import dataclass, field

from chip8vm.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, NUM_REGISTERS, STACK_SIZE,
)


@dataclasses.dataclass
class StackState:
    """Stack state for subroutine calls."""
    data: np.ndarray = dataclasses.field(default_factory=lambda: np.zeros(STACK_SIZE, dtype=np.uint16))
    pointer: int = 0


@dataclasses.dataclass
class MachineState:
    """Mutable CHIP-8 register file, memory and timers.

    Owned by a single :class:`~chip8vm.emulator.Machine`; only the run loop
    thread mutates it.
    """
    memory: np.ndarray = dataclasses.field(default_factory=lambda: np.zeros(MEMORY_SIZE, dtype=np.uint8))
    V: np.ndarray = dataclasses.field(default_factory=lambda: np.zeros(NUM_REGISTERS, dtype=np.uint8))
    I: int = 0
    pc: int = PROGRAM_START
    delay_timer: int = 0
    sound_timer: int = 0
    stack: StackState = dataclasses.field(default_factory=StackState)


@dataclass
class MachineSnapshot:
    """Immutable copy of the visible machine registers."""
    V: np.ndarray
    stack: np.ndarray
    I: int = 0
    pc: int = PROGRAM_START
    sp: int = 0
    delay_timer: int = 0
    sound_timer: int = 0
    opcode: int = field(pytree_node=False, default=0)

    def format(self) -> str:
        """Render the snapshot as a two-line trace."""
        registers = " ".join(f"v{index:x}={int(value):02x}" for index, value in enumerate(self.V))
        stack = " ".join(f"{int(address):04x}" for address in self.stack)
        return (
            f"pc={self.pc:04x} op={self.opcode:04x} i={self.I:04x} {registers}\n"
            f"  sp={self.sp:02x} [{stack}]"
        )


def create_state() -> MachineState:
    """Create initial machine state with font data loaded."""
    state = MachineState()
    state.memory[FONT_START:FONT_START + len(FONT_DATA)] = FONT_DATA
    return state


def snapshot(state: MachineState) -> MachineSnapshot:
    """Take an immutable snapshot of ``state``."""
    pc = state.pc
    opcode = (int(state.memory[pc % MEMORY_SIZE]) << 8) | int(state.memory[(pc + 1) % MEMORY_SIZE])
    registers = state.V.copy()
    stack = state.stack.data.copy()
    registers.setflags(write=False)
    stack.setflags(write=False)
    return MachineSnapshot(
        V=registers,
        stack=stack,
        I=state.I,
        pc=pc,
        sp=state.stack.pointer,
        delay_timer=state.delay_timer,
        sound_timer=state.sound_timer,
        opcode=opcode,
    )
