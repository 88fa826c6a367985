"""Main CHIP-8 emulator execution engine."""

import os
from typing import Callable, Dict, Union

import numpy as np

from chip8vm.constants import MAX_ROM_SIZE, MEMORY_SIZE, PROGRAM_START, TIMER_HZ, WORD_MASK
from chip8vm.decode import DecodedInstruction, Op, decode
from chip8vm.display import DisplayBuffer
from chip8vm.errors import RomTooLargeError
from chip8vm.instructions.alu import ALU_OPERATIONS, execute_alu_operation
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)
from chip8vm.instructions.system import execute_clear_screen, execute_return
from chip8vm.port import Platform
from chip8vm.state import MachineSnapshot, MachineState, create_state, snapshot

Handler = Callable[["Machine", DecodedInstruction], None]

HANDLERS: Dict[Op, Handler] = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_IMM: execute_skip_if_equal_immediate,
    Op.SNE_IMM: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    **{op: execute_alu_operation for op in ALU_OPERATIONS},
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.LD_MEM_V: execute_store_registers,
    Op.LD_V_MEM: execute_load_registers,
}


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (int(high) << 8) | int(low)


def fetch(state: MachineState) -> int:
    """Fetch the big-endian instruction word at PC."""
    return _pack_u16(state.memory[state.pc % MEMORY_SIZE], state.memory[(state.pc + 1) % MEMORY_SIZE])


def read_rom(filename: Union[str, os.PathLike]) -> bytes:
    """Read a ROM file, refusing anything that does not fit in program memory."""
    with open(filename, 'rb') as f:
        rom_data = f.read(MAX_ROM_SIZE + 1)
    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(os.path.getsize(filename), MAX_ROM_SIZE)
    return rom_data


class Machine:
    """A CHIP-8 machine: registers, memory, call stack, timers and display.

    A machine runs exactly one program. Loading another ROM means building a
    new machine, which gives a fresh display and fresh state.

    Args:
        platform: Host capabilities (clock, randomness, keys, yield).
        rom: Program bytes, copied verbatim to 0x200.
        timer_hz: Rate at which the delay and sound timers count down.
    """

    def __init__(self, platform: Platform, rom: bytes = b"", timer_hz: float = TIMER_HZ):
        if len(rom) > MAX_ROM_SIZE:
            raise RomTooLargeError(len(rom), MAX_ROM_SIZE)
        self.platform = platform
        self.state = create_state()
        self.state.memory[PROGRAM_START:PROGRAM_START + len(rom)] = np.frombuffer(bytes(rom), dtype=np.uint8)
        self.display = DisplayBuffer()
        self.timer_period = 1000.0 / timer_hz
        self.last_tick = platform.now()
        self.cycles = 0

    @classmethod
    def from_file(cls, platform: Platform, filename: Union[str, os.PathLike], **kwargs) -> "Machine":
        return cls(platform, read_rom(filename), **kwargs)

    def update_timers(self) -> None:
        """Count DT and ST down by one once a full tick period has elapsed."""
        now = self.platform.now()
        if now - self.last_tick < self.timer_period:
            return
        self.last_tick = now
        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1
        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

    def execute(self, instruction: DecodedInstruction) -> None:
        """Execute one decoded instruction and advance PC past it."""
        HANDLERS[instruction.op](self, instruction)
        self.state.pc = (self.state.pc + 2) & WORD_MASK

    def step(self) -> DecodedInstruction:
        """Run one timer update and one fetch/decode/execute cycle.

        Returns:
            The instruction that was executed.

        Raises:
            DecodeError: on an opcode outside the instruction set.
            StackFault: on call stack overflow or underflow.
            WaitCancelled: if FX0A was interrupted by cancellation.
        """
        self.update_timers()
        instruction = decode(fetch(self.state), self.state.pc)
        self.execute(instruction)
        self.cycles += 1
        self.platform.yield_hint()
        return instruction

    def snapshot(self) -> MachineSnapshot:
        return snapshot(self.state)

    def dump(self) -> str:
        """Registers, stack and the opcode at PC as text."""
        return self.snapshot().format()
