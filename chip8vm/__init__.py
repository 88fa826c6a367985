"""CHIP-8 emulator package."""

from chip8vm.constants import *
from chip8vm.decode import DecodedInstruction, Op, decode, opcode_matches
from chip8vm.display import DisplayBuffer, Pixel
from chip8vm.emulator import Machine, fetch, read_rom
from chip8vm.errors import (
    Chip8Error, DecodeError, StackFault, StackOverflowError, StackUnderflowError,
    RomTooLargeError, WaitCancelled,
)
from chip8vm.port import CancellationToken, HeadlessPlatform, HostPlatform, Keypad, Platform
from chip8vm.runner import EmulatorLoop, EmulatorSession, run_steps
from chip8vm.state import MachineState, MachineSnapshot, create_state

__all__ = [
    "MachineState",
    "MachineSnapshot",
    "create_state",
    "Machine",
    "fetch",
    "read_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "opcode_matches",
    "DisplayBuffer",
    "Pixel",
    "Platform",
    "HostPlatform",
    "HeadlessPlatform",
    "Keypad",
    "CancellationToken",
    "EmulatorLoop",
    "EmulatorSession",
    "run_steps",
    "Chip8Error",
    "DecodeError",
    "StackFault",
    "StackOverflowError",
    "StackUnderflowError",
    "RomTooLargeError",
    "WaitCancelled",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
