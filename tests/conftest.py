"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest

from chip8vm import Machine, Platform, WaitCancelled, decode


class FakePlatform(Platform):
    """Scripted platform: manual clock, fixed random bytes, settable keys."""

    def __init__(self, random_bytes=(0xAB,), key_presses=()):
        self.time = 0.0
        self.random_bytes = list(random_bytes)
        self.key_presses = list(key_presses)
        self.keys_down = set()
        self.yields = 0

    def now(self):
        return self.time

    def random_byte(self):
        value = self.random_bytes.pop(0)
        self.random_bytes.append(value)
        return value

    def is_key_down(self, key):
        return key in self.keys_down

    def wait_for_key_press(self):
        if not self.key_presses:
            raise WaitCancelled()
        return self.key_presses.pop(0)

    def yield_hint(self):
        self.yields += 1


@pytest.fixture
def platform():
    return FakePlatform()


@pytest.fixture
def machine(platform):
    """Provide a fresh machine with no program for each test."""
    return Machine(platform)


def execute(machine, opcode):
    """Decode and execute one opcode at the current PC."""
    machine.execute(decode(opcode, machine.state.pc))
    return machine


def load_program(platform, *opcodes, **kwargs):
    """Build a machine whose ROM is the given 16-bit opcodes."""
    rom = b"".join(op.to_bytes(2, "big") for op in opcodes)
    return Machine(platform, rom, **kwargs)


def setup_sprite_in_memory(machine, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    machine.state.memory[address:address + len(sprite_bytes)] = sprite_bytes
    return machine
