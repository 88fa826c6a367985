"""CHIP-8 display operations."""

from typing import TYPE_CHECKING

from chip8vm.constants import ADDRESS_MASK, FLAG_REGISTER
from chip8vm.decode import DecodedInstruction

if TYPE_CHECKING:
    from chip8vm.emulator import Machine


def execute_display(machine: "Machine", instruction: DecodedInstruction) -> None:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Every sprite bit is XORed into the display, wrapping around both edges. The
    whole draw happens under the display lock.
    """
    state = machine.state
    sprite_x = int(state.V[instruction.x])
    sprite_y = int(state.V[instruction.y])

    collision = False
    with machine.display.batch() as display:
        for row in range(instruction.n):
            sprite_byte = int(state.memory[(state.I + row) & ADDRESS_MASK])
            for col in range(8):
                if sprite_byte & (0x80 >> col):
                    collision |= display.set(sprite_x + col, sprite_y + row, True)
    state.V[FLAG_REGISTER] = int(collision)
