"""Draw the hex digits 0-F with a tiny hand-assembled program and print the screen."""

import time

from chip8vm import HostPlatform, Machine, run_steps
from chip8vm.rendering import display_to_ascii

PROGRAM = [
    0x6000,  # 200: V0 = 0        digit
    0x6101,  # 202: V1 = 1        x
    0x6201,  # 204: V2 = 1        y
    0xF029,  # 206: I = font(V0)
    0xD125,  # 208: draw 5 rows at (V1, V2)
    0x7106,  # 20A: x += 6
    0x7001,  # 20C: digit += 1
    0x4008,  # 20E: skip if digit != 8
    0x1218,  # 210: JP 218         second row
    0x4010,  # 212: skip if digit != 16
    0x121E,  # 214: JP 21E         done
    0x1206,  # 216: JP 206
    0x6101,  # 218: x = 1
    0x6208,  # 21A: y = 8
    0x1206,  # 21C: JP 206
    0x121E,  # 21E: JP 21E         halt
]

if __name__ == "__main__":
    rom = b"".join(op.to_bytes(2, "big") for op in PROGRAM)
    machine = Machine(HostPlatform(yield_ms=0), rom)

    start = time.time()
    run_steps(machine, 200)
    print(f"200 instructions in {time.time() - start:.3f}s")
    print(display_to_ascii(machine.display.frame()))
