"""CHIP-8 emulator exceptions."""


class Chip8Error(Exception):
    """Base class for fatal emulator errors."""


class DecodeError(Chip8Error):
    """Raised when an opcode matches no instruction family."""

    def __init__(self, pc: int, opcode: int):
        self.pc = pc
        self.opcode = opcode
        super().__init__(f"Invalid opcode at {pc:04x}: {opcode:04x}")


class StackFault(Chip8Error):
    """Raised on call stack overflow or underflow."""


class StackOverflowError(StackFault):
    """CALL with a full call stack."""


class StackUnderflowError(StackFault):
    """RET with an empty call stack."""


class RomTooLargeError(Chip8Error):
    """Raised when a ROM does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")


class WaitCancelled(Exception):
    """Raised inside a blocking key wait when the run loop is cancelled."""
