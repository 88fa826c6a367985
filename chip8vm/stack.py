"""CHIP-8 stack operations."""

from chip8vm.constants import STACK_SIZE, WORD_MASK
from chip8vm.errors import StackOverflowError, StackUnderflowError
from chip8vm.state import StackState


def push(stack: StackState, address: int) -> None:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowError(f"Call stack overflow: {STACK_SIZE} return addresses already pushed")
    stack.data[stack.pointer] = address & WORD_MASK
    stack.pointer += 1


def pop(stack: StackState) -> int:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise StackUnderflowError("Return with an empty call stack")
    stack.pointer -= 1
    address = int(stack.data[stack.pointer])
    stack.data[stack.pointer] = 0
    return address
