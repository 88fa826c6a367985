"""Run loops driving a :class:`~chip8vm.emulator.Machine`.

``EmulatorLoop`` steps one machine on a dedicated thread until it is
cancelled, hits a fatal error or reaches an optional step budget.
``EmulatorSession`` owns the loop for a ROM and implements restart: the old
loop is cancelled and joined before a new machine and display are built.
"""

import threading
from typing import Any, Dict, List, Optional

from chip8vm.constants import TIMER_HZ
from chip8vm.display import DisplayBuffer
from chip8vm.emulator import Machine
from chip8vm.errors import Chip8Error, WaitCancelled
from chip8vm.logging import LoggingCallback, dispatch
from chip8vm.port import CancellationToken, HostPlatform, Keypad


class EmulatorLoop:
    """Repeatedly steps ``machine`` until ``token`` is cancelled."""

    def __init__(
        self,
        machine: Machine,
        token: CancellationToken,
        callbacks: Optional[List[LoggingCallback]] = None,
        config: Optional[Dict[str, Any]] = None,
        max_steps: Optional[int] = None,
    ):
        self.machine = machine
        self.token = token
        self.callbacks = callbacks or []
        self.config = config or {}
        self.max_steps = max_steps
        self.error: Optional[Chip8Error] = None
        self.steps = 0
        self._thread: Optional[threading.Thread] = None

    def run(self) -> None:
        """Run the loop on the calling thread."""
        dispatch(self.callbacks, "on_start", self.config)
        try:
            while not self.token.cancelled:
                if self.max_steps is not None and self.steps >= self.max_steps:
                    break
                instruction = self.machine.step()
                self.steps += 1
                dispatch(self.callbacks, "on_step", self.machine, instruction)
        except WaitCancelled:
            pass
        except Chip8Error as e:
            self.error = e
            dispatch(self.callbacks, "on_error", self.machine, e)
        finally:
            dispatch(self.callbacks, "on_stop", self.machine)

    def start(self) -> None:
        """Run the loop on a new daemon thread."""
        if self._thread is not None:
            raise RuntimeError("Loop already started")
        self._thread = threading.Thread(target=self.run, name="chip8-loop", daemon=True)
        self._thread.start()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the loop thread; re-raise the fatal error that stopped it."""
        if self._thread is not None:
            self._thread.join(timeout)
        if self.error is not None:
            raise self.error

    def stop(self, timeout: Optional[float] = None) -> Optional[Chip8Error]:
        """Cancel the loop, wait for its thread and return its fatal error, if any."""
        self.token.cancel()
        if self._thread is not None:
            self._thread.join(timeout)
        return self.error


class EmulatorSession:
    """One ROM, run on a loop thread, restartable from scratch.

    The keypad outlives restarts so the host keeps feeding the same object.
    """

    def __init__(
        self,
        rom: bytes,
        keypad: Optional[Keypad] = None,
        seed: int = 0,
        yield_ms: float = 1.0,
        timer_hz: float = TIMER_HZ,
        callbacks: Optional[List[LoggingCallback]] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.rom = bytes(rom)
        self.keypad = keypad if keypad is not None else Keypad()
        self.seed = seed
        self.yield_ms = yield_ms
        self.timer_hz = timer_hz
        self.callbacks = callbacks or []
        self.config = config or {}
        self.machine: Optional[Machine] = None
        self.loop: Optional[EmulatorLoop] = None
        self.generation = 0

    @property
    def display(self) -> Optional[DisplayBuffer]:
        return self.machine.display if self.machine is not None else None

    @property
    def error(self) -> Optional[Chip8Error]:
        return self.loop.error if self.loop is not None else None

    def start(self) -> None:
        """Build a fresh machine and start its loop thread."""
        if self.loop is not None and self.loop.running:
            raise RuntimeError("Session already running; use restart()")
        token = CancellationToken()
        platform = HostPlatform(self.keypad, token, seed=self.seed, yield_ms=self.yield_ms)
        self.machine = Machine(platform, self.rom, timer_hz=self.timer_hz)
        self.loop = EmulatorLoop(self.machine, token, self.callbacks, self.config)
        self.generation += 1
        self.loop.start()

    def stop(self) -> Optional[Chip8Error]:
        if self.loop is None:
            return None
        return self.loop.stop()

    def restart(self, rom: Optional[bytes] = None) -> None:
        """Stop and join the current loop, then start over with a new machine."""
        self.stop()
        if rom is not None:
            self.rom = bytes(rom)
        self.keypad.release_all()
        self.start()


def run_steps(
    machine: Machine,
    steps: int,
    callbacks: Optional[List[LoggingCallback]] = None,
    config: Optional[Dict[str, Any]] = None,
    token: Optional[CancellationToken] = None,
) -> EmulatorLoop:
    """Step ``machine`` up to ``steps`` times on the calling thread.

    Raises:
        Chip8Error: the fatal error that stopped the machine, if any.
    """
    loop = EmulatorLoop(machine, token or CancellationToken(), callbacks, config, max_steps=steps)
    loop.run()
    if loop.error is not None:
        raise loop.error
    return loop
