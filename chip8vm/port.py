"""Platform port: host capabilities the CHIP-8 engine depends on.

The engine never talks to a window, a keyboard or a clock directly. It calls a
:class:`Platform` instead, which the host implements. :class:`HostPlatform` is
the stock implementation used by the command line runners; tests script their
own.
"""

import abc
import threading
import time
from typing import Callable, List, Optional

import jax
import numpy as np

from chip8vm.constants import NUM_KEYS
from chip8vm.errors import WaitCancelled


class CancellationToken:
    """Cooperative stop signal shared by a run loop and its blocking waits."""

    def __init__(self):
        self._event = threading.Event()
        self._callbacks: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Set the stop flag and wake everything waiting on this token."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to run on cancellation (immediately if already cancelled)."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise WaitCancelled()


class Keypad:
    """Thread-safe state of the 16 hexadecimal keys.

    The input thread calls :meth:`press` and :meth:`release`; the run loop reads
    with :meth:`is_down` or blocks in :meth:`wait_for_press`.
    """

    def __init__(self):
        self._down = np.zeros(NUM_KEYS, dtype=np.bool_)
        self._presses = 0
        self._last_pressed = 0
        self._condition = threading.Condition()

    def press(self, key: int) -> None:
        key &= 0xF
        with self._condition:
            if self._down[key]:
                return
            self._down[key] = True
            self._presses += 1
            self._last_pressed = key
            self._condition.notify_all()

    def release(self, key: int) -> None:
        with self._condition:
            self._down[key & 0xF] = False

    def release_all(self) -> None:
        with self._condition:
            self._down[:] = False

    def is_down(self, key: int) -> bool:
        with self._condition:
            return bool(self._down[key & 0xF])

    def pressed_keys(self) -> List[int]:
        with self._condition:
            return [int(key) for key in np.flatnonzero(self._down)]

    def wait_for_press(self, token: Optional[CancellationToken] = None) -> int:
        """Block until a key goes from released to pressed and return it.

        Raises:
            WaitCancelled: if ``token`` is cancelled before a key is pressed.
        """
        def wake():
            with self._condition:
                self._condition.notify_all()

        if token is not None:
            token.on_cancel(wake)
        try:
            with self._condition:
                presses = self._presses
                self._condition.wait_for(
                    lambda: self._presses != presses or (token is not None and token.cancelled)
                )
                if self._presses != presses:
                    return self._last_pressed
            raise WaitCancelled()
        finally:
            if token is not None:
                token.remove_callback(wake)


class Platform(abc.ABC):
    """Capabilities the engine calls into; implemented by the host."""

    @abc.abstractmethod
    def now(self) -> float:
        """Monotonic time in milliseconds."""

    @abc.abstractmethod
    def random_byte(self) -> int:
        """A uniformly distributed byte."""

    @abc.abstractmethod
    def is_key_down(self, key: int) -> bool:
        """Non-blocking key state for key 0..15."""

    @abc.abstractmethod
    def wait_for_key_press(self) -> int:
        """Block until a key is pressed and return its index."""

    def yield_hint(self) -> None:
        """Advisory pause after every step."""


class JaxRandomSource:
    """Byte source backed by a seeded jax PRNG key.

    Bytes are drawn in batches so the per-instruction cost stays a list index.
    """

    def __init__(self, seed: int = 0, batch_size: int = 1024):
        self.key = jax.random.PRNGKey(seed)
        self.batch_size = batch_size
        self._buffer: List[int] = []

    def _refill(self) -> None:
        self.key, subkey = jax.random.split(self.key)
        batch = jax.random.randint(subkey, shape=(self.batch_size,), minval=0, maxval=256)
        self._buffer = np.asarray(batch, dtype=np.uint8).tolist()[::-1]

    def __call__(self) -> int:
        if not self._buffer:
            self._refill()
        return self._buffer.pop()


class HostPlatform(Platform):
    """Stock platform: monotonic clock, jax PRNG, shared keypad, sleep yield."""

    def __init__(
        self,
        keypad: Optional[Keypad] = None,
        token: Optional[CancellationToken] = None,
        seed: int = 0,
        yield_ms: float = 1.0,
    ):
        self.keypad = keypad if keypad is not None else Keypad()
        self.token = token if token is not None else CancellationToken()
        self.yield_seconds = yield_ms / 1000.0
        self._random = JaxRandomSource(seed)

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def random_byte(self) -> int:
        return self._random()

    def is_key_down(self, key: int) -> bool:
        return self.keypad.is_down(key)

    def wait_for_key_press(self) -> int:
        return self.keypad.wait_for_press(self.token)

    def yield_hint(self) -> None:
        if self.yield_seconds > 0:
            time.sleep(self.yield_seconds)


class HeadlessPlatform(HostPlatform):
    """Host platform with no keyboard attached.

    Nothing can ever press a key, so FX0A cancels the run instead of blocking
    forever. The loop then stops with PC still on the FX0A.
    """

    def __init__(self, token: Optional[CancellationToken] = None, seed: int = 0, logger=None):
        super().__init__(token=token, seed=seed, yield_ms=0.0)
        self.logger = logger

    def wait_for_key_press(self) -> int:
        if self.logger is not None:
            self.logger.warning("Program is waiting for a key press; no keyboard in headless mode, stopping")
        self.token.cancel()
        raise WaitCancelled()
