"""CHIP-8 display buffer with per-pixel change tracking."""

import threading
from contextlib import contextmanager
from typing import Iterator, List, NamedTuple

import numpy as np

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT


class Pixel(NamedTuple):
    """A single pixel update: coordinates and new value."""
    x: int
    y: int
    value: bool


class DisplayBuffer:
    """64x32 XOR frame buffer.

    Pixels are indexed ``[x, y]`` like the rest of the package. Every pixel has a
    dirty flag that is set when its value changes and cleared when a consumer
    drains it with :meth:`drain_updates`.

    Writers and the draining reader share one lock. :meth:`batch` holds it for
    a whole sprite draw so the reader never sees half a sprite.
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self._pixels = np.zeros((width, height), dtype=np.bool_)
        self._dirty = np.zeros((width, height), dtype=np.bool_)
        self._lock = threading.RLock()

    @contextmanager
    def batch(self) -> Iterator["DisplayBuffer"]:
        """Hold the buffer lock across several writes."""
        with self._lock:
            yield self

    def clear(self) -> None:
        """Turn every pixel off, marking dirty the pixels that were on.

        Pixels already waiting to be drained stay dirty.
        """
        with self._lock:
            self._dirty |= self._pixels
            self._pixels[:] = False

    def set(self, x: int, y: int, value: bool) -> bool:
        """XOR ``value`` into pixel (x, y), wrapping both coordinates.

        Returns:
            True if the pixel went from on to off (a collision).
        """
        x %= self.width
        y %= self.height
        with self._lock:
            old = bool(self._pixels[x, y])
            new = old ^ bool(value)
            if old != new:
                self._pixels[x, y] = new
                self._dirty[x, y] = True
            return old and not new

    def get(self, x: int, y: int) -> bool:
        return bool(self._pixels[x % self.width, y % self.height])

    def drain_updates(self) -> List[Pixel]:
        """Return every dirty pixel and clear its dirty flag."""
        with self._lock:
            xs, ys = np.nonzero(self._dirty)
            updates = [Pixel(int(x), int(y), bool(self._pixels[x, y])) for x, y in zip(xs, ys)]
            self._dirty[:] = False
        return updates

    def frame(self) -> np.ndarray:
        """Copy of the whole (width, height) boolean grid."""
        with self._lock:
            return self._pixels.copy()

    @property
    def lit_count(self) -> int:
        return int(self._pixels.sum())
