"""Shared packed-RGB framebuffer behind a readers-writer lock.

Render workers publish finished rows with a write lock; viewers (the
interactive preview, PNG export) take snapshots under a read lock. Both
sides can try the lock without blocking: a worker that cannot get the
write lock keeps its rows in a backlog, and a preview that cannot get the
read lock simply shows the previous frame.

Example:
    >>> fb = Framebuffer(4, 2)
    >>> fb.write_rows([(0, np.full(4, 0xFF0000, dtype=np.uint32))])
    True
    >>> fb.to_rgb()[0, 0].tolist()
    [255, 0, 0]
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

import numpy as np
import numpy.typing as npt

from lumen.core.tonemap import unpack_rgb

# A finished row: (row index from the top, packed pixels of length width)
Row = tuple[int, npt.NDArray[np.uint32]]


class RWLock:
    """Readers-writer lock: many concurrent readers or one writer.

    A blocking writer that is waiting holds off new readers, so a steady
    stream of snapshots cannot starve a worker's final flush.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self, blocking: bool = True) -> bool:
        with self._cond:
            if not blocking and (self._writer or self._writers_waiting):
                return False
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
            return True

    def release_read(self) -> None:
        with self._cond:
            if self._readers == 0:
                raise RuntimeError("release_read() called without a read lock held")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self, blocking: bool = True) -> bool:
        with self._cond:
            if not blocking and (self._writer or self._readers):
                return False
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
            return True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without the write lock held")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class Framebuffer:
    """Flat array of ``width * height`` packed 0xRRGGBB pixels, row 0 at the top.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Framebuffer size {width}x{height} must be positive")
        self._width = width
        self._height = height
        self._pixels = np.zeros(width * height, dtype=np.uint32)
        self._lock = RWLock()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __repr__(self) -> str:
        return f"Framebuffer(width={self._width}, height={self._height})"

    def write_rows(self, rows: Sequence[Row], *, blocking: bool = True) -> bool:
        """Copy finished rows into the buffer.

        Args:
            rows: (row index, packed pixels) pairs.
            blocking: Wait for the write lock. When False and the lock is
                busy, nothing is written.

        Returns:
            True if the rows were written.
        """
        for index, pixels in rows:
            if not 0 <= index < self._height or len(pixels) != self._width:
                raise ValueError(
                    f"Row {index} with {len(pixels)} pixels doesn't fit a "
                    f"{self._width}x{self._height} framebuffer"
                )
        if not self._lock.acquire_write(blocking):
            return False
        try:
            for index, pixels in rows:
                start = index * self._width
                self._pixels[start : start + self._width] = pixels
        finally:
            self._lock.release_write()
        return True

    def snapshot(self, *, blocking: bool = True) -> npt.NDArray[np.uint32] | None:
        """Copy of the packed pixels as a (height, width) array.

        Returns None when ``blocking`` is False and a writer holds the lock.
        """
        if not self._lock.acquire_read(blocking):
            return None
        try:
            data = self._pixels.copy()
        finally:
            self._lock.release_read()
        return data.reshape(self._height, self._width)

    def to_rgb(self) -> npt.NDArray[np.uint8]:
        """The image as a (height, width, 3) uint8 array."""
        return unpack_rgb(self.snapshot())

    def to_float(self) -> npt.NDArray[np.float32]:
        """The image as a (height, width, 3) float32 array in [0, 1]."""
        return self.to_rgb().astype(np.float32) / 255.0

    def clear(self) -> None:
        with self._lock.write():
            self._pixels[:] = 0
