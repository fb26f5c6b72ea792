"""
Reusable flat buffers for matrix temporaries.

Matrix multiplication, transposition and inversion need short-lived
row-major buffers whose length depends only on the shapes involved. The
BufferPool keeps those buffers keyed by exact length so that a hot loop
repeating the same shapes allocates once.

Contract:
    - acquire(length) returns a 1-D float64 buffer of exactly that length,
      reusing the first free buffer of that length if there is one
    - release(buffer) only accepts buffers created by the same pool; they
      are filled with NaN and marked free. Anything else is ignored
    - arithmetic results never depend on whether a buffer was reused

Thread Safety:
    Each pool guards its bookkeeping with a lock. get_default_pool()
    returns one pool per thread, so matrices built without an explicit
    pool never share buffers across threads.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray

from matrixmath.core.exceptions import PoolError

logger = logging.getLogger(__name__)


@dataclass
class _Slot:
    buffer: NDArray[np.float64]
    original_length: int
    in_use: bool = False


@dataclass(frozen=True)
class PoolStats:
    """
    Snapshot of pool bookkeeping.

    Attributes:
        lengths: Buffer lengths that have been requested at least once
        total_buffers: Number of buffers owned by the pool
        in_use: Number of buffers currently acquired
        total_acquires: Number of acquire() calls
        total_releases: Number of accepted release() calls
        reuses: Number of acquire() calls served by an existing buffer
    """
    lengths: tuple[int, ...]
    total_buffers: int
    in_use: int
    total_acquires: int
    total_releases: int
    reuses: int


class BufferPool:
    """
    Pool of flat float64 buffers keyed by exact length.

    Usage:
        pool = BufferPool()
        buf = pool.acquire(6)
        try:
            buf[:] = values
            ...
        finally:
            pool.release(buf)

        # or
        with pool.borrow(6) as buf:
            ...
    """

    def __init__(self) -> None:
        self._slots: dict[int, list[_Slot]] = {}
        # id(buffer) -> slot, for validating release()
        self._owned: dict[int, _Slot] = {}
        self._lock = threading.Lock()
        self._total_acquires = 0
        self._total_releases = 0
        self._reuses = 0

    def acquire(self, length: int) -> NDArray[np.float64]:
        """
        Get a buffer of exactly `length` elements.

        The contents of the buffer are unspecified (NaN for reused buffers);
        callers must write every slot they read.

        Args:
            length: Number of elements

        Returns:
            1-D float64 array owned by this pool

        Raises:
            PoolError: If length is negative
        """
        if length < 0:
            raise PoolError(f"length: must be non-negative, got {length}", length=length)

        with self._lock:
            self._total_acquires += 1
            slots = self._slots.setdefault(length, [])
            for slot in slots:
                if not slot.in_use:
                    slot.in_use = True
                    self._reuses += 1
                    return slot.buffer

            slot = _Slot(
                buffer=np.full(length, np.nan, dtype=np.float64),
                original_length=length,
                in_use=True,
            )
            slots.append(slot)
            self._owned[id(slot.buffer)] = slot

        logger.debug("BufferPool allocated buffer of length %d (%d for this length)",
                     length, len(slots))
        return slot.buffer

    def release(self, buffer: Any) -> None:
        """
        Give a buffer back to the pool.

        Buffers that did not come from this pool are ignored, as are
        buffers that are already free.

        Args:
            buffer: A buffer previously returned by acquire()
        """
        with self._lock:
            slot = self._owned.get(id(buffer))
            if slot is None or slot.buffer is not buffer:
                return
            if not slot.in_use:
                return
            if slot.buffer.shape != (slot.original_length,):
                # Someone resized the array in place; it can no longer be reused.
                logger.debug("BufferPool dropping resized buffer of original length %d",
                             slot.original_length)
                self._slots[slot.original_length].remove(slot)
                del self._owned[id(buffer)]
                return
            slot.buffer.fill(np.nan)
            slot.in_use = False
            self._total_releases += 1

    @contextmanager
    def borrow(self, length: int) -> Iterator[NDArray[np.float64]]:
        """
        Acquire a buffer for the duration of a with-block.

        Args:
            length: Number of elements

        Yields:
            1-D float64 array, released when the block exits
        """
        buffer = self.acquire(length)
        try:
            yield buffer
        finally:
            self.release(buffer)

    def owns(self, buffer: Any) -> bool:
        """Check whether a buffer was created by this pool."""
        with self._lock:
            slot = self._owned.get(id(buffer))
            return slot is not None and slot.buffer is buffer

    def clear(self) -> None:
        """Drop every free buffer. Buffers currently in use are kept."""
        with self._lock:
            for length, slots in list(self._slots.items()):
                kept = [slot for slot in slots if slot.in_use]
                for slot in slots:
                    if not slot.in_use:
                        del self._owned[id(slot.buffer)]
                if kept:
                    self._slots[length] = kept
                else:
                    del self._slots[length]

    def stats(self) -> PoolStats:
        """Get a snapshot of the pool's bookkeeping."""
        with self._lock:
            all_slots = [slot for slots in self._slots.values() for slot in slots]
            return PoolStats(
                lengths=tuple(sorted(self._slots)),
                total_buffers=len(all_slots),
                in_use=sum(1 for slot in all_slots if slot.in_use),
                total_acquires=self._total_acquires,
                total_releases=self._total_releases,
                reuses=self._reuses,
            )


_thread_state = threading.local()


def get_default_pool() -> BufferPool:
    """
    Get the calling thread's default pool, creating it on first use.

    Returns:
        BufferPool private to the current thread
    """
    pool = getattr(_thread_state, 'pool', None)
    if pool is None:
        pool = BufferPool()
        _thread_state.pool = pool
    return pool
