"""
Cursor-based byte buffer used to parse response bodies incrementally.

A buffer starts in write mode, is filled through `sink()`, and is switched to
read mode exactly once with `flip()`. Reads hand out views that share the
underlying storage, so splitting a body into parts and headers never copies
payload bytes until `to_bytes()` is called.
"""

import io

from framefetch.exceptions import BufferOverflowError, BufferUnderflowError


class _BufferSink(io.RawIOBase):
    """Write-only file object that appends to a ScratchBuffer."""

    def __init__(self, buffer: "ScratchBuffer"):
        self._buffer = buffer

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        return self._buffer._append(b)


class ScratchBuffer:
    """
    Byte storage with a write extent and a read cursor.

    Positions exposed by the public API are relative to the start of this
    buffer (a view created by `read` starts at 0). The invariant
    ``0 <= position <= limit <= capacity`` holds at all times.
    """

    def __init__(
        self,
        storage: bytearray,
        start: int = 0,
        end: int | None = None,
        *,
        reading: bool = False,
    ):
        if end is None:
            end = len(storage)
        if not 0 <= start <= end <= len(storage):
            raise ValueError(f"Invalid buffer bounds [{start}, {end}).")

        self._data = storage
        self._start = start
        self._end = end
        self._cursor = start
        self._limit = end if reading else start
        self._reading = reading

    @classmethod
    def allocate(cls, capacity: int) -> "ScratchBuffer":
        """Creates an empty buffer in write mode backed by fresh storage."""
        if capacity < 0:
            raise ValueError("Capacity cannot be negative.")
        return cls(bytearray(capacity))

    @classmethod
    def wrap(cls, storage: bytearray) -> "ScratchBuffer":
        """
        Creates a write-mode buffer over caller-owned storage.

        The storage is never resized; filling past its length raises
        BufferOverflowError.
        """
        if not isinstance(storage, bytearray):
            raise TypeError(
                f"Target buffer must be a bytearray, got {type(storage).__name__}."
            )
        return cls(storage)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ScratchBuffer":
        """Creates a buffer that is already in read mode over a copy of `data`."""
        return cls(bytearray(data), reading=True)

    @property
    def capacity(self) -> int:
        return self._end - self._start

    @property
    def limit(self) -> int:
        return self._limit - self._start

    @property
    def position(self) -> int:
        return self._cursor - self._start

    @property
    def reading(self) -> bool:
        return self._reading

    def sink(self) -> io.RawIOBase:
        """Returns a writable file object appending at the write position."""
        if self._reading:
            raise ValueError("Buffer is in read mode; it cannot be written to.")
        return _BufferSink(self)

    def _append(self, b) -> int:
        if self._reading:
            raise ValueError("Buffer is in read mode; it cannot be written to.")
        n = len(b)
        if self._cursor + n > self._end:
            raise BufferOverflowError(
                f"Cannot write {n} bytes: only {self._end - self._cursor} of "
                f"{self.capacity} bytes left in buffer."
            )
        self._data[self._cursor : self._cursor + n] = b
        self._cursor += n
        return n

    def flip(self) -> "ScratchBuffer":
        """Switches to read mode: the readable extent becomes what was written."""
        if self._reading:
            raise ValueError("Buffer has already been flipped.")
        self._limit = self._cursor
        self._cursor = self._start
        self._reading = True
        return self

    def remaining(self) -> int:
        """Returns the number of unread bytes (free bytes while in write mode)."""
        if self._reading:
            return self._limit - self._cursor
        return self._end - self._cursor

    def search(self, sequence: bytes) -> int:
        """
        Finds the first occurrence of `sequence` at or after the cursor.

        Returns:
            The offset relative to the cursor, or -1 if absent. The cursor is
            never moved.
        """
        self._check_reading()
        found = self._data.find(sequence, self._cursor, self._limit)
        return -1 if found == -1 else found - self._cursor

    def read(self, n: int) -> "ScratchBuffer":
        """
        Returns a read-mode view over the next `n` bytes and advances past them.

        Raises:
            BufferUnderflowError: If `n` is negative or exceeds `remaining()`.
        """
        start = self._cursor
        self.skip(n)
        return ScratchBuffer(self._data, start, start + n, reading=True)

    def skip(self, n: int) -> None:
        """Advances the cursor by `n` bytes with the same bounds rules as `read`."""
        self._check_reading()
        if n < 0 or n > self._limit - self._cursor:
            raise BufferUnderflowError(
                f"Cannot read {n} bytes: only {self._limit - self._cursor} remaining."
            )
        self._cursor += n

    def to_bytes(self) -> bytes:
        """Copies the unread bytes out without moving the cursor."""
        self._check_reading()
        return bytes(self._data[self._cursor : self._limit])

    def _check_reading(self) -> None:
        if not self._reading:
            raise ValueError("Buffer is in write mode; call flip() before reading.")

    def __repr__(self) -> str:
        mode = "read" if self._reading else "write"
        return (
            f"ScratchBuffer(mode={mode}, position={self.position}, "
            f"limit={self.limit}, capacity={self.capacity})"
        )
