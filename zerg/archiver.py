"""Fixed-size byte buffers for saving and restoring checkpoint data.

A codec is any object offering ``pack(writer, value)``, ``unpack(reader)``
and ``size(value)``; the writer, reader and sizer here delegate to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Union

PathLike = Union[str, "os.PathLike[str]"]


class ArchiverWriter:
    """Append-only buffer whose capacity is fixed by :meth:`alloc_mem`."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._pos = 0

    @property
    def total_size(self) -> int:
        return len(self._buffer)

    @property
    def used_size(self) -> int:
        return self._pos

    @property
    def data(self) -> bytes:
        return bytes(self._buffer)

    def alloc_mem(self, size: int) -> None:
        """Prepare a zeroed buffer of ``size`` bytes, dropping any previous content."""
        if size < 0:
            raise ValueError(f"cannot allocate a negative size: {size}")
        self._buffer = bytearray(size)
        self._pos = 0

    def append_data(self, data) -> None:
        """Copy ``data`` into the buffer at the current position."""
        chunk = bytes(data)
        end = self._pos + len(chunk)
        if end > len(self._buffer):
            raise ValueError(
                f"writing {len(chunk)} bytes at {self._pos} overflows buffer of {len(self._buffer)}"
            )
        self._buffer[self._pos:end] = chunk
        self._pos = end

    def write(self, value: Any, codec) -> "ArchiverWriter":
        """Serialise ``value`` with ``codec``; returns the writer for chaining."""
        codec.pack(self, value)
        return self

    def write_to_file(self, filename: PathLike) -> None:
        """Save the whole buffer to ``filename``; an empty buffer writes nothing."""
        if not self._buffer:
            return
        Path(filename).write_bytes(self._buffer)

    def reset(self) -> None:
        """Release the buffer."""
        self._buffer = bytearray()
        self._pos = 0


class ArchiverReader:
    """Sequential reader over a byte buffer."""

    def __init__(self) -> None:
        self._buffer = b""
        self._pos = 0

    @property
    def total_size(self) -> int:
        return len(self._buffer)

    @property
    def used_size(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._buffer) - self._pos

    @property
    def data(self) -> bytes:
        return bytes(self._buffer)

    def read_data(self, size: int) -> bytes:
        """Return the next ``size`` bytes and advance past them."""
        if size < 0:
            raise ValueError(f"cannot read a negative size: {size}")
        end = self._pos + size
        if end > len(self._buffer):
            raise EOFError(
                f"reading {size} bytes at {self._pos} passes end of buffer of {len(self._buffer)}"
            )
        chunk = bytes(self._buffer[self._pos:end])
        self._pos = end
        return chunk

    def read(self, codec) -> Any:
        """Deserialise the next value with ``codec``."""
        return codec.unpack(self)

    def read_from_file(self, filename: PathLike) -> int:
        """Load the whole of ``filename``; returns the number of bytes loaded."""
        self.reset()
        content = Path(filename).read_bytes()
        self._buffer = content
        return len(content)

    def read_from_memory(self, buffer) -> int:
        """Load a copy of ``buffer``; returns the number of bytes loaded."""
        self.reset()
        self._buffer = bytes(buffer)
        return len(self._buffer)

    def alloc_mem(self, size: int) -> None:
        """Prepare a zeroed buffer of ``size`` bytes, dropping any previous content."""
        if size < 0:
            raise ValueError(f"cannot allocate a negative size: {size}")
        self._buffer = bytes(size)
        self._pos = 0

    def reset(self) -> None:
        """Release the buffer."""
        self._buffer = b""
        self._pos = 0


class ArchiverSizer:
    """Accumulates the byte size that values will take once written."""

    def __init__(self) -> None:
        self._size = 0

    @property
    def total_size(self) -> int:
        return self._size

    def add_size(self, size: int) -> None:
        self._size += size

    def add(self, value: Any, codec) -> "ArchiverSizer":
        """Count the size of ``value`` under ``codec``; returns the sizer for chaining."""
        self._size += codec.size(value)
        return self

    def clear(self) -> None:
        self._size = 0