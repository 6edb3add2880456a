"""Binary codecs for checkpoint values, and objects that checkpoint themselves.

Values are laid out the way a raw memory copy would lay them out. Scalars use
native byte order with standard sizes. Every variable-length container is
preceded by an 8-byte element count.
"""

from __future__ import annotations

import struct
import warnings
from collections import deque
from typing import Any, Callable, ClassVar, Iterable, Tuple

from zerg.archiver import ArchiverReader, ArchiverSizer, ArchiverWriter

_BYTE_ORDER_PREFIXES = "@=<>!"
_STRING_WARN_LIMIT = 10000


class Codec:
    """Turns one kind of value into bytes and back."""

    def pack(self, writer: ArchiverWriter, value: Any) -> None:
        raise NotImplementedError

    def unpack(self, reader: ArchiverReader) -> Any:
        raise NotImplementedError

    def size(self, value: Any) -> int:
        raise NotImplementedError


class Scalar(Codec):
    """A fixed-size value described by a :mod:`struct` format.

    A format with one field packs a single value. A format with several
    fields packs a tuple, which is the layout of a plain struct.
    """

    def __init__(self, fmt: str) -> None:
        if not fmt or fmt[0] not in _BYTE_ORDER_PREFIXES:
            fmt = "=" + fmt
        self._struct = struct.Struct(fmt)
        self._single = len(self._struct.unpack(bytes(self._struct.size))) == 1

    @property
    def format(self) -> str:
        return self._struct.format

    def pack(self, writer: ArchiverWriter, value: Any) -> None:
        if self._single:
            writer.append_data(self._struct.pack(value))
        else:
            writer.append_data(self._struct.pack(*value))

    def unpack(self, reader: ArchiverReader) -> Any:
        fields = self._struct.unpack(reader.read_data(self._struct.size))
        return fields[0] if self._single else fields

    def size(self, value: Any) -> int:
        return self._struct.size


BOOL = Scalar("?")
CHAR = Scalar("b")
UCHAR = Scalar("B")
SHORT = Scalar("h")
USHORT = Scalar("H")
INT = Scalar("i")
UINT = Scalar("I")
LONG_LONG = Scalar("q")
ULONG_LONG = Scalar("Q")
INT64 = Scalar("q")
SIZE_T = Scalar("Q")
FLOAT = Scalar("f")
DOUBLE = Scalar("d")


class StringCodec(Codec):
    """A string as an element count followed by its encoded bytes."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def pack(self, writer: ArchiverWriter, value: str) -> None:
        raw = value.encode(self.encoding)
        if len(raw) > _STRING_WARN_LIMIT:
            warnings.warn(f"size ({len(raw)}) too big for string when writing archive")
        SIZE_T.pack(writer, len(raw))
        writer.append_data(raw)

    def unpack(self, reader: ArchiverReader) -> str:
        count = SIZE_T.unpack(reader)
        if count > _STRING_WARN_LIMIT:
            warnings.warn(f"size ({count}) too big for string when reading archive")
        return reader.read_data(count).decode(self.encoding)

    def size(self, value: str) -> int:
        return SIZE_T.size(0) + len(value.encode(self.encoding))


STRING = StringCodec()


class Sequence(Codec):
    """An ordered container: element count, then each element in order."""

    def __init__(self, item: Codec, factory: Callable[[Iterable[Any]], Any] = list) -> None:
        self.item = item
        self.factory = factory

    def pack(self, writer: ArchiverWriter, value: Iterable[Any]) -> None:
        items = list(value)
        SIZE_T.pack(writer, len(items))
        for element in items:
            self.item.pack(writer, element)

    def unpack(self, reader: ArchiverReader) -> Any:
        count = SIZE_T.unpack(reader)
        return self.factory(self.item.unpack(reader) for _ in range(count))

    def size(self, value: Iterable[Any]) -> int:
        return SIZE_T.size(0) + sum(self.item.size(element) for element in value)


def DequeCodec(item: Codec) -> Sequence:
    """A sequence that is read back as a :class:`collections.deque`."""
    return Sequence(item, deque)


class FixedArray(Codec):
    """An array of known length: its elements with no count in front."""

    def __init__(self, item: Codec, length: int) -> None:
        if length < 0:
            raise ValueError(f"array length cannot be negative: {length}")
        self.item = item
        self.length = length

    def _check(self, items: list) -> None:
        if len(items) != self.length:
            raise ValueError(f"expected {self.length} elements, got {len(items)}")

    def pack(self, writer: ArchiverWriter, value: Iterable[Any]) -> None:
        items = list(value)
        self._check(items)
        for element in items:
            self.item.pack(writer, element)

    def unpack(self, reader: ArchiverReader) -> list:
        return [self.item.unpack(reader) for _ in range(self.length)]

    def size(self, value: Iterable[Any]) -> int:
        items = list(value)
        self._check(items)
        return sum(self.item.size(element) for element in items)


class Mapping(Codec):
    """A dictionary: entry count, then each key followed by its value."""

    def __init__(self, key: Codec, value: Codec) -> None:
        self.key = key
        self.value = value

    def pack(self, writer: ArchiverWriter, value: dict) -> None:
        SIZE_T.pack(writer, len(value))
        for k, v in value.items():
            self.key.pack(writer, k)
            self.value.pack(writer, v)

    def unpack(self, reader: ArchiverReader) -> dict:
        count = SIZE_T.unpack(reader)
        result = {}
        for _ in range(count):
            k = self.key.unpack(reader)
            result[k] = self.value.unpack(reader)
        return result

    def size(self, value: dict) -> int:
        return SIZE_T.size(0) + sum(
            self.key.size(k) + self.value.size(v) for k, v in value.items()
        )


class SetCodec(Codec):
    """A set: element count, then each element."""

    def __init__(self, item: Codec) -> None:
        self.item = item

    def pack(self, writer: ArchiverWriter, value: set) -> None:
        SIZE_T.pack(writer, len(value))
        for element in value:
            self.item.pack(writer, element)

    def unpack(self, reader: ArchiverReader) -> set:
        count = SIZE_T.unpack(reader)
        return {self.item.unpack(reader) for _ in range(count)}

    def size(self, value: set) -> int:
        return SIZE_T.size(0) + sum(self.item.size(element) for element in value)


class StackCodec(Codec):
    """A stack held as a list whose last element is the top.

    It is written top first, and read back into the same order.
    """

    def __init__(self, item: Codec) -> None:
        self._sequence = Sequence(item)

    def pack(self, writer: ArchiverWriter, value: list) -> None:
        self._sequence.pack(writer, reversed(value))

    def unpack(self, reader: ArchiverReader) -> list:
        top_first = self._sequence.unpack(reader)
        top_first.reverse()
        return top_first

    def size(self, value: list) -> int:
        return self._sequence.size(value)


class ObjectCodec(Codec):
    """An object that checkpoints itself through its ``checkpoint_*`` methods."""

    def __init__(self, factory: Callable[[], Any]) -> None:
        self.factory = factory

    def pack(self, writer: ArchiverWriter, value: Any) -> None:
        value.checkpoint_save(writer)

    def unpack(self, reader: ArchiverReader) -> Any:
        obj = self.factory()
        obj.checkpoint_load(reader)
        return obj

    def size(self, value: Any) -> int:
        sizer = ArchiverSizer()
        value.checkpoint_bytes(sizer)
        return sizer.total_size


class Checkpointable:
    """Mixin that saves the attributes named in ``checkpoint_fields``, in order.

    A subclass extends its parent's fields to save the parent's part first::

        checkpoint_fields = Base.checkpoint_fields + (("extra", INT),)
    """

    checkpoint_fields: ClassVar[Tuple[Tuple[str, Codec], ...]] = ()

    def checkpoint_save(self, writer: ArchiverWriter) -> None:
        for name, codec in self.checkpoint_fields:
            codec.pack(writer, getattr(self, name))

    def checkpoint_load(self, reader: ArchiverReader) -> None:
        for name, codec in self.checkpoint_fields:
            setattr(self, name, codec.unpack(reader))

    def checkpoint_bytes(self, sizer: ArchiverSizer) -> None:
        for name, codec in self.checkpoint_fields:
            sizer.add(getattr(self, name), codec)


def save_checkpoint(var: Any, filename) -> int:
    """Write ``var`` to ``filename``; returns bytes written, 0 if there was nothing to save."""
    sizer = ArchiverSizer()
    var.checkpoint_bytes(sizer)
    total = sizer.total_size
    if total == 0:
        return 0
    writer = ArchiverWriter()
    writer.alloc_mem(total)
    var.checkpoint_save(writer)
    writer.write_to_file(filename)
    if writer.used_size != total:
        warnings.warn("size written is not the same with size estimated when saving checkpoint")
    return writer.used_size


def load_checkpoint(var: Any, filename) -> int:
    """Load ``var`` from ``filename``; returns the number of bytes consumed."""
    reader = ArchiverReader()
    if reader.read_from_file(filename) <= 0:
        raise ValueError(f"empty checkpoint file {filename}")
    var.checkpoint_load(reader)
    if reader.used_size != reader.total_size:
        warnings.warn("size read is not the same with size estimated when loading checkpoint")
    return reader.used_size