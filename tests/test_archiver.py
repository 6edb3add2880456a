import struct

import pytest

from zerg.archiver import ArchiverReader, ArchiverSizer, ArchiverWriter


class IntCodec:
    _layout = struct.Struct("<i")

    def pack(self, writer, value):
        writer.append_data(self._layout.pack(value))

    def unpack(self, reader):
        return self._layout.unpack(reader.read_data(self._layout.size))[0]

    def size(self, value):
        return self._layout.size


class TextCodec:
    _length = struct.Struct("<Q")

    def pack(self, writer, value):
        raw = value.encode()
        writer.append_data(self._length.pack(len(raw)))
        writer.append_data(raw)

    def unpack(self, reader):
        (length,) = self._length.unpack(reader.read_data(self._length.size))
        return reader.read_data(length).decode()

    def size(self, value):
        return self._length.size + len(value.encode())


INT = IntCodec()
TEXT = TextCodec()


def _written(values):
    sizer = ArchiverSizer()
    for value, codec in values:
        sizer.add(value, codec)
    writer = ArchiverWriter()
    writer.alloc_mem(sizer.total_size)
    for value, codec in values:
        writer.write(value, codec)
    return sizer, writer


def test_sizer_matches_bytes_written():
    sizer, writer = _written([(1, INT), (2, INT), ("hello", TEXT)])
    assert writer.used_size == sizer.total_size
    assert writer.total_size == sizer.total_size


def test_memory_round_trip():
    values = [(1, INT), (-2, INT), ("text", TEXT), (42, INT)]
    _, writer = _written(values)
    reader = ArchiverReader()
    assert reader.read_from_memory(writer.data) == writer.total_size
    got = [reader.read(codec) for _, codec in values]
    assert got == [value for value, _ in values]
    assert reader.used_size == reader.total_size


def test_write_returns_writer_for_chaining():
    writer = ArchiverWriter()
    writer.alloc_mem(8)
    writer.write(3, INT).write(4, INT)
    reader = ArchiverReader()
    reader.read_from_memory(writer.data)
    assert (reader.read(INT), reader.read(INT)) == (3, 4)


def test_int_wire_bytes_are_little_endian():
    writer = ArchiverWriter()
    writer.alloc_mem(4)
    writer.write(1, INT)
    assert writer.data == struct.pack("<i", 1)


def test_file_round_trip(tmp_path):
    path = tmp_path / "ckpt.bin"
    _, writer = _written([(7, INT), ("abc", TEXT)])
    writer.write_to_file(path)
    reader = ArchiverReader()
    assert reader.read_from_file(path) == writer.total_size
    assert reader.read(INT) == 7
    assert reader.read(TEXT) == "abc"


def test_empty_writer_does_not_create_file(tmp_path):
    path = tmp_path / "none.bin"
    ArchiverWriter().write_to_file(path)
    assert not path.exists()


def test_read_from_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ArchiverReader().read_from_file(tmp_path / "missing.bin")


def test_append_past_capacity_raises():
    writer = ArchiverWriter()
    writer.alloc_mem(2)
    with pytest.raises(ValueError):
        writer.write(5, INT)


def test_read_past_end_raises():
    reader = ArchiverReader()
    reader.read_from_memory(b"\x01\x02")
    with pytest.raises(EOFError):
        reader.read(INT)


def test_alloc_mem_discards_previous_content():
    writer = ArchiverWriter()
    writer.alloc_mem(4)
    writer.write(9, INT)
    writer.alloc_mem(4)
    assert writer.used_size == 0
    assert writer.data == bytes(4)


def test_reset_releases_everything():
    writer = ArchiverWriter()
    writer.alloc_mem(4)
    writer.write(9, INT)
    writer.reset()
    assert (writer.total_size, writer.used_size) == (0, 0)

    reader = ArchiverReader()
    reader.read_from_memory(b"abcd")
    reader.read_data(2)
    reader.reset()
    assert (reader.total_size, reader.used_size) == (0, 0)


def test_reader_alloc_mem_gives_zeroed_buffer():
    reader = ArchiverReader()
    reader.alloc_mem(4)
    assert reader.read(INT) == 0
    assert reader.remaining == 0


def test_sizer_clear_and_add_size():
    sizer = ArchiverSizer()
    sizer.add_size(10)
    sizer.add(1, INT)
    assert sizer.total_size == 10 + struct.calcsize("<i")
    sizer.clear()
    assert sizer.total_size == 0


def test_negative_sizes_rejected():
    with pytest.raises(ValueError):
        ArchiverWriter().alloc_mem(-1)
    with pytest.raises(ValueError):
        ArchiverReader().read_data(-1)