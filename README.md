# zerg

A small library for research and trading code. It has no third-party
dependencies.

- `zerg.archiver`: fixed-size byte buffers. `ArchiverSizer` measures values,
  `ArchiverWriter` writes them into a buffer and `ArchiverReader` reads them back.
- `zerg.codecs`: the codecs those buffers use (`Scalar`, `StringCodec`,
  `Sequence`, `FixedArray`, `Mapping`, `SetCodec`, `StackCodec`, `ObjectCodec`,
  and ready-made scalars such as `INT`, `DOUBLE`, `SIZE_T`, `STRING`). It also has
  the `Checkpointable` mixin and the `save_checkpoint` / `load_checkpoint` file helpers.
- `zerg.ini_reader`: `IniReader`, with typed getters (`get_integer`, `get_real`,
  `get_boolean`) and strict `*_or_throw` variants.
- `zerg.clock`: `Clock`, a wall clock that can follow a trading-day calendar and
  night sessions. Also `human_readable_time`.
- `zerg.bizday`: `BizDayConfig`, a business-day calendar read from a file of
  `YYYYMMDD` dates.
- `zerg.csv_helper`: `CsvReader`, which splits a delimited file with a header line into columns.
- `zerg.paths`: `path_join` and `file_expand_user`.
- `zerg.bit`: `hex_bytes` and `bit_swap` for values packed with a `struct` format.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Checkpoints

A class lists the attributes it saves, in order, together with their codecs:

```python
from zerg.codecs import (
    DOUBLE, INT, STRING, Checkpointable, Mapping, Sequence,
    load_checkpoint, save_checkpoint,
)

class Position(Checkpointable):
    checkpoint_fields = (
        ("ukey", INT),
        ("fills", Sequence(DOUBLE)),
        ("tags", Mapping(STRING, STRING)),
    )

    def __init__(self):
        self.ukey = 0
        self.fills = []
        self.tags = {}

p = Position()
p.ukey, p.fills, p.tags = 42, [1.5, 2.5], {"side": "buy"}
written = save_checkpoint(p, "state.bin")   # bytes written, 0 if there was nothing to save

q = Position()
load_checkpoint(q, "state.bin")             # bytes read; ValueError for an empty file
```

A subclass saves its parent's fields first when it extends them:
`checkpoint_fields = Position.checkpoint_fields + (("qty", INT),)`.

You can also use the buffers directly:

```python
from zerg.archiver import ArchiverReader, ArchiverSizer, ArchiverWriter
from zerg.codecs import INT, Sequence

codec = Sequence(INT)
sizer = ArchiverSizer().add([1, 2, 3], codec)
writer = ArchiverWriter()
writer.alloc_mem(sizer.total_size)
writer.write([1, 2, 3], codec)

reader = ArchiverReader()
reader.read_from_memory(writer.data)
assert reader.read(codec) == [1, 2, 3]
```

The layout matches a raw memory copy. Scalars are packed in native byte order
with standard sizes, and every variable-length container starts with an
8-byte count.

## INI files

```python
from zerg.ini_reader import IniReader

ini = IniReader("config.ini")
ini.parse_error                       # 0, or the number of the first malformed line
ini.get_integer("server", "port", 8080)    # decimal, octal or 0x hex
ini.get_boolean("server", "debug", False)  # true/yes/on/1, false/no/off/0
ini.get_or_throw("server", "host")    # KeyError if missing
```

If a name appears more than once, or a value has indented continuation lines,
the values are joined with newlines.

## Clocks

```python
from zerg.clock import Clock, human_readable_time

c = Clock.from_string("20240105 10:30:00", "%Y%m%d %H:%M:%S")
c.date_to_int(), c.time_to_int()      # (20240105, 103000000)

days = [20240104, 20240105, 20240108]
t = Clock.from_string("20240105 21:00:00", "%Y%m%d %H:%M:%S", days)
t.date_to_int()                       # 20240108: the night session belongs to the next trading day

human_readable_time("1:39:29.300 pm").time_to_int()   # 133929300
```

Clocks compare by their point in time. `Clock.from_trading_file` reads trading
days from a file. The first line of that file is skipped, and after it comes
one date per line.

## Business days

```python
from zerg.bizday import BizDayConfig

cal = BizDayConfig("calendar.txt")    # one YYYYMMDD per line, optional header
cal.next(20240105)
cal.prev(20240105)
cal.offset(20240105, -3)              # clamped to the calendar's ends
cal.biz_day_range(20240101, 20240131)
cal.lower_bound(20240106)             # None outside the calendar
```

## CSV columns

`CsvReader.read(path, data, x_pattern="", x_names=None)` loads a file's columns
into any object that has a `rows` attribute and an `add_column(type, values, name)`
method. `ukey`, `ticktime` and `DataDate` are loaded as integer columns
(`INT_COLUMN`). Other numeric columns are loaded as doubles (`DOUBLE_COLUMN`),
with empty cells read as NaN. Text columns are skipped. If a pattern or a set of
names is given, only the matching columns are loaded.

## What this package does not do

- It does not read or write Feather/Arrow files.
- It has no gzip record buffers and no socket or timer helpers.
- It has no column container or per-day index for loaded data. `CsvReader.read`
  fills an object that you supply.
- It provides no command-line programs.