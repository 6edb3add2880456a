"""Column-wise reading of delimited text files with a header line."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Container, Optional, Union

from zerg.paths import file_expand_user

PathLike = Union[str, "os.PathLike[str]"]

DOUBLE_COLUMN = 1
INT_COLUMN = 3

_INT_KEY_COLUMNS = frozenset({"DataDate", "ukey", "ticktime"})

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))",
    re.IGNORECASE,
)


def _stod(text: str) -> float:
    match = _FLOAT_RE.match(text)
    if match is None:
        raise ValueError(f"invalid number: {text!r}")
    token = match.group(1)
    number = float(token)
    if math.isinf(number) and "inf" not in token.lower():
        raise ValueError(f"number out of range: {text!r}")
    return number


def _stoi(text: str) -> int:
    match = _INT_RE.match(text)
    if match is None:
        raise ValueError(f"invalid integer: {text!r}")
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return number


@dataclass
class CsvReader:
    """Splits a delimited file into columns of strings."""

    delimiter: str = ","
    has_header: bool = True
    nrow: int = 0
    head_line: str = ""
    field_idx: list[int] = field(default_factory=list)
    field_names: list[str] = field(default_factory=list)
    header_columns: list[str] = field(default_factory=list)
    contents: list[str] = field(default_factory=list)
    columns: list[list[str]] = field(default_factory=list)

    @staticmethod
    def split(text: str, delimiter: str) -> list[str]:
        return text.split(delimiter)

    def read_file(self, path: PathLike) -> None:
        """Append the non-empty lines of ``path`` to ``contents``."""
        with open(path, encoding="utf-8") as handle:
            self.contents.extend(line.rstrip("\n") for line in handle if line.rstrip("\n"))

    def parse_header(self) -> None:
        """Take the first line as the header and pick the columns to load."""
        if not self.has_header:
            raise ValueError("expect header!")
        if not self.contents:
            raise ValueError("no header line")
        self.head_line = self.contents.pop(0)
        self.header_columns = self.split(self.head_line, self.delimiter)
        if self.field_names:
            indices = []
            for name in self.field_names:
                try:
                    indices.append(self.header_columns.index(name))
                except ValueError:
                    raise KeyError(f"column {name} not found!") from None
            self.field_idx = indices
        else:
            self.field_idx = list(range(len(self.header_columns)))

    def parse(self) -> None:
        """Parse the header, then split every row into the selected columns."""
        self.parse_header()
        self.nrow = len(self.contents)
        rows = [self.split(line, self.delimiter) for line in self.contents]
        for number, cells in enumerate(rows, 2):
            if self.field_idx and len(cells) <= max(self.field_idx):
                raise ValueError(f"row {number} has {len(cells)} fields, too few")
        self.columns = [[cells[idx] for cells in rows] for idx in self.field_idx]

    @staticmethod
    def is_double_vec(values: list[str]) -> bool:
        """False if any non-empty value starts with a letter."""
        return not any(v and v[0].isascii() and v[0].isalpha() for v in values)

    @staticmethod
    def to_double_vec(values: list[str]) -> list[float]:
        """Empty strings become NaN."""
        return [math.nan if not v else _stod(v) for v in values]

    @staticmethod
    def to_int_vec(values: list[str]) -> list[int]:
        return [_stoi(v) for v in values]

    def num_columns(self) -> int:
        return len(self.field_idx)

    def num_rows(self) -> int:
        return self.nrow

    def name(self, i: int) -> str:
        return self.header_columns[self.field_idx[i]]

    def col_data(self, i: int) -> list[str]:
        return self.columns[i]

    @staticmethod
    def read(path: PathLike, data: Any, x_pattern: str = "",
             x_names: Optional[Container[str]] = None) -> None:
        """Load a CSV file's columns into ``data``.

        ``ukey``, ``ticktime`` and ``DataDate`` become integer columns, other
        numeric columns become double columns and text columns are skipped.
        When ``x_pattern`` or ``x_names`` is given, only columns matching the
        pattern or named in ``x_names`` are loaded. ``data`` receives them
        through ``add_column(type, values, name)`` and its ``rows`` attribute.
        """
        names = x_names if x_names is not None else {}
        reader = CsvReader()
        reader.read_file(file_expand_user(os.fspath(path)))
        reader.parse()
        data.rows = reader.num_rows()
        regex = re.compile(x_pattern)
        all_empty = not x_pattern and not names

        for i in range(reader.num_columns()):
            name = reader.name(i)
            found_name = name in names
            found_pattern = bool(x_pattern) and regex.search(name) is not None
            if not (found_name or found_pattern or all_empty):
                continue
            column = reader.col_data(i)
            if name in _INT_KEY_COLUMNS:
                data.add_column(INT_COLUMN, reader.to_int_vec(column), name)
            elif reader.is_double_vec(column):
                data.add_column(DOUBLE_COLUMN, reader.to_double_vec(column), name)