"""Business-day calendar loaded from a file of YYYYMMDD dates."""

from __future__ import annotations

import bisect
import os
import re
from itertools import takewhile
from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, "os.PathLike[str]"]

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _stoi(text: str) -> int:
    """Read the leading integer of ``text``; raise ValueError if there is none."""
    match = _LEADING_INT_RE.match(text)
    if match is None:
        raise ValueError(f"invalid business day: {text!r}")
    return int(match.group(1))


class BizDayConfig:
    """Sorted business days with lookups by date."""

    def __init__(self, path: Optional[PathLike] = None) -> None:
        self._days: list[int] = []
        self._index: dict[int, int] = {}
        if path is not None:
            self.load(path)

    @property
    def days(self) -> list[int]:
        """The business days in ascending order."""
        return list(self._days)

    def load(self, path: PathLike) -> None:
        """Read one date per line; a first line not starting with a digit is a header."""
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        first = lines[0] if lines else ""
        body = lines[1:]
        days: list[int] = []
        if first and not first[0].isdigit():
            print(f"skip calendar header {first}")
        else:
            days.append(_stoi(first.strip()))
        days.extend(_stoi(line.strip()) for line in body)
        if not days:
            raise ValueError(f"No biz dates loaded from file: {path}")
        days.sort()
        self._days = days
        self._index = {day: i for i, day in enumerate(days)}

    def _require(self) -> list[int]:
        if not self._days:
            raise RuntimeError("business day calendar is empty")
        return self._days

    def check_biz_day(self, date: int) -> bool:
        return date in self._index

    def biz_day_range(self, start_date: int, end_date: int) -> list[int]:
        """Business days from the first one at or after ``start_date`` up to ``end_date``.

        Empty when ``start_date`` lies outside the calendar.
        """
        start = self.lower_bound_index(start_date)
        if start is None:
            return []
        return list(takewhile(lambda day: day <= end_date, self._days[start:]))

    def lower_bound(self, date: int) -> Optional[int]:
        """First business day at or after ``date``; None outside the calendar."""
        index = self.lower_bound_index(date)
        return None if index is None else self._days[index]

    def lower_bound_index(self, date: int) -> Optional[int]:
        """Index of the first business day at or after ``date``; None outside the calendar."""
        days = self._require()
        if date < days[0] or date > days[-1]:
            return None
        return bisect.bisect_left(days, date)

    def next(self, date: int) -> int:
        """First business day strictly after ``date``."""
        days = self._require()
        index = bisect.bisect_right(days, date)
        if index >= len(days):
            raise ValueError(f"no business day after {date}")
        return days[index]

    def prev(self, date: int) -> int:
        """Last business day strictly before ``date``."""
        days = self._require()
        index = bisect.bisect_left(days, date)
        if index == 0:
            raise ValueError(f"no business day before {date}")
        return days[index - 1]

    def offset(self, date: int, offset: int) -> int:
        """Business day ``offset`` steps from ``date``, clamped to the calendar."""
        days = self._require()
        index = bisect.bisect_left(days, date) + offset
        if index <= 0:
            return days[0]
        if index >= len(days):
            return days[-1]
        return days[index]

    def first_day(self) -> int:
        return self._require()[0]

    def last_day(self) -> int:
        return self._require()[-1]