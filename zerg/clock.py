"""Wall clock that can also follow a trading-day calendar.

A clock holds a point in time (epoch seconds plus nanoseconds) and the
calendar fields derived from it in local time. Given a list of trading days
(``YYYYMMDD`` integers, ascending) it also tracks the current, previous and
next trading day. A strict trading clock reports its fields in trading time.
In trading time the night session after 18:00 belongs to the next trading
day, hours before 06:00 are shown as 24 to 29, and the hour is -1 on a day
that does not trade.
"""

from __future__ import annotations

import datetime as _dt
import functools
import os
import re
import time
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

PathLike = Union[str, "os.PathLike[str]"]

_NS_PER_SECOND = 1_000_000_000
_NS_PER_MS = 1_000_000
_SECONDS_PER_DAY = 24 * 60 * 60
_NIGHT_END_HOUR = 6
_EVENING_START_HOUR = 18

_DIRECTIVE_RE = re.compile(r"%[EO]?(.)")
_YEAR_DIRECTIVES = frozenset("YyCGgDFcx")
_MONTH_DIRECTIVES = frozenset("mbBhDFcxj")
_DAY_DIRECTIVES = frozenset("dejDFcx")
_HOUR_DIRECTIVES = frozenset("HIklpTRcXr")
_MINUTE_DIRECTIVES = frozenset("MTRcXr")
_SECOND_DIRECTIVES = frozenset("STcXr")

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")

_Fields = Tuple[int, int, int, int, int, int]


def _stoi(text: str) -> int:
    """Read the leading integer of ``text``; raise ValueError if there is none."""
    match = _LEADING_INT_RE.match(text)
    if match is None:
        raise ValueError(f"invalid integer: {text!r}")
    return int(match.group(1))


def _parse_local(string_time: str, fmt: str) -> int:
    """Parse ``string_time`` as local time; fields the format omits come from the epoch."""
    try:
        parsed = time.strptime(string_time, fmt)
    except ValueError as exc:
        raise ValueError(
            f"Clock cannot properly parse time string: {string_time} with format: {fmt}"
        ) from exc
    base = time.localtime(0)
    used = set(_DIRECTIVE_RE.findall(fmt))

    def pick(directives: frozenset, attr: str) -> int:
        return getattr(parsed if used & directives else base, attr)

    fields = (
        pick(_YEAR_DIRECTIVES, "tm_year"),
        pick(_MONTH_DIRECTIVES, "tm_mon"),
        pick(_DAY_DIRECTIVES, "tm_mday"),
        pick(_HOUR_DIRECTIVES, "tm_hour"),
        pick(_MINUTE_DIRECTIVES, "tm_min"),
        pick(_SECOND_DIRECTIVES, "tm_sec"),
        0,
        0,
        -1,
    )
    return int(time.mktime(fields))


def _date_epoch(date: int) -> int:
    """Local epoch seconds of ``date`` at the wall time of the epoch itself."""
    parsed = time.strptime(str(date), "%Y%m%d")
    base = time.localtime(0)
    return int(
        time.mktime(
            (parsed.tm_year, parsed.tm_mon, parsed.tm_mday,
             base.tm_hour, base.tm_min, base.tm_sec, 0, 0, -1)
        )
    )


def _date_int(tm: time.struct_time) -> int:
    return tm.tm_year * 10000 + tm.tm_mon * 100 + tm.tm_mday


def _all_days_in_year(year: int) -> list[int]:
    first = _dt.date(year, 1, 1).toordinal()
    last = _dt.date(year, 12, 31).toordinal()
    return [int(_dt.date.fromordinal(n).strftime("%Y%m%d")) for n in range(first, last + 1)]


def _gen_trading_days(year: int) -> list[int]:
    """Every calendar day of the year before, the year itself and the year after."""
    return [day for y in (year - 1, year, year + 1) for day in _all_days_in_year(y)]


@functools.total_ordering
class Clock:
    """A point in time with its local calendar fields and trading-day state."""

    def __init__(self, is_strict_trading_day: bool = False,
                 trading_days: Optional[Iterable[int]] = None) -> None:
        self._init_state(is_strict_trading_day)
        self._now()
        self._set_time_info()
        if trading_days is not None:
            self.set_trading_day_info(trading_days)
        elif not is_strict_trading_day:
            self.set_trading_day_info(_gen_trading_days(self._timeinfo.tm_year))
        self._set_from_core()

    def _init_state(self, strict: bool) -> None:
        self.is_strict_trading_day = strict
        self.year = self.month = self.day = 0
        self.hour = self.minute = self.second = 0
        self.nano_second = 0
        self.adjust_last_hour = 0
        self.trading_days: list[int] = []
        self.trading_day_index = 0
        self.trading_day = 0
        self.next_trading_day = 0
        self.prev_trading_day = 0
        self.is_prev_trading_day = False
        self._is_trading_day = False
        self._sec = 0
        self._nsec = 0
        self._timeinfo = time.localtime(0)

    @classmethod
    def _blank(cls, strict: bool) -> "Clock":
        clock = cls.__new__(cls)
        clock._init_state(strict)
        return clock

    @classmethod
    def from_string(cls, string_time: str, fmt: str,
                    trading_days: Union[None, PathLike, Iterable[int]] = None) -> "Clock":
        """Build a clock from a formatted time string.

        With a list of trading days the clock is a strict trading clock. With a
        path the trading days are read from that file. With neither the clock
        only represents the date or time.
        """
        if isinstance(trading_days, (str, os.PathLike)):
            clock = cls._blank(False)
            clock._sec = _parse_local(string_time, fmt)
            clock._set_time_info()
            clock.adjust_last_hour = clock._timeinfo.tm_hour
            clock.set_trading_day_file(trading_days)
            clock._set_from_core()
            return clock
        if trading_days is None:
            clock = cls._blank(False)
            clock._sec = _parse_local(string_time, fmt)
            clock._set_from_core()
            clock.adjust_last_hour = clock._timeinfo.tm_hour
            return clock
        clock = cls._blank(True)
        clock._sec = _parse_local(string_time, fmt)
        clock._set_time_info()
        clock.adjust_last_hour = clock._timeinfo.tm_hour
        clock.set_trading_day_info(trading_days)
        clock._set_from_core()
        return clock

    @classmethod
    def from_trading_file(cls, filename: PathLike) -> "Clock":
        """A clock at the current time whose trading days come from ``filename``."""
        clock = cls._blank(False)
        clock._now()
        clock._set_time_info()
        clock.set_trading_day_file(filename)
        clock._set_from_core()
        return clock

    def _now(self) -> None:
        self._sec, self._nsec = divmod(time.time_ns(), _NS_PER_SECOND)

    def _set_time_info(self) -> None:
        self._timeinfo = time.localtime(self._sec)

    def set_trading_day_info(self, days: Iterable[int]) -> None:
        """Use ``days`` as the trading calendar; it must cover the clock's date."""
        days = list(days)
        if not days:
            raise ValueError("Clock does not accept empty trading day list")
        self.trading_days = days
        today = self.date_to_int_real()
        yesterday = self.prev_date_to_int_real()
        if days[0] > today or days[-1] < today:
            raise ValueError("TradingList not includes today")
        for index, day in enumerate(days):
            if day >= today:
                self.trading_day_index = index
                self.trading_day = day
                if index < len(days) - 1:
                    self.next_trading_day = days[index + 1]
                if index > 0:
                    self.prev_trading_day = days[index - 1]
                self._is_trading_day = day == today
                self.is_prev_trading_day = index > 0 and days[index - 1] == yesterday
                return

    def set_trading_day_file(self, filename: PathLike) -> None:
        """Read trading days from a file: the first line is skipped, then one date per line."""
        lines = Path(filename).read_text(encoding="utf-8").splitlines()
        days = [_stoi(line) for line in lines[1:] if line and "0" <= line[0] <= "9"]
        self.set_trading_day_info(days)

    def set(self, epoch_time: float) -> "Clock":
        """Move the clock to ``epoch_time`` seconds."""
        self._sec = int(epoch_time)
        self._nsec = 0
        self._set_from_core()
        return self

    def reset(self) -> "Clock":
        """Move the clock to the epoch."""
        return self.set(0)

    def update(self, string_time: Optional[str] = None, fmt: Optional[str] = None) -> "Clock":
        """Move the clock to a formatted time, or to now when no string is given."""
        if string_time is None:
            self._now()
        else:
            if fmt is None:
                raise ValueError("a format is needed to parse a time string")
            self._sec = _parse_local(string_time, fmt)
            self._nsec = 0
        self._set_from_core()
        return self

    def update_time(self) -> "Clock":
        """Move to now, refreshing only the time-of-day fields."""
        self._now()
        self._set_time_info()
        if self.is_strict_trading_day:
            fields = self._normalize_trading()
        else:
            fields = tuple(self._timeinfo[:6])
        self.hour, self.minute, self.second = fields[3:6]
        self.nano_second = self._nsec
        return self

    def is_trading_day(self) -> bool:
        if not self.trading_days:
            raise RuntimeError("TradingDayList is empty, cannot decide if trading day.")
        return self._is_trading_day

    def _set_from_core(self) -> None:
        self._set_time_info()
        self._adjust_trading_day()
        if self.is_strict_trading_day:
            fields = self._normalize_trading()
        else:
            fields = tuple(self._timeinfo[:6])
        self.year, self.month, self.day, self.hour, self.minute, self.second = fields
        self.nano_second = self._nsec

    def _adjust_trading_day(self) -> None:
        if not self.trading_days:
            if self.is_strict_trading_day:
                raise RuntimeError("TradingDay Clock cannot have empty trading day list")
            return
        today = self.date_to_int_real()
        yesterday = self.prev_date_to_int_real()
        if self.trading_days[0] > today or self.trading_days[-1] < today:
            if self.is_strict_trading_day:
                raise ValueError("TradingList not includes today")
            self.set_trading_day_info(_gen_trading_days(self._timeinfo.tm_year))

        days = self.trading_days
        last = len(days) - 1
        index = min(self.trading_day_index, last)
        while index > 0 and days[index] > today:
            index -= 1
        while index < last and days[index] < today:
            index += 1
        self.trading_day_index = index
        self.trading_day = days[index]
        self.next_trading_day = days[min(index + 1, last)]
        self.prev_trading_day = days[max(index - 1, 0)]
        self._is_trading_day = days[index] == today
        self.is_prev_trading_day = index > 0 and days[index - 1] == yesterday

    def _normalize_trading(self) -> _Fields:
        """Calendar fields in trading time; may move to the next trading day at night."""
        real_epoch = _date_epoch(self.date_to_int_real())
        shifted = time.localtime(self._sec + _date_epoch(self.trading_day) - real_epoch)
        year, month, day, hour, minute, second = shifted[:6]

        if not self._is_trading_day:
            if not (self.is_prev_trading_day and hour < _NIGHT_END_HOUR):
                hour = -1
            return (year, month, day, hour, minute, second)

        if hour < _NIGHT_END_HOUR:
            hour += 24
        elif _EVENING_START_HOUR <= hour < 24:
            days = self.trading_days
            last = len(days) - 1
            index = self.trading_day_index
            self.prev_trading_day = days[min(index, last)]
            self.trading_day = days[min(index + 1, last)]
            self.next_trading_day = days[min(index + 2, last)]
            shifted = time.localtime(self._sec + _date_epoch(self.trading_day) - real_epoch)
            year, month, day, hour, minute, second = shifted[:6]
        return (year, month, day, hour, minute, second)

    def date_to_int_real(self) -> int:
        """Local calendar date of the clock as YYYYMMDD."""
        return _date_int(self._timeinfo)

    def prev_date_to_int_real(self) -> int:
        """Local calendar date of one day before the present moment as YYYYMMDD."""
        return _date_int(time.localtime(time.time() - _SECONDS_PER_DAY))

    def date_to_int(self) -> int:
        return self.year * 10000 + self.month * 100 + self.day

    def time_to_int(self) -> int:
        """Time as HHMMSSmmm."""
        return (self.hour * 10_000_000 + self.minute * 100_000 + self.second * 1000
                + self.nano_second // _NS_PER_MS)

    def time_to_int_normalize(self) -> int:
        """Time as HHMMSSmmm with milliseconds rounded down to 0 or 500."""
        value = self.hour * 10_000_000 + self.minute * 100_000 + self.second * 1000
        if self.nano_second / _NS_PER_MS >= 500:
            value += 500
        return value

    def trading_time_to_int(self) -> int:
        """Time as HHMMSSmmm, negated outside a trading session."""
        if self.date_to_int_real() == self.trading_day:
            return self.time_to_int()
        if self.prev_date_to_int_real() == self.prev_trading_day and self.hour < _NIGHT_END_HOUR:
            return self.time_to_int()
        return -self.time_to_int()

    def year_to_str(self) -> str:
        return f"{self.year:04d}"

    def month_to_str(self) -> str:
        return f"{self.month:02d}"

    def day_to_str(self) -> str:
        return f"{self.day:02d}"

    def hour_to_str(self) -> str:
        return f"{self.hour:02d}"

    def minute_to_str(self) -> str:
        return f"{self.minute:02d}"

    def second_to_str(self) -> str:
        return f"{self.second:02d}"

    def millisecond_to_str(self) -> str:
        return f"{round(self._nsec // 1000 // 1000):03d}"

    def _key(self) -> Tuple[int, int]:
        return (self._sec, self._nsec)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Clock):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Clock") -> bool:
        if not isinstance(other, Clock):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Clock({self.date_to_int()} {self.time_to_int()})"


def human_readable_time(literal: str) -> Clock:
    """Parse times such as ``12:30``, ``1:39:30``, ``1:39:29.300`` or ``1:39:19 pm``."""
    hour = "0"
    minute = "00"
    second = "00"
    millis = "000"
    is_pm = False

    text = literal.lower()
    for marker, pm in (("am", False), ("a.m", False), ("pm", True), ("p.m", True)):
        found = text.find(marker)
        if found >= 0:
            text = text[:found]
            is_pm = pm
            break

    colon = text.find(":")
    if colon < 0:
        raise ValueError(f"HumanReadableTime cannot recognize your time string: {literal}")

    hour = text[:colon]
    if _stoi(hour) > 12 and is_pm:
        raise ValueError(f"HumanReadableTime finds your time string: {literal} to be illegal")
    if is_pm:
        hour = str(_stoi(hour) + 12)

    second_colon = text.find(":", colon + 1)
    if second_colon >= 0:
        minute = text[colon + 1:second_colon]
        dot = text.find(".", second_colon + 1)
        if dot >= 0:
            second = text[second_colon + 1:dot]
            millis = text[dot + 1:]
        else:
            second = text[second_colon + 1:]
    else:
        minute = text[colon + 1:]

    if _stoi(minute) >= 60:
        raise ValueError("HumanReadableTime illegal time: minute larger than 60")
    if _stoi(second) >= 60:
        raise ValueError("HumanReadableTime illegal time: second larger than 60")
    if _stoi(millis) >= 1000:
        raise ValueError("HumanReadableTime illegal time: millisecond larger than 1000")

    literal_time = f"{hour.strip()}:{minute.strip()}:{second.strip()}"
    clock = Clock.from_string(literal_time, "%H:%M:%S")
    clock.nano_second = _stoi(millis) * _NS_PER_MS
    clock._nsec = clock.nano_second
    return clock