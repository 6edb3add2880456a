"""Read an INI file into name/value pairs grouped by section."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Union

_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})

_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)

_INT_RE = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_REAL_RE = re.compile(
    r"\s*([+-]?)(?:"
    r"(?P<hex>0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?\d+)?)"
    r"|(?P<special>inf(?:inity)?|nan)"
    r"|(?P<dec>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
    r")",
    re.IGNORECASE,
)


def _parse_integer(text: str) -> Optional[int]:
    """Parse a leading integer as ``strtol`` with base 0 does; None if nothing parses."""
    match = _INT_RE.match(text)
    if match is None:
        return None
    sign, digits = match.groups()
    if digits[:2].lower() == "0x":
        number = int(digits, 16)
    elif digits.startswith("0"):
        number = int(digits, 8)
    else:
        number = int(digits, 10)
    if sign == "-":
        number = -number
    return max(_LONG_MIN, min(_LONG_MAX, number))


def _parse_real(text: str) -> Optional[float]:
    """Parse a leading floating point number as ``strtod`` does; None if nothing parses."""
    match = _REAL_RE.match(text)
    if match is None:
        return None
    if match.group("hex"):
        number = float.fromhex(match.group("hex"))
    elif match.group("special"):
        number = float(match.group("special"))
    else:
        number = float(match.group("dec"))
    return -number if match.group(1) == "-" else number


def _parse_boolean(text: str) -> Optional[bool]:
    lowered = text.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    return None


def _strip_inline_comment(text: str) -> str:
    """Drop a ';' comment that follows whitespace."""
    for index, char in enumerate(text):
        if char == ";" and index > 0 and text[index - 1].isspace():
            return text[:index]
    return text


class IniReader:
    """Values of an INI file, looked up by section and name.

    Repeated names and indented continuation lines are joined with newlines.
    ``parse_error`` holds the number of the first malformed line, or 0.
    """

    def __init__(self, filename: Union[str, "os.PathLike[str]"]) -> None:
        self._values: dict[tuple[str, str], str] = {}
        self._sections: list[str] = []
        self.parse_error = 0
        text = Path(filename).read_text(encoding="utf-8")
        self._parse(text.splitlines())

    @property
    def sections(self) -> list[str]:
        """Section name recorded for every value read, in file order."""
        return list(self._sections)

    def _record_error(self, lineno: int) -> None:
        if not self.parse_error:
            self.parse_error = lineno

    def _store(self, section: str, name: str, value: str) -> None:
        key = (section, name)
        existing = self._values.get(key, "")
        if existing:
            existing += "\n"
        self._values[key] = existing + value
        self._sections.append(section)

    def _parse(self, lines) -> None:
        section = ""
        prev_name: Optional[str] = None
        for lineno, raw in enumerate(lines, 1):
            if lineno == 1:
                raw = raw.lstrip("\ufeff")
            stripped = raw.strip()
            if not stripped or stripped[0] in ";#":
                continue
            if prev_name is not None and raw[:1].isspace():
                self._store(section, prev_name, _strip_inline_comment(stripped).rstrip())
                continue
            if stripped.startswith("["):
                body = _strip_inline_comment(stripped[1:])
                end = body.find("]")
                if end < 0:
                    self._record_error(lineno)
                    continue
                section = body[:end]
                prev_name = None
                continue
            content = _strip_inline_comment(stripped)
            positions = [pos for pos in (content.find("="), content.find(":")) if pos >= 0]
            if not positions:
                self._record_error(lineno)
                continue
            sep = min(positions)
            name = content[:sep].rstrip()
            value = content[sep + 1:].strip()
            self._store(section, name, value)
            prev_name = name

    def get(self, section: str, name: str, default: str = "") -> str:
        """Return the string value, or ``default`` if it is absent."""
        return self._values.get((section, name), default)

    def get_or_throw(self, section: str, name: str) -> str:
        """Return the string value; raise KeyError if it is absent."""
        try:
            return self._values[(section, name)]
        except KeyError:
            raise KeyError(f"cannot find key {section}={name}") from None

    def get_integer(self, section: str, name: str, default: int = 0) -> int:
        """Return a decimal, octal or hex integer, or ``default`` if none can be read."""
        number = _parse_integer(self.get(section, name, ""))
        return default if number is None else number

    def get_real(self, section: str, name: str, default: float = 0.0) -> float:
        """Return a floating point value, or ``default`` if none can be read."""
        number = _parse_real(self.get(section, name, ""))
        return default if number is None else number

    def get_boolean(self, section: str, name: str, default: bool = False) -> bool:
        """Return true/yes/on/1 or false/no/off/0 (any case), else ``default``."""
        flag = _parse_boolean(self.get(section, name, ""))
        return default if flag is None else flag

    def get_integer_or_throw(self, section: str, name: str) -> int:
        number = _parse_integer(self.get_or_throw(section, name))
        if number is None:
            raise ValueError(f"cannot read value {name}")
        return number

    def get_real_or_throw(self, section: str, name: str) -> float:
        number = _parse_real(self.get_or_throw(section, name))
        if number is None:
            raise ValueError(f"cannot read value {name}")
        return number

    def get_boolean_or_throw(self, section: str, name: str) -> bool:
        flag = _parse_boolean(self.get_or_throw(section, name))
        if flag is None:
            raise ValueError(f"cannot read value {name}")
        return flag

    def check_section_exist(self, section: str) -> bool:
        """Whether any value was read in ``section``."""
        return section in self._sections