"""JSON-RPC request identifiers, which are either strings or unsigned integers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

_MAX_UINT64 = (1 << 64) - 1


@dataclass(frozen=True)
class ID:
    """A request ID; ``is_string`` selects which of ``num`` and ``string`` is used."""

    num: int = 0
    string: str = ""
    is_string: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.num, bool) or not isinstance(self.num, int):
            raise TypeError("numeric ID must be an int")
        if not 0 <= self.num <= _MAX_UINT64:
            raise ValueError(f"numeric ID {self.num} is outside the uint64 range")
        if not isinstance(self.string, str):
            raise TypeError("string ID must be a str")

    def __str__(self) -> str:
        if self.is_string:
            return json.dumps(self.string, ensure_ascii=False)
        return str(self.num)

    def to_json(self) -> str | int:
        """Return the value used for the ID in a JSON document."""
        return self.string if self.is_string else self.num


def string_id(s: str) -> ID:
    return ID(string=s, is_string=True)


def int_id(i: int) -> ID:
    return ID(num=i)


def parse_id(value: Any) -> ID:
    """Build an ID from a decoded JSON value; null yields the zero numeric ID."""
    if value is None:
        return ID()
    if isinstance(value, bool):
        raise ValueError("request ID must be a string or unsigned integer")
    if isinstance(value, int):
        if 0 <= value <= _MAX_UINT64:
            return ID(num=value)
        raise ValueError(f"request ID {value} is outside the uint64 range")
    if isinstance(value, str):
        return ID(string=value, is_string=True)
    raise ValueError("request ID must be a string or unsigned integer")