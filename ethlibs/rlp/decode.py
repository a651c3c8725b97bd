"""Decoding of 0x-prefixed hex RLP text into values."""

from __future__ import annotations

import re

from .value import Value

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")
_MAX_LIST_SIZE = (1 << 62) - 1
_MAX_INT64 = (1 << 63) - 1


def from_hex(text: str) -> Value:
    """Parse 0x-prefixed hex RLP text into a ``Value``."""
    if not text.startswith("0x"):
        raise ValueError("invalid hex input")
    body = text[2:]
    if body == "":
        return Value(string="0x")
    if not _HEX_DIGITS.fullmatch(body):
        raise ValueError("invalid rune in input")
    value, remainder = _parse(body)
    if remainder:
        raise ValueError("extra data at end")
    return value


def _parse(text: str) -> tuple[Value, str]:
    """Parse one item from ``text`` and return it with the unparsed rest."""
    if len(text) < 2:
        raise ValueError("insufficient remaining input for prefix")
    prefix = int(text[:2], 16)
    rest = text[2:]

    if prefix <= 0x7F:
        return Value(string="0x" + text[:2]), rest

    if prefix <= 0xB7:
        size = (prefix - 0x80) * 2
        if size > len(rest):
            raise ValueError("insufficient remaining input for short string")
        return Value(string="0x" + rest[:size]), rest[size:]

    if prefix <= 0xBF:
        size_size = (prefix - 0xB7) * 2
        if size_size > len(rest):
            raise ValueError("insufficient remaining input for size of long string")
        size = int(rest[:size_size], 16) * 2
        rest = rest[size_size:]
        if size > len(rest):
            raise ValueError("insufficient remaining input for long string")
        return Value(string="0x" + rest[:size]), rest[size:]

    if prefix <= 0xF7:
        size = (prefix - 0xC0) * 2
        if size > len(rest):
            raise ValueError("insufficient remaining input for short list")
        return Value(items=_parse_items(rest[:size])), rest[size:]

    size_size = (prefix - 0xF7) * 2
    if size_size > len(rest):
        raise ValueError("insufficient remaining input for size of long list")
    size = int(rest[:size_size], 16)
    if size > _MAX_INT64:
        raise ValueError("could not decode long list size: value out of range")
    if size > _MAX_LIST_SIZE:
        raise ValueError("invalid list size")
    size *= 2
    rest = rest[size_size:]
    if size > len(rest):
        raise ValueError("insufficient remaining input for short list")
    return Value(items=_parse_items(rest[:size])), rest[size:]


def _parse_items(text: str) -> list[Value]:
    items = []
    while text:
        value, text = _parse(text)
        items.append(value)
    return items