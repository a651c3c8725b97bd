"""Positional JSON-RPC parameters, each kept as its JSON text."""

from __future__ import annotations

import dataclasses
import json
from typing import Any


def _to_jsonable(obj: Any) -> Any:
    to_json = getattr(obj, "to_json", None)
    if callable(to_json):
        return to_json()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _encode(value: Any) -> str:
    return json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, default=_to_jsonable
    )


class Params(list):
    """An array of parameters; every element is the compact JSON text of one value."""

    def decode(self, count: int | None = None) -> list[Any]:
        """Decode the first ``count`` parameters, or all of them."""
        if count is None:
            count = len(self)
        if len(self) < count:
            raise ValueError("not enough params to decode")
        return [json.loads(raw) for raw in self[:count]]

    def decode_single(self, pos: int) -> Any:
        """Decode only the parameter at position ``pos``."""
        if pos < 0 or pos > len(self) - 1:
            raise ValueError("not enough parameters to decode position")
        return json.loads(self[pos])


def make_params(*args: Any) -> Params | None:
    """Encode each argument as a parameter; with no arguments there are no params."""
    if not args:
        return None
    return Params(_encode(arg) for arg in args)


def must_params(*args: Any) -> Params | None:
    """Encode well-known parameter values; raises if one cannot be encoded."""
    return make_params(*args)