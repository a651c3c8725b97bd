"""JSON-RPC notifications: messages with a method but no ID."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass
class Notification:
    """A notification whose params are kept as JSON text."""

    jsonrpc: str = ""
    method: str = ""
    params: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "method": self.method,
            "params": json.loads(self.params) if self.params is not None else None,
        }

    def dumps(self) -> str:
        params = self.params if self.params is not None else "null"
        return f'{{"jsonrpc":"2.0","method":{_dump(self.method)},"params":{params}}}'

    def decode_params(self) -> Any:
        """Decode the params JSON text."""
        if self.params is None:
            raise ValueError("notification has no params")
        return json.loads(self.params)


def _string_field(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f'field "{key}" must be a string')
    return value


def parse_notification(data: str | bytes) -> Notification:
    """Decode a notification from JSON text."""
    obj = json.loads(data)
    if not isinstance(obj, dict):
        raise ValueError(f"cannot decode a JSON {type(obj).__name__} as a notification")
    params = _dump(obj["params"]) if "params" in obj else None
    return Notification(
        jsonrpc=_string_field(obj, "jsonrpc"),
        method=_string_field(obj, "method"),
        params=params,
    )