"""JSON-RPC responses, either built locally or received as raw JSON."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any

from .id import ID, parse_id


def _json_default(obj: Any) -> Any:
    to_json = getattr(obj, "to_json", None)
    if callable(to_json):
        return to_json()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _dump(value: Any) -> str:
    return json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, default=_json_default
    )


def _load_object(data: str | bytes, what: str) -> dict[str, Any]:
    obj = json.loads(data)
    if not isinstance(obj, dict):
        raise ValueError(f"cannot decode a JSON {type(obj).__name__} as a {what}")
    return obj


def _jsonrpc_field(obj: dict[str, Any]) -> str:
    value = obj.get("jsonrpc")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError('field "jsonrpc" must be a string')
    return value


@dataclass
class Response:
    """A response crafted locally; result and error are plain Python values."""

    jsonrpc: str = ""
    id: ID = field(default_factory=ID)
    result: Any = None
    error: Any = None

    def to_json(self) -> dict[str, Any]:
        """Return the response object; an error takes the place of the result."""
        if self.error is not None:
            return {"jsonrpc": "2.0", "id": self.id.to_json(), "error": self.error}
        return {"jsonrpc": "2.0", "id": self.id.to_json(), "result": self.result}

    def dumps(self) -> str:
        """Encode the response; a missing result is written as null."""
        return _dump(self.to_json())


@dataclass
class RawResponse:
    """A received response whose result and error are kept as JSON text.

    ``result`` is ``None`` when the member was absent and ``"null"`` when it
    was JSON null; ``error`` is ``None`` when absent or null.
    """

    jsonrpc: str = ""
    id: ID = field(default_factory=ID)
    result: str | None = None
    error: str | None = None

    def to_json(self) -> dict[str, Any]:
        if self.error is not None:
            out: dict[str, Any] = {"jsonrpc": "2.0", "id": self.id.to_json()}
            if self.error:
                out["error"] = json.loads(self.error)
            return out
        result = json.loads(self.result) if self.result else None
        return {"jsonrpc": "2.0", "id": self.id.to_json(), "result": result}

    def dumps(self) -> str:
        head = f'{{"jsonrpc":"2.0","id":{_dump(self.id.to_json())}'
        if self.error is not None:
            if not self.error:
                return head + "}"
            return f'{head},"error":{self.error}}}'
        result = self.result if self.result else "null"
        return f'{head},"result":{result}}}'


def new_response() -> Response:
    return Response()


def parse_response(data: str | bytes) -> Response:
    """Decode a response into plain Python values."""
    obj = _load_object(data, "response")
    return Response(
        jsonrpc=_jsonrpc_field(obj),
        id=parse_id(obj.get("id")),
        result=obj.get("result"),
        error=obj.get("error"),
    )


def parse_raw_response(data: str | bytes) -> RawResponse:
    """Decode a response, keeping its result and error as JSON text."""
    obj = _load_object(data, "response")
    result = _dump(obj["result"]) if "result" in obj else None
    error = obj.get("error")
    return RawResponse(
        jsonrpc=_jsonrpc_field(obj),
        id=parse_id(obj.get("id")),
        result=result,
        error=_dump(error) if error is not None else None,
    )