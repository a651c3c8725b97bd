"""JSON-RPC requests and their wire encoding."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .id import ID, int_id, parse_id
from .params import Params, make_params


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _load_object(data: str | bytes) -> dict[str, Any]:
    obj = json.loads(data)
    if not isinstance(obj, dict):
        raise ValueError(f"cannot decode a JSON {type(obj).__name__} as a request")
    return obj


def _string_field(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f'field "{key}" must be a string')
    return value


def _params_field(obj: dict[str, Any]) -> Params | None:
    value = obj.get("params")
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError('field "params" must be an array')
    return Params(_dump(item) for item in value)


def _params_text(params: Params | None) -> str:
    return "[" + ",".join(params or ()) + "]"


@dataclass
class Request:
    """A JSON-RPC request whose params are always an array."""

    jsonrpc: str = ""
    method: str = ""
    id: ID = field(default_factory=ID)
    params: Params | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "params": self.params.decode() if self.params else [],
            "id": self.id.to_json(),
            "jsonrpc": "2.0",
        }

    def dumps(self) -> str:
        """Encode the request; missing params are written as an empty array."""
        return (
            f'{{"method":{_dump(self.method)},"params":{_params_text(self.params)},'
            f'"id":{_dump(self.id.to_json())},"jsonrpc":"2.0"}}'
        )


@dataclass
class RequestWithNetwork:
    """A request tagged with the network it is meant for."""

    request: Request
    network: str = ""

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"method": self.request.method}
        if self.request.params:
            out["params"] = self.request.params.decode()
        out["id"] = self.request.id.to_json()
        out["jsonrpc"] = "2.0"
        out["network"] = self.network
        return out

    def dumps(self) -> str:
        parts = [f'"method":{_dump(self.request.method)}']
        if self.request.params:
            parts.append(f'"params":{_params_text(self.request.params)}')
        parts.append(f'"id":{_dump(self.request.id.to_json())}')
        parts.append('"jsonrpc":"2.0"')
        parts.append(f'"network":{_dump(self.network)}')
        return "{" + ",".join(parts) + "}"


def new_request() -> Request:
    return Request(jsonrpc="2.0", id=ID(num=1))


def make_request(id: int, method: str, *args: Any) -> Request:
    """Build a request; raises if the params cannot be encoded."""
    return Request(jsonrpc="2.0", id=int_id(id), method=method, params=make_params(*args))


def must_request(id: int, method: str, *args: Any) -> Request:
    """Build a request from well-known parameter values."""
    return make_request(id, method, *args)


def parse_request(data: str | bytes) -> Request:
    """Decode a request; a method and an ID are required."""
    obj = _load_object(data)
    method = _string_field(obj, "method")
    params = _params_field(obj)
    if not method:
        raise ValueError("request is missing method")
    raw_id = obj.get("id")
    if raw_id is None:
        raise ValueError("request is missing ID")
    return Request(jsonrpc="2.0", method=method, id=parse_id(raw_id), params=params)


def parse_request_with_network(data: str | bytes, network: str = "") -> RequestWithNetwork:
    """Decode a request and tag it with ``network``; only the ID is required."""
    obj = _load_object(data)
    method = _string_field(obj, "method")
    params = _params_field(obj)
    _string_field(obj, "network")
    raw_id = obj.get("id")
    if raw_id is None:
        raise ValueError("request is missing ID")
    request = Request(method=method, id=parse_id(raw_id), params=params)
    return RequestWithNetwork(request=request, network=network)