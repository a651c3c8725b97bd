"""Serving JSON-RPC requests from a WSGI application."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .errors import JSONRPCError, invalid_request
from .request import Request, parse_request

_JSON = "application/json"
_HandlerFunc = Callable[["RequestContext", Request], Any]
_StartResponse = Callable[..., Any]

_STATUS_TEXT = {
    200: "200 OK",
    400: "400 Bad Request",
    415: "415 Unsupported Media Type",
    500: "500 Internal Server Error",
}


@dataclass(frozen=True)
class RequestContext:
    """What a handler may inspect about the HTTP request it is serving."""

    environ: dict[str, Any]
    raw_json: bytes


def _json_default(obj: Any) -> Any:
    to_json = getattr(obj, "to_json", None)
    if callable(to_json):
        return to_json()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def encode_response(
    request: Request | None, result: Any, error: JSONRPCError | None
) -> bytes:
    """Encode the response body; the ID appears only when a request was decoded."""
    body: dict[str, Any] = {"jsonrpc": "2.0"}
    if request is not None:
        body["id"] = request.id.to_json()
    if result is not None:
        body["result"] = result
    if error is not None:
        body["error"] = error
    return json.dumps(
        body, separators=(",", ":"), ensure_ascii=False, default=_json_default
    ).encode("utf-8")


def _plain_error(
    start_response: _StartResponse, status: int, message: str
) -> list[bytes]:
    payload = (message + "\n").encode("utf-8")
    start_response(
        _STATUS_TEXT[status],
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
            ("Content-Length", str(len(payload))),
        ],
    )
    return [payload]


def _read_body(environ: dict[str, Any]) -> bytes:
    stream = environ["wsgi.input"]
    length = environ.get("CONTENT_LENGTH") or ""
    if length.strip():
        size = int(length)
        if size < 0:
            raise ValueError("negative content length")
        return stream.read(size)
    return stream.read()


class RequestHandler:
    """A WSGI application that hands each JSON-RPC request to a function.

    The function receives a ``RequestContext`` and the decoded ``Request``;
    it returns the result, or raises ``JSONRPCError`` to send an error.
    """

    def __init__(self, fn: _HandlerFunc) -> None:
        self.fn = fn

    def __call__(
        self, environ: dict[str, Any], start_response: _StartResponse
    ) -> Iterable[bytes]:
        try:
            body = _read_body(environ)
        except (OSError, ValueError, KeyError) as exc:
            return _plain_error(start_response, 400, str(exc))

        if environ.get("CONTENT_TYPE", "") != _JSON:
            return _plain_error(
                start_response,
                415,
                "invalid content type, only application/json is supported",
            )

        request: Request | None
        result: Any = None
        error: JSONRPCError | None = None
        try:
            request = parse_request(body)
        except ValueError as exc:
            request = None
            error = invalid_request(str(exc))
        else:
            try:
                result = self.fn(RequestContext(environ=environ, raw_json=body), request)
            except JSONRPCError as exc:
                error = exc

        try:
            payload = encode_response(request, result, error)
        except (TypeError, ValueError) as exc:
            return _plain_error(start_response, 500, str(exc))

        start_response(
            _STATUS_TEXT[200],
            [("Content-Type", _JSON), ("Content-Length", str(len(payload)))],
        )
        return [payload]


def request_handler(fn: _HandlerFunc) -> RequestHandler:
    """Wrap ``fn`` as a WSGI application serving JSON-RPC requests."""
    return RequestHandler(fn)