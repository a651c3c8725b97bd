"""JSON-RPC error objects and the standard error codes."""

from __future__ import annotations

import enum
from typing import Any, Mapping


class ErrorCode(enum.IntEnum):
    """Error codes used in JSON-RPC error responses."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    INVALID_INPUT = -32000
    RESOURCE_NOT_FOUND = -32001
    RESOURCE_UNAVAILABLE = -32002
    TRANSACTION_REJECTED = -32003
    METHOD_NOT_SUPPORTED = -32004
    LIMIT_EXCEEDED = -32005


class JSONRPCError(Exception):
    """A JSON-RPC error; its string form is the error message."""

    def __init__(
        self, code: int, message: str, data: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = dict(data) if data is not None else None

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"JSONRPCError(code={self.code!r}, message={self.message!r}, "
            f"data={self.data!r})"
        )

    def to_json(self) -> dict[str, Any]:
        """Return the error object as it appears in a response."""
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            out["data"] = self.data
        return out


def new_error(
    code: int, message: str, data: Mapping[str, Any] | None = None
) -> JSONRPCError:
    return JSONRPCError(code, message, data)


def parse_error(message: str) -> JSONRPCError:
    return JSONRPCError(ErrorCode.PARSE_ERROR, message)


def invalid_request(message: str, data: Mapping[str, Any] | None = None) -> JSONRPCError:
    return new_error(ErrorCode.INVALID_REQUEST, message, data)


def method_not_found(request: Any, data: Mapping[str, Any] | None = None) -> JSONRPCError:
    message = f"The method {request.method} does not exist/is not available"
    return new_error(ErrorCode.METHOD_NOT_FOUND, message, data)


def invalid_params(message: str, data: Mapping[str, Any] | None = None) -> JSONRPCError:
    return new_error(ErrorCode.INVALID_PARAMS, message, data)


def internal_error(message: str, data: Mapping[str, Any] | None = None) -> JSONRPCError:
    return new_error(ErrorCode.INTERNAL_ERROR, message, data)


def invalid_input(message: str, data: Mapping[str, Any] | None = None) -> JSONRPCError:
    return new_error(ErrorCode.INVALID_INPUT, message, data)


def resource_not_found(
    message: str, data: Mapping[str, Any] | None = None
) -> JSONRPCError:
    return new_error(ErrorCode.RESOURCE_NOT_FOUND, message, data)


def resource_unavailable(
    message: str, data: Mapping[str, Any] | None = None
) -> JSONRPCError:
    return new_error(ErrorCode.RESOURCE_UNAVAILABLE, message, data)


def transaction_rejected(
    message: str, data: Mapping[str, Any] | None = None
) -> JSONRPCError:
    return new_error(ErrorCode.TRANSACTION_REJECTED, message, data)


def method_not_supported(
    request: Any, data: Mapping[str, Any] | None = None
) -> JSONRPCError:
    message = f"method not supported {request.method}"
    return new_error(ErrorCode.METHOD_NOT_SUPPORTED, message, data)


def limit_exceeded(message: str, data: Mapping[str, Any] | None = None) -> JSONRPCError:
    return new_error(ErrorCode.LIMIT_EXCEEDED, message, data)