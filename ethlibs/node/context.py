"""Overriding the JSON-RPC ID of requests made within a context."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from ..jsonrpc.id import ID

_request_id: ContextVar[ID | None] = ContextVar("ethlibs_request_id", default=None)


@contextmanager
def request_id(id: ID) -> Iterator[ID]:
    """Make requests issued inside the block carry ``id`` as their JSON-RPC ID."""
    token = _request_id.set(id)
    try:
        yield id
    finally:
        _request_id.reset(token)


def current_request_id() -> ID | None:
    """Return the ID set by the innermost ``request_id`` block, if any."""
    return _request_id.get()