"""Abstract interfaces for sending requests and starting subscriptions."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from ..jsonrpc.request import Request
from ..jsonrpc.response import RawResponse

if TYPE_CHECKING:
    from .subscription import Subscription


def _defines(cls: type, name: str) -> bool:
    for base in cls.__mro__:
        if name in base.__dict__:
            return callable(base.__dict__[name])
    return False


class Requester(abc.ABC):
    """Anything that sends a JSON-RPC request and returns the raw response."""

    @abc.abstractmethod
    async def request(self, request: Request) -> RawResponse:
        """Send ``request`` and return the response to it."""

    @classmethod
    def __subclasshook__(cls, subclass: Any) -> Any:
        if cls is Requester:
            return _defines(subclass, "request")
        return NotImplemented


class Subscriber(abc.ABC):
    """Anything that starts an ``eth_subscribe`` subscription."""

    @abc.abstractmethod
    async def subscribe(self, request: Request) -> Subscription:
        """Send the subscription ``request`` and return the new subscription."""

    @classmethod
    def __subclasshook__(cls, subclass: Any) -> Any:
        if cls is Subscriber:
            return _defines(subclass, "subscribe")
        return NotImplemented