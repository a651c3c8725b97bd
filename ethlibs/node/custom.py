"""A transport built from a caller-supplied requester and optional subscriber."""

from __future__ import annotations

from ..jsonrpc.request import Request
from ..jsonrpc.response import RawResponse
from .interfaces import Requester, Subscriber
from .subscription import Subscription


class CustomTransport(Requester, Subscriber):
    """Delegates requests, and subscriptions when a subscriber is given."""

    def __init__(self, requester: Requester, subscriber: Subscriber | None = None) -> None:
        self.requester = requester
        self.subscriber = subscriber

    async def request(self, request: Request) -> RawResponse:
        return await self.requester.request(request)

    async def subscribe(self, request: Request) -> Subscription:
        if self.subscriber is None:
            raise NotImplementedError("subscriptions not supported over this transport")
        return await self.subscriber.subscribe(request)

    def is_bidirectional(self) -> bool:
        """True when subscriptions are supported."""
        return self.subscriber is not None