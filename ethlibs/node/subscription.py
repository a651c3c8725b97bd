"""Subscriptions started with eth_subscribe and the notifications they deliver."""

from __future__ import annotations

import asyncio
import copy
import json
from dataclasses import dataclass
from typing import Any, AsyncIterator

from ..jsonrpc.id import ID
from ..jsonrpc.notification import Notification
from ..jsonrpc.params import must_params
from ..jsonrpc.request import Request
from ..jsonrpc.response import RawResponse
from .interfaces import Requester

_STOP = object()


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass
class SubscriptionParams:
    """The params of an ``eth_subscription`` notification; result is JSON text."""

    subscription: str = ""
    result: str | None = None


def parse_subscription_params(raw: str | bytes) -> SubscriptionParams:
    """Decode notification params JSON text into ``SubscriptionParams``."""
    obj = json.loads(raw)
    if obj is None:
        return SubscriptionParams()
    if not isinstance(obj, dict):
        raise ValueError(
            f"cannot decode a JSON {type(obj).__name__} as subscription params"
        )
    subscription = obj.get("subscription")
    if subscription is None:
        subscription = ""
    elif not isinstance(subscription, str):
        raise ValueError('field "subscription" must be a string')
    result = _dump(obj["result"]) if "result" in obj else None
    return SubscriptionParams(subscription=subscription, result=result)


class Subscription:
    """A live subscription; iterate over it to receive its notifications.

    Iteration ends once the subscription has been stopped and the
    notifications dispatched before that have been delivered.
    """

    def __init__(
        self, response: RawResponse, subscription_id: str, conn: Requester
    ) -> None:
        self.response = response
        self.id = subscription_id
        self.conn = conn
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def unsubscribe(self) -> None:
        """Send ``eth_unsubscribe`` for this subscription."""
        request = Request(
            id=ID(string=self.id),
            method="eth_unsubscribe",
            params=must_params(self.id),
        )
        try:
            response = await self.conn.request(request)
        except Exception as exc:
            raise RuntimeError(f"unsubscribe failed: {exc}") from exc
        if response.error is not None:
            raise RuntimeError(response.error)

    def dispatch(self, notification: Notification) -> None:
        """Queue a copy of ``notification``; ignored once stopped."""
        if self._stopped:
            return
        self._queue.put_nowait(copy.copy(notification))

    def stop(self) -> None:
        """Stop the subscription; calling it again does nothing."""
        if self._stopped:
            return
        self._stopped = True
        self._queue.put_nowait(_STOP)

    async def __aiter__(self) -> AsyncIterator[Notification]:
        while True:
            item = await self._queue.get()
            if item is _STOP:
                return
            yield item