"""A bidirectional transport multiplexing requests and subscriptions over one connection."""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import json
import logging
import random
from itertools import chain
from typing import Awaitable, Callable

from ..jsonrpc.id import ID
from ..jsonrpc.messages import parse_message
from ..jsonrpc.notification import Notification
from ..jsonrpc.request import Request, parse_request
from ..jsonrpc.response import RawResponse
from .interfaces import Requester, Subscriber
from .subscription import Subscription, parse_subscription_params

logger = logging.getLogger(__name__)

_UINT64_MASK = (1 << 64) - 1

ReadMessage = Callable[[], Awaitable["bytes | None"]]
WriteMessage = Callable[[bytes], Awaitable[None]]
CloseConn = Callable[[], Awaitable[None]]


def copy_request(request: Request) -> Request:
    """Return an independent copy of ``request`` by encoding and decoding it."""
    try:
        text = request.dumps()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"could not copy request: encoding failed: {exc}") from exc
    try:
        return parse_request(text)
    except ValueError as exc:
        raise ValueError(f"could not copy request: decoding failed: {exc}") from exc


class LoopingTransport(Requester, Subscriber):
    """Sends requests over a message connection and routes what comes back.

    Outgoing requests get fresh IDs so that concurrent callers never clash;
    responses are matched to their callers and given back the caller's ID.
    Notifications for ``eth_subscription`` are delivered to the matching
    subscription.  ``read_message`` returns one message, or ``None`` for a
    message to skip, and raises when the connection fails.
    """

    def __init__(
        self,
        read_message: ReadMessage,
        write_message: WriteMessage,
        close_conn: CloseConn | None = None,
        *,
        counter: int | None = None,
    ) -> None:
        self._read_message = read_message
        self._write_message = write_message
        self._close_conn = close_conn
        self._counter = (random.getrandbits(64) if counter is None else counter) & _UINT64_MASK
        self._pending_subscriptions: dict[ID, tuple[Request, asyncio.Future]] = {}
        self._outbound: dict[ID, tuple[Request, asyncio.Future]] = {}
        self.subscriptions: dict[str, Subscription] = {}
        self._write_lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._closed = False
        self._conn_closed = False
        self.error: BaseException | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> LoopingTransport:
        """Start reading from the connection; must be called inside a running loop."""
        if self._task is None and not self._closed:
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self

    def next_id(self, seed: ID) -> ID:
        """Return a fresh ID shaped like ``seed``: numeric, or the seed string plus a count."""
        self._counter = (self._counter + 1) & _UINT64_MASK
        n = self._counter
        if seed.is_string:
            return ID(string=f"{seed.string}-{n}", is_string=True)
        return ID(num=n)

    async def request(self, request: Request) -> RawResponse:
        self._ensure_open()
        owned = copy_request(request)
        proxy = dataclasses.replace(owned, id=self.next_id(owned.id))
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._outbound[proxy.id] = (owned, future)
        await self._send(proxy, self._outbound)
        return await future

    async def subscribe(self, request: Request) -> Subscription:
        if request.method not in ("eth_subscribe", "parity_subscribe"):
            raise ValueError("request is not a subscription request")
        self._ensure_open()
        owned = copy_request(request)
        proxy = dataclasses.replace(owned, id=self.next_id(owned.id))
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending_subscriptions[proxy.id] = (owned, future)
        await self._send(proxy, self._pending_subscriptions)
        return await future

    def is_bidirectional(self) -> bool:
        return True

    async def close(self) -> None:
        """Stop the transport, fail pending requests and close the connection."""
        task = self._task
        if task is None:
            if not self._closed:
                self._shutdown(None)
            await self._close_connection()
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def __aenter__(self) -> LoopingTransport:
        return self.start()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ConnectionError("transport context finished")
        self.start()

    async def _send(
        self, proxy: Request, registry: dict[ID, tuple[Request, asyncio.Future]]
    ) -> None:
        try:
            payload = proxy.dumps().encode("utf-8")
        except (TypeError, ValueError) as exc:
            registry.pop(proxy.id, None)
            raise ValueError(f"error marshalling request for backend: {exc}") from exc

        if proxy.method == "eth_unsubscribe":
            # Handle unsubscribes sent by hand as well as via Subscription.unsubscribe().
            self._drop_subscription(proxy)

        try:
            async with self._write_lock:
                await self._write_message(payload)
        except Exception as exc:
            registry.pop(proxy.id, None)
            if self.error is None:
                self.error = exc
            if self._task is not None:
                self._task.cancel()
            raise ConnectionError(
                f"error writing to backend connection: {exc}"
            ) from exc

    def _drop_subscription(self, proxy: Request) -> None:
        if not proxy.params:
            return
        try:
            sub_id = proxy.params.decode(1)[0]
        except ValueError:
            return
        if not isinstance(sub_id, str):
            return
        logger.debug("removing subscription id %s", sub_id)
        sub = self.subscriptions.pop(sub_id, None)
        if sub is not None:
            sub.stop()

    async def _run(self) -> None:
        error: BaseException | None = None
        try:
            await self._read_loop()
        except Exception as exc:
            error = exc
            logger.warning("transport stopped: %s", exc)
        finally:
            self._shutdown(error)
            await self._close_connection()

    async def _close_connection(self) -> None:
        if self._close_conn is not None and not self._conn_closed:
            self._conn_closed = True
            with contextlib.suppress(Exception):
                await self._close_conn()

    def _shutdown(self, error: BaseException | None) -> None:
        self._closed = True
        if error is not None and self.error is None:
            self.error = error
        cause = self.error
        reason = "transport context finished waiting for response"
        if cause is not None:
            reason = f"{reason}: {cause}"
        for _, future in chain(
            self._outbound.values(), self._pending_subscriptions.values()
        ):
            if not future.done():
                future.set_exception(ConnectionError(reason))
        self._outbound.clear()
        self._pending_subscriptions.clear()
        for sub in self.subscriptions.values():
            sub.stop()
        self.subscriptions.clear()

    async def _read_loop(self) -> None:
        while True:
            payload = await self._read_message()
            if payload is None:
                continue
            try:
                message = parse_message(payload)
            except ValueError as exc:
                raise ValueError(
                    f"unrecognized message from backend connection: {exc}"
                ) from exc

            if isinstance(message, RawResponse):
                self._handle_response(message)
            elif isinstance(message, Notification):
                self._handle_notification(message)

    def _handle_response(self, message: RawResponse) -> None:
        pending = self._pending_subscriptions.pop(message.id, None)
        if pending is not None:
            start, future = pending
            patched = dataclasses.replace(message, id=start.id)
            if future.done():
                return
            if patched.result is None or patched.error is not None:
                future.set_exception(RuntimeError("Error w/ subscription"))
                return
            try:
                result = json.loads(patched.result)
            except ValueError as exc:
                raise ValueError(
                    f"unparsable result from backend connection: {exc}"
                ) from exc
            if not isinstance(result, str):
                future.set_exception(RuntimeError("Non-string subscription id"))
                return
            sub = Subscription(patched, result, self)
            self.subscriptions[result] = sub
            future.set_result(sub)
            return

        outbound = self._outbound.pop(message.id, None)
        if outbound is not None:
            original, future = outbound
            if future.done():
                logger.warning("request abandoned %s %s", message.id, original.id)
                return
            future.set_result(dataclasses.replace(message, id=original.id))

    def _handle_notification(self, message: Notification) -> None:
        if message.method != "eth_subscription":
            return
        try:
            params = parse_subscription_params(
                message.params if message.params is not None else "null"
            )
        except ValueError as exc:
            logger.warning("eth_subscription Notification not decoded: %s", exc)
            return
        sub = self.subscriptions.get(params.subscription)
        if sub is not None:
            sub.dispatch(message)