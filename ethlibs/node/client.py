"""A client for an Ethereum node, over HTTP, websockets, IPC or a custom transport."""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import urlparse

from ..jsonrpc.id import ID
from ..jsonrpc.params import must_params
from ..jsonrpc.request import Request
from ..jsonrpc.response import RawResponse
from .context import current_request_id
from .custom import CustomTransport
from .http import HTTPTransport
from .interfaces import Requester, Subscriber
from .ipc import connect_ipc
from .subscription import Subscription
from .websocket import connect_websocket

_QUANTITY = re.compile(r"0x[0-9a-fA-F]+")


def _apply_context(request: Request) -> Request:
    override = current_request_id()
    if override is not None:
        request.id = override
    return request


def _decode_result(response: RawResponse) -> Any:
    if not response.result:
        raise ValueError("could not decode result: no result in response")
    try:
        return json.loads(response.result)
    except ValueError as exc:
        raise ValueError(f"could not decode result: {exc}") from exc


def _decode_quantity(response: RawResponse) -> int:
    value = _decode_result(response)
    if not isinstance(value, str) or not _QUANTITY.fullmatch(value):
        raise ValueError(f"could not decode result: invalid quantity {value!r}")
    return int(value, 16)


def _decode_string(response: RawResponse) -> str:
    value = _decode_result(response)
    if not isinstance(value, str):
        raise ValueError(f"could not decode result: expected a string, got {value!r}")
    return value


def _check_error(response: RawResponse) -> None:
    if response.error is not None:
        raise RuntimeError(response.error)


class Client(Requester, Subscriber):
    """A connection to an Ethereum node with helpers for common RPC methods."""

    def __init__(self, transport: Any, url: str = "") -> None:
        self._transport = transport
        self._url = url

    async def request(self, request: Request) -> RawResponse:
        return await self._transport.request(request)

    async def subscribe(self, request: Request) -> Subscription:
        return await self._transport.subscribe(request)

    def is_bidirectional(self) -> bool:
        """True when the transport supports subscriptions."""
        return self._transport.is_bidirectional()

    def url(self) -> str:
        """Return the backend URL this client was created with."""
        return self._url

    async def _call(self, method: str, *args: Any) -> RawResponse:
        request = _apply_context(
            Request(id=ID(num=1), method=method, params=must_params(*args))
        )
        try:
            return await self.request(request)
        except Exception as exc:
            raise RuntimeError(f"could not make request: {exc}") from exc

    async def block_number(self) -> int:
        """Return the current block number at head."""
        request = _apply_context(Request(id=ID(num=1), method="eth_blockNumber"))
        response = await self.request(request)
        _check_error(response)
        return _decode_quantity(response)

    async def net_version(self) -> str:
        response = await self._call("net_version")
        _check_error(response)
        return _decode_string(response)

    async def chain_id(self) -> str:
        response = await self._call("eth_chainId")
        _check_error(response)
        return _decode_string(response)

    async def gas_price(self) -> int:
        """Return the suggested legacy gas price."""
        response = await self._call("eth_gasPrice")
        return _decode_quantity(response)

    async def max_priority_fee_per_gas(self) -> int:
        """Return the suggested priority fee (tip) per gas."""
        response = await self._call("eth_maxPriorityFeePerGas")
        return _decode_quantity(response)

    async def send_raw_transaction(self, msg: str) -> str:
        """Send a raw signed transaction and return its hash."""
        response = await self._call("eth_sendRawTransaction", msg)
        _check_error(response)
        return _decode_string(response)

    async def subscribe_new_heads(self) -> Subscription:
        request = Request(
            jsonrpc="2.0",
            id=ID(string="newHeads", is_string=True),
            method="eth_subscribe",
            params=must_params("newHeads"),
        )
        return await self.subscribe(_apply_context(request))

    async def subscribe_new_pending_transactions(self) -> Subscription:
        request = Request(
            jsonrpc="2.0",
            id=ID(string="pending", is_string=True),
            method="eth_subscribe",
            params=must_params("newPendingTransactions"),
        )
        return await self.subscribe(_apply_context(request))

    async def close(self) -> None:
        """Close the underlying transport, if it can be closed."""
        for name in ("close", "aclose"):
            closer = getattr(self._transport, name, None)
            if callable(closer):
                await closer()
                return

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


async def new_client(url: str) -> Client:
    """Connect to ``url``: http(s) and ws(s) URLs, anything else is an IPC path."""
    try:
        scheme = urlparse(url).scheme
    except ValueError as exc:
        raise ValueError(f"could not parse url: {exc}") from exc

    try:
        if scheme in ("http", "https"):
            transport: Any = HTTPTransport(url)
        elif scheme in ("ws", "wss"):
            transport = await connect_websocket(url)
        else:
            transport = await connect_ipc(url)
    except Exception as exc:
        raise ConnectionError(f"could not create client transport: {exc}") from exc
    return Client(transport, url)


def new_custom_client(
    requester: Requester, subscriber: Subscriber | None = None
) -> Client:
    """Build a client over a caller-supplied requester and optional subscriber."""
    return Client(CustomTransport(requester, subscriber), "")