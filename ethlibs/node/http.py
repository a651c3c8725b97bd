"""Sending JSON-RPC requests over HTTP POST."""

from __future__ import annotations

import httpx

from ..jsonrpc.request import Request
from ..jsonrpc.response import RawResponse, parse_raw_response
from .interfaces import Requester, Subscriber
from .subscription import Subscription

_TIMEOUT_SECONDS = 120.0
_KEEPALIVE_CONNECTIONS = 100


class HTTPTransport(Requester, Subscriber):
    """A request-only transport posting each request to one endpoint.

    A client passed in is used as is and left open by ``aclose``; otherwise
    one is created on first use (over ``transport`` when given) and owned.
    """

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._client = client
        self._owns_client = client is None
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # Only one endpoint is ever used, so all idle connections may target it.
            limits = httpx.Limits(
                max_connections=None, max_keepalive_connections=_KEEPALIVE_CONNECTIONS
            )
            self._client = httpx.AsyncClient(
                timeout=_TIMEOUT_SECONDS, limits=limits, transport=self._transport
            )
        return self._client

    async def request(self, request: Request) -> RawResponse:
        try:
            body = request.dumps().encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise ValueError(f"could not encode request json: {exc}") from exc

        try:
            payload = await self._dispatch(body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ConnectionError(f"could not dispatch request: {exc}") from exc

        try:
            return parse_raw_response(payload)
        except ValueError as exc:
            raise ValueError(f"could not decode response json: {exc}") from exc

    async def _dispatch(self, body: bytes) -> bytes:
        response = await self._get_client().post(
            self.url, content=body, headers={"Content-Type": "application/json"}
        )
        return response.content

    async def subscribe(self, request: Request) -> Subscription:
        raise NotImplementedError("subscriptions not supported over HTTP")

    def is_bidirectional(self) -> bool:
        return False

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def __aenter__(self) -> HTTPTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()