"""A bidirectional transport over a websocket connection."""

from __future__ import annotations

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .loop import LoopingTransport


async def connect_websocket(url: str) -> LoopingTransport:
    """Open a websocket to ``url`` and start the transport; binary frames are ignored."""
    try:
        ws = await websockets.connect(url)
    except (OSError, WebSocketException) as exc:
        raise ConnectionError(f"could not connect to {url}: {exc}") from exc

    async def read_message() -> bytes | None:
        try:
            message = await ws.recv()
        except ConnectionClosed as exc:
            raise ConnectionError(
                f"error reading from backend websocket connection: {exc}"
            ) from exc
        if isinstance(message, bytes):
            return None
        return message.encode("utf-8")

    async def write_message(payload: bytes) -> None:
        await ws.send(payload.decode("utf-8"))

    async def close_conn() -> None:
        await ws.close()

    return LoopingTransport(read_message, write_message, close_conn).start()