"""A bidirectional transport over a local IPC (Unix domain) socket."""

from __future__ import annotations

import asyncio

from .loop import LoopingTransport

_LINE_LIMIT = 1 << 24


async def connect_ipc(path: str) -> LoopingTransport:
    """Connect to the node's IPC socket at ``path`` and start the transport.

    Incoming messages are newline-delimited; outgoing requests are written as
    bare JSON documents.
    """
    try:
        reader, writer = await asyncio.open_unix_connection(path, limit=_LINE_LIMIT)
    except OSError as exc:
        raise ConnectionError(f"could not connect over IPC: {exc}") from exc

    async def read_message() -> bytes:
        line = await reader.readline()
        if not line:
            raise EOFError("IPC connection closed")
        return line.rstrip(b"\r\n")

    async def write_message(payload: bytes) -> None:
        writer.write(payload)
        await writer.drain()

    async def close_conn() -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass

    return LoopingTransport(read_message, write_message, close_conn).start()