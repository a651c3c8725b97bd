"""Asyncio clients and transports (HTTP, WebSocket, IPC, custom) for Ethereum nodes."""