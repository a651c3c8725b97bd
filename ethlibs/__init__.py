"""Helpers for interacting with Ethereum nodes: JSON-RPC, RLP and asyncio node clients."""

__version__ = "0.1.0"