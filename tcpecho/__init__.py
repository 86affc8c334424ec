"""Asyncio TCP echo server, interactive client and concurrent latency benchmark."""

__version__ = "0.1.0"
__all__ = ["bench", "client", "server"]