"""Latency benchmark against an echo server."""

from __future__ import annotations

import asyncio
import contextlib
import random
import time
from dataclasses import dataclass, field


@dataclass
class BenchResult:
    """Outcome of a batch of concurrent requests; latencies are in microseconds."""

    total_requests: int
    errors: int
    latencies: list[int] = field(default_factory=list)


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"invalid server address: {address!r}")
    host = host.removeprefix("[").removesuffix("]")
    return host, int(port)


@dataclass(frozen=True)
class BenchClient:
    """Sends random payloads to ``server_addr`` ("host:port") and times the echo."""

    server_addr: str
    payload_size: int

    def generate_payload(self) -> bytes:
        """Return ``payload_size`` random bytes."""
        return random.randbytes(self.payload_size)

    async def single_request(self) -> int:
        """Connect, send a payload, read the echo back and return the elapsed microseconds."""
        start = time.perf_counter_ns()
        host, port = _split_address(self.server_addr)
        reader, writer = await asyncio.open_connection(host, port)
        try:
            writer.write(self.generate_payload())
            await writer.drain()
            await reader.readexactly(self.payload_size)
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()
        return (time.perf_counter_ns() - start) // 1000

    async def run_concurrent(self, concurrency: int) -> BenchResult:
        """Run *concurrency* requests at once and collect their latencies and failures."""
        outcomes = await asyncio.gather(
            *(self.single_request() for _ in range(concurrency)), return_exceptions=True
        )
        latencies = [outcome for outcome in outcomes if not isinstance(outcome, BaseException)]
        return BenchResult(
            total_requests=concurrency,
            errors=concurrency - len(latencies),
            latencies=latencies,
        )