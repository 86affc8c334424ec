"""Interactive client that sends typed lines to an echo server and prints replies."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
import threading
from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass
from typing import TextIO

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7210
BUFFER_SIZE = 1024
QUEUE_CAPACITY = 100


@dataclass
class Client:
    """Target server and, when connected, the open streams to it."""

    port: int
    host: str
    reader: asyncio.StreamReader | None = None
    writer: asyncio.StreamWriter | None = None

    @property
    def connected(self) -> bool:
        return self.writer is not None


async def connect(port: int, host: str) -> Client:
    """Try to connect to ``host:port``; on failure the client has no streams."""
    try:
        reader, writer = await asyncio.open_connection(host, port)
    except OSError as exc:
        print(f"Failed to connect to server: {exc}", file=sys.stderr)
        return Client(port=port, host=host)
    print(f"Connected to server at {host}:{port}")
    return Client(port=port, host=host, reader=reader, writer=writer)


async def _stdin_lines():
    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[str | None] = asyncio.Queue()

    def deliver(item):
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(lines.put_nowait, item)

    def pump():
        for line in sys.stdin:
            deliver(line)
        deliver(None)

    threading.Thread(target=pump, daemon=True).start()
    while (line := await lines.get()) is not None:
        yield line


async def _iterate(lines: Iterable[str] | AsyncIterable[str]):
    if isinstance(lines, AsyncIterable):
        async for line in lines:
            yield line
    else:
        for line in lines:
            yield line


async def user_input_handle(
    queue: asyncio.Queue, lines: Iterable[str] | AsyncIterable[str] | None = None
) -> None:
    """Put each input line, without its line ending, on *queue*; None marks the end.

    Lines come from standard input unless *lines* is given.
    """
    source = _stdin_lines() if lines is None else _iterate(lines)
    async for line in source:
        await queue.put(line.removesuffix("\n").removesuffix("\r"))
    await queue.put(None)


async def server_stream_handle(
    queue: asyncio.Queue,
    writer: asyncio.StreamWriter,
    reader: asyncio.StreamReader,
    out: TextIO | None = None,
) -> None:
    """Send queued lines to the server and print what it sends back until it disconnects."""
    out = sys.stdout if out is None else out
    get_task: asyncio.Future | None = asyncio.ensure_future(queue.get())
    read_task = asyncio.ensure_future(reader.read(BUFFER_SIZE))
    try:
        while True:
            waiting = {task for task in (get_task, read_task) if task is not None}
            done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

            if get_task is not None and get_task in done:
                message = get_task.result()
                if message is None:
                    get_task = None
                else:
                    get_task = asyncio.ensure_future(queue.get())
                    try:
                        writer.write(message.encode())
                        await writer.drain()
                    except OSError as exc:
                        print(f"Failed to write message: {exc}", file=sys.stderr)
                        return

            if read_task in done:
                try:
                    data = read_task.result()
                except OSError as exc:
                    print(f"Read error: {exc}", file=sys.stderr)
                    return
                if not data:
                    print("Connection closed", file=out)
                    return
                print(f"Server: {data.decode('utf-8', errors='replace')}", file=out)
                read_task = asyncio.ensure_future(reader.read(BUFFER_SIZE))
    finally:
        for task in (get_task, read_task):
            if task is not None:
                task.cancel()


async def _run(host: str, port: int) -> None:
    client = await connect(port, host)
    if not client.connected:
        client.reader, client.writer = await asyncio.open_connection(host, port)

    queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=QUEUE_CAPACITY)
    input_task = asyncio.create_task(user_input_handle(queue))
    try:
        await server_stream_handle(queue, client.writer, client.reader)
    finally:
        input_task.cancel()
        client.writer.close()


def main(argv: list[str] | None = None) -> int:
    """Run the interactive echo client from the command line."""
    parser = argparse.ArgumentParser(prog="tcpecho-client", description="Interactive echo client.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    try:
        asyncio.run(_run(args.host, args.port))
    except OSError as exc:
        print(f"Failed to connect to server: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0