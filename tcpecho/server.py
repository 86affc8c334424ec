"""TCP echo server that limits how many clients it serves at once."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7210
DEFAULT_MAX_CONNECTIONS = 1000
BUFFER_SIZE = 1024
MAX_READ_RETRIES = 3


async def handle_client(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Echo everything read from *reader* back through *writer* until the peer disconnects.

    A failed read is retried up to three times over the life of the connection;
    after that the error is raised. Write errors are raised at once.
    """
    print("Handling client connection")
    retries = 0
    while True:
        try:
            data = await reader.read(BUFFER_SIZE)
        except OSError:
            if retries < MAX_READ_RETRIES:
                print("Error reading from client, Retrying...")
                retries += 1
                continue
            raise
        if not data:
            print("Client disconnected")
            return
        print(f"Read {len(data)} bytes from client")
        writer.write(data)
        await writer.drain()


class Server:
    """An echo server listening on ``host:port``."""

    def __init__(self, port: int, host: str, max_connections: int) -> None:
        self.port = port
        self.host = host
        self.max_connections = max_connections
        self._permits = asyncio.Semaphore(max_connections)
        self._listener: asyncio.Server | None = None
        self._started = asyncio.Event()
        self._closed = asyncio.Event()

    @property
    def bound_port(self) -> int | None:
        """The port actually listened on, or None when not listening."""
        if self._listener is None or not self._listener.sockets:
            return None
        return self._listener.sockets[0].getsockname()[1]

    async def wait_started(self) -> None:
        """Wait until the server is accepting connections."""
        await self._started.wait()

    async def start(self) -> None:
        """Listen and serve clients until :meth:`close` is called.

        Raises OSError when the address cannot be bound.
        """
        print(f"Starting server on {self.host}:{self.port}")
        try:
            self._listener = await asyncio.start_server(
                self._serve_connection, self.host, self.port
            )
        except OSError as exc:
            print(f"Failed to start server: {exc}", file=sys.stderr)
            raise
        print("Server started successfully")
        self._started.set()
        try:
            await self._closed.wait()
        finally:
            self._stop_listening()

    def close(self) -> None:
        """Stop accepting connections and let :meth:`start` return."""
        print("Server is shutting down")
        self._closed.set()
        self._stop_listening()

    def _stop_listening(self) -> None:
        if self._listener is not None:
            self._listener.close()

    async def _serve_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        async with self._permits:
            peer = writer.get_extra_info("peername")
            if peer:
                print(f"Accepted connection from {peer[0]}:{peer[1]}")
            try:
                await handle_client(reader, writer)
                print("Handle ended")
            except OSError as exc:
                print(f"Error handling client: {exc}", file=sys.stderr)
            finally:
                writer.close()
                with contextlib.suppress(OSError):
                    await writer.wait_closed()


def _port(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {value}")
    return value


def main(argv: list[str] | None = None) -> int:
    """Run the echo server from the command line."""
    parser = argparse.ArgumentParser(prog="tcpecho-server", description="TCP echo server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=_port, default=DEFAULT_PORT)
    parser.add_argument("--max-connections", type=int, default=DEFAULT_MAX_CONNECTIONS)
    args = parser.parse_args(argv)

    server = Server(args.port, args.host, args.max_connections)
    try:
        asyncio.run(server.start())
    except OSError:
        return 1
    except KeyboardInterrupt:
        server.close()
    return 0