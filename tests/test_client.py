import asyncio
import io
import socket
from contextlib import asynccontextmanager

import pytest

from tcpecho.client import connect, main, server_stream_handle, user_input_handle


async def _echo_once(reader, writer):
    data = await reader.read(1024)
    writer.write(data)
    await writer.drain()
    writer.close()


async def _close_at_once(reader, writer):
    writer.close()


async def _async_lines():
    yield "first\n"
    yield "second\n"


@asynccontextmanager
async def tcp_server(handler):
    server = await asyncio.start_server(handler, "127.0.0.1", 0)
    try:
        yield server.sockets[0].getsockname()[1]
    finally:
        server.close()


def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


async def drain_queue(queue):
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


class SilentReader:
    async def read(self, n):
        await asyncio.Event().wait()


class BrokenWriter:
    def write(self, data):
        raise BrokenPipeError("pipe closed")

    async def drain(self):
        pass


class FailingReader:
    async def read(self, n):
        raise ConnectionResetError("reset by peer")


@pytest.mark.asyncio
async def test_connect_success():
    async with tcp_server(_echo_once) as port:
        client = await connect(port, "127.0.0.1")
        assert client.connected
        assert (client.host, client.port) == ("127.0.0.1", port)
        client.writer.close()


@pytest.mark.asyncio
async def test_connect_failure_leaves_no_streams():
    port = closed_port()
    client = await connect(port, "127.0.0.1")
    assert client.connected is False
    assert client.reader is None and client.port == port


@pytest.mark.asyncio
async def test_user_input_handle_strips_line_endings():
    queue = asyncio.Queue()
    await user_input_handle(queue, ["a\n", "b\r\n", "c"])
    assert await drain_queue(queue) == ["a", "b", "c", None]


@pytest.mark.asyncio
async def test_user_input_handle_accepts_async_lines():
    queue = asyncio.Queue()
    await user_input_handle(queue, _async_lines())
    assert await drain_queue(queue) == ["first", "second", None]


@pytest.mark.asyncio
async def test_server_stream_handle_prints_echo_then_close():
    async with tcp_server(_echo_once) as port:
        reader, writer = await asyncio.open_connection("127.0.0.1", port)
        queue = asyncio.Queue()
        await queue.put("hello")
        await queue.put(None)
        out = io.StringIO()
        await asyncio.wait_for(server_stream_handle(queue, writer, reader, out), 5)
        writer.close()
    assert out.getvalue() == "Server: hello\nConnection closed\n"


@pytest.mark.asyncio
async def test_server_stream_handle_stops_when_server_closes():
    async with tcp_server(_close_at_once) as port:
        reader, writer = await asyncio.open_connection("127.0.0.1", port)
        out = io.StringIO()
        await asyncio.wait_for(server_stream_handle(asyncio.Queue(), writer, reader, out), 5)
        writer.close()
    assert out.getvalue() == "Connection closed\n"


@pytest.mark.asyncio
async def test_server_stream_handle_reports_write_error(capsys):
    queue = asyncio.Queue()
    await queue.put("x")
    out = io.StringIO()
    await asyncio.wait_for(server_stream_handle(queue, BrokenWriter(), SilentReader(), out), 5)
    assert "Failed to write message" in capsys.readouterr().err
    assert out.getvalue() == ""


@pytest.mark.asyncio
async def test_server_stream_handle_reports_read_error(capsys):
    out = io.StringIO()
    await asyncio.wait_for(
        server_stream_handle(asyncio.Queue(), BrokenWriter(), FailingReader(), out), 5
    )
    assert "Read error" in capsys.readouterr().err
    assert out.getvalue() == ""


def test_main_fails_without_server():
    assert main(["--port", str(closed_port())]) == 1