# tcpecho

tcpecho is a small asyncio TCP echo toolkit with three parts:

- `tcpecho.server` is an echo server. It sends every byte it receives back to the client that sent it, and it limits how many clients it serves at the same time.
- `tcpecho.client` is an interactive client. It sends each line you type to the server and prints what comes back.
- `tcpecho.bench` is a latency benchmark. It opens many connections at once and times the round trip on each one.

It uses only the standard library.

## Installation

```
pip install .
```

## Running the server

```
tcpecho-server [--host HOST] [--port PORT] [--max-connections N]
```

The defaults are host `127.0.0.1`, port `7210` and 1000 connections. When that many clients are being served, a further connection is accepted, but the server does not start echoing for it until a slot frees up.

The server reads up to 1024 bytes at a time and writes them back unchanged. A connection may have up to three failed reads in total. A fourth failed read ends that connection, and so does any write error. The command exits with status 1 if it cannot bind the address. Ctrl-C stops it.

## Running the client

```
tcpecho-client [--host HOST] [--port PORT]
```

The client connects to `127.0.0.1:7210` by default. It reads lines from standard input and sends each one to the server with its line ending removed. Every chunk the server sends back is printed as `Server: ...`. Because line endings are removed, lines typed in quick succession may come back joined together in one reply.

The client stops when:

- the server closes the connection, in which case it prints `Connection closed`;
- a read or write fails.

The command exits with status 1 if it cannot connect.

## Using the server from Python

```python
import asyncio
from tcpecho.server import Server

asyncio.run(Server(7210, "127.0.0.1", 1000).start())
```

`Server.start()` serves until `Server.close()` is called. It raises `OSError` if the address cannot be bound.

- `await server.wait_started()` waits until the server is listening.
- `server.bound_port` gives the port actually in use, which is useful with port `0`.

`handle_client(reader, writer)` is the echo loop for a single connection, and you can call it on any pair of asyncio streams.

## Using the client from Python

`connect(port, host)` returns a `Client`. If the connection failed, `client.connected` is false.

`user_input_handle(queue, lines)` puts each line, without its line ending, on an `asyncio.Queue`, and then puts `None` to mark the end. The lines come from `lines`, which may be a plain iterable or an async iterable. If `lines` is omitted, they come from standard input.

`server_stream_handle(queue, writer, reader, out)` sends the queued lines to the server. It writes each reply to `out`, which defaults to standard output.

## Benchmarking

```python
import asyncio
from tcpecho.bench import BenchClient

async def run():
    client = BenchClient("127.0.0.1:7210", 1024)
    result = await client.run_concurrent(100)
    print(result.total_requests, result.errors, sorted(result.latencies)[:5])

asyncio.run(run())
```

Each request works as follows:

1. It opens its own connection.
2. It sends `payload_size` random bytes.
3. It waits until the same number of bytes has been echoed back.

`single_request()` returns the elapsed time in microseconds. `run_concurrent(n)` starts `n` requests at once. A failed request does not stop the run: it is counted in `BenchResult.errors` and left out of `BenchResult.latencies`.

## What it does not do

There is no benchmark command. The benchmark is only available from Python. It reports raw latencies and does not compute statistics such as means or percentiles.

## Tests

```
pip install ".[test]"
pytest
```