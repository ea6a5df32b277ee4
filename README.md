# crosssocket

A small socket layer for IPv4 TCP clients and servers. It includes a
`select`-based event loop manager. The manager calls your functions when the
sockets it watches become readable or writable.

## Installation

```
pip install crosssocket
```

The package has no runtime dependencies.

## Sockets

`crosssocket.sockets.Socket()` creates an IPv4 TCP socket.
`Socket(existing)` wraps a `socket.socket` object that you already have. A
`Socket` is a context manager, and leaving the `with` block closes it.

A server that echoes one message:

```python
from crosssocket.sockets import Socket

with Socket() as server:
    server.bind_to(5000)
    server.listen()
    client = server.accept_connection()
    data = client.receive(16)
    client.send(data)
    client.close()
```

A client:

```python
from crosssocket.sockets import Socket

with Socket() as client:
    client.connect_to("127.0.0.1", 5000)
    client.send(b"hello, world!!!!")
    reply = client.receive(16)
```

### Methods

- `bind_to(port)` binds the socket to the port on all interfaces.
- `listen(backlog=5)` starts listening for connections.
- `accept_connection()` returns a new `Socket` for the next connection. In
  non-blocking mode it returns `None` when no connection is waiting.
- `connect_to(address, port, family=socket.AF_INET)` connects to a server. An
  address that does not parse raises `SocketError("Invalid address")`. A
  connection that is still in progress is not an error. A refused connection
  is not an error either: it prints `Connection refused. Retrying...` and
  returns, so the caller can try again.
- `send(data, flags=0)` keeps writing until every byte has gone out.
- `receive(length, flags=0)` reads until `length` bytes have arrived and
  returns them as `bytes`. It returns fewer bytes, possibly none, in these
  cases:
  - the peer closes the connection;
  - the connection is reset (it prints `Connection reset` to stderr);
  - a non-blocking socket has no more data pending.
- `send_to(data, address, flags=0)` and `receive_from(length, flags=0)` send
  and receive datagrams. `receive_from` returns `(data, sender_address)`.
- `set_nonblocking(enable)` switches non-blocking mode on or off.
- `is_ready_to_read(timeout_millis=0)` and
  `is_ready_to_write(timeout_millis=0)` poll the socket with `select` and
  return a bool.
- `shutdown(how=socket.SHUT_RDWR)` turns off receiving (0), sending (1) or
  both (2).
- `close()` shuts the socket down and closes it. Calling it again does
  nothing.
- `fileno()` returns the descriptor, or `-1` once the socket is closed.

### Errors

When `bind_to`, `listen`, `accept_connection`, `connect_to`, `send`,
`send_to`, `receive`, `receive_from` or `set_nonblocking` fails, three things
happen:

1. The message is printed to stderr.
2. The socket closes itself, and the runtime is marked shut down.
3. `crosssocket.sockets.SocketError`, a subclass of `RuntimeError`, is raised.

When a readiness check fails, it raises `SocketError` without closing the
socket. Any of the operations above, or a readiness check, on a socket that is
already closed raises `SocketError("Socket is closed")`.

## Event loop

`crosssocket.manager.SocketManager.instance()` returns a shared manager and
creates it on first use.

```python
from crosssocket.manager import SocketManager

manager = SocketManager.instance()

def on_read(sock):
    print(sock.receive(16))

socket_id = manager.add_socket(client, True, False, on_read, None)
manager.run_once(1000)        # one select pass with a one-second timeout
manager.close_socket(socket_id)
manager.release()
```

- `add_socket(socket, monitor_read, monitor_write, on_read=None, on_write=None)`
  registers a socket and returns its id. Each callback receives the `Socket`
  as its only argument. Registrations are kept as `WatchedSocket` records.
- `run_once(timeout_millis=1000)` waits up to the timeout and then calls the
  callback of every watched socket that is ready. If no socket is watched for
  either event, it just sleeps for the timeout. A failed `select` raises
  `SocketError`.
- `run_loop(condition=None)` calls `run_once` repeatedly. With no condition it
  runs forever. Otherwise it stops once `condition()` returns false.
- `close_socket(socket_id)` closes the socket and stops watching it. The ids
  of sockets registered after it shift down by one. An unknown id raises
  `IndexError`.
- `close_sockets()` closes every watched socket and empties the watch list.
- `release()` marks the runtime shut down and drops the shared manager, so the
  next `instance()` call creates a new one. It does not close watched sockets.

## Runtime state

`crosssocket.runtime` holds a process-wide readiness flag that the sockets and
the manager use:

- `initialize()` sets the flag.
- `cleanup()` clears it and returns whether it was set.
- `is_initialized()` reports it.
- `close_socket(sock)` closes a raw socket object.

## What it does not do

- `Socket()` always creates an IPv4 TCP socket. To send and receive datagrams
  with `send_to` and `receive_from`, wrap a datagram socket that you created
  yourself.
- There is no command-line program. This is a library only.