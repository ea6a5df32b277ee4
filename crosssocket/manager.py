"""A singleton event loop that watches sockets and dispatches callbacks."""

from __future__ import annotations

import select
import time
from collections.abc import Callable
from dataclasses import dataclass

from crosssocket import runtime
from crosssocket.sockets import Socket, SocketError

Callback = Callable[[Socket], None]


@dataclass
class WatchedSocket:
    """A socket registered with the manager, with the events it is watched for."""

    socket: Socket
    id: int
    monitor_read: bool
    monitor_write: bool
    on_read: Callback | None = None
    on_write: Callback | None = None


class SocketManager:
    """Watches registered sockets with select() and runs their callbacks."""

    _instance: SocketManager | None = None

    def __init__(self) -> None:
        runtime.initialize()
        self._sockets: list[WatchedSocket] = []

    @classmethod
    def instance(cls) -> SocketManager:
        """Return the shared manager, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def release(self) -> None:
        """Shut the runtime down and drop the shared manager."""
        runtime.cleanup()
        type(self)._instance = None

    def add_socket(
        self,
        socket: Socket,
        monitor_read: bool,
        monitor_write: bool,
        on_read: Callback | None = None,
        on_write: Callback | None = None,
    ) -> int:
        """Register a socket and return its id in the watch list."""
        socket_id = len(self._sockets)
        self._sockets.append(
            WatchedSocket(socket, socket_id, monitor_read, monitor_write, on_read, on_write)
        )
        return socket_id

    def run_once(self, timeout_millis: int = 1000) -> None:
        """Wait up to the timeout for events and run the matching callbacks."""
        watched = list(self._sockets)
        read_fds = [ws.socket.fileno() for ws in watched if ws.monitor_read]
        write_fds = [ws.socket.fileno() for ws in watched if ws.monitor_write]
        timeout = timeout_millis / 1000

        if not read_fds and not write_fds:
            time.sleep(timeout)
            return

        try:
            readable, writable, _ = select.select(read_fds, write_fds, [], timeout)
        except (OSError, ValueError) as exc:
            code = getattr(exc, "errno", None)
            raise SocketError(f"select() failed in event loop {code}") from exc

        ready_read = set(readable)
        ready_write = set(writable)
        for ws in watched:
            fd = ws.socket.fileno()
            if ws.monitor_read and fd in ready_read and ws.on_read is not None:
                ws.on_read(ws.socket)
            if ws.monitor_write and fd in ready_write and ws.on_write is not None:
                ws.on_write(ws.socket)

    def run_loop(self, condition: Callable[[], bool] | None = None) -> None:
        """Run the event loop while condition() is true, or forever without one."""
        while condition is None or condition():
            self.run_once()

    def close_socket(self, socket_id: int) -> None:
        """Close a watched socket and remove it; later ids shift down by one."""
        if not 0 <= socket_id < len(self._sockets):
            raise IndexError(f"no watched socket with id {socket_id}")
        self._sockets[socket_id].socket.close()
        for ws in self._sockets[socket_id:]:
            ws.id -= 1
        del self._sockets[socket_id]

    def close_sockets(self) -> None:
        """Close every watched socket and empty the watch list."""
        for ws in self._sockets:
            ws.socket.close()
        self._sockets.clear()