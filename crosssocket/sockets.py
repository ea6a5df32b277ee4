"""A TCP/UDP socket wrapper with blocking and non-blocking helpers."""

from __future__ import annotations

import errno
import select
import socket
import sys
from types import TracebackType

from crosssocket import runtime

INVALID_SOCKET = -1


def _codes(*names: str) -> frozenset[int]:
    return frozenset(
        code for code in (getattr(errno, name, None) for name in names) if code is not None
    )


# Errors that only mean "not finished yet" and are safe to ignore.
_PENDING = _codes(
    "EWOULDBLOCK", "EAGAIN", "EINPROGRESS", "EALREADY",
    "WSAEWOULDBLOCK", "WSAEINPROGRESS", "WSAEALREADY",
)
_REFUSED = _codes("ECONNREFUSED", "WSAECONNREFUSED")
_RESET = _codes("ECONNRESET", "WSAECONNRESET")


class SocketError(RuntimeError):
    """Raised when a socket operation fails."""


class Socket:
    """An IPv4 stream socket, or a wrapper around an existing socket."""

    def __init__(self, existing: socket.socket | None = None) -> None:
        self._sock: socket.socket | None = None
        if not runtime.initialize():
            print("Winsock not initialized", file=sys.stderr)
            raise SocketError("Winsock not initialized")
        if existing is not None:
            self._sock = existing
            return
        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            runtime.cleanup()
            raise SocketError("Socket creation failed") from exc

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            pass

    def __enter__(self) -> Socket:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def _handle(self) -> socket.socket:
        if self._sock is None:
            raise SocketError("Socket is closed")
        return self._sock

    def _error(self, message: str) -> None:
        """Report a failure, close the socket, shut the runtime down and raise."""
        print(message, file=sys.stderr)
        self.close()
        runtime.cleanup()
        raise SocketError(message)

    def close(self) -> None:
        """Shut down and close the socket if it is still open."""
        if self._sock is not None:
            self.shutdown()
            runtime.close_socket(self._sock)
            self._sock = None

    def shutdown(self, how: int = socket.SHUT_RDWR) -> None:
        """Disable receives (0), sends (1) or both (2) on the socket."""
        if self._sock is not None:
            try:
                self._sock.shutdown(how)
            except OSError:
                pass

    def set_nonblocking(self, enable: bool) -> None:
        """Switch between non-blocking (True) and blocking (False) mode."""
        try:
            self._handle.setblocking(not enable)
        except OSError:
            self._error("Failed to set non-blocking mode")

    def connect_to(self, address: str, port: int, family: int = socket.AF_INET) -> None:
        """Connect to a server; a refused or pending connection is not an error."""
        try:
            socket.inet_pton(family, address)
        except (OSError, ValueError) as exc:
            raise SocketError("Invalid address") from exc
        try:
            code = self._handle.connect_ex((address, port))
        except OSError as exc:
            code = exc.errno if exc.errno is not None else -1
        if code == 0 or code in _PENDING:
            return
        if code in _REFUSED:
            print("Connection refused. Retrying...")
            return
        self._error(f"Connection failed with error {code}")

    def bind_to(self, port: int) -> None:
        """Bind to the given port on all interfaces."""
        try:
            self._handle.bind(("", port))
        except OSError:
            self._error("Bind failed")

    def listen(self, backlog: int = 5) -> None:
        """Start listening for connections."""
        try:
            self._handle.listen(backlog)
        except OSError:
            self._error("Listen failed")

    def accept_connection(self) -> Socket | None:
        """Accept a pending connection; None if none is waiting in non-blocking mode."""
        try:
            conn, _ = self._handle.accept()
        except OSError as exc:
            if exc.errno in _PENDING:
                return None
            self._error("Accept failed")
        return Socket(conn)

    def _select(self, write: bool, timeout_millis: int) -> bool:
        handle = self._handle
        watched = [handle]
        try:
            if write:
                _, ready, _ = select.select([], watched, [], timeout_millis / 1000)
            else:
                ready, _, _ = select.select(watched, [], [], timeout_millis / 1000)
        except (OSError, ValueError) as exc:
            kind = "write" if write else "read"
            raise SocketError(f"select() failed on {kind} check") from exc
        return bool(ready)

    def is_ready_to_read(self, timeout_millis: int = 0) -> bool:
        """Return True if data can be read within the timeout."""
        return self._select(False, timeout_millis)

    def is_ready_to_write(self, timeout_millis: int = 0) -> bool:
        """Return True if data can be sent within the timeout."""
        return self._select(True, timeout_millis)

    def send(self, data: bytes, flags: int = 0) -> None:
        """Send all of the data over the connection."""
        try:
            self._handle.sendall(data, flags)
        except OSError as exc:
            self._error(f"Send failed with error {exc.errno}")

    def send_to(self, data: bytes, address: tuple[str, int], flags: int = 0) -> None:
        """Send a datagram to the given address."""
        try:
            self._handle.sendto(data, flags, address)
        except OSError as exc:
            self._error(f"SendTo failed with error {exc.errno}")

    def receive(self, length: int, flags: int = 0) -> bytes:
        """Receive up to length bytes, stopping early on close or when no data is pending."""
        chunks: list[bytes] = []
        received = 0
        handle = self._handle
        while received < length:
            try:
                chunk = handle.recv(length - received, flags)
            except OSError as exc:
                if exc.errno in _RESET:
                    print("Connection reset", file=sys.stderr)
                elif exc.errno not in _PENDING:
                    self._error(f"Recv failed with error {exc.errno}")
                break
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks)

    def receive_from(self, length: int, flags: int = 0) -> tuple[bytes, tuple]:
        """Receive one datagram of up to length bytes and the sender's address."""
        try:
            return self._handle.recvfrom(length, flags)
        except OSError as exc:
            self._error(f"RecvFrom failed with error {exc.errno}")
        raise AssertionError("unreachable")

    def fileno(self) -> int:
        """Return the underlying descriptor, or -1 once closed."""
        if self._sock is None:
            return INVALID_SOCKET
        return self._sock.fileno()