"""Process-wide networking runtime state shared by sockets and managers."""

from __future__ import annotations

import socket
import threading
from dataclasses import dataclass, field


@dataclass
class _RuntimeState:
    """Readiness flag of the networking runtime, guarded by a lock."""

    ready: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock)

    def set_ready(self, ready: bool) -> bool:
        """Store the new readiness and return the previous one."""
        with self.lock:
            previous = self.ready
            self.ready = ready
            return previous


_state = _RuntimeState()


def initialize() -> bool:
    """Mark the networking runtime ready and report whether it is.

    Python brings up the platform socket layer on its own, so this only
    records that new operations may start.
    """
    _state.set_ready(True)
    return _state.ready


def cleanup() -> bool:
    """Shut the runtime down so that no new operations are started.

    Returns True if the runtime was running before the call.
    """
    return _state.set_ready(False)


def is_initialized() -> bool:
    """Return True while the runtime is initialized."""
    return _state.ready


def close_socket(sock: socket.socket) -> None:
    """Close a raw socket object."""
    sock.close()