"""IPv4 TCP socket wrapper, runtime state and a select-based socket event loop."""

__version__ = "1.1.0"
__all__ = ["runtime", "sockets", "manager"]