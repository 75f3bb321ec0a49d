"""TCP connection wrapper applying read and write timeouts per call."""

from __future__ import annotations

import socket
from typing import Any, Iterable


class ConnClosedError(ConnectionError):
    """Raised when using a connection that is closed or never connected."""

    def __init__(self, message: str = "connection is closed") -> None:
        super().__init__(message)


def _split_addr(addr: str) -> tuple[str, int]:
    host, _, port = addr.rpartition(":")
    return host.strip("[]"), int(port)


class Conn:
    """A socket wrapper with per-operation timeouts (seconds, 0 = none)."""

    def __init__(
        self,
        sock: Any,
        read_timeout: float = 0.0,
        write_timeout: float = 0.0,
        *,
        addr: str = "",
        dial_timeout: float = 0.0,
    ) -> None:
        self.sock = sock
        self.addr = addr
        self.dial_timeout = dial_timeout
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.closed = False

    def _socket(self) -> Any:
        if self.closed or self.sock is None:
            raise ConnClosedError()
        return self.sock

    def read(self, size: int) -> bytes:
        """Receive up to ``size`` bytes; empty bytes mean end of stream."""
        sock = self._socket()
        if self.read_timeout:
            sock.settimeout(self.read_timeout)
        return sock.recv(size)

    def write(self, data: bytes) -> int:
        """Send all of ``data`` and return its length."""
        sock = self._socket()
        if self.write_timeout:
            sock.settimeout(self.write_timeout)
        sock.sendall(data)
        return len(data)

    def writev(self, buffers: Iterable[bytes]) -> int:
        """Send several buffers in one go and return the total length."""
        sock = self._socket()
        data = b"".join(buffers)
        sock.sendall(data)
        return len(data)

    def close(self) -> None:
        if self.sock is not None and not self.closed:
            self.closed = True
            self.sock.close()

    def dup(self) -> "Conn":
        """Dial the same address again with the same timeouts."""
        return dial_with_timeout(
            self.addr, self.dial_timeout, self.read_timeout, self.write_timeout
        )

    def __enter__(self) -> "Conn":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def dial_with_timeout(
    addr: str, dial_timeout: float, read_timeout: float, write_timeout: float
) -> Conn:
    """Connect to ``host:port``; a failed dial yields a connection that reports closed."""
    sock: socket.socket | None
    try:
        sock = socket.create_connection(_split_addr(addr), timeout=dial_timeout or None)
        sock.settimeout(None)
    except (OSError, ValueError):
        sock = None
    return Conn(
        sock,
        read_timeout,
        write_timeout,
        addr=addr,
        dial_timeout=dial_timeout,
    )