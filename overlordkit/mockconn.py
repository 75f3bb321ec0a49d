"""In-memory socket stand-in for exercising connection code."""

from __future__ import annotations

import threading

_DEFAULT_ADDR = "127.0.0.1:12345"


class MockConn:
    """A socket-like object that replays canned data and records writes."""

    def __init__(
        self,
        data: bytes = b"",
        repeat: int = 0,
        wbuf: bytearray | None = None,
        addr: str = _DEFAULT_ADDR,
    ) -> None:
        self.addr = addr
        self.wbuf = wbuf if wbuf is not None else bytearray()
        self.err: BaseException | None = None
        self.timeout: float | None = None
        self._rbuf = bytearray()
        self._data = bytes(data)
        self._repeat = repeat
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def recv(self, size: int) -> bytes:
        """Return up to ``size`` bytes; empty bytes once closed or drained."""
        with self._lock:
            if self._closed:
                return b""
            if self.err is not None:
                raise self.err
            if self._repeat > 0:
                self._rbuf += self._data
                self._repeat -= 1
            chunk = bytes(self._rbuf[:size])
            del self._rbuf[:size]
            return chunk

    def sendall(self, data: bytes) -> None:
        """Record ``data`` in the write buffer."""
        self.send(data)

    def send(self, data: bytes) -> int:
        """Record ``data`` in the write buffer and return its length."""
        with self._lock:
            if self._closed:
                raise BrokenPipeError("connection closed")
            if self.err is not None:
                raise self.err
            self.wbuf += data
            return len(data)

    def settimeout(self, timeout: float | None) -> None:
        self.timeout = timeout

    def _address(self) -> tuple[str, int]:
        host, _, port = self.addr.rpartition(":")
        return host, int(port)

    def getsockname(self) -> tuple[str, int]:
        return self._address()

    def getpeername(self) -> tuple[str, int]:
        return self._address()

    def close(self) -> None:
        with self._lock:
            self._closed = True


def create_conn(data: bytes, repeat: int) -> MockConn:
    """Create a connection whose reads yield ``data`` ``repeat`` times."""
    return MockConn(data=data, repeat=repeat)


def create_downstream_conn() -> tuple[MockConn, bytearray]:
    """Create a write-only connection and return it with its write buffer."""
    buffer = bytearray()
    return MockConn(wbuf=buffer), buffer