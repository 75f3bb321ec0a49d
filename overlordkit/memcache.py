"""Minimal memcache connection used for health checks."""

from __future__ import annotations

from overlordkit import bufio, netconn

_PING = b"set _ping 0 0 4\r\npong\r\n"
_PONG = b"STORED\r\n"


class PingError(Exception):
    """Raised when a memcache server answers a ping unexpectedly."""

    def __init__(self, message: str = "get pong err") -> None:
        super().__init__(message)


class MemcacheConn:
    """A memcache connection that reconnects after a failed ping."""

    def __init__(
        self,
        addr: str,
        dial_timeout: float,
        write_timeout: float,
        read_timeout: float,
    ) -> None:
        self.addr = addr
        self.dial_timeout = dial_timeout
        self.write_timeout = write_timeout
        self.read_timeout = read_timeout
        self._connect()

    def _connect(self) -> None:
        self._conn = netconn.dial_with_timeout(
            self.addr, self.dial_timeout, self.read_timeout, self.write_timeout
        )
        self._reader = bufio.Reader(self._conn, bufio.Buffer(1024))
        self._writer = bufio.Writer(self._conn)

    def ping(self) -> None:
        """Store a probe key and expect STORED; reconnect on any failure."""
        try:
            self._writer.write(_PING)
            self._writer.flush()
            try:
                self._reader.read()
            except OSError:
                pass
            if self._reader.read_line() != _PONG:
                raise PingError()
        except Exception:
            self._conn.close()
            self._connect()
            raise

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "MemcacheConn":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()