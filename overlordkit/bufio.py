"""Pooled growable buffers with a non-blocking style reader and a batching writer."""

from __future__ import annotations

import bisect
import threading
from typing import Any, Protocol

from overlordkit.netconn import Conn

# The largest RESP or memcache object is 512MB.
MAX_BUFFER_SIZE = 512 * 1024 * 1024
DEFAULT_BUFFER_SIZE = 512
GROW_FACTOR = 2
MAX_WRITEV_SIZE = 1024

_CRLF = b"\r\n"
_POOL_LIMIT = 64


class BufferFullError(Exception):
    """Raised when the buffered data does not yet hold what was asked for."""

    def __init__(self, message: str = "bufio: buffer full") -> None:
        super().__init__(message)


class Buffer:
    """A byte buffer with a read position ``r`` and a write position ``w``."""

    __slots__ = ("buf", "r", "w")

    def __init__(self, size: int) -> None:
        self.buf = bytearray(size)
        self.r = 0
        self.w = 0

    def __len__(self) -> int:
        return len(self.buf)

    def bytes(self) -> bytes:
        """Return the data that has been read in but not consumed."""
        return bytes(self.buf[self.r:self.w])

    def advance(self, n: int) -> None:
        """Move the read position by ``n`` (which may be negative)."""
        self.r += n

    def reset(self) -> None:
        self.r = 0
        self.w = 0

    def _grow(self) -> None:
        grown = bytearray(len(self.buf) * GROW_FACTOR)
        grown[:self.w] = self.buf[:self.w]
        self.buf = grown

    def _shrink(self) -> None:
        if self.r == 0:
            return
        size = self.w - self.r
        self.buf[:size] = self.buf[self.r:self.w]
        self.w = size
        self.r = 0

    def _buffered(self) -> int:
        return self.w - self.r


def _size_classes() -> tuple[int, ...]:
    sizes = []
    threshold = DEFAULT_BUFFER_SIZE
    while threshold <= MAX_BUFFER_SIZE:
        sizes.append(threshold)
        threshold *= GROW_FACTOR
    return tuple(sizes)


_SIZES = _size_classes()
_pools: dict[int, list[Buffer]] = {size: [] for size in _SIZES}
_pool_lock = threading.Lock()


def get(size: int) -> Buffer:
    """Return an empty buffer of at least ``size`` bytes, reusing pooled ones."""
    size = max(size, DEFAULT_BUFFER_SIZE)
    index = bisect.bisect_left(_SIZES, size)
    if index >= len(_SIZES):
        return Buffer(size)
    class_size = _SIZES[index]
    with _pool_lock:
        pool = _pools[class_size]
        buffer = pool.pop() if pool else None
    if buffer is None:
        buffer = Buffer(class_size)
    buffer.reset()
    return buffer


def put(buffer: Buffer) -> None:
    """Return a buffer to the pool of its size class."""
    pool = _pools.get(len(buffer))
    if pool is None:
        return
    with _pool_lock:
        if len(pool) < _POOL_LIMIT:
            pool.append(buffer)


class _Source(Protocol):
    def read(self, size: int) -> Any: ...


class Reader:
    """Reads into a Buffer; parsing methods never perform I/O."""

    def __init__(self, rd: _Source, buffer: Buffer) -> None:
        self._rd = rd
        self._buffer = buffer
        self._err: BaseException | None = None

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    def _check(self) -> None:
        if self._err is not None:
            raise self._err

    def _fill(self) -> None:
        b = self._buffer
        try:
            data = self._rd.read(len(b.buf) - b.w)
        except OSError as exc:
            self._err = exc
            raise
        if not data:
            self._err = EOFError("EOF")
            return
        n = len(data)
        b.buf[b.w:b.w + n] = data
        b.w += n

    def read(self) -> None:
        """Read once from the source into free buffer space.

        End of stream is not raised here but remembered for later calls.
        """
        self._check()
        b = self._buffer
        if b._buffered() == len(b):
            b._grow()
        if b.w == len(b):
            b._shrink()
        self._fill()

    def read_line(self) -> bytes:
        """Return buffered data up to and including the first CRLF."""
        self._check()
        b = self._buffer
        index = b.buf.find(_CRLF, b.r, b.w)
        if index == -1:
            raise BufferFullError()
        line = bytes(b.buf[b.r:index + 2])
        b.r = index + 2
        return line

    def read_slice(self, delim: int | bytes) -> bytes:
        """Return buffered data up to and including ``delim``."""
        self._check()
        if isinstance(delim, int):
            delim = bytes([delim])
        b = self._buffer
        index = b.buf.find(delim, b.r, b.w)
        if index == -1:
            raise BufferFullError()
        data = bytes(b.buf[b.r:index + 1])
        b.r = index + 1
        return data

    def read_exact(self, n: int) -> bytes:
        """Return exactly ``n`` buffered bytes."""
        self._check()
        b = self._buffer
        if b._buffered() < n:
            raise BufferFullError()
        data = bytes(b.buf[b.r:b.r + n])
        b.r += n
        return data

    def advance(self, n: int) -> None:
        self._buffer.advance(n)

    def mark(self) -> int:
        """Return the current read position."""
        return self._buffer.r

    def advance_to(self, mark: int) -> None:
        """Move the read position back (or forward) to ``mark``."""
        self.advance(mark - self._buffer.r)


class Writer:
    """Collects buffers and sends them together with one vectored write.

    After a failed write every later call raises the same error.
    """

    def __init__(self, conn: Conn) -> None:
        self._conn = conn
        self._bufs: list[bytes] = []
        self._err: BaseException | None = None

    def flush(self) -> None:
        if self._err is not None:
            raise self._err
        if not self._bufs:
            return
        bufs, self._bufs = self._bufs, []
        try:
            self._conn.writev(bufs)
        except OSError as exc:
            self._err = exc
            raise

    def write(self, data: bytes | None) -> None:
        """Queue ``data``; flushes automatically once enough buffers wait."""
        if self._err is not None:
            raise self._err
        if data is None:
            return
        self._bufs.append(bytes(data))
        if len(self._bufs) == MAX_WRITEV_SIZE:
            self.flush()