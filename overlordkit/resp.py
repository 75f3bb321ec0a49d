"""RESP commands and replies, and a single redis connection."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Protocol

from overlordkit.conv import btoi


class RespType(IntEnum):
    """Leading byte of a RESP value."""

    UNKNOWN = ord("0")
    STRING = ord("+")
    ERROR = ord("-")
    INT = ord(":")
    BULK = ord("$")
    ARRAY = ord("*")


class _LineReader(Protocol):
    def readline(self) -> bytes: ...

    def read(self, size: int) -> bytes: ...


class _Stream(_LineReader, Protocol):
    def write(self, data: bytes) -> Any: ...

    def flush(self) -> Any: ...


@dataclass
class Resp:
    """A decoded RESP value.

    For bulk strings ``data`` holds the payload followed by its CRLF; for
    arrays it holds the element count as sent and ``array`` the elements.
    """

    rtype: RespType = RespType.UNKNOWN
    data: bytes | None = None
    array: list["Resp"] = field(default_factory=list)

    def decode(self, reader: _LineReader) -> None:
        """Read one value from a binary stream with ``readline`` and ``read``."""
        line = reader.readline()
        if not line.endswith(b"\n"):
            raise EOFError("EOF")
        try:
            self.rtype = RespType(line[0])
        except ValueError:
            raise ValueError("not support Resp") from None
        body = line[1:-2]
        if self.rtype in (RespType.STRING, RespType.ERROR, RespType.INT):
            self.data = body
        elif self.rtype is RespType.BULK:
            self._decode_bulk(reader, body)
        elif self.rtype is RespType.ARRAY:
            self._decode_array(reader, body)
        else:
            raise ValueError("not support Resp")

    def _decode_bulk(self, reader: _LineReader, line: bytes) -> None:
        count = btoi(line)
        if count == -1:
            return
        payload = reader.read(count + 2)
        self.data = payload
        if len(payload) < count + 2:
            raise EOFError("unexpected EOF")

    def _decode_array(self, reader: _LineReader, line: bytes) -> None:
        self.data = line
        count = btoi(line)
        if count == -1:
            return
        for _ in range(count):
            element = Resp()
            element.decode(reader)
            self.array.append(element)


class Command:
    """A redis command with its arguments and, once executed, its reply."""

    def __init__(self, command: str, *args: str) -> None:
        self.command = command
        self.args: list[str] = list(args)
        self.reply: Resp | None = None

    def arg(self, *args: str) -> "Command":
        """Append arguments and return the command for chaining."""
        self.args.extend(args)
        return self

    def __bytes__(self) -> bytes:
        parts = [self.command, *self.args]
        out = [b"*%d\r\n" % len(parts)]
        for part in parts:
            encoded = part.encode()
            out.append(b"$%d\r\n%s\r\n" % (len(encoded), encoded))
        return b"".join(out)

    def __str__(self) -> str:
        return bytes(self).decode()

    def execute(self, stream: _Stream) -> Resp:
        """Send the command on ``stream`` and decode the reply into ``reply``."""
        if self.reply is None:
            self.reply = Resp()
        stream.write(bytes(self))
        stream.flush()
        self.reply.decode(stream)
        return self.reply


def new_cmd(command: str) -> Command:
    """Create a command with no arguments yet."""
    return Command(command)


def _split_addr(addr: str) -> tuple[str, int]:
    host, _, port = addr.rpartition(":")
    return host.strip("[]"), int(port)


class _Node:
    """One TCP connection; the first failure sticks until it is replaced."""

    def __init__(self, addr: str) -> None:
        self._sock: socket.socket | None = None
        self._stream: Any = None
        self.err: BaseException | None = None
        try:
            self._sock = socket.create_connection(_split_addr(addr))
            self._stream = self._sock.makefile("rwb")
        except (OSError, ValueError) as exc:
            self.err = exc

    def execute(self, cmd: Command) -> Command:
        if self.err is not None:
            raise self.err
        try:
            cmd.execute(self._stream)
        except (OSError, EOFError, ValueError) as exc:
            self.err = exc
            raise
        return cmd

    def close(self) -> None:
        if self._stream is not None:
            try:
                self._stream.close()
            except OSError:
                pass
            self._stream = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None


class RedisConn:
    """A single connection to a redis server that redials after a failure."""

    def __init__(self, addr: str) -> None:
        self.addr = addr
        self._node = _Node(addr)

    def _reconnect(self) -> None:
        self._node.close()
        self._node = _Node(self.addr)

    def ping(self) -> None:
        """Send PING; on failure reconnect and re-raise."""
        try:
            self._node.execute(new_cmd("PING"))
        except Exception:
            self._reconnect()
            raise

    def exec(self, cmd: Command) -> Resp:
        """Execute ``cmd`` and return its reply; reconnect on failure."""
        try:
            executed = self._node.execute(cmd)
        except Exception:
            self._reconnect()
            raise
        assert executed.reply is not None
        return executed.reply

    def close(self) -> None:
        self._node.close()

    def __enter__(self) -> "RedisConn":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()