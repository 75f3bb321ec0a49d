import io

import pytest

from overlordkit.bufio import (
    DEFAULT_BUFFER_SIZE,
    MAX_WRITEV_SIZE,
    Buffer,
    BufferFullError,
    Reader,
    Writer,
    get,
    put,
)
from overlordkit.mockconn import create_conn
from overlordkit.netconn import Conn


def _gen_data():
    data = bytearray(b"abcde" * 300)
    data[-1] = ord("f")
    return bytes(data)


def test_buffer_basics():
    b = get(DEFAULT_BUFFER_SIZE)
    assert len(b) == DEFAULT_BUFFER_SIZE
    assert b.bytes() == b""
    b.w = 1
    assert len(b.bytes()) == 1
    b.reset()
    assert b.bytes() == b""
    put(b)


def test_get_rounds_up_to_size_class():
    assert len(get(DEFAULT_BUFFER_SIZE)) == DEFAULT_BUFFER_SIZE
    assert len(get(10)) == DEFAULT_BUFFER_SIZE
    assert len(get(DEFAULT_BUFFER_SIZE + 1)) == DEFAULT_BUFFER_SIZE * 2
    assert len(get(1024 * 1024 + 1)) == 2 * 1024 * 1024


def test_put_then_get_reuses_and_resets():
    b = get(4096)
    b.w = 10
    b.r = 3
    put(b)
    again = get(4096)
    assert again is b
    assert (again.r, again.w) == (0, 0)


def test_buffer_advance():
    b = get(DEFAULT_BUFFER_SIZE)
    b.r += 100
    b.advance(-10)
    assert b.r == 90
    put(b)


def test_reader_grows_full_buffer():
    data = _gen_data()
    reader = Reader(io.BytesIO(data), get(DEFAULT_BUFFER_SIZE))
    reader.read()
    assert len(reader.buffer.bytes()) == DEFAULT_BUFFER_SIZE
    reader.read()
    assert len(reader.buffer) == DEFAULT_BUFFER_SIZE * 2
    assert reader.buffer.bytes() == data[:DEFAULT_BUFFER_SIZE * 2]


def test_reader_shrinks_consumed_space():
    reader = Reader(io.BytesIO(b"abcde"), Buffer(5))
    reader.read()
    assert reader.read_exact(3) == b"abc"
    reader.read()
    assert reader.buffer.bytes() == b"de"
    assert reader.buffer.r == 0


def test_reader_advance():
    reader = Reader(io.BytesIO(_gen_data()), get(DEFAULT_BUFFER_SIZE))
    reader.read()
    reader.read_exact(5)
    reader.advance(5)
    assert len(reader.buffer.bytes()) == 502
    reader.advance(-10)
    assert len(reader.buffer.bytes()) == 512

    reader.read_exact(10)
    assert reader.mark() == 10
    reader.advance_to(5)
    assert reader.mark() == 5
    assert reader.buffer.r == 5


def test_reader_read_and_sticky_error():
    data = _gen_data()
    reader = Reader(io.BytesIO(data), get(DEFAULT_BUFFER_SIZE))
    reader.read()
    assert reader.buffer.bytes() == data[:DEFAULT_BUFFER_SIZE]

    class Failing:
        def read(self, size):
            raise OSError("some error")

    failing = Reader(Failing(), get(DEFAULT_BUFFER_SIZE))
    with pytest.raises(OSError, match="some error"):
        failing.read()
    with pytest.raises(OSError, match="some error"):
        failing.read()
    with pytest.raises(OSError, match="some error"):
        failing.read_line()


def test_reader_end_of_stream_is_remembered():
    reader = Reader(io.BytesIO(b"ab\r\n"), get(DEFAULT_BUFFER_SIZE))
    reader.read()
    reader.read()
    with pytest.raises(EOFError):
        reader.read_line()


def test_reader_read_slice():
    reader = Reader(io.BytesIO(_gen_data()), get(DEFAULT_BUFFER_SIZE))
    reader.read()
    assert reader.read_slice(ord("c")) == b"abc"
    with pytest.raises(BufferFullError):
        reader.read_slice(b"\n")


def test_reader_read_line():
    reader = Reader(io.BytesIO(b"abcd\r\nabc"), get(DEFAULT_BUFFER_SIZE))
    reader.read()
    assert reader.read_line() == b"abcd\r\n"
    with pytest.raises(BufferFullError):
        reader.read_line()


def test_reader_read_exact():
    reader = Reader(io.BytesIO(_gen_data()), get(DEFAULT_BUFFER_SIZE))
    reader.read()
    assert reader.read_exact(5) == b"abcde"
    with pytest.raises(BufferFullError):
        reader.read_exact(5 * 3 * 100)


def test_writer_write_and_flush():
    data = "Bilibili 干杯 - ( ゜- ゜)つロ".encode()
    mock = create_conn(b"", 1)
    writer = Writer(Conn(mock, 1.0, 1.0))
    writer.flush()
    assert mock.wbuf == b""
    writer.write(data)
    writer.write(data)
    writer.write(None)
    assert mock.wbuf == b""
    writer.flush()
    assert mock.wbuf == data * 2


def test_writer_error_is_sticky():
    data = b"payload"
    mock = create_conn(b"", 1)
    writer = Writer(Conn(mock, 1.0, 1.0))
    mock.err = OSError("some error")
    writer.write(data)
    with pytest.raises(OSError, match="some error"):
        writer.flush()
    with pytest.raises(OSError, match="some error"):
        writer.write(data)
    with pytest.raises(OSError, match="some error"):
        writer.flush()


def test_writer_flushes_when_batch_is_full():
    mock = create_conn(b"", 1)
    writer = Writer(Conn(mock, 1.0, 1.0))
    for _ in range(MAX_WRITEV_SIZE - 1):
        writer.write(b"x")
    assert mock.wbuf == b""
    writer.write(b"x")
    assert mock.wbuf == b"x" * MAX_WRITEV_SIZE