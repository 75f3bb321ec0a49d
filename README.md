# overlordkit

Building blocks for software that manages or proxies memcache and redis
clusters. It covers hashing, a consistent-hash ring, buffered socket I/O,
small protocol clients and a levelled logger.

## Modules

- `overlordkit.hashes`: hash functions over `bytes`. Each returns an `int`.
  - CRC16, as used for redis cluster slots: `crc16`, `hash_crc16`
  - CRC32 variants: `hash_crc32`, `hash_crc32a`
  - FNV variants: `hash_fnv1a64`, `hash_fnv164`, `hash_fnv1a32`, `hash_fnv132`
  - Others: `hash_hsieh`, `hash_one_on_time`, `hash_md5`, `murmur_hash2`, `hash_murmur`
- `overlordkit.ketama`: a weighted ketama consistent-hash ring.
  - `HashRing` has `init`, `add_node`, `del_node` and `get_node`.
  - `HashMethod` names the hash functions. Build a ring with `ketama()` or `new_ring()`.
  - `new_ring` falls back to fnv1a_64 when the method name is unknown.
- `overlordkit.bufio`: pooled buffers, a reader and a writer.
  - `Buffer` is a growable buffer. `get` and `put` hand buffers out of a size-class pool and take them back.
  - `Reader` parses what is already buffered with `read_line`, `read_slice` and `read_exact`. It raises `BufferFullError` when more data is needed, and only `read` performs I/O.
  - `Writer` queues data and sends it in a single `Conn.writev` call.
- `overlordkit.netconn`: `Conn` wraps a socket and applies its read and write timeouts on every call.
  - `dial_with_timeout` connects to `host:port`. When the dial fails it returns a `Conn` that raises `ConnClosedError`.
- `overlordkit.mockconn`: `MockConn` is an in-memory socket stand-in for tests.
  - It replays canned data and records what is written. Build one with `create_conn` or `create_downstream_conn`.
- `overlordkit.memcache`: `MemcacheConn.ping()` stores a probe key and expects `STORED`.
  - On any failure it reconnects and re-raises. A wrong answer raises `PingError`.
- `overlordkit.resp`: RESP encoding and decoding.
  - `Command` and `new_cmd` build commands. `Resp.decode` reads one reply from a binary stream.
  - `RedisConn` is a single redis connection with `ping`, `exec` and `close`. It redials after a failure.
- `overlordkit.log`: levelled logging through `StdoutHandler` and `FileHandler`.
  - `FileHandler` appends to `<path>.<YYYY-MM-DD>` and rolls over daily. Verbosity is gated with `v()`.
- `overlordkit.conv`: `btoi`, `update_to_lower` and `update_to_upper`.
- `overlordkit.dirs`: `is_exists`, `get_abs_dir` and `mkdir_all`.
- `overlordkit.types`: the `CacheType` enum. An unknown value raises `UnsupportedCacheTypeError`.
- `overlordkit.proc`: `Proc` starts a child process. `stop` kills it, and `wait` raises `CalledProcessError` on a non-zero exit.
- `overlordkit.systemd`: `run`, `start`, `stop`, `restart` and `daemon_reload` call `systemctl` with an allowed `ActionType` only.

## Install

```
pip install overlordkit
```

Install with the test extra to run the test suite:

```
pip install "overlordkit[test]"
```

## Examples

A consistent-hash ring:

```python
from overlordkit.ketama import new_ring

ring = new_ring("ketama", "fnv1a_64")
ring.init(["cache-a:11211", "cache-b:11211"], [1, 2])
node = ring.get_node(b"user:42")  # None when the ring is empty
```

Picking a redis cluster slot:

```python
from overlordkit.hashes import crc16

slot = crc16(b"user:42") % 16384
```

Logging:

```python
from overlordkit import log

log.init_handle(log.StdoutHandler())
log.infof("listening on %s", ":21211")
log.set_default_verbose_level(2)
log.v(2).info("printed because 2 <= the verbose level")
log.close()
```

`log.init(config)` builds handlers from a `Config`. Its `stdout` and `debug`
settings are always taken from `set_flags`. The flags also set `log` and
`log_vl` when those are given.

Building a RESP command:

```python
from overlordkit.resp import new_cmd

cmd = new_cmd("SET").arg("key", "value")
wire = str(cmd)  # "*3\r\n$3\r\nSET\r\n$3\r\nkey\r\n$5\r\nvalue\r\n"
```

## What this package does not do

It is a library only.

- It has no command-line programs.
- It does not run a proxy or a server.
- It has no client that works across a whole redis cluster. `RedisConn` talks to one node.
- It does not store cluster state or jobs anywhere.
- It exports no metrics.