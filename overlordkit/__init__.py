"""Helpers for cache cluster tooling: hashing, a ketama ring, buffered I/O, logging, RESP and memcache clients."""

__version__ = "0.1.0"