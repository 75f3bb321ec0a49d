"""Cache types handled by the platform."""

from __future__ import annotations

from enum import Enum


class UnsupportedCacheTypeError(ValueError):
    """Raised for a cache type that is not supported."""

    def __init__(self, message: str = "unsupported cache type") -> None:
        super().__init__(message)


class CacheType(str, Enum):
    """Kind of cache: memcache or redis."""

    UNKNOWN = "unknown"
    MEMCACHE = "memcache"
    MEMCACHE_BINARY = "memcache_binary"
    REDIS = "redis"
    REDIS_CLUSTER = "redis_cluster"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value: object) -> "CacheType":
        raise UnsupportedCacheTypeError(f"unsupported cache type: {value!r}")