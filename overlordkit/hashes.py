"""Hash functions used to place keys on a ring."""

from __future__ import annotations

import hashlib
import zlib

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _make_crc16_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte << 8
        for _ in range(8):
            crc = ((crc << 1) ^ 0x1021) if crc & 0x8000 else (crc << 1)
        table.append(crc & 0xFFFF)
    return tuple(table)


_CRC16_TABLE = _make_crc16_table()


def crc16(key: bytes) -> int:
    """CRC16 (CCITT/XMODEM) of ``key``, as used for redis cluster slots."""
    crc = 0
    for c in key:
        crc = ((crc << 8) & 0xFFFF) ^ _CRC16_TABLE[((crc >> 8) ^ c) & 0xFF]
    return crc


def hash_crc16(key: bytes) -> int:
    """CRC16 table walk carried in a 32-bit accumulator."""
    crc = 0
    for c in key:
        crc = ((crc << 8) & _MASK32) ^ _CRC16_TABLE[((crc >> 8) ^ c) & 0xFF]
    return crc


def hash_crc32(key: bytes) -> int:
    """Bits 16..30 of the CRC32 of ``key``."""
    return (zlib.crc32(bytes(key)) >> 16) & 0x7FFF


def hash_crc32a(key: bytes) -> int:
    """Full CRC32 of ``key``."""
    return zlib.crc32(bytes(key)) & _MASK32


_FNV_PRIME64 = 1099511628211
_FNV_OFFSET64 = 14695981039346656037
_FNV_PRIME64_TW = _FNV_PRIME64 & 0x0000FFFF
_FNV_OFFSET64_TW = _FNV_OFFSET64 & 0xFFFFFFFF
_FNV_PRIME32 = 16777619
_FNV_OFFSET32 = 2166136261


def hash_fnv1a64(key: bytes) -> int:
    """FNV-1a using truncated 64-bit constants in 32-bit arithmetic."""
    value = _FNV_OFFSET64_TW
    for c in key:
        value ^= c
        value = (value * _FNV_PRIME64_TW) & _MASK32
    return value


def hash_fnv164(key: bytes) -> int:
    """Low 32 bits of 64-bit FNV-1."""
    value = _FNV_OFFSET64
    for c in key:
        value = (value * _FNV_PRIME64) & _MASK64
        value ^= c
    return value & _MASK32


def hash_fnv1a32(key: bytes) -> int:
    """32-bit FNV-1a."""
    value = _FNV_OFFSET32
    for c in key:
        value ^= c
        value = (value * _FNV_PRIME32) & _MASK32
    return value


def hash_fnv132(key: bytes) -> int:
    """32-bit FNV-1."""
    value = _FNV_OFFSET32
    for c in key:
        value = (value * _FNV_PRIME32) & _MASK32
        value ^= c
    return value


def _get16bits(key: bytes, offset: int) -> int:
    return key[offset] | (key[offset + 1] << 8)


def hash_hsieh(key: bytes) -> int:
    """Paul Hsieh's SuperFastHash."""
    key = bytes(key)
    if not key:
        return 0
    value = 0
    rem = len(key) & 3
    main_end = len(key) - rem
    for offset in range(0, main_end, 4):
        value = (value + _get16bits(key, offset)) & _MASK32
        tmp = ((_get16bits(key, offset + 2) << 11) & _MASK32) ^ value
        value = ((value << 16) & _MASK32) ^ tmp
        value = (value + (value >> 11)) & _MASK32

    if rem == 3:
        value = (value + _get16bits(key, main_end)) & _MASK32
        value ^= (value << 16) & _MASK32
        value ^= (key[main_end + 2] << 18) & _MASK32
        value = (value + (value >> 11)) & _MASK32
    elif rem == 2:
        value = (value + _get16bits(key, main_end)) & _MASK32
        value ^= (value << 11) & _MASK32
        value = (value + (value >> 17)) & _MASK32
    elif rem == 1:
        value = (value + key[main_end]) & _MASK32
        value ^= (value << 10) & _MASK32
        value = (value + (value >> 1)) & _MASK32

    value ^= (value << 3) & _MASK32
    value = (value + (value >> 5)) & _MASK32
    value ^= (value << 4) & _MASK32
    value = (value + (value >> 17)) & _MASK32
    value ^= (value << 25) & _MASK32
    value = (value + (value >> 6)) & _MASK32
    return value


def hash_one_on_time(key: bytes) -> int:
    """Bob Jenkins' one-at-a-time hash."""
    value = 0
    for c in key:
        value = (value + c) & _MASK32
        value = (value + (value << 10)) & _MASK32
        value ^= value >> 6
    value = (value + (value << 3)) & _MASK32
    value ^= value >> 11
    value = (value + (value << 15)) & _MASK32
    return value


def hash_md5(key: bytes) -> int:
    """First four bytes of the MD5 digest, little-endian."""
    digest = hashlib.md5(bytes(key)).digest()
    return int.from_bytes(digest[:4], "little")


def murmur_hash2(key: bytes, seed: int) -> int:
    """32-bit MurmurHash2 of ``key`` with ``seed``."""
    key = bytes(key)
    m = 0x5BD1E995
    r = 24
    length = len(key)
    value = (seed ^ length) & _MASK32
    rem = length & 3
    main_end = length - rem
    for offset in range(0, main_end, 4):
        k = int.from_bytes(key[offset:offset + 4], "little")
        k = (k * m) & _MASK32
        k ^= k >> r
        k = (k * m) & _MASK32
        value = (value * m) & _MASK32
        value ^= k

    if rem == 3:
        value ^= key[main_end + 2] << 16
    if rem >= 2:
        value ^= key[main_end + 1] << 8
    if rem >= 1:
        value ^= key[main_end]
        value = (value * m) & _MASK32

    value ^= value >> 13
    value = (value * m) & _MASK32
    value ^= value >> 15
    return value


def hash_murmur(key: bytes) -> int:
    """MurmurHash2 seeded with ``0xdeadbeef * len(key)``."""
    seed = (0xDEADBEEF * len(key)) & _MASK32
    return murmur_hash2(key, seed)