"""Ketama consistent hash ring."""

from __future__ import annotations

import bisect
import hashlib
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from overlordkit import hashes, log

_POINTS_PER_SERVER = 160
_MAX_HOST_LEN = 64
_POINTS_PER_HASH = 4

HashFunc = Callable[[bytes], int]


class HashMethod(str, Enum):
    """Names of the hash functions a ring may use."""

    FNV1A_64 = "fnv1a_64"
    FNV1A_32 = "fnv1a_32"
    FNV1_64 = "fnv1_64"
    FNV1_32 = "fnv1_32"
    CRC16 = "crc16"
    CRC32 = "crc32"
    CRC32A = "crc32a"
    MD5 = "md5"
    ONE_ON_TIME = "one_on_time"
    HSIEH = "hsieh"
    MURMUR = "murmur"


_METHODS: dict[str, HashFunc] = {
    HashMethod.FNV1A_64.value: hashes.hash_fnv1a64,
    HashMethod.FNV1_64.value: hashes.hash_fnv164,
    HashMethod.FNV1A_32.value: hashes.hash_fnv1a32,
    HashMethod.FNV1_32.value: hashes.hash_fnv132,
    HashMethod.CRC32A.value: hashes.hash_crc32a,
    HashMethod.CRC32.value: hashes.hash_crc32,
    HashMethod.CRC16.value: hashes.hash_crc16,
    HashMethod.MD5.value: hashes.hash_md5,
    HashMethod.ONE_ON_TIME.value: hashes.hash_one_on_time,
    HashMethod.HSIEH.value: hashes.hash_hsieh,
    HashMethod.MURMUR.value: hashes.hash_murmur,
}


@dataclass(frozen=True)
class _Ticks:
    hashes: tuple[int, ...]
    nodes: tuple[str, ...]


def _ketama_points(host: str) -> list[int]:
    digest = hashlib.md5(host.encode()).digest()
    return [
        int.from_bytes(digest[align * 4:align * 4 + 4], "little")
        for align in range(_POINTS_PER_HASH)
    ]


class HashRing:
    """Weighted consistent hash ring mapping keys to node names."""

    def __init__(self, hash_func: HashFunc = hashes.hash_fnv1a64) -> None:
        self.hash_func = hash_func
        self._nodes: list[str] = []
        self._spots: list[int] = []
        self._ticks = _Ticks((), ())
        self._lock = threading.Lock()

    @property
    def nodes(self) -> list[str]:
        return list(self._nodes)

    @property
    def spots(self) -> list[int]:
        return list(self._spots)

    def init(self, nodes: Sequence[str], spots: Sequence[int]) -> None:
        """Rebuild the ring from nodes and their weights."""
        with self._lock:
            self._build(list(nodes), list(spots))

    def _build(self, nodes: list[str], spots: list[int]) -> None:
        if len(nodes) != len(spots):
            raise ValueError("nodes length not equal spots length")
        self._nodes = nodes
        self._spots = spots
        total = sum(spots)
        count = len(nodes)
        ticks: list[tuple[int, str]] = []
        for node, spot in zip(nodes, spots):
            pct = spot / total if total else 0.0
            per_server = int((pct * _POINTS_PER_SERVER / 4 * count + 0.0000000001) * 4)
            for index in range(per_server // _POINTS_PER_HASH):
                host = f"{node}-{index}"[:_MAX_HOST_LEN]
                ticks.extend((value, node) for value in _ketama_points(host))
        ticks.sort(key=lambda tick: tick[0])
        self._ticks = _Ticks(
            tuple(value for value, _ in ticks),
            tuple(node for _, node in ticks),
        )

    def add_node(self, node: str, spot: int) -> None:
        """Add a node, or update the weight of an existing one."""
        with self._lock:
            nodes = list(self._nodes)
            spots = list(self._spots)
            if node in nodes:
                position = nodes.index(node)
                log.infof(
                    "add exist node %s update spot from %d to %d", node, spots[position], spot
                )
                spots = [spot if name == node else weight for name, weight in zip(nodes, spots)]
            else:
                nodes.append(node)
                spots.append(spot)
                log.infof("add node %s spot %d", node, spot)
            self._build(nodes, spots)

    def del_node(self, node: str) -> None:
        """Remove a node from the ring; unknown nodes are ignored."""
        with self._lock:
            if node not in self._nodes:
                return
            kept = [(name, weight) for name, weight in zip(self._nodes, self._spots) if name != node]
            log.info("ketama del node ", node)
            self._build([name for name, _ in kept], [weight for _, weight in kept])

    def get_node(self, key: bytes) -> str | None:
        """Return the node owning ``key``, or None when the ring is empty."""
        ticks = self._ticks
        if not ticks.hashes:
            return None
        value = self.hash_func(key)
        index = bisect.bisect_left(ticks.hashes, value)
        if index == len(ticks.hashes):
            index = 0
        return ticks.nodes[index]


def ketama() -> HashRing:
    """Create an empty ring hashing keys with fnv1a_64."""
    return HashRing()


def new_ring(des: str, method: str) -> HashRing:
    """Create a ring using the named hash method; unknown names use fnv1a_64."""
    name = method.value if isinstance(method, HashMethod) else method
    return HashRing(_METHODS.get(name, hashes.hash_fnv1a64))