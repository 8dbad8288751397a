"""A tiny 32-bit Bloom filter keyed by XXH64, used to remember downloaded files."""

from __future__ import annotations

import functools

_MASK64 = 0xFFFFFFFFFFFFFFFF
_MASK32 = 0xFFFFFFFF

_P1 = 11400714785074694791
_P2 = 14029467366897019727
_P3 = 1609587929392839161
_P4 = 9650029242287828579
_P5 = 2870177450012600261

_FILTER_BITS = 32


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (64 - bits))) & _MASK64


def _round(acc: int, lane: int) -> int:
    acc = (acc + lane * _P2) & _MASK64
    acc = _rotl(acc, 31)
    return (acc * _P1) & _MASK64


def _merge_round(acc: int, lane: int) -> int:
    acc ^= _round(0, lane)
    return (acc * _P1 + _P4) & _MASK64


def _u64(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset:offset + 8], "little")


def _u32(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset:offset + 4], "little")


def xxhash64(data: bytes | str, seed: int = 0) -> int:
    """Return the 64-bit XXH64 digest of ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    data = bytes(data)
    length = len(data)
    seed &= _MASK64
    offset = 0

    if length >= 32:
        v1 = (seed + _P1 + _P2) & _MASK64
        v2 = (seed + _P2) & _MASK64
        v3 = seed
        v4 = (seed - _P1) & _MASK64
        limit = length - 32
        while offset <= limit:
            v1 = _round(v1, _u64(data, offset))
            v2 = _round(v2, _u64(data, offset + 8))
            v3 = _round(v3, _u64(data, offset + 16))
            v4 = _round(v4, _u64(data, offset + 24))
            offset += 32
        acc = (_rotl(v1, 1) + _rotl(v2, 7) + _rotl(v3, 12) + _rotl(v4, 18)) & _MASK64
        for lane in (v1, v2, v3, v4):
            acc = _merge_round(acc, lane)
    else:
        acc = (seed + _P5) & _MASK64

    acc = (acc + length) & _MASK64

    while offset + 8 <= length:
        acc ^= _round(0, _u64(data, offset))
        acc = (_rotl(acc, 27) * _P1 + _P4) & _MASK64
        offset += 8

    if offset + 4 <= length:
        acc ^= (_u32(data, offset) * _P1) & _MASK64
        acc = (_rotl(acc, 23) * _P2 + _P3) & _MASK64
        offset += 4

    for byte in data[offset:]:
        acc ^= (byte * _P5) & _MASK64
        acc = (_rotl(acc, 11) * _P1) & _MASK64

    acc ^= acc >> 33
    acc = (acc * _P2) & _MASK64
    acc ^= acc >> 29
    acc = (acc * _P3) & _MASK64
    acc ^= acc >> 32
    return acc


class BloomFilter:
    """A Bloom filter packed into a single 32-bit word."""

    def __init__(self, k: int = 3) -> None:
        self.k = k
        self.bits = 0

    def hashes(self, value: bytes | str) -> list[int]:
        """Return the ``k`` bit positions that ``value`` maps to."""
        digest = xxhash64(value)
        h1 = digest & _MASK32
        h2 = (digest >> 32) & _MASK32
        return [((h1 + h2 * i) & _MASK32) % _FILTER_BITS for i in range(self.k)]

    def add(self, value: bytes | str) -> None:
        """Record ``value`` in the filter."""
        for position in self.hashes(value):
            self.bits |= 1 << position

    def contains(self, value: bytes | str) -> bool:
        """Return whether ``value`` may have been added."""
        return all(self.bits & (1 << position) for position in self.hashes(value))

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (bytes, str)):
            return False
        return self.contains(value)


@functools.lru_cache(maxsize=None)
def get_filter() -> BloomFilter:
    """Return the process-wide filter."""
    return BloomFilter(3)