"""Hash functions: a fast in-process hash and a 128-bit MurmurHash3."""

from __future__ import annotations

import hashlib

_MASK64 = (1 << 64) - 1
_MEM_HASH_SEED = 923


def rthash(b: bytes, seed: int) -> int:
    """Return a 64-bit hash of ``b`` keyed by ``seed``; empty input yields ``seed``."""
    if not b:
        return seed
    key = (seed & _MASK64).to_bytes(8, "little")
    digest = hashlib.blake2b(bytes(b), digest_size=8, key=key).digest()
    return int.from_bytes(digest, "little")


def mem_hash(buf: bytes) -> int:
    """Return a 64-bit hash of ``buf`` suitable for in-memory deduplication."""
    return rthash(buf, _MEM_HASH_SEED)


_C1 = 0x87C37B91114253D5
_C2 = 0x4CF5AD432745937F


def _rotl(x: int, r: int) -> int:
    return ((x << r) | (x >> (64 - r))) & _MASK64


def _fmix(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK64
    k ^= k >> 33
    return k


def _murmur3_x64_128(data: bytes, seed: int = 0) -> tuple[int, int]:
    h1 = h2 = seed & _MASK64
    length = len(data)
    nblocks = length // 16

    for block in range(nblocks):
        k1 = int.from_bytes(data[block * 16 : block * 16 + 8], "little")
        k2 = int.from_bytes(data[block * 16 + 8 : block * 16 + 16], "little")

        k1 = (k1 * _C1) & _MASK64
        k1 = _rotl(k1, 31)
        k1 = (k1 * _C2) & _MASK64
        h1 ^= k1
        h1 = _rotl(h1, 27)
        h1 = (h1 + h2) & _MASK64
        h1 = (h1 * 5 + 0x52DCE729) & _MASK64

        k2 = (k2 * _C2) & _MASK64
        k2 = _rotl(k2, 33)
        k2 = (k2 * _C1) & _MASK64
        h2 ^= k2
        h2 = _rotl(h2, 31)
        h2 = (h2 + h1) & _MASK64
        h2 = (h2 * 5 + 0x38495AB5) & _MASK64

    tail = data[nblocks * 16 :]
    if len(tail) > 8:
        k2 = int.from_bytes(tail[8:], "little")
        k2 = (k2 * _C2) & _MASK64
        k2 = _rotl(k2, 33)
        k2 = (k2 * _C1) & _MASK64
        h2 ^= k2
    if tail:
        k1 = int.from_bytes(tail[:8], "little")
        k1 = (k1 * _C1) & _MASK64
        k1 = _rotl(k1, 31)
        k1 = (k1 * _C2) & _MASK64
        h1 ^= k1

    h1 ^= length
    h2 ^= length
    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64
    h1 = _fmix(h1)
    h2 = _fmix(h2)
    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64
    return h1, h2


def _uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


class Murmur128:
    """Streaming 128-bit MurmurHash3 (x64 variant, seed 0)."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def write(self, p: bytes) -> None:
        """Feed more bytes into the hash."""
        self._buf += memoryview(p).tobytes()

    def sum128(self) -> tuple[int, int]:
        """Return the two 64-bit halves of the hash of everything written."""
        return _murmur3_x64_128(bytes(self._buf))

    def encode_sum128(self) -> bytes:
        """Return both halves of the hash encoded as consecutive uvarints."""
        s1, s2 = self.sum128()
        return _uvarint(s1) + _uvarint(s2)

    def reset(self) -> None:
        """Forget everything written so far."""
        self._buf.clear()