"""Binary encoding of the entries stored in log files.

An encoded entry looks like this::

    +-------+--------+----------+------------+-----------+-------+---------+
    |  crc  |  type  | key size | value size | expiresAt |  key  |  value  |
    +-------+--------+----------+------------+-----------+-------+---------+
    |------------------------HEADER----------------------|
            |--------------------------crc check---------------------------|

The crc is a little-endian CRC-32 (IEEE). The sizes and the expiry time are
zig-zag encoded signed varints.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass
from enum import IntEnum

#: crc32(4) + type(1) + key size(5) + value size(5) + expiredAt(10)
MAX_HEADER_SIZE = 25

_CRC_SIZE = 4
_MAX_VARINT_LEN64 = 10
_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1


class EntryType(IntEnum):
    """Kind of a log entry."""

    NORMAL = 0
    DELETE = 1
    LIST_META = 2


def _as_entry_type(value: int) -> int:
    try:
        return EntryType(value)
    except ValueError:
        return value


@dataclass
class LogEntry:
    """A record appended to a log file."""

    key: bytes = b""
    value: bytes = b""
    expired_at: int = 0
    type: int = EntryType.NORMAL


@dataclass
class EntryHeader:
    """The decoded fixed part of an encoded entry."""

    crc32: int = 0
    typ: int = EntryType.NORMAL
    k_size: int = 0
    v_size: int = 0
    expired_at: int = 0


def _put_varint(value: int) -> bytes:
    ux = ((value << 1) if value >= 0 else (((-value) << 1) - 1)) & _MASK64
    out = bytearray()
    while ux >= 0x80:
        out.append((ux & 0x7F) | 0x80)
        ux >>= 7
    out.append(ux)
    return bytes(out)


def _read_varint(buf: bytes, pos: int) -> tuple[int, int]:
    """Decode a signed varint at ``pos``; return (value, bytes used).

    A buffer that ends before the varint does yields (0, 0). A varint that
    overflows 64 bits raises ValueError.
    """
    ux = 0
    shift = 0
    for i, b in enumerate(buf[pos:]):
        if i == _MAX_VARINT_LEN64:
            raise ValueError("varint overflows a 64-bit integer")
        if b < 0x80:
            if i == _MAX_VARINT_LEN64 - 1 and b > 1:
                raise ValueError("varint overflows a 64-bit integer")
            ux |= b << shift
            return (ux >> 1) ^ -(ux & 1), i + 1
        ux |= (b & 0x7F) << shift
        shift += 7
    return 0, 0


def encode_entry(e: LogEntry | None) -> tuple[bytes, int]:
    """Encode ``e``; return the bytes and their length. None encodes to (b"", 0)."""
    if e is None:
        return b"", 0
    key = bytes(e.key or b"")
    value = bytes(e.value or b"")
    body = b"".join(
        (
            bytes([int(e.type) & 0xFF]),
            _put_varint(len(key)),
            _put_varint(len(value)),
            _put_varint(e.expired_at),
            key,
            value,
        )
    )
    crc = zlib.crc32(body) & _MASK32
    buf = crc.to_bytes(_CRC_SIZE, "little") + body
    return buf, len(buf)


def decode_header(buf: bytes | None) -> tuple[EntryHeader | None, int]:
    """Decode an entry header; return it with its encoded length.

    Returns (None, 0) when ``buf`` is too short to hold a header.
    """
    if buf is None or len(buf) <= _CRC_SIZE:
        return None, 0
    buf = bytes(buf)
    header = EntryHeader(
        crc32=int.from_bytes(buf[:_CRC_SIZE], "little"),
        typ=_as_entry_type(buf[_CRC_SIZE]),
    )
    index = _CRC_SIZE + 1
    k_size, n = _read_varint(buf, index)
    header.k_size = k_size & _MASK32
    index += n

    v_size, n = _read_varint(buf, index)
    header.v_size = v_size & _MASK32
    index += n

    header.expired_at, n = _read_varint(buf, index)
    return header, index + n


def get_entry_crc(e: LogEntry | None, h: bytes | None) -> int:
    """Return the CRC-32 over the header part ``h`` followed by key and value."""
    if e is None:
        return 0
    crc = zlib.crc32(bytes(h or b""))
    crc = zlib.crc32(bytes(e.key or b""), crc)
    crc = zlib.crc32(bytes(e.value or b""), crc)
    return crc & _MASK32