"""Log files: append-only disk files that hold encoded entries."""

from __future__ import annotations

import os
import threading
from enum import IntEnum

from rosedb import memmap
from rosedb.logentry import (
    MAX_HEADER_SIZE,
    LogEntry,
    decode_header,
    get_entry_crc,
)
from rosedb.options import IOType

INITIAL_LOG_FILE_ID = 0
FILE_PREFIX = "log."

_CRC_SIZE = 4


class FileType(IntEnum):
    """Data structure whose entries a log file holds."""

    STRS = 0
    LIST = 1
    HASH = 2
    SETS = 3
    ZSET = 4


FILE_NAMES = {
    FileType.STRS: "log.strs.",
    FileType.LIST: "log.list.",
    FileType.HASH: "log.hash.",
    FileType.SETS: "log.sets.",
    FileType.ZSET: "log.zset.",
}

FILE_TYPES = {
    "strs": FileType.STRS,
    "list": FileType.LIST,
    "hash": FileType.HASH,
    "sets": FileType.SETS,
    "zset": FileType.ZSET,
}


class LogFileError(Exception):
    """Base class of log file errors."""


class InvalidCrcError(LogFileError):
    """The checksum stored with an entry does not match its contents."""

    def __init__(self, message: str = "logfile: invalid crc") -> None:
        super().__init__(message)


class EndOfEntryError(LogFileError):
    """There are no more entries at the requested offset."""

    def __init__(self, message: str = "logfile: end of entry in log file") -> None:
        super().__init__(message)


class _FileIO:
    """Positional reads and writes through ordinary file calls."""

    def __init__(self, name: str, fsize: int) -> None:
        self.name = name
        fd = os.open(name, os.O_CREAT | os.O_RDWR, 0o644)
        self._file = os.fdopen(fd, "r+b")
        if os.fstat(fd).st_size < fsize:
            self._file.truncate(fsize)
        self._lock = threading.Lock()

    def read(self, n: int, offset: int) -> bytes:
        with self._lock:
            self._file.seek(offset)
            data = self._file.read(n)
        if len(data) < n:
            raise EOFError(f"read {len(data)} of {n} bytes at offset {offset}")
        return data

    def write(self, buf: bytes, offset: int) -> int:
        with self._lock:
            self._file.seek(offset)
            return self._file.write(buf)

    def sync(self) -> None:
        self._file.flush()
        os.fsync(self._file.fileno())

    def close(self) -> None:
        self._file.close()


class _MMapIO:
    """Positional reads and writes through a memory mapping of the file."""

    def __init__(self, name: str, fsize: int) -> None:
        self.name = name
        fd = os.open(name, os.O_CREAT | os.O_RDWR, 0o644)
        self._file = os.fdopen(fd, "r+b")
        try:
            self._buf = memmap.map_file(self._file, True, fsize)
        except BaseException:
            self._file.close()
            raise
        self._size = fsize

    def read(self, n: int, offset: int) -> bytes:
        if offset < 0 or offset + n > self._size:
            raise EOFError(f"cannot read {n} bytes at offset {offset}")
        return self._buf[offset : offset + n]

    def write(self, buf: bytes, offset: int) -> int:
        room = max(0, self._size - offset)
        n = min(room, len(buf))
        self._buf[offset : offset + n] = buf[:n]
        return n

    def sync(self) -> None:
        memmap.sync(self._buf)

    def close(self) -> None:
        memmap.sync(self._buf)
        memmap.unmap(self._buf)
        self._file.close()


def log_file_name(path: str | os.PathLike, fid: int, ftype: FileType | int) -> str:
    """Return the path of log file ``fid`` of type ``ftype`` under ``path``."""
    try:
        prefix = FILE_NAMES[FileType(ftype)]
    except ValueError:
        raise LogFileError("unsupported log file type") from None
    return os.path.join(os.fspath(path), f"{prefix}{fid:09d}")


class LogFile:
    """An append-only disk file through which entries are read and written."""

    def __init__(self, fid: int, io: _FileIO | _MMapIO, name: str) -> None:
        self.fid = fid
        self.name = name
        self.write_at = 0
        self._io = io
        self._write_lock = threading.Lock()

    def __enter__(self) -> LogFile:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def read_log_entry(self, offset: int) -> tuple[LogEntry, int]:
        """Read the entry at ``offset``; return it with its encoded size.

        Raises EndOfEntryError past the last entry, InvalidCrcError on a
        corrupt entry, and EOFError when ``offset`` lies beyond the file.
        """
        header_buf = self._io.read(MAX_HEADER_SIZE, offset)
        header, size = decode_header(header_buf)
        if header is None or (header.crc32 == 0 and header.k_size == 0 and header.v_size == 0):
            raise EndOfEntryError()

        entry = LogEntry(expired_at=header.expired_at, type=header.typ)
        k_size, v_size = header.k_size, header.v_size
        if k_size > 0 or v_size > 0:
            kv = self._io.read(k_size + v_size, offset + size)
            entry.key = kv[:k_size]
            entry.value = kv[k_size:]

        if get_entry_crc(entry, header_buf[_CRC_SIZE:size]) != header.crc32:
            raise InvalidCrcError()
        return entry, size + k_size + v_size

    def read(self, offset: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``offset``."""
        if size <= 0:
            return b""
        return self._io.read(size, offset)

    def write(self, buf: bytes | None) -> None:
        """Append ``buf`` at the end of the written data."""
        if not buf:
            return
        buf = bytes(buf)
        with self._write_lock:
            n = self._io.write(buf, self.write_at)
            if n != len(buf):
                raise LogFileError("logfile: write size is not equal to entry size")
            self.write_at += n

    def sync(self) -> None:
        """Commit the file's contents to stable storage."""
        self._io.sync()

    def close(self) -> None:
        """Close the file."""
        self._io.close()

    def delete(self) -> None:
        """Close the file and remove it from disk; this cannot be undone."""
        self._io.close()
        os.remove(self.name)


def open_log_file(
    path: str | os.PathLike,
    fid: int,
    fsize: int,
    ftype: FileType | int,
    io_type: IOType | int,
) -> LogFile:
    """Open or create log file ``fid``, at least ``fsize`` bytes long."""
    name = log_file_name(path, fid, ftype)
    try:
        io_kind = IOType(io_type)
    except ValueError:
        raise LogFileError("unsupported io type") from None
    if fsize <= 0:
        raise ValueError(f"log file size must be positive, got {fsize}")
    if io_kind is IOType.FILE_IO:
        io: _FileIO | _MMapIO = _FileIO(name, fsize)
    else:
        io = _MMapIO(name, fsize)
    return LogFile(fid, io, name)