"""Memory-mapping helpers for log files."""

from __future__ import annotations

import mmap
import os
from typing import IO, Union

FileLike = Union[int, IO[bytes]]


def _fileno(fd: FileLike) -> int:
    return fd if isinstance(fd, int) else fd.fileno()


def map_file(fd: FileLike, writable: bool, size: int) -> mmap.mmap:
    """Map the first ``size`` bytes of an open file into memory.

    A file shorter than ``size`` is extended when the mapping is writable.
    """
    if size <= 0:
        raise ValueError(f"invalid mmap size: {size}")
    fileno = _fileno(fd)
    if writable and os.fstat(fileno).st_size < size:
        os.ftruncate(fileno, size)
    access = mmap.ACCESS_WRITE if writable else mmap.ACCESS_READ
    return mmap.mmap(fileno, size, access=access)


def unmap(buf: mmap.mmap) -> None:
    """Release a mapping made by ``map_file``."""
    if buf.closed:
        raise ValueError("mapping is already released")
    buf.close()


def advise(buf: mmap.mmap, readahead: bool) -> None:
    """Tell the OS whether pages will be read sequentially or at random."""
    if not hasattr(buf, "madvise"):
        return
    advice = mmap.MADV_NORMAL if readahead else mmap.MADV_RANDOM
    buf.madvise(advice)


def sync(buf: mmap.mmap) -> None:
    """Flush modified pages of the mapping to storage."""
    buf.flush()