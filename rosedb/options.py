"""Options that control how a database is opened."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import IntEnum


class DataIndexMode(IntEnum):
    """Where the key/value index keeps its data."""

    #: Keys and values are both kept in memory; reads never touch the disk.
    KEY_VALUE_MEM_MODE = 0
    #: Only keys are kept in memory; values are read from the log files.
    KEY_ONLY_MEM_MODE = 1


class IOType(IntEnum):
    """How log files are read and written."""

    FILE_IO = 0
    MMAP = 1


@dataclass
class Options:
    """Settings for opening a database.

    ``log_file_size_threshold`` must keep the value used on first start-up.
    """

    db_path: str
    index_mode: DataIndexMode = DataIndexMode.KEY_ONLY_MEM_MODE
    io_type: IOType = IOType.FILE_IO
    sync: bool = False
    log_file_gc_interval: timedelta = field(default_factory=lambda: timedelta(hours=8))
    log_file_gc_ratio: float = 0.5
    log_file_size_threshold: int = 512 << 20
    discard_buffer_size: int = 4 << 12


def default_options(path: str) -> Options:
    """Return the default options for a database stored at ``path``."""
    return Options(db_path=path)