"""Storage layer of a log-structured key-value store: options, log entries,
log files, memory maps, hashing, float formatting, file helpers and logging."""

__version__ = "0.1.0"

__all__ = [
    "fileutil",
    "floatstr",
    "hashing",
    "logentry",
    "logfile",
    "logger",
    "memmap",
    "options",
]