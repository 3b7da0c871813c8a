# rosedb

The storage layer of a log-structured key-value store. It is pure Python and has
no third-party dependencies.

## Modules

### `rosedb.options`

- `DataIndexMode`: `KEY_VALUE_MEM_MODE` or `KEY_ONLY_MEM_MODE`.
- `IOType`: `FILE_IO` or `MMAP`.
- `Options`: a dataclass of settings. Its fields are `db_path`, `index_mode`,
  `io_type`, `sync`, `log_file_gc_interval`, `log_file_gc_ratio`,
  `log_file_size_threshold` and `discard_buffer_size`.
- `default_options(path)` returns the defaults:
  - key-only index mode;
  - file I/O;
  - no sync;
  - an 8 hour GC interval;
  - a GC ratio of 0.5;
  - a 512 MiB file size threshold;
  - a discard buffer size of 16384.

### `rosedb.logentry`

- `LogEntry(key, value, expired_at, type)` is an entry. `EntryType` has the members
  `NORMAL`, `DELETE` and `LIST_META`.
- `encode_entry(e)` returns `(bytes, length)`. The bytes are laid out as follows:
  - a little-endian CRC-32;
  - a type byte;
  - the key size, the value size and the expiry time, each as a zig-zag varint;
  - the key, then the value.

  `encode_entry(None)` returns `(b"", 0)`.
- `decode_header(buf)` returns `(EntryHeader, header_length)`. It returns
  `(None, 0)` when the buffer is too short.
- `get_entry_crc(e, h)` computes the checksum over a header part plus the key and
  the value.
- `MAX_HEADER_SIZE` is 25.

### `rosedb.logfile`

- `FileType`: `STRS`, `LIST`, `HASH`, `SETS` or `ZSET`.
- `log_file_name(path, fid, ftype)` builds names such as `log.strs.000000001`.
- `open_log_file(path, fid, fsize, ftype, io_type)` opens or creates a file of at
  least `fsize` bytes and returns a `LogFile`.
  - The directory must already exist.
  - A non-positive `fsize` raises `ValueError`.
  - An unknown file type or I/O type raises `LogFileError`.
- `LogFile` works as a context manager. It has:
  - `write(buf)`, which appends at `write_at` and advances it;
  - `read(offset, size)`;
  - `read_log_entry(offset)`, which returns `(entry, size)`;
  - `sync()`;
  - `close()`;
  - `delete()`, which closes the file and removes it.

  `read_log_entry` raises:
  - `EndOfEntryError` past the last written entry;
  - `InvalidCrcError` on a checksum mismatch;
  - `EOFError` when the read would go past the end of the file.

  Both error classes derive from `LogFileError`.

### `rosedb.memmap`

- `map_file(fd, writable, size)` maps an open file.
  - A writable mapping extends a short file.
  - A non-positive size raises `ValueError`.
- `unmap(buf)` releases the mapping.
- `advise(buf, readahead)` gives a hint to the OS. It does nothing where
  `madvise` is unavailable.
- `sync(buf)` flushes the mapping.

### `rosedb.hashing`

- `Murmur128` is a 128-bit MurmurHash3 (x64, seed 0). It has the methods `write`,
  `sum128`, `reset` and `encode_sum128`. `encode_sum128` returns both halves as
  consecutive uvarints.
- `rthash(b, seed)` returns a keyed 64-bit hash. For empty input it returns `seed`.
- `mem_hash(buf)` is `rthash` with a fixed seed.

### `rosedb.floatstr`

- `float64_to_str(val)` formats with the fewest digits that read back to the same
  value, and never uses exponent form. It gives `NaN`, `+Inf` and `-Inf` for the
  special values.
- `str_to_float64(val)` parses text into a float. It raises `ValueError` on bad
  syntax or an out-of-range value.

### `rosedb.fileutil`

- `path_exist(path)` tells whether the path exists.
- `copy_dir(src, dst)` copies a directory recursively.
- `copy_file(src, dst)` copies one file.

Both copy functions keep permissions.

### `rosedb.logger`

A levelled logger with optional ANSI colours.

- `Logger` and `new_logger(stream, prefix)` create loggers. Output goes to stderr
  when no stream is given.
- The levels are in `LogLevel` and the message kinds in `LogType`.
- The starting level comes from the `LOG_LEVEL` environment variable, and is
  `info` when the variable is unset.
- The module-level functions `debug`, `info`, `warn`, `error`, `fatal`,
  `panic`, `set_level`, `get_log_level`, `set_level_by_string` and
  `set_highlighting` act on a shared default logger.
- `fatal` logs the message and then exits.
- `panic` writes the message and then raises `RuntimeError`.

## Example

```python
import os
import tempfile

from rosedb.logentry import LogEntry, encode_entry
from rosedb.logfile import FileType, open_log_file
from rosedb.options import IOType

directory = tempfile.mkdtemp()
with open_log_file(directory, 0, 1 << 20, FileType.STRS, IOType.FILE_IO) as lf:
    buf, size = encode_entry(LogEntry(key=b"kv", value=b"hello"))
    offset = lf.write_at
    lf.write(buf)
    entry, entry_size = lf.read_log_entry(offset)
    assert entry.value == b"hello" and entry_size == size
os.remove(os.path.join(directory, "log.strs.000000000"))
```

## What this package does not do

There is no database object here. The package offers no commands to set, get or
delete keys, no sets or sorted sets, no index over the log files and no log-file
garbage collection. `Options` only describes settings, and nothing in the package
acts on them. There is no command-line program and no server.

## Running the tests

```
pip install -e .[test]
pytest
```