import os

import pytest

from rosedb.logentry import EntryType, LogEntry, encode_entry
from rosedb.logfile import (
    EndOfEntryError,
    FileType,
    InvalidCrcError,
    LogFileError,
    log_file_name,
    open_log_file,
)
from rosedb.options import IOType

IO_TYPES = [IOType.FILE_IO, IOType.MMAP]


def _write_some_data(lf, data):
    offsets = []
    for chunk in data:
        offsets.append(lf.write_at)
        lf.write(chunk)
    return offsets


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_open_log_file_zero_size(tmp_path, io_type):
    with pytest.raises(ValueError):
        open_log_file(tmp_path, 0, 0, FileType.LIST, io_type)


def test_log_file_name(tmp_path):
    assert log_file_name(tmp_path, 7, FileType.ZSET) == os.path.join(
        str(tmp_path), "log.zset.000000007"
    )


def test_open_log_file_unsupported_types(tmp_path):
    with pytest.raises(LogFileError):
        open_log_file(tmp_path, 0, 100, 99, IOType.FILE_IO)
    with pytest.raises(LogFileError):
        open_log_file(tmp_path, 0, 100, FileType.LIST, 7)


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_write(tmp_path, io_type):
    with open_log_file(tmp_path, 1, 1 << 20, FileType.LIST, io_type) as lf:
        lf.write(None)
        assert lf.write_at == 0
        lf.write(b"")
        assert lf.write_at == 0
        lf.write(b"lotusdb")
        assert lf.write_at == 7
        lf.write(b"some data")
        assert lf.write_at == 16


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_read(tmp_path, io_type):
    data = [b"0", b"some data", b"some data 1", b"some data 2", b"some data 3", b"lotusdb"]
    with open_log_file(tmp_path, 1, 1 << 20, FileType.LIST, io_type) as lf:
        offsets = _write_some_data(lf, data)
        for offset, chunk in zip(offsets, data):
            assert lf.read(offset, len(chunk)) == chunk
        assert lf.read(0, 0) == b""


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_read_beyond_end(tmp_path, io_type):
    with open_log_file(tmp_path, 1, 100, FileType.LIST, io_type) as lf:
        with pytest.raises(EOFError):
            lf.read(95, 10)


def test_mmap_write_beyond_size(tmp_path):
    with open_log_file(tmp_path, 1, 8, FileType.LIST, IOType.MMAP) as lf:
        with pytest.raises(LogFileError):
            lf.write(b"0123456789")


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_read_log_entry(tmp_path, io_type):
    entries = [
        LogEntry(expired_at=123332, type=EntryType.NORMAL),
        LogEntry(expired_at=123332, type=EntryType.DELETE),
        LogEntry(key=b"", value=b"", expired_at=994332343, type=EntryType.DELETE),
        LogEntry(key=b"k1", value=b"", expired_at=7844332343),
        LogEntry(key=b"", value=b"lotusdb", expired_at=99400542343),
        LogEntry(key=b"k2", value=b"lotusdb", expired_at=8847333912),
        LogEntry(key=b"k3", value=b"some data", expired_at=8847333912, type=EntryType.DELETE),
    ]
    with open_log_file(tmp_path, 1, 1 << 20, FileType.STRS, io_type) as lf:
        vals = [encode_entry(e)[0] for e in entries]
        offsets = _write_some_data(lf, vals)
        for offset, entry, val in zip(offsets, entries, vals):
            got, size = lf.read_log_entry(offset)
            assert got == entry
            assert size == len(val)


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_read_log_entry_end_of_entries(tmp_path, io_type):
    with open_log_file(tmp_path, 1, 1 << 20, FileType.STRS, io_type) as lf:
        buf, size = encode_entry(LogEntry(key=b"k", value=b"v"))
        lf.write(buf)
        with pytest.raises(EndOfEntryError):
            lf.read_log_entry(size)


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_read_log_entry_invalid_crc(tmp_path, io_type):
    with open_log_file(tmp_path, 1, 1 << 20, FileType.STRS, io_type) as lf:
        buf, _ = encode_entry(LogEntry(key=b"k2", value=b"lotusdb"))
        corrupt = bytearray(buf)
        corrupt[-1] ^= 0x01
        lf.write(bytes(corrupt))
        with pytest.raises(InvalidCrcError):
            lf.read_log_entry(0)


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_sync(tmp_path, io_type):
    lf = open_log_file(tmp_path, 0, 100, FileType.HASH, io_type)
    try:
        lf.write(b"persisted")
        lf.sync()
        with open(lf.name, "rb") as fh:
            assert fh.read(9) == b"persisted"
    finally:
        lf.delete()


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_close_keeps_data(tmp_path, io_type):
    lf = open_log_file(tmp_path, 0, 100, FileType.SETS, io_type)
    lf.write(b"abc")
    lf.close()
    with open(lf.name, "rb") as fh:
        content = fh.read()
    assert len(content) == 100
    assert content[:3] == b"abc"


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_delete(tmp_path, io_type):
    lf = open_log_file(tmp_path, 0, 100, FileType.ZSET, io_type)
    assert os.path.basename(lf.name) == "log.zset.000000000"
    assert os.path.exists(lf.name)
    lf.delete()
    assert not os.path.exists(lf.name)
    assert sorted(os.listdir(tmp_path)) == []


@pytest.mark.parametrize("io_type", IO_TYPES)
def test_reopen_reads_existing_entry(tmp_path, io_type):
    entry = LogEntry(key=b"k", value=b"v", expired_at=5)
    buf, size = encode_entry(entry)
    with open_log_file(tmp_path, 3, 1 << 10, FileType.STRS, io_type) as lf:
        lf.write(buf)
    with open_log_file(tmp_path, 3, 1 << 10, FileType.STRS, io_type) as lf:
        assert lf.read_log_entry(0) == (entry, size)