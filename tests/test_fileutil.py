import os
import stat

import pytest

from rosedb.fileutil import copy_dir, copy_file, path_exist


@pytest.fixture
def layout(tmp_path):
    base = tmp_path / "path"
    existing_dir = base / "lotusdb-1"
    existing_dir.mkdir(parents=True)
    existing_file = base / "lotusdb-file1"
    existing_file.touch()
    return {
        "path exist": (existing_dir, True),
        "path not exist": (base / "lotusdb-2", False),
        "file exist": (existing_file, True),
        "file not exist": (base / "lotusdb-file2", False),
    }


@pytest.mark.parametrize("case", ["path exist", "path not exist", "file exist", "file not exist"])
def test_path_exist(layout, case):
    path, want = layout[case]
    assert path_exist(path) is want
    assert path_exist(str(path)) is want


def test_copy_dir(tmp_path):
    src = tmp_path / "test-copy-path"
    dst = tmp_path / "test-copy-path-dest"
    (src / "sub1").mkdir(parents=True)
    (src / "sub2").mkdir(parents=True)
    (src / "sub-file").write_bytes(b"content")
    (src / "sub1" / "nested").write_bytes(b"nested data")

    copy_dir(src, dst)

    assert (dst / "sub1").is_dir()
    assert (dst / "sub2").is_dir()
    assert (dst / "sub-file").read_bytes() == b"content"
    assert (dst / "sub1" / "nested").read_bytes() == b"nested data"


def test_copy_dir_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_dir(tmp_path / "nope", tmp_path / "dest")


def test_copy_file(tmp_path):
    folder = tmp_path / "path" / "lotusdb-1"
    folder.mkdir(parents=True)
    src = folder / "001.vlog"
    src.write_bytes(b"\x00\x01log data")
    os.chmod(src, 0o640)

    dst = folder / "001.vlog-bak"
    copy_file(src, dst)

    assert dst.read_bytes() == b"\x00\x01log data"
    assert stat.S_IMODE(os.stat(dst).st_mode) == stat.S_IMODE(os.stat(src).st_mode)


def test_copy_empty_file(tmp_path):
    src = tmp_path / "empty"
    src.touch()
    dst = tmp_path / "empty-copy"
    copy_file(src, dst)
    assert dst.read_bytes() == b""


def test_copy_file_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_file(tmp_path / "missing", tmp_path / "dst")