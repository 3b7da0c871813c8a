"""Small file-system helpers."""

from __future__ import annotations

import os
import shutil


def path_exist(path: str | os.PathLike) -> bool:
    """Return True if the file or directory at ``path`` exists."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def copy_dir(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Recursively copy directory ``src`` into ``dst``, keeping permissions."""
    src_mode = os.stat(src).st_mode
    os.makedirs(dst, mode=src_mode & 0o7777, exist_ok=True)
    with os.scandir(src) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            src_path = os.path.join(src, entry.name)
            dst_path = os.path.join(dst, entry.name)
            if entry.is_dir():
                copy_dir(src_path, dst_path)
            else:
                copy_file(src_path, dst_path)


def copy_file(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Copy a single file and give the copy the permissions of the original."""
    shutil.copyfile(src, dst)
    os.chmod(dst, os.stat(src).st_mode & 0o7777)