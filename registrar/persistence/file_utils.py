"""
Recursive file-system helpers used by the backup manager.
"""

import os
import shutil
from typing import Iterator, List

from ..core.exceptions import RecordsIOError


def iter_regular_files(root: str) -> Iterator[str]:
    """Yield paths of regular files under ``root``, relative to it, in sorted order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            full_path = os.path.join(dirpath, filename)
            if os.path.isfile(full_path):
                yield os.path.relpath(full_path, root)


def copy_tree_files(source: str, destination: str) -> int:
    """
    Copy every regular file under ``source`` into ``destination``.

    Relative paths are preserved and existing destination files are
    overwritten. Returns the number of files copied.
    """
    copied = 0
    for relative_path in iter_regular_files(source):
        src = os.path.join(source, relative_path)
        dst = os.path.join(destination, relative_path)
        try:
            os.makedirs(os.path.dirname(dst), exist_ok=True)
            shutil.copy2(src, dst)
        except OSError as e:
            raise RecordsIOError(f"Failed to copy {src} to {dst}: {e}") from e
        copied += 1
    return copied


def count_files_recursively(path: str) -> int:
    if not os.path.isdir(path):
        return 1 if os.path.exists(path) else 0
    return sum(1 for _ in iter_regular_files(path))


def calculate_directory_size(path: str) -> int:
    """Total size in bytes of the regular files under ``path``."""
    if not os.path.exists(path):
        return 0
    if not os.path.isdir(path):
        return os.path.getsize(path)
    return sum(os.path.getsize(os.path.join(path, rel)) for rel in iter_regular_files(path))


def find_files_by_extension(directory: str, extension: str) -> List[str]:
    if not os.path.isdir(directory):
        return []
    suffix = extension.lower()
    return [
        os.path.join(directory, rel)
        for rel in iter_regular_files(directory)
        if rel.lower().endswith(suffix)
    ]


def delete_directory_recursively(path: str) -> None:
    """Delete ``path`` and everything below it, files before their directories."""
    if not os.path.exists(path):
        return
    if not os.path.isdir(path) or os.path.islink(path):
        os.remove(path)
        return

    for dirpath, dirnames, filenames in os.walk(path, topdown=False):
        for filename in filenames:
            os.remove(os.path.join(dirpath, filename))
        for dirname in dirnames:
            full_path = os.path.join(dirpath, dirname)
            if os.path.islink(full_path):
                os.remove(full_path)
            else:
                os.rmdir(full_path)
    os.rmdir(path)
