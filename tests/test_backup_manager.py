# tests/test_backup_manager.py

import os
import shutil
from datetime import datetime

import pytest

from registrar.core.exceptions import RecordsIOError
from registrar.persistence import BackupManager


def _write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)


def _read(path):
    with open(path, "rb") as f:
        return f.read()


class FakeClock:
    def __init__(self, *moments):
        self._moments = list(moments)

    def __call__(self):
        return self._moments.pop(0)


@pytest.fixture
def data_dir(config):
    root = config.data_directory
    _write(os.path.join(root, "students.csv"), b"ID,Name\nS001,John\n")
    _write(os.path.join(root, "nested", "courses.csv"), b"\x00\x01binary\xff")
    return root


def test_create_backup_copies_every_file(backup_manager, data_dir):
    path = backup_manager.create_backup()
    name = os.path.basename(path)

    assert name.startswith("backup_")
    assert backup_manager.count_backup_files(name) == 2
    assert backup_manager.get_backup_size(name) == len(b"ID,Name\nS001,John\n") + len(b"\x00\x01binary\xff")
    assert _read(os.path.join(path, "nested", "courses.csv")) == b"\x00\x01binary\xff"


def test_restore_is_byte_for_byte(backup_manager, data_dir):
    name = os.path.basename(backup_manager.create_backup())

    _write(os.path.join(data_dir, "students.csv"), b"changed")
    _write(os.path.join(data_dir, "extra.txt"), b"not in backup")
    os.remove(os.path.join(data_dir, "nested", "courses.csv"))

    backup_manager.restore_from_backup(name)

    assert _read(os.path.join(data_dir, "students.csv")) == b"ID,Name\nS001,John\n"
    assert _read(os.path.join(data_dir, "nested", "courses.csv")) == b"\x00\x01binary\xff"
    assert not os.path.exists(os.path.join(data_dir, "extra.txt"))
    leftovers = [n for n in os.listdir(os.path.dirname(data_dir)) if n.startswith(".")]
    assert leftovers == []


def test_restore_when_data_directory_is_gone(backup_manager, data_dir):
    name = os.path.basename(backup_manager.create_backup())
    shutil.rmtree(data_dir)

    backup_manager.restore_from_backup(name)

    assert _read(os.path.join(data_dir, "students.csv")) == b"ID,Name\nS001,John\n"


def test_list_backups_newest_first(config, data_dir):
    clock = FakeClock(
        datetime(2024, 1, 1, 9, 0, 0),
        datetime(2024, 3, 5, 12, 30, 15),
        datetime(2024, 2, 1, 0, 0, 0),
    )
    manager = BackupManager(config, clock=clock)
    for _ in range(3):
        manager.create_backup()

    assert manager.list_backups() == [
        "backup_2024-03-05_12-30-15",
        "backup_2024-02-01_00-00-00",
        "backup_2024-01-01_09-00-00",
    ]


def test_list_backups_without_backup_root(backup_manager):
    assert backup_manager.list_backups() == []


@pytest.mark.parametrize("name", ["backup_1999-01-01_00-00-00", "", "../data"])
def test_missing_backup(backup_manager, data_dir, name):
    with pytest.raises(RecordsIOError):
        backup_manager.restore_from_backup(name)
    with pytest.raises(RecordsIOError):
        backup_manager.get_backup_size(name)
    assert _read(os.path.join(data_dir, "students.csv")) == b"ID,Name\nS001,John\n"


def test_restore_reports_typed_error_when_data_cannot_move(backup_manager, data_dir, monkeypatch):
    name = os.path.basename(backup_manager.create_backup())
    _write(os.path.join(data_dir, "students.csv"), b"current")

    def failing_rename(src, dst):
        raise OSError("device busy")

    monkeypatch.setattr(os, "rename", failing_rename)

    with pytest.raises(RecordsIOError):
        backup_manager.restore_from_backup(name)

    assert _read(os.path.join(data_dir, "students.csv")) == b"current"
    leftovers = [n for n in os.listdir(os.path.dirname(data_dir)) if n.startswith(".")]
    assert leftovers == []


def test_restore_puts_data_back_when_swap_fails(backup_manager, data_dir, monkeypatch):
    name = os.path.basename(backup_manager.create_backup())
    _write(os.path.join(data_dir, "students.csv"), b"current")
    real_rename = os.rename

    def rename(src, dst):
        if os.path.basename(src).startswith(".restore_"):
            raise OSError("cross-device link")
        real_rename(src, dst)

    monkeypatch.setattr(os, "rename", rename)

    with pytest.raises(RecordsIOError):
        backup_manager.restore_from_backup(name)

    assert _read(os.path.join(data_dir, "students.csv")) == b"current"
    leftovers = [n for n in os.listdir(os.path.dirname(data_dir)) if n.startswith(".")]
    assert leftovers == []
