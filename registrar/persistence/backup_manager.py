"""
Timestamped snapshots of the data directory.

A backup is a directory named ``backup_<YYYY-MM-DD_HH-MM-SS>`` under the backup
root holding a copy of every regular file in the data root. The fixed-width
timestamp makes lexicographic order chronological.

Restoring copies the snapshot into a staging directory next to the data root
and then swaps it in by rename, so a failed copy never leaves the data root
half-restored.
"""

import logging
import os
import shutil
import tempfile
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from ..config import RegistrarConfig
from ..core.exceptions import RecordsIOError
from .file_utils import (
    calculate_directory_size,
    copy_tree_files,
    count_files_recursively,
    delete_directory_recursively,
)

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup_"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class BackupManager:
    """Creates, lists and restores data-directory snapshots."""

    def __init__(self, config: Optional[RegistrarConfig] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self._config = config or RegistrarConfig()
        self._data_directory = os.path.abspath(self._config.data_directory)
        self._backup_directory = os.path.abspath(self._config.backup_directory)
        self._clock = clock

    @property
    def data_directory(self) -> str:
        return self._data_directory

    @property
    def backup_directory(self) -> str:
        return self._backup_directory

    def create_backup(self) -> str:
        """Snapshot the data directory and return the new backup's path."""
        timestamp = self._clock().strftime(TIMESTAMP_FORMAT)
        backup_path = os.path.join(self._backup_directory, BACKUP_PREFIX + timestamp)

        try:
            os.makedirs(backup_path, exist_ok=True)
            os.makedirs(self._data_directory, exist_ok=True)
        except OSError as e:
            raise RecordsIOError(f"Failed to create backup directory {backup_path}: {e}") from e

        copied = copy_tree_files(self._data_directory, backup_path)
        logger.info("Backup created at: %s (%d files)", backup_path, copied)
        return backup_path

    def list_backups(self) -> List[str]:
        """Backup names, newest first."""
        if not os.path.isdir(self._backup_directory):
            return []

        names = [
            name for name in os.listdir(self._backup_directory)
            if name.startswith(BACKUP_PREFIX)
            and os.path.isdir(os.path.join(self._backup_directory, name))
        ]
        return sorted(names, reverse=True)

    def restore_from_backup(self, backup_name: str) -> None:
        """Replace the data directory's contents with the named backup."""
        backup_path = self._require_backup(backup_name)

        parent = os.path.dirname(self._data_directory)
        os.makedirs(parent, exist_ok=True)
        staging = tempfile.mkdtemp(prefix=".restore_", dir=parent)
        try:
            if os.path.isdir(self._data_directory):
                shutil.copymode(self._data_directory, staging)
            copy_tree_files(backup_path, staging)
        except Exception:
            delete_directory_recursively(staging)
            raise

        retired = None
        if os.path.exists(self._data_directory):
            retired = os.path.join(
                parent, f".{os.path.basename(self._data_directory)}.old_{uuid.uuid4().hex}"
            )
            try:
                os.rename(self._data_directory, retired)
            except OSError as e:
                delete_directory_recursively(staging)
                raise RecordsIOError(
                    f"Failed to move data directory aside for backup {backup_name}: {e}"
                ) from e

        try:
            os.rename(staging, self._data_directory)
        except OSError as e:
            delete_directory_recursively(staging)
            if retired is not None:
                try:
                    os.rename(retired, self._data_directory)
                except OSError as rollback_error:
                    raise RecordsIOError(
                        f"Failed to restore backup {backup_name}: {e}; "
                        f"previous data left at {retired}: {rollback_error}"
                    ) from rollback_error
            raise RecordsIOError(f"Failed to restore backup {backup_name}: {e}") from e

        if retired is not None:
            delete_directory_recursively(retired)

        logger.info("Data restored from backup: %s", backup_name)

    def get_backup_size(self, backup_name: str) -> int:
        """Total size in bytes of the files in a backup."""
        return calculate_directory_size(self._require_backup(backup_name))

    def count_backup_files(self, backup_name: str) -> int:
        return count_files_recursively(self._require_backup(backup_name))

    def _require_backup(self, backup_name: str) -> str:
        if not backup_name or os.path.basename(backup_name) != backup_name:
            raise RecordsIOError(f"Backup not found: {backup_name}")
        backup_path = os.path.join(self._backup_directory, backup_name)
        if not os.path.isdir(backup_path):
            raise RecordsIOError(f"Backup not found: {backup_name}")
        return backup_path
