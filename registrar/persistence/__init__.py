"""
Persistence module for CSV files and backup snapshots.
"""

from .backup_manager import BackupManager
from .file_service import FileService
from . import csv_codec, file_utils

__all__ = [
    "BackupManager",
    "FileService",
    "csv_codec",
    "file_utils",
]
