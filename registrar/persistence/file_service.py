"""
CSV export and import of students and courses.
"""

import logging
import os
from typing import Callable, Iterable, List, Optional, TypeVar

from ..config import RegistrarConfig
from ..core.entities import Course, Student
from ..core.exceptions import RecordsIOError, RegistrarException
from . import csv_codec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FileService:
    """Reads and writes entity collections as CSV files in the data directory."""

    def __init__(self, config: Optional[RegistrarConfig] = None):
        self._config = config or RegistrarConfig()
        self._data_directory = self._config.data_directory

    @property
    def data_directory(self) -> str:
        return self._data_directory

    def resolve(self, filename: str) -> str:
        return os.path.join(self._data_directory, filename)

    def export_students_to_csv(self, students: Iterable[Student], filename: str) -> str:
        path = self._write_lines(
            filename,
            csv_codec.STUDENT_HEADER,
            (csv_codec.student_to_line(student) for student in students),
        )
        logger.info("Students exported to: %s", path)
        return path

    def import_students_from_csv(self, filename: str) -> List[Student]:
        return self._read_records(filename, csv_codec.line_to_student, "student")

    def export_courses_to_csv(self, courses: Iterable[Course], filename: str) -> str:
        path = self._write_lines(
            filename,
            csv_codec.COURSE_HEADER,
            (csv_codec.course_to_line(course) for course in courses),
        )
        logger.info("Courses exported to: %s", path)
        return path

    def import_courses_from_csv(self, filename: str) -> List[Course]:
        return self._read_records(filename, csv_codec.line_to_course, "course")

    def _write_lines(self, filename: str, header: str, lines: Iterable[str]) -> str:
        path = self.resolve(filename)
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(header + "\n")
                for line in lines:
                    f.write(line + "\n")
        except OSError as e:
            raise RecordsIOError(f"Failed to write {path}: {e}") from e
        return path

    def _read_records(self, filename: str, convert: Callable[[str], T], kind: str) -> List[T]:
        path = self.resolve(filename)
        if not os.path.isfile(path):
            raise RecordsIOError(f"File not found: {path}")

        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except OSError as e:
            raise RecordsIOError(f"Failed to read {path}: {e}") from e

        records = csv_codec.split_records(text)
        next(records, None)  # header

        entities: List[T] = []
        for record_num, line in enumerate(records, 2):
            if not line.strip():
                continue
            try:
                entities.append(convert(line))
            except (RegistrarException, ValueError) as e:
                logger.warning("Skipping malformed %s record %d: %s", kind, record_num, e)
        return entities
