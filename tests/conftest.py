# tests/conftest.py

import pytest

from registrar.config import RegistrarConfig
from registrar.core.entities import Course, Student
from registrar.persistence import BackupManager, FileService
from registrar.services import CourseCatalog, RecordsService


@pytest.fixture
def config(tmp_path):
    return RegistrarConfig(
        data_directory=str(tmp_path / "data"),
        backup_directory=str(tmp_path / "backups"),
    )


@pytest.fixture
def catalog(config):
    return CourseCatalog(config)


@pytest.fixture
def records_service(config, catalog):
    return RecordsService(config, catalog)


@pytest.fixture
def file_service(config):
    return FileService(config)


@pytest.fixture
def backup_manager(config):
    return BackupManager(config)


@pytest.fixture
def sample_student():
    return Student("S001", "John Doe", "john@example.com", "2023CSE001", 2, "Computer Science")


@pytest.fixture
def john(records_service):
    return records_service.create_student(
        "S001", "John Doe", "john@example.com", "2023CSE001", 2, "Computer Science"
    )


@pytest.fixture
def jane(records_service):
    return records_service.create_student(
        "S002", "Jane Smith", "jane@example.com", "2022MTH014", 3, "Mathematics"
    )


@pytest.fixture
def cs101():
    return Course("CS101", "CS101", "Intro to Programming", "Basics", 3, "Computer Science", "Fall")


@pytest.fixture
def make_course():
    def _make(course_id, credits=3, max_enrollment=50, department="Computer Science"):
        return Course(course_id, course_id, f"Course {course_id}", "", credits, department, "Fall",
                      max_enrollment=max_enrollment)
    return _make
