# tests/test_file_service.py

import logging
import os

import pytest

from registrar.core.entities import Student
from registrar.core.exceptions import RecordsIOError
from registrar.persistence import csv_codec


def _student_tuple(student):
    return (student.id, student.name, student.email, student.registration_number,
            student.year, student.department, student.active)


def test_student_export_import_round_trip(file_service, john, jane):
    jane.deactivate()
    tricky = Student("S003", 'Carol "CJ" Davis, Jr.', "carol@example.com", "2024CSE027", 1,
                     "Computer Science")

    path = file_service.export_students_to_csv([john, jane, tricky], "students.csv")

    assert path == os.path.join(file_service.data_directory, "students.csv")
    with open(path, encoding="utf-8") as f:
        assert f.readline().rstrip("\n") == csv_codec.STUDENT_HEADER

    imported = file_service.import_students_from_csv("students.csv")
    assert [_student_tuple(s) for s in imported] == [
        _student_tuple(s) for s in (john, jane, tricky)
    ]


def test_course_export_import_round_trip(file_service, make_course):
    courses = [make_course("CS101", credits=4, max_enrollment=30), make_course("MATH201")]

    file_service.export_courses_to_csv(courses, "courses.csv")
    imported = file_service.import_courses_from_csv("courses.csv")

    assert [(c.course_id, c.credits, c.max_enrollment) for c in imported] == [
        ("CS101", 4, 30), ("MATH201", 3, 50)
    ]


def test_malformed_rows_are_skipped(file_service, caplog):
    os.makedirs(file_service.data_directory, exist_ok=True)
    with open(file_service.resolve("students.csv"), "w", encoding="utf-8") as f:
        f.write(csv_codec.STUDENT_HEADER + "\n")
        f.write("S001,John Doe,john@example.com,2023CSE001,2,Computer Science,true\n")
        f.write("S002,Broken,not-an-email,2022MTH014,3,Mathematics,true\n")
        f.write("\n")
        f.write("S003,Short\n")
        f.write("S004,Dana,dana@example.com,2021PHY004,x,Physics,true\n")

    with caplog.at_level(logging.WARNING):
        imported = file_service.import_students_from_csv("students.csv")

    assert [s.id for s in imported] == ["S001"]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 3
    assert "record 3" in warnings[0].getMessage()


def test_import_missing_file(file_service):
    with pytest.raises(RecordsIOError) as excinfo:
        file_service.import_students_from_csv("missing.csv")
    assert isinstance(excinfo.value, OSError)
    assert "File not found" in str(excinfo.value)


def test_export_creates_data_directory(file_service):
    assert not os.path.exists(file_service.data_directory)
    file_service.export_students_to_csv([], "students.csv")
    assert file_service.import_students_from_csv("students.csv") == []
