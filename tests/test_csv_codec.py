# tests/test_csv_codec.py

from datetime import datetime

import pytest

from registrar.core.entities import Course, Student
from registrar.core.exceptions import ValidationError
from registrar.persistence import csv_codec


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", "plain"),
        ("Doe, John", '"Doe, John"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
        ("", ""),
        (None, ""),
    ],
)
def test_escape_field(value, expected):
    assert csv_codec.escape_field(value) == expected


def test_parse_line_undoes_quoting():
    line = csv_codec.format_line(["S001", "Doe, John", 'the "best"', "", "x"])
    assert csv_codec.parse_line(line) == ["S001", "Doe, John", 'the "best"', "", "x"]


def test_parse_line_keeps_trailing_empty_field():
    assert csv_codec.parse_line("a,b,") == ["a", "b", ""]


def test_split_records_keeps_quoted_line_breaks():
    text = 'H1,H2\r\n1,"multi\nline"\n2,plain\n'
    assert list(csv_codec.split_records(text)) == ["H1,H2", '1,"multi\nline"', "2,plain"]


def test_student_line_round_trip():
    student = Student("S001", "Doe, John", "john@example.com", "2023CSE001", 2, "Computer Science",
                      created_at=datetime(2024, 1, 15, 10, 30))
    student.deactivate()

    line = csv_codec.student_to_line(student)
    assert line == ('S001,"Doe, John",john@example.com,2023CSE001,2,Computer Science,false,'
                    "2024-01-15T10:30:00")

    restored = csv_codec.line_to_student(line)
    assert (restored.id, restored.name, restored.email, restored.registration_number,
            restored.year, restored.department, restored.active) == (
        "S001", "Doe, John", "john@example.com", "2023CSE001", 2, "Computer Science", False)
    assert restored.created_at == datetime(2024, 1, 15, 10, 30)


def test_line_to_student_without_created_at():
    student = csv_codec.line_to_student("S002,Jane Smith,jane@example.com,2022MTH014,3,Mathematics,true")
    assert student.active
    assert student.year == 3


def test_line_to_student_rejects_short_or_invalid_rows():
    with pytest.raises(ValidationError):
        csv_codec.line_to_student("S001,John,john@example.com")
    with pytest.raises(ValueError):
        csv_codec.line_to_student("S001,John,john@example.com,2023CSE001,second,CS,true")
    with pytest.raises(ValidationError):
        csv_codec.line_to_student("S001,John,john@example.com,2023CSE001,9,CS,true")


def test_course_line_round_trip():
    course = Course("CS101", "CS101", "Intro", "Loops, \"functions\"\nand more", 3, "Computer Science",
                    "Fall", instructor_id="I001", max_enrollment=40)
    course.enroll_student("S001")

    line = csv_codec.course_to_line(course)
    fields = csv_codec.parse_line(line)
    assert fields[-1] == "1"

    restored = csv_codec.line_to_course(line)
    assert restored.description == "Loops, \"functions\"\nand more"
    assert restored.instructor_id == "I001"
    assert restored.max_enrollment == 40
    assert restored.current_enrollment == 0


def test_line_to_course_empty_instructor():
    course = csv_codec.line_to_course("MATH201,MATH201,Linear Algebra,,4,Mathematics,Fall,,50,0")
    assert course.instructor_id is None
    assert course.description == ""
