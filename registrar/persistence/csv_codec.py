"""
Delimited text codec for students and courses.

Fields containing a comma, a double quote or a line break are wrapped in double
quotes, with embedded quotes doubled. Decoding walks the text character by
character, toggling an "inside quotes" flag, so it accepts exactly what the
encoder produces, including quoted line breaks.
"""

from datetime import datetime
from typing import Iterator, List, Optional, Sequence

from ..core.entities import Course, Student
from ..core.exceptions import ValidationError

STUDENT_HEADER = "ID,Name,Email,RegistrationNumber,Year,Department,Active,CreatedAt"
COURSE_HEADER = ("CourseID,CourseCode,Title,Description,Credits,Department,Semester,"
                 "InstructorID,MaxEnrollment,CurrentEnrollment")

STUDENT_MIN_FIELDS = 7
COURSE_MIN_FIELDS = 9

QUOTE = '"'
DELIMITER = ","


def escape_field(value: Optional[str]) -> str:
    if value is None:
        return ""
    if DELIMITER in value or QUOTE in value or "\n" in value or "\r" in value:
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def format_line(fields: Sequence[Optional[str]]) -> str:
    return DELIMITER.join(escape_field(field) for field in fields)


def parse_line(line: str) -> List[str]:
    """Split one record into fields, undoing the quoting applied by ``escape_field``."""
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < len(line) and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current))
    return fields


def split_records(text: str) -> Iterator[str]:
    """Yield the records of ``text``, keeping line breaks that sit inside quotes."""
    current: List[str] = []
    in_quotes = False
    for char in text:
        if char == QUOTE:
            # a doubled quote toggles twice, leaving the state unchanged
            in_quotes = not in_quotes
        if char == "\n" and not in_quotes:
            record = "".join(current)
            yield record[:-1] if record.endswith("\r") else record
            current = []
            continue
        current.append(char)
    if current:
        yield "".join(current)


# Students

def student_to_line(student: Student) -> str:
    return format_line([
        student.id,
        student.name,
        student.email,
        student.registration_number,
        str(student.year),
        student.department,
        "true" if student.active else "false",
        student.created_at.isoformat(),
    ])


def line_to_student(line: str) -> Student:
    """Build a validated Student from one record; raises ValueError/ValidationError on bad input."""
    parts = parse_line(line)
    if len(parts) < STUDENT_MIN_FIELDS:
        raise ValidationError(f"Expected at least {STUDENT_MIN_FIELDS} fields, got {len(parts)}")

    created_at = None
    if len(parts) > STUDENT_MIN_FIELDS and parts[7].strip():
        created_at = datetime.fromisoformat(parts[7].strip())

    student = Student(
        student_id=parts[0],
        name=parts[1],
        email=parts[2],
        registration_number=parts[3],
        year=int(parts[4]),
        department=parts[5],
        created_at=created_at,
    )
    if parts[6].strip().lower() != "true":
        student.deactivate()
    return student


# Courses

def course_to_line(course: Course) -> str:
    return format_line([
        course.course_id,
        course.course_code,
        course.title,
        course.description,
        str(course.credits),
        course.department,
        course.semester,
        course.instructor_id or "",
        str(course.max_enrollment),
        str(course.current_enrollment),
    ])


def line_to_course(line: str) -> Course:
    """Build a validated Course from one record; enrolled student ids are not stored."""
    parts = parse_line(line)
    if len(parts) < COURSE_MIN_FIELDS:
        raise ValidationError(f"Expected at least {COURSE_MIN_FIELDS} fields, got {len(parts)}")

    return Course(
        course_id=parts[0],
        course_code=parts[1],
        title=parts[2],
        description=parts[3],
        credits=int(parts[4]),
        department=parts[5],
        semester=parts[6],
        instructor_id=parts[7].strip() or None,
        max_enrollment=int(parts[8]),
    )
