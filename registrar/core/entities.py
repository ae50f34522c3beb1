"""
Core entities for the Registrar records engine.

Students and instructors do not share a base class. Both compose a
``PersonProfile`` for identity and contact details and implement the ``Role``
interface for polymorphic display. Courses and students refer to each other by
id only; keeping both sides consistent is the job of the service that mutates
them.
"""

import uuid
from abc import ABC
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Set

from .enums import Grade, PersonType
from .exceptions import NotEnrolledError, ValidationError
from .interfaces import Role
from .validation import (
    require_credits,
    require_email,
    require_registration_number,
    require_text,
    require_year,
)

DEFAULT_MAX_ENROLLMENT = 50


class AbstractEntity(ABC):
    """Base entity carrying creation and last-update timestamps."""

    def __init__(self, created_at: Optional[datetime] = None):
        self._created_at = created_at or datetime.now()
        self._updated_at = self._created_at

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        """Get last update timestamp."""
        return self._updated_at

    def _touch(self) -> None:
        self._updated_at = datetime.now()


class PersonProfile:
    """Identity and contact details shared by every person role."""

    def __init__(self, person_id: str, name: str, email: str):
        self._id = require_text(person_id, "ID").strip()
        self._name = require_text(name, "Name")
        self._email = require_email(email)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = require_text(name, "Name")

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, email: str) -> None:
        self._email = require_email(email)


class _Person(AbstractEntity, Role):
    """Delegates identity fields to a composed PersonProfile."""

    def __init__(self, person_id: str, name: str, email: str, created_at: Optional[datetime] = None):
        super().__init__(created_at)
        self._profile = PersonProfile(person_id, name, email)

    @property
    def profile(self) -> PersonProfile:
        return self._profile

    @property
    def id(self) -> str:
        return self._profile.id

    @property
    def name(self) -> str:
        return self._profile.name

    @name.setter
    def name(self, name: str) -> None:
        self._profile.name = name
        self._touch()

    @property
    def email(self) -> str:
        return self._profile.email

    @email.setter
    def email(self, email: str) -> None:
        self._profile.email = email
        self._touch()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


class Student(_Person):
    """Student entity with enrollment and grade tracking."""

    def __init__(self, student_id: str, name: str, email: str, registration_number: str,
                 year: int, department: str, created_at: Optional[datetime] = None):
        super().__init__(student_id, name, email, created_at)
        self._registration_number = require_registration_number(registration_number)
        self._year = require_year(year)
        self._department = require_text(department, "Department")
        self._active = True
        self._enrolled_courses: Set[str] = set()
        self._grades: Dict[str, Grade] = {}

    @property
    def person_type(self) -> PersonType:
        return PersonType.STUDENT

    def display_info(self) -> str:
        return (f"Student: {self.name} ({self._registration_number}) - Year {self._year}, "
                f"{self._department} - Status: {'Active' if self._active else 'Inactive'}")

    @property
    def registration_number(self) -> str:
        return self._registration_number

    @property
    def year(self) -> int:
        return self._year

    @year.setter
    def year(self, year: int) -> None:
        self._year = require_year(year)
        self._touch()

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, department: str) -> None:
        self._department = require_text(department, "Department")
        self._touch()

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        """Mark the student as active."""
        self._active = True
        self._touch()

    def deactivate(self) -> None:
        """Soft-delete the student."""
        self._active = False
        self._touch()

    # Enrollment

    @property
    def enrolled_courses(self) -> FrozenSet[str]:
        return frozenset(self._enrolled_courses)

    def enroll_in_course(self, course_id: str) -> None:
        """Add a course id to the student's enrollment set."""
        self._enrolled_courses.add(require_text(course_id, "Course ID"))
        self._touch()

    def unenroll_from_course(self, course_id: str) -> None:
        """Drop a course and any grade recorded for it."""
        self._enrolled_courses.discard(course_id)
        self._grades.pop(course_id, None)
        self._touch()

    def is_enrolled_in(self, course_id: str) -> bool:
        return course_id in self._enrolled_courses

    # Grades

    @property
    def grades(self) -> Mapping[str, Grade]:
        return MappingProxyType(self._grades)

    def set_grade(self, course_id: str, grade: Grade) -> None:
        """Record a grade for an enrolled course."""
        if course_id not in self._enrolled_courses:
            raise NotEnrolledError(f"Student {self.id} is not enrolled in course: {course_id}")
        if not isinstance(grade, Grade):
            raise ValidationError(f"Invalid grade: {grade!r}")
        self._grades[course_id] = grade
        self._touch()

    def get_grade(self, course_id: str) -> Optional[Grade]:
        return self._grades.get(course_id)

    def calculate_gpa(self) -> float:
        """Average grade points over graded courses; 0.0 when nothing is graded."""
        if not self._grades:
            return 0.0
        return sum(grade.grade_points for grade in self._grades.values()) / len(self._grades)

    def get_passed_courses(self) -> FrozenSet[str]:
        return frozenset(course_id for course_id, grade in self._grades.items() if grade.is_passing)

    def __repr__(self) -> str:
        return (f"Student(id={self.id!r}, name={self.name!r}, reg_num={self._registration_number!r}, "
                f"year={self._year}, dept={self._department!r}, active={self._active}, "
                f"courses={len(self._enrolled_courses)})")


class Instructor(_Person):
    """Instructor entity with course assignments."""

    def __init__(self, instructor_id: str, name: str, email: str, employee_id: str,
                 department: str, specialization: Optional[str] = None,
                 created_at: Optional[datetime] = None):
        super().__init__(instructor_id, name, email, created_at)
        self._employee_id = require_text(employee_id, "Employee ID")
        self._department = require_text(department, "Department")
        self._specialization = specialization
        self._assigned_courses: Set[str] = set()

    @property
    def person_type(self) -> PersonType:
        return PersonType.INSTRUCTOR

    def display_info(self) -> str:
        return (f"Instructor: {self.name} ({self._employee_id}) - {self._department} Department - "
                f"Specialization: {self._specialization or 'None'} - Courses: {self.course_load}")

    @property
    def employee_id(self) -> str:
        return self._employee_id

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, department: str) -> None:
        self._department = require_text(department, "Department")
        self._touch()

    @property
    def specialization(self) -> Optional[str]:
        return self._specialization

    @specialization.setter
    def specialization(self, specialization: Optional[str]) -> None:
        self._specialization = specialization
        self._touch()

    @property
    def assigned_courses(self) -> FrozenSet[str]:
        return frozenset(self._assigned_courses)

    @property
    def course_load(self) -> int:
        return len(self._assigned_courses)

    def assign_course(self, course_id: str) -> None:
        """Add a course to teach."""
        self._assigned_courses.add(require_text(course_id, "Course ID"))
        self._touch()

    def unassign_course(self, course_id: str) -> None:
        """Remove a course."""
        self._assigned_courses.discard(course_id)
        self._touch()

    def is_assigned_to(self, course_id: str) -> bool:
        return course_id in self._assigned_courses

    def __repr__(self) -> str:
        return (f"Instructor(id={self.id!r}, name={self.name!r}, emp_id={self._employee_id!r}, "
                f"dept={self._department!r}, courses={self.course_load})")


class Course(AbstractEntity):
    """Course entity with a capped set of enrolled student ids."""

    def __init__(self, course_id: str, course_code: str, title: str, description: Optional[str],
                 credits: int, department: str, semester: str,
                 instructor_id: Optional[str] = None,
                 max_enrollment: int = DEFAULT_MAX_ENROLLMENT,
                 created_at: Optional[datetime] = None):
        super().__init__(created_at)
        self._course_id = require_text(course_id, "Course ID").strip()
        self._course_code = require_text(course_code, "Course code")
        self._title = require_text(title, "Title")
        self._description = description or ""
        self._credits = require_credits(credits)
        self._department = require_text(department, "Department")
        self._semester = require_text(semester, "Semester")
        self._instructor_id = instructor_id or None
        self._max_enrollment = self._check_max_enrollment(max_enrollment, 0)
        self._prerequisites: Set[str] = set()
        self._enrolled_students: Set[str] = set()

    @staticmethod
    def _check_max_enrollment(max_enrollment: Any, current: int) -> int:
        if not isinstance(max_enrollment, int) or isinstance(max_enrollment, bool) or max_enrollment <= 0:
            raise ValidationError("Max enrollment must be positive")
        if max_enrollment < current:
            raise ValidationError(
                f"Max enrollment {max_enrollment} is below current enrollment {current}"
            )
        return max_enrollment

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def course_code(self) -> str:
        return self._course_code

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, title: str) -> None:
        self._title = require_text(title, "Title")
        self._touch()

    @property
    def description(self) -> str:
        return self._description

    @description.setter
    def description(self, description: Optional[str]) -> None:
        self._description = description or ""
        self._touch()

    @property
    def credits(self) -> int:
        return self._credits

    @credits.setter
    def credits(self, credits: int) -> None:
        self._credits = require_credits(credits)
        self._touch()

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, department: str) -> None:
        self._department = require_text(department, "Department")
        self._touch()

    @property
    def semester(self) -> str:
        return self._semester

    @semester.setter
    def semester(self, semester: str) -> None:
        self._semester = require_text(semester, "Semester")
        self._touch()

    @property
    def instructor_id(self) -> Optional[str]:
        return self._instructor_id

    @instructor_id.setter
    def instructor_id(self, instructor_id: Optional[str]) -> None:
        self._instructor_id = instructor_id or None
        self._touch()

    @property
    def max_enrollment(self) -> int:
        return self._max_enrollment

    @max_enrollment.setter
    def max_enrollment(self, max_enrollment: int) -> None:
        self._max_enrollment = self._check_max_enrollment(max_enrollment, len(self._enrolled_students))
        self._touch()

    # Prerequisites

    @property
    def prerequisites(self) -> FrozenSet[str]:
        return frozenset(self._prerequisites)

    def add_prerequisite(self, course_id: str) -> None:
        self._prerequisites.add(require_text(course_id, "Prerequisite course ID"))
        self._touch()

    def remove_prerequisite(self, course_id: str) -> None:
        self._prerequisites.discard(course_id)
        self._touch()

    def has_prerequisite(self, course_id: str) -> bool:
        return course_id in self._prerequisites

    # Enrollment

    @property
    def enrolled_students(self) -> FrozenSet[str]:
        return frozenset(self._enrolled_students)

    def enroll_student(self, student_id: str) -> bool:
        """Add a student id; returns False without changing anything when the course is full."""
        if self.is_full:
            return False
        if student_id in self._enrolled_students:
            return False
        self._enrolled_students.add(student_id)
        self._touch()
        return True

    def unenroll_student(self, student_id: str) -> None:
        if student_id in self._enrolled_students:
            self._enrolled_students.remove(student_id)
            self._touch()

    def is_student_enrolled(self, student_id: str) -> bool:
        return student_id in self._enrolled_students

    @property
    def current_enrollment(self) -> int:
        return len(self._enrolled_students)

    @property
    def available_seats(self) -> int:
        return self._max_enrollment - len(self._enrolled_students)

    @property
    def is_full(self) -> bool:
        return len(self._enrolled_students) >= self._max_enrollment

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Course):
            return NotImplemented
        return self._course_id == other._course_id

    def __hash__(self) -> int:
        return hash(self._course_id)

    def __repr__(self) -> str:
        return (f"Course(id={self._course_id!r}, code={self._course_code!r}, title={self._title!r}, "
                f"credits={self._credits}, dept={self._department!r}, sem={self._semester!r}, "
                f"enrollment={self.current_enrollment}/{self._max_enrollment})")


class Enrollment:
    """A student's enrollment in a course, completed once graded."""

    def __init__(self, student_id: str, course_id: str, semester: str,
                 enrollment_id: Optional[str] = None,
                 enrollment_date: Optional[datetime] = None):
        self._enrollment_id = require_text(enrollment_id or str(uuid.uuid4()), "Enrollment ID")
        self._student_id = require_text(student_id, "Student ID")
        self._course_id = require_text(course_id, "Course ID")
        self._semester = require_text(semester, "Semester")
        self._enrollment_date = enrollment_date or datetime.now()
        self._grade: Optional[Grade] = None
        self._completed = False

    @property
    def enrollment_id(self) -> str:
        return self._enrollment_id

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def semester(self) -> str:
        return self._semester

    @property
    def enrollment_date(self) -> datetime:
        return self._enrollment_date

    @property
    def grade(self) -> Optional[Grade]:
        return self._grade

    @property
    def completed(self) -> bool:
        return self._completed

    def set_grade(self, grade: Optional[Grade]) -> None:
        self._grade = grade
        if grade is not None:
            self._completed = True

    @property
    def is_passing(self) -> bool:
        return self._grade is not None and self._grade.is_passing

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Enrollment):
            return NotImplemented
        return self._enrollment_id == other._enrollment_id

    def __hash__(self) -> int:
        return hash(self._enrollment_id)

    def __repr__(self) -> str:
        return (f"Enrollment(id={self._enrollment_id!r}, student={self._student_id!r}, "
                f"course={self._course_id!r}, semester={self._semester!r}, grade={self._grade}, "
                f"completed={self._completed})")
