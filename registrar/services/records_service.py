"""
Records service: the enrollment and grading rule engine.

The service owns the student collection and the enrollment ledger. Courses are
resolved through a CourseCatalog so the credit-limit check can sum the real
credits of every course a student carries.
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..config import RegistrarConfig
from ..core.entities import Course, Enrollment, Student
from ..core.enums import EnrollmentStatus, Grade
from ..core.exceptions import (
    CreditLimitExceededError,
    DuplicateEnrollmentError,
    DuplicateIdError,
    DuplicateRegistrationError,
    NotEnrolledError,
    NotFoundError,
    RegistrarException,
    ValidationError,
)
from ..core.validation import (
    is_null_or_empty,
    is_valid_email,
    is_valid_id,
    is_valid_registration_number,
    is_valid_year,
)
from .course_catalog import CourseCatalog

logger = logging.getLogger(__name__)


@dataclass
class EnrollmentResult:
    """Result of an enrollment request."""
    success: bool
    status: EnrollmentStatus
    message: str
    error: Optional[RegistrarException] = None


class RecordsService:
    """Service for student records, enrollment rules and reports."""

    def __init__(self, config: Optional[RegistrarConfig] = None,
                 catalog: Optional[CourseCatalog] = None):
        self._config = config or RegistrarConfig()
        self._catalog = catalog if catalog is not None else CourseCatalog(self._config)
        self._students: Dict[str, Student] = {}
        self._enrollments: Dict[Tuple[str, str], Enrollment] = {}  # (student_id, course_id) -> record
        self._lock = threading.RLock()

    @property
    def config(self) -> RegistrarConfig:
        return self._config

    @property
    def catalog(self) -> CourseCatalog:
        return self._catalog

    # Student lifecycle

    def create_student(self, student_id: str, name: str, email: str,
                       registration_number: str, year: int, department: str) -> Student:
        """Create a new student with validation."""
        if not is_valid_id(student_id):
            raise ValidationError("Invalid student ID")
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")
        if not is_valid_registration_number(registration_number):
            raise ValidationError("Invalid registration number format")
        if not is_valid_year(year):
            raise ValidationError("Invalid year (must be 1-4)")

        student_id = student_id.strip()
        with self._lock:
            if student_id in self._students:
                raise DuplicateIdError(f"Student with ID {student_id} already exists")

            if any(s.registration_number == registration_number for s in self._students.values()):
                raise DuplicateRegistrationError(
                    f"Registration number {registration_number} already exists"
                )

            student = Student(student_id, name, email, registration_number, year, department)
            self._students[student.id] = student
            return student

    def update_student(self, student_id: str, name: Optional[str] = None,
                       email: Optional[str] = None, year: Optional[int] = None,
                       department: Optional[str] = None) -> Student:
        """Apply whichever fields are present and valid; the rest are skipped."""
        with self._lock:
            student = self._require_student(student_id)

            if not is_null_or_empty(name):
                student.name = name
            if email is not None and is_valid_email(email):
                student.email = email
            if year is not None and is_valid_year(year):
                student.year = year
            if not is_null_or_empty(department):
                student.department = department

            return student

    def deactivate_student(self, student_id: str) -> None:
        student = self.get_student(student_id)
        if student is not None:
            student.deactivate()

    def activate_student(self, student_id: str) -> None:
        student = self.get_student(student_id)
        if student is not None:
            student.activate()

    def remove_student(self, student_id: str) -> None:
        """Hard-delete a student. Administrative use only."""
        with self._lock:
            student_id = student_id.strip()
            self._students.pop(student_id, None)
            for key in [k for k in self._enrollments if k[0] == student_id]:
                del self._enrollments[key]

    def load_students(self, students: Iterable[Student]) -> None:
        """Replace the student collection, e.g. after a CSV import."""
        with self._lock:
            self._students = {student.id: student for student in students}
            self._enrollments.clear()

    # Queries

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id.strip())

    def get_all_students(self) -> List[Student]:
        return list(self._students.values())

    def get_active_students(self) -> List[Student]:
        return [s for s in self._students.values() if s.active]

    def search_students(self, criteria: Callable[[Student], bool]) -> List[Student]:
        return [s for s in self._students.values() if criteria(s)]

    def get_students_by_department(self, department: str) -> List[Student]:
        return self.search_students(lambda s: s.department.lower() == department.lower())

    def get_students_by_year(self, year: int) -> List[Student]:
        return self.search_students(lambda s: s.year == year)

    def get_students_with_gpa_above(self, threshold: float) -> List[Student]:
        return self.search_students(lambda s: s.calculate_gpa() >= threshold)

    def get_student_count(self) -> int:
        return len(self._students)

    # Enrollment

    def enroll_student_in_course(self, student_id: str, course: Course) -> bool:
        """
        Enroll a student in a course, updating both sides together.

        Returns False, with nothing changed, when the course is full. A course
        that already lists the student only gains the missing student-side link.

        Raises:
            NotFoundError: unknown student.
            DuplicateEnrollmentError: already enrolled in this course.
            CreditLimitExceededError: the course would push the student past
                the configured credits per semester.
        """
        with self._lock:
            student = self._require_student(student_id)
            student_id = student.id
            if self._catalog.get_course(course.course_id) is None:
                self._catalog.add_course(course)

            if student.is_enrolled_in(course.course_id):
                raise DuplicateEnrollmentError(
                    f"Student {student_id} is already enrolled in course {course.course_id}"
                )

            current_credits = self.calculate_current_credits(student)
            max_credits = self._config.max_credits_per_semester
            if current_credits + course.credits > max_credits:
                raise CreditLimitExceededError(current_credits, course.credits, max_credits)

            linked_on_course = course.is_student_enrolled(student_id)
            if not linked_on_course and not course.enroll_student(student_id):
                return False

            try:
                student.enroll_in_course(course.course_id)
            except Exception:
                if not linked_on_course:
                    course.unenroll_student(student_id)
                raise

            self._enrollments[(student_id, course.course_id)] = Enrollment(
                student_id=student_id,
                course_id=course.course_id,
                semester=course.semester,
            )
            return True

    def request_enrollment(self, student_id: str, course: Course) -> EnrollmentResult:
        """Same rules as enroll_student_in_course, reported as a result value."""
        try:
            enrolled = self.enroll_student_in_course(student_id, course)
        except (NotFoundError, DuplicateEnrollmentError, CreditLimitExceededError) as e:
            return EnrollmentResult(
                success=False,
                status=EnrollmentStatus.REJECTED,
                message=str(e),
                error=e,
            )

        if not enrolled:
            return EnrollmentResult(
                success=False,
                status=EnrollmentStatus.REJECTED,
                message=f"Course {course.course_id} is full",
            )
        return EnrollmentResult(
            success=True,
            status=EnrollmentStatus.CONFIRMED,
            message="Student enrolled successfully",
        )

    def unenroll_student_from_course(self, student_id: str, course: Course) -> None:
        """Drop the links on both sides; a no-op if the student is unknown or not enrolled."""
        with self._lock:
            student = self.get_student(student_id)
            if student is None:
                return
            student_id = student.id
            student.unenroll_from_course(course.course_id)
            course.unenroll_student(student_id)
            self._enrollments.pop((student_id, course.course_id), None)

    def calculate_current_credits(self, student: Student) -> int:
        """Sum the credits of every course the student is enrolled in."""
        total = 0
        for course_id in student.enrolled_courses:
            credits = self._catalog.get_credits(course_id)
            if credits is None:
                logger.warning("Course %s for student %s is not in the catalog; counting 0 credits",
                               course_id, student.id)
                continue
            total += credits
        return total

    def get_enrollments(self, student_id: str) -> List[Enrollment]:
        student_id = student_id.strip()
        return [e for (sid, _), e in self._enrollments.items() if sid == student_id]

    # Grading

    def assign_grade(self, student_id: str, course_id: str, grade: Grade) -> None:
        with self._lock:
            student = self._require_student(student_id)
            if not student.is_enrolled_in(course_id):
                raise NotEnrolledError(f"Student is not enrolled in course: {course_id}")

            student.set_grade(course_id, grade)
            enrollment = self._enrollments.get((student.id, course_id))
            if enrollment is not None:
                enrollment.set_grade(grade)

    # Reports

    def generate_transcript(self, student_id: str) -> str:
        student = self._require_student(student_id)

        lines = [
            "TRANSCRIPT",
            "=========",
            f"Student: {student.name} ({student.registration_number})",
            f"Department: {student.department}, Year: {student.year}",
            f"Email: {student.email}",
            "",
            "Courses and Grades:",
            "-----------------",
        ]

        grades = student.grades
        if not grades:
            lines.append("No grades recorded.")
        else:
            for course_id, grade in grades.items():
                lines.append(f"Course: {course_id} - Grade: {grade}")

        lines.append("")
        lines.append(f"Overall GPA: {student.calculate_gpa():.2f}")
        lines.append(f"Passed Courses: {len(student.get_passed_courses())}")
        return "\n".join(lines) + "\n"

    def get_enrollment_statistics(self) -> Dict[str, Any]:
        active_students = self.get_active_students()
        total = len(self._students)

        if active_students:
            average_gpa = sum(s.calculate_gpa() for s in active_students) / len(active_students)
        else:
            average_gpa = 0.0

        return {
            "total_students": total,
            "active_students": len(active_students),
            "inactive_students": total - len(active_students),
            "department_distribution": dict(Counter(s.department for s in active_students)),
            "year_distribution": dict(Counter(s.year for s in active_students)),
            "average_gpa": average_gpa,
        }

    def _require_student(self, student_id: str) -> Student:
        student = self.get_student(student_id)
        if student is None:
            raise NotFoundError(f"Student not found: {student_id}")
        return student
