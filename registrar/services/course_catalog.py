"""
Course catalog: owns the course and instructor collections.
"""

import threading
from typing import Dict, Iterable, List, Optional

from ..config import RegistrarConfig
from ..core.entities import Course, Instructor
from ..core.exceptions import DuplicateIdError, NotFoundError, ValidationError
from ..core.validation import is_valid_course_code, is_valid_id


class CourseCatalog:
    """Registry of courses and instructors keyed by id."""

    def __init__(self, config: Optional[RegistrarConfig] = None):
        self._config = config or RegistrarConfig()
        self._courses: Dict[str, Course] = {}
        self._instructors: Dict[str, Instructor] = {}
        self._lock = threading.RLock()

    # Courses

    def create_course(self, course_id: str, course_code: str, title: str, description: str,
                      credits: int, department: str, semester: str,
                      instructor_id: Optional[str] = None,
                      max_enrollment: Optional[int] = None) -> Course:
        """Create and register a course."""
        if not is_valid_id(course_id):
            raise ValidationError("Invalid course ID")
        if not is_valid_course_code(course_code):
            raise ValidationError(f"Invalid course code format: {course_code!r}")

        with self._lock:
            if course_id in self._courses:
                raise DuplicateIdError(f"Course with ID {course_id} already exists")
            if instructor_id and instructor_id not in self._instructors:
                raise NotFoundError(f"Instructor not found: {instructor_id}")

            course = Course(
                course_id=course_id,
                course_code=course_code,
                title=title,
                description=description,
                credits=credits,
                department=department,
                semester=semester,
                max_enrollment=(self._config.max_course_enrollment if max_enrollment is None
                                else max_enrollment),
            )
            self._courses[course.course_id] = course
            if instructor_id:
                self.assign_instructor(course.course_id, instructor_id)
            return course

    def add_course(self, course: Course) -> Course:
        """Register an existing course object; re-adding the same object is a no-op."""
        with self._lock:
            existing = self._courses.get(course.course_id)
            if existing is not None and existing is not course:
                raise DuplicateIdError(f"Course with ID {course.course_id} already exists")
            self._courses[course.course_id] = course
            return course

    def get_course(self, course_id: str) -> Optional[Course]:
        return self._courses.get(course_id)

    def require_course(self, course_id: str) -> Course:
        course = self._courses.get(course_id)
        if course is None:
            raise NotFoundError(f"Course not found: {course_id}")
        return course

    def get_all_courses(self) -> List[Course]:
        return list(self._courses.values())

    def get_courses_by_department(self, department: str) -> List[Course]:
        return [c for c in self._courses.values() if c.department.lower() == department.lower()]

    def get_credits(self, course_id: str) -> Optional[int]:
        course = self._courses.get(course_id)
        return course.credits if course else None

    def remove_course(self, course_id: str) -> None:
        with self._lock:
            course = self._courses.pop(course_id, None)
            if course and course.instructor_id in self._instructors:
                self._instructors[course.instructor_id].unassign_course(course_id)

    def load_courses(self, courses: Iterable[Course]) -> None:
        """Replace the course collection, e.g. after a CSV import."""
        with self._lock:
            self._courses = {course.course_id: course for course in courses}

    def get_course_count(self) -> int:
        return len(self._courses)

    # Instructors

    def create_instructor(self, instructor_id: str, name: str, email: str, employee_id: str,
                          department: str, specialization: Optional[str] = None) -> Instructor:
        with self._lock:
            if instructor_id in self._instructors:
                raise DuplicateIdError(f"Instructor with ID {instructor_id} already exists")
            instructor = Instructor(instructor_id, name, email, employee_id, department, specialization)
            self._instructors[instructor.id] = instructor
            return instructor

    def get_instructor(self, instructor_id: str) -> Optional[Instructor]:
        return self._instructors.get(instructor_id)

    def get_all_instructors(self) -> List[Instructor]:
        return list(self._instructors.values())

    def assign_instructor(self, course_id: str, instructor_id: str) -> None:
        """Point a course at an instructor, releasing any previous one."""
        with self._lock:
            course = self.require_course(course_id)
            instructor = self._instructors.get(instructor_id)
            if instructor is None:
                raise NotFoundError(f"Instructor not found: {instructor_id}")

            previous = self._instructors.get(course.instructor_id) if course.instructor_id else None
            if previous is not None and previous is not instructor:
                previous.unassign_course(course_id)

            course.instructor_id = instructor_id
            instructor.assign_course(course_id)
