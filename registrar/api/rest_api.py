"""
REST API implementation for the Registrar records engine using FastAPI.
"""

import os
import threading
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from ..core.entities import Student, Course, Enrollment
from ..core.enums import Grade
from ..core.exceptions import (
    RegistrarException, ValidationError, NotFoundError, DuplicateIdError,
    DuplicateRegistrationError, DuplicateEnrollmentError, NotEnrolledError,
    CreditLimitExceededError, RecordsIOError,
)
from ..services import RecordsService, CourseCatalog
from ..persistence import BackupManager


# Pydantic models for API
class StudentCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=254)
    registration_number: str = Field(..., pattern=r'^\d{4}[A-Z]{3}\d{3}$')
    year: int = Field(..., ge=1, le=4)
    department: str = Field(..., min_length=1, max_length=100)


class StudentUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    year: Optional[int] = None
    department: Optional[str] = None


class StudentResponse(BaseModel):
    id: str
    name: str
    email: str
    registration_number: str
    year: int
    department: str
    active: bool
    enrolled_courses: List[str] = []
    grades: Dict[str, str] = {}
    gpa: float
    created_at: datetime
    updated_at: datetime


class CourseCreate(BaseModel):
    course_id: str = Field(..., min_length=1, max_length=50)
    course_code: str = Field(..., pattern=r'^[A-Z]{2,5}\d{3}$')
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=1000)
    credits: int = Field(..., ge=1, le=6)
    department: str = Field(..., min_length=1, max_length=100)
    semester: str = Field(..., min_length=1, max_length=20)
    max_enrollment: Optional[int] = Field(None, gt=0)


class CourseResponse(BaseModel):
    course_id: str
    course_code: str
    title: str
    description: str
    credits: int
    department: str
    semester: str
    instructor_id: Optional[str] = None
    max_enrollment: int
    current_enrollment: int
    available_seats: int
    enrolled_students: List[str] = []


class EnrollmentRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    course_id: str = Field(..., min_length=1)


class EnrollmentResponse(BaseModel):
    success: bool
    message: str
    status: str


class EnrollmentRecord(BaseModel):
    enrollment_id: str
    student_id: str
    course_id: str
    semester: str
    enrollment_date: datetime
    grade: Optional[str] = None
    completed: bool


class GradeRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    course_id: str = Field(..., min_length=1)
    grade: str = Field(..., pattern=r'^[SABCDFsabcdf]$')


class BackupResponse(BaseModel):
    name: str
    file_count: int
    size_bytes: int


class StatisticsResponse(BaseModel):
    success: bool
    message: str
    statistics: Dict[str, Any]


ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    NotEnrolledError: status.HTTP_400_BAD_REQUEST,
    DuplicateIdError: status.HTTP_409_CONFLICT,
    DuplicateRegistrationError: status.HTTP_409_CONFLICT,
    DuplicateEnrollmentError: status.HTTP_409_CONFLICT,
    CreditLimitExceededError: status.HTTP_409_CONFLICT,
}


class RegistrarRestAPI:
    """REST API over the records service, course catalog and backups."""

    def __init__(self, records_service: RecordsService, backup_manager: BackupManager):
        self._records = records_service
        self._catalog: CourseCatalog = records_service.catalog
        self._backups = backup_manager

        self._lock = threading.RLock()

        # Create FastAPI app
        self.app = FastAPI(
            title="Registrar Academic Records API",
            description="Student, course, enrollment and grade records for a single institution",
            version="1.0.0",
            docs_url="/docs",
            redoc_url="/redoc"
        )

        # Add CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self.app.add_exception_handler(RegistrarException, self._handle_registrar_error)

        # Setup routes
        self._setup_routes()

    @staticmethod
    async def _handle_registrar_error(request, exc: RegistrarException) -> JSONResponse:
        if isinstance(exc, RecordsIOError):
            status_code = 404 if "not found" in exc.message.lower() else 500
        else:
            status_code = next(
                (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
                status.HTTP_400_BAD_REQUEST,
            )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error": type(exc).__name__, **exc.details},
        )

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "Registrar Academic Records API",
                "version": "1.0.0",
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            """Create a new student."""
            with self._lock:
                student = self._records.create_student(
                    student_data.id,
                    student_data.name,
                    student_data.email,
                    student_data.registration_number,
                    student_data.year,
                    student_data.department,
                )
                return self._student_to_response(student)

        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students(active_only: bool = False, department: Optional[str] = None,
                                year: Optional[int] = None, min_gpa: Optional[float] = None,
                                skip: int = 0, limit: int = 100):
            """List students with optional filters."""
            with self._lock:
                students = self._records.get_active_students() if active_only else self._records.get_all_students()
                if department is not None:
                    students = [s for s in students if s.department.lower() == department.lower()]
                if year is not None:
                    students = [s for s in students if s.year == year]
                if min_gpa is not None:
                    students = [s for s in students if s.calculate_gpa() >= min_gpa]

                # Apply pagination
                students = students[skip:skip + limit]

                return [self._student_to_response(student) for student in students]

        @self.app.get("/students/{student_id}", response_model=StudentResponse)
        async def get_student(student_id: str):
            """Get a student by ID."""
            student = self._records.get_student(student_id)
            if not student:
                raise HTTPException(status_code=404, detail="Student not found")
            return self._student_to_response(student)

        @self.app.patch("/students/{student_id}", response_model=StudentResponse)
        async def update_student(student_id: str, update: StudentUpdate):
            """Partially update a student; invalid fields are ignored."""
            with self._lock:
                student = self._records.update_student(
                    student_id, name=update.name, email=update.email,
                    year=update.year, department=update.department,
                )
                return self._student_to_response(student)

        @self.app.post("/students/{student_id}/deactivate", response_model=StudentResponse)
        async def deactivate_student(student_id: str):
            with self._lock:
                self._records.deactivate_student(student_id)
                return self._student_to_response(self._require_student(student_id))

        @self.app.post("/students/{student_id}/activate", response_model=StudentResponse)
        async def activate_student(student_id: str):
            with self._lock:
                self._records.activate_student(student_id)
                return self._student_to_response(self._require_student(student_id))

        @self.app.get("/students/{student_id}/transcript", response_class=PlainTextResponse)
        async def get_transcript(student_id: str):
            """Get a student's transcript as plain text."""
            return self._records.generate_transcript(student_id)

        @self.app.get("/students/{student_id}/enrollments", response_model=List[EnrollmentRecord])
        async def get_student_enrollments(student_id: str):
            """Get student enrollments."""
            self._require_student(student_id)
            return [self._enrollment_to_record(e) for e in self._records.get_enrollments(student_id)]

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Create a new course."""
            with self._lock:
                course = self._catalog.create_course(
                    course_id=course_data.course_id,
                    course_code=course_data.course_code,
                    title=course_data.title,
                    description=course_data.description,
                    credits=course_data.credits,
                    department=course_data.department,
                    semester=course_data.semester,
                    max_enrollment=course_data.max_enrollment,
                )
                return self._course_to_response(course)

        @self.app.get("/courses/{course_id}", response_model=CourseResponse)
        async def get_course(course_id: str):
            """Get a course by ID."""
            course = self._catalog.get_course(course_id)
            if not course:
                raise HTTPException(status_code=404, detail="Course not found")
            return self._course_to_response(course)

        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses(skip: int = 0, limit: int = 100):
            """List all courses."""
            courses = self._catalog.get_all_courses()[skip:skip + limit]
            return [self._course_to_response(course) for course in courses]

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse)
        async def enroll_student(enrollment_data: EnrollmentRequest):
            """Enroll a student in a course."""
            with self._lock:
                course = self._catalog.require_course(enrollment_data.course_id)
                result = self._records.request_enrollment(enrollment_data.student_id, course)
                if result.error is not None:
                    raise result.error

                return EnrollmentResponse(
                    success=result.success,
                    message=result.message,
                    status=result.status.value,
                )

        @self.app.delete("/enrollments/{student_id}/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
        async def unenroll_student(student_id: str, course_id: str):
            """Drop a student from a course."""
            with self._lock:
                course = self._catalog.require_course(course_id)
                self._records.unenroll_student_from_course(student_id, course)

        @self.app.post("/grades", response_model=StudentResponse)
        async def assign_grade(grade_data: GradeRequest):
            """Record a grade for an enrolled course."""
            with self._lock:
                self._records.assign_grade(
                    grade_data.student_id, grade_data.course_id, Grade.from_letter(grade_data.grade)
                )
                return self._student_to_response(self._require_student(grade_data.student_id))

        # Statistics endpoints
        @self.app.get("/statistics", response_model=StatisticsResponse)
        async def get_statistics():
            """Get enrollment statistics."""
            statistics = self._records.get_enrollment_statistics()
            statistics["year_distribution"] = {
                str(year): count for year, count in statistics["year_distribution"].items()
            }
            statistics["total_courses"] = self._catalog.get_course_count()

            return StatisticsResponse(
                success=True,
                message="Statistics retrieved successfully",
                statistics=statistics
            )

        # Backup endpoints
        @self.app.post("/backups", response_model=BackupResponse, status_code=status.HTTP_201_CREATED)
        async def create_backup():
            """Snapshot the data directory."""
            with self._lock:
                name = self._backup_name(self._backups.create_backup())
                return self._backup_to_response(name)

        @self.app.get("/backups", response_model=List[str])
        async def list_backups():
            """List backups, newest first."""
            return self._backups.list_backups()

        @self.app.post("/backups/{backup_name}/restore", response_model=Dict[str, str])
        async def restore_backup(backup_name: str):
            """Restore the data directory from a backup."""
            with self._lock:
                self._backups.restore_from_backup(backup_name)
                return {"status": "restored", "backup": backup_name}

    def _require_student(self, student_id: str) -> Student:
        student = self._records.get_student(student_id)
        if student is None:
            raise NotFoundError(f"Student not found: {student_id}")
        return student

    @staticmethod
    def _backup_name(path: str) -> str:
        return os.path.basename(os.path.normpath(path))

    def _backup_to_response(self, name: str) -> BackupResponse:
        return BackupResponse(
            name=name,
            file_count=self._backups.count_backup_files(name),
            size_bytes=self._backups.get_backup_size(name),
        )

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(
            id=student.id,
            name=student.name,
            email=student.email,
            registration_number=student.registration_number,
            year=student.year,
            department=student.department,
            active=student.active,
            enrolled_courses=sorted(student.enrolled_courses),
            grades={course_id: grade.name for course_id, grade in student.grades.items()},
            gpa=student.calculate_gpa(),
            created_at=student.created_at,
            updated_at=student.updated_at,
        )

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(
            course_id=course.course_id,
            course_code=course.course_code,
            title=course.title,
            description=course.description,
            credits=course.credits,
            department=course.department,
            semester=course.semester,
            instructor_id=course.instructor_id,
            max_enrollment=course.max_enrollment,
            current_enrollment=course.current_enrollment,
            available_seats=course.available_seats,
            enrolled_students=sorted(course.enrolled_students),
        )

    @staticmethod
    def _enrollment_to_record(enrollment: Enrollment) -> EnrollmentRecord:
        return EnrollmentRecord(
            enrollment_id=enrollment.enrollment_id,
            student_id=enrollment.student_id,
            course_id=enrollment.course_id,
            semester=enrollment.semester,
            enrollment_date=enrollment.enrollment_date,
            grade=enrollment.grade.name if enrollment.grade else None,
            completed=enrollment.completed,
        )
