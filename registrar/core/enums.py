"""
Enumerations and constants for the Registrar records engine.
"""

from enum import Enum

from .exceptions import ValidationError


class PersonType(Enum):
    """Roles a person can hold in the system."""
    STUDENT = "Student"
    INSTRUCTOR = "Instructor"


class Grade(Enum):
    """Letter grades with their grade-point value and description."""
    S = (10.0, "Excellent")
    A = (9.0, "Very Good")
    B = (8.0, "Good")
    C = (7.0, "Average")
    D = (6.0, "Below Average")
    F = (0.0, "Fail")

    def __init__(self, grade_points: float, description: str):
        self.grade_points = grade_points
        self.description = description

    @property
    def is_passing(self) -> bool:
        return self is not Grade.F

    @classmethod
    def from_letter(cls, letter: str) -> "Grade":
        """Look up a grade by its letter, ignoring case and surrounding whitespace."""
        try:
            return cls[letter.strip().upper()]
        except KeyError:
            raise ValidationError(f"Unknown grade: {letter!r}") from None

    def __str__(self) -> str:
        return f"{self.name} ({self.grade_points})"


class EnrollmentStatus(Enum):
    """Outcome of an enrollment request."""
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    DROPPED = "dropped"
